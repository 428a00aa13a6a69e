"""Resolver contracts.

Why Protocol:
- Structural contract (duck typing) without rigid inheritance.
- The pool and the pipeline depend on these shapes, never on dnspython.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class ResolverProbe(Protocol):
    """Liveness check for a candidate resolver."""

    async def check(self, address: str) -> bool:
        """Return True iff `address` answered a bounded forward lookup."""

        ...


@runtime_checkable
class ReverseLookup(Protocol):
    """Reverse (PTR) lookup of one target.

    Design rules:
    - Returns every name found, in absolute form.
    - Raises `LookupFailedError` for any failure; never returns an empty list.
    """

    async def lookup(self, ip: str) -> list[str]:
        ...
