"""Transport protocols supported when dialing a resolver.

Kept in the domain layer so that configuration, adapters and the CLI share a
single source of truth without importing each other.
"""

from __future__ import annotations

from enum import Enum


class Transport(str, Enum):
    """Protocol used to reach an explicit resolver."""

    UDP = "udp"
    TCP = "tcp"

    @property
    def is_tcp(self) -> bool:
        return self is Transport.TCP

    def label(self) -> str:
        """Human readable label for tables and logging."""

        return self.value.upper()
