"""Pool of validated resolvers.

The pool is built once, before any lookup starts, and never mutated. It is
passed explicitly to the lookup adapter; there is no module-level state.

Selection is uniformly random (not round-robin): the goal is spreading load,
not strict fairness.
"""

from __future__ import annotations

import logging
import random
import threading
import time
from typing import Callable, Iterable, Sequence

from core.domain.errors import NoWorkingResolversError
from core.interfaces.resolver import ResolverProbe

logger = logging.getLogger(__name__)


class ResolverPool:
    """Validated resolver addresses plus a single fallback.

    - `resolvers` empty and `fallback` set: every draw returns `fallback`.
    - `resolvers` empty and no `fallback`: lookups use the system resolver.
    """

    def __init__(
        self,
        resolvers: Sequence[str] = (),
        *,
        fallback: str | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._resolvers: tuple[str, ...] = tuple(resolvers)
        self._fallback = fallback
        self._rng = rng or random.Random(time.time_ns())
        # Draws are serialized across threads.
        self._lock = threading.Lock()

    @classmethod
    async def build(
        cls,
        candidates: Iterable[str],
        *,
        probe: ResolverProbe,
        fallback: str | None = None,
        rng: random.Random | None = None,
        on_checked: Callable[[str, bool], None] | None = None,
    ) -> "ResolverPool":
        """Health-check `candidates` in order and keep the ones that answer.

        Raises `NoWorkingResolversError` when none does.
        """

        live: list[str] = []
        checked = 0
        for address in candidates:
            checked += 1
            ok = await probe.check(address)
            logger.debug("Resolver %s %s health check", address, "passed" if ok else "failed")
            if on_checked:
                on_checked(address, ok)
            if ok:
                live.append(address)

        if not live:
            raise NoWorkingResolversError(checked)

        logger.info("%d of %d resolvers passed the health check", len(live), checked)
        return cls(live, fallback=fallback, rng=rng)

    @property
    def resolvers(self) -> tuple[str, ...]:
        return self._resolvers

    @property
    def fallback(self) -> str | None:
        return self._fallback

    @property
    def uses_system_resolver(self) -> bool:
        return not self._resolvers and self._fallback is None

    def __len__(self) -> int:
        return len(self._resolvers)

    def select(self) -> str | None:
        """Draw a resolver for one dial attempt."""

        if not self._resolvers:
            return self._fallback
        with self._lock:
            return self._rng.choice(self._resolvers)
