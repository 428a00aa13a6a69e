"""Reverse-lookup sweep orchestration.

One reader task feeds a bounded `WorkChannel`; `settings.workers` worker
tasks drain it, each resolving its item through the shared `ReverseLookup`
and handing every name to the caller's hooks as soon as it is known. The
CLI owns formatting and printing; this module owns the flow.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, TextIO

from adapters.resolver_list import load_resolver_candidates
from core.config import AppSettings
from core.domain.errors import LookupFailedError
from core.domain.models import PtrRecord
from core.interfaces.resolver import ResolverProbe, ReverseLookup
from core.services.channel import WorkChannel
from core.services.resolver_pool import ResolverPool

logger = logging.getLogger(__name__)


@dataclass
class SweepHooks:
    """Optional callbacks for UI layers (output, progress)."""

    record: Callable[[PtrRecord], None] | None = None
    resolver_checked: Callable[[str, bool], None] | None = None


@dataclass
class SweepStats:
    """Counters for one run.

    Only touched from tasks of a single event loop, so plain ints suffice.
    """

    received: int = 0
    resolved: int = 0
    failed: int = 0
    records: int = 0

    @property
    def processed(self) -> int:
        return self.resolved + self.failed


async def build_resolver_pool(
    *,
    settings: AppSettings,
    probe: ResolverProbe,
    hooks: SweepHooks | None = None,
) -> ResolverPool:
    """Validated pool from `settings.resolver_file`, or an empty pool.

    Raises `ResolverFileError` / `NoWorkingResolversError`; both are fatal.
    """

    hooks = hooks or SweepHooks()
    if settings.resolver_file is None:
        return ResolverPool(fallback=settings.resolver)

    candidates = load_resolver_candidates(settings.resolver_file)
    logger.info("Checking %d resolver candidates from %s", len(candidates), settings.resolver_file)
    return await ResolverPool.build(
        candidates,
        probe=probe,
        fallback=settings.resolver,
        on_checked=hooks.resolver_checked,
    )


async def read_input(
    source: TextIO,
    channel: WorkChannel[str],
    stats: SweepStats,
) -> None:
    """Push every line of `source` into `channel`, then close it."""

    try:
        while True:
            line = await asyncio.to_thread(source.readline)
            if not line:
                break
            stats.received += 1
            await channel.send(line.rstrip("\r\n"))
    finally:
        await channel.close()


async def run_worker(
    channel: WorkChannel[str],
    *,
    lookup: ReverseLookup,
    stats: SweepStats,
    hooks: SweepHooks,
) -> None:
    """Resolve items until the channel is closed and drained."""

    async for item in channel:
        try:
            names = await lookup.lookup(item)
        except LookupFailedError as exc:
            stats.failed += 1
            logger.debug("Skipping %r: %s", item, exc.reason)
            continue
        except Exception:  # a single target must not take the batch down
            stats.failed += 1
            logger.warning("Unexpected error resolving %r", item, exc_info=True)
            continue

        stats.resolved += 1
        for name in names:
            stats.records += 1
            if hooks.record:
                hooks.record(PtrRecord(ip=item, name=name))


async def sweep(
    *,
    settings: AppSettings,
    source: TextIO,
    lookup: ReverseLookup,
    hooks: SweepHooks | None = None,
    channel_capacity: int = 1,
) -> SweepStats:
    hooks = hooks or SweepHooks()
    stats = SweepStats()
    channel: WorkChannel[str] = WorkChannel(capacity=channel_capacity)

    reader = asyncio.create_task(read_input(source, channel, stats))
    workers = [
        asyncio.create_task(run_worker(channel, lookup=lookup, stats=stats, hooks=hooks))
        for _ in range(settings.workers)
    ]
    await asyncio.gather(reader, *workers)

    logger.info(
        "Sweep finished: %d received, %d resolved, %d failed, %d records",
        stats.received,
        stats.resolved,
        stats.failed,
        stats.records,
    )
    return stats


async def run_pipeline(
    *,
    settings: AppSettings,
    source: TextIO,
    probe: ResolverProbe,
    lookup_factory: Callable[[ResolverPool], ReverseLookup],
    hooks: SweepHooks | None = None,
) -> SweepStats:
    """Build the pool, then sweep `source` with a lookup bound to it."""

    pool = await build_resolver_pool(settings=settings, probe=probe, hooks=hooks)
    lookup = lookup_factory(pool)
    return await sweep(settings=settings, source=source, lookup=lookup, hooks=hooks)
