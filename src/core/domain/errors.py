"""Error taxonomy.

- Startup errors (`ResolverFileError`, `NoWorkingResolversError`) abort the run.
- `LookupFailedError` is per-target and is contained by the worker that saw it.
- `ChannelClosedError` signals the end of a `WorkChannel`, not a failure.
"""

from __future__ import annotations

from pathlib import Path


class PtrSweepError(Exception):
    """Base class for every error raised by ptrsweep."""


class ResolverFileError(PtrSweepError):
    """The resolver candidate file could not be read."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot read resolver file {path}: {reason}")


class NoWorkingResolversError(PtrSweepError):
    """No candidate passed its health check."""

    def __init__(self, checked: int) -> None:
        self.checked = checked
        super().__init__(f"No working resolvers found ({checked} candidates checked).")


class LookupFailedError(PtrSweepError):
    """A single reverse lookup did not produce any name."""

    def __init__(self, target: str, reason: str) -> None:
        self.target = target
        self.reason = reason
        super().__init__(f"Lookup failed for {target!r}: {reason}")


class ChannelClosedError(PtrSweepError):
    """Raised by `WorkChannel` once it is closed (and drained, for receivers)."""
