from __future__ import annotations

import os

import pytest

from core.domain.errors import LookupFailedError
from core.services.resolver_pool import ResolverPool


class FakeProbe:
    """Probe answering from a fixed set of live addresses."""

    def __init__(self, live: set[str]) -> None:
        self.live = live
        self.checked: list[str] = []

    async def check(self, address: str) -> bool:
        self.checked.append(address)
        return address in self.live


class FakeLookup:
    """Reverse lookup backed by a dict; records every call and resolver draw."""

    def __init__(self, answers: dict[str, list[str]], pool: ResolverPool | None = None) -> None:
        self.answers = answers
        self.pool = pool
        self.calls: list[str] = []
        self.used_resolvers: list[str | None] = []

    async def lookup(self, ip: str) -> list[str]:
        self.calls.append(ip)
        if self.pool is not None:
            self.used_resolvers.append(self.pool.select())
        names = self.answers.get(ip.strip())
        if not names:
            raise LookupFailedError(ip, "NXDOMAIN")
        return list(names)


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path):
    """Keep real env vars and .env files out of AppSettings."""

    for key in list(os.environ):
        if key.upper().startswith("PTRSWEEP_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.chdir(tmp_path)
