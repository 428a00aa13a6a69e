"""Core configuration.

Why here:
- Centralizes environment variables (pydantic-settings) without polluting the CLI.
- CLI flags, env vars and `.env` files all end up in one immutable object
  that is handed to every worker.
"""

from __future__ import annotations

import ipaddress
import os
import sys
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.domain.transport import Transport


def get_user_config_dir() -> Path:
    """Per-user configuration directory (cross-platform, no dependencies)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "ptrsweep"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "ptrsweep"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "ptrsweep"
    return Path.home() / ".config" / "ptrsweep"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


class AppSettings(BaseSettings):
    """Run configuration.

    Built once before any work starts and frozen afterwards, so the reader
    and every worker can share it without locking.
    """

    model_config = SettingsConfigDict(
        env_prefix="PTRSWEEP_",
        extra="ignore",
        case_sensitive=False,
        frozen=True,
        # Order: project first (dev), then the per-user global config.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    workers: int = Field(
        default=8,
        ge=1,
        description="Number of concurrent lookup workers.",
    )
    protocol: Transport = Field(
        default=Transport.UDP,
        description="Transport used to reach explicit resolvers (tcp/udp).",
    )
    port: int = Field(
        default=53,
        ge=1,
        le=65535,
        description="Port explicit resolvers listen on.",
    )
    resolver: str | None = Field(
        default=None,
        description="Single resolver IP used when no validated pool is available.",
    )
    resolver_file: Path | None = Field(
        default=None,
        description="File with resolver candidates, one IP per line.",
    )
    domain_only: bool = Field(
        default=False,
        description="Print only the resolved names, without the trailing dot.",
    )
    lookup_timeout: float = Field(
        default=5.0,
        gt=0,
        description="Upper bound (seconds) for a single reverse lookup.",
    )

    @field_validator("resolver")
    @classmethod
    def _resolver_must_be_ip(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = value.strip()
        if not value:
            return None
        try:
            ipaddress.ip_address(value)
        except ValueError as exc:
            raise ValueError(f"resolver must be an IP address, got {value!r}") from exc
        return value
