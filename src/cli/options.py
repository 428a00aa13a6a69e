"""Helpers shared by the CLI commands: settings overlay and input stream."""

from __future__ import annotations

import io
import sys
from typing import TextIO

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from core.config import AppSettings


def load_settings(console: Console, **overrides: object) -> AppSettings:
    """Settings from env/.env with explicitly given CLI flags on top.

    Invalid values end the command with exit code 2.
    """

    try:
        return AppSettings(**{k: v for k, v in overrides.items() if v is not None})
    except ValidationError as exc:
        console.print(f"[red]Invalid configuration:[/red]\n{escape(str(exc))}")
        raise typer.Exit(code=2) from exc


def open_input(stream: TextIO | None = None) -> TextIO:
    """Text view of stdin that never fails on undecodable bytes.

    Bad bytes become U+FFFD, so such a line simply fails its lookup.
    """

    stream = stream or sys.stdin
    buffer = getattr(stream, "buffer", None)
    if buffer is None:
        return stream
    return io.TextIOWrapper(buffer, encoding="utf-8", errors="replace", newline=None)


def release_input(source: TextIO, stream: TextIO | None = None) -> None:
    """Detach a wrapper from `open_input` so the real stdin stays open."""

    if source is not (stream or sys.stdin) and isinstance(source, io.TextIOWrapper):
        source.detach()
