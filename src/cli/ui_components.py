"""UI components for the CLI (Rich).

Everything here is written to stderr: stdout carries only lookup records so
the tool stays usable in pipelines.
"""

from __future__ import annotations

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.config import AppSettings
from core.services.lookup_pipeline import SweepStats


def build_stderr_console() -> Console:
    return Console(stderr=True)


def print_banner(console: Console) -> None:
    """Prints the welcome banner (verbose runs and doctor only)."""

    title = Text("ptrsweep", style="bold cyan")
    subtitle = Text("Reverse DNS • Resolver pools • Fan-out workers", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def build_probe_table() -> Table:
    table = Table(title="Resolver Health")
    table.add_column("Resolver", style="cyan", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Latency", style="magenta", justify="right")
    return table


def build_settings_table(settings: AppSettings) -> Table:
    """Effective configuration, one row per field."""

    table = Table(title="Effective Settings")
    table.add_column("Setting", style="bright_green", no_wrap=True)
    table.add_column("Value", style="white")
    table.add_column("Env var", style="dim")
    for name, value in settings.model_dump().items():
        shown = getattr(value, "value", value)
        table.add_row(name, "-" if shown is None else str(shown), f"PTRSWEEP_{name.upper()}")
    return table


def build_stats_table(stats: SweepStats, *, elapsed: float) -> Table:
    table = Table(title="Sweep Summary")
    table.add_column("Metric", style="cyan", no_wrap=True)
    table.add_column("Value", style="white", justify="right")
    table.add_row("Lines received", str(stats.received))
    table.add_row("Resolved", str(stats.resolved))
    table.add_row("Failed / skipped", str(stats.failed))
    table.add_row("Records emitted", str(stats.records))
    table.add_row("Elapsed", f"{elapsed:.2f}s")
    return table
