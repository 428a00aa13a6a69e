"""Doctor commands for resolver and configuration diagnostics."""

from __future__ import annotations

import asyncio
import time
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape

from adapters.resolver_list import load_resolver_candidates
from adapters.resolver_probe import DnsProbe
from cli.options import load_settings
from cli.ui_components import build_probe_table, build_settings_table, build_stderr_console, print_banner
from core.domain.errors import ResolverFileError
from core.domain.transport import Transport
from core.interfaces.resolver import ResolverProbe

app = typer.Typer(no_args_is_help=True, help="Resolver health and configuration checks.")

_console = build_stderr_console()


async def _probe_all(probe: ResolverProbe, candidates: list[str]) -> list[tuple[str, bool, float]]:
    results: list[tuple[str, bool, float]] = []
    for address in candidates:
        started = time.perf_counter()
        ok = await probe.check(address)
        results.append((address, ok, time.perf_counter() - started))
    return results


def _print_probe_results(console: Console, results: list[tuple[str, bool, float]]) -> int:
    table = build_probe_table()
    usable = 0
    for address, ok, elapsed in results:
        if ok:
            usable += 1
        table.add_row(
            address,
            "[green]OK[/green]" if ok else "[red]FAIL[/red]",
            f"{elapsed * 1000:.0f} ms",
        )
    console.print(table)
    return usable


@app.command()
def resolvers(
    resolver_file: Path | None = typer.Option(None, "--resolver-file", "-f", help="File with resolver IPs."),
    resolver: list[str] | None = typer.Option(None, "--resolver", "-r", help="Resolver IP (repeatable)."),
    protocol: Transport | None = typer.Option(None, "--protocol", "-P", case_sensitive=False),
    port: int | None = typer.Option(None, "--port", "-p", min=1, max=65535),
) -> None:
    """Run the health check against each candidate and show the results."""

    settings = load_settings(_console, protocol=protocol, port=port)

    candidates: list[str] = list(resolver or [])
    path = resolver_file or settings.resolver_file
    if path is not None:
        try:
            candidates.extend(load_resolver_candidates(path))
        except ResolverFileError as exc:
            _console.print(f"[red]Error:[/red] {escape(str(exc))}")
            raise typer.Exit(code=1) from exc
    if not candidates and settings.resolver:
        candidates.append(settings.resolver)

    if not candidates:
        raise typer.BadParameter("no resolver given (use --resolver or --resolver-file)")

    print_banner(_console)
    results = asyncio.run(_probe_all(DnsProbe(settings), candidates))
    usable = _print_probe_results(_console, results)
    _console.print(f"{usable} of {len(results)} resolvers usable ({settings.protocol.label()}/{settings.port}).")
    if not usable:
        raise typer.Exit(code=1)


@app.command()
def config() -> None:
    """Show the effective settings (env vars and .env files applied)."""

    _console.print(build_settings_table(load_settings(_console)))
