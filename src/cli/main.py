"""ptrsweep command line.

`sweep` reads IP addresses from stdin and prints their PTR names on stdout;
`doctor` groups the diagnostics commands.
"""

from __future__ import annotations

import asyncio
import logging
import os
import sys
import time
from pathlib import Path

import dns.exception
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from adapters.ptr_lookup import PtrLookup
from adapters.resolver_probe import DnsProbe
from cli import doctor
from cli.options import load_settings, open_input, release_input
from cli.ui_components import build_stats_table, build_stderr_console, print_banner
from core.domain.errors import NoWorkingResolversError, ResolverFileError
from core.domain.models import PtrRecord
from core.domain.transport import Transport
from core.services.lookup_pipeline import SweepHooks, run_pipeline

app = typer.Typer(no_args_is_help=True, help="Concurrent reverse DNS lookups over a resolver pool.")
app.add_typer(doctor.app, name="doctor")

_console = build_stderr_console()


def configure_logging(console: Console, *, verbose: bool) -> None:
    handler = RichHandler(console=console, show_path=False, rich_tracebacks=True)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[handler],
        force=True,
    )


@app.command()
def sweep(
    threads: int | None = typer.Option(None, "--threads", "-t", min=1, help="How many workers to run."),
    resolver: str | None = typer.Option(None, "--resolver", "-r", help="IP of the DNS resolver to use."),
    resolver_file: Path | None = typer.Option(
        None, "--resolver-file", "-f", help="File with DNS resolver IPs, validated before use."
    ),
    protocol: Transport | None = typer.Option(
        None, "--protocol", "-P", case_sensitive=False, help="Protocol to reach explicit resolvers."
    ),
    port: int | None = typer.Option(None, "--port", "-p", min=1, max=65535, help="Resolver port."),
    domain: bool = typer.Option(False, "--domain", "-d", help="Output only domains."),
    timeout: float | None = typer.Option(None, "--timeout", min=0.001, help="Per-lookup timeout (seconds)."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log skipped targets and print a summary."),
) -> None:
    """Resolve every IP read from stdin."""

    configure_logging(_console, verbose=verbose)
    settings = load_settings(
        _console,
        workers=threads,
        resolver=resolver,
        resolver_file=resolver_file,
        protocol=protocol,
        port=port,
        domain_only=True if domain else None,
        lookup_timeout=timeout,
    )
    if verbose:
        print_banner(_console)

    def emit(record: PtrRecord) -> None:
        typer.echo(record.render(domain_only=settings.domain_only))

    def report_resolver(address: str, ok: bool) -> None:
        status = "[green]OK[/green]" if ok else "[red]FAIL[/red]"
        _console.print(f"resolver {escape(address)} {status}")

    hooks = SweepHooks(record=emit, resolver_checked=report_resolver if verbose else None)
    source = open_input()
    started = time.perf_counter()
    try:
        stats = asyncio.run(
            run_pipeline(
                settings=settings,
                source=source,
                probe=DnsProbe(settings),
                lookup_factory=lambda pool: PtrLookup(pool=pool, settings=settings),
                hooks=hooks,
            )
        )
    except (ResolverFileError, NoWorkingResolversError) as exc:
        _console.print(f"[red]Error:[/red] {escape(str(exc))}")
        raise typer.Exit(code=1) from exc
    except dns.exception.DNSException as exc:
        _console.print(f"[red]Resolver configuration error:[/red] {escape(str(exc))}")
        raise typer.Exit(code=1) from exc
    except BrokenPipeError as exc:
        _silence_stdout()
        raise typer.Exit(code=1) from exc
    finally:
        release_input(source)

    if verbose:
        _console.print(build_stats_table(stats, elapsed=time.perf_counter() - started))


def _silence_stdout() -> None:
    """Point stdout at /dev/null so the interpreter's final flush stays quiet."""

    try:
        devnull = os.open(os.devnull, os.O_WRONLY)
        os.dup2(devnull, sys.stdout.fileno())
    except (OSError, ValueError):
        pass


def run() -> None:
    app()
