"""ollama-refresh command-line interface."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import TYPE_CHECKING

from rich.console import Console

from ollama_refresh import __version__
from ollama_refresh.types import DEFAULT_REGISTRY, DEFAULT_TIMEOUT, default_host

if TYPE_CHECKING:
    from ollama_refresh.reconcile import StalenessReport


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ollama-refresh",
        description="Check local Ollama models against the registry and update stale ones.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"ollama-refresh {__version__}",
    )

    # -- modes --------------------------------------------------------------
    parser.add_argument(
        "-check",
        "--check",
        action="store_true",
        help="Check for outdated models.",
    )
    parser.add_argument(
        "-update",
        "--update",
        action="store_true",
        help="Update outdated models.",
    )
    parser.add_argument(
        "-i",
        "--interactive",
        action="store_true",
        help="Pick which outdated models to update from a checklist.",
    )

    # -- endpoints ----------------------------------------------------------
    host = default_host()
    parser.add_argument(
        "--host",
        default=host,
        help=f"Local Ollama service URL ($OLLAMA_HOST)  [default: {host}]",
    )
    parser.add_argument(
        "--registry",
        default=DEFAULT_REGISTRY,
        help=f"Remote registry base URL  [default: {DEFAULT_REGISTRY}]",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=DEFAULT_TIMEOUT,
        help=f"Per-request timeout in seconds  [default: {DEFAULT_TIMEOUT:g}]",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Log each model checked (-vv for HTTP details).",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not (args.check or args.update or args.interactive):
        parser.error("Please specify either -check or -update flag.")

    _configure_logging(args.verbose)
    sys.exit(_run(args))


# ---------------------------------------------------------------------------
# Implementation
# ---------------------------------------------------------------------------


def _configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity > 1:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(message)s",
        stream=sys.stderr,
    )
    if verbosity < 2:
        # httpx logs every request at INFO.
        logging.getLogger("httpx").setLevel(logging.WARNING)


def _run(args: argparse.Namespace) -> int:
    """Check, then update as requested.  Returns the process exit status."""
    from ollama_refresh.client import build_client
    from ollama_refresh.errors import LocalFetchError
    from ollama_refresh.reconcile import check_local_models
    from ollama_refresh.update import update_models

    console = Console()

    with build_client(timeout=args.timeout) as client:
        try:
            report = check_local_models(
                client=client, host=args.host, registry=args.registry
            )
        except LocalFetchError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            return 1

        if args.check or not args.interactive:
            _print_report(console, report)

        if args.interactive:
            from ollama_refresh.interactive import run_interactive

            names = run_interactive(report.stale, console=console)
        elif args.update:
            names = report.stale
        else:
            names = []

        failures = update_models(names, client=client, host=args.host)

    if failures:
        console.print(f"[red]{len(failures)} update(s) failed.[/red]")
        return 1
    return 0


def _print_report(console: Console, report: StalenessReport) -> None:
    """Print the stale models, or a note that everything is current."""
    if report.stale:
        console.print("Non-up-to-date models:")
        for name in report.stale:
            console.print(f"  - {name}", markup=False)
    else:
        console.print("[green]All models are up to date.[/green]")

    if report.skipped:
        console.print(f"[yellow]Skipped {len(report.skipped)} model(s):[/yellow]")
        for skipped in report.skipped:
            console.print(f"  - {skipped.name}: {skipped.reason}", markup=False)


if __name__ == "__main__":
    main()
