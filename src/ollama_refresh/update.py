"""Run pulls for a batch of models and render their progress."""

from __future__ import annotations

import sys
from collections.abc import Iterable
from contextlib import closing

import httpx

from ollama_refresh.errors import UpdateError
from ollama_refresh.local import iter_pull_progress, pull_model
from ollama_refresh.types import DEFAULT_HOST


def update_models(
    names: Iterable[str],
    *,
    client: httpx.Client,
    host: str = DEFAULT_HOST,
) -> list[UpdateError]:
    """Pull each model in turn and return the failures.

    A failed pull is reported and does not stop the remaining ones.
    """
    failures: list[UpdateError] = []
    for name in names:
        _log(f"Updating {name} ...")
        try:
            with closing(pull_model(client, name, host=host)) as chunks:
                _render_progress(name, chunks)
        except UpdateError as exc:
            _log(f"  {exc}")
            failures.append(exc)
        else:
            _log(f"  {name} is up to date")
    return failures


def _render_progress(name: str, chunks: Iterable[bytes]) -> None:
    """Write one status line per pull phase, with a percentage for layers."""
    last_status = ""
    last_pct = -1
    for progress in iter_pull_progress(chunks, name=name):
        pct = progress.percent
        if progress.status != last_status:
            if last_pct >= 0:
                _progress("\n")
            last_status = progress.status
            last_pct = -1
            if pct is None:
                _log(f"  {progress.status}")
                continue
        if pct is not None and pct != last_pct:
            last_pct = pct
            _progress(f"\r  {progress.status} ({pct}%)")
    if last_pct >= 0:
        _progress("\n")


def _log(msg: str) -> None:
    print(msg, file=sys.stderr)


def _progress(msg: str) -> None:
    print(msg, end="", file=sys.stderr, flush=True)
