"""Shared ``httpx.Client`` construction."""

from __future__ import annotations

import httpx

from ollama_refresh import __version__
from ollama_refresh.types import DEFAULT_TIMEOUT


def build_client(
    *,
    timeout: float = DEFAULT_TIMEOUT,
    transport: httpx.BaseTransport | None = None,
) -> httpx.Client:
    """Return a client with the timeouts and headers every request uses.

    *transport* lets tests swap in an ``httpx.MockTransport``.
    """
    return httpx.Client(
        timeout=httpx.Timeout(timeout),
        follow_redirects=True,
        headers={"User-Agent": f"ollama-refresh/{__version__}"},
        transport=transport,
    )
