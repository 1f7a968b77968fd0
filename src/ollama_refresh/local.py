"""Local model service: inventory listing and pull (update) requests."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

import httpx
from pydantic import ValidationError

from ollama_refresh.errors import LocalFetchError, UpdateError
from ollama_refresh.types import (
    DEFAULT_HOST,
    DEFAULT_TIMEOUT,
    PULL_READ_TIMEOUT,
    InventoryResponse,
    LocalModel,
    PullProgress,
    PullRequest,
)

logger = logging.getLogger(__name__)


def _endpoint(host: str, path: str) -> str:
    return f"{host.rstrip('/')}{path}"


# ---------------------------------------------------------------------------
# Inventory
# ---------------------------------------------------------------------------


def list_local_models(
    client: httpx.Client, *, host: str = DEFAULT_HOST
) -> list[LocalModel]:
    """Return the models cached by the local service, in listing order.

    Raises ``LocalFetchError`` if the service is unreachable, answers with
    an error status, or returns a body that is not a model listing.
    """
    url = _endpoint(host, "/api/tags")
    try:
        response = client.get(url)
        response.raise_for_status()
    except httpx.HTTPError as exc:
        msg = f"Failed to fetch local models from {url}: {exc}"
        raise LocalFetchError(msg) from exc

    try:
        inventory = InventoryResponse.model_validate_json(response.content)
    except ValidationError as exc:
        msg = f"Failed to parse local models from {url}: {exc}"
        raise LocalFetchError(msg) from exc

    logger.debug("Local service lists %d model(s)", len(inventory.models))
    return inventory.models


# ---------------------------------------------------------------------------
# Pull
# ---------------------------------------------------------------------------


def pull_model(
    client: httpx.Client,
    name: str,
    *,
    host: str = DEFAULT_HOST,
    read_timeout: float = PULL_READ_TIMEOUT,
) -> Iterator[bytes]:
    """Ask the local service to pull *name*, yielding the response as it streams.

    The request is sent on first iteration and the body is forwarded chunk
    by chunk; nothing is buffered beyond one chunk.  The iterator is single
    pass.  Transport failures and error statuses raise ``UpdateError`` for
    this model only.
    """
    url = _endpoint(host, "/api/pull")
    payload = PullRequest(name=name).model_dump_json().encode("utf-8")
    logger.debug("POST %s for %s", url, name)

    try:
        with client.stream(
            "POST",
            url,
            content=payload,
            headers={"Content-Type": "application/json"},
            timeout=httpx.Timeout(DEFAULT_TIMEOUT, read=read_timeout),
        ) as response:
            if response.is_error:
                detail = response.read().decode("utf-8", errors="replace").strip()
                msg = f"local service returned HTTP {response.status_code}"
                if detail:
                    msg = f"{msg}: {detail}"
                raise UpdateError(name, msg)
            yield from response.iter_bytes()
    except httpx.HTTPError as exc:
        raise UpdateError(name, f"request failed: {exc}") from exc


def iter_pull_progress(
    chunks: Iterable[bytes], *, name: str = ""
) -> Iterator[PullProgress]:
    """Decode a pull stream into progress records.

    The service writes one JSON object per line; lines may be split across
    chunks.  A record carrying ``error`` raises ``UpdateError``.
    """
    buffer = b""
    for chunk in chunks:
        buffer += chunk
        *lines, buffer = buffer.split(b"\n")
        for line in lines:
            progress = _parse_progress_line(line, name)
            if progress is not None:
                yield progress

    progress = _parse_progress_line(buffer, name)
    if progress is not None:
        yield progress


def _parse_progress_line(line: bytes, name: str) -> PullProgress | None:
    line = line.strip()
    if not line:
        return None
    try:
        progress = PullProgress.model_validate_json(line)
    except ValidationError as exc:
        raise UpdateError(name, f"unreadable progress line {line!r}") from exc
    if progress.error:
        raise UpdateError(name, progress.error)
    return progress
