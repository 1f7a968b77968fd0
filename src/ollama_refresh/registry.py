"""Remote registry: name resolution and manifest fetching."""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass
from typing import Any

import httpx

from ollama_refresh.errors import MalformedName, RemoteFetchError
from ollama_refresh.types import DEFAULT_NAMESPACE, DEFAULT_REGISTRY

logger = logging.getLogger(__name__)

RemoteDescriptor = dict[str, Any]


# ---------------------------------------------------------------------------
# Identity
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RemoteIdentity:
    """Where a local model lives in the registry."""

    repository: str  # Always namespaced, e.g. "library/llama2"
    tag: str


def resolve_identity(name: str) -> RemoteIdentity:
    """Map a local model name such as ``llama2:7b`` to its registry identity.

    Repositories without a namespace are qualified under ``library/``.
    Raises ``MalformedName`` when *name* is not exactly ``<repo>:<tag>``.
    """
    repo, sep, tag = name.partition(":")
    if not sep:
        raise MalformedName(name, "missing ':<tag>'")
    if ":" in tag:
        raise MalformedName(name, "more than one ':' separator")
    if not repo or not tag:
        raise MalformedName(name, "empty repository or tag")

    if "/" not in repo:
        repo = f"{DEFAULT_NAMESPACE}/{repo}"
    return RemoteIdentity(repository=repo, tag=tag)


def manifest_url(identity: RemoteIdentity, registry: str = DEFAULT_REGISTRY) -> str:
    """Return the manifest endpoint for *identity* on *registry*."""
    base = registry.rstrip("/")
    return f"{base}/v2/{identity.repository}/manifests/{identity.tag}"


# ---------------------------------------------------------------------------
# Descriptor fetch
# ---------------------------------------------------------------------------


def fetch_manifest(
    client: httpx.Client,
    identity: RemoteIdentity,
    *,
    registry: str = DEFAULT_REGISTRY,
) -> RemoteDescriptor:
    """GET the registry manifest for *identity* and return it as a dict.

    Any transport failure, non-200 status or non-object body raises
    ``RemoteFetchError``.  The response is closed on every path.
    """
    url = manifest_url(identity, registry)
    logger.debug("Fetching %s", url)

    try:
        with client.stream("GET", url) as response:
            if response.status_code != httpx.codes.OK:
                msg = f"registry returned HTTP {response.status_code}"
                raise RemoteFetchError(url, msg)
            body = response.read()
    except httpx.HTTPError as exc:
        raise RemoteFetchError(url, f"request failed: {exc}") from exc

    try:
        descriptor = json.loads(
            body,
            parse_constant=_reject_constant,
            parse_float=_parse_float,
            parse_int=_parse_int,
        )
    except ValueError as exc:
        raise RemoteFetchError(url, f"invalid JSON body: {exc}") from exc

    if not isinstance(descriptor, dict):
        msg = f"expected a JSON object, got {type(descriptor).__name__}"
        raise RemoteFetchError(url, msg)
    return descriptor


def _reject_constant(name: str) -> None:
    msg = f"non-standard JSON constant {name}"
    raise ValueError(msg)


def _parse_float(text: str) -> float:
    # Numbers are hashed as float64; anything outside its range is rejected.
    value = float(text)
    if math.isinf(value):
        msg = f"number {text} out of float64 range"
        raise ValueError(msg)
    return value


def _parse_int(text: str) -> int:
    value = int(text)
    try:
        float(value)
    except OverflowError:
        msg = f"number {text} out of float64 range"
        raise ValueError(msg) from None
    return value
