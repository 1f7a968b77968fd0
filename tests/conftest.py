"""Shared fixtures and pytest configuration."""

from __future__ import annotations

import json
from typing import Any

import httpx
import pytest

from ollama_refresh.client import build_client
from ollama_refresh.fingerprint import fingerprint
from ollama_refresh.registry import manifest_url, resolve_identity
from ollama_refresh.types import DEFAULT_HOST, DEFAULT_REGISTRY

# ---------------------------------------------------------------------------
# --slow flag
# ---------------------------------------------------------------------------


def pytest_addoption(parser: pytest.Parser) -> None:
    parser.addoption(
        "--slow",
        action="store_true",
        default=False,
        help="Run slow tests (requires a running Ollama and network access).",
    )


def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    if config.getoption("--slow"):
        return
    skip_slow = pytest.mark.skip(reason="Use --slow to run")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


# ---------------------------------------------------------------------------
# Fake Ollama service + registry
# ---------------------------------------------------------------------------


class FakeOllama:
    """Serves ``/api/tags``, ``/api/pull`` and registry manifests in memory."""

    def __init__(self) -> None:
        self.models: list[dict[str, str]] = []
        # Manifest URL -> JSON object, raw body bytes, or an HTTP status code.
        self.manifests: dict[str, Any] = {}
        self.requests: list[httpx.Request] = []
        self.pulled: list[str] = []
        self.pull_chunks: list[bytes] = [
            b'{"status":"pulling manifest"}\n',
            b'{"status":"success"}\n',
        ]
        self.pull_status = 200
        self.tags_status = 200
        self.tags_body: bytes | None = None

    # -- setup helpers --

    def add_model(
        self,
        name: str,
        manifest: dict[str, Any] | None = None,
        *,
        stale: bool = False,
    ) -> None:
        """Register a local model and its registry manifest.

        The local digest matches the manifest unless *stale* is set.
        """
        manifest = manifest if manifest is not None else {"name": name}
        digest = "outdated-digest" if stale else fingerprint(manifest)
        self.models.append({"name": name, "digest": digest})
        self.manifests[self.url_for(name)] = manifest

    def add_local_only(self, name: str, digest: str = "X") -> None:
        """Register a local model without touching the registry."""
        self.models.append({"name": name, "digest": digest})

    @staticmethod
    def url_for(name: str) -> str:
        return manifest_url(resolve_identity(name), DEFAULT_REGISTRY)

    # -- transport --

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        url = str(request.url)

        if url == f"{DEFAULT_HOST}/api/tags":
            if self.tags_body is not None:
                return httpx.Response(self.tags_status, content=self.tags_body)
            return httpx.Response(self.tags_status, json={"models": self.models})

        if url == f"{DEFAULT_HOST}/api/pull":
            name = json.loads(request.content)["name"]
            self.pulled.append(name)
            if self.pull_status != 200:
                return httpx.Response(self.pull_status, text="pull refused")
            return httpx.Response(200, content=iter(self.pull_chunks))

        manifest = self.manifests.get(url)
        if manifest is None:
            return httpx.Response(404, json={"errors": [{"code": "MANIFEST_UNKNOWN"}]})
        if isinstance(manifest, int):
            return httpx.Response(manifest)
        if isinstance(manifest, bytes):
            return httpx.Response(200, content=manifest)
        return httpx.Response(200, json=manifest)

    def manifest_requests(self) -> list[str]:
        return [str(r.url) for r in self.requests if "/v2/" in r.url.path]


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def fake_ollama() -> FakeOllama:
    return FakeOllama()


@pytest.fixture()
def client(fake_ollama: FakeOllama):
    """An ``httpx.Client`` routed to the fake service."""
    with build_client(transport=httpx.MockTransport(fake_ollama)) as c:
        yield c
