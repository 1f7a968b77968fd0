"""Shared data models and defaults for ollama-refresh."""

from __future__ import annotations

import os

from pydantic import BaseModel, ConfigDict, Field, field_validator

# ---------------------------------------------------------------------------
# Default constants
# ---------------------------------------------------------------------------

DEFAULT_HOST = "http://localhost:11434"
DEFAULT_REGISTRY = "https://ollama.ai"
DEFAULT_NAMESPACE = "library"
DEFAULT_TIMEOUT = 30.0
PULL_READ_TIMEOUT = 300.0

HOST_ENV_VAR = "OLLAMA_HOST"


def default_host() -> str:
    """Return the local service URL, honouring ``$OLLAMA_HOST``.

    Ollama accepts a bare ``host:port`` in that variable, so a missing
    scheme is filled in with ``http://``.
    """
    value = os.environ.get(HOST_ENV_VAR, "").strip()
    if not value:
        return DEFAULT_HOST
    if "://" not in value:
        value = f"http://{value}"
    return value.rstrip("/")


# ---------------------------------------------------------------------------
# Local service wire models (GET /api/tags, POST /api/pull)
# ---------------------------------------------------------------------------


class LocalModel(BaseModel):
    """A model cached by the local service, as listed by ``/api/tags``."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str
    digest: str = ""  # Never equal to a fingerprint


class InventoryResponse(BaseModel):
    """Body of ``GET /api/tags``."""

    model_config = ConfigDict(extra="ignore")

    models: list[LocalModel] = Field(default_factory=list)

    @field_validator("models", mode="before")
    @classmethod
    def null_models_are_empty(cls, value: object) -> object:
        return [] if value is None else value


class PullRequest(BaseModel):
    """Body of ``POST /api/pull``."""

    name: str


class PullProgress(BaseModel):
    """One NDJSON line streamed back by ``POST /api/pull``."""

    model_config = ConfigDict(extra="ignore")

    status: str = ""
    digest: str | None = None
    total: int | None = None
    completed: int | None = None
    error: str | None = None

    @property
    def percent(self) -> int | None:
        if not self.total or self.completed is None:
            return None
        return self.completed * 100 // self.total
