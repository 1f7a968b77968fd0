"""Exception taxonomy for ollama-refresh.

Only ``LocalFetchError`` is fatal to a run.  ``MalformedName`` and
``RemoteFetchError`` are raised per model and skipped by the reconciliation
driver; ``UpdateError`` is scoped to a single pull.
"""

from __future__ import annotations


class RefreshError(Exception):
    """Base class for every error raised by this package."""


class LocalFetchError(RefreshError):
    """The local inventory could not be fetched or parsed."""


class MalformedName(RefreshError, ValueError):
    """A local model name is not of the form ``<repo>:<tag>``."""

    def __init__(self, name: str, reason: str) -> None:
        self.name = name
        super().__init__(f"Malformed model name {name!r}: {reason}")


class RemoteFetchError(RefreshError):
    """The registry descriptor for one model could not be fetched."""

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"{reason} ({url})")


class UpdateError(RefreshError):
    """Pulling one model failed."""

    def __init__(self, name: str, reason: str) -> None:
        self.name = name
        self.reason = reason
        super().__init__(f"Failed to update {name!r}: {reason}")
