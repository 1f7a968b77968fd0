"""Reconcile the local inventory against the remote registry."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

import httpx

from ollama_refresh.errors import MalformedName, RemoteFetchError
from ollama_refresh.fingerprint import is_stale
from ollama_refresh.local import list_local_models
from ollama_refresh.registry import fetch_manifest, resolve_identity
from ollama_refresh.types import DEFAULT_HOST, DEFAULT_REGISTRY, LocalModel

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FingerprintRecord:
    """Outcome of comparing one local model with its registry descriptor."""

    name: str
    is_stale: bool


@dataclass(frozen=True)
class SkippedModel:
    """A model that could not be compared, and why."""

    name: str
    reason: str


@dataclass
class StalenessReport:
    """Per-model results of one reconciliation run, in inventory order.

    ``records`` only holds models that were resolved, fetched and compared.
    Models that failed along the way are listed in ``skipped`` and are never
    reported as stale.
    """

    records: list[FingerprintRecord] = field(default_factory=list)
    skipped: list[SkippedModel] = field(default_factory=list)

    @property
    def stale(self) -> list[str]:
        return [r.name for r in self.records if r.is_stale]

    @property
    def up_to_date(self) -> list[str]:
        return [r.name for r in self.records if not r.is_stale]


def check_models(
    models: Iterable[LocalModel],
    *,
    client: httpx.Client,
    registry: str = DEFAULT_REGISTRY,
) -> StalenessReport:
    """Compare each local model's digest with the current registry manifest.

    Models are processed one at a time, in order.  A model whose name cannot
    be resolved or whose manifest cannot be fetched is logged and skipped;
    the run always completes.
    """
    report = StalenessReport()

    for model in models:
        try:
            identity = resolve_identity(model.name)
            descriptor = fetch_manifest(client, identity, registry=registry)
        except (MalformedName, RemoteFetchError) as exc:
            logger.warning("Skipping %s: %s", model.name, exc)
            report.skipped.append(SkippedModel(name=model.name, reason=str(exc)))
            continue

        stale = is_stale(descriptor, model.digest)
        if stale:
            logger.info("You have an outdated version of %s", model.name)
        else:
            logger.info("You have the latest %s", model.name)
        report.records.append(FingerprintRecord(name=model.name, is_stale=stale))

    return report


def check_local_models(
    *,
    client: httpx.Client,
    host: str = DEFAULT_HOST,
    registry: str = DEFAULT_REGISTRY,
) -> StalenessReport:
    """Fetch the local inventory and reconcile it.

    ``LocalFetchError`` from the inventory request propagates unchanged.
    """
    models = list_local_models(client, host=host)
    return check_models(models, client=client, registry=registry)
