"""Shared test fixtures for the draftpress test suite."""

from __future__ import annotations

from typing import Any

import pytest

from draftpress.blocks import BlockMapper
from draftpress.config import DraftpressConfig
from draftpress.document import DocumentLinter, MarkdownParser
from draftpress.integrations import InMemoryIntegrationStore
from draftpress.models import IntegrationCredentials


class RecordingMetricsHook:
    """A metrics backend that records all calls for assertion."""

    def __init__(self) -> None:
        self.increments: list[dict[str, Any]] = []
        self.timings: list[dict[str, Any]] = []
        self.gauges: list[dict[str, Any]] = []

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        self.increments.append({"name": name, "value": value, "tags": tags})

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        self.timings.append({"name": name, "ms": ms, "tags": tags})

    def gauge(
        self,
        name: str,
        value: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        self.gauges.append({"name": name, "value": value, "tags": tags})

    def names(self) -> list[str]:
        return [c["name"] for c in self.increments]


def make_config(**overrides: Any) -> DraftpressConfig:
    """Return a DraftpressConfig tuned for fast, deterministic tests."""
    defaults: dict[str, Any] = dict(
        retry_max_attempts=3,
        retry_base_delay=0.0,
        retry_max_delay=0.0,
        retry_jitter=False,
        # High RPS so the token bucket never blocks during tests.
        rate_limit_rps=10_000.0,
    )
    defaults.update(overrides)
    return DraftpressConfig(**defaults)


NOTION_CREDENTIALS = IntegrationCredentials(
    access_token="secret_tenant_token_1234",
    drafts_container_id="drafts-container-1",
)


@pytest.fixture
def config() -> DraftpressConfig:
    return make_config()


@pytest.fixture
def metrics() -> RecordingMetricsHook:
    return RecordingMetricsHook()


@pytest.fixture
def parser() -> MarkdownParser:
    return MarkdownParser()


@pytest.fixture
def linter() -> DocumentLinter:
    return DocumentLinter()


@pytest.fixture
def mapper() -> BlockMapper:
    return BlockMapper()


@pytest.fixture
def store() -> InMemoryIntegrationStore:
    """Integration store where ``user-1`` owns Notion workspace ``W1``."""
    store = InMemoryIntegrationStore()
    store.save_integration("user-1", "W1", NOTION_CREDENTIALS)
    return store
