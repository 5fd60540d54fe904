"""Shared test fixtures and configuration."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

import pytest

from facetsync.config.settings import Settings
from facetsync.core.manager import FacetManager
from facetsync.models.query import BaseFilters, QueryItem, QueryObject
from facetsync.navigation.memory import InMemoryNavigation
from facetsync.transports.base import CancellationToken, Deliver, Fail, Transport
from facetsync.widgets.base import SelectionWidget

# ── Test doubles ─────────────────────────────────────────────────────────────


class RecordingTransport(Transport):
    """Transport that keeps every call so tests decide when responses arrive."""

    def __init__(self) -> None:
        self.calls: list[tuple[QueryObject, Deliver, CancellationToken]] = []
        self.fails: list[Fail | None] = []
        self.error: Exception | None = None

    def execute(
        self,
        query: QueryObject,
        deliver: Deliver,
        token: CancellationToken,
        fail: Fail | None = None,
    ) -> None:
        if self.error is not None:
            raise self.error
        self.calls.append((query, deliver, token))
        self.fails.append(fail)

    @property
    def queries(self) -> list[QueryObject]:
        return [query for query, _, _ in self.calls]

    def respond(self, index: int, data: Any) -> Any:
        """Deliver ``data`` as the response to the ``index``-th call."""
        _, deliver, _ = self.calls[index]
        return deliver(data)

    def report_failure(self, index: int, error: BaseException) -> Any:
        """Report ``error`` as the failure of the ``index``-th call."""
        fail = self.fails[index]
        assert fail is not None
        return fail(error)


class RecordingWidget(SelectionWidget):
    """Selection widget that appends every hook call to a shared log."""

    def __init__(self, widget_id: str, log: list[tuple[str, str]], selected: Iterable[str] = ()) -> None:
        self.log = log
        super().__init__(widget_id, selected)
        self.results: list[Any] = []

    def after_registration(self) -> None:
        self.log.append((self.id, "after_registration"))

    def alter_query(self, query: QueryObject) -> None:
        self.log.append((self.id, "alter_query"))
        query.q.extend(QueryItem(value=f"{self.id}:{term}") for term in self.selected)

    def display_query(self, query: QueryObject) -> None:
        self.log.append((self.id, "display_query"))

    def handle_result(self, data: Any) -> None:
        self.log.append((self.id, "handle_result"))
        self.results.append(data)

    def start_animation(self) -> None:
        super().start_animation()
        self.log.append((self.id, "start_animation"))

    def end_animation(self) -> None:
        super().end_animation()
        self.log.append((self.id, "end_animation"))


# ── Fixtures ─────────────────────────────────────────────────────────────────


@pytest.fixture
def settings() -> Settings:
    """Create a test Settings instance with defaults."""
    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        debug=True,
        query={"filters": {"fl": ["title"]}, "hl_fl": "body"},
    )


@pytest.fixture
def navigation() -> InMemoryNavigation:
    return InMemoryNavigation()


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def manager(transport: RecordingTransport, navigation: InMemoryNavigation) -> FacetManager:
    """Manager with base filters ``{q: [], fq: [], fl: ["title"]}`` and no widgets."""
    return FacetManager(transport, navigation, base_filters=BaseFilters(fl=["title"]))


@pytest.fixture
def call_log() -> list[tuple[str, str]]:
    return []


@pytest.fixture
def make_widget(call_log: list[tuple[str, str]]):
    """Factory for ``RecordingWidget`` instances sharing ``call_log``."""

    def _make(widget_id: str, selected: Iterable[str] = ()) -> RecordingWidget:
        return RecordingWidget(widget_id, call_log, selected)

    return _make
