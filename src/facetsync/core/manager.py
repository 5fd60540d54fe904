"""Facet Manager — Core orchestrator for widget-driven faceted search.

The manager owns the widget registry and drives the request lifecycle:
  1. Build: fold every widget into a fresh query
  2. Animate: tell every widget a request is starting
  3. Display: show every widget the pending query
  4. Execute: hand the query to the transport (responses arrive later)
  5. Persist: mirror the query into the address fragment

When a response arrives, every widget first applies the data, then every
widget ends its loading animation. Responses to superseded requests are
discarded. A failed request only ends every animation.

All public calls should go through the manager; widgets should not mutate
each other directly.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Any

from facetsync.core.builder import QueryBuilder
from facetsync.core.exceptions import ConfigurationError
from facetsync.core.fragment import FragmentCodec
from facetsync.core.registry import AdmissionPredicate, WidgetRegistry
from facetsync.models.outcome import DecodeReport, RegistrationResult, ResultOutcome
from facetsync.models.query import BaseFilters, QueryObject
from facetsync.navigation.base import NavigationPort
from facetsync.navigation.memory import InMemoryNavigation
from facetsync.transports.base import CancellationToken, Transport
from facetsync.widgets.base import as_items

if TYPE_CHECKING:
    from facetsync.config.settings import Settings
    from facetsync.widgets.base import Widget

logger = logging.getLogger(__name__)


class FacetManager:
    """Container for all widgets and coordinator of their requests.

    Pipeline:
      selection change / fragment change / init
        → [QueryBuilder] → QueryObject
        → widgets: start_animation, display_query
        → [Transport] → ... → handle_result → widgets: handle_result, end_animation
        → [FragmentCodec] → address fragment

    Attributes:
        transport: Sends queries to the backend.
        navigation: Address fragment and history access.
        builder: Query builder holding base filters and highlight field.
        widgets: Registry of widgets, in registration order.
        codec: Fragment codec bound to the registry and navigation.
        last_response: Most recent applied response, for debugging.

    Args:
        transport: Required transport.
        navigation: Navigation port. Defaults to an in-memory history.
        builder: Query builder. Created from ``base_filters`` and ``hl_fl`` if omitted.
        base_filters: Filters applied to all queries.
        hl_fl: Field to highlight.
        can_register: Admission predicate. Defaults to the ``can_register`` method.

    Raises:
        ConfigurationError: If no transport is given.
    """

    def __init__(
        self,
        transport: Transport | None,
        navigation: NavigationPort | None = None,
        *,
        builder: QueryBuilder | None = None,
        base_filters: BaseFilters | None = None,
        hl_fl: str = "body",
        can_register: AdmissionPredicate | None = None,
    ) -> None:
        if transport is None:
            raise ConfigurationError("FacetManager requires a transport to execute requests.")

        self.transport = transport
        self.navigation = navigation or InMemoryNavigation()
        self.builder = builder or QueryBuilder(base_filters, hl_fl)
        self.widgets = WidgetRegistry(owner=self, can_register=can_register or self.can_register)
        self.codec = FragmentCodec(self.widgets, self.navigation, self.builder.base_filters)
        self.last_response: Any = None
        self._sequence = 0
        self._token: CancellationToken | None = None

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        transport: Transport | None = None,
        navigation: NavigationPort | None = None,
    ) -> FacetManager:
        """Create a manager from settings, defaulting to a ``SolrTransport``."""
        builder = QueryBuilder(settings.query.filters, settings.query.hl_fl)
        if transport is None:
            from facetsync.transports.solr import SolrTransport

            transport = SolrTransport(
                builder,
                solr_url=settings.solr.url,
                passthru_url=settings.solr.passthru_url,
                timeout=settings.solr.timeout,
            )
        return cls(transport, navigation, builder=builder)

    # ──────────────────────────────────────────────────────────────────────
    # Registration
    # ──────────────────────────────────────────────────────────────────────

    def add_widget(self, widget: Widget, *, replace: bool = False) -> RegistrationResult:
        """Register a widget. See ``WidgetRegistry.register``."""
        return self.widgets.register(widget, replace=replace)

    def can_register(self, widget: Widget) -> bool:
        """Admission hook for subclasses, e.g. to wait until a view exists."""
        return True

    # ──────────────────────────────────────────────────────────────────────
    # Request lifecycle
    # ──────────────────────────────────────────────────────────────────────

    @property
    def start(self) -> int:
        """Start offset restored from the fragment."""
        return self.codec.start

    @property
    def fragment(self) -> str:
        """Last fragment written or read by the manager."""
        return self.codec.fragment

    @property
    def sequence(self) -> int:
        """Number of the most recently issued request."""
        return self._sequence

    def init(self) -> QueryObject:
        """Load the selection from the fragment and run the initial request."""
        self.load_query_from_fragment()
        return self.run_initial_request()

    def run_initial_request(self) -> QueryObject:
        """Run a request at the start offset restored from the fragment."""
        return self.run_request(self.codec.start)

    def load_query_from_fragment(self) -> DecodeReport:
        return self.codec.decode()

    def save_query_to_fragment(self, query: QueryObject) -> str:
        return self.codec.encode(query)

    def build_query(self, start: int = 0) -> QueryObject:
        """Build a query from the current selection without issuing it."""
        return self.builder.build(start, self.widgets)

    def build_query_string(self, query: QueryObject, skip_encoding: bool = False) -> str:
        return self.builder.serialize(query, skip_encoding)

    def run_request(self, start: int = 0) -> QueryObject:
        """Build, display, execute and persist a query.

        Any request still in flight is cancelled and its response, should it
        arrive anyway, is discarded.

        If the transport raises, the request in flight stays the latest one,
        every widget ends its animation, the fragment is left as it was, and
        the error propagates.

        Args:
            start: Pagination offset.

        Returns:
            The issued query.
        """
        previous_sequence, previous_token = self._sequence, self._token
        self._sequence += 1
        query = self.builder.build(start, self.widgets, sequence=self._sequence)

        for widget in self.widgets:
            widget.start_animation()

        for widget in self.widgets:
            widget.display_query(query)

        self._token = token = CancellationToken()

        logger.info(
            "Request #%d: %d terms, %d filters, start=%d",
            query.sequence,
            len(query.q),
            len(query.fq),
            query.start,
        )
        try:
            self.transport.execute(
                query,
                self.json_callback(query.sequence),
                token,
                self.failure_callback(query.sequence),
            )
        except Exception:
            self._sequence, self._token = previous_sequence, previous_token
            for widget in self.widgets:
                widget.end_animation()
            raise

        if previous_token is not None:
            previous_token.cancel()

        self.codec.encode(query)
        return query

    def json_callback(self, sequence: int | None = None) -> Callable[[Any], ResultOutcome]:
        """Return a callback that feeds a response into ``handle_result``."""

        def deliver(data: Any) -> ResultOutcome:
            return self.handle_result(data, sequence=sequence)

        return deliver

    def failure_callback(self, sequence: int | None = None) -> Callable[[BaseException], ResultOutcome]:
        """Return a callback that feeds a transport error into ``handle_failure``."""

        def fail(error: BaseException) -> ResultOutcome:
            return self.handle_failure(error, sequence=sequence)

        return fail

    def handle_result(self, data: Any, sequence: int | None = None) -> ResultOutcome:
        """Pass a backend response to every widget, then end every animation.

        Args:
            data: The decoded backend response.
            sequence: Request number the response belongs to. Responses for
                any request other than the latest are discarded. ``None``
                applies the data unconditionally.

        Returns:
            ``APPLIED`` or ``STALE``.
        """
        if sequence is not None and sequence != self._sequence:
            logger.info("Discarding stale response #%d (latest is #%d)", sequence, self._sequence)
            return ResultOutcome.STALE

        self.last_response = data

        for widget in self.widgets:
            widget.handle_result(data)

        for widget in self.widgets:
            widget.end_animation()

        return ResultOutcome.APPLIED

    def handle_failure(self, error: BaseException, sequence: int | None = None) -> ResultOutcome:
        """End every animation after the latest request failed.

        Widget state and ``last_response`` are left untouched.

        Returns:
            ``FAILED``, or ``STALE`` if ``sequence`` is not the latest request.
        """
        if sequence is not None and sequence != self._sequence:
            logger.info("Discarding stale failure #%d (latest is #%d)", sequence, self._sequence)
            return ResultOutcome.STALE

        logger.error("Request #%s failed: %s", sequence, error)

        for widget in self.widgets:
            widget.end_animation()

        return ResultOutcome.FAILED

    # ──────────────────────────────────────────────────────────────────────
    # Selection
    # ──────────────────────────────────────────────────────────────────────

    def select(self, widget_id: str, items: str | Iterable[str]) -> QueryObject | None:
        """Add items to a widget and, if its selection changed, run a request.

        Returns:
            The issued query, or None if nothing changed.
        """
        if self.widgets.get(widget_id).select(as_items(items)):
            return self.run_request(0)
        return None

    def deselect(self, widget_id: str, items: str | Iterable[str]) -> QueryObject | None:
        """Remove items from a widget and, if its selection changed, run a request.

        Returns:
            The issued query, or None if nothing changed.
        """
        if self.widgets.get(widget_id).deselect(as_items(items)):
            return self.run_request(0)
        return None

    def clear_widget(self, widget_id: str) -> QueryObject:
        """Clear one widget's selection and run a request."""
        self.widgets.get(widget_id).clear()
        return self.run_request(0)

    def select_only(self, widget_id: str, items: str | Iterable[str]) -> QueryObject:
        """Make ``items`` on ``widget_id`` the only selection anywhere, and run a request."""
        keep = self.widgets.get(widget_id)
        for widget in self.widgets:
            widget.clear()
        keep.select(as_items(items))
        return self.run_request(0)

    def keep_only(self, widget_id: str) -> QueryObject:
        """Clear every widget except ``widget_id`` and run a request."""
        self.widgets.get(widget_id)
        for widget in self.widgets:
            if widget.id != widget_id:
                widget.clear()
        return self.run_request(0)

    def clear_all(self) -> QueryObject:
        """Clear every widget and run a request."""
        for widget in self.widgets:
            widget.clear()
        return self.run_request(0)
