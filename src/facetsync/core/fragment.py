"""Fragment Codec — Mirrors the query in the address fragment and back.

Wire format::

    #fq=<filter>&fq=<filter>&...&q=<term>&q=<term>&...&start=<offset>

Filters come first, then terms, then the offset.
"""

from __future__ import annotations

import logging

from facetsync.core.registry import WidgetRegistry
from facetsync.models.outcome import DecodeReport
from facetsync.models.query import BaseFilters, FilterQueryItem, QueryItem, QueryObject
from facetsync.navigation.base import NavigationPort
from facetsync.widgets.text import TEXT_WIDGET_ID

logger = logging.getLogger(__name__)


class FragmentCodec:
    """Writes queries into the fragment and restores widget selections from it.

    Base filters lead every built query and are not persisted: they are
    added again on every build, so writing them would duplicate them on reload.

    Attributes:
        fragment: Cached copy of the live fragment as last written or read.
        start: Start offset restored by the latest decode.
    """

    def __init__(
        self,
        registry: WidgetRegistry,
        navigation: NavigationPort,
        base_filters: BaseFilters | None = None,
    ) -> None:
        self.registry = registry
        self.navigation = navigation
        self.base_filters = base_filters or BaseFilters()
        self.fragment = ""
        self.start = 0

    def encode(self, query: QueryObject) -> str:
        """Write the query to the fragment and cache what the port stored.

        Returns:
            The fragment as read back from the navigation port.
        """
        filters = query.fq[len(self.base_filters.fq) :]
        terms = query.q[len(self.base_filters.q) :]
        segments = [f"fq={item.to_fragment()}" for item in filters]
        segments.extend(f"q={item.to_fragment()}" for item in terms)
        segments.append(f"start={query.start}")

        self.navigation.write_fragment("#" + "&".join(segments))
        # The port may normalize on write, so cache the stored value.
        self.fragment = self.navigation.read_fragment()
        return self.fragment

    def decode(self) -> DecodeReport:
        """Restore widget selections and the start offset from the live fragment.

        A non-empty fragment means the user navigated here, so every widget is
        cleared first and its selection comes only from the fragment. An empty
        fragment is a first load: selections made during registration stay.
        """
        live = self.navigation.read_fragment()
        report = DecodeReport(fragment=live)
        body = live.lstrip("#")

        if body:
            for widget in self.registry:
                widget.clear()

        for segment in body.split("&") if body else []:
            if self._apply(segment, report):
                report.applied.append(segment)
            else:
                report.ignored.append(segment)

        if report.ignored:
            logger.debug("Ignored fragment segments: %s", report.ignored)
        return report

    def _apply(self, segment: str, report: DecodeReport) -> bool:
        if segment.startswith("fq="):
            try:
                item = FilterQueryItem.from_fragment(segment[3:])
            except ValueError:
                return False
            widget = self.registry.find(item.widget_id)
            if widget is None:
                return False
            widget.select([item.value])
            return True

        if segment.startswith("q="):
            widget = self.registry.find(TEXT_WIDGET_ID)
            if widget is None:
                return False
            widget.select([QueryItem.from_fragment(segment[2:]).value])
            return True

        if segment.startswith("start="):
            try:
                start = int(segment[6:])
            except ValueError:
                return False
            if start < 0:
                return False
            self.start = report.start = start
            return True

        return False
