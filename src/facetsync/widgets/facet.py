"""Facet field widget."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from facetsync.models.query import DateFacet, FilterQueryItem, QueryObject
from facetsync.widgets.base import SelectionWidget


class FacetWidget(SelectionWidget):
    """Requests counts for one field and filters on the selected values.

    Args:
        widget_id: Widget id; also written into the fragment for each filter.
        field: Indexed field to facet on. Defaults to ``widget_id``.
        date_range: Optional ``DateFacet`` to request instead of a plain field facet.
        selected: Values selected when the widget is created.
    """

    def __init__(
        self,
        widget_id: str,
        field: str | None = None,
        date_range: DateFacet | None = None,
        selected: Iterable[str] = (),
    ) -> None:
        self.field = field or widget_id
        self.date_range = date_range
        self.counts: dict[str, int] = {}
        super().__init__(widget_id, selected)

    def alter_query(self, query: QueryObject) -> None:
        if self.date_range is not None:
            query.dates.append(self.date_range)
        else:
            query.fields.append(self.field)
        query.fq.extend(
            FilterQueryItem(widget_id=self.id, field=self.field, value=value) for value in self.selected
        )

    def handle_result(self, data: Any) -> None:
        """Read this field's counts from a Solr ``facet_counts`` section."""
        facet_counts = (data or {}).get("facet_counts", {})
        if self.date_range is not None:
            raw = facet_counts.get("facet_dates", {}).get(self.field, {})
            self.counts = {k: v for k, v in raw.items() if isinstance(v, int)}
            return
        flat = facet_counts.get("facet_fields", {}).get(self.field, [])
        # Solr returns [value, count, value, count, ...]
        self.counts = {str(flat[i]): int(flat[i + 1]) for i in range(0, len(flat) - 1, 2)}
