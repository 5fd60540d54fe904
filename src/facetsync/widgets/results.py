"""Result list widget."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from facetsync.models.query import QueryObject
from facetsync.widgets.base import Widget


class ResultWidget(Widget):
    """Holds the documents of the latest applied response.

    Has no selection of its own; the mutators never report a change.

    Args:
        widget_id: Widget id.
        rows: Number of documents to request per page.
        sort: Optional sort expression.
    """

    def __init__(self, widget_id: str = "results", rows: int = 10, sort: str | None = None) -> None:
        super().__init__(widget_id)
        self.rows = rows
        self.sort = sort
        self.docs: list[dict[str, Any]] = []
        self.num_found = 0
        self.displayed_query: QueryObject | None = None
        self.loading = False

    def select(self, items: str | Iterable[str]) -> bool:
        return False

    def deselect(self, items: str | Iterable[str]) -> bool:
        return False

    def clear(self) -> None:
        pass

    def alter_query(self, query: QueryObject) -> None:
        query.rows = max(query.rows, self.rows)
        if self.sort and not query.sort:
            query.sort = self.sort

    def display_query(self, query: QueryObject) -> None:
        self.displayed_query = query

    def handle_result(self, data: Any) -> None:
        response = (data or {}).get("response", {})
        self.docs = list(response.get("docs", []))
        self.num_found = int(response.get("numFound", 0))

    def start_animation(self) -> None:
        self.loading = True

    def end_animation(self) -> None:
        self.loading = False
