"""Free-text widget."""

from __future__ import annotations

from collections.abc import Iterable

from facetsync.models.query import QueryItem, QueryObject
from facetsync.widgets.base import SelectionWidget

TEXT_WIDGET_ID = "text"
"""Fragment ``q=`` segments are always routed to the widget with this id."""


class TextWidget(SelectionWidget):
    """Contributes each selected term to ``q``."""

    def __init__(self, widget_id: str = TEXT_WIDGET_ID, selected: Iterable[str] = ()) -> None:
        super().__init__(widget_id, selected)

    def alter_query(self, query: QueryObject) -> None:
        query.q.extend(QueryItem(value=term) for term in self.selected)
