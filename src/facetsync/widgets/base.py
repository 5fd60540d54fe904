"""Widget base classes — The capability set the manager calls into.

A widget is an independent unit of the search UI. The manager calls, in
order of the request lifecycle:
  1. alter_query(): contribute terms, filters and facet requests
  2. start_animation(): show a loading indicator
  3. display_query(): show the pending query
  4. handle_result(): apply the backend response
  5. end_animation(): hide the loading indicator

Selection is changed through select() / deselect() / clear(), which the
manager invokes on behalf of the user.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from facetsync.core.manager import FacetManager
    from facetsync.models.query import QueryObject


def as_items(items: str | Iterable[str]) -> list[str]:
    """Return ``items`` as a list, treating a bare string as one item."""
    if isinstance(items, str):
        return [items]
    return list(items)


class Widget(ABC):
    """Abstract base class for widgets.

    Subclasses must implement the selection mutators. All lifecycle hooks
    default to no-ops.

    Args:
        widget_id: Unique identifier within a manager.
    """

    def __init__(self, widget_id: str) -> None:
        self.id = widget_id
        self.manager: FacetManager | None = None

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id!r})"

    @abstractmethod
    def select(self, items: str | Iterable[str]) -> bool:
        """Add items to the selection.

        Returns:
            True if the selection changed.
        """

    @abstractmethod
    def deselect(self, items: str | Iterable[str]) -> bool:
        """Remove items from the selection.

        Returns:
            True if the selection changed.
        """

    @abstractmethod
    def clear(self) -> None:
        """Reset the selection to empty."""

    def after_registration(self) -> None:
        """Called once the manager has stored the widget."""

    def alter_query(self, query: QueryObject) -> None:
        """Append this widget's contribution to the query."""

    def display_query(self, query: QueryObject) -> None:
        """Show the pending query before results arrive."""

    def handle_result(self, data: Any) -> None:
        """Apply the backend response."""

    def start_animation(self) -> None:
        """Show a loading indicator."""

    def end_animation(self) -> None:
        """Hide the loading indicator."""


class SelectionWidget(Widget):
    """Widget holding an ordered set of selected values.

    Also tracks whether a request is in flight so views can render a
    loading state.
    """

    def __init__(self, widget_id: str, selected: Iterable[str] = ()) -> None:
        super().__init__(widget_id)
        self.selected: list[str] = []
        self.loading = False
        self.select(selected)

    def select(self, items: str | Iterable[str]) -> bool:
        changed = False
        for item in as_items(items):
            if item not in self.selected:
                self.selected.append(item)
                changed = True
        return changed

    def deselect(self, items: str | Iterable[str]) -> bool:
        changed = False
        for item in as_items(items):
            if item in self.selected:
                self.selected.remove(item)
                changed = True
        return changed

    def clear(self) -> None:
        self.selected.clear()

    def start_animation(self) -> None:
        self.loading = True

    def end_animation(self) -> None:
        self.loading = False
