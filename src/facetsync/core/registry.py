"""Widget Registry — Ordered storage of the widgets a manager coordinates.

Registration order is part of the contract: it is the order in which widgets
contribute to query building and receive every lifecycle broadcast.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from typing import TYPE_CHECKING, Any

from facetsync.core.exceptions import DuplicateWidgetError, UnknownWidgetError
from facetsync.models.outcome import RegistrationResult

if TYPE_CHECKING:
    from facetsync.widgets.base import Widget

logger = logging.getLogger(__name__)

AdmissionPredicate = Callable[["Widget"], bool]


def _admit_all(widget: Widget) -> bool:
    return True


class WidgetRegistry:
    """Registry of widgets keyed by id, iterated in registration order.

    Supports:
      - Gating admission through a predicate (e.g. "is the view ready?")
      - Rejecting duplicate ids unless replacement is explicit
      - Handing each widget a back-reference to its manager

    Example:
        >>> registry = WidgetRegistry(owner=manager)
        >>> registry.register(TextWidget())
        <RegistrationResult.ACCEPTED: 'accepted'>
        >>> [w.id for w in registry]
        ['text']

    Args:
        owner: Object stored on each widget as ``widget.manager``.
        can_register: Admission predicate. Admits everything by default.
    """

    def __init__(self, owner: Any = None, can_register: AdmissionPredicate | None = None) -> None:
        self._owner = owner
        self._can_register = can_register or _admit_all
        self._widgets: dict[str, Widget] = {}

    def register(self, widget: Widget, *, replace: bool = False) -> RegistrationResult:
        """Register a widget.

        Args:
            widget: The widget to add.
            replace: Overwrite an existing widget with the same id, keeping its position.

        Returns:
            ``REJECTED`` if the admission predicate declined the widget,
            ``REPLACED`` if an existing widget was overwritten, else ``ACCEPTED``.

        Raises:
            DuplicateWidgetError: If the id is taken and ``replace`` is false.
        """
        if not self._can_register(widget):
            logger.info("Widget rejected by admission predicate: %s", widget.id)
            return RegistrationResult.REJECTED

        result = RegistrationResult.ACCEPTED
        if widget.id in self._widgets:
            if not replace:
                raise DuplicateWidgetError(
                    f"A widget with id '{widget.id}' is already registered. "
                    f"Pass replace=True to overwrite it."
                )
            logger.warning("Replacing registered widget: %s", widget.id)
            result = RegistrationResult.REPLACED

        widget.manager = self._owner
        self._widgets[widget.id] = widget
        widget.after_registration()
        logger.debug("Registered widget: %s", widget.id)
        return result

    def get(self, widget_id: str) -> Widget:
        """Get a registered widget by id.

        Raises:
            UnknownWidgetError: If no widget has this id.
        """
        try:
            return self._widgets[widget_id]
        except KeyError:
            raise UnknownWidgetError(
                f"No widget registered with id '{widget_id}'. Registered widgets: {self.ids}"
            ) from None

    def find(self, widget_id: str) -> Widget | None:
        """Get a registered widget by id, or None."""
        return self._widgets.get(widget_id)

    def __contains__(self, widget_id: object) -> bool:
        return widget_id in self._widgets

    def __iter__(self) -> Iterator[Widget]:
        return iter(list(self._widgets.values()))

    def __len__(self) -> int:
        return len(self._widgets)

    @property
    def ids(self) -> list[str]:
        """Registered ids in registration order."""
        return list(self._widgets.keys())
