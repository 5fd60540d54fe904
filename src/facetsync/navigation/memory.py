"""In-memory navigation — A history stack standing in for a browser address bar."""

from __future__ import annotations

import logging

from facetsync.navigation.base import NavigationPort

logger = logging.getLogger(__name__)


def _normalize(fragment: str) -> str:
    fragment = fragment.lstrip("#")
    return f"#{fragment}" if fragment else ""


class InMemoryNavigation(NavigationPort):
    """Navigation port backed by a list of history entries.

    Writing truncates any forward entries, like following a link does.

    Args:
        initial: Fragment of the first history entry.
    """

    def __init__(self, initial: str = "") -> None:
        self._history: list[str] = [_normalize(initial)]
        self._index = 0

    def read_fragment(self) -> str:
        return self._history[self._index]

    def write_fragment(self, fragment: str) -> None:
        normalized = _normalize(fragment)
        if normalized == self.read_fragment():
            return
        del self._history[self._index + 1 :]
        self._history.append(normalized)
        self._index += 1

    def go_back(self) -> None:
        if self._index == 0:
            logger.debug("Already at the first history entry")
            return
        self._index -= 1

    def navigate(self, fragment: str) -> None:
        """Simulate the user entering an address with this fragment."""
        self.write_fragment(fragment)

    def back(self) -> None:
        """Simulate the browser back button."""
        self.go_back()

    def forward(self) -> None:
        """Simulate the browser forward button."""
        if self._index < len(self._history) - 1:
            self._index += 1

    @property
    def history(self) -> list[str]:
        """All history entries, oldest first."""
        return list(self._history)

    @property
    def index(self) -> int:
        """Position of the current entry in ``history``."""
        return self._index
