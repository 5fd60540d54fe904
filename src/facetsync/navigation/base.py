"""Navigation port — Access to the navigable address the search state lives in."""

from __future__ import annotations

from abc import ABC, abstractmethod


class NavigationPort(ABC):
    """Abstract access to the address fragment and history.

    Fragments are read back including the leading ``#``; an empty string
    means the address has no fragment.
    """

    @abstractmethod
    def read_fragment(self) -> str:
        """Return the live fragment (``""`` when absent)."""

    @abstractmethod
    def write_fragment(self, fragment: str) -> None:
        """Replace the live fragment, creating a history entry.

        Implementations may normalize what they store; callers should read
        the fragment back rather than assume it round-trips.
        """

    @abstractmethod
    def go_back(self) -> None:
        """Step one entry back in history."""
