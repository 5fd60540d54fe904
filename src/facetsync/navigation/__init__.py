"""Navigation ports for reading and writing the search-state fragment."""

from facetsync.navigation.base import NavigationPort
from facetsync.navigation.memory import InMemoryNavigation

__all__ = ["InMemoryNavigation", "NavigationPort"]
