"""facetsync — Widget coordination for faceted search with fragment-synced state."""

__version__ = "0.1.0"
