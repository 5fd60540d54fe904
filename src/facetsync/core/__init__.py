"""Core coordination: registry, query builder, fragment codec, manager and watcher."""
