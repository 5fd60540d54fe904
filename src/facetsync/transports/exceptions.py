"""Transport-specific exceptions."""


class TransportError(Exception):
    """Base exception for transport errors."""


class QueryError(TransportError):
    """Raised when a request to the search backend fails."""
