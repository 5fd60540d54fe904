"""Manager-level exceptions."""


class FacetSyncError(Exception):
    """Base exception for coordination errors."""


class ConfigurationError(FacetSyncError):
    """Raised when the manager is constructed without a required collaborator."""


class DuplicateWidgetError(FacetSyncError):
    """Raised when a widget id is registered twice without ``replace=True``."""


class UnknownWidgetError(FacetSyncError, KeyError):
    """Raised when an operation names a widget that is not registered."""
