"""Data models shared by the manager, widgets and transports."""

from facetsync.models.outcome import DecodeReport, RegistrationResult, ResultOutcome, WatchOutcome
from facetsync.models.query import BaseFilters, DateFacet, FilterQueryItem, QueryItem, QueryObject

__all__ = [
    "BaseFilters",
    "DateFacet",
    "DecodeReport",
    "FilterQueryItem",
    "QueryItem",
    "QueryObject",
    "RegistrationResult",
    "ResultOutcome",
    "WatchOutcome",
]
