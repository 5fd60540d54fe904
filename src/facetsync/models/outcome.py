"""Outcome values returned where the manager declines to act."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class RegistrationResult(str, Enum):
    """What happened to a widget passed to ``register``."""

    ACCEPTED = "accepted"
    REPLACED = "replaced"
    REJECTED = "rejected"


class ResultOutcome(str, Enum):
    """What the manager did with a backend response or failure."""

    APPLIED = "applied"
    STALE = "stale"
    FAILED = "failed"


class WatchOutcome(str, Enum):
    """Result of a single watcher tick."""

    UNCHANGED = "unchanged"
    RELOADED = "reloaded"
    STEPPED_BACK = "stepped_back"


class DecodeReport(BaseModel):
    """Summary of a fragment decode."""

    fragment: str = Field(default="", description="The fragment that was read")
    applied: list[str] = Field(default_factory=list, description="Segments routed to a widget")
    ignored: list[str] = Field(default_factory=list, description="Unknown, malformed or unroutable segments")
    start: int | None = Field(default=None, description="Start offset restored from the fragment")
