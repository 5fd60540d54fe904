"""Query models — The per-request query object and its items.

Every item knows two encodings:
  1. The backend form, used in the Solr query string
  2. The fragment form, used in the address fragment that mirrors search state
"""

from __future__ import annotations

from typing import Any
from urllib.parse import quote, unquote

from pydantic import BaseModel, Field, field_validator

_PHRASE_OPENERS = ('"', "[", "{", "(")


def urlencode(value: Any, skip: bool = False) -> str:
    """Percent-encode a value for a query string, unless ``skip`` is set."""
    text = str(value)
    return text if skip else quote(text, safe="")


class QueryItem(BaseModel):
    """A single free-text term."""

    value: str = Field(description="The term as entered by the user")

    def to_solr(self, skip: bool = False) -> str:
        return urlencode(self.value, skip)

    def to_fragment(self) -> str:
        return quote(self.value, safe="")

    @classmethod
    def from_fragment(cls, text: str) -> QueryItem:
        return cls(value=unquote(text))


class FilterQueryItem(BaseModel):
    """A single facet filter, tagged with the widget that contributed it.

    The fragment form carries ``widget_id`` instead of ``field`` so that a
    parsed segment can be routed back to its widget, which knows its field.
    Widget ids must not contain ``:``.
    """

    widget_id: str = Field(default="", description="Id of the contributing widget ('' for base filters)")
    field: str = Field(description="Indexed field name")
    value: str = Field(description="Field value to filter on")

    def solr_clause(self) -> str:
        """Return the unencoded ``field:value`` clause, quoting multi-word values."""
        value = self.value
        if any(ch.isspace() for ch in value) and not value.startswith(_PHRASE_OPENERS):
            value = f'"{value}"'
        return f"{self.field}:{value}"

    def to_solr(self, skip: bool = False) -> str:
        return urlencode(self.solr_clause(), skip)

    def to_fragment(self) -> str:
        return quote(f"{self.widget_id}:{self.value}", safe="")

    @classmethod
    def from_fragment(cls, text: str) -> FilterQueryItem:
        """Parse a fragment segment body.

        Raises:
            ValueError: If the segment has no ``widget_id:value`` separator.
        """
        widget_id, sep, value = unquote(text).partition(":")
        if not sep or not widget_id:
            raise ValueError(f"Malformed filter fragment: {text!r}")
        return cls(widget_id=widget_id, field=widget_id, value=value)

    @classmethod
    def parse(cls, clause: str, widget_id: str = "") -> FilterQueryItem:
        """Build an item from a ``field:value`` clause (used for configured base filters)."""
        field, sep, value = clause.partition(":")
        if not sep or not field:
            raise ValueError(f"Filter must look like 'field:value', got {clause!r}")
        return cls(widget_id=widget_id, field=field, value=value)


class DateFacet(BaseModel):
    """A date range facet request."""

    field: str
    start: str = Field(description="Range start, e.g. 'NOW/YEAR-10YEARS'")
    end: str = Field(description="Range end, e.g. 'NOW'")
    gap: str = Field(description="Bucket size, e.g. '+1YEAR'")


class BaseFilters(BaseModel):
    """Filters applied to every query before widgets contribute.

    Accepts plain strings in configuration: terms for ``q`` and
    ``field:value`` clauses for ``fq``.
    """

    q: list[QueryItem] = Field(default_factory=list)
    fq: list[FilterQueryItem] = Field(default_factory=list)
    fl: list[str] = Field(default_factory=list)

    @field_validator("q", mode="before")
    @classmethod
    def _parse_terms(cls, v: Any) -> list[Any]:
        return [QueryItem(value=item) if isinstance(item, str) else item for item in v or []]

    @field_validator("fq", mode="before")
    @classmethod
    def _parse_filters(cls, v: Any) -> list[Any]:
        return [FilterQueryItem.parse(item) if isinstance(item, str) else item for item in v or []]


class QueryObject(BaseModel):
    """The query assembled for one request.

    Created fresh by ``QueryBuilder.build`` and discarded once it has been
    serialized and persisted. Widgets append to the list fields in
    ``alter_query``; they must not remove entries contributed by others.
    """

    q: list[QueryItem] = Field(default_factory=list)
    fq: list[FilterQueryItem] = Field(default_factory=list)
    fl: list[str] = Field(default_factory=list)
    fields: list[str] = Field(default_factory=list, description="Facet fields to count")
    dates: list[DateFacet] = Field(default_factory=list, description="Date facets to count")
    start: int = Field(default=0, ge=0, description="Pagination offset")
    rows: int = Field(default=0, ge=0, description="Number of documents to return")
    sort: str | None = Field(default=None, description="Sort expression, e.g. 'date desc'")
    sequence: int = Field(default=0, ge=0, description="Request number assigned by the manager")

    def return_fields(self) -> list[str]:
        """Field list with ``id`` appended when missing."""
        return self.fl if "id" in self.fl else [*self.fl, "id"]
