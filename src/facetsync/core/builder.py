"""Query Builder — Folds the registered widgets into a query and serializes it.

The serialized form is the Solr query string. Parameter names and their
order are fixed; existing backends depend on them.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

from facetsync.models.query import BaseFilters, QueryObject, urlencode

if TYPE_CHECKING:
    from facetsync.widgets.base import Widget

FACET_DEFAULTS = "facet=true&facet.limit=40&facet.sort=true&facet.mincount=1&hl=true"


class QueryBuilder:
    """Builds ``QueryObject`` instances and renders them as query strings.

    Attributes:
        base_filters: Filters copied into every query before widgets run.
        hl_fl: Field to highlight in results.
    """

    def __init__(self, base_filters: BaseFilters | None = None, hl_fl: str = "body") -> None:
        self.base_filters = base_filters or BaseFilters()
        self.hl_fl = hl_fl

    def build(self, start: int, widgets: Iterable[Widget], sequence: int = 0) -> QueryObject:
        """Create a query and let every widget alter it, in iteration order.

        Base filters are deep-copied so widgets cannot reach the shared lists.

        Args:
            start: Pagination offset.
            widgets: Widgets to fold over, normally the registry.
            sequence: Request number to stamp on the query.

        Returns:
            The assembled query, with ``id`` appended to ``fl``.
        """
        base = self.base_filters.model_copy(deep=True)
        query = QueryObject(q=base.q, fq=base.fq, fl=base.fl, start=start, rows=0, sequence=sequence)

        for widget in widgets:
            widget.alter_query(query)

        query.fl = query.return_fields()
        return query

    def serialize(self, query: QueryObject, skip_encoding: bool = False) -> str:
        """Render a query as a Solr query string.

        Args:
            query: The query to render.
            skip_encoding: Leave values unencoded, for display to humans.

        Returns:
            The query string, without a leading ``?``.
        """
        skip = skip_encoding
        params = [FACET_DEFAULTS]

        params.extend(f"facet.field={urlencode(name, skip)}" for name in query.fields)

        for date in query.dates:
            params.append(f"facet.date={urlencode(date.field, skip)}")
            params.append(f"f.{date.field}.facet.date.start={urlencode(date.start, skip)}")
            params.append(f"f.{date.field}.facet.date.end={urlencode(date.end, skip)}")
            params.append(f"f.{date.field}.facet.date.gap={urlencode(date.gap, skip)}")

        params.extend(f"fq={item.to_solr(skip)}" for item in query.fq)

        # Every term is followed by a space, so an empty term list still yields "q="
        space = " " if skip else "%20"
        params.append("q=" + "".join(item.to_solr(skip) + space for item in query.q))

        params.append("fl=" + ",".join(query.return_fields()))
        params.append(f"rows={query.rows}")
        params.append(f"start={query.start}")
        if query.sort:
            params.append(f"sort={urlencode(query.sort, skip)}")
        params.append(f"hl.fl={self.hl_fl}")

        return "&".join(params)
