"""Widgets — Units that contribute to the shared query and react to results.

Built-in widgets:
  - text: free-text terms (``q``)
  - facet: field and date facets with filter selection (``fq``)
  - results: document list (``rows``, ``sort``)

Subclass ``Widget`` to plug in your own.
"""

from facetsync.widgets.base import SelectionWidget, Widget
from facetsync.widgets.facet import FacetWidget
from facetsync.widgets.results import ResultWidget
from facetsync.widgets.text import TEXT_WIDGET_ID, TextWidget

__all__ = ["TEXT_WIDGET_ID", "FacetWidget", "ResultWidget", "SelectionWidget", "TextWidget", "Widget"]
