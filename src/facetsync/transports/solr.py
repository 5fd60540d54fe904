"""Apache Solr transport — Sends built queries to Solr's /select handler.

Uses ``httpx`` (async). Queries go either directly to Solr as a GET request
or, when a passthru URL is configured, to a proxy script as a form POST.

Usage::

    transport = SolrTransport(builder, solr_url="http://localhost:8983/solr/select/")
    manager = FacetManager(transport, navigation)
    manager.init()  # inside a running event loop
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any

import httpx

from facetsync.core.builder import QueryBuilder
from facetsync.models.query import QueryObject
from facetsync.transports.base import CancellationToken, Deliver, Fail, Transport
from facetsync.transports.exceptions import QueryError, TransportError

logger = logging.getLogger(__name__)


class SolrTransport(Transport):
    """Transport for Apache Solr's JSON response writer.

    Args:
        builder: Serializes queries into the Solr query string.
        solr_url: Absolute URL of the Solr select handler.
        passthru_url: Optional proxy URL; when set, queries are POSTed there
            as a ``query`` form field instead of being sent to Solr directly.
        timeout: HTTP request timeout in seconds.
        client: Pre-built ``httpx.AsyncClient`` to use instead of creating one.
    """

    def __init__(
        self,
        builder: QueryBuilder,
        solr_url: str = "http://localhost:8983/solr/select/",
        passthru_url: str | None = None,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._builder = builder
        self._solr_url = solr_url
        self._passthru_url = passthru_url
        self._client = client or httpx.AsyncClient(timeout=httpx.Timeout(timeout))
        self._tasks: set[asyncio.Task[Any]] = set()

    async def aclose(self) -> None:
        """Cancel in-flight requests and close the HTTP client."""
        for task in list(self._tasks):
            task.cancel()
        await self._client.aclose()

    # ── Request ──────────────────────────────────────────────────────────

    async def fetch(self, query: QueryObject) -> dict[str, Any]:
        """Send the query and return the decoded JSON response.

        Raises:
            QueryError: If the request fails, returns an error status or
                returns a body that is not JSON.
        """
        query_string = self._builder.serialize(query) + "&wt=json"
        try:
            start = time.monotonic()
            if self._passthru_url:
                resp = await self._client.post(self._passthru_url, data={"query": query_string})
            else:
                resp = await self._client.get(f"{self._solr_url}?{query_string}")
            resp.raise_for_status()
            took_ms = int((time.monotonic() - start) * 1000)
            logger.debug("Solr request #%d answered in %d ms", query.sequence, took_ms)
            return resp.json()
        except httpx.HTTPError as e:
            raise QueryError(f"Solr query failed: {e}") from e
        except ValueError as e:
            raise QueryError(f"Solr returned invalid JSON: {e}") from e

    def execute(
        self,
        query: QueryObject,
        deliver: Deliver,
        token: CancellationToken,
        fail: Fail | None = None,
    ) -> None:
        """Schedule ``fetch`` on the running event loop.

        A ``QueryError`` goes to ``fail`` when given and is logged otherwise.

        Raises:
            TransportError: If called outside a running event loop.
        """
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            raise TransportError("SolrTransport.execute() requires a running event loop.") from None

        task = loop.create_task(self._run(query, deliver, fail))
        self._tasks.add(task)
        task.add_done_callback(self._finished)
        token.add_callback(task.cancel)

    async def _run(self, query: QueryObject, deliver: Deliver, fail: Fail | None) -> None:
        try:
            data = await self.fetch(query)
        except QueryError as e:
            if fail is None:
                raise
            fail(e)
            return
        deliver(data)

    def _finished(self, task: asyncio.Task[Any]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Solr request failed: %s", exc, exc_info=exc)

    @property
    def pending(self) -> int:
        """Number of requests still in flight."""
        return len(self._tasks)
