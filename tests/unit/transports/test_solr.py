"""Tests for the Apache Solr transport."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any
from unittest.mock import AsyncMock

import httpx
import pytest

from facetsync.core.builder import QueryBuilder
from facetsync.core.manager import FacetManager
from facetsync.models.query import QueryItem, QueryObject
from facetsync.transports.base import CancellationToken
from facetsync.transports.exceptions import QueryError, TransportError
from facetsync.transports.solr import SolrTransport
from facetsync.widgets import ResultWidget

SOLR_URL = "http://localhost:8983/solr/select/"

# ── Fixtures ──────────────────────────────────────────────────────────────────


@pytest.fixture
def builder() -> QueryBuilder:
    return QueryBuilder(hl_fl="content")


@pytest.fixture
def query() -> QueryObject:
    return QueryObject(q=[QueryItem(value="cats")], fl=["title"], sequence=1)


@pytest.fixture
def solr_response() -> dict[str, Any]:
    return {
        "responseHeader": {"status": 0, "QTime": 3},
        "response": {"numFound": 1, "start": 0, "docs": [{"id": "doc_1", "title": "Cats"}]},
        "facet_counts": {"facet_fields": {"color": ["red", 1]}},
    }


def _client(data: dict[str, Any] | None = None) -> AsyncMock:
    mock_response = AsyncMock(spec=httpx.Response)
    mock_response.status_code = 200
    mock_response.json.return_value = data or {}
    mock_response.raise_for_status = lambda: None

    mock_client = AsyncMock(spec=httpx.AsyncClient)
    mock_client.get.return_value = mock_response
    mock_client.post.return_value = mock_response
    return mock_client


# ── Fetch ────────────────────────────────────────────────────────────────────


class TestSolrFetch:
    async def test_get_request(self, builder: QueryBuilder, query: QueryObject, solr_response: dict) -> None:
        client = _client(solr_response)
        transport = SolrTransport(builder, solr_url=SOLR_URL, client=client)

        data = await transport.fetch(query)

        assert data["response"]["numFound"] == 1
        client.get.assert_awaited_once_with(f"{SOLR_URL}?{builder.serialize(query)}&wt=json")
        client.post.assert_not_called()

    async def test_passthru_post(self, builder: QueryBuilder, query: QueryObject) -> None:
        client = _client({"ok": True})
        transport = SolrTransport(builder, passthru_url="http://proxy/solr.php", client=client)

        await transport.fetch(query)

        client.post.assert_awaited_once_with(
            "http://proxy/solr.php",
            data={"query": builder.serialize(query) + "&wt=json"},
        )
        client.get.assert_not_called()

    async def test_http_error(self, builder: QueryBuilder, query: QueryObject) -> None:
        mock_response = AsyncMock(spec=httpx.Response)
        mock_response.raise_for_status.side_effect = httpx.HTTPStatusError(
            "Internal Server Error",
            request=httpx.Request("GET", "http://test"),
            response=httpx.Response(500),
        )
        client = AsyncMock(spec=httpx.AsyncClient)
        client.get.return_value = mock_response
        transport = SolrTransport(builder, client=client)

        with pytest.raises(QueryError, match="Solr query failed"):
            await transport.fetch(query)

    async def test_connection_error(self, builder: QueryBuilder, query: QueryObject) -> None:
        client = AsyncMock(spec=httpx.AsyncClient)
        client.get.side_effect = httpx.ConnectError("Connection refused")
        transport = SolrTransport(builder, client=client)

        with pytest.raises(QueryError, match="Connection refused"):
            await transport.fetch(query)

    async def test_non_json_body(self, builder: QueryBuilder, query: QueryObject) -> None:
        client = _client()
        client.get.return_value.json.side_effect = json.JSONDecodeError("Expecting value", "<html>", 0)
        transport = SolrTransport(builder, client=client)

        with pytest.raises(QueryError, match="invalid JSON"):
            await transport.fetch(query)


# ── Execute ──────────────────────────────────────────────────────────────────


class TestSolrExecute:
    def test_requires_running_loop(self, builder: QueryBuilder, query: QueryObject) -> None:
        transport = SolrTransport(builder, client=_client())
        with pytest.raises(TransportError, match="running event loop"):
            transport.execute(query, lambda data: None, CancellationToken())

    async def test_delivers_response(self, builder: QueryBuilder, query: QueryObject, solr_response: dict) -> None:
        transport = SolrTransport(builder, client=_client(solr_response))
        delivered: list[Any] = []

        transport.execute(query, delivered.append, CancellationToken())
        assert transport.pending == 1
        await asyncio.sleep(0.01)

        assert delivered == [solr_response]
        assert transport.pending == 0

    async def test_cancelled_request_not_delivered(self, builder: QueryBuilder, query: QueryObject) -> None:
        async def slow_get(*args: Any, **kwargs: Any) -> None:
            await asyncio.sleep(10)

        client = AsyncMock(spec=httpx.AsyncClient)
        client.get.side_effect = slow_get
        transport = SolrTransport(builder, client=client)
        token = CancellationToken()
        delivered: list[Any] = []

        transport.execute(query, delivered.append, token)
        await asyncio.sleep(0)
        token.cancel()
        await asyncio.sleep(0.01)

        assert delivered == []
        assert transport.pending == 0

    async def test_failure_is_logged(
        self, builder: QueryBuilder, query: QueryObject, caplog: pytest.LogCaptureFixture
    ) -> None:
        client = AsyncMock(spec=httpx.AsyncClient)
        client.get.side_effect = httpx.ConnectError("Connection refused")
        transport = SolrTransport(builder, client=client)
        delivered: list[Any] = []

        with caplog.at_level(logging.ERROR, logger="facetsync.transports.solr"):
            transport.execute(query, delivered.append, CancellationToken())
            await asyncio.sleep(0.01)

        assert delivered == []
        assert "Solr request failed" in caplog.text

    async def test_failure_reported_to_callback(self, builder: QueryBuilder, query: QueryObject) -> None:
        client = AsyncMock(spec=httpx.AsyncClient)
        client.get.side_effect = httpx.ConnectError("Connection refused")
        transport = SolrTransport(builder, client=client)
        delivered: list[Any] = []
        failures: list[BaseException] = []

        transport.execute(query, delivered.append, CancellationToken(), failures.append)
        await asyncio.sleep(0.01)

        assert delivered == []
        assert len(failures) == 1
        assert isinstance(failures[0], QueryError)
        assert transport.pending == 0

    async def test_failure_ends_manager_animations(self, builder: QueryBuilder) -> None:
        client = _client()
        client.get.return_value.json.side_effect = ValueError("not JSON")
        manager = FacetManager(SolrTransport(builder, client=client))
        results = ResultWidget()
        manager.add_widget(results)

        manager.run_request()
        assert results.loading
        await asyncio.sleep(0.01)

        assert not results.loading
        assert manager.last_response is None

    async def test_aclose(self, builder: QueryBuilder) -> None:
        client = _client()
        transport = SolrTransport(builder, client=client)
        await transport.aclose()
        client.aclose.assert_awaited_once()
