"""Tests for the command line interface."""

from __future__ import annotations

import json
from typing import Any
from unittest.mock import AsyncMock

import pytest

from facetsync import cli
from facetsync.transports.solr import SolrTransport


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Any) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("facetsync.observability.logging.setup_logging", lambda *args, **kwargs: None)


class TestBuildCommand:
    def test_prints_raw_query_string(self, capsys: pytest.CaptureFixture[str]) -> None:
        cli.main(["build", "--fragment", "#fq=color%3Ared&q=cats&start=20", "--facet", "color", "--raw"])
        out = capsys.readouterr().out.strip()
        assert "facet.field=color" in out
        assert "fq=color:red" in out
        assert "q=cats " in out
        assert "start=20" in out
        assert out.endswith("hl.fl=body")

    def test_encoded_by_default(self, capsys: pytest.CaptureFixture[str]) -> None:
        cli.main(["build", "--fragment", "#q=black%20cats"])
        assert "q=black%20cats%20" in capsys.readouterr().out

    def test_rows(self, capsys: pytest.CaptureFixture[str]) -> None:
        cli.main(["build", "--rows", "10"])
        assert "rows=10" in capsys.readouterr().out

    def test_missing_config(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc:
            cli.main(["build", "--config", "missing.yaml"])
        assert exc.value.code == 1
        assert "Config file not found" in capsys.readouterr().err


class TestSearchCommand:
    def test_prints_json(self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
        fetch = AsyncMock(return_value={"response": {"numFound": 0, "docs": []}})
        monkeypatch.setattr(SolrTransport, "fetch", fetch)

        cli.main(["search", "--fragment", "#q=cats"])

        assert json.loads(capsys.readouterr().out) == {"response": {"numFound": 0, "docs": []}}
        query = fetch.await_args.args[0]
        assert [item.value for item in query.q] == ["cats"]
