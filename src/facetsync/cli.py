"""CLI entry point for facetsync.

Builds the query a set of widgets would issue for a given address fragment,
and optionally runs it against Solr::

    facetsync build --fragment '#fq=color%3Ared&q=cats&start=20' --facet color --raw
    facetsync search --fragment '#q=cats' --facet color -c facetsync.yaml
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from facetsync.transports.base import CancellationToken, Deliver, Fail, Transport
from facetsync.transports.exceptions import TransportError

if TYPE_CHECKING:
    from facetsync.config.settings import Settings
    from facetsync.core.manager import FacetManager
    from facetsync.models.query import QueryObject


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="facetsync",
        description="facetsync — Faceted search query coordination",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"facetsync {_get_version()}",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="Path to YAML configuration file",
    )
    common.add_argument(
        "--fragment",
        "-f",
        type=str,
        default="",
        help="Address fragment to restore the selection from, e.g. '#q=cats&start=0'",
    )
    common.add_argument(
        "--facet",
        action="append",
        default=[],
        metavar="FIELD",
        help="Register a facet widget for FIELD (repeatable)",
    )
    common.add_argument(
        "--rows",
        type=int,
        default=0,
        help="Number of documents to request",
    )
    common.add_argument(
        "--log-level",
        type=str,
        choices=["debug", "info", "warning", "error"],
        default=None,
        help="Log level (overrides config)",
    )

    build = subparsers.add_parser("build", parents=[common], help="Print the backend query string")
    build.add_argument(
        "--raw",
        action="store_true",
        help="Do not percent-encode values",
    )
    subparsers.add_parser("search", parents=[common], help="Run the query against Solr and print JSON")

    args = parser.parse_args(argv)

    settings = _load_settings(args.config)
    if args.log_level:
        settings.observability.log_level = args.log_level

    from facetsync.observability.logging import setup_logging

    setup_logging(settings.observability)

    if args.command == "build":
        manager = _make_manager(settings, args, transport=_NullTransport())
        query = manager.build_query(manager.start)
        print(manager.build_query_string(query, skip_encoding=args.raw))
    else:
        asyncio.run(_search(settings, args))


async def _search(settings: Settings, args: argparse.Namespace) -> None:
    from facetsync.transports.exceptions import QueryError
    from facetsync.transports.solr import SolrTransport

    manager = _make_manager(settings, args)
    transport = manager.transport
    assert isinstance(transport, SolrTransport)
    try:
        data = await transport.fetch(manager.build_query(manager.start))
    except QueryError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    finally:
        await transport.aclose()
    print(json.dumps(data, indent=2, ensure_ascii=False))


def _make_manager(
    settings: Settings,
    args: argparse.Namespace,
    transport: Transport | None = None,
) -> FacetManager:
    """Register the CLI's widgets and restore their selection from ``--fragment``."""
    from facetsync.core.manager import FacetManager
    from facetsync.navigation.memory import InMemoryNavigation
    from facetsync.widgets import FacetWidget, ResultWidget, TextWidget

    manager = FacetManager.from_settings(settings, transport, InMemoryNavigation(args.fragment))
    manager.add_widget(TextWidget())
    for field in args.facet:
        manager.add_widget(FacetWidget(field))
    if args.rows:
        manager.add_widget(ResultWidget(rows=args.rows))
    manager.load_query_from_fragment()
    return manager


def _load_settings(config: str | None) -> Settings:
    from facetsync.config.settings import Settings

    if config:
        config_path = Path(config)
        if not config_path.exists():
            print(f"Error: Config file not found: {config_path}", file=sys.stderr)
            sys.exit(1)
        return Settings.from_yaml(config_path)
    return Settings()


def _get_version() -> str:
    """Get the package version."""
    try:
        from facetsync import __version__

        return __version__
    except ImportError:
        return "unknown"


class _NullTransport(Transport):
    """Transport for commands that only build queries."""

    def execute(
        self,
        query: QueryObject,
        deliver: Deliver,
        token: CancellationToken,
        fail: Fail | None = None,
    ) -> None:
        raise TransportError("The build command does not execute requests.")


if __name__ == "__main__":
    main()
