"""Transports — Pluggable senders of built queries.

Built-in transports:
  - solr: Apache Solr select handler, directly or through a passthru proxy

Implement ``Transport`` to reach your own backend.
"""

from facetsync.transports.base import CancellationToken, Deliver, Fail, Transport
from facetsync.transports.exceptions import QueryError, TransportError

__all__ = ["CancellationToken", "Deliver", "Fail", "QueryError", "Transport", "TransportError"]
