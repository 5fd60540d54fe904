"""Base transport interface — How a built query reaches the search backend.

The manager never waits on a transport. It hands over the query together
with a ``deliver`` callback and a cancellation token; the transport calls
``deliver`` with the decoded response whenever it arrives. A transport that
accepts a ``fail`` callback reports a failed request through it instead.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from facetsync.models.query import QueryObject

logger = logging.getLogger(__name__)

Deliver = Callable[[Any], Any]
Fail = Callable[[BaseException], Any]


class CancellationToken:
    """Signals that a request's response is no longer wanted."""

    def __init__(self) -> None:
        self._cancelled = False
        self._callbacks: list[Callable[[], Any]] = []

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def add_callback(self, callback: Callable[[], Any]) -> None:
        """Run ``callback`` on cancellation, or right away if already cancelled."""
        if self._cancelled:
            callback()
        else:
            self._callbacks.append(callback)

    def cancel(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            try:
                callback()
            except Exception:
                logger.warning("Cancellation callback failed", exc_info=True)


class Transport(ABC):
    """Abstract base class for transports.

    Implementations must eventually pass the backend response to
    ``deliver``, or the error to ``fail``, unless ``token`` is cancelled first.
    """

    @abstractmethod
    def execute(
        self,
        query: QueryObject,
        deliver: Deliver,
        token: CancellationToken,
        fail: Fail | None = None,
    ) -> None:
        """Send the query to the backend.

        Args:
            query: The query built for this request.
            deliver: Callback receiving the decoded response.
            token: Cancelled when a newer request supersedes this one.
            fail: Optional callback receiving the error if the request fails.

        Raises:
            TransportError: If the request cannot be issued at all.
        """
