"""Polling Watcher — Reacts to fragment changes made outside the manager.

Back/forward navigation changes the fragment without telling anyone, so the
watcher compares the live fragment with the manager's cached copy on a fixed
schedule and reloads the search state when they diverge.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from facetsync.models.outcome import WatchOutcome

if TYPE_CHECKING:
    from facetsync.config.settings import Settings
    from facetsync.core.manager import FacetManager

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL = 0.25


class PollingWatcher:
    """Cancellable polling task bound to a manager.

    Call ``tick()`` directly to check once; ``start()`` and ``stop()`` manage
    a background task that ticks every ``interval`` seconds.

    Args:
        manager: Manager whose fragment is watched.
        interval: Seconds between ticks.
    """

    def __init__(self, manager: FacetManager, interval: float = DEFAULT_INTERVAL) -> None:
        self.manager = manager
        self.interval = interval
        self._task: asyncio.Task[None] | None = None

    @classmethod
    def from_settings(cls, manager: FacetManager, settings: Settings) -> PollingWatcher:
        return cls(manager, interval=settings.watcher.interval)

    def tick(self) -> WatchOutcome:
        """Compare the live fragment with the cached one and react.

        An empty fragment means the user went back past the first search
        state, so history steps back once more instead of running an empty
        query.
        """
        live = self.manager.navigation.read_fragment()

        if not live:
            self.manager.navigation.go_back()
            return WatchOutcome.STEPPED_BACK

        if live == self.manager.fragment:
            return WatchOutcome.UNCHANGED

        logger.info("Fragment changed to %s, reloading", live)
        self.manager.load_query_from_fragment()
        self.manager.run_initial_request()
        return WatchOutcome.RELOADED

    def start(self) -> None:
        """Start ticking in the background. Requires a running event loop."""
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())

    async def stop(self) -> None:
        """Stop the background task and wait for it to finish."""
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            try:
                self.tick()
            except Exception:
                logger.exception("Fragment check failed")
