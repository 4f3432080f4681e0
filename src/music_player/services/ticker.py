"""Background progress ticker for a player session."""

import asyncio
import logging
from typing import Awaitable, Callable

logger = logging.getLogger(__name__)


class ProgressTicker:
    """Runs one recurring task that calls ``on_tick`` every ``interval`` seconds."""

    def __init__(self, on_tick: Callable[[], Awaitable[None]], interval: float = 1.0):
        self._on_tick = on_tick
        self._interval = interval
        self._running = False
        self._task: asyncio.Task | None = None

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def is_running(self) -> bool:
        return self._running

    async def start(self):
        """Start the background tick task."""
        if self._running:
            return

        self._running = True
        self._task = asyncio.create_task(self._tick_loop())
        logger.info(f"Progress ticker started ({self._interval}s interval)")

    async def stop(self):
        """Stop the background tick task."""
        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        logger.info("Progress ticker stopped")

    async def _tick_loop(self):
        """Main tick loop."""
        while self._running:
            await asyncio.sleep(self._interval)
            try:
                await self._on_tick()
            except Exception as e:
                logger.error(f"Progress tick error: {e}")
