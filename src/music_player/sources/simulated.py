"""Shared plumbing for the simulated (mock) music sources."""

import asyncio
import logging
from abc import abstractmethod

from ..config import get_settings
from .base import MusicSource, Song

logger = logging.getLogger(__name__)


class SimulatedSource(MusicSource):
    """Music source that fakes playback with per-instance state and latency.

    Subclasses provide ``kind``, a catalog via ``_catalog()`` and optionally
    tune the class-level latencies (seconds, scaled by
    ``sources.latency_scale``).
    """

    load_latency: float = 0.0
    play_latency: float = 0.0
    default_duration: float = 180.0

    def __init__(self, latency_scale: float | None = None):
        if latency_scale is None:
            latency_scale = get_settings().sources.latency_scale
        self._latency_scale = max(0.0, latency_scale)
        self._current_song: Song | None = None
        self._position: float = 0.0
        self._is_playing = False

    @abstractmethod
    def _catalog(self) -> list[Song]:
        """Songs this source offers."""

    async def _delay(self, seconds: float) -> None:
        delay = seconds * self._latency_scale
        if delay > 0:
            await asyncio.sleep(delay)

    async def load_songs(self) -> list[Song]:
        logger.info(f"Loading songs from {self.display_name}...")
        await self._delay(self.load_latency)
        songs = self._catalog()
        logger.info(f"Loaded {len(songs)} songs from {self.display_name}")
        return songs

    async def play(self, song: Song) -> None:
        logger.info(f"{self.display_name}: playing '{song.title}' by {song.artist}")
        await self._delay(self.play_latency)
        if self._current_song != song:
            self._position = 0.0
        self._current_song = song
        self._is_playing = True

    async def pause(self) -> None:
        logger.info(f"{self.display_name}: pausing")
        self._is_playing = False

    async def stop(self) -> None:
        logger.info(f"{self.display_name}: stopping")
        self._is_playing = False
        self._position = 0.0

    async def seek(self, time: float) -> None:
        logger.info(f"{self.display_name}: seeking to {time:.0f}s")
        self._position = time

    async def get_current_time(self) -> float:
        return self._position

    async def get_duration(self) -> float:
        if self._current_song is not None:
            return self._current_song.duration
        return self.default_duration
