"""Player session: playback state machine, queue editing and auto-advance."""

import asyncio
import logging

from ..config import get_settings
from ..errors import NoSourceSetError
from ..sources.base import MusicSource, Song
from .state import PlaybackProgress, PlaybackState, QueueItem, SessionState
from .ticker import ProgressTicker

logger = logging.getLogger(__name__)

NO_SONG_TO_PLAY = "No song to play"
CANNOT_REMOVE_PLAYING = "Cannot remove currently playing song"


def format_time(seconds: float) -> str:
    """Format seconds as m:ss."""
    total = max(0, int(seconds))
    return f"{total // 60}:{total % 60:02d}"


def _progress_for(song: Song | None) -> PlaybackProgress:
    return PlaybackProgress(0, song.duration if song else 0)


class PlayerSession:
    """Owns a SessionState and drives it from source results.

    Commands are coroutines and run one at a time: each holds ``_lock`` from
    its first state write until its source call has completed and the result
    is applied. Catalog loads are the exception. ``set_source`` releases the
    lock while ``load_songs()`` is pending so a newer switch can supersede it.

    Source failures never escape a command: they become
    ``PlaybackState.ERROR`` plus an ``error_message``. Commands that are
    rejected up front (nothing to play, removing the playing song) only set
    ``error_message``.
    """

    def __init__(
        self,
        state: SessionState | None = None,
        tick_interval: float | None = None,
    ):
        self.state = state or SessionState()
        if tick_interval is None:
            tick_interval = get_settings().player.tick_interval
        self._ticker = ProgressTicker(self.tick, tick_interval)
        self._lock = asyncio.Lock()
        # Bumped on every set_source so late catalog loads can be discarded
        self._load_generation = 0

    async def start(self):
        """Start the progress ticker."""
        await self._ticker.start()

    async def close(self):
        """Stop the progress ticker and drop subscribers."""
        await self._ticker.stop()
        self.state.clear_subscribers()

    async def __aenter__(self) -> "PlayerSession":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

    # Source management

    async def set_source(self, source: MusicSource | None):
        """Switch to ``source`` and rebuild the queue from its catalog."""
        async with self._lock:
            if source is None:
                await self.state.update(error_message=NoSourceSetError.message)
                return

            self._load_generation += 1
            generation = self._load_generation
            logger.info(f"Switching source to {source.display_name}")
            await self.state.update(current_source=source, playback_state=PlaybackState.LOADING)

        try:
            songs = list(await source.load_songs())
        except Exception as e:
            async with self._lock:
                if generation != self._load_generation:
                    logger.debug(f"Ignoring failed load from superseded {source.display_name}")
                    return
                await self._handle_error(e)
            return

        async with self._lock:
            if generation != self._load_generation:
                logger.debug(f"Ignoring late catalog from {source.display_name}")
                return

            first = songs[0] if songs else None
            await self.state.update(
                available_songs=songs,
                queue=[QueueItem(song) for song in songs],
                current_index=0,
                current_song=first,
                playback_state=PlaybackState.STOPPED,
                playback_progress=_progress_for(first),
            )

    # Playback controls

    async def play(self):
        """Play the current song."""
        async with self._lock:
            await self._play()

    async def pause(self):
        async with self._lock:
            await self._pause()

    async def stop(self):
        async with self._lock:
            await self._stop()

    async def skip(self):
        """Advance to the next queue item, looping back to the start."""
        async with self._lock:
            await self._skip()

    async def previous(self):
        """Step back one queue item, looping round to the end."""
        async with self._lock:
            if self.state.current_index > 0:
                prev_index = self.state.current_index - 1
            else:
                prev_index = max(len(self.state.queue) - 1, 0)
            await self._select(prev_index)
            await self._play()

    async def seek(self, time: float):
        """Jump to ``time`` seconds. Out-of-range positions are ignored."""
        async with self._lock:
            source = self.state.current_source
            song = self.state.current_song
            if source is None or song is None:
                return
            if not 0 <= time <= song.duration:
                logger.debug(f"Ignoring seek to {time}s outside 0-{song.duration}s")
                return

            try:
                await source.seek(time)
            except Exception as e:
                await self._handle_error(e)
                return
            await self.state.update(playback_progress=PlaybackProgress(time, song.duration))

    # Queue management

    async def add_to_queue(self, song: Song):
        async with self._lock:
            await self.state.update(queue=[*self.state.queue, QueueItem(song)])

    async def remove_from_queue(self, index: int):
        async with self._lock:
            queue = list(self.state.queue)
            if not 0 <= index < len(queue):
                return

            current_index = self.state.current_index
            if index == current_index and self.state.playback_state == PlaybackState.PLAYING:
                logger.warning(CANNOT_REMOVE_PLAYING)
                await self.state.update(error_message=CANNOT_REMOVE_PLAYING)
                return

            del queue[index]
            changes = {"queue": queue}
            if index < current_index:
                changes["current_index"] = current_index - 1
            elif index == current_index:
                # The slot now holds the following item (or the new last one)
                new_index = min(current_index, len(queue) - 1) if queue else 0
                song = None
                if queue and self.state.current_song is not None:
                    song = queue[new_index].song
                changes.update(
                    current_index=new_index,
                    current_song=song,
                    playback_progress=_progress_for(song),
                )
            await self.state.update(**changes)

    async def reorder_queue(self, from_index: int, to_index: int):
        """Move the item at ``from_index`` so it ends up at ``to_index``."""
        async with self._lock:
            queue = list(self.state.queue)
            if not (0 <= from_index < len(queue) and 0 <= to_index < len(queue)):
                return
            if from_index == to_index:
                return

            queue.insert(to_index, queue.pop(from_index))

            current_index = self.state.current_index
            if from_index == current_index:
                current_index = to_index
            elif from_index < current_index <= to_index:
                current_index -= 1
            elif to_index <= current_index < from_index:
                current_index += 1
            await self.state.update(queue=queue, current_index=current_index)

    async def clear_queue(self):
        async with self._lock:
            await self._stop()
            await self.state.update(
                queue=[],
                current_index=0,
                current_song=None,
                playback_progress=PlaybackProgress(0, 0),
            )

    async def play_song(self, index: int):
        """Jump to the queue item at ``index`` and play it."""
        async with self._lock:
            if not 0 <= index < len(self.state.queue):
                return
            await self._select(index)
            await self._play()

    # Errors

    async def clear_error(self):
        async with self._lock:
            await self.state.update(error_message=None)

    async def _handle_error(self, error: Exception):
        message = str(error) or getattr(error, "message", type(error).__name__)
        logger.error(f"Player error: {message}")
        await self.state.update(playback_state=PlaybackState.ERROR, error_message=message)

    # Progress

    async def tick(self):
        """Advance simulated progress by one second while playing."""
        async with self._lock:
            song = self.state.current_song
            if self.state.playback_state != PlaybackState.PLAYING or song is None:
                return

            current_time = min(self.state.playback_progress.current_time + 1, song.duration)
            await self.state.update(playback_progress=PlaybackProgress(current_time, song.duration))

            if current_time >= song.duration:
                logger.info(f"'{song.title}' finished, advancing")
                await self._skip()

    # Queries

    def is_current_song(self, song: Song) -> bool:
        return self.state.current_song is not None and self.state.current_song == song

    def get_current_queue_index(self) -> int:
        return self.state.current_index

    # Lock-free bodies; callers hold _lock

    async def _play(self):
        song = self.state.current_song
        source = self.state.current_source
        if song is None or source is None:
            logger.warning(NO_SONG_TO_PLAY)
            await self.state.update(error_message=NO_SONG_TO_PLAY)
            return

        await self.state.update(playback_state=PlaybackState.LOADING)
        try:
            await source.play(song)
        except Exception as e:
            await self._handle_error(e)
            return
        await self.state.update(playback_state=PlaybackState.PLAYING)

    async def _pause(self):
        # Forwarded whatever the current state is
        source = self.state.current_source
        if source is None:
            return

        await self.state.update(playback_state=PlaybackState.LOADING)
        try:
            await source.pause()
        except Exception as e:
            await self._handle_error(e)
            return
        await self.state.update(playback_state=PlaybackState.PAUSED)

    async def _stop(self):
        source = self.state.current_source
        if source is None:
            return

        await self.state.update(playback_state=PlaybackState.LOADING)
        try:
            await source.stop()
        except Exception as e:
            await self._handle_error(e)
            return
        await self.state.update(
            playback_state=PlaybackState.STOPPED,
            playback_progress=_progress_for(self.state.current_song),
        )

    async def _skip(self):
        next_index = self.state.current_index + 1
        if next_index >= len(self.state.queue):
            next_index = 0
        await self._select(next_index)
        await self._play()

    async def _select(self, index: int):
        queue = self.state.queue
        song = queue[index].song if 0 <= index < len(queue) else None
        await self.state.update(
            current_index=index,
            current_song=song,
            playback_progress=_progress_for(song),
        )
