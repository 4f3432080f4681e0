"""UI-facing projection of a player session."""

import logging

from ..sources.base import Song
from .player import PlayerSession, format_time
from .state import PlaybackProgress, PlaybackState, QueueItem, StateChange

logger = logging.getLogger(__name__)

NO_SONG_TITLE = "No song selected"
UNKNOWN_ALBUM = "Unknown Album"
NO_SOURCE_NAME = "No source"


class PlayerViewModel:
    """Keeps display-ready fields in sync with a PlayerSession.

    Call ``attach()`` to start following the session and ``detach()`` to stop.
    """

    def __init__(self, session: PlayerSession):
        self._session = session
        self._attached = False

        self.current_song_title = NO_SONG_TITLE
        self.current_artist = ""
        self.current_album = ""
        self.is_playing = False
        self.is_paused = False
        self.is_loading = False
        self.current_time = "0:00"
        self.total_time = "0:00"
        self.progress = 0.0
        self.queue_items: list[QueueItem] = []
        self.available_songs: list[Song] = []
        self.current_source_name = NO_SOURCE_NAME
        self.error_message: str | None = None
        self.show_error = False

    def attach(self):
        """Subscribe to the session and load its current values."""
        if self._attached:
            return
        state = self._session.state
        self._apply_song(state.current_song)
        self._apply_playback_state(state.playback_state)
        self._apply_progress(state.playback_progress)
        self.queue_items = list(state.queue)
        self.available_songs = list(state.available_songs)
        if state.current_source is not None:
            self.current_source_name = state.current_source.display_name
        self._apply_error(state.error_message)

        state.subscribe(self._on_change)
        self._attached = True

    def detach(self):
        if self._attached:
            self._session.state.unsubscribe(self._on_change)
            self._attached = False

    async def _on_change(self, change: StateChange):
        match change.field:
            case "current_song":
                self._apply_song(change.value)
            case "playback_state":
                self._apply_playback_state(change.value)
            case "playback_progress":
                self._apply_progress(change.value)
            case "queue":
                self.queue_items = list(change.value)
            case "available_songs":
                self.available_songs = list(change.value)
            case "current_source":
                # Keep the last name when the source is cleared
                if change.value is not None:
                    self.current_source_name = change.value.display_name
            case "error_message":
                self._apply_error(change.value)

    def _apply_song(self, song: Song | None):
        # A cleared song keeps the last title on screen
        if song is None:
            return
        self.current_song_title = song.title
        self.current_artist = song.artist
        self.current_album = song.album or UNKNOWN_ALBUM

    def _apply_playback_state(self, state: PlaybackState):
        if state == PlaybackState.LOADING:
            # Leave the playing/paused flags alone while a command is in flight
            self.is_loading = True
            return
        self.is_playing = state == PlaybackState.PLAYING
        self.is_paused = state == PlaybackState.PAUSED
        self.is_loading = False

    def _apply_progress(self, progress: PlaybackProgress):
        self.current_time = format_time(progress.current_time)
        self.total_time = format_time(progress.duration)
        self.progress = progress.progress

    def _apply_error(self, message: str | None):
        self.error_message = message
        self.show_error = message is not None

    # User actions

    async def play_pause_toggle(self):
        if self.is_playing:
            await self._session.pause()
        else:
            await self._session.play()

    async def seek_fraction(self, fraction: float):
        """Seek to a fraction (0.0-1.0) of the current song."""
        song = self._session.state.current_song
        if song is None:
            return
        await self._session.seek(song.duration * fraction)

    def is_current_song(self, song: Song) -> bool:
        return self._session.is_current_song(song)

    def get_current_queue_index(self) -> int:
        return self._session.get_current_queue_index()

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        return {
            "current_song_title": self.current_song_title,
            "current_artist": self.current_artist,
            "current_album": self.current_album,
            "is_playing": self.is_playing,
            "is_paused": self.is_paused,
            "is_loading": self.is_loading,
            "current_time": self.current_time,
            "total_time": self.total_time,
            "progress": self.progress,
            "queue_items": [item.to_dict() for item in self.queue_items],
            "current_queue_index": self.get_current_queue_index(),
            "available_songs": [song.to_dict() for song in self.available_songs],
            "current_source_name": self.current_source_name,
            "error_message": self.error_message,
            "show_error": self.show_error,
        }
