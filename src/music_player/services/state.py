"""Playback session state and change notification."""

import asyncio
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Awaitable, Callable, Iterable

from ..sources.base import MusicSource, Song

logger = logging.getLogger(__name__)


class PlaybackState(str, Enum):
    STOPPED = "stopped"
    PLAYING = "playing"
    PAUSED = "paused"
    LOADING = "loading"
    ERROR = "error"


@dataclass(frozen=True)
class PlaybackProgress:
    """Position within the current song, in seconds."""

    current_time: float = 0.0
    duration: float = 0.0

    @property
    def progress(self) -> float:
        """Fraction played, 0.0 to 1.0."""
        if self.duration > 0:
            return self.current_time / self.duration
        return 0.0

    def to_dict(self) -> dict:
        return {
            "current_time": self.current_time,
            "duration": self.duration,
            "progress": self.progress,
        }


@dataclass(frozen=True)
class QueueItem:
    """A song's slot in the queue. The same song may be queued more than once."""

    song: Song
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    added_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "song": self.song.to_dict(),
            "added_at": self.added_at.isoformat(),
        }


@dataclass(frozen=True)
class StateChange:
    """Notification for a single field that changed value."""

    field: str
    value: Any


OBSERVABLE_FIELDS = (
    "current_source",
    "available_songs",
    "queue",
    "current_index",
    "current_song",
    "playback_state",
    "playback_progress",
    "error_message",
)

Subscriber = Callable[[StateChange], Awaitable[None]]


def serialize_field(name: str, value: Any) -> Any:
    """Convert a state field value to something JSON can encode."""
    if name == "current_source":
        if value is None:
            return None
        return {"kind": value.kind.value, "display_name": value.display_name}
    if name in ("available_songs", "queue"):
        return [item.to_dict() for item in value]
    if isinstance(value, Enum):
        return value.value
    if value is None or isinstance(value, (str, int, float)):
        return value
    return value.to_dict()


@dataclass
class SessionState:
    """State of a player session.

    Only the owning PlayerSession writes to it, through ``update()``.
    Sequences are stored as tuples so that every value handed to a subscriber
    is a snapshot.
    """

    current_source: MusicSource | None = None
    available_songs: tuple[Song, ...] = ()
    queue: tuple[QueueItem, ...] = ()
    current_index: int = 0
    current_song: Song | None = None
    playback_state: PlaybackState = PlaybackState.STOPPED
    playback_progress: PlaybackProgress = field(default_factory=PlaybackProgress)
    error_message: str | None = None
    last_updated: datetime = field(default_factory=datetime.now)

    # Subscribers for state changes, each with an optional field filter
    _subscribers: list[tuple[Subscriber, frozenset[str] | None]] = field(
        default_factory=list, repr=False
    )

    def subscribe(self, callback: Subscriber, fields: Iterable[str] | None = None):
        """Subscribe to state changes, optionally only for some fields."""
        wanted = None
        if fields is not None:
            wanted = frozenset(fields)
            unknown = wanted - set(OBSERVABLE_FIELDS)
            if unknown:
                raise ValueError(f"Unknown state fields: {sorted(unknown)}")
        self._subscribers.append((callback, wanted))

    def unsubscribe(self, callback: Subscriber):
        """Unsubscribe from state changes."""
        self._subscribers = [(cb, f) for cb, f in self._subscribers if cb != callback]

    def clear_subscribers(self):
        self._subscribers.clear()

    async def update(self, **changes: Any):
        """Apply field changes, then notify subscribers once per changed field.

        All fields are written before the first notification is awaited, so
        subscribers never observe a half-applied transition.
        """
        unknown = set(changes) - set(OBSERVABLE_FIELDS)
        if unknown:
            raise ValueError(f"Unknown state fields: {sorted(unknown)}")

        changed = []
        for name, value in changes.items():
            if name in ("available_songs", "queue"):
                value = tuple(value)
            if self._values_equal(name, getattr(self, name), value):
                continue
            setattr(self, name, value)
            changed.append(StateChange(name, value))

        if not changed:
            return
        self.last_updated = datetime.now()

        for change in changed:
            subscribers = [
                cb for cb, wanted in list(self._subscribers)
                if wanted is None or change.field in wanted
            ]
            await asyncio.gather(
                *[self._safe_notify(callback, change) for callback in subscribers],
                return_exceptions=True,
            )

    async def _safe_notify(self, callback: Subscriber, change: StateChange):
        """Notify a subscriber; one bad subscriber must not break the others."""
        try:
            await callback(change)
        except Exception:
            logger.exception(f"State subscriber failed on '{change.field}' change")

    @staticmethod
    def _values_equal(name: str, a: Any, b: Any) -> bool:
        if name == "current_source":
            return a is b
        return a == b

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        data = {name: serialize_field(name, getattr(self, name)) for name in OBSERVABLE_FIELDS}
        data["last_updated"] = self.last_updated.isoformat()
        return data
