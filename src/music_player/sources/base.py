"""Abstract base class for music sources."""

import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum


class SourceKind(str, Enum):
    """Tag identifying which backend a song or source belongs to."""

    LOCAL = "local"
    SPOTIFY = "spotify"
    AUDIODB = "audiodb"
    DISCOGS = "discogs"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]


_DISPLAY_NAMES = {
    SourceKind.LOCAL: "Local Files",
    SourceKind.SPOTIFY: "Spotify",
    SourceKind.AUDIODB: "AudioDB",
    SourceKind.DISCOGS: "Discogs",
}


@dataclass(frozen=True)
class Song:
    """A playable song from any source.

    Two songs are equal when their ids match, whatever their metadata.
    """

    title: str = field(compare=False)
    artist: str = field(compare=False)
    duration: float = field(compare=False)  # seconds
    source: SourceKind = field(compare=False)
    album: str | None = field(default=None, compare=False)
    artwork_url: str | None = field(default=None, compare=False)
    stream_url: str | None = field(default=None, compare=False)
    local_path: str | None = field(default=None, compare=False)
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        return {
            "id": self.id,
            "title": self.title,
            "artist": self.artist,
            "album": self.album,
            "duration": self.duration,
            "source": self.source.value,
            "artwork_url": self.artwork_url,
            "stream_url": self.stream_url,
            "local_path": self.local_path,
        }


class MusicSource(ABC):
    """Abstract base class for music source integrations.

    Every operation is a coroutine. Implementations must not block the event
    loop; blocking work belongs in an executor.
    """

    @property
    @abstractmethod
    def kind(self) -> SourceKind:
        """Return the source kind tag."""
        pass

    @property
    def display_name(self) -> str:
        return self.kind.display_name

    @abstractmethod
    async def load_songs(self) -> list[Song]:
        """Load the source's catalog (may be empty)."""
        pass

    @abstractmethod
    async def play(self, song: Song) -> None:
        pass

    @abstractmethod
    async def pause(self) -> None:
        pass

    @abstractmethod
    async def stop(self) -> None:
        pass

    @abstractmethod
    async def seek(self, time: float) -> None:
        pass

    @abstractmethod
    async def get_current_time(self) -> float:
        pass

    @abstractmethod
    async def get_duration(self) -> float:
        pass
