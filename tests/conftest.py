"""Shared test fixtures and configuration."""

import asyncio
from unittest.mock import patch

import pytest

from music_player.config import (
    AudioDBConfig,
    PlayerConfig,
    ServerConfig,
    Settings,
    SourcesConfig,
)
from music_player.services.player import PlayerSession
from music_player.sources.base import MusicSource, Song, SourceKind


def make_song(
    title: str = "Test Song",
    duration: float = 180,
    artist: str = "Test Artist",
    album: str | None = "Test Album",
) -> Song:
    """Helper to create test songs."""
    return Song(
        title=title,
        artist=artist,
        album=album,
        duration=duration,
        source=SourceKind.LOCAL,
    )


async def wait_until(predicate, timeout: float = 1.0):
    """Yield to the event loop until ``predicate()`` holds."""

    async def poll():
        while not predicate():
            await asyncio.sleep(0)

    await asyncio.wait_for(poll(), timeout)


class StubSource(MusicSource):
    """Scriptable music source for driving a PlayerSession in tests.

    ``fail`` maps an operation name ("load_songs", "play", ...) to the
    exception it should raise. ``gates`` maps an operation name to an
    asyncio.Event the operation waits on before completing.
    """

    def __init__(
        self,
        songs: list[Song] | None = None,
        kind: SourceKind = SourceKind.LOCAL,
        fail: dict[str, Exception] | None = None,
        gates: dict[str, asyncio.Event] | None = None,
    ):
        self._songs = list(songs or [])
        self._kind = kind
        self.fail = dict(fail or {})
        self.gates = dict(gates or {})
        self.calls: list[tuple] = []

    @property
    def kind(self) -> SourceKind:
        return self._kind

    async def _run(self, op: str, *args):
        self.calls.append((op, *args))
        gate = self.gates.get(op)
        if gate is not None:
            await gate.wait()
        if op in self.fail:
            raise self.fail[op]

    async def load_songs(self) -> list[Song]:
        await self._run("load_songs")
        return list(self._songs)

    async def play(self, song: Song) -> None:
        await self._run("play", song)

    async def pause(self) -> None:
        await self._run("pause")

    async def stop(self) -> None:
        await self._run("stop")

    async def seek(self, time: float) -> None:
        await self._run("seek", time)

    async def get_current_time(self) -> float:
        return 0.0

    async def get_duration(self) -> float:
        return self._songs[0].duration if self._songs else 0.0

    def op_names(self) -> list[str]:
        return [call[0] for call in self.calls]


@pytest.fixture
def three_songs() -> list[Song]:
    return [
        make_song("Song 1", 180),
        make_song("Song 2", 200),
        make_song("Song 3", 165),
    ]


@pytest.fixture
def stub_source(three_songs) -> StubSource:
    return StubSource(three_songs)


@pytest.fixture
def session() -> PlayerSession:
    """A session whose ticker is never started; tests call tick() directly."""
    return PlayerSession(tick_interval=1.0)


@pytest.fixture
def test_settings() -> Settings:
    """Create test settings with no simulated latency."""
    return Settings(
        server=ServerConfig(host="127.0.0.1", port=5174, debug=True),
        player=PlayerConfig(tick_interval=1.0),
        sources=SourcesConfig(default="local", latency_scale=0.0),
        audiodb=AudioDBConfig(live=False, api_key="2"),
    )


@pytest.fixture
def test_settings_live_audiodb(test_settings) -> Settings:
    test_settings.audiodb.live = True
    return test_settings


@pytest.fixture
def mock_settings(test_settings):
    """Patch get_settings to return test settings."""
    with patch("music_player.config.get_settings", return_value=test_settings):
        with patch("music_player.sources.simulated.get_settings", return_value=test_settings):
            with patch("music_player.sources.audiodb.get_settings", return_value=test_settings):
                with patch("music_player.sources.registry.get_settings", return_value=test_settings):
                    yield test_settings
