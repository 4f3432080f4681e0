"""Spotify music source (mock catalog, no API calls)."""

from .base import Song, SourceKind
from .registry import register_source
from .simulated import SimulatedSource


@register_source
class SpotifyMusicSource(SimulatedSource):
    """Mock Spotify streaming source."""

    kind = SourceKind.SPOTIFY
    load_latency = 1.0
    play_latency = 0.8
    default_duration = 240.0

    def _catalog(self) -> list[Song]:
        tracks = [
            ("Spotify Song 1", "Artist X", "Spotify Album 1", 240),
            ("Spotify Song 2", "Artist Y", "Spotify Album 2", 260),
            ("Spotify Song 3", "Artist Z", "Spotify Album 3", 195),
        ]
        return [
            Song(
                title=title,
                artist=artist,
                album=album,
                duration=duration,
                source=self.kind,
                stream_url=f"https://spotify.com/stream/{i}",
            )
            for i, (title, artist, album, duration) in enumerate(tracks, start=1)
        ]
