"""Discogs music source (mock catalog)."""

from .base import Song, SourceKind
from .registry import register_source
from .simulated import SimulatedSource


@register_source
class DiscogsMusicSource(SimulatedSource):
    kind = SourceKind.DISCOGS
    load_latency = 1.5
    play_latency = 0.7
    default_duration = 185.0

    def _catalog(self) -> list[Song]:
        tracks = [
            ("Discogs Song 1", "Artist X", "Discogs Album 1", 185),
            ("Discogs Song 2", "Artist Y", "Discogs Album 2", 220),
            ("Discogs Song 3", "Artist Z", "Discogs Album 3", 175),
        ]
        return [
            Song(
                title=title,
                artist=artist,
                album=album,
                duration=duration,
                source=self.kind,
                artwork_url=f"https://discogs.com/artwork/{i}.jpg",
            )
            for i, (title, artist, album, duration) in enumerate(tracks, start=1)
        ]
