"""Local file music source (simulated library scan)."""

from .base import Song, SourceKind
from .registry import register_source
from .simulated import SimulatedSource


@register_source
class LocalMusicSource(SimulatedSource):
    """Songs from the local library."""

    kind = SourceKind.LOCAL
    play_latency = 0.5
    default_duration = 180.0

    def _catalog(self) -> list[Song]:
        return [
            Song(
                title="Local Song 1",
                artist="Artist A",
                album="Local Album 1",
                duration=180,
                source=self.kind,
                local_path="/path/to/song1.mp3",
            ),
            Song(
                title="Local Song 2",
                artist="Artist B",
                album="Local Album 2",
                duration=200,
                source=self.kind,
                local_path="/path/to/song2.mp3",
            ),
            Song(
                title="Local Song 3",
                artist="Artist C",
                album="Local Album 3",
                duration=165,
                source=self.kind,
                local_path="/path/to/song3.mp3",
            ),
        ]
