"""AudioDB music source.

By default this serves a built-in catalog like the other mock sources. With
``audiodb.live`` enabled the catalog comes from TheAudioDB's public JSON API,
falling back to the built-in catalog if the request fails.
"""

import logging

import httpx

from ..config import get_settings
from ..errors import NetworkError
from .base import Song, SourceKind
from .registry import register_source
from .simulated import SimulatedSource

logger = logging.getLogger(__name__)

# Reusable client for connection pooling
_http_client: httpx.AsyncClient | None = None


def _get_client() -> httpx.AsyncClient:
    """Get or create the HTTP client."""
    global _http_client
    if _http_client is None:
        _http_client = httpx.AsyncClient(
            timeout=httpx.Timeout(10.0, connect=15.0),
            follow_redirects=True,
        )
    return _http_client


async def close_client() -> None:
    """Close the shared HTTP client, if one was created."""
    global _http_client
    if _http_client is not None:
        await _http_client.aclose()
        _http_client = None


def parse_tracks(data: dict | None) -> list[Song]:
    """Convert an AudioDB ``track`` payload into songs.

    ``intDuration`` is reported in milliseconds. Tracks without a title or a
    positive duration can't be played and are dropped.
    """
    tracks = (data or {}).get("track") or []
    songs = []
    for track in tracks:
        title = track.get("strTrack")
        try:
            duration = int(track.get("intDuration") or 0) / 1000
        except (TypeError, ValueError):
            duration = 0
        if not title or duration <= 0:
            logger.debug(f"Skipping AudioDB track without title/duration: {track}")
            continue
        songs.append(
            Song(
                title=title,
                artist=track.get("strArtist") or "Unknown Artist",
                album=track.get("strAlbum"),
                duration=duration,
                source=SourceKind.AUDIODB,
                artwork_url=track.get("strTrackThumb") or None,
                stream_url=track.get("strMusicVid") or None,
            )
        )
    return songs


@register_source
class AudioDBMusicSource(SimulatedSource):
    """AudioDB catalog source."""

    kind = SourceKind.AUDIODB
    load_latency = 1.2
    play_latency = 0.6
    default_duration = 210.0

    def _catalog(self) -> list[Song]:
        tracks = [
            ("AudioDB Song 1", "Artist A", "AudioDB Album 1", 210),
            ("AudioDB Song 2", "Artist B", "AudioDB Album 2", 225),
            ("AudioDB Song 3", "Artist C", "AudioDB Album 3", 198),
        ]
        return [
            Song(
                title=title,
                artist=artist,
                album=album,
                duration=duration,
                source=self.kind,
                artwork_url=f"https://audiodb.com/artwork/{i}.jpg",
            )
            for i, (title, artist, album, duration) in enumerate(tracks, start=1)
        ]

    async def load_songs(self) -> list[Song]:
        settings = get_settings()
        if not settings.audiodb.live:
            return await super().load_songs()

        url = f"{settings.audiodb.base_url}/{settings.audiodb.api_key}/track.php"
        logger.info(f"Loading songs from AudioDB album {settings.audiodb.album_id}")
        try:
            resp = await _get_client().get(url, params={"m": settings.audiodb.album_id})
            resp.raise_for_status()
            songs = parse_tracks(resp.json())
        except httpx.TimeoutException:
            logger.warning("AudioDB catalog request timed out, using built-in catalog")
            return self._catalog()
        except httpx.HTTPStatusError as e:
            logger.warning(
                f"AudioDB HTTP error {e.response.status_code}, using built-in catalog"
            )
            return self._catalog()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"AudioDB catalog request failed ({e}), using built-in catalog")
            return self._catalog()

        logger.info(f"Loaded {len(songs)} songs from AudioDB API")
        return songs

    async def play(self, song: Song) -> None:
        if song.stream_url:
            logger.debug(f"AudioDB: stream reference {song.stream_url}")
        await super().play(song)

    async def search_tracks(self, artist: str, title: str) -> list[Song]:
        """Search AudioDB for a track by artist and title.

        Raises:
            NetworkError: the request failed or returned an unusable payload.
        """
        settings = get_settings()
        url = f"{settings.audiodb.base_url}/{settings.audiodb.api_key}/searchtrack.php"
        try:
            resp = await _get_client().get(url, params={"s": artist, "t": title})
            resp.raise_for_status()
            return parse_tracks(resp.json())
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"AudioDB search failed for '{artist} - {title}': {e}")
            raise NetworkError(f"AudioDB search failed: {e}") from e
