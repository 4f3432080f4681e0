"""Music sources.

Importing this package registers every built-in source with the registry:

  local.py    - local library (simulated)
  spotify.py  - Spotify (mock)
  audiodb.py  - AudioDB (mock, optional live catalog over HTTP)
  discogs.py  - Discogs (mock)
"""

# Registration order is menu order
from . import local, spotify, audiodb, discogs  # noqa: F401, I001
from .base import MusicSource, Song, SourceKind
from .registry import available_sources, create_source, register_source

__all__ = [
    "MusicSource",
    "Song",
    "SourceKind",
    "available_sources",
    "create_source",
    "register_source",
]
