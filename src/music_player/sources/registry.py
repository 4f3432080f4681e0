"""Lookup of music source implementations by kind."""

import logging

from ..config import get_settings
from ..errors import NoSourceSetError
from .base import MusicSource, SourceKind

logger = logging.getLogger(__name__)

_registry: dict[SourceKind, type[MusicSource]] = {}


def register_source(cls: type[MusicSource]) -> type[MusicSource]:
    """Class decorator registering a source under its ``kind``."""
    kind = SourceKind(cls.kind)
    if kind in _registry and _registry[kind] is not cls:
        logger.warning(f"Replacing registered source for '{kind.value}'")
    _registry[kind] = cls
    return cls


def _coerce_kind(kind: SourceKind | str) -> SourceKind:
    try:
        return SourceKind(kind)
    except ValueError:
        raise NoSourceSetError(f"Unknown music source: {kind}") from None


def create_source(kind: SourceKind | str) -> MusicSource:
    """Build a fresh source instance for ``kind``."""
    source_kind = _coerce_kind(kind)
    cls = _registry.get(source_kind)
    if cls is None:
        raise NoSourceSetError(f"Unknown music source: {source_kind.value}")
    return cls()


def available_sources() -> list[SourceKind]:
    """Registered source kinds that are enabled in settings."""
    enabled = set(get_settings().sources.enabled)
    return [kind for kind in _registry if kind.value in enabled]
