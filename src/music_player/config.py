"""Application configuration using TOML + environment variables."""

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Self

from dotenv import load_dotenv

# Load .env file for secrets
load_dotenv()


@dataclass
class ServerConfig:
    """Server settings."""

    host: str = "0.0.0.0"
    port: int = 5174
    debug: bool = False


@dataclass
class PlayerConfig:
    """Player session settings."""

    tick_interval: float = 1.0


@dataclass
class SourcesConfig:
    """Music source settings."""

    default: str = "local"
    enabled: list[str] = field(
        default_factory=lambda: ["local", "spotify", "audiodb", "discogs"]
    )
    # Multiplier for simulated source latency (0 disables the delays)
    latency_scale: float = 1.0


@dataclass
class AudioDBConfig:
    """AudioDB catalog settings."""

    live: bool = False
    base_url: str = "https://www.theaudiodb.com/api/v1/json"
    album_id: str = "2115888"

    # Comes from environment variables (secret); "2" is the public test key
    api_key: str = field(default_factory=lambda: os.getenv("AUDIODB_API_KEY", "2"))


@dataclass
class Settings:
    """Application settings loaded from config.toml and environment."""

    server: ServerConfig = field(default_factory=ServerConfig)
    player: PlayerConfig = field(default_factory=PlayerConfig)
    sources: SourcesConfig = field(default_factory=SourcesConfig)
    audiodb: AudioDBConfig = field(default_factory=AudioDBConfig)

    @classmethod
    def load(cls, config_path: Path | None = None) -> Self:
        """Load settings from config.toml file."""
        if config_path is None:
            # Look for config.toml in current directory or project root
            config_path = Path("config.toml")
            if not config_path.exists():
                config_path = Path(__file__).parent.parent.parent / "config.toml"

        data = {}
        if config_path.exists():
            with open(config_path, "rb") as f:
                data = tomllib.load(f)

        return cls(
            server=ServerConfig(**data.get("server", {})),
            player=PlayerConfig(**data.get("player", {})),
            sources=SourcesConfig(**data.get("sources", {})),
            audiodb=AudioDBConfig(
                **{
                    **data.get("audiodb", {}),
                    # Always load secrets from env
                    "api_key": os.getenv("AUDIODB_API_KEY", "2"),
                }
            ),
        )


# Global settings instance - loaded lazily
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings


def set_settings(settings: Settings) -> None:
    """Replace the global settings instance (used for CLI overrides)."""
    global _settings
    _settings = settings
