"""Player error types."""


class PlayerError(Exception):
    """Base class for player errors."""

    message = "Player error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)


class NoSourceSetError(PlayerError):
    message = "No music source is set"


class NoSongsAvailableError(PlayerError):
    message = "No songs available to play"


class InvalidSongError(PlayerError):
    message = "Invalid song selected"


class NetworkError(PlayerError):
    message = "Network error occurred"


class AudioSessionError(PlayerError):
    message = "Audio session error"
