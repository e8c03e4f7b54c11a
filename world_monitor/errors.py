"""Exception types raised by the world monitor."""


class WorldMonitorError(Exception):
    """Base class for world monitor errors."""


class ConfigError(WorldMonitorError):
    """Required configuration is missing or invalid."""

    def __init__(self, message: str, missing: list[str] | None = None):
        super().__init__(message)
        self.missing = list(missing or [])


class FetchError(WorldMonitorError):
    """The status page could not be fetched."""
