"""Exception types raised inside browsecache."""

from __future__ import annotations

from pathlib import Path


class BrowseCacheError(RuntimeError):
    """Base class for browsecache failures."""


class SummaryDecodeError(BrowseCacheError):
    """Raised when a sidecar file is missing, unreadable, or malformed.

    The cache accessor treats this as a signal to rebuild; it never reaches
    summary consumers.
    """

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


class ConfigError(BrowseCacheError):
    """Raised when the configuration file cannot be used."""


__all__ = ["BrowseCacheError", "SummaryDecodeError", "ConfigError"]
