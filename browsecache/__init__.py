"""Public package surface for browsecache.

``SummaryCache`` is the entry point; the other exports are its inputs and
outputs.
"""

from __future__ import annotations

from .cache import SummaryCache
from .config import CacheConfig, load_config
from .errors import BrowseCacheError, ConfigError, SummaryDecodeError
from .identifiers import parse_identifier
from .models import DocumentInfo, FileSummary, FolderInfo, RepoSummary, SolutionSummary, UserSummary
from .refresh import BackgroundRefresher

__all__ = [
    "SummaryCache",
    "CacheConfig",
    "load_config",
    "BackgroundRefresher",
    "BrowseCacheError",
    "ConfigError",
    "SummaryDecodeError",
    "parse_identifier",
    "DocumentInfo",
    "FileSummary",
    "FolderInfo",
    "RepoSummary",
    "SolutionSummary",
    "UserSummary",
]
