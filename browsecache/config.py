"""Cache configuration: storage root and freshness threshold.

Settings live in a JSON object at ``CONFIG_PATH``. Missing or malformed
files and wrong-typed values fall back to defaults.
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass, replace
from pathlib import Path

from platformdirs import user_config_dir, user_data_dir

from .errors import ConfigError

APP_NAME = "browsecache"
CONFIG_FILENAME = "config.json"
DEFAULT_CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
DEFAULT_STORAGE_ROOT = Path(user_data_dir(APP_NAME, appauthor=False)) / "files"
DEFAULT_MAX_AGE_SECONDS = 3600.0
CONFIG_PATH = DEFAULT_CONFIG_PATH


@dataclass(frozen=True)
class CacheConfig:
    """Where the artifact tree lives and how long sidecars stay fresh."""

    storage_root: Path
    max_age_seconds: float = DEFAULT_MAX_AGE_SECONDS

    def __post_init__(self) -> None:
        if not math.isfinite(self.max_age_seconds) or self.max_age_seconds <= 0:
            raise ConfigError("max_age_seconds must be a positive finite number")

    def with_overrides(
        self,
        *,
        storage_root: Path | None = None,
        max_age_seconds: float | None = None,
    ) -> CacheConfig:
        """Return a copy with any explicitly given field replaced."""
        changes: dict[str, object] = {}
        if storage_root is not None:
            changes["storage_root"] = Path(storage_root)
        if max_age_seconds is not None:
            changes["max_age_seconds"] = float(max_age_seconds)
        return replace(self, **changes) if changes else self


def load_config_data(path: Path | None = None) -> dict[str, object]:
    """Load the raw JSON config object, or ``{}`` when unusable."""
    config_path = CONFIG_PATH if path is None else path
    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except Exception:
        return {}
    return data if isinstance(data, dict) else {}


def _load_storage_root(data: dict[str, object]) -> Path:
    value = data.get("storage_root")
    if isinstance(value, str) and value.strip():
        return Path(value).expanduser()
    return DEFAULT_STORAGE_ROOT


def _load_max_age(data: dict[str, object]) -> float:
    """Accept only positive finite numbers; booleans are not numbers here."""
    value = data.get("max_age_seconds")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return DEFAULT_MAX_AGE_SECONDS
    if not math.isfinite(value) or value <= 0:
        return DEFAULT_MAX_AGE_SECONDS
    return float(value)


def load_config(path: Path | None = None) -> CacheConfig:
    """Build a ``CacheConfig`` from the config file at ``path`` or ``CONFIG_PATH``."""
    data = load_config_data(path)
    return CacheConfig(
        storage_root=_load_storage_root(data),
        max_age_seconds=_load_max_age(data),
    )


__all__ = [
    "APP_NAME",
    "CONFIG_PATH",
    "DEFAULT_CONFIG_PATH",
    "DEFAULT_MAX_AGE_SECONDS",
    "DEFAULT_STORAGE_ROOT",
    "CacheConfig",
    "load_config",
    "load_config_data",
]
