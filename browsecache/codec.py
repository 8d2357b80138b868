"""Sidecar-file codec for persisted summaries plus the freshness test.

Payloads are versioned JSON documents::

    {"version": 1, "kind": "user", "data": {...}}

Writes go to a temporary file in the target directory and are moved into
place with ``os.replace`` so a concurrent reader sees either the previous
or the new complete file.
"""

from __future__ import annotations

import contextlib
import json
import os
import tempfile
import time
from dataclasses import asdict
from pathlib import Path
from typing import Any, TypeVar

from .errors import SummaryDecodeError
from .models import RepoSummary, Summary, UserSummary
from .storage import safe_mtime

FORMAT_VERSION = 1

_KIND_BY_TYPE: dict[type, str] = {UserSummary: "user", RepoSummary: "repo"}

SummaryT = TypeVar("SummaryT", UserSummary, RepoSummary)


def _require_str(data: dict[str, Any], key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str):
        raise ValueError(f"field {key!r} must be a string")
    return value


def _require_list(data: dict[str, Any], key: str) -> list[Any]:
    value = data.get(key)
    if not isinstance(value, list):
        raise ValueError(f"field {key!r} must be a list")
    return value


def _repo_from_dict(data: object) -> RepoSummary:
    if not isinstance(data, dict):
        raise ValueError("repo entry must be an object")
    solutions = _require_list(data, "solutions")
    if not all(isinstance(name, str) for name in solutions):
        raise ValueError("solution names must be strings")
    return RepoSummary(
        name=_require_str(data, "name"),
        parent_user_name=_require_str(data, "parent_user_name"),
        solutions=tuple(solutions),
    )


def _user_from_dict(data: object) -> UserSummary:
    if not isinstance(data, dict):
        raise ValueError("user entry must be an object")
    return UserSummary(
        username=_require_str(data, "username"),
        path=_require_str(data, "path"),
        repos=tuple(_repo_from_dict(item) for item in _require_list(data, "repos")),
    )


def summary_to_dict(summary: Summary) -> dict[str, Any]:
    """Return the JSON-compatible form of a user or repo summary."""
    return asdict(summary)


def summary_from_dict(summary_type: type[SummaryT], data: object) -> SummaryT:
    """Rebuild a summary from its dict form; ``ValueError`` on bad shape."""
    if summary_type is UserSummary:
        return _user_from_dict(data)
    if summary_type is RepoSummary:
        return _repo_from_dict(data)
    raise TypeError(f"unsupported summary type: {summary_type!r}")


def serialize(summary: Summary, path: Path) -> None:
    """Write ``summary`` to ``path``, atomically replacing any previous file.

    The parent directory must exist. Raises ``OSError`` when the file cannot
    be written; no partial file is left behind in that case.
    """
    kind = _KIND_BY_TYPE.get(type(summary))
    if kind is None:
        raise TypeError(f"unsupported summary type: {type(summary)!r}")
    payload = {
        "version": FORMAT_VERSION,
        "kind": kind,
        "data": summary_to_dict(summary),
    }
    text = json.dumps(payload, indent=2, sort_keys=True) + "\n"

    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(text)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        with contextlib.suppress(OSError):
            os.unlink(tmp_name)
        raise


def deserialize(summary_type: type[SummaryT], path: Path) -> SummaryT:
    """Read a summary of ``summary_type`` from ``path``.

    Raises ``SummaryDecodeError`` for a missing, unreadable, truncated, or
    mismatched file.
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise SummaryDecodeError(path, "file is missing") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise SummaryDecodeError(path, f"unreadable: {exc}") from exc

    try:
        payload = json.loads(raw)
    except (ValueError, RecursionError) as exc:
        raise SummaryDecodeError(path, f"invalid JSON: {exc}") from exc

    if not isinstance(payload, dict):
        raise SummaryDecodeError(path, "top level is not an object")
    if payload.get("version") != FORMAT_VERSION:
        raise SummaryDecodeError(path, f"unsupported version {payload.get('version')!r}")
    expected_kind = _KIND_BY_TYPE.get(summary_type)
    if payload.get("kind") != expected_kind:
        raise SummaryDecodeError(path, f"expected kind {expected_kind!r}, found {payload.get('kind')!r}")

    try:
        return summary_from_dict(summary_type, payload.get("data"))
    except ValueError as exc:
        raise SummaryDecodeError(path, str(exc)) from exc


def is_fresh(path: Path, max_age_seconds: float, now: float | None = None) -> bool:
    """Return whether ``path`` exists and was written within ``max_age_seconds``."""
    mtime = safe_mtime(path)
    if mtime is None:
        return False
    current = time.time() if now is None else now
    return current - mtime < max_age_seconds


__all__ = [
    "FORMAT_VERSION",
    "serialize",
    "deserialize",
    "is_fresh",
    "summary_to_dict",
    "summary_from_dict",
]
