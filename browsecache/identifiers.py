"""Slash-delimited identifier parsing for ``user/repo/solution/file`` paths."""

from __future__ import annotations

from .models import FolderInfo


def _segments(identifier: str) -> list[str]:
    """Split on ``/`` and drop empty segments."""
    return [part for part in identifier.split("/") if part]


def parse_identifier(identifier: str | None) -> FolderInfo | None:
    """Parse ``identifier`` into hierarchy fields.

    Returns ``None`` when the identifier has no non-empty segment. Missing
    trailing segments default to ``""``; everything after the solution is
    joined back into ``file_path`` and may contain slashes.
    """
    if not identifier:
        return None
    parts = _segments(identifier)
    if not parts:
        return None
    return FolderInfo(
        user=parts[0],
        repo=parts[1] if len(parts) >= 2 else "",
        solution=parts[2] if len(parts) >= 3 else "",
        file_path="/".join(parts[3:]),
    )


def create_path(*parts: str | None) -> str:
    """Join the leading non-``None`` parts with ``/``."""
    out: list[str] = []
    for part in parts:
        if part is None:
            break
        out.append(part)
    return "/".join(out)


def relative_directory(path: str) -> str:
    """Return ``path`` without its final component, keeping the trailing slash."""
    head, sep, _name = path.rpartition("/")
    return head + sep


__all__ = [
    "parse_identifier",
    "create_path",
    "relative_directory",
]
