"""Filesystem primitives rooted at the generated-artifact storage directory.

Layout::

    <root>/<user>/user.data
    <root>/<user>/<repo>/repo.data
    <root>/<user>/<repo>/<solution>/solutionInfo.json
    <root>/<user>/<repo>/<solution>/<generated files...>

Every listing helper degrades to an empty result when the directory is
missing or unreadable.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

from .log import get_logger
from .models import DocumentInfo

USER_DATA_FILENAME = "user.data"
REPO_DATA_FILENAME = "repo.data"
SOLUTION_INFO_FILENAME = "solutionInfo.json"

_HIDDEN_FILENAMES = frozenset({SOLUTION_INFO_FILENAME, USER_DATA_FILENAME, REPO_DATA_FILENAME})
# Relative parts never climb out of the root.
_SKIPPED_SEGMENTS = frozenset({"", ".", ".."})

logger = get_logger("storage")


def is_valid_name(name: str) -> bool:
    """Return whether ``name`` names exactly one user/repo/solution directory."""
    return bool(name) and name not in _SKIPPED_SEGMENTS and "/" not in name and "\\" not in name


def safe_mtime(path: Path) -> float | None:
    """Return ``st_mtime`` for ``path`` or ``None`` on stat failure."""
    try:
        return path.stat().st_mtime
    except OSError:
        return None


def _scan_children(directory: Path, *, want_dirs: bool) -> list[Path]:
    """List direct children of ``directory`` filtered by kind, sorted by name."""
    out: list[Path] = []
    try:
        with os.scandir(directory) as entries:
            for child in entries:
                try:
                    is_dir = child.is_dir(follow_symlinks=False)
                except OSError:
                    is_dir = False
                if is_dir != want_dirs:
                    continue
                out.append(Path(child.path))
    except OSError:
        return []
    out.sort(key=lambda item: item.name)
    return out


class StorageRoot:
    """Read access to the storage tree below one fixed root directory."""

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    def resolve(self, *parts: str) -> Path:
        """Join relative ``parts`` (possibly slash-separated) under the root."""
        path = self.root
        for part in parts:
            if part:
                path = path.joinpath(*[piece for piece in part.split("/") if piece not in _SKIPPED_SEGMENTS])
        return path

    def exists(self) -> bool:
        return self.root.is_dir()

    def is_file(self, relative: str) -> bool:
        return self.resolve(relative).is_file()

    def is_folder(self, relative: str) -> bool:
        return self.resolve(relative).is_dir()

    def list_subdirectory_names(self, *parts: str) -> list[str]:
        """Return sorted child directory names of ``parts`` under the root."""
        return [child.name for child in _scan_children(self.resolve(*parts), want_dirs=True)]

    def find_folders(self, relative: str) -> list[Path]:
        return _scan_children(self.resolve(relative), want_dirs=True)

    def find_files(self, relative: str) -> list[Path]:
        """Return generated files in a directory, without cache sidecars."""
        return [
            child
            for child in _scan_children(self.resolve(relative), want_dirs=False)
            if child.name not in _HIDDEN_FILENAMES and not child.name.startswith(".")
        ]

    def user_data_path(self, user: str) -> Path:
        return self.resolve(user, USER_DATA_FILENAME)

    def repo_data_path(self, user: str, repo: str) -> Path:
        return self.resolve(user, repo, REPO_DATA_FILENAME)

    def solution_info_path(self, user: str, repo: str, solution: str) -> Path:
        return self.resolve(user, repo, solution, SOLUTION_INFO_FILENAME)

    def read_solution_info(self, user: str, repo: str, solution: str) -> dict[str, Any] | None:
        """Load ``solutionInfo.json`` for one solution.

        A missing file is normal and yields ``None``. So does a document that
        is unreadable or not a JSON object; that case is logged.
        """
        if not all(is_valid_name(name) for name in (user, repo, solution)):
            return None
        path = self.solution_info_path(user, repo, solution)
        if not path.is_file():
            return None
        try:
            data = json.loads(path.read_text(encoding="utf-8-sig"))
        except (OSError, ValueError, RecursionError) as exc:
            logger.warning("ignoring unreadable solution info %s: %s", path, exc)
            return None
        if not isinstance(data, dict):
            logger.warning("ignoring solution info %s: top level is not an object", path)
            return None
        return data

    def read_document(self, path: Path) -> DocumentInfo:
        """Load a generator document (rendered content plus line count).

        Accepts both ``HtmlContent``/``NumberOfLines`` and snake_case keys.
        Raises ``OSError`` or ``ValueError`` when the document is unusable.
        """
        data = json.loads(Path(path).read_text(encoding="utf-8-sig"))
        if not isinstance(data, dict):
            raise ValueError(f"{path}: document is not a JSON object")
        content = data.get("HtmlContent", data.get("html_content"))
        lines = data.get("NumberOfLines", data.get("number_of_lines"))
        if not isinstance(content, str):
            raise ValueError(f"{path}: missing rendered content")
        if not isinstance(lines, int) or isinstance(lines, bool):
            lines = content.count("\n") + 1 if content else 0
        return DocumentInfo(html_content=content, number_of_lines=lines)


__all__ = [
    "USER_DATA_FILENAME",
    "REPO_DATA_FILENAME",
    "SOLUTION_INFO_FILENAME",
    "StorageRoot",
    "is_valid_name",
    "safe_mtime",
]
