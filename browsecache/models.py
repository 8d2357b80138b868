"""Domain datatypes for the per-user/per-repo summary hierarchy.

Summaries are immutable once built. Persisted copies decode back into the
same types, so consumers cannot tell a cached summary from a live one.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class RepoSummary:
    """One repository under a user, listing its solution directory names."""

    name: str
    parent_user_name: str
    solutions: tuple[str, ...] = ()


@dataclass(frozen=True)
class UserSummary:
    """One top-level account namespace with its repositories."""

    username: str
    path: str
    repos: tuple[RepoSummary, ...] = ()


@dataclass(frozen=True)
class SolutionSummary:
    """One solution under a repo, with optional generator metadata."""

    name: str
    relative_path: str
    relative_root_path: str
    parent_repo: RepoSummary
    solution_info: dict[str, Any] | None = None


@dataclass(frozen=True)
class DocumentInfo:
    """Generated document for one source file."""

    html_content: str
    number_of_lines: int


@dataclass(frozen=True)
class FileSummary:
    """One generated file inside a solution, ready for a page render."""

    file_name: str
    directory: str
    relative_path: str
    relative_root_path: str
    source_code: str
    number_of_lines: int
    solution_info: dict[str, Any] | None = None


@dataclass(frozen=True)
class FolderInfo:
    """Hierarchy fields parsed from a ``user/repo/solution/file`` identifier."""

    user: str
    repo: str = ""
    solution: str = ""
    file_path: str = ""


Summary = UserSummary | RepoSummary


__all__ = [
    "RepoSummary",
    "UserSummary",
    "SolutionSummary",
    "DocumentInfo",
    "FileSummary",
    "FolderInfo",
    "Summary",
]
