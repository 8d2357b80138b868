"""Live construction of summaries from the storage tree.

Builders never read sidecar files themselves. The one nested lookup,
repositories inside a user summary, goes through the injected
``repo_lookup`` so it benefits from the repo-level cache.
"""

from __future__ import annotations

from collections.abc import Callable

from .identifiers import create_path, relative_directory
from .models import DocumentInfo, FileSummary, RepoSummary, SolutionSummary, UserSummary
from .storage import StorageRoot


class SummaryBuilder:
    """Build user/repo/solution/file summaries from current directory state."""

    def __init__(
        self,
        storage: StorageRoot,
        repo_lookup: Callable[[str, str], RepoSummary] | None = None,
    ) -> None:
        self._storage = storage
        self._repo_lookup = repo_lookup if repo_lookup is not None else self.build_repo

    def build_user(self, username: str) -> UserSummary:
        """Enumerate the user's repositories; a missing directory yields none."""
        repos = tuple(
            self._repo_lookup(username, repo_name)
            for repo_name in self._storage.list_subdirectory_names(username)
        )
        return UserSummary(
            username=username,
            path=str(self._storage.resolve(username)),
            repos=repos,
        )

    def build_repo(self, username: str, repo_name: str) -> RepoSummary:
        """List solution directory names without expanding them."""
        return RepoSummary(
            name=repo_name,
            parent_user_name=username,
            solutions=tuple(self._storage.list_subdirectory_names(username, repo_name)),
        )

    def build_solution(
        self,
        username: str,
        repo_name: str,
        solution_name: str,
        parent_repo: RepoSummary,
    ) -> SolutionSummary:
        solution_path = create_path(username, repo_name, solution_name)
        return SolutionSummary(
            name=solution_name,
            relative_path=solution_path,
            relative_root_path=solution_path,
            parent_repo=parent_repo,
            solution_info=self._storage.read_solution_info(username, repo_name, solution_name),
        )

    def build_file(
        self,
        document: DocumentInfo,
        username: str,
        repo_name: str,
        solution_name: str,
        path_remainder: str,
    ) -> FileSummary:
        """Assemble the page model for one generated file.

        ``relative_path`` points at the file's directory so a tree view can
        expand down to it; ``relative_root_path`` points at the solution.
        """
        directory = relative_directory(path_remainder)
        return FileSummary(
            file_name=path_remainder.rsplit("/", 1)[-1],
            directory=directory,
            relative_path=create_path(username, repo_name, solution_name, directory),
            relative_root_path=create_path(username, repo_name, solution_name),
            source_code=document.html_content,
            number_of_lines=document.number_of_lines,
            solution_info=self._storage.read_solution_info(username, repo_name, solution_name),
        )


__all__ = ["SummaryBuilder"]
