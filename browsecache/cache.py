"""Read-through summary cache over the storage tree.

``SummaryCache`` is the single read path for summaries. For the user and
repo levels it keeps one sidecar file per hierarchy position:

- no sidecar: build synchronously, persist, return the build;
- corrupt sidecar: rebuild and persist synchronously, return the rebuild;
- valid sidecar: return it at once, and when it is older than
  ``max_age_seconds`` hand a rebuild-and-persist job to the background
  refresher without waiting for it.

Persist failures are logged and the in-memory build is still returned.
Nothing takes a lock around the read/check/refresh sequence; concurrent
rebuilds of one key produce equivalent files and the last replace wins.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

from . import codec
from .builder import SummaryBuilder
from .codec import SummaryT
from .config import CacheConfig, load_config
from .errors import SummaryDecodeError
from .log import get_logger
from .models import DocumentInfo, FileSummary, RepoSummary, SolutionSummary, UserSummary
from .refresh import BackgroundRefresher
from .storage import StorageRoot, is_valid_name

logger = get_logger("cache")


class SummaryCache:
    """Serve user/repo summaries from sidecars, rebuilding them as needed."""

    def __init__(
        self,
        config: CacheConfig,
        *,
        refresher: BackgroundRefresher | None = None,
        load_document: Callable[[Path], DocumentInfo] | None = None,
    ) -> None:
        self.config = config
        self.storage = StorageRoot(config.storage_root)
        self.refresher = refresher if refresher is not None else BackgroundRefresher()
        self.builder = SummaryBuilder(self.storage, repo_lookup=self.get_repo_summary)
        self._load_document = load_document if load_document is not None else self.storage.read_document

    @classmethod
    def from_config(cls, config_path: Path | None = None, **kwargs) -> SummaryCache:
        """Create a cache from the on-disk config file."""
        return cls(load_config(config_path), **kwargs)

    # ------------------------------------------------------------------
    # Cached levels

    def sidecar_path(self, username: str, repo_name: str | None = None) -> Path:
        """Return the sidecar file for a user, or for a repo when given."""
        if repo_name is None:
            return self.storage.user_data_path(username)
        return self.storage.repo_data_path(username, repo_name)

    def get_user_summary(self, username: str) -> UserSummary:
        """Return the summary for one user; a name that is not a single
        directory segment (``..``, ``a/b``) gets an empty, unpersisted one."""
        if not is_valid_name(username):
            logger.debug("rejecting user name %r", username)
            return UserSummary(username=username, path="")
        return self._load_or_build(
            UserSummary,
            self.sidecar_path(username),
            lambda: self.builder.build_user(username),
        )

    def get_repo_summary(self, username: str, repo_name: str) -> RepoSummary:
        if not (is_valid_name(username) and is_valid_name(repo_name)):
            logger.debug("rejecting repo name %r/%r", username, repo_name)
            return RepoSummary(name=repo_name, parent_user_name=username)
        return self._load_or_build(
            RepoSummary,
            self.sidecar_path(username, repo_name),
            lambda: self.builder.build_repo(username, repo_name),
        )

    def _load_or_build(
        self,
        summary_type: type[SummaryT],
        path: Path,
        build: Callable[[], SummaryT],
    ) -> SummaryT:
        if not path.exists():
            return self._build_and_persist(path, build)

        try:
            summary = codec.deserialize(summary_type, path)
        except SummaryDecodeError as exc:
            logger.warning("rebuilding corrupt sidecar: %s", exc)
            return self._build_and_persist(path, build)

        if not codec.is_fresh(path, self.config.max_age_seconds):
            logger.debug("scheduling refresh of stale sidecar %s", path)
            self.refresher.submit(str(path), lambda: self._refresh(path, build))
        return summary

    def _build_and_persist(self, path: Path, build: Callable[[], SummaryT]) -> SummaryT:
        summary = build()
        if not path.parent.is_dir():
            # Absent source directory: serve the empty summary, cache nothing.
            return summary
        try:
            codec.serialize(summary, path)
        except OSError as exc:
            logger.warning("could not persist %s: %s", path, exc)
        return summary

    def _refresh(self, path: Path, build: Callable[[], SummaryT]) -> None:
        """Background job body; errors propagate to the refresher, which logs them."""
        codec.serialize(build(), path)
        logger.debug("refreshed %s", path)

    # ------------------------------------------------------------------
    # Live levels

    def get_all_users(self) -> list[UserSummary]:
        """Return a summary per user directory; empty when the root is missing."""
        return [self.get_user_summary(name) for name in self.storage.list_subdirectory_names()]

    def get_solution_summary(self, username: str, repo_name: str, solution_name: str) -> SolutionSummary:
        parent_repo = self.get_repo_summary(username, repo_name)
        return self.builder.build_solution(username, repo_name, solution_name, parent_repo)

    def get_file_summary(
        self,
        username: str,
        repo_name: str,
        solution_name: str,
        path_remainder: str,
    ) -> FileSummary:
        """Load the generated document for one file and wrap it for display.

        Errors from the document loader propagate; a missing file is the
        caller's not-found case. Names that do not denote a single directory
        raise ``ValueError``.
        """
        for name in (username, repo_name, solution_name):
            if not is_valid_name(name):
                raise ValueError(f"invalid hierarchy name: {name!r}")
        document_path = self.storage.resolve(username, repo_name, solution_name, path_remainder)
        document = self._load_document(document_path)
        return self.builder.build_file(document, username, repo_name, solution_name, path_remainder)


__all__ = ["SummaryCache"]
