"""End-to-end cache behavior against a real storage tree and worker thread."""

from __future__ import annotations

import os
import tempfile
import threading
import time
import unittest
from pathlib import Path
from unittest import mock

from browsecache import codec
from browsecache.cache import SummaryCache
from browsecache.config import CacheConfig
from browsecache.models import RepoSummary, UserSummary
from browsecache.refresh import BackgroundRefresher


def _age(path: Path, seconds: float) -> None:
    old = time.time() - seconds
    os.utime(path, (old, old))


class CacheEndToEndTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name).resolve()
        (self.root / "alice" / "repoA" / "solX").mkdir(parents=True)
        (self.root / "alice" / "repoB").mkdir(parents=True)
        self.refresher = BackgroundRefresher()
        self.cache = SummaryCache(
            CacheConfig(storage_root=self.root, max_age_seconds=60.0),
            refresher=self.refresher,
        )

    def tearDown(self) -> None:
        self.refresher.wait_idle(timeout=2.0)
        self._tmp.cleanup()

    def test_alice_scenario(self) -> None:
        expected = UserSummary(
            username="alice",
            path=str(self.root / "alice"),
            repos=(
                RepoSummary(name="repoA", parent_user_name="alice", solutions=("solX",)),
                RepoSummary(name="repoB", parent_user_name="alice", solutions=()),
            ),
        )

        first = self.cache.get_user_summary("alice")
        self.assertEqual(first, expected)
        self.assertTrue((self.root / "alice" / "user.data").is_file())

        with mock.patch.object(self.cache.storage, "list_subdirectory_names", side_effect=AssertionError("rescanned")):
            second = self.cache.get_user_summary("alice")
        self.assertEqual(second, expected)

        repo_sidecar = self.root / "alice" / "repoA" / "repo.data"
        repo_sidecar.write_text("{corrupt", encoding="utf-8")
        with self.assertLogs("browsecache.cache", level="WARNING"):
            repo = self.cache.get_repo_summary("alice", "repoA")

        self.assertEqual(repo, RepoSummary(name="repoA", parent_user_name="alice", solutions=("solX",)))
        self.assertEqual(codec.deserialize(RepoSummary, repo_sidecar), repo)

    def test_stale_read_is_not_blocked_by_refresh(self) -> None:
        sidecar = self.root / "alice" / "user.data"
        self.cache.get_user_summary("alice")
        _age(sidecar, 120)
        (self.root / "alice" / "repoC").mkdir()

        build_started = threading.Event()
        release_build = threading.Event()
        real_build_user = self.cache.builder.build_user

        def slow_build_user(username: str) -> UserSummary:
            build_started.set()
            release_build.wait(timeout=2.0)
            return real_build_user(username)

        with mock.patch.object(self.cache.builder, "build_user", side_effect=slow_build_user):
            stale = self.cache.get_user_summary("alice")
            self.assertEqual([r.name for r in stale.repos], ["repoA", "repoB"])
            self.assertTrue(build_started.wait(timeout=2.0))
            release_build.set()
            self.assertTrue(self.refresher.wait_idle(timeout=2.0))

        refreshed = self.cache.get_user_summary("alice")
        self.assertEqual([r.name for r in refreshed.repos], ["repoA", "repoB", "repoC"])
        self.assertTrue(codec.is_fresh(sidecar, 60.0))

    def test_refresh_failure_does_not_affect_caller(self) -> None:
        sidecar = self.root / "alice" / "repoB" / "repo.data"
        self.cache.get_repo_summary("alice", "repoB")
        _age(sidecar, 120)

        with mock.patch("browsecache.cache.codec.serialize", side_effect=OSError("disk full")):
            with self.assertLogs("browsecache.refresh", level="WARNING"):
                repo = self.cache.get_repo_summary("alice", "repoB")
                self.assertTrue(self.refresher.wait_idle(timeout=2.0))

        self.assertEqual(repo.solutions, ())
        self.assertFalse(codec.is_fresh(sidecar, 60.0))
        self.assertEqual(codec.deserialize(RepoSummary, sidecar), repo)

    def test_concurrent_readers_always_get_valid_summaries(self) -> None:
        sidecar = self.root / "alice" / "repoA" / "repo.data"
        self.cache.get_repo_summary("alice", "repoA")
        results: list[RepoSummary] = []
        errors: list[Exception] = []

        def reader() -> None:
            try:
                for _ in range(25):
                    _age(sidecar, 120)
                    results.append(self.cache.get_repo_summary("alice", "repoA"))
            except Exception as exc:
                errors.append(exc)

        threads = [threading.Thread(target=reader) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=10.0)
        self.assertTrue(self.refresher.wait_idle(timeout=5.0))

        self.assertEqual(errors, [])
        self.assertEqual(len(results), 100)
        self.assertTrue(all(result.solutions == ("solX",) for result in results))
        self.assertEqual(sorted(p.name for p in sidecar.parent.iterdir()), ["repo.data", "solX"])


if __name__ == "__main__":
    unittest.main()
