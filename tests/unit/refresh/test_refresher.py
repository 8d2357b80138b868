"""Tests for the background refresh worker."""

from __future__ import annotations

import threading
import unittest

from browsecache.refresh import BackgroundRefresher


class BackgroundRefresherTests(unittest.TestCase):
    def test_submit_runs_job_off_the_calling_thread(self) -> None:
        caller = threading.get_ident()
        seen: list[int] = []
        refresher = BackgroundRefresher()

        refresher.submit("k", lambda: seen.append(threading.get_ident()))

        self.assertTrue(refresher.wait_idle(timeout=1.0))
        self.assertEqual(len(seen), 1)
        self.assertNotEqual(seen[0], caller)

    def test_submit_does_not_wait_for_job(self) -> None:
        release = threading.Event()
        finished = threading.Event()
        refresher = BackgroundRefresher()

        def job() -> None:
            release.wait(timeout=1.0)
            finished.set()

        refresher.submit("k", job)
        self.assertFalse(finished.is_set())
        self.assertFalse(refresher.wait_idle(timeout=0.05))

        release.set()
        self.assertTrue(refresher.wait_idle(timeout=1.0))
        self.assertTrue(finished.is_set())

    def test_pending_jobs_for_same_key_collapse_to_latest(self) -> None:
        calls: list[str] = []
        first_started = threading.Event()
        allow_first_finish = threading.Event()
        refresher = BackgroundRefresher()

        def blocking() -> None:
            first_started.set()
            allow_first_finish.wait(timeout=1.0)
            calls.append("blocking")

        refresher.submit("a", blocking)
        self.assertTrue(first_started.wait(timeout=1.0))
        refresher.submit("b", lambda: calls.append("b-1"))
        refresher.submit("b", lambda: calls.append("b-2"))
        refresher.submit("a", lambda: calls.append("a-again"))
        self.assertEqual(refresher.pending_keys(), ["b", "a"])
        allow_first_finish.set()

        self.assertTrue(refresher.wait_idle(timeout=1.0))
        self.assertListEqual(calls, ["blocking", "b-2", "a-again"])

    def test_failing_job_is_logged_and_later_jobs_still_run(self) -> None:
        calls: list[str] = []
        refresher = BackgroundRefresher()

        def boom() -> None:
            raise OSError("disk full")

        with self.assertLogs("browsecache.refresh", level="WARNING") as logs:
            refresher.submit("bad", boom)
            refresher.submit("good", lambda: calls.append("good"))
            self.assertTrue(refresher.wait_idle(timeout=1.0))

        self.assertEqual(calls, ["good"])
        self.assertTrue(any("bad" in line for line in logs.output))

    def test_wait_idle_returns_immediately_when_nothing_submitted(self) -> None:
        self.assertTrue(BackgroundRefresher().wait_idle(timeout=0.0))


if __name__ == "__main__":
    unittest.main()
