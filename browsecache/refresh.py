"""Background worker for fire-and-forget sidecar refreshes."""

from __future__ import annotations

import threading
from collections import OrderedDict
from collections.abc import Callable

from .log import get_logger

logger = get_logger("refresh")


class BackgroundRefresher:
    """Run refresh jobs on one daemon worker thread at a time.

    Jobs are keyed by the sidecar they rewrite. Submitting a key that is
    already queued replaces the queued job, so repeated stale reads do not
    pile up work. A key whose job is currently running may be queued again.
    Callers never receive results; job failures are logged and dropped.
    """

    def __init__(self, thread_name: str = "browsecache-refresh") -> None:
        self._thread_name = thread_name
        self._lock = threading.Lock()
        self._idle = threading.Condition(self._lock)
        self._pending: OrderedDict[str, Callable[[], object]] = OrderedDict()
        self._running = False

    def _worker(self) -> None:
        """Drain queued jobs until none remain."""
        while True:
            with self._lock:
                if not self._pending:
                    self._running = False
                    self._idle.notify_all()
                    return
                key, job = self._pending.popitem(last=False)

            try:
                job()
            except Exception:
                # The next stale read schedules another attempt.
                logger.warning("background refresh of %s failed", key, exc_info=True)

    def submit(self, key: str, job: Callable[[], object]) -> None:
        """Queue ``job`` under ``key`` and start the worker if idle."""
        with self._lock:
            self._pending[key] = job
            if self._running:
                return
            self._running = True

        worker = threading.Thread(
            target=self._worker,
            name=self._thread_name,
            daemon=True,
        )
        try:
            worker.start()
        except RuntimeError:
            # Interpreter shutdown; staleness simply persists.
            logger.warning("could not start refresh worker; dropping %s", key)
            with self._lock:
                self._pending.clear()
                self._running = False
                self._idle.notify_all()

    def pending_keys(self) -> list[str]:
        """Return keys queued but not yet started, oldest first."""
        with self._lock:
            return list(self._pending)

    def wait_idle(self, timeout: float | None = None) -> bool:
        """Block until no job is queued or running; ``False`` on timeout."""
        with self._idle:
            return self._idle.wait_for(lambda: not self._running and not self._pending, timeout=timeout)


__all__ = ["BackgroundRefresher"]
