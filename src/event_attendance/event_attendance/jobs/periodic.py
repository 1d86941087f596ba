from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class PeriodicJob:
    """A named action run every `interval_seconds` on a daemon thread.

    Ticks never overlap: if the previous run of this job is still going, the
    tick is skipped. Errors are logged and the next tick runs as usual.
    """

    def __init__(self, name: str, interval_seconds: float, action: Callable[[], object]):
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self.name = name
        self.interval_seconds = float(interval_seconds)
        self._action = action
        self._run_lock = threading.Lock()
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def run_once(self) -> bool:
        """Run the action now unless a run is in progress; returns whether it ran."""
        if not self._run_lock.acquire(blocking=False):
            logger.warning("Job %s: previous run still in progress, skipping tick", self.name)
            return False
        try:
            self._action()
        except Exception:
            logger.exception("Job %s failed", self.name)
        finally:
            self._run_lock.release()
        return True

    def _loop(self) -> None:
        while not self._stop.wait(self.interval_seconds):
            self.run_once()

    def start(self) -> None:
        if self.is_running:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._loop, daemon=True, name=f"job-{self.name}")
        self._thread.start()
        logger.info("Job %s started (every %.0fs)", self.name, self.interval_seconds)

    def stop(self, timeout: float = 5.0) -> None:
        self._stop.set()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=timeout)
            if self._thread.is_alive():
                logger.warning("Job %s did not stop within %.1fs", self.name, timeout)
            else:
                logger.info("Job %s stopped", self.name)
        self._thread = None


class Scheduler:
    def __init__(self, jobs: list[PeriodicJob]):
        self.jobs = list(jobs)

    def start(self) -> None:
        for job in self.jobs:
            job.start()

    def stop(self) -> None:
        for job in self.jobs:
            job.stop()


def build_lifecycle_scheduler(lifecycle, *, status_interval: float, finalization_interval: float) -> Scheduler:
    return Scheduler(
        [
            PeriodicJob("event-status-sweep", status_interval, lifecycle.sweep_statuses),
            PeriodicJob("attendance-finalization-sweep", finalization_interval, lifecycle.sweep_finalization),
        ]
    )
