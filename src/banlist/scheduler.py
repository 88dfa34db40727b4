import logging
import threading
from concurrent.futures import Executor, Future
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class _PeriodicTrigger(threading.Thread):
    """Submits ``task`` to ``executor`` every ``interval`` seconds until cancelled."""

    def __init__(self, interval: float, task: Callable[[], object], executor: Executor):
        super().__init__(name="BanlistAutoChecker", daemon=True)
        self.interval = interval
        self.task = task
        self.executor = executor
        self._stop_event = threading.Event()

    def run(self) -> None:
        # wait() returns True once cancelled, so the first firing is one interval out
        while not self._stop_event.wait(self.interval):
            try:
                self.executor.submit(self.task)
            except RuntimeError:
                logger.info("Worker pool is shut down, stopping automatic updates")
                return

    def cancel(self) -> None:
        self._stop_event.set()


class UpdateScheduler:
    """Schedules ban-list refresh cycles on a background worker pool."""

    def __init__(self, task: Callable[[], object], executor: Executor):
        self.task = task
        self.executor = executor
        self._lock = threading.Lock()
        self._trigger: Optional[_PeriodicTrigger] = None

    def _run_task(self):
        try:
            return self.task()
        except Exception:
            logger.exception("Ban-list update failed unexpectedly")
            raise

    def schedule(self, interval: float) -> None:
        """Refresh every ``interval`` seconds, replacing any existing schedule.

        The first refresh happens after one interval, not immediately.
        """
        if interval <= 0:
            raise ValueError("interval must be positive")
        with self._lock:
            self._cancel_locked()
            self._trigger = _PeriodicTrigger(interval, self._run_task, self.executor)
            self._trigger.start()
        logger.info("Ban-list will be updated every %s seconds", interval)

    def trigger_once(self) -> Future:
        """Run a single refresh in the background and return its future."""
        return self.executor.submit(self._run_task)

    def cancel(self) -> None:
        """Stop the periodic refresh, if any. In-flight refreshes are not interrupted."""
        with self._lock:
            self._cancel_locked()

    def _cancel_locked(self) -> None:
        if self._trigger is not None:
            self._trigger.cancel()
            self._trigger = None

    @property
    def scheduled(self) -> bool:
        with self._lock:
            return self._trigger is not None
