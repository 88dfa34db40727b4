"""Executors used by the ban-list updater.

This module provides the two execution contexts the updater relies on:
- A background worker pool for network and disk I/O
- A single-threaded serial executor, the only context allowed to mutate
  consumer state
"""

from __future__ import annotations

import logging
import os
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)


@dataclass
class ThreadPoolConfig:
    """Configuration for the background worker pool."""

    max_workers: int = 2
    thread_name_prefix: str = "BanlistWorker"


def load_pool_config() -> ThreadPoolConfig:
    """Load pool configuration from environment variables."""
    return ThreadPoolConfig(
        max_workers=max(1, int(os.getenv("BANLIST_WORKER_THREADS", "2"))),
    )


def create_worker_pool(config: Optional[ThreadPoolConfig] = None) -> ThreadPoolExecutor:
    """Create the worker pool used for fetch and backup I/O."""
    config = config or load_pool_config()
    logger.debug("Starting worker pool with %s workers", config.max_workers)
    return ThreadPoolExecutor(
        max_workers=config.max_workers,
        thread_name_prefix=config.thread_name_prefix,
    )


class SerialExecutor:
    """Runs submitted tasks one at a time, in submission order, on one thread.

    Anything a task writes is visible to tasks submitted after it.
    """

    def __init__(self, name: str = "BanlistApply"):
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix=name)
        self._thread_ident: Optional[int] = None
        self._lock = threading.Lock()
        self._shutdown = False

    def _run(self, fn: Callable[..., Any], args: tuple, kwargs: dict) -> Any:
        self._thread_ident = threading.get_ident()
        return fn(*args, **kwargs)

    def submit(self, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Future:
        """Queue ``fn`` to run after every previously submitted task."""
        with self._lock:
            if self._shutdown:
                raise RuntimeError("Cannot schedule new tasks after shutdown")
            return self._executor.submit(self._run, fn, args, kwargs)

    def in_context(self) -> bool:
        """Return True when called from the serial executor's own thread."""
        return self._thread_ident == threading.get_ident()

    def flush(self, timeout: Optional[float] = None) -> None:
        """Block until every task submitted so far has finished."""
        self.submit(lambda: None).result(timeout=timeout)

    def shutdown(self, wait: bool = True) -> None:
        with self._lock:
            self._shutdown = True
        self._executor.shutdown(wait=wait)
