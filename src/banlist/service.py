"""Lifecycle owner for the ban-list updater.

``BanlistService`` plays the role of the host application: it owns the
configuration, the executors and the enabled flag the updater checks before
touching consumer state.
"""

import logging
import os
import threading
from concurrent.futures import Future
from typing import Optional

from src.shared.config import ConfigValidationError, load_config
from src.shared.config_schema import UpdaterConfig
from src.shared.thread_pool import SerialExecutor, create_worker_pool

from .backup import BackupStore
from .consumer import BanListConsumer, InMemoryBanList
from .scheduler import UpdateScheduler
from .updater import BanlistUpdater

logger = logging.getLogger(__name__)


class BanlistService:
    def __init__(
        self,
        data_dir: str,
        config_path: Optional[os.PathLike] = None,
        consumer: Optional[BanListConsumer] = None,
        config: Optional[UpdaterConfig] = None,
    ):
        self.config_path = config_path
        self.config = config if config is not None else load_config(config_path)
        self.consumer = consumer if consumer is not None else InMemoryBanList()
        self.backup = BackupStore(data_dir)
        self._enabled = threading.Event()
        self._start_executors()

    def _start_executors(self) -> None:
        self.worker_pool = create_worker_pool()
        self.serial_executor = SerialExecutor()
        self.updater = BanlistUpdater(
            config_provider=lambda: self.config,
            backup=self.backup,
            consumer=self.consumer,
            serial_executor=self.serial_executor,
            is_enabled=self.is_enabled,
        )
        self.scheduler = UpdateScheduler(self.updater.run, self.worker_pool)
        self._stopped = False

    def is_enabled(self) -> bool:
        return self._enabled.is_set()

    def enable(self) -> Future:
        """Start the service: refresh now and then on the configured interval."""
        if self._stopped:
            # executors do not survive shutdown, start a fresh set
            self._start_executors()
        self._enabled.set()
        future = self.scheduler.trigger_once()
        self._apply_schedule()
        return future

    def disable(self) -> None:
        """Stop scheduling updates. Cycles in flight finish without applying."""
        self._enabled.clear()
        self.scheduler.cancel()
        self.worker_pool.shutdown(wait=False)
        self.serial_executor.shutdown(wait=False)
        self._stopped = True
        logger.info("Ban-list updater disabled")

    def reload(self) -> bool:
        """Re-read the configuration file, keeping the old settings on failure."""
        try:
            self.config = load_config(self.config_path)
        except ConfigValidationError:
            logger.error("Failed to reload configuration", exc_info=True)
            return False
        logger.info("Configuration reloaded")
        if self.is_enabled():
            self._apply_schedule()
        return True

    def _apply_schedule(self) -> None:
        interval = self.config.interval_seconds
        if interval > 0:
            self.scheduler.schedule(interval)
        else:
            self.scheduler.cancel()
            logger.info("Automatic ban-list updates are disabled")
