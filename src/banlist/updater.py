"""One ban-list refresh cycle.

The updater attempts to download the ban-list from the ban-list server and
backs it up locally. If the server is unavailable the list is reloaded from
backup instead. Downloading, backup I/O and parsing run on the calling worker
thread; only the final ``set_ban_list`` call is handed to the serial executor.
"""

import logging
import threading
import time
from concurrent.futures import Future
from enum import Enum
from typing import Callable, Optional

from src.shared.config_schema import UpdaterConfig
from src.shared.metrics import (
    BANLIST_ENTRIES,
    BANLIST_FETCH_DURATION,
    BANLIST_FETCH_ERRORS,
    BANLIST_REFRESHES,
    increment_counter_metric,
    observe_histogram_metric,
    set_gauge_metric,
)
from src.shared.thread_pool import SerialExecutor

from .backup import BackupStore
from .consumer import BanListConsumer
from .errors import ConfigError, ConnectError, ReadError, ReadTimeoutError
from .fetcher import open_banlist, read_banlist
from .parser import ParsedList, parse_banlist

logger = logging.getLogger(__name__)


class RefreshOutcome(str, Enum):
    """How a refresh cycle ended."""

    NETWORK = "network"
    BACKUP = "backup"
    EMPTY = "empty"
    DISABLED = "disabled"
    SKIPPED = "skipped"


class BanlistUpdater:
    """Runs the fetch, fallback, persist, parse and apply cycle."""

    def __init__(
        self,
        config_provider: Callable[[], UpdaterConfig],
        backup: BackupStore,
        consumer: BanListConsumer,
        serial_executor: SerialExecutor,
        is_enabled: Callable[[], bool],
    ):
        self.config_provider = config_provider
        self.backup = backup
        self.consumer = consumer
        self.serial_executor = serial_executor
        self.is_enabled = is_enabled
        self.last_apply: Optional[Future] = None
        self._in_flight = threading.Lock()

    def run(self) -> RefreshOutcome:
        """Run a single refresh cycle. Overlapping calls are skipped."""
        if not self._in_flight.acquire(blocking=False):
            logger.info("A ban-list update is already in progress, skipping")
            outcome = RefreshOutcome.SKIPPED
        else:
            try:
                outcome = self._refresh()
            finally:
                self._in_flight.release()
        increment_counter_metric(BANLIST_REFRESHES, {"outcome": outcome.value})
        return outcome

    def _refresh(self) -> RefreshOutcome:
        config = self.config_provider()
        url = config.banlist_url
        try:
            response = open_banlist(
                url, config.timeout, config.timeout, retries=config.retries
            )
        except ConfigError:
            increment_counter_metric(BANLIST_FETCH_ERRORS, {"error": "config"})
            logger.critical(
                "banlist-url in the config.yml is invalid or corrupt. This must be "
                "corrected and the config reloaded before the UBL can be updated"
            )
            return self._apply(self.backup.load(), RefreshOutcome.BACKUP)
        except ConnectError as exc:
            increment_counter_metric(BANLIST_FETCH_ERRORS, {"error": "connect"})
            logger.warning("Banlist server %s is currently unreachable: %s", url, exc)
            return self._apply(self.backup.load(), RefreshOutcome.BACKUP)

        # While opening the connection the host may have been disabled
        if not self.is_enabled():
            response.close()
            return RefreshOutcome.DISABLED

        started = time.monotonic()
        try:
            data = read_banlist(response, config.buffer_size, config.deadline_seconds)
            logger.info("UBL successfully updated from banlist server")
            source = RefreshOutcome.NETWORK
        except ReadTimeoutError:
            increment_counter_metric(BANLIST_FETCH_ERRORS, {"error": "read_timeout"})
            logger.error(
                "Timed out while waiting for banlist server to send data",
                exc_info=True,
            )
            data = self.backup.load()
            source = RefreshOutcome.BACKUP
        except ReadError:
            increment_counter_metric(BANLIST_FETCH_ERRORS, {"error": "read"})
            logger.error(
                "Connection was interrupted while downloading banlist from %s",
                url,
                exc_info=True,
            )
            data = self.backup.load()
            source = RefreshOutcome.BACKUP
        finally:
            observe_histogram_metric(BANLIST_FETCH_DURATION, time.monotonic() - started)

        self.backup.save(data)
        return self._apply(data, source)

    def _apply(self, data: str, source: RefreshOutcome) -> RefreshOutcome:
        if not self.is_enabled():
            return RefreshOutcome.DISABLED
        parsed = parse_banlist(data)
        if parsed is None:
            return RefreshOutcome.EMPTY
        try:
            self.last_apply = self.serial_executor.submit(self._set_ban_list, parsed)
        except RuntimeError:
            logger.info("Apply context is shut down, discarding ban-list update")
            return RefreshOutcome.DISABLED
        return source

    def _set_ban_list(self, parsed: ParsedList) -> None:
        # The host may have stopped while this task was queued
        if not self.is_enabled():
            return
        self.consumer.set_ban_list(parsed.header, parsed.entries)
        set_gauge_metric(BANLIST_ENTRIES, len(parsed.entries))
