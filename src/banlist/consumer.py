import logging
import threading
from typing import Protocol, Sequence

logger = logging.getLogger(__name__)


class BanListConsumer(Protocol):
    """Receives each newly parsed ban-list, replacing the previous one."""

    def set_ban_list(self, header: str, entries: Sequence[str]) -> None: ...


class InMemoryBanList:
    """Thread-safe holder of the active ban-list.

    Entries are matched case-insensitively; they are otherwise stored as given.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._header = ""
        self._entries: tuple[str, ...] = ()
        self._lookup: frozenset[str] = frozenset()

    def set_ban_list(self, header: str, entries: Sequence[str]) -> None:
        entries = tuple(entries)
        lookup = frozenset(entry.lower() for entry in entries)
        with self._lock:
            self._header = header
            self._entries = entries
            self._lookup = lookup
        logger.info("Ban-list %s applied with %d entries", header, len(entries))

    @property
    def header(self) -> str:
        with self._lock:
            return self._header

    @property
    def entries(self) -> tuple[str, ...]:
        with self._lock:
            return self._entries

    def is_banned(self, name: str) -> bool:
        with self._lock:
            return name.lower() in self._lookup

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
