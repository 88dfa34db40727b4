"""Time-bounded download of the ban-list from the ban-list server.

The download happens in two stages so the caller can check that the host is
still running once a connection is open:

* :func:`open_banlist` validates the URL and waits for the response headers,
  bounded by the connect and read timeouts.
* :func:`read_banlist` reads the body in fixed-size chunks until end of stream
  or until the overall deadline trips.

:func:`fetch_banlist` runs both stages back to back.
"""

import logging
import threading
from typing import Callable, Optional
from urllib.parse import urlparse

import requests
from tenacity import (
    Retrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)
from urllib3.exceptions import LocationValueError

from .errors import ConfigError, ConnectError, ReadError, ReadTimeoutError

logger = logging.getLogger(__name__)

# Some list servers reject requests that do not look like they come from a browser
REQUEST_HEADERS = {
    "Accept-Language": "en-US,en;q=0.8",
    "User-Agent": "Mozilla",
    "Referer": "google.com",
}
DEFAULT_RETRY_WAIT = wait_exponential(multiplier=0.5, min=0.5, max=5)


class Deadline:
    """Cancellation token that trips once ``seconds`` have elapsed.

    The timer is armed on ``__enter__`` and disarmed on ``__exit__``. Once
    ``__exit__`` has returned the expiry callback can no longer run.
    """

    def __init__(self, seconds: float, on_expire: Optional[Callable[[], None]] = None):
        self.seconds = seconds
        self._on_expire = on_expire
        self._expired = threading.Event()
        self._lock = threading.Lock()
        self._disarmed = False
        self._timer = threading.Timer(seconds, self._expire)
        self._timer.daemon = True

    @property
    def expired(self) -> bool:
        return self._expired.is_set()

    def _expire(self) -> None:
        with self._lock:
            if self._disarmed:
                return
            self._expired.set()
            if self._on_expire is not None:
                try:
                    self._on_expire()
                except Exception:  # pragma: no cover - best effort abort
                    logger.debug("Deadline abort callback failed", exc_info=True)

    def __enter__(self) -> "Deadline":
        self._timer.start()
        return self

    def disarm(self) -> bool:
        """Stop the timer and return whether it had already expired."""
        with self._lock:
            self._disarmed = True
            expired = self._expired.is_set()
        self._timer.cancel()
        return expired

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.disarm()


def validate_url(url: Optional[str]) -> str:
    """Return ``url`` if it is a usable http(s) address, else raise ConfigError."""
    if not url:
        raise ConfigError("No ban-list URL configured")
    try:
        parsed = urlparse(url)
    except ValueError as exc:
        raise ConfigError(f"Invalid ban-list URL: {url}") from exc
    if parsed.scheme not in ("http", "https"):
        raise ConfigError(f"Ban-list URL scheme must be http or https: {url}")
    if not parsed.netloc:
        raise ConfigError(f"Ban-list URL must include a host: {url}")
    return url


def _connect(url: str, connect_timeout: float, read_timeout: float) -> requests.Response:
    try:
        response = requests.get(
            url,
            headers=REQUEST_HEADERS,
            timeout=(connect_timeout, read_timeout),
            stream=True,
        )
    except (
        requests.exceptions.MissingSchema,
        requests.exceptions.InvalidSchema,
        requests.exceptions.InvalidURL,
        LocationValueError,
    ) as exc:
        raise ConfigError(f"Invalid ban-list URL: {url}") from exc
    except requests.exceptions.RequestException as exc:
        raise ConnectError(f"Ban-list server {url} is unreachable: {exc}") from exc
    try:
        response.raise_for_status()
    except requests.exceptions.HTTPError as exc:
        response.close()
        raise ConnectError(f"Ban-list server {url} returned an error: {exc}") from exc
    return response


def open_banlist(
    url: Optional[str],
    connect_timeout: float,
    read_timeout: float,
    retries: int = 1,
    wait=None,
) -> requests.Response:
    """Open a streaming connection to the ban-list server.

    Args:
        url: The ban-list URL.
        connect_timeout: Seconds allowed to establish the connection.
        read_timeout: Seconds allowed to wait for the response (and per read).
        retries: Number of connection attempts before giving up.
        wait: Optional tenacity wait strategy between attempts.

    Raises:
        ConfigError: The URL is invalid. No connection was attempted.
        ConnectError: Every connection attempt failed.
    """
    validate_url(url)
    retrying = Retrying(
        stop=stop_after_attempt(max(1, retries)),
        wait=wait if wait is not None else DEFAULT_RETRY_WAIT,
        retry=retry_if_exception_type(ConnectError),
        before_sleep=before_sleep_log(logger, logging.INFO),
        reraise=True,
    )
    return retrying(_connect, url, connect_timeout, read_timeout)


def _abort(response: requests.Response) -> None:
    # shutdown() wakes a reader blocked on the socket, close() alone does not
    try:
        response.raw.shutdown()
    finally:
        response.close()


def read_banlist(response: requests.Response, chunk_size: int, deadline: float) -> str:
    """Read the full response body within ``deadline`` seconds.

    The response is always closed and the deadline timer disarmed before
    this returns.

    Raises:
        ReadTimeoutError: The deadline elapsed before end of stream.
        ReadError: The stream failed before the deadline.
    """
    buffer = bytearray()
    try:
        with Deadline(deadline, on_expire=lambda: _abort(response)) as token:
            try:
                for chunk in response.iter_content(chunk_size=chunk_size):
                    if token.expired:
                        break
                    buffer.extend(chunk)
            except (requests.exceptions.RequestException, OSError, ValueError) as exc:
                if token.expired:
                    raise ReadTimeoutError(
                        f"Timed out after {deadline}s waiting for ban-list data"
                    ) from exc
                raise ReadError(f"Connection interrupted: {exc}") from exc
            # an aborted stream ends without raising; disarm here so the timer
            # cannot trip once end of stream has been reached
            if token.disarm():
                raise ReadTimeoutError(
                    f"Timed out after {deadline}s waiting for ban-list data"
                )
    finally:
        response.close()
    return buffer.decode("utf-8", errors="replace")


def fetch_banlist(
    url: Optional[str],
    connect_timeout: float,
    read_timeout: float,
    deadline: float,
    chunk_size: int,
    retries: int = 1,
) -> str:
    """Download the raw ban-list payload."""
    response = open_banlist(url, connect_timeout, read_timeout, retries=retries)
    return read_banlist(response, chunk_size, deadline)
