"""Exceptions raised while downloading the ban-list."""


class FetchError(Exception):
    """Base class for ban-list download failures."""


class ConfigError(FetchError):
    """The configured ban-list URL is invalid or corrupt."""


class ConnectError(FetchError):
    """The ban-list server could not be reached or refused the request."""


class ReadTimeoutError(FetchError):
    """The overall download deadline elapsed before the end of the stream."""


class ReadError(FetchError):
    """The connection failed while the ban-list was being transferred."""
