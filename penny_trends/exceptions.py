"""Exception hierarchy shared by the ingestion pipeline and the snapshot store."""

from typing import Optional


class PennyTrendsError(Exception):
    """Base class for all errors raised by the pipeline."""


class FetchError(PennyTrendsError):
    """A request to the Reddit read API failed."""

    def __init__(self, message: str, url: Optional[str] = None, status: Optional[int] = None):
        self.message = message
        self.url = url
        self.status = status
        super().__init__(self.message)


class RateLimited(FetchError):
    """The API answered 429 Too Many Requests."""


class FetchExhausted(FetchError):
    """Every retry attempt was rate limited."""

    def __init__(self, message: str, url: Optional[str] = None, attempts: int = 0):
        super().__init__(message, url=url, status=429)
        self.attempts = attempts


class NetworkError(FetchError):
    """Transport failure or non-429 HTTP error. Never retried."""


class RecordValidationError(PennyTrendsError):
    """A post or comment payload is malformed or incomplete."""


class PersistenceError(PennyTrendsError):
    """The snapshot store could not read or write the snapshot."""
