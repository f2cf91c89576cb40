"""Exception types raised inside the extraction pipeline."""

from typing import Optional


class ExtractionError(Exception):
    """Base class for extraction failures."""


class TransportError(ExtractionError):
    """The extraction service could not be reached or returned an error."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class RateLimitError(TransportError):
    """The extraction service throttled the request."""

    def __init__(self, message: str, retry_after: Optional[float] = None):
        super().__init__(message, status_code=429)
        self.retry_after = retry_after


class ParseFailure(ExtractionError):
    """A response could not be turned into a cause list after every repair step."""
