"""
Custom exceptions for the indexer client.

Provides specific error types for request failures and malformed data.
"""

import asyncio
from typing import Iterable, List, Optional


class IndexerError(Exception):
    """Base exception for indexer client errors."""

    pass


class RequestFailed(IndexerError):
    """Raised when an indexer request does not produce usable data."""

    def __init__(self, message: str, url: str = "", status: Optional[int] = None):
        super().__init__(message)
        self.url = url
        self.status = status


class NetworkFailure(RequestFailed):
    """Raised on transport errors and non-2xx responses."""

    pass


class ServerError(RequestFailed):
    """Raised when the envelope reports success=false or an error message."""

    pass


class MalformedResponse(IndexerError):
    """Raised when a response is missing its data field or cannot be parsed."""

    def __init__(self, message: str, url: str = ""):
        super().__init__(message)
        self.url = url


class RequestCancelled(IndexerError):
    """Raised when the caller's cancel token fires before the request settles."""

    def __init__(self, url: str = ""):
        super().__init__(f"Indexer request cancelled: {url}" if url else "Indexer request cancelled")
        self.url = url


def is_cancellation(error: BaseException) -> bool:
    """True for superseded requests, which are never worth reporting."""
    return isinstance(error, (RequestCancelled, asyncio.CancelledError))


def reportable_errors(errors: Iterable[BaseException]) -> List[BaseException]:
    """Drop cancellations from a list of errors before showing them to a human."""
    return [error for error in errors if not is_cancellation(error)]
