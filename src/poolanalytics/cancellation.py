"""Caller-owned cancel tokens for indexer requests.

A view that may be torn down before its data arrives passes a CancelToken
with its requests and calls cancel() when the result is no longer wanted.
"""

import asyncio

from src.poolanalytics.exceptions import RequestCancelled


class CancelToken:
    """One-shot cancellation flag that requests can await."""

    def __init__(self) -> None:
        self._event = asyncio.Event()
        self._reason = ""

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    @property
    def reason(self) -> str:
        return self._reason

    def cancel(self, reason: str = "") -> None:
        """Fire the token. Further calls are no-ops."""
        if not self._event.is_set():
            self._reason = reason
            self._event.set()

    async def wait(self) -> None:
        await self._event.wait()

    def raise_if_cancelled(self, url: str = "") -> None:
        if self.cancelled:
            raise RequestCancelled(url)
