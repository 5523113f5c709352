"""
Indexer REST client with response caching and in-flight request coalescing.

Every indexer call goes through IndexerClient.get:

- a fresh cached payload for the same canonical URL is returned without I/O;
- concurrent callers without a cancel token share one outstanding request;
- callers with a cancel token always get their own request, which is never
  shared and never cached if the token fires first.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Union
from urllib.parse import urlencode

import httpx

from src.poolanalytics.cache import ResponseCache
from src.poolanalytics.cancellation import CancelToken
from src.poolanalytics.config import IndexerSettings, get_settings
from src.poolanalytics.exceptions import (
    MalformedResponse,
    NetworkFailure,
    RequestCancelled,
    ServerError,
)

logger = logging.getLogger(__name__)

QueryParams = Mapping[str, Optional[Union[str, int, float]]]


@dataclass(frozen=True)
class FetchOptions:
    """Per-call fetch options.

    Attributes:
        signal: Cancel token tied to the caller's lifetime
        force: Skip the cache lookup and re-fetch
        ttl_seconds: Maximum accepted cache age (defaults to the client's TTL)
    """

    signal: Optional[CancelToken] = None
    force: bool = False
    ttl_seconds: Optional[float] = None


DEFAULT_OPTIONS = FetchOptions()


def canonical_query(params: Optional[QueryParams]) -> str:
    """Query string with parameters sorted by name and None values dropped."""
    if not params:
        return ""
    items = sorted((key, value) for key, value in params.items() if value is not None)
    return urlencode([(key, str(value)) for key, value in items])


def build_path(path: str, params: Optional[QueryParams] = None) -> str:
    safe_path = path if path.startswith("/") else f"/{path}"
    query = canonical_query(params)
    return f"{safe_path}?{query}" if query else safe_path


class IndexerClient:
    """
    Async client for the indexer API.

    Owns the response cache and the in-flight map, so independent clients
    (e.g. in tests) never share state.
    """

    def __init__(
        self,
        settings: Optional[IndexerSettings] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        cache: Optional[ResponseCache] = None,
    ):
        """
        Initialize indexer client.

        Args:
            settings: Connection/caching settings (default: get_settings())
            http_client: Optional pre-built httpx client (not closed by close())
            cache: Optional response cache (default: sized from settings)
        """
        self.settings = settings or get_settings()
        self.base_url = self.settings.base_url
        self.default_ttl = self.settings.cache_ttl_seconds

        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(self.settings.request_timeout_seconds),
            headers={"accept": "application/json"},
        )
        self._cache = cache or ResponseCache(max_size=self.settings.cache_max_entries)
        self._inflight: Dict[str, asyncio.Future] = {}

    def cache_key(self, path: str, params: Optional[QueryParams] = None) -> str:
        return f"{self.base_url}{build_path(path, params)}"

    async def get(
        self,
        path: str,
        params: Optional[QueryParams] = None,
        options: Optional[FetchOptions] = None,
    ) -> Any:
        """
        Fetch the data field of an indexer envelope.

        Args:
            path: Endpoint path, e.g. /pools/{address}/swaps
            params: Query parameters (order does not matter)
            options: Cancel token, force flag and TTL override

        Returns:
            The envelope's data payload

        Raises:
            NetworkFailure: Transport error or non-2xx status
            ServerError: Envelope reports success=false or an error
            MalformedResponse: Body is not a JSON envelope or lacks data
            RequestCancelled: The caller's token fired first
        """
        options = options or DEFAULT_OPTIONS
        ttl = options.ttl_seconds if options.ttl_seconds is not None else self.default_ttl
        key = self.cache_key(path, params)

        if not options.force:
            entry = self._cache.get(key, ttl)
            if entry is not None:
                logger.debug(f"Cache hit for {key}")
                return entry.payload

        # A fired token only stops network work; fresh cached data is still served
        if options.signal is not None:
            options.signal.raise_if_cancelled(key)
            return await self._fetch_cancellable(key, options.signal)

        existing = self._inflight.get(key)
        if existing is not None:
            logger.debug(f"Joining in-flight request for {key}")
            return await asyncio.shield(existing)

        logger.debug(f"Cache miss for {key}, fetching from indexer")
        task = asyncio.ensure_future(self._fetch_and_store(key))
        self._inflight[key] = task
        task.add_done_callback(lambda done: self._forget_inflight(key, done))
        # Shielded so one sharer being cancelled does not cancel the others
        return await asyncio.shield(task)

    def _forget_inflight(self, key: str, task: asyncio.Future) -> None:
        if self._inflight.get(key) is task:
            del self._inflight[key]
        # Sharers may all have gone away; mark the outcome as observed
        if not task.cancelled():
            task.exception()

    async def _fetch_and_store(self, key: str) -> Any:
        payload = await self._request(key)
        self._cache.set(key, payload)
        return payload

    async def _fetch_cancellable(self, key: str, signal: CancelToken) -> Any:
        request = asyncio.ensure_future(self._request(key))
        cancelled = asyncio.ensure_future(signal.wait())
        try:
            await asyncio.wait({request, cancelled}, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            request.cancel()
            raise
        finally:
            cancelled.cancel()

        if signal.cancelled:
            if request.done() and not request.cancelled():
                request.exception()
            request.cancel()
            logger.debug(f"Request cancelled by caller: {key}")
            raise RequestCancelled(key)

        payload = request.result()
        self._cache.set(key, payload)
        return payload

    async def _request(self, url: str) -> Any:
        try:
            response = await self._client.get(url, headers={"accept": "application/json"})
        except httpx.RequestError as e:
            logger.warning(f"Indexer transport error for {url}: {e}")
            raise NetworkFailure(f"Indexer request failed: {e}", url=url) from e

        if not response.is_success:
            text = response.text
            raise NetworkFailure(
                f"Indexer request failed ({response.status_code}): {text or url}",
                url=url,
                status=response.status_code,
            )

        try:
            envelope = response.json()
        except ValueError as e:
            raise MalformedResponse(f"Indexer response is not JSON: {url}", url=url) from e

        if not isinstance(envelope, dict):
            raise MalformedResponse(f"Indexer response is not an envelope: {url}", url=url)

        if envelope.get("success") is False or envelope.get("error"):
            raise ServerError(
                envelope.get("error") or f"Indexer request failed: {url}",
                url=url,
                status=response.status_code,
            )

        if "data" not in envelope:
            raise MalformedResponse(f"Indexer response missing data: {url}", url=url)

        return envelope["data"]

    def cache_stats(self) -> Dict[str, Any]:
        stats = self._cache.stats()
        stats["inflight"] = len(self._inflight)
        return stats

    def clear_cache(self) -> None:
        self._cache.clear()

    async def close(self) -> None:
        """Close HTTP client connections (only if this client created them)."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "IndexerClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
