"""
Query service: the public entry points for pool and wallet views.

Each query issues its indexer fetches through IndexerClient (cached and
coalesced), runs independent fetches concurrently, and hands the records to
the pure builders. Primary data failures propagate; optional enrichments
fail soft and are logged or reported in the result.
"""

import logging
from typing import Any, List, Optional, Type, TypeVar

from pydantic import ValidationError

from src.poolanalytics.client import FetchOptions, IndexerClient
from src.poolanalytics.config import SUPPORTED_WINDOW_HOURS
from src.poolanalytics.exceptions import MalformedResponse
from src.poolanalytics.fanout import settle
from src.poolanalytics.heatmap import build_heatmap
from src.poolanalytics.journal import WalletJournalResult, merge_journal_entries
from src.poolanalytics.models.indexer import (
    IndexerFees,
    IndexerLendingEvent,
    IndexerLiquidityEvent,
    IndexerPool,
    IndexerPoolInfo,
    IndexerPosition,
    IndexerPriceChart,
    IndexerRecord,
    IndexerStats,
    IndexerSwap,
    IndexerVolume,
)
from src.poolanalytics.models.views import (
    BorrowRiskSnapshot,
    HeatmapResult,
    PoolPerformanceStats,
    SwapTapeItem,
)
from src.poolanalytics.performance import build_performance_stats
from src.poolanalytics.risk import build_risk_snapshot
from src.poolanalytics.swap_tape import build_swap_tape

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=IndexerRecord)

POSITIONS_PAGE = 500
WALLET_PAGE = 100
SWAP_TAPE_PAGE = 50
LIQUIDITY_EVENTS_PAGE = 50
HEATMAP_POOLS_PAGE = 200


def parse_record(payload: Any, model: Type[RecordT], source: str) -> RecordT:
    """Validate a single-object payload, reporting failures as MalformedResponse."""
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        raise MalformedResponse(f"Unexpected {source} payload: {e}") from e


def parse_records(payload: Any, key: str, model: Type[RecordT], source: str) -> List[RecordT]:
    """Validate the list stored under payload[key]; a missing list is empty."""
    if not isinstance(payload, dict):
        raise MalformedResponse(f"Unexpected {source} payload: expected an object")
    items = payload.get(key) or []
    if not isinstance(items, list):
        raise MalformedResponse(f"Unexpected {source} payload: '{key}' is not a list")
    try:
        return [model.model_validate(item) for item in items]
    except ValidationError as e:
        raise MalformedResponse(f"Unexpected {source} payload: {e}") from e


def _error_message(error: Exception, fallback: str) -> str:
    return str(error) or fallback


class IndexerService:
    """Pool and wallet queries backed by one IndexerClient."""

    def __init__(self, client: Optional[IndexerClient] = None):
        self.client = client or IndexerClient()

    async def _records(
        self,
        path: str,
        params: dict[str, Any],
        key: str,
        model: Type[RecordT],
        options: Optional[FetchOptions],
    ) -> List[RecordT]:
        payload = await self.client.get(path, params, options)
        return parse_records(payload, key, model, source=path)

    async def _record(
        self,
        path: str,
        params: Optional[dict[str, Any]],
        model: Type[RecordT],
        options: Optional[FetchOptions],
    ) -> RecordT:
        payload = await self.client.get(path, params, options)
        return parse_record(payload, model, source=path)

    async def fetch_pool_performance(
        self, pool_address: str, window_hours: int, options: Optional[FetchOptions] = None
    ) -> PoolPerformanceStats:
        """
        Price performance of a pool over a window.

        The price chart is required; volume, fees and stats are best-effort.

        Raises:
            ValueError: If window_hours is not a supported window
            IndexerError: If the price chart cannot be loaded
        """
        if window_hours not in SUPPORTED_WINDOW_HOURS:
            raise ValueError(
                f"window_hours must be one of {SUPPORTED_WINDOW_HOURS}, got {window_hours}"
            )

        params = {"windowHours": window_hours}
        base = f"/pools/{pool_address}"
        results = await settle(
            chart=self._record(f"{base}/price-chart", params, IndexerPriceChart, options),
            volume=self._record(f"{base}/volume", params, IndexerVolume, options),
            fees=self._record(f"{base}/fees", params, IndexerFees, options),
            stats=self._record(f"{base}/stats", params, IndexerStats, options),
        )

        if "chart" in results.errors:
            raise results.errors["chart"]

        for name, error in results.errors.items():
            logger.warning(f"Optional {name} unavailable for pool {pool_address}: {error}")

        return build_performance_stats(
            window_hours,
            results.values["chart"],
            volume=results.get("volume"),
            fees=results.get("fees"),
            stats=results.get("stats"),
        )

    async def fetch_pool_risk(
        self,
        pool_address: str,
        wallet_address: Optional[str] = None,
        options: Optional[FetchOptions] = None,
    ) -> BorrowRiskSnapshot:
        """
        Borrow-risk snapshot for a pool, optionally weighted by a wallet's events.

        Positions and pool reserves are required. The wallet's lending events
        only shift the momentum signal; if they fail to load the snapshot
        falls back to pool scope.
        """
        fetches = {
            "positions": self._records(
                "/positions",
                {"poolAddress": pool_address, "limit": POSITIONS_PAGE, "offset": 0},
                "positions",
                IndexerPosition,
                options,
            ),
            "pool_info": self._record(f"/pools/{pool_address}", None, IndexerPoolInfo, options),
        }
        if wallet_address:
            fetches["lending"] = self._records(
                f"/users/{wallet_address}/lending-events",
                {"poolAddress": pool_address, "limit": WALLET_PAGE, "offset": 0},
                "lendingHistory",
                IndexerLendingEvent,
                options,
            )

        results = await settle(**fetches)

        for required in ("positions", "pool_info"):
            if required in results.errors:
                raise results.errors[required]

        if "lending" in results.errors:
            logger.warning(
                f"Lending events unavailable for wallet {wallet_address}, "
                f"using pool scope: {results.errors['lending']}"
            )

        return build_risk_snapshot(
            results.values["positions"],
            results.values["pool_info"],
            lending_events=results.get("lending", []),
            wallet_scoped=results.ok("lending"),
        )

    async def fetch_swap_tape(
        self, pool_address: str, options: Optional[FetchOptions] = None
    ) -> List[SwapTapeItem]:
        swaps = await self._records(
            f"/pools/{pool_address}/swaps",
            {"limit": SWAP_TAPE_PAGE, "offset": 0},
            "swaps",
            IndexerSwap,
            options,
        )
        return build_swap_tape(swaps)

    async def fetch_pools_for_heatmap(
        self, options: Optional[FetchOptions] = None
    ) -> List[IndexerPool]:
        return await self._records(
            "/pools",
            {"limit": HEATMAP_POOLS_PAGE, "offset": 0, "sortBy": "tvl", "sortOrder": "desc"},
            "pools",
            IndexerPool,
            options,
        )

    async def fetch_heatmap(self, options: Optional[FetchOptions] = None) -> HeatmapResult:
        pools = await self.fetch_pools_for_heatmap(options)
        return build_heatmap(pools)

    async def fetch_wallet_journal(
        self, wallet_address: str, options: Optional[FetchOptions] = None
    ) -> WalletJournalResult:
        """
        Merged swap, lending and liquidity history of a wallet.

        Every source is optional: a failed source contributes an error
        message and no entries. Liquidity events are looked up per pool,
        for the pools the wallet has touched (capped by journal_pool_limit).
        """
        errors: List[str] = []
        user = f"/users/{wallet_address}"
        page = {"limit": WALLET_PAGE, "offset": 0}

        sources = await settle(
            swaps=self._records(f"{user}/swaps", page, "swaps", IndexerSwap, options),
            lending=self._records(
                f"{user}/lending-events", page, "lendingHistory", IndexerLendingEvent, options
            ),
            positions=self._records(
                f"{user}/positions", page, "positions", IndexerPosition, options
            ),
        )
        fallbacks = {
            "swaps": "Unable to load swaps",
            "lending": "Unable to load lending events",
            "positions": "Unable to load positions",
        }
        for name, error in sources.errors.items():
            logger.warning(f"Journal source {name} failed for {wallet_address}: {error}")
            errors.append(_error_message(error, fallbacks[name]))

        swaps: List[IndexerSwap] = sources.get("swaps", [])
        lending: List[IndexerLendingEvent] = sources.get("lending", [])
        positions: List[IndexerPosition] = sources.get("positions", [])

        # Insertion-ordered set: positions first, then swaps, then lending
        pool_set = dict.fromkeys(
            [p.pair for p in positions if p.pair]
            + [s.pair for s in swaps if s.pair]
            + [e.pair for e in lending if e.pair]
        )
        liquidity_pools = list(pool_set)[: self.client.settings.journal_pool_limit]

        liquidity_results = await settle(
            **{
                pool: self._records(
                    f"{user}/liquidity-events",
                    {"poolAddress": pool, "limit": LIQUIDITY_EVENTS_PAGE, "offset": 0},
                    "userHistory",
                    IndexerLiquidityEvent,
                    options,
                )
                for pool in liquidity_pools
            }
        )

        liquidity: List[IndexerLiquidityEvent] = []
        for pool in liquidity_pools:
            if pool in liquidity_results.errors:
                error = liquidity_results.errors[pool]
                logger.warning(f"Liquidity events failed for {wallet_address} in {pool}: {error}")
                errors.append(f"Liquidity events ({pool[:6]}…): {_error_message(error, 'failed')}")
            else:
                liquidity.extend(liquidity_results.values[pool])

        entries = merge_journal_entries(swaps=swaps, lending=lending, liquidity=liquidity)
        return WalletJournalResult(entries=entries, errors=errors)

    async def close(self) -> None:
        await self.client.close()

    async def __aenter__(self) -> "IndexerService":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
