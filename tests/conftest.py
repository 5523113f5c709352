"""Pytest configuration and shared fixtures."""

from typing import Any, Callable

import httpx
import pytest

from src.poolanalytics.cache import ResponseCache
from src.poolanalytics.client import IndexerClient
from src.poolanalytics.config import IndexerSettings, reset_settings

TEST_BASE_URL = "https://indexer.test/api/v1"

POOL_A = "PoolAaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaa"
POOL_B = "PoolBbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbb"


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(autouse=True)
def reset_settings_singleton():
    """Each test gets settings rebuilt from its own environment."""
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def settings() -> IndexerSettings:
    return IndexerSettings(
        base_url=TEST_BASE_URL,
        cache_ttl_seconds=60,
        cache_max_entries=64,
        request_timeout_seconds=5,
        journal_pool_limit=8,
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def client(settings, clock) -> IndexerClient:
    """IndexerClient with an isolated cache driven by the fake clock."""
    return IndexerClient(settings=settings, cache=ResponseCache(max_size=64, clock=clock))


@pytest.fixture
def make_response() -> Callable[..., httpx.Response]:
    """Factory for indexer envelope responses."""

    def _make(data: Any = None, status: int = 200, **envelope: Any) -> httpx.Response:
        body = {"success": True, **envelope}
        if data is not None:
            body["data"] = data
        return httpx.Response(status_code=status, json=body)

    return _make


@pytest.fixture
def sample_pools() -> list[dict]:
    """Pool list items as returned by GET /pools."""
    return [
        {
            "pair_address": POOL_A,
            "token0": {"symbol": "SOL", "address": "So11111111111111111111111111111111111111112"},
            "token1": {"symbol": "USDC", "address": "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"},
            "reserves": {"token0": "100", "token1": 50},
            "volume_24h": 1000,
        },
        {
            "pair_address": POOL_B,
            "token0": {"address": "JUPyiwrYJFskUPiHa7hkeR8VUtAeFoSYbKedZNsDvCN"},
            "token1": {},
            "reserves": {"token0": 10, "token1": "5"},
            "volume_24h": {"token0": "4", "token1": 6},
        },
        {
            # No address: skipped by the heatmap
            "reserves": {"token0": 1_000_000, "token1": 1_000_000},
            "volume_24h": 5,
        },
    ]


@pytest.fixture
def sample_swaps() -> list[dict]:
    return [
        {
            "id": 1,
            "pair": POOL_A,
            "is_token0_in": True,
            "amount_in": "10",
            "amount_out": "20",
            "timestamp": "2025-01-01T12:00:00Z",
            "tx_sig": "sig1",
            "slot": 100,
        },
        {
            "id": 2,
            "pair": POOL_A,
            "is_token0_in": False,
            "amount_in": "-40",
            "amount_out": "10",
            "timestamp": "2025-01-01T12:00:30Z",
            "tx_sig": "sig2",
            "slot": 101,
        },
        {
            "id": 3,
            "pair": POOL_B,
            "is_token0_in": True,
            "amount_in": 0,
            "amount_out": 5,
            "timestamp": "2025-01-01T11:50:00Z",
            "tx_sig": "sig3",
        },
    ]


@pytest.fixture
def sample_lending_events() -> list[dict]:
    return [
        {
            "id": "l1",
            "event_type": "borrow_token0",
            "pair": POOL_A,
            "transaction_signature": "lsig1",
            "event_timestamp": "2025-01-01T12:00:10Z",
            "amount0": "25",
            "amount1": 0,
        },
        {
            "id": "l2",
            "event_type": "repay",
            "pair": POOL_B,
            "description": "  Repaid USDC  ",
            "event_timestamp": "2025-01-01T11:00:00Z",
            "amount0": 0,
            "amount1": "-3",
        },
    ]


@pytest.fixture
def sample_liquidity_events() -> list[dict]:
    return [
        {
            "id": 7,
            "pair": {"address": POOL_A},
            "amount0": "1.5",
            "amount1": "3",
            "liquidity": "2.25",
            "tx_sig": "qsig1",
            "timestamp": "2025-01-01T12:00:20Z",
            "event_type": "add",
        },
        {
            "pair": {"address": POOL_A},
            "amount0": 1,
            "amount1": 1,
            "liquidity": 1,
            "timestamp": "not a date",
            "event_type": "remove",
        },
    ]
