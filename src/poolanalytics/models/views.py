"""Pydantic models for the derived views returned by the query service."""

from datetime import datetime
from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class RiskLabel(Enum):
    """Qualitative borrow-risk levels."""

    LOW = "Low"
    MODERATE = "Moderate"
    HIGH = "High"
    CRITICAL = "Critical"


class SizeTier(Enum):
    """Swap size relative to the batch's amount_in quartiles."""

    S = "S"
    M = "M"
    L = "L"
    XL = "XL"


class SpeedTier(Enum):
    """Swap cadence from the gap to the neighbouring swap."""

    FAST = "Fast"
    NORMAL = "Normal"
    SLOW = "Slow"


class HeatmapPoint(BaseModel):
    """A pool placed on the liquidity/volume grid."""

    model_config = ConfigDict(frozen=True)

    pool_address: str
    symbol: str
    token0_symbol: str
    token1_symbol: str
    liquidity_value: float = Field(description="reserve0 + reserve1")
    volume_value: float = Field(description="Summed 24h volume across tokens")
    composite_score: float = Field(description="(liquidity + 1) * (volume + 1)")
    liquidity_bucket: int = Field(ge=0, le=4)
    volume_bucket: int = Field(ge=0, le=4)


class HeatmapCell(BaseModel):
    """One of the 25 grid cells; x is the liquidity bucket, y the volume bucket."""

    x: int = Field(ge=0, le=4)
    y: int = Field(ge=0, le=4)
    pool_count: int = Field(ge=0)
    intensity: float = Field(ge=0.0, le=1.0)
    pools: List[HeatmapPoint] = Field(default_factory=list)


class HeatmapResult(BaseModel):
    points: List[HeatmapPoint]
    cells: List[HeatmapCell]


class PerformanceSeriesPoint(BaseModel):
    time: str
    value: float


class PoolPerformanceStats(BaseModel):
    """Price series for a pool plus volume, fee and APR context."""

    window_hours: int
    period: str
    interval: str
    series: List[PerformanceSeriesPoint]
    latest_price: Optional[float] = None
    first_price: Optional[float] = None
    change_pct: Optional[float] = None
    high: Optional[float] = None
    low: Optional[float] = None
    volume0: float = 0.0
    volume1: float = 0.0
    fees0: float = 0.0
    fees1: float = 0.0
    apr: Optional[float] = None


class RiskResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    score: float = Field(ge=0.0, le=100.0)
    label: RiskLabel


class BorrowRiskSnapshot(BaseModel):
    """Borrow-side stress indicators for a pool, optionally scoped to a wallet."""

    scope_label: Literal["Pool Snapshot", "Pool + Wallet Events"]
    utilization_pct: float = Field(ge=0.0, le=100.0)
    borrow_pressure_pct: float = Field(ge=0.0, le=100.0)
    debt_skew_pct: float = Field(ge=0.0, le=100.0)
    collateral_mix_token0_pct: float = Field(ge=0.0, le=100.0)
    collateral_mix_token1_pct: float = Field(ge=0.0, le=100.0)
    debt_mix_token0_pct: float = Field(ge=0.0, le=100.0)
    debt_mix_token1_pct: float = Field(ge=0.0, le=100.0)
    position_count: int = Field(ge=0)
    event_momentum: float = Field(ge=0.0, le=100.0)
    risk_score: float = Field(ge=0.0, le=100.0)
    risk_label: RiskLabel
    last_event_at: Optional[datetime] = None


class SwapTapeItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    timestamp: datetime
    tx_signature: str = ""
    user_address: str = ""
    amount_in: float = Field(ge=0.0)
    amount_out: float = Field(ge=0.0)
    implied_price: Optional[float] = None
    is_token0_in: bool = False
    size_tier: SizeTier
    speed_tier: SpeedTier
    slot: str = ""
