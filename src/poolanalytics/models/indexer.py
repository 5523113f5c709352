"""Pydantic models for raw indexer records.

Numeric fields arrive either as JSON numbers or numeric strings, so they are
kept as-is and converted with parsing.to_number at the point of use. Numeric
and timestamp fields of any other shape are read as missing rather than
rejecting the whole record.
"""

from typing import Annotated, Any, Mapping, Optional, Type, TypeVar, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field


def _number_or_text(value: Any) -> Any:
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        return None
    return value


def _text_or_none(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


Numberish = Annotated[Optional[Union[float, str]], BeforeValidator(_number_or_text)]
Timestamp = Annotated[Optional[str], BeforeValidator(_text_or_none)]

RecordT = TypeVar("RecordT", bound="IndexerRecord")


class IndexerRecord(BaseModel):
    """Base for indexer payloads; unknown fields are ignored."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @classmethod
    def coerce(cls: Type[RecordT], record: Union[RecordT, Mapping[str, Any]]) -> RecordT:
        """Accept either an already-validated record or a raw mapping."""
        if isinstance(record, cls):
            return record
        return cls.model_validate(record)


class IndexerPoolToken(IndexerRecord):
    symbol: Optional[str] = None
    name: Optional[str] = None
    decimals: Optional[int] = None
    address: Optional[str] = None
    icon: Optional[str] = None


class TokenPairAmounts(IndexerRecord):
    token0: Numberish = None
    token1: Numberish = None


class IndexerPool(IndexerRecord):
    """Pool list item as returned by GET /pools."""

    id: Optional[int] = None
    pair_address: Optional[str] = None
    token0: Optional[IndexerPoolToken] = None
    token1: Optional[IndexerPoolToken] = None
    reserves: Optional[TokenPairAmounts] = None
    utilization: Optional[TokenPairAmounts] = None
    total_debts: Optional[TokenPairAmounts] = None
    apr: Numberish = None
    # Scalar or nested per-token object depending on indexer version
    volume_24h: Any = None
    swap_fee_bps: Numberish = None
    fixed_cf_bps: Numberish = None


class IndexerPriceChartPoint(IndexerRecord):
    bucket: str
    avg_price: Numberish = None


class IndexerPriceChart(IndexerRecord):
    prices: list[IndexerPriceChartPoint] = Field(default_factory=list)
    latest_price: Numberish = Field(default=None, alias="latestPrice")
    period: Optional[str] = None
    interval: Optional[str] = None
    hours: Optional[float] = None
    pair_address: Optional[str] = Field(default=None, alias="pairAddress")


class IndexerVolume(IndexerRecord):
    volume0: Numberish = None
    volume1: Numberish = None
    period: Optional[str] = None
    hours: Optional[float] = None


class IndexerFees(IndexerRecord):
    total_fee_paid_in_token0: Numberish = None
    total_fee_paid_in_token1: Numberish = None
    period: Optional[str] = None
    hours: Optional[float] = None


class AprBreakdown(IndexerRecord):
    token0_apr: Numberish = None
    token1_apr: Numberish = None


class IndexerStats(IndexerRecord):
    apr: Numberish = None
    apr_breakdown: Optional[AprBreakdown] = None


class IndexerPoolInfo(IndexerRecord):
    reserve0: Numberish = None
    reserve1: Numberish = None
    pair_address: Optional[str] = Field(default=None, alias="pairAddress")
    timestamp: Timestamp = None


class IndexerSwap(IndexerRecord):
    id: Optional[Union[int, str]] = None
    pair: Optional[str] = None
    user_address: Optional[str] = None
    is_token0_in: Optional[bool] = None
    amount_in: Numberish = None
    amount_out: Numberish = None
    timestamp: Timestamp = None
    tx_sig: Optional[str] = None
    slot: Optional[Union[int, str]] = None


class IndexerPosition(IndexerRecord):
    signer: Optional[str] = None
    pair: Optional[str] = None
    position: Optional[str] = None
    collateral_token: Optional[str] = Field(default=None, alias="collateralToken")
    debt_token: Optional[str] = Field(default=None, alias="debtToken")
    collateral: Numberish = None
    debt_shares: Numberish = Field(default=None, alias="debtShares")
    debt_with_interest: Numberish = Field(default=None, alias="debtWithInterest")
    event_timestamp: Timestamp = None


class IndexerLendingEvent(IndexerRecord):
    id: Optional[Union[int, str]] = None
    event_type: Optional[str] = None
    pair: Optional[str] = None
    signer: Optional[str] = None
    transaction_signature: Optional[str] = None
    event_timestamp: Timestamp = None
    amount0: Numberish = None
    amount1: Numberish = None
    description: Optional[str] = None


class PairRef(IndexerRecord):
    address: Optional[str] = None


class IndexerLiquidityEvent(IndexerRecord):
    id: Optional[Union[int, str]] = None
    pair: Optional[PairRef] = None
    user_address: Optional[str] = None
    amount0: Numberish = None
    amount1: Numberish = None
    liquidity: Numberish = None
    tx_sig: Optional[str] = None
    timestamp: Timestamp = None
    event_type: Optional[str] = None
