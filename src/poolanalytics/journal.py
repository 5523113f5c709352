"""Wallet activity journal.

Swaps, lending events and liquidity events come from separate indexer
endpoints with different shapes. Each source has its own JournalEntry
constructor; merge_journal_entries interleaves them newest first.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Iterable, List, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from src.poolanalytics.models.indexer import (
    IndexerLendingEvent,
    IndexerLiquidityEvent,
    IndexerSwap,
)
from src.poolanalytics.parsing import short_address, timestamp_or_epoch, to_number

UNKNOWN_POOL = "unknown-pool"


class JournalEntryType(Enum):
    SWAP = "swap"
    LIQUIDITY = "liquidity"
    LENDING = "lending"


def _source_id(entry_type: JournalEntryType, source_id: Optional[Union[int, str]], index: int) -> str:
    return f"{entry_type.value}-{source_id if source_id is not None else index}"


class JournalEntry(BaseModel):
    """One line of the wallet journal, whatever the source."""

    model_config = ConfigDict(frozen=True)

    id: str
    type: JournalEntryType
    timestamp: datetime
    pool_address: str
    tx_signature: str = ""
    title: str
    subtitle: str
    amount_summary: str

    @classmethod
    def from_swap(cls, event: Union[IndexerSwap, Mapping[str, Any]], index: int) -> "JournalEntry":
        event = IndexerSwap.coerce(event)
        pool_address = event.pair or UNKNOWN_POOL
        amount_in = to_number(event.amount_in)
        amount_out = to_number(event.amount_out)

        return cls(
            id=_source_id(JournalEntryType.SWAP, event.id, index),
            type=JournalEntryType.SWAP,
            timestamp=timestamp_or_epoch(event.timestamp),
            pool_address=pool_address,
            tx_signature=event.tx_sig or "",
            title="Swap T0→T1" if event.is_token0_in else "Swap T1→T0",
            subtitle=short_address(pool_address),
            amount_summary=f"{amount_in:.2f} in • {amount_out:.2f} out",
        )

    @classmethod
    def from_lending(
        cls, event: Union[IndexerLendingEvent, Mapping[str, Any]], index: int
    ) -> "JournalEntry":
        event = IndexerLendingEvent.coerce(event)
        pool_address = event.pair or UNKNOWN_POOL
        description = (event.description or "").strip()
        event_type = (event.event_type or "").replace("_", " ")
        amount0 = to_number(event.amount0)
        amount1 = to_number(event.amount1)

        return cls(
            id=_source_id(JournalEntryType.LENDING, event.id, index),
            type=JournalEntryType.LENDING,
            timestamp=timestamp_or_epoch(event.event_timestamp),
            pool_address=pool_address,
            tx_signature=event.transaction_signature or "",
            title=description or event_type or "Lending event",
            subtitle=short_address(pool_address),
            amount_summary=f"Δ0 {amount0:.2f} • Δ1 {amount1:.2f}",
        )

    @classmethod
    def from_liquidity(
        cls, event: Union[IndexerLiquidityEvent, Mapping[str, Any]], index: int
    ) -> "JournalEntry":
        event = IndexerLiquidityEvent.coerce(event)
        pool_address = (event.pair.address if event.pair else None) or UNKNOWN_POOL
        amount0 = to_number(event.amount0)
        amount1 = to_number(event.amount1)
        liquidity = to_number(event.liquidity)

        return cls(
            id=_source_id(JournalEntryType.LIQUIDITY, event.id, index),
            type=JournalEntryType.LIQUIDITY,
            timestamp=timestamp_or_epoch(event.timestamp),
            pool_address=pool_address,
            tx_signature=event.tx_sig or "",
            title="Liquidity Remove" if event.event_type == "remove" else "Liquidity Add",
            subtitle=short_address(pool_address),
            amount_summary=f"{amount0:.2f} / {amount1:.2f} • LP {liquidity:.2f}",
        )


class WalletJournalResult(BaseModel):
    """Merged journal plus the messages of any sources that failed to load."""

    entries: List[JournalEntry] = Field(default_factory=list)
    errors: List[str] = Field(default_factory=list)


def merge_journal_entries(
    swaps: Iterable[Union[IndexerSwap, Mapping[str, Any]]] = (),
    lending: Iterable[Union[IndexerLendingEvent, Mapping[str, Any]]] = (),
    liquidity: Iterable[Union[IndexerLiquidityEvent, Mapping[str, Any]]] = (),
) -> list[JournalEntry]:
    """
    Map each source into JournalEntry and merge newest first.

    Events without a usable timestamp are dated at the epoch and sink to the
    bottom. The sort is stable, so entries sharing a timestamp keep the
    swaps, lending, liquidity order.

    Returns:
        JournalEntries sorted by descending timestamp
    """
    entries = [JournalEntry.from_swap(event, index) for index, event in enumerate(swaps)]
    entries += [JournalEntry.from_lending(event, index) for index, event in enumerate(lending)]
    entries += [JournalEntry.from_liquidity(event, index) for index, event in enumerate(liquidity)]

    return sorted(entries, key=lambda entry: entry.timestamp, reverse=True)
