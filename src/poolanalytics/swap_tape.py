"""Swap tape: recent swaps tagged with size and speed tiers."""

from typing import Any, Iterable, Mapping, Union

from src.poolanalytics.models.indexer import IndexerSwap
from src.poolanalytics.models.views import SwapTapeItem
from src.poolanalytics.parsing import EPOCH, timestamp_or_epoch, to_number
from src.poolanalytics.quantile import size_tier, speed_tier


def _normalize(swap: IndexerSwap, index: int) -> dict[str, Any]:
    amount_in = abs(to_number(swap.amount_in))
    amount_out = abs(to_number(swap.amount_out))
    return {
        "id": str(swap.id if swap.id is not None else index),
        "timestamp": timestamp_or_epoch(swap.timestamp),
        "tx_signature": swap.tx_sig or "",
        "user_address": swap.user_address or "",
        "amount_in": amount_in,
        "amount_out": amount_out,
        "implied_price": amount_out / amount_in if amount_in > 0 else None,
        "is_token0_in": bool(swap.is_token0_in),
        "slot": str(swap.slot) if swap.slot is not None else "",
    }


def build_swap_tape(raw_swaps: Iterable[Union[IndexerSwap, Mapping[str, Any]]]) -> list[SwapTapeItem]:
    """
    Normalize a batch of swaps and classify each one.

    Size tiers come from the quartiles of this batch's amount_in values.
    Speed tiers come from the gap in seconds to the previous entry of the
    newest-first list. The first entry, and any entry whose own or previous
    timestamp was unusable, has no gap and is Normal.

    Args:
        raw_swaps: Swap records (models or raw mappings)

    Returns:
        SwapTapeItems ordered newest first
    """
    swaps = [_normalize(IndexerSwap.coerce(swap), index) for index, swap in enumerate(raw_swaps)]
    swaps.sort(key=lambda item: item["timestamp"], reverse=True)

    amount_values = [item["amount_in"] for item in swaps]

    tape = []
    for index, item in enumerate(swaps):
        delta_seconds = None
        previous = swaps[index - 1] if index > 0 else None
        if previous is not None and EPOCH not in (previous["timestamp"], item["timestamp"]):
            delta_seconds = abs((previous["timestamp"] - item["timestamp"]).total_seconds())

        tape.append(
            SwapTapeItem(
                **item,
                size_tier=size_tier(item["amount_in"], amount_values),
                speed_tier=speed_tier(delta_seconds),
            )
        )

    return tape
