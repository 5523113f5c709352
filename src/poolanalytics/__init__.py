"""Pool analytics over the Omnipair indexer API.

This package provides:
- IndexerClient: cached, coalescing indexer REST client
- IndexerService: pool performance, borrow risk, swap tape, heatmap and
  wallet journal queries
- Pure builders for each view, usable on already-fetched records
"""

from src.poolanalytics.cancellation import CancelToken
from src.poolanalytics.client import FetchOptions, IndexerClient
from src.poolanalytics.config import IndexerSettings, get_settings, load_settings
from src.poolanalytics.exceptions import (
    IndexerError,
    MalformedResponse,
    NetworkFailure,
    RequestCancelled,
    RequestFailed,
    ServerError,
    is_cancellation,
    reportable_errors,
)
from src.poolanalytics.heatmap import build_heatmap
from src.poolanalytics.journal import JournalEntry, WalletJournalResult, merge_journal_entries
from src.poolanalytics.quantile import quantile, to_bucket
from src.poolanalytics.risk import build_risk_snapshot, compute_composite_risk_score
from src.poolanalytics.service import IndexerService
from src.poolanalytics.swap_tape import build_swap_tape

__all__ = [
    "CancelToken",
    "FetchOptions",
    "IndexerClient",
    "IndexerSettings",
    "get_settings",
    "load_settings",
    "IndexerError",
    "MalformedResponse",
    "NetworkFailure",
    "RequestCancelled",
    "RequestFailed",
    "ServerError",
    "is_cancellation",
    "reportable_errors",
    "build_heatmap",
    "JournalEntry",
    "WalletJournalResult",
    "merge_journal_entries",
    "quantile",
    "to_bucket",
    "build_risk_snapshot",
    "compute_composite_risk_score",
    "IndexerService",
    "build_swap_tape",
]
