"""Concurrent fan-out that keeps successes and collects failures.

Cancellation is never collected: a superseded request means the whole query
is no longer wanted, so it propagates to the caller.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Any, Awaitable, Dict

from src.poolanalytics.exceptions import is_cancellation


@dataclass
class SettledResults:
    """Outcome of settle(): successful values and failures, by name."""

    values: Dict[str, Any] = field(default_factory=dict)
    errors: Dict[str, Exception] = field(default_factory=dict)

    def get(self, name: str, default: Any = None) -> Any:
        return self.values.get(name, default)

    def ok(self, name: str) -> bool:
        return name in self.values


async def settle(**awaitables: Awaitable[Any]) -> SettledResults:
    """
    Await all named awaitables concurrently.

    Args:
        **awaitables: Named coroutines/futures to run

    Returns:
        SettledResults with each name in exactly one of values / errors

    Raises:
        RequestCancelled or asyncio.CancelledError if any branch was cancelled
    """
    names = list(awaitables)
    outcomes = await asyncio.gather(*awaitables.values(), return_exceptions=True)

    settled = SettledResults()
    for name, outcome in zip(names, outcomes):
        if isinstance(outcome, BaseException):
            if is_cancellation(outcome) or not isinstance(outcome, Exception):
                raise outcome
            settled.errors[name] = outcome
        else:
            settled.values[name] = outcome
    return settled
