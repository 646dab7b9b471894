"""
Fan-out / fan-in over independent blocking sources.

``gather_sources`` runs each named callable on a worker thread
(``asyncio.to_thread``), waits for all of them, and captures every outcome as
a ``SourceResult``. One source raising never cancels or hides the others:
the exception is logged at WARNING and recorded on that source's result.

Results come back in the order the tasks were declared, never completion
order, so downstream merging is deterministic.

Usage::

    results = await gather_sources({
        "clients":  lambda: store.fetch_clients(status="active"),
        "licenses": store.fetch_licenses,
    })
    for r in results:
        if r.success:
            ...
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional

logger = logging.getLogger(__name__)


@dataclass
class SourceResult:
    """Outcome of one source task.

    Attributes:
        name:    Source name (the task's key).
        success: ``True`` when the callable returned normally.
        value:   The callable's return value (``None`` on failure).
        error:   ``"<ExceptionType>: <message>"`` on failure, else ``None``.
    """

    name:    str
    success: bool
    value:   Any           = None
    error:   Optional[str] = None


async def gather_sources(
    tasks: Mapping[str, Callable[[], Any]],
    operation: str = "",
) -> list[SourceResult]:
    """Run every task concurrently and capture per-task results.

    Args:
        tasks:     Source name → zero-argument blocking callable.
        operation: Operation name used in log messages.

    Returns:
        One ``SourceResult`` per task, in ``tasks`` order.
    """
    names = list(tasks)
    outcomes = await asyncio.gather(
        *(asyncio.to_thread(tasks[name]) for name in names),
        return_exceptions=True,
    )

    results: list[SourceResult] = []
    for name, outcome in zip(names, outcomes):
        if isinstance(outcome, Exception):
            error = f"{type(outcome).__name__}: {outcome}"
            logger.warning("%s: source '%s' failed — %s", operation or "fan-out", name, error)
            results.append(SourceResult(name=name, success=False, error=error))
        elif isinstance(outcome, BaseException):
            # KeyboardInterrupt, CancelledError, ... are not source failures
            raise outcome
        else:
            results.append(SourceResult(name=name, success=True, value=outcome))
    return results


def failed(results: list[SourceResult]) -> dict[str, str]:
    """Source name → error message for every failed result."""
    return {r.name: r.error or "" for r in results if not r.success}
