"""Concurrent fan-out/join used by the report assemblers."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Mapping
from typing import Any

import structlog
from src.domain.errors import AnalyticsError, ComputationError

logger = structlog.get_logger(__name__)


async def gather_branches(branches: Mapping[str, Awaitable[Any]]) -> dict[str, Any]:
    """Run independent report branches concurrently and return results by name.

    The join is a barrier: the result is only returned once every branch has
    finished. The first failing branch fails the whole call and the remaining
    branches are cancelled. Errors outside the analytics taxonomy (driver or
    connectivity failures) are wrapped in ``ComputationError``.
    """
    names = list(branches)
    tasks = [asyncio.ensure_future(guard_read(name, branches[name])) for name in names]
    try:
        results = await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise
    return dict(zip(names, results, strict=True))


async def guard_read(name: str, awaitable: Awaitable[Any]) -> Any:
    """Await a single record store read, wrapping driver failures in ``ComputationError``."""
    try:
        return await awaitable
    except AnalyticsError:
        raise
    except Exception as exc:
        await logger.aerror(
            "report_branch_failed",
            branch=name,
            error_type=exc.__class__.__name__,
            error=str(exc)[:200],
        )
        raise ComputationError(name, exc) from exc
