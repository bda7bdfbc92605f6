"""Collaboration metrics for workspaces.

Message volume and reassignment history are not stored alongside tasks, so
these metrics come from a pluggable ``CollaborationDataSource``. A metric the
source cannot provide is reported as unavailable instead of failing the report.
"""

from __future__ import annotations

from collections.abc import Awaitable
from typing import TypeVar

import structlog
from src.domain.errors import DegradedMetricError
from src.domain.reports import (
    CollaborationPatterns,
    CommunicationFrequency,
    CrossFunctionalWork,
    ReportPeriod,
    TaskHandoff,
)
from src.domain.stores import CollaborationDataSource

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class NullCollaborationDataSource:
    """Default source used until message and assignment-history data exist."""

    async def communication_frequency(
        self, workspace_id: str, period: ReportPeriod
    ) -> list[CommunicationFrequency]:
        raise DegradedMetricError("communication_frequency", "no message data source")

    async def task_handoffs(self, workspace_id: str) -> list[TaskHandoff]:
        raise DegradedMetricError("task_handoffs", "no assignment history source")

    async def cross_functional_work(self, workspace_id: str) -> list[CrossFunctionalWork]:
        raise DegradedMetricError("cross_functional_work", "no collaboration source")


async def collect_collaboration_patterns(
    source: CollaborationDataSource,
    workspace_id: str,
    period: ReportPeriod,
) -> CollaborationPatterns:
    """Query each collaboration metric, degrading unavailable ones to empty lists."""
    patterns = CollaborationPatterns()

    patterns.communication_frequency = await _degradable(
        patterns, workspace_id, source.communication_frequency(workspace_id, period)
    )
    patterns.task_handoffs = await _degradable(
        patterns, workspace_id, source.task_handoffs(workspace_id)
    )
    patterns.cross_functional_work = await _degradable(
        patterns, workspace_id, source.cross_functional_work(workspace_id)
    )
    return patterns


async def _degradable(
    patterns: CollaborationPatterns,
    workspace_id: str,
    awaitable: Awaitable[list[T]],
) -> list[T]:
    try:
        return list(await awaitable)
    except DegradedMetricError as exc:
        patterns.degraded = True
        patterns.unavailable_metrics.append(exc.metric)
        await logger.awarning(
            "collaboration_metric_degraded",
            workspace_id=workspace_id,
            metric=exc.metric,
            reason=exc.reason,
        )
        return []
