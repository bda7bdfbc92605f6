"""Read contracts the analytics services depend on.

The SQL implementations live in ``src.infrastructure.repositories``; tests
use in-memory fakes.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import Protocol

from src.domain.models import (
    Event,
    MemberStatus,
    Registration,
    RegistrationStatus,
    Rubric,
    Submission,
    TeamMember,
    Workspace,
    WorkspaceTask,
)
from src.domain.reports import (
    CommunicationFrequency,
    CrossFunctionalWork,
    ReportPeriod,
    TaskHandoff,
)


class EventRecordStore(Protocol):
    """Read access to event, registration and judging records."""

    async def get_event(self, event_id: str) -> Event | None: ...

    async def list_registrations(
        self,
        event_id: str,
        status: RegistrationStatus | None = None,
    ) -> Sequence[Registration]:
        """Registrations ordered by ``registered_at`` with attendance attached."""
        ...

    async def list_submissions(self, event_id: str) -> Sequence[Submission]:
        """Submissions with their scores and judges attached."""
        ...

    async def get_rubric(self, event_id: str) -> Rubric | None: ...


class WorkspaceRecordStore(Protocol):
    """Read access to workspace, task and team records."""

    async def get_workspace(self, workspace_id: str) -> Workspace | None: ...

    async def list_tasks(
        self,
        workspace_id: str,
        *,
        assignee_id: str | None = None,
        updated_since: datetime | None = None,
    ) -> Sequence[WorkspaceTask]:
        """Tasks ordered by ``created_at``, optionally narrowed by assignee or update time."""
        ...

    async def list_team_members(
        self,
        workspace_id: str,
        status: MemberStatus | None = None,
    ) -> Sequence[TeamMember]: ...

    async def find_team_member(self, workspace_id: str, user_id: str) -> TeamMember | None:
        """Membership lookup by user id regardless of member status."""
        ...


class JudgeAssignmentLookup(Protocol):
    """Source of real judge assignments, replacing the all-submissions approximation."""

    async def count_assigned(self, event_id: str, judge_id: str) -> int: ...


class CollaborationDataSource(Protocol):
    """Provider for collaboration metrics that need data outside the task tables.

    Implementations raise ``DegradedMetricError`` when a metric cannot be produced.
    """

    async def communication_frequency(
        self, workspace_id: str, period: ReportPeriod
    ) -> list[CommunicationFrequency]: ...

    async def task_handoffs(self, workspace_id: str) -> list[TaskHandoff]: ...

    async def cross_functional_work(self, workspace_id: str) -> list[CrossFunctionalWork]: ...
