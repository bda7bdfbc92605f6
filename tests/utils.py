from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from itertools import count

from src.api.deps import issue_smoke_token
from src.core.auth import Role
from src.domain.models import (
    Attendance,
    Event,
    Judge,
    MemberStatus,
    Registration,
    RegistrationStatus,
    Rubric,
    Score,
    Submission,
    TaskCategory,
    TaskPriority,
    TaskStatus,
    TeamMember,
    Workspace,
    WorkspaceRole,
    WorkspaceTask,
)

# Reference "now" shared by the service clocks in tests
NOW = datetime(2024, 6, 15, 12, 0, tzinfo=UTC)

_ids = count(1)


def auth_headers(user_id: str = "organizer-1", role: Role = Role.ORGANIZER) -> dict[str, str]:
    token = issue_smoke_token(user_id, role=role, email=f"{user_id}@example.com")
    return {"Authorization": f"Bearer {token}"}


def make_registration(
    registered_at: datetime,
    *,
    event_id: str = "event-1",
    status: RegistrationStatus = RegistrationStatus.CONFIRMED,
    sessions: Sequence[str | None] = (),
) -> Registration:
    """Registration with one attendance row per entry in ``sessions``."""
    registration_id = f"reg-{next(_ids)}"
    return Registration(
        id=registration_id,
        event_id=event_id,
        user_id=f"user-{registration_id}",
        status=status,
        registered_at=registered_at,
        attendance=[
            Attendance(
                id=f"att-{next(_ids)}",
                registration_id=registration_id,
                session_id=session_id,
                checked_in_at=registered_at,
            )
            for session_id in sessions
        ],
    )


def make_submission(
    judge_scores: dict[str, dict[str, float]],
    *,
    event_id: str = "event-1",
    judge_names: dict[str, str] | None = None,
) -> Submission:
    """Submission scored by each judge id in ``judge_scores``."""
    judge_names = judge_names or {}
    submission_id = f"sub-{next(_ids)}"
    return Submission(
        id=submission_id,
        event_id=event_id,
        team_name=f"Team {submission_id}",
        scores=[
            Score(
                id=f"score-{next(_ids)}",
                submission_id=submission_id,
                judge=Judge(id=judge_id, name=judge_names.get(judge_id, judge_id.title())),
                scores=raw,
            )
            for judge_id, raw in judge_scores.items()
        ],
    )


def make_task(
    now: datetime,
    *,
    status: TaskStatus = TaskStatus.NOT_STARTED,
    priority: TaskPriority = TaskPriority.MEDIUM,
    category: TaskCategory = TaskCategory.LOGISTICS,
    assignee: TeamMember | None = None,
    due_in: timedelta | None = None,
    created_at: datetime | None = None,
    updated_at: datetime | None = None,
    completed_at: datetime | None = None,
    workspace_id: str = "ws-1",
) -> WorkspaceTask:
    task_id = f"task-{next(_ids)}"
    created = created_at or now - timedelta(days=3)
    return WorkspaceTask(
        id=task_id,
        workspace_id=workspace_id,
        title=f"Task {task_id}",
        status=status,
        priority=priority,
        category=category,
        created_at=created,
        updated_at=updated_at or created,
        assignee_id=assignee.id if assignee else None,
        assignee_name=assignee.name if assignee else None,
        due_date=now + due_in if due_in is not None else None,
        completed_at=completed_at,
    )


def make_member(
    name: str,
    *,
    role: WorkspaceRole = WorkspaceRole.GENERAL_VOLUNTEER,
    status: MemberStatus = MemberStatus.ACTIVE,
    workspace_id: str = "ws-1",
) -> TeamMember:
    slug = name.lower().replace(" ", "-")
    return TeamMember(
        id=f"member-{slug}",
        workspace_id=workspace_id,
        user_id=f"user-{slug}",
        name=name,
        role=role,
        status=status,
    )


@dataclass
class FakeEventStore:
    """In-memory event record store recording which reads were made."""

    events: dict[str, Event] = field(default_factory=dict)
    registrations: list[Registration] = field(default_factory=list)
    submissions: list[Submission] = field(default_factory=list)
    rubrics: dict[str, Rubric] = field(default_factory=dict)
    calls: list[str] = field(default_factory=list)
    fail_on: set[str] = field(default_factory=set)

    def _record(self, name: str) -> None:
        self.calls.append(name)
        if name in self.fail_on:
            raise ConnectionError(f"{name} unavailable")

    async def get_event(self, event_id: str) -> Event | None:
        self._record("get_event")
        return self.events.get(event_id)

    async def list_registrations(
        self, event_id: str, status: RegistrationStatus | None = None
    ) -> list[Registration]:
        self._record("list_registrations")
        rows = [
            r
            for r in self.registrations
            if r.event_id == event_id and (status is None or r.status == status)
        ]
        return sorted(rows, key=lambda r: r.registered_at)

    async def list_submissions(self, event_id: str) -> list[Submission]:
        self._record("list_submissions")
        return [s for s in self.submissions if s.event_id == event_id]

    async def get_rubric(self, event_id: str) -> Rubric | None:
        self._record("get_rubric")
        return self.rubrics.get(event_id)


@dataclass
class FakeWorkspaceStore:
    """In-memory workspace record store recording which reads were made."""

    workspaces: dict[str, Workspace] = field(default_factory=dict)
    tasks: list[WorkspaceTask] = field(default_factory=list)
    members: list[TeamMember] = field(default_factory=list)
    calls: list[str] = field(default_factory=list)
    fail_on: set[str] = field(default_factory=set)

    def _record(self, name: str) -> None:
        self.calls.append(name)
        if name in self.fail_on:
            raise ConnectionError(f"{name} unavailable")

    async def get_workspace(self, workspace_id: str) -> Workspace | None:
        self._record("get_workspace")
        return self.workspaces.get(workspace_id)

    async def list_tasks(
        self,
        workspace_id: str,
        *,
        assignee_id: str | None = None,
        updated_since: datetime | None = None,
    ) -> list[WorkspaceTask]:
        self._record("list_tasks")
        rows = [t for t in self.tasks if t.workspace_id == workspace_id]
        if assignee_id is not None:
            rows = [t for t in rows if t.assignee_id == assignee_id]
        if updated_since is not None:
            rows = [t for t in rows if t.updated_at >= updated_since]
        return sorted(rows, key=lambda t: t.created_at)

    async def list_team_members(
        self, workspace_id: str, status: MemberStatus | None = None
    ) -> list[TeamMember]:
        self._record("list_team_members")
        return [
            m
            for m in self.members
            if m.workspace_id == workspace_id and (status is None or m.status == status)
        ]

    async def find_team_member(self, workspace_id: str, user_id: str) -> TeamMember | None:
        self._record("find_team_member")
        return next(
            (m for m in self.members if m.workspace_id == workspace_id and m.user_id == user_id),
            None,
        )
