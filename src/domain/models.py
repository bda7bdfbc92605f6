"""Read-only records consumed by the analytics engine.

These mirror the persisted rows closely but carry no persistence identity;
stores build fresh instances on every read.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime


class RegistrationStatus(str, enum.Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    WAITLISTED = "WAITLISTED"
    CANCELLED = "CANCELLED"


class TaskStatus(str, enum.Enum):
    NOT_STARTED = "NOT_STARTED"
    IN_PROGRESS = "IN_PROGRESS"
    REVIEW_REQUIRED = "REVIEW_REQUIRED"
    COMPLETED = "COMPLETED"
    BLOCKED = "BLOCKED"

    @classmethod
    def open_statuses(cls) -> tuple[TaskStatus, ...]:
        """Statuses that count towards a member's active workload."""
        return (cls.IN_PROGRESS, cls.NOT_STARTED, cls.REVIEW_REQUIRED)


class TaskPriority(str, enum.Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    URGENT = "URGENT"

    @classmethod
    def critical(cls) -> tuple[TaskPriority, ...]:
        return (cls.HIGH, cls.URGENT)


class TaskCategory(str, enum.Enum):
    SETUP = "SETUP"
    MARKETING = "MARKETING"
    LOGISTICS = "LOGISTICS"
    TECHNICAL = "TECHNICAL"
    REGISTRATION = "REGISTRATION"
    POST_EVENT = "POST_EVENT"


class WorkspaceRole(str, enum.Enum):
    WORKSPACE_OWNER = "WORKSPACE_OWNER"
    TEAM_LEAD = "TEAM_LEAD"
    EVENT_COORDINATOR = "EVENT_COORDINATOR"
    VOLUNTEER_MANAGER = "VOLUNTEER_MANAGER"
    TECHNICAL_SPECIALIST = "TECHNICAL_SPECIALIST"
    MARKETING_LEAD = "MARKETING_LEAD"
    GENERAL_VOLUNTEER = "GENERAL_VOLUNTEER"


class MemberStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    PENDING = "PENDING"


@dataclass(slots=True)
class User:
    """Represents an authenticated actor within the system."""

    user_id: str
    email: str = ""
    roles: list[str] = field(default_factory=list)


@dataclass(slots=True)
class Event:
    id: str
    name: str
    start_date: datetime | None = None
    end_date: datetime | None = None


@dataclass(slots=True)
class Attendance:
    """A single check-in. ``session_id`` is None for the overall event check-in."""

    id: str
    registration_id: str
    checked_in_at: datetime
    session_id: str | None = None
    check_in_method: str = "QR_CODE"


@dataclass(slots=True)
class Registration:
    id: str
    event_id: str
    user_id: str
    status: RegistrationStatus
    registered_at: datetime
    attendance: list[Attendance] = field(default_factory=list)


@dataclass(slots=True)
class Criterion:
    id: str
    max_score: float
    weight: float
    name: str = ""


@dataclass(slots=True)
class Rubric:
    id: str
    event_id: str
    criteria: list[Criterion] = field(default_factory=list)


@dataclass(slots=True)
class Judge:
    id: str
    name: str


@dataclass(slots=True)
class Score:
    """One judge's raw scores for a submission, keyed by criterion id."""

    id: str
    submission_id: str
    judge: Judge
    scores: dict[str, float] = field(default_factory=dict)

    @property
    def judge_id(self) -> str:
        return self.judge.id


@dataclass(slots=True)
class Submission:
    id: str
    event_id: str
    team_name: str = ""
    scores: list[Score] = field(default_factory=list)


@dataclass(slots=True)
class WorkspaceTask:
    id: str
    workspace_id: str
    title: str
    status: TaskStatus
    priority: TaskPriority
    category: TaskCategory
    created_at: datetime
    updated_at: datetime
    assignee_id: str | None = None
    assignee_name: str | None = None
    due_date: datetime | None = None
    completed_at: datetime | None = None

    @property
    def is_completed(self) -> bool:
        return self.status == TaskStatus.COMPLETED

    def is_overdue(self, now: datetime) -> bool:
        """A task is overdue when its due date has passed and it is not completed."""
        return self.due_date is not None and self.due_date < now and not self.is_completed


@dataclass(slots=True)
class TeamMember:
    id: str
    workspace_id: str
    user_id: str
    name: str
    role: WorkspaceRole
    status: MemberStatus = MemberStatus.ACTIVE


@dataclass(slots=True)
class Workspace:
    id: str
    name: str
    event_id: str
    event_name: str
    created_at: datetime
    event_start_date: datetime | None = None
    event_end_date: datetime | None = None
