"""Report value objects produced by the analytics services.

Every report is built fresh per request and never persisted.
"""

from __future__ import annotations

import dataclasses
import enum
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

# Event analytics


@dataclass(slots=True)
class RegistrationOverTime:
    date: str
    count: int
    cumulative_count: int


@dataclass(slots=True)
class SessionCheckInRate:
    session_id: str | None
    session_name: str
    total_registrations: int
    checked_in: int
    check_in_rate: float


@dataclass(slots=True)
class ScoreDistribution:
    range: str
    count: int
    percentage: float


@dataclass(slots=True)
class JudgeParticipation:
    judge_id: str
    judge_name: str
    assigned_submissions: int
    scored_submissions: int
    completion_rate: float


@dataclass(slots=True)
class EventSummary:
    total_registrations: int
    confirmed_registrations: int
    total_attendance: int
    overall_check_in_rate: float
    average_score: float
    total_submissions: int
    total_judges: int


@dataclass(slots=True)
class AnalyticsReport:
    event_id: str
    event_name: str
    generated_at: datetime
    registration_over_time: list[RegistrationOverTime]
    session_check_in_rates: list[SessionCheckInRate]
    score_distributions: list[ScoreDistribution]
    judge_participation: list[JudgeParticipation]
    summary: EventSummary


# Workspace analytics


class BottleneckType(str, enum.Enum):
    MEMBER_OVERLOAD = "MEMBER_OVERLOAD"
    DEPENDENCY_CHAIN = "DEPENDENCY_CHAIN"
    BLOCKED_CRITICAL = "BLOCKED_CRITICAL"


class Severity(str, enum.Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class CapacityStatus(str, enum.Enum):
    UNDERUTILIZED = "UNDERUTILIZED"
    OPTIMAL = "OPTIMAL"
    OVERLOADED = "OVERLOADED"


class RecommendationType(str, enum.Enum):
    WORKLOAD_BALANCE = "WORKLOAD_BALANCE"
    DEADLINE_MANAGEMENT = "DEADLINE_MANAGEMENT"
    COMMUNICATION = "COMMUNICATION"
    PROCESS_IMPROVEMENT = "PROCESS_IMPROVEMENT"


@dataclass(slots=True)
class ReportPeriod:
    start_date: datetime
    end_date: datetime


@dataclass(slots=True)
class WorkspaceTaskStats:
    total: int
    completed: int
    in_progress: int
    not_started: int
    review_required: int
    blocked: int
    overdue: int
    completion_rate: float


@dataclass(slots=True)
class MemberTaskAssignment:
    member_id: str
    member_name: str
    role: str
    assigned_tasks: int
    completed_tasks: int
    overdue_tasks: int
    completion_rate: float


@dataclass(slots=True)
class TeamActivityMetrics:
    total_members: int
    active_members: int
    members_by_role: dict[str, int]
    task_assignment_distribution: list[MemberTaskAssignment]


@dataclass(slots=True)
class Bottleneck:
    type: BottleneckType
    description: str
    severity: Severity
    affected_tasks: list[str]


@dataclass(slots=True)
class WorkspaceHealthIndicators:
    overdue_tasks: int
    blocked_tasks: int
    unassigned_tasks: int
    critical_deadlines: int
    bottlenecks: list[Bottleneck]
    health_score: int


@dataclass(slots=True)
class MemberWorkload:
    member_id: str
    member_name: str
    role: str
    total_tasks: int
    active_tasks: int
    workload_percentage: float
    capacity_status: CapacityStatus


@dataclass(slots=True)
class CategoryBreakdown:
    category: str
    task_count: int
    completed_count: int
    percentage: float


@dataclass(slots=True)
class PriorityBreakdown:
    priority: str
    task_count: int
    completed_count: int
    percentage: float


@dataclass(slots=True)
class WorkloadDistribution:
    by_member: list[MemberWorkload]
    by_category: list[CategoryBreakdown]
    by_priority: list[PriorityBreakdown]


@dataclass(slots=True)
class CommunicationFrequency:
    date: str
    message_count: int
    active_members: int


@dataclass(slots=True)
class TaskHandoff:
    from_member: str
    to_member: str
    task_count: int


@dataclass(slots=True)
class CrossFunctionalWork:
    category1: str
    category2: str
    collaboration_count: int


@dataclass(slots=True)
class CollaborationPatterns:
    communication_frequency: list[CommunicationFrequency] = field(default_factory=list)
    task_handoffs: list[TaskHandoff] = field(default_factory=list)
    cross_functional_work: list[CrossFunctionalWork] = field(default_factory=list)
    degraded: bool = False
    unavailable_metrics: list[str] = field(default_factory=list)


@dataclass(slots=True)
class ProgressTrend:
    date: str
    tasks_completed: int
    tasks_created: int
    cumulative_completion: int


@dataclass(slots=True)
class Recommendation:
    type: RecommendationType
    priority: Severity
    title: str
    description: str
    action_items: list[str]


@dataclass(slots=True)
class WorkspaceAnalyticsReport:
    workspace_id: str
    workspace_name: str
    event_name: str
    generated_at: datetime
    report_period: ReportPeriod
    task_stats: WorkspaceTaskStats
    team_activity: TeamActivityMetrics
    health_indicators: WorkspaceHealthIndicators
    workload_distribution: WorkloadDistribution
    collaboration_patterns: CollaborationPatterns
    progress_trends: list[ProgressTrend]
    recommendations: list[Recommendation]


def report_to_dict(report: Any) -> dict[str, Any]:
    """Flatten a report dataclass into JSON-friendly primitives."""
    return _to_primitive(dataclasses.asdict(report))


def _to_primitive(value: Any) -> Any:
    if isinstance(value, dict):
        return {key: _to_primitive(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_to_primitive(item) for item in value]
    if isinstance(value, enum.Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value
