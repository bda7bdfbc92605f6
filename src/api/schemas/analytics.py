from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from src.domain.reports import (
    BottleneckType,
    CapacityStatus,
    RecommendationType,
    Severity,
)


class _ReportModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)


# Event analytics


class RegistrationOverTimeItem(_ReportModel):
    date: str = Field(..., description="UTC calendar date (YYYY-MM-DD)")
    count: int
    cumulative_count: int


class SessionCheckInRateItem(_ReportModel):
    session_id: str | None = Field(None, description="Null for the overall event row")
    session_name: str
    total_registrations: int
    checked_in: int
    check_in_rate: float


class ScoreDistributionItem(_ReportModel):
    range: str
    count: int
    percentage: float


class JudgeParticipationItem(_ReportModel):
    judge_id: str
    judge_name: str
    assigned_submissions: int
    scored_submissions: int
    completion_rate: float


class EventSummaryResponse(_ReportModel):
    total_registrations: int
    confirmed_registrations: int
    total_attendance: int
    overall_check_in_rate: float
    average_score: float
    total_submissions: int
    total_judges: int


class EventAnalyticsResponse(_ReportModel):
    event_id: str
    event_name: str
    generated_at: datetime
    registration_over_time: list[RegistrationOverTimeItem]
    session_check_in_rates: list[SessionCheckInRateItem]
    score_distributions: list[ScoreDistributionItem]
    judge_participation: list[JudgeParticipationItem]
    summary: EventSummaryResponse


# Workspace analytics


class ReportPeriodResponse(_ReportModel):
    start_date: datetime
    end_date: datetime


class TaskStatsResponse(_ReportModel):
    total: int
    completed: int
    in_progress: int
    not_started: int
    review_required: int
    blocked: int
    overdue: int
    completion_rate: float


class MemberTaskAssignmentItem(_ReportModel):
    member_id: str
    member_name: str
    role: str
    assigned_tasks: int
    completed_tasks: int
    overdue_tasks: int
    completion_rate: float


class TeamActivityResponse(_ReportModel):
    total_members: int
    active_members: int = Field(..., description="Assignees of tasks updated recently")
    members_by_role: dict[str, int]
    task_assignment_distribution: list[MemberTaskAssignmentItem]


class BottleneckItem(_ReportModel):
    type: BottleneckType
    description: str
    severity: Severity
    affected_tasks: list[str]


class HealthIndicatorsResponse(_ReportModel):
    overdue_tasks: int
    blocked_tasks: int
    unassigned_tasks: int
    critical_deadlines: int
    bottlenecks: list[BottleneckItem]
    health_score: int = Field(..., ge=0, le=100)


class MemberWorkloadItem(_ReportModel):
    member_id: str
    member_name: str
    role: str
    total_tasks: int
    active_tasks: int
    workload_percentage: float
    capacity_status: CapacityStatus


class CategoryBreakdownItem(_ReportModel):
    category: str
    task_count: int
    completed_count: int
    percentage: float


class PriorityBreakdownItem(_ReportModel):
    priority: str
    task_count: int
    completed_count: int
    percentage: float


class WorkloadDistributionResponse(_ReportModel):
    by_member: list[MemberWorkloadItem]
    by_category: list[CategoryBreakdownItem]
    by_priority: list[PriorityBreakdownItem]


class CommunicationFrequencyItem(_ReportModel):
    date: str
    message_count: int
    active_members: int


class TaskHandoffItem(_ReportModel):
    from_member: str
    to_member: str
    task_count: int


class CrossFunctionalWorkItem(_ReportModel):
    category1: str
    category2: str
    collaboration_count: int


class CollaborationPatternsResponse(_ReportModel):
    communication_frequency: list[CommunicationFrequencyItem]
    task_handoffs: list[TaskHandoffItem]
    cross_functional_work: list[CrossFunctionalWorkItem]
    degraded: bool = Field(
        False, description="True when one or more metrics had no data source"
    )
    unavailable_metrics: list[str] = Field(default_factory=list)


class ProgressTrendItem(_ReportModel):
    date: str
    tasks_completed: int
    tasks_created: int
    cumulative_completion: int


class RecommendationItem(_ReportModel):
    type: RecommendationType
    priority: Severity
    title: str
    description: str
    action_items: list[str]


class WorkspaceAnalyticsResponse(_ReportModel):
    workspace_id: str
    workspace_name: str
    event_name: str
    generated_at: datetime
    report_period: ReportPeriodResponse
    task_stats: TaskStatsResponse
    team_activity: TeamActivityResponse
    health_indicators: HealthIndicatorsResponse
    workload_distribution: WorkloadDistributionResponse
    collaboration_patterns: CollaborationPatternsResponse
    progress_trends: list[ProgressTrendItem]
    recommendations: list[RecommendationItem]
