"""
Workspace health analytics.

Task statistics, team activity, a composite health score with bottleneck
detection, workload balancing, progress trends and rule-based
recommendations for a single event workspace.
"""

from __future__ import annotations

import asyncio
import math
from collections.abc import Callable, Sequence
from datetime import UTC, date, datetime, timedelta

import structlog
from src.core.config import AnalyticsThresholds, get_settings
from src.domain.errors import WorkspaceAccessDeniedError, WorkspaceNotFoundError
from src.domain.models import MemberStatus, TaskPriority, TaskStatus, WorkspaceTask
from src.domain.reports import (
    Bottleneck,
    BottleneckType,
    CapacityStatus,
    CategoryBreakdown,
    CollaborationPatterns,
    MemberTaskAssignment,
    MemberWorkload,
    PriorityBreakdown,
    ProgressTrend,
    Recommendation,
    RecommendationType,
    ReportPeriod,
    Severity,
    TeamActivityMetrics,
    WorkloadDistribution,
    WorkspaceAnalyticsReport,
    WorkspaceHealthIndicators,
    WorkspaceTaskStats,
)
from src.domain.services.collaboration import (
    NullCollaborationDataSource,
    collect_collaboration_patterns,
)
from src.domain.services.fanout import gather_branches, guard_read
from src.domain.stores import CollaborationDataSource, WorkspaceRecordStore

logger = structlog.get_logger(__name__)


def _percentage(part: int | float, whole: int | float) -> float:
    return (part / whole) * 100 if whole > 0 else 0.0


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class WorkspaceAnalyticsService:
    """Service computing health and workload analytics for a workspace."""

    def __init__(
        self,
        store: WorkspaceRecordStore,
        *,
        collaboration_source: CollaborationDataSource | None = None,
        thresholds: AnalyticsThresholds | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.store = store
        self.collaboration_source = collaboration_source or NullCollaborationDataSource()
        self.thresholds = thresholds or get_settings().analytics
        self._clock = clock or (lambda: datetime.now(UTC))

    async def get_workspace_analytics(
        self, workspace_id: str, user_id: str
    ) -> WorkspaceAnalyticsReport:
        """
        Build the full analytics report for a workspace member.

        Membership is verified before any task or team data is read. The six
        sub-computations run concurrently; recommendations are derived from
        their results afterwards.
        """
        await self.verify_workspace_access(workspace_id, user_id)

        workspace = await guard_read("get_workspace", self.store.get_workspace(workspace_id))
        if workspace is None:
            await logger.awarning("workspace_report_not_found", workspace_id=workspace_id)
            raise WorkspaceNotFoundError(workspace_id)

        now = self._clock()
        period = ReportPeriod(start_date=workspace.created_at, end_date=now)

        results = await gather_branches(
            {
                "task_stats": self.calculate_task_stats(workspace_id),
                "team_activity": self.calculate_team_activity(workspace_id),
                "health_indicators": self.calculate_health_indicators(workspace_id),
                "workload_distribution": self.calculate_workload_distribution(workspace_id),
                "collaboration_patterns": self.calculate_collaboration_patterns(
                    workspace_id, period
                ),
                "progress_trends": self.calculate_progress_trends(workspace_id, period),
            }
        )

        recommendations = self.generate_recommendations(
            task_stats=results["task_stats"],
            team_activity=results["team_activity"],
            health_indicators=results["health_indicators"],
            workload_distribution=results["workload_distribution"],
        )

        report = WorkspaceAnalyticsReport(
            workspace_id=workspace.id,
            workspace_name=workspace.name,
            event_name=workspace.event_name,
            generated_at=now,
            report_period=period,
            task_stats=results["task_stats"],
            team_activity=results["team_activity"],
            health_indicators=results["health_indicators"],
            workload_distribution=results["workload_distribution"],
            collaboration_patterns=results["collaboration_patterns"],
            progress_trends=results["progress_trends"],
            recommendations=recommendations,
        )

        await logger.ainfo(
            "workspace_report_generated",
            workspace_id=workspace_id,
            user_id=user_id,
            health_score=report.health_indicators.health_score,
            recommendations=len(recommendations),
        )
        return report

    async def verify_workspace_access(self, workspace_id: str, user_id: str) -> None:
        """Raise ``WorkspaceAccessDeniedError`` unless the user belongs to the workspace."""
        member = await guard_read(
            "find_team_member", self.store.find_team_member(workspace_id, user_id)
        )
        if member is None:
            await logger.awarning(
                "workspace_access_denied", workspace_id=workspace_id, user_id=user_id
            )
            raise WorkspaceAccessDeniedError(workspace_id, user_id)

    async def calculate_task_stats(self, workspace_id: str) -> WorkspaceTaskStats:
        tasks = await self.store.list_tasks(workspace_id)
        now = self._clock()

        by_status = {status: 0 for status in TaskStatus}
        for task in tasks:
            by_status[task.status] += 1

        total = len(tasks)
        completed = by_status[TaskStatus.COMPLETED]
        return WorkspaceTaskStats(
            total=total,
            completed=completed,
            in_progress=by_status[TaskStatus.IN_PROGRESS],
            not_started=by_status[TaskStatus.NOT_STARTED],
            review_required=by_status[TaskStatus.REVIEW_REQUIRED],
            blocked=by_status[TaskStatus.BLOCKED],
            overdue=sum(1 for task in tasks if task.is_overdue(now)),
            completion_rate=_percentage(completed, total),
        )

    async def calculate_team_activity(self, workspace_id: str) -> TeamActivityMetrics:
        """
        Membership breakdown and per-member task assignment.

        ``active_members`` counts distinct assignees of tasks updated within the
        activity window, a proxy for recent engagement.
        """
        members, tasks = await asyncio.gather(
            self.store.list_team_members(workspace_id, status=MemberStatus.ACTIVE),
            self.store.list_tasks(workspace_id),
        )
        now = self._clock()

        members_by_role: dict[str, int] = {}
        for member in members:
            role = member.role.value
            members_by_role[role] = members_by_role.get(role, 0) + 1

        assigned_by_member: dict[str, list[WorkspaceTask]] = {}
        for task in tasks:
            if task.assignee_id:
                assigned_by_member.setdefault(task.assignee_id, []).append(task)

        distribution: list[MemberTaskAssignment] = []
        for member in members:
            assigned = assigned_by_member.get(member.id, [])
            completed = sum(1 for task in assigned if task.is_completed)
            distribution.append(
                MemberTaskAssignment(
                    member_id=member.id,
                    member_name=member.name,
                    role=member.role.value,
                    assigned_tasks=len(assigned),
                    completed_tasks=completed,
                    overdue_tasks=sum(1 for task in assigned if task.is_overdue(now)),
                    completion_rate=_percentage(completed, len(assigned)),
                )
            )

        recent_since = now - timedelta(days=self.thresholds.activity_window_days)
        active_ids = {
            task.assignee_id
            for task in tasks
            if task.assignee_id and task.updated_at >= recent_since
        }

        return TeamActivityMetrics(
            total_members=len(members),
            active_members=len(active_ids),
            members_by_role=members_by_role,
            task_assignment_distribution=distribution,
        )

    async def calculate_health_indicators(self, workspace_id: str) -> WorkspaceHealthIndicators:
        tasks = await self.store.list_tasks(workspace_id)
        now = self._clock()
        window_end = now + timedelta(hours=self.thresholds.critical_deadline_window_hours)

        overdue = sum(1 for task in tasks if task.is_overdue(now))
        blocked = sum(1 for task in tasks if task.status == TaskStatus.BLOCKED)
        unassigned = sum(1 for task in tasks if not task.assignee_id)
        critical = sum(
            1
            for task in tasks
            if task.due_date is not None
            and not task.is_completed
            and now <= task.due_date <= window_end
        )

        bottlenecks = self.identify_bottlenecks(tasks)
        health_score = self.compute_health_score(
            total=len(tasks),
            overdue=overdue,
            blocked=blocked,
            unassigned=unassigned,
            critical=critical,
            bottleneck_count=len(bottlenecks),
        )

        return WorkspaceHealthIndicators(
            overdue_tasks=overdue,
            blocked_tasks=blocked,
            unassigned_tasks=unassigned,
            critical_deadlines=critical,
            bottlenecks=bottlenecks,
            health_score=health_score,
        )

    def identify_bottlenecks(self, tasks: Sequence[WorkspaceTask]) -> list[Bottleneck]:
        """Detect overloaded assignees and blocked high-priority work."""
        bottlenecks: list[Bottleneck] = []

        open_by_assignee: dict[str, list[WorkspaceTask]] = {}
        names: dict[str, str] = {}
        for task in tasks:
            if not task.assignee_id:
                continue
            names.setdefault(task.assignee_id, task.assignee_name or "Unknown")
            if not task.is_completed:
                open_by_assignee.setdefault(task.assignee_id, []).append(task)

        for assignee_id, open_tasks in open_by_assignee.items():
            if len(open_tasks) <= self.thresholds.overload_task_threshold:
                continue
            severity = (
                Severity.HIGH
                if len(open_tasks) > self.thresholds.overload_high_severity_threshold
                else Severity.MEDIUM
            )
            bottlenecks.append(
                Bottleneck(
                    type=BottleneckType.MEMBER_OVERLOAD,
                    description=f"{names[assignee_id]} has {len(open_tasks)} active tasks",
                    severity=severity,
                    affected_tasks=[task.id for task in open_tasks],
                )
            )

        blocked_critical = [
            task
            for task in tasks
            if task.status == TaskStatus.BLOCKED and task.priority in TaskPriority.critical()
        ]
        if blocked_critical:
            bottlenecks.append(
                Bottleneck(
                    type=BottleneckType.BLOCKED_CRITICAL,
                    description=f"{len(blocked_critical)} high-priority tasks are blocked",
                    severity=Severity.HIGH,
                    affected_tasks=[task.id for task in blocked_critical],
                )
            )

        return bottlenecks

    def compute_health_score(
        self,
        *,
        total: int,
        overdue: int,
        blocked: int,
        unassigned: int,
        critical: int,
        bottleneck_count: int,
    ) -> int:
        """Composite 0-100 score; a workspace without tasks scores exactly 100."""
        if total == 0:
            return 100

        weights = self.thresholds.health_weights
        score = 100.0
        score -= (overdue / total) * weights.overdue
        score -= (blocked / total) * weights.blocked
        score -= (unassigned / total) * weights.unassigned
        score -= (critical / total) * weights.critical_deadlines
        score -= bottleneck_count * weights.per_bottleneck
        return min(100, max(0, _round_half_up(score)))

    async def calculate_workload_distribution(self, workspace_id: str) -> WorkloadDistribution:
        members, tasks = await asyncio.gather(
            self.store.list_team_members(workspace_id, status=MemberStatus.ACTIVE),
            self.store.list_tasks(workspace_id),
        )

        by_member = []
        for member in members:
            member_tasks = [task for task in tasks if task.assignee_id == member.id]
            active = [task for task in member_tasks if task.status in TaskStatus.open_statuses()]
            workload = self.workload_percentage(len(member_tasks))
            by_member.append(
                MemberWorkload(
                    member_id=member.id,
                    member_name=member.name,
                    role=member.role.value,
                    total_tasks=len(member_tasks),
                    active_tasks=len(active),
                    workload_percentage=min(workload, self.thresholds.workload_display_cap),
                    capacity_status=self.capacity_status(workload),
                )
            )

        category_counts: dict[str, list[int]] = {}
        priority_counts: dict[str, list[int]] = {}
        for task in tasks:
            for key, counts in (
                (task.category.value, category_counts),
                (task.priority.value, priority_counts),
            ):
                bucket = counts.setdefault(key, [0, 0])
                bucket[0] += 1
                if task.is_completed:
                    bucket[1] += 1

        return WorkloadDistribution(
            by_member=by_member,
            by_category=[
                CategoryBreakdown(
                    category=category,
                    task_count=total,
                    completed_count=done,
                    percentage=_percentage(done, total),
                )
                for category, (total, done) in category_counts.items()
            ],
            by_priority=[
                PriorityBreakdown(
                    priority=priority,
                    task_count=total,
                    completed_count=done,
                    percentage=_percentage(done, total),
                )
                for priority, (total, done) in priority_counts.items()
            ],
        )

    def workload_percentage(self, task_count: int) -> float:
        """Uncapped share of the recommended task capacity."""
        return (task_count / self.thresholds.recommended_task_capacity) * 100

    def capacity_status(self, workload_percentage: float) -> CapacityStatus:
        if workload_percentage < self.thresholds.underutilized_below:
            return CapacityStatus.UNDERUTILIZED
        if workload_percentage <= 100:
            return CapacityStatus.OPTIMAL
        return CapacityStatus.OVERLOADED

    async def calculate_progress_trends(
        self, workspace_id: str, period: ReportPeriod
    ) -> list[ProgressTrend]:
        """Daily created/completed counts over the period, including idle days."""
        tasks = await self.store.list_tasks(workspace_id)

        buckets: dict[date, list[int]] = {}
        day = _utc_date(period.start_date)
        last_day = _utc_date(period.end_date)
        while day <= last_day:
            buckets[day] = [0, 0]
            day += timedelta(days=1)

        for task in tasks:
            created = buckets.get(_utc_date(task.created_at))
            if created is not None:
                created[0] += 1
            if task.completed_at is not None:
                completed = buckets.get(_utc_date(task.completed_at))
                if completed is not None:
                    completed[1] += 1

        trends: list[ProgressTrend] = []
        cumulative = 0
        for day, (created_count, completed_count) in buckets.items():
            cumulative += completed_count
            trends.append(
                ProgressTrend(
                    date=day.isoformat(),
                    tasks_completed=completed_count,
                    tasks_created=created_count,
                    cumulative_completion=cumulative,
                )
            )
        return trends

    async def calculate_collaboration_patterns(
        self, workspace_id: str, period: ReportPeriod
    ) -> CollaborationPatterns:
        return await collect_collaboration_patterns(
            self.collaboration_source, workspace_id, period
        )

    def generate_recommendations(
        self,
        *,
        task_stats: WorkspaceTaskStats,
        team_activity: TeamActivityMetrics,
        health_indicators: WorkspaceHealthIndicators,
        workload_distribution: WorkloadDistribution,
    ) -> list[Recommendation]:
        """Apply the recommendation rules in fixed order, at most one per rule."""
        recommendations: list[Recommendation] = []

        overloaded = [
            member
            for member in workload_distribution.by_member
            if member.capacity_status == CapacityStatus.OVERLOADED
        ]
        if overloaded:
            recommendations.append(
                Recommendation(
                    type=RecommendationType.WORKLOAD_BALANCE,
                    priority=Severity.HIGH,
                    title="Address Team Member Overload",
                    description=f"{len(overloaded)} team members are overloaded with tasks",
                    action_items=[
                        "Redistribute tasks from overloaded members",
                        "Consider extending deadlines for non-critical tasks",
                        "Recruit additional team members if needed",
                        "Prioritize tasks and defer lower-priority items",
                    ],
                )
            )

        if health_indicators.overdue_tasks > 0:
            recommendations.append(
                Recommendation(
                    type=RecommendationType.DEADLINE_MANAGEMENT,
                    priority=Severity.HIGH,
                    title="Address Overdue Tasks",
                    description=f"{health_indicators.overdue_tasks} tasks are overdue",
                    action_items=[
                        "Review and update overdue task deadlines",
                        "Reassign tasks if current assignees are unavailable",
                        "Break down large overdue tasks into smaller chunks",
                        "Implement daily standup meetings for accountability",
                    ],
                )
            )

        floor = self.thresholds.engagement_ratio_floor
        if (
            team_activity.total_members > 0
            and team_activity.active_members / team_activity.total_members < floor
        ):
            recommendations.append(
                Recommendation(
                    type=RecommendationType.COMMUNICATION,
                    priority=Severity.MEDIUM,
                    title="Improve Team Engagement",
                    description=(
                        f"Less than {floor * 100:.0f}% of team members are actively participating"
                    ),
                    action_items=[
                        "Schedule regular team check-ins",
                        "Create more engaging communication channels",
                        "Recognize and celebrate team contributions",
                        "Provide clear task assignments and expectations",
                    ],
                )
            )

        if task_stats.completion_rate < self.thresholds.completion_rate_floor:
            recommendations.append(
                Recommendation(
                    type=RecommendationType.PROCESS_IMPROVEMENT,
                    priority=Severity.MEDIUM,
                    title="Improve Task Completion Rate",
                    description=f"Task completion rate is {task_stats.completion_rate:.1f}%",
                    action_items=[
                        "Review task complexity and break down large tasks",
                        "Provide better task descriptions and acceptance criteria",
                        "Implement task templates for common activities",
                        "Set up automated deadline reminders",
                    ],
                )
            )

        return recommendations


def _utc_date(moment: datetime) -> date:
    if moment.tzinfo is not None:
        moment = moment.astimezone(UTC)
    return moment.date()
