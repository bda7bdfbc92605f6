from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
from src.domain.models import (
    MemberStatus,
    TaskCategory,
    TaskPriority,
    TaskStatus,
    WorkspaceRole,
)
from src.domain.reports import CapacityStatus, ReportPeriod
from src.domain.services import WorkspaceAnalyticsService

from tests.utils import FakeWorkspaceStore, make_member, make_task


class TestTeamActivity:
    @pytest.mark.asyncio
    async def test_breakdown_and_recent_activity(
        self,
        workspace_service: WorkspaceAnalyticsService,
        workspace_store: FakeWorkspaceStore,
        now: datetime,
    ) -> None:
        alice = make_member("Alice", role=WorkspaceRole.TEAM_LEAD)
        bob = make_member("Bob")
        carol = make_member("Carol", status=MemberStatus.INACTIVE)
        workspace_store.members = [alice, bob, carol]
        workspace_store.tasks = [
            make_task(now, assignee=alice, status=TaskStatus.COMPLETED, updated_at=now),
            make_task(now, assignee=alice, due_in=timedelta(days=-1), updated_at=now),
            make_task(now, assignee=bob, updated_at=now - timedelta(days=10)),
            make_task(now, assignee=carol, updated_at=now),
        ]

        activity = await workspace_service.calculate_team_activity("ws-1")

        assert activity.total_members == 2
        assert activity.members_by_role == {"TEAM_LEAD": 1, "GENERAL_VOLUNTEER": 1}
        # Carol's recent update still counts: activity is measured from tasks
        assert activity.active_members == 2

        by_member = {row.member_name: row for row in activity.task_assignment_distribution}
        assert set(by_member) == {"Alice", "Bob"}
        assert by_member["Alice"].assigned_tasks == 2
        assert by_member["Alice"].completed_tasks == 1
        assert by_member["Alice"].overdue_tasks == 1
        assert by_member["Alice"].completion_rate == 50.0
        assert by_member["Bob"].completion_rate == 0

    @pytest.mark.asyncio
    async def test_stale_workspace_has_no_active_members(
        self,
        workspace_service: WorkspaceAnalyticsService,
        workspace_store: FakeWorkspaceStore,
        now: datetime,
    ) -> None:
        alice = make_member("Alice")
        workspace_store.members = [alice]
        workspace_store.tasks = [make_task(now, assignee=alice, updated_at=now - timedelta(days=8))]

        activity = await workspace_service.calculate_team_activity("ws-1")

        assert activity.active_members == 0

    @pytest.mark.asyncio
    async def test_large_team_reads_tasks_once(
        self,
        workspace_service: WorkspaceAnalyticsService,
        workspace_store: FakeWorkspaceStore,
        now: datetime,
    ) -> None:
        members = [make_member(f"Crew {index}") for index in range(40)]
        workspace_store.members = members
        workspace_store.tasks = [
            make_task(now, assignee=member, updated_at=now) for member in members[::2]
        ]

        activity = await workspace_service.calculate_team_activity("ws-1")

        assert workspace_store.calls.count("list_tasks") == 1
        assert activity.total_members == 40
        assert activity.active_members == 20
        assigned = [row.assigned_tasks for row in activity.task_assignment_distribution]
        assert assigned == [1, 0] * 20

    @pytest.mark.asyncio
    async def test_no_members(self, workspace_service: WorkspaceAnalyticsService) -> None:
        activity = await workspace_service.calculate_team_activity("ws-1")

        assert activity.total_members == 0
        assert activity.task_assignment_distribution == []


class TestWorkloadDistribution:
    @pytest.mark.parametrize(
        ("task_count", "expected"),
        [
            (0, CapacityStatus.UNDERUTILIZED),
            (2, CapacityStatus.UNDERUTILIZED),
            (4, CapacityStatus.UNDERUTILIZED),
            (5, CapacityStatus.OPTIMAL),
            (10, CapacityStatus.OPTIMAL),
            (11, CapacityStatus.OVERLOADED),
        ],
    )
    def test_capacity_boundaries(
        self, workspace_service: WorkspaceAnalyticsService, task_count: int, expected
    ) -> None:
        workload = workspace_service.workload_percentage(task_count)

        assert workspace_service.capacity_status(workload) == expected

    @pytest.mark.asyncio
    async def test_member_workload(
        self,
        workspace_service: WorkspaceAnalyticsService,
        workspace_store: FakeWorkspaceStore,
        now: datetime,
    ) -> None:
        light = make_member("Light")
        busy = make_member("Busy")
        swamped = make_member("Swamped")
        workspace_store.members = [light, busy, swamped]
        workspace_store.tasks = [
            make_task(now, assignee=light, status=TaskStatus.COMPLETED),
            make_task(now, assignee=light, status=TaskStatus.BLOCKED),
            *[make_task(now, assignee=busy, status=TaskStatus.IN_PROGRESS) for _ in range(10)],
            *[make_task(now, assignee=swamped) for _ in range(25)],
        ]

        distribution = await workspace_service.calculate_workload_distribution("ws-1")

        by_member = {row.member_name: row for row in distribution.by_member}
        assert by_member["Light"].total_tasks == 2
        assert by_member["Light"].active_tasks == 0
        assert by_member["Light"].workload_percentage == 20.0
        assert by_member["Light"].capacity_status == CapacityStatus.UNDERUTILIZED
        assert by_member["Busy"].active_tasks == 10
        assert by_member["Busy"].capacity_status == CapacityStatus.OPTIMAL
        assert by_member["Swamped"].workload_percentage == 200.0
        assert by_member["Swamped"].capacity_status == CapacityStatus.OVERLOADED

    @pytest.mark.asyncio
    async def test_category_and_priority_breakdowns(
        self,
        workspace_service: WorkspaceAnalyticsService,
        workspace_store: FakeWorkspaceStore,
        now: datetime,
    ) -> None:
        workspace_store.tasks = [
            make_task(now, category=TaskCategory.MARKETING, status=TaskStatus.COMPLETED),
            make_task(now, category=TaskCategory.MARKETING, priority=TaskPriority.HIGH),
            make_task(now, category=TaskCategory.TECHNICAL, priority=TaskPriority.HIGH),
        ]

        distribution = await workspace_service.calculate_workload_distribution("ws-1")

        categories = {row.category: row for row in distribution.by_category}
        assert set(categories) == {"MARKETING", "TECHNICAL"}
        assert categories["MARKETING"].task_count == 2
        assert categories["MARKETING"].completed_count == 1
        assert categories["MARKETING"].percentage == 50.0
        assert categories["TECHNICAL"].percentage == 0

        priorities = {row.priority: row for row in distribution.by_priority}
        assert priorities["HIGH"].task_count == 2
        assert priorities["MEDIUM"].percentage == 100.0


class TestProgressTrends:
    @pytest.mark.asyncio
    async def test_one_row_per_day_including_idle_days(
        self,
        workspace_service: WorkspaceAnalyticsService,
        workspace_store: FakeWorkspaceStore,
        now: datetime,
    ) -> None:
        period = ReportPeriod(start_date=datetime(2024, 6, 10, 8, tzinfo=UTC), end_date=now)
        workspace_store.tasks = [
            make_task(
                now,
                created_at=datetime(2024, 6, 10, 9, tzinfo=UTC),
                status=TaskStatus.COMPLETED,
                completed_at=datetime(2024, 6, 12, 15, tzinfo=UTC),
            ),
            make_task(now, created_at=datetime(2024, 6, 12, 10, tzinfo=UTC)),
            make_task(
                now,
                created_at=datetime(2024, 6, 1, tzinfo=UTC),
                status=TaskStatus.COMPLETED,
                completed_at=datetime(2024, 6, 14, 23, 59, tzinfo=UTC),
            ),
        ]

        trends = await workspace_service.calculate_progress_trends("ws-1", period)

        assert [t.date for t in trends] == [
            "2024-06-10",
            "2024-06-11",
            "2024-06-12",
            "2024-06-13",
            "2024-06-14",
            "2024-06-15",
        ]
        assert [t.tasks_created for t in trends] == [1, 0, 1, 0, 0, 0]
        assert [t.tasks_completed for t in trends] == [0, 0, 1, 0, 1, 0]
        assert [t.cumulative_completion for t in trends] == [0, 0, 1, 1, 2, 2]

    @pytest.mark.asyncio
    async def test_single_day_period(
        self, workspace_service: WorkspaceAnalyticsService, now: datetime
    ) -> None:
        period = ReportPeriod(start_date=now - timedelta(hours=1), end_date=now)

        trends = await workspace_service.calculate_progress_trends("ws-1", period)

        assert len(trends) == 1
        assert trends[0].cumulative_completion == 0
