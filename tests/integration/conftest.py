from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from src.domain.models import (
    MemberStatus,
    RegistrationStatus,
    TaskCategory,
    TaskPriority,
    TaskStatus,
    WorkspaceRole,
)
from src.infrastructure.db.models import (
    AttendanceModel,
    EventModel,
    RegistrationModel,
    RubricModel,
    ScoreModel,
    SubmissionModel,
    TeamMemberModel,
    UserModel,
    WorkspaceModel,
    WorkspaceTaskModel,
)

from tests.utils import NOW


@pytest.fixture
async def seeded(session_factory: async_sessionmaker[AsyncSession]) -> dict[str, str]:
    """One event with registrations, judged submissions and a workspace with tasks."""
    async with session_factory() as session:
        users = {
            name: UserModel(id=f"user-{name}", email=f"{name}@example.com", name=name.title())
            for name in ("ana", "ben", "cy", "judge", "dana", "eli")
        }
        session.add_all(users.values())

        event = EventModel(
            id="event-1",
            name="Spring Hackathon",
            start_date=NOW + timedelta(days=10),
            end_date=NOW + timedelta(days=12),
        )
        session.add(event)
        session.add(
            RubricModel(
                id="rubric-1",
                event_id="event-1",
                criteria=[
                    {"id": "c1", "name": "Impact", "maxScore": 10, "weight": 50},
                    {"id": "c2", "name": "Execution", "maxScore": 10, "weight": 50},
                ],
            )
        )

        session.add_all(
            [
                RegistrationModel(
                    id="reg-ana",
                    event_id="event-1",
                    user_id="user-ana",
                    status=RegistrationStatus.CONFIRMED,
                    registered_at=datetime(2024, 1, 1, 10, tzinfo=UTC),
                ),
                RegistrationModel(
                    id="reg-ben",
                    event_id="event-1",
                    user_id="user-ben",
                    status=RegistrationStatus.CONFIRMED,
                    registered_at=datetime(2024, 1, 1, 15, tzinfo=UTC),
                ),
                RegistrationModel(
                    id="reg-cy",
                    event_id="event-1",
                    user_id="user-cy",
                    status=RegistrationStatus.WAITLISTED,
                    registered_at=datetime(2024, 1, 3, 8, tzinfo=UTC),
                ),
            ]
        )
        session.add_all(
            [
                AttendanceModel(
                    registration_id="reg-ana",
                    session_id=None,
                    check_in_time=datetime(2024, 1, 20, 9, tzinfo=UTC),
                ),
                AttendanceModel(
                    registration_id="reg-ana",
                    session_id="keynote",
                    check_in_time=datetime(2024, 1, 20, 10, tzinfo=UTC),
                ),
            ]
        )

        session.add_all(
            [
                SubmissionModel(id="sub-1", event_id="event-1", team_name="Rockets"),
                SubmissionModel(id="sub-2", event_id="event-1", team_name="Owls"),
            ]
        )
        session.add(
            ScoreModel(
                submission_id="sub-1",
                judge_id="user-judge",
                scores={"c1": 8, "c2": 9},
            )
        )

        session.add(
            WorkspaceModel(
                id="ws-1",
                event_id="event-1",
                name="Logistics Crew",
                created_at=NOW - timedelta(days=3),
            )
        )
        session.add_all(
            [
                TeamMemberModel(
                    id="member-dana",
                    workspace_id="ws-1",
                    user_id="user-dana",
                    role=WorkspaceRole.TEAM_LEAD,
                    status=MemberStatus.ACTIVE,
                ),
                TeamMemberModel(
                    id="member-eli",
                    workspace_id="ws-1",
                    user_id="user-eli",
                    role=WorkspaceRole.GENERAL_VOLUNTEER,
                    status=MemberStatus.INACTIVE,
                ),
            ]
        )
        session.add_all(
            [
                WorkspaceTaskModel(
                    id="task-venue",
                    workspace_id="ws-1",
                    title="Book venue",
                    status=TaskStatus.COMPLETED,
                    priority=TaskPriority.HIGH,
                    category=TaskCategory.LOGISTICS,
                    assignee_id="member-dana",
                    created_at=NOW - timedelta(days=3),
                    updated_at=NOW - timedelta(days=1),
                    completed_at=NOW - timedelta(days=1),
                ),
                WorkspaceTaskModel(
                    id="task-badges",
                    workspace_id="ws-1",
                    title="Print badges",
                    status=TaskStatus.BLOCKED,
                    priority=TaskPriority.URGENT,
                    category=TaskCategory.SETUP,
                    assignee_id="member-dana",
                    due_date=NOW - timedelta(hours=6),
                    created_at=NOW - timedelta(days=2),
                    updated_at=NOW - timedelta(days=2),
                ),
                WorkspaceTaskModel(
                    id="task-posts",
                    workspace_id="ws-1",
                    title="Schedule social posts",
                    status=TaskStatus.NOT_STARTED,
                    priority=TaskPriority.MEDIUM,
                    category=TaskCategory.MARKETING,
                    due_date=NOW + timedelta(days=5),
                    created_at=NOW - timedelta(days=2, hours=-1),
                    updated_at=NOW - timedelta(days=2),
                ),
            ]
        )
        await session.commit()

    return {"event_id": "event-1", "workspace_id": "ws-1", "member_user_id": "user-dana"}
