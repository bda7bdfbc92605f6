#!/usr/bin/env python3
"""
Seed a demo event, its judging data and one organizing workspace.

Creates the tables when they are missing, so it also works against a fresh
SQLite file:
    DATABASE_URL=sqlite+aiosqlite:///demo.db python scripts/seed_demo_data.py
"""

from __future__ import annotations

import asyncio
import random
import sys
from datetime import UTC, datetime, timedelta
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.core.config import get_settings
from src.domain.models import (
    MemberStatus,
    RegistrationStatus,
    TaskCategory,
    TaskPriority,
    TaskStatus,
    WorkspaceRole,
)
from src.infrastructure.db.base import Base
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
from src.infrastructure.db.session import build_engine

DEMO_EVENT_ID = "demo-hackathon"
CRITERIA = [
    {"id": "impact", "name": "Impact", "maxScore": 10, "weight": 40},
    {"id": "execution", "name": "Execution", "maxScore": 10, "weight": 35},
    {"id": "pitch", "name": "Pitch", "maxScore": 5, "weight": 25},
]
SESSIONS = ["opening-keynote", "api-workshop", "demo-day"]


async def seed_event(session: AsyncSession, rng: random.Random, now: datetime) -> None:
    attendees = [
        UserModel(email=f"attendee{index}@example.com", name=f"Attendee {index}")
        for index in range(40)
    ]
    judges = [
        UserModel(email=f"judge{index}@example.com", name=f"Judge {index}") for index in range(3)
    ]
    session.add_all(attendees + judges)
    session.add(
        EventModel(
            id=DEMO_EVENT_ID,
            name="Demo Hackathon",
            start_date=now + timedelta(days=14),
            end_date=now + timedelta(days=16),
        )
    )
    await session.flush()

    session.add(RubricModel(event_id=DEMO_EVENT_ID, criteria=CRITERIA))
    for attendee in attendees:
        registration = RegistrationModel(
            event_id=DEMO_EVENT_ID,
            user_id=attendee.id,
            status=rng.choice(list(RegistrationStatus)),
            registered_at=now - timedelta(days=rng.randint(0, 20), hours=rng.randint(0, 23)),
        )
        session.add(registration)
        await session.flush()
        if registration.status == RegistrationStatus.CONFIRMED and rng.random() < 0.7:
            for session_id in [None, *rng.sample(SESSIONS, k=rng.randint(0, len(SESSIONS)))]:
                session.add(
                    AttendanceModel(
                        registration_id=registration.id,
                        session_id=session_id,
                        check_in_time=now - timedelta(hours=rng.randint(1, 48)),
                    )
                )

    for index in range(12):
        submission = SubmissionModel(event_id=DEMO_EVENT_ID, team_name=f"Team {index + 1}")
        session.add(submission)
        await session.flush()
        for judge in rng.sample(judges, k=rng.randint(0, len(judges))):
            session.add(
                ScoreModel(
                    submission_id=submission.id,
                    judge_id=judge.id,
                    scores={c["id"]: rng.randint(0, c["maxScore"]) for c in CRITERIA},
                )
            )


async def seed_workspace(session: AsyncSession, rng: random.Random, now: datetime) -> str:
    workspace = WorkspaceModel(
        event_id=DEMO_EVENT_ID,
        name="Demo Hackathon Crew",
        created_at=now - timedelta(days=21),
    )
    session.add(workspace)
    volunteers = [
        UserModel(email=f"crew{index}@example.com", name=f"Crew Member {index}")
        for index in range(5)
    ]
    session.add_all(volunteers)
    await session.flush()

    roles = [WorkspaceRole.WORKSPACE_OWNER, WorkspaceRole.TEAM_LEAD] + [
        WorkspaceRole.GENERAL_VOLUNTEER
    ] * 3
    members = [
        TeamMemberModel(
            workspace_id=workspace.id,
            user_id=user.id,
            role=role,
            status=MemberStatus.ACTIVE,
        )
        for user, role in zip(volunteers, roles, strict=True)
    ]
    session.add_all(members)
    await session.flush()

    for index in range(30):
        created = now - timedelta(days=rng.randint(0, 20))
        task_status = rng.choice(list(TaskStatus))
        completed = None
        if task_status == TaskStatus.COMPLETED:
            completed = min(created + timedelta(days=1), now)
        session.add(
            WorkspaceTaskModel(
                workspace_id=workspace.id,
                title=f"Demo task {index + 1}",
                status=task_status,
                priority=rng.choice(list(TaskPriority)),
                category=rng.choice(list(TaskCategory)),
                assignee_id=rng.choice([None, *[m.id for m in members]]),
                due_date=now + timedelta(days=rng.randint(-5, 10)),
                created_at=created,
                updated_at=completed or created,
                completed_at=completed,
            )
        )
    return members[0].user_id


async def main() -> None:
    settings = get_settings()
    print(f"Environment: {settings.environment}")

    engine = build_engine(settings.async_database_url)
    session_factory = async_sessionmaker(engine, expire_on_commit=False)
    rng = random.Random(42)
    now = datetime.now(UTC)
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

        async with session_factory() as session:
            if await session.get(EventModel, DEMO_EVENT_ID) is not None:
                print(f"⚠️  {DEMO_EVENT_ID} already seeded, nothing to do")
                return
            await seed_event(session, rng, now)
            owner_user_id = await seed_workspace(session, rng, now)
            await session.commit()

            workspace_id = await session.scalar(
                select(WorkspaceModel.id).where(WorkspaceModel.event_id == DEMO_EVENT_ID)
            )
    finally:
        await engine.dispose()

    print(f"✅ Seeded event {DEMO_EVENT_ID}")
    print(f"✅ Seeded workspace {workspace_id} (owner user id: {owner_user_id})")


if __name__ == "__main__":
    asyncio.run(main())
