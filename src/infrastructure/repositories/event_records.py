"""SQL-backed event record store."""

from __future__ import annotations

from collections.abc import Sequence

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload
from src.domain.models import (
    Attendance,
    Event,
    Judge,
    Registration,
    RegistrationStatus,
    Rubric,
    Score,
    Submission,
)
from src.infrastructure.db.models import (
    EventModel,
    RegistrationModel,
    RubricModel,
    ScoreModel,
    SubmissionModel,
)
from src.infrastructure.repositories.mapping import (
    as_utc,
    criterion_from_json,
    raw_scores_from_json,
)

logger = structlog.get_logger(__name__)


class SqlEventRecordStore:
    """Reads event records through short-lived sessions.

    Each call opens its own session so report branches can run concurrently;
    there is no shared snapshot between calls.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self.session_factory = session_factory

    async def get_event(self, event_id: str) -> Event | None:
        async with self.session_factory() as session:
            row = await session.get(EventModel, event_id)
            if row is None:
                return None
            return Event(
                id=row.id,
                name=row.name,
                start_date=as_utc(row.start_date),
                end_date=as_utc(row.end_date),
            )

    async def list_registrations(
        self,
        event_id: str,
        status: RegistrationStatus | None = None,
    ) -> Sequence[Registration]:
        stmt = (
            select(RegistrationModel)
            .where(RegistrationModel.event_id == event_id)
            .options(selectinload(RegistrationModel.attendance))
            .order_by(RegistrationModel.registered_at)
        )
        if status is not None:
            stmt = stmt.where(RegistrationModel.status == status)

        async with self.session_factory() as session:
            result = await session.execute(stmt)
            rows = result.scalars().all()
            registrations = [
                Registration(
                    id=row.id,
                    event_id=row.event_id,
                    user_id=row.user_id,
                    status=row.status,
                    registered_at=as_utc(row.registered_at),
                    attendance=[
                        Attendance(
                            id=att.id,
                            registration_id=att.registration_id,
                            session_id=att.session_id,
                            checked_in_at=as_utc(att.check_in_time),
                            check_in_method=att.check_in_method,
                        )
                        for att in row.attendance
                    ],
                )
                for row in rows
            ]

        logger.debug("registrations_loaded", event_id=event_id, count=len(registrations))
        return registrations

    async def list_submissions(self, event_id: str) -> Sequence[Submission]:
        stmt = (
            select(SubmissionModel)
            .where(SubmissionModel.event_id == event_id)
            .options(selectinload(SubmissionModel.scores).selectinload(ScoreModel.judge))
            .order_by(SubmissionModel.submitted_at)
        )
        async with self.session_factory() as session:
            result = await session.execute(stmt)
            return [
                Submission(
                    id=row.id,
                    event_id=row.event_id,
                    team_name=row.team_name,
                    scores=[
                        Score(
                            id=score.id,
                            submission_id=score.submission_id,
                            judge=Judge(id=score.judge.id, name=score.judge.name),
                            scores=raw_scores_from_json(score.scores),
                        )
                        for score in row.scores
                    ],
                )
                for row in result.scalars().all()
            ]

    async def get_rubric(self, event_id: str) -> Rubric | None:
        stmt = select(RubricModel).where(RubricModel.event_id == event_id)
        async with self.session_factory() as session:
            row = (await session.execute(stmt)).scalar_one_or_none()
            if row is None:
                return None
            return Rubric(
                id=row.id,
                event_id=row.event_id,
                criteria=[criterion_from_json(item) for item in row.criteria or []],
            )
