"""SQL-backed workspace record store."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload
from src.domain.models import MemberStatus, TeamMember, Workspace, WorkspaceTask
from src.infrastructure.db.models import (
    TeamMemberModel,
    WorkspaceModel,
    WorkspaceTaskModel,
)
from src.infrastructure.repositories.mapping import as_utc


def _member(row: TeamMemberModel) -> TeamMember:
    return TeamMember(
        id=row.id,
        workspace_id=row.workspace_id,
        user_id=row.user_id,
        name=row.user.name if row.user is not None else "Unknown",
        role=row.role,
        status=row.status,
    )


def _task(row: WorkspaceTaskModel) -> WorkspaceTask:
    assignee_name = None
    if row.assignee is not None and row.assignee.user is not None:
        assignee_name = row.assignee.user.name
    return WorkspaceTask(
        id=row.id,
        workspace_id=row.workspace_id,
        title=row.title,
        status=row.status,
        priority=row.priority,
        category=row.category,
        assignee_id=row.assignee_id,
        assignee_name=assignee_name,
        due_date=as_utc(row.due_date),
        created_at=as_utc(row.created_at),
        updated_at=as_utc(row.updated_at),
        completed_at=as_utc(row.completed_at),
    )


class SqlWorkspaceRecordStore:
    """Reads workspace records, one short-lived session per call."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self.session_factory = session_factory

    async def get_workspace(self, workspace_id: str) -> Workspace | None:
        stmt = (
            select(WorkspaceModel)
            .where(WorkspaceModel.id == workspace_id)
            .options(selectinload(WorkspaceModel.event))
        )
        async with self.session_factory() as session:
            row = (await session.execute(stmt)).scalar_one_or_none()
            if row is None:
                return None
            return Workspace(
                id=row.id,
                name=row.name,
                event_id=row.event_id,
                event_name=row.event.name,
                created_at=as_utc(row.created_at),
                event_start_date=as_utc(row.event.start_date),
                event_end_date=as_utc(row.event.end_date),
            )

    async def list_tasks(
        self,
        workspace_id: str,
        *,
        assignee_id: str | None = None,
        updated_since: datetime | None = None,
    ) -> Sequence[WorkspaceTask]:
        stmt = (
            select(WorkspaceTaskModel)
            .where(WorkspaceTaskModel.workspace_id == workspace_id)
            .options(selectinload(WorkspaceTaskModel.assignee).selectinload(TeamMemberModel.user))
            .order_by(WorkspaceTaskModel.created_at)
        )
        if assignee_id is not None:
            stmt = stmt.where(WorkspaceTaskModel.assignee_id == assignee_id)
        if updated_since is not None:
            stmt = stmt.where(WorkspaceTaskModel.updated_at >= updated_since)

        async with self.session_factory() as session:
            result = await session.execute(stmt)
            return [_task(row) for row in result.scalars().all()]

    async def list_team_members(
        self,
        workspace_id: str,
        status: MemberStatus | None = None,
    ) -> Sequence[TeamMember]:
        stmt = (
            select(TeamMemberModel)
            .where(TeamMemberModel.workspace_id == workspace_id)
            .options(selectinload(TeamMemberModel.user))
            .order_by(TeamMemberModel.joined_at)
        )
        if status is not None:
            stmt = stmt.where(TeamMemberModel.status == status)

        async with self.session_factory() as session:
            result = await session.execute(stmt)
            return [_member(row) for row in result.scalars().all()]

    async def find_team_member(self, workspace_id: str, user_id: str) -> TeamMember | None:
        stmt = (
            select(TeamMemberModel)
            .where(
                TeamMemberModel.workspace_id == workspace_id,
                TeamMemberModel.user_id == user_id,
            )
            .options(selectinload(TeamMemberModel.user))
        )
        async with self.session_factory() as session:
            row = (await session.execute(stmt)).scalar_one_or_none()
            return _member(row) if row is not None else None
