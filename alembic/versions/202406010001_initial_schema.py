"""Initial schema for events, judging and workspaces

Revision ID: 202406010001
Revises:
Create Date: 2024-06-01 00:01:00
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "202406010001"
down_revision = None
branch_labels = None
depends_on = None

registration_status_enum = sa.Enum(
    "PENDING",
    "CONFIRMED",
    "WAITLISTED",
    "CANCELLED",
    name="registration_status",
)
workspace_role_enum = sa.Enum(
    "WORKSPACE_OWNER",
    "TEAM_LEAD",
    "EVENT_COORDINATOR",
    "VOLUNTEER_MANAGER",
    "TECHNICAL_SPECIALIST",
    "MARKETING_LEAD",
    "GENERAL_VOLUNTEER",
    name="workspace_role",
)
member_status_enum = sa.Enum("ACTIVE", "INACTIVE", "PENDING", name="member_status")
task_status_enum = sa.Enum(
    "NOT_STARTED",
    "IN_PROGRESS",
    "REVIEW_REQUIRED",
    "COMPLETED",
    "BLOCKED",
    name="task_status",
)
task_priority_enum = sa.Enum("LOW", "MEDIUM", "HIGH", "URGENT", name="task_priority")
task_category_enum = sa.Enum(
    "SETUP",
    "MARKETING",
    "LOGISTICS",
    "TECHNICAL",
    "REGISTRATION",
    "POST_EVENT",
    name="task_category",
)


def _created_at(name: str = "created_at") -> sa.Column:
    return sa.Column(
        name,
        sa.DateTime(timezone=True),
        server_default=sa.func.now(),
        nullable=False,
    )


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=128), nullable=False),
        _created_at(),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "events",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("start_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("end_date", sa.DateTime(timezone=True), nullable=True),
        _created_at(),
    )

    op.create_table(
        "registrations",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column(
            "event_id",
            sa.String(length=36),
            sa.ForeignKey("events.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        sa.Column(
            "user_id",
            sa.String(length=36),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        sa.Column("status", registration_status_enum, nullable=False),
        _created_at("registered_at"),
        sa.UniqueConstraint("event_id", "user_id", name="uq_registration_event_user"),
    )

    op.create_table(
        "attendance",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column(
            "registration_id",
            sa.String(length=36),
            sa.ForeignKey("registrations.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        sa.Column("session_id", sa.String(length=64), nullable=True),
        _created_at("check_in_time"),
        sa.Column("check_in_method", sa.String(length=32), nullable=False),
        sa.UniqueConstraint(
            "registration_id", "session_id", name="uq_attendance_registration_session"
        ),
    )

    op.create_table(
        "rubrics",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column(
            "event_id",
            sa.String(length=36),
            sa.ForeignKey("events.id", ondelete="CASCADE"),
            nullable=False,
            unique=True,
        ),
        sa.Column("criteria", sa.JSON(), nullable=False),
        _created_at(),
    )

    op.create_table(
        "submissions",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column(
            "event_id",
            sa.String(length=36),
            sa.ForeignKey("events.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        sa.Column("team_name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        _created_at("submitted_at"),
    )

    op.create_table(
        "scores",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column(
            "submission_id",
            sa.String(length=36),
            sa.ForeignKey("submissions.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        sa.Column(
            "judge_id",
            sa.String(length=36),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        sa.Column("scores", sa.JSON(), nullable=False),
        _created_at("submitted_at"),
        sa.UniqueConstraint("submission_id", "judge_id", name="uq_score_submission_judge"),
    )

    op.create_table(
        "workspaces",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column(
            "event_id",
            sa.String(length=36),
            sa.ForeignKey("events.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        sa.Column("name", sa.String(length=255), nullable=False),
        _created_at(),
    )

    op.create_table(
        "team_members",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column(
            "workspace_id",
            sa.String(length=36),
            sa.ForeignKey("workspaces.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        sa.Column(
            "user_id",
            sa.String(length=36),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        sa.Column("role", workspace_role_enum, nullable=False),
        sa.Column("status", member_status_enum, nullable=False),
        _created_at("joined_at"),
        sa.UniqueConstraint("workspace_id", "user_id", name="uq_team_member_user"),
    )

    op.create_table(
        "workspace_tasks",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column(
            "workspace_id",
            sa.String(length=36),
            sa.ForeignKey("workspaces.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("status", task_status_enum, nullable=False),
        sa.Column("priority", task_priority_enum, nullable=False),
        sa.Column("category", task_category_enum, nullable=False),
        sa.Column(
            "assignee_id",
            sa.String(length=36),
            sa.ForeignKey("team_members.id", ondelete="SET NULL"),
            nullable=True,
            index=True,
        ),
        sa.Column("due_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        _created_at(),
        _created_at("updated_at"),
    )
    # Health indicators scan open tasks by due date
    op.create_index(
        "ix_workspace_tasks_workspace_due",
        "workspace_tasks",
        ["workspace_id", "due_date"],
    )


def downgrade() -> None:
    op.drop_index("ix_workspace_tasks_workspace_due", table_name="workspace_tasks")
    op.drop_table("workspace_tasks")
    op.drop_table("team_members")
    op.drop_table("workspaces")
    op.drop_table("scores")
    op.drop_table("submissions")
    op.drop_table("rubrics")
    op.drop_table("attendance")
    op.drop_table("registrations")
    op.drop_table("events")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")

    bind = op.get_bind()
    for enum_type in (
        task_category_enum,
        task_priority_enum,
        task_status_enum,
        member_status_enum,
        workspace_role_enum,
        registration_status_enum,
    ):
        enum_type.drop(bind, checkfirst=True)
