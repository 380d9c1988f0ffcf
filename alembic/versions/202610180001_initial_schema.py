"""Initial schema: users, assessments, submissions

Revision ID: 202610180001
Revises:
Create Date: 2026-10-18 00:01:00
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "202610180001"
down_revision = None
branch_labels = None
depends_on = None

submission_status_enum = sa.Enum(
    "submitted",
    "checked",
    "failed",
    name="submission_status",
)


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("login", sa.String(length=50), nullable=False, unique=True),
        sa.Column("email", sa.String(length=254), nullable=True, unique=True),
        sa.Column("first_name", sa.String(length=50), nullable=True),
        sa.Column("last_name", sa.String(length=50), nullable=True),
        sa.Column("activated", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("lang_key", sa.String(length=10), nullable=True),
        sa.Column("activation_key", sa.String(length=20), nullable=True),
        sa.Column("reset_key", sa.String(length=20), nullable=True),
        sa.Column(
            "created_date",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column("reset_date", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_users_login", "users", ["login"])
    op.create_index("ix_users_email", "users", ["email"])

    op.create_table(
        "assessments",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("type", sa.String(length=64), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("total_points", sa.Integer(), nullable=True),
        sa.Column("time_limit_minutes", sa.Integer(), nullable=True),
        sa.Column(
            "created_date",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    )
    op.create_index("ix_assessments_type", "assessments", ["type"])

    op.create_table(
        "submissions",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column(
            "user_id",
            sa.String(length=36),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "assessment_id",
            sa.String(length=36),
            sa.ForeignKey("assessments.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("github_url", sa.String(length=512), nullable=True),
        sa.Column("submitted_file_url", sa.String(length=512), nullable=True),
        sa.Column("status", submission_status_enum, nullable=False, server_default="submitted"),
        sa.Column("points", sa.Float(), nullable=True),
        sa.Column("analysis_result", sa.Text(), nullable=True),
        sa.Column(
            "submitted_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    )
    op.create_index("ix_submissions_user_id", "submissions", ["user_id"])
    op.create_index("ix_submissions_assessment_id", "submissions", ["assessment_id"])


def downgrade() -> None:
    op.drop_index("ix_submissions_assessment_id", "submissions")
    op.drop_index("ix_submissions_user_id", "submissions")
    op.drop_table("submissions")
    op.drop_index("ix_assessments_type", "assessments")
    op.drop_table("assessments")
    op.drop_index("ix_users_email", "users")
    op.drop_index("ix_users_login", "users")
    op.drop_table("users")
    submission_status_enum.drop(op.get_bind(), checkfirst=True)
