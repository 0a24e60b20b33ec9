"""initial schema: user_progress, user_stats, notes

Revision ID: 3f9c1a7e2b04
Revises:
Create Date: 2026-10-16 09:00:00.000000

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "3f9c1a7e2b04"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "user_progress",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("lesson_id", sa.String(512), nullable=False),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("confidence_level", sa.Integer(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint(
            "confidence_level IS NULL OR confidence_level BETWEEN 1 AND 5",
            name="ck_user_progress_confidence_range",
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_user_progress_lesson_id", "user_progress", ["lesson_id"], unique=True
    )
    op.create_index(
        "ix_user_progress_completed_at",
        "user_progress",
        ["completed_at"],
        postgresql_where=sa.text("completed_at IS NOT NULL"),
    )

    op.create_table(
        "user_stats",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("current_streak", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("longest_streak", sa.Integer(), nullable=False, server_default="0"),
        sa.Column(
            "total_lessons_completed",
            sa.Integer(),
            nullable=False,
            server_default="0",
        ),
        sa.Column(
            "total_hours_studied", sa.Float(), nullable=False, server_default="0"
        ),
        sa.Column("last_study_date", sa.Date(), nullable=True),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "notes",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("lesson_id", sa.String(512), nullable=False),
        sa.Column("selected_text", sa.Text(), nullable=False),
        sa.Column("note_content", sa.Text(), nullable=False),
        sa.Column(
            "position_data", postgresql.JSONB(astext_type=sa.Text()), nullable=True
        ),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_notes_lesson_id", "notes", ["lesson_id"])


def downgrade() -> None:
    op.drop_index("ix_notes_lesson_id", table_name="notes")
    op.drop_table("notes")
    op.drop_table("user_stats")
    op.drop_index("ix_user_progress_completed_at", table_name="user_progress")
    op.drop_index("ix_user_progress_lesson_id", table_name="user_progress")
    op.drop_table("user_progress")
