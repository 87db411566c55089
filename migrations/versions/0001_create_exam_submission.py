"""create exam submission and answer tables

Revision ID: 0001_create_exam_submission
Revises:
Create Date: 2026-10-18 09:00:00.000000

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "0001_create_exam_submission"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the submission queue and the answer store."""
    op.create_table(
        "exam_submission",
        sa.Column("id", sa.String(length=64), nullable=False),
        sa.Column("owner_id", sa.Text(), nullable=True),
        sa.Column("exam_type_id", sa.Text(), nullable=False),
        sa.Column("score", sa.Integer(), nullable=False),
        sa.Column("passed", sa.Boolean(), nullable=False),
        sa.Column("duration", sa.Integer(), nullable=False),
        sa.Column("submitted_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("domain_scores", sa.JSON(), nullable=True),
        sa.Column("sync_status", sa.String(length=16), nullable=False),
        sa.Column("sync_retries", sa.Integer(), nullable=False),
        sa.Column("synced_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_exam_submission_status_created",
        "exam_submission",
        ["sync_status", "created_at"],
    )

    op.create_table(
        "exam_answer",
        sa.Column("id", sa.String(length=64), nullable=False),
        sa.Column("exam_attempt_id", sa.String(length=64), nullable=False),
        sa.Column("question_id", sa.Text(), nullable=False),
        sa.Column("selected_answers", sa.JSON(), nullable=False),
        sa.Column("is_correct", sa.Boolean(), nullable=True),
        sa.Column("is_flagged", sa.Boolean(), nullable=False),
        sa.Column("order_index", sa.Integer(), nullable=False),
        sa.Column("answered_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_exam_answer_exam_attempt_id", "exam_answer", ["exam_attempt_id"])


def downgrade() -> None:
    """Drop both tables."""
    op.drop_index("ix_exam_answer_exam_attempt_id", table_name="exam_answer")
    op.drop_table("exam_answer")
    op.drop_index("ix_exam_submission_status_created", table_name="exam_submission")
    op.drop_table("exam_submission")
