"""SQLAlchemy model for per-question answers recorded during an attempt."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import JSON, Boolean, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from exam_sync.db.session import Base


class ExamAnswer(Base):
    """Answer given to one question of an exam attempt."""

    __tablename__ = "exam_answer"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    # Same value as the owning Submission.id.
    exam_attempt_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    question_id: Mapped[str] = mapped_column(Text, nullable=False)
    selected_answers: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    # None while the question is unanswered.
    is_correct: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    is_flagged: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    order_index: Mapped[int] = mapped_column(Integer, nullable=False)
    answered_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
