"""SQLAlchemy model for locally recorded exam submissions."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from sqlalchemy import JSON, Boolean, DateTime, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from exam_sync.db.session import Base
from exam_sync.db.time import utcnow


class SyncStatus(str, Enum):
    """Delivery state of a submission."""

    PENDING = "PENDING"
    SYNCED = "SYNCED"
    FAILED = "FAILED"


class Submission(Base):
    """One exam or practice result queued for delivery to the remote service.

    The primary key is generated on the device and doubles as the idempotency
    key (`localId`) sent with every delivery attempt.
    """

    __tablename__ = "exam_submission"
    __table_args__ = (
        Index("ix_exam_submission_status_created", "sync_status", "created_at"),
    )

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    owner_id: Mapped[str | None] = mapped_column(Text, nullable=True)

    exam_type_id: Mapped[str] = mapped_column(Text, nullable=False)
    score: Mapped[int] = mapped_column(Integer, nullable=False)
    passed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    # Seconds spent on the attempt.
    duration: Mapped[int] = mapped_column(Integer, nullable=False)
    submitted_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    # Cached per-domain breakdown: [{"domainId", "correct", "total"}].
    domain_scores: Mapped[list[dict[str, Any]] | None] = mapped_column(JSON, nullable=True)

    sync_status: Mapped[str] = mapped_column(
        String(16), nullable=False, default=SyncStatus.PENDING.value
    )
    sync_retries: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    synced_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    def __repr__(self) -> str:
        return (
            f"Submission(id={self.id!r}, sync_status={self.sync_status!r}, "
            f"sync_retries={self.sync_retries!r})"
        )
