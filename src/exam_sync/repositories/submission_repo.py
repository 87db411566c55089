"""Durable store for submissions and their sync lifecycle."""
from __future__ import annotations

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from exam_sync.db.time import as_utc, utcnow
from exam_sync.models.submission import Submission, SyncStatus

__all__ = ["SubmissionStore"]


class SubmissionStore:
    """Thin wrapper around database access for submission records.

    Every method runs in its own session and commits before returning, so a
    mutation is durable once the call completes. Returned instances are
    detached snapshots.
    """

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        """Initialize the store with a session factory."""
        self._session_factory = session_factory

    def list_by_status(self, status: SyncStatus) -> list[Submission]:
        """Return all submissions in `status`, oldest `created_at` first."""
        status = SyncStatus(status)
        with self._session_factory() as db:
            result = db.execute(
                select(Submission)
                .where(Submission.sync_status == status.value)
                .order_by(Submission.created_at.asc(), Submission.id.asc())
            )
            submissions = list(result.scalars())
            db.expunge_all()
        return submissions

    def list_all(self) -> list[Submission]:
        """Return every submission, most recently submitted first."""
        with self._session_factory() as db:
            result = db.execute(select(Submission).order_by(Submission.submitted_at.desc()))
            submissions = list(result.scalars())
            db.expunge_all()
        return submissions

    def get_by_id(self, submission_id: str) -> Submission | None:
        """Return a submission by identifier."""
        with self._session_factory() as db:
            submission = db.get(Submission, submission_id)
            if submission is not None:
                db.expunge(submission)
        return submission

    def save(self, submission: Submission) -> Submission:
        """Insert a submission; an existing `id` is left untouched.

        Returns the stored record, which is the pre-existing one when the
        insert was a duplicate, including one committed by another writer
        between the lookup and the insert.
        """
        for column in ("submitted_at", "created_at", "synced_at"):
            value = getattr(submission, column)
            if value is not None:
                setattr(submission, column, as_utc(value))

        with self._session_factory() as db:
            existing = db.get(Submission, submission.id)
            if existing is not None:
                db.expunge(existing)
                return existing
            db.add(submission)
            try:
                db.commit()
            except IntegrityError:
                db.rollback()
                existing = db.get(Submission, submission.id)
                if existing is None:
                    raise
                db.expunge(existing)
                return existing
            db.refresh(submission)
            db.expunge(submission)
        return submission

    def mark_synced(self, submission_id: str) -> Submission | None:
        """Record a successful delivery.

        Returns the updated record, or None when the id is unknown.
        """
        with self._session_factory() as db:
            result = db.execute(
                update(Submission)
                .where(Submission.id == submission_id)
                .values(
                    sync_status=SyncStatus.SYNCED.value,
                    synced_at=utcnow(),
                    sync_retries=0,
                )
            )
            db.commit()
            if result.rowcount == 0:
                return None
        return self.get_by_id(submission_id)

    def mark_failed(self, submission_id: str) -> Submission | None:
        """Record a failed delivery and bump the retry counter.

        SYNCED records are never moved back. Returns the current record, or
        None when the id is unknown.
        """
        with self._session_factory() as db:
            db.execute(
                update(Submission)
                .where(
                    Submission.id == submission_id,
                    Submission.sync_status != SyncStatus.SYNCED.value,
                )
                .values(
                    sync_status=SyncStatus.FAILED.value,
                    sync_retries=Submission.sync_retries + 1,
                )
            )
            db.commit()
        return self.get_by_id(submission_id)

    def count_by_status(self) -> dict[SyncStatus, int]:
        """Return the number of submissions in each sync state."""
        counts = {status: 0 for status in SyncStatus}
        with self._session_factory() as db:
            rows = db.execute(
                select(Submission.sync_status, func.count()).group_by(Submission.sync_status)
            )
            for status, count in rows:
                counts[SyncStatus(status)] = int(count)
        return counts

    def delete(self, submission_id: str) -> None:
        """Delete a single submission."""
        with self._session_factory() as db:
            db.execute(delete(Submission).where(Submission.id == submission_id))
            db.commit()

    def delete_all(self) -> None:
        """Purge every submission (account reset / logout)."""
        with self._session_factory() as db:
            db.execute(delete(Submission))
            db.commit()
