"""Local recording of exam attempts and read-side helpers over the queue."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError

from exam_sync.db.time import utcnow
from exam_sync.models import Submission, SyncStatus
from exam_sync.repositories.answer_repo import AnswerRepository
from exam_sync.repositories.submission_repo import SubmissionStore
from exam_sync.services.scoring import calculate_domain_breakdown

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExamAttempt:
    """Result of a finished attempt as handed over by the exam screens."""

    exam_type_id: str
    score: int
    passed: bool
    duration: int
    id: str | None = None
    owner_id: str | None = None
    submitted_at: datetime | None = None


@dataclass(frozen=True)
class AttemptAnalytics:
    """Summary over synced attempts."""

    total_attempts: int = 0
    total_passed: int = 0
    pass_rate: float = 0.0
    average_score: float = 0.0
    average_duration: int = 0
    last_attempt_date: datetime | None = None


class ExamAttemptService:
    """Stores finished attempts in the PENDING queue and reports on them."""

    def __init__(self, store: SubmissionStore, answers: AnswerRepository | None = None) -> None:
        self.store = store
        self.answers = answers

    def submit_exam(
        self,
        attempt: ExamAttempt,
        question_domains: Mapping[str, str] | None = None,
        domain_ids: Iterable[str] = (),
    ) -> Submission:
        """Record a finished attempt locally with PENDING status.

        The generated id is reused as the idempotency key for every later
        delivery attempt. The domain breakdown is computed once here and
        cached on the submission; failing to compute it is not fatal.
        """
        submission_id = attempt.id or str(uuid.uuid4())
        now = utcnow()

        submission = Submission(
            id=submission_id,
            owner_id=attempt.owner_id,
            exam_type_id=attempt.exam_type_id,
            score=attempt.score,
            passed=attempt.passed,
            duration=attempt.duration,
            submitted_at=attempt.submitted_at or now,
            created_at=now,
            domain_scores=self._domain_scores(submission_id, question_domains, domain_ids),
            sync_status=SyncStatus.PENDING.value,
            sync_retries=0,
        )
        stored = self.store.save(submission)
        logger.info("Queued submission %s for %s", stored.id, stored.exam_type_id)
        return stored

    def _domain_scores(
        self,
        submission_id: str,
        question_domains: Mapping[str, str] | None,
        domain_ids: Iterable[str],
    ) -> list[dict[str, int | str]] | None:
        if not question_domains or self.answers is None:
            return None
        try:
            answers = self.answers.list_for_attempt(submission_id)
        except SQLAlchemyError as exc:
            logger.warning("Skipping domain breakdown for %s: %s", submission_id, exc)
            return None
        if not answers:
            return None
        return calculate_domain_breakdown(answers, question_domains, domain_ids)

    def get_local_attempts(self) -> list[Submission]:
        return self.store.list_all()

    def get_pending_attempts(self) -> list[Submission]:
        return self.store.list_by_status(SyncStatus.PENDING)

    def get_failed_attempts(self) -> list[Submission]:
        return self.store.list_by_status(SyncStatus.FAILED)

    def get_exam_history(self, exam_type_id: str | None = None) -> list[Submission]:
        """Return local attempts, optionally limited to one exam type."""
        attempts = self.store.list_all()
        if exam_type_id:
            return [a for a in attempts if a.exam_type_id == exam_type_id]
        return attempts

    def get_analytics(self, exam_type_id: str | None = None) -> AttemptAnalytics:
        """Aggregate score and pass statistics.

        Only SYNCED attempts count; attempts still waiting in the queue are
        left out until the server has them.
        """
        synced = [
            a
            for a in self.get_exam_history(exam_type_id)
            if a.sync_status == SyncStatus.SYNCED.value
        ]
        if not synced:
            return AttemptAnalytics()

        passed = sum(1 for a in synced if a.passed)
        count = len(synced)
        return AttemptAnalytics(
            total_attempts=count,
            total_passed=passed,
            pass_rate=passed / count,
            average_score=sum(a.score for a in synced) / count,
            average_duration=round(sum(a.duration for a in synced) / count),
            last_attempt_date=max(a.submitted_at for a in synced),
        )

    def delete_attempt(self, submission_id: str) -> None:
        self.store.delete(submission_id)

    def clear_all(self) -> None:
        """Purge all local attempt data (app reset or logout)."""
        self.store.delete_all()
        if self.answers is not None:
            self.answers.delete_all()
