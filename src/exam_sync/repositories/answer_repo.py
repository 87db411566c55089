"""Read access to per-question answers recorded for an attempt."""
from __future__ import annotations

from sqlalchemy import delete, select
from sqlalchemy.orm import Session, sessionmaker

from exam_sync.db.time import as_utc
from exam_sync.models.answer import ExamAnswer

__all__ = ["AnswerRepository"]


class AnswerRepository:
    """Answer rows keyed by the attempt (submission) id."""

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    def list_for_attempt(self, exam_attempt_id: str) -> list[ExamAnswer]:
        """Return answers for an attempt ordered by their position in the exam."""
        with self._session_factory() as db:
            result = db.execute(
                select(ExamAnswer)
                .where(ExamAnswer.exam_attempt_id == exam_attempt_id)
                .order_by(ExamAnswer.order_index.asc())
            )
            answers = list(result.scalars())
            db.expunge_all()
        return answers

    def add_all(self, answers: list[ExamAnswer]) -> None:
        """Persist answers recorded during an attempt."""
        for answer in answers:
            if answer.answered_at is not None:
                answer.answered_at = as_utc(answer.answered_at)
        with self._session_factory() as db:
            db.add_all(answers)
            db.commit()

    def delete_all(self) -> None:
        with self._session_factory() as db:
            db.execute(delete(ExamAnswer))
            db.commit()
