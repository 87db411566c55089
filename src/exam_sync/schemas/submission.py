# src/exam_sync/schemas/submission.py
"""Wire schemas for `POST /exam-attempts/submit-authenticated`."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from exam_sync.db.time import as_utc


class DomainScore(BaseModel):
    """Correct/total counts for one exam domain."""

    model_config = ConfigDict(populate_by_name=True)

    domain_id: str = Field(..., alias="domainId")
    correct: int = Field(..., ge=0)
    total: int = Field(..., ge=0)


class AnswerPayload(BaseModel):
    """One per-question answer as reported to the server."""

    model_config = ConfigDict(populate_by_name=True)

    question_id: str = Field(..., alias="questionId")
    selected_answers: list[str] = Field(default_factory=list, alias="selectedAnswers")
    is_correct: bool = Field(False, alias="isCorrect")
    order_index: int = Field(..., alias="orderIndex")


class SubmissionPayload(BaseModel):
    """Request body for an authenticated exam-attempt submission.

    `local_id` is the idempotency key; it must equal the local Submission id
    on every attempt so the server can drop duplicates.
    """

    model_config = ConfigDict(populate_by_name=True)

    exam_type_id: str = Field(..., alias="examTypeId")
    score: int = Field(..., ge=0, le=100)
    passed: bool
    duration: int = Field(..., ge=0, description="Seconds spent on the attempt")
    submitted_at: datetime = Field(..., alias="submittedAt")
    local_id: str = Field(..., alias="localId")
    domain_scores: list[DomainScore] | None = Field(None, alias="domainScores")
    answers: list[AnswerPayload] | None = None

    @classmethod
    def from_submission(
        cls,
        submission: Any,
        answers: Iterable[Any] | None = None,
    ) -> SubmissionPayload:
        """Build the wire payload from a stored Submission and its answer rows."""
        answer_payloads = [
            AnswerPayload(
                question_id=answer.question_id,
                selected_answers=list(answer.selected_answers or []),
                is_correct=bool(answer.is_correct),
                order_index=answer.order_index,
            )
            for answer in answers or ()
        ]
        domain_scores = None
        if submission.domain_scores:
            domain_scores = [DomainScore.model_validate(item) for item in submission.domain_scores]

        return cls(
            exam_type_id=submission.exam_type_id,
            score=submission.score,
            passed=submission.passed,
            duration=submission.duration,
            submitted_at=as_utc(submission.submitted_at),
            local_id=submission.id,
            domain_scores=domain_scores,
            answers=answer_payloads or None,
        )

    def to_wire(self) -> dict[str, Any]:
        """Return the camelCase JSON body, omitting absent optional fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
