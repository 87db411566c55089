"""Data access for submissions and answers."""

from .answer_repo import AnswerRepository
from .submission_repo import SubmissionStore

__all__ = ["AnswerRepository", "SubmissionStore"]
