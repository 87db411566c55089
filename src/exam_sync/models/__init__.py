# src/exam_sync/models/__init__.py
"""SQLAlchemy models for the exam-sync engine."""

from .answer import ExamAnswer
from .submission import Submission, SyncStatus

__all__ = [
    "ExamAnswer",
    "Submission", "SyncStatus",
]
