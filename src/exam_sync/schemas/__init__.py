# src/exam_sync/schemas/__init__.py
"""
Pydantic schemas for data exchanged with the remote submission endpoint.
"""

from .submission import AnswerPayload, DomainScore, SubmissionPayload

__all__ = [
    "AnswerPayload",
    "DomainScore",
    "SubmissionPayload",
]
