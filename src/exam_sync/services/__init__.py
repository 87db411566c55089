# src/exam_sync/services/__init__.py
"""Business logic services for the exam-sync engine."""

from .backoff import retry_delay_ms, retry_delay_seconds
from .exam_attempt import ExamAttempt, ExamAttemptService
from .identity import SyncIdentity, identity_from_token
from .submission_client import SubmissionClient, SubmissionClientError
from .sync_processor import InFlightRegistry, SyncError, SyncProcessor, SyncResult

__all__ = [
    "ExamAttempt",
    "ExamAttemptService",
    "InFlightRegistry",
    "SubmissionClient",
    "SubmissionClientError",
    "SyncError",
    "SyncIdentity",
    "SyncProcessor",
    "SyncResult",
    "identity_from_token",
    "retry_delay_ms",
    "retry_delay_seconds",
]
