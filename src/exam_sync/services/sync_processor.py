"""Delivery of queued submissions to the remote service.

This module provides the SyncProcessor class which drains the local
submission queue against the remote endpoint. It handles:

- Delivering PENDING submissions in creation order
- Retrying FAILED submissions with exponential backoff
- Recording each outcome in the Submission Store
- Preventing two overlapping passes from delivering the same submission
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Protocol

from sqlalchemy.exc import SQLAlchemyError

from exam_sync.core.settings import settings
from exam_sync.models import ExamAnswer, Submission, SyncStatus
from exam_sync.repositories.submission_repo import SubmissionStore
from exam_sync.schemas.submission import SubmissionPayload
from exam_sync.services.backoff import retry_delay_seconds
from exam_sync.services.identity import SyncIdentity
from exam_sync.services.submission_client import SubmissionClientError

# Configure logger for this module
logger = logging.getLogger(__name__)


class DeliveryClient(Protocol):
    """Anything that can POST a submission payload on behalf of a user."""

    async def submit(self, payload: SubmissionPayload, access_token: str) -> object: ...


class AnswerSource(Protocol):
    """Lookup of the per-question answers recorded for an attempt."""

    def list_for_attempt(self, exam_attempt_id: str) -> list[ExamAnswer]: ...


@dataclass(frozen=True)
class SyncError:
    """Delivery failure recorded for one submission."""

    id: str
    message: str


@dataclass
class SyncResult:
    """Aggregate outcome of one sync or retry pass."""

    synced_count: int = 0
    failed_count: int = 0
    errors: list[SyncError] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.failed_count == 0

    def merge(self, other: SyncResult) -> SyncResult:
        return SyncResult(
            synced_count=self.synced_count + other.synced_count,
            failed_count=self.failed_count + other.failed_count,
            errors=[*self.errors, *other.errors],
        )


class InFlightRegistry:
    """Per-submission leases held for the duration of one delivery attempt.

    Passes that share a registry never deliver the same id concurrently; a
    pass that finds the lease taken skips the submission.
    """

    def __init__(self) -> None:
        self._in_flight: set[str] = set()

    def is_held(self, submission_id: str) -> bool:
        return submission_id in self._in_flight

    @asynccontextmanager
    async def lease(self, submission_id: str) -> AsyncIterator[bool]:
        """Yield True when the lease was acquired, False when another pass holds it."""
        if submission_id in self._in_flight:
            yield False
            return

        self._in_flight.add(submission_id)
        try:
            yield True
        finally:
            self._in_flight.discard(submission_id)


_DEFAULT_REGISTRY = InFlightRegistry()


class SyncProcessor:
    """Drains the PENDING and FAILED queues against the remote endpoint.

    Submissions are processed strictly one after another; the next network
    call starts only after the previous store update has completed. Per-item
    failures are collected in the SyncResult and never raised.
    """

    def __init__(
        self,
        store: SubmissionStore,
        client: DeliveryClient,
        answers: AnswerSource | None = None,
        *,
        sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
        registry: InFlightRegistry | None = None,
        base_delay_ms: int | None = None,
    ) -> None:
        """Initialize the processor.

        Args:
            store: Durable submission store.
            client: Delivery client for the remote endpoint.
            answers: Optional answer store used to attach per-question answers.
            sleep: Awaitable used for the backoff wait; injectable for tests.
            registry: In-flight lease registry. Defaults to one shared by the process.
            base_delay_ms: Backoff base delay. Defaults to the configured value.
        """
        self.store = store
        self.client = client
        self.answers = answers
        self._sleep = sleep
        self._registry = registry or _DEFAULT_REGISTRY
        self._base_delay_ms = (
            settings.backoff_base_ms if base_delay_ms is None else base_delay_ms
        )

    async def sync_pending(self, identity: SyncIdentity | None = None) -> SyncResult:
        """Deliver every PENDING submission."""
        return await self._run_pass(SyncStatus.PENDING, identity)

    async def retry_failed(self, identity: SyncIdentity | None = None) -> SyncResult:
        """Re-deliver every FAILED submission, waiting out its backoff first."""
        return await self._run_pass(SyncStatus.FAILED, identity)

    async def sync_all(self, identity: SyncIdentity | None = None) -> SyncResult:
        """Run a pending pass followed by a retry pass and merge the results."""
        pending = await self.sync_pending(identity)
        retried = await self.retry_failed(identity)
        return pending.merge(retried)

    async def _run_pass(self, status: SyncStatus, identity: SyncIdentity | None) -> SyncResult:
        result = SyncResult()

        if identity is None:
            logger.info("No authenticated owner, keeping %s submissions local", status.value)
            return result

        queued = self.store.list_by_status(status)
        logger.debug("Found %d %s submissions", len(queued), status.value)

        for submission in queued:
            if submission.owner_id is not None and submission.owner_id != identity.owner_id:
                logger.debug(
                    "Skipping submission %s owned by another account", submission.id
                )
                continue

            async with self._registry.lease(submission.id) as acquired:
                if not acquired:
                    logger.debug("Submission %s already in flight, skipping", submission.id)
                    continue
                await self._process_one(submission.id, status, identity, result)

        logger.info(
            "%s pass finished: %d synced, %d failed",
            status.value,
            result.synced_count,
            result.failed_count,
        )
        return result

    async def _process_one(
        self,
        submission_id: str,
        status: SyncStatus,
        identity: SyncIdentity,
        result: SyncResult,
    ) -> None:
        # Another pass may have moved the record since the snapshot was taken.
        current = self.store.get_by_id(submission_id)
        if current is None or current.sync_status != status.value:
            logger.debug("Submission %s left %s before delivery", submission_id, status.value)
            return

        if status is SyncStatus.FAILED:
            await self._sleep(retry_delay_seconds(current.sync_retries, self._base_delay_ms))
            current = self.store.get_by_id(submission_id)
            if current is None or current.sync_status != status.value:
                logger.debug("Submission %s left %s during backoff", submission_id, status.value)
                return

        try:
            payload = self._build_payload(current)
            await self.client.submit(payload, identity.access_token)
        except SubmissionClientError as exc:
            self._record_failure(submission_id, str(exc), result)
            return
        except (OSError, TimeoutError, ValueError) as exc:
            logger.error(
                "Unexpected error delivering submission %s: %s",
                submission_id,
                exc,
                exc_info=True,
            )
            self._record_failure(submission_id, str(exc) or type(exc).__name__, result)
            return

        if self.store.mark_synced(submission_id) is None:
            logger.warning(
                "Submission %s was delivered but removed before it could be marked synced",
                submission_id,
            )
            return
        result.synced_count += 1

    def _record_failure(self, submission_id: str, message: str, result: SyncResult) -> None:
        logger.warning("Failed to sync submission %s: %s", submission_id, message)
        if self.store.mark_failed(submission_id) is None:
            logger.warning("Submission %s vanished before it could be marked failed", submission_id)
        result.failed_count += 1
        result.errors.append(SyncError(id=submission_id, message=message))

    def _build_payload(self, submission: Submission) -> SubmissionPayload:
        answers: list[ExamAnswer] = []
        if self.answers is not None:
            try:
                answers = self.answers.list_for_attempt(submission.id)
            except SQLAlchemyError as exc:
                logger.warning(
                    "Could not load answers for submission %s: %s", submission.id, exc
                )
        return SubmissionPayload.from_submission(submission, answers)
