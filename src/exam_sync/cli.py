# src/exam_sync/cli.py
"""Command-line entry point for running sync passes against the local queue."""
from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from exam_sync.core.settings import settings
from exam_sync.db.session import SessionLocal, create_tables
from exam_sync.repositories import AnswerRepository, SubmissionStore
from exam_sync.services.exam_attempt import ExamAttempt, ExamAttemptService
from exam_sync.services.identity import identity_from_token
from exam_sync.services.submission_client import SubmissionClient
from exam_sync.services.sync_processor import SyncProcessor, SyncResult

logger = logging.getLogger("exam_sync")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="exam-sync", description=__doc__)
    parser.add_argument(
        "--token",
        default=None,
        help="Bearer access token (defaults to EXAM_SYNC_ACCESS_TOKEN)",
    )
    sub = parser.add_subparsers(dest="command")

    sub.add_parser("init-db", help="Create the local tables")
    sub.add_parser("sync", help="Deliver PENDING submissions")
    sub.add_parser("retry", help="Retry FAILED submissions with backoff")
    sub.add_parser("all", help="Run a sync pass followed by a retry pass")
    sub.add_parser("status", help="Show queue counts by sync status")
    sub.add_parser("reset", help="Delete all local submissions and answers")

    submit = sub.add_parser("submit", help="Queue a finished attempt")
    submit.add_argument("--exam-type", required=True)
    submit.add_argument("--score", type=int, required=True)
    submit.add_argument("--duration", type=int, required=True, help="Seconds")
    submit.add_argument("--passed", action="store_true")
    submit.add_argument("--owner", default=None)
    return parser


def _print_result(label: str, result: SyncResult) -> None:
    print(
        f"{label}: synced={result.synced_count} failed={result.failed_count} "
        f"success={str(result.success).lower()}"
    )
    for error in result.errors:
        print(f"  {error.id}: {error.message}")


async def _run_sync(command: str, token: str | None) -> SyncResult:
    store = SubmissionStore(SessionLocal)
    identity = identity_from_token(token)
    async with SubmissionClient() as client:
        processor = SyncProcessor(store, client, AnswerRepository(SessionLocal))
        if command == "sync":
            return await processor.sync_pending(identity)
        if command == "retry":
            return await processor.retry_failed(identity)
        return await processor.sync_all(identity)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    command = args.command or "all"
    store = SubmissionStore(SessionLocal)

    if command == "init-db":
        create_tables()
        print("Tables created")
        return 0

    if command == "status":
        for status, count in store.count_by_status().items():
            print(f"{status.value}: {count}")
        return 0

    if command == "reset":
        ExamAttemptService(store, AnswerRepository(SessionLocal)).clear_all()
        print("Local submissions cleared")
        return 0

    if command == "submit":
        submission = ExamAttemptService(store).submit_exam(
            ExamAttempt(
                exam_type_id=args.exam_type,
                score=args.score,
                passed=args.passed,
                duration=args.duration,
                owner_id=args.owner,
            )
        )
        print(submission.id)
        return 0

    token = args.token or settings.access_token
    result = asyncio.run(_run_sync(command, token))
    _print_result(command, result)
    return 0 if result.success else 1


if __name__ == "__main__":  # pragma: no cover - manual invocation
    sys.exit(main())
