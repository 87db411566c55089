# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from datetime import UTC, datetime, timedelta
from itertools import count
from typing import Any

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("EXAM_SYNC_DATABASE_URL", "sqlite://")

from exam_sync.db.session import Base
from exam_sync.models import ExamAnswer, Submission, SyncStatus
from exam_sync.repositories import AnswerRepository, SubmissionStore
from exam_sync.services.identity import SyncIdentity

TEST_DB_URL = "sqlite://"
BASE_TIME = datetime(2026, 1, 1, 9, 0, tzinfo=UTC)

_SUBMISSION_COUNTER = count(1)


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def session_factory(engine: Engine) -> Iterator[sessionmaker[Session]]:
    factory = sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )
    try:
        yield factory
    finally:
        # Ensure each test sees a clean database even if commits occurred.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture()
def store(session_factory: sessionmaker[Session]) -> SubmissionStore:
    return SubmissionStore(session_factory)


@pytest.fixture()
def answer_repo(session_factory: sessionmaker[Session]) -> AnswerRepository:
    return AnswerRepository(session_factory)


@pytest.fixture()
def identity() -> SyncIdentity:
    return SyncIdentity(owner_id="user-123", access_token="token-abc")


@pytest.fixture()
def make_submission(store: SubmissionStore) -> Callable[..., Submission]:
    """Persist a submission; each call is created one minute after the previous one."""

    def _make(**overrides: Any) -> Submission:
        n = next(_SUBMISSION_COUNTER)
        created_at = overrides.pop("created_at", BASE_TIME + timedelta(minutes=n))
        fields: dict[str, Any] = {
            "id": f"local-{n}",
            "owner_id": "user-123",
            "exam_type_id": "aws-ccp",
            "score": 75,
            "passed": True,
            "duration": 2400,
            "submitted_at": created_at,
            "created_at": created_at,
            "sync_status": SyncStatus.PENDING.value,
            "sync_retries": 0,
        }
        fields.update(overrides)
        return store.save(Submission(**fields))

    return _make


@pytest.fixture()
def make_answer(answer_repo: AnswerRepository) -> Callable[..., ExamAnswer]:
    def _make(exam_attempt_id: str, order_index: int, **overrides: Any) -> ExamAnswer:
        fields: dict[str, Any] = {
            "id": f"{exam_attempt_id}-a{order_index}",
            "exam_attempt_id": exam_attempt_id,
            "question_id": f"q-{order_index}",
            "selected_answers": ["A"],
            "is_correct": True,
            "is_flagged": False,
            "order_index": order_index,
        }
        fields.update(overrides)
        answer = ExamAnswer(**fields)
        answer_repo.add_all([answer])
        return answer

    return _make
