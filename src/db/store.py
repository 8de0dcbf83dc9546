"""
Quiz record store.

Async facade over the ``quizzes`` table. Each operation runs its SQLAlchemy work
in a worker thread inside its own transaction, so callers can await it from the
event loop without blocking other sessions. Records leave the store as frozen
``QuizRecord`` snapshots; changes go back through ``create`` and ``save``.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import TypeVar

from loguru import logger
from pydantic import BaseModel, ValidationError, field_validator
from sqlalchemy import Engine, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from src.core.errors import QuizValidationError, StoreError
from src.db.database import make_session_factory, session_scope
from src.db.models import Quiz

T = TypeVar("T")

MAX_FIELD_LENGTH = 255

DEFAULT_QUIZZES: tuple[tuple[str, str], ...] = (
    ("Capital of Italy", "Rome"),
    ("Capital of France", "Paris"),
    ("Capital of Spain", "Madrid"),
    ("Capital of Portugal", "Lisbon"),
)


@dataclass(frozen=True)
class QuizRecord:
    """Snapshot of one stored quiz."""

    id: int
    question: str
    answer: str

    @classmethod
    def from_row(cls, row: Quiz) -> QuizRecord:
        return cls(id=row.id, question=row.question, answer=row.answer)


class QuizDraft(BaseModel):
    """Field rules shared by every write to the store."""

    question: str
    answer: str

    @field_validator("question", "answer")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        if len(value) > MAX_FIELD_LENGTH:
            raise ValueError(f"must be at most {MAX_FIELD_LENGTH} characters")
        return value


def _validate(question: str, answer: str) -> QuizDraft:
    try:
        return QuizDraft(question=question, answer=answer)
    except ValidationError as e:
        messages = []
        for error in e.errors():
            field = ".".join(str(part) for part in error["loc"]) or "quiz"
            message = error["msg"].removeprefix("Value error, ")
            messages.append(f"{field.capitalize()} {message}.")
        raise QuizValidationError(messages) from e


class QuizStore:
    """CRUD over quiz records."""

    def __init__(self, engine: Engine):
        self.engine = engine
        self._factory = make_session_factory(engine)

    async def _run(self, operation: Callable[[Session], T], action: str) -> T:
        def work() -> T:
            with session_scope(self._factory) as session:
                return operation(session)

        try:
            return await asyncio.to_thread(work)
        except SQLAlchemyError as e:
            logger.error(f"Quiz store failed to {action}: {e}")
            raise StoreError(f"Could not {action}: {e.__class__.__name__}") from e

    async def find_all(self) -> list[QuizRecord]:
        """Return every quiz ordered by id."""

        def operation(session: Session) -> list[QuizRecord]:
            rows = session.scalars(select(Quiz).order_by(Quiz.id)).all()
            return [QuizRecord.from_row(row) for row in rows]

        return await self._run(operation, "list quizzes")

    async def find_by_id(self, quiz_id: int) -> QuizRecord | None:
        """Return the quiz with ``quiz_id`` or None."""

        def operation(session: Session) -> QuizRecord | None:
            row = session.get(Quiz, quiz_id)
            return QuizRecord.from_row(row) if row is not None else None

        return await self._run(operation, "read quiz")

    async def create(self, *, question: str, answer: str) -> QuizRecord:
        """Insert a new quiz and return it with its assigned id."""
        draft = _validate(question, answer)

        def operation(session: Session) -> QuizRecord:
            row = Quiz(question=draft.question, answer=draft.answer)
            session.add(row)
            session.flush()
            return QuizRecord.from_row(row)

        record = await self._run(operation, "create quiz")
        logger.debug(f"Created quiz {record.id}")
        return record

    async def destroy(self, quiz_id: int) -> None:
        """Delete the quiz with ``quiz_id``; a missing id is a no-op."""

        def operation(session: Session) -> bool:
            row = session.get(Quiz, quiz_id)
            if row is None:
                return False
            session.delete(row)
            return True

        if await self._run(operation, "delete quiz"):
            logger.debug(f"Deleted quiz {quiz_id}")

    async def save(self, record: QuizRecord) -> QuizRecord:
        """Persist ``record``'s question and answer over the stored row."""
        draft = _validate(record.question, record.answer)

        def operation(session: Session) -> QuizRecord | None:
            row = session.get(Quiz, record.id)
            if row is None:
                return None
            row.question = draft.question
            row.answer = draft.answer
            session.flush()
            return QuizRecord.from_row(row)

        saved = await self._run(operation, "save quiz")
        if saved is None:
            raise StoreError(f"Quiz {record.id} no longer exists.")
        logger.debug(f"Saved quiz {saved.id}")
        return saved

    async def count(self) -> int:
        def operation(session: Session) -> int:
            return session.scalar(select(func.count()).select_from(Quiz)) or 0

        return await self._run(operation, "count quizzes")

    async def seed(self, quizzes: Iterable[tuple[str, str]] = DEFAULT_QUIZZES) -> int:
        """Insert ``quizzes`` when the table is empty. Returns rows inserted."""
        pending = [_validate(question, answer) for question, answer in quizzes]

        def operation(session: Session) -> int:
            if session.scalar(select(func.count()).select_from(Quiz)):
                return 0
            session.add_all(Quiz(question=d.question, answer=d.answer) for d in pending)
            return len(pending)

        inserted = await self._run(operation, "seed quizzes")
        if inserted:
            logger.info(f"Seeded {inserted} default quizzes")
        return inserted
