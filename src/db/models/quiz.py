"""
Quiz model: one question and its expected answer.

Rows are keyed by an autoincrement integer id assigned by the database.
Validation of user-provided text happens in the store (see
``src.db.store.QuizDraft``) so every write path shares the same rules.
"""
from __future__ import annotations

from datetime import datetime

from sqlalchemy import Integer, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class Quiz(Base):
    """A quiz question with its answer."""

    __tablename__ = "quizzes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    question: Mapped[str] = mapped_column(Text, nullable=False)
    answer: Mapped[str] = mapped_column(Text, nullable=False)

    created_at: Mapped[datetime] = mapped_column(default=func.now())
    updated_at: Mapped[datetime] = mapped_column(default=func.now(), onupdate=func.now())

    def __repr__(self) -> str:
        return f"<Quiz(id={self.id}, question={self.question!r})>"
