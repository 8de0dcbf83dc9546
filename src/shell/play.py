"""
Play mode: ask every stored quiz in random order until one is missed.

States::

    LOADING -> ASKING -> ASKING (correct, quizzes left)
                      -> WON    (nothing left to ask)
                      -> LOST   (wrong answer)

Each step draws a fresh uniform index over the quizzes still remaining, so
every quiz not yet answered correctly is equally likely to come next. A quiz
answered correctly is removed and never asked again in the same game. The
score only grows and is dropped when the game ends.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from loguru import logger

from src.core.errors import PlayAbortedError
from src.db.store import QuizRecord
from src.shell.validators import answers_match, as_question

if TYPE_CHECKING:
    from src.shell.session import Session


class PlayPhase(str, Enum):
    """Where a game is in its lifecycle."""

    LOADING = "loading"
    ASKING = "asking"
    WON = "won"
    LOST = "lost"
    ABORTED = "aborted"


@dataclass
class PlayState:
    """Quizzes still to be answered and the running score."""

    remaining: list[QuizRecord]
    score: int = 0
    # Quiz ids in the order they were asked.
    asked: list[int] = field(default_factory=list)

    def draw(self, rng: random.Random) -> tuple[int, QuizRecord | None]:
        """Pick the next quiz uniformly among those remaining."""
        index = rng.randrange(len(self.remaining))
        quiz = self.remaining[index] if 0 <= index < len(self.remaining) else None
        return index, quiz

    def resolve(self, index: int) -> None:
        """Record a correct answer for ``remaining[index]``."""
        del self.remaining[index]
        self.score += 1


class QuizGame:
    """One run of the play command for a session."""

    def __init__(self, session: Session):
        self.session = session
        self.phase = PlayPhase.LOADING
        self.state: PlayState | None = None

    async def play(self) -> PlayPhase:
        session = self.session
        out = session.out
        try:
            quizzes = await session.store.find_all()
        except Exception:
            self.phase = PlayPhase.ABORTED
            raise

        self.state = state = PlayState(remaining=list(quizzes))
        self.phase = PlayPhase.ASKING
        logger.debug(f"[{session.name}] play started with {len(quizzes)} quizzes")

        while state.remaining:
            index, quiz = state.draw(session.rng)
            if quiz is None:
                self.phase = PlayPhase.ABORTED
                raise PlayAbortedError(f"Failed to pick a quiz (index {index}).")

            state.asked.append(quiz.id)
            answer = await session.channel.ask(as_question(quiz.question))
            if not answers_match(quiz.answer, answer):
                out.log("INCORRECT.")
                self._finish(PlayPhase.LOST)
                return self.phase

            state.resolve(index)
            out.log(f"CORRECT - {state.score} right so far.")

        out.log("Nothing more to ask.")
        self._finish(PlayPhase.WON)
        return self.phase

    def _finish(self, phase: PlayPhase) -> None:
        self.phase = phase
        score = self.state.score if self.state else 0
        self.session.out.log(f"End of game. Score: {score}")
        self.session.out.big_log(f" {score}", "magenta")
        logger.info(f"[{self.session.name}] play ended: {phase.value}, score {score}")
        if self.state is not None:
            logger.debug(f"[{self.session.name}] play asked: {self.state.asked}")
