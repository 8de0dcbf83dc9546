"""
Shell commands and their dispatcher.

Each command is an async handler ``handler(session, arg=None)`` registered
under its name and aliases with ``@command``. The decorator owns the completion
contract shared by all of them: any failure becomes an error line and the
prompt is re-armed exactly once when the handler is done, whether it succeeded
or not. ``quit`` is the only command that leaves the prompt down.
"""

from __future__ import annotations

import dataclasses
import functools
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

from loguru import logger
from rich.text import Text

from src.core.errors import QuizCliError, QuizValidationError, RecordNotFoundError
from src.delivery.output import quiz_id, separator
from src.shell.play import QuizGame
from src.shell.validators import answers_match, as_question, validate_id

if TYPE_CHECKING:
    from src.db.store import QuizRecord
    from src.shell.session import Session

Handler = Callable[["Session", "str | None"], Awaitable[None]]

# Command registry - populated by @command decorator
COMMANDS: dict[str, Handler] = {}

HELP_LINES = (
    "Commands:",
    "  h|help - Show this help.",
    "  list - List the existing quizzes.",
    "  show <id> - Show the question and answer of the given quiz.",
    "  add - Add a new quiz interactively.",
    "  delete <id> - Delete the given quiz.",
    "  edit <id> - Edit the given quiz.",
    "  test <id> - Test yourself on the given quiz.",
    "  p|play - Play: answer every quiz in random order.",
    "  credits - Credits.",
    "  q|quit - Leave the program.",
)


def command(*names: str, rearm: bool = True):
    """Register an async handler under ``names``."""

    def decorator(func: Handler) -> Handler:
        @functools.wraps(func)
        async def handler(session: Session, arg: str | None = None) -> None:
            try:
                await func(session, arg)
            except QuizValidationError as e:
                session.out.error_log("The quiz is invalid:")
                for message in e.messages:
                    session.out.error_log(message)
            except QuizCliError as e:
                session.out.error_log(str(e))
            except Exception as e:
                logger.exception(f"[{session.name}] command '{func.__name__}' failed")
                session.out.error_log(str(e) or e.__class__.__name__)
            finally:
                if rearm:
                    session.prompt()

        for name in names:
            COMMANDS[name] = handler
        return handler

    return decorator


def get_command(name: str) -> Handler | None:
    return COMMANDS.get(name.lower())


async def _fetch(session: Session, arg: str | None) -> QuizRecord:
    """Validate ``arg`` and load its quiz."""
    record_id = validate_id(arg)
    quiz = await session.store.find_by_id(record_id)
    if quiz is None:
        raise RecordNotFoundError(record_id)
    return quiz


@command("h", "help")
async def help_cmd(session: Session, arg: str | None = None) -> None:
    for line in HELP_LINES:
        session.out.log(line)


@command("list")
async def list_cmd(session: Session, arg: str | None = None) -> None:
    for quiz in await session.store.find_all():
        session.out.log(" [", quiz_id(quiz.id), "]: ", quiz.question)


@command("show")
async def show_cmd(session: Session, arg: str | None = None) -> None:
    quiz = await _fetch(session, arg)
    session.out.log(" [", quiz_id(quiz.id), "]: ", quiz.question, " ", separator(), " ", quiz.answer)


@command("add")
async def add_cmd(session: Session, arg: str | None = None) -> None:
    question = await session.channel.ask(" Enter a question: ")
    answer = await session.channel.ask(" Enter the answer: ")
    quiz = await session.store.create(question=question, answer=answer)
    logger.info(f"[{session.name}] added quiz {quiz.id}")
    session.out.log(
        " ", Text("Added", style="magenta"), ": ", quiz.question, " ", separator(), " ", quiz.answer
    )


@command("delete")
async def delete_cmd(session: Session, arg: str | None = None) -> None:
    record_id = validate_id(arg)
    await session.store.destroy(record_id)
    logger.info(f"[{session.name}] deleted quiz {record_id}")
    session.out.log(" Deleted quiz [", quiz_id(record_id), "].")


@command("edit")
async def edit_cmd(session: Session, arg: str | None = None) -> None:
    quiz = await _fetch(session, arg)
    session.channel.prefill(quiz.question)
    question = await session.channel.ask(" Enter the question: ")
    session.channel.prefill(quiz.answer)
    answer = await session.channel.ask(" Enter the answer: ")
    quiz = await session.store.save(dataclasses.replace(quiz, question=question, answer=answer))
    logger.info(f"[{session.name}] edited quiz {quiz.id}")
    session.out.log(
        " Quiz ", quiz_id(quiz.id), " changed to: ", quiz.question, " ", separator(), " ", quiz.answer
    )


@command("test")
async def test_cmd(session: Session, arg: str | None = None) -> None:
    quiz = await _fetch(session, arg)
    answer = await session.channel.ask(as_question(quiz.question))
    if answers_match(quiz.answer, answer):
        session.out.log("Your answer is correct.")
        session.out.big_log(" Correcta", "green")
    else:
        session.out.log("Your answer is incorrect.")
        session.out.big_log(" Incorrecta", "red")


@command("p", "play")
async def play_cmd(session: Session, arg: str | None = None) -> None:
    await QuizGame(session).play()


@command("credits")
async def credits_cmd(session: Session, arg: str | None = None) -> None:
    session.out.log("Authors:")
    for author in session.authors:
        session.out.log(author, color="green")


@command("q", "quit", rearm=False)
async def quit_cmd(session: Session, arg: str | None = None) -> None:
    session.out.log("Bye.")
    await session.close()


async def dispatch(session: Session, line: str) -> None:
    """Run the command in ``line`` to completion."""
    words = line.split()
    if not words:
        session.prompt()
        return

    name = words[0].lower()
    arg = words[1] if len(words) > 1 else None
    handler = get_command(name)
    if handler is None:
        session.out.error_log(f"Unknown command: '{name}'")
        session.out.log("Use ", Text("help", style="green"), " to see every available command.")
        session.prompt()
        return

    logger.debug(f"[{session.name}] {name} {arg or ''}".rstrip())
    await handler(session, arg)
