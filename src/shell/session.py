"""
Quiz Session: per-connection command loop.

A Session bundles everything one client owns: its question channel, its output
sink, the shared record store handle and its own random source. Commands never
overlap within a session: the loop only reads the next line after the running
handler has re-armed the prompt.
"""

from __future__ import annotations

import random
from collections.abc import Sequence

from loguru import logger

from src.db.store import QuizStore
from src.delivery.channel import QuestionChannel
from src.delivery.output import OutputSink
from src.shell.commands import dispatch


class Session:
    """State of one connected client."""

    def __init__(
        self,
        channel: QuestionChannel,
        out: OutputSink,
        store: QuizStore,
        *,
        prompt_text: str = "quiz > ",
        authors: Sequence[str] = (),
        rng: random.Random | None = None,
        name: str = "local",
    ):
        self.channel = channel
        self.out = out
        self.store = store
        self.prompt_text = prompt_text
        self.authors = tuple(authors)
        self.rng = rng or random.Random()
        self.name = name
        self.prompt_ready = False
        self.prompts_issued = 0
        self.closed = False

    def prompt(self) -> None:
        """Re-arm the prompt: the session is ready for its next command."""
        if self.closed:
            return
        self.out.write(self.prompt_text)
        self.prompt_ready = True
        self.prompts_issued += 1

    async def next_command(self) -> str | None:
        """Wait for the next command line; None when the client is gone."""
        line = await self.channel.readline()
        self.prompt_ready = False
        return line

    async def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        await self.channel.close()
        logger.debug(f"[{self.name}] session closed")


async def run_session(session: Session) -> None:
    """Drive ``session`` until the client quits or disconnects."""
    logger.info(f"[{session.name}] session started")
    session.prompt()
    try:
        while not session.closed:
            line = await session.next_command()
            if line is None:
                logger.info(f"[{session.name}] client disconnected")
                break
            await dispatch(session, line)
    finally:
        await session.close()
