"""
Question channels: single-shot asynchronous reads for a session.

A channel turns "show a prompt and wait for one line" into one awaitable that
resolves with the trimmed line. Two implementations share the same surface:

- StreamChannel: an asyncio stream pair (a TCP client)
- TerminalChannel: the local terminal, read in a worker thread so the event
  loop stays free; supports editable default text through ``readline``
"""

from __future__ import annotations

import asyncio
import re
import sys
from typing import Protocol, TextIO

from loguru import logger

from src.delivery.output import PROMPT_STYLE, OutputSink

try:
    import readline
except ImportError:  # pragma: no cover - platform without GNU readline
    readline = None

_ANSI_ESCAPE = re.compile(r"\x1b\[[0-9;]*m")


def readline_prompt(text: str) -> str:
    """Mark ANSI escapes in ``text`` as zero-width for GNU readline."""
    return _ANSI_ESCAPE.sub(lambda m: f"\001{m.group(0)}\002", text)


class QuestionChannel(Protocol):
    """What a session needs from its input side."""

    interactive: bool
    at_eof: bool

    async def ask(self, text: str) -> str:
        """Show ``text`` as a question and resolve with the trimmed reply."""
        ...

    async def readline(self) -> str | None:
        """Read one raw line; None once the input is exhausted."""
        ...

    def prefill(self, text: str) -> None:
        """Offer ``text`` as editable default for the next ``ask``."""
        ...

    async def close(self) -> None:
        ...


class StreamChannel:
    """Channel over an asyncio ``StreamReader``/``StreamWriter`` pair."""

    interactive = False

    def __init__(
        self,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
        out: OutputSink,
        *,
        encoding: str = "utf-8",
    ):
        self._reader = reader
        self._writer = writer
        self._out = out
        self._encoding = encoding
        self.at_eof = False

    async def readline(self) -> str | None:
        if self.at_eof:
            return None
        await self._out.flush()
        try:
            raw = await self._reader.readline()
        except (asyncio.LimitOverrunError, ValueError) as e:
            # The reader has already discarded the oversized line.
            logger.warning(f"Dropped an overlong input line: {e}")
            return ""
        except ConnectionError as e:
            logger.debug(f"Read failed, treating as end of input: {e}")
            raw = b""
        if not raw:
            self.at_eof = True
            return None
        return raw.decode(self._encoding, errors="replace").rstrip("\r\n")

    async def ask(self, text: str) -> str:
        self._out.prompt(text)
        line = await self.readline()
        return (line or "").strip()

    def prefill(self, text: str) -> None:
        # A remote peer has no line buffer to edit.
        return None

    async def close(self) -> None:
        await self._out.flush()
        self._writer.close()
        try:
            await self._writer.wait_closed()
        except ConnectionError:
            pass


class TerminalChannel:
    """Channel over the process' own terminal."""

    def __init__(
        self,
        out: OutputSink,
        *,
        stdin: TextIO | None = None,
        stdout: TextIO | None = None,
    ):
        self._out = out
        self._stdin = stdin or sys.stdin
        stdout = stdout or sys.stdout
        self.interactive = stdout.isatty()
        self.at_eof = False
        self._pending: str | None = None

    def _read(self, prompt: str) -> str | None:
        pending, self._pending = self._pending, None
        if self._stdin is not sys.stdin:
            line = self._stdin.readline()
            return line.rstrip("\r\n") if line else None
        if pending is not None and readline is not None:
            readline.set_startup_hook(lambda: readline.insert_text(pending))
        try:
            return input(prompt)
        except EOFError:
            return None
        finally:
            if readline is not None:
                readline.set_startup_hook(None)

    async def _readline(self, prompt: str) -> str | None:
        if self.at_eof:
            return None
        line = await asyncio.to_thread(self._read, prompt)
        if line is None:
            self.at_eof = True
        return line

    async def readline(self) -> str | None:
        return await self._readline("")

    async def ask(self, text: str) -> str:
        if self._stdin is sys.stdin:
            # input() owns the prompt so readline can redraw it while editing.
            prompt = self._out.render(text, style=PROMPT_STYLE, end="")
            if readline is not None and self.interactive and self._stdin.isatty():
                prompt = readline_prompt(prompt)
            line = await self._readline(prompt)
        else:
            self._out.prompt(text)
            line = await self._readline("")
        return (line or "").strip()

    def prefill(self, text: str) -> None:
        if self.interactive:
            self._pending = text

    async def close(self) -> None:
        self.at_eof = True
