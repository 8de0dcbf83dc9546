"""
Transports that host quiz sessions.

- QuizServer: asyncio TCP server, one independent Session per connection
- run_terminal_session: one Session on the local terminal
"""

from __future__ import annotations

import asyncio
import random
import sys

from loguru import logger

from config import Settings
from src.db.store import QuizStore
from src.delivery.channel import StreamChannel, TerminalChannel
from src.delivery.output import OutputSink
from src.shell.session import Session, run_session


class QuizServer:
    """Accepts clients and runs a quiz session for each."""

    def __init__(self, store: QuizStore, settings: Settings):
        self.store = store
        self.settings = settings
        self._server: asyncio.Server | None = None
        self._tasks: set[asyncio.Task] = set()

    @property
    def port(self) -> int:
        """Port actually bound (useful when configured with port 0)."""
        if self._server is None or not self._server.sockets:
            raise RuntimeError("Server is not running")
        return self._server.sockets[0].getsockname()[1]

    async def start(self, host: str | None = None, port: int | None = None) -> None:
        host = host or self.settings.server_host
        port = self.settings.server_port if port is None else port
        self._server = await asyncio.start_server(self._handle_client, host, port)
        logger.info(f"Quiz server listening on {host}:{self.port}")

    async def serve_forever(self) -> None:
        if self._server is None:
            await self.start()
        async with self._server:
            await self._server.serve_forever()

    async def stop(self) -> None:
        if self._server is None:
            return
        self._server.close()
        await self._server.wait_closed()
        for task in list(self._tasks):
            task.cancel()
        await asyncio.gather(*self._tasks, return_exceptions=True)
        logger.info("Quiz server stopped")

    async def _handle_client(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        task = asyncio.current_task()
        if task is not None:
            self._tasks.add(task)
        peer = writer.get_extra_info("peername")
        name = f"{peer[0]}:{peer[1]}" if isinstance(peer, tuple) else str(peer)
        logger.info(f"Client connected: {name}")

        def write(text: str) -> None:
            if not writer.is_closing():
                writer.write(text.encode("utf-8"))

        out = OutputSink(
            write,
            flush=writer.drain,
            color=self.settings.color_output,
            width=self.settings.output_width,
        )
        session = Session(
            StreamChannel(reader, writer, out),
            out,
            self.store,
            prompt_text=self.settings.prompt_text,
            authors=self.settings.credits_authors,
            rng=random.Random(),
            name=name,
        )
        try:
            await run_session(session)
        finally:
            self._tasks.discard(task)
            logger.info(f"Client disconnected: {name}")


async def run_terminal_session(store: QuizStore, settings: Settings) -> None:
    """Run a single session on this process' terminal."""

    def write(text: str) -> None:
        sys.stdout.write(text)
        sys.stdout.flush()

    out = OutputSink(
        write,
        color=settings.color_output and sys.stdout.isatty(),
        width=settings.output_width,
    )
    session = Session(
        TerminalChannel(out),
        out,
        store,
        prompt_text=settings.prompt_text,
        authors=settings.credits_authors,
        name="terminal",
    )
    await run_session(session)
