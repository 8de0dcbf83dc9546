"""
Line output for quiz sessions.

Every session owns one ``OutputSink``. It renders rich ``Text`` into a string
(ANSI-styled or plain) and hands it to the session's writer, so the same calls
work for a socket and for the local terminal.

Token styles:
- record ids and the ``=>`` separator are magenta
- prompts for questions are red
- error lines read ``Error: <message>``
- session-ending results use figlet lettering
"""

from __future__ import annotations

import io
from collections.abc import Awaitable, Callable

from asciimatics.renderers import FigletText
from loguru import logger
from rich.console import Console
from rich.text import Text

Part = str | Text | tuple[str, str]

ID_STYLE = "magenta"
SEPARATOR = "=>"
PROMPT_STYLE = "red"
FIGLET_FONT = "standard"


def colorize(value: object, style: str) -> Text:
    """Wrap ``value`` as a styled text segment."""
    return Text(str(value), style=style)


def quiz_id(value: int) -> Text:
    return colorize(value, ID_STYLE)


def separator() -> Text:
    return colorize(SEPARATOR, ID_STYLE)


def figlet(text: str, font: str = FIGLET_FONT) -> str:
    """Render ``text`` in large figlet letters."""
    lines = FigletText(text, font=font, width=200).rendered_text[0]
    return "\n".join(line.rstrip() for line in lines).rstrip("\n")


class OutputSink:
    """Renders session output and forwards it to a writer."""

    def __init__(
        self,
        write: Callable[[str], None],
        *,
        flush: Callable[[], Awaitable[None]] | None = None,
        color: bool = True,
        width: int = 100,
    ):
        self._write = write
        self._flush = flush
        self.console = Console(
            file=io.StringIO(),
            force_terminal=color,
            color_system="standard" if color else None,
            width=width,
            highlight=False,
            emoji=False,
            soft_wrap=True,
        )

    def render(self, *parts: Part, style: str = "", end: str = "\n") -> str:
        line = Text.assemble(*parts, style=style)
        with self.console.capture() as capture:
            self.console.print(line, end=end)
        return capture.get()

    def write(self, text: str) -> None:
        """Write ``text`` as-is."""
        self._write(text)

    def log(self, *parts: Part, color: str | None = None) -> None:
        """Write one informational line assembled from ``parts``."""
        self._write(self.render(*parts, style=color or ""))

    def error_log(self, message: str) -> None:
        self._write(self.render(("Error", "red"), ": ", (message, "red on bright_yellow")))

    def big_log(self, text: str, color: str = "green") -> None:
        """Write ``text`` in large lettering."""
        self._write(self.render(figlet(text), style=color))

    def prompt(self, text: str) -> None:
        """Write a question prompt without a line break."""
        self._write(self.render(text, style=PROMPT_STYLE, end=""))

    async def flush(self) -> None:
        if self._flush is None:
            return
        try:
            await self._flush()
        except ConnectionError as e:
            logger.debug(f"Output flush failed: {e}")
