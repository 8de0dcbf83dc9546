"""
Error taxonomy for quiz sessions.

Every error a command can report derives from :class:`QuizCliError`. Command
handlers recover them at their boundary and turn them into error lines, so none
of them ever ends a session.
"""

from __future__ import annotations


class QuizCliError(Exception):
    """Base class for errors reported to the session as a single line."""


class MissingParameterError(QuizCliError):
    """Raised when a command that needs ``<id>`` gets no argument."""

    def __init__(self, name: str = "id"):
        super().__init__(f"Missing parameter <{name}>.")
        self.name = name


class NotANumberError(QuizCliError):
    """Raised when ``<id>`` has no leading integer."""

    def __init__(self, raw: str, name: str = "id"):
        super().__init__(f"The value of parameter <{name}> is not a number.")
        self.raw = raw
        self.name = name


class RecordNotFoundError(QuizCliError):
    """Raised when no quiz exists for an id."""

    def __init__(self, quiz_id: int):
        super().__init__(f"No quiz associated with id={quiz_id}.")
        self.quiz_id = quiz_id


class QuizValidationError(QuizCliError):
    """Raised by the store when quiz fields fail validation.

    ``messages`` holds one human-readable message per offending field.
    """

    def __init__(self, messages: list[str]):
        super().__init__("The quiz is invalid.")
        self.messages = messages


class StoreError(QuizCliError):
    """Raised when the record store fails for any other reason."""


class PlayAbortedError(QuizCliError):
    """Raised when a play session cannot continue."""
