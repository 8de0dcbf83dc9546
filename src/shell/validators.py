"""
Argument validation for shell commands.
"""

from __future__ import annotations

import re

from src.core.errors import MissingParameterError, NotANumberError

_LEADING_INT = re.compile(r"\s*([+-]?[0-9]+)")


def validate_id(raw: str | None) -> int:
    """Turn a raw ``<id>`` argument into an integer.

    Only the leading integer counts, so ``"3abc"`` is 3 and ``"1.5"`` is 1.
    Whether a quiz with that id exists is up to the lookup that follows.

    Raises:
        MissingParameterError: ``raw`` is None
        NotANumberError: ``raw`` does not start with an integer
    """
    if raw is None:
        raise MissingParameterError("id")
    match = _LEADING_INT.match(raw)
    if match is None:
        raise NotANumberError(raw, "id")
    return int(match.group(1))


def answers_match(expected: str, given: str) -> bool:
    """Compare answers ignoring case and surrounding whitespace."""
    return expected.strip().lower() == given.strip().lower()


def as_question(text: str) -> str:
    """Format a quiz question as a prompt."""
    text = text.rstrip()
    return f"{text} " if text.endswith("?") else f"{text}? "
