"""
Shell: the interactive side of a quiz session.

Components:
- validators: argument parsing and answer comparison
- commands: command registry, handlers and dispatcher
- play: randomized play mode
- session: per-connection state and command loop
"""

from src.shell.commands import COMMANDS, dispatch, get_command
from src.shell.play import PlayPhase, PlayState, QuizGame
from src.shell.session import Session, run_session
from src.shell.validators import answers_match, validate_id

__all__ = [
    "COMMANDS",
    "dispatch",
    "get_command",
    "PlayPhase",
    "PlayState",
    "QuizGame",
    "Session",
    "run_session",
    "answers_match",
    "validate_id",
]
