"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import random
import sys
from collections import deque
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from src.db.database import create_db_engine, init_db
from src.db.store import QuizStore
from src.delivery.output import OutputSink
from src.shell.session import Session


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests (real TCP server)")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")
    config.addinivalue_line("markers", "slow: Slow tests")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


class ScriptedChannel:
    """Question channel fed from lists instead of a client."""

    interactive = False

    def __init__(self, answers=(), commands=()):
        self.answers = deque(answers)
        self.commands = deque(commands)
        self.questions: list[str] = []
        self.prefilled: list[str] = []
        self.at_eof = False
        self.closed = False

    async def ask(self, text):
        self.questions.append(text)
        if not self.answers:
            return ""
        return self.answers.popleft().strip()

    async def readline(self):
        if not self.commands:
            self.at_eof = True
            return None
        return self.commands.popleft()

    def prefill(self, text):
        self.prefilled.append(text)

    async def close(self):
        self.closed = True


class RecordingSink(OutputSink):
    """Plain-text output sink that remembers what it wrote."""

    def __init__(self):
        self.chunks: list[str] = []
        self.banners: list[str] = []
        self.errors: list[str] = []
        super().__init__(self.chunks.append, color=False, width=200)

    @property
    def text(self) -> str:
        return "".join(self.chunks)

    def big_log(self, text, color="green"):
        self.banners.append(text.strip())
        super().big_log(text, color)

    def error_log(self, message):
        self.errors.append(message)
        super().error_log(message)

    def clear(self):
        self.chunks.clear()
        self.banners.clear()
        self.errors.clear()


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def db_engine(tmp_path):
    """SQLite engine with the schema created, one database per test."""
    engine = create_db_engine(f"sqlite:///{tmp_path / 'quizzes.sqlite'}")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def store(db_engine):
    """Empty quiz store."""
    return QuizStore(db_engine)


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def make_session(store, sink):
    """Build a session over a scripted channel."""

    def _make(answers=(), commands=(), seed=1234):
        channel = ScriptedChannel(answers=answers, commands=commands)
        return Session(
            channel,
            sink,
            store,
            prompt_text="quiz > ",
            authors=("Ada Lovelace", "Alan Turing"),
            rng=random.Random(seed),
            name="test",
        )

    return _make


@pytest.fixture
def sample_quizzes():
    """Provide sample question/answer pairs."""
    return [
        ("2+2", "4"),
        ("Capital of France", " Paris "),
        ("Largest planet", "Jupiter"),
        ("Chemical symbol for gold", "Au"),
    ]
