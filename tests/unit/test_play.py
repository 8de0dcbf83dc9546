"""
Unit tests for play mode.

Covers the game loop invariants:
- all answers right: every quiz asked exactly once, game won with score N
- first wrong answer ends the game with the score so far
- each draw is uniform over the quizzes still remaining
"""

import random

import pytest
from sqlalchemy import create_engine

from src.db.store import QuizRecord, QuizStore
from src.shell.commands import dispatch
from src.shell.play import PlayPhase, PlayState, QuizGame
from src.shell.validators import as_question


class OracleChannel:
    """Answers each question from a lookup table, optionally failing one."""

    interactive = False
    at_eof = False

    def __init__(self, answers: dict[str, str], wrong_on: int | None = None):
        self.answers = answers
        self.wrong_on = wrong_on
        self.questions: list[str] = []

    async def ask(self, text):
        self.questions.append(text)
        if self.wrong_on is not None and len(self.questions) == self.wrong_on:
            return "definitely wrong"
        return self.answers[text]

    async def readline(self):
        return None

    def prefill(self, text):
        pass

    async def close(self):
        pass


class RecordingRandom:
    """Random source that remembers the range of every draw."""

    def __init__(self, seed=0, forced_index=None):
        self._random = random.Random(seed)
        self.ranges: list[int] = []
        self.forced_index = forced_index

    def randrange(self, stop):
        self.ranges.append(stop)
        if self.forced_index is not None:
            return self.forced_index
        return self._random.randrange(stop)


async def _oracle_session(make_session, store, quizzes, wrong_on=None, rng=None):
    records = [await store.create(question=q, answer=a) for q, a in quizzes]
    session = make_session()
    session.channel = OracleChannel(
        {as_question(r.question): r.answer.upper() for r in records},
        wrong_on=wrong_on,
    )
    if rng is not None:
        session.rng = rng
    return session, records


class TestPlayState:
    def test_resolve_removes_and_scores(self):
        quizzes = [QuizRecord(id=i, question=f"q{i}", answer="a") for i in range(3)]
        state = PlayState(remaining=list(quizzes))

        state.resolve(1)

        assert state.score == 1
        assert [q.id for q in state.remaining] == [0, 2]

    def test_draw_within_remaining(self):
        quizzes = [QuizRecord(id=i, question=f"q{i}", answer="a") for i in range(5)]
        state = PlayState(remaining=list(quizzes))

        index, quiz = state.draw(random.Random(3))

        assert quiz is state.remaining[index]


class TestWinning:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("seed", range(8))
    async def test_every_quiz_asked_exactly_once(self, make_session, sink, store, sample_quizzes, seed):
        session, records = await _oracle_session(
            make_session, store, sample_quizzes, rng=random.Random(seed)
        )
        game = QuizGame(session)

        phase = await game.play()

        assert phase is PlayPhase.WON
        assert game.state.score == len(records)
        assert sorted(game.state.asked) == sorted(r.id for r in records)
        assert len(session.channel.questions) == len(records)
        assert "Nothing more to ask." in sink.text
        assert f"End of game. Score: {len(records)}" in sink.text
        assert sink.banners == [str(len(records))]

    @pytest.mark.asyncio
    async def test_asked_trace_follows_question_order(self, make_session, store, sample_quizzes):
        session, records = await _oracle_session(make_session, store, sample_quizzes)
        game = QuizGame(session)

        await game.play()

        prompts = {r.id: as_question(r.question) for r in records}
        assert [prompts[quiz_id] for quiz_id in game.state.asked] == session.channel.questions

    @pytest.mark.asyncio
    async def test_draws_over_shrinking_remaining_set(self, make_session, store, sample_quizzes):
        rng = RecordingRandom(seed=7)
        session, records = await _oracle_session(make_session, store, sample_quizzes, rng=rng)

        await QuizGame(session).play()

        assert rng.ranges == [4, 3, 2, 1]

    @pytest.mark.asyncio
    async def test_empty_store_wins_immediately(self, make_session, sink, store):
        session, _ = await _oracle_session(make_session, store, [])
        game = QuizGame(session)

        phase = await game.play()

        assert phase is PlayPhase.WON
        assert game.state.score == 0
        assert session.channel.questions == []
        assert "Nothing more to ask." in sink.text
        assert "End of game. Score: 0" in sink.text
        assert sink.banners == ["0"]


class TestLosing:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("wrong_on", [1, 2, 4])
    async def test_first_wrong_answer_ends_game(self, make_session, sink, store, sample_quizzes, wrong_on):
        session, _ = await _oracle_session(make_session, store, sample_quizzes, wrong_on=wrong_on)
        game = QuizGame(session)

        phase = await game.play()

        assert phase is PlayPhase.LOST
        assert game.state.score == wrong_on - 1
        assert len(session.channel.questions) == wrong_on
        assert "INCORRECT." in sink.text
        assert f"End of game. Score: {wrong_on - 1}" in sink.text
        assert "Nothing more to ask." not in sink.text
        assert sink.banners == [str(wrong_on - 1)]

    @pytest.mark.asyncio
    async def test_questions_never_repeat_before_loss(self, make_session, store, sample_quizzes):
        session, _ = await _oracle_session(make_session, store, sample_quizzes, wrong_on=4)
        game = QuizGame(session)

        await game.play()

        assert len(set(game.state.asked)) == len(game.state.asked)


class TestPlayCommand:
    @pytest.mark.asyncio
    async def test_play_alias_rearms_once(self, make_session, store):
        session, _ = await _oracle_session(make_session, store, [("2+2", "4")])

        await dispatch(session, "p")

        assert session.prompts_issued == 1

    @pytest.mark.asyncio
    async def test_inconsistent_draw_aborts_command_only(self, make_session, sink, store, sample_quizzes):
        session, _ = await _oracle_session(
            make_session, store, sample_quizzes, rng=RecordingRandom(forced_index=99)
        )

        await dispatch(session, "play")

        assert len(sink.errors) == 1
        assert "Failed to pick a quiz" in sink.errors[0]
        assert session.channel.questions == []
        assert session.prompts_issued == 1
        assert session.closed is False

    @pytest.mark.asyncio
    async def test_store_failure_reports_error(self, make_session, sink, tmp_path):
        engine = create_engine(f"sqlite:///{tmp_path / 'no_tables.sqlite'}")
        session = make_session()
        session.store = QuizStore(engine)

        await dispatch(session, "play")

        assert len(sink.errors) == 1
        assert sink.banners == []
        assert session.prompts_issued == 1
        engine.dispose()
