"""Tests for the translation quiz state machine."""

import random

from vocabtutor.engine.quiz_runner import QuizPhase, QuizRunner, QuizState, QuizStats
from vocabtutor.state.words import Word

CASA = Word(id="1", portuguese="casa", french="maison / foyer")
CAO = Word(id="2", portuguese="o cão", french="le chien")


class TestQuizRunner:
    def test_no_words(self):
        runner = QuizRunner([])
        assert runner.next_word() is None
        assert runner.phase == QuizPhase.IDLE
        assert runner.submit("casa") is None

    def test_picks_from_words(self):
        runner = QuizRunner([CASA, CAO], rng=random.Random(0))
        for _ in range(20):
            state = runner.next_word()
            assert state.word in (CASA, CAO)
            assert state.phase == QuizPhase.AWAITING_ANSWER

    def test_both_directions_occur(self):
        runner = QuizRunner([CASA], rng=random.Random(4))
        directions = {runner.next_word().show_portuguese for _ in range(50)}
        assert directions == {True, False}

    def test_live_word_source(self, store):
        runner = QuizRunner(store.list)
        assert runner.start() is None
        store.create("casa", "maison")
        assert runner.start().word.portuguese == "casa"

    def test_correct_answer_portuguese_shown(self):
        runner = QuizRunner([CASA])
        runner.state = QuizState(word=CASA, show_portuguese=True)
        assert runner.state.prompt == "casa"
        result = runner.submit("Foyer")
        assert result.passed
        assert result.correct_answer == "maison / foyer"
        assert runner.phase == QuizPhase.ANSWERED

    def test_correct_answer_french_shown(self):
        runner = QuizRunner([CAO])
        runner.state = QuizState(word=CAO, show_portuguese=False)
        assert runner.state.prompt == "le chien"
        assert runner.submit("cao").passed

    def test_wrong_answer(self):
        runner = QuizRunner([CASA])
        runner.state = QuizState(word=CASA, show_portuguese=True)
        result = runner.submit("voiture")
        assert not result.passed
        assert result.user_answer == "voiture"

    def test_blank_answer_ignored(self):
        runner = QuizRunner([CASA])
        runner.next_word()
        assert runner.submit("   ") is None
        assert runner.phase == QuizPhase.AWAITING_ANSWER
        assert runner.stats.total_attempts == 0

    def test_second_submit_returns_first_result(self):
        runner = QuizRunner([CASA])
        runner.state = QuizState(word=CASA, show_portuguese=True)
        first = runner.submit("maison")
        assert runner.submit("voiture") is first
        assert runner.stats.total_attempts == 1

    def test_stats(self):
        runner = QuizRunner([CASA])
        for answer in ("maison", "voiture", "foyer"):
            runner.state = QuizState(word=CASA, show_portuguese=True)
            runner.submit(answer)
        assert runner.stats.total_attempts == 3
        assert runner.stats.correct == 2
        assert abs(runner.stats.accuracy - 2 / 3) < 1e-9


class TestQuizStats:
    def test_empty_accuracy(self):
        assert QuizStats().accuracy == 0.0
