"""Quiz state machine: pick word → await answer → evaluate → next."""

from __future__ import annotations

import random
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Sequence

from vocabtutor.engine.normalizer import answers_match
from vocabtutor.state.words import Word


class QuizPhase(str, Enum):
    IDLE = "idle"
    AWAITING_ANSWER = "awaiting_answer"
    ANSWERED = "answered"


@dataclass
class QuizResult:
    passed: bool
    user_answer: str
    correct_answer: str


@dataclass
class QuizStats:
    total_attempts: int = 0
    correct: int = 0

    @property
    def accuracy(self) -> float:
        if self.total_attempts == 0:
            return 0.0
        return self.correct / self.total_attempts

    def record(self, passed: bool) -> None:
        self.total_attempts += 1
        if passed:
            self.correct += 1


@dataclass
class QuizState:
    word: Word
    show_portuguese: bool
    phase: QuizPhase = QuizPhase.AWAITING_ANSWER
    last_result: Optional[QuizResult] = None

    @property
    def prompt(self) -> str:
        return self.word.portuguese if self.show_portuguese else self.word.french

    @property
    def expected(self) -> str:
        return self.word.french if self.show_portuguese else self.word.portuguese


class QuizRunner:
    """Drives a translation quiz in both directions.

    ``words`` is either a list of words or a callable returning the current
    list, so a live store can be passed as ``store.list``.
    """

    def __init__(
        self,
        words: Sequence[Word] | Callable[[], Sequence[Word]],
        rng: Optional[random.Random] = None,
    ):
        self._words = words
        self.rng = rng or random.Random()
        self.state: Optional[QuizState] = None
        self.stats = QuizStats()

    def _current_words(self) -> Sequence[Word]:
        if callable(self._words):
            return self._words()
        return self._words

    @property
    def phase(self) -> QuizPhase:
        return self.state.phase if self.state else QuizPhase.IDLE

    def next_word(self) -> Optional[QuizState]:
        """Pick a random word and direction; None when there are no words."""
        words = self._current_words()
        if not words:
            self.state = None
            return None

        self.state = QuizState(
            word=self.rng.choice(list(words)),
            show_portuguese=self.rng.random() > 0.5,
        )
        return self.state

    start = next_word

    def submit(self, answer: str) -> Optional[QuizResult]:
        """Check an answer. Blank answers are ignored and return None."""
        if self.state is None or not answer.strip():
            return None
        if self.state.phase == QuizPhase.ANSWERED:
            return self.state.last_result

        result = QuizResult(
            passed=answers_match(answer, self.state.expected),
            user_answer=answer,
            correct_answer=self.state.expected,
        )
        self.state.last_result = result
        self.state.phase = QuizPhase.ANSWERED
        self.stats.record(result.passed)
        return result
