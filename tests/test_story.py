"""Tests for story word selection and the stored story result."""

import random
from types import SimpleNamespace

import pytest

from vocabtutor.engine.story import (
    StoryResult,
    UsedWord,
    clean_markdown,
    select_story_words,
    story_word_count,
)


def _words(n):
    return [SimpleNamespace(portuguese=f"palavra{i}", french=f"mot{i}") for i in range(n)]


class TestStoryWordCount:
    @pytest.mark.parametrize("total, expected", [
        (10, 10),
        (12, 12),
        (40, 15),
        (50, 15),
        (55, 17),
        (70, 21),
        (75, 23),
        (100, 25),
        (500, 25),
    ])
    def test_count(self, total, expected):
        assert story_word_count(total) == expected

    def test_never_more_than_available(self):
        for total in range(0, 30):
            assert story_word_count(total) <= total


class TestSelectStoryWords:
    def test_subset_without_duplicates(self):
        words = _words(40)
        chosen = select_story_words(words, rng=random.Random(7))
        assert len(chosen) == 15
        assert len({w.portuguese for w in chosen}) == 15
        pairs = {(w.portuguese, w.french) for w in words}
        assert all((w.portuguese, w.french) in pairs for w in chosen)

    def test_small_vocabulary_uses_everything(self):
        words = _words(12)
        chosen = select_story_words(words, rng=random.Random(1))
        assert sorted(w.portuguese for w in chosen) == sorted(w.portuguese for w in words)

    def test_returns_used_words(self):
        chosen = select_story_words(_words(11))
        assert all(isinstance(w, UsedWord) for w in chosen)


class TestCleanMarkdown:
    def test_strips_emphasis(self):
        assert clean_markdown("**Olá** *sim* __x__") == "Olá sim x"

    def test_single_underscore_becomes_space(self):
        assert clean_markdown("_mundo_") == " mundo "

    def test_plain_text_untouched(self):
        text = "Era uma vez.\n\nO fim."
        assert clean_markdown(text) == text


class TestStoryResult:
    def test_dict_shape(self):
        result = StoryResult("Era uma vez.", [UsedWord("casa", "maison")])
        assert result.to_dict() == {
            "story": "Era uma vez.",
            "usedWords": [{"portuguese": "casa", "french": "maison"}],
        }
        assert StoryResult.from_dict(result.to_dict()) == result

    def test_from_partial_dict(self):
        assert StoryResult.from_dict({}) == StoryResult("", [])
