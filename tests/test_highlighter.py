"""Tests for splitting a story into plain and vocabulary segments."""

from vocabtutor.engine.highlighter import (
    MATCH,
    PLAIN,
    Segment,
    build_pattern,
    resolve,
    segment,
    translation_for,
)
from vocabtutor.engine.story import UsedWord


def _matches(segments):
    return [s.text for s in segments if s.is_match]


class TestSegment:
    def test_joined_text_equals_story(self, vocabulary):
        story = "A casa grande é bonita. Obrigado, disse ela no comboio.\n\nCasa!"
        segments = segment(story, vocabulary)
        assert "".join(s.text for s in segments) == story

    def test_longest_phrase_wins(self):
        vocab = [
            UsedWord("casa", "maison"),
            UsedWord("casa grande", "grande maison"),
        ]
        segments = segment("a casa grande é bonita", vocab)
        assert segments == [
            Segment(PLAIN, "a "),
            Segment(MATCH, "casa grande", "grande maison"),
            Segment(PLAIN, " é bonita"),
        ]

    def test_shorter_phrase_still_matches_alone(self):
        vocab = [
            UsedWord("casa", "maison"),
            UsedWord("casa grande", "grande maison"),
        ]
        segments = segment("a casa e a casa grande", vocab)
        assert _matches(segments) == ["casa", "casa grande"]

    def test_case_insensitive_keeps_story_text(self):
        vocab = [UsedWord("obrigado", "merci")]
        segments = segment("Obrigado, disse ela.", vocab)
        assert segments[0] == Segment(MATCH, "Obrigado", "merci")
        assert segments[1] == Segment(PLAIN, ", disse ela.")

    def test_no_vocabulary_gives_single_plain_segment(self):
        assert segment("Era uma vez.", []) == [Segment(PLAIN, "Era uma vez.")]

    def test_blank_phrases_are_ignored(self):
        vocab = [UsedWord("  ", "rien"), UsedWord("", "vide")]
        assert segment("Era uma vez.", vocab) == [Segment(PLAIN, "Era uma vez.")]

    def test_empty_story(self, vocabulary):
        assert segment("", vocabulary) == []
        assert segment(None, vocabulary) == []

    def test_no_empty_segments(self, vocabulary):
        segments = segment("casa casa", vocabulary)
        assert all(s.text for s in segments)
        assert _matches(segments) == ["casa", "casa"]

    def test_regex_metacharacters_are_literal(self):
        vocab = [UsedWord("sr.", "m.")]
        segments = segment("o sr. Silva e o srx", vocab)
        assert _matches(segments) == ["sr."]

    def test_accented_phrase(self):
        vocab = [UsedWord("cão", "chien")]
        segments = segment("O Cão ladrou.", vocab)
        assert segments[1] == Segment(MATCH, "Cão", "chien")


class TestHelpers:
    def test_build_pattern_orders_longest_first(self):
        pattern = build_pattern(["a", "a casa", "a casa grande"])
        assert pattern.match("a casa grande").group(0) == "a casa grande"
        assert pattern.match("a casa pequena").group(0) == "a casa"

    def test_build_pattern_none_for_no_phrases(self):
        assert build_pattern([]) is None
        assert build_pattern(["", "   "]) is None

    def test_resolve(self, vocabulary):
        assert resolve("CASA", vocabulary).french == "maison"
        assert resolve("gato", vocabulary) is None
        assert resolve(" ", vocabulary) is None

    def test_translation_for(self):
        segments = [Segment(PLAIN, "o "), Segment(MATCH, "mar", "mer")]
        assert translation_for(segments, 1) == "mer"
        assert translation_for(segments, 0) is None
        assert translation_for(segments, 5) is None
        assert translation_for(segments, -1) is None
