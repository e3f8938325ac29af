"""Tests for Claude-backed example and story generation."""

import random

import pytest

from conftest import FakeClient
from vocabtutor.config.settings import ClaudeConfig, Settings
from vocabtutor.engine.generator import (
    GenerationError,
    TextGenerator,
    generate_examples,
    generate_story,
    parse_numbered_sentences,
)
from vocabtutor.state.words import Word


class TestParseNumberedSentences:
    def test_strips_numbering(self):
        text = "1. Olá.\n2) Tudo bem?\n\n3.   \n4. Bom dia"
        assert parse_numbered_sentences(text) == ["Olá.", "Tudo bem?", "Bom dia"]

    def test_unnumbered_lines_kept(self):
        assert parse_numbered_sentences("Olá\n  Adeus  ") == ["Olá", "Adeus"]

    def test_empty(self):
        assert parse_numbered_sentences("") == []


class TestTextGenerator:
    def test_complete_returns_trimmed_text(self, settings):
        client = FakeClient(reply="  Olá mundo \n")
        gen = TextGenerator(settings=settings, client=client)
        assert gen.complete("Diz olá") == "Olá mundo"
        call = client.messages.calls[0]
        assert call["messages"] == [{"role": "user", "content": "Diz olá"}]
        assert call["model"] == settings.claude.get_model()

    def test_not_configured(self, tmp_path, monkeypatch):
        monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
        gen = TextGenerator(settings=Settings(data_dir=tmp_path, claude=ClaudeConfig()))
        assert not gen.configured
        with pytest.raises(GenerationError, match="not configured"):
            gen.complete("x")

    def test_provider_error_is_wrapped(self, settings):
        gen = TextGenerator(settings=settings, client=FakeClient(error=RuntimeError("quota")))
        with pytest.raises(GenerationError, match="quota"):
            gen.complete("x")

    def test_empty_response(self, settings):
        gen = TextGenerator(settings=settings, client=FakeClient(reply="   "))
        with pytest.raises(GenerationError, match="No response"):
            gen.complete("x")


class TestGenerateExamples:
    def test_parses_sentences(self, settings):
        client = FakeClient(reply="1. A casa é azul.\n2. Moro numa casa.")
        gen = TextGenerator(settings=settings, client=client)
        examples = generate_examples(gen, "casa", "maison")
        assert examples == ["A casa é azul.", "Moro numa casa."]
        call = client.messages.calls[0]
        assert call["max_tokens"] == 500
        assert '"casa"' in call["messages"][0]["content"]


class TestGenerateStory:
    def test_story_uses_selected_words(self, generator, fake_client):
        words = [Word(id=str(i), portuguese=f"palavra{i}", french=f"mot{i}") for i in range(20)]
        result = generate_story(generator, words, rng=random.Random(3))

        assert result.story == "Era uma vez uma casa grande."
        assert len(result.used_words) == 15
        prompt = fake_client.messages.calls[0]["messages"][0]["content"]
        for w in result.used_words:
            assert f"{w.portuguese} ({w.french})" in prompt
        assert fake_client.messages.calls[0]["max_tokens"] == 2000

    def test_failure_propagates(self, settings):
        gen = TextGenerator(settings=settings, client=FakeClient(error=RuntimeError("down")))
        words = [Word(id=str(i), portuguese=f"p{i}", french=f"f{i}") for i in range(10)]
        with pytest.raises(GenerationError):
            generate_story(gen, words)
