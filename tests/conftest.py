"""Shared fixtures for VocabTutor tests."""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from vocabtutor.config.settings import Settings
from vocabtutor.engine.generator import TextGenerator
from vocabtutor.engine.story import UsedWord
from vocabtutor.state.words import WordStore

SAMPLE_PAIRS = [
    ("casa", "maison"),
    ("cão", "chien"),
    ("obrigado", "merci"),
    ("avião", "avion"),
    ("a casa grande", "la grande maison"),
    ("comboio", "train"),
    ("pequeno-almoço", "petit-déjeuner"),
    ("saudade", "nostalgie / manque"),
    ("rua", "rue"),
    ("cidade", "ville"),
    ("livro", "livre"),
    ("mar", "mer"),
]


class FakeMessages:
    def __init__(self, reply: str = "", error: Exception | None = None):
        self.reply = reply
        self.error = error
        self.calls: list[dict] = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return SimpleNamespace(content=[SimpleNamespace(text=self.reply)])


class FakeClient:
    """Stands in for anthropic.Anthropic: only ``messages.create`` is used."""

    def __init__(self, reply: str = "", error: Exception | None = None):
        self.messages = FakeMessages(reply, error)


@pytest.fixture
def settings(tmp_path):
    return Settings(data_dir=tmp_path / "data")


@pytest.fixture
def store(tmp_path):
    return WordStore(db_path=tmp_path / "data" / "words.db")


@pytest.fixture
def filled_store(store):
    for pt, fr in SAMPLE_PAIRS:
        store.create(pt, fr, [f"Exemplo com {pt}."])
    return store


@pytest.fixture
def fake_client():
    return FakeClient(reply="Era uma vez uma **casa** grande.")


@pytest.fixture
def generator(settings, fake_client):
    return TextGenerator(settings=settings, client=fake_client)


@pytest.fixture
def vocabulary():
    return [UsedWord(portuguese=pt, french=fr) for pt, fr in SAMPLE_PAIRS]
