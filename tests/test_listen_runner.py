"""Tests for the listen-mode loop."""

import asyncio
import random

import pytest

from vocabtutor.config.settings import SpeechConfig
from vocabtutor.engine.listen_runner import ListenPhase, ListenSession
from vocabtutor.engine.speech import SilentSynthesizer, SpeechError, Voice, VoiceResolver
from vocabtutor.state.words import Word

CASA = Word(id="1", portuguese="casa", french="maison")
PT_VOICE = Voice("pt", "Portuguese (Portugal)", "pt")


async def _until(predicate, limit=1000):
    for _ in range(limit):
        if predicate():
            return
        await asyncio.sleep(0)
    raise AssertionError("condition never met")


def _session(words, synth=None, countdown=2, **kwargs):
    synth = synth or SilentSynthesizer(voices=[PT_VOICE])
    events = []
    session = ListenSession(
        words,
        synth,
        config=SpeechConfig(countdown_seconds=countdown, pause_seconds=0),
        on_change=lambda s: events.append((s.phase, s.countdown, s.words_played)),
        voice_resolver=VoiceResolver(),
        rng=random.Random(0),
        tick_seconds=0,
        **kwargs,
    )
    return session, synth, events


class TestListenSession:
    @pytest.mark.asyncio
    async def test_speaks_portuguese_then_french(self):
        session, synth, _ = _session([CASA])
        session.start()
        await _until(lambda: session.state.words_played >= 2)
        await session.stop()

        assert synth.spoken[0] == ("casa", "pt-PT", "pt", 1.0)
        assert synth.spoken[1] == ("maison", "fr-FR", None, 0.9)
        assert synth.spoken[2][0] == "casa"

    @pytest.mark.asyncio
    async def test_phase_order_and_countdown(self):
        session, _, events = _session([CASA], countdown=2)
        session.start()
        await _until(lambda: session.state.words_played >= 1)
        await session.stop()

        first_word = events[: events.index((ListenPhase.FRENCH, 0, 0)) + 1]
        assert first_word == [
            (ListenPhase.PORTUGUESE, 2, 0),
            (ListenPhase.WAITING, 2, 0),
            (ListenPhase.WAITING, 1, 0),
            (ListenPhase.WAITING, 0, 0),
            (ListenPhase.FRENCH, 0, 0),
        ]

    @pytest.mark.asyncio
    async def test_stop_silences_and_resets(self):
        session, synth, _ = _session([CASA])
        session.start()
        await _until(lambda: session.state.words_played >= 1)
        await session.stop()
        spoken = len(synth.spoken)

        for _ in range(20):
            await asyncio.sleep(0)
        assert len(synth.spoken) == spoken
        assert not session.running
        assert session.state.phase == ListenPhase.IDLE
        assert session.state.word is None

    @pytest.mark.asyncio
    async def test_no_words_ends_loop(self):
        session, synth, _ = _session([])
        session.start()
        await session.wait()
        assert not session.running
        assert session.state.phase == ListenPhase.IDLE
        assert synth.spoken == []

    @pytest.mark.asyncio
    async def test_live_word_source_emptied(self):
        words = [CASA]
        session, _, _ = _session(lambda: words)
        session.start()
        await _until(lambda: session.state.words_played >= 1)
        words.clear()
        await session.wait()
        assert session.state.phase == ListenPhase.IDLE

    @pytest.mark.asyncio
    async def test_skip_keeps_running(self):
        session, synth, _ = _session([CASA], countdown=50)
        session.start()
        await _until(lambda: session.state.phase == ListenPhase.WAITING)
        await session.skip()
        assert session.running
        await _until(lambda: len(synth.spoken) >= 2)
        await session.stop()
        assert [s[0] for s in synth.spoken[:2]] == ["casa", "casa"]

    @pytest.mark.asyncio
    async def test_start_twice_is_noop(self):
        session, _, _ = _session([CASA])
        session.start()
        task = session._task
        session.start()
        assert session._task is task
        await session.stop()

    @pytest.mark.asyncio
    async def test_speech_error_does_not_stop_loop(self):
        class Broken(SilentSynthesizer):
            async def say(self, text, language, voice=None, rate=1.0):
                await asyncio.sleep(0)
                raise SpeechError("device busy")

        session, _, _ = _session([CASA], synth=Broken())
        session.start()
        await _until(lambda: session.state.words_played >= 3)
        assert session.running
        await session.stop()
