"""Listen mode: speak Portuguese, count down, speak French, repeat."""

from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Sequence

from vocabtutor.config.settings import SpeechConfig
from vocabtutor.engine.speech import SpeechError, Synthesizer, VoiceResolver, portuguese_voice
from vocabtutor.state.words import Word

logger = logging.getLogger(__name__)


class ListenPhase(str, Enum):
    IDLE = "idle"
    PORTUGUESE = "portuguese"
    WAITING = "waiting"
    FRENCH = "french"


@dataclass
class ListenState:
    word: Optional[Word] = None
    phase: ListenPhase = ListenPhase.IDLE
    countdown: int = 0
    words_played: int = 0


class ListenSession:
    """Loops over random words until stopped.

    All speech and timers live in a single task, so ``skip`` and ``stop``
    only need to cancel that task; a new utterance never starts before the
    previous task has finished cancelling.
    """

    def __init__(
        self,
        words: Sequence[Word] | Callable[[], Sequence[Word]],
        synthesizer: Synthesizer,
        config: Optional[SpeechConfig] = None,
        on_change: Optional[Callable[[ListenState], None]] = None,
        voice_resolver: Optional[VoiceResolver] = None,
        rng: Optional[random.Random] = None,
        tick_seconds: float = 1.0,
    ):
        self._words = words
        self.synthesizer = synthesizer
        self.config = config or SpeechConfig()
        self._on_change = on_change or (lambda state: None)
        self.voice_resolver = voice_resolver or portuguese_voice
        self.rng = rng or random.Random()
        self.tick_seconds = tick_seconds
        self.state = ListenState()
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def _pick_word(self) -> Optional[Word]:
        words = self._words() if callable(self._words) else self._words
        if not words:
            return None
        return self.rng.choice(list(words))

    def _set(self, **changes) -> None:
        for name, value in changes.items():
            setattr(self.state, name, value)
        self._on_change(self.state)

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.ensure_future(self._loop())

    async def skip(self) -> None:
        """Abandon the current word and play a new one."""
        await self._cancel()
        self.start()

    async def stop(self) -> None:
        await self._cancel()
        self._set(word=None, phase=ListenPhase.IDLE, countdown=0)

    async def wait(self) -> None:
        """Wait for the loop to end on its own (no words left or an error)."""
        if self._task is not None:
            await asyncio.gather(self._task, return_exceptions=True)

    async def _cancel(self) -> None:
        task, self._task = self._task, None
        self.synthesizer.stop()
        if task is not None and not task.done():
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)

    async def _loop(self) -> None:
        cfg = self.config
        while True:
            word = self._pick_word()
            if word is None:
                self._set(word=None, phase=ListenPhase.IDLE, countdown=0)
                return

            self._set(word=word, phase=ListenPhase.PORTUGUESE, countdown=cfg.countdown_seconds)
            voice = await self.voice_resolver.resolve(self.synthesizer)
            try:
                await self.synthesizer.say(
                    word.portuguese, language=cfg.portuguese_language, voice=voice, rate=1.0,
                )

                self._set(phase=ListenPhase.WAITING)
                for remaining in range(cfg.countdown_seconds - 1, -1, -1):
                    await asyncio.sleep(self.tick_seconds)
                    self._set(countdown=remaining)

                self._set(phase=ListenPhase.FRENCH)
                await self.synthesizer.say(word.french, language=cfg.french_language, rate=0.9)
            except SpeechError as e:
                logger.warning("Listen mode speech error for %s: %s", word.id, e)

            self._set(words_played=self.state.words_played + 1)
            await asyncio.sleep(cfg.pause_seconds)
