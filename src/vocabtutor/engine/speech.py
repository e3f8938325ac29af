"""Text-to-speech backends with graceful degradation.

espeak-ng is used when it is on PATH; otherwise speech is silent and only
the timing of the listen flow is kept.
"""

from __future__ import annotations

import asyncio
import logging
import shutil
from dataclasses import dataclass
from typing import Callable, Optional

from vocabtutor.config.settings import Settings, SpeechBackend

logger = logging.getLogger(__name__)

ESPEAK_BINARY = "espeak-ng"
ESPEAK_DEFAULT_WPM = 175

# espeak-ng names its European Portuguese voice plain "pt"
_ESPEAK_LANGUAGES = {
    "pt-pt": "pt",
    "pt_pt": "pt",
    "pt-br": "pt-br",
    "fr-fr": "fr",
}


class SpeechError(Exception):
    pass


@dataclass(frozen=True)
class Voice:
    identifier: str
    name: str
    language: str


def find_european_portuguese_voice(voices: list[Voice]) -> Optional[Voice]:
    """Prefer an exact pt-PT voice, then any Portuguese voice named for Portugal."""
    for v in voices:
        if (
            v.language in ("pt-PT", "pt_PT")
            or "pt-PT" in v.identifier
            or "pt_PT" in v.identifier
        ):
            return v
    for v in voices:
        name = v.name.lower()
        if v.language.startswith("pt") and ("portugal" in name or "european" in name):
            return v
    return None


class Synthesizer:
    """Base class: subclasses implement ``say`` and ``list_voices``."""

    name = "base"

    def __init__(self) -> None:
        self._tasks: set[asyncio.Task] = set()

    async def say(
        self, text: str, language: str, voice: Optional[str] = None, rate: float = 1.0,
    ) -> None:
        raise NotImplementedError

    async def list_voices(self) -> list[Voice]:
        raise NotImplementedError

    def speak(
        self,
        text: str,
        language: str,
        voice: Optional[str] = None,
        rate: float = 1.0,
        on_done: Optional[Callable[[], None]] = None,
        on_stopped: Optional[Callable[[], None]] = None,
        on_error: Optional[Callable[[Exception], None]] = None,
    ) -> asyncio.Task:
        """Callback-style speech; must be called from a running event loop."""

        async def _run() -> None:
            try:
                await self.say(text, language=language, voice=voice, rate=rate)
            except asyncio.CancelledError:
                if on_stopped:
                    on_stopped()
                raise
            except SpeechError as e:
                logger.warning("Speech failed: %s", e)
                if on_error:
                    on_error(e)
                return
            if on_done:
                on_done()

        task = asyncio.ensure_future(_run())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def stop(self) -> None:
        for task in list(self._tasks):
            task.cancel()

    @property
    def speaking(self) -> bool:
        return any(not t.done() for t in self._tasks)


class SilentSynthesizer(Synthesizer):
    """Records what would have been spoken. Used headless and in tests."""

    name = "silent"

    def __init__(self, voices: Optional[list[Voice]] = None) -> None:
        super().__init__()
        self.voices = voices or []
        self.spoken: list[tuple[str, str, Optional[str], float]] = []
        self.voice_lookups = 0

    async def say(
        self, text: str, language: str, voice: Optional[str] = None, rate: float = 1.0,
    ) -> None:
        self.spoken.append((text, language, voice, rate))
        await asyncio.sleep(0)

    async def list_voices(self) -> list[Voice]:
        self.voice_lookups += 1
        await asyncio.sleep(0)
        return list(self.voices)


class EspeakSynthesizer(Synthesizer):
    name = "espeak"

    def __init__(self, settings: Optional[Settings] = None) -> None:
        super().__init__()
        self.settings = settings or Settings.load()

    @staticmethod
    def espeak_voice(language: str, voice: Optional[str] = None) -> str:
        if voice:
            return voice
        key = language.lower()
        return _ESPEAK_LANGUAGES.get(key, key.split("-")[0].split("_")[0])

    async def say(
        self, text: str, language: str, voice: Optional[str] = None, rate: float = 1.0,
    ) -> None:
        try:
            proc = await asyncio.create_subprocess_exec(
                ESPEAK_BINARY,
                "-v", self.espeak_voice(language, voice),
                "-s", str(int(ESPEAK_DEFAULT_WPM * rate)),
                text,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError as e:
            raise SpeechError(f"{ESPEAK_BINARY} is not installed") from e
        try:
            _, stderr = await asyncio.wait_for(
                proc.communicate(), timeout=self.settings.speech.timeout_seconds,
            )
        except asyncio.CancelledError:
            proc.kill()
            raise
        except asyncio.TimeoutError as e:
            proc.kill()
            raise SpeechError(
                f"Speech timed out after {self.settings.speech.timeout_seconds}s"
            ) from e

        if proc.returncode != 0:
            raise SpeechError(stderr.decode("utf-8", errors="replace").strip() or "espeak-ng failed")

    async def list_voices(self) -> list[Voice]:
        try:
            proc = await asyncio.create_subprocess_exec(
                ESPEAK_BINARY, "--voices",
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError as e:
            raise SpeechError(f"{ESPEAK_BINARY} is not installed") from e
        try:
            stdout, _ = await asyncio.wait_for(proc.communicate(), timeout=5)
        except asyncio.TimeoutError as e:
            proc.kill()
            raise SpeechError("Listing voices timed out") from e
        return parse_espeak_voices(stdout.decode("utf-8", errors="replace"))


def parse_espeak_voices(output: str) -> list[Voice]:
    """Parse the table printed by ``espeak-ng --voices``."""
    voices = []
    for line in output.splitlines()[1:]:
        parts = line.split()
        if len(parts) < 4:
            continue
        # Pty Language Age/Gender VoiceName File ...
        voices.append(Voice(
            identifier=parts[1],
            name=parts[3].replace("_", " "),
            language=parts[1],
        ))
    return voices


def detect_synthesizer(settings: Optional[Settings] = None) -> Synthesizer:
    """Pick the configured backend, falling back to silence."""
    settings = settings or Settings.load()
    backend = settings.speech.backend

    if backend == SpeechBackend.SILENT:
        return SilentSynthesizer()
    if backend == SpeechBackend.ESPEAK or shutil.which(ESPEAK_BINARY):
        return EspeakSynthesizer(settings=settings)

    logger.info("%s not found; speech output disabled", ESPEAK_BINARY)
    return SilentSynthesizer()


class VoiceResolver:
    """Lazily resolves and memoizes the European Portuguese voice.

    Concurrent first callers share a single lookup. A failed lookup is not
    memoized, so the next caller tries again.
    """

    def __init__(self) -> None:
        self._resolved = False
        self._voice_id: Optional[str] = None
        self._lock: Optional[asyncio.Lock] = None

    async def resolve(self, synthesizer: Synthesizer) -> Optional[str]:
        if self._resolved:
            return self._voice_id
        if self._lock is None:
            self._lock = asyncio.Lock()

        async with self._lock:
            if self._resolved:
                return self._voice_id
            try:
                voices = await synthesizer.list_voices()
            except (SpeechError, OSError) as e:
                logger.warning("Could not get voices: %s", e)
                return None
            voice = find_european_portuguese_voice(voices)
            self._voice_id = voice.identifier if voice else None
            self._resolved = True
            return self._voice_id

    def reset(self) -> None:
        self._resolved = False
        self._voice_id = None


# Shared by every screen that speaks Portuguese
portuguese_voice = VoiceResolver()
