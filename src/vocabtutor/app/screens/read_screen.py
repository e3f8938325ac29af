"""Read screen — generate a story and tap known words for their translation."""

from __future__ import annotations

import asyncio
from typing import Optional

from textual.app import ComposeResult
from textual.containers import Vertical, VerticalScroll
from textual.markup import escape
from textual.screen import Screen
from textual.widgets import Footer, Header, Static

from vocabtutor.app.widgets.story_view import StoryView
from vocabtutor.config.settings import SpeechConfig
from vocabtutor.engine.generator import GenerationError, TextGenerator, generate_story
from vocabtutor.engine.speech import Synthesizer, portuguese_voice
from vocabtutor.engine.story import MIN_STORY_WORDS, StoryResult
from vocabtutor.state.story_cache import StoryCache
from vocabtutor.state.words import WordStore


class ReadScreen(Screen):
    BINDINGS = [
        ("escape", "go_home", "Back"),
        ("g", "generate", "New story"),
        ("s", "toggle_speech", "Listen"),
        ("c", "copy_story", "Copy"),
    ]

    CSS = """
    #read-container {
        padding: 1 2;
    }
    #story-scroll {
        height: 1fr;
        border: round $primary;
        padding: 0 1;
    }
    #translation-bar {
        height: auto;
        padding: 1 0 0 0;
    }
    """

    def __init__(
        self,
        store: WordStore,
        generator: TextGenerator,
        story_cache: StoryCache,
        synthesizer: Synthesizer,
        config: SpeechConfig,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.store = store
        self.generator = generator
        self.story_cache = story_cache
        self.synthesizer = synthesizer
        self.config = config
        self.result: Optional[StoryResult] = None
        self._generating = False
        self._speaking = False

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with Vertical(id="read-container"):
            yield Static("", id="read-status")
            with VerticalScroll(id="story-scroll"):
                yield StoryView()
            yield Static("[dim]Click a highlighted word to see its translation.[/]", id="translation-bar")
        yield Footer()

    def on_mount(self) -> None:
        self.result = self.story_cache.load()
        self.query_one(StoryView).show(self.result)

    def on_unmount(self) -> None:
        if self._speaking:
            self.synthesizer.stop()

    def action_show_translation(self, index: int) -> None:
        view = self.query_one(StoryView)
        translation = view.translation_at(index)
        if translation is None:
            return
        word = view.segments[index].text
        self.query_one("#translation-bar", Static).update(
            f"[bold]{escape(word)}[/] → {escape(translation)}"
        )

    def action_generate(self) -> None:
        if self._generating:
            return
        words = self.store.list()
        if len(words) < MIN_STORY_WORDS:
            self.notify(
                f"You need at least {MIN_STORY_WORDS} words to generate a story.",
                severity="warning",
            )
            return
        self.run_worker(self._generate(words), exclusive=True)

    async def _generate(self, words) -> None:
        status = self.query_one("#read-status", Static)
        self._generating = True
        status.update("[yellow]⟳[/] Writing a story with your vocabulary...")
        try:
            result = await asyncio.to_thread(generate_story, self.generator, words)
        except GenerationError as e:
            status.update(f"[red]✗ {escape(str(e))}[/]  [dim]Press g to retry.[/]")
            return
        finally:
            self._generating = False

        self.story_cache.save(result)
        self.result = result
        self.query_one(StoryView).show(result)
        status.update(f"[green]✓[/] Story uses {len(result.used_words)} of your words")

    async def action_toggle_speech(self) -> None:
        if self.result is None:
            return
        if self._speaking:
            self.synthesizer.stop()
            self._speaking = False
            return

        voice = await portuguese_voice.resolve(self.synthesizer)
        self._speaking = True
        self.synthesizer.speak(
            self.result.story,
            language=self.config.portuguese_language,
            voice=voice,
            rate=1.0,
            on_done=self._speech_finished,
            on_stopped=self._speech_finished,
            on_error=lambda e: self._speech_finished(),
        )

    def _speech_finished(self) -> None:
        self._speaking = False

    def action_copy_story(self) -> None:
        if self.result is None:
            return
        self.app.copy_to_clipboard(self.result.story)
        self.notify("Story copied.")

    def action_go_home(self) -> None:
        self.app.pop_screen()
