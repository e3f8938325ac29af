"""VocabTutor main Textual application."""

from __future__ import annotations

from textual.app import App

from vocabtutor.app.screens.listen_screen import ListenScreen
from vocabtutor.app.screens.quiz_screen import QuizScreen
from vocabtutor.app.screens.read_screen import ReadScreen
from vocabtutor.app.screens.words_screen import WordsScreen
from vocabtutor.config.settings import Settings
from vocabtutor.engine.generator import TextGenerator
from vocabtutor.engine.speech import detect_synthesizer
from vocabtutor.state.story_cache import StoryCache
from vocabtutor.state.words import VocabularyState, WordStore


class VocabTutorApp(App):
    """Portuguese/French vocabulary trainer."""

    TITLE = "VocabTutor"
    SUB_TITLE = "Português ↔ Français"

    BINDINGS = [
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, settings: Settings | None = None, **kwargs) -> None:
        super().__init__(**kwargs)
        self.settings = settings or Settings.load()
        self.store = WordStore(db_path=self.settings.db_path)
        self.story_cache = StoryCache(path=self.settings.story_path)
        self.generator = TextGenerator(settings=self.settings)
        self.synthesizer = detect_synthesizer(self.settings)
        self.vocabulary = VocabularyState()
        self._unsubscribe = None

    def on_mount(self) -> None:
        self._unsubscribe = self.vocabulary.attach(self.store)
        self.sub_title = f"Português ↔ Français — speech: {self.synthesizer.name}"
        self.push_screen(WordsScreen(store=self.store))

    def on_unmount(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
        self.synthesizer.stop()

    def start_quiz(self) -> None:
        self.push_screen(QuizScreen(words=lambda: self.vocabulary.words))

    def start_listen(self) -> None:
        self.push_screen(ListenScreen(
            words=lambda: self.vocabulary.words,
            synthesizer=self.synthesizer,
            config=self.settings.speech,
        ))

    def start_reading(self) -> None:
        self.push_screen(ReadScreen(
            store=self.store,
            generator=self.generator,
            story_cache=self.story_cache,
            synthesizer=self.synthesizer,
            config=self.settings.speech,
        ))
