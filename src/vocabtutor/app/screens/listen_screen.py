"""Listen screen — hear Portuguese, think, then hear the French."""

from __future__ import annotations

from typing import Callable, Sequence

from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.markup import escape
from textual.screen import Screen
from textual.widgets import Button, Footer, Header, Static

from vocabtutor.config.settings import SpeechConfig
from vocabtutor.engine.listen_runner import ListenPhase, ListenSession, ListenState
from vocabtutor.engine.speech import Synthesizer
from vocabtutor.state.words import Word


class ListenScreen(Screen):
    BINDINGS = [
        ("escape", "go_home", "Stop"),
        ("n", "skip", "Next"),
    ]

    CSS = """
    #listen-container {
        align: center middle;
        padding: 2 4;
    }
    #listen-controls {
        height: auto;
    }
    """

    def __init__(
        self,
        words: Callable[[], Sequence[Word]],
        synthesizer: Synthesizer,
        config: SpeechConfig,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.session = ListenSession(
            words, synthesizer, config=config, on_change=self._render_state,
        )

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with Vertical(id="listen-container"):
            yield Static("", id="listen-phase")
            yield Static("", id="listen-word")
            yield Static("", id="listen-translation")
            with Horizontal(id="listen-controls"):
                yield Button("Next", id="skip-btn")
                yield Button("Stop", id="stop-btn", variant="error")
        yield Footer()

    def on_mount(self) -> None:
        self.session.start()

    async def on_unmount(self) -> None:
        await self.session.stop()

    def _render_state(self, state: ListenState) -> None:
        if not self.is_mounted or state.word is None:
            return
        phase = self.query_one("#listen-phase", Static)
        word = self.query_one("#listen-word", Static)
        translation = self.query_one("#listen-translation", Static)

        word.update(f"[bold]{escape(state.word.portuguese)}[/]")
        if state.phase == ListenPhase.PORTUGUESE:
            phase.update("[#e57d3b]🔊 Portuguese[/]")
            translation.update("")
        elif state.phase == ListenPhase.WAITING:
            phase.update(f"[#86af50]Think of the translation... {state.countdown}[/]")
        elif state.phase == ListenPhase.FRENCH:
            phase.update("[#1e3d60]🔊 French[/]")
            translation.update(escape(state.word.french))

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "skip-btn":
            await self.action_skip()
        elif event.button.id == "stop-btn":
            await self.action_go_home()

    async def action_skip(self) -> None:
        await self.session.skip()

    async def action_go_home(self) -> None:
        await self.session.stop()
        self.app.pop_screen()
