"""Quiz screen — translate the shown word in either direction."""

from __future__ import annotations

from typing import Callable, Sequence

from textual.app import ComposeResult
from textual.containers import Vertical
from textual.markup import escape
from textual.screen import Screen
from textual.widgets import Footer, Header, Input, Static

from vocabtutor.engine.quiz_runner import QuizPhase, QuizRunner
from vocabtutor.state.words import Word


class QuizScreen(Screen):
    BINDINGS = [
        ("escape", "go_home", "Back"),
        ("ctrl+n", "next_word", "Next"),
    ]

    CSS = """
    #quiz-container {
        align: center middle;
        padding: 2 4;
    }
    #quiz-prompt {
        text-style: bold;
        padding: 1 0;
    }
    """

    def __init__(self, words: Callable[[], Sequence[Word]], **kwargs) -> None:
        super().__init__(**kwargs)
        self.runner = QuizRunner(words)

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with Vertical(id="quiz-container"):
            yield Static("", id="quiz-direction")
            yield Static("", id="quiz-prompt")
            yield Input(placeholder="Your answer... (Enter to check)", id="answer-input")
            yield Static("", id="quiz-feedback")
            yield Static("", id="quiz-score")
        yield Footer()

    def on_mount(self) -> None:
        self.action_next_word()

    def action_next_word(self) -> None:
        state = self.runner.next_word()
        if state is None:
            self.query_one("#quiz-prompt", Static).update("No words to learn yet.")
            return

        direction = "Portuguese → French" if state.show_portuguese else "French → Portuguese"
        self.query_one("#quiz-direction", Static).update(f"[dim]{direction}[/]")
        self.query_one("#quiz-prompt", Static).update(escape(state.prompt))
        self.query_one("#quiz-feedback", Static).update("")
        answer = self.query_one("#answer-input", Input)
        answer.clear()
        answer.focus()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if self.runner.phase == QuizPhase.ANSWERED:
            self.action_next_word()
            return

        result = self.runner.submit(event.value)
        if result is None:
            return

        feedback = self.query_one("#quiz-feedback", Static)
        if result.passed:
            feedback.update(
                f"[green bold]Correct![/]  [dim]{escape(result.correct_answer)}[/]"
                "\n[dim]Enter for the next word[/]"
            )
        else:
            feedback.update(
                f"[yellow]Not quite.[/] The answer was: [bold]{escape(result.correct_answer)}[/]"
                "\n[dim]Enter for the next word[/]"
            )

        stats = self.runner.stats
        self.query_one("#quiz-score", Static).update(
            f"Score: {stats.correct}/{stats.total_attempts}"
        )

    def action_go_home(self) -> None:
        self.app.pop_screen()
