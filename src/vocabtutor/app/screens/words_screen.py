"""Word list screen — search, sort, add and delete words."""

from __future__ import annotations

from typing import Optional

from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.markup import escape
from textual.screen import Screen
from textual.widgets import Button, Footer, Header, Input, Label, OptionList, Static
from textual.widgets.option_list import Option

from vocabtutor.state.words import SortOrder, Word, WordStore, filter_words, sort_words

_SORT_LABELS = {
    SortOrder.NEWEST: "↓ Newest",
    SortOrder.OLDEST: "↑ Oldest",
    SortOrder.ALPHABETICAL: "A-Z",
}
_SORT_CYCLE = list(_SORT_LABELS)


class WordsScreen(Screen):
    """Vocabulary list with an inline add form."""

    BINDINGS = [
        ("q", "quit", "Quit"),
        ("l", "learn", "Quiz"),
        ("e", "listen", "Listen"),
        ("r", "read", "Read"),
        ("o", "cycle_sort", "Sort"),
        ("d", "delete_word", "Delete"),
    ]

    CSS = """
    #words-container {
        padding: 1 2;
    }
    #search-row, #add-row {
        height: auto;
    }
    #search-input {
        width: 1fr;
    }
    #word-list {
        height: 1fr;
    }
    """

    def __init__(self, store: WordStore, **kwargs) -> None:
        super().__init__(**kwargs)
        self.store = store
        self.sort_order = SortOrder.NEWEST
        self.search = ""
        self._words: list[Word] = []
        self._unsubscribe = None

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with Vertical(id="words-container"):
            with Horizontal(id="search-row"):
                yield Input(placeholder="Search...", id="search-input")
                yield Button(_SORT_LABELS[self.sort_order], id="sort-btn")
            yield Static("", id="word-count")
            yield OptionList(id="word-list")
            yield Label("[bold]Add a word[/]")
            with Horizontal(id="add-row"):
                yield Input(placeholder="Portuguese, e.g. obrigado", id="pt-input")
                yield Input(placeholder="French, e.g. merci", id="fr-input")
                yield Button("Add", id="add-btn", variant="primary")
        yield Footer()

    def on_mount(self) -> None:
        self._unsubscribe = self.store.subscribe(self._on_words_changed, self._on_sync_error)

    def on_unmount(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()

    def _on_words_changed(self, words: list[Word]) -> None:
        self._words = words
        self._refresh_list()

    def _on_sync_error(self, error: Exception) -> None:
        self.notify(f"Failed to sync with database: {error}", severity="error")

    def _visible_words(self) -> list[Word]:
        return sort_words(filter_words(self._words, self.search), self.sort_order)

    def _refresh_list(self) -> None:
        option_list = self.query_one("#word-list", OptionList)
        option_list.clear_options()
        visible = self._visible_words()
        option_list.add_options([
            Option(
                f"[bold]{escape(w.portuguese)}[/] → {escape(w.french)}"
                + (f"\n  [dim]{escape(w.examples[0])}[/]" if w.examples else ""),
                id=w.id,
            )
            for w in visible
        ])

        count = self.query_one("#word-count", Static)
        if not self._words:
            count.update("[dim]No words yet! Add your first word below.[/]")
        elif not visible:
            count.update("[dim]No word matches your search.[/]")
        else:
            count.update(f"[dim]{len(visible)} of {len(self._words)} words[/]")

    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id == "search-input":
            self.search = event.value
            self._refresh_list()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id in ("pt-input", "fr-input"):
            self._add_word()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "sort-btn":
            self.action_cycle_sort()
        elif event.button.id == "add-btn":
            self._add_word()

    def _add_word(self) -> None:
        pt_input = self.query_one("#pt-input", Input)
        fr_input = self.query_one("#fr-input", Input)
        try:
            self.store.create(pt_input.value, fr_input.value)
        except ValueError as e:
            self.notify(str(e), severity="error")
            return
        pt_input.clear()
        fr_input.clear()
        pt_input.focus()

    def _highlighted_word_id(self) -> Optional[str]:
        option_list = self.query_one("#word-list", OptionList)
        if option_list.highlighted is None:
            return None
        return option_list.get_option_at_index(option_list.highlighted).id

    def action_cycle_sort(self) -> None:
        idx = _SORT_CYCLE.index(self.sort_order)
        self.sort_order = _SORT_CYCLE[(idx + 1) % len(_SORT_CYCLE)]
        self.query_one("#sort-btn", Button).label = _SORT_LABELS[self.sort_order]
        self._refresh_list()

    def action_delete_word(self) -> None:
        word_id = self._highlighted_word_id()
        if word_id is not None:
            self.store.delete(word_id)

    def action_learn(self) -> None:
        if not self._words:
            self.notify("Add some words first!", severity="warning")
            return
        self.app.start_quiz()

    def action_listen(self) -> None:
        if not self._words:
            self.notify("Add some words first!", severity="warning")
            return
        self.app.start_listen()

    def action_read(self) -> None:
        self.app.start_reading()
