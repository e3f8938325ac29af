"""Story text with clickable known-vocabulary words."""

from __future__ import annotations

from typing import Optional

from textual.markup import escape
from textual.widgets import Static

from vocabtutor.engine.highlighter import Segment, segment, translation_for
from vocabtutor.engine.story import StoryResult


class StoryView(Static):
    """Renders match segments as links that call ``screen.show_translation``."""

    def __init__(self, **kwargs) -> None:
        super().__init__("", id="story-view", **kwargs)
        self.segments: list[Segment] = []

    def show(self, result: Optional[StoryResult]) -> None:
        if result is None:
            self.segments = []
            self.update("[dim]No story yet. Press g to generate one.[/]")
            return

        self.segments = segment(result.story, result.used_words)
        parts = []
        for i, seg in enumerate(self.segments):
            if seg.is_match:
                parts.append(
                    f"[bold #1e3d60 underline][@click=screen.show_translation({i})]"
                    f"{escape(seg.text)}[/][/]"
                )
            else:
                parts.append(escape(seg.text))
        self.update("".join(parts))

    def translation_at(self, index: int) -> Optional[str]:
        return translation_for(self.segments, index)
