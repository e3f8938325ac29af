"""Vocabulary selection for generated stories and the stored story result."""

from __future__ import annotations

import math
import random
from dataclasses import dataclass, field
from typing import Optional, Sequence

MIN_STORY_WORDS = 10  # below this, story generation is refused
STORY_WORDS_FLOOR = 15
STORY_WORDS_CEILING = 25
STORY_WORDS_RATIO = 0.3


@dataclass(frozen=True)
class UsedWord:
    portuguese: str
    french: str

    def to_dict(self) -> dict:
        return {"portuguese": self.portuguese, "french": self.french}


@dataclass
class StoryResult:
    story: str
    used_words: list[UsedWord] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "story": self.story,
            "usedWords": [w.to_dict() for w in self.used_words],
        }

    @classmethod
    def from_dict(cls, data: dict) -> StoryResult:
        return cls(
            story=data.get("story", ""),
            used_words=[
                UsedWord(portuguese=w["portuguese"], french=w["french"])
                for w in data.get("usedWords", [])
            ],
        )


def story_word_count(total: int) -> int:
    """How many vocabulary words a story should weave in."""
    # half rounds up: 55 words -> 17
    wanted = math.floor(total * STORY_WORDS_RATIO + 0.5)
    wanted = max(STORY_WORDS_FLOOR, min(STORY_WORDS_CEILING, wanted))
    return min(wanted, total)


def select_story_words(
    words: Sequence, rng: Optional[random.Random] = None,
) -> list[UsedWord]:
    """Pick a random subset of words (anything with portuguese/french attributes)."""
    rng = rng or random.Random()
    chosen = rng.sample(list(words), story_word_count(len(words)))
    return [UsedWord(portuguese=w.portuguese, french=w.french) for w in chosen]


def clean_markdown(text: str) -> str:
    """Remove emphasis markers the model adds despite being told not to."""
    text = text.replace("**", "")
    text = text.replace("*", "")
    text = text.replace("__", "")
    return text.replace("_", " ")
