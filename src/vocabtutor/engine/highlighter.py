"""Split a generated story into plain text and known-vocabulary segments.

The vocabulary phrases are combined into one case-insensitive alternation,
longest phrase first, so that "casa grande" is matched whole instead of
"casa" followed by plain " grande". Splitting with a capturing group keeps
every character, so joining the segment texts gives back the story.

Equal-length phrases that partially overlap the same span are resolved by
whichever alternative the regex engine tries first (input order).
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Sequence

from vocabtutor.engine.story import UsedWord

PLAIN = "plain"
MATCH = "match"


@dataclass(frozen=True)
class Segment:
    kind: str  # "plain" or "match"
    text: str
    translation: Optional[str] = None

    @property
    def is_match(self) -> bool:
        return self.kind == MATCH


def build_pattern(phrases: Sequence[str]) -> Optional[re.Pattern]:
    """Build a longest-first alternation over the given phrases."""
    usable = [p for p in phrases if p and p.strip()]
    if not usable:
        return None
    ordered = sorted(usable, key=len, reverse=True)
    return re.compile(
        "(" + "|".join(re.escape(p) for p in ordered) + ")",
        re.IGNORECASE,
    )


def resolve(piece: str, vocabulary: Sequence[UsedWord]) -> Optional[UsedWord]:
    """Find the vocabulary entry a piece of text stands for, ignoring case."""
    lowered = piece.lower()
    if not lowered.strip():
        return None
    for word in vocabulary:
        if word.portuguese.lower() == lowered:
            return word
    return None


def segment(story: Optional[str], vocabulary: Sequence[UsedWord]) -> list[Segment]:
    """Partition ``story`` into alternating plain and matched segments."""
    if not story:
        return []

    pattern = build_pattern([w.portuguese for w in vocabulary])
    if pattern is None:
        return [Segment(kind=PLAIN, text=story)]

    segments: list[Segment] = []
    for piece in pattern.split(story):
        if not piece:
            continue
        word = resolve(piece, vocabulary)
        if word is not None:
            segments.append(Segment(kind=MATCH, text=piece, translation=word.french))
        else:
            segments.append(Segment(kind=PLAIN, text=piece))
    return segments


def translation_for(segments: Sequence[Segment], index: int) -> Optional[str]:
    """Return the translation behind a selected segment, if it has one."""
    if 0 <= index < len(segments):
        return segments[index].translation
    return None
