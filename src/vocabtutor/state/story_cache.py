"""Local cache of the last generated story for offline reading."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

from vocabtutor.engine.story import StoryResult

logger = logging.getLogger(__name__)


class StoryCache:
    def __init__(self, path: Optional[Path] = None):
        self.path = path or (Path.home() / ".vocabtutor" / "last_story.json")

    def load(self) -> Optional[StoryResult]:
        """Return the saved story, or None on first run."""
        if not self.path.exists():
            return None
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            return StoryResult.from_dict(data)
        except (json.JSONDecodeError, KeyError, TypeError, AttributeError) as e:
            logger.warning("Ignoring unreadable story cache %s: %s", self.path, e)
            return None

    def save(self, result: StoryResult) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(
            json.dumps(result.to_dict(), ensure_ascii=False), encoding="utf-8",
        )
        logger.info("Saved story with %d vocabulary words", len(result.used_words))
