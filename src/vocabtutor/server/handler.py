"""Server handler: dispatches JSON-lines requests to the store and engine."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Callable, Optional

from vocabtutor.config.settings import Settings
from vocabtutor.engine.generator import TextGenerator, generate_examples, generate_story
from vocabtutor.engine.highlighter import Segment, segment
from vocabtutor.engine.normalizer import answers_match
from vocabtutor.engine.quiz_runner import QuizRunner
from vocabtutor.engine.story import MIN_STORY_WORDS, StoryResult
from vocabtutor.state.backup import export_backup, import_backup
from vocabtutor.state.story_cache import StoryCache
from vocabtutor.state.words import SortOrder, Word, WordStore, filter_words, sort_words

from .protocol import Notification

logger = logging.getLogger(__name__)


def _segment_to_dict(seg: Segment) -> dict:
    return {"kind": seg.kind, "text": seg.text, "translation": seg.translation}


def _story_to_dict(result: StoryResult) -> dict:
    data = result.to_dict()
    data["segments"] = [_segment_to_dict(s) for s in segment(result.story, result.used_words)]
    return data


class ServerHandler:
    """Routes incoming requests to engine methods and returns result dicts."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        write_notification: Optional[Callable[[Notification], None]] = None,
        store: Optional[WordStore] = None,
        generator: Optional[TextGenerator] = None,
    ):
        self.settings = settings or Settings.load()
        self._write_notification = write_notification or (lambda n: None)

        self.store = store or WordStore(db_path=self.settings.db_path)
        self.story_cache = StoryCache(path=self.settings.story_path)
        self.generator = generator or TextGenerator(settings=self.settings)
        self.quiz = QuizRunner(self.store.list)
        self._unsubscribe: Optional[Callable[[], None]] = None

    def start_sync(self) -> None:
        """Push the full word list to the client on every change."""
        if self._unsubscribe is None:
            self._unsubscribe = self.store.subscribe(self._push_words, self._push_error)

    def stop_sync(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def _push_words(self, words: list[Word]) -> None:
        self._write_notification(
            Notification("wordsChanged", {"words": [w.to_dict() for w in words]})
        )

    def _push_error(self, error: Exception) -> None:
        self._write_notification(Notification("syncError", {"message": str(error)}))

    async def dispatch(self, msg: dict) -> dict:
        """Route a request message to the appropriate handler method."""
        method = msg.get("method", "")
        params = msg.get("params") or {}

        handler_map = {
            "listWords": self._list_words,
            "getWord": self._get_word,
            "addWord": self._add_word,
            "updateWord": self._update_word,
            "deleteWord": self._delete_word,
            "clearWords": self._clear_words,
            "nextQuizWord": self._next_quiz_word,
            "checkAnswer": self._check_answer,
            "matchAnswer": self._match_answer,
            "generateExamples": self._generate_examples,
            "generateStory": self._generate_story,
            "getStory": self._get_story,
            "segmentStory": self._segment_story,
            "exportBackup": self._export_backup,
            "importBackup": self._import_backup,
        }

        handler = handler_map.get(method)
        if handler is None:
            raise ValueError(f"Unknown method: {method}")

        return await handler(params)

    # --- Words ---

    async def _list_words(self, params: dict) -> dict:
        words = filter_words(self.store.list(), params.get("search", ""))
        words = sort_words(words, SortOrder(params.get("sort", "newest")))
        return {"words": [w.to_dict() for w in words], "total": self.store.count()}

    async def _get_word(self, params: dict) -> dict:
        word = self.store.get(params["id"])
        if word is None:
            raise ValueError(f"Unknown word: {params['id']}")
        return {"word": word.to_dict()}

    async def _add_word(self, params: dict) -> dict:
        word_id = self.store.create(
            params.get("portuguese", ""),
            params.get("french", ""),
            params.get("examples") or [],
        )
        return {"id": word_id}

    async def _update_word(self, params: dict) -> dict:
        fields = {k: params[k] for k in ("portuguese", "french", "examples") if k in params}
        word = self.store.update(params["id"], **fields)
        return {"word": word.to_dict()}

    async def _delete_word(self, params: dict) -> dict:
        self.store.delete(params["id"])
        return {"ok": True}

    async def _clear_words(self, params: dict) -> dict:
        self.store.clear()
        return {"ok": True}

    # --- Quiz ---

    async def _next_quiz_word(self, params: dict) -> dict:
        state = self.quiz.next_word()
        if state is None:
            return {"empty": True}
        return {
            "empty": False,
            "wordId": state.word.id,
            "prompt": state.prompt,
            "showPortuguese": state.show_portuguese,
        }

    async def _check_answer(self, params: dict) -> dict:
        if self.quiz.state is None:
            raise ValueError("No quiz in progress")

        result = self.quiz.submit(params.get("answer", ""))
        if result is None:
            return {"ignored": True}
        return {
            "ignored": False,
            "passed": result.passed,
            "correctAnswer": result.correct_answer,
            "attempts": self.quiz.stats.total_attempts,
            "correct": self.quiz.stats.correct,
        }

    async def _match_answer(self, params: dict) -> dict:
        return {"passed": answers_match(params["answer"], params["correct"])}

    # --- Generation ---

    async def _generate_examples(self, params: dict) -> dict:
        sentences = await asyncio.to_thread(
            generate_examples,
            self.generator,
            params["portuguese"],
            params["french"],
            params.get("count", 4),
        )
        return {"examples": sentences}

    async def _generate_story(self, params: dict) -> dict:
        words = self.store.list()
        if len(words) < MIN_STORY_WORDS:
            raise ValueError(
                f"At least {MIN_STORY_WORDS} words are needed to generate a story "
                f"(you have {len(words)})."
            )
        result = await asyncio.to_thread(generate_story, self.generator, words)
        self.story_cache.save(result)
        return _story_to_dict(result)

    async def _get_story(self, params: dict) -> dict:
        result = self.story_cache.load()
        if result is None:
            return {"story": None}
        return _story_to_dict(result)

    async def _segment_story(self, params: dict) -> dict:
        result = StoryResult.from_dict(params)
        return {"segments": [_segment_to_dict(s) for s in segment(result.story, result.used_words)]}

    # --- Backup ---

    async def _export_backup(self, params: dict) -> dict:
        words = self.store.list()
        if not words:
            raise ValueError("There are no words to export.")
        path = export_backup(words, Path(params["path"]).expanduser())
        return {"path": str(path), "count": len(words)}

    async def _import_backup(self, params: dict) -> dict:
        count = import_backup(Path(params["path"]).expanduser(), self.store)
        return {"count": count}
