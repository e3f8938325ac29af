"""SQLite-backed word store with change subscriptions."""

from __future__ import annotations

import json
import logging
import random
import sqlite3
import time
import uuid
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Callable, Optional, Sequence

from vocabtutor.engine.normalizer import fold_accents, split_variants

logger = logging.getLogger(__name__)

_EDITABLE_FIELDS = ("portuguese", "french", "examples")


def now_ms() -> int:
    return int(time.time() * 1000)


@dataclass
class Word:
    id: str
    portuguese: str
    french: str
    examples: list[str] = field(default_factory=list)
    created_at: int = 0
    updated_at: int = 0

    def variants(self, side: str = "french") -> list[str]:
        """The ``/``-separated alternatives of one side of the card."""
        return split_variants(getattr(self, side))

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "portuguese": self.portuguese,
            "french": self.french,
            "examples": list(self.examples),
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> Word:
        return cls(
            id=data["id"],
            portuguese=data["portuguese"],
            french=data["french"],
            examples=list(data.get("examples") or []),
            created_at=data.get("createdAt") or 0,
            updated_at=data.get("updatedAt") or 0,
        )


class SortOrder(str, Enum):
    NEWEST = "newest"
    OLDEST = "oldest"
    ALPHABETICAL = "alphabetical"


def filter_words(words: Sequence[Word], query: str) -> list[Word]:
    """Case-insensitive substring search over both sides."""
    needle = query.strip().lower()
    if not needle:
        return list(words)
    return [
        w for w in words
        if needle in w.portuguese.lower() or needle in w.french.lower()
    ]


def sort_words(words: Sequence[Word], order: SortOrder | str = SortOrder.NEWEST) -> list[Word]:
    order = SortOrder(order)
    if order == SortOrder.OLDEST:
        return sorted(words, key=lambda w: w.created_at)
    if order == SortOrder.ALPHABETICAL:
        return sorted(words, key=lambda w: fold_accents(w.portuguese).lower())
    return sorted(words, key=lambda w: w.created_at, reverse=True)


def _clean_examples(examples: Optional[Sequence[str]]) -> list[str]:
    return [e.strip() for e in (examples or []) if e.strip()]


Listener = Callable[[list[Word]], None]
ErrorListener = Callable[[Exception], None]


class WordStore:
    """Persistent word collection, newest-created first."""

    def __init__(self, db_path: Optional[Path] = None):
        self.db_path = db_path or (Path.home() / ".vocabtutor" / "vocabulary.db")
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._listeners: list[tuple[Listener, Optional[ErrorListener]]] = []
        self._init_db()

    def _init_db(self) -> None:
        with self._conn() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS words (
                    id TEXT PRIMARY KEY NOT NULL,
                    portuguese TEXT NOT NULL,
                    french TEXT NOT NULL,
                    examples TEXT NOT NULL DEFAULT '[]',
                    created_at INTEGER NOT NULL,
                    updated_at INTEGER NOT NULL
                )
            """)

    def _conn(self) -> sqlite3.Connection:
        return sqlite3.connect(self.db_path)

    @staticmethod
    def _row_to_word(row) -> Word:
        return Word(
            id=row[0],
            portuguese=row[1],
            french=row[2],
            examples=json.loads(row[3]),
            created_at=row[4],
            updated_at=row[5],
        )

    # --- Reads ---

    def list(self) -> list[Word]:
        with self._conn() as conn:
            rows = conn.execute(
                "SELECT id, portuguese, french, examples, created_at, updated_at "
                "FROM words ORDER BY created_at DESC, rowid DESC"
            ).fetchall()
        return [self._row_to_word(r) for r in rows]

    def get(self, word_id: str) -> Optional[Word]:
        with self._conn() as conn:
            row = conn.execute(
                "SELECT id, portuguese, french, examples, created_at, updated_at "
                "FROM words WHERE id = ?",
                (word_id,),
            ).fetchone()
        if not row:
            return None
        return self._row_to_word(row)

    def count(self) -> int:
        with self._conn() as conn:
            return conn.execute("SELECT COUNT(*) FROM words").fetchone()[0]

    def random_word(self, rng: Optional[random.Random] = None) -> Optional[Word]:
        words = self.list()
        if not words:
            return None
        return (rng or random).choice(words)

    # --- Writes ---

    def create(
        self, portuguese: str, french: str, examples: Optional[Sequence[str]] = None,
    ) -> str:
        portuguese = portuguese.strip()
        french = french.strip()
        if not portuguese or not french:
            raise ValueError("Both the Portuguese word and its French translation are required")

        word_id = uuid.uuid4().hex
        now = now_ms()
        with self._conn() as conn:
            conn.execute(
                """INSERT INTO words (id, portuguese, french, examples, created_at, updated_at)
                   VALUES (?, ?, ?, ?, ?, ?)""",
                (word_id, portuguese, french, json.dumps(_clean_examples(examples)), now, now),
            )
        logger.info("Created word %s (%s)", word_id, portuguese)
        self._notify()
        return word_id

    def update(self, word_id: str, **fields) -> Word:
        unknown = set(fields) - set(_EDITABLE_FIELDS)
        if unknown:
            raise ValueError(f"Cannot update fields: {', '.join(sorted(unknown))}")

        current = self.get(word_id)
        if current is None:
            raise ValueError(f"Unknown word: {word_id}")

        changes = {}
        for name in ("portuguese", "french"):
            if name in fields:
                value = fields[name].strip()
                if not value:
                    raise ValueError(f"Field '{name}' cannot be empty")
                changes[name] = value
        if "examples" in fields:
            changes["examples"] = _clean_examples(fields["examples"])

        updated = replace(
            current, **changes, updated_at=max(now_ms(), current.updated_at),
        )
        with self._conn() as conn:
            conn.execute(
                """UPDATE words SET portuguese = ?, french = ?, examples = ?, updated_at = ?
                   WHERE id = ?""",
                (updated.portuguese, updated.french, json.dumps(updated.examples),
                 updated.updated_at, word_id),
            )
        self._notify()
        return updated

    def delete(self, word_id: str) -> None:
        with self._conn() as conn:
            conn.execute("DELETE FROM words WHERE id = ?", (word_id,))
        logger.info("Deleted word %s", word_id)
        self._notify()

    def replace_all(self, words: Sequence[Word]) -> None:
        """Swap the whole collection in a single transaction.

        ``words`` is taken in newest-first order, as ``list()`` returns it.
        Rows are inserted oldest first so that words sharing a ``created_at``
        read back in the same order.
        """
        ordered = sorted(reversed(list(words)), key=lambda w: w.created_at)
        with self._conn() as conn:
            conn.execute("DELETE FROM words")
            conn.executemany(
                """INSERT INTO words (id, portuguese, french, examples, created_at, updated_at)
                   VALUES (?, ?, ?, ?, ?, ?)""",
                [
                    (w.id, w.portuguese, w.french, json.dumps(w.examples),
                     w.created_at, w.updated_at)
                    for w in ordered
                ],
            )
        logger.info("Replaced vocabulary with %d words", len(words))
        self._notify()

    def clear(self) -> None:
        self.replace_all([])

    # --- Subscriptions ---

    def subscribe(
        self, on_change: Listener, on_error: Optional[ErrorListener] = None,
    ) -> Callable[[], None]:
        """Register a listener; it receives the current list right away.

        Returns a callable that removes the listener.
        """
        entry = (on_change, on_error)
        self._listeners.append(entry)
        self._deliver(entry, self._snapshot(entry))

        def unsubscribe() -> None:
            if entry in self._listeners:
                self._listeners.remove(entry)

        return unsubscribe

    def _snapshot(self, entry) -> Optional[list[Word]]:
        try:
            return self.list()
        except sqlite3.Error as e:
            self._report(entry, e)
            return None

    def _notify(self) -> None:
        if not self._listeners:
            return
        try:
            words = self.list()
        except sqlite3.Error as e:
            for entry in list(self._listeners):
                self._report(entry, e)
            return
        for entry in list(self._listeners):
            self._deliver(entry, words)

    def _deliver(self, entry, words: Optional[list[Word]]) -> None:
        if words is None:
            return
        on_change, _ = entry
        try:
            on_change(list(words))
        except Exception as e:
            self._report(entry, e)

    @staticmethod
    def _report(entry, error: Exception) -> None:
        _, on_error = entry
        logger.error("Word subscription error: %s", error)
        if on_error is not None:
            on_error(error)


@dataclass
class VocabularyState:
    """In-memory mirror of the store for front-ends.

    On a subscription error the last known list is kept.
    """

    words: list[Word] = field(default_factory=list)
    is_loading: bool = True
    error: Optional[str] = None

    def attach(self, store: WordStore) -> Callable[[], None]:
        return store.subscribe(self.set_words, self.set_error)

    def set_words(self, words: list[Word]) -> None:
        self.words = words
        self.is_loading = False
        self.error = None

    def set_error(self, error: Exception) -> None:
        self.error = f"Failed to sync with database: {error}"
        self.is_loading = False
