"""JSON backup export and validated import."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Sequence

from vocabtutor.state.words import Word, WordStore, now_ms

logger = logging.getLogger(__name__)

BACKUP_VERSION = 1
BACKUP_FILENAME = "vocabulary_backup.json"


class BackupError(Exception):
    """Raised when a backup document cannot be imported."""


def build_backup(words: Sequence[Word], now: Optional[datetime] = None) -> dict:
    now = now or datetime.now(timezone.utc)
    return {
        "version": BACKUP_VERSION,
        "exportedAt": now.isoformat().replace("+00:00", "Z"),
        "words": [w.to_dict() for w in words],
    }


def export_backup(words: Sequence[Word], path: Path) -> Path:
    """Write a backup document; ``path`` may be a directory."""
    if path.is_dir():
        path = path / BACKUP_FILENAME
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(build_backup(words), ensure_ascii=False, indent=2), encoding="utf-8",
    )
    logger.info("Exported %d words to %s", len(words), path)
    return path


def _timestamp(value, default: int) -> int:
    # epoch milliseconds; bool is an int subclass but never a timestamp
    if isinstance(value, int) and not isinstance(value, bool) and value > 0:
        return value
    return default


def parse_backup(data, now: Optional[int] = None) -> list[Word]:
    """Validate a decoded backup document and repair optional fields."""
    if not isinstance(data, dict) or not isinstance(data.get("words"), list):
        raise BackupError("Invalid backup file format")

    now = now if now is not None else now_ms()
    words: list[Word] = []
    for raw in data["words"]:
        if not isinstance(raw, dict) or not all(
            isinstance(raw.get(key), str) and raw[key].strip()
            for key in ("id", "portuguese", "french")
        ):
            raise BackupError("Invalid word data in backup file")

        examples = raw.get("examples")
        words.append(Word(
            id=raw["id"],
            portuguese=raw["portuguese"],
            french=raw["french"],
            examples=(
                [e for e in examples if isinstance(e, str)]
                if isinstance(examples, list) else []
            ),
            created_at=_timestamp(raw.get("createdAt"), now),
            updated_at=_timestamp(raw.get("updatedAt"), now),
        ))
    return words


def read_backup(path: Path) -> list[Word]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise BackupError(f"Backup file not found: {path}") from e
    except json.JSONDecodeError as e:
        raise BackupError(f"Malformed backup file: {e}") from e
    return parse_backup(data)


def import_backup(path: Path, store: WordStore) -> int:
    """Replace the whole vocabulary with a backup; the store is untouched on error."""
    words = read_backup(path)
    store.replace_all(words)
    logger.info("Imported %d words from %s", len(words), path)
    return len(words)
