"""Configuration model for VocabTutor."""

from __future__ import annotations

import os
from enum import Enum
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field

DEFAULT_DATA_DIR = Path.home() / ".vocabtutor"


class SpeechBackend(str, Enum):
    AUTO = "auto"
    ESPEAK = "espeak"
    SILENT = "silent"


class ClaudeConfig(BaseModel):
    api_key: Optional[str] = Field(default=None)
    model: str = "claude-sonnet-4-6"

    def get_api_key(self) -> Optional[str]:
        return self.api_key or os.environ.get("ANTHROPIC_API_KEY")

    def get_model(self) -> str:
        return os.environ.get("VOCABTUTOR_CLAUDE_MODEL") or self.model


class SpeechConfig(BaseModel):
    backend: SpeechBackend = SpeechBackend.AUTO
    portuguese_language: str = "pt-PT"
    french_language: str = "fr-FR"
    countdown_seconds: int = Field(default=5, ge=0)
    pause_seconds: float = Field(default=2.0, ge=0)
    timeout_seconds: int = 60


class Settings(BaseModel):
    claude: ClaudeConfig = Field(default_factory=ClaudeConfig)
    speech: SpeechConfig = Field(default_factory=SpeechConfig)
    data_dir: Path = DEFAULT_DATA_DIR

    @property
    def db_path(self) -> Path:
        return self.data_dir / "vocabulary.db"

    @property
    def story_path(self) -> Path:
        return self.data_dir / "last_story.json"

    @staticmethod
    def config_path() -> Path:
        """``$VOCABTUTOR_CONFIG`` if set, else ``~/.vocabtutor/config.yaml``."""
        override = os.environ.get("VOCABTUTOR_CONFIG")
        if override:
            return Path(override).expanduser()
        return Path.home() / ".vocabtutor" / "config.yaml"

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "Settings":
        path = path or cls.config_path()
        if not path.exists():
            return cls()
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        return cls(**data)

    def save(self, path: Optional[Path] = None) -> Path:
        path = path or self.config_path()
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump(self.model_dump(mode="json"), f, default_flow_style=False)
        return path
