"""JSON-lines protocol messages exchanged with a front-end client."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Optional


class ProtocolError(ValueError):
    """A line from the client is not a valid request."""


def _dumps(payload: dict) -> str:
    # Vocabulary is Portuguese/French; keep accents readable on the wire
    return json.dumps(payload, ensure_ascii=False) + "\n"


@dataclass
class Request:
    """One client call. ``id`` is echoed back in the response."""
    id: int
    method: str
    params: dict = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict) -> Request:
        return cls(
            id=data.get("id", 0),
            method=data["method"],
            params=data.get("params") or {},
        )

    @classmethod
    def from_line(cls, line: str) -> Request:
        try:
            data = json.loads(line)
        except json.JSONDecodeError as e:
            raise ProtocolError(f"Invalid request: {e}") from e
        if not isinstance(data, dict) or not isinstance(data.get("method"), str):
            raise ProtocolError("Invalid request: missing method")
        if not isinstance(data.get("params") or {}, dict):
            raise ProtocolError("Invalid request: params must be an object")
        return cls.from_dict(data)


@dataclass
class Response:
    """Reply to a single request: either a result or an error message."""
    id: int
    result: Optional[Any] = None
    error: Optional[str] = None

    def to_dict(self) -> dict:
        if self.error is not None:
            return {"id": self.id, "error": self.error}
        return {"id": self.id, "result": self.result}

    def to_json_line(self) -> str:
        return _dumps(self.to_dict())


@dataclass
class Notification:
    """Pushed without a request, e.g. ``wordsChanged`` after a store write."""
    method: str
    params: dict = field(default_factory=dict)

    def to_json_line(self) -> str:
        return _dumps({"method": self.method, "params": self.params})
