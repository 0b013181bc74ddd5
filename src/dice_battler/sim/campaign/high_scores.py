"""High-score table -- the storage collaborator behind campaign endings.

The engine only needs ``save_high_score`` and ``get_high_scores``; any
object with those two methods can be plugged in.  Two stores ship here:
an in-memory one (tests, simulations) and a JSON file one (terminal play).
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Protocol

from pydantic import BaseModel, Field, TypeAdapter

logger = logging.getLogger(__name__)

MAX_HIGH_SCORES = 10


class HighScoreEntry(BaseModel):
    name: str
    score: int
    battles_won: int
    timestamp: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )
    """ISO 8601 timestamp."""


class HighScoreStore(Protocol):
    def save_high_score(self, entry: HighScoreEntry) -> None: ...

    def get_high_scores(self) -> list[HighScoreEntry]: ...


def _top_scores(entries: list[HighScoreEntry], limit: int) -> list[HighScoreEntry]:
    # sorted() is stable, so earlier entries win ties
    return sorted(entries, key=lambda e: e.score, reverse=True)[:limit]


class InMemoryHighScoreStore:
    """High scores kept for the lifetime of the process."""

    def __init__(self, limit: int = MAX_HIGH_SCORES) -> None:
        self._limit = limit
        self._entries: list[HighScoreEntry] = []

    def save_high_score(self, entry: HighScoreEntry) -> None:
        self._entries = _top_scores([*self._entries, entry], self._limit)

    def get_high_scores(self) -> list[HighScoreEntry]:
        return list(self._entries)


_ENTRIES_ADAPTER = TypeAdapter(list[HighScoreEntry])


class JsonHighScoreStore:
    """High scores persisted as a JSON array in a single file."""

    def __init__(self, path: str | Path, limit: int = MAX_HIGH_SCORES) -> None:
        self.path = Path(path)
        self._limit = limit

    def save_high_score(self, entry: HighScoreEntry) -> None:
        entries = _top_scores([*self.get_high_scores(), entry], self._limit)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps([e.model_dump() for e in entries], indent=2))

    def get_high_scores(self) -> list[HighScoreEntry]:
        if not self.path.exists():
            return []
        raw = json.loads(self.path.read_text())
        return _top_scores(_ENTRIES_ADAPTER.validate_python(raw), self._limit)
