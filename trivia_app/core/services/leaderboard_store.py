"""Service for the append-only list of finished rounds."""

from __future__ import annotations

from typing import Protocol

from trivia_app.constants.quiz_constants import SCORES_KEY
from trivia_app.core.models import ScoreEntry
from trivia_app.core.storage import KeyValueStore


class LeaderboardStore(Protocol):
    """Interface for recording and listing score entries."""

    def append(self, entry: ScoreEntry) -> None:
        ...

    def list(self) -> list[ScoreEntry]:
        ...

    def reset_all(self) -> None:
        ...


class KeyValueLeaderboardStore:
    """Leaderboard kept as a JSON array under a single key, in insertion order."""

    def __init__(self, store: KeyValueStore, key: str = SCORES_KEY) -> None:
        self._store = store
        self._key = key

    def append(self, entry: ScoreEntry) -> None:
        rows = self._read_rows()
        rows.append({"username": entry.username, "score": entry.score})
        self._store.set(self._key, rows)

    def list(self) -> list[ScoreEntry]:
        entries: list[ScoreEntry] = []
        for row in self._read_rows():
            try:
                entries.append(ScoreEntry(username=str(row["username"]), score=int(row["score"])))
            except (KeyError, TypeError, ValueError):
                continue
        return entries

    def reset_all(self) -> None:
        self._store.remove(self._key)

    def _read_rows(self) -> list[dict]:
        raw = self._store.get(self._key)
        if not isinstance(raw, list):
            return []
        return [row for row in raw if isinstance(row, dict)]
