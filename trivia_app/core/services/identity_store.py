"""Service remembering the player's name across page loads for a limited time."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Callable, Protocol

from trivia_app.constants.quiz_constants import USERNAME_KEY
from trivia_app.core.models import IdentityRecord
from trivia_app.core.storage import KeyValueStore


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class IdentityStore(Protocol):
    """Interface for persisting the current player's name."""

    def save(self, username: str, ttl_days: int) -> None:
        ...

    def load(self) -> str:
        ...

    def clear(self) -> None:
        ...


class KeyValueIdentityStore:
    """Cookie-like identity record kept in a key-value store."""

    def __init__(
        self,
        store: KeyValueStore,
        key: str = USERNAME_KEY,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._store = store
        self._key = key
        self._clock = clock

    def save(self, username: str, ttl_days: int) -> None:
        record = IdentityRecord(
            username=username,
            expires_at=self._clock() + timedelta(days=ttl_days),
        )
        self._store.set(
            self._key,
            {"username": record.username, "expires_at": record.expires_at.isoformat()},
        )

    def load(self) -> str:
        record = self._read_record()
        if record is None or record.is_expired(self._clock()):
            return ""
        return record.username

    def clear(self) -> None:
        # Same as a cookie delete: overwrite with a record that has already expired.
        self.save("", -1)

    def _read_record(self) -> IdentityRecord | None:
        raw = self._store.get(self._key)
        if not isinstance(raw, dict):
            return None
        try:
            expires_at = datetime.fromisoformat(raw["expires_at"])
            username = str(raw["username"])
        except (KeyError, TypeError, ValueError):
            return None
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        return IdentityRecord(username=username, expires_at=expires_at)
