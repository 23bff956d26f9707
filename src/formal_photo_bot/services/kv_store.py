"""Key-value store abstractions with per-key TTL."""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Protocol


class KeyValueStore(Protocol):
    """String key-value store that expires keys on its own."""

    max_ttl_seconds: int

    def get(self, key: str) -> str | None:
        """Return a stored value if present and not expired."""

    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        """Store a value, resetting its TTL."""

    def compare_and_set(
        self,
        key: str,
        value: str,
        ttl_seconds: int,
        check: Callable[[str | None], bool],
    ) -> bool:
        """Store a value only if ``check`` accepts the current one."""

    def delete(self, key: str) -> None:
        """Delete a key; missing keys are ignored."""


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class _Entry:
    value: str
    expires_at: datetime


class InMemoryKeyValueStore(KeyValueStore):
    """In-process key-value store for local runs and tests."""

    def __init__(
        self,
        clock: Callable[[], datetime] = _utcnow,
        max_ttl_seconds: int = 21600,
    ) -> None:
        self._entries: dict[str, _Entry] = {}
        self._clock = clock
        self.max_ttl_seconds = max_ttl_seconds

    def get(self, key: str) -> str | None:
        """Return a stored value if it hasn't expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() >= entry.expires_at:
            self._entries.pop(key, None)
            return None
        return entry.value

    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        """Store a value with a TTL."""
        expires_at = self._clock() + timedelta(seconds=ttl_seconds)
        self._entries[key] = _Entry(value=value, expires_at=expires_at)

    def compare_and_set(
        self,
        key: str,
        value: str,
        ttl_seconds: int,
        check: Callable[[str | None], bool],
    ) -> bool:
        """Store a value when the current one passes ``check``."""
        if not check(self.get(key)):
            return False
        self.set(key, value, ttl_seconds)
        return True

    def delete(self, key: str) -> None:
        """Remove a key if present."""
        self._entries.pop(key, None)
