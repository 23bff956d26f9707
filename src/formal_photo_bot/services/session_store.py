"""Time-bounded session persistence on top of a key-value store."""

import json
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime

from formal_photo_bot.config import BotConfig
from formal_photo_bot.domain.sessions import PromptParameters, Session, SessionState
from formal_photo_bot.services.kv_store import KeyValueStore

logger = logging.getLogger(__name__)


class SessionStoreError(Exception):
    """Raised when the backing store cannot be reached."""


class StaleSessionError(SessionStoreError):
    """Raised when a conditional write sees a newer session version."""


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class SessionStore:
    """Stores one session per conversation with a sliding TTL.

    Every write refreshes ``last_activity_at``, bumps ``version`` and resets
    the key's TTL. Expiry itself is left to the backing store. There is no
    locking: concurrent writers for the same conversation are last-write-wins
    unless a caller passes ``expected_version`` to ``put``.
    """

    kv_store: KeyValueStore
    config: BotConfig
    clock: Callable[[], datetime] = field(default=_utcnow)

    @property
    def ttl_seconds(self) -> int:
        """TTL requested on every write, capped at the store ceiling."""
        return min(self.config.session_ttl_seconds, self.kv_store.max_ttl_seconds)

    def get(self, conversation_id: str) -> Session | None:
        """Return the stored session, or None when absent or unreadable."""
        raw = self.kv_store.get(_session_key(conversation_id))
        if raw is None:
            return None
        try:
            return Session.from_json(raw)
        except ValueError as exc:
            logger.warning(
                "Discarding corrupt session data",
                extra={"conversation_id": conversation_id, "error": str(exc)},
            )
            return None

    def create(self, conversation_id: str) -> Session:
        """Create and persist a fresh idle session."""
        now = self.clock()
        session = Session(
            id=conversation_id,
            state=SessionState.IDLE,
            prompt_parameters=PromptParameters(**self.config.default_parameters),
            created_at=now,
            last_activity_at=now,
        )
        return self.put(session)

    def get_or_create(self, conversation_id: str) -> Session:
        """Return the existing session or create a new one."""
        session = self.get(conversation_id)
        if session is None:
            session = self.create(conversation_id)
        return session

    def put(self, session: Session, expected_version: int | None = None) -> Session:
        """Persist a session and return the stored copy.

        With ``expected_version`` the write only happens if the stored
        version still matches; otherwise StaleSessionError is raised.
        """
        stored = session.model_copy(
            update={
                "last_activity_at": self.clock(),
                "version": session.version + 1,
            }
        )
        key = _session_key(session.id)
        if expected_version is None:
            self.kv_store.set(key, stored.to_json(), self.ttl_seconds)
            return stored

        written = self.kv_store.compare_and_set(
            key,
            stored.to_json(),
            self.ttl_seconds,
            check=lambda current: _stored_version(current) == expected_version,
        )
        if not written:
            raise StaleSessionError(
                f"Session {session.id} changed since version {expected_version}"
            )
        return stored

    def remove(self, conversation_id: str) -> None:
        """Delete a session; missing sessions are ignored."""
        self.kv_store.delete(_session_key(conversation_id))
        logger.info("Session removed", extra={"conversation_id": conversation_id})


def _session_key(conversation_id: str) -> str:
    return f"session_{conversation_id}"


def _stored_version(raw: str | None) -> int:
    """Return the version in a raw stored record; 0 when missing or unreadable."""
    if raw is None:
        return 0
    try:
        version = json.loads(raw).get("version", 0)
    except (ValueError, AttributeError):
        return 0
    return version if isinstance(version, int) else 0
