"""Redis-backed key-value store for sessions."""

from collections.abc import Callable
from dataclasses import dataclass

import redis

from formal_photo_bot.services.kv_store import KeyValueStore
from formal_photo_bot.services.session_store import SessionStoreError


@dataclass
class RedisKeyValueStore(KeyValueStore):
    """Key-value store using Redis key expiry."""

    client: redis.Redis
    max_ttl_seconds: int = 21600

    @classmethod
    def create(cls, url: str, max_ttl_seconds: int) -> "RedisKeyValueStore":
        """Create a store with a lazily connecting Redis client."""
        client = redis.Redis.from_url(
            url,
            decode_responses=True,
            socket_connect_timeout=5,
        )
        return cls(client=client, max_ttl_seconds=max_ttl_seconds)

    def get(self, key: str) -> str | None:
        """Return the value for a key, if present."""
        try:
            return self.client.get(key)
        except redis.RedisError as exc:
            raise SessionStoreError(f"Redis GET failed for {key}") from exc

    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        """Store a value with SET ... EX."""
        try:
            self.client.set(key, value, ex=ttl_seconds)
        except redis.RedisError as exc:
            raise SessionStoreError(f"Redis SET failed for {key}") from exc

    def compare_and_set(
        self,
        key: str,
        value: str,
        ttl_seconds: int,
        check: Callable[[str | None], bool],
    ) -> bool:
        """Store a value inside a WATCH/MULTI transaction."""

        def _apply(pipe: redis.client.Pipeline) -> bool:
            if not check(pipe.get(key)):
                return False
            pipe.multi()
            pipe.set(key, value, ex=ttl_seconds)
            return True

        try:
            return self.client.transaction(_apply, key, value_from_callable=True)
        except redis.RedisError as exc:
            raise SessionStoreError(f"Redis transaction failed for {key}") from exc

    def delete(self, key: str) -> None:
        """Delete a key."""
        try:
            self.client.delete(key)
        except redis.RedisError as exc:
            raise SessionStoreError(f"Redis DEL failed for {key}") from exc

    def close(self) -> None:
        """Close the Redis connection pool."""
        self.client.close()
