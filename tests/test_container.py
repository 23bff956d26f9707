"""Tests for container wiring."""

import asyncio

import pytest

from formal_photo_bot.adapters.redis_kv_store import RedisKeyValueStore
from formal_photo_bot.containers import build_container, build_kv_store
from formal_photo_bot.services.kv_store import InMemoryKeyValueStore


def test_build_container_creates_services(settings) -> None:
    container = build_container(settings)

    assert container.conversation_service is not None
    assert container.bot_config.revision_window.total_seconds() == 60
    asyncio.run(container.close_resources())


def test_build_kv_store_backends(settings) -> None:
    assert isinstance(build_kv_store(settings), InMemoryKeyValueStore)

    redis_settings = settings.model_copy(update={"session_backend": "redis"})
    redis_store = build_kv_store(redis_settings)
    assert isinstance(redis_store, RedisKeyValueStore)
    assert redis_store.max_ttl_seconds == settings.session_ttl_ceiling_seconds
    redis_store.close()

    with pytest.raises(ValueError, match="Unknown session backend"):
        build_kv_store(settings.model_copy(update={"session_backend": "sqlite"}))
