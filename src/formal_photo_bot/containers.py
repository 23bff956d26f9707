"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from formal_photo_bot.adapters.openai_image_client import OpenAIImageClient
from formal_photo_bot.adapters.redis_kv_store import RedisKeyValueStore
from formal_photo_bot.adapters.supabase_image_host import SupabaseImageHost
from formal_photo_bot.adapters.telegram_client import (
    HttpxTelegramClient,
    TelegramClient,
)
from formal_photo_bot.adapters.telegram_file_client import HttpxTelegramFileClient
from formal_photo_bot.config import BotConfig, Settings, build_bot_config
from formal_photo_bot.services.conversation import ConversationService
from formal_photo_bot.services.generation import ImageGenerationService
from formal_photo_bot.services.kv_store import InMemoryKeyValueStore, KeyValueStore
from formal_photo_bot.services.revision_parser import RevisionParser
from formal_photo_bot.services.session_store import SessionStore
from formal_photo_bot.services.timeout_policy import RevisionTimeoutPolicy
from formal_photo_bot.services.validation import PhotoValidator


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    bot_config: BotConfig
    telegram_client: TelegramClient
    photo_validator: PhotoValidator
    conversation_service: ConversationService
    close_resources: Callable[[], Awaitable[None]]


def build_kv_store(settings: Settings) -> KeyValueStore:
    """Create the session backing store selected by settings."""
    if settings.session_backend == "memory":
        return InMemoryKeyValueStore(
            max_ttl_seconds=settings.session_ttl_ceiling_seconds
        )
    if settings.session_backend == "redis":
        return RedisKeyValueStore.create(
            settings.redis_url, max_ttl_seconds=settings.session_ttl_ceiling_seconds
        )
    raise ValueError(f"Unknown session backend: {settings.session_backend}")


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    bot_config = build_bot_config(resolved_settings)
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    kv_store = build_kv_store(resolved_settings)
    telegram_client = HttpxTelegramClient.create(resolved_settings.telegram_bot_token)
    telegram_file_client = HttpxTelegramFileClient.create(
        resolved_settings.telegram_bot_token,
        max_file_size_bytes=resolved_settings.max_file_size_bytes,
    )
    image_client = OpenAIImageClient.create(
        resolved_settings.openai_api_key,
        base_url=resolved_settings.image_api_base_url,
    )
    generation_service = ImageGenerationService(
        client=image_client,
        file_client=telegram_file_client,
        image_host=SupabaseImageHost(
            client=supabase_client, bucket=resolved_settings.supabase_bucket
        ),
        model=resolved_settings.image_model,
        size=resolved_settings.image_size,
    )
    conversation_service = ConversationService(
        store=SessionStore(kv_store=kv_store, config=bot_config),
        parser=RevisionParser(bot_config),
        generator=generation_service,
        timeout_policy=RevisionTimeoutPolicy(bot_config.revision_window),
        config=bot_config,
    )

    async def close_resources() -> None:
        await telegram_client.close()
        await telegram_file_client.close()
        await image_client.close()
        if isinstance(kv_store, RedisKeyValueStore):
            kv_store.close()

    return AppContainer(
        settings=resolved_settings,
        bot_config=bot_config,
        telegram_client=telegram_client,
        photo_validator=PhotoValidator(bot_config),
        conversation_service=conversation_service,
        close_resources=close_resources,
    )
