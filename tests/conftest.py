"""Shared test fixtures."""

import asyncio
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

import pytest

from formal_photo_bot.adapters.telegram_client import TelegramClient
from formal_photo_bot.config import BotConfig, Settings, build_bot_config
from formal_photo_bot.containers import AppContainer
from formal_photo_bot.domain.outcomes import ErrorKind, GenerationError
from formal_photo_bot.domain.sessions import PromptParameters
from formal_photo_bot.services.conversation import ConversationService
from formal_photo_bot.services.kv_store import InMemoryKeyValueStore
from formal_photo_bot.services.revision_parser import RevisionParser
from formal_photo_bot.services.session_store import SessionStore
from formal_photo_bot.services.timeout_policy import RevisionTimeoutPolicy
from formal_photo_bot.services.validation import PhotoValidator


@dataclass
class FakeClock:
    """Manually advanced UTC clock."""

    now: datetime = field(
        default_factory=lambda: datetime(2024, 5, 1, 9, 0, tzinfo=UTC)
    )

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


@dataclass
class FakeTelegramClient(TelegramClient):
    """Fake Telegram client that records messages."""

    messages: list[tuple[int, str]] = field(default_factory=list)
    photos: list[tuple[int, str, str]] = field(default_factory=list)
    actions: list[tuple[int, str]] = field(default_factory=list)
    commands: list[dict[str, str]] | None = None
    menu_button: dict[str, object] | None = None

    async def send_message(self, chat_id: int, text: str) -> None:
        self.messages.append((chat_id, text))

    async def send_photo(self, chat_id: int, photo: str, caption: str) -> None:
        self.photos.append((chat_id, photo, caption))

    async def send_chat_action(self, chat_id: int, action: str) -> None:
        self.actions.append((chat_id, action))

    async def set_my_commands(self, commands: list[dict[str, str]]) -> None:
        self.commands = commands

    async def set_chat_menu_button(
        self, menu_button: dict[str, object] | None = None
    ) -> None:
        self.menu_button = menu_button


@dataclass
class FakeGenerator:
    """Fake portrait generator returning numbered URLs or a scripted error."""

    error: ErrorKind | None = None
    delay: float = 0.0
    calls: list[tuple[str, PromptParameters]] = field(default_factory=list)

    async def generate(self, photo_ref: str, parameters: PromptParameters) -> str:
        self.calls.append((photo_ref, parameters))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise GenerationError(self.error)
        return f"https://images.example.com/{photo_ref}-{len(self.calls)}.png"


@dataclass
class FakeTelegramFileClient:
    """Fake Telegram file client that returns static bytes."""

    content: bytes = b"\xff\xd8\xff\xe0fake-jpeg"
    requested: list[str] = field(default_factory=list)

    async def download_file_bytes(self, file_id: str) -> bytes:
        self.requested.append(file_id)
        return self.content


@pytest.fixture
def settings() -> Settings:
    return Settings(
        telegram_bot_token="test-token",
        openai_api_key="openai-key",
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
        session_backend="memory",
        environment="test",
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def bot_config() -> BotConfig:
    return BotConfig()


@pytest.fixture
def kv_store(clock: FakeClock) -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore(clock=clock)


@pytest.fixture
def session_store(
    kv_store: InMemoryKeyValueStore, bot_config: BotConfig, clock: FakeClock
) -> SessionStore:
    return SessionStore(kv_store=kv_store, config=bot_config, clock=clock)


@pytest.fixture
def generator() -> FakeGenerator:
    return FakeGenerator()


@pytest.fixture
def conversation_service(
    session_store: SessionStore,
    generator: FakeGenerator,
    bot_config: BotConfig,
    clock: FakeClock,
) -> ConversationService:
    return ConversationService(
        store=session_store,
        parser=RevisionParser(bot_config),
        generator=generator,
        timeout_policy=RevisionTimeoutPolicy(bot_config.revision_window),
        config=bot_config,
        clock=clock,
    )


@pytest.fixture
def telegram_client() -> FakeTelegramClient:
    return FakeTelegramClient()


@pytest.fixture
def container(
    settings: Settings,
    telegram_client: FakeTelegramClient,
    generator: FakeGenerator,
    clock: FakeClock,
) -> AppContainer:
    bot_config = build_bot_config(settings)
    store = SessionStore(
        kv_store=InMemoryKeyValueStore(clock=clock), config=bot_config, clock=clock
    )
    conversation_service = ConversationService(
        store=store,
        parser=RevisionParser(bot_config),
        generator=generator,
        timeout_policy=RevisionTimeoutPolicy(bot_config.revision_window),
        config=bot_config,
        clock=clock,
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        bot_config=bot_config,
        telegram_client=telegram_client,
        photo_validator=PhotoValidator(bot_config),
        conversation_service=conversation_service,
        close_resources=close_resources,
    )
