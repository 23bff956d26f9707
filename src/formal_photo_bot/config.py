"""Application configuration."""

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import timedelta
from types import MappingProxyType

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    telegram_bot_token: str
    openai_api_key: str
    image_api_base_url: str | None = None
    image_model: str = "gpt-image-1"
    image_size: str = "1024x1536"
    generation_timeout_seconds: float = 60.0
    supabase_url: str
    supabase_service_key: str
    supabase_bucket: str = "generated-photos"
    redis_url: str = "redis://localhost:6379/0"
    session_backend: str = "redis"
    session_ttl_seconds: int = 21600
    session_ttl_ceiling_seconds: int = 21600
    revision_window_seconds: int = 60
    max_file_size_bytes: int = 10 * 1024 * 1024
    min_photo_dimension: int = 512
    optimistic_concurrency: bool = False
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


COLOR_LEXICON: Mapping[str, str] = MappingProxyType(
    {
        "red": "red",
        "crimson": "red",
        "blue": "blue",
        "navy": "navy blue",
        "white": "white",
        "black": "black",
        "gray": "gray",
        "grey": "gray",
        "green": "green",
        "yellow": "yellow",
        "brown": "brown",
        "pink": "pink",
        "purple": "purple",
        "violet": "purple",
        "orange": "orange",
        "maroon": "maroon",
        "beige": "beige",
        "cream": "cream",
    }
)

CLOTHING_LEXICON: Mapping[str, str] = MappingProxyType(
    {
        "shirt": "formal shirt",
        "dress shirt": "formal shirt",
        "t-shirt": "t-shirt",
        "tshirt": "t-shirt",
        "tee": "t-shirt",
        "polo": "polo shirt",
        "suit": "suit jacket",
        "jacket": "suit jacket",
        "blazer": "blazer",
    }
)

DEFAULT_PROMPT_PARAMETERS: Mapping[str, str] = MappingProxyType(
    {
        "clothing_type": "formal shirt",
        "clothing_color": "white",
        "background_color": "blue",
    }
)

ALLOWED_MIME_TYPES: tuple[str, ...] = ("image/jpeg", "image/png", "image/webp")


@dataclass(frozen=True)
class BotConfig:
    """Immutable runtime configuration shared by the conversation core."""

    default_parameters: Mapping[str, str] = field(
        default_factory=lambda: DEFAULT_PROMPT_PARAMETERS
    )
    color_lexicon: Mapping[str, str] = field(default_factory=lambda: COLOR_LEXICON)
    clothing_lexicon: Mapping[str, str] = field(
        default_factory=lambda: CLOTHING_LEXICON
    )
    revision_window: timedelta = timedelta(seconds=60)
    session_ttl_seconds: int = 21600
    generation_timeout_seconds: float = 60.0
    max_file_size_bytes: int = 10 * 1024 * 1024
    allowed_mime_types: tuple[str, ...] = ALLOWED_MIME_TYPES
    min_photo_dimension: int = 512
    optimistic_concurrency: bool = False

    def __post_init__(self) -> None:
        missing = {"clothing_type", "clothing_color", "background_color"} - set(
            self.default_parameters
        )
        if missing:
            raise ValueError(f"Missing default parameters: {sorted(missing)}")
        if self.revision_window <= timedelta(0):
            raise ValueError("revision_window must be positive")
        # The store must outlive the revision deadline so expiry stays observable.
        if timedelta(seconds=self.session_ttl_seconds) <= self.revision_window:
            raise ValueError("session_ttl_seconds must exceed the revision window")
        object.__setattr__(
            self, "default_parameters", MappingProxyType(dict(self.default_parameters))
        )
        object.__setattr__(
            self, "color_lexicon", MappingProxyType(dict(self.color_lexicon))
        )
        object.__setattr__(
            self, "clothing_lexicon", MappingProxyType(dict(self.clothing_lexicon))
        )


def build_bot_config(settings: Settings) -> BotConfig:
    """Build the conversation configuration from settings."""
    return BotConfig(
        revision_window=timedelta(seconds=settings.revision_window_seconds),
        session_ttl_seconds=min(
            settings.session_ttl_seconds, settings.session_ttl_ceiling_seconds
        ),
        generation_timeout_seconds=settings.generation_timeout_seconds,
        max_file_size_bytes=settings.max_file_size_bytes,
        min_photo_dimension=settings.min_photo_dimension,
        optimistic_concurrency=settings.optimistic_concurrency,
    )
