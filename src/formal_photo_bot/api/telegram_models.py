"""Pydantic models for the parts of Telegram updates the bot reads."""

from pydantic import BaseModel, Field


class TelegramUser(BaseModel):
    """Sender of a message."""

    id: int
    first_name: str | None = None
    username: str | None = None


class TelegramChat(BaseModel):
    """Chat a message belongs to; its id identifies the conversation."""

    id: int
    type: str


class TelegramPhotoSize(BaseModel):
    """One resolution of a compressed photo."""

    file_id: str
    file_unique_id: str
    width: int
    height: int
    file_size: int | None = None


class TelegramDocument(BaseModel):
    """File attachment; accepted when it is an image."""

    file_id: str
    file_unique_id: str
    file_name: str | None = None
    mime_type: str | None = None
    file_size: int | None = None


class TelegramMessage(BaseModel):
    """Incoming message with a command, text, photo or document."""

    message_id: int
    date: int
    chat: TelegramChat
    from_user: TelegramUser | None = Field(default=None, alias="from")
    text: str | None = None
    photo: list[TelegramPhotoSize] | None = None
    document: TelegramDocument | None = None


class TelegramUpdate(BaseModel):
    """Webhook update; only ``message`` updates are handled."""

    update_id: int
    message: TelegramMessage | None = None
