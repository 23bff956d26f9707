"""Telegram API client adapter."""

from dataclasses import dataclass
from typing import Protocol

import httpx


class TelegramClient(Protocol):
    """Interface for Telegram API interactions."""

    async def send_message(self, chat_id: int, text: str) -> None:
        """Send a text message to a Telegram chat."""

    async def send_photo(self, chat_id: int, photo: str, caption: str) -> None:
        """Send a photo by URL or file_id with a caption."""

    async def send_chat_action(self, chat_id: int, action: str) -> None:
        """Show a chat action such as ``upload_photo``."""

    async def set_my_commands(self, commands: list[dict[str, str]]) -> None:
        """Set the bot command list."""

    async def set_chat_menu_button(
        self, menu_button: dict[str, object] | None = None
    ) -> None:
        """Set the chat menu button."""


@dataclass
class HttpxTelegramClient:
    """Telegram client implemented with httpx."""

    bot_token: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, bot_token: str) -> "HttpxTelegramClient":
        """Create a Telegram client with a managed httpx session."""
        return cls(bot_token=bot_token, http_client=httpx.AsyncClient())

    async def _call(
        self, method: str, payload: dict[str, object], timeout: float = 10
    ) -> None:
        url = f"https://api.telegram.org/bot{self.bot_token}/{method}"
        response = await self.http_client.post(url, json=payload, timeout=timeout)
        response.raise_for_status()

    async def send_message(self, chat_id: int, text: str) -> None:
        """Send a message using Telegram's sendMessage API."""
        await self._call("sendMessage", {"chat_id": chat_id, "text": text})

    async def send_photo(self, chat_id: int, photo: str, caption: str) -> None:
        """Send a photo using Telegram's sendPhoto API."""
        await self._call(
            "sendPhoto",
            {"chat_id": chat_id, "photo": photo, "caption": caption},
            timeout=30,
        )

    async def send_chat_action(self, chat_id: int, action: str) -> None:
        """Send a chat action indicator."""
        await self._call("sendChatAction", {"chat_id": chat_id, "action": action})

    async def close(self) -> None:
        """Close the underlying HTTP client session."""
        await self.http_client.aclose()

    async def set_my_commands(self, commands: list[dict[str, str]]) -> None:
        """Set the bot command list."""
        await self._call("setMyCommands", {"commands": commands})

    async def set_chat_menu_button(
        self, menu_button: dict[str, object] | None = None
    ) -> None:
        """Set the chat menu button."""
        await self._call(
            "setChatMenuButton", {"menu_button": menu_button or {"type": "commands"}}
        )
