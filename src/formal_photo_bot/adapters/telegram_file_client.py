"""Download user photos from Telegram by file_id."""

from dataclasses import dataclass
from typing import Protocol

import httpx
from pydantic import BaseModel

_TELEGRAM_API = "https://api.telegram.org"


class TelegramFile(BaseModel):
    """Result of Telegram's getFile call."""

    file_id: str
    file_path: str
    file_size: int | None = None


class TelegramFileClient(Protocol):
    """Interface for fetching photo bytes."""

    async def download_file_bytes(self, file_id: str) -> bytes:
        """Download a Telegram file and return its bytes."""


@dataclass
class HttpxTelegramFileClient(TelegramFileClient):
    """Telegram file client using httpx.

    Files above ``max_file_size_bytes`` are refused before and after the
    download, since image documents do not always report their size up front.
    """

    bot_token: str
    http_client: httpx.AsyncClient
    max_file_size_bytes: int = 10 * 1024 * 1024

    @classmethod
    def create(
        cls, bot_token: str, max_file_size_bytes: int = 10 * 1024 * 1024
    ) -> "HttpxTelegramFileClient":
        """Create a Telegram file client with a managed httpx session."""
        return cls(
            bot_token=bot_token,
            http_client=httpx.AsyncClient(),
            max_file_size_bytes=max_file_size_bytes,
        )

    async def get_file(self, file_id: str) -> TelegramFile:
        """Resolve a file_id to its download path."""
        response = await self.http_client.get(
            f"{_TELEGRAM_API}/bot{self.bot_token}/getFile",
            params={"file_id": file_id},
            timeout=10,
        )
        response.raise_for_status()
        payload = response.json()
        if not payload.get("ok"):
            raise RuntimeError(
                f"Telegram getFile failed: {payload.get('description', 'unknown')}"
            )
        return TelegramFile.model_validate(payload["result"])

    async def download_file_bytes(self, file_id: str) -> bytes:
        """Download the photo bytes behind a file_id."""
        telegram_file = await self.get_file(file_id)
        self._check_size(telegram_file.file_size)
        response = await self.http_client.get(
            f"{_TELEGRAM_API}/file/bot{self.bot_token}/{telegram_file.file_path}",
            timeout=20,
        )
        response.raise_for_status()
        self._check_size(len(response.content))
        return response.content

    def _check_size(self, size: int | None) -> None:
        if size is not None and size > self.max_file_size_bytes:
            raise ValueError(
                f"Telegram file is {size} bytes, limit is {self.max_file_size_bytes}"
            )

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
