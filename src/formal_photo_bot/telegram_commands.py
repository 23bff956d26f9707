"""Telegram bot command configuration."""

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class TelegramCommand:
    """Declarative bot command definition."""

    command: str
    description: str


class BotCommand(Enum):
    """Enum of bot commands (single source of truth)."""

    START = TelegramCommand("start", "Start over with a new photo")
    HELP = TelegramCommand("help", "How to use the bot and revision examples")
    CANCEL = TelegramCommand("cancel", "Cancel the current photo session")


def telegram_commands() -> list[dict[str, str]]:
    """Return commands formatted for Telegram API."""
    return [
        {"command": entry.value.command, "description": entry.value.description}
        for entry in BotCommand
    ]


def parse_command(text: str) -> str | None:
    """Return the command name from ``/name[@bot] args``, if text is a command."""
    if not text.startswith("/"):
        return None
    head = text.split(maxsplit=1)[0][1:]
    name = head.split("@", maxsplit=1)[0]
    return name.lower()


CHAT_MENU_BUTTON: dict[str, object] = {"type": "commands"}
