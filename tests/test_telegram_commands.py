"""Tests for Telegram command definitions."""

import pytest

from formal_photo_bot.telegram_commands import (
    BotCommand,
    parse_command,
    telegram_commands,
)


def test_telegram_commands_include_start() -> None:
    commands = telegram_commands()

    assert {"command": "start", "description": "Start over with a new photo"} in (
        commands
    )
    assert len(commands) == len(list(BotCommand))


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("/start", "start"),
        ("/Help extra words", "help"),
        ("/cancel@FormalPhotoBot", "cancel"),
        ("/", ""),
        ("change background to red", None),
    ],
)
def test_parse_command(text: str, expected: str | None) -> None:
    assert parse_command(text) == expected
