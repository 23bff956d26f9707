"""ASGI entrypoint for the formal photo bot API."""

from formal_photo_bot.api.app import create_app
from formal_photo_bot.containers import build_container

app = create_app(build_container())
