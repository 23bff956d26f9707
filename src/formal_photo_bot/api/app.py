"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request

from formal_photo_bot.api.telegram_models import (
    TelegramMessage,
    TelegramPhotoSize,
    TelegramUpdate,
)
from formal_photo_bot.app_logging import configure_logging
from formal_photo_bot.containers import AppContainer
from formal_photo_bot.domain.events import CommandReceived, PhotoReceived, TextReceived
from formal_photo_bot.domain.outcomes import Outcome, OutcomeKind
from formal_photo_bot.domain.sessions import PromptParameters
from formal_photo_bot.services.conversation import ProcessingCallback
from formal_photo_bot.services.replies import (
    INTERNAL_ERROR_TEXT,
    UNSUPPORTED_MESSAGE_TEXT,
    help_text,
    outcome_text,
    processing_text,
    result_caption,
    validation_text,
    welcome_text,
)
from formal_photo_bot.services.validation import PhotoCandidate
from formal_photo_bot.telegram_commands import (
    CHAT_MENU_BUTTON,
    parse_command,
    telegram_commands,
)

logger = logging.getLogger(__name__)


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        try:
            await app.state.container.telegram_client.set_my_commands(
                telegram_commands()
            )
            await app.state.container.telegram_client.set_chat_menu_button(
                CHAT_MENU_BUTTON
            )
        except Exception:
            logger.exception("Failed to sync Telegram bot commands")
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/telegram/webhook")
    async def telegram_webhook(
        update: TelegramUpdate, request: Request
    ) -> dict[str, str]:
        """Handle Telegram webhook updates.

        Always answers ok: Telegram retries failed deliveries, which would
        process the same photo twice.
        """
        state_container: AppContainer = request.app.state.container
        message = update.message
        if message is None:
            logger.info(
                "Ignoring update without a message",
                extra={"update_id": update.update_id},
            )
            return {"status": "ok"}

        try:
            await _handle_message(state_container, message)
        except Exception as exc:
            logger.exception(
                "Failed to handle Telegram update",
                extra={"update_id": update.update_id, "chat_id": message.chat.id},
            )
            try:
                await state_container.telegram_client.send_message(
                    chat_id=message.chat.id,
                    text=_format_error(state_container, exc, INTERNAL_ERROR_TEXT),
                )
            except Exception:
                logger.exception("Failed to send error reply")
        return {"status": "ok"}

    return app


async def _handle_message(container: AppContainer, message: TelegramMessage) -> None:
    chat_id = message.chat.id
    conversation_id = str(chat_id)
    service = container.conversation_service
    telegram_client = container.telegram_client

    command = parse_command(message.text) if message.text else None
    if command is not None:
        logger.info("Handling command", extra={"chat_id": chat_id, "command": command})
        outcome = await service.handle(CommandReceived(conversation_id, command))
        if outcome.kind is OutcomeKind.WELCOME:
            first_name = message.from_user.first_name if message.from_user else None
            text = welcome_text(
                first_name,
                PromptParameters(**container.bot_config.default_parameters),
            )
        elif outcome.kind is OutcomeKind.HELP:
            text = help_text(container.bot_config)
        else:
            text = outcome_text(outcome)
        if text:
            await telegram_client.send_message(chat_id=chat_id, text=text)
        return

    candidate = _photo_candidate(message)
    if candidate is not None:
        failure = container.photo_validator.validate(candidate)
        if failure is not None:
            logger.info(
                "Photo rejected",
                extra={"chat_id": chat_id, "reason": failure.reason.value},
            )
            await telegram_client.send_message(
                chat_id=chat_id, text=validation_text(failure)
            )
            return
        outcome = await service.handle(
            PhotoReceived(conversation_id, candidate.file_id),
            on_processing=_processing_notifier(container, chat_id, revision=False),
        )
        await _deliver(container, chat_id, outcome)
        return

    if message.text:
        outcome = await service.handle(
            TextReceived(conversation_id, message.text),
            on_processing=_processing_notifier(container, chat_id, revision=True),
        )
        await _deliver(container, chat_id, outcome)
        return

    logger.info("Unsupported message type", extra={"chat_id": chat_id})
    await telegram_client.send_message(chat_id=chat_id, text=UNSUPPORTED_MESSAGE_TEXT)


async def _deliver(container: AppContainer, chat_id: int, outcome: Outcome) -> None:
    """Send the generated photo or the outcome's text reply."""
    session = outcome.session
    if (
        outcome.kind is OutcomeKind.RESULT_DELIVERED
        and session is not None
        and session.processed_photo_ref
    ):
        await container.telegram_client.send_photo(
            chat_id=chat_id,
            photo=session.processed_photo_ref,
            caption=result_caption(
                session, outcome.revision, container.bot_config.revision_window
            ),
        )
        return
    text = outcome_text(outcome)
    if text:
        await container.telegram_client.send_message(chat_id=chat_id, text=text)


def _processing_notifier(
    container: AppContainer, chat_id: int, revision: bool
) -> ProcessingCallback:
    async def notify() -> None:
        await container.telegram_client.send_chat_action(
            chat_id=chat_id, action="upload_photo"
        )
        await container.telegram_client.send_message(
            chat_id=chat_id, text=processing_text(revision)
        )

    return notify


def _photo_candidate(message: TelegramMessage) -> PhotoCandidate | None:
    """Build validation input from a photo or a document message."""
    if message.photo:
        photo = _select_largest_photo(message.photo)
        return PhotoCandidate(
            file_id=photo.file_id,
            mime_type="image/jpeg",
            file_size=photo.file_size,
            width=photo.width,
            height=photo.height,
        )
    if message.document is not None:
        document = message.document
        return PhotoCandidate(
            file_id=document.file_id,
            mime_type=document.mime_type or "application/octet-stream",
            file_size=document.file_size,
        )
    return None


def _select_largest_photo(photos: list[TelegramPhotoSize]) -> TelegramPhotoSize:
    """Select the largest photo size from the Telegram payload."""
    return max(photos, key=lambda photo: (photo.width * photo.height))


def _format_error(
    state_container: AppContainer, exc: Exception, fallback: str
) -> str:
    """Return a user-facing error message with local debug info."""
    if state_container.settings.environment == "local":
        detail = f"{type(exc).__name__}: {exc}".strip()
        if detail:
            return f"{fallback} (debug: {detail})"
    return fallback
