"""User-facing message templates."""

from collections.abc import Iterable
from datetime import timedelta

from formal_photo_bot.config import BotConfig
from formal_photo_bot.domain.outcomes import ErrorKind, Outcome, OutcomeKind
from formal_photo_bot.domain.sessions import PromptParameters, Session
from formal_photo_bot.services.validation import ValidationFailure, ValidationReason

REVISION_EXAMPLES = (
    '• "Change background to red"\n'
    '• "Wear a black polo"\n'
    '• "White background black shirt"'
)

INTERNAL_ERROR_TEXT = "Something went wrong on our side. Please try again."


def _format_names(mime_types: Iterable[str]) -> str:
    names = [
        "JPG" if mime == "image/jpeg" else mime.rsplit("/", 1)[-1].upper()
        for mime in mime_types
    ]
    if len(names) < 2:
        return "".join(names)
    return f"{', '.join(names[:-1])} or {names[-1]}"


def help_text(config: BotConfig) -> str:
    """Usage guide built from the running configuration."""
    colors = ", ".join(config.color_lexicon)
    clothing = ", ".join(config.clothing_lexicon)
    megabytes = config.max_file_size_bytes // (1024 * 1024)
    side = config.min_photo_dimension
    seconds = int(config.revision_window.total_seconds())
    return (
        "How to use Formal Photo Bot\n\n"
        "1. Send a photo of yourself. Plain background and plain clothes work "
        "best, and your face should be clearly visible.\n"
        "2. Wait for the formal portrait (about 30 seconds).\n"
        f"3. Optionally send a revision within {seconds} seconds, for example:\n"
        f"{REVISION_EXAMPLES}\n\n"
        f"Colors: {colors}.\n"
        f"Clothing: {clothing}.\n\n"
        f"Photo requirements: {_format_names(config.allowed_mime_types)}, "
        f"at most {megabytes} MB, at least {side}x{side} px, one person only.\n\n"
        "Commands:\n"
        "/start - start over\n"
        "/help - show this guide\n"
        "/cancel - cancel the current session"
    )

_ERROR_TEXT: dict[ErrorKind, str] = {
    ErrorKind.AI_ERROR: (
        "Something went wrong while generating your photo. "
        "Please send the photo again."
    ),
    ErrorKind.TIMEOUT_ERROR: "Generation took too long. Please send the photo again.",
    ErrorKind.SESSION_EXPIRED: "The revision window has closed. Send a new photo.",
    ErrorKind.NO_SESSION: "Please send a photo first.\n\nType /help for the guide.",
    ErrorKind.INTERNAL_ERROR: INTERNAL_ERROR_TEXT,
}


def welcome_text(first_name: str | None, defaults: PromptParameters) -> str:
    """Greeting sent for /start."""
    return (
        f"Hi {first_name or 'there'}!\n\n"
        "Welcome to Formal Photo Bot. Send a casual photo and I will turn it "
        "into a formal ID-style portrait.\n\n"
        f"Default outfit: {defaults.clothing_color} {defaults.clothing_type}\n"
        f"Default background: {defaults.background_color}\n\n"
        "Type /help for the full guide. Send your photo to begin!"
    )


def processing_text(revision: bool) -> str:
    """Progress message shown while a photo is generated."""
    if revision:
        return "Applying your revision...\n\nPlease wait a moment."
    return "Photo received! Processing...\n\nThis takes about 30 seconds."


def result_caption(session: Session, revision: bool, window: timedelta) -> str:
    """Caption for a delivered portrait."""
    parameters = session.prompt_parameters
    title = "Your revised formal photo" if revision else "Your formal photo is ready!"
    seconds = int(window.total_seconds())
    return (
        f"{title}\n\n"
        f"Outfit: {parameters.clothing_color} {parameters.clothing_type}\n"
        f"Background: {parameters.background_color}\n\n"
        f"Want changes? Send a message within {seconds} seconds.\n"
        "Or send a new photo to start over."
    )


def validation_text(failure: ValidationFailure) -> str:
    """Explain why a photo was rejected."""
    if failure.reason is ValidationReason.FILE_TOO_LARGE:
        megabytes = int(failure.limit) // (1024 * 1024)
        return f"The file is too large (max {megabytes} MB). Please compress it."
    if failure.reason is ValidationReason.UNSUPPORTED_FORMAT:
        allowed = str(failure.limit).split(", ")
        return f"Unsupported file format. Please use {_format_names(allowed)}."
    return (
        f"The photo is too small (min {failure.limit}x{failure.limit} px). "
        "Please send a larger photo."
    )


def outcome_text(outcome: Outcome) -> str | None:
    """Text reply for an outcome; None when no text is needed."""
    kind = outcome.kind
    if kind is OutcomeKind.NOT_UNDERSTOOD:
        return (
            "Sorry, I couldn't understand that revision.\n\n"
            f"Examples:\n{REVISION_EXAMPLES}"
        )
    if kind is OutcomeKind.CANCELLED:
        return "Session cancelled.\n\nSend a new photo to start again."
    if kind is OutcomeKind.NOTHING_TO_CANCEL:
        return "There is no active session to cancel.\n\nSend a photo to begin."
    if kind is OutcomeKind.UNKNOWN_COMMAND:
        return "Unknown command. Type /help for help."
    if kind in {
        OutcomeKind.RESULT_DELIVERED,
        OutcomeKind.WELCOME,
        OutcomeKind.HELP,
        OutcomeKind.IGNORED,
    }:
        return None
    if outcome.error is not None:
        return _ERROR_TEXT.get(outcome.error, _ERROR_TEXT[ErrorKind.INTERNAL_ERROR])
    return _ERROR_TEXT[ErrorKind.INTERNAL_ERROR]


UNSUPPORTED_MESSAGE_TEXT = (
    "This message type is not supported.\n\n"
    "Please send a photo or text. Type /help for help."
)
