"""Tests for user-facing reply texts."""

from datetime import UTC, datetime, timedelta

from formal_photo_bot.config import BotConfig
from formal_photo_bot.domain.outcomes import ErrorKind, Outcome, OutcomeKind
from formal_photo_bot.domain.sessions import PromptParameters, Session, SessionState
from formal_photo_bot.services.replies import (
    INTERNAL_ERROR_TEXT,
    help_text,
    outcome_text,
    result_caption,
    validation_text,
    welcome_text,
)
from formal_photo_bot.services.validation import ValidationFailure, ValidationReason

_PARAMETERS = PromptParameters(
    clothing_type="polo shirt", clothing_color="black", background_color="red"
)


def test_welcome_mentions_defaults() -> None:
    text = welcome_text("Ana", _PARAMETERS)

    assert text.startswith("Hi Ana!")
    assert "black polo shirt" in text
    assert "red" in text


def test_result_caption_lists_parameters_and_window() -> None:
    now = datetime(2024, 5, 1, tzinfo=UTC)
    session = Session(
        id="1",
        state=SessionState.WAITING_REVISION,
        prompt_parameters=_PARAMETERS,
        created_at=now,
        last_activity_at=now,
        revision_deadline=now + timedelta(seconds=60),
    )

    caption = result_caption(session, revision=True, window=timedelta(seconds=60))

    assert caption.startswith("Your revised formal photo")
    assert "Outfit: black polo shirt" in caption
    assert "within 60 seconds" in caption


def test_validation_text_mentions_limits() -> None:
    too_large = ValidationFailure(ValidationReason.FILE_TOO_LARGE, 10 * 1024 * 1024)
    too_small = ValidationFailure(ValidationReason.TOO_SMALL, 512)

    assert "10 MB" in validation_text(too_large)
    assert "512x512" in validation_text(too_small)


def test_outcome_text_by_kind() -> None:
    assert outcome_text(Outcome(kind=OutcomeKind.HELP)) is None
    assert outcome_text(Outcome(kind=OutcomeKind.RESULT_DELIVERED)) is None
    assert outcome_text(Outcome(kind=OutcomeKind.IGNORED)) is None
    assert "couldn't understand" in outcome_text(
        Outcome(kind=OutcomeKind.NOT_UNDERSTOOD, error=ErrorKind.PARSE_EMPTY)
    )
    assert "too long" in outcome_text(
        Outcome(kind=OutcomeKind.GENERATION_FAILED, error=ErrorKind.TIMEOUT_ERROR)
    )
    assert "revision window has closed" in outcome_text(
        Outcome(kind=OutcomeKind.EXPIRED, error=ErrorKind.SESSION_EXPIRED)
    )
    assert "send a photo first" in outcome_text(
        Outcome(kind=OutcomeKind.NO_SESSION, error=ErrorKind.NO_SESSION)
    ).lower()
    assert outcome_text(
        Outcome(kind=OutcomeKind.GENERATION_FAILED, error=ErrorKind.INTERNAL_ERROR)
    ) == INTERNAL_ERROR_TEXT


def test_help_text_follows_config() -> None:
    config = BotConfig(
        color_lexicon={"teal": "teal", "merah": "red"},
        clothing_lexicon={"kemeja": "formal shirt"},
        max_file_size_bytes=5 * 1024 * 1024,
        allowed_mime_types=("image/jpeg", "image/png"),
        min_photo_dimension=256,
    )

    text = help_text(config)

    assert "Colors: teal, merah." in text
    assert "Clothing: kemeja." in text
    assert "JPG or PNG, at most 5 MB, at least 256x256 px" in text
    assert "512" not in text


def test_unsupported_format_lists_allowed_types() -> None:
    failure = ValidationFailure(
        ValidationReason.UNSUPPORTED_FORMAT, "image/jpeg, image/png, image/webp"
    )

    assert validation_text(failure).endswith("Please use JPG, PNG or WEBP.")
