"""Outcomes and error taxonomy reported by the conversation core."""

from dataclasses import dataclass
from enum import StrEnum

from formal_photo_bot.domain.sessions import Session


class ErrorKind(StrEnum):
    """Failure categories surfaced to the user."""

    VALIDATION_ERROR = "validation_error"
    AI_ERROR = "ai_error"
    TIMEOUT_ERROR = "timeout_error"
    PARSE_EMPTY = "parse_empty"
    SESSION_EXPIRED = "session_expired"
    NO_SESSION = "no_session"
    INTERNAL_ERROR = "internal_error"


class OutcomeKind(StrEnum):
    """User-visible result of handling one event."""

    RESULT_DELIVERED = "result_delivered"
    VALIDATION_REJECTED = "validation_rejected"
    NOT_UNDERSTOOD = "not_understood"
    EXPIRED = "expired"
    UNKNOWN_COMMAND = "unknown_command"
    INTERNAL_ERROR = "internal_error"
    GENERATION_FAILED = "generation_failed"
    NO_SESSION = "no_session"
    WELCOME = "welcome"
    HELP = "help"
    CANCELLED = "cancelled"
    NOTHING_TO_CANCEL = "nothing_to_cancel"
    IGNORED = "ignored"


@dataclass(frozen=True)
class Outcome:
    """Result of one state-machine step."""

    kind: OutcomeKind
    error: ErrorKind | None = None
    session: Session | None = None
    revision: bool = False


class GenerationError(Exception):
    """Raised when the image-generation collaborator fails."""

    def __init__(self, kind: ErrorKind, message: str = "") -> None:
        super().__init__(message or kind.value)
        self.kind = kind
