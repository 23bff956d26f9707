"""Photo checks applied before a photo reaches the conversation."""

from dataclasses import dataclass
from enum import StrEnum

from formal_photo_bot.config import BotConfig


class ValidationReason(StrEnum):
    """Why a photo was rejected."""

    FILE_TOO_LARGE = "file_too_large"
    UNSUPPORTED_FORMAT = "unsupported_format"
    TOO_SMALL = "too_small"


@dataclass(frozen=True)
class PhotoCandidate:
    """Metadata of an incoming photo or image document."""

    file_id: str
    mime_type: str
    file_size: int | None = None
    width: int | None = None
    height: int | None = None


@dataclass(frozen=True)
class ValidationFailure:
    """A rejected photo with the limit that was exceeded."""

    reason: ValidationReason
    limit: int | str


@dataclass
class PhotoValidator:
    """Checks size, format and dimensions of incoming photos."""

    config: BotConfig

    def validate(self, candidate: PhotoCandidate) -> ValidationFailure | None:
        """Return the first failed check, or None when the photo is usable."""
        if (
            candidate.file_size is not None
            and candidate.file_size > self.config.max_file_size_bytes
        ):
            return ValidationFailure(
                ValidationReason.FILE_TOO_LARGE, self.config.max_file_size_bytes
            )
        if candidate.mime_type.lower() not in self.config.allowed_mime_types:
            return ValidationFailure(
                ValidationReason.UNSUPPORTED_FORMAT,
                ", ".join(self.config.allowed_mime_types),
            )
        if candidate.width is not None and candidate.height is not None:
            if min(candidate.width, candidate.height) < self.config.min_photo_dimension:
                return ValidationFailure(
                    ValidationReason.TOO_SMALL, self.config.min_photo_dimension
                )
        return None
