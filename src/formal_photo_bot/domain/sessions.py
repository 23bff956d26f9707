"""Domain models for conversation sessions."""

import json
from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel


class SessionState(StrEnum):
    """Conversation states persisted with a session."""

    IDLE = "idle"
    PROCESSING = "processing"
    WAITING_REVISION = "waiting_revision"
    ERROR = "error"


class PromptParameters(BaseModel):
    """Generation parameters carried across revisions."""

    model_config = ConfigDict(frozen=True)

    clothing_type: str
    clothing_color: str
    background_color: str

    def merge(self, update: "RevisionUpdate") -> "PromptParameters":
        """Return parameters with the fields present in the update applied."""
        return self.model_copy(update=update.as_dict())


class RevisionUpdate(BaseModel):
    """Partial parameter update extracted from a revision request."""

    model_config = ConfigDict(frozen=True)

    background_color: str | None = None
    clothing_type: str | None = None
    clothing_color: str | None = None

    @property
    def is_valid(self) -> bool:
        """Return true when at least one field was extracted."""
        return bool(self.as_dict())

    def as_dict(self) -> dict[str, str]:
        """Return only the fields that were set."""
        return self.model_dump(exclude_none=True)


class Session(BaseModel):
    """Represents one user's photo-editing conversation."""

    model_config = ConfigDict(
        frozen=True, alias_generator=to_camel, populate_by_name=True
    )

    id: str
    state: SessionState
    original_photo_ref: str | None = None
    processed_photo_ref: str | None = None
    prompt_parameters: PromptParameters
    created_at: datetime
    last_activity_at: datetime
    revision_deadline: datetime | None = None
    version: int = 0

    @model_validator(mode="after")
    def _check_deadline(self) -> "Session":
        waiting = self.state is SessionState.WAITING_REVISION
        if waiting != (self.revision_deadline is not None):
            raise ValueError("revision_deadline is set only while waiting_revision")
        return self

    def to_json(self) -> str:
        """Serialize the session for the key-value store."""
        payload = self.model_dump(mode="json", by_alias=True)
        if self.revision_deadline is None:
            payload.pop("revisionDeadline")
        return json.dumps(payload)

    @classmethod
    def from_json(cls, raw: str) -> "Session":
        """Decode a stored session; raises ValueError on corrupt data."""
        return cls.model_validate_json(raw)
