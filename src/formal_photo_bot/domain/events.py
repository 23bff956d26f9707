"""Inbound conversation events."""

from dataclasses import dataclass


@dataclass(frozen=True)
class PhotoReceived:
    """A validated photo arrived for a conversation."""

    conversation_id: str
    photo_ref: str


@dataclass(frozen=True)
class TextReceived:
    """A free-text message arrived for a conversation."""

    conversation_id: str
    text: str


@dataclass(frozen=True)
class CommandReceived:
    """A bot command such as ``start`` or ``cancel`` arrived."""

    conversation_id: str
    name: str


@dataclass(frozen=True)
class RevisionTimeout:
    """The revision window of a conversation may have elapsed."""

    conversation_id: str


ConversationEvent = PhotoReceived | TextReceived | CommandReceived | RevisionTimeout
