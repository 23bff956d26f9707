"""Conversation state machine for photo generation and revisions."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol, assert_never

from formal_photo_bot.config import BotConfig
from formal_photo_bot.domain.events import (
    CommandReceived,
    ConversationEvent,
    PhotoReceived,
    RevisionTimeout,
    TextReceived,
)
from formal_photo_bot.domain.outcomes import (
    ErrorKind,
    GenerationError,
    Outcome,
    OutcomeKind,
)
from formal_photo_bot.domain.sessions import PromptParameters, Session, SessionState
from formal_photo_bot.services.revision_parser import RevisionParser
from formal_photo_bot.services.session_store import (
    SessionStore,
    SessionStoreError,
    StaleSessionError,
)
from formal_photo_bot.services.timeout_policy import RevisionTimeoutPolicy

logger = logging.getLogger(__name__)

ProcessingCallback = Callable[[], Awaitable[None]]


class PortraitGenerator(Protocol):
    """Interface for the image-generation collaborator."""

    async def generate(self, photo_ref: str, parameters: PromptParameters) -> str:
        """Return a reference to the generated image."""


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class ConversationService:
    """State machine over IDLE, PROCESSING, WAITING_REVISION and ERROR.

    Each call handles one event end to end: read the session, decide the
    transition, run at most one generation attempt and write the session
    back. A missing session is the IDLE state. ``handle`` never raises;
    every failure resolves to an Outcome with an ErrorKind.
    """

    store: SessionStore
    parser: RevisionParser
    generator: PortraitGenerator
    timeout_policy: RevisionTimeoutPolicy
    config: BotConfig
    clock: Callable[[], datetime] = field(default=_utcnow)

    async def handle(
        self,
        event: ConversationEvent,
        on_processing: ProcessingCallback | None = None,
    ) -> Outcome:
        """Apply one inbound event and return its outcome."""
        try:
            return await self._dispatch(event, on_processing)
        except StaleSessionError:
            logger.warning(
                "Concurrent session update detected",
                extra={"conversation_id": event.conversation_id},
            )
        except SessionStoreError:
            logger.exception(
                "Session store failure",
                extra={"conversation_id": event.conversation_id},
            )
        except Exception:
            logger.exception(
                "Unexpected conversation failure",
                extra={"conversation_id": event.conversation_id},
            )
        return Outcome(kind=OutcomeKind.INTERNAL_ERROR, error=ErrorKind.INTERNAL_ERROR)

    async def _dispatch(
        self,
        event: ConversationEvent,
        on_processing: ProcessingCallback | None,
    ) -> Outcome:
        if isinstance(event, PhotoReceived):
            return await self._on_photo(event, on_processing)
        if isinstance(event, TextReceived):
            return await self._on_text(event, on_processing)
        if isinstance(event, CommandReceived):
            return self._on_command(event)
        if isinstance(event, RevisionTimeout):
            return self._on_timeout(event)
        assert_never(event)

    async def _on_photo(
        self, event: PhotoReceived, on_processing: ProcessingCallback | None
    ) -> Outcome:
        session = self.store.get_or_create(event.conversation_id)
        if session.state is SessionState.WAITING_REVISION:
            logger.info(
                "New photo replaces pending revision",
                extra={"conversation_id": session.id},
            )
        processing = self._put(
            session.model_copy(
                update={
                    "state": SessionState.PROCESSING,
                    "original_photo_ref": event.photo_ref,
                    "processed_photo_ref": None,
                    "revision_deadline": None,
                }
            ),
            base=session,
        )
        return await self._generate(processing, False, on_processing)

    async def _on_text(
        self, event: TextReceived, on_processing: ProcessingCallback | None
    ) -> Outcome:
        session = self.store.get(event.conversation_id)
        if session is None or session.state is not SessionState.WAITING_REVISION:
            return Outcome(
                kind=OutcomeKind.NO_SESSION,
                error=ErrorKind.NO_SESSION,
                session=session,
            )

        if self.timeout_policy.is_expired(session.revision_deadline, self.clock()):
            self.store.remove(session.id)
            return Outcome(kind=OutcomeKind.EXPIRED, error=ErrorKind.SESSION_EXPIRED)

        update = self.parser.parse(event.text)
        if not update.is_valid:
            return Outcome(
                kind=OutcomeKind.NOT_UNDERSTOOD,
                error=ErrorKind.PARSE_EMPTY,
                session=session,
            )

        processing = self._put(
            session.model_copy(
                update={
                    "state": SessionState.PROCESSING,
                    "prompt_parameters": session.prompt_parameters.merge(update),
                    "revision_deadline": None,
                }
            ),
            base=session,
        )
        return await self._generate(processing, True, on_processing)

    def _on_command(self, event: CommandReceived) -> Outcome:
        name = event.name.lower()
        if name == "start":
            self.store.remove(event.conversation_id)
            return Outcome(kind=OutcomeKind.WELCOME)
        if name == "help":
            return Outcome(kind=OutcomeKind.HELP)
        if name == "cancel":
            session = self.store.get(event.conversation_id)
            self.store.remove(event.conversation_id)
            if session is None or session.state is SessionState.IDLE:
                return Outcome(kind=OutcomeKind.NOTHING_TO_CANCEL)
            return Outcome(kind=OutcomeKind.CANCELLED)
        return Outcome(kind=OutcomeKind.UNKNOWN_COMMAND)

    def _on_timeout(self, event: RevisionTimeout) -> Outcome:
        session = self.store.get(event.conversation_id)
        if (
            session is not None
            and session.state is SessionState.WAITING_REVISION
            and self.timeout_policy.is_expired(session.revision_deadline, self.clock())
        ):
            self.store.remove(session.id)
            return Outcome(kind=OutcomeKind.EXPIRED, error=ErrorKind.SESSION_EXPIRED)
        return Outcome(kind=OutcomeKind.IGNORED, session=session)

    async def _generate(
        self,
        session: Session,
        revision: bool,
        on_processing: ProcessingCallback | None,
    ) -> Outcome:
        if on_processing is not None:
            try:
                await on_processing()
            except Exception:
                logger.exception(
                    "Processing notification failed",
                    extra={"conversation_id": session.id},
                )

        try:
            output_ref = await asyncio.wait_for(
                self.generator.generate(
                    session.original_photo_ref or "", session.prompt_parameters
                ),
                timeout=self.config.generation_timeout_seconds,
            )
        except TimeoutError:
            return self._fail(session, ErrorKind.TIMEOUT_ERROR, revision)
        except GenerationError as exc:
            return self._fail(session, exc.kind, revision)

        stored = self._put(
            session.model_copy(
                update={
                    "state": SessionState.WAITING_REVISION,
                    "processed_photo_ref": output_ref,
                    "revision_deadline": self.timeout_policy.deadline_from(
                        self.clock()
                    ),
                }
            ),
            base=session,
        )
        logger.info(
            "Generation succeeded",
            extra={"conversation_id": session.id, "revision": revision},
        )
        return Outcome(
            kind=OutcomeKind.RESULT_DELIVERED, session=stored, revision=revision
        )

    def _fail(self, session: Session, kind: ErrorKind, revision: bool) -> Outcome:
        logger.warning(
            "Generation failed",
            extra={"conversation_id": session.id, "error_kind": kind.value},
        )
        stored = self._put(
            session.model_copy(update={"state": SessionState.ERROR}),
            base=session,
        )
        return Outcome(
            kind=OutcomeKind.GENERATION_FAILED,
            error=kind,
            session=stored,
            revision=revision,
        )

    def _put(self, session: Session, base: Session) -> Session:
        expected = base.version if self.config.optimistic_concurrency else None
        return self.store.put(session, expected_version=expected)
