"""
AgentService: runs a full turn (reply, photo reply, voice note).

The text reply is the only mandatory artifact. Photo and speech run
concurrently once the reply is known; their generation and API errors are
attached to the result instead of discarding the reply.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable
from typing import TypeVar

from google.genai import errors, types
from langfuse import observe

from companion.components.text.text_sanitizer import TextSanitizer
from companion.entities.agent import AgentConfig, Attachment
from companion.entities.errors import GenerationError
from companion.services.AgentService.agent_service_interface import (
    AgentServiceInterface,
    AgentTurnResult,
    ArtifactError,
)
from companion.services.ConversationService.conversation_service_interface import (
    ConversationServiceInterface,
)
from companion.services.PhotoService.photo_service_interface import (
    PhotoServiceInterface,
)
from companion.services.SpeechService.speech_service_interface import (
    SpeechServiceInterface,
)

T = TypeVar("T")

# Failures of the optional artifacts that must not cost the text reply
CAPTURED_ERRORS: tuple[type[Exception], ...] = (GenerationError, errors.APIError)


class AgentService(AgentServiceInterface):
    def __init__(
        self,
        conversation_service: ConversationServiceInterface,
        photo_service: PhotoServiceInterface,
        speech_service: SpeechServiceInterface,
        sanitizer: TextSanitizer,
        logger: logging.Logger,
    ) -> None:
        self.conversation_service = conversation_service
        self.photo_service = photo_service
        self.speech_service = speech_service
        self.sanitizer = sanitizer
        self.logger = logger

    async def _capture(
        self, label: str, work: Awaitable[T]
    ) -> tuple[T | None, ArtifactError | None]:
        try:
            return await work, None
        except CAPTURED_ERRORS as e:
            self.logger.warning("%s failed: %s", label, getattr(e, "code", e))
            return None, e

    async def _skip(self) -> tuple[None, None]:
        return None, None

    @observe()
    async def run_turn(
        self,
        prompt: str,
        config: AgentConfig,
        history: list[types.Content],
        attachments: list[Attachment] | None = None,
        *,
        with_photo: bool = True,
        with_speech: bool = True,
    ) -> AgentTurnResult:
        turn_start = len(history)
        reply_text = await self.conversation_service.generate_reply(
            prompt, config, history, attachments
        )
        display_text = self.sanitizer.clean(reply_text)

        photo_task = (
            self._capture("Photo reply", self.photo_service.generate_photo(reply_text, config))
            if with_photo
            else self._skip()
        )
        speech_task = (
            self._capture(
                "Speech",
                self.speech_service.synthesize_speech(reply_text, config.get("voice")),
            )
            if with_speech
            else self._skip()
        )
        outcomes = await asyncio.gather(photo_task, speech_task, return_exceptions=True)

        for outcome in outcomes:
            if isinstance(outcome, BaseException):
                # The caller never sees this reply, so the turn is rolled back
                del history[turn_start:]
                raise outcome

        (photo, photo_error), (audio, speech_error) = outcomes
        history.append(
            types.Content(role="model", parts=[types.Part.from_text(text=reply_text)])
        )

        return AgentTurnResult(
            reply_text=reply_text,
            display_text=display_text,
            photo=photo,
            audio_base64=audio,
            photo_error=photo_error,
            speech_error=speech_error,
        )
