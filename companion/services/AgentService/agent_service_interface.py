from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from google.genai import errors, types

from companion.entities.agent import AgentConfig, Attachment
from companion.entities.errors import GenerationError
from companion.entities.media import MediaPayload

# Why an optional artifact (photo, voice note) is missing
ArtifactError = GenerationError | errors.APIError


@dataclass(frozen=True)
class AgentTurnResult:
    """Everything produced for one user turn."""

    reply_text: str
    display_text: str
    photo: MediaPayload | None = None
    audio_base64: str | None = None
    photo_error: ArtifactError | None = None
    speech_error: ArtifactError | None = None


class AgentServiceInterface(ABC):
    @abstractmethod
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
        """Reply to ``prompt`` and produce the optional photo and voice note."""
