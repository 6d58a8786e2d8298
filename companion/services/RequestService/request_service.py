"""
Multimodal request assembly for conversational turns.

Every user turn carries the agent's own profile picture so the model keeps a
consistent idea of "self". How that picture is introduced is controlled by
the ReferenceFraming policy.
"""

from __future__ import annotations

import logging
from enum import Enum

from google.genai import types

from companion.components.codec.binary_codec import decode_base64
from companion.entities.agent import AgentConfig, Attachment
from companion.entities.media import MediaPayload
from companion.services.ReferenceService.reference_service_interface import (
    ReferenceServiceInterface,
)
from companion.services.RequestService.request_service_interface import (
    RequestServiceInterface,
)

PLACEHOLDER_TEXT = "..."

LABELED_MARKER_TEMPLATE = (
    "REFERENSI IDENTITAS: Gambar berikut adalah foto profil kamu ({name}), "
    "bukan foto yang baru dikirim user."
)
IMPLICIT_RESTATEMENT_TEMPLATE = (
    "REFERENSI: Ini adalah foto profil kamu ({name}). "
    "Selalu ingat wajah kamu seperti ini."
)


class ReferenceFraming(str, Enum):
    """How the identity reference image is presented to the model."""

    # Marker text first, then the image
    LABELED = "labeled"
    # Image first, then a re-statement that it is the agent's face
    IMPLICIT = "implicit"


class RequestService(RequestServiceInterface):
    def __init__(
        self,
        reference_service: ReferenceServiceInterface,
        logger: logging.Logger,
        framing: ReferenceFraming = ReferenceFraming.LABELED,
        placeholder_text: str = PLACEHOLDER_TEXT,
    ) -> None:
        self.reference_service = reference_service
        self.logger = logger
        self.framing = ReferenceFraming(framing)
        self.placeholder_text = placeholder_text

    def _frame_reference(self, reference: MediaPayload, name: str) -> list[types.Part]:
        image = types.Part.from_bytes(data=reference.data, mime_type=reference.mime_type)
        if self.framing is ReferenceFraming.IMPLICIT:
            text = IMPLICIT_RESTATEMENT_TEMPLATE.format(name=name)
            return [image, types.Part.from_text(text=text)]

        text = LABELED_MARKER_TEMPLATE.format(name=name)
        return [types.Part.from_text(text=text), image]

    async def build_turn_parts(
        self,
        config: AgentConfig,
        attachments: list[Attachment] | None,
        prompt: str,
    ) -> list[types.Part]:
        parts: list[types.Part] = []

        reference = await self.reference_service.resolve(config.get("profile_pic"))
        if reference is not None:
            parts.extend(self._frame_reference(reference, config["name"]))
        elif config.get("profile_pic"):
            self.logger.info("Identity reference omitted for %s", config["name"])

        for attachment in attachments or []:
            parts.append(
                types.Part.from_bytes(
                    data=decode_base64(attachment["data"]),
                    mime_type=attachment["mime_type"],
                )
            )

        if prompt and prompt.strip():
            parts.append(types.Part.from_text(text=prompt))

        if not parts:
            parts.append(types.Part.from_text(text=self.placeholder_text))

        return parts

    async def build_user_turn(
        self,
        config: AgentConfig,
        attachments: list[Attachment] | None,
        prompt: str,
    ) -> types.Content:
        parts = await self.build_turn_parts(config, attachments, prompt)
        return types.Content(role="user", parts=parts)
