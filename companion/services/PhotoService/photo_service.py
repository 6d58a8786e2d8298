"""
Photo replies ("PAP").

A text reply may carry ``[CAPTION: ...]``. The caption is first expanded into
an English photographic prompt by the text model, then rendered by the image
model together with the agent's profile picture so the face stays consistent.
"""

from __future__ import annotations

import logging

from google import genai
from google.genai import types
from langfuse import observe

from companion.components.codec.binary_codec import as_bytes
from companion.components.genai.response_parts import is_safety_stop, iter_parts
from companion.components.retry.retry_policy import RetryPolicy, with_retry
from companion.components.text.text_sanitizer import extract_caption
from companion.entities.agent import AgentConfig
from companion.entities.errors import ImageNotFound, ImageSafetyBlocked
from companion.entities.media import PNG_MIME_TYPE, MediaPayload
from companion.services.PhotoService.photo_service_interface import (
    PhotoServiceInterface,
)
from companion.services.ReferenceService.reference_service_interface import (
    ReferenceServiceInterface,
)

REFUSAL_MARKERS: tuple[str, ...] = ("cannot", "sorry")

EXPANSION_TEMPLATE = (
    'Expand this into a high-quality photorealistic English image prompt for {name}: "{caption}". '
    "Focus on raw, realistic photography style. Reply with the prompt only."
)
RENDER_TEMPLATE = (
    "Generate a photorealistic image of this exact person ({name}). "
    "SCENE: {scene}. Match the face exactly to the reference provided."
)


class PhotoService(PhotoServiceInterface):
    def __init__(
        self,
        client: genai.Client,
        reference_service: ReferenceServiceInterface,
        text_model_name: str,
        image_model_name: str,
        safety_settings: list[types.SafetySetting],
        retry_policy: RetryPolicy,
        logger: logging.Logger,
    ) -> None:
        self.client = client
        self.reference_service = reference_service
        self.text_model_name = text_model_name
        self.image_model_name = image_model_name
        self.safety_settings = safety_settings
        self.retry_policy = retry_policy
        self.logger = logger

    async def _expand_caption(self, caption: str, config: AgentConfig) -> str:
        """Best effort: any failure falls back to the raw caption."""
        prompt = EXPANSION_TEMPLATE.format(name=config["name"], caption=caption)
        try:
            response = await self.client.aio.models.generate_content(
                model=self.text_model_name,
                contents=[
                    types.Content(role="user", parts=[types.Part.from_text(text=prompt)])
                ],
                config=types.GenerateContentConfig(safety_settings=self.safety_settings),
            )
        except Exception as e:
            self.logger.warning("Caption expansion failed, using raw caption: %s", e)
            return caption

        expanded = (response.text or "").strip()
        return expanded or caption

    def _extract_image(self, response: types.GenerateContentResponse) -> MediaPayload:
        if is_safety_stop(response):
            raise ImageSafetyBlocked()

        for part in iter_parts(response):
            if part.inline_data is not None and part.inline_data.data:
                return MediaPayload(
                    data=as_bytes(part.inline_data.data), mime_type=PNG_MIME_TYPE
                )
            if part.text and any(m in part.text.lower() for m in REFUSAL_MARKERS):
                self.logger.warning("Image model refused: %s", part.text[:200])
                raise ImageSafetyBlocked(part.text)

        raise ImageNotFound()

    @observe()
    async def generate_photo(
        self, full_reply_text: str, config: AgentConfig
    ) -> MediaPayload | None:
        caption = extract_caption(full_reply_text)
        if caption is None:
            return None

        scene = await self._expand_caption(caption, config)
        self.logger.info("Rendering photo reply for %s: %s", config["name"], scene[:100])

        parts: list[types.Part] = []
        reference = await self.reference_service.resolve(config.get("profile_pic"))
        if reference is not None:
            parts.append(
                types.Part.from_bytes(data=reference.data, mime_type=reference.mime_type)
            )
        parts.append(
            types.Part.from_text(
                text=RENDER_TEMPLATE.format(name=config["name"], scene=scene)
            )
        )
        contents = [types.Content(role="user", parts=parts)]
        generation_config = types.GenerateContentConfig(
            safety_settings=self.safety_settings
        )

        async def _render() -> MediaPayload:
            response = await self.client.aio.models.generate_content(
                model=self.image_model_name,
                contents=contents,
                config=generation_config,
            )
            return self._extract_image(response)

        return await with_retry(_render, self.retry_policy, logger=self.logger)
