"""
ConversationService: one chat turn against the Gemini text model.
"""

from __future__ import annotations

import logging

from google import genai
from google.genai import types
from langfuse import observe

from companion.components.genai.response_parts import finish_reason, is_safety_stop
from companion.components.retry.retry_policy import RetryPolicy, with_retry
from companion.entities.agent import AgentConfig, Attachment
from companion.entities.errors import EmptyResponse, ResponseSafetyBlocked
from companion.services.ConversationService.conversation_service_interface import (
    ConversationServiceInterface,
)
from companion.services.PromptService.prompt_service_interface import (
    PromptServiceInterface,
)
from companion.services.RequestService.request_service_interface import (
    RequestServiceInterface,
)


class ConversationService(ConversationServiceInterface):
    """Text replies in persona, with the identity reference on every turn."""

    def __init__(
        self,
        client: genai.Client,
        prompt_service: PromptServiceInterface,
        request_service: RequestServiceInterface,
        model_name: str,
        temperature: float,
        safety_settings: list[types.SafetySetting],
        retry_policy: RetryPolicy,
        logger: logging.Logger,
    ) -> None:
        """
        Args:
            client: Google Gen AI client
            prompt_service: Renders the system instruction
            request_service: Builds the multimodal user turn
            model_name: Text model used for replies
            temperature: Sampling temperature
            safety_settings: Thresholds sent with every request
            retry_policy: Retry budget for quota errors
            logger: Logger instance
        """
        self.client = client
        self.prompt_service = prompt_service
        self.request_service = request_service
        self.model_name = model_name
        self.temperature = temperature
        self.safety_settings = safety_settings
        self.retry_policy = retry_policy
        self.logger = logger

        self.logger.info(
            "ConversationService initialized. Model: %s, temperature: %s",
            self.model_name,
            self.temperature,
        )

    @observe()
    async def generate_reply(
        self,
        prompt: str,
        config: AgentConfig,
        history: list[types.Content],
        attachments: list[Attachment] | None = None,
    ) -> str:
        user_turn = await self.request_service.build_user_turn(
            config, attachments, prompt
        )
        contents = [*history, user_turn]

        generation_config = types.GenerateContentConfig(
            system_instruction=self.prompt_service.create_system_instruction(config),
            temperature=self.temperature,
            safety_settings=self.safety_settings,
        )

        self.logger.info(
            "Requesting reply for %s (%d turns, %d parts in latest turn)",
            config["name"],
            len(contents),
            len(user_turn.parts or []),
        )

        async def _generate() -> str:
            response = await self.client.aio.models.generate_content(
                model=self.model_name,
                contents=contents,
                config=generation_config,
            )

            text = response.text
            if not text:
                if is_safety_stop(response):
                    self.logger.warning("Reply blocked by safety filter")
                    raise ResponseSafetyBlocked()
                self.logger.warning(
                    "Model returned no text (finish reason: %s)",
                    finish_reason(response),
                )
                raise EmptyResponse()
            return text

        reply = await with_retry(_generate, self.retry_policy, logger=self.logger)
        # A failed call leaves the caller's history untouched
        history.append(user_turn)
        return reply
