from abc import ABC, abstractmethod

from google.genai import types

from companion.entities.agent import AgentConfig, Attachment


class ConversationServiceInterface(ABC):
    @abstractmethod
    async def generate_reply(
        self,
        prompt: str,
        config: AgentConfig,
        history: list[types.Content],
        attachments: list[Attachment] | None = None,
    ) -> str:
        """
        Return the raw model reply and append the user turn to ``history``.

        ``history`` is only modified when a reply was produced.

        The reply may still contain a caption directive.

        Raises:
            ResponseSafetyBlocked: The reply was withheld by a safety filter.
            EmptyResponse: The model returned no text for another reason.
        """
