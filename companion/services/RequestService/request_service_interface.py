from abc import ABC, abstractmethod

from google.genai import types

from companion.entities.agent import AgentConfig, Attachment


class RequestServiceInterface(ABC):
    @abstractmethod
    async def build_turn_parts(
        self,
        config: AgentConfig,
        attachments: list[Attachment] | None,
        prompt: str,
    ) -> list[types.Part]:
        """
        Build the ordered content parts for one user turn.

        Order: identity reference, attachments, prompt text. Never empty.
        """

    @abstractmethod
    async def build_user_turn(
        self,
        config: AgentConfig,
        attachments: list[Attachment] | None,
        prompt: str,
    ) -> types.Content:
        """Wrap build_turn_parts into a user Content."""
