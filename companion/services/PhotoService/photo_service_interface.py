from abc import ABC, abstractmethod

from companion.entities.agent import AgentConfig
from companion.entities.media import MediaPayload


class PhotoServiceInterface(ABC):
    @abstractmethod
    async def generate_photo(
        self, full_reply_text: str, config: AgentConfig
    ) -> MediaPayload | None:
        """
        Render the first caption directive in ``full_reply_text`` as an image.

        Returns None when the reply carries no directive.

        Raises:
            ImageSafetyBlocked: The image model refused or was filtered.
            ImageNotFound: The image model answered without an image.
        """
