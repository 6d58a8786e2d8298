from abc import ABC, abstractmethod

from companion.entities.media import MediaPayload


class ReferenceServiceInterface(ABC):
    @abstractmethod
    async def resolve(self, profile_pic: str | MediaPayload | None) -> MediaPayload | None:
        """
        Resolve the agent's identity reference to raw image bytes.

        Best effort: returns None when there is no reference or it cannot be read.
        """
