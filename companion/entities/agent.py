from typing import NotRequired, TypedDict

from companion.entities.media import MediaPayload


class AgentConfig(TypedDict):
    """Persona snapshot supplied by the caller for a single call."""

    name: str
    personality: str
    voice: str
    # Data URI, external URL, or an already decoded image
    profile_pic: NotRequired[str | MediaPayload | None]
    background: str
    blur: int
    transparency: int


class Attachment(TypedDict):
    """User-supplied file for one turn, base64 encoded."""

    mime_type: str
    data: str
