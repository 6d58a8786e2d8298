from __future__ import annotations

import base64
from dataclasses import dataclass

PNG_MIME_TYPE = "image/png"


@dataclass(frozen=True)
class MediaPayload:
    """Raw binary content with its mime type."""

    data: bytes
    mime_type: str

    def to_base64(self) -> str:
        return base64.b64encode(self.data).decode("ascii")

    def to_data_uri(self) -> str:
        return f"data:{self.mime_type};base64,{self.to_base64()}"
