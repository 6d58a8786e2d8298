from __future__ import annotations

import logging

from companion.components.codec.binary_codec import parse_data_uri
from companion.components.http.image_fetcher import ImageFetcher
from companion.entities.errors import DecodeError, ReferenceResolutionFailure
from companion.entities.media import MediaPayload
from companion.services.ReferenceService.reference_service_interface import (
    ReferenceServiceInterface,
)


class ReferenceService(ReferenceServiceInterface):
    """Turns a profile picture (data URI, URL or decoded image) into bytes."""

    def __init__(self, image_fetcher: ImageFetcher, logger: logging.Logger) -> None:
        self.image_fetcher = image_fetcher
        self.logger = logger

    async def resolve(
        self, profile_pic: str | MediaPayload | None
    ) -> MediaPayload | None:
        if not profile_pic:
            return None

        if isinstance(profile_pic, MediaPayload):
            return profile_pic

        if profile_pic.startswith("data:"):
            try:
                return parse_data_uri(profile_pic)
            except DecodeError as e:
                self.logger.warning("Embedded profile picture is unreadable: %s", e)
                return None

        try:
            return await self.image_fetcher.fetch(profile_pic)
        except ReferenceResolutionFailure as e:
            self.logger.warning("Failed to fetch image for reference: %s", e.reason)
            return None
