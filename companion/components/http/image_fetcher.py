"""
Async fetcher for externally hosted images (profile pictures by URL).
"""

import logging
from typing import Any, Protocol, runtime_checkable

import httpx

from companion.entities.errors import ReferenceResolutionFailure
from companion.entities.media import MediaPayload

DEFAULT_MIME_TYPE = "image/jpeg"


@runtime_checkable
class AsyncHttpClientProtocol(Protocol):
    """Protocol for async HTTP clients (httpx.AsyncClient or mocks)."""

    async def get(self, url: str, **kwargs: Any) -> Any: ...

    async def aclose(self) -> None: ...


class ImageFetcher:
    """Downloads an image and returns its bytes with the served mime type."""

    def __init__(
        self,
        http_client: AsyncHttpClientProtocol | None = None,
        timeout: float = 10.0,
        logger: logging.Logger | None = None,
    ) -> None:
        self.timeout = timeout
        self.logger = logger or logging.getLogger("image_fetcher")
        self._client: AsyncHttpClientProtocol = http_client or httpx.AsyncClient(
            timeout=timeout, follow_redirects=True
        )

    async def fetch(self, url: str) -> MediaPayload:
        """
        Fetch ``url`` and return the body as a MediaPayload.

        Raises:
            ReferenceResolutionFailure: On malformed URLs, network errors,
                non-2xx responses or an empty body.
        """
        try:
            resp = await self._client.get(url, timeout=self.timeout)
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ReferenceResolutionFailure(
                url, f"HTTP {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise ReferenceResolutionFailure(url, f"network error: {e}") from e
        except httpx.InvalidURL as e:
            raise ReferenceResolutionFailure(url, f"invalid URL: {e}") from e

        data = resp.content
        if not data:
            raise ReferenceResolutionFailure(url, "empty body")

        content_type = resp.headers.get("content-type", "")
        mime_type = content_type.split(";", 1)[0].strip() or DEFAULT_MIME_TYPE

        self.logger.debug("Fetched %d bytes (%s) from %s", len(data), mime_type, url)
        return MediaPayload(data=data, mime_type=mime_type)

    async def aclose(self) -> None:
        await self._client.aclose()
