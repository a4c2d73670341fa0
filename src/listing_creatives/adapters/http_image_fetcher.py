"""HTTP client for downloading listing photos."""

from dataclasses import dataclass
from typing import Protocol

import httpx


class ImageFetcher(Protocol):
    """Interface for downloading remote images."""

    async def fetch(self, url: str) -> bytes:
        """Download an image and return its bytes."""


@dataclass
class HttpxImageFetcher(ImageFetcher):
    """Image fetcher using httpx."""

    http_client: httpx.AsyncClient
    timeout: float = 20

    @classmethod
    def create(cls, timeout: float = 20) -> "HttpxImageFetcher":
        """Create an image fetcher with a managed httpx session."""
        return cls(
            http_client=httpx.AsyncClient(follow_redirects=True), timeout=timeout
        )

    async def fetch(self, url: str) -> bytes:
        """Download the image at a public URL."""
        response = await self.http_client.get(url, timeout=self.timeout)
        response.raise_for_status()
        return response.content

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
