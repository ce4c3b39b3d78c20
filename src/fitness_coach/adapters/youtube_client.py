"""YouTube Data API search client."""

from dataclasses import dataclass
from typing import Protocol

import httpx


class VideoSearchClient(Protocol):
    """Interface for video search API interactions."""

    async def search_videos(
        self, query: str, max_results: int, language: str
    ) -> dict[str, object]:
        """Search videos and return raw API data."""


@dataclass
class HttpxYouTubeClient(VideoSearchClient):
    """HTTPX-backed YouTube search client."""

    api_key: str
    base_url: str
    http_client: httpx.AsyncClient
    timeout_seconds: float = 15

    @classmethod
    def create(cls, api_key: str, base_url: str) -> "HttpxYouTubeClient":
        """Create a YouTube client with a managed httpx session."""
        return cls(api_key=api_key, base_url=base_url, http_client=httpx.AsyncClient())

    async def search_videos(
        self, query: str, max_results: int, language: str
    ) -> dict[str, object]:
        """Search videos matching the query."""
        response = await self.http_client.get(
            f"{self.base_url}/search",
            params={
                "part": "snippet",
                "type": "video",
                "maxResults": max_results,
                "q": query,
                "relevanceLanguage": language,
                "key": self.api_key,
            },
            timeout=self.timeout_seconds,
        )
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
