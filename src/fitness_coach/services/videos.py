"""Exercise video search."""

import logging
from dataclasses import dataclass

from fitness_coach.adapters.youtube_client import VideoSearchClient
from fitness_coach.domain.errors import UpstreamError, ValidationError
from fitness_coach.domain.videos import VideoResult

DEFAULT_MAX_RESULTS = 3
MIN_RESULTS = 1
MAX_RESULTS = 5

_logger = logging.getLogger(__name__)


@dataclass
class VideoSearchService:
    """Searches exercise videos, reporting failures as UpstreamError."""

    client: VideoSearchClient | None
    default_language: str = "ko"

    async def search(
        self,
        query: str,
        max_results: object = None,
        language: str | None = None,
    ) -> list[VideoResult]:
        """Return up to max_results videos for the query."""
        query = (query or "").strip()
        if not query:
            raise ValidationError("A search query is required", fields=["q"])
        if self.client is None:
            raise UpstreamError(
                "YouTube API key is not configured, so videos cannot be searched."
            )
        count = clamp_max_results(max_results)
        try:
            payload = await self.client.search_videos(
                query, count, language or self.default_language
            )
        except Exception as exc:
            _logger.warning("YouTube search failed: query=%s error=%s", query, exc)
            raise UpstreamError(
                f"YouTube search failed ({_status_code_from_exception(exc)}): "
                f"{_error_detail(exc)}"
            ) from exc
        items = payload.get("items") or []
        if not items:
            raise UpstreamError(
                "No videos matched the query. Try again with different keywords."
            )
        return [_parse_item(item) for item in items]


def clamp_max_results(value: object) -> int:
    """Coerce a requested result count into the supported range."""
    if value is None or isinstance(value, bool):
        return DEFAULT_MAX_RESULTS
    try:
        count = int(value)
    except (TypeError, ValueError):
        return DEFAULT_MAX_RESULTS
    return max(MIN_RESULTS, min(MAX_RESULTS, count))


def format_videos(videos: list[VideoResult]) -> str:
    """Format videos as title, channel and link blocks."""
    return "\n\n".join(
        f"{video.title} ({video.channel})\n{video.url or 'No link available'}"
        for video in videos
    )


def _parse_item(item: dict[str, object]) -> VideoResult:
    snippet = item.get("snippet") or {}
    identifier = item.get("id") or {}
    video_id = identifier.get("videoId") if isinstance(identifier, dict) else None
    return VideoResult(
        title=snippet.get("title") or "Untitled",
        channel=snippet.get("channelTitle") or "Unknown channel",
        url=f"https://www.youtube.com/watch?v={video_id}" if video_id else None,
        description=snippet.get("description") or "",
        thumbnails=snippet.get("thumbnails"),
    )


def _status_code_from_exception(exc: Exception) -> str:
    """Extract HTTP status code from an exception, if available."""
    response = getattr(exc, "response", None)
    status_code = getattr(response, "status_code", None)
    if isinstance(status_code, int):
        return str(status_code)
    return "n/a"


def _error_detail(exc: Exception) -> str:
    response = getattr(exc, "response", None)
    text = getattr(response, "text", None)
    if isinstance(text, str) and text:
        return text
    return str(exc) or type(exc).__name__
