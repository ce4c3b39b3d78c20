"""Models for exercise video search results."""

from fitness_coach.domain.models import CamelModel


class VideoResult(CamelModel):
    """Single exercise video."""

    title: str
    channel: str
    url: str | None = None
    description: str = ""
    thumbnails: dict[str, object] | None = None
