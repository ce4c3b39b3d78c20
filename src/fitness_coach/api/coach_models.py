"""Request models for the coach API."""

from fitness_coach.domain.models import CamelModel


class GeneratePlanRequest(CamelModel):
    """Body of a plan generation request."""

    member_id: str | None = None
    profile: dict[str, object] | None = None


class ChatRequest(CamelModel):
    """Body of a chat request; history items are normalized by the service."""

    member_id: str | None = None
    message: str | None = None
    history: list[object] | None = None
