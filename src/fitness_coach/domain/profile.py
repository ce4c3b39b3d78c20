"""Member profile model."""

from typing import Literal

from pydantic import Field

from fitness_coach.domain.models import CamelModel


class UserProfile(CamelModel):
    """Onboarding profile used to personalize generated plans."""

    goal: str = Field(min_length=1)
    height: float = Field(gt=0)
    weight: float = Field(gt=0)
    body_fat: float | None = Field(default=None, ge=0, le=100)
    health_conditions: str | None = None
    workout_preference: Literal["home", "gym"] = "home"
    available_equipment: str | None = None
