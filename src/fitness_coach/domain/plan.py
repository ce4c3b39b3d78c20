"""Fitness plan models and the structured-output schema derived from them."""

from datetime import datetime

from pydantic import Field

from fitness_coach.domain.models import CamelModel

# Keywords OpenAI strict structured outputs reject.
_UNSUPPORTED_SCHEMA_KEYWORDS = frozenset({"title", "default", "minLength", "maxLength"})


class Exercise(CamelModel):
    """Single exercise prescription."""

    name: str = Field(min_length=1)
    sets: int = Field(gt=0)
    reps: str = Field(min_length=1)
    rest: str = Field(min_length=1)
    description: str = Field(min_length=1)


class WorkoutDay(CamelModel):
    """Workout for one day of the week."""

    day: str = Field(min_length=1)
    focus: str = Field(min_length=1)
    exercises: list[Exercise] = Field(min_length=1)


class Meal(CamelModel):
    """Single meal with a short recipe."""

    name: str = Field(min_length=1)
    calories: int = Field(ge=0)
    description: str = Field(min_length=1)
    recipe: str = Field(min_length=1)


class DailyMeals(CamelModel):
    """Three main meals and an optional snack."""

    breakfast: Meal
    lunch: Meal
    dinner: Meal
    snacks: Meal | None = None


class DailyTotal(CamelModel):
    """Nutrition totals for a diet day."""

    calories: int = Field(ge=0)
    protein: str = Field(min_length=1)
    carbs: str = Field(min_length=1)
    fat: str = Field(min_length=1)


class DietDay(CamelModel):
    """Diet for one day of the week."""

    day: str = Field(min_length=1)
    meals: DailyMeals
    daily_total: DailyTotal


class FitnessPlan(CamelModel):
    """Weekly workout and diet plan generated for a member."""

    workout_plan: list[WorkoutDay] = Field(min_length=1)
    diet_plan: list[DietDay] = Field(min_length=1)

    def to_payload(self) -> dict[str, object]:
        """Return the plan as camelCase JSON, omitting absent snacks."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class StoredPlan(CamelModel):
    """Persisted plan row."""

    plan: FitnessPlan
    updated_at: datetime | None = None


def fitness_plan_json_schema() -> dict[str, object]:
    """Return the FitnessPlan JSON schema in OpenAI strict format."""
    return _strictify(FitnessPlan.model_json_schema(by_alias=True))


def _strictify(node: object) -> object:
    """Drop unsupported keywords and close every object schema."""
    if isinstance(node, list):
        return [_strictify(item) for item in node]
    if not isinstance(node, dict):
        return node
    cleaned: dict[str, object] = {}
    for key, value in node.items():
        if key in {"properties", "$defs"}:
            cleaned[key] = {name: _strictify(child) for name, child in value.items()}
        elif key not in _UNSUPPORTED_SCHEMA_KEYWORDS:
            cleaned[key] = _strictify(value)
    properties = cleaned.get("properties")
    if cleaned.get("type") == "object" and isinstance(properties, dict):
        cleaned["required"] = list(properties)
        cleaned["additionalProperties"] = False
    return cleaned
