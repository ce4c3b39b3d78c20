"""Profile sanitizing and prompt construction."""

from collections.abc import Mapping

from pydantic import ValidationError as PydanticValidationError

from fitness_coach.domain.errors import ValidationError
from fitness_coach.domain.profile import UserProfile

DEFAULT_GOAL = "weightLoss"

GOAL_LABELS = {
    "weightLoss": "Weight Loss",
    "muscleGain": "Muscle Gain",
    "rehab": "Rehabilitation & Mobility",
}

_OPTIONAL_TEXT_FIELDS = ("healthConditions", "availableEquipment")


def sanitize_profile(raw: Mapping[str, object]) -> UserProfile:
    """Normalize a raw profile payload and validate it."""
    cleaned = {key: value for key, value in raw.items() if value is not None}
    cleaned["goal"] = str(cleaned.get("goal", DEFAULT_GOAL)).strip()
    for key in _OPTIONAL_TEXT_FIELDS:
        value = cleaned.get(key)
        if isinstance(value, str):
            stripped = value.strip()
            if stripped:
                cleaned[key] = stripped
            else:
                cleaned.pop(key)
    try:
        return UserProfile.model_validate(cleaned)
    except PydanticValidationError as exc:
        problems = [_describe_error(error) for error in exc.errors()]
        fields = [field for field, _ in problems]
        details = "; ".join(f"{field}: {message}" for field, message in problems)
        raise ValidationError(f"Invalid profile: {details}", fields=fields) from exc


def build_profile_prompt(profile: UserProfile) -> str:
    """Describe a profile as plain text for the plan prompt."""
    goal_label = GOAL_LABELS.get(profile.goal, profile.goal)
    body_fat = (
        f"{_format_number(profile.body_fat)}%"
        if profile.body_fat is not None
        else "Not provided"
    )
    preference = "At home" if profile.workout_preference == "home" else "At the gym"
    lines = [
        f"Primary Goal: {goal_label}",
        f"Height: {_format_number(profile.height)} cm",
        f"Weight: {_format_number(profile.weight)} kg",
        f"Body Fat: {body_fat}",
        f"Health Considerations: {profile.health_conditions or 'None'}",
        f"Workout Preference: {preference}",
        f"Equipment: {profile.available_equipment or 'Basic bodyweight'}",
    ]
    return "\n".join(lines)


def _describe_error(error: Mapping[str, object]) -> tuple[str, str]:
    location = error.get("loc") or ()
    field = ".".join(str(part) for part in location) or "profile"
    return field, str(error.get("msg", "invalid value"))


def _format_number(value: float) -> str:
    return f"{value:g}"
