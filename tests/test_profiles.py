"""Tests for profile sanitizing and prompt building."""

import pytest

from fitness_coach.domain.errors import ValidationError
from fitness_coach.services.profiles import build_profile_prompt, sanitize_profile


def test_sanitize_profile_applies_defaults_and_trims() -> None:
    profile = sanitize_profile(
        {
            "height": 175,
            "weight": 80,
            "healthConditions": "   ",
            "availableEquipment": "  dumbbells  ",
        }
    )

    assert profile.goal == "weightLoss"
    assert profile.workout_preference == "home"
    assert profile.health_conditions is None
    assert profile.available_equipment == "dumbbells"


def test_sanitize_profile_trims_goal_and_treats_none_as_absent() -> None:
    profile = sanitize_profile(
        {"goal": "  muscleGain ", "height": 180, "weight": 75, "workoutPreference": None}
    )

    assert profile.goal == "muscleGain"
    assert profile.workout_preference == "home"


@pytest.mark.parametrize("missing", ["height", "weight"])
def test_sanitize_profile_requires_height_and_weight(missing: str) -> None:
    raw = {"goal": "rehab", "height": 170, "weight": 65}
    raw.pop(missing)

    with pytest.raises(ValidationError) as exc_info:
        sanitize_profile(raw)

    assert exc_info.value.fields == [missing]


def test_sanitize_profile_lists_every_offending_field() -> None:
    with pytest.raises(ValidationError) as exc_info:
        sanitize_profile({"height": -1, "bodyFat": 150, "workoutPreference": "park"})

    assert set(exc_info.value.fields) == {
        "height",
        "weight",
        "bodyFat",
        "workoutPreference",
    }
    assert "bodyFat" in str(exc_info.value)


@pytest.mark.parametrize("body_fat", [0, 18.5, 100])
def test_sanitize_profile_accepts_body_fat_in_range(body_fat: float) -> None:
    profile = sanitize_profile({"height": 160, "weight": 55, "bodyFat": body_fat})

    assert profile.body_fat == body_fat


def test_sanitize_profile_rejects_body_fat_over_100() -> None:
    with pytest.raises(ValidationError) as exc_info:
        sanitize_profile({"height": 160, "weight": 55, "bodyFat": 150})

    assert exc_info.value.fields == ["bodyFat"]


def test_build_profile_prompt_is_deterministic() -> None:
    profile = sanitize_profile(
        {"goal": "weightLoss", "height": 175, "weight": 80, "bodyFat": 22.5}
    )

    first = build_profile_prompt(profile)
    second = build_profile_prompt(profile)

    assert first == second
    assert first.splitlines() == [
        "Primary Goal: Weight Loss",
        "Height: 175 cm",
        "Weight: 80 kg",
        "Body Fat: 22.5%",
        "Health Considerations: None",
        "Workout Preference: At home",
        "Equipment: Basic bodyweight",
    ]


def test_build_profile_prompt_falls_back_to_raw_goal() -> None:
    profile = sanitize_profile(
        {
            "goal": "Run a marathon",
            "height": 170,
            "weight": 60,
            "workoutPreference": "gym",
            "healthConditions": "knee pain",
        }
    )

    prompt = build_profile_prompt(profile)

    assert "Primary Goal: Run a marathon" in prompt
    assert "Body Fat: Not provided" in prompt
    assert "Health Considerations: knee pain" in prompt
    assert "Workout Preference: At the gym" in prompt
