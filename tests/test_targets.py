"""Tests for the nutrition target calculator."""

from datetime import date

import pytest

from fitness_tracker.domain.nutrition import UserProfile
from fitness_tracker.errors import ValidationError
from fitness_tracker.services import targets


def test_bmr_uses_gender_offset() -> None:
    male = targets.calculate_bmr(80, 180, 30, "male")
    female = targets.calculate_bmr(80, 180, 30, "FEMALE")

    assert male == 1780
    assert female == 1614
    assert targets.calculate_bmr(80, 180, 30, "unspecified") == male
    assert targets.calculate_bmr(80, 180, 30, None) == male


def test_unknown_activity_level_falls_back_to_moderate() -> None:
    assert targets.calculate_tdee(1000, "Sedentary") == pytest.approx(1200)
    assert targets.calculate_tdee(1000, "couch") == pytest.approx(1550)
    assert targets.calculate_tdee(1000, None) == pytest.approx(1550)


def test_maintenance_targets() -> None:
    result = targets.calculate_nutrition(
        80, 180, 30, "male", "ModeratelyActive", "Maintenance"
    )

    assert result.bmr == 1780
    assert result.tdee == 2759
    assert result.daily_calories == 2759
    assert result.calorie_adjustment == 0
    assert result.daily_protein == 128
    assert result.daily_fat == 92
    assert result.daily_carbohydrates == 355
    assert result.expected_weekly_weight_change == 0
    assert "maintenance calories" in result.explanation


def test_weight_loss_uses_requested_rate() -> None:
    result = targets.calculate_nutrition(
        80, 180, 30, "male", "ModeratelyActive", "Weight Loss", 0.5
    )

    assert result.daily_calories == 2209
    assert result.calorie_adjustment == -550
    assert result.daily_protein == 176
    assert result.expected_weekly_weight_change == -0.5
    assert "calorie deficit" in result.explanation


def test_weight_loss_deficit_is_capped() -> None:
    result = targets.calculate_nutrition(
        80, 180, 30, "male", "ModeratelyActive", "cut", 2.0
    )

    assert result.calorie_adjustment == -1000


def test_muscle_gain_defaults_to_small_surplus() -> None:
    result = targets.calculate_nutrition(
        80, 180, 30, "male", "ModeratelyActive", "Build Muscle"
    )

    assert result.calorie_adjustment == 300
    assert result.daily_protein == 160


def test_daily_calories_never_drop_below_floor() -> None:
    result = targets.calculate_nutrition(45, 150, 70, "female", "Sedentary", "loss", 1)

    assert result.daily_calories == 1200
    assert result.tdee == 1052
    assert result.calorie_adjustment == 148


def test_calculation_is_deterministic() -> None:
    args = (72.5, 168.0, 41, "female", "VeryActive", "lean bulk", 0.25)

    assert targets.calculate_nutrition(*args) == targets.calculate_nutrition(*args)


@pytest.mark.parametrize(
    ("weight", "height"), [(None, 180), (0, 180), (80, None), (80, -1)]
)
def test_missing_biometrics_raise(weight: float | None, height: float | None) -> None:
    with pytest.raises(ValidationError):
        targets.calculate_nutrition(weight, height, 30, "male", None, None)


def test_calculate_age() -> None:
    today = date(2024, 6, 12)

    assert targets.calculate_age(date(1990, 6, 12), today) == 34
    assert targets.calculate_age(date(1990, 6, 13), today) == 33
    assert targets.calculate_age(None, today) == 30


def test_calculate_for_profile_uses_age_from_birth_date() -> None:
    profile = UserProfile(
        user_id=1,
        weight_kg=80,
        height_cm=180,
        date_of_birth=date(1994, 1, 1),
        gender="male",
        activity_level="ModeratelyActive",
    )

    result = targets.calculate_for_profile(profile, "maintenance", date(2024, 6, 12))

    assert result.bmr == 1780


def test_activity_levels_and_weekly_rate() -> None:
    levels = targets.activity_levels()

    assert [level.value for level in levels][0] == "Sedentary"
    assert levels[-1].multiplier == 1.9
    assert targets.weight_change_per_week(-6, 12) == 0.5
    assert targets.weight_change_per_week(5, 0) == 0
