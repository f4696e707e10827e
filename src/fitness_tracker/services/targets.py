"""Personalized daily nutrition targets.

BMR uses the Mifflin-St Jeor equation and TDEE scales it by an activity
multiplier. Goal types are matched by lower-cased substring, so "Weight Loss",
"cut" and "lean bulk" are all understood.
"""

import logging
from dataclasses import dataclass
from datetime import date

from fitness_tracker.domain.nutrition import NutritionTargets, UserProfile
from fitness_tracker.errors import ValidationError

_logger = logging.getLogger(__name__)

KCAL_PER_KG = 7700.0
MIN_DAILY_CALORIES = 1200.0
MAX_DAILY_DEFICIT = 1000.0
MAX_DAILY_SURPLUS = 500.0
DEFAULT_DEFICIT = 500.0
DEFAULT_SURPLUS = 300.0
DEFAULT_AGE = 30
DEFAULT_ACTIVITY_MULTIPLIER = 1.55

GOAL_LOSS = "loss"
GOAL_GAIN = "gain"
GOAL_MAINTENANCE = "maintenance"


@dataclass(frozen=True)
class ActivityLevel:
    """An entry of the activity multiplier table."""

    value: str
    label: str
    description: str
    multiplier: float


ACTIVITY_LEVELS = (
    ActivityLevel("Sedentary", "Sedentary", "Little or no exercise, desk job", 1.2),
    ActivityLevel(
        "LightlyActive", "Lightly Active", "Light exercise 1-3 days/week", 1.375
    ),
    ActivityLevel(
        "ModeratelyActive",
        "Moderately Active",
        "Moderate exercise 3-5 days/week",
        1.55,
    ),
    ActivityLevel("VeryActive", "Very Active", "Hard exercise 6-7 days/week", 1.725),
    ActivityLevel(
        "ExtremelyActive",
        "Extremely Active",
        "Very hard exercise, physical job, or training twice a day",
        1.9,
    ),
)

ACTIVITY_MULTIPLIERS = {level.value: level.multiplier for level in ACTIVITY_LEVELS}

_ACTIVITY_PHRASES = {
    "Sedentary": "sedentary (little or no exercise)",
    "LightlyActive": "lightly active (light exercise 1-3 days/week)",
    "ModeratelyActive": "moderately active (moderate exercise 3-5 days/week)",
    "VeryActive": "very active (hard exercise 6-7 days/week)",
    "ExtremelyActive": "extremely active (very hard exercise or physical job)",
}

_PROTEIN_PER_KG = {GOAL_LOSS: 2.2, GOAL_GAIN: 2.0, GOAL_MAINTENANCE: 1.6}
_FAT_FRACTION = {GOAL_LOSS: 0.25, GOAL_GAIN: 0.25, GOAL_MAINTENANCE: 0.30}
_GOAL_PHRASES = {
    GOAL_LOSS: "weight loss",
    GOAL_GAIN: "muscle gain",
    GOAL_MAINTENANCE: "maintenance",
}


def activity_levels() -> list[ActivityLevel]:
    """Return the supported activity levels in ascending order."""
    return list(ACTIVITY_LEVELS)


def goal_category(goal_type: str | None) -> str:
    """Map a free-text goal type onto loss, gain or maintenance."""
    goal = (goal_type or GOAL_MAINTENANCE).lower()
    if "loss" in goal or "cut" in goal:
        return GOAL_LOSS
    if "gain" in goal or "muscle" in goal or "bulk" in goal:
        return GOAL_GAIN
    return GOAL_MAINTENANCE


def calculate_bmr(
    weight_kg: float, height_cm: float, age: int, gender: str | None
) -> float:
    """Return basal metabolic rate in kcal per day."""
    offset = -161.0 if (gender or "").lower() == "female" else 5.0
    return 10.0 * weight_kg + 6.25 * height_cm - 5.0 * age + offset


def calculate_tdee(bmr: float, activity_level: str | None) -> float:
    """Return total daily energy expenditure for an activity level."""
    multiplier = ACTIVITY_MULTIPLIERS.get(
        activity_level or "", DEFAULT_ACTIVITY_MULTIPLIER
    )
    return bmr * multiplier


def calorie_adjustment(
    goal_type: str | None, target_weight_change_per_week: float | None = None
) -> float:
    """Return the daily surplus (positive) or deficit (negative) for a goal."""
    category = goal_category(goal_type)
    rate = (
        abs(target_weight_change_per_week)
        if target_weight_change_per_week is not None
        else None
    )
    if category == GOAL_LOSS:
        if rate is None:
            return -DEFAULT_DEFICIT
        return -min(rate * KCAL_PER_KG / 7, MAX_DAILY_DEFICIT)
    if category == GOAL_GAIN:
        if rate is None:
            return DEFAULT_SURPLUS
        return min(rate * KCAL_PER_KG / 7, MAX_DAILY_SURPLUS)
    return 0.0


def calculate_age(date_of_birth: date | None, today: date) -> int:
    """Return age in whole years, or the default age when unknown."""
    if date_of_birth is None:
        return DEFAULT_AGE
    age = today.year - date_of_birth.year
    if (today.month, today.day) < (date_of_birth.month, date_of_birth.day):
        age -= 1
    return age


def weight_change_per_week(target_change: float, timeframe_weeks: float) -> float:
    """Return the weekly rate needed to reach a total change in time."""
    if timeframe_weeks <= 0:
        return 0.0
    return abs(target_change) / timeframe_weeks


def calculate_nutrition(  # noqa: PLR0913
    weight_kg: float | None,
    height_cm: float | None,
    age: int,
    gender: str | None,
    activity_level: str | None,
    goal_type: str | None,
    target_weight_change_per_week: float | None = None,
) -> NutritionTargets:
    """Compute daily calorie and macro targets from biometrics and a goal."""
    if weight_kg is None or weight_kg <= 0:
        raise ValidationError("Weight is required to calculate nutrition targets")
    if height_cm is None or height_cm <= 0:
        raise ValidationError("Height is required to calculate nutrition targets")

    category = goal_category(goal_type)
    bmr = calculate_bmr(weight_kg, height_cm, age, gender)
    tdee = calculate_tdee(bmr, activity_level)
    calories = max(
        tdee + calorie_adjustment(goal_type, target_weight_change_per_week),
        MIN_DAILY_CALORIES,
    )
    adjustment = calories - tdee

    protein = weight_kg * _PROTEIN_PER_KG[category]
    fat = calories * _FAT_FRACTION[category] / 9
    carbohydrates = max(calories - protein * 4 - fat * 9, 0.0) / 4

    targets = NutritionTargets(
        bmr=float(round(bmr)),
        tdee=float(round(tdee)),
        daily_calories=float(round(calories)),
        daily_protein=float(round(protein)),
        daily_carbohydrates=float(round(carbohydrates)),
        daily_fat=float(round(fat)),
        calorie_adjustment=float(round(adjustment)),
        expected_weekly_weight_change=round(adjustment * 7 / KCAL_PER_KG, 2),
        explanation=_explain(
            bmr, tdee, calories, protein, carbohydrates, fat, category, activity_level
        ),
    )
    _logger.info(
        "Calculated targets: %s kcal (%s), adjustment %s",
        targets.daily_calories,
        category,
        targets.calorie_adjustment,
    )
    return targets


def calculate_for_profile(
    profile: UserProfile,
    goal_type: str | None,
    today: date,
    target_weight_change_per_week: float | None = None,
) -> NutritionTargets:
    """Compute targets for a stored user profile."""
    return calculate_nutrition(
        profile.weight_kg,
        profile.height_cm,
        calculate_age(profile.date_of_birth, today),
        profile.gender,
        profile.activity_level,
        goal_type,
        target_weight_change_per_week,
    )


def _explain(  # noqa: PLR0913
    bmr: float,
    tdee: float,
    calories: float,
    protein: float,
    carbohydrates: float,
    fat: float,
    category: str,
    activity_level: str | None,
) -> str:
    activity = _ACTIVITY_PHRASES.get(activity_level or "", "moderately active")
    adjustment = round(calories - tdee)
    if adjustment < 0:
        adjustment_text = f"a {abs(adjustment)} calorie deficit"
    elif adjustment > 0:
        adjustment_text = f"a {adjustment} calorie surplus"
    else:
        adjustment_text = "maintenance calories"
    return (
        "Based on your profile, your Basal Metabolic Rate (BMR) is "
        f"{bmr:.0f} calories. "
        f"With your {activity} lifestyle, your Total Daily Energy Expenditure "
        f"(TDEE) is {tdee:.0f} calories. "
        f"For {_GOAL_PHRASES[category]}, we recommend {calories:.0f} calories daily "
        f"({adjustment_text}). "
        f"Your macros: {protein:.0f}g protein, {carbohydrates:.0f}g carbs, "
        f"{fat:.0f}g fat."
    )
