"""Domain models for meal logging and nutrition goals."""

from dataclasses import dataclass, field
from datetime import date, datetime

MEAL_TYPES = ("Breakfast", "Lunch", "Dinner", "Snack")


@dataclass(frozen=True)
class FoodTemplate:
    """Reusable nutrition values for one serving of a food."""

    id: int
    name: str
    calories: float
    protein: float
    carbohydrates: float
    fat: float
    brand: str | None = None
    serving_size: float = 100.0
    serving_unit: str = "g"
    fiber: float | None = None
    sugar: float | None = None
    sodium: float | None = None


@dataclass
class FoodItem:
    """A food consumed as part of a meal entry.

    Macro fields hold the values for the whole quantity, not per serving.
    """

    id: int
    meal_entry_id: int
    name: str
    quantity: float = 1.0
    food_template_id: int | None = None
    brand: str | None = None
    serving_size: float = 100.0
    serving_unit: str = "g"
    calories: float = 0.0
    protein: float = 0.0
    carbohydrates: float = 0.0
    fat: float = 0.0
    fiber: float | None = None
    sugar: float | None = None
    sodium: float | None = None
    updated_at: datetime | None = None


@dataclass
class MealEntry:
    """One meal inside a day with cached totals over its food items."""

    id: int
    meal_log_id: int
    meal_type: str = "Snack"
    name: str | None = None
    food_items: list[FoodItem] = field(default_factory=list)
    is_consumed: bool = False
    consumed_at: datetime | None = None
    total_calories: float = 0.0
    total_protein: float = 0.0
    total_carbohydrates: float = 0.0
    total_fat: float = 0.0
    total_fiber: float | None = None
    total_sodium: float | None = None
    updated_at: datetime | None = None
    version: int = 1


@dataclass
class MealLog:
    """A user's meals for one UTC calendar day."""

    id: int
    user_id: int
    day: date
    meal_entries: list[MealEntry] = field(default_factory=list)
    water_intake: float = 0.0
    total_calories: float = 0.0
    total_protein: float = 0.0
    total_carbohydrates: float = 0.0
    total_fat: float = 0.0
    total_fiber: float | None = None
    total_sodium: float | None = None
    updated_at: datetime | None = None
    version: int = 1


@dataclass(frozen=True)
class MacroTotals:
    """Summed nutrition values."""

    calories: float
    protein: float
    carbohydrates: float
    fat: float
    fiber: float = 0.0
    sodium: float = 0.0


@dataclass
class NutritionGoal:
    """Daily nutrition targets for a user."""

    id: int
    user_id: int
    name: str | None = None
    daily_calories: float = 2000.0
    daily_protein: float = 150.0
    daily_carbohydrates: float = 200.0
    daily_fat: float = 65.0
    daily_fiber: float | None = 25.0
    daily_sodium: float | None = 2300.0
    daily_sugar: float | None = None
    daily_water: float | None = 2000.0
    protein_percentage: float | None = None
    carbohydrates_percentage: float | None = None
    fat_percentage: float | None = None
    is_active: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None
    version: int = 1


@dataclass(frozen=True)
class UserProfile:
    """Biometric inputs for nutrition target calculation."""

    user_id: int
    weight_kg: float | None
    height_cm: float | None
    date_of_birth: date | None = None
    gender: str | None = None
    activity_level: str | None = None


@dataclass(frozen=True)
class NutritionTargets:
    """Calculated daily nutrition targets."""

    bmr: float
    tdee: float
    daily_calories: float
    daily_protein: float
    daily_carbohydrates: float
    daily_fat: float
    calorie_adjustment: float
    expected_weekly_weight_change: float
    explanation: str


@dataclass(frozen=True)
class NutritionProgress:
    """Consumption for a day compared with the active goal."""

    day: date
    goal: NutritionGoal | None
    consumed: MacroTotals
    remaining: MacroTotals
    calories_percentage: float
    protein_percentage: float
    carbohydrates_percentage: float
    fat_percentage: float
