"""Domain models for nutrition analytics reports."""

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class DailySummary:
    """Cached totals for one logged day."""

    day: date
    calories: float
    protein: float
    carbohydrates: float
    fat: float
    fiber: float | None
    water: float


@dataclass(frozen=True)
class AverageTotals:
    """Average daily macros."""

    calories: float
    protein: float
    carbohydrates: float
    fat: float


@dataclass(frozen=True)
class WeekData:
    """Averages for one seven-day bucket."""

    week_start: date
    week_end: date
    days_logged: int
    avg_calories: float
    avg_protein: float
    avg_carbohydrates: float
    avg_fat: float


@dataclass(frozen=True)
class WeeklySummary:
    """Weekly buckets plus the overall average."""

    total_weeks: int
    weekly_data: list[WeekData]
    overall_average: AverageTotals | None


@dataclass(frozen=True)
class MacroBreakdown:
    """Macro totals and their share of macro calories."""

    total_calories: float = 0.0
    total_protein: float = 0.0
    total_carbohydrates: float = 0.0
    total_fat: float = 0.0
    protein_percentage: float = 0.0
    carbohydrates_percentage: float = 0.0
    fat_percentage: float = 0.0
    average_daily_calories: float = 0.0
    average_daily_protein: float = 0.0
    average_daily_carbohydrates: float = 0.0
    average_daily_fat: float = 0.0


@dataclass(frozen=True)
class CalorieTrendPoint:
    """Calories for a day with the target in effect."""

    day: date
    calories: float
    target: float | None


@dataclass(frozen=True)
class StreakInfo:
    """Meal logging streaks."""

    current_streak: int
    longest_streak: int
    total_days_logged: int


@dataclass(frozen=True)
class FrequentFood:
    """A food ranked by how often it was logged."""

    name: str
    food_template_id: int | None
    count: int
    total_calories: float
    average_calories: float
