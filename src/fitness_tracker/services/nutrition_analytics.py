"""Reports over logged meal days."""

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import TYPE_CHECKING, Protocol

from fitness_tracker.config import clamp_days
from fitness_tracker.domain.analytics import (
    AverageTotals,
    CalorieTrendPoint,
    DailySummary,
    FrequentFood,
    MacroBreakdown,
    StreakInfo,
    WeekData,
    WeeklySummary,
)
from fitness_tracker.domain.nutrition import FoodItem, MealLog, NutritionGoal
from fitness_tracker.services.dates import local_today, utc_now
from fitness_tracker.services.streaks import logging_streaks

if TYPE_CHECKING:
    from collections.abc import Callable

_logger = logging.getLogger(__name__)

DEFAULT_SUMMARY_DAYS = 7


class NutritionAnalyticsRepository(Protocol):
    """Read-only persistence interface for nutrition reports."""

    def list_meal_logs(
        self, user_id: int, start: date, end_exclusive: date
    ) -> list[MealLog]:
        """Return meal logs with ``start <= day < end_exclusive``, oldest first."""

    def list_logged_dates(self, user_id: int, limit: int) -> list[date]:
        """Return days with calories logged, newest first."""

    def list_consumed_food_items(self, user_id: int, since: date) -> list[FoodItem]:
        """Return food items of consumed meal entries logged on or after a day."""

    def get_active_nutrition_goal(self, user_id: int) -> NutritionGoal | None:
        """Return the user's active nutrition goal."""


def _average(values: list[float]) -> float:
    if not values:
        return 0.0
    return sum(values) / len(values)


def _average_totals(logs: list[MealLog]) -> AverageTotals:
    return AverageTotals(
        calories=_average([log.total_calories for log in logs]),
        protein=_average([log.total_protein for log in logs]),
        carbohydrates=_average([log.total_carbohydrates for log in logs]),
        fat=_average([log.total_fat for log in logs]),
    )


def daily_summaries(logs: list[MealLog]) -> list[DailySummary]:
    """Return the cached totals of each logged day."""
    return [
        DailySummary(
            day=log.day,
            calories=log.total_calories,
            protein=log.total_protein,
            carbohydrates=log.total_carbohydrates,
            fat=log.total_fat,
            fiber=log.total_fiber,
            water=log.water_intake,
        )
        for log in sorted(logs, key=lambda log: log.day)
    ]


def weekly_summary(logs: list[MealLog], today: date, weeks: int) -> WeeklySummary:
    """Bucket logs into seven-day windows counted back from today.

    Bucket ``i`` covers ``[today - 7(i+1), today - 7i)``; buckets without logs
    are left out. The overall average covers every log passed in.
    """
    weekly_data = []
    for index in range(weeks):
        week_start = today - timedelta(days=7 * (index + 1))
        week_end = today - timedelta(days=7 * index)
        bucket = [log for log in logs if week_start <= log.day < week_end]
        if not bucket:
            continue
        averages = _average_totals(bucket)
        weekly_data.append(
            WeekData(
                week_start=week_start,
                week_end=week_end,
                days_logged=len(bucket),
                avg_calories=averages.calories,
                avg_protein=averages.protein,
                avg_carbohydrates=averages.carbohydrates,
                avg_fat=averages.fat,
            )
        )
    return WeeklySummary(
        total_weeks=weeks,
        weekly_data=weekly_data,
        overall_average=_average_totals(logs) if logs else None,
    )


def macro_breakdown(logs: list[MealLog]) -> MacroBreakdown:
    """Return macro totals with their share of macro calories."""
    if not logs:
        return MacroBreakdown()
    protein = sum(log.total_protein for log in logs)
    carbohydrates = sum(log.total_carbohydrates for log in logs)
    fat = sum(log.total_fat for log in logs)
    protein_calories = protein * 4
    carbohydrate_calories = carbohydrates * 4
    fat_calories = fat * 9
    macro_calories = protein_calories + carbohydrate_calories + fat_calories

    def share(calories: float) -> float:
        return calories / macro_calories * 100 if macro_calories > 0 else 0.0

    averages = _average_totals(logs)
    return MacroBreakdown(
        total_calories=sum(log.total_calories for log in logs),
        total_protein=protein,
        total_carbohydrates=carbohydrates,
        total_fat=fat,
        protein_percentage=share(protein_calories),
        carbohydrates_percentage=share(carbohydrate_calories),
        fat_percentage=share(fat_calories),
        average_daily_calories=averages.calories,
        average_daily_protein=averages.protein,
        average_daily_carbohydrates=averages.carbohydrates,
        average_daily_fat=averages.fat,
    )


def frequent_foods(items: list[FoodItem], limit: int) -> list[FrequentFood]:
    """Rank foods by how often they were eaten."""
    groups: dict[tuple[str, int | None], list[FoodItem]] = {}
    for item in items:
        groups.setdefault((item.name, item.food_template_id), []).append(item)
    ranked = [
        FrequentFood(
            name=name,
            food_template_id=template_id,
            count=len(group),
            total_calories=sum(item.calories for item in group),
            average_calories=_average([item.calories for item in group]),
        )
        for (name, template_id), group in groups.items()
    ]
    ranked.sort(key=lambda food: food.count, reverse=True)
    return ranked[: max(limit, 0)]


@dataclass
class NutritionAnalyticsService:
    """Derives nutrition reports from cached meal log totals."""

    repository: NutritionAnalyticsRepository
    clock: "Callable[[], datetime]" = utc_now
    max_lookback_days: int = 3650
    timezone_name: str = "UTC"

    def get_daily_summary(
        self, user_id: int, start: date | None = None, end: date | None = None
    ) -> list[DailySummary]:
        """Return per-day totals for an inclusive range, the last week by default."""
        start, end = self._range(start, end)
        logs = self.repository.list_meal_logs(user_id, start, end + timedelta(days=1))
        return daily_summaries(logs)

    def get_weekly_summary(self, user_id: int, weeks: int = 4) -> WeeklySummary:
        """Return weekly averages for the trailing weeks."""
        weeks = clamp_days(weeks * 7, self.max_lookback_days) // 7
        today = self._today()
        logs = self.repository.list_meal_logs(
            user_id, today - timedelta(days=weeks * 7), today + timedelta(days=1)
        )
        return weekly_summary(logs, today, weeks)

    def get_macro_breakdown(
        self, user_id: int, start: date | None = None, end: date | None = None
    ) -> MacroBreakdown:
        """Return the macro split for an inclusive range, the last week by default."""
        start, end = self._range(start, end)
        logs = self.repository.list_meal_logs(user_id, start, end + timedelta(days=1))
        return macro_breakdown(logs)

    def get_calorie_trend(
        self, user_id: int, days: int = 30
    ) -> list[CalorieTrendPoint]:
        """Return daily calories with the active goal's target."""
        days = clamp_days(days, self.max_lookback_days)
        today = self._today()
        logs = self.repository.list_meal_logs(
            user_id, today - timedelta(days=days), today + timedelta(days=1)
        )
        goal = self.repository.get_active_nutrition_goal(user_id)
        target = goal.daily_calories if goal else None
        return [
            CalorieTrendPoint(day=log.day, calories=log.total_calories, target=target)
            for log in sorted(logs, key=lambda log: log.day)
        ]

    def get_streak(self, user_id: int) -> StreakInfo:
        """Return meal logging streaks."""
        dates = self.repository.list_logged_dates(user_id, self.max_lookback_days)
        current, longest = logging_streaks(dates, self._today())
        return StreakInfo(
            current_streak=current,
            longest_streak=longest,
            total_days_logged=len(dates),
        )

    def get_frequent_foods(
        self, user_id: int, limit: int = 10, days: int = 30
    ) -> list[FrequentFood]:
        """Return the most frequently eaten foods over the trailing window."""
        days = clamp_days(days, self.max_lookback_days)
        since = self._today() - timedelta(days=days)
        items = self.repository.list_consumed_food_items(user_id, since)
        return frequent_foods(items, limit)

    def _today(self) -> date:
        return local_today(self.clock(), self.timezone_name)

    def _range(self, start: date | None, end: date | None) -> tuple[date, date]:
        end = end or self._today()
        start = start or end - timedelta(days=DEFAULT_SUMMARY_DAYS)
        earliest = end - timedelta(days=self.max_lookback_days)
        if start < earliest:
            _logger.debug("Clamped report range start from %s to %s", start, earliest)
            start = earliest
        return start, end
