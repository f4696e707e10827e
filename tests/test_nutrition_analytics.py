"""Tests for nutrition analytics."""

from datetime import date, timedelta

import pytest

from fitness_tracker.domain.nutrition import FoodItem, MealEntry, MealLog, NutritionGoal
from fitness_tracker.services.dates import local_today
from fitness_tracker.services.nutrition_analytics import (
    NutritionAnalyticsService,
    frequent_foods,
    macro_breakdown,
)
from tests.conftest import (
    FIXED_NOW,
    TODAY,
    InMemoryNutritionAnalyticsRepository,
    fixed_clock,
)


def _log(days_ago: int, calories: float, *entries: MealEntry) -> MealLog:
    return MealLog(
        id=100 + days_ago,
        user_id=1,
        day=TODAY - timedelta(days=days_ago),
        meal_entries=list(entries),
        total_calories=calories,
        total_protein=calories / 20,
        total_carbohydrates=calories / 8,
        total_fat=calories / 40,
        water_intake=1500,
    )


def _food(name: str, calories: float, template_id: int | None = None) -> FoodItem:
    return FoodItem(
        id=0,
        meal_entry_id=0,
        name=name,
        food_template_id=template_id,
        calories=calories,
    )


def _entry(is_consumed: bool, *items: FoodItem) -> MealEntry:
    return MealEntry(
        id=0, meal_log_id=0, is_consumed=is_consumed, food_items=list(items)
    )


@pytest.fixture
def repository() -> InMemoryNutritionAnalyticsRepository:
    return InMemoryNutritionAnalyticsRepository(
        logs=[
            _log(
                0,
                2000,
                _entry(True, _food("Oats", 150, 1), _food("Banana", 100)),
                _entry(False, _food("Pizza", 800)),
            ),
            _log(1, 1800, _entry(True, _food("Oats", 300, 1))),
            _log(2, 2200, _entry(True, _food("Oats", 150, 1), _food("Banana", 90))),
            _log(9, 1600),
            _log(10, 2400),
        ]
    )


@pytest.fixture
def service(
    repository: InMemoryNutritionAnalyticsRepository,
) -> NutritionAnalyticsService:
    return NutritionAnalyticsService(repository, clock=fixed_clock)


def test_macro_breakdown_shares_macro_calories() -> None:
    log = MealLog(
        id=1,
        user_id=1,
        day=TODAY,
        total_calories=1250,
        total_protein=100,
        total_carbohydrates=100,
        total_fat=50,
    )

    breakdown = macro_breakdown([log])

    assert breakdown.protein_percentage == pytest.approx(32.0)
    assert breakdown.carbohydrates_percentage == pytest.approx(32.0)
    assert breakdown.fat_percentage == pytest.approx(36.0)
    assert breakdown.average_daily_calories == 1250


def test_macro_breakdown_without_logs_is_zero() -> None:
    breakdown = macro_breakdown([])

    assert breakdown.total_calories == 0
    assert breakdown.protein_percentage == 0


def test_daily_summary_defaults_to_last_week(
    service: NutritionAnalyticsService,
) -> None:
    days = service.get_daily_summary(1)

    assert [summary.day for summary in days] == [
        TODAY - timedelta(days=2),
        TODAY - timedelta(days=1),
        TODAY,
    ]
    assert days[-1].calories == 2000
    assert days[-1].water == 1500


def test_daily_summary_range_is_inclusive(service: NutritionAnalyticsService) -> None:
    days = service.get_daily_summary(
        1, start=TODAY - timedelta(days=10), end=TODAY - timedelta(days=9)
    )

    assert [summary.calories for summary in days] == [2400, 1600]


def test_weekly_summary_skips_empty_buckets(service: NutritionAnalyticsService) -> None:
    summary = service.get_weekly_summary(1, weeks=3)

    assert summary.total_weeks == 3
    assert [(week.week_start, week.days_logged) for week in summary.weekly_data] == [
        (TODAY - timedelta(days=7), 2),
        (TODAY - timedelta(days=14), 2),
    ]
    assert summary.weekly_data[0].week_end == TODAY
    assert summary.weekly_data[0].avg_calories == 2000
    assert summary.weekly_data[1].avg_calories == 2000
    assert summary.overall_average.calories == 2000


def test_weekly_summary_without_logs() -> None:
    service = NutritionAnalyticsService(
        InMemoryNutritionAnalyticsRepository(), clock=fixed_clock
    )

    summary = service.get_weekly_summary(1)

    assert summary.weekly_data == []
    assert summary.overall_average is None


def test_streak_resets_current_run_at_older_gap(
    service: NutritionAnalyticsService,
) -> None:
    streak = service.get_streak(1)

    assert streak.current_streak == 0
    assert streak.longest_streak == 3
    assert streak.total_days_logged == 5


def test_calorie_trend_carries_active_target(
    service: NutritionAnalyticsService,
    repository: InMemoryNutritionAnalyticsRepository,
) -> None:
    repository.active_goal = NutritionGoal(id=1, user_id=1, daily_calories=2100)

    points = service.get_calorie_trend(1, days=5)

    assert [(point.calories, point.target) for point in points] == [
        (2200, 2100),
        (1800, 2100),
        (2000, 2100),
    ]


def test_calorie_trend_without_goal(service: NutritionAnalyticsService) -> None:
    points = service.get_calorie_trend(1)

    assert len(points) == 5
    assert all(point.target is None for point in points)


def test_frequent_foods_count_only_consumed_meals(
    service: NutritionAnalyticsService,
) -> None:
    foods = service.get_frequent_foods(1)

    assert [(food.name, food.count) for food in foods] == [("Oats", 3), ("Banana", 2)]
    assert foods[0].total_calories == 600
    assert foods[0].average_calories == 200
    assert foods[1].food_template_id is None


def test_frequent_foods_limit() -> None:
    items = [_food("Rice", 200), _food("Rice", 200), _food("Tea", 5)]

    assert [food.name for food in frequent_foods(items, 1)] == ["Rice"]
    assert frequent_foods(items, 0) == []


def test_today_follows_configured_timezone() -> None:
    assert local_today(FIXED_NOW, "Asia/Tokyo") == date(2024, 6, 13)
    assert local_today(FIXED_NOW) == TODAY


def test_service_macro_breakdown_uses_range(
    service: NutritionAnalyticsService,
) -> None:
    breakdown = service.get_macro_breakdown(
        1, start=TODAY - timedelta(days=1), end=TODAY
    )

    assert breakdown.total_calories == 3800
    assert breakdown.average_daily_calories == 1900
