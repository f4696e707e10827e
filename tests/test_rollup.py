"""Tests for meal total rollups."""

import pytest

from fitness_tracker.domain.nutrition import FoodItem, MealEntry, MealLog
from fitness_tracker.errors import ConcurrencyError, NotFoundError
from fitness_tracker.services.rollup import (
    NutritionRollupService,
    consumed_totals,
    planned_totals,
    recalculate_meal_entry,
    recalculate_meal_log,
)
from tests.conftest import FIXED_NOW, TODAY, InMemoryMealRepository, fixed_clock


def _item(item_id: int, calories: float, fiber: float | None = None) -> FoodItem:
    return FoodItem(
        id=item_id,
        meal_entry_id=1,
        name=f"food-{item_id}",
        calories=calories,
        protein=calories / 10,
        carbohydrates=calories / 20,
        fat=calories / 40,
        fiber=fiber,
    )


def _seed(repository: InMemoryMealRepository) -> tuple[MealLog, MealEntry, MealEntry]:
    log = repository.add_log(user_id=7, day=TODAY)
    eaten = repository.add_entry(log.id, "Breakfast", is_consumed=True)
    planned = repository.add_entry(log.id, "Dinner", is_consumed=False)
    for entry, calories in ((eaten, 300.0), (eaten, 200.0), (planned, 700.0)):
        repository.create_food_item(
            FoodItem(
                id=0,
                meal_entry_id=entry.id,
                name="food",
                calories=calories,
                protein=calories / 10,
            )
        )
    return log, eaten, planned


def test_recalculate_meal_entry_treats_missing_fiber_as_zero() -> None:
    entry = MealEntry(
        id=1, meal_log_id=1, food_items=[_item(1, 100, fiber=3.0), _item(2, 50)]
    )

    recalculate_meal_entry(entry, FIXED_NOW)

    assert entry.total_calories == 150
    assert entry.total_fiber == 3.0
    assert entry.food_items[1].fiber is None
    assert entry.updated_at == FIXED_NOW


def test_recalculate_meal_entry_is_idempotent() -> None:
    entry = MealEntry(id=1, meal_log_id=1, food_items=[_item(1, 120), _item(2, 80)])

    recalculate_meal_entry(entry, FIXED_NOW)
    first = (entry.total_calories, entry.total_protein, entry.total_fat)
    recalculate_meal_entry(entry, FIXED_NOW)

    assert (entry.total_calories, entry.total_protein, entry.total_fat) == first


def test_consumed_and_planned_views_come_from_same_entries() -> None:
    log = MealLog(
        id=1,
        user_id=1,
        day=TODAY,
        meal_entries=[
            MealEntry(id=1, meal_log_id=1, is_consumed=True, total_calories=400),
            MealEntry(id=2, meal_log_id=1, is_consumed=False, total_calories=600),
        ],
    )

    assert consumed_totals(log).calories == 400
    assert planned_totals(log).calories == 1000

    recalculate_meal_log(log, FIXED_NOW, consumed_only=False)
    assert log.total_calories == 1000
    recalculate_meal_log(log, FIXED_NOW)
    assert log.total_calories == 400


def test_recompute_ancestors_updates_entry_and_consumed_log(
    meal_repository: InMemoryMealRepository,
    rollup_service: NutritionRollupService,
) -> None:
    log, eaten, _planned = _seed(meal_repository)
    item_id = next(
        item.id
        for item in meal_repository.items.values()
        if item.meal_entry_id == eaten.id
    )

    result = rollup_service.recompute_ancestors(item_id)

    assert meal_repository.entries[eaten.id].total_calories == 500
    assert result.total_calories == 500
    assert meal_repository.logs[log.id].total_calories == 500


def test_recompute_log_keeps_consumed_conservation(
    meal_repository: InMemoryMealRepository,
    rollup_service: NutritionRollupService,
) -> None:
    log, _eaten, planned = _seed(meal_repository)

    rollup_service.recompute_log(log.id)
    meal_repository.update_consumption(planned.id, True, FIXED_NOW)
    result = rollup_service.recompute_entry(planned.id)

    consumed_sum = sum(
        entry.total_calories
        for entry in meal_repository.entries.values()
        if entry.is_consumed
    )
    assert result.total_calories == consumed_sum == 1200
    assert meal_repository.logs[log.id].total_calories == 1200


def test_repeated_recompute_does_not_accumulate(
    meal_repository: InMemoryMealRepository,
    rollup_service: NutritionRollupService,
) -> None:
    log, _eaten, _planned = _seed(meal_repository)

    first = rollup_service.recompute_log(log.id)
    second = rollup_service.recompute_log(log.id)

    assert first.total_calories == second.total_calories == 500
    assert first.total_protein == second.total_protein


def test_recompute_retries_once_after_conflict(
    meal_repository: InMemoryMealRepository,
    rollup_service: NutritionRollupService,
) -> None:
    log, eaten, _planned = _seed(meal_repository)
    meal_repository.pending_conflicts = 1

    result = rollup_service.recompute_entry(eaten.id)

    assert result.total_calories == 500
    assert meal_repository.logs[log.id].total_calories == 500


def test_recompute_raises_after_second_conflict(
    meal_repository: InMemoryMealRepository,
) -> None:
    _log, eaten, _planned = _seed(meal_repository)
    service = NutritionRollupService(
        repository=meal_repository, retry_attempts=1, clock=fixed_clock
    )
    meal_repository.pending_conflicts = 2

    with pytest.raises(ConcurrencyError):
        service.recompute_entry(eaten.id)


def test_recompute_missing_food_item_raises(
    rollup_service: NutritionRollupService,
) -> None:
    with pytest.raises(NotFoundError):
        rollup_service.recompute_ancestors(999)
