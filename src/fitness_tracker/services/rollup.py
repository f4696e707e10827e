"""Bottom-up recomputation of cached meal totals."""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Protocol

from fitness_tracker.domain.nutrition import FoodItem, MacroTotals, MealEntry, MealLog
from fitness_tracker.errors import ConcurrencyError, NotFoundError
from fitness_tracker.services.dates import utc_now

if TYPE_CHECKING:
    from collections.abc import Callable

_logger = logging.getLogger(__name__)


class MealRollupRepository(Protocol):
    """Persistence interface for the records touched by a rollup."""

    def get_food_item(self, food_item_id: int) -> FoodItem | None:
        """Return a food item by id."""

    def get_meal_entry(self, meal_entry_id: int) -> MealEntry | None:
        """Return a meal entry with its food items."""

    def get_meal_log(self, meal_log_id: int) -> MealLog | None:
        """Return a meal log with its entries and their food items."""

    def save_meal_entry_totals(self, entry: MealEntry) -> None:
        """Persist cached totals; raise ConcurrencyError on a stale version."""

    def save_meal_log_totals(self, log: MealLog) -> None:
        """Persist cached totals; raise ConcurrencyError on a stale version."""


def _present(value: float | None) -> float:
    """Treat an absent optional nutrient as zero for summation."""
    return value if value is not None else 0.0


def sum_food_items(items: list[FoodItem]) -> MacroTotals:
    """Sum food item nutrition."""
    return MacroTotals(
        calories=sum(item.calories for item in items),
        protein=sum(item.protein for item in items),
        carbohydrates=sum(item.carbohydrates for item in items),
        fat=sum(item.fat for item in items),
        fiber=sum(_present(item.fiber) for item in items),
        sodium=sum(_present(item.sodium) for item in items),
    )


def sum_meal_entries(entries: list[MealEntry], *, consumed_only: bool) -> MacroTotals:
    """Sum cached entry totals, optionally only for consumed entries."""
    selected = [entry for entry in entries if entry.is_consumed or not consumed_only]
    return MacroTotals(
        calories=sum(entry.total_calories for entry in selected),
        protein=sum(entry.total_protein for entry in selected),
        carbohydrates=sum(entry.total_carbohydrates for entry in selected),
        fat=sum(entry.total_fat for entry in selected),
        fiber=sum(_present(entry.total_fiber) for entry in selected),
        sodium=sum(_present(entry.total_sodium) for entry in selected),
    )


def consumed_totals(log: MealLog) -> MacroTotals:
    """Return the day's totals over consumed entries only."""
    return sum_meal_entries(log.meal_entries, consumed_only=True)


def planned_totals(log: MealLog) -> MacroTotals:
    """Return the day's totals over every entry, consumed or not."""
    return sum_meal_entries(log.meal_entries, consumed_only=False)


def recalculate_meal_entry(entry: MealEntry, now: datetime) -> MealEntry:
    """Refresh an entry's cached totals from its current food items."""
    totals = sum_food_items(entry.food_items)
    entry.total_calories = totals.calories
    entry.total_protein = totals.protein
    entry.total_carbohydrates = totals.carbohydrates
    entry.total_fat = totals.fat
    entry.total_fiber = totals.fiber
    entry.total_sodium = totals.sodium
    entry.updated_at = now
    return entry


def recalculate_meal_log(
    log: MealLog, now: datetime, *, consumed_only: bool = True
) -> MealLog:
    """Refresh a log's cached totals from its entries' cached totals."""
    totals = sum_meal_entries(log.meal_entries, consumed_only=consumed_only)
    log.total_calories = totals.calories
    log.total_protein = totals.protein
    log.total_carbohydrates = totals.carbohydrates
    log.total_fat = totals.fat
    log.total_fiber = totals.fiber
    log.total_sodium = totals.sodium
    log.updated_at = now
    return log


@dataclass
class NutritionRollupService:
    """Keeps meal entry and meal log totals in step with their food items."""

    repository: MealRollupRepository
    retry_attempts: int = 1
    clock: "Callable[[], datetime]" = utc_now

    def recompute_ancestors(self, food_item_id: int) -> MealLog:
        """Recompute the entry and log that own a food item."""
        item = self.repository.get_food_item(food_item_id)
        if item is None:
            raise NotFoundError(f"Food item {food_item_id} not found")
        return self.recompute_entry(item.meal_entry_id)

    def recompute_entry(self, meal_entry_id: int) -> MealLog:
        """Recompute an entry, then its log, retrying once on a stale write."""
        attempt = 0
        while True:
            try:
                return self._recompute_entry_once(meal_entry_id)
            except ConcurrencyError:
                attempt += 1
                _logger.warning(
                    "Rollup conflict for meal entry %s (attempt %s/%s)",
                    meal_entry_id,
                    attempt,
                    self.retry_attempts + 1,
                )
                if attempt > self.retry_attempts:
                    raise

    def recompute_log(self, meal_log_id: int) -> MealLog:
        """Recompute every entry of a log and then the log itself."""
        attempt = 0
        while True:
            try:
                return self._recompute_log_once(meal_log_id)
            except ConcurrencyError:
                attempt += 1
                _logger.warning(
                    "Rollup conflict for meal log %s (attempt %s/%s)",
                    meal_log_id,
                    attempt,
                    self.retry_attempts + 1,
                )
                if attempt > self.retry_attempts:
                    raise

    def _recompute_entry_once(self, meal_entry_id: int) -> MealLog:
        entry = self.repository.get_meal_entry(meal_entry_id)
        if entry is None:
            raise NotFoundError(f"Meal entry {meal_entry_id} not found")
        now = self.clock()
        recalculate_meal_entry(entry, now)
        self.repository.save_meal_entry_totals(entry)
        return self._refresh_log(entry.meal_log_id, now)

    def _recompute_log_once(self, meal_log_id: int) -> MealLog:
        log = self.repository.get_meal_log(meal_log_id)
        if log is None:
            raise NotFoundError(f"Meal log {meal_log_id} not found")
        now = self.clock()
        for entry in log.meal_entries:
            recalculate_meal_entry(entry, now)
            self.repository.save_meal_entry_totals(entry)
        recalculate_meal_log(log, now, consumed_only=True)
        self.repository.save_meal_log_totals(log)
        return log

    def _refresh_log(self, meal_log_id: int, now: datetime) -> MealLog:
        log = self.repository.get_meal_log(meal_log_id)
        if log is None:
            raise NotFoundError(f"Meal log {meal_log_id} not found")
        recalculate_meal_log(log, now, consumed_only=True)
        self.repository.save_meal_log_totals(log)
        return log
