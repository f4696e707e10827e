"""Meal logging mutations that keep cached totals consistent."""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Protocol

from fitness_tracker.domain.nutrition import FoodItem, FoodTemplate, MealEntry, MealLog
from fitness_tracker.errors import NotFoundError, ValidationError
from fitness_tracker.services.dates import local_today
from fitness_tracker.services.rollup import (
    MealRollupRepository,
    NutritionRollupService,
    consumed_totals,
)

if TYPE_CHECKING:
    from fitness_tracker.services.goals import GoalTracker

_logger = logging.getLogger(__name__)


class MealLogRepository(MealRollupRepository, Protocol):
    """Persistence interface for meal logs and their food items."""

    def get_food_template(self, food_template_id: int) -> FoodTemplate | None:
        """Return a food template by id."""

    def create_food_item(self, item: FoodItem) -> FoodItem:
        """Insert a food item and return it with its assigned id."""

    def update_food_item(self, item: FoodItem) -> None:
        """Persist a food item's quantity and nutrition values."""

    def delete_food_item(self, food_item_id: int) -> None:
        """Delete a food item."""

    def update_consumption(
        self, meal_entry_id: int, is_consumed: bool, consumed_at: datetime | None
    ) -> None:
        """Persist a meal entry's consumption state."""

    def delete_meal_entry(self, meal_entry_id: int) -> None:
        """Delete a meal entry and its food items."""

    def delete_food_items_for_log(self, meal_log_id: int) -> None:
        """Delete every food item under a meal log."""


def item_from_template(
    template: FoodTemplate, quantity: float, *, item_id: int, meal_entry_id: int
) -> FoodItem:
    """Build a food item scaled from a template."""
    return FoodItem(
        id=item_id,
        meal_entry_id=meal_entry_id,
        name=template.name,
        quantity=quantity,
        food_template_id=template.id,
        brand=template.brand,
        serving_size=template.serving_size,
        serving_unit=template.serving_unit,
        calories=template.calories * quantity,
        protein=template.protein * quantity,
        carbohydrates=template.carbohydrates * quantity,
        fat=template.fat * quantity,
        fiber=_scale(template.fiber, quantity),
        sugar=_scale(template.sugar, quantity),
        sodium=_scale(template.sodium, quantity),
    )


def rescale_custom_item(item: FoodItem, quantity: float) -> FoodItem:
    """Scale a custom food item's values to a new quantity."""
    if item.quantity <= 0:
        raise ValidationError(f"Food item {item.id} has no quantity to scale from")
    ratio = quantity / item.quantity
    item.calories *= ratio
    item.protein *= ratio
    item.carbohydrates *= ratio
    item.fat *= ratio
    item.fiber = _scale(item.fiber, ratio)
    item.sugar = _scale(item.sugar, ratio)
    item.sodium = _scale(item.sodium, ratio)
    item.quantity = quantity
    return item


def _scale(value: float | None, factor: float) -> float | None:
    if value is None:
        return None
    return value * factor


def _require_positive_quantity(quantity: float) -> None:
    if quantity <= 0:
        raise ValidationError("Quantity must be greater than zero")


@dataclass
class MealLogService:
    """Applies food item and meal entry changes, then rolls totals up."""

    repository: MealLogRepository
    rollup: NutritionRollupService
    goal_tracker: "GoalTracker | None" = None
    timezone_name: str = "UTC"

    def add_food_from_template(
        self, meal_entry_id: int, food_template_id: int, quantity: float = 1.0
    ) -> FoodItem:
        """Add a template-derived food item to a meal entry."""
        _require_positive_quantity(quantity)
        self._require_entry(meal_entry_id)
        template = self._require_template(food_template_id)
        item = self.repository.create_food_item(
            item_from_template(
                template, quantity, item_id=0, meal_entry_id=meal_entry_id
            )
        )
        self._after_change(self.rollup.recompute_ancestors(item.id))
        return item

    def add_custom_food(self, meal_entry_id: int, item: FoodItem) -> FoodItem:
        """Add a custom food item whose values already cover its quantity."""
        _require_positive_quantity(item.quantity)
        self._require_entry(meal_entry_id)
        item.meal_entry_id = meal_entry_id
        item.food_template_id = None
        created = self.repository.create_food_item(item)
        self._after_change(self.rollup.recompute_ancestors(created.id))
        return created

    def update_quantity(self, food_item_id: int, quantity: float) -> FoodItem:
        """Change a food item's quantity and rescale its nutrition."""
        _require_positive_quantity(quantity)
        item = self._require_item(food_item_id)
        template = (
            self.repository.get_food_template(item.food_template_id)
            if item.food_template_id is not None
            else None
        )
        if template is not None:
            updated = item_from_template(
                template, quantity, item_id=item.id, meal_entry_id=item.meal_entry_id
            )
        else:
            updated = rescale_custom_item(item, quantity)
        updated.updated_at = self.rollup.clock()
        self.repository.update_food_item(updated)
        self._after_change(self.rollup.recompute_ancestors(updated.id))
        return updated

    def replace_food_item(
        self, food_item_id: int, food_template_id: int, quantity: float | None = None
    ) -> FoodItem:
        """Swap a food item for another template, keeping its quantity by default."""
        item = self._require_item(food_item_id)
        resolved_quantity = quantity if quantity is not None else item.quantity
        _require_positive_quantity(resolved_quantity)
        template = self._require_template(food_template_id)
        replacement = item_from_template(
            template,
            resolved_quantity,
            item_id=item.id,
            meal_entry_id=item.meal_entry_id,
        )
        replacement.updated_at = self.rollup.clock()
        self.repository.update_food_item(replacement)
        self._after_change(self.rollup.recompute_ancestors(replacement.id))
        return replacement

    def delete_food_item(self, food_item_id: int) -> MealLog:
        """Remove a food item and recompute the meal it belonged to."""
        item = self._require_item(food_item_id)
        self.repository.delete_food_item(food_item_id)
        log = self.rollup.recompute_entry(item.meal_entry_id)
        self._after_change(log)
        return log

    def set_consumed(
        self,
        meal_entry_id: int,
        is_consumed: bool = True,
        consumed_at: datetime | None = None,
    ) -> MealLog:
        """Mark a meal entry as eaten or not eaten."""
        self._require_entry(meal_entry_id)
        stamp = (consumed_at or self.rollup.clock()) if is_consumed else None
        self.repository.update_consumption(meal_entry_id, is_consumed, stamp)
        log = self.rollup.recompute_entry(meal_entry_id)
        self._after_change(log)
        return log

    def delete_meal_entry(self, meal_entry_id: int) -> MealLog:
        """Delete a meal entry and recompute its day."""
        entry = self._require_entry(meal_entry_id)
        self.repository.delete_meal_entry(meal_entry_id)
        log = self.rollup.recompute_log(entry.meal_log_id)
        self._after_change(log)
        return log

    def clear_meal_log(self, meal_log_id: int) -> MealLog:
        """Remove every food item of a day and reset consumption."""
        log = self.repository.get_meal_log(meal_log_id)
        if log is None:
            raise NotFoundError(f"Meal log {meal_log_id} not found")
        self.repository.delete_food_items_for_log(meal_log_id)
        for entry in log.meal_entries:
            self.repository.update_consumption(entry.id, False, None)
        cleared = self.rollup.recompute_log(meal_log_id)
        _logger.info("Cleared meal log %s", meal_log_id)
        self._after_change(cleared)
        return cleared

    def recalculate_meal_log(self, meal_log_id: int) -> MealLog:
        """Recompute a whole day from its food items."""
        log = self.rollup.recompute_log(meal_log_id)
        self._after_change(log)
        return log

    def _after_change(self, log: MealLog) -> None:
        # Only today's totals move calorie and protein goals.
        if self.goal_tracker is None:
            return
        if log.day != local_today(self.rollup.clock(), self.timezone_name):
            return
        self.goal_tracker.apply_nutrition_consumption(log.user_id, consumed_totals(log))

    def _require_item(self, food_item_id: int) -> FoodItem:
        item = self.repository.get_food_item(food_item_id)
        if item is None:
            raise NotFoundError(f"Food item {food_item_id} not found")
        return item

    def _require_entry(self, meal_entry_id: int) -> MealEntry:
        entry = self.repository.get_meal_entry(meal_entry_id)
        if entry is None:
            raise NotFoundError(f"Meal entry {meal_entry_id} not found")
        return entry

    def _require_template(self, food_template_id: int) -> FoodTemplate:
        template = self.repository.get_food_template(food_template_id)
        if template is None:
            raise NotFoundError(f"Food template {food_template_id} not found")
        return template
