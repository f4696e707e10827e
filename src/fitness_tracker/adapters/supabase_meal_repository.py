"""Supabase repository for meal logs, entries and food items."""

from dataclasses import dataclass
from datetime import datetime

from supabase import Client

from fitness_tracker.adapters.supabase_rows import (
    food_item_payload,
    parse_food_item,
    parse_food_template,
    parse_meal_entry,
    parse_meal_log,
)
from fitness_tracker.domain.nutrition import FoodItem, FoodTemplate, MealEntry, MealLog
from fitness_tracker.errors import ConcurrencyError
from fitness_tracker.services.meals import MealLogRepository


@dataclass
class SupabaseMealRepository(MealLogRepository):
    """Supabase implementation for meal logging and rollups."""

    client: Client

    def get_food_template(self, food_template_id: int) -> FoodTemplate | None:
        """Return a food template by id."""
        response = (
            self.client.table("food_templates")
            .select("*")
            .eq("id", food_template_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return parse_food_template(response.data[0])

    def get_food_item(self, food_item_id: int) -> FoodItem | None:
        """Return a food item by id."""
        response = (
            self.client.table("food_items")
            .select("*")
            .eq("id", food_item_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return parse_food_item(response.data[0])

    def get_meal_entry(self, meal_entry_id: int) -> MealEntry | None:
        """Return a meal entry with its food items."""
        response = (
            self.client.table("meal_entries")
            .select("*")
            .eq("id", meal_entry_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        items = (
            self.client.table("food_items")
            .select("*")
            .eq("meal_entry_id", meal_entry_id)
            .order("id", desc=False)
            .execute()
        )
        return parse_meal_entry(
            response.data[0], [parse_food_item(row) for row in items.data or []]
        )

    def get_meal_log(self, meal_log_id: int) -> MealLog | None:
        """Return a meal log with its entries and their food items."""
        response = (
            self.client.table("meal_logs")
            .select("*")
            .eq("id", meal_log_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        entry_rows = (
            self.client.table("meal_entries")
            .select("*")
            .eq("meal_log_id", meal_log_id)
            .order("id", desc=False)
            .execute()
        ).data or []
        entry_ids = [row["id"] for row in entry_rows]
        items_by_entry: dict[int, list[FoodItem]] = {}
        if entry_ids:
            item_rows = (
                self.client.table("food_items")
                .select("*")
                .in_("meal_entry_id", entry_ids)
                .order("id", desc=False)
                .execute()
            ).data or []
            for row in item_rows:
                item = parse_food_item(row)
                items_by_entry.setdefault(item.meal_entry_id, []).append(item)
        entries = [
            parse_meal_entry(row, items_by_entry.get(int(row["id"]), []))
            for row in entry_rows
        ]
        return parse_meal_log(response.data[0], entries)

    def save_meal_entry_totals(self, entry: MealEntry) -> None:
        """Persist cached entry totals if the entry has not changed since read."""
        response = (
            self.client.table("meal_entries")
            .update(
                {
                    "total_calories": entry.total_calories,
                    "total_protein": entry.total_protein,
                    "total_carbohydrates": entry.total_carbohydrates,
                    "total_fat": entry.total_fat,
                    "total_fiber": entry.total_fiber,
                    "total_sodium": entry.total_sodium,
                    "updated_at": _iso(entry.updated_at),
                    "version": entry.version + 1,
                }
            )
            .eq("id", entry.id)
            .eq("version", entry.version)
            .execute()
        )
        if not response.data:
            raise ConcurrencyError(f"Meal entry {entry.id} was modified concurrently")
        entry.version += 1

    def save_meal_log_totals(self, log: MealLog) -> None:
        """Persist cached log totals if the log has not changed since read."""
        response = (
            self.client.table("meal_logs")
            .update(
                {
                    "total_calories": log.total_calories,
                    "total_protein": log.total_protein,
                    "total_carbohydrates": log.total_carbohydrates,
                    "total_fat": log.total_fat,
                    "total_fiber": log.total_fiber,
                    "total_sodium": log.total_sodium,
                    "updated_at": _iso(log.updated_at),
                    "version": log.version + 1,
                }
            )
            .eq("id", log.id)
            .eq("version", log.version)
            .execute()
        )
        if not response.data:
            raise ConcurrencyError(f"Meal log {log.id} was modified concurrently")
        log.version += 1

    def create_food_item(self, item: FoodItem) -> FoodItem:
        """Insert a food item row and return it."""
        response = (
            self.client.table("food_items").insert(food_item_payload(item)).execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create food item")
        return parse_food_item(response.data[0])

    def update_food_item(self, item: FoodItem) -> None:
        """Update a food item row."""
        self.client.table("food_items").update(food_item_payload(item)).eq(
            "id", item.id
        ).execute()

    def delete_food_item(self, food_item_id: int) -> None:
        """Delete a food item row."""
        self.client.table("food_items").delete().eq("id", food_item_id).execute()

    def update_consumption(
        self, meal_entry_id: int, is_consumed: bool, consumed_at: datetime | None
    ) -> None:
        """Update a meal entry's consumption flag."""
        self.client.table("meal_entries").update(
            {"is_consumed": is_consumed, "consumed_at": _iso(consumed_at)}
        ).eq("id", meal_entry_id).execute()

    def delete_meal_entry(self, meal_entry_id: int) -> None:
        """Delete a meal entry and its food items."""
        self.client.table("food_items").delete().eq(
            "meal_entry_id", meal_entry_id
        ).execute()
        self.client.table("meal_entries").delete().eq("id", meal_entry_id).execute()

    def delete_food_items_for_log(self, meal_log_id: int) -> None:
        """Delete every food item of a meal log."""
        entry_rows = (
            self.client.table("meal_entries")
            .select("id")
            .eq("meal_log_id", meal_log_id)
            .execute()
        ).data or []
        entry_ids = [row["id"] for row in entry_rows]
        if entry_ids:
            self.client.table("food_items").delete().in_(
                "meal_entry_id", entry_ids
            ).execute()


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value else None
