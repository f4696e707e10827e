"""Supabase repository for nutrition reports."""

from dataclasses import dataclass
from datetime import date

from supabase import Client

from fitness_tracker.adapters.supabase_rows import (
    as_date,
    parse_food_item,
    parse_meal_log,
    parse_nutrition_goal,
)
from fitness_tracker.domain.nutrition import FoodItem, MealLog, NutritionGoal
from fitness_tracker.services.nutrition_analytics import NutritionAnalyticsRepository


@dataclass
class SupabaseNutritionAnalyticsRepository(NutritionAnalyticsRepository):
    """Supabase implementation for nutrition report queries."""

    client: Client

    def list_meal_logs(
        self, user_id: int, start: date, end_exclusive: date
    ) -> list[MealLog]:
        """Return meal log rows in a day range."""
        response = (
            self.client.table("meal_logs")
            .select("*")
            .eq("user_id", user_id)
            .gte("date", start.isoformat())
            .lt("date", end_exclusive.isoformat())
            .order("date", desc=False)
            .execute()
        )
        return [parse_meal_log(row) for row in response.data or []]

    def list_logged_dates(self, user_id: int, limit: int) -> list[date]:
        """Return days with calories logged, newest first."""
        response = (
            self.client.table("meal_logs")
            .select("date")
            .eq("user_id", user_id)
            .gt("total_calories", 0)
            .order("date", desc=True)
            .limit(limit)
            .execute()
        )
        return [as_date(row.get("date")) for row in response.data or []]

    def list_consumed_food_items(self, user_id: int, since: date) -> list[FoodItem]:
        """Return food items of consumed entries in logs since a day."""
        response = (
            self.client.table("food_items")
            .select(
                "*, meal_entries!inner(is_consumed, meal_logs!inner(user_id, date))"
            )
            .eq("meal_entries.is_consumed", True)
            .eq("meal_entries.meal_logs.user_id", user_id)
            .gte("meal_entries.meal_logs.date", since.isoformat())
            .execute()
        )
        return [parse_food_item(row) for row in response.data or []]

    def get_active_nutrition_goal(self, user_id: int) -> NutritionGoal | None:
        """Return the active nutrition goal."""
        response = (
            self.client.table("nutrition_goals")
            .select("*")
            .eq("user_id", user_id)
            .eq("is_active", True)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return parse_nutrition_goal(response.data[0])
