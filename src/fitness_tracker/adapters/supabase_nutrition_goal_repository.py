"""Supabase repository for nutrition goals."""

from dataclasses import dataclass
from datetime import date

from supabase import Client

from fitness_tracker.adapters.supabase_rows import (
    as_optional_float,
    parse_meal_log,
    parse_nutrition_goal,
)
from fitness_tracker.domain.nutrition import MealLog, NutritionGoal, UserProfile
from fitness_tracker.services.nutrition_goals import NutritionGoalRepository


@dataclass
class SupabaseNutritionGoalRepository(NutritionGoalRepository):
    """Supabase implementation for nutrition goals and profiles."""

    client: Client

    def list_goals(self, user_id: int) -> list[NutritionGoal]:
        """Return a user's goals, active first."""
        response = (
            self.client.table("nutrition_goals")
            .select("*")
            .eq("user_id", user_id)
            .order("is_active", desc=True)
            .order("created_at", desc=True)
            .execute()
        )
        return [parse_nutrition_goal(row) for row in response.data or []]

    def get_goal(self, goal_id: int) -> NutritionGoal | None:
        """Return a goal by id."""
        response = (
            self.client.table("nutrition_goals")
            .select("*")
            .eq("id", goal_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return parse_nutrition_goal(response.data[0])

    def get_active_goal(self, user_id: int) -> NutritionGoal | None:
        """Return the active goal of a user."""
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

    def create_goal(self, goal: NutritionGoal) -> NutritionGoal:
        """Insert a goal row and return it."""
        response = (
            self.client.table("nutrition_goals")
            .insert(
                {
                    "user_id": goal.user_id,
                    "name": goal.name,
                    "daily_calories": goal.daily_calories,
                    "daily_protein": goal.daily_protein,
                    "daily_carbohydrates": goal.daily_carbohydrates,
                    "daily_fat": goal.daily_fat,
                    "daily_fiber": goal.daily_fiber,
                    "daily_sodium": goal.daily_sodium,
                    "daily_sugar": goal.daily_sugar,
                    "daily_water": goal.daily_water,
                    "protein_percentage": goal.protein_percentage,
                    "carbohydrates_percentage": goal.carbohydrates_percentage,
                    "fat_percentage": goal.fat_percentage,
                    "is_active": goal.is_active,
                    "created_at": (
                        goal.created_at.isoformat() if goal.created_at else None
                    ),
                    "updated_at": (
                        goal.updated_at.isoformat() if goal.updated_at else None
                    ),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create nutrition goal")
        return parse_nutrition_goal(response.data[0])

    def activate_goal(self, user_id: int, goal_id: int) -> None:
        """Make the given goal the user's only active one.

        The switch runs server side in one transaction, see
        `supabase/migrations/*_activate_nutrition_goal.sql`.
        """
        self.client.rpc(
            "activate_nutrition_goal", {"p_user_id": user_id, "p_goal_id": goal_id}
        ).execute()

    def get_meal_log_for_day(self, user_id: int, day: date) -> MealLog | None:
        """Return the meal log row of one day without its entries."""
        response = (
            self.client.table("meal_logs")
            .select("*")
            .eq("user_id", user_id)
            .eq("date", day.isoformat())
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return parse_meal_log(response.data[0])

    def get_user_profile(self, user_id: int) -> UserProfile | None:
        """Return a user's biometric profile."""
        response = (
            self.client.table("users")
            .select("id, weight, height, date_of_birth, gender, activity_level")
            .eq("id", user_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        date_of_birth = row.get("date_of_birth")
        return UserProfile(
            user_id=int(row["id"]),
            weight_kg=as_optional_float(row.get("weight")),
            height_cm=as_optional_float(row.get("height")),
            date_of_birth=(
                date.fromisoformat(str(date_of_birth)[:10]) if date_of_birth else None
            ),
            gender=row.get("gender"),
            activity_level=row.get("activity_level"),
        )
