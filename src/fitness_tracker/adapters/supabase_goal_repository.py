"""Supabase repository for goals, goal progress and body metrics."""

from dataclasses import dataclass, replace

from supabase import Client

from fitness_tracker.adapters.supabase_rows import parse_goal, parse_goal_progress
from fitness_tracker.domain.goals import BodyMetric, Goal, GoalProgress
from fitness_tracker.errors import ConcurrencyError
from fitness_tracker.services.goals import GoalRepository


@dataclass
class SupabaseGoalRepository(GoalRepository):
    """Supabase implementation for goal tracking."""

    client: Client

    def list_active_goals(self, user_id: int) -> list[Goal]:
        """Return active, incomplete goals for a user."""
        response = (
            self.client.table("goals")
            .select("*")
            .eq("user_id", user_id)
            .eq("is_active", True)
            .eq("is_completed", False)
            .order("id", desc=False)
            .execute()
        )
        return [parse_goal(row) for row in response.data or []]

    def get_goal(self, goal_id: int) -> Goal | None:
        """Return a goal by id."""
        response = (
            self.client.table("goals").select("*").eq("id", goal_id).limit(1).execute()
        )
        if not response.data:
            return None
        return parse_goal(response.data[0])

    def create_goal(self, goal: Goal) -> Goal:
        """Insert a goal row and return it."""
        response = (
            self.client.table("goals")
            .insert(
                {
                    "user_id": goal.user_id,
                    "goal_type": goal.goal_type,
                    "target_value": goal.target_value,
                    "current_value": goal.current_value,
                    "metric": goal.metric.value,
                    "direction": goal.direction.value,
                    "unit": goal.unit,
                    "time_frame": goal.time_frame,
                    "start_date": (
                        goal.start_date.isoformat() if goal.start_date else None
                    ),
                    "target_date": (
                        goal.target_date.isoformat() if goal.target_date else None
                    ),
                    "is_active": goal.is_active,
                    "is_completed": goal.is_completed,
                    "version": goal.version,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create goal")
        return parse_goal(response.data[0])

    def save_goal(self, goal: Goal) -> None:
        """Persist goal state if it has not changed since read."""
        response = (
            self.client.table("goals")
            .update(
                {
                    "current_value": goal.current_value,
                    "is_active": goal.is_active,
                    "is_completed": goal.is_completed,
                    "completed_at": (
                        goal.completed_at.isoformat() if goal.completed_at else None
                    ),
                    "version": goal.version + 1,
                }
            )
            .eq("id", goal.id)
            .eq("version", goal.version)
            .execute()
        )
        if not response.data:
            raise ConcurrencyError(f"Goal {goal.id} was modified concurrently")
        goal.version += 1

    def add_progress(self, progress: GoalProgress) -> GoalProgress:
        """Insert a progress row."""
        response = (
            self.client.table("goal_progress")
            .insert(
                {
                    "goal_id": progress.goal_id,
                    "recorded_at": progress.recorded_at.isoformat(),
                    "value": progress.value,
                    "notes": progress.notes,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to record goal progress")
        return parse_goal_progress(response.data[0])

    def list_progress(self, goal_id: int) -> list[GoalProgress]:
        """Return progress rows for a goal, oldest first."""
        response = (
            self.client.table("goal_progress")
            .select("*")
            .eq("goal_id", goal_id)
            .order("recorded_at", desc=False)
            .execute()
        )
        return [parse_goal_progress(row) for row in response.data or []]

    def create_body_metric(self, metric: BodyMetric) -> BodyMetric:
        """Insert a body metric row."""
        response = (
            self.client.table("body_metrics")
            .insert(
                {
                    "user_id": metric.user_id,
                    "recorded_at": metric.recorded_at.isoformat(),
                    "weight": metric.weight,
                    "body_fat_percentage": metric.body_fat_percentage,
                    "chest_circumference": metric.chest_circumference,
                    "waist_circumference": metric.waist_circumference,
                    "hip_circumference": metric.hip_circumference,
                    "arm_circumference": metric.arm_circumference,
                    "thigh_circumference": metric.thigh_circumference,
                    "calf_circumference": metric.calf_circumference,
                    "notes": metric.notes,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create body metric")
        return replace(metric, id=int(response.data[0]["id"]))
