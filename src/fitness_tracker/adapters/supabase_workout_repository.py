"""Supabase repository for workout history."""

from dataclasses import dataclass
from datetime import datetime

from supabase import Client

from fitness_tracker.adapters.supabase_rows import parse_session
from fitness_tracker.domain.workouts import SESSION_COMPLETED, Session
from fitness_tracker.services.workout_analytics import WorkoutRepository

_SESSION_COLUMNS = (
    "id, user_id, date, status, duration, name, "
    "exercises(id, name, exercise_template_id, "
    "exercise_templates(id, name, muscle_group, category), "
    "exercise_sets(id, set_number, reps, weight))"
)


@dataclass
class SupabaseWorkoutRepository(WorkoutRepository):
    """Supabase implementation for completed workout sessions."""

    client: Client

    def list_completed_sessions(
        self, user_id: int, since: datetime | None = None
    ) -> list[Session]:
        """Return completed sessions with nested exercises and sets."""
        query = (
            self.client.table("sessions")
            .select(_SESSION_COLUMNS)
            .eq("user_id", user_id)
            .eq("status", SESSION_COMPLETED)
        )
        if since is not None:
            query = query.gte("date", since.isoformat())
        response = query.order("date", desc=False).execute()
        return [parse_session(row) for row in response.data or []]
