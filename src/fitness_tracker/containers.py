"""Dependency container wiring for the application."""

from dataclasses import dataclass

from supabase import create_client

from fitness_tracker.adapters.supabase_goal_repository import SupabaseGoalRepository
from fitness_tracker.adapters.supabase_meal_repository import SupabaseMealRepository
from fitness_tracker.adapters.supabase_nutrition_analytics_repository import (
    SupabaseNutritionAnalyticsRepository,
)
from fitness_tracker.adapters.supabase_nutrition_goal_repository import (
    SupabaseNutritionGoalRepository,
)
from fitness_tracker.adapters.supabase_workout_repository import (
    SupabaseWorkoutRepository,
)
from fitness_tracker.config import Settings
from fitness_tracker.services.goals import GoalTracker
from fitness_tracker.services.meals import MealLogService
from fitness_tracker.services.nutrition_analytics import NutritionAnalyticsService
from fitness_tracker.services.nutrition_goals import NutritionGoalService
from fitness_tracker.services.rollup import NutritionRollupService
from fitness_tracker.services.workout_analytics import WorkoutAnalyticsService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    rollup_service: NutritionRollupService
    meal_log_service: MealLogService
    nutrition_goal_service: NutritionGoalService
    goal_tracker: GoalTracker
    workout_analytics_service: WorkoutAnalyticsService
    nutrition_analytics_service: NutritionAnalyticsService


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    meal_repository = SupabaseMealRepository(supabase_client)
    goal_repository = SupabaseGoalRepository(supabase_client)
    nutrition_goal_repository = SupabaseNutritionGoalRepository(supabase_client)
    workout_repository = SupabaseWorkoutRepository(supabase_client)
    nutrition_analytics_repository = SupabaseNutritionAnalyticsRepository(
        supabase_client
    )

    rollup_service = NutritionRollupService(
        repository=meal_repository,
        retry_attempts=resolved_settings.concurrency_retry_attempts,
    )
    goal_tracker = GoalTracker(goal_repository)
    meal_log_service = MealLogService(
        repository=meal_repository,
        rollup=rollup_service,
        goal_tracker=goal_tracker,
        timezone_name=resolved_settings.default_timezone,
    )
    nutrition_goal_service = NutritionGoalService(nutrition_goal_repository)
    workout_analytics_service = WorkoutAnalyticsService(
        repository=workout_repository,
        max_lookback_days=resolved_settings.max_lookback_days,
    )
    nutrition_analytics_service = NutritionAnalyticsService(
        repository=nutrition_analytics_repository,
        max_lookback_days=resolved_settings.max_lookback_days,
        timezone_name=resolved_settings.default_timezone,
    )

    return AppContainer(
        settings=resolved_settings,
        rollup_service=rollup_service,
        meal_log_service=meal_log_service,
        nutrition_goal_service=nutrition_goal_service,
        goal_tracker=goal_tracker,
        workout_analytics_service=workout_analytics_service,
        nutrition_analytics_service=nutrition_analytics_service,
    )
