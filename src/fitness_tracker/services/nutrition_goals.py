"""Daily nutrition goal management."""

import logging
from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import TYPE_CHECKING, Protocol

from fitness_tracker.domain.nutrition import (
    MacroTotals,
    MealLog,
    NutritionGoal,
    NutritionProgress,
    NutritionTargets,
    UserProfile,
)
from fitness_tracker.errors import NotFoundError
from fitness_tracker.services import targets
from fitness_tracker.services.dates import utc_day, utc_now

if TYPE_CHECKING:
    from collections.abc import Callable

_logger = logging.getLogger(__name__)

PLAN_FIBER = 25.0
PLAN_WATER = 2000.0


class NutritionGoalRepository(Protocol):
    """Persistence interface for nutrition goals."""

    def list_goals(self, user_id: int) -> list[NutritionGoal]:
        """Return a user's goals, active first."""

    def get_goal(self, goal_id: int) -> NutritionGoal | None:
        """Return a goal by id."""

    def get_active_goal(self, user_id: int) -> NutritionGoal | None:
        """Return the user's active goal."""

    def create_goal(self, goal: NutritionGoal) -> NutritionGoal:
        """Insert a goal and return it with its assigned id."""

    def activate_goal(self, user_id: int, goal_id: int) -> None:
        """Deactivate every other goal of the user, then activate this one."""

    def get_meal_log_for_day(self, user_id: int, day: date) -> MealLog | None:
        """Return the meal log of one day."""

    def get_user_profile(self, user_id: int) -> UserProfile | None:
        """Return the biometric profile of a user."""


def apply_macro_percentages(goal: NutritionGoal) -> NutritionGoal:
    """Convert any macro percentages on a goal into gram targets."""
    if goal.protein_percentage is not None:
        goal.daily_protein = goal.daily_calories * goal.protein_percentage / 100 / 4
    if goal.carbohydrates_percentage is not None:
        goal.daily_carbohydrates = (
            goal.daily_calories * goal.carbohydrates_percentage / 100 / 4
        )
    if goal.fat_percentage is not None:
        goal.daily_fat = goal.daily_calories * goal.fat_percentage / 100 / 9
    return goal


def plan_name(goal_type: str | None) -> str:
    """Return the display name of a calculated plan."""
    category = targets.goal_category(goal_type)
    if category == targets.GOAL_LOSS:
        return "Weight Loss Plan"
    if category == targets.GOAL_GAIN:
        return "Muscle Gain Plan"
    return "Maintenance Plan"


def _percentage(consumed: float, target: float) -> float:
    if target <= 0:
        return 0.0
    return consumed / target * 100


def build_progress(
    day: date, goal: NutritionGoal | None, log: MealLog | None
) -> NutritionProgress:
    """Compare a day's cached totals with a goal."""
    consumed = MacroTotals(
        calories=log.total_calories if log else 0.0,
        protein=log.total_protein if log else 0.0,
        carbohydrates=log.total_carbohydrates if log else 0.0,
        fat=log.total_fat if log else 0.0,
        fiber=(log.total_fiber or 0.0) if log else 0.0,
        sodium=(log.total_sodium or 0.0) if log else 0.0,
    )
    target_calories = goal.daily_calories if goal else 0.0
    target_protein = goal.daily_protein if goal else 0.0
    target_carbohydrates = goal.daily_carbohydrates if goal else 0.0
    target_fat = goal.daily_fat if goal else 0.0
    remaining = MacroTotals(
        calories=target_calories - consumed.calories,
        protein=target_protein - consumed.protein,
        carbohydrates=target_carbohydrates - consumed.carbohydrates,
        fat=target_fat - consumed.fat,
    )
    return NutritionProgress(
        day=day,
        goal=goal,
        consumed=consumed,
        remaining=remaining,
        calories_percentage=_percentage(consumed.calories, target_calories),
        protein_percentage=_percentage(consumed.protein, target_protein),
        carbohydrates_percentage=_percentage(
            consumed.carbohydrates, target_carbohydrates
        ),
        fat_percentage=_percentage(consumed.fat, target_fat),
    )


@dataclass
class NutritionGoalService:
    """Creates, activates and reports against nutrition goals."""

    repository: NutritionGoalRepository
    clock: "Callable[[], datetime]" = utc_now

    def list_goals(self, user_id: int) -> list[NutritionGoal]:
        """Return a user's goals."""
        return self.repository.list_goals(user_id)

    def get_active_goal(self, user_id: int) -> NutritionGoal | None:
        """Return the user's active goal, if any."""
        return self.repository.get_active_goal(user_id)

    def create_goal(self, goal: NutritionGoal) -> NutritionGoal:
        """Store a goal; an active goal becomes the user's only active one."""
        now = self.clock()
        apply_macro_percentages(goal)
        make_active = goal.is_active
        created = self.repository.create_goal(
            replace(goal, is_active=False, created_at=now, updated_at=now)
        )
        if make_active:
            self.repository.activate_goal(created.user_id, created.id)
            created.is_active = True
        return created

    def activate_goal(self, user_id: int, goal_id: int) -> NutritionGoal:
        """Make a goal the user's only active one."""
        goal = self.repository.get_goal(goal_id)
        if goal is None or goal.user_id != user_id:
            raise NotFoundError(f"Nutrition goal {goal_id} not found")
        self.repository.activate_goal(user_id, goal_id)
        goal.is_active = True
        _logger.info("Activated nutrition goal %s for user %s", goal_id, user_id)
        return goal

    def calculate_for_profile(
        self,
        user_id: int,
        goal_type: str | None,
        target_weight_change_per_week: float | None = None,
    ) -> NutritionTargets:
        """Calculate targets from the user's stored profile."""
        profile = self.repository.get_user_profile(user_id)
        if profile is None:
            raise NotFoundError(f"User {user_id} not found")
        return targets.calculate_for_profile(
            profile, goal_type, utc_day(self.clock()), target_weight_change_per_week
        )

    def calculate_and_save(
        self,
        user_id: int,
        goal_type: str | None,
        target_weight_change_per_week: float | None = None,
    ) -> tuple[NutritionTargets, NutritionGoal]:
        """Calculate targets and store them as the user's active goal."""
        calculated = self.calculate_for_profile(
            user_id, goal_type, target_weight_change_per_week
        )
        goal = self.create_goal(
            NutritionGoal(
                id=0,
                user_id=user_id,
                name=plan_name(goal_type),
                daily_calories=calculated.daily_calories,
                daily_protein=calculated.daily_protein,
                daily_carbohydrates=calculated.daily_carbohydrates,
                daily_fat=calculated.daily_fat,
                daily_fiber=PLAN_FIBER,
                daily_water=PLAN_WATER,
                is_active=True,
            )
        )
        return calculated, goal

    def daily_progress(
        self, user_id: int, day: date | None = None
    ) -> NutritionProgress:
        """Return consumption for a day against the active goal."""
        target_day = day or utc_day(self.clock())
        goal = self.repository.get_active_goal(user_id)
        log = self.repository.get_meal_log_for_day(user_id, target_day)
        return build_progress(target_day, goal, log)
