"""Fitness goal tracking driven by body metrics, nutrition logs and workouts."""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Protocol

from fitness_tracker.domain.goals import (
    BodyMetric,
    Goal,
    GoalDirection,
    GoalMetric,
    GoalProgress,
)
from fitness_tracker.domain.nutrition import MacroTotals
from fitness_tracker.errors import NotFoundError, ValidationError
from fitness_tracker.services.dates import start_of_week, utc_day, utc_now

if TYPE_CHECKING:
    from collections.abc import Callable

_logger = logging.getLogger(__name__)

ABSOLUTE_TOLERANCE = 0.5
BODY_METRIC_NOTE = "Auto-tracked from body metric log"
NUTRITION_NOTE = "Auto-tracked from nutrition log"
WORKOUT_NOTE = "Auto-tracked from workout completion"

# Checked in order; the first keyword found in the goal type wins.
_METRIC_KEYWORDS: tuple[tuple[tuple[str, ...], GoalMetric], ...] = (
    (("workout", "frequency", "training"), GoalMetric.WORKOUTS),
    (("weight",), GoalMetric.WEIGHT),
    (("bodyfat", "body fat"), GoalMetric.BODY_FAT),
    (("chest",), GoalMetric.CHEST),
    (("waist",), GoalMetric.WAIST),
    (("hip",), GoalMetric.HIP),
    (("arm",), GoalMetric.ARM),
    (("thigh",), GoalMetric.THIGH),
    (("calf",), GoalMetric.CALF),
    (("calorie",), GoalMetric.CALORIES),
    (("protein",), GoalMetric.PROTEIN),
)

_BODY_METRIC_FIELDS = {
    GoalMetric.WEIGHT: "weight",
    GoalMetric.BODY_FAT: "body_fat_percentage",
    GoalMetric.CHEST: "chest_circumference",
    GoalMetric.WAIST: "waist_circumference",
    GoalMetric.HIP: "hip_circumference",
    GoalMetric.ARM: "arm_circumference",
    GoalMetric.THIGH: "thigh_circumference",
    GoalMetric.CALF: "calf_circumference",
}


class GoalRepository(Protocol):
    """Persistence interface for goals, their progress and body metrics."""

    def list_active_goals(self, user_id: int) -> list[Goal]:
        """Return active goals that are not completed."""

    def get_goal(self, goal_id: int) -> Goal | None:
        """Return a goal by id."""

    def create_goal(self, goal: Goal) -> Goal:
        """Insert a goal and return it with its assigned id."""

    def save_goal(self, goal: Goal) -> None:
        """Persist goal state; raise ConcurrencyError on a stale version."""

    def add_progress(self, progress: GoalProgress) -> GoalProgress:
        """Insert a progress record."""

    def list_progress(self, goal_id: int) -> list[GoalProgress]:
        """Return a goal's progress ordered by recorded time."""

    def create_body_metric(self, metric: BodyMetric) -> BodyMetric:
        """Insert a body metric snapshot."""


def classify_goal_type(goal_type: str) -> tuple[GoalMetric, GoalDirection]:
    """Decide which metric a free-text goal tracks and which way it moves."""
    text = goal_type.lower().strip()
    metric = GoalMetric.CUSTOM
    for keywords, candidate in _METRIC_KEYWORDS:
        if any(keyword in text for keyword in keywords):
            metric = candidate
            break

    if "lose" in text or "loss" in text or "decrease" in text:
        direction = GoalDirection.DECREASE
    elif "gain" in text or "increase" in text:
        direction = GoalDirection.INCREASE
    else:
        direction = GoalDirection.ABSOLUTE
    return metric, direction


def is_achieved(goal: Goal) -> bool:
    """Return whether a goal's current value satisfies its direction."""
    if goal.direction == GoalDirection.DECREASE:
        return goal.current_value <= goal.target_value
    if goal.direction == GoalDirection.INCREASE:
        return goal.current_value >= goal.target_value
    return abs(goal.current_value - goal.target_value) <= ABSOLUTE_TOLERANCE


def counts_toward_time_frame(
    time_frame: str | None, workout_at: datetime, now: datetime
) -> bool:
    """Return whether a workout falls inside a goal's current period.

    Goals without a time frame, or with "total", count every workout.
    Unknown time frames count nothing.
    """
    frame = (time_frame or "total").strip().lower()
    workout_day = utc_day(workout_at)
    today = utc_day(now)
    if frame == "daily":
        return workout_day == today
    if frame == "weekly":
        return start_of_week(workout_day) == start_of_week(today)
    if frame == "monthly":
        return (workout_day.year, workout_day.month) == (today.year, today.month)
    if frame == "yearly":
        return workout_day.year == today.year
    return frame == "total"


def body_metric_value(metric: BodyMetric, goal_metric: GoalMetric) -> float | None:
    """Return the measurement a goal metric reads from a snapshot."""
    field_name = _BODY_METRIC_FIELDS.get(goal_metric)
    if field_name is None:
        return None
    return getattr(metric, field_name)


@dataclass
class GoalTracker:
    """Records goal progress and detects completion."""

    repository: GoalRepository
    clock: "Callable[[], datetime]" = utc_now

    def create_goal(  # noqa: PLR0913
        self,
        user_id: int,
        goal_type: str,
        target_value: float,
        current_value: float = 0.0,
        unit: str | None = None,
        time_frame: str | None = None,
        target_date: datetime | None = None,
    ) -> Goal:
        """Create a goal, classifying its type once."""
        if not goal_type.strip():
            raise ValidationError("Goal type is required")
        metric, direction = classify_goal_type(goal_type)
        goal = Goal(
            id=0,
            user_id=user_id,
            goal_type=goal_type,
            target_value=target_value,
            current_value=current_value,
            metric=metric,
            direction=direction,
            unit=unit,
            time_frame=time_frame,
            start_date=self.clock(),
            target_date=target_date,
        )
        return self.repository.create_goal(goal)

    def record_body_metric(self, metric: BodyMetric) -> tuple[BodyMetric, list[Goal]]:
        """Store a body metric snapshot and apply it to the user's goals."""
        stored = self.repository.create_body_metric(metric)
        return stored, self.apply_body_metric(stored.user_id, stored)

    def apply_body_metric(self, user_id: int, metric: BodyMetric) -> list[Goal]:
        """Update every active goal that tracks a measurement in the snapshot."""
        updated = []
        for goal in self.repository.list_active_goals(user_id):
            value = body_metric_value(metric, goal.metric)
            if value is None:
                continue
            self._track(goal, value, BODY_METRIC_NOTE, metric.recorded_at)
            updated.append(goal)
        return updated

    def apply_nutrition_consumption(
        self, user_id: int, totals: MacroTotals
    ) -> list[Goal]:
        """Update calorie and protein goals from a day's consumed totals."""
        values = {
            GoalMetric.CALORIES: totals.calories,
            GoalMetric.PROTEIN: totals.protein,
        }
        updated = []
        for goal in self.repository.list_active_goals(user_id):
            value = values.get(goal.metric)
            if not value:
                continue
            self._track(goal, value, NUTRITION_NOTE, self.clock())
            updated.append(goal)
        return updated

    def apply_workout_completion(
        self, user_id: int, completed_at: datetime
    ) -> list[Goal]:
        """Count a completed workout toward workout frequency goals."""
        now = self.clock()
        updated = []
        for goal in self.repository.list_active_goals(user_id):
            if goal.metric != GoalMetric.WORKOUTS:
                continue
            if not counts_toward_time_frame(goal.time_frame, completed_at, now):
                continue
            goal.current_value += 1
            progress = self.repository.add_progress(
                GoalProgress(
                    goal_id=goal.id,
                    recorded_at=now,
                    value=goal.current_value,
                    notes=WORKOUT_NOTE,
                )
            )
            goal.progress_history.append(progress)
            if goal.current_value >= goal.target_value:
                self._complete(goal, now)
            self.repository.save_goal(goal)
            updated.append(goal)
        return updated

    def add_progress(
        self, goal_id: int, value: float, notes: str | None = None
    ) -> GoalProgress:
        """Record an explicit value; completes once it reaches the target."""
        goal = self._require_goal(goal_id)
        now = self.clock()
        progress = self.repository.add_progress(
            GoalProgress(goal_id=goal.id, recorded_at=now, value=value, notes=notes)
        )
        goal.current_value = value
        goal.progress_history.append(progress)
        if not goal.is_completed and goal.current_value >= goal.target_value:
            self._complete(goal, now)
        self.repository.save_goal(goal)
        return progress

    def complete_goal(self, goal_id: int) -> Goal:
        """Mark a goal as completed by hand."""
        goal = self._require_goal(goal_id)
        if not goal.is_completed:
            self._complete(goal, self.clock())
            self.repository.save_goal(goal)
        return goal

    def get_history(self, goal_id: int) -> list[GoalProgress]:
        """Return a goal's progress history, oldest first."""
        self._require_goal(goal_id)
        return self.repository.list_progress(goal_id)

    def _track(
        self, goal: Goal, value: float, notes: str, recorded_at: datetime
    ) -> None:
        progress = self.repository.add_progress(
            GoalProgress(
                goal_id=goal.id, recorded_at=recorded_at, value=value, notes=notes
            )
        )
        goal.progress_history.append(progress)
        goal.current_value = value
        if is_achieved(goal):
            self._complete(goal, self.clock())
        self.repository.save_goal(goal)

    def _complete(self, goal: Goal, now: datetime) -> None:
        goal.is_completed = True
        goal.completed_at = now
        goal.is_active = False
        _logger.info(
            "Goal %s (%s) completed at %s for user %s",
            goal.id,
            goal.goal_type,
            goal.current_value,
            goal.user_id,
        )

    def _require_goal(self, goal_id: int) -> Goal:
        goal = self.repository.get_goal(goal_id)
        if goal is None:
            raise NotFoundError(f"Goal {goal_id} not found")
        return goal
