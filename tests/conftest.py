"""Shared test fixtures."""

from copy import deepcopy
from dataclasses import dataclass, field
from datetime import UTC, date, datetime

import pytest

from fitness_tracker.config import Settings
from fitness_tracker.containers import AppContainer
from fitness_tracker.domain.goals import BodyMetric, Goal, GoalProgress
from fitness_tracker.domain.nutrition import (
    FoodItem,
    FoodTemplate,
    MealEntry,
    MealLog,
    NutritionGoal,
    UserProfile,
)
from fitness_tracker.domain.workouts import SESSION_COMPLETED, Session
from fitness_tracker.errors import ConcurrencyError
from fitness_tracker.services.goals import GoalRepository, GoalTracker
from fitness_tracker.services.meals import MealLogRepository, MealLogService
from fitness_tracker.services.nutrition_analytics import (
    NutritionAnalyticsRepository,
    NutritionAnalyticsService,
)
from fitness_tracker.services.nutrition_goals import (
    NutritionGoalRepository,
    NutritionGoalService,
)
from fitness_tracker.services.rollup import NutritionRollupService
from fitness_tracker.services.workout_analytics import (
    WorkoutAnalyticsService,
    WorkoutRepository,
)

# A Wednesday.
FIXED_NOW = datetime(2024, 6, 12, 15, 0, tzinfo=UTC)
TODAY = FIXED_NOW.date()


def fixed_clock() -> datetime:
    return FIXED_NOW


@dataclass
class InMemoryMealRepository(MealLogRepository):
    """In-memory meal repository with version checks for tests."""

    templates: dict[int, FoodTemplate] = field(default_factory=dict)
    items: dict[int, FoodItem] = field(default_factory=dict)
    entries: dict[int, MealEntry] = field(default_factory=dict)
    logs: dict[int, MealLog] = field(default_factory=dict)
    pending_conflicts: int = 0
    next_id: int = 1

    def _new_id(self) -> int:
        value = self.next_id
        self.next_id += 1
        return value

    def add_template(self, template: FoodTemplate) -> FoodTemplate:
        self.templates[template.id] = template
        return template

    def add_log(self, user_id: int, day: date, water_intake: float = 0.0) -> MealLog:
        log = MealLog(
            id=self._new_id(), user_id=user_id, day=day, water_intake=water_intake
        )
        self.logs[log.id] = log
        return deepcopy(log)

    def add_entry(
        self, meal_log_id: int, meal_type: str = "Lunch", is_consumed: bool = False
    ) -> MealEntry:
        entry = MealEntry(
            id=self._new_id(),
            meal_log_id=meal_log_id,
            meal_type=meal_type,
            is_consumed=is_consumed,
        )
        self.entries[entry.id] = entry
        return deepcopy(entry)

    def get_food_template(self, food_template_id: int) -> FoodTemplate | None:
        return self.templates.get(food_template_id)

    def get_food_item(self, food_item_id: int) -> FoodItem | None:
        item = self.items.get(food_item_id)
        return deepcopy(item) if item else None

    def get_meal_entry(self, meal_entry_id: int) -> MealEntry | None:
        stored = self.entries.get(meal_entry_id)
        if stored is None:
            return None
        entry = deepcopy(stored)
        entry.food_items = [
            deepcopy(item)
            for item_id, item in sorted(self.items.items())
            if item.meal_entry_id == meal_entry_id
        ]
        return entry

    def get_meal_log(self, meal_log_id: int) -> MealLog | None:
        stored = self.logs.get(meal_log_id)
        if stored is None:
            return None
        log = deepcopy(stored)
        log.meal_entries = [
            self.get_meal_entry(entry_id)
            for entry_id, entry in sorted(self.entries.items())
            if entry.meal_log_id == meal_log_id
        ]
        return log

    def save_meal_entry_totals(self, entry: MealEntry) -> None:
        self._maybe_conflict()
        stored = self.entries[entry.id]
        if stored.version != entry.version:
            raise ConcurrencyError(f"Meal entry {entry.id} is stale")
        for name in (
            "total_calories",
            "total_protein",
            "total_carbohydrates",
            "total_fat",
            "total_fiber",
            "total_sodium",
            "updated_at",
        ):
            setattr(stored, name, getattr(entry, name))
        stored.version += 1
        entry.version = stored.version

    def save_meal_log_totals(self, log: MealLog) -> None:
        self._maybe_conflict()
        stored = self.logs[log.id]
        if stored.version != log.version:
            raise ConcurrencyError(f"Meal log {log.id} is stale")
        for name in (
            "total_calories",
            "total_protein",
            "total_carbohydrates",
            "total_fat",
            "total_fiber",
            "total_sodium",
            "updated_at",
        ):
            setattr(stored, name, getattr(log, name))
        stored.version += 1
        log.version = stored.version

    def create_food_item(self, item: FoodItem) -> FoodItem:
        created = deepcopy(item)
        created.id = self._new_id()
        self.items[created.id] = created
        return deepcopy(created)

    def update_food_item(self, item: FoodItem) -> None:
        self.items[item.id] = deepcopy(item)

    def delete_food_item(self, food_item_id: int) -> None:
        self.items.pop(food_item_id, None)

    def update_consumption(
        self, meal_entry_id: int, is_consumed: bool, consumed_at: datetime | None
    ) -> None:
        stored = self.entries[meal_entry_id]
        stored.is_consumed = is_consumed
        stored.consumed_at = consumed_at

    def delete_meal_entry(self, meal_entry_id: int) -> None:
        self.items = {
            item_id: item
            for item_id, item in self.items.items()
            if item.meal_entry_id != meal_entry_id
        }
        self.entries.pop(meal_entry_id, None)

    def delete_food_items_for_log(self, meal_log_id: int) -> None:
        entry_ids = {
            entry_id
            for entry_id, entry in self.entries.items()
            if entry.meal_log_id == meal_log_id
        }
        self.items = {
            item_id: item
            for item_id, item in self.items.items()
            if item.meal_entry_id not in entry_ids
        }

    def _maybe_conflict(self) -> None:
        if self.pending_conflicts > 0:
            self.pending_conflicts -= 1
            raise ConcurrencyError("Simulated concurrent write")


@dataclass
class InMemoryGoalRepository(GoalRepository):
    """In-memory goal repository for tests."""

    goals: dict[int, Goal] = field(default_factory=dict)
    progress: list[GoalProgress] = field(default_factory=list)
    metrics: list[BodyMetric] = field(default_factory=list)
    next_id: int = 1

    def list_active_goals(self, user_id: int) -> list[Goal]:
        return [
            deepcopy(goal)
            for goal in self.goals.values()
            if goal.user_id == user_id and goal.is_active and not goal.is_completed
        ]

    def get_goal(self, goal_id: int) -> Goal | None:
        goal = self.goals.get(goal_id)
        return deepcopy(goal) if goal else None

    def create_goal(self, goal: Goal) -> Goal:
        created = deepcopy(goal)
        created.id = self.next_id
        self.next_id += 1
        self.goals[created.id] = created
        return deepcopy(created)

    def save_goal(self, goal: Goal) -> None:
        stored = self.goals[goal.id]
        if stored.version != goal.version:
            raise ConcurrencyError(f"Goal {goal.id} is stale")
        saved = deepcopy(goal)
        saved.version += 1
        self.goals[goal.id] = saved
        goal.version = saved.version

    def add_progress(self, progress: GoalProgress) -> GoalProgress:
        self.progress.append(progress)
        return progress

    def list_progress(self, goal_id: int) -> list[GoalProgress]:
        return sorted(
            (p for p in self.progress if p.goal_id == goal_id),
            key=lambda p: p.recorded_at,
        )

    def create_body_metric(self, metric: BodyMetric) -> BodyMetric:
        self.metrics.append(metric)
        return metric


@dataclass
class InMemoryNutritionGoalRepository(NutritionGoalRepository):
    """In-memory nutrition goal repository for tests."""

    goals: dict[int, NutritionGoal] = field(default_factory=dict)
    logs: dict[tuple[int, date], MealLog] = field(default_factory=dict)
    profiles: dict[int, UserProfile] = field(default_factory=dict)
    next_id: int = 1

    def list_goals(self, user_id: int) -> list[NutritionGoal]:
        owned = [goal for goal in self.goals.values() if goal.user_id == user_id]
        return sorted(owned, key=lambda goal: not goal.is_active)

    def get_goal(self, goal_id: int) -> NutritionGoal | None:
        return self.goals.get(goal_id)

    def get_active_goal(self, user_id: int) -> NutritionGoal | None:
        for goal in self.goals.values():
            if goal.user_id == user_id and goal.is_active:
                return goal
        return None

    def create_goal(self, goal: NutritionGoal) -> NutritionGoal:
        created = deepcopy(goal)
        created.id = self.next_id
        self.next_id += 1
        self.goals[created.id] = created
        return deepcopy(created)

    def activate_goal(self, user_id: int, goal_id: int) -> None:
        for goal in self.goals.values():
            if goal.user_id == user_id:
                goal.is_active = goal.id == goal_id

    def get_meal_log_for_day(self, user_id: int, day: date) -> MealLog | None:
        return self.logs.get((user_id, day))

    def get_user_profile(self, user_id: int) -> UserProfile | None:
        return self.profiles.get(user_id)


@dataclass
class InMemoryWorkoutRepository(WorkoutRepository):
    """In-memory workout repository for tests."""

    sessions: list[Session] = field(default_factory=list)
    requested_since: list[datetime | None] = field(default_factory=list)

    def list_completed_sessions(
        self, user_id: int, since: datetime | None = None
    ) -> list[Session]:
        self.requested_since.append(since)
        return [
            session
            for session in self.sessions
            if session.user_id == user_id
            and session.status == SESSION_COMPLETED
            and (since is None or session.date >= since)
        ]


@dataclass
class InMemoryNutritionAnalyticsRepository(NutritionAnalyticsRepository):
    """In-memory nutrition analytics repository for tests."""

    logs: list[MealLog] = field(default_factory=list)
    active_goal: NutritionGoal | None = None

    def list_meal_logs(
        self, user_id: int, start: date, end_exclusive: date
    ) -> list[MealLog]:
        return sorted(
            (
                log
                for log in self.logs
                if log.user_id == user_id and start <= log.day < end_exclusive
            ),
            key=lambda log: log.day,
        )

    def list_logged_dates(self, user_id: int, limit: int) -> list[date]:
        days = sorted(
            (
                log.day
                for log in self.logs
                if log.user_id == user_id and log.total_calories > 0
            ),
            reverse=True,
        )
        return days[:limit]

    def list_consumed_food_items(self, user_id: int, since: date) -> list[FoodItem]:
        return [
            item
            for log in self.logs
            if log.user_id == user_id and log.day >= since
            for entry in log.meal_entries
            if entry.is_consumed
            for item in entry.food_items
        ]

    def get_active_nutrition_goal(self, user_id: int) -> NutritionGoal | None:
        return self.active_goal


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key=(
            "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9."
            "eyJyb2xlIjoic2VydmljZV9yb2xlIn0."
            "c2lnbmF0dXJl"
        ),
    )


@pytest.fixture
def meal_repository() -> InMemoryMealRepository:
    return InMemoryMealRepository()


@pytest.fixture
def goal_repository() -> InMemoryGoalRepository:
    return InMemoryGoalRepository()


@pytest.fixture
def rollup_service(meal_repository: InMemoryMealRepository) -> NutritionRollupService:
    return NutritionRollupService(repository=meal_repository, clock=fixed_clock)


@pytest.fixture
def goal_tracker(goal_repository: InMemoryGoalRepository) -> GoalTracker:
    return GoalTracker(goal_repository, clock=fixed_clock)


@pytest.fixture
def meal_log_service(
    meal_repository: InMemoryMealRepository,
    rollup_service: NutritionRollupService,
    goal_tracker: GoalTracker,
) -> MealLogService:
    return MealLogService(
        repository=meal_repository, rollup=rollup_service, goal_tracker=goal_tracker
    )


@pytest.fixture
def container(
    settings: Settings,
    meal_log_service: MealLogService,
    rollup_service: NutritionRollupService,
    goal_tracker: GoalTracker,
) -> AppContainer:
    return AppContainer(
        settings=settings,
        rollup_service=rollup_service,
        meal_log_service=meal_log_service,
        nutrition_goal_service=NutritionGoalService(
            InMemoryNutritionGoalRepository(), clock=fixed_clock
        ),
        goal_tracker=goal_tracker,
        workout_analytics_service=WorkoutAnalyticsService(
            InMemoryWorkoutRepository(), clock=fixed_clock
        ),
        nutrition_analytics_service=NutritionAnalyticsService(
            InMemoryNutritionAnalyticsRepository(), clock=fixed_clock
        ),
    )
