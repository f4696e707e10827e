"""Domain models for fitness goals and body metrics."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class GoalMetric(str, Enum):
    """Measured quantity a goal tracks."""

    WEIGHT = "weight"
    BODY_FAT = "body_fat"
    CHEST = "chest"
    WAIST = "waist"
    HIP = "hip"
    ARM = "arm"
    THIGH = "thigh"
    CALF = "calf"
    CALORIES = "calories"
    PROTEIN = "protein"
    WORKOUTS = "workouts"
    CUSTOM = "custom"


class GoalDirection(str, Enum):
    """Which side of the target counts as achieved."""

    DECREASE = "decrease"
    INCREASE = "increase"
    ABSOLUTE = "absolute"


@dataclass(frozen=True)
class GoalProgress:
    """A recorded value for a goal."""

    goal_id: int
    recorded_at: datetime
    value: float
    notes: str | None = None
    id: int | None = None


@dataclass
class Goal:
    """A user's fitness goal with a target value."""

    id: int
    user_id: int
    goal_type: str
    target_value: float
    current_value: float
    metric: GoalMetric
    direction: GoalDirection
    unit: str | None = None
    time_frame: str | None = None
    start_date: datetime | None = None
    target_date: datetime | None = None
    is_active: bool = True
    is_completed: bool = False
    completed_at: datetime | None = None
    progress_history: list[GoalProgress] = field(default_factory=list)
    version: int = 1


@dataclass(frozen=True)
class BodyMetric:
    """Snapshot of body measurements."""

    user_id: int
    recorded_at: datetime
    weight: float | None = None
    body_fat_percentage: float | None = None
    chest_circumference: float | None = None
    waist_circumference: float | None = None
    hip_circumference: float | None = None
    arm_circumference: float | None = None
    thigh_circumference: float | None = None
    calf_circumference: float | None = None
    notes: str | None = None
    id: int | None = None
