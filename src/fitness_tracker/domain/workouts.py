"""Domain models for workout sessions and their analytics."""

from dataclasses import dataclass, field
from datetime import datetime

SESSION_DRAFT = "draft"
SESSION_IN_PROGRESS = "in_progress"
SESSION_COMPLETED = "completed"
SESSION_PLANNED = "planned"


@dataclass(frozen=True)
class ExerciseTemplate:
    """Catalog entry describing an exercise."""

    id: int
    name: str
    muscle_group: str | None = None
    category: str | None = None


@dataclass(frozen=True)
class ExerciseSet:
    """One set of an exercise; weight in kilograms."""

    id: int
    set_number: int
    reps: int | None = None
    weight: float | None = None


@dataclass(frozen=True)
class Exercise:
    """An exercise performed in a session."""

    id: int
    session_id: int
    name: str
    exercise_template_id: int | None = None
    template: ExerciseTemplate | None = None
    sets: list[ExerciseSet] = field(default_factory=list)


@dataclass(frozen=True)
class Session:
    """A workout session."""

    id: int
    user_id: int
    date: datetime
    status: str = SESSION_COMPLETED
    duration: int | None = None
    name: str | None = None
    exercises: list[Exercise] = field(default_factory=list)


@dataclass(frozen=True)
class WorkoutStats:
    """Overall workout statistics for a user."""

    total_workouts: int
    total_duration: int
    average_duration: int
    current_streak: int
    longest_streak: int
    workouts_this_week: int
    workouts_this_month: int
    total_sets: int
    total_reps: int
    total_volume: float
    first_workout_date: datetime | None = None
    last_workout_date: datetime | None = None


@dataclass(frozen=True)
class PersonalRecord:
    """Heaviest set recorded for an exercise."""

    exercise_name: str
    exercise_template_id: int | None
    weight: float
    reps: int
    date_achieved: datetime
    estimated_one_rep_max: float
    days_since_pr: int


@dataclass(frozen=True)
class ExerciseProgress:
    """Progress summary for one exercise."""

    exercise_template_id: int | None
    exercise_name: str
    times_performed: int
    total_volume: float
    personal_record: float | None
    personal_record_date: datetime | None
    last_weight: float | None
    last_performed_date: datetime
    progress_percentage: float | None


@dataclass(frozen=True)
class MuscleGroupVolume:
    """Training volume for a muscle group."""

    muscle_group: str
    volume: float
    exercise_count: int
    percentage: float


@dataclass(frozen=True)
class ProgressDataPoint:
    """A dated value for charting."""

    date: datetime
    value: float
    label: str
