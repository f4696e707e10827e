"""Statistics, personal records and progress for completed workouts."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Protocol

from fitness_tracker.config import clamp_days
from fitness_tracker.domain.workouts import (
    SESSION_COMPLETED,
    Exercise,
    ExerciseProgress,
    ExerciseSet,
    MuscleGroupVolume,
    PersonalRecord,
    ProgressDataPoint,
    Session,
    WorkoutStats,
)
from fitness_tracker.services.dates import (
    start_of_month,
    start_of_week,
    utc_day,
    utc_now,
)
from fitness_tracker.services.streaks import workout_streaks

if TYPE_CHECKING:
    from collections.abc import Callable

_logger = logging.getLogger(__name__)

UNKNOWN_MUSCLE_GROUP = "Unknown"
_BRZYCKI_INTERCEPT = 1.0278
_BRZYCKI_SLOPE = 0.0278


class WorkoutRepository(Protocol):
    """Persistence interface for workout history."""

    def list_completed_sessions(
        self, user_id: int, since: datetime | None = None
    ) -> list[Session]:
        """Return completed sessions with exercises, sets and templates."""


def estimate_one_rep_max(weight: float, reps: int | None) -> float:
    """Estimate a one-rep max with the Brzycki formula."""
    reps = 1 if reps is None else reps
    if reps <= 1:
        return weight
    denominator = _BRZYCKI_INTERCEPT - _BRZYCKI_SLOPE * reps
    if denominator <= 0:
        return 0.0
    return weight / denominator


def set_volume(exercise_set: ExerciseSet) -> float:
    """Return reps times weight, counting missing values as zero."""
    return (exercise_set.reps or 0) * (exercise_set.weight or 0.0)


def _exercise_volume(exercise: Exercise) -> float:
    return sum(set_volume(exercise_set) for exercise_set in exercise.sets)


def _average_weight(exercise: Exercise) -> float:
    if not exercise.sets:
        return 0.0
    return sum(s.weight or 0.0 for s in exercise.sets) / len(exercise.sets)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def _exercise_key(exercise: Exercise) -> int | str:
    if exercise.exercise_template_id is not None:
        return exercise.exercise_template_id
    return exercise.name


def _display_name(exercise: Exercise) -> str:
    if exercise.template is not None:
        return exercise.template.name
    return exercise.name


def _completed(sessions: Iterable[Session]) -> list[Session]:
    ordered = [s for s in sessions if s.status == SESSION_COMPLETED]
    ordered.sort(key=lambda session: _as_utc(session.date))
    return ordered


def _group_exercises(
    sessions: list[Session],
) -> dict[int | str, list[tuple[Session, Exercise]]]:
    groups: dict[int | str, list[tuple[Session, Exercise]]] = {}
    for session in sessions:
        for exercise in session.exercises:
            groups.setdefault(_exercise_key(exercise), []).append((session, exercise))
    return groups


def compute_workout_stats(sessions: list[Session], now: datetime) -> WorkoutStats:
    """Summarize completed sessions."""
    completed = _completed(sessions)
    if not completed:
        return WorkoutStats(
            total_workouts=0,
            total_duration=0,
            average_duration=0,
            current_streak=0,
            longest_streak=0,
            workouts_this_week=0,
            workouts_this_month=0,
            total_sets=0,
            total_reps=0,
            total_volume=0.0,
        )

    today = utc_day(now)
    days = [utc_day(session.date) for session in completed]
    current, longest = workout_streaks(days, today)
    week_start = start_of_week(today)
    month_start = start_of_month(today)
    total_duration = sum(session.duration or 0 for session in completed)
    all_sets = [
        exercise_set
        for session in completed
        for exercise in session.exercises
        for exercise_set in exercise.sets
    ]
    return WorkoutStats(
        total_workouts=len(completed),
        total_duration=total_duration,
        average_duration=total_duration // len(completed),
        current_streak=current,
        longest_streak=longest,
        workouts_this_week=sum(1 for day in days if day >= week_start),
        workouts_this_month=sum(1 for day in days if day >= month_start),
        total_sets=len(all_sets),
        total_reps=sum(exercise_set.reps or 0 for exercise_set in all_sets),
        total_volume=sum(set_volume(exercise_set) for exercise_set in all_sets),
        first_workout_date=completed[0].date,
        last_workout_date=completed[-1].date,
    )


def compute_personal_records(
    sessions: list[Session], now: datetime
) -> list[PersonalRecord]:
    """Return the heaviest set per exercise, heaviest first.

    On equal weights the earliest set wins.
    """
    records = []
    for performed in _group_exercises(_completed(sessions)).values():
        candidates = [
            (session, exercise, exercise_set)
            for session, exercise in performed
            for exercise_set in exercise.sets
            if exercise_set.weight
        ]
        if not candidates:
            continue
        session, exercise, best = max(candidates, key=lambda c: c[2].weight or 0.0)
        weight = best.weight or 0.0
        reps = best.reps if best.reps is not None else 1
        records.append(
            PersonalRecord(
                exercise_name=_display_name(exercise),
                exercise_template_id=exercise.exercise_template_id,
                weight=weight,
                reps=reps,
                date_achieved=session.date,
                estimated_one_rep_max=estimate_one_rep_max(weight, reps),
                days_since_pr=(_as_utc(now) - _as_utc(session.date)).days,
            )
        )
    records.sort(key=lambda record: record.weight, reverse=True)
    return records


def compute_exercise_progress(sessions: list[Session]) -> list[ExerciseProgress]:
    """Return per-exercise progress, most frequently performed first."""
    results = []
    for performed in _group_exercises(_completed(sessions)).values():
        last_session, last_exercise = max(
            performed, key=lambda pair: _as_utc(pair[0].date)
        )
        first_weight = next(
            (
                _average_weight(exercise)
                for _, exercise in performed
                if exercise.sets and _average_weight(exercise) > 0
            ),
            0.0,
        )
        last_weight = _average_weight(last_exercise)

        weighted = [
            (session, exercise_set)
            for session, exercise in performed
            for exercise_set in exercise.sets
            if exercise_set.weight is not None
        ]
        record_session, record_set = (
            max(weighted, key=lambda pair: pair[1].weight or 0.0)
            if weighted
            else (None, None)
        )

        progress = None
        if len(performed) > 1 and first_weight > 0:
            progress = (last_weight - first_weight) / first_weight * 100

        _, first_exercise = performed[0]
        results.append(
            ExerciseProgress(
                exercise_template_id=first_exercise.exercise_template_id,
                exercise_name=_display_name(first_exercise),
                times_performed=len(performed),
                total_volume=sum(_exercise_volume(e) for _, e in performed),
                personal_record=record_set.weight if record_set else None,
                personal_record_date=record_session.date if record_session else None,
                last_weight=last_weight if last_weight > 0 else None,
                last_performed_date=last_session.date,
                progress_percentage=progress,
            )
        )
    results.sort(key=lambda item: item.times_performed, reverse=True)
    return results


def compute_muscle_group_volume(sessions: list[Session]) -> list[MuscleGroupVolume]:
    """Return training volume per muscle group, largest first.

    Exercises without a catalog template are not counted.
    """
    volumes: dict[str, float] = {}
    counts: dict[str, int] = {}
    for session in _completed(sessions):
        for exercise in session.exercises:
            if exercise.template is None:
                continue
            group = exercise.template.muscle_group or UNKNOWN_MUSCLE_GROUP
            volumes[group] = volumes.get(group, 0.0) + _exercise_volume(exercise)
            counts[group] = counts.get(group, 0) + 1

    total = sum(volumes.values())
    result = [
        MuscleGroupVolume(
            muscle_group=group,
            volume=volume,
            exercise_count=counts[group],
            percentage=volume / total * 100 if total > 0 else 0.0,
        )
        for group, volume in volumes.items()
    ]
    result.sort(key=lambda item: item.volume, reverse=True)
    return result


def compute_volume_over_time(sessions: list[Session]) -> list[ProgressDataPoint]:
    """Return the total volume of each session in date order."""
    points = []
    for session in _completed(sessions):
        volume = sum(_exercise_volume(exercise) for exercise in session.exercises)
        points.append(
            ProgressDataPoint(date=session.date, value=volume, label=f"{volume:.0f} kg")
        )
    return points


def compute_exercise_progress_over_time(
    sessions: list[Session], exercise_template_id: int
) -> list[ProgressDataPoint]:
    """Return the top set weight of a template per session, skipping zeroes."""
    points = []
    for session in _completed(sessions):
        for exercise in session.exercises:
            if exercise.exercise_template_id != exercise_template_id:
                continue
            top = max((s.weight or 0.0 for s in exercise.sets), default=0.0)
            if top > 0:
                points.append(
                    ProgressDataPoint(
                        date=session.date, value=top, label=f"{top:.1f} kg"
                    )
                )
    return points


@dataclass
class WorkoutAnalyticsService:
    """Loads completed sessions and derives workout analytics."""

    repository: WorkoutRepository
    clock: "Callable[[], datetime]" = utc_now
    max_lookback_days: int = 3650

    def get_workout_stats(self, user_id: int) -> WorkoutStats:
        """Return overall workout statistics."""
        now = self.clock()
        return compute_workout_stats(self._history(user_id, now), now)

    def get_personal_records(self, user_id: int) -> list[PersonalRecord]:
        """Return personal records per exercise."""
        now = self.clock()
        return compute_personal_records(self._history(user_id, now), now)

    def get_exercise_progress(self, user_id: int) -> list[ExerciseProgress]:
        """Return progress per exercise."""
        return compute_exercise_progress(self._history(user_id, self.clock()))

    def get_muscle_group_volume(
        self, user_id: int, days: int = 30
    ) -> list[MuscleGroupVolume]:
        """Return muscle group volume over the trailing window."""
        return compute_muscle_group_volume(self._window(user_id, days))

    def get_volume_over_time(
        self, user_id: int, days: int = 90
    ) -> list[ProgressDataPoint]:
        """Return per-session volume over the trailing window."""
        return compute_volume_over_time(self._window(user_id, days))

    def get_exercise_progress_over_time(
        self, user_id: int, exercise_template_id: int, days: int = 90
    ) -> list[ProgressDataPoint]:
        """Return top set weights of one exercise over the trailing window."""
        return compute_exercise_progress_over_time(
            self._window(user_id, days), exercise_template_id
        )

    def _history(self, user_id: int, now: datetime) -> list[Session]:
        since = _as_utc(now) - timedelta(days=self.max_lookback_days)
        return self.repository.list_completed_sessions(user_id, since)

    def _window(self, user_id: int, days: int) -> list[Session]:
        bounded = clamp_days(days, self.max_lookback_days)
        if bounded != days:
            _logger.debug("Clamped workout window from %s to %s days", days, bounded)
        since = _as_utc(self.clock()) - timedelta(days=bounded)
        return self.repository.list_completed_sessions(user_id, since)
