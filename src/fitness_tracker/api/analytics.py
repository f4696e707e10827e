"""Workout and nutrition analytics endpoints."""

from __future__ import annotations

from datetime import date  # noqa: TC003
from typing import TYPE_CHECKING

from fastapi import APIRouter, Request

if TYPE_CHECKING:
    from fitness_tracker.containers import AppContainer

router = APIRouter(prefix="/users/{user_id}", tags=["analytics"])


def _container(request: Request) -> AppContainer:
    return request.app.state.container


@router.get("/workouts/stats")
async def workout_stats(user_id: int, request: Request) -> dict[str, object]:
    """Return overall workout statistics."""
    service = _container(request).workout_analytics_service
    return {"stats": service.get_workout_stats(user_id)}


@router.get("/workouts/personal-records")
async def personal_records(user_id: int, request: Request) -> dict[str, object]:
    """Return personal records per exercise."""
    service = _container(request).workout_analytics_service
    return {"records": service.get_personal_records(user_id)}


@router.get("/workouts/exercise-progress")
async def exercise_progress(user_id: int, request: Request) -> dict[str, object]:
    """Return progress per exercise."""
    service = _container(request).workout_analytics_service
    return {"exercises": service.get_exercise_progress(user_id)}


@router.get("/workouts/exercise-progress/{exercise_template_id}")
async def exercise_progress_over_time(
    user_id: int, exercise_template_id: int, request: Request, days: int = 90
) -> dict[str, object]:
    """Return top set weights of one exercise over time."""
    service = _container(request).workout_analytics_service
    points = service.get_exercise_progress_over_time(
        user_id, exercise_template_id, days
    )
    return {"points": points}


@router.get("/workouts/muscle-group-volume")
async def muscle_group_volume(
    user_id: int, request: Request, days: int = 30
) -> dict[str, object]:
    """Return volume per muscle group."""
    service = _container(request).workout_analytics_service
    return {"groups": service.get_muscle_group_volume(user_id, days)}


@router.get("/workouts/volume-over-time")
async def volume_over_time(
    user_id: int, request: Request, days: int = 90
) -> dict[str, object]:
    """Return per-session volume."""
    service = _container(request).workout_analytics_service
    return {"points": service.get_volume_over_time(user_id, days)}


@router.get("/nutrition/summary/daily")
async def daily_summary(
    user_id: int,
    request: Request,
    start_date: date | None = None,
    end_date: date | None = None,
) -> dict[str, object]:
    """Return per-day nutrition totals."""
    service = _container(request).nutrition_analytics_service
    return {"days": service.get_daily_summary(user_id, start_date, end_date)}


@router.get("/nutrition/summary/weekly")
async def weekly_summary(
    user_id: int, request: Request, weeks: int = 4
) -> dict[str, object]:
    """Return weekly nutrition averages."""
    service = _container(request).nutrition_analytics_service
    return {"summary": service.get_weekly_summary(user_id, weeks)}


@router.get("/nutrition/macros/breakdown")
async def macro_breakdown(
    user_id: int,
    request: Request,
    start_date: date | None = None,
    end_date: date | None = None,
) -> dict[str, object]:
    """Return the macro split."""
    service = _container(request).nutrition_analytics_service
    return {"breakdown": service.get_macro_breakdown(user_id, start_date, end_date)}


@router.get("/nutrition/calories/trend")
async def calorie_trend(
    user_id: int, request: Request, days: int = 30
) -> dict[str, object]:
    """Return daily calories against the active target."""
    service = _container(request).nutrition_analytics_service
    return {"points": service.get_calorie_trend(user_id, days)}


@router.get("/nutrition/streak")
async def logging_streak(user_id: int, request: Request) -> dict[str, object]:
    """Return meal logging streaks."""
    service = _container(request).nutrition_analytics_service
    return {"streak": service.get_streak(user_id)}


@router.get("/nutrition/frequent-foods")
async def frequent_foods(
    user_id: int, request: Request, limit: int = 10, days: int = 30
) -> dict[str, object]:
    """Return the most frequently eaten foods."""
    service = _container(request).nutrition_analytics_service
    return {"foods": service.get_frequent_foods(user_id, limit, days)}


@router.get("/nutrition/progress")
async def nutrition_progress(
    user_id: int, request: Request, day: date | None = None
) -> dict[str, object]:
    """Return a day's consumption against the active goal."""
    service = _container(request).nutrition_goal_service
    return {"progress": service.daily_progress(user_id, day)}
