"""Meal logging and goal tracking endpoints."""

from typing import TYPE_CHECKING

from fastapi import APIRouter, Request

from fitness_tracker.api.models import (
    AddFoodRequest,
    BodyMetricRequest,
    ConsumptionRequest,
    GoalProgressRequest,
    GoalRequest,
    QuantityRequest,
    WorkoutCompletionRequest,
)
from fitness_tracker.domain.goals import BodyMetric

if TYPE_CHECKING:
    from fitness_tracker.containers import AppContainer

router = APIRouter(tags=["tracking"])


def _container(request: Request) -> "AppContainer":
    return request.app.state.container


@router.post("/meal-entries/{meal_entry_id}/food-items")
async def add_food(
    meal_entry_id: int, payload: AddFoodRequest, request: Request
) -> dict[str, object]:
    """Log a food item from a template."""
    service = _container(request).meal_log_service
    item = service.add_food_from_template(
        meal_entry_id, payload.food_template_id, payload.quantity
    )
    return {"item": item}


@router.patch("/food-items/{food_item_id}")
async def update_quantity(
    food_item_id: int, payload: QuantityRequest, request: Request
) -> dict[str, object]:
    """Change the quantity of a logged food item."""
    service = _container(request).meal_log_service
    return {"item": service.update_quantity(food_item_id, payload.quantity)}


@router.delete("/food-items/{food_item_id}")
async def delete_food(food_item_id: int, request: Request) -> dict[str, object]:
    """Remove a logged food item."""
    service = _container(request).meal_log_service
    return {"meal_log": service.delete_food_item(food_item_id)}


@router.post("/meal-entries/{meal_entry_id}/consumed")
async def set_consumed(
    meal_entry_id: int, payload: ConsumptionRequest, request: Request
) -> dict[str, object]:
    """Mark a meal entry as eaten or not eaten."""
    service = _container(request).meal_log_service
    log = service.set_consumed(meal_entry_id, payload.is_consumed, payload.consumed_at)
    return {"meal_log": log}


@router.post("/meal-logs/{meal_log_id}/clear")
async def clear_meal_log(meal_log_id: int, request: Request) -> dict[str, object]:
    """Remove every food item of a day."""
    service = _container(request).meal_log_service
    return {"meal_log": service.clear_meal_log(meal_log_id)}


@router.post("/meal-logs/{meal_log_id}/recalculate")
async def recalculate_meal_log(
    meal_log_id: int, request: Request
) -> dict[str, object]:
    """Rebuild a day's cached totals from its food items."""
    service = _container(request).meal_log_service
    return {"meal_log": service.recalculate_meal_log(meal_log_id)}


@router.post("/users/{user_id}/goals")
async def create_goal(
    user_id: int, payload: GoalRequest, request: Request
) -> dict[str, object]:
    """Create a fitness goal."""
    tracker = _container(request).goal_tracker
    goal = tracker.create_goal(
        user_id,
        payload.goal_type,
        payload.target_value,
        current_value=payload.current_value,
        unit=payload.unit,
        time_frame=payload.time_frame,
        target_date=payload.target_date,
    )
    return {"goal": goal}


@router.post("/goals/{goal_id}/progress")
async def add_goal_progress(
    goal_id: int, payload: GoalProgressRequest, request: Request
) -> dict[str, object]:
    """Record a value for a goal."""
    tracker = _container(request).goal_tracker
    return {"progress": tracker.add_progress(goal_id, payload.value, payload.notes)}


@router.post("/goals/{goal_id}/complete")
async def complete_goal(goal_id: int, request: Request) -> dict[str, object]:
    """Mark a goal as completed."""
    return {"goal": _container(request).goal_tracker.complete_goal(goal_id)}


@router.get("/goals/{goal_id}/history")
async def goal_history(goal_id: int, request: Request) -> dict[str, object]:
    """Return a goal's recorded values."""
    return {"progress": _container(request).goal_tracker.get_history(goal_id)}


@router.post("/users/{user_id}/body-metrics")
async def record_body_metric(
    user_id: int, payload: BodyMetricRequest, request: Request
) -> dict[str, object]:
    """Store body measurements and update the goals they track."""
    tracker = _container(request).goal_tracker
    values = payload.model_dump(exclude={"recorded_at"})
    metric = BodyMetric(
        user_id=user_id, recorded_at=payload.recorded_at or tracker.clock(), **values
    )
    stored, goals = tracker.record_body_metric(metric)
    return {"metric": stored, "goals": goals}


@router.post("/users/{user_id}/workouts/completed")
async def workout_completed(
    user_id: int, payload: WorkoutCompletionRequest, request: Request
) -> dict[str, object]:
    """Count a completed workout toward workout frequency goals."""
    tracker = _container(request).goal_tracker
    completed_at = payload.completed_at or tracker.clock()
    return {"goals": tracker.apply_workout_completion(user_id, completed_at)}
