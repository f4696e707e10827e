"""Pydantic request models for the HTTP API."""

from datetime import datetime

from pydantic import BaseModel, Field


class NutritionCalculationRequest(BaseModel):
    """Biometric inputs for a target calculation."""

    weight_kg: float | None = None
    height_cm: float | None = None
    age: int = Field(default=30, ge=0)
    gender: str | None = None
    activity_level: str | None = None
    goal_type: str | None = None
    target_weight_change_per_week: float | None = None


class ProfileCalculationRequest(BaseModel):
    """Goal inputs for a calculation from a stored profile."""

    goal_type: str | None = None
    target_weight_change_per_week: float | None = None
    save: bool = False


class AddFoodRequest(BaseModel):
    """Template and quantity of a food item to log."""

    food_template_id: int
    quantity: float = 1.0


class QuantityRequest(BaseModel):
    """New quantity of a logged food item."""

    quantity: float


class ConsumptionRequest(BaseModel):
    """Whether a meal entry was eaten."""

    is_consumed: bool = True
    consumed_at: datetime | None = None


class GoalRequest(BaseModel):
    """A new fitness goal."""

    goal_type: str
    target_value: float
    current_value: float = 0.0
    unit: str | None = None
    time_frame: str | None = None
    target_date: datetime | None = None


class GoalProgressRequest(BaseModel):
    """An explicitly recorded goal value."""

    value: float
    notes: str | None = None


class BodyMetricRequest(BaseModel):
    """Body measurements taken at one time."""

    recorded_at: datetime | None = None
    weight: float | None = None
    body_fat_percentage: float | None = None
    chest_circumference: float | None = None
    waist_circumference: float | None = None
    hip_circumference: float | None = None
    arm_circumference: float | None = None
    thigh_circumference: float | None = None
    calf_circumference: float | None = None
    notes: str | None = None


class WorkoutCompletionRequest(BaseModel):
    """When a workout session was completed."""

    completed_at: datetime | None = None
