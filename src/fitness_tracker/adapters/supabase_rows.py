"""Row parsing shared by the Supabase repositories."""

from datetime import date, datetime

from fitness_tracker.domain.goals import (
    Goal,
    GoalDirection,
    GoalMetric,
    GoalProgress,
)
from fitness_tracker.domain.nutrition import (
    FoodItem,
    FoodTemplate,
    MealEntry,
    MealLog,
    NutritionGoal,
)
from fitness_tracker.domain.workouts import (
    SESSION_COMPLETED,
    Exercise,
    ExerciseSet,
    ExerciseTemplate,
    Session,
)

Row = dict[str, object]


def as_float(value: object, default: float = 0.0) -> float:
    if value is None:
        return default
    return float(value)  # type: ignore[arg-type]


def as_optional_float(value: object) -> float | None:
    if value is None:
        return None
    return float(value)  # type: ignore[arg-type]


def as_optional_int(value: object) -> int | None:
    if value is None:
        return None
    return int(value)  # type: ignore[call-overload]


def as_datetime(value: object) -> datetime | None:
    if isinstance(value, str) and value:
        return datetime.fromisoformat(value)
    return None


def as_date(value: object) -> date:
    if isinstance(value, str):
        return date.fromisoformat(value[:10])
    raise ValueError(f"Invalid date value: {value!r}")


def parse_food_template(row: Row) -> FoodTemplate:
    return FoodTemplate(
        id=int(row["id"]),  # type: ignore[call-overload]
        name=str(row.get("name", "")),
        calories=as_float(row.get("calories")),
        protein=as_float(row.get("protein")),
        carbohydrates=as_float(row.get("carbohydrates")),
        fat=as_float(row.get("fat")),
        brand=row.get("brand"),  # type: ignore[arg-type]
        serving_size=as_float(row.get("serving_size"), 100.0),
        serving_unit=str(row.get("serving_unit") or "g"),
        fiber=as_optional_float(row.get("fiber")),
        sugar=as_optional_float(row.get("sugar")),
        sodium=as_optional_float(row.get("sodium")),
    )


def parse_food_item(row: Row) -> FoodItem:
    return FoodItem(
        id=int(row["id"]),  # type: ignore[call-overload]
        meal_entry_id=int(row["meal_entry_id"]),  # type: ignore[call-overload]
        name=str(row.get("name", "")),
        quantity=as_float(row.get("quantity"), 1.0),
        food_template_id=as_optional_int(row.get("food_template_id")),
        brand=row.get("brand"),  # type: ignore[arg-type]
        serving_size=as_float(row.get("serving_size"), 100.0),
        serving_unit=str(row.get("serving_unit") or "g"),
        calories=as_float(row.get("calories")),
        protein=as_float(row.get("protein")),
        carbohydrates=as_float(row.get("carbohydrates")),
        fat=as_float(row.get("fat")),
        fiber=as_optional_float(row.get("fiber")),
        sugar=as_optional_float(row.get("sugar")),
        sodium=as_optional_float(row.get("sodium")),
        updated_at=as_datetime(row.get("updated_at")),
    )


def food_item_payload(item: FoodItem) -> Row:
    return {
        "meal_entry_id": item.meal_entry_id,
        "name": item.name,
        "quantity": item.quantity,
        "food_template_id": item.food_template_id,
        "brand": item.brand,
        "serving_size": item.serving_size,
        "serving_unit": item.serving_unit,
        "calories": item.calories,
        "protein": item.protein,
        "carbohydrates": item.carbohydrates,
        "fat": item.fat,
        "fiber": item.fiber,
        "sugar": item.sugar,
        "sodium": item.sodium,
        "updated_at": item.updated_at.isoformat() if item.updated_at else None,
    }


def parse_meal_entry(row: Row, items: list[FoodItem]) -> MealEntry:
    return MealEntry(
        id=int(row["id"]),  # type: ignore[call-overload]
        meal_log_id=int(row["meal_log_id"]),  # type: ignore[call-overload]
        meal_type=str(row.get("meal_type") or "Snack"),
        name=row.get("name"),  # type: ignore[arg-type]
        food_items=items,
        is_consumed=bool(row.get("is_consumed", False)),
        consumed_at=as_datetime(row.get("consumed_at")),
        total_calories=as_float(row.get("total_calories")),
        total_protein=as_float(row.get("total_protein")),
        total_carbohydrates=as_float(row.get("total_carbohydrates")),
        total_fat=as_float(row.get("total_fat")),
        total_fiber=as_optional_float(row.get("total_fiber")),
        total_sodium=as_optional_float(row.get("total_sodium")),
        updated_at=as_datetime(row.get("updated_at")),
        version=int(row.get("version") or 1),  # type: ignore[call-overload]
    )


def parse_meal_log(row: Row, entries: list[MealEntry] | None = None) -> MealLog:
    return MealLog(
        id=int(row["id"]),  # type: ignore[call-overload]
        user_id=int(row["user_id"]),  # type: ignore[call-overload]
        day=as_date(row.get("date")),
        meal_entries=entries or [],
        water_intake=as_float(row.get("water_intake")),
        total_calories=as_float(row.get("total_calories")),
        total_protein=as_float(row.get("total_protein")),
        total_carbohydrates=as_float(row.get("total_carbohydrates")),
        total_fat=as_float(row.get("total_fat")),
        total_fiber=as_optional_float(row.get("total_fiber")),
        total_sodium=as_optional_float(row.get("total_sodium")),
        updated_at=as_datetime(row.get("updated_at")),
        version=int(row.get("version") or 1),  # type: ignore[call-overload]
    )


def parse_nutrition_goal(row: Row) -> NutritionGoal:
    return NutritionGoal(
        id=int(row["id"]),  # type: ignore[call-overload]
        user_id=int(row["user_id"]),  # type: ignore[call-overload]
        name=row.get("name"),  # type: ignore[arg-type]
        daily_calories=as_float(row.get("daily_calories")),
        daily_protein=as_float(row.get("daily_protein")),
        daily_carbohydrates=as_float(row.get("daily_carbohydrates")),
        daily_fat=as_float(row.get("daily_fat")),
        daily_fiber=as_optional_float(row.get("daily_fiber")),
        daily_sodium=as_optional_float(row.get("daily_sodium")),
        daily_sugar=as_optional_float(row.get("daily_sugar")),
        daily_water=as_optional_float(row.get("daily_water")),
        protein_percentage=as_optional_float(row.get("protein_percentage")),
        carbohydrates_percentage=as_optional_float(row.get("carbohydrates_percentage")),
        fat_percentage=as_optional_float(row.get("fat_percentage")),
        is_active=bool(row.get("is_active", False)),
        created_at=as_datetime(row.get("created_at")),
        updated_at=as_datetime(row.get("updated_at")),
        version=int(row.get("version") or 1),  # type: ignore[call-overload]
    )


def parse_goal(row: Row) -> Goal:
    return Goal(
        id=int(row["id"]),  # type: ignore[call-overload]
        user_id=int(row["user_id"]),  # type: ignore[call-overload]
        goal_type=str(row.get("goal_type", "")),
        target_value=as_float(row.get("target_value")),
        current_value=as_float(row.get("current_value")),
        metric=GoalMetric(row.get("metric") or GoalMetric.CUSTOM.value),
        direction=GoalDirection(row.get("direction") or GoalDirection.ABSOLUTE.value),
        unit=row.get("unit"),  # type: ignore[arg-type]
        time_frame=row.get("time_frame"),  # type: ignore[arg-type]
        start_date=as_datetime(row.get("start_date")),
        target_date=as_datetime(row.get("target_date")),
        is_active=bool(row.get("is_active", True)),
        is_completed=bool(row.get("is_completed", False)),
        completed_at=as_datetime(row.get("completed_at")),
        version=int(row.get("version") or 1),  # type: ignore[call-overload]
    )


def parse_goal_progress(row: Row) -> GoalProgress:
    recorded_at = as_datetime(row.get("recorded_at")) or datetime.min
    return GoalProgress(
        goal_id=int(row["goal_id"]),  # type: ignore[call-overload]
        recorded_at=recorded_at,
        value=as_float(row.get("value")),
        notes=row.get("notes"),  # type: ignore[arg-type]
        id=as_optional_int(row.get("id")),
    )


def parse_session(row: Row) -> Session:
    exercises = []
    for exercise_row in row.get("exercises") or []:  # type: ignore[attr-defined]
        template_row = exercise_row.get("exercise_templates")
        template = (
            ExerciseTemplate(
                id=int(template_row["id"]),
                name=str(template_row.get("name", "")),
                muscle_group=template_row.get("muscle_group"),
                category=template_row.get("category"),
            )
            if template_row
            else None
        )
        sets = [
            ExerciseSet(
                id=int(set_row["id"]),
                set_number=int(set_row.get("set_number") or 0),
                reps=as_optional_int(set_row.get("reps")),
                weight=as_optional_float(set_row.get("weight")),
            )
            for set_row in exercise_row.get("exercise_sets") or []
        ]
        sets.sort(key=lambda exercise_set: exercise_set.set_number)
        exercises.append(
            Exercise(
                id=int(exercise_row["id"]),
                session_id=int(row["id"]),  # type: ignore[call-overload]
                name=str(exercise_row.get("name", "")),
                exercise_template_id=as_optional_int(
                    exercise_row.get("exercise_template_id")
                ),
                template=template,
                sets=sets,
            )
        )
    return Session(
        id=int(row["id"]),  # type: ignore[call-overload]
        user_id=int(row["user_id"]),  # type: ignore[call-overload]
        date=as_datetime(row.get("date")) or datetime.min,
        status=str(row.get("status") or SESSION_COMPLETED),
        duration=as_optional_int(row.get("duration")),
        name=row.get("name"),  # type: ignore[arg-type]
        exercises=exercises,
    )
