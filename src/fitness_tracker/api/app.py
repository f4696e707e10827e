"""FastAPI application factory."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from fitness_tracker.api.analytics import router as analytics_router
from fitness_tracker.api.models import (
    NutritionCalculationRequest,
    ProfileCalculationRequest,
)
from fitness_tracker.api.tracking import router as tracking_router
from fitness_tracker.app_logging import configure_logging
from fitness_tracker.containers import AppContainer
from fitness_tracker.errors import ConcurrencyError, NotFoundError, ValidationError
from fitness_tracker.services import targets


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    app = FastAPI()
    app.state.container = container

    app.include_router(analytics_router)
    app.include_router(tracking_router)

    @app.exception_handler(NotFoundError)
    async def not_found(_request: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)}
        )

    @app.exception_handler(ValidationError)
    async def invalid_input(_request: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)}
        )

    @app.exception_handler(ConcurrencyError)
    async def conflict(_request: Request, exc: ConcurrencyError) -> JSONResponse:
        logger.warning("Concurrent modification: %s", exc)
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT, content={"detail": str(exc)}
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/nutrition/activity-levels")
    async def activity_levels() -> dict[str, object]:
        """Return the supported activity levels."""
        return {"levels": targets.activity_levels()}

    @app.post("/nutrition/calculate")
    async def calculate(payload: NutritionCalculationRequest) -> dict[str, object]:
        """Calculate targets from explicit biometrics."""
        result = targets.calculate_nutrition(
            payload.weight_kg,
            payload.height_cm,
            payload.age,
            payload.gender,
            payload.activity_level,
            payload.goal_type,
            payload.target_weight_change_per_week,
        )
        return {"targets": result}

    @app.post("/users/{user_id}/nutrition/calculate")
    async def calculate_for_user(
        user_id: int, payload: ProfileCalculationRequest, request: Request
    ) -> dict[str, object]:
        """Calculate targets from a stored profile, optionally saving them."""
        service = request.app.state.container.nutrition_goal_service
        if payload.save:
            result, goal = service.calculate_and_save(
                user_id, payload.goal_type, payload.target_weight_change_per_week
            )
            return {"targets": result, "goal": goal}
        result = service.calculate_for_profile(
            user_id, payload.goal_type, payload.target_weight_change_per_week
        )
        return {"targets": result}

    return app
