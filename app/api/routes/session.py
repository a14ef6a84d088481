"""Kitchen session overview and meal-time selection."""

import logging
from typing import List

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel

from app.api.dependencies import get_session
from app.models.recipe import MealTime, PipelineSnapshot
from app.services.kitchen_session import KitchenSession

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/session", tags=["session"])


class SessionView(BaseModel):
    """Everything the front end needs to render the main screen."""

    ingredients: List[str]
    mealTime: MealTime
    scanning: bool
    pipeline: PipelineSnapshot
    savedCount: int


class MealTimeRequest(BaseModel):
    mealTime: MealTime


class MealTimeResponse(BaseModel):
    mealTime: MealTime


@router.get("", response_model=SessionView)
async def get_session_view(session: KitchenSession = Depends(get_session)) -> SessionView:
    return SessionView(
        ingredients=list(session.ingredients.items),
        mealTime=session.meal_time,
        scanning=session.scanning,
        pipeline=session.pipeline.snapshot,
        savedCount=len(session.saved_recipes),
    )


@router.get("/meal-time", response_model=MealTimeResponse)
async def get_meal_time(session: KitchenSession = Depends(get_session)) -> MealTimeResponse:
    return MealTimeResponse(mealTime=session.meal_time)


@router.put("/meal-time", response_model=MealTimeResponse)
async def set_meal_time(
    request: Request,
    body: MealTimeRequest,
    session: KitchenSession = Depends(get_session),
) -> MealTimeResponse:
    """Select breakfast, lunch or dinner for the next generation request."""
    logger.info(
        "Route /session/meal-time called",
        extra={
            "request_id": getattr(request.state, "request_id", None),
            "route": "/session/meal-time",
            "params": {"mealTime": body.mealTime.value},
        },
    )
    session.meal_time = body.mealTime
    return MealTimeResponse(mealTime=session.meal_time)
