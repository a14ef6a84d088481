"""Recipe generation endpoints."""

import logging

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import JSONResponse

from app.api.dependencies import get_session
from app.models.recipe import PipelineSnapshot, ShoppingGuide
from app.services.kitchen_session import KitchenSession
from app.services.shopping import build_shopping_guide
from app.utils.exceptions import NotFoundError
from app.utils.validators import validate_recipe_name

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/recipes", tags=["recipes"])


@router.get("", response_model=PipelineSnapshot)
async def get_recipes(session: KitchenSession = Depends(get_session)) -> PipelineSnapshot:
    """
    Current pipeline snapshot.

    While the state is `generating_images` the recipes have no imageUrl yet;
    poll until `done` or `error`.
    """
    return session.pipeline.snapshot


@router.post("/generate", response_model=PipelineSnapshot)
async def generate_recipes(
    request: Request,
    wait: bool = Query(False, description="Block until recipes and photos are ready"),
    session: KitchenSession = Depends(get_session),
):
    """
    Generate recipes from the current ingredients and meal time.

    By default the pipeline runs in the background and the response is
    202 with the first snapshot. With `wait=true` the final snapshot is
    returned; a generation failure then surfaces as 502.
    """
    logger.info(
        "Route /recipes/generate called",
        extra={
            "request_id": getattr(request.state, "request_id", None),
            "route": "/recipes/generate",
            "params": {
                "ingredients_count": len(session.ingredients),
                "meal_time": session.meal_time.value,
                "wait": wait,
            },
        },
    )

    if wait:
        await session.generate()
        return session.pipeline.snapshot

    session.start_generation()
    return JSONResponse(
        status_code=status.HTTP_202_ACCEPTED,
        content=session.pipeline.snapshot.model_dump(mode="json"),
    )


@router.get("/{recipe_name:path}/shopping", response_model=ShoppingGuide)
async def get_shopping_guide(
    recipe_name: str,
    session: KitchenSession = Depends(get_session),
) -> ShoppingGuide:
    """Missing ingredients with online marketplace links and a copyable shopping list."""
    recipe = session.find_recipe(validate_recipe_name(recipe_name))
    if recipe is None:
        raise NotFoundError(f"Recipe not found: {recipe_name}")
    return build_shopping_guide(recipe)
