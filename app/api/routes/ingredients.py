"""Ingredient list endpoints: manual entry and fridge photo scan."""

import logging
from typing import List

from fastapi import APIRouter, Depends, File, Request, UploadFile, status
from pydantic import BaseModel, Field

from app.api.dependencies import get_session
from app.services.kitchen_session import KitchenSession
from app.utils.validators import validate_ingredient_name

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/ingredients", tags=["ingredients"])


class IngredientRequest(BaseModel):
    """Request model for adding one or more ingredients."""

    names: List[str] = Field(..., min_length=1)


class IngredientListResponse(BaseModel):
    """Current ingredient list plus what the last call added."""

    ingredients: List[str]
    added: List[str] = Field(default_factory=list)


@router.get("", response_model=IngredientListResponse)
async def list_ingredients(session: KitchenSession = Depends(get_session)) -> IngredientListResponse:
    return IngredientListResponse(ingredients=list(session.ingredients.items))


@router.post("", response_model=IngredientListResponse)
async def add_ingredients(
    request: Request,
    body: IngredientRequest,
    session: KitchenSession = Depends(get_session),
) -> IngredientListResponse:
    """
    Add typed ingredients.

    Names are trimmed; blank names and names already in the list are ignored.
    """
    logger.info(
        "Route /ingredients called",
        extra={
            "request_id": getattr(request.state, "request_id", None),
            "route": "/ingredients",
            "params": {"names": body.names[:20], "count": len(body.names)},
        },
    )
    names = [validate_ingredient_name(name) for name in body.names if name.strip()]
    added = session.ingredients.add_many(names)
    return IngredientListResponse(ingredients=list(session.ingredients.items), added=added)


@router.delete("", response_model=IngredientListResponse)
async def clear_ingredients(session: KitchenSession = Depends(get_session)) -> IngredientListResponse:
    session.ingredients.clear()
    return IngredientListResponse(ingredients=[])


@router.delete("/{name:path}", response_model=IngredientListResponse)
async def remove_ingredient(name: str, session: KitchenSession = Depends(get_session)) -> IngredientListResponse:
    """Remove an ingredient by its name; an unknown name is a no-op."""
    session.ingredients.discard(name)
    return IngredientListResponse(ingredients=list(session.ingredients.items))


@router.post("/from-image", response_model=IngredientListResponse, status_code=status.HTTP_200_OK)
async def scan_fridge_photo(
    request: Request,
    file: UploadFile = File(..., description="Photo of the inside of the fridge"),
    session: KitchenSession = Depends(get_session),
) -> IngredientListResponse:
    """
    Recognize ingredients in a fridge photo and merge them into the list.

    - **file**: JPEG, PNG or WebP image
    """
    logger.info(
        "Route /ingredients/from-image called",
        extra={
            "request_id": getattr(request.state, "request_id", None),
            "route": "/ingredients/from-image",
            "params": {"filename": file.filename, "content_type": file.content_type},
        },
    )

    image_data = await file.read()
    added = await session.scan_image(image_data, file.content_type)
    return IngredientListResponse(ingredients=list(session.ingredients.items), added=added)
