"""Saved recipe book endpoints."""

import logging
from typing import List

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from app.api.dependencies import get_saved_recipes
from app.models.recipe import Recipe
from app.services.saved_recipe_store import SavedRecipeStore
from app.utils.exceptions import NotFoundError
from app.utils.validators import validate_recipe_name

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/saved", tags=["saved"])


class SavedRecipesResponse(BaseModel):
    recipes: List[Recipe]


class SaveResult(BaseModel):
    recipeName: str
    saved: bool
    created: bool


class DeleteResult(BaseModel):
    recipeName: str
    deleted: bool


@router.get("", response_model=SavedRecipesResponse)
async def list_saved(store: SavedRecipeStore = Depends(get_saved_recipes)) -> SavedRecipesResponse:
    """Saved recipes, most recent first."""
    return SavedRecipesResponse(recipes=list(store.recipes))


@router.post("", response_model=SaveResult)
async def save_recipe(
    request: Request,
    recipe: Recipe,
    store: SavedRecipeStore = Depends(get_saved_recipes),
):
    """
    Save a recipe. Saving a name that is already saved changes nothing
    and returns 200 instead of 201.
    """
    logger.info(
        "Route /saved called",
        extra={
            "request_id": getattr(request.state, "request_id", None),
            "route": "/saved",
            "params": {"recipeName": recipe.recipeName, "has_image": recipe.imageUrl is not None},
        },
    )
    created = store.save(recipe)
    result = SaveResult(recipeName=recipe.recipeName, saved=True, created=created)
    return JSONResponse(
        status_code=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        content=result.model_dump(),
    )


# Recipe names may contain "/"
@router.get("/{recipe_name:path}", response_model=Recipe)
async def get_saved(recipe_name: str, store: SavedRecipeStore = Depends(get_saved_recipes)) -> Recipe:
    recipe = store.get(validate_recipe_name(recipe_name))
    if recipe is None:
        raise NotFoundError(f"Saved recipe not found: {recipe_name}")
    return recipe


@router.delete("/{recipe_name:path}", response_model=DeleteResult)
async def delete_saved(recipe_name: str, store: SavedRecipeStore = Depends(get_saved_recipes)) -> DeleteResult:
    """Delete by exact name; deleting an unknown name is not an error."""
    deleted = store.delete(validate_recipe_name(recipe_name))
    return DeleteResult(recipeName=recipe_name, deleted=deleted)
