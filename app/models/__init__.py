"""Pydantic models."""

from app.models.recipe import (
    Coordinates,
    MealTime,
    PipelineSnapshot,
    PipelineState,
    Recipe,
    RecipeDraft,
    RecipeIngredient,
    ShoppingGuide,
    ShoppingItem,
    ShoppingLink,
    Store,
)

__all__ = [
    "Coordinates",
    "MealTime",
    "PipelineSnapshot",
    "PipelineState",
    "Recipe",
    "RecipeDraft",
    "RecipeIngredient",
    "ShoppingGuide",
    "ShoppingItem",
    "ShoppingLink",
    "Store",
]
