"""Shared API dependencies."""

from fastapi import Request

from app.services.kitchen_session import KitchenSession
from app.services.saved_recipe_store import SavedRecipeStore


def get_session(request: Request) -> KitchenSession:
    """The kitchen session created at startup."""
    return request.app.state.session


def get_saved_recipes(request: Request) -> SavedRecipeStore:
    """Saved recipe store, loaded once at startup."""
    return request.app.state.session.saved_recipes
