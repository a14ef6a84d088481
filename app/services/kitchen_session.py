"""State of the single user's kitchen: what the browser tab used to hold."""

from __future__ import annotations

import asyncio
import logging
from typing import List, Optional

from app.models.recipe import MealTime, Recipe
from app.services.gemini_service import GeminiService
from app.services.image_service import ImageService
from app.services.ingredient_store import IngredientStore
from app.services.recipe_pipeline import RecipePipeline
from app.services.saved_recipe_store import SavedRecipeStore
from app.services.store_locator import NearbyStoreLocator
from app.utils.exceptions import PipelineBusyError

logger = logging.getLogger(__name__)


class KitchenSession:
    """
    Owns the ingredient list, the meal time, the recipe pipeline and the
    latest store search. Route handlers receive it through a dependency.
    """

    def __init__(
        self,
        gemini_service: GeminiService,
        saved_recipes: SavedRecipeStore,
        store_limit: int = 5,
    ) -> None:
        self.gemini_service = gemini_service
        self.saved_recipes = saved_recipes
        self.ingredients = IngredientStore()
        self.meal_time = MealTime.LUNCH
        self.pipeline = RecipePipeline(gemini_service)
        self.store_locator = NearbyStoreLocator(gemini_service, limit=store_limit)
        self.image_service = ImageService()
        self.scanning = False
        self._generation_task: Optional[asyncio.Task] = None

    # ---------------------------------------------------------------------
    # Fridge scan
    # ---------------------------------------------------------------------

    async def scan_image(self, image_data: bytes, declared_mime: Optional[str] = None) -> List[str]:
        """
        Recognize ingredients in a fridge photo and merge them into the list.

        Returns the names that were new. Nothing is added when recognition fails.
        """
        if self.scanning:
            raise PipelineBusyError("A fridge photo is already being analyzed")

        validated, mime_type = self.image_service.validate_image(image_data, declared_mime)

        self.scanning = True
        try:
            # Pillow decode and re-encode is CPU bound
            optimized, mime_type = await asyncio.to_thread(
                self.image_service.optimize_for_vision, validated, mime_type
            )
            names = await self.gemini_service.identify_ingredients(optimized, mime_type)
        finally:
            self.scanning = False

        added = self.ingredients.add_many(names)
        logger.info("Fridge scan merged %d of %d recognized ingredients", len(added), len(names))
        return added

    # ---------------------------------------------------------------------
    # Recipe generation
    # ---------------------------------------------------------------------

    def _check_trigger(self) -> None:
        if self.scanning:
            raise PipelineBusyError("Wait for the fridge scan to finish")
        self.pipeline.ensure_ready(self.ingredients.items)

    async def generate(self) -> List[Recipe]:
        """Run the pipeline to completion with the current ingredients and meal time."""
        self._check_trigger()
        return await self.pipeline.run(self.ingredients.items, self.meal_time)

    def start_generation(self) -> asyncio.Task:
        """
        Start the pipeline in the background and return immediately.

        Progress is read from pipeline.snapshot. Guards run before the task is
        created so a rejected request changes nothing.
        """
        if self.scanning:
            raise PipelineBusyError("Wait for the fridge scan to finish")
        ingredients = self.ingredients.items
        self.pipeline.begin(ingredients)
        task = asyncio.create_task(self.pipeline.complete(ingredients, self.meal_time))
        task.add_done_callback(self._on_generation_done)
        self._generation_task = task
        return task

    def _on_generation_done(self, task: asyncio.Task) -> None:
        if task.cancelled():
            logger.warning("Background recipe generation was cancelled")
            return
        exc = task.exception()
        if exc is not None:
            # Already published as the ERROR snapshot
            logger.info("Background recipe generation ended with error: %s", exc)

    async def wait_for_generation(self) -> None:
        if self._generation_task is not None and not self._generation_task.done():
            await asyncio.gather(self._generation_task, return_exceptions=True)

    async def aclose(self) -> None:
        """Cancel an in-flight background generation on shutdown."""
        task = self._generation_task
        if task is not None and not task.done():
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)

    # ---------------------------------------------------------------------
    # Lookups
    # ---------------------------------------------------------------------

    def find_recipe(self, recipe_name: str) -> Optional[Recipe]:
        """Displayed recipes first, then saved ones."""
        return self.pipeline.find(recipe_name) or self.saved_recipes.get(recipe_name)
