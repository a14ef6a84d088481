"""
Recipe aggregation pipeline.

One generation request runs:
  IDLE -> GENERATING_TEXT -> GENERATING_IMAGES -> DONE
with ERROR reachable from GENERATING_TEXT only. Every step publishes a new
PipelineSnapshot that replaces the previous one as a whole, so readers see
either the text-only list or the final list, never a half-updated one.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Callable, List, Optional, Protocol, Sequence

from app.models.recipe import MealTime, PipelineSnapshot, PipelineState, Recipe
from app.utils.exceptions import GenerationError, PipelineBusyError
from app.utils.validators import validate_ingredients_list

logger = logging.getLogger(__name__)

SnapshotListener = Callable[[PipelineSnapshot], None]

MESSAGES = {
    PipelineState.GENERATING_TEXT: "The AI chef is composing recipes...",
    PipelineState.GENERATING_IMAGES: "Generating photos of the finished dishes...",
    PipelineState.DONE: "Recipes are ready.",
}

BUSY_STATES = (PipelineState.GENERATING_TEXT, PipelineState.GENERATING_IMAGES)


class RecipeGenerator(Protocol):
    """The two AI calls the pipeline depends on."""

    async def generate_recipes(self, ingredients: Sequence[str], meal_time: MealTime) -> List[Recipe]:
        ...

    async def generate_recipe_image(self, recipe_name: str, description: str) -> Optional[str]:
        ...


class RecipePipeline:
    """Runs text generation, then one image request per recipe in parallel."""

    def __init__(self, generator: RecipeGenerator, listener: Optional[SnapshotListener] = None) -> None:
        self.generator = generator
        self._listeners: List[SnapshotListener] = [listener] if listener else []
        self._snapshot = PipelineSnapshot()

    @property
    def snapshot(self) -> PipelineSnapshot:
        return self._snapshot

    @property
    def state(self) -> PipelineState:
        return self._snapshot.state

    @property
    def recipes(self) -> List[Recipe]:
        return list(self._snapshot.recipes)

    @property
    def busy(self) -> bool:
        return self._snapshot.state in BUSY_STATES

    def subscribe(self, listener: SnapshotListener) -> None:
        self._listeners.append(listener)

    def find(self, recipe_name: str) -> Optional[Recipe]:
        for recipe in self._snapshot.recipes:
            if recipe.recipeName == recipe_name:
                return recipe
        return None

    def ensure_ready(self, ingredients: Sequence[str]) -> None:
        """
        Reject a request before anything changes.

        Raises:
            ValidationError: no ingredients, or more than the generation cap
            PipelineBusyError: a request is already in flight
        """
        validate_ingredients_list(list(ingredients))
        if self.busy:
            raise PipelineBusyError("Recipe generation is already in progress")

    async def run(self, ingredients: Sequence[str], meal_time: MealTime) -> List[Recipe]:
        """
        Generate recipes and their photos.

        Returns the final list. GenerationError propagates after the ERROR
        snapshot is published; image failures only leave imageUrl empty.
        """
        self.begin(ingredients)
        return await self.complete(ingredients, meal_time)

    def begin(self, ingredients: Sequence[str]) -> None:
        """
        Check the guards and enter GENERATING_TEXT synchronously.

        A caller that schedules complete() as a task calls this first, so a
        second trigger is rejected even before the task starts running.
        """
        self.ensure_ready(ingredients)
        self._publish(PipelineState.GENERATING_TEXT)

    async def complete(self, ingredients: Sequence[str], meal_time: MealTime) -> List[Recipe]:
        """Run the text and image steps of a request opened with begin()."""
        ingredients = list(ingredients)
        started = time.perf_counter()

        try:
            drafts = await self.generator.generate_recipes(ingredients, meal_time)
        except GenerationError as e:
            self._publish(PipelineState.ERROR, error=str(e))
            raise
        except Exception as e:
            # Adapters are expected to raise GenerationError; anything else aborts the same way
            logger.error("Unexpected error during recipe generation: %s", e, exc_info=True)
            error = GenerationError("An error occurred while generating recipes.")
            self._publish(PipelineState.ERROR, error=str(error))
            raise error from e

        # imageUrl is only ever set from this pipeline's image step
        text_only = [r.model_copy(update={"imageUrl": None}) for r in drafts]
        self._publish(PipelineState.GENERATING_IMAGES, recipes=text_only)

        results = await asyncio.gather(
            *(self._synthesize(r) for r in text_only),
            return_exceptions=True,
        )

        final: List[Recipe] = []
        for recipe, result in zip(text_only, results):
            if isinstance(result, BaseException):
                logger.warning("Image task for %r failed: %s", recipe.recipeName, result)
                result = None
            final.append(recipe.model_copy(update={"imageUrl": result}))

        self._publish(PipelineState.DONE, recipes=final)
        logger.info(
            "Recipe pipeline finished",
            extra={
                "recipes": len(final),
                "images": sum(1 for r in final if r.imageUrl),
                "duration_ms": round((time.perf_counter() - started) * 1000, 2),
            },
        )
        return final

    async def _synthesize(self, recipe: Recipe) -> Optional[str]:
        try:
            return await self.generator.generate_recipe_image(recipe.recipeName, recipe.description)
        except Exception as e:
            logger.warning("Image synthesis raised for %r: %s", recipe.recipeName, e)
            return None

    def _publish(
        self,
        state: PipelineState,
        recipes: Sequence[Recipe] = (),
        error: Optional[str] = None,
    ) -> None:
        self._snapshot = PipelineSnapshot(
            state=state,
            recipes=tuple(recipes),
            error=error,
            message=error or MESSAGES.get(state),
        )
        logger.debug("Pipeline state -> %s (%d recipes)", state.value, len(recipes))
        for listener in self._listeners:
            try:
                listener(self._snapshot)
            except Exception as e:
                logger.warning("Pipeline listener failed: %s", e, exc_info=True)
