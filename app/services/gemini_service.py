"""
Gemini service: the four calls Fridge Chef makes to the AI collaborator.

Key design:
- One attempt per call. Failures surface as a single typed error per call kind
  (RecognitionError, GenerationError, StoreSearchError); there are no retries.
- Image synthesis is the exception: it never raises and returns None instead,
  because a recipe without a photo is a valid result.
- The SDK client is synchronous; every call runs in a worker thread.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, List, Optional, Sequence

from google import genai
from google.genai import types

from app.config import settings
from app.models.recipe import Coordinates, MealTime, Recipe, Store
from app.services.gemini_utils import (
    extract_map_places,
    find_inline_image,
    get_response_text,
    log_empty_response,
    safe_json_loads,
    to_data_uri,
)
from app.utils.exceptions import (
    GeminiError,
    GenerationError,
    RecognitionError,
    StoreSearchError,
)
from app.utils.gemini_helpers import INGREDIENT_LIST_SCHEMA, get_recipe_list_schema

logger = logging.getLogger(__name__)

RECOGNITION_FAILED = "Image analysis failed."
GENERATION_FAILED = "An error occurred while generating recipes."
STORE_SEARCH_FAILED = "Nearby store search failed."

MEAL_TIME_LABELS = {
    MealTime.BREAKFAST: "breakfast",
    MealTime.LUNCH: "lunch",
    MealTime.DINNER: "dinner",
}


class GeminiService:
    """Service for interacting with Gemini API."""

    def __init__(self, client: Optional[genai.Client] = None) -> None:
        self._client = client

    @property
    def client(self) -> genai.Client:
        """Get or create Gemini client (lazy initialization)."""
        if self._client is None:
            if not settings.gemini_api_key:
                raise GeminiError("GEMINI_API_KEY is not configured")
            self._client = genai.Client(api_key=settings.gemini_api_key)
        return self._client

    # ---------------------------------------------------------------------
    # Public API
    # ---------------------------------------------------------------------

    async def identify_ingredients(self, image_data: bytes, mime_type: str) -> List[str]:
        """
        List the food items visible in a fridge photo.

        The list is returned as the model produced it: not filtered and not
        deduplicated. Merging into the ingredient store does that.
        """
        contents = [
            types.Part.from_bytes(data=image_data, mime_type=mime_type),
            self._build_recognition_prompt(),
        ]
        config = types.GenerateContentConfig(
            system_instruction="Answer with a JSON array of ingredient names only.",
            response_mime_type="application/json",
            response_schema=INGREDIENT_LIST_SCHEMA,
        )

        try:
            logger.info("Identifying ingredients from image (mime_type=%s, bytes=%d)", mime_type, len(image_data))
            response = await self._generate(model=settings.gemini_text_model, contents=contents, config=config)
            text = get_response_text(response)
            if not text:
                log_empty_response("[identify_ingredients]", response)
                raise RecognitionError("Gemini returned empty response")

            names = safe_json_loads(text)
            if not isinstance(names, list) or not all(isinstance(n, str) for n in names):
                raise RecognitionError("Gemini did not return a JSON array of strings")

            logger.info("Identified %d ingredients", len(names))
            return names

        except Exception as e:
            logger.error("Ingredient recognition failed: %s", str(e), exc_info=True)
            raise RecognitionError(RECOGNITION_FAILED) from e

    async def generate_recipes(self, ingredients: Sequence[str], meal_time: MealTime) -> List[Recipe]:
        """
        Ask for settings.recipe_count recipes built mainly from the given ingredients.

        The decoded payload is validated against the Recipe model; any
        transport, parse or shape failure becomes GenerationError.
        """
        config = types.GenerateContentConfig(
            system_instruction=self._build_chef_system_instruction(),
            response_mime_type="application/json",
            response_schema=get_recipe_list_schema(settings.strict_recipe_schema),
            temperature=settings.gemini_temperature,
        )

        try:
            logger.info(
                "Generating recipes",
                extra={"ingredients_count": len(ingredients), "meal_time": meal_time.value},
            )
            response = await self._generate(
                model=settings.gemini_text_model,
                contents=self._build_generation_prompt(ingredients, meal_time),
                config=config,
            )
            text = get_response_text(response)
            if not text:
                log_empty_response("[generate_recipes]", response)
                raise GenerationError("Gemini returned empty response")

            recipes = self._parse_recipes(safe_json_loads(text))
            if len(recipes) != settings.recipe_count:
                logger.warning("Asked for %d recipes, got %d", settings.recipe_count, len(recipes))
            return recipes

        except Exception as e:
            logger.error("Recipe generation failed: %s", str(e), exc_info=True)
            raise GenerationError(GENERATION_FAILED) from e

    async def generate_recipe_image(self, recipe_name: str, description: str) -> Optional[str]:
        """
        Render a photo of the finished dish as a data URI.

        Returns None when the model sends no image or the call fails.
        """
        prompt = (
            f"A professional food photography shot of {recipe_name}, which is {description}. "
            "Beautifully plated, gourmet presentation, soft natural lighting, high quality, 4k."
        )
        config = types.GenerateContentConfig(
            image_config=types.ImageConfig(aspect_ratio=settings.image_aspect_ratio),
        )

        try:
            response = await self._generate(model=settings.gemini_image_model, contents=prompt, config=config)
            image = find_inline_image(response)
        except Exception as e:
            logger.warning("Image generation failed for %r: %s", recipe_name, e, exc_info=True)
            return None

        if image is None:
            log_empty_response(f"[generate_recipe_image:{recipe_name}]", response)
            return None

        mime_type, data = image
        logger.info("Generated image for %r (mime_type=%s)", recipe_name, mime_type)
        return to_data_uri(mime_type, data)

    async def search_nearby_stores(self, coordinates: Coordinates, limit: Optional[int] = None) -> List[Store]:
        """
        Find grocery stores near the user with Google Maps grounding.

        Results come from the grounding metadata, deduplicated by name
        (first occurrence wins) and capped at `limit`.
        """
        limit = limit or settings.store_result_limit
        config = types.GenerateContentConfig(
            tools=[types.Tool(google_maps=types.GoogleMaps())],
            tool_config=types.ToolConfig(
                retrieval_config=types.RetrievalConfig(
                    lat_lng=types.LatLng(latitude=coordinates.latitude, longitude=coordinates.longitude),
                ),
            ),
        )
        prompt = (
            f"Recommend {limit} large supermarkets or grocery stores near me "
            "where I can buy fresh ingredients."
        )

        try:
            logger.info("Searching nearby stores", extra={"limit": limit})
            response = await self._generate(model=settings.gemini_maps_model, contents=prompt, config=config)
        except Exception as e:
            logger.error("Nearby store search failed: %s", str(e), exc_info=True)
            raise StoreSearchError(STORE_SEARCH_FAILED) from e

        stores: List[Store] = []
        seen = set()
        for title, uri in extract_map_places(response):
            if title in seen:
                continue
            seen.add(title)
            stores.append(Store(name=title, uri=uri))
            if len(stores) >= limit:
                break

        logger.info("Found %d nearby stores", len(stores))
        return stores

    # ---------------------------------------------------------------------
    # Prompts
    # ---------------------------------------------------------------------

    def _build_recognition_prompt(self) -> str:
        return (
            "Find the food ingredients inside this refrigerator photo and list them as "
            f"{settings.response_language} words."
        )

    def _build_chef_system_instruction(self) -> str:
        return f"""
You are a professional chef. Based on the ingredients the user has and the meal time,
propose the {settings.recipe_count} best recipes.

Rules:
- Respond with a JSON array of exactly {settings.recipe_count} recipe objects and nothing else.
- Suggest dishes that suit the meal time (lighter dishes for breakfast, heartier ones for dinner).
- Classify each dish in cuisineType (e.g. Korean, Japanese, Chinese, Western).
- ingredients: list every ingredient the dish needs. Set isAvailable=true only for ingredients the
  user already has, and isAvailable=false for anything that must be bought.
- steps: clear ordered cooking steps, at least one.
- chefTips: a few practical tips from the chef (optional).
- cookingTime is required; calories is an estimate per serving (optional).
- Write every text value in {settings.response_language}.
""".strip()

    def _build_generation_prompt(self, ingredients: Sequence[str], meal_time: MealTime) -> str:
        return f"""
Ingredients in my fridge: {", ".join(ingredients)}.
Meal time: {MEAL_TIME_LABELS[meal_time]}.
Recommend {settings.recipe_count} delicious, practical recipes that mainly use these ingredients.
For each recipe, clearly separate the ingredients I already have (isAvailable: true)
from the ingredients I need to buy (isAvailable: false).
Answer in {settings.response_language}.
""".strip()

    # ---------------------------------------------------------------------
    # Core Gemini call + parsing
    # ---------------------------------------------------------------------

    async def _generate(self, *, model: str, contents: Any, config: types.GenerateContentConfig) -> Any:
        """Single Gemini call in a worker thread."""

        def _sync_call() -> Any:
            return self.client.models.generate_content(model=model, contents=contents, config=config)

        return await asyncio.to_thread(_sync_call)

    def _parse_recipes(self, payload: Any) -> List[Recipe]:
        if not isinstance(payload, list):
            raise GenerationError("Gemini returned JSON that is not an array")
        if not payload:
            raise GenerationError("Gemini returned no recipes")
        recipes = []
        for item in payload:
            if not isinstance(item, dict):
                raise GenerationError("Gemini returned a recipe that is not an object")
            # imageUrl only ever comes from image synthesis
            item = {k: v for k, v in item.items() if k != "imageUrl"}
            recipes.append(Recipe.model_validate(item))
        return recipes
