"""Saved recipes, persisted in a local JSON bucket."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import ValidationError as PydanticValidationError

from app.models.recipe import Recipe
from app.utils.exceptions import PersistenceError

logger = logging.getLogger(__name__)


class SavedRecipeStore:
    """
    Recipes the user chose to keep, most recent first, unique by recipeName.

    The bucket file holds a JSON object; this store owns a single key of it.
    The collection is read once by load() and rewritten wholesale after every
    mutation. Two processes sharing a file race unguarded: last writer wins.
    """

    def __init__(self, path: Union[str, Path], key: str) -> None:
        self.path = Path(path).expanduser()
        self.key = key
        self._recipes: List[Recipe] = []
        self._loaded = False

    @property
    def loaded(self) -> bool:
        return self._loaded

    @property
    def recipes(self) -> Tuple[Recipe, ...]:
        return tuple(self._recipes)

    def __len__(self) -> int:
        return len(self._recipes)

    def load(self) -> None:
        """Read the collection from the bucket. Unreadable data loads as empty."""
        self._recipes = []
        self._loaded = True

        if not self.path.exists():
            logger.info("No saved recipe bucket at %s yet", self.path)
            return

        try:
            raw = self._read_bucket().get(self.key) or []
        except PersistenceError as e:
            logger.warning("Saved recipe bucket unreadable, starting empty: %s", e)
            return

        seen = set()
        for item in raw if isinstance(raw, list) else []:
            try:
                recipe = Recipe.model_validate(item)
            except PydanticValidationError as e:
                logger.warning("Skipping malformed saved recipe: %s", e)
                continue
            if recipe.recipeName in seen:
                continue
            seen.add(recipe.recipeName)
            self._recipes.append(recipe)

        logger.info("Loaded %d saved recipes", len(self._recipes))

    def is_saved(self, name: str) -> bool:
        return any(r.recipeName == name for r in self._recipes)

    def get(self, name: str) -> Optional[Recipe]:
        for recipe in self._recipes:
            if recipe.recipeName == name:
                return recipe
        return None

    def save(self, recipe: Recipe) -> bool:
        """Prepend and persist; no-op when a recipe with this name is already saved."""
        if self.is_saved(recipe.recipeName):
            return False
        self._commit([recipe.model_copy(deep=True)] + self._recipes)
        logger.info("Saved recipe %r", recipe.recipeName)
        return True

    def delete(self, name: str) -> bool:
        """Remove the exact-name match and persist. Absent names are not an error."""
        remaining = [r for r in self._recipes if r.recipeName != name]
        if len(remaining) == len(self._recipes):
            return False
        self._commit(remaining)
        logger.info("Deleted saved recipe %r", name)
        return True

    # ---------------------------------------------------------------------
    # Bucket I/O
    # ---------------------------------------------------------------------

    def _commit(self, recipes: List[Recipe]) -> None:
        """Write the whole collection, then adopt it in memory."""
        try:
            bucket = self._read_bucket() if self.path.exists() else {}
        except PersistenceError:
            bucket = {}
        bucket[self.key] = [r.model_dump(mode="json") for r in recipes]
        self._write_bucket(bucket)
        self._recipes = recipes

    def _read_bucket(self) -> Dict[str, Any]:
        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise PersistenceError(f"Cannot read {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise PersistenceError(f"{self.path} does not hold a JSON object")
        return data

    def _write_bucket(self, bucket: Dict[str, Any]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=".saved-", suffix=".json")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(bucket, f, ensure_ascii=False)
                os.replace(tmp_path, self.path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.unlink(tmp_path)
                raise
        except OSError as e:
            logger.error("Failed to write saved recipes: %s", e, exc_info=True)
            raise PersistenceError(f"Cannot write {self.path}: {e}") from e
