"""Input validation utilities."""

from typing import List

from app.utils.exceptions import ValidationError

MAX_INGREDIENTS = 50
MAX_INGREDIENT_LENGTH = 100
MAX_RECIPE_NAME_LENGTH = 200


def validate_ingredient_name(name: str) -> str:
    """
    Validate a single ingredient typed by the user.

    Args:
        name: Raw ingredient text

    Returns:
        Trimmed ingredient name

    Raises:
        ValidationError: If the name is empty or too long
    """
    if not isinstance(name, str):
        raise ValidationError("Ingredient must be a string")

    name = name.strip()
    if not name:
        raise ValidationError("Ingredient cannot be empty")
    if len(name) > MAX_INGREDIENT_LENGTH:
        raise ValidationError(f"Ingredient cannot exceed {MAX_INGREDIENT_LENGTH} characters")
    return name


def validate_ingredients_list(ingredients: list) -> List[str]:
    """
    Validate the ingredient list sent to recipe generation.

    Order is preserved and entries are not deduplicated here; the
    ingredient store already guarantees uniqueness.

    Raises:
        ValidationError: If ingredients list is invalid
    """
    if not isinstance(ingredients, (list, tuple)):
        raise ValidationError("Ingredients must be a list")

    if not ingredients:
        raise ValidationError("Add at least one ingredient from your fridge first")

    if len(ingredients) > MAX_INGREDIENTS:
        raise ValidationError(f"Ingredients list cannot exceed {MAX_INGREDIENTS} items")

    return [validate_ingredient_name(ingredient) for ingredient in ingredients]


def validate_recipe_name(name: str) -> str:
    """Validate a recipe name used as a lookup key."""
    if not isinstance(name, str) or not name.strip():
        raise ValidationError("Recipe name cannot be empty")
    if len(name) > MAX_RECIPE_NAME_LENGTH:
        raise ValidationError(f"Recipe name cannot exceed {MAX_RECIPE_NAME_LENGTH} characters")
    # Identity is the exact string, so no trimming here
    return name
