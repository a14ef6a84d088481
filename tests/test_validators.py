"""Tests for input validators."""

import pytest

from app.utils.exceptions import ValidationError
from app.utils.validators import (
    MAX_INGREDIENTS,
    validate_ingredient_name,
    validate_ingredients_list,
    validate_recipe_name,
)


def test_validate_ingredient_name_trims():
    """Test ingredient name validation trims whitespace."""
    assert validate_ingredient_name("  kimchi  ") == "kimchi"


@pytest.mark.parametrize("name", ["", "   ", "x" * 101, None])
def test_validate_ingredient_name_invalid(name):
    """Test ingredient name validation rejects empty, oversized and non-string input."""
    with pytest.raises(ValidationError):
        validate_ingredient_name(name)


def test_validate_ingredients_list_valid():
    """Test ingredients list validation with valid list."""
    ingredients = ["chicken", "rice", "vegetables"]
    assert validate_ingredients_list(ingredients) == ingredients


def test_validate_ingredients_list_empty():
    """Test ingredients list validation with empty list."""
    with pytest.raises(ValidationError):
        validate_ingredients_list([])


def test_validate_ingredients_list_not_list():
    """Test ingredients list validation with non-list."""
    with pytest.raises(ValidationError):
        validate_ingredients_list("not a list")


def test_validate_ingredients_list_too_long():
    with pytest.raises(ValidationError):
        validate_ingredients_list([f"item {i}" for i in range(MAX_INGREDIENTS + 1)])


def test_validate_recipe_name_keeps_exact_string():
    """Recipe names are identities, so surrounding spaces survive."""
    assert validate_recipe_name(" Kimchi Stew ") == " Kimchi Stew "


@pytest.mark.parametrize("name", ["", "   ", "x" * 201])
def test_validate_recipe_name_invalid(name):
    with pytest.raises(ValidationError):
        validate_recipe_name(name)
