"""Shopping helpers for a recipe's missing ingredients."""

from typing import List
from urllib.parse import quote

from app.models.recipe import Recipe, ShoppingGuide, ShoppingItem, ShoppingLink

# (label, search URL template); {query} is the URL-encoded ingredient name
MARKETPLACES = (
    ("Coupang", "https://www.coupang.com/np/search?q={query}"),
    ("Kurly", "https://www.kurly.com/search?searchTerm={query}"),
    ("SSG", "https://www.ssg.com/search.ssg?query={query}"),
)


def marketplace_links(ingredient_name: str) -> List[ShoppingLink]:
    query = quote(ingredient_name, safe="")
    return [ShoppingLink(label=label, url=template.format(query=query)) for label, template in MARKETPLACES]


def shopping_list_text(recipe: Recipe) -> str:
    """Plain-text list of what to buy, ready for the clipboard."""
    lines = [f"- {ing.name}" for ing in recipe.missing_ingredients]
    return "\n".join(["[Chef's Shopping List]", f"Dish: {recipe.recipeName}", "To buy:", *lines])


def build_shopping_guide(recipe: Recipe) -> ShoppingGuide:
    return ShoppingGuide(
        recipeName=recipe.recipeName,
        missing=[
            ShoppingItem(name=ing.name, links=marketplace_links(ing.name))
            for ing in recipe.missing_ingredients
        ],
        available=[ing.name for ing in recipe.available_ingredients],
        shoppingListText=shopping_list_text(recipe),
    )
