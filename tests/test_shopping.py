"""Tests for the shopping helpers."""

from app.services.shopping import MARKETPLACES, build_shopping_guide, marketplace_links, shopping_list_text
from tests.factories import make_recipe


def test_marketplace_links_encode_the_ingredient():
    links = marketplace_links("green onion & garlic")

    assert [link.label for link in links] == [label for label, _ in MARKETPLACES]
    assert links[0].url == "https://www.coupang.com/np/search?q=green%20onion%20%26%20garlic"
    assert all("green%20onion" in link.url for link in links)


def test_marketplace_links_encode_non_ascii():
    links = marketplace_links("대파")
    assert links[1].url == "https://www.kurly.com/search?searchTerm=%EB%8C%80%ED%8C%8C"


def test_shopping_list_text_lists_missing_only():
    recipe = make_recipe("Kimchi Stew", missing=("pork belly", "tofu"))

    assert shopping_list_text(recipe) == (
        "[Chef's Shopping List]\n"
        "Dish: Kimchi Stew\n"
        "To buy:\n"
        "- pork belly\n"
        "- tofu"
    )


def test_shopping_list_text_with_nothing_to_buy():
    recipe = make_recipe("Omelette", missing=())
    assert shopping_list_text(recipe) == "[Chef's Shopping List]\nDish: Omelette\nTo buy:"


def test_build_shopping_guide():
    recipe = make_recipe("Kimchi Stew", missing=("pork belly",))

    guide = build_shopping_guide(recipe)

    assert guide.recipeName == "Kimchi Stew"
    assert guide.available == ["egg"]
    assert [item.name for item in guide.missing] == ["pork belly"]
    assert len(guide.missing[0].links) == len(MARKETPLACES)
    assert guide.shoppingListText.endswith("- pork belly")
