"""Tests for the saved recipe bucket."""

import json

from app.services.saved_recipe_store import SavedRecipeStore
from tests.factories import BUCKET_KEY, make_recipe


def _reload(path):
    store = SavedRecipeStore(path, BUCKET_KEY)
    store.load()
    return store


def test_load_without_file_is_empty(saved_store):
    assert saved_store.loaded
    assert saved_store.recipes == ()
    assert len(saved_store) == 0


def test_save_prepends_and_persists(saved_store, bucket_path):
    assert saved_store.save(make_recipe("A")) is True
    assert saved_store.save(make_recipe("B", image_url="data:image/png;base64,AAAA")) is True

    assert [r.recipeName for r in saved_store.recipes] == ["B", "A"]

    data = json.loads(bucket_path.read_text(encoding="utf-8"))
    assert [r["recipeName"] for r in data[BUCKET_KEY]] == ["B", "A"]
    assert data[BUCKET_KEY][0]["imageUrl"] == "data:image/png;base64,AAAA"


def test_save_same_name_is_a_noop(saved_store):
    first = make_recipe("A")
    assert saved_store.save(first) is True
    assert saved_store.save(make_recipe("A", missing=("different",))) is False
    assert len(saved_store) == 1
    assert saved_store.get("A").missing_ingredients[0].name == "gochujang"


def test_saved_copy_is_independent_of_caller(saved_store):
    recipe = make_recipe("A")
    saved_store.save(recipe)
    recipe.steps.append("Mutated later")
    assert saved_store.get("A").steps == ["Prepare the ingredients.", "Cook."]


def test_delete_removes_exact_match_only(saved_store, bucket_path):
    saved_store.save(make_recipe("A"))
    saved_store.save(make_recipe("B"))

    assert saved_store.delete("a") is False
    assert saved_store.delete("A") is True
    assert saved_store.delete("A") is False
    assert [r.recipeName for r in saved_store.recipes] == ["B"]
    assert [r.recipeName for r in _reload(bucket_path).recipes] == ["B"]


def test_reload_restores_collection(saved_store, bucket_path):
    recipes = [make_recipe("A"), make_recipe("B", image_url="data:image/png;base64,QQ==")]
    for recipe in recipes:
        saved_store.save(recipe)

    reloaded = _reload(bucket_path)
    assert list(reloaded.recipes) == list(reversed(recipes))
    assert reloaded.is_saved("A")
    assert not reloaded.is_saved("C")


def test_other_bucket_keys_are_preserved(bucket_path):
    bucket_path.write_text(json.dumps({"theme": "dark"}), encoding="utf-8")
    store = _reload(bucket_path)
    store.save(make_recipe("A"))

    data = json.loads(bucket_path.read_text(encoding="utf-8"))
    assert data["theme"] == "dark"
    assert len(data[BUCKET_KEY]) == 1


def test_corrupted_bucket_loads_empty(bucket_path):
    bucket_path.write_text("{not json", encoding="utf-8")
    store = _reload(bucket_path)
    assert store.loaded
    assert store.recipes == ()

    # The next save rewrites the bucket as valid JSON
    store.save(make_recipe("A"))
    assert [r.recipeName for r in _reload(bucket_path).recipes] == ["A"]


def test_malformed_and_duplicate_entries_are_skipped(bucket_path):
    good = make_recipe("A").model_dump(mode="json")
    bucket_path.write_text(
        json.dumps({BUCKET_KEY: [good, {"recipeName": "broken"}, dict(good, description="dup")]}),
        encoding="utf-8",
    )
    store = _reload(bucket_path)
    assert [r.recipeName for r in store.recipes] == ["A"]
    assert store.get("A").description == good["description"]


def test_write_leaves_no_temp_files(saved_store, bucket_path):
    saved_store.save(make_recipe("A"))
    saved_store.delete("A")
    assert sorted(p.name for p in bucket_path.parent.iterdir()) == [bucket_path.name]
