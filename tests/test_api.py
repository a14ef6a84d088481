"""Tests for session, ingredient, saved recipe, store and health endpoints."""

import json

from fastapi.testclient import TestClient

from app.models.recipe import MealTime
from tests.factories import BUCKET_KEY, PNG_BYTES, make_recipe


def test_root(client: TestClient):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["docs"] == "/docs"


def test_health_check(client: TestClient):
    """Test health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_readiness_check(client: TestClient):
    """Test readiness check endpoint."""
    response = client.get("/health/ready")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ready"
    assert data["dependencies"]["saved_recipes"] == "loaded"


def test_metrics_and_headers(client: TestClient):
    response = client.get("/health", headers={"X-Request-ID": "browser-req-42"})

    assert response.headers["X-Request-ID"] == "browser-req-42"
    assert response.headers["X-Response-Time"].endswith("ms")
    assert response.headers["X-Content-Type-Options"] == "nosniff"

    summary = client.get("/health/metrics").json()
    assert summary["total_requests"] >= 1
    assert summary["requests_by_path"]["/health"] == 1


def test_metrics_group_requests_by_route(client: TestClient):
    for name in ("A", "B", "C/D"):
        client.delete(f"/saved/{name}")
    client.get("/no/such/page")

    by_path = client.get("/health/metrics").json()["requests_by_path"]

    assert by_path["/saved/{recipe_name:path}"] == 3
    assert by_path["<unmatched>"] == 1
    assert not any(key.startswith("/saved/A") for key in by_path)


# ---------------------------------------------------------------------------
# Session and meal time
# ---------------------------------------------------------------------------


def test_session_view(client: TestClient):
    data = client.get("/session").json()
    assert data["ingredients"] == []
    assert data["mealTime"] == "lunch"
    assert data["scanning"] is False
    assert data["pipeline"]["state"] == "idle"
    assert data["savedCount"] == 0


def test_set_meal_time(client: TestClient, kitchen):
    response = client.put("/session/meal-time", json={"mealTime": "breakfast"})

    assert response.status_code == 200
    assert response.json() == {"mealTime": "breakfast"}
    assert kitchen.meal_time == MealTime.BREAKFAST
    assert client.get("/session/meal-time").json() == {"mealTime": "breakfast"}


def test_set_unknown_meal_time(client: TestClient, kitchen):
    response = client.put("/session/meal-time", json={"mealTime": "brunch"})

    assert response.status_code == 422
    assert response.json()["error"] == "Validation error"
    assert kitchen.meal_time == MealTime.LUNCH


# ---------------------------------------------------------------------------
# Ingredients
# ---------------------------------------------------------------------------


def test_add_ingredients(client: TestClient):
    response = client.post("/ingredients", json={"names": [" egg ", "egg", "milk"]})

    assert response.status_code == 200
    assert response.json() == {"ingredients": ["egg", "milk"], "added": ["egg", "milk"]}

    response = client.post("/ingredients", json={"names": ["milk", "tofu"]})
    assert response.json() == {"ingredients": ["egg", "milk", "tofu"], "added": ["tofu"]}


def test_blank_ingredients_are_skipped(client: TestClient):
    response = client.post("/ingredients", json={"names": ["egg", "  ", ""]})

    assert response.status_code == 200
    assert response.json() == {"ingredients": ["egg"], "added": ["egg"]}

    response = client.post("/ingredients", json={"names": ["   "]})
    assert response.status_code == 200
    assert response.json() == {"ingredients": ["egg"], "added": []}


def test_oversized_ingredient_is_rejected(client: TestClient):
    response = client.post("/ingredients", json={"names": ["egg", "x" * 101]})

    assert response.status_code == 400
    assert client.get("/ingredients").json()["ingredients"] == []


def test_remove_ingredient_with_slash(client: TestClient):
    client.post("/ingredients", json={"names": ["salt/pepper", "egg"]})

    response = client.delete("/ingredients/salt/pepper")

    assert response.status_code == 200
    assert response.json()["ingredients"] == ["egg"]


def test_remove_and_clear_ingredients(client: TestClient):
    client.post("/ingredients", json={"names": ["egg", "milk", "tofu"]})

    response = client.delete("/ingredients/milk")
    assert response.json()["ingredients"] == ["egg", "tofu"]

    response = client.delete("/ingredients/milk")
    assert response.status_code == 200
    assert response.json()["ingredients"] == ["egg", "tofu"]

    response = client.delete("/ingredients")
    assert response.json()["ingredients"] == []


def test_scan_fridge_photo_merges_ingredients(client: TestClient, fake_gemini):
    client.post("/ingredients", json={"names": ["egg"]})

    response = client.post(
        "/ingredients/from-image",
        files={"file": ("fridge.png", PNG_BYTES, "image/png")},
    )

    assert response.status_code == 200
    assert response.json() == {"ingredients": ["egg", "kimchi", "tofu"], "added": ["kimchi", "tofu"]}
    assert fake_gemini.calls["identify"] == [(len(PNG_BYTES), "image/png")]


def test_scan_rejects_non_image(client: TestClient, fake_gemini):
    response = client.post(
        "/ingredients/from-image",
        files={"file": ("notes.txt", b"just some text", "text/plain")},
    )

    assert response.status_code == 400
    assert fake_gemini.calls["identify"] == []


def test_scan_failure_leaves_list_unchanged(client: TestClient, kitchen, fake_gemini):
    client.post("/ingredients", json={"names": ["egg"]})
    fake_gemini.fail_recognition = True

    response = client.post(
        "/ingredients/from-image",
        files={"file": ("fridge.png", PNG_BYTES, "image/png")},
    )

    assert response.status_code == 502
    assert response.json()["detail"] == "Image analysis failed."
    assert client.get("/ingredients").json()["ingredients"] == ["egg"]
    assert kitchen.scanning is False


# ---------------------------------------------------------------------------
# Saved recipes
# ---------------------------------------------------------------------------


def test_save_recipe_flow(client: TestClient, bucket_path):
    recipe = make_recipe("Kimchi Stew", image_url="data:image/png;base64,QUJD").model_dump(mode="json")

    response = client.post("/saved", json=recipe)
    assert response.status_code == 201
    assert response.json() == {"recipeName": "Kimchi Stew", "saved": True, "created": True}

    response = client.post("/saved", json=recipe)
    assert response.status_code == 200
    assert response.json()["created"] is False

    listing = client.get("/saved").json()["recipes"]
    assert [r["recipeName"] for r in listing] == ["Kimchi Stew"]
    assert listing[0]["imageUrl"] == "data:image/png;base64,QUJD"

    stored = json.loads(bucket_path.read_text(encoding="utf-8"))
    assert stored[BUCKET_KEY][0]["recipeName"] == "Kimchi Stew"

    assert client.get("/saved/Kimchi Stew").json()["steps"] == recipe["steps"]
    assert client.get("/session").json()["savedCount"] == 1


def test_saved_recipes_most_recent_first(client: TestClient):
    for name in ("A", "B", "C"):
        client.post("/saved", json=make_recipe(name).model_dump(mode="json"))

    assert [r["recipeName"] for r in client.get("/saved").json()["recipes"]] == ["C", "B", "A"]


def test_delete_saved_recipe(client: TestClient):
    client.post("/saved", json=make_recipe("A").model_dump(mode="json"))

    response = client.delete("/saved/A")
    assert response.json() == {"recipeName": "A", "deleted": True}

    response = client.delete("/saved/A")
    assert response.status_code == 200
    assert response.json() == {"recipeName": "A", "deleted": False}

    assert client.get("/saved/A").status_code == 404


def test_saved_recipe_name_with_slash(client: TestClient):
    client.post("/saved", json=make_recipe("Tomato/Egg Stir-fry").model_dump(mode="json"))

    response = client.get("/saved/Tomato/Egg Stir-fry")
    assert response.status_code == 200
    assert response.json()["recipeName"] == "Tomato/Egg Stir-fry"

    response = client.delete("/saved/Tomato/Egg Stir-fry")
    assert response.status_code == 200
    assert response.json() == {"recipeName": "Tomato/Egg Stir-fry", "deleted": True}
    assert client.get("/saved").json()["recipes"] == []


def test_save_invalid_recipe(client: TestClient):
    payload = make_recipe("A").model_dump(mode="json")
    payload["steps"] = []

    response = client.post("/saved", json=payload)

    assert response.status_code == 422
    assert client.get("/saved").json()["recipes"] == []


# ---------------------------------------------------------------------------
# Nearby stores
# ---------------------------------------------------------------------------


def test_find_nearby_stores(client: TestClient, fake_gemini):
    response = client.post("/stores/nearby", json={"latitude": 37.5665, "longitude": 126.978})

    assert response.status_code == 200
    stores = response.json()["stores"]
    assert [s["name"] for s in stores] == ["Fresh Mart", "Corner Grocer"]
    assert stores[0]["uri"] == "https://maps.google.com/?cid=1"
    assert fake_gemini.calls["stores"] == [(37.5665, 126.978, 5)]
    assert client.get("/stores/nearby").json()["stores"] == stores


def test_find_nearby_stores_permission_denied(client: TestClient, fake_gemini):
    response = client.post("/stores/nearby", json={"error": "permission_denied"})

    assert response.status_code == 422
    assert response.json()["detail"] == "Location permission was denied. Check your browser settings."
    assert fake_gemini.calls["stores"] == []


def test_find_nearby_stores_failure_clears_results(client: TestClient, fake_gemini):
    client.post("/stores/nearby", json={"latitude": 1.0, "longitude": 2.0})
    fake_gemini.fail_store_search = True

    response = client.post("/stores/nearby", json={"latitude": 1.0, "longitude": 2.0})

    assert response.status_code == 502
    assert response.json()["detail"] == "Nearby store search failed."
    assert client.get("/stores/nearby").json()["stores"] == []


def test_find_nearby_stores_out_of_range(client: TestClient):
    response = client.post("/stores/nearby", json={"latitude": 123.0, "longitude": 0.0})
    assert response.status_code == 422
