"""Pytest configuration and fixtures."""

import pytest
from fastapi.testclient import TestClient

from app.main import create_app
from app.middleware.performance import metrics
from app.services.kitchen_session import KitchenSession
from app.services.saved_recipe_store import SavedRecipeStore
from tests.factories import BUCKET_KEY, FakeGeminiService


@pytest.fixture
def fake_gemini():
    return FakeGeminiService()


@pytest.fixture
def bucket_path(tmp_path):
    return tmp_path / "storage.json"


@pytest.fixture
def saved_store(bucket_path):
    store = SavedRecipeStore(bucket_path, BUCKET_KEY)
    store.load()
    return store


@pytest.fixture
def kitchen(fake_gemini, saved_store):
    return KitchenSession(gemini_service=fake_gemini, saved_recipes=saved_store)


@pytest.fixture
def client(kitchen):
    """Test client; the context manager keeps one event loop for background tasks."""
    metrics.reset()
    with TestClient(create_app(kitchen)) as test_client:
        yield test_client
