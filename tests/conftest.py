from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, Dict

import mongomock
import pytest
from fastapi.testclient import TestClient

from recipe_organizer.app import create_app
from recipe_organizer.config import Settings
from recipe_organizer.storage import MongoRecipeStore

BASE_TIME = datetime(2024, 1, 1, 12, 0, 0)


@pytest.fixture
def collection():
    return mongomock.MongoClient().recipe_organizer_test.recipes


@pytest.fixture
def store(collection):
    return MongoRecipeStore(collection)


@pytest.fixture
def settings():
    return Settings(environment="test", log_level="WARNING")


@pytest.fixture
def client(store, settings):
    app = create_app(store=store, settings=settings)
    return TestClient(app)


def recipe_payload(**overrides: Any) -> Dict[str, Any]:
    payload = {
        "title": "Tomato Soup",
        "ingredients": ["tomatoes", "salt", "olive oil"],
        "instructions": "Simmer everything for twenty minutes.",
        "cookingTime": 25,
        "servings": 4,
        "difficulty": "easy",
        "tags": ["Vegan", "quick"],
    }
    payload.update(overrides)
    return payload


def seed(collection, *docs: Dict[str, Any]) -> list:
    """Insert stored documents directly, oldest first, one minute apart."""
    ids = []
    for i, doc in enumerate(docs):
        created = BASE_TIME + timedelta(minutes=i)
        stored = {
            "title": f"Recipe {i + 1}",
            "ingredients": ["water"],
            "instructions": "Boil the water until done.",
            "difficulty": "medium",
            "tags": [],
            "created_at": created,
            "updated_at": created,
        }
        stored.update(doc)
        ids.append(collection.insert_one(stored).inserted_id)
    return ids
