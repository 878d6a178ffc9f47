# recipe_organizer/db_mongo.py
from pymongo import MongoClient, ASCENDING, DESCENDING, TEXT
from pymongo.collection import Collection

from recipe_organizer.config import Settings


def get_client(settings: Settings) -> MongoClient:
    return MongoClient(settings.mongodb_uri, serverSelectionTimeoutMS=5000, tz_aware=True)


def get_collection(client: MongoClient, settings: Settings) -> Collection:
    return client[settings.mongodb_db][settings.recipes_collection]


def ensure_indexes(collection: Collection) -> None:
    # Filtering and default sort
    collection.create_index([("tags", ASCENDING)])
    collection.create_index([("difficulty", ASCENDING)])
    collection.create_index([("created_at", DESCENDING)])
    # Full-text search for /recipes/search?q=
    collection.create_index(
        [("title", TEXT), ("ingredients", TEXT), ("instructions", TEXT)],
        name="recipe_text",
    )
