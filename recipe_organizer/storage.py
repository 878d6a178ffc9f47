# recipe_organizer/storage.py
from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Mapping, Protocol, Sequence, Tuple

from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.collection import Collection
from pymongo.errors import DuplicateKeyError, PyMongoError

from recipe_organizer.db_mongo import ensure_indexes
from recipe_organizer.errors import Conflict, Unexpected

SortSpec = Sequence[Tuple[str, Any]]


class RecipeStore(Protocol):
    """Collection access needed by the recipe services."""

    def find(
        self,
        filter: Mapping[str, Any],
        *,
        sort: SortSpec,
        skip: int = 0,
        limit: int = 0,
        projection: Mapping[str, Any] | None = None,
    ) -> List[Dict[str, Any]]:
        """Return one sorted page of matching documents."""

    def count(self, filter: Mapping[str, Any]) -> int:
        """Return the number of documents matching ``filter``."""

    def aggregate(self, pipeline: Sequence[Mapping[str, Any]]) -> List[Dict[str, Any]]:
        """Run an aggregation pipeline over the whole collection."""

    def get(self, recipe_id: ObjectId) -> Dict[str, Any] | None:
        """Return a single document or ``None``."""

    def insert(self, document: Dict[str, Any]) -> Dict[str, Any]:
        """Persist a new document and return it as stored."""

    def update(self, recipe_id: ObjectId, changes: Mapping[str, Any]) -> Dict[str, Any] | None:
        """Apply ``changes`` and return the updated document, ``None`` if missing."""

    def delete(self, recipe_id: ObjectId) -> Dict[str, Any] | None:
        """Remove a document and return it, ``None`` if missing."""

    def ping(self) -> bool:
        """Return True when the backing store is reachable."""

    def ensure_indexes(self) -> None:
        """Create the indexes filtering, sorting and text search rely on."""


@contextmanager
def _translate_errors(action: str) -> Iterator[None]:
    try:
        yield
    except DuplicateKeyError as e:
        raise Conflict() from e
    except PyMongoError as e:
        raise Unexpected(f"Failed to {action}", detail=str(e)) from e


class MongoRecipeStore(RecipeStore):
    """Recipe storage backed by a single MongoDB collection."""

    def __init__(self, collection: Collection) -> None:
        self._collection = collection

    def find(self, filter, *, sort, skip=0, limit=0, projection=None):
        with _translate_errors("fetch recipes"):
            cursor = self._collection.find(dict(filter), projection)
            if sort:
                cursor = cursor.sort(list(sort))
            return list(cursor.skip(int(skip)).limit(int(limit)))

    def count(self, filter):
        with _translate_errors("count recipes"):
            return self._collection.count_documents(dict(filter))

    def aggregate(self, pipeline):
        with _translate_errors("aggregate recipes"):
            return list(self._collection.aggregate(list(pipeline)))

    def get(self, recipe_id):
        with _translate_errors("fetch recipe"):
            return self._collection.find_one({"_id": recipe_id})

    def insert(self, document):
        with _translate_errors("create recipe"):
            result = self._collection.insert_one(dict(document))
            return self._collection.find_one({"_id": result.inserted_id})

    def update(self, recipe_id, changes):
        with _translate_errors("update recipe"):
            return self._collection.find_one_and_update(
                {"_id": recipe_id},
                {"$set": dict(changes)},
                return_document=ReturnDocument.AFTER,
            )

    def delete(self, recipe_id):
        with _translate_errors("delete recipe"):
            return self._collection.find_one_and_delete({"_id": recipe_id})

    def ping(self) -> bool:
        try:
            self._collection.database.command("ping")
            return True
        except PyMongoError:
            return False

    def ensure_indexes(self) -> None:
        with _translate_errors("create indexes"):
            ensure_indexes(self._collection)


__all__ = ["RecipeStore", "MongoRecipeStore"]
