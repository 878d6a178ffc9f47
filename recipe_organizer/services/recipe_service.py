# recipe_organizer/services/recipe_service.py
from datetime import datetime, timezone
from typing import Any, Dict, List

import structlog
from bson import ObjectId

from recipe_organizer.errors import MalformedIdentifier, NotFound
from recipe_organizer.models import RecipeCreate, RecipeOut, RecipeUpdate
from recipe_organizer.services.query_builder import Page, RecipeQuery, build_list_query, build_pagination, build_search_query
from recipe_organizer.storage import RecipeStore

logger = structlog.get_logger()


def _now() -> datetime:
    # Mongo keeps millisecond precision
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


def parse_object_id(recipe_id: str) -> ObjectId:
    if not ObjectId.is_valid(recipe_id):
        raise MalformedIdentifier()
    return ObjectId(recipe_id)


def _page_of(store: RecipeStore, query: RecipeQuery, page: Page) -> Dict[str, Any]:
    docs = store.find(query.filter, sort=query.sort, skip=page.skip, limit=page.limit, projection=query.projection)
    total = store.count(query.filter)
    data: List[Dict[str, Any]] = [RecipeOut.from_document(d).to_json() for d in docs]
    return {
        "success": True,
        "count": len(data),
        "pagination": build_pagination(page, total),
        "data": data,
    }


def list_recipes(
    store: RecipeStore,
    page: str | None = None,
    limit: str | None = None,
    difficulty: str | None = None,
    tags: str | None = None,
) -> Dict[str, Any]:
    return _page_of(store, build_list_query(difficulty, tags), Page.from_query(page, limit))


def search_recipes(
    store: RecipeStore,
    q: str | None = None,
    ingredient: str | None = None,
    difficulty: str | None = None,
    tags: str | None = None,
    cooking_time_max: str | None = None,
    servings_min: str | None = None,
    page: str | None = None,
    limit: str | None = None,
) -> Dict[str, Any]:
    query = build_search_query(q, ingredient, difficulty, tags, cooking_time_max, servings_min)
    result = _page_of(store, query, Page.from_query(page, limit))
    result["searchQuery"] = query.applied
    return result


def get_recipe(store: RecipeStore, recipe_id: str) -> Dict[str, Any]:
    doc = store.get(parse_object_id(recipe_id))
    if not doc:
        raise NotFound()
    return RecipeOut.from_document(doc).to_json()


def create_recipe(store: RecipeStore, payload: RecipeCreate) -> Dict[str, Any]:
    now = _now()
    doc = {**payload.to_document(), "created_at": now, "updated_at": now}
    stored = store.insert(doc)
    logger.info("Recipe created", recipe_id=str(stored["_id"]), title=stored.get("title"))
    return RecipeOut.from_document(stored).to_json()


def update_recipe(store: RecipeStore, recipe_id: str, payload: RecipeUpdate) -> Dict[str, Any]:
    oid = parse_object_id(recipe_id)
    changes = {**payload.to_changes(), "updated_at": _now()}
    stored = store.update(oid, changes)
    if not stored:
        raise NotFound()
    logger.info("Recipe updated", recipe_id=recipe_id, fields=sorted(changes))
    return RecipeOut.from_document(stored).to_json()


def delete_recipe(store: RecipeStore, recipe_id: str) -> Dict[str, Any]:
    removed = store.delete(parse_object_id(recipe_id))
    if not removed:
        raise NotFound()
    logger.info("Recipe deleted", recipe_id=recipe_id)
    return {"id": str(removed["_id"]), "title": removed.get("title")}
