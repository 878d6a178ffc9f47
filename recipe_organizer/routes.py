# recipe_organizer/routes.py
import time
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from recipe_organizer.models import RecipeCreate, RecipeUpdate
from recipe_organizer.services import recipe_service, stats_service
from recipe_organizer.storage import RecipeStore

router = APIRouter(prefix="/recipes", tags=["recipes"])
meta_router = APIRouter()


def get_store(request: Request) -> RecipeStore:
    return request.app.state.store


@meta_router.get("/")
def root(request: Request):
    return {
        "success": True,
        "message": "Welcome to Recipe Organizer API",
        "version": request.app.version,
        "environment": request.app.state.settings.environment,
        "endpoints": {
            "health": "/health",
            "recipes": "/recipes",
            "search": "/recipes/search",
            "stats": "/recipes/stats",
        },
    }


@meta_router.get("/health")
def health(request: Request, store: RecipeStore = Depends(get_store)):
    reachable = store.ping()
    return {
        "success": True,
        "status": "ok" if reachable else "degraded",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime": round(time.monotonic() - request.app.state.started_at, 3),
        "environment": request.app.state.settings.environment,
        "database": {"status": "connected" if reachable else "disconnected"},
    }


# Literal paths must come before /{recipe_id}
@router.get("/search")
def search_recipes(
    q: Optional[str] = None,
    ingredient: Optional[str] = None,
    difficulty: Optional[str] = None,
    tags: Optional[str] = None,
    cooking_time_max: Optional[str] = Query(None, alias="cookingTimeMax"),
    servings_min: Optional[str] = Query(None, alias="servingsMin"),
    page: Optional[str] = None,
    limit: Optional[str] = None,
    store: RecipeStore = Depends(get_store),
):
    return recipe_service.search_recipes(
        store, q, ingredient, difficulty, tags, cooking_time_max, servings_min, page, limit
    )


@router.get("/stats")
def recipe_stats(store: RecipeStore = Depends(get_store)):
    return {"success": True, "data": stats_service.get_recipe_stats(store)}


@router.get("")
def list_recipes(
    page: Optional[str] = None,
    limit: Optional[str] = None,
    difficulty: Optional[str] = None,
    tags: Optional[str] = None,
    store: RecipeStore = Depends(get_store),
):
    return recipe_service.list_recipes(store, page, limit, difficulty, tags)


@router.post("", status_code=201)
def create_recipe(payload: RecipeCreate, store: RecipeStore = Depends(get_store)):
    data = recipe_service.create_recipe(store, payload)
    return {"success": True, "message": "Recipe created successfully", "data": data}


@router.get("/{recipe_id}")
def get_recipe(recipe_id: str, store: RecipeStore = Depends(get_store)):
    return {"success": True, "data": recipe_service.get_recipe(store, recipe_id)}


@router.put("/{recipe_id}")
def update_recipe(recipe_id: str, payload: RecipeUpdate, store: RecipeStore = Depends(get_store)):
    data = recipe_service.update_recipe(store, recipe_id, payload)
    return {"success": True, "message": "Recipe updated successfully", "data": data}


@router.delete("/{recipe_id}")
def delete_recipe(recipe_id: str, store: RecipeStore = Depends(get_store)):
    data = recipe_service.delete_recipe(store, recipe_id)
    return {"success": True, "message": "Recipe deleted successfully", "data": data}
