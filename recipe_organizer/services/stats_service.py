# recipe_organizer/services/stats_service.py
from typing import Any, Dict, List

import structlog

from recipe_organizer.storage import RecipeStore

logger = structlog.get_logger()

TOP_TAGS_LIMIT = 10

OVERVIEW_PIPELINE: List[Dict[str, Any]] = [
    {"$group": {
        "_id": None,
        "totalRecipes": {"$sum": 1},
        "avgCookingTime": {"$avg": "$cooking_time"},
        "avgServings": {"$avg": "$servings"},
    }},
]

DIFFICULTY_PIPELINE: List[Dict[str, Any]] = [
    {"$group": {"_id": "$difficulty", "count": {"$sum": 1}}},
    {"$sort": {"_id": 1}},
]

# Ties on count keep whatever order $group yields.
TOP_TAGS_PIPELINE: List[Dict[str, Any]] = [
    {"$unwind": "$tags"},
    {"$group": {"_id": "$tags", "count": {"$sum": 1}}},
    {"$sort": {"count": -1}},
    {"$limit": TOP_TAGS_LIMIT},
]


def _round_avg(value: Any) -> float:
    return round(float(value), 1) if value is not None else 0


def summarize_overview(rows: List[Dict[str, Any]]) -> Dict[str, Any]:
    if not rows:
        return {"totalRecipes": 0, "avgCookingTime": 0, "avgServings": 0}
    row = rows[0]
    return {
        "totalRecipes": int(row.get("totalRecipes", 0)),
        "avgCookingTime": _round_avg(row.get("avgCookingTime")),
        "avgServings": _round_avg(row.get("avgServings")),
    }


def summarize_difficulties(rows: List[Dict[str, Any]]) -> Dict[str, int]:
    return {r["_id"]: int(r["count"]) for r in rows if r.get("_id") is not None}


def summarize_tags(rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return [{"name": r["_id"], "count": int(r["count"])} for r in rows[:TOP_TAGS_LIMIT]]


def get_recipe_stats(store: RecipeStore) -> Dict[str, Any]:
    """Overview, difficulty breakdown and top tags over the whole collection."""
    overview = summarize_overview(store.aggregate(OVERVIEW_PIPELINE))
    difficulties = summarize_difficulties(store.aggregate(DIFFICULTY_PIPELINE))
    top_tags = summarize_tags(store.aggregate(TOP_TAGS_PIPELINE))
    logger.debug("Computed recipe stats", total=overview["totalRecipes"], tags=len(top_tags))
    return {
        "overview": overview,
        "difficultyBreakdown": difficulties,
        "topTags": top_tags,
    }
