# recipe_organizer/services/query_builder.py
import math
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple

from pymongo import DESCENDING

from recipe_organizer.models import DIFFICULTIES
from recipe_organizer.utils.normalization import INT64_MAX, parse_leading_int, parse_number, split_tags

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10

NEWEST_FIRST: List[Tuple[str, Any]] = [("created_at", DESCENDING)]
TEXT_SCORE = {"$meta": "textScore"}


def parse_positive_int(value: str | None, default: int) -> int:
    n = parse_leading_int(value)
    return n if n is not None and 0 < n <= INT64_MAX else default


@dataclass(frozen=True)
class Page:
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT

    @classmethod
    def from_query(cls, page: str | None, limit: str | None) -> "Page":
        return cls(parse_positive_int(page, DEFAULT_PAGE), parse_positive_int(limit, DEFAULT_LIMIT))

    @property
    def skip(self) -> int:
        return min((self.page - 1) * self.limit, INT64_MAX)


def build_pagination(page: Page, total: int) -> Dict[str, Any]:
    total_pages = math.ceil(total / page.limit) if total else 0
    return {
        "currentPage": page.page,
        "totalPages": total_pages,
        "limit": page.limit,
        "total": total,
        "hasNext": page.page < total_pages,
        "hasPrev": page.page > 1,
    }


@dataclass
class RecipeQuery:
    filter: Dict[str, Any] = field(default_factory=dict)
    sort: List[Tuple[str, Any]] = field(default_factory=lambda: list(NEWEST_FIRST))
    projection: Dict[str, Any] | None = None
    applied: Dict[str, Any] = field(default_factory=dict)


def build_list_query(difficulty: str | None = None, tags: str | None = None) -> RecipeQuery:
    """Filter for GET /recipes. Difficulty is matched verbatim, without enum checks."""
    q = RecipeQuery()
    if difficulty:
        q.filter["difficulty"] = difficulty
    if tags:
        q.filter["tags"] = {"$in": split_tags(tags)}
    return q


def build_search_query(
    q: str | None = None,
    ingredient: str | None = None,
    difficulty: str | None = None,
    tags: str | None = None,
    cooking_time_max: str | None = None,
    servings_min: str | None = None,
) -> RecipeQuery:
    """Filter, sort and echo for GET /recipes/search.

    Invalid difficulty and non-numeric bounds are dropped, never rejected;
    ``applied`` reports what was actually used.
    """
    query = RecipeQuery()
    flt = query.filter

    if q:
        flt["$text"] = {"$search": q}
        query.sort = [("score", TEXT_SCORE), *NEWEST_FIRST]
        query.projection = {"score": TEXT_SCORE}

    if ingredient:
        flt["ingredients"] = {"$regex": re.escape(ingredient), "$options": "i"}

    valid_difficulty = difficulty if difficulty in DIFFICULTIES else None
    if valid_difficulty:
        flt["difficulty"] = valid_difficulty

    # A tags value that normalizes to nothing matches no record.
    tag_list = split_tags(tags, normalize=True) if tags else None
    if tag_list is not None:
        flt["tags"] = {"$in": tag_list}

    max_time = parse_number(cooking_time_max)
    if max_time is not None:
        flt["cooking_time"] = {"$lte": max_time}

    min_servings = parse_number(servings_min)
    if min_servings is not None:
        flt["servings"] = {"$gte": min_servings}

    query.applied = {
        "textSearch": q or None,
        "ingredient": ingredient or None,
        "difficulty": valid_difficulty,
        "tags": tag_list,
        "cookingTimeMax": max_time,
        "servingsMin": min_servings,
    }
    return query
