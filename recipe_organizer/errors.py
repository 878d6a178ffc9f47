# recipe_organizer/errors.py
from typing import Any, Dict, List


class RecipeError(Exception):
    """Base of every error the API turns into an error envelope."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class ValidationFailure(RecipeError):
    status_code = 400
    default_message = "Validation failed"

    def __init__(self, errors: List[Dict[str, Any]], message: str | None = None) -> None:
        super().__init__(message)
        self.errors = errors


class MalformedIdentifier(RecipeError):
    status_code = 400
    default_message = "Invalid recipe ID format"


class NotFound(RecipeError):
    status_code = 404
    default_message = "Recipe not found"


class Conflict(RecipeError):
    status_code = 400
    default_message = "Duplicate field value entered"


class Unexpected(RecipeError):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None, detail: str | None = None) -> None:
        super().__init__(message)
        self.detail = detail


REQUIRED_MESSAGES = {
    "title": "Title is required",
    "ingredients": "At least one ingredient is required",
    "instructions": "Instructions are required",
}

FIELD_MESSAGES = {
    "title": "Title must be between 1 and 100 characters",
    "ingredients": "At least one ingredient is required",
    "instructions": "Instructions must be between 10 and 2000 characters",
    "cookingTime": "Cooking time must be a positive integer",
    "servings": "Servings must be a positive integer",
    "difficulty": "Difficulty must be easy, medium, or hard",
    "tags": "Tags must be an array",
}

ITEM_MESSAGES = {
    "ingredients": "All ingredients must be non-empty strings",
    "tags": "All tags must be strings",
}

# raised by our own validators; their text is already user-facing
_CUSTOM_TYPES = ("ingredients_blank", "null_value")


def _message(loc: List[str], err: Dict[str, Any]) -> str:
    kind = err.get("type")
    if kind in _CUSTOM_TYPES or not loc:
        return err.get("msg", "Invalid value")
    name = loc[0]
    if len(loc) > 1 and name in ITEM_MESSAGES:
        return ITEM_MESSAGES[name]
    blank = kind == "string_too_short" and not str(err.get("input") or "").strip()
    if (kind == "missing" or blank) and name in REQUIRED_MESSAGES:
        return REQUIRED_MESSAGES[name]
    return FIELD_MESSAGES.get(name, err.get("msg", "Invalid value"))


def field_errors(errors: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Flatten pydantic errors into ``{field, message, rejectedValue}`` items."""
    out = []
    for err in errors:
        loc = [str(p) for p in err.get("loc", ()) if p != "body"]
        out.append({
            "field": ".".join(loc) or "body",
            "message": _message(loc, err),
            "rejectedValue": None if err.get("type") == "missing" else err.get("input"),
        })
    return out
