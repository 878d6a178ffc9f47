# recipe_organizer/models.py
from datetime import datetime
from typing import Annotated, Any, Dict, List, Literal, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, PositiveInt, StringConstraints, field_validator
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

from recipe_organizer.utils.normalization import normalize_ingredients, normalize_tags

DIFFICULTIES = ("easy", "medium", "hard")
Difficulty = Literal["easy", "medium", "hard"]


def _has_ingredient(items: List[str]) -> List[str]:
    if not normalize_ingredients(items):
        raise PydanticCustomError("ingredients_blank", "At least one ingredient is required")
    return items


Title = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]
Instructions = Annotated[str, StringConstraints(strip_whitespace=True, min_length=10, max_length=2000)]
Ingredients = Annotated[List[str], Field(min_length=1), AfterValidator(_has_ingredient)]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RecipeCreate(CamelModel):
    title: Title
    ingredients: Ingredients
    instructions: Instructions
    cooking_time: Optional[PositiveInt] = None
    servings: Optional[PositiveInt] = None
    difficulty: Difficulty = "medium"
    tags: List[str] = Field(default_factory=list)

    def to_document(self) -> Dict[str, Any]:
        doc = self.model_dump(exclude_none=True)
        doc["ingredients"] = normalize_ingredients(doc["ingredients"])
        doc["tags"] = normalize_tags(doc["tags"])
        return doc


class RecipeUpdate(CamelModel):
    """Partial update: only the fields present in the body are replaced."""

    title: Optional[Title] = None
    ingredients: Optional[Ingredients] = None
    instructions: Optional[Instructions] = None
    cooking_time: Optional[PositiveInt] = None
    servings: Optional[PositiveInt] = None
    difficulty: Optional[Difficulty] = None
    tags: Optional[List[str]] = None

    @field_validator("title", "ingredients", "instructions", "difficulty", "tags")
    @classmethod
    def _not_null(cls, v):
        if v is None:
            raise PydanticCustomError("null_value", "Field cannot be null")
        return v

    def to_changes(self) -> Dict[str, Any]:
        changes = self.model_dump(exclude_unset=True)
        if "ingredients" in changes:
            changes["ingredients"] = normalize_ingredients(changes["ingredients"])
        if "tags" in changes:
            changes["tags"] = normalize_tags(changes["tags"])
        return changes


class RecipeOut(CamelModel):
    id: str
    title: str
    ingredients: List[str] = Field(default_factory=list)
    instructions: str = ""
    cooking_time: Optional[int] = None
    servings: Optional[int] = None
    difficulty: str = "medium"
    tags: List[str] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "RecipeOut":
        data = {k: v for k, v in doc.items() if k not in ("_id", "id", "score")}
        return cls(id=str(doc["_id"]), **data)

    def to_json(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")
