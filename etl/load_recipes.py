# etl/load_recipes.py
import json, re, ast, numbers, sys
from typing import Any, Dict, List

import pandas as pd
import structlog
from pydantic import ValidationError

from recipe_organizer.errors import field_errors
from recipe_organizer.models import RecipeCreate
from recipe_organizer.services.recipe_service import create_recipe
from recipe_organizer.storage import RecipeStore

logger = structlog.get_logger()


def parse_list_cell(val) -> List[str]:
    """
    Robustly parse cells that may contain:
      - JSON arrays: ["a","b"]
      - Python repr arrays: ['a','b']
      - Comma/semicolon separated strings: a,b ; c
    """
    if val is None: return []
    if isinstance(val, list): return [str(x) for x in val]
    if isinstance(val, float) and pd.isna(val): return []
    s = str(val).strip()
    if not s: return []
    if s.startswith("[") and s.endswith("]"):
        for parser in (json.loads, ast.literal_eval):
            try:
                arr = parser(s)
                if isinstance(arr, list): return [str(x) for x in arr]
            except (ValueError, SyntaxError):
                pass
    return [p.strip() for p in re.split(r"[;,]", s) if p.strip()]


def parse_instructions_cell(val) -> str | None:
    """Join step lists into one block of text; plain text is kept as is."""
    if val is None or (isinstance(val, float) and pd.isna(val)): return None
    s = str(val).strip()
    if s.startswith("[") and s.endswith("]"):
        steps = parse_list_cell(s)
        return "\n".join(clean_display(x) for x in steps if str(x).strip())
    return s


def clean_display(text: str) -> str:
    t = str(text).strip().strip("[]\"'")
    return re.sub(r"\s+", " ", t)


def parse_minutes(val):
    """Minutes as int for values like 55, '55 minutes', '1 hr 30 min', 'PT45M', '1:30'.

    Anything unparseable is returned unchanged so validation reports it.
    """
    if val is None or (isinstance(val, float) and pd.isna(val)):
        return None
    if isinstance(val, numbers.Number):
        return int(val) if float(val).is_integer() else val

    s = str(val).strip().lower()
    if not s:
        return None

    m = re.match(r"^pt(?:(\d+)h)?(?:(\d+)m)?$", s)
    if m and (m.group(1) or m.group(2)):
        return int(m.group(1) or 0) * 60 + int(m.group(2) or 0)

    hours = re.search(r"(\d+)\s*(h|hr|hour|hours)\b", s)
    mins  = re.search(r"(\d+)\s*(m|min|mins|minute|minutes)\b", s)
    total = 0
    if hours: total += int(hours.group(1)) * 60
    if mins:  total += int(mins.group(1))
    if total > 0: return total

    m = re.match(r"^\s*(\d+)\s*:\s*(\d{1,2})\s*$", s)
    if m: return int(m.group(1)) * 60 + int(m.group(2))

    return int(s) if s.isdigit() else val


def parse_count(val):
    if val is None or (isinstance(val, float) and pd.isna(val)):
        return None
    if isinstance(val, numbers.Number):
        return int(val) if float(val).is_integer() else val
    s = str(val).strip()
    return int(s) if s.isdigit() else (s or None)


def detect_columns(df: pd.DataFrame) -> Dict[str, str | None]:
    cols = {str(c).lower().strip(): c for c in df.columns}
    def col_like(*names):
        for n in names:
            if n in cols: return cols[n]
        for k, orig in cols.items():
            for n in names:
                if n in k: return orig
        return None
    return dict(
        title=col_like("title", "name"),
        ingredients=col_like("ingredients", "ingredient_list", "ings"),
        instructions=col_like("instructions", "steps", "directions", "method"),
        cooking_time=col_like("cookingtime", "cooking_time", "cook_time", "total_time", "prep_time_min", "minutes"),
        servings=col_like("servings", "serves", "yield"),
        difficulty=col_like("difficulty", "level"),
        tags=col_like("tags", "labels", "categories"),
    )


def row_to_payload(row: pd.Series, cols: Dict[str, str | None]) -> Dict[str, Any]:
    def cell(key):
        c = cols.get(key)
        if c is None: return None
        v = row[c]
        return None if (not isinstance(v, list) and pd.isna(v)) else v

    payload: Dict[str, Any] = {
        "title": clean_display(cell("title")) if cell("title") is not None else None,
        "ingredients": [clean_display(x) for x in parse_list_cell(cell("ingredients"))],
        "instructions": parse_instructions_cell(cell("instructions")),
        "cookingTime": parse_minutes(cell("cooking_time")),
        "servings": parse_count(cell("servings")),
        "tags": parse_list_cell(cell("tags")),
    }
    difficulty = cell("difficulty")
    if difficulty is not None:
        payload["difficulty"] = str(difficulty).strip().lower()
    return {k: v for k, v in payload.items() if v is not None}


def load_dataframe(store: RecipeStore, df: pd.DataFrame) -> Dict[str, int]:
    cols = detect_columns(df)
    inserted = rejected = 0
    for i, row in df.iterrows():
        try:
            recipe = RecipeCreate.model_validate(row_to_payload(row, cols))
        except ValidationError as e:
            rejected += 1
            logger.warning("Rejected recipe row", row=int(i) + 1, errors=field_errors(e.errors()))
            continue
        create_recipe(store, recipe)
        inserted += 1
    logger.info("Recipe import finished", recipes_inserted=inserted, rows_rejected=rejected)
    return {"recipes_inserted": inserted, "rows_rejected": rejected}


def read_table(path: str) -> pd.DataFrame:
    if path.lower().endswith(".csv"):
        return pd.read_csv(path)
    return pd.read_excel(path)


def load_file(path: str, drop_existing: bool = False) -> Dict[str, int]:
    from recipe_organizer.config import Settings
    from recipe_organizer.db_mongo import get_client, get_collection
    from recipe_organizer.storage import MongoRecipeStore

    settings = Settings.from_env()
    client = get_client(settings)
    try:
        collection = get_collection(client, settings)
        if drop_existing:
            collection.delete_many({})
        store = MongoRecipeStore(collection)
        store.ensure_indexes()
        return load_dataframe(store, read_table(path))
    finally:
        client.close()


if __name__ == "__main__":
    from dotenv import load_dotenv; load_dotenv()
    from recipe_organizer.logging_config import configure_logging
    configure_logging("INFO", json_logs=False)

    args = [a for a in sys.argv[1:] if not a.startswith("--")]
    p = args[0] if args else "recipes.xlsx"
    print(load_file(p, drop_existing="--drop" in sys.argv))
