from __future__ import annotations

import pandas as pd

from etl.load_recipes import detect_columns, load_dataframe, parse_list_cell, parse_minutes


def test_parse_list_cell_formats():
    assert parse_list_cell('["flour", "sugar"]') == ["flour", "sugar"]
    assert parse_list_cell("['eggs', 'milk']") == ["eggs", "milk"]
    assert parse_list_cell("salt; pepper, oil") == ["salt", "pepper", "oil"]
    assert parse_list_cell(float("nan")) == []
    assert parse_list_cell("") == []


def test_parse_minutes():
    assert parse_minutes(45) == 45
    assert parse_minutes("1 hr 30 min") == 90
    assert parse_minutes("PT45M") == 45
    assert parse_minutes("1:15") == 75
    assert parse_minutes("20") == 20
    assert parse_minutes("whenever") == "whenever"


def test_detect_columns_by_loose_names():
    df = pd.DataFrame(columns=["Name", "Ingredients", "Directions", "Cook_Time", "Serves", "Tags"])
    cols = detect_columns(df)
    assert cols["title"] == "Name"
    assert cols["instructions"] == "Directions"
    assert cols["cooking_time"] == "Cook_Time"
    assert cols["servings"] == "Serves"
    assert cols["difficulty"] is None


def test_load_dataframe_inserts_valid_rows_and_rejects_others(store, collection):
    df = pd.DataFrame([
        {
            "title": "Pancakes",
            "ingredients": '["flour", " ", "milk"]',
            "instructions": "Whisk and fry in a hot pan.",
            "cookingTime": "20 min",
            "servings": 4,
            "difficulty": "Easy",
            "tags": "Breakfast, Sweet",
        },
        {
            "title": "Broken",
            "ingredients": "",
            "instructions": "short",
            "cookingTime": None,
            "servings": None,
            "difficulty": "easy",
            "tags": "",
        },
    ])

    result = load_dataframe(store, df)

    assert result == {"recipes_inserted": 1, "rows_rejected": 1}
    [doc] = list(collection.find())
    assert doc["title"] == "Pancakes"
    assert doc["ingredients"] == ["flour", "milk"]
    assert doc["tags"] == ["breakfast", "sweet"]
    assert doc["cooking_time"] == 20
    assert doc["servings"] == 4
    assert doc["difficulty"] == "easy"
