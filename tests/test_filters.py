from pantry_chef_core.domain_models import Recipe
from pantry_chef_core.filters import filter_recipes

RECIPES = [
    Recipe(id="1", title="Tomato Soup", description="Warm and cozy", ingredients=["tomato", "cream"], category="main dish"),
    Recipe(id="2", title="Fruit Salad", description="", ingredients=["Apple", "banana"], category="dessert"),
    Recipe(id="3", title="Bruschetta", description="Toasted bread with TOMATO", ingredients=["bread"], category="appetizer"),
]


def test_no_filters_keeps_everything_in_order():
    assert [r.id for r in filter_recipes(RECIPES)] == ["1", "2", "3"]


def test_search_is_case_insensitive_over_title_description_and_ingredients():
    assert [r.id for r in filter_recipes(RECIPES, search="tomato")] == ["1", "3"]
    assert [r.id for r in filter_recipes(RECIPES, search="APPLE")] == ["2"]


def test_category_filter():
    assert [r.id for r in filter_recipes(RECIPES, category="dessert")] == ["2"]
    assert [r.id for r in filter_recipes(RECIPES, category="all")] == ["1", "2", "3"]


def test_search_and_category_combined():
    assert [r.id for r in filter_recipes(RECIPES, search="tomato", category="appetizer")] == ["3"]
    assert filter_recipes(RECIPES, search="   ", category="side dish") == []
