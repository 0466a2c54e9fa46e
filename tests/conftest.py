"""
Pytest configuration and shared fixtures.
"""

import pytest

from shoplist.aggregator import aggregation_key
from shoplist.models import (
    InventoryItem, MealSlot, MealType, Recipe, RecipeIngredient, Section, ShoppingListItem,
)


def make_recipe(recipe_id="r1", title="Test Recipe", servings=2, ingredients=()):
    """Build a recipe from (name, amount, unit) tuples."""
    return Recipe(
        id=recipe_id,
        title=title,
        servings=servings,
        ingredients=tuple(
            RecipeIngredient(name=name, amount=amount, unit=unit)
            for name, amount, unit in ingredients
        ),
    )


def make_slot(recipe=None, servings=None, date="2026-10-19", meal_type=MealType.DINNER):
    return MealSlot(date=date, meal_type=meal_type, recipe=recipe, servings=servings)


@pytest.fixture
def garlic_recipe():
    return make_recipe(
        recipe_id="stir-fry",
        title="Garlic Stir Fry",
        servings=2,
        ingredients=[("Garlic", 3, "clove"), ("Rice", 1, "cup")],
    )


@pytest.fixture
def milk_recipe():
    return make_recipe(
        recipe_id="pancakes",
        title="Pancakes",
        servings=4,
        ingredients=[("Milk", 2, "cup"), ("Flour", 2, "cups"), ("Eggs", 2, "")],
    )


@pytest.fixture
def week_of_meals(garlic_recipe, milk_recipe):
    return [
        make_slot(garlic_recipe, date="2026-10-19"),
        make_slot(milk_recipe, date="2026-10-20", meal_type=MealType.BREAKFAST),
        make_slot(garlic_recipe, date="2026-10-21"),
        make_slot(None, date="2026-10-22", meal_type=MealType.LUNCH),
    ]


@pytest.fixture
def pantry_snapshot():
    return [
        InventoryItem(name="milk", quantity=16, unit="tablespoon"),
        InventoryItem(name="Eggs", quantity=12, unit=""),
    ]


def make_item(name, amount=1, unit="", category=Section.OTHER, cost=None, **kwargs):
    """Build an aggregated shopping item directly."""
    return ShoppingListItem(
        id=aggregation_key(name, unit),
        name=name,
        category=category,
        total_amount=amount,
        unit=unit,
        estimated_cost=cost,
        **kwargs,
    )


@pytest.fixture
def sample_items():
    return [
        make_item("Milk", 1, "cup", Section.DAIRY_EGGS, cost=1.0, is_in_inventory=True, inventory_amount=1),
        make_item("Garlic", 6, "clove", Section.PRODUCE, cost=3.0),
        make_item("Flour", 2, "cup", Section.PANTRY, cost=1.0),
        make_item("Basil", 1, "bunch", Section.PRODUCE, cost=0.5, notes="fresh"),
    ]
