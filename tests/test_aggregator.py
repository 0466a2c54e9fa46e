"""
Unit tests for ingredient aggregation and inventory deficits.
"""

import itertools

import pytest

from shoplist.aggregator import IngredientAggregator, aggregation_key
from shoplist.config import EngineConfig
from shoplist.models import InventoryItem, Recipe, RecipeIngredient, Section

from conftest import make_recipe, make_slot


def summary(items):
    """Order-insensitive view of an aggregation result."""
    return sorted((i.id, round(i.total_amount, 9), i.category) for i in items)


def sources_of(items):
    return {
        i.id: sorted((s.recipe_id, s.amount, s.servings) for s in i.sources)
        for i in items
    }


class TestAggregationKey:

    def test_lowercase_name_and_unit(self):
        assert aggregation_key("Garlic", "clove") == "garlic-clove"
        assert aggregation_key("  Olive Oil ", "tablespoon") == "olive oil-tablespoon"

    def test_unitless(self):
        assert aggregation_key("Eggs", "") == "eggs-"


class TestIngredientAggregator:

    def test_garlic_from_two_meals(self):
        recipe = make_recipe(
            recipe_id="r1", title="Garlic Pasta", servings=2,
            ingredients=[("Garlic", 3, "clove")],
        )
        items = IngredientAggregator().aggregate([make_slot(recipe), make_slot(recipe)], [])

        assert len(items) == 1
        garlic = items[0]
        assert garlic.name == "Garlic"
        assert garlic.unit == "clove"
        assert garlic.total_amount == 6
        assert len(garlic.sources) == 2
        assert garlic.category == Section.PRODUCE
        assert garlic.is_purchased is False
        assert garlic.is_in_inventory is False

    def test_milk_covered_partly_by_tablespoons(self):
        recipe = make_recipe(servings=1, ingredients=[("Milk", 2, "cup")])
        inventory = [InventoryItem(name="Milk", quantity=16, unit="tablespoon")]

        items = IngredientAggregator().aggregate([make_slot(recipe)], inventory)

        assert len(items) == 1
        milk = items[0]
        assert milk.total_amount == pytest.approx(1)
        assert milk.unit == "cup"
        assert milk.is_in_inventory is True
        assert milk.inventory_amount == pytest.approx(1)

    def test_deficit_same_unit(self):
        recipe = make_recipe(servings=1, ingredients=[("Flour", 2, "cups")])
        items = IngredientAggregator().aggregate(
            [make_slot(recipe)],
            [InventoryItem(name="flour", quantity=1, unit="cup")],
        )
        assert items[0].total_amount == pytest.approx(1)

    def test_fully_covered_item_is_dropped(self):
        recipe = make_recipe(servings=1, ingredients=[("Butter", 4, "tbsp"), ("Salt", 1, "tsp")])
        items = IngredientAggregator().aggregate(
            [make_slot(recipe)],
            [InventoryItem(name="BUTTER", quantity=1, unit="cup")],
        )
        assert [i.name for i in items] == ["Salt"]

    def test_exactly_covered_item_is_dropped(self):
        recipe = make_recipe(servings=1, ingredients=[("Eggs", 2, "")])
        items = IngredientAggregator().aggregate(
            [make_slot(recipe)], [InventoryItem(name="Eggs", quantity=2)],
        )
        assert items == []

    def test_unitless_inventory_counts_in_recipe_unit(self):
        recipe = make_recipe(servings=1, ingredients=[("Onion", 3, "piece")])
        items = IngredientAggregator().aggregate(
            [make_slot(recipe)], [InventoryItem(name="Onion", quantity=1, unit="")],
        )
        assert items[0].total_amount == 2

    def test_inventory_name_must_match_exactly(self):
        recipe = make_recipe(servings=1, ingredients=[("Chicken Breast", 1, "lb")])
        items = IngredientAggregator().aggregate(
            [make_slot(recipe)], [InventoryItem(name="Chicken", quantity=5, unit="lb")],
        )
        assert items[0].total_amount == 1
        assert items[0].is_in_inventory is False

    def test_unconvertible_inventory_is_used_as_is(self):
        # grams -> ounces is not in the table; the raw quantity is subtracted
        recipe = make_recipe(servings=1, ingredients=[("Cheese", 8, "oz")])
        items = IngredientAggregator().aggregate(
            [make_slot(recipe)], [InventoryItem(name="Cheese", quantity=5, unit="g")],
        )
        assert items[0].total_amount == 3

    def test_inventory_checked_per_contribution(self):
        recipe = make_recipe(servings=1, ingredients=[("Milk", 2, "cup")])
        items = IngredientAggregator().aggregate(
            [make_slot(recipe), make_slot(recipe)],
            [InventoryItem(name="Milk", quantity=1, unit="cup")],
        )
        assert items[0].total_amount == pytest.approx(2)
        assert len(items[0].sources) == 2

    def test_units_are_normalized_into_one_key(self):
        first = make_recipe(recipe_id="a", servings=1, ingredients=[("Olive Oil", 1, "tbsp")])
        second = make_recipe(recipe_id="b", servings=1, ingredients=[("olive oil", 2, "Tablespoons")])
        items = IngredientAggregator().aggregate([make_slot(first), make_slot(second)])

        assert len(items) == 1
        assert items[0].id == "olive oil-tablespoon"
        assert items[0].unit == "tablespoon"
        assert items[0].total_amount == 3

    def test_different_units_stay_separate(self):
        first = make_recipe(recipe_id="a", servings=1, ingredients=[("Butter", 1, "cup")])
        second = make_recipe(recipe_id="b", servings=1, ingredients=[("Butter", 2, "tbsp")])
        items = IngredientAggregator().aggregate([make_slot(first), make_slot(second)])
        assert sorted(i.id for i in items) == ["butter-cup", "butter-tablespoon"]

    def test_serving_scaling(self):
        recipe = make_recipe(servings=4, ingredients=[("Rice", 2, "cup")])
        items = IngredientAggregator().aggregate([make_slot(recipe, servings=2)])

        assert items[0].total_amount == 1
        assert items[0].sources[0].amount == 1
        assert items[0].sources[0].servings == 2

    def test_source_records(self, garlic_recipe):
        items = IngredientAggregator().aggregate([make_slot(garlic_recipe)])
        garlic = next(i for i in items if i.name == "Garlic")
        source = garlic.sources[0]
        assert source.recipe_id == "stir-fry"
        assert source.recipe_title == "Garlic Stir Fry"
        assert source.amount == 3
        assert source.servings == 2

    def test_slots_without_recipe_contribute_nothing(self):
        assert IngredientAggregator().aggregate([make_slot(None), make_slot(None)], []) == []

    def test_empty_input(self):
        assert IngredientAggregator().aggregate([], []) == []

    def test_estimated_cost_is_proportional(self):
        recipe = make_recipe(servings=1, ingredients=[("Garlic", 3, "clove")])
        aggregator = IngredientAggregator(config=EngineConfig(cost_per_unit=0.5))
        items = aggregator.aggregate([make_slot(recipe), make_slot(recipe)])
        assert items[0].estimated_cost == pytest.approx(3.0)

    def test_notes_from_ingredient(self):
        recipe = Recipe(
            id="r1", title="Curry", servings=1,
            ingredients=(RecipeIngredient(name="Ginger", amount=1, unit="piece", notes="peeled"),),
        )
        items = IngredientAggregator().aggregate([make_slot(recipe)])
        assert items[0].notes == "peeled"

    def test_all_items_positive(self, week_of_meals, pantry_snapshot):
        items = IngredientAggregator().aggregate(week_of_meals, pantry_snapshot)
        assert items
        assert all(i.total_amount > 0 for i in items)

    def test_idempotent(self, week_of_meals, pantry_snapshot):
        aggregator = IngredientAggregator()
        first = aggregator.aggregate(week_of_meals, pantry_snapshot)
        second = aggregator.aggregate(week_of_meals, pantry_snapshot)
        assert summary(first) == summary(second)
        assert sources_of(first) == sources_of(second)

    def test_order_independent(self, week_of_meals, pantry_snapshot):
        aggregator = IngredientAggregator()
        expected = summary(aggregator.aggregate(week_of_meals, pantry_snapshot))
        expected_sources = sources_of(aggregator.aggregate(week_of_meals, pantry_snapshot))

        for permutation in itertools.permutations(week_of_meals):
            items = aggregator.aggregate(list(permutation), pantry_snapshot)
            assert summary(items) == expected
            assert sources_of(items) == expected_sources

    def test_inputs_are_not_mutated(self, week_of_meals, pantry_snapshot):
        before = (list(week_of_meals), list(pantry_snapshot))
        IngredientAggregator().aggregate(week_of_meals, pantry_snapshot)
        assert (week_of_meals, pantry_snapshot) == before

