"""
Unit tests for grouping items into store sections.
"""

import pytest

from shoplist.assembler import ShoppingListAssembler
from shoplist.models import Section

from conftest import make_item


class TestShoppingListAssembler:

    def test_sections_in_store_order(self, sample_items):
        assembled = ShoppingListAssembler().assemble(sample_items)
        assert [s.name for s in assembled.sections] == [
            Section.PRODUCE, Section.DAIRY_EGGS, Section.PANTRY,
        ]

    def test_empty_sections_are_omitted(self, sample_items):
        assembled = ShoppingListAssembler().assemble(sample_items)
        assert assembled.get_section(Section.FROZEN) is None
        assert all(section.items for section in assembled.sections)

    def test_items_sorted_within_section(self, sample_items):
        produce = ShoppingListAssembler().assemble(sample_items).get_section(Section.PRODUCE)
        assert [i.name for i in produce.items] == ["Basil", "Garlic"]

    def test_totals(self, sample_items):
        assembled = ShoppingListAssembler().assemble(sample_items)
        assert assembled.total_items == 4
        assert assembled.total_cost == pytest.approx(5.5)
        assert assembled.items_in_inventory == 1
        assert assembled.get_section(Section.PRODUCE).total_cost == pytest.approx(3.5)

    def test_user_price_counts_toward_totals(self):
        item = make_item("Salmon", 1, "pound", Section.MEAT_SEAFOOD, cost=0.5, user_price=12.0)
        assembled = ShoppingListAssembler().assemble([item])
        assert assembled.total_cost == 12.0
        assert assembled.sections[0].total_cost == 12.0

    def test_missing_cost_counts_as_zero(self):
        assembled = ShoppingListAssembler().assemble([make_item("Salt")])
        assert assembled.total_cost == 0

    def test_string_category_falls_back_to_other(self):
        item = make_item("Saffron")
        item.category = "Spices"
        assembled = ShoppingListAssembler().assemble([item])
        assert [s.name for s in assembled.sections] == [Section.OTHER]

    def test_every_item_appears_once(self, sample_items):
        assembled = ShoppingListAssembler().assemble(sample_items)
        assert sorted(i.id for i in assembled.items) == sorted(i.id for i in sample_items)

    def test_no_ingredients_needed(self, caplog):
        caplog.set_level("INFO")
        assembled = ShoppingListAssembler().assemble([])
        assert assembled.is_empty
        assert assembled.sections == []
        assert assembled.total_cost == 0
        assert "No ingredients needed" in caplog.text

    def test_custom_order_keeps_other(self, sample_items):
        assembler = ShoppingListAssembler([Section.PANTRY, Section.PRODUCE, Section.DAIRY_EGGS])
        assert assembler.section_order[-1] == Section.OTHER
        assembled = assembler.assemble(sample_items)
        assert [s.name for s in assembled.sections] == [
            Section.PANTRY, Section.PRODUCE, Section.DAIRY_EGGS,
        ]

    def test_section_left_out_of_order_goes_to_other(self):
        assembler = ShoppingListAssembler([Section.PRODUCE])
        assembled = assembler.assemble([make_item("Milk", category=Section.DAIRY_EGGS)])
        assert assembled.sections[0].name == Section.OTHER
