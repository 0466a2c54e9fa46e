"""
Tests for the markdown inventory file.
"""

import pytest

from shoplist.inventory import Inventory, parse_inventory_line
from shoplist.models import InventoryItem


PANTRY_MD = """---
tags: [pantry, inventory]
---

# Pantry Inventory

## Format Guide

- Item name, quantity unit

## Dairy

- Milk, 16 tbsp
- [x] Eggs, 12 (expires: 2026-10-30)

## Pantry

- 2 lb rice
- Salt
"""


@pytest.fixture
def pantry_file(tmp_path):
    path = tmp_path / "pantry.md"
    path.write_text(PANTRY_MD, encoding="utf-8")
    return path


class TestParseInventoryLine:

    @pytest.mark.parametrize("line,expected", [
        ("- Milk, 16 tbsp", InventoryItem("Milk", 16, "tbsp")),
        ("- Olive Oil, 0.5 cup", InventoryItem("Olive Oil", 0.5, "cup")),
        ("- Eggs, 12", InventoryItem("Eggs", 12, "")),
        ("- 2 lb chicken breast", InventoryItem("chicken breast", 2, "lb")),
        ("- 3 lemons", InventoryItem("lemons", 3, "")),
        ("- Milk, 1/2 cup", InventoryItem("Milk", 0.5, "cup")),
        ("- Rice, 1-3 cups", InventoryItem("Rice", 2, "cups")),
        ("- 2 red onions", InventoryItem("red onions", 2, "")),
        ("- 1/2 lb butter", InventoryItem("butter", 0.5, "lb")),
        ("- [ ] Butter, 1 cup (expires: 2026-11-01)", InventoryItem("Butter", 1, "cup")),
        ("- Salt", InventoryItem("Salt", 0, "")),
    ])
    def test_formats(self, line, expected):
        assert parse_inventory_line(line) == expected

    def test_blank_line(self):
        assert parse_inventory_line("- ") is None

    def test_unreadable_quantity_is_skipped(self, caplog):
        caplog.set_level("WARNING")
        assert parse_inventory_line("- Milk, 1/0 cup") is None
        assert "unreadable quantity" in caplog.text


class TestInventory:

    def test_load_skips_format_guide(self, pantry_file):
        inventory = Inventory(pantry_file)
        assert sorted(inventory.items) == ["eggs", "milk", "rice", "salt"]
        assert inventory.categories["milk"] == "dairy"
        assert inventory.categories["rice"] == "pantry"

    def test_snapshot(self, pantry_file):
        snapshot = Inventory(pantry_file).snapshot()
        assert InventoryItem("Milk", 16, "tbsp") in snapshot
        assert len(snapshot) == 4

    def test_missing_file_is_empty(self, tmp_path):
        inventory = Inventory(tmp_path / "nowhere.md")
        assert inventory.snapshot() == []

    def test_get_item_is_case_insensitive(self, pantry_file):
        assert Inventory(pantry_file).get_item(" MILK ").quantity == 16

    def test_top_up_persists(self, pantry_file):
        Inventory(pantry_file).add_item("milk", 4, "tbsp")

        reloaded = Inventory(pantry_file)
        assert reloaded.get_item("Milk") == InventoryItem("Milk", 20, "tbsp")
        assert reloaded.categories["milk"] == "dairy"
        assert reloaded.get_item("Salt").quantity == 0

    def test_top_up_with_other_unit(self, pantry_file):
        with pytest.raises(ValueError, match="tbsp"):
            Inventory(pantry_file).add_item("Milk", 1, "cup")

    def test_new_item_is_categorized(self, pantry_file):
        inventory = Inventory(pantry_file)
        inventory.add_item("Chicken Thighs", 2, "lb")

        reloaded = Inventory(pantry_file)
        assert reloaded.get_item("chicken thighs").quantity == 2
        assert reloaded.categories["chicken thighs"] == "meat & seafood"

    def test_add_creates_file(self, tmp_path):
        path = tmp_path / "vault" / "pantry.md"
        Inventory(path).add_item("Rice", 1, "cup")
        assert path.exists()
        assert Inventory(path).get_item("rice").unit == "cup"

    def test_remove_partial_and_full(self, pantry_file):
        inventory = Inventory(pantry_file)

        assert inventory.remove_item("Rice", 1) is True
        assert inventory.get_item("rice").quantity == 1

        assert inventory.remove_item("rice") is True
        assert inventory.get_item("rice") is None
        assert Inventory(pantry_file).get_item("rice") is None

    def test_remove_more_than_on_hand(self, pantry_file):
        inventory = Inventory(pantry_file)
        inventory.remove_item("Milk", 100)
        assert inventory.get_item("milk") is None

    def test_remove_unknown(self, pantry_file):
        assert Inventory(pantry_file).remove_item("tofu") is False

    def test_by_category(self, pantry_file):
        grouped = Inventory(pantry_file).by_category()
        assert {i.name for i in grouped["dairy"]} == {"Milk", "Eggs"}

    def test_save_replaces_file_in_one_step(self, pantry_file):
        Inventory(pantry_file).add_item("Milk", 4, "tbsp")

        assert [p.name for p in pantry_file.parent.iterdir()] == ["pantry.md"]
        assert Inventory(pantry_file).get_item("milk").quantity == 20

    def test_failed_save_keeps_previous_file(self, pantry_file, monkeypatch):
        inventory = Inventory(pantry_file)

        def broken_replace(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr("shoplist.formatting.os.replace", broken_replace)
        with pytest.raises(OSError, match="disk full"):
            inventory.add_item("Milk", 4, "tbsp")

        assert pantry_file.read_text(encoding="utf-8") == PANTRY_MD
        assert not pantry_file.with_name("pantry.md.tmp").exists()
