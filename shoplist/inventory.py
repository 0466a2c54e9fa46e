"""Inventory snapshot stored as a markdown file."""

import logging
import re
from datetime import datetime
from pathlib import Path
from typing import Optional

from .categories import categorize_ingredient
from .formatting import write_atomic
from .models import InventoryItem, ValidationError
from .recipe_parser import parse_amount
from .units import UnitNormalizer

logger = logging.getLogger(__name__)

_normalizer = UnitNormalizer()

# Sections to skip (not actual inventory categories)
SKIP_SECTIONS = {"format guide", "format", "guide", "notes", "instructions"}


def parse_inventory_line(line: str) -> Optional[InventoryItem]:
    """Parse one ``- item`` line.

    Accepts "Milk, 16 tbsp", "Milk, 1/2 cup", "16 tbsp milk" and
    "2 red onions". Lines without a quantity
    (e.g. "- Salt") are kept with quantity 0, so they never reduce what
    needs to be bought.
    """
    # Remove checkbox and leading dash
    line = re.sub(r"^-\s*(\[.\])?\s*", "", line.strip()).strip()
    # Expiration notes are not used for deficits
    line = re.sub(r"\s*\(expires?:\s*\d{4}-\d{2}-\d{2}\)", "", line)

    if not line:
        return None

    quantity: Optional[float] = 0.0
    unit = ""
    name = line

    # "name, quantity unit"
    match = re.match(r"^(.+?),\s*(\d[\d./\-]*)\s*([^\d\s]\S*)?\s*$", line)
    if match:
        name = match.group(1).strip()
        quantity = parse_amount(match.group(2))
        unit = match.group(3) or ""
    else:
        # "quantity [unit] name"; the first word is a unit only if we know it
        match = re.match(r"^(\d[\d./\-]*)\s+(.+)$", line)
        if match:
            quantity = parse_amount(match.group(1))
            name = match.group(2).strip()
            first, _, rest = name.partition(" ")
            if rest and _normalizer.is_known(first):
                unit, name = first, rest.strip()

    if quantity is None:
        logger.warning("Skipping inventory line %r: unreadable quantity", line)
        return None

    try:
        return InventoryItem(name=name, quantity=quantity, unit=unit)
    except ValidationError as e:
        logger.warning("Skipping inventory line %r: %s", line, e)
        return None


class Inventory:
    """Manages the inventory markdown file."""

    def __init__(self, path: Path):
        self.path = Path(path)
        self.items: dict[str, InventoryItem] = {}
        self.categories: dict[str, str] = {}
        if self.path.exists():
            self._load()
        else:
            logger.info("Inventory file not found: %s (treating as empty)", self.path)

    def _load(self):
        """Load inventory from markdown file."""
        with open(self.path, "r", encoding="utf-8") as f:
            content = f.read()

        current_category = "other"
        skip_section = False

        for line in content.split("\n"):
            line = line.strip()

            # Check for category headers
            if line.startswith("## "):
                current_category = line[3:].strip().lower()
                skip_section = current_category in SKIP_SECTIONS
                continue

            if skip_section:
                continue

            if line.startswith("- "):
                item = parse_inventory_line(line)
                if item:
                    key = item.name.lower()
                    self.items[key] = item
                    self.categories[key] = current_category

        logger.info("Loaded %d inventory items from %s", len(self.items), self.path)

    def save(self):
        """Save inventory to markdown file."""
        lines = [
            "---",
            "tags: [pantry, inventory]",
            f"updated: {datetime.now().strftime('%Y-%m-%d')}",
            "---",
            "",
            "# Pantry Inventory",
            "",
            "Track what you have on hand. Format: `- Item name, quantity unit`",
            "",
        ]

        for category, items in sorted(self.by_category().items()):
            lines.append(f"## {category.title()}")
            lines.append("")
            for item in sorted(items, key=lambda x: x.name.lower()):
                line = f"- {item.name}"
                if item.quantity:
                    line += f", {item.quantity:g}"
                    if item.unit:
                        line += f" {item.unit}"
                lines.append(line)
            lines.append("")

        write_atomic(self.path, "\n".join(lines))

    def snapshot(self) -> list[InventoryItem]:
        """Current items, as consumed by the aggregator."""
        return list(self.items.values())

    def get_item(self, name: str) -> Optional[InventoryItem]:
        """Case-insensitive exact lookup."""
        return self.items.get(name.strip().lower())

    def add_item(
        self,
        name: str,
        quantity: float = 0.0,
        unit: str = "",
        category: Optional[str] = None,
    ) -> InventoryItem:
        """Add or top up an item. Top-ups must use the stored unit."""
        key = name.strip().lower()
        existing = self.items.get(key)

        if existing:
            if unit and existing.unit and unit.lower() != existing.unit.lower():
                raise ValueError(
                    f"{existing.name} is tracked in {existing.unit!r}, not {unit!r}"
                )
            item = InventoryItem(
                name=existing.name,
                quantity=existing.quantity + quantity,
                unit=existing.unit or unit,
            )
        else:
            item = InventoryItem(name=name.strip(), quantity=quantity, unit=unit)
            self.categories[key] = category or categorize_ingredient(name).value.lower()

        self.items[key] = item
        self.save()
        return item

    def remove_item(self, name: str, quantity: Optional[float] = None) -> bool:
        """Remove an item, or reduce it by quantity."""
        key = name.strip().lower()
        if key not in self.items:
            return False

        item = self.items[key]
        remaining = item.quantity - quantity if quantity is not None else 0.0
        if quantity is None or remaining <= 0:
            del self.items[key]
            self.categories.pop(key, None)
        else:
            self.items[key] = InventoryItem(name=item.name, quantity=remaining, unit=item.unit)

        self.save()
        return True

    def by_category(self) -> dict[str, list[InventoryItem]]:
        """Group items by their markdown section."""
        grouped: dict[str, list[InventoryItem]] = {}
        for key, item in self.items.items():
            grouped.setdefault(self.categories.get(key, "other"), []).append(item)
        return grouped
