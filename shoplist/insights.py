"""Suggestions, progress and browsing helpers for a generated list."""

from dataclasses import dataclass, field
from typing import Iterable, Optional

from .config import EngineConfig
from .models import Section, ShoppingListItem


@dataclass
class BulkOpportunity:
    section: Section
    items: list[ShoppingListItem] = field(default_factory=list)
    total_cost: float = 0.0

    @property
    def suggestion(self) -> str:
        return f"Consider shopping at bulk stores for {self.section.value.lower()} items to save money."


@dataclass
class CostSaving:
    item: ShoppingListItem
    potential_saving: float
    suggestion: str = "Consider store brands or seasonal alternatives"


def find_duplicates(items: Iterable[ShoppingListItem]) -> list[ShoppingListItem]:
    """Items sharing a name with an earlier item, e.g. the same thing in two units."""
    seen: set[str] = set()
    duplicates = []
    for item in items:
        name = item.name.strip().lower()
        if name in seen:
            duplicates.append(item)
        else:
            seen.add(name)
    return duplicates


def bulk_opportunities(
    items: Iterable[ShoppingListItem],
    config: Optional[EngineConfig] = None,
) -> list[BulkOpportunity]:
    """Sections with enough items and spend to be worth buying in bulk."""
    config = config or EngineConfig()

    by_section: dict[Section, BulkOpportunity] = {}
    for item in items:
        section = Section.parse(item.category)
        opportunity = by_section.setdefault(section, BulkOpportunity(section=section))
        opportunity.items.append(item)
        opportunity.total_cost += item.cost

    return [
        opp for section, opp in sorted(by_section.items(), key=lambda kv: list(Section).index(kv[0]))
        if section != Section.OTHER
        and len(opp.items) >= config.bulk_min_items
        and opp.total_cost >= config.bulk_min_cost
    ]


def cost_savings(
    items: Iterable[ShoppingListItem],
    config: Optional[EngineConfig] = None,
) -> list[CostSaving]:
    """The most expensive items, with an estimated saving from alternatives."""
    config = config or EngineConfig()

    savings = [
        CostSaving(item=item, potential_saving=item.cost * config.saving_rate)
        for item in items
        if item.cost > config.high_cost_threshold
    ]
    savings.sort(key=lambda s: s.potential_saving, reverse=True)
    return savings[:config.max_cost_suggestions]


def purchase_progress(items: Iterable[ShoppingListItem]) -> tuple[int, int]:
    """Return (purchased, total)."""
    items = list(items)
    return len([i for i in items if i.is_purchased]), len(items)


def filter_items(
    items: Iterable[ShoppingListItem],
    search: str = "",
    category: Optional[Section] = None,
    purchased: Optional[bool] = None,
) -> list[ShoppingListItem]:
    """Filter by name/notes search text, section and purchased state."""
    search = search.strip().lower()
    results = []
    for item in items:
        if search and search not in item.name.lower() and search not in (item.notes or "").lower():
            continue
        if category is not None and Section.parse(item.category) != category:
            continue
        if purchased is not None and item.is_purchased != purchased:
            continue
        results.append(item)
    return results


SORT_FIELDS = {
    "name": lambda item: item.name.lower(),
    "category": lambda item: (list(Section).index(Section.parse(item.category)), item.name.lower()),
    "total_amount": lambda item: item.total_amount,
    "estimated_cost": lambda item: item.cost,
}


def sort_items(
    items: Iterable[ShoppingListItem],
    by: str = "name",
    descending: bool = False,
) -> list[ShoppingListItem]:
    if by not in SORT_FIELDS:
        raise ValueError(f"Cannot sort by {by!r}; choose from {', '.join(SORT_FIELDS)}")
    return sorted(items, key=SORT_FIELDS[by], reverse=descending)
