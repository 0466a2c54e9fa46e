"""Group shopping items into store sections."""

import logging
from typing import Iterable

from .models import AssembledList, Section, ShoppingListItem, StoreSection

logger = logging.getLogger(__name__)


class ShoppingListAssembler:
    """Turn aggregated items into an ordered, sectioned shopping list."""

    def __init__(self, section_order: Iterable[Section] = tuple(Section)):
        self.section_order = tuple(section_order)
        if Section.OTHER not in self.section_order:
            self.section_order += (Section.OTHER,)

    def assemble(self, items: Iterable[ShoppingListItem]) -> AssembledList:
        """Group items by section and compute totals.

        Sections come out in store order, never by size or cost, and empty
        sections are left out. An empty result is the "no ingredients
        needed" state, see ``AssembledList.is_empty``.
        """
        by_section: dict[Section, StoreSection] = {
            name: StoreSection(name=name) for name in self.section_order
        }

        items = list(items)
        for item in items:
            section = by_section.get(Section.parse(item.category), by_section[Section.OTHER])
            section.items.append(item)
            section.total_cost += item.cost

        sections = []
        for section in by_section.values():
            if not section.items:
                continue
            section.items.sort(key=lambda x: (x.name.lower(), x.unit))
            sections.append(section)

        assembled = AssembledList(
            sections=sections,
            total_items=len(items),
            total_cost=sum(item.cost for item in items),
            items_in_inventory=len([i for i in items if i.is_in_inventory]),
        )

        if assembled.is_empty:
            logger.info("No ingredients needed")
        return assembled
