"""Per-session selection and override state for a generated list."""

import logging
from dataclasses import dataclass, field, replace
from typing import Iterable, Optional

from .models import ShoppingListItem

logger = logging.getLogger(__name__)


@dataclass
class SelectionContext:
    """User edits to a shopping list, keyed by aggregation key.

    The list itself is recomputed from scratch whenever meals or inventory
    change; these edits survive as long as their key is still present.
    """
    selected: set[str] = field(default_factory=set)
    quantity_overrides: dict[str, float] = field(default_factory=dict)
    notes_overrides: dict[str, str] = field(default_factory=dict)
    price_overrides: dict[str, float] = field(default_factory=dict)

    # Selection

    def is_selected(self, key: str) -> bool:
        return key in self.selected

    def toggle(self, key: str) -> bool:
        """Flip selection for a key and return the new state."""
        if key in self.selected:
            self.selected.discard(key)
            return False
        self.selected.add(key)
        return True

    def select(self, key: str):
        self.selected.add(key)

    def deselect(self, key: str):
        self.selected.discard(key)

    def select_all(self, items: Iterable[ShoppingListItem]):
        self.selected = {item.id for item in items}

    def clear_selection(self):
        self.selected = set()

    def selected_items(self, items: Iterable[ShoppingListItem]) -> list[ShoppingListItem]:
        return [item for item in items if item.id in self.selected]

    # Overrides

    def set_quantity(self, key: str, quantity: float):
        """Override the amount to buy; negative values clamp to zero."""
        self.quantity_overrides[key] = max(0.0, quantity)

    def set_notes(self, key: str, notes: str):
        self.notes_overrides[key] = notes

    def set_price(self, key: str, price: float):
        if price < 0:
            raise ValueError(f"price must be non-negative, got {price}")
        self.price_overrides[key] = price

    def clear_overrides(self, key: Optional[str] = None):
        """Drop overrides for one key, or for all keys."""
        if key is None:
            self.quantity_overrides.clear()
            self.notes_overrides.clear()
            self.price_overrides.clear()
            return
        self.quantity_overrides.pop(key, None)
        self.notes_overrides.pop(key, None)
        self.price_overrides.pop(key, None)

    def reconcile(self, items: Iterable[ShoppingListItem]) -> set[str]:
        """Forget state for keys missing from a freshly computed list.

        Returns the keys that were dropped.
        """
        live = {item.id for item in items}
        known = (
            self.selected
            | set(self.quantity_overrides)
            | set(self.notes_overrides)
            | set(self.price_overrides)
        )
        stale = known - live

        for key in stale:
            self.selected.discard(key)
            self.clear_overrides(key)

        if stale:
            logger.debug("Dropped selection state for %d stale keys", len(stale))
        return stale

    def finalize(self, items: Iterable[ShoppingListItem]) -> list[ShoppingListItem]:
        """Apply overrides and return fresh, unpurchased copies of the items.

        The input items are left untouched.
        """
        final = []
        for item in items:
            quantity = self.quantity_overrides.get(item.id)
            notes = self.notes_overrides.get(item.id)
            price = self.price_overrides.get(item.id)

            final.append(replace(
                item,
                total_amount=quantity if quantity is not None else item.total_amount,
                notes=notes if notes is not None else item.notes,
                user_price=price if price is not None else item.user_price,
                price_source="user" if price is not None else item.price_source,
                sources=list(item.sources),
                is_purchased=False,
            ))
        return final
