"""Shopping list generation from meal plans."""

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional

from .aggregator import IngredientAggregator
from .assembler import ShoppingListAssembler
from .categories import CategoryClassifier
from .config import EngineConfig
from .models import AssembledList, InventoryItem, MealSlot, ShoppingListItem
from .selection import SelectionContext
from .units import UnitConverter, UnitNormalizer

logger = logging.getLogger(__name__)


@dataclass
class GeneratedList:
    """One generation run: the raw items plus their sectioned view."""
    items: list[ShoppingListItem] = field(default_factory=list)
    assembled: AssembledList = field(default_factory=AssembledList)

    @property
    def is_empty(self) -> bool:
        return self.assembled.is_empty


class ShoppingListGenerator:
    """Generate shopping lists from planned meals and inventory."""

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        normalizer: Optional[UnitNormalizer] = None,
        converter: Optional[UnitConverter] = None,
        classifier: Optional[CategoryClassifier] = None,
    ):
        self.config = config or EngineConfig()
        self.aggregator = IngredientAggregator(
            normalizer=normalizer,
            converter=converter,
            classifier=classifier,
            config=self.config,
        )
        self.assembler = ShoppingListAssembler()

    def generate(
        self,
        meal_slots: Iterable[MealSlot],
        inventory: Iterable[InventoryItem] = (),
        selection: Optional[SelectionContext] = None,
    ) -> GeneratedList:
        """Recompute the list from a fresh meal/inventory snapshot.

        When a selection context is given, state for keys that disappeared
        from the new list is dropped.
        """
        items = self.aggregator.aggregate(meal_slots, inventory)
        if selection is not None:
            selection.reconcile(items)
        return GeneratedList(items=items, assembled=self.assembler.assemble(items))

    def finalize(
        self,
        generated: GeneratedList,
        selection: SelectionContext,
        selected_only: bool = False,
    ) -> list[ShoppingListItem]:
        """Apply user overrides ahead of export or sharing."""
        items = generated.items
        if selected_only:
            items = selection.selected_items(items)
        return selection.finalize(items)
