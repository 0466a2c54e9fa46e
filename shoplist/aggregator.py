"""Ingredient aggregation from meal plans and inventory."""

import logging
from typing import Iterable, Optional

from .categories import CategoryClassifier
from .config import EngineConfig
from .models import (
    InventoryItem, MealSlot, RecipeIngredient, ShoppingListItem, SourceRecord,
)
from .units import UnitConverter, UnitNormalizer

logger = logging.getLogger(__name__)


def aggregation_key(name: str, normalized_unit: str) -> str:
    """Identity of a shopping need: lowercase name plus canonical unit."""
    return f"{name.strip().lower()}-{normalized_unit}"


class IngredientAggregator:
    """Merge planned recipe ingredients into net shopping needs."""

    def __init__(
        self,
        normalizer: Optional[UnitNormalizer] = None,
        converter: Optional[UnitConverter] = None,
        classifier: Optional[CategoryClassifier] = None,
        config: Optional[EngineConfig] = None,
    ):
        self.normalizer = normalizer or UnitNormalizer()
        self.converter = converter or UnitConverter(normalizer=self.normalizer)
        self.classifier = classifier or CategoryClassifier()
        self.config = config or EngineConfig()

    @staticmethod
    def _index_inventory(inventory: Iterable[InventoryItem]) -> dict[str, InventoryItem]:
        index: dict[str, InventoryItem] = {}
        for item in inventory:
            # First entry wins for duplicate names
            index.setdefault(item.name.strip().lower(), item)
        return index

    def _inventory_amount(
        self,
        ingredient: RecipeIngredient,
        inventory: dict[str, InventoryItem],
    ) -> float:
        """Inventory on hand for an ingredient, in the ingredient's unit."""
        item = inventory.get(ingredient.name.strip().lower())
        if item is None or item.quantity <= 0:
            return 0.0

        # A unitless inventory entry counts in the recipe's own unit
        inventory_unit = item.unit or ingredient.unit
        return self.converter.convert(item.quantity, inventory_unit, ingredient.unit)

    def aggregate(
        self,
        meal_slots: Iterable[MealSlot],
        inventory: Iterable[InventoryItem] = (),
    ) -> list[ShoppingListItem]:
        """Compute what still needs to be bought for the planned meals.

        Every contribution is checked against the full inventory snapshot.
        Ingredients fully covered by inventory contribute nothing, so every
        returned item has a positive ``total_amount``. The result is
        unordered; the assembler imposes display order.
        """
        stock = self._index_inventory(inventory)
        aggregated: dict[str, ShoppingListItem] = {}
        gross: dict[str, float] = {}

        for meal in meal_slots:
            if not meal.recipe:
                continue

            for ing in meal.scaled_ingredients():
                unit = self.normalizer.normalize(ing.unit)
                on_hand = self._inventory_amount(ing, stock)
                deficit = max(0.0, ing.amount - on_hand)

                if deficit <= 0:
                    logger.debug("%s covered by inventory (%s on hand)", ing.name, on_hand)
                    continue

                key = aggregation_key(ing.name, unit)
                source = SourceRecord(
                    recipe_id=meal.recipe.id,
                    recipe_title=meal.recipe.title,
                    amount=ing.amount,
                    servings=meal.effective_servings,
                )
                gross[key] = gross.get(key, 0.0) + ing.amount

                existing = aggregated.get(key)
                if existing:
                    existing.total_amount += deficit
                    existing.sources.append(source)
                    if not existing.notes and ing.notes:
                        existing.notes = ing.notes
                    continue

                aggregated[key] = ShoppingListItem(
                    id=key,
                    name=ing.name.strip(),
                    category=self.classifier.classify(ing.name),
                    total_amount=deficit,
                    unit=unit,
                    notes=ing.notes,
                    sources=[source],
                    is_in_inventory=on_hand > 0,
                    inventory_amount=on_hand,
                )

        for key, item in aggregated.items():
            item.estimated_cost = gross[key] * self.config.cost_per_unit

        logger.info(
            "Aggregated %d shopping items from %d contributions",
            len(aggregated), sum(len(i.sources) for i in aggregated.values()),
        )
        return list(aggregated.values())
