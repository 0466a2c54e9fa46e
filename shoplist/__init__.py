"""shoplist - Shopping lists generated from meal plans and inventory."""

__version__ = "0.1.0"

# Lazy imports to avoid circular dependencies
def __getattr__(name):
    if name in ("Config", "EngineConfig"):
        from . import config
        return getattr(config, name)
    elif name in ("MealType", "Section", "Recipe", "RecipeIngredient", "MealSlot",
                  "InventoryItem", "SourceRecord", "ShoppingListItem", "StoreSection",
                  "AssembledList", "ValidationError", "load_meal_slots",
                  "load_inventory_items"):
        from . import models
        return getattr(models, name)
    elif name in ("UnitNormalizer", "UnitConverter"):
        from . import units
        return getattr(units, name)
    elif name == "CategoryClassifier":
        from .categories import CategoryClassifier
        return CategoryClassifier
    elif name == "IngredientAggregator":
        from .aggregator import IngredientAggregator
        return IngredientAggregator
    elif name == "ShoppingListAssembler":
        from .assembler import ShoppingListAssembler
        return ShoppingListAssembler
    elif name == "SelectionContext":
        from .selection import SelectionContext
        return SelectionContext
    elif name in ("ShareSession", "ShareError", "ShareBusyError", "MarkdownFileExporter"):
        from . import sharing
        return getattr(sharing, name)
    elif name in ("ShoppingListGenerator", "GeneratedList"):
        from . import shopping
        return getattr(shopping, name)
    elif name == "Inventory":
        from .inventory import Inventory
        return Inventory
    elif name == "RecipeLibrary":
        from .recipe_parser import RecipeLibrary
        return RecipeLibrary
    elif name == "load_meal_plan":
        from .meal_plan import load_meal_plan
        return load_meal_plan
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

__all__ = [
    "Config",
    "EngineConfig",
    "MealType",
    "Section",
    "Recipe",
    "RecipeIngredient",
    "MealSlot",
    "InventoryItem",
    "SourceRecord",
    "ShoppingListItem",
    "StoreSection",
    "AssembledList",
    "ValidationError",
    "load_meal_slots",
    "load_inventory_items",
    "UnitNormalizer",
    "UnitConverter",
    "CategoryClassifier",
    "IngredientAggregator",
    "ShoppingListAssembler",
    "SelectionContext",
    "ShareSession",
    "ShareError",
    "ShareBusyError",
    "MarkdownFileExporter",
    "ShoppingListGenerator",
    "GeneratedList",
    "Inventory",
    "RecipeLibrary",
    "load_meal_plan",
]
