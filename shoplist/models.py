"""Data models for the shopping-list engine."""

import logging
import math
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Iterable, Optional

logger = logging.getLogger(__name__)


class ValidationError(ValueError):
    """Raised when an input record does not match the expected schema."""


class MealType(Enum):
    """Types of meals."""
    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"
    DESSERT = "dessert"


class Section(Enum):
    """Store sections, declared in in-store walking order."""
    PRODUCE = "Produce"
    MEAT_SEAFOOD = "Meat & Seafood"
    DAIRY_EGGS = "Dairy & Eggs"
    PANTRY = "Pantry"
    FROZEN = "Frozen"
    BEVERAGES = "Beverages"
    SNACKS = "Snacks"
    HOUSEHOLD = "Household"
    OTHER = "Other"

    @classmethod
    def parse(cls, value: Any) -> "Section":
        """Resolve a section from an enum, value or name; unknown -> OTHER."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            text = value.strip()
            for section in cls:
                if text.lower() in (section.value.lower(), section.name.lower()):
                    return section
        return cls.OTHER


def _get(data: dict, *keys: str, default: Any = None) -> Any:
    """Return the first present key, accepting camelCase and snake_case."""
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


def _to_float(value: Any, field_name: str) -> float:
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a number, got {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number, got {value!r}") from None
    if not math.isfinite(number):
        raise ValidationError(f"{field_name} must be finite, got {value!r}")
    return number


def _to_text(value: Any, field_name: str, required: bool = True) -> str:
    if value is None:
        if required:
            raise ValidationError(f"{field_name} is required")
        return ""
    if not isinstance(value, (str, int, float)) or isinstance(value, bool):
        raise ValidationError(f"{field_name} must be text, got {value!r}")
    return str(value).strip()


@dataclass(frozen=True)
class RecipeIngredient:
    """An ingredient line embedded in a recipe."""
    name: str
    amount: float
    unit: str = ""
    category: Optional[str] = None
    notes: Optional[str] = None

    def __post_init__(self):
        if not self.name or not self.name.strip():
            raise ValidationError("ingredient name must not be empty")
        if not math.isfinite(self.amount) or self.amount <= 0:
            raise ValidationError(f"ingredient amount must be positive: {self.name} ({self.amount})")

    def scaled(self, factor: float) -> "RecipeIngredient":
        """Return a copy with the amount multiplied by factor."""
        return replace(self, amount=self.amount * factor)

    def __str__(self) -> str:
        if self.unit:
            return f"{self.amount:g} {self.unit} {self.name}"
        return f"{self.amount:g} {self.name}"

    @classmethod
    def from_dict(cls, data: dict) -> "RecipeIngredient":
        if not isinstance(data, dict):
            raise ValidationError(f"ingredient must be a mapping, got {type(data).__name__}")
        return cls(
            name=_to_text(data.get("name"), "ingredient name"),
            amount=_to_float(data.get("amount"), "ingredient amount"),
            unit=_to_text(data.get("unit"), "ingredient unit", required=False),
            category=data.get("category") or None,
            notes=data.get("notes") or None,
        )


@dataclass(frozen=True)
class Recipe:
    """A recipe with its base servings and per-recipe ingredient list."""
    id: str
    title: str
    servings: float = 1
    ingredients: tuple[RecipeIngredient, ...] = ()

    def __post_init__(self):
        if not math.isfinite(self.servings) or self.servings <= 0:
            raise ValidationError(f"recipe servings must be positive: {self.title} ({self.servings})")
        # Accept lists from callers; keep the record immutable.
        object.__setattr__(self, "ingredients", tuple(self.ingredients))

    @classmethod
    def from_dict(cls, data: dict) -> "Recipe":
        if not isinstance(data, dict):
            raise ValidationError(f"recipe must be a mapping, got {type(data).__name__}")

        servings = _get(data, "servings", default=1)
        # The web client stores servings as {"count": n, "notes": ...}
        if isinstance(servings, dict):
            servings = servings.get("count", 1)

        title = _to_text(_get(data, "title", "name"), "recipe title")
        return cls(
            id=_to_text(_get(data, "id", default=title), "recipe id"),
            title=title,
            servings=_to_float(servings, "recipe servings"),
            ingredients=tuple(
                RecipeIngredient.from_dict(ing) for ing in data.get("ingredients") or []
            ),
        )


@dataclass(frozen=True)
class MealSlot:
    """One planned meal occurrence, optionally bound to a recipe."""
    date: str
    meal_type: MealType
    recipe: Optional[Recipe] = None
    servings: Optional[float] = None
    notes: Optional[str] = None

    def __post_init__(self):
        if self.servings is not None and (not math.isfinite(self.servings) or self.servings <= 0):
            raise ValidationError(f"meal servings must be positive, got {self.servings}")

    @property
    def effective_servings(self) -> float:
        """Servings requested for this meal; falls back to the recipe's yield."""
        if self.servings is not None:
            return self.servings
        if self.recipe:
            return self.recipe.servings
        return 0

    def scaled_ingredients(self) -> list[RecipeIngredient]:
        """Recipe ingredients scaled by requested / base servings."""
        if not self.recipe:
            return []
        factor = self.effective_servings / self.recipe.servings
        return [ing.scaled(factor) for ing in self.recipe.ingredients]

    @classmethod
    def from_dict(cls, data: dict) -> "MealSlot":
        if not isinstance(data, dict):
            raise ValidationError(f"meal slot must be a mapping, got {type(data).__name__}")

        raw_type = _to_text(_get(data, "mealType", "meal_type"), "meal type")
        try:
            meal_type = MealType(raw_type.lower())
        except ValueError:
            raise ValidationError(f"unknown meal type: {raw_type!r}") from None

        recipe_data = data.get("recipe")
        servings = _get(data, "servings")
        return cls(
            date=_to_text(data.get("date"), "meal date"),
            meal_type=meal_type,
            recipe=Recipe.from_dict(recipe_data) if recipe_data else None,
            servings=_to_float(servings, "meal servings") if servings is not None else None,
            notes=data.get("notes") or None,
        )


@dataclass(frozen=True)
class InventoryItem:
    """An item the user already has on hand."""
    name: str
    quantity: float = 0.0
    unit: str = ""

    def __post_init__(self):
        if not self.name or not self.name.strip():
            raise ValidationError("inventory item name must not be empty")
        if not math.isfinite(self.quantity) or self.quantity < 0:
            raise ValidationError(f"inventory quantity must be non-negative: {self.name} ({self.quantity})")

    @classmethod
    def from_dict(cls, data: dict) -> "InventoryItem":
        if not isinstance(data, dict):
            raise ValidationError(f"inventory item must be a mapping, got {type(data).__name__}")
        quantity = data.get("quantity")
        return cls(
            name=_to_text(_get(data, "name", "customName"), "inventory name"),
            quantity=_to_float(quantity, "inventory quantity") if quantity is not None else 0.0,
            unit=_to_text(data.get("unit"), "inventory unit", required=False),
        )


@dataclass(frozen=True)
class SourceRecord:
    """Which recipe contributed how much to a shopping item."""
    recipe_id: str
    recipe_title: str
    amount: float
    servings: float

    def to_dict(self) -> dict:
        return {
            "recipeId": self.recipe_id,
            "recipeTitle": self.recipe_title,
            "amount": self.amount,
            "servings": self.servings,
        }


@dataclass
class ShoppingListItem:
    """An aggregated shopping need, recomputed on every run."""
    id: str
    name: str
    category: Section
    total_amount: float
    unit: str
    estimated_cost: Optional[float] = None
    user_price: Optional[float] = None
    price_source: str = "system"
    is_purchased: bool = False
    notes: Optional[str] = None
    sources: list[SourceRecord] = field(default_factory=list)
    is_in_inventory: bool = False
    inventory_amount: float = 0.0

    @property
    def cost(self) -> float:
        """User-entered price wins over the system estimate; missing is 0."""
        if self.user_price is not None:
            return self.user_price
        return self.estimated_cost or 0.0

    def __str__(self) -> str:
        if self.unit:
            return f"{self.name}: {self.total_amount:g} {self.unit}"
        return f"{self.name}: {self.total_amount:g}"

    def to_dict(self) -> dict:
        data = {
            "id": self.id,
            "name": self.name,
            "category": self.category.value,
            "totalAmount": self.total_amount,
            "unit": self.unit,
            "priceSource": self.price_source,
            "isPurchased": self.is_purchased,
            "sources": [s.to_dict() for s in self.sources],
            "isInInventory": self.is_in_inventory,
            "inventoryAmount": self.inventory_amount,
        }
        if self.estimated_cost is not None:
            data["estimatedCost"] = round(self.estimated_cost, 2)
        if self.user_price is not None:
            data["userPrice"] = self.user_price
        if self.notes:
            data["notes"] = self.notes
        return data


@dataclass
class StoreSection:
    """A group of shopping items found in the same part of the store."""
    name: Section
    items: list[ShoppingListItem] = field(default_factory=list)
    total_cost: float = 0.0


@dataclass
class AssembledList:
    """Shopping items grouped into store sections with overall totals."""
    sections: list[StoreSection] = field(default_factory=list)
    total_items: int = 0
    total_cost: float = 0.0
    items_in_inventory: int = 0

    @property
    def is_empty(self) -> bool:
        """True when every planned ingredient is already covered."""
        return self.total_items == 0

    @property
    def items(self) -> list[ShoppingListItem]:
        return [item for section in self.sections for item in section.items]

    def get_section(self, name: Section) -> Optional[StoreSection]:
        for section in self.sections:
            if section.name == name:
                return section
        return None


def _load_records(records: Iterable[Any], parser, kind: str, strict: bool) -> list:
    loaded = []
    for index, record in enumerate(records):
        try:
            loaded.append(parser(record))
        except ValidationError as e:
            if strict:
                raise ValidationError(f"{kind} #{index}: {e}") from e
            logger.warning("Skipping malformed %s #%d: %s", kind, index, e)
    return loaded


def load_meal_slots(records: Iterable[Any], strict: bool = True) -> list[MealSlot]:
    """Validate raw meal slot records.

    With ``strict=False`` malformed records are logged and skipped instead of
    failing the whole batch.
    """
    return _load_records(records, MealSlot.from_dict, "meal slot", strict)


def load_inventory_items(records: Iterable[Any], strict: bool = True) -> list[InventoryItem]:
    """Validate raw inventory records (see load_meal_slots)."""
    return _load_records(records, InventoryItem.from_dict, "inventory item", strict)
