"""Unit normalization and conversion."""

import logging
from types import MappingProxyType
from typing import Mapping, Optional

logger = logging.getLogger(__name__)


# Synonyms -> canonical unit
DEFAULT_UNIT_SYNONYMS: Mapping[str, str] = MappingProxyType({
    # Volume
    "tablespoon": "tablespoon",
    "tablespoons": "tablespoon",
    "tbsp": "tablespoon",
    "tbs": "tablespoon",
    "tbsp.": "tablespoon",
    "teaspoon": "teaspoon",
    "teaspoons": "teaspoon",
    "tsp": "teaspoon",
    "tsp.": "teaspoon",
    "cup": "cup",
    "cups": "cup",
    "c": "cup",
    "milliliter": "milliliter",
    "milliliters": "milliliter",
    "ml": "milliliter",
    "liter": "liter",
    "liters": "liter",
    "l": "liter",
    # Weight
    "ounce": "ounce",
    "ounces": "ounce",
    "oz": "ounce",
    "pound": "pound",
    "pounds": "pound",
    "lb": "pound",
    "lbs": "pound",
    "gram": "gram",
    "grams": "gram",
    "g": "gram",
    "kilogram": "kilogram",
    "kilograms": "kilogram",
    "kg": "kilogram",
    # Count
    "piece": "piece",
    "pieces": "piece",
    "pcs": "piece",
    "whole": "piece",
    "clove": "clove",
    "cloves": "clove",
    "bunch": "bunch",
    "bunches": "bunch",
    "can": "can",
    "cans": "can",
    "jar": "jar",
    "jars": "jar",
    "package": "package",
    "packages": "package",
    "pkg": "package",
})

# (larger, smaller) -> how many smaller units make one larger unit.
# Only the pairs the product uses; the reverse direction divides.
DEFAULT_CONVERSION_FACTORS: Mapping[tuple[str, str], float] = MappingProxyType({
    ("tablespoon", "teaspoon"): 3.0,
    ("cup", "tablespoon"): 16.0,
    ("pound", "ounce"): 16.0,
})

UNIT_FAMILIES: Mapping[str, str] = MappingProxyType({
    "teaspoon": "volume",
    "tablespoon": "volume",
    "cup": "volume",
    "milliliter": "volume",
    "liter": "volume",
    "ounce": "weight",
    "pound": "weight",
    "gram": "weight",
    "kilogram": "weight",
    "piece": "count",
    "clove": "count",
    "bunch": "count",
    "can": "count",
    "jar": "count",
    "package": "count",
})


class UnitNormalizer:
    """Map free-text unit strings onto canonical unit names."""

    def __init__(self, synonyms: Mapping[str, str] = DEFAULT_UNIT_SYNONYMS):
        self.synonyms = MappingProxyType({k.lower(): v for k, v in synonyms.items()})

    def normalize(self, raw_unit: Optional[str]) -> str:
        """Normalize a unit; unknown units pass through lowercased."""
        if raw_unit is None:
            return ""
        unit = raw_unit.strip().lower()
        return self.synonyms.get(unit, unit)

    def is_known(self, raw_unit: Optional[str]) -> bool:
        """True when the string is a listed unit or synonym."""
        return bool(raw_unit) and raw_unit.strip().lower() in self.synonyms


class UnitConverter:
    """Convert quantities between canonical units of the same family."""

    def __init__(
        self,
        factors: Mapping[tuple[str, str], float] = DEFAULT_CONVERSION_FACTORS,
        normalizer: Optional[UnitNormalizer] = None,
        families: Mapping[str, str] = UNIT_FAMILIES,
    ):
        self.factors = MappingProxyType(dict(factors))
        self.normalizer = normalizer or UnitNormalizer()
        self.families = families

    def family(self, unit: Optional[str]) -> Optional[str]:
        """Measurement family of a unit (volume, weight, count) or None."""
        return self.families.get(self.normalizer.normalize(unit))

    def can_convert(self, from_unit: Optional[str], to_unit: Optional[str]) -> bool:
        source = self.normalizer.normalize(from_unit)
        target = self.normalizer.normalize(to_unit)
        return (
            source == target
            or (source, target) in self.factors
            or (target, source) in self.factors
        )

    def convert(self, amount: float, from_unit: Optional[str], to_unit: Optional[str]) -> float:
        """Convert amount between units.

        Pairs missing from the table come back unconverted. This covers
        common recipe cases like grams vs ounces, so a mismatch there can
        over- or under-state a deficit; it is logged at debug level.
        """
        source = self.normalizer.normalize(from_unit)
        target = self.normalizer.normalize(to_unit)

        if source == target:
            return amount

        if (source, target) in self.factors:
            return amount * self.factors[(source, target)]
        if (target, source) in self.factors:
            return amount / self.factors[(target, source)]

        logger.debug("No conversion from %r to %r; using %s unconverted", source, target, amount)
        return amount


_default_normalizer = UnitNormalizer()
_default_converter = UnitConverter(normalizer=_default_normalizer)


def normalize_unit(unit: Optional[str]) -> str:
    """Normalize a unit with the default synonym table."""
    return _default_normalizer.normalize(unit)


def convert(amount: float, from_unit: Optional[str], to_unit: Optional[str]) -> float:
    """Convert with the default conversion table."""
    return _default_converter.convert(amount, from_unit, to_unit)
