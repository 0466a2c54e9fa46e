"""Store-section classification for ingredients."""

from typing import Iterable

from .models import Section


# Ordered: the first keyword found in a name decides its section.
DEFAULT_CATEGORY_RULES: tuple[tuple[str, Section], ...] = (
    ("tomato", Section.PRODUCE),
    ("onion", Section.PRODUCE),
    ("garlic", Section.PRODUCE),
    ("carrot", Section.PRODUCE),
    ("lettuce", Section.PRODUCE),
    ("spinach", Section.PRODUCE),
    ("chicken", Section.MEAT_SEAFOOD),
    ("beef", Section.MEAT_SEAFOOD),
    ("pork", Section.MEAT_SEAFOOD),
    ("fish", Section.MEAT_SEAFOOD),
    ("shrimp", Section.MEAT_SEAFOOD),
    ("milk", Section.DAIRY_EGGS),
    ("cheese", Section.DAIRY_EGGS),
    ("eggs", Section.DAIRY_EGGS),
    ("butter", Section.DAIRY_EGGS),
    ("yogurt", Section.DAIRY_EGGS),
    ("rice", Section.PANTRY),
    ("pasta", Section.PANTRY),
    ("flour", Section.PANTRY),
    ("oil", Section.PANTRY),
    ("sauce", Section.PANTRY),
    ("spice", Section.PANTRY),
    ("herb", Section.PANTRY),
    ("bread", Section.PANTRY),
    ("frozen", Section.FROZEN),
    ("ice cream", Section.FROZEN),
    ("water", Section.BEVERAGES),
    ("juice", Section.BEVERAGES),
    ("soda", Section.BEVERAGES),
    ("chips", Section.SNACKS),
    ("crackers", Section.SNACKS),
    ("nuts", Section.SNACKS),
    ("cleaning", Section.HOUSEHOLD),
    ("paper", Section.HOUSEHOLD),
)


class CategoryClassifier:
    """Assign ingredients to store sections by keyword."""

    def __init__(self, rules: Iterable[tuple[str, Section]] = DEFAULT_CATEGORY_RULES):
        self.rules = tuple((keyword.lower(), section) for keyword, section in rules)

    def classify(self, ingredient_name: str) -> Section:
        """Determine the store section of an ingredient."""
        name_lower = ingredient_name.lower()

        for keyword, section in self.rules:
            if keyword in name_lower:
                return section

        return Section.OTHER


_default_classifier = CategoryClassifier()


def categorize_ingredient(name: str) -> Section:
    """Classify with the default keyword table."""
    return _default_classifier.classify(name)
