"""Load planned meals from a markdown file with YAML frontmatter."""

import logging
from datetime import date, datetime
from pathlib import Path
from typing import Optional

import frontmatter

from .models import MealSlot, MealType, ValidationError
from .recipe_parser import RecipeLibrary

logger = logging.getLogger(__name__)


def _slot_from_entry(entry: dict, library: Optional[RecipeLibrary]) -> MealSlot:
    if not isinstance(entry, dict):
        raise ValidationError(f"meal entry must be a mapping, got {entry!r}")

    raw_type = str(entry.get("meal_type") or entry.get("mealType") or "").strip().lower()
    try:
        meal_type = MealType(raw_type)
    except ValueError:
        raise ValidationError(f"unknown meal type: {raw_type!r}") from None

    # YAML turns unquoted dates into date objects
    raw_date = entry.get("date")
    if isinstance(raw_date, (date, datetime)):
        raw_date = raw_date.isoformat()
    if not raw_date:
        raise ValidationError("meal date is required")

    recipe = None
    recipe_ref = entry.get("recipe")
    if recipe_ref:
        if library is not None:
            recipe = library.get_recipe(str(recipe_ref))
        if recipe is None:
            logger.warning("Unknown recipe %r on %s %s; slot left empty", recipe_ref, raw_date, raw_type)

    servings = entry.get("servings")
    try:
        servings = float(servings) if servings is not None else None
    except (TypeError, ValueError):
        raise ValidationError(f"meal servings must be a number, got {servings!r}") from None

    return MealSlot(
        date=str(raw_date),
        meal_type=meal_type,
        recipe=recipe,
        servings=servings,
        notes=entry.get("notes"),
    )


def load_meal_plan(path: Path, library: Optional[RecipeLibrary] = None) -> list[MealSlot]:
    """Read the ``meals:`` list of a meal plan file.

    Each entry has ``date``, ``meal_type``, optional ``recipe`` (id or title
    in the library) and optional ``servings``. Malformed entries are logged
    and skipped.
    """
    with open(path, "r", encoding="utf-8") as f:
        post = frontmatter.load(f)

    slots = []
    for index, entry in enumerate(post.metadata.get("meals") or []):
        try:
            slots.append(_slot_from_entry(entry, library))
        except ValidationError as e:
            logger.warning("Skipping meal #%d in %s: %s", index, path, e)

    logger.info("Loaded %d meal slots from %s", len(slots), path)
    return slots
