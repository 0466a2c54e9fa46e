"""Recipe parser for markdown files with YAML frontmatter."""

import logging
import math
import re
from pathlib import Path
from typing import Any, Optional

import frontmatter

from .models import Recipe, RecipeIngredient, ValidationError
from .units import UnitNormalizer

logger = logging.getLogger(__name__)

_normalizer = UnitNormalizer()


def parse_amount(text: str) -> Optional[float]:
    """Parse "2", "1.5", "1/2" or a range like "4-6" (averaged)."""
    text = text.strip()
    try:
        if "-" in text:
            low, high = text.split("-", 1)
            amount = (float(low) + float(high)) / 2
        elif "/" in text:
            numerator, denominator = text.split("/", 1)
            amount = float(numerator) / float(denominator)
        else:
            amount = float(text)
    except (ValueError, ZeroDivisionError):
        return None
    return amount if math.isfinite(amount) else None


def parse_ingredient_line(text: str) -> Optional[RecipeIngredient]:
    """Parse an ingredient line into a RecipeIngredient.

    Handles "Milk, 2 cups", "2 cups milk" and "4 eggs". Notes in
    parentheses are kept. Lines without a usable amount ("Salt, to taste")
    return None since there is nothing to buy a quantity of.
    """
    # Remove checkbox markdown
    text = re.sub(r"^\s*-\s*(\[.\])?\s*", "", text).strip()
    if not text:
        return None

    amount = None
    unit = ""
    name = text
    notes = None

    # Extract notes in parentheses first so they don't confuse the patterns
    notes_match = re.search(r"\(([^)]+)\)", text)
    if notes_match:
        notes = notes_match.group(1).strip()
        text = re.sub(r"\s*\([^)]+\)\s*", " ", text).strip()
        name = text

    # Pattern 1: "name, amount unit"
    match = re.match(r"^(.+?),\s*([\d./\-]+)\s*([a-zA-Z.]+)?\s*$", text)
    if match:
        name = match.group(1)
        amount = parse_amount(match.group(2))
        unit = match.group(3) or ""
    else:
        # Pattern 2: "amount unit name", for units we recognise
        match = re.match(r"^([\d./\-]+)\s+([a-zA-Z.]+)\s+(.+)$", text)
        if match and _normalizer.is_known(match.group(2)):
            amount = parse_amount(match.group(1))
            unit = match.group(2)
            name = match.group(3)
        else:
            # Pattern 3: "amount name"
            match = re.match(r"^([\d./\-]+)\s+(.+)$", text)
            if match:
                amount = parse_amount(match.group(1))
                name = match.group(2)

    # Clean up common suffixes
    name = re.sub(r",\s*(to taste|as needed|optional)\s*$", "", name, flags=re.IGNORECASE)
    name = name.strip(" ,")

    if not name or not amount or amount <= 0:
        return None

    return RecipeIngredient(name=name, amount=amount, unit=unit, notes=notes)


def parse_servings(value: Any) -> float:
    """Parse servings/yields from various formats."""
    if value is None:
        return 1
    if isinstance(value, bool):
        return 1
    if isinstance(value, (int, float)):
        return value if value > 0 else 1
    if isinstance(value, list) and value:
        # Format: [4, 'Serves 4']
        return parse_servings(value[0])
    if isinstance(value, dict):
        return parse_servings(value.get("count"))
    if isinstance(value, str):
        match = re.search(r"(\d+(?:\.\d+)?)", value)
        if match and float(match.group(1)) > 0:
            return float(match.group(1))
    return 1


def _ingredients_from_metadata(entries: list, source: Path) -> list[RecipeIngredient]:
    ingredients = []
    for entry in entries:
        try:
            if isinstance(entry, dict):
                ingredients.append(RecipeIngredient.from_dict(entry))
                continue
            ingredient = parse_ingredient_line(str(entry))
        except ValidationError as e:
            logger.warning("Skipping ingredient %r in %s: %s", entry, source, e)
            continue
        if ingredient:
            ingredients.append(ingredient)
    return ingredients


def _ingredients_from_content(content: str) -> list[RecipeIngredient]:
    ingredients = []
    ing_match = re.search(r"## Ingredients\n(.*?)(?=\n## |$)", content, re.DOTALL)
    if ing_match:
        for line in ing_match.group(1).strip().split("\n"):
            line = line.strip()
            if line.startswith("- "):
                ingredient = parse_ingredient_line(line)
                if ingredient:
                    ingredients.append(ingredient)
    return ingredients


def parse_recipe_file(file_path: Path) -> Optional[Recipe]:
    """Parse a markdown recipe file into a Recipe object."""
    try:
        with open(file_path, "r", encoding="utf-8") as f:
            post = frontmatter.load(f)
    except Exception as e:
        logger.error("Error loading %s: %s", file_path, e)
        return None

    metadata = post.metadata
    content = post.content

    # Get title from frontmatter, H1 heading or filename
    title = metadata.get("title")
    if not title:
        name_match = re.search(r"^#\s+(.+)$", content, re.MULTILINE)
        title = name_match.group(1).strip() if name_match else file_path.stem

    if isinstance(metadata.get("ingredients"), list):
        ingredients = _ingredients_from_metadata(metadata["ingredients"], file_path)
    else:
        ingredients = _ingredients_from_content(content)

    try:
        return Recipe(
            id=str(metadata.get("id") or file_path.stem),
            title=str(title),
            servings=parse_servings(metadata.get("servings", metadata.get("yields"))),
            ingredients=tuple(ingredients),
        )
    except ValidationError as e:
        logger.error("Invalid recipe %s: %s", file_path, e)
        return None


class RecipeLibrary:
    """A collection of recipes loaded from a directory."""

    def __init__(self, base_path: Path):
        self.base_path = Path(base_path)
        self.recipes: dict[str, Recipe] = {}
        self._load_recipes()

    def _load_recipes(self):
        """Load all recipes from the base path."""
        if not self.base_path.exists():
            logger.warning("Recipe path does not exist: %s", self.base_path)
            return

        for md_file in sorted(self.base_path.rglob("*.md")):
            recipe = parse_recipe_file(md_file)
            if recipe:
                if recipe.id in self.recipes:
                    logger.warning("Duplicate recipe id %r in %s", recipe.id, md_file)
                self.recipes[recipe.id] = recipe

        logger.info("Loaded %d recipes from %s", len(self.recipes), self.base_path)

    def add(self, recipe: Recipe):
        self.recipes[recipe.id] = recipe

    def get_recipe(self, ref: str) -> Optional[Recipe]:
        """Get a recipe by id, or by title (case-insensitive)."""
        if ref in self.recipes:
            return self.recipes[ref]

        ref_lower = ref.strip().lower()
        for recipe in self.recipes.values():
            if recipe.title.lower() == ref_lower or recipe.id.lower() == ref_lower:
                return recipe
        return None

    def __len__(self) -> int:
        return len(self.recipes)
