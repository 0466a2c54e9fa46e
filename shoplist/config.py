"""Configuration management for shoplist."""

import logging
import os
from pathlib import Path
from dataclasses import dataclass, field
from typing import Optional


VAULT = Path.home() / "Documents/obsidian_vault"


@dataclass
class EngineConfig:
    """Tunables for cost estimates and list insights."""
    cost_per_unit: float = 0.5          # placeholder price per unit of recipe amount
    bulk_min_items: int = 3             # items in one section before suggesting bulk buying
    bulk_min_cost: float = 20.0
    high_cost_threshold: float = 5.0    # items above this get a cheaper-alternative hint
    saving_rate: float = 0.15
    max_cost_suggestions: int = 3

    def __post_init__(self):
        for name in (
            "cost_per_unit", "bulk_min_items", "bulk_min_cost",
            "high_cost_threshold", "saving_rate", "max_cost_suggestions",
        ):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative, got {getattr(self, name)}")


def find_dotenv() -> Optional[Path]:
    """First .env in the working directory, project root or package dir."""
    here = Path(__file__).parent
    for candidate in (Path.cwd() / ".env", here.parent / ".env", here / ".env"):
        if candidate.exists():
            return candidate
    return None


def load_dotenv(path: Path):
    """Copy KEY=value lines into os.environ without overriding real env vars."""
    with open(path, encoding="utf-8") as f:
        for raw in f:
            entry = raw.strip()
            if not entry or entry.startswith("#") or "=" not in entry:
                continue
            key, value = entry.split("=", 1)
            os.environ.setdefault(key.strip(), value.strip())


def _env_path(name: str, default: Path) -> Path:
    return Path(os.environ.get(name) or default)


@dataclass
class Config:
    """Where the vault files live, plus engine tunables."""
    recipes_path: Path
    inventory_path: Path
    meal_plan_path: Path

    output_path: Optional[Path] = None
    log_level: str = "WARNING"

    engine: EngineConfig = field(default_factory=EngineConfig)

    @classmethod
    def from_env(cls, dotenv_path: Optional[Path] = None) -> "Config":
        """Build a config from the environment and an optional .env file.

        When no path is given the usual locations are searched.
        """
        if dotenv_path is None:
            dotenv_path = find_dotenv()
        if dotenv_path is not None and dotenv_path.exists():
            load_dotenv(dotenv_path)

        raw_cost = os.environ.get("SHOPLIST_COST_PER_UNIT")
        try:
            engine = EngineConfig(cost_per_unit=float(raw_cost)) if raw_cost else EngineConfig()
        except ValueError as e:
            raise ValueError(f"Invalid SHOPLIST_COST_PER_UNIT={raw_cost!r}: {e}") from e

        output = os.environ.get("OUTPUT_PATH")
        return cls(
            recipes_path=_env_path("RECIPES_PATH", VAULT / "recipes"),
            inventory_path=_env_path("INVENTORY_PATH", VAULT / "pantry.md"),
            meal_plan_path=_env_path("MEAL_PLAN_PATH", VAULT / "meal-plan.md"),
            output_path=Path(output) if output else None,
            log_level=os.environ.get("SHOPLIST_LOG_LEVEL", "WARNING").upper(),
            engine=engine,
        )

    def validate(self) -> list[str]:
        """Human-readable problems with this config; empty when usable."""
        problems = []

        if not self.recipes_path.exists():
            problems.append(f"Recipes path does not exist: {self.recipes_path}")
        if not self.meal_plan_path.exists():
            problems.append(f"Meal plan does not exist: {self.meal_plan_path}")
        # A missing inventory just means everything gets bought

        if not isinstance(logging.getLevelName(self.log_level), int):
            problems.append(f"Unknown log level: {self.log_level}")

        return problems
