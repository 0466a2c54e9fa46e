"""Render shopping lists as markdown, plain text and JSON."""

import json
import os
from datetime import date
from pathlib import Path
from typing import Iterable, Optional

from .models import AssembledList, Section, ShoppingListItem


SECTION_ICONS = {
    Section.PRODUCE: "🥬",
    Section.MEAT_SEAFOOD: "🥩",
    Section.DAIRY_EGGS: "🧀",
    Section.PANTRY: "🫙",
    Section.FROZEN: "❄️",
    Section.BEVERAGES: "🧃",
    Section.SNACKS: "🥨",
    Section.HOUSEHOLD: "🧻",
    Section.OTHER: "📦",
}


def format_amount(amount: float) -> str:
    """Whole numbers without decimals, everything else to two places."""
    if amount == int(amount):
        return str(int(amount))
    return f"{amount:.2f}".rstrip("0").rstrip(".")


def format_quantity(amount: Optional[float], unit: Optional[str]) -> str:
    """Format quantity and unit for display."""
    if not amount:
        return ""
    if unit:
        return f"{format_amount(amount)} {unit}"
    return format_amount(amount)


def to_markdown(assembled: AssembledList, created: Optional[date] = None) -> str:
    """Convert an assembled list to an Obsidian-friendly markdown checklist."""
    created = created or date.today()

    lines = [
        "---",
        "tags: [shopping, groceries]",
        f"created: {created.isoformat()}",
        "---",
        "",
        "# 🛒 Shopping List",
        "",
    ]

    if assembled.is_empty:
        lines.append("No ingredients needed - everything for the planned meals is already on hand.")
        lines.append("")
        return "\n".join(lines)

    lines.append(
        f"**{assembled.total_items} items** to buy, "
        f"about ${assembled.total_cost:.2f}"
    )
    if assembled.items_in_inventory:
        lines.append(f"{assembled.items_in_inventory} partly covered by inventory")
    lines.append("")

    for section in assembled.sections:
        lines.append(f"## {SECTION_ICONS[section.name]} {section.name.value} (${section.total_cost:.2f})")
        lines.append("")

        for item in section.items:
            qty_str = format_quantity(item.total_amount, item.unit)
            line = f"- [{'x' if item.is_purchased else ' '}] {item.name}"
            if qty_str:
                line += f", {qty_str}"
            if item.notes:
                line += f" ({item.notes})"
            lines.append(line)

        lines.append("")

    return "\n".join(lines)


def to_text(items: Iterable[ShoppingListItem]) -> str:
    """Plain-text list grouped by store section, written by TextFileExporter."""
    by_section: dict[Section, list[ShoppingListItem]] = {}
    for item in items:
        by_section.setdefault(Section.parse(item.category), []).append(item)

    if not by_section:
        return "SHOPPING LIST\nNo ingredients needed."

    lines = ["SHOPPING LIST", "=" * 30, ""]

    for section in Section:
        if section not in by_section:
            continue

        lines.append(section.value.upper())
        lines.append("-" * 30)

        for item in sorted(by_section[section], key=lambda x: x.name.lower()):
            qty_str = format_quantity(item.total_amount, item.unit)
            lines.append(f"  □ {item.name}" + (f" - {qty_str}" if qty_str else ""))

        lines.append("")

    return "\n".join(lines).rstrip() + "\n"


def to_json(items: Iterable[ShoppingListItem], indent: Optional[int] = 2) -> str:
    """Serialize items as the camelCase records consumed by export targets."""
    return json.dumps([item.to_dict() for item in items], indent=indent, ensure_ascii=False)


def write_atomic(path: Path, content: str):
    """Write through a sibling .tmp file so readers never see a partial file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_name(path.name + ".tmp")
    try:
        with open(tmp, "w", encoding="utf-8") as f:
            f.write(content)
        os.replace(tmp, path)
    finally:
        tmp.unlink(missing_ok=True)
