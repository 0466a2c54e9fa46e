"""Command-line interface for shoplist."""

import asyncio
import logging
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from .categories import CategoryClassifier
from .config import Config
from .formatting import format_quantity, to_json
from .insights import bulk_opportunities, cost_savings, find_duplicates
from .inventory import Inventory
from .meal_plan import load_meal_plan
from .recipe_parser import RecipeLibrary
from .selection import SelectionContext
from .sharing import MarkdownFileExporter, ShareError, ShareSession, TextFileExporter
from .shopping import GeneratedList, ShoppingListGenerator
from .units import UnitConverter, UnitNormalizer

console = Console()

EXPORTERS = {"markdown": MarkdownFileExporter, "text": TextFileExporter}


def setup_logging(level: str):
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def load_config(ctx) -> Config:
    config = Config.from_env(Path(ctx.obj["env"]) if ctx.obj.get("env") else None)
    if ctx.obj.get("log_level"):
        config.log_level = ctx.obj["log_level"].upper()
    if not isinstance(logging.getLevelName(config.log_level), int):
        raise click.ClickException(f"Unknown log level: {config.log_level}")
    setup_logging(config.log_level)
    return config


def build_list(config: Config, plan, inventory, recipes) -> GeneratedList:
    """Load inputs from disk and run the generator."""
    recipes_path = Path(recipes) if recipes else config.recipes_path
    plan_path = Path(plan) if plan else config.meal_plan_path
    inventory_path = Path(inventory) if inventory else config.inventory_path

    if not plan_path.exists():
        raise click.ClickException(f"Meal plan not found: {plan_path}")

    library = RecipeLibrary(recipes_path)
    slots = load_meal_plan(plan_path, library)
    stock = Inventory(inventory_path).snapshot()

    return ShoppingListGenerator(config.engine).generate(slots, stock)


def plan_options(f):
    f = click.option("--recipes", "-r", default=None, help="Recipe directory")(f)
    f = click.option("--inventory", "-i", default=None, help="Inventory markdown file")(f)
    f = click.option("--plan", "-p", default=None, help="Meal plan markdown file")(f)
    return f


@click.group()
@click.option("--env", default=None, help="Path to .env file")
@click.option("--log-level", default=None, help="Logging level (DEBUG, INFO, WARNING, ...)")
@click.pass_context
def cli(ctx, env, log_level):
    """🛒 shoplist - Shopping lists from your meal plan."""
    ctx.ensure_object(dict)
    ctx.obj["env"] = env
    ctx.obj["log_level"] = log_level


@cli.command()
@plan_options
@click.option("--json", "as_json", is_flag=True, help="Print items as JSON")
@click.pass_context
def generate(ctx, plan, inventory, recipes, as_json):
    """Show what still needs to be bought."""
    config = load_config(ctx)
    generated = build_list(config, plan, inventory, recipes)

    if as_json:
        click.echo(to_json(generated.items))
        return

    assembled = generated.assembled
    if assembled.is_empty:
        console.print(Panel(
            "All ingredients for your planned meals are already in your inventory!",
            title="🛒 No ingredients needed",
        ))
        return

    for section in assembled.sections:
        table = Table(title=f"{section.name.value} (${section.total_cost:.2f})", title_justify="left")
        table.add_column("Item", style="cyan")
        table.add_column("Amount", justify="right")
        table.add_column("Est. cost", justify="right", style="green")
        table.add_column("Recipes", style="dim")

        for item in section.items:
            recipes_str = ", ".join(sorted({s.recipe_title for s in item.sources}))
            table.add_row(
                item.name,
                format_quantity(item.total_amount, item.unit),
                f"${item.cost:.2f}",
                recipes_str,
            )
        console.print(table)

    console.print(Panel(
        f"Items: {assembled.total_items}\n"
        f"Estimated cost: ${assembled.total_cost:.2f}\n"
        f"Partly covered by inventory: {assembled.items_in_inventory}",
        title="📋 Totals",
    ))

    tips = []
    duplicates = find_duplicates(generated.items)
    if duplicates:
        tips.append(f"{len(duplicates)} items appear in more than one unit")
    for opportunity in bulk_opportunities(generated.items, config.engine):
        tips.append(opportunity.suggestion)
    for saving in cost_savings(generated.items, config.engine):
        tips.append(f"{saving.item.name}: {saving.suggestion} (save ~${saving.potential_saving:.2f})")
    for tip in tips:
        console.print(f"[yellow]•[/yellow] {tip}")


@cli.command()
@plan_options
@click.option("--output", "-o", default=None, help="Output file")
@click.option(
    "--format", "fmt", type=click.Choice(["markdown", "text"]), default="markdown",
    show_default=True, help="Markdown checklist or plain text",
)
@click.pass_context
def export(ctx, plan, inventory, recipes, output, fmt):
    """Write the shopping list to a file."""
    config = load_config(ctx)
    generated = build_list(config, plan, inventory, recipes)

    output_path = Path(output) if output else config.output_path
    if output_path is None:
        raise click.ClickException("No output file given (use --output or OUTPUT_PATH)")

    selection = SelectionContext()
    items = ShoppingListGenerator(config.engine).finalize(generated, selection)

    session = ShareSession(exporter=EXPORTERS[fmt](output_path))
    try:
        asyncio.run(session.export(items))
    except ShareError as e:
        raise click.ClickException(str(e)) from e

    console.print(f"[green]✅ Saved shopping list ({len(items)} items) to {output_path}[/green]")


@cli.command()
@click.argument("raw_units", nargs=-1, required=True)
@click.option("--to", "target", default=None, help="Show conversion of 1 unit into this unit")
def units(raw_units, target):
    """Show how unit strings are normalized."""
    normalizer = UnitNormalizer()
    converter = UnitConverter(normalizer=normalizer)

    table = Table(title="📏 Units")
    table.add_column("Input", style="cyan")
    table.add_column("Canonical")
    table.add_column("Family", style="dim")
    if target:
        table.add_column(f"1 → {normalizer.normalize(target)}", justify="right")

    for raw in raw_units:
        row = [raw, normalizer.normalize(raw), converter.family(raw) or "-"]
        if target:
            if converter.can_convert(raw, target):
                row.append(f"{converter.convert(1, raw, target):g}")
            else:
                row.append("[yellow]n/a[/yellow]")
        table.add_row(*row)

    console.print(table)


@cli.command()
@click.argument("names", nargs=-1, required=True)
def classify(names):
    """Show the store section for ingredient names."""
    classifier = CategoryClassifier()
    for name in names:
        console.print(f"{name}: [bold]{classifier.classify(name).value}[/bold]")


@cli.command(name="inventory")
@click.option("--path", default=None, help="Inventory markdown file")
@click.pass_context
def show_inventory(ctx, path):
    """Show inventory summary."""
    config = load_config(ctx)
    inventory_path = Path(path) if path else config.inventory_path

    if not inventory_path.exists():
        console.print("[yellow]No inventory found.[/yellow]")
        console.print(f"Create one at: {inventory_path}")
        return

    inventory = Inventory(inventory_path)

    console.print(Panel(
        f"[bold]Inventory[/bold]\n\nTotal items: {len(inventory.items)}",
        title="🗄️ Pantry",
    ))

    for category, items in sorted(inventory.by_category().items()):
        item_names = [
            f"{i.name} ({format_quantity(i.quantity, i.unit)})" if i.quantity else i.name
            for i in items[:5]
        ]
        more = f" (+{len(items) - 5} more)" if len(items) > 5 else ""
        console.print(f"[bold]{category.title()}:[/bold] {', '.join(item_names)}{more}")


@cli.command(name="add-inventory")
@click.argument("item_name")
@click.option("--quantity", "-q", type=float, default=0.0, help="Quantity to add")
@click.option("--unit", "-u", default="", help="Unit (cup, lb, ...)")
@click.option("--path", default=None, help="Inventory markdown file")
@click.pass_context
def add_inventory(ctx, item_name, quantity, unit, path):
    """Add an item to your inventory."""
    config = load_config(ctx)
    inventory = Inventory(Path(path) if path else config.inventory_path)

    try:
        item = inventory.add_item(item_name, quantity, unit)
    except ValueError as e:
        raise click.ClickException(str(e)) from e

    console.print(f"[green]✅ Added {item.name} to inventory ({format_quantity(item.quantity, item.unit) or 'no quantity'})[/green]")


def main():
    """Entry point for the CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()
