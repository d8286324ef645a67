"""Category management commands."""

import click
from capitrack.cli.error_handling import handle_domain_error
from capitrack.domain.category import CategoryService
from capitrack.domain.entities import CategoryKind


@click.group()
def category_group():
    """Manage categories."""
    pass


@category_group.command("create")
@click.argument("name", metavar="NAME")
@click.option(
    "--kind",
    type=click.Choice([k.value for k in CategoryKind], case_sensitive=False),
    default=CategoryKind.EXPENSE.value,
    show_default=True,
    help="Whether the category is for spending or earning",
)
@click.pass_context
def create_category(ctx, name: str, kind: str):
    """Create a category.

    Examples:
        capitrack category create "Groceries"
        capitrack category create "Salary" --kind INCOME
    """
    service = CategoryService(ctx.obj["db"])
    try:
        category_id = service.create_category(name=name, kind=kind)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created category '{name}' (ID: {category_id})")


@category_group.command("list")
@click.option("--all", "show_all", is_flag=True, help="Include system categories")
@click.pass_context
def list_categories(ctx, show_all: bool):
    """List categories."""
    service = CategoryService(ctx.obj["db"])

    categories = service.list_categories(include_system=show_all)
    if not categories:
        click.echo("No categories found.")
        return

    for cat in categories:
        marker = " [system]" if cat.is_system_generated else ""
        click.echo(f"ID: {cat.id:3d} | {cat.name:24s} | {cat.kind}{marker}")


@category_group.command("init")
@click.pass_context
def init_categories(ctx):
    """Create the system categories used for investments and depreciation."""
    service = CategoryService(ctx.obj["db"])
    created = service.ensure_system_categories()
    if created:
        click.echo(f"Created {len(created)} system categories.")
    else:
        click.echo("System categories already exist.")


def register_commands(cli):
    """Register category commands with main CLI."""
    cli.add_command(category_group, name="category")
