"""Project commands."""

import click
from capitrack.cli.date_filters import parse_date_or_exit
from capitrack.cli.error_handling import handle_domain_error, warn_fallback_rates
from capitrack.domain.entities import ProjectStatus, ProjectType
from capitrack.domain.project import ProjectService
from capitrack.utils.amount_parser import parse_amount


@click.group()
def project_group():
    """Manage projects such as trips and side hustles."""
    pass


@project_group.command("create")
@click.argument("name", metavar="NAME")
@click.option(
    "--type",
    "project_type",
    type=click.Choice([t.value for t in ProjectType], case_sensitive=False),
    required=True,
    help="Project type",
)
@click.option("--start-date", default="today", show_default=True, help="Start date")
@click.option("--end-date", help="End date")
@click.option(
    "--status",
    type=click.Choice([s.value for s in ProjectStatus], case_sensitive=False),
    default=ProjectStatus.ACTIVE.value,
    show_default=True,
)
@click.option("--budget", help="Total budget")
@click.option("--currency", help="Budget currency")
@click.option("--owner", help="Owner name")
@click.option("--description", help="Description")
@click.pass_context
def create_project(
    ctx,
    name: str,
    project_type: str,
    start_date: str,
    end_date: str | None,
    status: str,
    budget: str | None,
    currency: str | None,
    owner: str | None,
    description: str | None,
):
    """Create a project.

    Examples:
        capitrack project create "Japan 2024" --type TRIP --start-date 2024-04-01 \\
            --end-date 2024-04-10 --budget 3000 --currency USD
    """
    service = ProjectService(ctx.obj["db"])
    start = parse_date_or_exit(ctx, start_date, "start date")
    end = parse_date_or_exit(ctx, end_date, "end date") if end_date else None

    try:
        project_id = service.create_project(
            name=name,
            project_type=project_type,
            start_date=start,
            end_date=end,
            status=status,
            total_budget=parse_amount(budget) if budget else None,
            currency_code=currency,
            owner=owner,
            description=description,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created project '{name}' (ID: {project_id})")


@project_group.command("list")
@click.option("--owner", help="Only show projects of this owner")
@click.pass_context
def list_projects(ctx, owner: str | None):
    """List projects."""
    service = ProjectService(ctx.obj["db"])

    projects = service.list_projects(owner=owner)
    if not projects:
        click.echo("No projects found.")
        return

    for p in projects:
        end = p.end_date.isoformat() if p.end_date else "open"
        click.echo(
            f"ID: {p.id:3d} | {p.name:20s} | {p.type:11s} | {p.status:9s} | "
            f"{p.start_date} -> {end}"
        )


@project_group.command("stats")
@click.argument("project_id", type=int, metavar="PROJECT_ID")
@click.option("--owner", help="Owner requesting the figures")
@click.pass_context
def project_stats(ctx, project_id: int, owner: str | None):
    """Show profit and loss figures for a project."""
    service = ProjectService(ctx.obj["db"], ctx.obj["rate_provider"])
    base = ctx.obj["base_currency"]

    try:
        stats = service.get_project_stats(project_id, base_currency=base, owner=owner)
    except ValueError as e:
        handle_domain_error(ctx, e)

    warn_fallback_rates(stats.using_fallback_rates)
    click.echo(f"Project {project_id} ({stats.project_type}), in {base}")
    click.echo(f"  Transactions:  {stats.transaction_count}")
    click.echo(f"  Income:        {stats.total_income:,.2f}")
    click.echo(f"  Expenses:      {stats.total_expenses:,.2f}")
    click.echo(f"  Transfers:     {stats.total_transfers:,.2f}")
    click.echo(f"  Depreciation:  {stats.total_depreciation:,.2f} ({stats.asset_count} assets)")
    click.echo(f"  Net result:    {stats.net_result:,.2f}")
    if stats.budget is not None:
        utilization = (
            f"{stats.budget_utilization:.1f}%" if stats.budget_utilization is not None else "n/a"
        )
        click.echo(
            f"  Budget:        {stats.budget:,.2f} (used {utilization}, "
            f"remaining {stats.budget_remaining:,.2f})"
        )
    if stats.project_days is not None:
        click.echo(
            f"  Daily cost:    {stats.amortized_daily_cost:,.2f} over {stats.project_days} days"
        )
    if stats.roi is not None:
        click.echo(f"  ROI:           {stats.roi:.1f}%")


def register_commands(cli):
    """Register project commands with main CLI."""
    cli.add_command(project_group, name="project")
