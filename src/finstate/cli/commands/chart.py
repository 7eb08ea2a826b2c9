"""Chart of accounts commands."""

import click
from finstate.cli.entity_resolution import resolve_entity_or_exit
from finstate.cli.error_handling import handle_domain_error
from finstate.domain.chart import ChartOfAccountsService
from finstate.domain.entities import AccountType
from finstate.domain.errors import DomainError

ENTITY_OPTION = click.option("--entity", required=True, help="Entity name or ID")


@click.group("chart")
def chart_group():
    """Manage charts of accounts and category mappings."""
    pass


@chart_group.command("add")
@ENTITY_OPTION
@click.argument("code")
@click.argument("name")
@click.argument(
    "account_type",
    metavar="TYPE",
    type=click.Choice([t.value for t in AccountType], case_sensitive=False),
)
@click.pass_context
def add_account(ctx, entity: str, code: str, name: str, account_type: str):
    """Add an account to the chart.

    Examples:
        finstate chart add --entity "Acme Ltd" 1800 "Vehicles" asset
    """
    entity_id = resolve_entity_or_exit(ctx, entity)
    try:
        account = ChartOfAccountsService(ctx.obj["db"]).add_account(
            entity_id, code, name, account_type
        )
        click.echo(f"Added account {account.code} '{account.name}' ({account.type.value})")
    except DomainError as e:
        handle_domain_error(ctx, e)


@chart_group.command("list")
@ENTITY_OPTION
@click.pass_context
def list_accounts(ctx, entity: str):
    """List the chart of accounts."""
    entity_id = resolve_entity_or_exit(ctx, entity)
    accounts = ChartOfAccountsService(ctx.obj["db"]).list_accounts(entity_id)
    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nChart of accounts:")
    click.echo("-" * 60)
    for account in accounts:
        click.echo(f"{account.code:>6s} | {account.name:35s} | {account.type.value}")


@chart_group.command("init-default")
@ENTITY_OPTION
@click.pass_context
def init_default(ctx, entity: str):
    """Seed the default UK chart of accounts.

    Accounts whose code already exists are kept as they are.
    """
    entity_id = resolve_entity_or_exit(ctx, entity)
    try:
        created = ChartOfAccountsService(ctx.obj["db"]).init_default_chart(entity_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Added {created} accounts from the default chart")


@chart_group.command("map")
@ENTITY_OPTION
@click.argument("category")
@click.argument("account_code", metavar="ACCOUNT_CODE")
@click.option("--subcategory", help="Subcategory (omit to map the category alone)")
@click.pass_context
def map_category(ctx, entity: str, category: str, account_code: str, subcategory: str | None):
    """Map a transaction category to an account.

    Examples:
        finstate chart map --entity "Acme Ltd" "Client Payments" 4200
        finstate chart map --entity 1 "Transport" 6200 --subcategory "Rail"
    """
    entity_id = resolve_entity_or_exit(ctx, entity)
    try:
        mapping = ChartOfAccountsService(ctx.obj["db"]).add_mapping(
            entity_id, category, account_code, subcategory=subcategory
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    label = mapping.category
    if mapping.subcategory:
        label = f"{label} > {mapping.subcategory}"
    click.echo(f"Mapped '{label}' to account {mapping.account_code}")


@chart_group.command("mappings")
@ENTITY_OPTION
@click.pass_context
def list_mappings(ctx, entity: str):
    """List category mappings."""
    entity_id = resolve_entity_or_exit(ctx, entity)
    mappings = ChartOfAccountsService(ctx.obj["db"]).list_mappings(entity_id)
    if not mappings:
        click.echo("No mappings found.")
        return

    for mapping in mappings:
        label = mapping.category
        if mapping.subcategory:
            label = f"{label} > {mapping.subcategory}"
        click.echo(f"{label:45s} -> {mapping.account_code}")


def register_commands(cli):
    """Register chart commands with main CLI."""
    cli.add_command(chart_group)
