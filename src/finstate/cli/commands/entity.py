"""Entity management commands."""

import click
from finstate.cli.error_handling import handle_domain_error
from finstate.domain.chart import ChartOfAccountsService
from finstate.domain.entity import EntityService
from finstate.domain.errors import DomainError


@click.group("entity")
def entity_group():
    """Manage business entities."""
    pass


@entity_group.command("create")
@click.argument("name", metavar="ENTITY_NAME")
@click.option("--currency", help="Currency code (e.g. GBP, EUR, USD)")
@click.option(
    "--default-chart", is_flag=True, help="Seed the default UK chart of accounts"
)
@click.pass_context
def create_entity(ctx, name: str, currency: str | None, default_chart: bool):
    """Create a new entity.

    Examples:
        finstate entity create "Acme Ltd" --currency GBP --default-chart
    """
    db = ctx.obj["db"]
    try:
        entity_id = EntityService(db).create_entity(name=name, currency=currency)
        click.echo(f"Created entity '{name}' (ID: {entity_id})")
        if default_chart:
            created = ChartOfAccountsService(db).init_default_chart(entity_id)
            click.echo(f"Added {created} accounts from the default chart")
    except DomainError as e:
        handle_domain_error(ctx, e)


@entity_group.command("list")
@click.pass_context
def list_entities(ctx):
    """List all entities."""
    entities = EntityService(ctx.obj["db"]).list_entities()
    if not entities:
        click.echo("No entities found.")
        return

    click.echo("\nEntities:")
    click.echo("-" * 60)
    for entity in entities:
        click.echo(f"ID: {entity.id:3d} | {entity.name:30s} | Currency: {entity.currency or '-'}")


def register_commands(cli):
    """Register entity commands with main CLI."""
    cli.add_command(entity_group)
