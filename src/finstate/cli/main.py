"""Main CLI entry point."""

import logging

import click
from finstate.config import GeneratorSettings
from finstate.database.factories import create_sqlite_database
from finstate.domain.errors import ValidationError

# Import and register all commands at module level
from finstate.cli.commands import (
    entity,
    chart,
    bank,
    transaction,
    statement,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides FINSTATE_DB_PATH environment variable)",
    envvar="FINSTATE_DB_PATH",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx, db_path: str | None, verbose: bool):
    """finstate - Financial statements from categorized transactions.

    Set up an entity with its chart of accounts, category mappings and bank
    accounts, record transactions, then generate a profit and loss
    statement, balance sheet, cash flow statement or trial balance.
    """
    ctx.ensure_object(dict)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        try:
            ctx.obj["settings"] = GeneratorSettings.from_env()
        except ValidationError as e:
            click.echo(f"Error: {e}", err=True)
            ctx.exit(1)
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
entity.register_commands(cli)
chart.register_commands(cli)
bank.register_commands(cli)
transaction.register_commands(cli)
statement.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
