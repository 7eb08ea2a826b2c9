"""Bank account commands."""

import click
from finstate.cli.date_filters import parse_date_option
from finstate.cli.entity_resolution import resolve_entity_or_exit
from finstate.cli.error_handling import handle_domain_error
from finstate.domain.bank import BankAccountService
from finstate.domain.errors import DomainError
from finstate.utils.amount_parser import parse_amount


@click.group("bank")
def bank_group():
    """Manage bank accounts and reconciled statement periods."""
    pass


@bank_group.command("add")
@click.option("--entity", required=True, help="Entity name or ID")
@click.argument("name")
@click.pass_context
def add_bank_account(ctx, entity: str, name: str):
    """Add a bank account to an entity."""
    entity_id = resolve_entity_or_exit(ctx, entity)
    try:
        bank_account_id = BankAccountService(ctx.obj["db"]).create_bank_account(entity_id, name)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created bank account '{name}' (ID: {bank_account_id})")


@bank_group.command("list")
@click.option("--entity", required=True, help="Entity name or ID")
@click.pass_context
def list_bank_accounts(ctx, entity: str):
    """List active bank accounts of an entity."""
    entity_id = resolve_entity_or_exit(ctx, entity)
    bank_accounts = BankAccountService(ctx.obj["db"]).list_bank_accounts(entity_id)
    if not bank_accounts:
        click.echo("No bank accounts found.")
        return

    for bank_account in bank_accounts:
        click.echo(f"ID: {bank_account.id:3d} | {bank_account.name}")


@bank_group.command("add-period")
@click.argument("bank_account_id", type=int)
@click.option("--start", "period_start", required=True, help="First day of the statement")
@click.option("--end", "period_end", required=True, help="Last day of the statement")
@click.option("--opening", required=True, help="Opening balance")
@click.option("--closing", required=True, help="Closing balance")
@click.pass_context
def add_period(ctx, bank_account_id: int, period_start: str, period_end: str, opening: str, closing: str):
    """Record a reconciled statement period.

    Examples:
        finstate bank add-period 1 --start 2024-01-01 --end 2024-01-31 --opening 1000 --closing 1250.50
    """
    start = parse_date_option(ctx, period_start, "start date")
    end = parse_date_option(ctx, period_end, "end date")
    try:
        opening_balance = parse_amount(opening)
        closing_balance = parse_amount(closing)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)

    try:
        BankAccountService(ctx.obj["db"]).add_statement_period(
            bank_account_id, start, end, opening_balance, closing_balance
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Recorded statement period {start} to {end} for bank account {bank_account_id}")


@bank_group.command("periods")
@click.argument("bank_account_id", type=int)
@click.pass_context
def list_periods(ctx, bank_account_id: int):
    """List statement periods of a bank account."""
    periods = BankAccountService(ctx.obj["db"]).list_statement_periods(bank_account_id)
    if not periods:
        click.echo("No statement periods found.")
        return

    for period in periods:
        click.echo(
            f"{period.period_start} to {period.period_end} | "
            f"opening {period.opening_balance:>12,.2f} | closing {period.closing_balance:>12,.2f}"
        )


def register_commands(cli):
    """Register bank commands with main CLI."""
    cli.add_command(bank_group)
