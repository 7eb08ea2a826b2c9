"""Transaction commands."""

import click
from finstate.cli.date_filters import parse_date_option, period_options, resolve_cli_date_range
from finstate.cli.entity_resolution import resolve_entity_or_exit
from finstate.cli.error_handling import handle_domain_error
from finstate.domain.errors import DomainError
from finstate.domain.transaction import TRANSACTION_TYPES, TransactionService
from finstate.utils.amount_parser import parse_signed_amount


@click.group("transaction")
def transaction_group():
    """Record and list categorized transactions."""
    pass


@transaction_group.command("add")
@click.option("--entity", required=True, help="Entity name or ID")
@click.option(
    "--date",
    required=True,
    help="Transaction date (YYYY-MM-DD or relative like 'today', 'yesterday')",
)
@click.option(
    "--amount",
    required=True,
    help="Signed amount; negative means money out (e.g. -45.00 or '45.00 DR')",
)
@click.option("--category", help="Category (e.g. 'Office Supplies')")
@click.option("--subcategory", help="Subcategory")
@click.option(
    "--type",
    "transaction_type",
    type=click.Choice(TRANSACTION_TYPES, case_sensitive=False),
    help="Transaction type",
)
@click.option("--description", help="Transaction description")
@click.pass_context
def add_transaction(
    ctx,
    entity: str,
    date: str,
    amount: str,
    category: str | None,
    subcategory: str | None,
    transaction_type: str | None,
    description: str | None,
):
    """Add a categorized transaction.

    Examples:
        finstate transaction add --entity "Acme Ltd" --date 2024-01-15 --amount 5000 --category Sales
        finstate transaction add --entity 1 --date today --amount -45 --category "Office Supplies"
    """
    entity_id = resolve_entity_or_exit(ctx, entity)
    txn_date = parse_date_option(ctx, date, "date")

    try:
        txn_amount, is_debit = parse_signed_amount(amount)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)

    try:
        transaction_id = TransactionService(ctx.obj["db"]).create_transaction(
            entity_id=entity_id,
            date=txn_date,
            amount=txn_amount,
            is_debit=is_debit,
            category=category,
            subcategory=subcategory,
            transaction_type=transaction_type,
            description=description,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Added transaction (ID: {transaction_id})")


@transaction_group.command("list")
@click.option("--entity", required=True, help="Entity name or ID")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'start of month')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today')")
@period_options
@click.pass_context
def list_transactions(ctx, entity: str, start_date: str | None, end_date: str | None, **periods):
    """List transactions of an entity."""
    entity_id = resolve_entity_or_exit(ctx, entity)
    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags={name.replace("_", "-"): value for name, value in periods.items()},
    )
    transactions = TransactionService(ctx.obj["db"]).list_transactions(
        entity_id, start_date=start, end_date=end
    )
    if not transactions:
        click.echo("No transactions found.")
        return

    for txn in transactions:
        category = txn.category or "Uncategorized"
        if txn.subcategory:
            category = f"{category} > {txn.subcategory}"
        click.echo(
            f"{txn.id:5d} | {txn.date} | {txn.cash_amount:>12,.2f} | "
            f"{category:35s} | {txn.description or ''}"
        )


def register_commands(cli):
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group)
