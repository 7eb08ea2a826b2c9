"""Financial statement command."""

import json
from datetime import date
from decimal import Decimal

import click
from finstate.cli.date_filters import parse_date_option, period_options, resolve_cli_date_range
from finstate.cli.entity_resolution import resolve_entity_or_exit
from finstate.cli.error_handling import handle_domain_error
from finstate.domain.errors import DomainError
from finstate.domain.generator import (
    STATEMENT_ALIASES,
    FinancialStatementService,
    parse_statement_kind,
)
from finstate.domain.reports import (
    BalanceSheet,
    CashFlowSection,
    CashFlowStatement,
    ProfitAndLossStatement,
    StatementSection,
    TrialBalance,
)

WIDTH = 64


def _money(amount: Decimal) -> str:
    return f"{amount:>14,.2f}"


def _line(label: str, amount: Decimal, indent: int = 0) -> str:
    label = " " * indent + label
    return f"{label:<{WIDTH - 14}.{WIDTH - 14}s}{_money(amount)}"


def _section_lines(title: str, section: StatementSection, indent: int = 2) -> list[str]:
    lines = [" " * (indent - 2) + title]
    for item in section.items:
        lines.append(_line(f"{item.account_code} {item.account_name}", item.amount, indent))
    lines.append(_line(f"Total {title.lower()}", section.total, indent - 2))
    return lines


def _cash_flow_lines(title: str, section: CashFlowSection) -> list[str]:
    lines = [title]
    for item in section.items:
        lines.append(_line(item.description, item.amount, 2))
    lines.append(_line(f"Net cash from {title.lower()}", section.total))
    return lines


def render_profit_and_loss(report: ProfitAndLossStatement) -> list[str]:
    lines = [
        f"Profit and Loss ({report.currency})",
        f"{report.period_start} to {report.period_end}",
        "=" * WIDTH,
    ]
    lines += _section_lines("Revenue", report.revenue)
    lines.append("")
    lines += _section_lines("Expenses", report.expenses)
    lines.append("-" * WIDTH)
    lines.append(_line("Net income", report.net_income))
    return lines


def render_balance_sheet(report: BalanceSheet) -> list[str]:
    lines = [f"Balance Sheet ({report.currency})", f"As of {report.as_of_date}", "=" * WIDTH]
    lines.append("Assets")
    lines += _section_lines("Current assets", report.assets.current, 4)
    lines += _section_lines("Fixed assets", report.assets.fixed, 4)
    lines.append(_line("Total assets", report.assets.total))
    lines.append("")
    lines.append("Liabilities")
    lines += _section_lines("Current liabilities", report.liabilities.current, 4)
    lines += _section_lines("Long-term liabilities", report.liabilities.long_term, 4)
    lines.append(_line("Total liabilities", report.liabilities.total))
    lines.append("")
    lines += _section_lines("Equity", report.equity)
    lines.append("-" * WIDTH)
    lines.append(_line("Total liabilities and equity", report.total_liabilities_and_equity))
    if report.imbalance:
        lines.append(_line("Imbalance", report.imbalance))
    return lines


def render_cash_flow(report: CashFlowStatement) -> list[str]:
    operating = report.operating_activities
    lines = [
        f"Cash Flow Statement ({report.currency})",
        f"{report.period_start} to {report.period_end}",
        "=" * WIDTH,
        "Operating activities",
        _line("Net income", operating.net_income, 2),
    ]
    for item in operating.adjustments:
        lines.append(_line(item.description, item.amount, 2))
    lines.append(_line("Changes in working capital", operating.changes_in_working_capital, 2))
    lines.append(_line("Net cash from operating activities", operating.total))
    lines.append("")
    lines += _cash_flow_lines("Investing activities", report.investing_activities)
    lines.append("")
    lines += _cash_flow_lines("Financing activities", report.financing_activities)
    lines.append("-" * WIDTH)
    lines.append(_line("Net change in cash", report.net_change_in_cash))
    lines.append(_line("Beginning cash", report.beginning_cash))
    lines.append(_line("Ending cash", report.ending_cash))
    return lines


def render_trial_balance(report: TrialBalance) -> list[str]:
    lines = [f"Trial Balance as of {report.as_of_date}", "=" * (WIDTH + 14)]
    lines.append(f"{'Code':<6s} {'Account':<35s} {'Type':<9s}{'Debit':>14s}{'Credit':>14s}")
    for row in report.accounts:
        lines.append(
            f"{row.account_code:<6s} {row.account_name[:35]:<35s} {row.account_type.value:<9s}"
            f"{_money(row.debit_balance)}{_money(row.credit_balance)}"
        )
    lines.append("-" * (WIDTH + 14))
    lines.append(
        f"{'Totals':<51s}{_money(report.total_debits)}{_money(report.total_credits)}"
    )
    lines.append("Balanced" if report.is_balanced else "NOT BALANCED")
    return lines


RENDERERS = {
    ProfitAndLossStatement: render_profit_and_loss,
    BalanceSheet: render_balance_sheet,
    CashFlowStatement: render_cash_flow,
    TrialBalance: render_trial_balance,
}


@click.command("statement")
@click.argument(
    "kind",
    type=click.Choice(sorted(STATEMENT_ALIASES), case_sensitive=False),
)
@click.option("--entity", required=True, help="Entity name or ID")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'start of year')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today')")
@click.option("--as-of", help="Date for balance sheet and trial balance (defaults to end date or today)")
@period_options
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    show_default=True,
    help="Output format",
)
@click.pass_context
def statement(
    ctx,
    kind: str,
    entity: str,
    start_date: str | None,
    end_date: str | None,
    as_of: str | None,
    output_format: str,
    **periods,
):
    """Generate a financial statement.

    KIND is one of profit-and-loss (pl, income-statement), balance-sheet (bs),
    cash-flow (cf) or trial-balance (tb).

    Examples:
        finstate statement pl --entity "Acme Ltd" --last-quarter
        finstate statement bs --entity 1 --as-of 2024-03-31 --format json
    """
    entity_id = resolve_entity_or_exit(ctx, entity)
    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags={name.replace("_", "-"): value for name, value in periods.items()},
    )
    as_of_date = parse_date_option(ctx, as_of, "as of date") or end or date.today()

    service = FinancialStatementService(ctx.obj["db"], ctx.obj["settings"])
    try:
        report = service.generate(
            parse_statement_kind(kind),
            entity_id,
            start_date=start,
            end_date=end,
            as_of_date=as_of_date,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    if output_format == "json":
        click.echo(json.dumps(report.to_dict(), indent=2))
        return

    for line in RENDERERS[type(report)](report):
        click.echo(line)


def register_commands(cli):
    """Register statement command with main CLI."""
    cli.add_command(statement)
