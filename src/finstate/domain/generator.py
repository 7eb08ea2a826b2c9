"""Financial statement generation service.

The service is request-scoped and stateless: each call reads what it needs
through the injected ``Database``, runs the reads concurrently, and hands the
results to a pure statement builder.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Callable, Optional, Union

from finstate.config import GeneratorSettings
from finstate.database.base import Database
from finstate.domain.aggregator import BalanceAggregator
from finstate.domain.bank_balances import BankBalanceTracker, CashPosition
from finstate.domain.chart import ChartOfAccountsRegistry
from finstate.domain.entities import AccountMapping, BankAccount, Transaction
from finstate.domain.errors import MissingConfigurationError, QueryFailure, ValidationError
from finstate.domain.reports import (
    BalanceSheet,
    CashFlowStatement,
    ProfitAndLossStatement,
    TrialBalance,
)
from finstate.domain.resolver import AccountResolver
from finstate.domain.statements import (
    BalanceSheetBuilder,
    CashFlowBuilder,
    ProfitAndLossBuilder,
    TrialBalanceBuilder,
)

logger = logging.getLogger(__name__)

StatementResult = Union[ProfitAndLossStatement, BalanceSheet, CashFlowStatement, TrialBalance]


class StatementKind(str, Enum):
    PROFIT_AND_LOSS = "profit-and-loss"
    BALANCE_SHEET = "balance-sheet"
    CASH_FLOW = "cash-flow"
    TRIAL_BALANCE = "trial-balance"

    @property
    def is_period_statement(self) -> bool:
        """True for statements covering a date range rather than a single date."""
        return self in (StatementKind.PROFIT_AND_LOSS, StatementKind.CASH_FLOW)


STATEMENT_ALIASES: dict[str, StatementKind] = {
    "profit-and-loss": StatementKind.PROFIT_AND_LOSS,
    "pl": StatementKind.PROFIT_AND_LOSS,
    "income-statement": StatementKind.PROFIT_AND_LOSS,
    "balance-sheet": StatementKind.BALANCE_SHEET,
    "bs": StatementKind.BALANCE_SHEET,
    "cash-flow": StatementKind.CASH_FLOW,
    "cf": StatementKind.CASH_FLOW,
    "trial-balance": StatementKind.TRIAL_BALANCE,
    "tb": StatementKind.TRIAL_BALANCE,
}


def parse_statement_kind(value: str | StatementKind) -> StatementKind:
    """Parse a statement kind or one of its aliases.

    Raises:
        ValidationError: If the value is not a known statement kind
    """
    if isinstance(value, StatementKind):
        return value
    kind = STATEMENT_ALIASES.get(value.strip().lower())
    if kind is None:
        raise ValidationError(f"Invalid statement type: {value}")
    return kind


@dataclass(frozen=True)
class StatementInputs:
    """Everything read for one statement request."""

    transactions: tuple[Transaction, ...]
    chart: ChartOfAccountsRegistry
    mappings: tuple[AccountMapping, ...]
    bank_accounts: tuple[BankAccount, ...]
    currency: str


class FinancialStatementService:
    """Service for generating financial statements of an entity."""

    def __init__(
        self,
        db: Database,
        settings: Optional[GeneratorSettings] = None,
        resolver: Optional[AccountResolver] = None,
    ):
        """Initialize financial statement service.

        Args:
            db: Database instance
            settings: Generator settings (defaults apply when omitted)
            resolver: Account resolver (default strategies when omitted)
        """
        self.db = db
        self.settings = settings or GeneratorSettings()
        self.aggregator = BalanceAggregator(resolver)
        self.bank_tracker = BankBalanceTracker(
            db, max_workers=self.settings.max_workers, strict=self.settings.strict_reads
        )

    # Reads
    def _read(self, query: str, entity_id: int, read: Callable[[], Any], empty: Any) -> Any:
        """Run one read; a failure is logged and yields ``empty``."""
        try:
            return read()
        except Exception as exc:
            failure = QueryFailure(query, entity_id, exc)
            if self.settings.strict_reads:
                raise failure from exc
            logger.warning("%s; treating as no data", failure, exc_info=True)
            return empty

    def _resolve_currency(self, entity_id: int, currency: Optional[str]) -> str:
        try:
            return _require_currency(entity_id, currency)
        except MissingConfigurationError as exc:
            logger.info("%s; using %s", exc, self.settings.default_currency)
            return self.settings.default_currency

    def load_inputs(
        self,
        entity_id: int,
        start_date: Optional[date],
        end_date: Optional[date],
        include_bank_accounts: bool = False,
    ) -> StatementInputs:
        """Read the inputs of one statement concurrently."""
        reads: dict[str, tuple[Callable[[], Any], Any]] = {
            "transactions": (
                lambda: self.db.list_transactions(entity_id, start_date=start_date, end_date=end_date),
                [],
            ),
            "chart_of_accounts": (lambda: self.db.list_chart_of_accounts(entity_id), []),
            "account_mappings": (lambda: self.db.list_account_mappings(entity_id), []),
            "entity_currency": (lambda: self.db.get_entity_currency(entity_id), None),
        }
        if include_bank_accounts:
            reads["bank_accounts"] = (lambda: self.db.list_bank_accounts(entity_id), [])

        with ThreadPoolExecutor(max_workers=min(self.settings.max_workers, len(reads))) as pool:
            futures = {
                name: pool.submit(self._read, name, entity_id, read, empty)
                for name, (read, empty) in reads.items()
            }
            results = {name: future.result() for name, future in futures.items()}

        chart = ChartOfAccountsRegistry(results["chart_of_accounts"])
        try:
            _require_chart(entity_id, chart)
        except MissingConfigurationError as exc:
            logger.info("%s; sections will be empty", exc)
        return StatementInputs(
            transactions=tuple(results["transactions"]),
            chart=chart,
            mappings=tuple(results["account_mappings"]),
            bank_accounts=tuple(results.get("bank_accounts", ())),
            currency=self._resolve_currency(entity_id, results["entity_currency"]),
        )

    # Statements
    def _profit_and_loss(
        self, inputs: StatementInputs, start_date: date, end_date: date
    ) -> ProfitAndLossStatement:
        balances = self.aggregator.aggregate(inputs.transactions, inputs.chart, inputs.mappings)
        return ProfitAndLossBuilder().build(balances, start_date, end_date, inputs.currency)

    def profit_and_loss(
        self, entity_id: int, start_date: date, end_date: date
    ) -> ProfitAndLossStatement:
        """Generate the profit and loss statement for a period."""
        _check_period(start_date, end_date)
        inputs = self.load_inputs(entity_id, start_date, end_date)
        return self._profit_and_loss(inputs, start_date, end_date)

    def balance_sheet(self, entity_id: int, as_of_date: date) -> BalanceSheet:
        """Generate the balance sheet as of a date.

        All transactions on or before the date are aggregated; bank cash is
        the closing balance of each bank account's latest statement period.
        """
        inputs = self.load_inputs(entity_id, None, as_of_date, include_bank_accounts=True)
        bank_cash = self.bank_tracker.cash_as_of(inputs.bank_accounts, as_of_date)
        balances = self.aggregator.aggregate(
            inputs.transactions, inputs.chart, inputs.mappings, bank_cash=bank_cash
        )
        return BalanceSheetBuilder().build(balances, as_of_date, inputs.currency)

    def cash_flow(self, entity_id: int, start_date: date, end_date: date) -> CashFlowStatement:
        """Generate the cash flow statement for a period."""
        _check_period(start_date, end_date)
        inputs = self.load_inputs(entity_id, start_date, end_date, include_bank_accounts=True)
        pnl = self._profit_and_loss(inputs, start_date, end_date)
        cash: CashPosition = self.bank_tracker.cash_for_period(
            inputs.bank_accounts, start_date, end_date
        )
        return CashFlowBuilder().build(
            inputs.transactions, pnl.net_income, cash, start_date, end_date, inputs.currency
        )

    def trial_balance(self, entity_id: int, as_of_date: date) -> TrialBalance:
        """Generate the trial balance as of a date."""
        inputs = self.load_inputs(entity_id, None, as_of_date)
        balances = self.aggregator.aggregate(inputs.transactions, inputs.chart, inputs.mappings)
        return TrialBalanceBuilder(self.settings.balance_epsilon).build(
            balances, inputs.chart, as_of_date
        )

    def generate(
        self,
        kind: str | StatementKind,
        entity_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        as_of_date: Optional[date] = None,
    ) -> StatementResult:
        """Generate a statement by kind name or alias.

        Raises:
            ValidationError: If the kind is unknown or required dates are missing
        """
        kind = parse_statement_kind(kind)
        if kind.is_period_statement:
            if start_date is None or end_date is None:
                raise ValidationError(
                    f"Start date and end date are required for {kind.value} statement"
                )
            if kind == StatementKind.PROFIT_AND_LOSS:
                return self.profit_and_loss(entity_id, start_date, end_date)
            return self.cash_flow(entity_id, start_date, end_date)

        if as_of_date is None:
            raise ValidationError(f"As of date is required for {kind.value}")
        if kind == StatementKind.BALANCE_SHEET:
            return self.balance_sheet(entity_id, as_of_date)
        return self.trial_balance(entity_id, as_of_date)


def _check_period(start_date: date, end_date: date) -> None:
    if start_date > end_date:
        raise ValidationError(f"Start date {start_date} is after end date {end_date}")


def _require_currency(entity_id: int, currency: Optional[str]) -> str:
    if not currency:
        raise MissingConfigurationError(f"Entity {entity_id} has no currency")
    return currency


def _require_chart(entity_id: int, chart: ChartOfAccountsRegistry) -> None:
    if not len(chart):
        raise MissingConfigurationError(f"Entity {entity_id} has no chart of accounts")
