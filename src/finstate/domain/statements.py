"""Statement builders.

Every builder is a stateless, pure transform: it takes already-read inputs
(aggregated balances, raw transactions, bank cash) and returns an immutable
report. Data access lives in ``FinancialStatementService``.
"""

import logging
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Iterable, Mapping

from finstate.domain.aggregator import AccountBalance
from finstate.domain.bank_balances import CashPosition
from finstate.domain.chart import ChartOfAccountsRegistry
from finstate.domain.consistency import DEFAULT_EPSILON, check_balance
from finstate.domain.entities import AccountType, Transaction
from finstate.domain.errors import reconciliation_mismatch
from finstate.domain.reports import (
    AssetSection,
    BalanceSheet,
    CashFlowItem,
    CashFlowSection,
    CashFlowStatement,
    LiabilitySection,
    OperatingActivities,
    ProfitAndLossStatement,
    StatementLine,
    StatementSection,
    TrialBalance,
    TrialBalanceRow,
)

logger = logging.getLogger(__name__)

ZERO = Decimal("0")

CURRENT_ASSET_PREFIX = "1"
CURRENT_LIABILITY_PREFIX = "2"


def _line(balance: AccountBalance, amount: Decimal) -> StatementLine:
    return StatementLine(account_code=balance.code, account_name=balance.name, amount=amount)


class ProfitAndLossBuilder:
    """Revenue and expenses from aggregated balances.

    Item amounts are the gross activity routed to each account: transaction
    amounts are summed without regard to their debit/credit direction.
    Accounts without transactions are not listed.
    """

    def build(
        self,
        balances: Mapping[str, AccountBalance],
        period_start: date,
        period_end: date,
        currency: str,
    ) -> ProfitAndLossStatement:
        revenue = []
        expenses = []
        for balance in balances.values():
            if not balance.count:
                continue
            if balance.type == AccountType.INCOME:
                revenue.append(_line(balance, balance.gross))
            elif balance.type == AccountType.EXPENSE:
                expenses.append(_line(balance, balance.gross))

        revenue_section = StatementSection.from_items(revenue)
        expense_section = StatementSection.from_items(expenses)
        return ProfitAndLossStatement(
            period_start=period_start,
            period_end=period_end,
            revenue=revenue_section,
            expenses=expense_section,
            net_income=revenue_section.total - expense_section.total,
            currency=currency,
        )


class BalanceSheetBuilder:
    """Assets, liabilities and equity from signed balances.

    Asset accounts with a code starting with "1" are current, others fixed.
    Liability accounts starting with "2" are current, others long term.
    """

    def build(
        self,
        balances: Mapping[str, AccountBalance],
        as_of_date: date,
        currency: str,
    ) -> BalanceSheet:
        current_assets = []
        fixed_assets = []
        current_liabilities = []
        long_term_liabilities = []
        equity = []

        for balance in balances.values():
            line = _line(balance, balance.balance)
            if balance.type == AccountType.ASSET:
                if balance.code.startswith(CURRENT_ASSET_PREFIX):
                    current_assets.append(line)
                else:
                    fixed_assets.append(line)
            elif balance.type == AccountType.LIABILITY:
                if balance.code.startswith(CURRENT_LIABILITY_PREFIX):
                    current_liabilities.append(line)
                else:
                    long_term_liabilities.append(line)
            elif balance.type == AccountType.EQUITY:
                equity.append(line)

        assets = AssetSection.from_sections(
            StatementSection.from_items(current_assets),
            StatementSection.from_items(fixed_assets),
        )
        liabilities = LiabilitySection.from_sections(
            StatementSection.from_items(current_liabilities),
            StatementSection.from_items(long_term_liabilities),
        )
        equity_section = StatementSection.from_items(equity)
        sheet = BalanceSheet(
            as_of_date=as_of_date,
            assets=assets,
            liabilities=liabilities,
            equity=equity_section,
            total_liabilities_and_equity=liabilities.total + equity_section.total,
            currency=currency,
        )
        if sheet.imbalance:
            logger.info("Balance sheet as of %s differs by %s", as_of_date, sheet.imbalance)
        return sheet


class CashFlowActivity(str, Enum):
    OPERATING = "operating"
    INVESTING = "investing"
    FINANCING = "financing"


_DEFAULT_DESCRIPTIONS = {
    CashFlowActivity.OPERATING: "Operating",
    CashFlowActivity.INVESTING: "Investment",
    CashFlowActivity.FINANCING: "Financing",
}


def classify_cash_flow(txn: Transaction) -> CashFlowActivity:
    """Classify a transaction into a cash flow activity."""
    if txn.transaction_type == "transfer" or (txn.category and "Investment" in txn.category):
        return CashFlowActivity.INVESTING
    if txn.transaction_type in ("deposit", "withdrawal"):
        return CashFlowActivity.FINANCING
    return CashFlowActivity.OPERATING


class CashFlowBuilder:
    """Cash flow statement from raw transactions and bank cash.

    Working capital changes are the difference between operating cash and
    net income. Beginning and ending cash come from bank statements and are
    not reconciled against the net change in cash.
    """

    def build(
        self,
        transactions: Iterable[Transaction],
        net_income: Decimal,
        cash: CashPosition,
        period_start: date,
        period_end: date,
        currency: str,
    ) -> CashFlowStatement:
        buckets: dict[CashFlowActivity, list[CashFlowItem]] = {
            activity: [] for activity in CashFlowActivity
        }
        for txn in transactions:
            activity = classify_cash_flow(txn)
            buckets[activity].append(
                CashFlowItem(
                    description=txn.category or _DEFAULT_DESCRIPTIONS[activity],
                    amount=txn.cash_amount,
                )
            )

        operating = CashFlowSection.from_items(buckets[CashFlowActivity.OPERATING])
        investing = CashFlowSection.from_items(buckets[CashFlowActivity.INVESTING])
        financing = CashFlowSection.from_items(buckets[CashFlowActivity.FINANCING])

        return CashFlowStatement(
            period_start=period_start,
            period_end=period_end,
            operating_activities=OperatingActivities(
                net_income=net_income,
                adjustments=(),
                changes_in_working_capital=operating.total - net_income,
                total=operating.total,
            ),
            investing_activities=investing,
            financing_activities=financing,
            net_change_in_cash=operating.total + investing.total + financing.total,
            beginning_cash=cash.beginning,
            ending_cash=cash.ending,
            currency=currency,
        )


class TrialBalanceBuilder:
    """Debit and credit columns for every chart account.

    The columns are the raw transaction amounts split by direction; no
    normal-balance sign convention is applied.
    """

    def __init__(self, epsilon: Decimal = DEFAULT_EPSILON):
        self.epsilon = epsilon

    def build(
        self,
        balances: Mapping[str, AccountBalance],
        chart: ChartOfAccountsRegistry,
        as_of_date: date,
    ) -> TrialBalance:
        rows = []
        for account in chart:
            balance = balances.get(account.code)
            rows.append(
                TrialBalanceRow(
                    account_code=account.code,
                    account_name=account.name,
                    account_type=account.type,
                    debit_balance=balance.debits if balance else ZERO,
                    credit_balance=balance.credits if balance else ZERO,
                )
            )

        total_debits = sum((row.debit_balance for row in rows), ZERO)
        total_credits = sum((row.credit_balance for row in rows), ZERO)
        is_balanced = check_balance(total_debits, total_credits, self.epsilon)
        if not is_balanced:
            logger.warning(reconciliation_mismatch(total_debits, total_credits))

        return TrialBalance(
            as_of_date=as_of_date,
            accounts=tuple(rows),
            total_debits=total_debits,
            total_credits=total_credits,
            is_balanced=is_balanced,
        )
