"""Point-in-time cash balances from bank statement periods.

Bank cash is sourced from the closing/opening balances of reconciled
statement periods, independently of ledger aggregation. Each bank account
is looked up on its own; the lookups run on a bounded thread pool since
none depends on another.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from operator import attrgetter
from typing import Callable, Iterable, Optional, Sequence

from finstate.database.base import Database
from finstate.domain.entities import BankAccount, BankStatementPeriod, PeriodAnchor
from finstate.domain.errors import QueryFailure

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
DEFAULT_MAX_WORKERS = 4


@dataclass(frozen=True)
class CashPosition:
    """Cash at the beginning and end of a period."""

    beginning: Decimal
    ending: Decimal


def select_latest_period(
    periods: Iterable[BankStatementPeriod],
    on_or_before: date,
    anchor: PeriodAnchor = PeriodAnchor.END,
) -> Optional[BankStatementPeriod]:
    """Pick the most recent period whose anchor date is on or before a date.

    With ``PeriodAnchor.END`` periods are compared and ordered by
    ``period_end``, ties broken by the latest ``period_start``. With
    ``PeriodAnchor.START`` they are compared and ordered by ``period_start``,
    ties broken by the latest ``period_end``. Periods equal on both dates
    resolve to the one recorded last, matching the database ordering by id.
    """
    if anchor == PeriodAnchor.START:
        candidates = [p for p in periods if p.period_start <= on_or_before]
        key = attrgetter("period_start", "period_end")
    else:
        candidates = [p for p in periods if p.period_end <= on_or_before]
        key = attrgetter("period_end", "period_start")
    if not candidates:
        return None
    return max(reversed(candidates), key=key)


class BankBalanceTracker:
    """Resolve cash balances of an entity's bank accounts."""

    def __init__(
        self,
        db: Database,
        max_workers: int = DEFAULT_MAX_WORKERS,
        strict: bool = False,
    ):
        """Initialize bank balance tracker.

        Args:
            db: Database used for statement period lookups
            max_workers: Upper bound on concurrent lookups per call
            strict: If True, raise QueryFailure instead of counting a
                failed lookup as zero
        """
        self.db = db
        self.max_workers = max(1, max_workers)
        self.strict = strict

    def latest_period(
        self, bank_account_id: int, on_or_before: date, anchor: PeriodAnchor
    ) -> Optional[BankStatementPeriod]:
        """Look up the latest period of one account; failures yield None."""
        try:
            return self.db.get_latest_statement_period(bank_account_id, on_or_before, anchor)
        except Exception as exc:
            failure = QueryFailure("latest_statement_period", bank_account_id, exc)
            if self.strict:
                raise failure from exc
            logger.warning("%s; counting as zero", failure, exc_info=True)
            return None

    def _fan_out(
        self,
        bank_accounts: Sequence[BankAccount],
        lookup: Callable[[BankAccount], Decimal],
    ) -> dict[int, Decimal]:
        if not bank_accounts:
            return {}
        workers = min(self.max_workers, len(bank_accounts))
        with ThreadPoolExecutor(max_workers=workers) as pool:
            amounts = list(pool.map(lookup, bank_accounts))
        return {account.id: amount for account, amount in zip(bank_accounts, amounts)}

    def closing_balances(
        self, bank_accounts: Sequence[BankAccount], as_of: date
    ) -> dict[int, Decimal]:
        """Closing balance per bank account as of a date (zero when unknown)."""

        def lookup(account: BankAccount) -> Decimal:
            period = self.latest_period(account.id, as_of, PeriodAnchor.END)
            return period.closing_balance if period else ZERO

        return self._fan_out(bank_accounts, lookup)

    def cash_as_of(self, bank_accounts: Sequence[BankAccount], as_of: date) -> Decimal:
        """Total bank cash as of a date."""
        return sum(self.closing_balances(bank_accounts, as_of).values(), ZERO)

    def cash_for_period(
        self, bank_accounts: Sequence[BankAccount], start: date, end: date
    ) -> CashPosition:
        """Beginning and ending cash for a date range.

        Beginning cash sums the opening balance of the latest period starting
        on or before ``start``; ending cash sums the closing balance of the
        latest period ending on or before ``end``.
        """

        def opening(account: BankAccount) -> Decimal:
            period = self.latest_period(account.id, start, PeriodAnchor.START)
            return period.opening_balance if period else ZERO

        beginning = sum(self._fan_out(bank_accounts, opening).values(), ZERO)
        ending = self.cash_as_of(bank_accounts, end)
        return CashPosition(beginning=beginning, ending=ending)
