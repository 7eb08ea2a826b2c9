"""Per-account balance aggregation.

Each account accumulates its raw ``debits`` and ``credits`` columns. The
signed ``balance`` is derived from them by the account's normal side:
asset and expense accounts grow with debits, liability, equity and income
accounts grow with credits. The trial balance reports the raw columns; the
balance sheet reports the signed balance.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from finstate.domain.chart import ChartOfAccountsRegistry
from finstate.domain.entities import AccountMapping, AccountType, Transaction
from finstate.domain.resolver import AccountResolver

logger = logging.getLogger(__name__)

ZERO = Decimal("0")

# Reserved bucket holding aggregated bank-account cash
CASH_ACCOUNT_CODE = "1100"
CASH_ACCOUNT_NAME = "Bank Account"


@dataclass(frozen=True)
class AccountBalance:
    """Aggregated activity of one account."""

    code: str
    name: str
    type: AccountType
    debits: Decimal = ZERO
    credits: Decimal = ZERO
    carried: Decimal = ZERO
    count: int = 0

    @property
    def balance(self) -> Decimal:
        """Signed balance under the account type's normal-balance convention."""
        if self.type.is_debit_normal:
            movement = self.debits - self.credits
        else:
            movement = self.credits - self.debits
        return self.carried + movement

    @property
    def gross(self) -> Decimal:
        """Sum of transaction amounts regardless of direction."""
        return self.debits + self.credits


class BalanceAggregator:
    """Accumulate balances per account code from a transaction set."""

    def __init__(self, resolver: Optional[AccountResolver] = None):
        self.resolver = resolver or AccountResolver()

    def aggregate(
        self,
        transactions: Iterable[Transaction],
        chart: ChartOfAccountsRegistry,
        mappings: Sequence[AccountMapping] = (),
        bank_cash: Decimal = ZERO,
    ) -> dict[str, AccountBalance]:
        """Aggregate transactions into per-account balances.

        Args:
            transactions: Transactions to aggregate
            chart: Chart of accounts of the entity
            mappings: Category to account mappings of the entity
            bank_cash: Aggregated bank cash merged into the cash bucket

        Returns:
            Balances keyed by account code, in chart order, with the cash
            bucket appended when the chart has no account with its code
        """
        names: dict[str, tuple[str, AccountType]] = {
            acc.code: (acc.name, acc.type) for acc in chart
        }
        names.setdefault(CASH_ACCOUNT_CODE, (CASH_ACCOUNT_NAME, AccountType.ASSET))

        debits = dict.fromkeys(names, ZERO)
        credits = dict.fromkeys(names, ZERO)
        counts = dict.fromkeys(names, 0)

        resolved: dict[tuple[Optional[str], Optional[str]], str] = {}
        skipped = 0
        for txn in transactions:
            key = (txn.category, txn.subcategory)
            code = resolved.get(key)
            if code is None:
                code = self.resolver.resolve(txn.category, txn.subcategory, mappings, chart)
                resolved[key] = code
            if code not in names:
                skipped += 1
                continue
            if txn.is_debit:
                debits[code] += txn.amount
            else:
                credits[code] += txn.amount
            counts[code] += 1

        if skipped:
            logger.debug("%d transactions resolved to codes outside the chart", skipped)

        return {
            code: AccountBalance(
                code=code,
                name=name,
                type=account_type,
                debits=debits[code],
                credits=credits[code],
                carried=bank_cash if code == CASH_ACCOUNT_CODE else ZERO,
                count=counts[code],
            )
            for code, (name, account_type) in names.items()
        }
