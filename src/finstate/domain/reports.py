"""Financial statement value objects.

Reports are immutable and never persisted by the generator. Totals of a
section are computed from its items when the section is built, so parent
totals always agree with their sub-sections. ``to_dict()`` produces the
JSON shape consumed by reporting and export collaborators.
"""

from dataclasses import asdict, dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, Iterable

from finstate.domain.entities import AccountType

ZERO = Decimal("0")


def _jsonable(value: Any) -> Any:
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {key: _jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(item) for item in value]
    return value


class _Report:
    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable dict of the report."""
        return _jsonable(asdict(self))


@dataclass(frozen=True)
class StatementLine:
    """One account line of a statement section."""

    account_code: str
    account_name: str
    amount: Decimal


@dataclass(frozen=True)
class StatementSection:
    """List of account lines with their total."""

    total: Decimal = ZERO
    items: tuple[StatementLine, ...] = ()

    @classmethod
    def from_items(cls, items: Iterable[StatementLine]) -> "StatementSection":
        items = tuple(items)
        return cls(total=sum((item.amount for item in items), ZERO), items=items)


@dataclass(frozen=True)
class AssetSection:
    current: StatementSection
    fixed: StatementSection
    total: Decimal

    @classmethod
    def from_sections(cls, current: StatementSection, fixed: StatementSection) -> "AssetSection":
        return cls(current=current, fixed=fixed, total=current.total + fixed.total)


@dataclass(frozen=True)
class LiabilitySection:
    current: StatementSection
    long_term: StatementSection
    total: Decimal

    @classmethod
    def from_sections(
        cls, current: StatementSection, long_term: StatementSection
    ) -> "LiabilitySection":
        return cls(current=current, long_term=long_term, total=current.total + long_term.total)


@dataclass(frozen=True)
class ProfitAndLossStatement(_Report):
    """Revenue and expenses over a period."""

    period_start: date
    period_end: date
    revenue: StatementSection
    expenses: StatementSection
    net_income: Decimal
    currency: str


@dataclass(frozen=True)
class BalanceSheet(_Report):
    """Assets, liabilities and equity as of a date."""

    as_of_date: date
    assets: AssetSection
    liabilities: LiabilitySection
    equity: StatementSection
    total_liabilities_and_equity: Decimal
    currency: str

    @property
    def imbalance(self) -> Decimal:
        """Assets minus liabilities and equity. Not asserted to be zero."""
        return self.assets.total - self.total_liabilities_and_equity


@dataclass(frozen=True)
class CashFlowItem:
    description: str
    amount: Decimal


@dataclass(frozen=True)
class CashFlowSection:
    total: Decimal = ZERO
    items: tuple[CashFlowItem, ...] = ()

    @classmethod
    def from_items(cls, items: Iterable[CashFlowItem]) -> "CashFlowSection":
        items = tuple(items)
        return cls(total=sum((item.amount for item in items), ZERO), items=items)


@dataclass(frozen=True)
class OperatingActivities:
    net_income: Decimal
    adjustments: tuple[CashFlowItem, ...]
    changes_in_working_capital: Decimal
    total: Decimal


@dataclass(frozen=True)
class CashFlowStatement(_Report):
    """Cash movement over a period split by activity."""

    period_start: date
    period_end: date
    operating_activities: OperatingActivities
    investing_activities: CashFlowSection
    financing_activities: CashFlowSection
    net_change_in_cash: Decimal
    beginning_cash: Decimal
    ending_cash: Decimal
    currency: str

    @property
    def unexplained_cash_change(self) -> Decimal:
        """Bank-reported cash change not explained by the classified flows."""
        return self.ending_cash - self.beginning_cash - self.net_change_in_cash


@dataclass(frozen=True)
class TrialBalanceRow:
    account_code: str
    account_name: str
    account_type: AccountType
    debit_balance: Decimal
    credit_balance: Decimal


@dataclass(frozen=True)
class TrialBalance(_Report):
    """Debit and credit columns of every chart account."""

    as_of_date: date
    accounts: tuple[TrialBalanceRow, ...]
    total_debits: Decimal
    total_credits: Decimal
    is_balanced: bool
