"""Domain model entities for finstate.

These are pure data classes representing ledger concepts, independent of
database schema. Rows coming from storage are converted into these records
at the boundary, so the statement builders only operate on closed types.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional


class AccountType(str, Enum):
    """Ledger account type."""

    ASSET = "asset"
    LIABILITY = "liability"
    EQUITY = "equity"
    INCOME = "income"
    EXPENSE = "expense"

    @property
    def is_debit_normal(self) -> bool:
        """True for account types whose balance increases with a debit."""
        return self in (AccountType.ASSET, AccountType.EXPENSE)


class PeriodAnchor(str, Enum):
    """Which end of a statement period is compared against a date."""

    START = "start"
    END = "end"


@dataclass(frozen=True)
class Entity:
    """Business entity that owns a chart of accounts and bank accounts."""

    id: int
    name: str
    currency: Optional[str] = None


@dataclass(frozen=True)
class Account:
    """Chart of accounts entry."""

    code: str
    name: str
    type: AccountType
    is_active: bool = True


@dataclass(frozen=True)
class AccountMapping:
    """Lookup row from the category taxonomy to a ledger account code."""

    category: str
    subcategory: Optional[str]
    account_code: str


@dataclass(frozen=True)
class BankAccount:
    """Bank account belonging to an entity."""

    id: int
    entity_id: int
    name: str
    is_active: bool = True


@dataclass(frozen=True)
class BankStatementPeriod:
    """A closed reconciliation window of a bank account."""

    bank_account_id: int
    period_start: date
    period_end: date
    opening_balance: Decimal
    closing_balance: Decimal


@dataclass(frozen=True)
class Transaction:
    """Categorized transaction.

    ``amount`` is always positive; the direction is carried by ``is_debit``.
    """

    id: int
    entity_id: int
    date: date
    amount: Decimal
    is_debit: bool
    category: Optional[str] = None
    subcategory: Optional[str] = None
    transaction_type: Optional[str] = None
    description: Optional[str] = None

    @property
    def cash_amount(self) -> Decimal:
        """Signed cash movement: debits leave the bank, credits come in."""
        return -self.amount if self.is_debit else self.amount
