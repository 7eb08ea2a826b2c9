"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Optional
from datetime import date
from decimal import Decimal

# Import entities directly to avoid circular import through domain/__init__.py
from finstate.domain.entities import (
    Account,
    AccountMapping,
    AccountType,
    BankAccount,
    BankStatementPeriod,
    Entity,
    PeriodAnchor,
    Transaction,
)


class Database(ABC):
    """Abstract database interface for finstate.

    This is the data-access collaborator of the statement generator. Every
    read is scoped by entity (or bank account) and returns domain records.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Entity operations
    @abstractmethod
    def create_entity(self, name: str, currency: Optional[str] = None) -> int:
        """Create a business entity. Returns entity ID."""
        pass

    @abstractmethod
    def get_entity(self, entity_id: int) -> Optional[Entity]:
        """Get entity by ID."""
        pass

    @abstractmethod
    def list_entities(self) -> list[Entity]:
        """List all entities."""
        pass

    @abstractmethod
    def get_entity_currency(self, entity_id: int) -> Optional[str]:
        """Get the entity's currency code, or None if not configured."""
        pass

    # Chart of accounts operations
    @abstractmethod
    def create_ledger_account(
        self,
        entity_id: int,
        code: str,
        name: str,
        account_type: AccountType,
        is_active: bool = True,
    ) -> int:
        """Add an account to an entity's chart. Returns row ID."""
        pass

    @abstractmethod
    def list_chart_of_accounts(
        self, entity_id: int, include_inactive: bool = False
    ) -> list[Account]:
        """List an entity's chart of accounts ordered by code."""
        pass

    # Account mapping operations
    @abstractmethod
    def create_account_mapping(
        self,
        entity_id: int,
        category: str,
        subcategory: Optional[str],
        account_code: str,
    ) -> int:
        """Create a category to account mapping. Returns mapping ID."""
        pass

    @abstractmethod
    def list_account_mappings(self, entity_id: int) -> list[AccountMapping]:
        """List an entity's category mappings in creation order."""
        pass

    # Bank account operations
    @abstractmethod
    def create_bank_account(self, entity_id: int, name: str) -> int:
        """Create a bank account. Returns bank account ID."""
        pass

    @abstractmethod
    def get_bank_account(self, bank_account_id: int) -> Optional[BankAccount]:
        """Get bank account by ID."""
        pass

    @abstractmethod
    def list_bank_accounts(
        self, entity_id: int, include_inactive: bool = False
    ) -> list[BankAccount]:
        """List an entity's bank accounts."""
        pass

    # Bank statement period operations
    @abstractmethod
    def create_statement_period(
        self,
        bank_account_id: int,
        period_start: date,
        period_end: date,
        opening_balance: Decimal,
        closing_balance: Decimal,
    ) -> int:
        """Record a reconciled statement period. Returns period ID."""
        pass

    @abstractmethod
    def list_statement_periods(self, bank_account_id: int) -> list[BankStatementPeriod]:
        """List statement periods of a bank account ordered by period end."""
        pass

    @abstractmethod
    def get_latest_statement_period(
        self,
        bank_account_id: int,
        on_or_before: date,
        anchor: PeriodAnchor = PeriodAnchor.END,
    ) -> Optional[BankStatementPeriod]:
        """Get the most recent period whose anchor date is on or before a date.

        Args:
            bank_account_id: Bank account ID
            on_or_before: Inclusive upper bound for the anchor date
            anchor: Compare and order by period_start or period_end; ties are
                broken by the latest period_end
        """
        pass

    # Transaction operations
    @abstractmethod
    def create_transaction(
        self,
        entity_id: int,
        date: date,
        amount: Decimal,
        is_debit: bool,
        category: Optional[str] = None,
        subcategory: Optional[str] = None,
        transaction_type: Optional[str] = None,
        description: Optional[str] = None,
    ) -> int:
        """Create a categorized transaction. Returns transaction ID."""
        pass

    @abstractmethod
    def list_transactions(
        self,
        entity_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[Transaction]:
        """List an entity's transactions with optional inclusive date bounds."""
        pass
