"""Bank account domain service."""

from datetime import date
from decimal import Decimal
from finstate.database.base import Database
from finstate.domain import errors
from finstate.domain.entities import BankAccount, BankStatementPeriod


class BankAccountService:
    """Service for managing bank accounts and their statement periods."""

    def __init__(self, db: Database):
        """Initialize bank account service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_bank_account(self, entity_id: int, name: str) -> int:
        """Create a bank account for an entity.

        Raises:
            NotFoundError: If the entity does not exist
            ValidationError: If the name is empty
            ConflictError: If the entity already has a bank account with that name
        """
        if self.db.get_entity(entity_id) is None:
            raise errors.NotFoundError(errors.entity_not_found(entity_id))
        name = name.strip()
        if not name:
            raise errors.ValidationError("Bank account name cannot be empty")
        for account in self.db.list_bank_accounts(entity_id, include_inactive=True):
            if account.name == name:
                raise errors.ConflictError(
                    f"Bank account '{name}' already exists for entity {entity_id}"
                )
        return self.db.create_bank_account(entity_id=entity_id, name=name)

    def list_bank_accounts(self, entity_id: int) -> list[BankAccount]:
        """List active bank accounts of an entity."""
        return self.db.list_bank_accounts(entity_id)

    def add_statement_period(
        self,
        bank_account_id: int,
        period_start: date,
        period_end: date,
        opening_balance: Decimal,
        closing_balance: Decimal,
    ) -> int:
        """Record a reconciled statement period for a bank account.

        Args:
            bank_account_id: Bank account ID
            period_start: First day covered by the statement
            period_end: Last day covered by the statement
            opening_balance: Balance at the start of the period
            closing_balance: Balance at the end of the period

        Returns:
            Statement period ID

        Raises:
            NotFoundError: If the bank account does not exist
            ValidationError: If the period ends before it starts
        """
        if self.db.get_bank_account(bank_account_id) is None:
            raise errors.NotFoundError(errors.bank_account_not_found(bank_account_id))
        if period_end < period_start:
            raise errors.ValidationError(
                f"Period end {period_end} is before period start {period_start}"
            )
        return self.db.create_statement_period(
            bank_account_id=bank_account_id,
            period_start=period_start,
            period_end=period_end,
            opening_balance=opening_balance,
            closing_balance=closing_balance,
        )

    def list_statement_periods(self, bank_account_id: int) -> list[BankStatementPeriod]:
        """List statement periods of a bank account."""
        return self.db.list_statement_periods(bank_account_id)
