"""Transaction domain service."""

from typing import Optional
from datetime import date
from decimal import Decimal
from finstate.database.base import Database
from finstate.domain import errors
from finstate.domain.entities import Transaction

TRANSACTION_TYPES = ("payment", "receipt", "transfer", "deposit", "withdrawal")


class TransactionService:
    """Service for recording categorized transactions.

    Categorization happens upstream; this service only stores the result.
    """

    def __init__(self, db: Database):
        """Initialize transaction service.

        Args:
            db: Database instance
        """
        self.db = db

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
        """Record a categorized transaction.

        Args:
            entity_id: Entity ID
            date: Transaction date
            amount: Positive transaction amount
            is_debit: True if money left the account
            category: Optional category
            subcategory: Optional subcategory
            transaction_type: Optional type (payment, receipt, transfer,
                deposit, withdrawal)
            description: Optional description

        Returns:
            Transaction ID

        Raises:
            NotFoundError: If the entity does not exist
            ValidationError: If the amount is not positive or the type is unknown
        """
        if self.db.get_entity(entity_id) is None:
            raise errors.NotFoundError(errors.entity_not_found(entity_id))

        if not amount.is_finite() or amount <= 0:
            raise errors.ValidationError(
                f"Transaction amount must be positive, got {amount}"
            )

        if transaction_type is not None:
            transaction_type = transaction_type.strip().lower()
            if transaction_type not in TRANSACTION_TYPES:
                raise errors.ValidationError(
                    f"Invalid transaction type '{transaction_type}'. "
                    f"Expected one of: {', '.join(TRANSACTION_TYPES)}"
                )

        return self.db.create_transaction(
            entity_id=entity_id,
            date=date,
            amount=amount,
            is_debit=is_debit,
            category=category or None,
            subcategory=subcategory or None,
            transaction_type=transaction_type,
            description=description,
        )

    def list_transactions(
        self,
        entity_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[Transaction]:
        """List transactions of an entity within optional date bounds."""
        return self.db.list_transactions(entity_id, start_date=start_date, end_date=end_date)
