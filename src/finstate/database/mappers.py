"""Mapper functions to convert SQLAlchemy models to domain records.

Conversion is also where rows are validated: a row that cannot become a
well-formed domain record raises ValidationError here, before any
statement builder sees it.
"""

from decimal import Decimal

from finstate.domain import entities as domain
from finstate.domain.errors import ValidationError
from finstate.database.models import (
    Entity as ORMEntity,
    LedgerAccount as ORMLedgerAccount,
    AccountMapping as ORMAccountMapping,
    BankAccount as ORMBankAccount,
    BankStatementPeriod as ORMBankStatementPeriod,
    Transaction as ORMTransaction,
)


def _decimal(value, field: str) -> Decimal:
    if value is None:
        raise ValidationError(f"Missing {field}")
    return value if isinstance(value, Decimal) else Decimal(str(value))


def entity_to_domain(orm_entity: ORMEntity) -> domain.Entity:
    """Convert SQLAlchemy Entity model to domain Entity."""
    return domain.Entity(
        id=orm_entity.id,
        name=orm_entity.name,
        currency=orm_entity.currency or None,
    )


def account_to_domain(orm_account: ORMLedgerAccount) -> domain.Account:
    """Convert SQLAlchemy LedgerAccount model to domain Account."""
    try:
        account_type = domain.AccountType(orm_account.account_type)
    except ValueError:
        raise ValidationError(
            f"Account {orm_account.code} has invalid type '{orm_account.account_type}'"
        ) from None
    return domain.Account(
        code=orm_account.code,
        name=orm_account.name,
        type=account_type,
        is_active=orm_account.is_active,
    )


def account_mapping_to_domain(orm_mapping: ORMAccountMapping) -> domain.AccountMapping:
    """Convert SQLAlchemy AccountMapping model to domain AccountMapping."""
    return domain.AccountMapping(
        category=orm_mapping.category,
        subcategory=orm_mapping.subcategory or None,
        account_code=orm_mapping.account_code,
    )


def bank_account_to_domain(orm_bank_account: ORMBankAccount) -> domain.BankAccount:
    """Convert SQLAlchemy BankAccount model to domain BankAccount."""
    return domain.BankAccount(
        id=orm_bank_account.id,
        entity_id=orm_bank_account.entity_id,
        name=orm_bank_account.name,
        is_active=orm_bank_account.is_active,
    )


def statement_period_to_domain(
    orm_period: ORMBankStatementPeriod,
) -> domain.BankStatementPeriod:
    """Convert SQLAlchemy BankStatementPeriod model to domain BankStatementPeriod."""
    if orm_period.period_end < orm_period.period_start:
        raise ValidationError(
            f"Statement period {orm_period.id} ends before it starts"
        )
    return domain.BankStatementPeriod(
        bank_account_id=orm_period.bank_account_id,
        period_start=orm_period.period_start,
        period_end=orm_period.period_end,
        opening_balance=_decimal(orm_period.opening_balance, "opening balance"),
        closing_balance=_decimal(orm_period.closing_balance, "closing balance"),
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction."""
    amount = _decimal(orm_transaction.amount, "amount")
    if amount < 0:
        raise ValidationError(
            f"Transaction {orm_transaction.id} has negative amount {amount}"
        )
    return domain.Transaction(
        id=orm_transaction.id,
        entity_id=orm_transaction.entity_id,
        date=orm_transaction.date,
        amount=amount,
        is_debit=bool(orm_transaction.is_debit),
        category=orm_transaction.category or None,
        subcategory=orm_transaction.subcategory or None,
        transaction_type=orm_transaction.transaction_type or None,
        description=orm_transaction.description,
    )
