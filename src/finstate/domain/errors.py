"""Shared domain error messages and error types."""

from decimal import Decimal


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class MissingConfigurationError(DomainError):
    """Entity lacks a currency or a chart of accounts."""


class QueryFailure(DomainError):
    """A read from the data-access collaborator failed."""

    def __init__(self, query: str, entity_id: object, cause: BaseException):
        super().__init__(f"Query '{query}' failed for {entity_id}: {cause}")
        self.query = query
        self.entity_id = entity_id
        self.cause = cause


def entity_not_found(entity_id: int) -> str:
    """Return message for missing entity."""
    return f"Entity {entity_id} not found"


def bank_account_not_found(bank_account_id: int) -> str:
    """Return message for missing bank account."""
    return f"Bank account {bank_account_id} not found"


def duplicate_account_code(code: str, entity_id: int) -> str:
    """Return message for an account code already in the chart."""
    return f"Account code '{code}' already exists for entity {entity_id}"


def duplicate_mapping(category: str, subcategory: str | None, entity_id: int) -> str:
    """Return message for a category mapping that already exists."""
    label = category if not subcategory else f"{category} > {subcategory}"
    return f"Mapping for '{label}' already exists for entity {entity_id}"


def invalid_account_type(value: str) -> str:
    """Return message for an unknown account type."""
    return (
        f"Invalid account type '{value}'. "
        "Expected one of: asset, liability, equity, income, expense"
    )


def reconciliation_mismatch(total_debits: Decimal, total_credits: Decimal) -> str:
    """Return message for a trial balance whose columns do not agree."""
    return (
        f"Trial balance out of balance: debits {total_debits} "
        f"vs credits {total_credits} (difference {total_debits - total_credits})"
    )
