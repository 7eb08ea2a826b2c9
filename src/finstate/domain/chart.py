"""Chart of accounts registry and setup service."""

import logging
from typing import Iterable, Iterator, Optional

from finstate.database.base import Database
from finstate.domain import errors
from finstate.domain.entities import Account, AccountMapping, AccountType

logger = logging.getLogger(__name__)

# Default UK chart of accounts: (code, name, type)
DEFAULT_UK_CHART: tuple[tuple[str, str, AccountType], ...] = (
    ("1000", "Current Assets", AccountType.ASSET),
    ("1100", "Bank Account", AccountType.ASSET),
    ("1200", "Accounts Receivable", AccountType.ASSET),
    ("1300", "Inventory", AccountType.ASSET),
    ("1400", "Prepaid Expenses", AccountType.ASSET),
    ("1500", "Fixed Assets", AccountType.ASSET),
    ("1600", "Accumulated Depreciation", AccountType.ASSET),
    ("1700", "Intangible Assets", AccountType.ASSET),
    ("2000", "Current Liabilities", AccountType.LIABILITY),
    ("2100", "Accounts Payable", AccountType.LIABILITY),
    ("2200", "Accrued Expenses", AccountType.LIABILITY),
    ("2300", "VAT Payable", AccountType.LIABILITY),
    ("2400", "Tax Payable", AccountType.LIABILITY),
    ("2500", "Long-term Liabilities", AccountType.LIABILITY),
    ("3000", "Equity", AccountType.EQUITY),
    ("3100", "Share Capital", AccountType.EQUITY),
    ("3200", "Retained Earnings", AccountType.EQUITY),
    ("3300", "Current Year Earnings", AccountType.EQUITY),
    ("4000", "Revenue", AccountType.INCOME),
    ("4100", "Sales Revenue", AccountType.INCOME),
    ("4200", "Service Revenue", AccountType.INCOME),
    ("4300", "Other Income", AccountType.INCOME),
    ("5000", "Cost of Goods Sold", AccountType.EXPENSE),
    ("5100", "Direct Costs", AccountType.EXPENSE),
    ("6000", "Operating Expenses", AccountType.EXPENSE),
    ("6100", "Office Expenses", AccountType.EXPENSE),
    ("6200", "Travel Expenses", AccountType.EXPENSE),
    ("6300", "Marketing Expenses", AccountType.EXPENSE),
    ("6400", "Professional Fees", AccountType.EXPENSE),
    ("6500", "Utilities", AccountType.EXPENSE),
    ("6600", "Insurance", AccountType.EXPENSE),
    ("6700", "Depreciation", AccountType.EXPENSE),
    ("7000", "Finance Costs", AccountType.EXPENSE),
    ("7100", "Interest Expense", AccountType.EXPENSE),
    ("8000", "Tax Expense", AccountType.EXPENSE),
)


def parse_account_type(value: str | AccountType) -> AccountType:
    """Parse an account type name.

    Raises:
        ValidationError: If the value is not a known account type
    """
    if isinstance(value, AccountType):
        return value
    try:
        return AccountType(str(value).strip().lower())
    except ValueError:
        raise errors.ValidationError(errors.invalid_account_type(value)) from None


class ChartOfAccountsRegistry:
    """Read-only view of an entity's chart of accounts, in source order."""

    def __init__(self, accounts: Iterable[Account] = ()):
        self._accounts: dict[str, Account] = {}
        for account in accounts:
            if account.code in self._accounts:
                # Keep the first definition so each code has exactly one type.
                logger.warning("Duplicate account code %s ignored", account.code)
                continue
            self._accounts[account.code] = account

    def __contains__(self, code: object) -> bool:
        return code in self._accounts

    def __iter__(self) -> Iterator[Account]:
        return iter(self._accounts.values())

    def __len__(self) -> int:
        return len(self._accounts)

    def find_by_name(self, text: str) -> Optional[Account]:
        """Find the first account whose name contains, or is contained in, ``text``.

        Matching is case-insensitive. Accounts with a blank name never match.
        """
        needle = text.lower()
        for account in self._accounts.values():
            name = account.name.lower()
            if not name:
                continue
            if needle in name or name in needle:
                return account
        return None


class ChartOfAccountsService:
    """Service for setting up an entity's chart of accounts and mappings."""

    def __init__(self, db: Database):
        """Initialize chart of accounts service.

        Args:
            db: Database instance
        """
        self.db = db

    def _require_entity(self, entity_id: int) -> None:
        if self.db.get_entity(entity_id) is None:
            raise errors.NotFoundError(errors.entity_not_found(entity_id))

    def add_account(
        self, entity_id: int, code: str, name: str, account_type: str | AccountType
    ) -> Account:
        """Add an account to an entity's chart.

        Args:
            entity_id: Entity ID
            code: Account code, unique per entity
            name: Account name
            account_type: One of asset, liability, equity, income, expense

        Returns:
            The created account

        Raises:
            NotFoundError: If the entity does not exist
            ValidationError: If code, name or type are invalid
            ConflictError: If the code is already used by the entity
        """
        self._require_entity(entity_id)
        code = code.strip()
        name = name.strip()
        if not code:
            raise errors.ValidationError("Account code cannot be empty")
        if not name:
            raise errors.ValidationError("Account name cannot be empty")
        parsed_type = parse_account_type(account_type)

        existing = {acc.code for acc in self.db.list_chart_of_accounts(entity_id, include_inactive=True)}
        if code in existing:
            raise errors.ConflictError(errors.duplicate_account_code(code, entity_id))

        self.db.create_ledger_account(
            entity_id=entity_id, code=code, name=name, account_type=parsed_type
        )
        return Account(code=code, name=name, type=parsed_type)

    def list_accounts(self, entity_id: int) -> list[Account]:
        """List active accounts of an entity in code order."""
        return self.db.list_chart_of_accounts(entity_id)

    def init_default_chart(self, entity_id: int) -> int:
        """Seed the default UK chart of accounts.

        Accounts whose code already exists are left untouched.

        Returns:
            Number of accounts created
        """
        self._require_entity(entity_id)
        existing = {acc.code for acc in self.db.list_chart_of_accounts(entity_id, include_inactive=True)}
        created = 0
        for code, name, account_type in DEFAULT_UK_CHART:
            if code in existing:
                continue
            self.db.create_ledger_account(
                entity_id=entity_id, code=code, name=name, account_type=account_type
            )
            created += 1
        logger.info("Seeded %d default accounts for entity %s", created, entity_id)
        return created

    def add_mapping(
        self,
        entity_id: int,
        category: str,
        account_code: str,
        subcategory: Optional[str] = None,
    ) -> AccountMapping:
        """Map a transaction category (and optional subcategory) to an account.

        Raises:
            NotFoundError: If the entity or the account code does not exist
            ValidationError: If the category is empty
            ConflictError: If the category pair is already mapped
        """
        self._require_entity(entity_id)
        category = category.strip()
        subcategory = subcategory.strip() if subcategory else None
        if not category:
            raise errors.ValidationError("Category cannot be empty")

        chart = ChartOfAccountsRegistry(self.db.list_chart_of_accounts(entity_id))
        if account_code not in chart:
            raise errors.NotFoundError(
                f"Account code '{account_code}' not found in chart of entity {entity_id}"
            )

        for mapping in self.db.list_account_mappings(entity_id):
            if mapping.category == category and (mapping.subcategory or None) == subcategory:
                raise errors.ConflictError(
                    errors.duplicate_mapping(category, subcategory, entity_id)
                )

        self.db.create_account_mapping(
            entity_id=entity_id,
            category=category,
            subcategory=subcategory,
            account_code=account_code,
        )
        return AccountMapping(category=category, subcategory=subcategory, account_code=account_code)

    def list_mappings(self, entity_id: int) -> list[AccountMapping]:
        """List category mappings of an entity."""
        return self.db.list_account_mappings(entity_id)
