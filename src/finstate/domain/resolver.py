"""Resolution of transaction categories to ledger account codes.

Resolution runs an ordered list of strategies; the first one returning a
code wins:

1. ``MappingStrategy``: explicit (category, subcategory) mapping rows.
2. ``ChartNameStrategy``: case-insensitive substring match against the
   chart of accounts names.
3. ``KeywordStrategy``: fixed keyword table over the category text.

A missing category short-circuits to the uncategorized expense code, and
when no strategy matches the same fallback is returned. Resolution never
raises.
"""

from typing import Optional, Protocol, Sequence

from finstate.domain.chart import ChartOfAccountsRegistry
from finstate.domain.entities import AccountMapping

UNCATEGORIZED_EXPENSE_CODE = "8000"
SALES_REVENUE_CODE = "4100"
OFFICE_EXPENSES_CODE = "6100"
TRAVEL_EXPENSES_CODE = "6200"

# Evaluated in order; the first keyword found in the category wins.
DEFAULT_KEYWORD_TABLE: tuple[tuple[tuple[str, ...], str], ...] = (
    (("revenue", "income", "sales"), SALES_REVENUE_CODE),
    (("office", "supplies"), OFFICE_EXPENSES_CODE),
    (("travel",), TRAVEL_EXPENSES_CODE),
    (("software", "subscription"), OFFICE_EXPENSES_CODE),
)


class ResolutionStrategy(Protocol):
    def __call__(
        self,
        category: str,
        subcategory: Optional[str],
        mappings: Sequence[AccountMapping],
        chart: ChartOfAccountsRegistry,
    ) -> Optional[str]: ...


class MappingStrategy:
    """Exact match on category and subcategory; a missing subcategory on
    both sides counts as a match."""

    def __call__(self, category, subcategory, mappings, chart):
        for mapping in mappings:
            if mapping.category != category:
                continue
            if mapping.subcategory == subcategory or (
                not mapping.subcategory and not subcategory
            ):
                return mapping.account_code
        return None


class ChartNameStrategy:
    def __call__(self, category, subcategory, mappings, chart):
        account = chart.find_by_name(category)
        return account.code if account else None


class KeywordStrategy:
    def __init__(self, table=DEFAULT_KEYWORD_TABLE, default: Optional[str] = None):
        self.table = table
        self.default = default

    def __call__(self, category, subcategory, mappings, chart):
        lowered = category.lower()
        for keywords, code in self.table:
            if any(keyword in lowered for keyword in keywords):
                return code
        return self.default


class AccountResolver:
    """Resolve a category/subcategory pair to an account code."""

    def __init__(
        self,
        strategies: Optional[Sequence[ResolutionStrategy]] = None,
        fallback_code: str = UNCATEGORIZED_EXPENSE_CODE,
    ):
        if strategies is None:
            strategies = (MappingStrategy(), ChartNameStrategy(), KeywordStrategy())
        self.strategies = tuple(strategies)
        self.fallback_code = fallback_code

    def resolve(
        self,
        category: Optional[str],
        subcategory: Optional[str],
        mappings: Sequence[AccountMapping],
        chart: ChartOfAccountsRegistry,
    ) -> str:
        """Return the account code for a category; always returns a code."""
        if not category:
            return self.fallback_code
        for strategy in self.strategies:
            code = strategy(category, subcategory, mappings, chart)
            if code:
                return code
        return self.fallback_code
