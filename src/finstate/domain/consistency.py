"""Debit/credit equality check for the trial balance."""

from decimal import Decimal

DEFAULT_EPSILON = Decimal("0.01")


def check_balance(
    total_debits: Decimal, total_credits: Decimal, epsilon: Decimal = DEFAULT_EPSILON
) -> bool:
    """Return True when the debit and credit columns agree within ``epsilon``.

    The comparison is strict: a difference of exactly ``epsilon`` is
    reported as unbalanced.
    """
    return abs(Decimal(total_debits) - Decimal(total_credits)) < epsilon
