"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles "123.45", "-123.45", "£1,234.56", "(123.45)" (negative in
    parentheses) and trailing "DR"/"CR" markers ("123.45 DR" is negative).

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    text = amount_str.strip().upper()

    is_negative = False
    if text.endswith("DR"):
        is_negative = True
        text = text[:-2]
    elif text.endswith("CR"):
        text = text[:-2]
    text = text.strip()

    if text.startswith("(") and text.endswith(")"):
        is_negative = not is_negative
        text = text[1:-1]

    text = re.sub(r"[$€£¥,\s]", "", text)

    try:
        amount = Decimal(text)
    except InvalidOperation:
        raise ValueError(f"Could not parse amount '{amount_str}'") from None
    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}'")
    return -amount if is_negative else amount


def parse_signed_amount(amount_str: str) -> tuple[Decimal, bool]:
    """Parse an amount into a positive amount and a debit flag.

    A negative amount is a debit (money leaving the account).

    Returns:
        Tuple of (absolute amount, is_debit)

    Raises:
        ValueError: If the string cannot be parsed or the amount is zero
    """
    amount = parse_amount(amount_str)
    if amount == 0:
        raise ValueError("Amount cannot be zero")
    return abs(amount), amount < 0
