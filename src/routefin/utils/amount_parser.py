"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles various formats:
    - "123.45"
    - "$123.45"
    - "1,234.56"
    - "MXN 1,234.56"

    Ledger amounts are never negative, so a leading minus sign or
    parentheses notation is rejected.

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string cannot be parsed or is negative
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    amount_str = amount_str.strip()
    if amount_str.startswith("(") and amount_str.endswith(")"):
        raise ValueError(f"Amount must not be negative: '{amount_str}'")

    # Remove currency symbols and codes
    amount_str = re.sub(r"[$€£¥]|\b(MXN|USD)\b", "", amount_str, flags=re.IGNORECASE)
    amount_str = amount_str.replace(",", "").strip()

    try:
        amount = Decimal(amount_str)
    except InvalidOperation as e:
        raise ValueError(f"Could not parse amount '{amount_str}': {e}")
    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}'")
    if amount < 0:
        raise ValueError(f"Amount must not be negative: '{amount_str}'")
    return amount


def parse_rate(rate_str: str) -> Decimal:
    """Parse a loan rate, either as a fraction ("0.4") or a percentage ("40%").

    Raises:
        ValueError: If the rate cannot be parsed or is negative
    """
    rate_str = rate_str.strip()
    if rate_str.endswith("%"):
        return parse_amount(rate_str[:-1]) / 100
    return parse_amount(rate_str)
