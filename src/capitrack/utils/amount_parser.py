"""Amount parsing utilities."""

import re
from decimal import Decimal, InvalidOperation
from typing import Optional

CURRENCY_SYMBOLS = {
    "$": "USD",
    "€": "EUR",
    "£": "GBP",
    "¥": "CNY",
    "₩": "KRW",
}


def parse_money(amount_str: str) -> tuple[Decimal, Optional[str]]:
    """Parse an amount with an optional currency into (amount, code).

    Handles:
    - "123.45", "1,234.56"
    - "$123.45" (symbol mapped to a currency code)
    - "123.45 EUR", "EUR 123.45"

    Amounts are magnitudes; the transaction type carries the direction, so
    negative values are rejected.

    Args:
        amount_str: Amount string

    Returns:
        Tuple of (amount, currency code or None)

    Raises:
        ValueError: If the string cannot be parsed or is negative
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    text = amount_str.strip()
    currency = None

    code = re.search(r"\b([A-Za-z]{3})\b", text)
    if code:
        currency = code.group(1).upper()
        text = text[: code.start()] + text[code.end():]

    for symbol, symbol_code in CURRENCY_SYMBOLS.items():
        if symbol in text:
            currency = currency or symbol_code
            text = text.replace(symbol, "")

    text = text.replace(",", "").strip()

    try:
        amount = Decimal(text)
    except InvalidOperation as e:
        raise ValueError(f"Could not parse amount '{amount_str}': {e}")

    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}'")
    if amount < 0:
        raise ValueError(f"Amount must not be negative: '{amount_str}'")
    return amount, currency


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a non-negative Decimal, ignoring currency."""
    amount, _ = parse_money(amount_str)
    return amount
