"""Amount parsing for bank statement and command line values."""

import re
from decimal import Decimal, InvalidOperation

_CURRENCY_SYMBOLS = re.compile(r"[$€£¥₹]")


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Accepts plain numbers ("1234.50"), currency symbols ("₹1,234.50"),
    thousands separators, a leading minus sign and accounting negatives
    in parentheses ("(250.00)").

    Raises:
        ValueError: If the string is empty or not a number
    """
    if amount_str is None or not amount_str.strip():
        raise ValueError("Empty amount string")

    text = amount_str.strip()
    negative = text.startswith("(") and text.endswith(")")
    if negative:
        text = text[1:-1]

    text = _CURRENCY_SYMBOLS.sub("", text).replace(",", "").strip()

    try:
        amount = Decimal(text)
    except InvalidOperation:
        raise ValueError(f"Could not parse amount '{amount_str.strip()}'") from None
    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str.strip()}'")

    return -amount if negative else amount
