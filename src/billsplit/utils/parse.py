from __future__ import annotations

import re
from decimal import Decimal

from billsplit.utils.money import to_decimal


AMOUNT_RE = re.compile(r"^-?\d+(\.\d+)?$")


def parse_amount(text: str) -> Decimal:
    """
    Parse a money amount typed by a user.

    Accepted:
    - 1500
    - 1,500.50
    - ₱1,500.50
    - $ 12.5
    """
    cleaned = re.sub(r"[^\d.,\-]", "", text.strip()).replace(",", "")
    if not AMOUNT_RE.match(cleaned):
        raise ValueError(f"Invalid amount: {text!r}")
    return to_decimal(cleaned)


def parse_names(text: str) -> list[str]:
    return [part.strip() for part in text.split(",") if part.strip()]
