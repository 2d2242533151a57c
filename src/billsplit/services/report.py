from __future__ import annotations

from decimal import Decimal
from typing import Optional

from billsplit.config import get_settings
from billsplit.models import CalculationResult, PaymentWarning, ValidationResult
from billsplit.utils.money import Amount, round2

SHARE_TITLE = "Split the Bill Results"
ALL_SETTLED = "Everyone is settled!"


def format_currency(amount: Amount, symbol: Optional[str] = None) -> str:
    if symbol is None:
        symbol = get_settings().currency_symbol
    return f"{symbol}{round2(amount):,.2f}"


def format_warning(validation: ValidationResult, symbol: Optional[str] = None) -> Optional[str]:
    difference = format_currency(validation.difference, symbol)
    if validation.warning is PaymentWarning.OVERPAID:
        return f"Note: Total paid is {difference} more than the bill. The extra will be refunded."
    if validation.warning is PaymentWarning.UNDERPAID:
        return f"Note: Total paid is {difference} less than the bill. The remaining amount will be split."
    return None


def format_payment_lines(result: CalculationResult, symbol: Optional[str] = None) -> list[str]:
    lines = []
    for payment in result.payments:
        payer = result.participant_name(payment.payer_id) or f"#{payment.payer_id}"
        lines.append(f"{payer} paid {format_currency(payment.amount, symbol)}")
    lines.append(f"Total Paid: {format_currency(result.total_paid, symbol)}")
    return lines


def format_settlement_lines(result: CalculationResult, symbol: Optional[str] = None) -> list[str]:
    if not result.settlements:
        return [ALL_SETTLED]
    return [
        f"{s.from_name} → {s.to_name}: {format_currency(s.amount, symbol)}"
        for s in result.settlements
    ]


def format_share_text(result: CalculationResult, symbol: Optional[str] = None) -> str:
    """Plain-text summary used for sharing or copying to the clipboard."""
    lines = [
        SHARE_TITLE,
        "",
        f"Total Bill: {format_currency(result.total_bill, symbol)}",
        f"Per Person: {format_currency(result.per_person_share, symbol)}",
        "",
        "Settlements:",
    ]
    lines.extend(
        f"{s.from_name} → {s.to_name}: {format_currency(s.amount, symbol)}"
        for s in result.settlements
    )
    return "\n".join(lines)


def format_balance(balance: Decimal, symbol: Optional[str] = None) -> str:
    sign = "+" if balance > 0 else ""
    return f"{sign}{format_currency(balance, symbol)}"
