from __future__ import annotations

from typing import Optional, Sequence

from billsplit.models import Participant, Payment, PaymentWarning, ValidationResult
from billsplit.utils.money import TOLERANCE, ZERO, Amount, round2, to_decimal

MIN_PARTICIPANTS = 2
MAX_PARTICIPANTS = 20


def validate(
    total_bill: Optional[Amount],
    participants: Sequence[Participant],
    payments: Sequence[Payment],
) -> ValidationResult:
    errors: list[str] = []
    bill = to_decimal(total_bill) if total_bill is not None else None
    amounts = [to_decimal(p.amount) for p in payments]

    if bill is None or bill <= 0:
        errors.append("Total bill must be greater than zero")

    if len(participants) < MIN_PARTICIPANTS:
        errors.append("At least 2 participants required")

    if len(participants) > MAX_PARTICIPANTS:
        errors.append("Maximum 20 participants allowed")

    if any(not (p.name or "").strip() for p in participants):
        errors.append("All participants must have names")

    if not payments:
        errors.append("At least one payment required")

    if any(amount <= 0 for amount in amounts):
        errors.append("All payments must be positive amounts")

    total_paid = sum(amounts, ZERO)
    difference = abs(total_paid - (bill or ZERO))

    warning = PaymentWarning.NONE
    if difference > TOLERANCE:
        warning = PaymentWarning.OVERPAID if total_paid > (bill or ZERO) else PaymentWarning.UNDERPAID

    return ValidationResult(
        valid=not errors,
        errors=errors,
        warning=warning,
        difference=round2(difference),
    )
