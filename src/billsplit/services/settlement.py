from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Sequence

from billsplit.models import Balance, CalculationResult, Participant, Payment, Settlement
from billsplit.utils.money import TOLERANCE, ZERO, Amount, round2, to_decimal


@dataclass(slots=True)
class _Outstanding:
    name: str
    amount: Decimal


def per_person_share(total_bill: Decimal, count: int) -> Decimal:
    if count == 0:
        return ZERO
    return round2(total_bill / count)


def calculate_balances(
    participants: Sequence[Participant],
    payments: Sequence[Payment],
    share: Decimal,
) -> list[Balance]:
    paid: dict[int, Decimal] = {p.id: ZERO for p in participants}
    for payment in payments:
        if payment.payer_id in paid:
            paid[payment.payer_id] += to_decimal(payment.amount)

    return [
        Balance(
            id=p.id,
            name=p.name,
            paid=paid[p.id],
            balance=round2(paid[p.id] - share),
        )
        for p in participants
    ]


def generate_settlements(balances: Sequence[Balance]) -> list[Settlement]:
    creditors = [_Outstanding(b.name, b.balance) for b in balances if b.is_creditor]
    debtors = [_Outstanding(b.name, -b.balance) for b in balances if b.is_debtor]

    # sort() is stable, equal amounts keep participant order
    creditors.sort(key=lambda x: x.amount, reverse=True)
    debtors.sort(key=lambda x: x.amount, reverse=True)

    settlements: list[Settlement] = []
    i, j = 0, 0

    while i < len(debtors) and j < len(creditors):
        debtor = debtors[i]
        creditor = creditors[j]

        amount = min(debtor.amount, creditor.amount)
        if amount > TOLERANCE:
            settlements.append(Settlement(from_name=debtor.name, to_name=creditor.name, amount=round2(amount)))

        debtor.amount -= amount
        creditor.amount -= amount

        if debtor.amount < TOLERANCE:
            i += 1
        if creditor.amount < TOLERANCE:
            j += 1

    return settlements


def calculate(
    total_bill: Amount,
    participants: Sequence[Participant],
    payments: Sequence[Payment],
) -> CalculationResult:
    """Split ``total_bill`` equally and settle the differences.

    Inputs are expected to have passed ``validate``; nothing is re-checked
    here apart from the empty participant list.
    """
    total_bill = to_decimal(total_bill)
    share = per_person_share(total_bill, len(participants))
    balances = calculate_balances(participants, payments, share)
    settlements = generate_settlements(balances)
    total_paid = round2(sum((to_decimal(p.amount) for p in payments), ZERO))

    return CalculationResult(
        total_bill=total_bill,
        total_paid=total_paid,
        per_person_share=share,
        balances=balances,
        settlements=settlements,
        participants=list(participants),
        payments=list(payments),
    )
