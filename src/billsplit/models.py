from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any

from billsplit.utils.money import TOLERANCE, ZERO, to_float


class PaymentWarning(str, Enum):
    NONE = "none"
    OVERPAID = "overpaid"
    UNDERPAID = "underpaid"


@dataclass(slots=True, frozen=True)
class Participant:
    id: int
    name: str

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name}


@dataclass(slots=True, frozen=True)
class Payment:
    id: int
    payer_id: int
    amount: Decimal

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "payer_id": self.payer_id, "amount": to_float(self.amount)}


@dataclass(slots=True, frozen=True)
class Balance:
    id: int
    name: str
    paid: Decimal
    balance: Decimal

    @property
    def is_creditor(self) -> bool:
        return self.balance > TOLERANCE

    @property
    def is_debtor(self) -> bool:
        return self.balance < -TOLERANCE

    @property
    def is_settled(self) -> bool:
        return not (self.is_creditor or self.is_debtor)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "paid": to_float(self.paid),
            "balance": to_float(self.balance),
        }


@dataclass(slots=True, frozen=True)
class Settlement:
    from_name: str
    to_name: str
    amount: Decimal

    def to_dict(self) -> dict[str, Any]:
        return {"from": self.from_name, "to": self.to_name, "amount": to_float(self.amount)}


@dataclass(slots=True, frozen=True)
class ValidationResult:
    valid: bool
    errors: list[str] = field(default_factory=list)
    warning: PaymentWarning = PaymentWarning.NONE
    difference: Decimal = ZERO

    def to_dict(self) -> dict[str, Any]:
        return {
            "valid": self.valid,
            "errors": list(self.errors),
            "warning": self.warning.value,
            "difference": to_float(self.difference),
        }


@dataclass(slots=True, frozen=True)
class CalculationResult:
    total_bill: Decimal
    total_paid: Decimal
    per_person_share: Decimal
    balances: list[Balance]
    settlements: list[Settlement]
    participants: list[Participant]
    payments: list[Payment]

    def participant_name(self, participant_id: int) -> str | None:
        for participant in self.participants:
            if participant.id == participant_id:
                return participant.name
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_bill": to_float(self.total_bill),
            "total_paid": to_float(self.total_paid),
            "per_person_share": to_float(self.per_person_share),
            "balances": [balance.to_dict() for balance in self.balances],
            "settlements": [settlement.to_dict() for settlement in self.settlements],
            "participants": [participant.to_dict() for participant in self.participants],
            "payments": [payment.to_dict() for payment in self.payments],
        }
