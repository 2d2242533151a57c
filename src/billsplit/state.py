"""Session-scoped state for the step-by-step split flow."""

from __future__ import annotations

from decimal import Decimal
from enum import IntEnum
from typing import Any, Optional, Sequence, Tuple

from billsplit.logging import get_logger
from billsplit.models import CalculationResult, Participant, Payment
from billsplit.services.split import SplitOutcome, split_bill
from billsplit.services.validation import MAX_PARTICIPANTS, MIN_PARTICIPANTS
from billsplit.utils.money import ZERO, to_decimal, to_float


class SplitStep(IntEnum):
    PARTICIPANTS = 1
    TOTAL_BILL = 2
    PAYMENTS = 3
    RESULTS = 4


class SessionError(ValueError):
    pass


class SplitSession:
    def __init__(self) -> None:
        self.current_step = SplitStep.PARTICIPANTS
        self.participants: list[Participant] = []
        self.total_bill: Decimal = ZERO
        self.payments: list[Payment] = []
        self.result: Optional[CalculationResult] = None
        self._next_payment_id = 1
        self._log = get_logger(__name__)

    def set_participants(self, names: Sequence[str]) -> list[Participant]:
        cleaned = [name.strip() for name in names]
        if any(not name for name in cleaned):
            raise SessionError("Please enter names for all participants")
        if not MIN_PARTICIPANTS <= len(cleaned) <= MAX_PARTICIPANTS:
            raise SessionError("Number of people must be between 2 and 20")

        self.participants = [Participant(id=i, name=name) for i, name in enumerate(cleaned, start=1)]
        self._goto(SplitStep.TOTAL_BILL)
        return self.participants

    def set_total_bill(self, amount: Optional[Decimal]) -> None:
        if amount is None or amount <= 0:
            raise SessionError("Please enter a valid total bill amount")
        self.total_bill = amount
        self._goto(SplitStep.PAYMENTS)

    def add_payment(self, payer_id: int, amount: Decimal) -> Payment:
        if self.get_participant(payer_id) is None:
            raise SessionError(f"Unknown participant #{payer_id}")
        if amount <= 0:
            raise SessionError("All payments must be positive amounts")

        payment = Payment(id=self._next_payment_id, payer_id=payer_id, amount=amount)
        self._next_payment_id += 1
        self.payments.append(payment)
        return payment

    def remove_payment(self, payment_id: int) -> None:
        if not any(p.id == payment_id for p in self.payments):
            raise SessionError(f"Unknown payment #{payment_id}")
        if len(self.payments) <= 1:
            raise SessionError("At least one payment is required")
        self.payments = [p for p in self.payments if p.id != payment_id]

    def payment_summary(self) -> Tuple[Decimal, Decimal]:
        paid = sum((p.amount for p in self.payments), ZERO)
        return paid, self.total_bill - paid

    def get_participant(self, participant_id: int) -> Optional[Participant]:
        for participant in self.participants:
            if participant.id == participant_id:
                return participant
        return None

    def find_participant(self, name: str) -> Optional[Participant]:
        wanted = name.strip().lower()
        for participant in self.participants:
            if participant.name.lower() == wanted:
                return participant
        return None

    def calculate(self) -> SplitOutcome:
        outcome = split_bill(self.total_bill, self.participants, self.payments)
        self.result = outcome.result
        self._goto(SplitStep.RESULTS)
        return outcome

    def reset(self) -> None:
        self.current_step = SplitStep.PARTICIPANTS
        self.participants = []
        self.total_bill = ZERO
        self.payments = []
        self.result = None
        self._next_payment_id = 1

    def to_dict(self) -> dict[str, Any]:
        return {
            "current_step": int(self.current_step),
            "participants": [p.to_dict() for p in self.participants],
            "total_bill": to_float(self.total_bill),
            "payments": [p.to_dict() for p in self.payments],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SplitSession":
        session = cls()
        session.participants = [Participant(id=p["id"], name=p["name"]) for p in data.get("participants", [])]
        session.total_bill = to_decimal(data.get("total_bill", 0))
        session.payments = [
            Payment(id=p["id"], payer_id=p["payer_id"], amount=to_decimal(p["amount"]))
            for p in data.get("payments", [])
        ]
        session._next_payment_id = max((p.id for p in session.payments), default=0) + 1
        step = SplitStep(data.get("current_step", SplitStep.PARTICIPANTS))
        if step == SplitStep.RESULTS:
            # results are not stored, recompute them from the restored inputs
            session.calculate()
        else:
            session.current_step = step
        return session

    def _goto(self, step: SplitStep) -> None:
        self.current_step = step
        self._log.info("session.step", step=step.name.lower())


class SessionStateManager:
    def __init__(self) -> None:
        self._sessions: dict[int, SplitSession] = {}

    def get(self, session_id: int) -> SplitSession:
        if session_id not in self._sessions:
            self._sessions[session_id] = SplitSession()
        return self._sessions[session_id]

    def restore(self, session_id: int, data: dict[str, Any]) -> SplitSession:
        session = SplitSession.from_dict(data)
        self._sessions[session_id] = session
        return session

    def clear(self, session_id: int) -> None:
        self._sessions.pop(session_id, None)
