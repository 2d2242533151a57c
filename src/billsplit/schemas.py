from __future__ import annotations

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from billsplit.models import Participant, Payment


class ParticipantIn(BaseModel):
    id: int
    name: str = ""


class PaymentIn(BaseModel):
    id: int
    payer_id: int = Field(validation_alias="payerId")
    amount: Decimal

    model_config = {"populate_by_name": True}


class SplitRequest(BaseModel):
    total_bill: Optional[Decimal] = Field(None, validation_alias="totalBill")
    participants: list[ParticipantIn] = Field(default_factory=list)
    payments: list[PaymentIn] = Field(default_factory=list)

    model_config = {"populate_by_name": True}

    def to_domain(self) -> tuple[Optional[Decimal], list[Participant], list[Payment]]:
        participants = [Participant(id=p.id, name=p.name) for p in self.participants]
        payments = [Payment(id=p.id, payer_id=p.payer_id, amount=p.amount) for p in self.payments]
        return self.total_bill, participants, payments
