from decimal import Decimal

import pytest

from billsplit.models import Participant, Payment, PaymentWarning
from billsplit.services.split import SplitValidationError, split_bill


def test_split_bill_returns_result_and_warning():
    participants = [Participant(id=1, name="Ann"), Participant(id=2, name="Ben")]
    payments = [Payment(id=1, payer_id=1, amount=Decimal("90"))]

    outcome = split_bill(Decimal("100"), participants, payments)

    assert outcome.validation.warning is PaymentWarning.UNDERPAID
    assert outcome.result.per_person_share == Decimal("50.00")
    assert [(s.from_name, s.to_name, s.amount) for s in outcome.result.settlements] == [
        ("Ben", "Ann", Decimal("40.00")),
    ]


def test_split_bill_rejects_invalid_input():
    participants = [Participant(id=1, name="Ann")]
    payments = [Payment(id=1, payer_id=1, amount=Decimal("10"))]

    with pytest.raises(SplitValidationError) as excinfo:
        split_bill(Decimal("0"), participants, payments)

    assert excinfo.value.errors == [
        "Total bill must be greater than zero",
        "At least 2 participants required",
    ]
    assert str(excinfo.value) == "Total bill must be greater than zero, At least 2 participants required"


def test_split_bill_without_total_bill():
    participants = [Participant(id=1, name="Ann"), Participant(id=2, name="Ben")]
    payments = [Payment(id=1, payer_id=1, amount=Decimal("10"))]

    with pytest.raises(SplitValidationError) as excinfo:
        split_bill(None, participants, payments)

    assert excinfo.value.errors == ["Total bill must be greater than zero"]


def test_split_bill_with_floats():
    participants = [Participant(id=1, name="Ann"), Participant(id=2, name="Ben")]
    payments = [Payment(id=1, payer_id=2, amount=100.0)]

    outcome = split_bill(100.0, participants, payments)

    assert outcome.validation.valid is True
    assert outcome.result.settlements[0].amount == Decimal("50.00")
    assert outcome.result.settlements[0].from_name == "Ann"
