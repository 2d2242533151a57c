from decimal import Decimal

import pytest

from billsplit.services.split import SplitValidationError
from billsplit.state import SessionError, SessionStateManager, SplitSession, SplitStep


def _ready_session() -> SplitSession:
    session = SplitSession()
    session.set_participants(["Ann", " Ben ", "Cid"])
    session.set_total_bill(Decimal("300"))
    session.add_payment(1, Decimal("200"))
    session.add_payment(2, Decimal("100"))
    return session


def test_session_steps():
    session = SplitSession()
    assert session.current_step == SplitStep.PARTICIPANTS

    participants = session.set_participants(["Ann", " Ben ", "Cid"])
    assert [(p.id, p.name) for p in participants] == [(1, "Ann"), (2, "Ben"), (3, "Cid")]
    assert session.current_step == SplitStep.TOTAL_BILL

    session.set_total_bill(Decimal("300"))
    assert session.current_step == SplitStep.PAYMENTS

    session.add_payment(1, Decimal("250"))
    assert session.payment_summary() == (Decimal("250"), Decimal("50"))

    outcome = session.calculate()
    assert session.current_step == SplitStep.RESULTS
    assert session.result is outcome.result
    assert [(s.from_name, s.to_name) for s in outcome.result.settlements] == [("Ben", "Ann"), ("Cid", "Ann")]


def test_participant_errors():
    session = SplitSession()
    with pytest.raises(SessionError, match="names for all participants"):
        session.set_participants(["Ann", ""])
    with pytest.raises(SessionError, match="between 2 and 20"):
        session.set_participants(["Ann"])
    with pytest.raises(SessionError, match="between 2 and 20"):
        session.set_participants([f"P{i}" for i in range(21)])
    assert session.current_step == SplitStep.PARTICIPANTS


def test_total_bill_must_be_positive():
    session = SplitSession()
    session.set_participants(["Ann", "Ben"])
    with pytest.raises(SessionError, match="valid total bill"):
        session.set_total_bill(Decimal("0"))
    with pytest.raises(SessionError):
        session.set_total_bill(None)


def test_payment_errors():
    session = _ready_session()
    with pytest.raises(SessionError, match="Unknown participant"):
        session.add_payment(9, Decimal("10"))
    with pytest.raises(SessionError, match="positive"):
        session.add_payment(1, Decimal("-1"))


def test_remove_payment_keeps_the_last_one():
    session = _ready_session()
    session.remove_payment(1)
    assert [p.id for p in session.payments] == [2]

    with pytest.raises(SessionError, match="At least one payment is required"):
        session.remove_payment(2)
    with pytest.raises(SessionError, match="Unknown payment"):
        session.remove_payment(1)


def test_calculate_without_payments_fails():
    session = SplitSession()
    session.set_participants(["Ann", "Ben"])
    session.set_total_bill(Decimal("10"))
    with pytest.raises(SplitValidationError):
        session.calculate()
    assert session.result is None


def test_snapshot_roundtrip_recomputes_results():
    session = _ready_session()
    session.calculate()

    restored = SplitSession.from_dict(session.to_dict())

    assert restored.current_step == SplitStep.RESULTS
    assert restored.result == session.result
    payment = restored.add_payment(3, Decimal("1"))
    assert payment.id == 3


def test_snapshot_mid_flow():
    session = SplitSession()
    session.set_participants(["Ann", "Ben"])

    restored = SplitSession.from_dict(session.to_dict())

    assert restored.current_step == SplitStep.TOTAL_BILL
    assert restored.result is None
    assert [p.name for p in restored.participants] == ["Ann", "Ben"]


def test_reset():
    session = _ready_session()
    session.reset()
    assert session.current_step == SplitStep.PARTICIPANTS
    assert session.payments == []
    assert session.result is None
    assert session.total_bill == Decimal("0")


def test_manager():
    manager = SessionStateManager()
    first = manager.get(1)
    assert manager.get(1) is first
    assert manager.get(2) is not first

    manager.clear(1)
    assert manager.get(1) is not first

    restored = manager.restore(3, _ready_session().to_dict())
    assert manager.get(3) is restored
