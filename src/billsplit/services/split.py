from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from billsplit.logging import get_logger
from billsplit.models import CalculationResult, Participant, Payment, PaymentWarning, ValidationResult
from billsplit.services.settlement import calculate
from billsplit.services.validation import validate
from billsplit.utils.money import Amount


class SplitValidationError(ValueError):
    def __init__(self, errors: Sequence[str]) -> None:
        self.errors = list(errors)
        super().__init__(", ".join(self.errors))


@dataclass(slots=True, frozen=True)
class SplitOutcome:
    validation: ValidationResult
    result: CalculationResult


def split_bill(
    total_bill: Optional[Amount],
    participants: Sequence[Participant],
    payments: Sequence[Payment],
) -> SplitOutcome:
    log = get_logger(__name__)
    validation = validate(total_bill, participants, payments)

    if total_bill is None or not validation.valid:
        log.info("split.invalid", errors=validation.errors)
        raise SplitValidationError(validation.errors)

    if validation.warning is not PaymentWarning.NONE:
        log.warning("split.warning", warning=validation.warning.value, difference=str(validation.difference))

    result = calculate(total_bill, participants, payments)
    log.info(
        "split.calculated",
        participants=len(result.participants),
        payments=len(result.payments),
        settlements=len(result.settlements),
        per_person_share=str(result.per_person_share),
    )
    return SplitOutcome(validation=validation, result=result)
