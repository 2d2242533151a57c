from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Callable, Optional, Sequence

from pydantic import ValidationError

from billsplit.config import get_settings
from billsplit.logging import configure_logging, get_logger
from billsplit.models import CalculationResult
from billsplit.schemas import SplitRequest
from billsplit.services.report import (
    format_balance,
    format_currency,
    format_payment_lines,
    format_settlement_lines,
    format_warning,
)
from billsplit.services.split import SplitOutcome, SplitValidationError, split_bill
from billsplit.state import SessionError, SplitSession
from billsplit.utils.parse import parse_amount, parse_names

Reader = Callable[[str], str]
Writer = Callable[[str], None]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="billsplit", description="Split a shared bill and settle up.")
    parser.add_argument("--symbol", help="Currency symbol used in the output")
    sub = parser.add_subparsers(dest="command", required=True)

    run = sub.add_parser("run", help="Split a bill described by a JSON file")
    run.add_argument("file", type=Path)
    run.add_argument("--json", action="store_true", help="Print the result as JSON")

    sub.add_parser("interactive", help="Enter the bill step by step")
    return parser


def render_outcome(outcome: SplitOutcome, symbol: Optional[str], write: Writer) -> None:
    result: CalculationResult = outcome.result
    warning = format_warning(outcome.validation, symbol)
    if warning:
        write(warning)

    write(f"Total Bill: {format_currency(result.total_bill, symbol)}")
    write(f"Per Person: {format_currency(result.per_person_share, symbol)}")
    write("")
    write("Payments:")
    for line in format_payment_lines(result, symbol):
        write(f"  {line}")
    write("")
    write("Balances:")
    for balance in result.balances:
        write(f"  {balance.name}: {format_balance(balance.balance, symbol)}")
    write("")
    write("Settlements:")
    for line in format_settlement_lines(result, symbol):
        write(f"  {line}")


def run_file(path: Path, as_json: bool, symbol: Optional[str], write: Writer) -> int:
    log = get_logger(__name__)
    try:
        request = SplitRequest.model_validate_json(path.read_text(encoding="utf-8"))
    except OSError as exc:
        log.error("cli.read_failed", path=str(path), error=str(exc))
        write(f"Cannot read {path}: {exc.strerror}")
        return 1
    except ValidationError as exc:
        log.error("cli.bad_input", path=str(path), errors=exc.error_count())
        write(f"Invalid input file {path}:\n{exc}")
        return 1

    try:
        outcome = split_bill(*request.to_domain())
    except SplitValidationError as exc:
        write(str(exc))
        return 1

    if as_json:
        payload = outcome.result.to_dict()
        payload["validation"] = outcome.validation.to_dict()
        write(json.dumps(payload, ensure_ascii=False, indent=2))
    else:
        render_outcome(outcome, symbol, write)
    return 0


def _ask(read: Reader, write: Writer, prompt: str, parse: Callable[[str], object]) -> object:
    while True:
        raw = read(prompt)
        try:
            return parse(raw)
        except ValueError as exc:
            write(str(exc))


def run_interactive(session: SplitSession, symbol: Optional[str], read: Reader, write: Writer) -> int:
    while True:
        names = parse_names(read("Participants (comma separated): "))
        try:
            session.set_participants(names)
            break
        except SessionError as exc:
            write(str(exc))

    while True:
        amount = _ask(read, write, "Total bill: ", parse_amount)
        try:
            session.set_total_bill(amount)  # type: ignore[arg-type]
            break
        except SessionError as exc:
            write(str(exc))

    for participant in session.participants:
        write(f"  {participant.id}. {participant.name}")
    write("Enter payments as '<who> <amount>', empty line to finish.")
    while True:
        raw = read("Payment: ").strip()
        if not raw:
            if session.payments:
                break
            write("At least one payment is required")
            continue

        who, _, amount_text = raw.rpartition(" ")
        payer = session.find_participant(who)
        if payer is None and who.isdigit():
            payer = session.get_participant(int(who))
        if payer is None:
            write(f"Who paid? Unknown participant: {who or raw}")
            continue
        try:
            session.add_payment(payer.id, parse_amount(amount_text))
        except (ValueError, SessionError) as exc:
            write(str(exc))
            continue

        paid, remaining = session.payment_summary()
        write(f"Paid so far: {format_currency(paid, symbol)}  Remaining: {format_currency(remaining, symbol)}")

    try:
        outcome = session.calculate()
    except SplitValidationError as exc:
        write(str(exc))
        return 1

    render_outcome(outcome, symbol, write)
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    settings = get_settings()
    configure_logging(settings.log_level_number)
    args = build_parser().parse_args(argv)
    symbol = args.symbol or settings.currency_symbol

    log = get_logger(__name__)
    log.info("cli.start", command=args.command)
    if args.command == "run":
        return run_file(args.file, args.json, symbol, print)
    return run_interactive(SplitSession(), symbol, input, print)


if __name__ == "__main__":
    sys.exit(main())
