"""
Command-line entry point for the booking scheduling core.

Reads availability and bookings from JSON files and prints JSON results,
which is handy for checking a companion's calendar by hand.

Usage:
    python main.py slots --date 2024-01-15 --availability availability.json --bookings bookings.json
    python main.py check --date 2024-01-15 --time 14:00 --duration 2 --bookings bookings.json \
        --client cl_1 --companion cp_1 --availability availability.json
    python main.py transition --booking booking.json --action accept

Exit status: 0 on success, 1 when a business rule refuses the request,
2 when an input file cannot be read.
"""

import argparse
import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from companion_booking.config import settings
from companion_booking.errors import BookingError
from companion_booking.lifecycle.state_machine import BookingStateMachine
from companion_booking.schemas.availability_schema import WeeklyAvailability
from companion_booking.schemas.booking_schema import Booking, BookingAction, BookingRequest, SlotsResponse
from companion_booking.scheduling.availability import available_slots
from companion_booking.scheduling.planner import plan_booking

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_REFUSED = 1
EXIT_BAD_INPUT = 2


class InputFileError(Exception):
    """An input file is missing or does not match the expected shape."""


def _load_json(path: str) -> Any:
    file_path = Path(path)
    if not file_path.exists():
        raise InputFileError(f"File not found: {file_path}")
    try:
        return json.loads(file_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise InputFileError(f"Invalid JSON in {file_path}: {exc}") from None


def _load_availability(path: str) -> WeeklyAvailability:
    try:
        return WeeklyAvailability.model_validate(_load_json(path))
    except ValidationError as exc:
        raise InputFileError(f"Invalid availability in {path}: {exc}") from None


def _load_bookings(path: Optional[str]) -> list[Booking]:
    if path is None:
        return []
    data = _load_json(path)
    if not isinstance(data, list):
        raise InputFileError(f"Expected a JSON list of bookings in {path}")
    try:
        return [Booking.model_validate(item) for item in data]
    except ValidationError as exc:
        raise InputFileError(f"Invalid booking in {path}: {exc}") from None


def _emit(payload: dict[str, Any]) -> None:
    print(json.dumps(payload, indent=2, default=str))


def _run_slots(args: argparse.Namespace) -> int:
    availability = _load_availability(args.availability)
    bookings = _load_bookings(args.bookings)
    response = SlotsResponse(slots=available_slots(args.date, availability, bookings))
    _emit(response.model_dump())
    return EXIT_OK


def _run_check(args: argparse.Namespace) -> int:
    availability = _load_availability(args.availability) if args.availability else None
    request = BookingRequest(date=args.date, time=args.time, duration_hours=args.duration)
    decision = plan_booking(
        request,
        client_id=args.client,
        companion_id=args.companion,
        existing_bookings=_load_bookings(args.bookings),
        now=datetime.now(),
        availability=availability,
    )
    if decision.error is not None:
        _emit({"accepted": False, "error": decision.error.to_dict()})
        return EXIT_REFUSED
    _emit({"accepted": True})
    return EXIT_OK


def _run_transition(args: argparse.Namespace) -> int:
    try:
        booking = Booking.model_validate(_load_json(args.booking))
    except ValidationError as exc:
        raise InputFileError(f"Invalid booking in {args.booking}: {exc}") from None

    machine = BookingStateMachine(settings.lifecycle.booking_expiration_minutes)
    outcome = machine.apply(booking, BookingAction(args.action), now=datetime.now(timezone.utc))
    payload: dict[str, Any] = {
        "status": outcome.booking.status.value,
        "chat_enabled": outcome.chat_enabled,
        "payment_action": outcome.payment_action.value,
    }
    if outcome.error is not None:
        payload["error"] = outcome.error.to_dict()
        _emit(payload)
        return EXIT_REFUSED
    _emit(payload)
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Query companion availability and booking status transitions."
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    sub = parser.add_subparsers(dest="command", required=True)

    slots = sub.add_parser("slots", help="List bookable start times for a date.")
    slots.add_argument("--date", required=True, help="Date as YYYY-MM-DD.")
    slots.add_argument("--availability", required=True, help="Weekly availability JSON file.")
    slots.add_argument("--bookings", default=None, help="Existing bookings JSON list.")
    slots.set_defaults(handler=_run_slots)

    check = sub.add_parser("check", help="Check whether a booking request can be committed.")
    check.add_argument("--date", required=True, help="Date as YYYY-MM-DD.")
    check.add_argument("--time", required=True, help="Start time as HH:MM.")
    check.add_argument("--duration", type=int, default=1, help="Duration in hours.")
    check.add_argument("--client", default="client", help="Requesting client ID.")
    check.add_argument("--companion", default="companion", help="Companion ID.")
    check.add_argument("--bookings", default=None, help="Existing bookings JSON list.")
    check.add_argument("--availability", default=None, help="Weekly availability JSON file.")
    check.set_defaults(handler=_run_check)

    transition = sub.add_parser("transition", help="Apply a lifecycle action to a booking.")
    transition.add_argument("--booking", required=True, help="Booking JSON file.")
    transition.add_argument(
        "--action", required=True, choices=[a.value for a in BookingAction],
    )
    transition.set_defaults(handler=_run_transition)
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        return args.handler(args)
    except InputFileError as exc:
        logger.error("%s", exc)
        return EXIT_BAD_INPUT
    except BookingError as exc:
        _emit({"error": exc.to_dict()})
        return EXIT_REFUSED


if __name__ == "__main__":
    sys.exit(main())
