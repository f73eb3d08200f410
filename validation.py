from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Dict, Iterable, Mapping, Optional, Tuple

from models import (
    ZERO,
    TripRecord,
    TripStatus,
    DEFAULT_STATUS,
    new_trip_id,
    now_ms,
    to_money,
)


FORM_FIELDS = (
    "date",
    "order_id",
    "vehicle_number",
    "origin",
    "destination",
    "amount",
    "extra_charge",
    "remarks",
    "status",
)

FieldErrors = Dict[str, str]


@dataclass(frozen=True)
class ValidationResult:
    record: Optional[TripRecord] = None
    errors: FieldErrors = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors and self.record is not None

    def error_for(self, name: str) -> Optional[str]:
        return self.errors.get(name)


@dataclass(frozen=True)
class DateRange:
    start: date
    end: date


def parse_iso_date(text: str) -> date:
    """Strict YYYY-MM-DD (zero padded), so string and date ordering agree."""
    text = text.strip()
    if len(text) != 10 or text[4] != "-" or text[7] != "-":
        raise ValueError(f"Not a YYYY-MM-DD date: {text!r}")
    return date.fromisoformat(text)


# Largest amount that survives a float round trip through the JSON storage
MAX_MONEY = Decimal("999999999999.99")


class NegativeMoneyError(ValueError):
    pass


class MoneyTooLargeError(ValueError):
    pass


def parse_money(text: str) -> Decimal:
    """
    Parse a finite, non-negative decimal and round it to 2 places.
    Raises NegativeMoneyError / MoneyTooLargeError (both ValueError) or ValueError.
    """
    try:
        value = Decimal(text.strip().replace(",", ""))
    except InvalidOperation:
        raise ValueError(f"Not a number: {text!r}") from None
    if not value.is_finite():
        raise ValueError(f"Not a finite number: {text!r}")
    if value < 0:
        raise NegativeMoneyError(f"Negative amount: {text!r}")
    if value > MAX_MONEY:
        raise MoneyTooLargeError(f"Amount above {MAX_MONEY}: {text!r}")
    # + ZERO folds -0.00 into 0.00
    return to_money(value) + ZERO


def find_duplicate_order(
    order_id: str,
    existing: Iterable[TripRecord],
    editing_id: Optional[str] = None,
) -> Optional[TripRecord]:
    """First live record (other than the one being edited) with the same order id, ignoring case."""
    wanted = order_id.strip().casefold()
    for trip in existing:
        if trip.id == editing_id:
            continue
        if trip.order_id.casefold() == wanted:
            return trip
    return None


def validate_trip(
    form: Mapping[str, str],
    existing: Iterable[TripRecord],
    editing: Optional[TripRecord] = None,
    vehicles_required: bool = False,
    created_at: Optional[int] = None,
) -> ValidationResult:
    """
    Turn raw form text into a TripRecord, or report every field that is wrong.

    - date, order_id, origin, destination, amount are required
    - vehicle_number is required only when vehicles_required (a vehicle list exists)
    - amount >= 0; extra_charge blank -> 0, otherwise a number >= 0
    - order_id must not clash (case-insensitively) with another live record

    New records get a fresh id and created_at; edits keep the edited record's.
    """
    values = {name: str(form.get(name) or "").strip() for name in FORM_FIELDS}
    errors: FieldErrors = {}

    trip_date: Optional[date] = None
    if not values["date"]:
        errors["date"] = "Date is required"
    else:
        try:
            trip_date = parse_iso_date(values["date"])
        except ValueError:
            errors["date"] = "Date must be a valid YYYY-MM-DD date"

    order_id = values["order_id"]
    if not order_id:
        errors["order_id"] = "Order ID is required"
    else:
        clash = find_duplicate_order(order_id, existing, editing.id if editing else None)
        if clash is not None:
            errors["order_id"] = f'Order ID "{order_id}" already exists (trip {clash.id})'

    if vehicles_required and not values["vehicle_number"]:
        errors["vehicle_number"] = "Vehicle number is required"

    if not values["origin"]:
        errors["origin"] = "Origin location is required"

    if not values["destination"]:
        errors["destination"] = "Destination location is required"

    amount: Optional[Decimal] = None
    if not values["amount"]:
        errors["amount"] = "Amount is required"
    else:
        try:
            amount = parse_money(values["amount"])
        except MoneyTooLargeError:
            errors["amount"] = f"Amount cannot exceed {MAX_MONEY:,}"
        except ValueError:
            errors["amount"] = "Amount must be a valid positive number"

    extra_charge: Optional[Decimal] = ZERO
    if values["extra_charge"]:
        try:
            extra_charge = parse_money(values["extra_charge"])
        except NegativeMoneyError:
            extra_charge = None
            errors["extra_charge"] = "Extra Charge cannot be negative"
        except MoneyTooLargeError:
            extra_charge = None
            errors["extra_charge"] = f"Extra Charge cannot exceed {MAX_MONEY:,}"
        except ValueError:
            extra_charge = None
            errors["extra_charge"] = "Extra Charge must be a number"

    fallback_status = editing.status if editing else DEFAULT_STATUS
    status = fallback_status
    if values["status"]:
        try:
            status = TripStatus.parse(values["status"])
        except ValueError:
            errors["status"] = f"Status must be one of: {', '.join(s.value for s in TripStatus)}"

    if errors:
        return ValidationResult(errors=errors)

    if editing is not None:
        trip_id, stamp = editing.id, editing.created_at
    else:
        stamp = created_at if created_at is not None else now_ms()
        trip_id = new_trip_id(stamp)

    record = TripRecord(
        id=trip_id,
        date=trip_date,
        order_id=order_id,
        vehicle_number=values["vehicle_number"],
        origin=values["origin"],
        destination=values["destination"],
        amount=amount,
        extra_charge=extra_charge,
        remarks=values["remarks"],
        status=status,
        created_at=stamp,
    )
    return ValidationResult(record=record)


def trip_to_form(trip: TripRecord) -> Dict[str, str]:
    """Pre-fill values for editing an existing trip."""
    return {
        "date": trip.date.isoformat(),
        "order_id": trip.order_id,
        "vehicle_number": trip.vehicle_number,
        "origin": trip.origin,
        "destination": trip.destination,
        "amount": str(trip.amount),
        "extra_charge": str(trip.extra_charge),
        "remarks": trip.remarks,
        "status": trip.status.value,
    }


def validate_date_range(from_text: str, to_text: str) -> Tuple[Optional[DateRange], FieldErrors]:
    """Inputs of the custom range report: both dates required, to >= from."""
    errors: FieldErrors = {}
    start = end = None

    if not (from_text or "").strip():
        errors["from_date"] = "Please select a From Date."
    else:
        try:
            start = parse_iso_date(from_text)
        except ValueError:
            errors["from_date"] = "From Date must be a valid YYYY-MM-DD date."

    if not (to_text or "").strip():
        errors["to_date"] = "Please select a To Date."
    else:
        try:
            end = parse_iso_date(to_text)
        except ValueError:
            errors["to_date"] = "To Date must be a valid YYYY-MM-DD date."

    if start and end and start > end:
        errors["to_date"] = "To Date must be on or after From Date."

    if errors:
        return None, errors
    return DateRange(start=start, end=end), {}
