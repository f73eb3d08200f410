from __future__ import annotations

import random
import string
import time
from dataclasses import dataclass, replace
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Any, Dict, Optional


CENT = Decimal("0.01")
ZERO = Decimal("0.00")

_ID_ALPHABET = string.digits + string.ascii_lowercase


class TripStatus(str, Enum):
    PENDING = "Pending"
    COMPLETE = "Complete"
    CANCEL = "Cancel"

    @classmethod
    def parse(cls, value: Any, default: Optional["TripStatus"] = None) -> "TripStatus":
        """Accept an enum member or its value; blank/unknown falls back to default."""
        if isinstance(value, cls):
            return value
        text = str(value or "").strip()
        for status in cls:
            if status.value.lower() == text.lower():
                return status
        if default is not None:
            return default
        raise ValueError(f"Unknown trip status: {value!r}")


DEFAULT_STATUS = TripStatus.PENDING


def to_money(value: Any) -> Decimal:
    """Quantize to 2 decimals (half-up), going through str() so floats don't drift."""
    if isinstance(value, Decimal):
        amount = value
    else:
        amount = Decimal(str(value))
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def now_ms() -> int:
    return int(time.time() * 1000)


def new_trip_id(created_at: Optional[int] = None) -> str:
    """trip_<epoch-ms>_<7 random base36 chars>"""
    stamp = created_at if created_at is not None else now_ms()
    suffix = "".join(random.choices(_ID_ALPHABET, k=7))
    return f"trip_{stamp}_{suffix}"


@dataclass(frozen=True)
class TripRecord:
    """
    One logged trip.

    Records are immutable: an edit builds a new record with the same
    id / created_at and the store swaps it in. `total` is always derived.
    """
    id: str
    date: date
    order_id: str
    origin: str
    destination: str
    amount: Decimal
    extra_charge: Decimal = ZERO
    vehicle_number: str = ""
    remarks: str = ""
    status: TripStatus = DEFAULT_STATUS
    created_at: int = 0

    def __post_init__(self):
        if self.amount < 0:
            raise ValueError("Trip amount cannot be negative.")
        if self.extra_charge < 0:
            raise ValueError("Trip extra charge cannot be negative.")

    @property
    def total(self) -> Decimal:
        return self.amount + self.extra_charge

    def with_status(self, status: TripStatus) -> "TripRecord":
        return replace(self, status=status)


# -----------------------------
# Storage rows
# -----------------------------

def trip_to_row(trip: TripRecord) -> Dict[str, Any]:
    """Serialize for the JSON storage (camelCase keys, money as numbers)."""
    return {
        "id": trip.id,
        "date": trip.date.isoformat(),
        "orderId": trip.order_id,
        "vehicleNumber": trip.vehicle_number,
        "from": trip.origin,
        "to": trip.destination,
        "amount": float(trip.amount),
        "extraCharge": float(trip.extra_charge),
        "total": float(trip.total),
        "remarks": trip.remarks,
        "status": trip.status.value,
        "createdAt": trip.created_at,
    }


def _text(row: Dict[str, Any], key: str) -> str:
    return str(row.get(key) or "").strip()


def row_to_trip(row: Dict[str, Any]) -> TripRecord:
    """
    Rebuild a TripRecord from a stored row.

    Rows written by older versions may lack vehicleNumber / from / to /
    remarks / status / extraCharge / createdAt; those get defaults.
    A stored "total" is ignored and recomputed.
    Raises KeyError / ValueError when a required field is missing or unusable.
    """
    trip_id = _text(row, "id")
    order_id = _text(row, "orderId")
    if not trip_id:
        raise KeyError("id")
    if not order_id:
        raise KeyError("orderId")
    if row.get("amount") is None:
        raise KeyError("amount")

    extra = row.get("extraCharge")
    return TripRecord(
        id=trip_id,
        date=date.fromisoformat(str(row["date"])),
        order_id=order_id,
        vehicle_number=_text(row, "vehicleNumber"),
        origin=_text(row, "from"),
        destination=_text(row, "to"),
        amount=to_money(row["amount"]),
        extra_charge=to_money(extra) if extra not in (None, "") else ZERO,
        remarks=_text(row, "remarks"),
        status=TripStatus.parse(row.get("status"), default=DEFAULT_STATUS),
        created_at=int(row.get("createdAt") or 0),
    )
