"""
Shared fixtures: a JSON storage file in tmp_path and a trip factory.
"""
import itertools
from datetime import date
from decimal import Decimal

import pytest

from db import LocalStorage
from models import TripRecord, TripStatus

_ids = itertools.count(1)


def make_trip(
    day="2024-01-05",
    order_id=None,
    amount="100.00",
    extra_charge="0.00",
    status=TripStatus.PENDING,
    created_at=None,
    **overrides,
) -> TripRecord:
    n = next(_ids)
    fields = dict(
        id=f"trip_test_{n}",
        date=date.fromisoformat(day) if isinstance(day, str) else day,
        order_id=order_id or f"ORD-{n}",
        origin="Mumbai",
        destination="Pune",
        amount=Decimal(amount),
        extra_charge=Decimal(extra_charge),
        vehicle_number="MH12AB1234",
        remarks="",
        status=status,
        created_at=created_at if created_at is not None else n,
    )
    fields.update(overrides)
    return TripRecord(**fields)


@pytest.fixture
def trip_factory():
    return make_trip


@pytest.fixture
def storage(tmp_path):
    return LocalStorage(tmp_path / "trips.json")


@pytest.fixture
def valid_form():
    return {
        "date": "2024-01-05",
        "order_id": "ORD-100",
        "vehicle_number": "MH12AB1234",
        "origin": "Mumbai",
        "destination": "Pune",
        "amount": "1000",
        "extra_charge": "50",
        "remarks": "  fragile  ",
        "status": "",
    }
