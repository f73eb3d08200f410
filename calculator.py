from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from filters import TripFilter
from models import ZERO, TripRecord, TripStatus


@dataclass(frozen=True)
class StatusBreakdown:
    pending: int = 0
    complete: int = 0
    cancel: int = 0

    def count(self, status: TripStatus) -> int:
        return {
            TripStatus.PENDING: self.pending,
            TripStatus.COMPLETE: self.complete,
            TripStatus.CANCEL: self.cancel,
        }[status]


@dataclass(frozen=True)
class DailyBucket:
    """Sums for one calendar day (one point of the cost chart)."""
    date: date
    amount: Decimal
    extra_charge: Decimal
    total: Decimal
    trips: int


@dataclass(frozen=True)
class TripSummary:
    total_trips: int = 0
    total_amount: Decimal = ZERO
    total_extra_charges: Decimal = ZERO
    grand_total: Decimal = ZERO
    status_breakdown: StatusBreakdown = field(default_factory=StatusBreakdown)
    daily_series: List[DailyBucket] = field(default_factory=list)


def status_breakdown(trips: Iterable[TripRecord]) -> StatusBreakdown:
    counts = {status: 0 for status in TripStatus}
    for trip in trips:
        counts[trip.status] += 1
    return StatusBreakdown(
        pending=counts[TripStatus.PENDING],
        complete=counts[TripStatus.COMPLETE],
        cancel=counts[TripStatus.CANCEL],
    )


def daily_series(trips: Iterable[TripRecord]) -> List[DailyBucket]:
    """
    Group trips by date and sum amount / extra charge / total per day.
    Buckets come out oldest first, which is the order the chart needs.
    """
    sums: Dict[date, List] = {}
    for trip in trips:
        bucket = sums.setdefault(trip.date, [ZERO, ZERO, ZERO, 0])
        bucket[0] += trip.amount
        bucket[1] += trip.extra_charge
        bucket[2] += trip.total
        bucket[3] += 1

    return [
        DailyBucket(date=day, amount=a, extra_charge=e, total=t, trips=n)
        for day, (a, e, t, n) in sorted(sums.items())
    ]


def aggregate(trips: Iterable[TripRecord]) -> TripSummary:
    """
    Summary statistics for a set of trips:
    count, sum of amounts, sum of extra charges, sum of totals,
    trips per status and the per-day series.

    Pure: the same input always gives an equal summary. No trips -> all zeros.
    """
    trips = list(trips)

    total_amount = sum((t.amount for t in trips), ZERO)
    total_extra = sum((t.extra_charge for t in trips), ZERO)
    grand_total = sum((t.total for t in trips), ZERO)

    return TripSummary(
        total_trips=len(trips),
        total_amount=total_amount,
        total_extra_charges=total_extra,
        grand_total=grand_total,
        status_breakdown=status_breakdown(trips),
        daily_series=daily_series(trips),
    )


def summarize(trips: Iterable[TripRecord], trip_filter: Optional[TripFilter] = None) -> TripSummary:
    """Apply the active filter (if any), then aggregate."""
    if trip_filter is None:
        return aggregate(trips)
    return aggregate(trip_filter.apply(trips))
