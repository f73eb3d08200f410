from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Callable, Iterable, List, Optional, Tuple

from dateutil.relativedelta import relativedelta

from formatting import format_date, format_month
from models import TripRecord


TripPredicate = Callable[[TripRecord], bool]

MODE_ALL = "all"
MODE_DAILY = "daily"
MODE_MONTHLY = "monthly"
MODE_RANGE = "range"


# -----------------------------
# Month helpers
# -----------------------------

def parse_month(month: str) -> Tuple[int, int]:
    """'2024-01' -> (2024, 1). Raises ValueError for anything else."""
    text = (month or "").strip()
    if len(text) != 7 or text[4] != "-":
        raise ValueError(f"Not a YYYY-MM month: {month!r}")
    year, mon = int(text[:4]), int(text[5:])
    if not 1 <= mon <= 12:
        raise ValueError(f"Not a YYYY-MM month: {month!r}")
    return year, mon


def month_bounds(month: str) -> Tuple[date, date]:
    """First and last calendar day of a YYYY-MM month."""
    year, mon = parse_month(month)
    first = date(year, mon, 1)
    last = first + relativedelta(months=1) - timedelta(days=1)
    return first, last


def current_month(today: date) -> str:
    return today.strftime("%Y-%m")


def previous_month(today: date) -> str:
    return (today.replace(day=1) - relativedelta(months=1)).strftime("%Y-%m")


# -----------------------------
# Predicates
# -----------------------------

def by_date(day: date) -> TripPredicate:
    return lambda trip: trip.date == day


def by_month(month: str) -> TripPredicate:
    year, mon = parse_month(month)
    return lambda trip: trip.date.year == year and trip.date.month == mon


def by_range(start: date, end: date) -> TripPredicate:
    """Inclusive on both ends."""
    return lambda trip: start <= trip.date <= end


def matches_search(trip: TripRecord, query: str) -> bool:
    """
    Case-insensitive substring match on order id, remarks, date, origin and
    destination. A blank query matches everything.
    """
    needle = (query or "").strip().casefold()
    if not needle:
        return True
    haystack = (
        trip.order_id,
        trip.remarks,
        trip.date.isoformat(),
        trip.origin,
        trip.destination,
    )
    return any(needle in value.casefold() for value in haystack)


def search(trips: Iterable[TripRecord], query: str) -> List[TripRecord]:
    return [t for t in trips if matches_search(t, query)]


# -----------------------------
# Filter selection
# -----------------------------

@dataclass(frozen=True)
class TripFilter:
    """
    One active filter mode:
    - all:     every trip
    - daily:   trip.date == day
    - monthly: trip.date within month (YYYY-MM)
    - range:   start <= trip.date <= end
    """
    mode: str = MODE_ALL
    day: Optional[date] = None
    month: Optional[str] = None
    start: Optional[date] = None
    end: Optional[date] = None

    def __post_init__(self):
        if self.mode == MODE_DAILY and self.day is None:
            raise ValueError("Daily filter needs a day.")
        if self.mode == MODE_MONTHLY:
            parse_month(self.month or "")
        if self.mode == MODE_RANGE:
            if self.start is None or self.end is None:
                raise ValueError("Range filter needs both a start and an end date.")
            if self.end < self.start:
                raise ValueError("Range filter end date cannot be before start date.")
        if self.mode not in (MODE_ALL, MODE_DAILY, MODE_MONTHLY, MODE_RANGE):
            raise ValueError(f"Unknown filter mode: {self.mode!r}")

    @classmethod
    def daily(cls, day: date) -> "TripFilter":
        return cls(mode=MODE_DAILY, day=day)

    @classmethod
    def monthly(cls, month: str) -> "TripFilter":
        return cls(mode=MODE_MONTHLY, month=month)

    @classmethod
    def date_range(cls, start: date, end: date) -> "TripFilter":
        return cls(mode=MODE_RANGE, start=start, end=end)

    def predicate(self) -> TripPredicate:
        if self.mode == MODE_DAILY:
            return by_date(self.day)
        if self.mode == MODE_MONTHLY:
            return by_month(self.month)
        if self.mode == MODE_RANGE:
            return by_range(self.start, self.end)
        return lambda trip: True

    def apply(self, trips: Iterable[TripRecord]) -> List[TripRecord]:
        keep = self.predicate()
        return [t for t in trips if keep(t)]

    def label(self) -> str:
        if self.mode == MODE_DAILY:
            return f"Daily: {format_date(self.day)}"
        if self.mode == MODE_MONTHLY:
            return f"Monthly: {format_month(self.month)}"
        if self.mode == MODE_RANGE:
            if self.start == self.end:
                return format_date(self.start)
            return f"{format_date(self.start)} – {format_date(self.end)}"
        return "All time"
