"""
Tests for date / month / range / search filters
"""
from datetime import date

import pytest

from conftest import make_trip
from filters import (
    TripFilter,
    by_date,
    by_month,
    by_range,
    current_month,
    matches_search,
    month_bounds,
    parse_month,
    previous_month,
    search,
)


@pytest.fixture
def mixed_trips():
    return [
        make_trip(day="2023-12-31", order_id="DEC-31"),
        make_trip(day="2024-01-01", order_id="JAN-01"),
        make_trip(day="2024-01-15", order_id="JAN-15"),
        make_trip(day="2024-01-31", order_id="JAN-31"),
        make_trip(day="2024-02-01", order_id="FEB-01"),
    ]


def order_ids(trips):
    return [t.order_id for t in trips]


class TestModes:

    @pytest.mark.unit
    def test_exact_date(self, mixed_trips):
        picked = TripFilter.daily(date(2024, 1, 15)).apply(mixed_trips)
        assert order_ids(picked) == ["JAN-15"]

    @pytest.mark.unit
    def test_month_keeps_only_that_month(self, mixed_trips):
        picked = TripFilter.monthly("2024-01").apply(mixed_trips)
        assert order_ids(picked) == ["JAN-01", "JAN-15", "JAN-31"]

    @pytest.mark.unit
    def test_range_is_inclusive(self, mixed_trips):
        picked = TripFilter.date_range(date(2024, 1, 1), date(2024, 1, 31)).apply(mixed_trips)
        assert order_ids(picked) == ["JAN-01", "JAN-15", "JAN-31"]

    @pytest.mark.unit
    def test_single_day_range_equals_exact_date(self, mixed_trips):
        day = date(2024, 1, 1)
        assert TripFilter.date_range(day, day).apply(mixed_trips) == TripFilter.daily(day).apply(mixed_trips)

    @pytest.mark.unit
    def test_month_equals_range_over_its_bounds(self, mixed_trips):
        first, last = month_bounds("2024-01")
        assert TripFilter.monthly("2024-01").apply(mixed_trips) == \
            TripFilter.date_range(first, last).apply(mixed_trips)

    @pytest.mark.unit
    def test_all_is_identity(self, mixed_trips):
        assert TripFilter().apply(mixed_trips) == mixed_trips

    @pytest.mark.unit
    def test_plain_predicates(self, mixed_trips):
        jan15 = mixed_trips[2]
        assert by_date(date(2024, 1, 15))(jan15)
        assert by_month("2024-01")(jan15)
        assert not by_month("2023-01")(jan15)
        assert by_range(date(2024, 1, 15), date(2024, 1, 15))(jan15)

    @pytest.mark.unit
    def test_invalid_filters(self):
        with pytest.raises(ValueError):
            TripFilter.monthly("2024-13")
        with pytest.raises(ValueError):
            TripFilter.date_range(date(2024, 2, 1), date(2024, 1, 1))
        with pytest.raises(ValueError):
            TripFilter(mode="daily")
        with pytest.raises(ValueError):
            TripFilter(mode="weekly")


class TestLabels:

    @pytest.mark.unit
    @pytest.mark.parametrize("trip_filter,label", [
        (TripFilter(), "All time"),
        (TripFilter.daily(date(2024, 1, 5)), "Daily: 05 Jan 2024"),
        (TripFilter.monthly("2024-01"), "Monthly: January 2024"),
        (TripFilter.date_range(date(2024, 1, 5), date(2024, 1, 5)), "05 Jan 2024"),
        (TripFilter.date_range(date(2024, 1, 5), date(2024, 1, 7)), "05 Jan 2024 – 07 Jan 2024"),
    ])
    def test_label(self, trip_filter, label):
        assert trip_filter.label() == label


class TestMonths:

    @pytest.mark.unit
    def test_parse_month(self):
        assert parse_month("2024-01") == (2024, 1)
        for bad in ("2024-1", "2024/01", "", "2024-00"):
            with pytest.raises(ValueError):
                parse_month(bad)

    @pytest.mark.unit
    @pytest.mark.parametrize("month,bounds", [
        ("2024-02", (date(2024, 2, 1), date(2024, 2, 29))),
        ("2023-02", (date(2023, 2, 1), date(2023, 2, 28))),
        ("2024-12", (date(2024, 12, 1), date(2024, 12, 31))),
    ])
    def test_month_bounds(self, month, bounds):
        assert month_bounds(month) == bounds

    @pytest.mark.unit
    def test_current_and_previous_month(self):
        assert current_month(date(2024, 3, 31)) == "2024-03"
        assert previous_month(date(2024, 3, 31)) == "2024-02"
        assert previous_month(date(2024, 1, 10)) == "2023-12"


class TestSearch:

    @pytest.mark.unit
    @pytest.mark.parametrize("query", ["abc-9", "FRAGILE", "2024-01", "navi", "THANE"])
    def test_matches_any_field(self, query):
        trip = make_trip(day="2024-01-05", order_id="ABC-9", remarks="Fragile goods",
                         origin="Navi Mumbai", destination="Thane")
        assert matches_search(trip, query)

    @pytest.mark.unit
    def test_vehicle_is_not_searched(self):
        trip = make_trip(vehicle_number="MH12ZZ0001")
        assert not matches_search(trip, "ZZ0001")

    @pytest.mark.unit
    def test_blank_query_matches_all(self, mixed_trips):
        assert search(mixed_trips, "   ") == mixed_trips

    @pytest.mark.unit
    def test_no_match(self, mixed_trips):
        assert search(mixed_trips, "nowhere") == []
