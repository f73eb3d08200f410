"""
Tests for the aggregation engine
"""
from datetime import date
from decimal import Decimal

import pytest
from hypothesis import given
from hypothesis.strategies import composite, dates, decimals, lists, sampled_from

from calculator import StatusBreakdown, aggregate, daily_series, summarize
from conftest import make_trip
from filters import TripFilter
from models import TripStatus


@composite
def trips(draw):
    money = decimals(min_value=0, max_value=100_000, places=2,
                     allow_nan=False, allow_infinity=False)
    return make_trip(
        day=draw(dates(min_value=date(2023, 1, 1), max_value=date(2024, 12, 31))),
        amount=str(draw(money)),
        extra_charge=str(draw(money)),
        status=draw(sampled_from(list(TripStatus))),
    )


class TestAggregate:

    @pytest.mark.unit
    def test_two_trip_scenario(self):
        records = [
            make_trip(day="2024-01-05", amount="1000", extra_charge="50"),
            make_trip(day="2024-01-03", amount="500", extra_charge="0"),
        ]
        summary = aggregate(records)
        assert summary.total_trips == 2
        assert summary.total_amount == Decimal("1500")
        assert summary.total_extra_charges == Decimal("50")
        assert summary.grand_total == Decimal("1600")
        assert [b.date for b in summary.daily_series] == [date(2024, 1, 3), date(2024, 1, 5)]

    @pytest.mark.unit
    def test_empty(self):
        summary = aggregate([])
        assert summary.total_trips == 0
        assert summary.total_amount == 0
        assert summary.total_extra_charges == 0
        assert summary.grand_total == 0
        assert summary.status_breakdown == StatusBreakdown(0, 0, 0)
        assert summary.daily_series == []

    @pytest.mark.unit
    def test_status_breakdown(self):
        records = [
            make_trip(status=TripStatus.PENDING),
            make_trip(status=TripStatus.COMPLETE),
            make_trip(status=TripStatus.COMPLETE),
        ]
        breakdown = aggregate(records).status_breakdown
        assert (breakdown.pending, breakdown.complete, breakdown.cancel) == (1, 2, 0)
        assert breakdown.count(TripStatus.CANCEL) == 0

    @pytest.mark.unit
    def test_accepts_generators(self):
        summary = aggregate(make_trip() for _ in range(3))
        assert summary.total_trips == 3
        assert len(summary.daily_series) == 1

    @pytest.mark.unit
    def test_no_float_drift(self):
        records = [make_trip(amount="0.10", extra_charge="0.20") for _ in range(10)]
        assert aggregate(records).grand_total == Decimal("3.00")

    @given(lists(trips(), max_size=30))
    def test_grand_total_matches_parts(self, records):
        summary = aggregate(records)
        assert summary.grand_total == summary.total_amount + summary.total_extra_charges
        assert summary.total_trips == len(records)
        b = summary.status_breakdown
        assert b.pending + b.complete + b.cancel == len(records)

    @given(lists(trips(), max_size=30))
    def test_idempotent(self, records):
        assert aggregate(records) == aggregate(records)

    @given(lists(trips(), max_size=30))
    def test_series_sums_match_totals(self, records):
        summary = aggregate(records)
        series = summary.daily_series
        assert [b.date for b in series] == sorted({t.date for t in records})
        assert sum((b.total for b in series), Decimal(0)) == summary.grand_total
        assert sum(b.trips for b in series) == summary.total_trips


class TestDailySeries:

    @pytest.mark.unit
    def test_same_day_is_one_bucket(self):
        records = [
            make_trip(day="2024-01-05", amount="100", extra_charge="10"),
            make_trip(day="2024-01-05", amount="200", extra_charge="0"),
            make_trip(day="2024-01-04", amount="50", extra_charge="5"),
        ]
        series = daily_series(records)
        assert len(series) == 2
        jan4, jan5 = series
        assert jan4.date == date(2024, 1, 4)
        assert (jan5.amount, jan5.extra_charge, jan5.total, jan5.trips) == (
            Decimal("300"), Decimal("10"), Decimal("310"), 2
        )

    @pytest.mark.unit
    def test_ascending_across_years(self):
        records = [make_trip(day="2024-01-01"), make_trip(day="2023-12-31"), make_trip(day="2023-02-01")]
        assert [b.date.isoformat() for b in daily_series(records)] == [
            "2023-02-01", "2023-12-31", "2024-01-01"
        ]


class TestSummarize:

    @pytest.mark.unit
    def test_filter_then_aggregate(self):
        records = [
            make_trip(day="2024-01-05", amount="100"),
            make_trip(day="2024-02-05", amount="900"),
        ]
        summary = summarize(records, TripFilter.monthly("2024-01"))
        assert summary.total_trips == 1
        assert summary.total_amount == Decimal("100")

    @pytest.mark.unit
    def test_no_filter(self):
        records = [make_trip(), make_trip()]
        assert summarize(records) == aggregate(records)
