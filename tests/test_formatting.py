"""
Tests for display formatting
"""
from datetime import date
from decimal import Decimal

import pytest

from formatting import format_date, format_inr, format_month


@pytest.mark.unit
@pytest.mark.parametrize("value,expected", [
    (0, "₹0.00"),
    (999, "₹999.00"),
    (1000, "₹1,000.00"),
    (Decimal("123456"), "₹1,23,456.00"),
    (Decimal("12345678.9"), "₹1,23,45,678.90"),
    (Decimal("-1500.5"), "-₹1,500.50"),
    (0.1 + 0.2, "₹0.30"),
])
def test_format_inr(value, expected):
    assert format_inr(value) == expected


@pytest.mark.unit
def test_format_inr_without_decimals():
    assert format_inr(Decimal("1234.5"), decimals=0) == "₹1,235"


@pytest.mark.unit
def test_format_date():
    assert format_date(date(2024, 1, 5)) == "05 Jan 2024"
    assert format_date(date(2023, 12, 31)) == "31 Dec 2023"


@pytest.mark.unit
def test_format_month():
    assert format_month("2024-01") == "January 2024"
    assert format_month("") == ""
