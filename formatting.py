from __future__ import annotations

from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Union


MONTHS_SHORT = ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
                "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]
MONTHS_LONG = ["January", "February", "March", "April", "May", "June",
               "July", "August", "September", "October", "November", "December"]

Number = Union[Decimal, int, float]


def _group_indian(digits: str) -> str:
    """12345678 -> 1,23,45,678 (last three, then pairs)."""
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    pairs = []
    while len(head) > 2:
        pairs.insert(0, head[-2:])
        head = head[:-2]
    if head:
        pairs.insert(0, head)
    return ",".join(pairs + [tail])


def format_inr(value: Number, decimals: int = 2) -> str:
    """Rupee amount with Indian digit grouping, e.g. ₹1,23,456.00"""
    amount = Decimal(str(value))
    quantum = Decimal(1).scaleb(-decimals)
    amount = amount.quantize(quantum, rounding=ROUND_HALF_UP)

    sign = "-" if amount < 0 else ""
    whole, _, frac = f"{abs(amount):f}".partition(".")
    text = _group_indian(whole)
    if decimals > 0:
        text = f"{text}.{frac}"
    return f"{sign}₹{text}"


def format_date(d: date) -> str:
    """05 Jan 2024"""
    return f"{d.day:02d} {MONTHS_SHORT[d.month - 1]} {d.year}"


def format_month(month: str) -> str:
    """'2024-01' -> 'January 2024'"""
    if not month:
        return ""
    year, mon = month.split("-")[:2]
    return f"{MONTHS_LONG[int(mon) - 1]} {year}"
