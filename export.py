from __future__ import annotations

import csv
import html
import io
from datetime import datetime
from typing import Any, List, Optional, Sequence

from calculator import TripSummary, aggregate
from formatting import format_date, format_inr
from models import TripRecord


BOM = "\ufeff"

CSV_HEADERS = [
    "Date",
    "Order ID",
    "Vehicle Number",
    "From",
    "To",
    "Amount (₹)",
    "Extra Charge (₹)",
    "Total (₹)",
    "Remarks",
]

# Spreadsheet apps run cells starting with these as formulas
_FORMULA_PREFIXES = ("=", "+", "-", "@", "\t", "\r")


def _sanitize_text(value: str) -> str:
    if isinstance(value, str) and value and value[0] in _FORMULA_PREFIXES:
        return f"'{value}"
    return value


def export_filename(prefix: str, suffix: str, ext: str) -> str:
    """trip-report-2024-01-05.csv"""
    name = f"{prefix}-{suffix}" if suffix else prefix
    return f"{name}.{ext.lstrip('.')}"


# -----------------------------
# CSV
# -----------------------------

def trip_csv_row(trip: TripRecord) -> List[str]:
    return [
        trip.date.isoformat(),
        _sanitize_text(trip.order_id),
        _sanitize_text(trip.vehicle_number),
        _sanitize_text(trip.origin),
        _sanitize_text(trip.destination),
        f"{trip.amount:.2f}",
        f"{trip.extra_charge:.2f}",
        f"{trip.total:.2f}",
        _sanitize_text(trip.remarks),
    ]


def trips_to_csv(trips: Sequence[TripRecord]) -> str:
    """
    One header row plus one row per trip, amounts to 2 decimals.
    Prefixed with a BOM so Excel reads the ₹ sign as UTF-8.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for trip in trips:
        writer.writerow(trip_csv_row(trip))
    return BOM + buffer.getvalue()


# -----------------------------
# Printable HTML
# -----------------------------

_PRINT_CSS = """
    * { box-sizing: border-box; margin: 0; padding: 0; }
    body { font-family: Arial, sans-serif; font-size: 11px; color: #1a1a1a; padding: 24px; }
    h1 { font-size: 18px; font-weight: 700; margin-bottom: 4px; }
    .subtitle { font-size: 12px; color: #555; margin-bottom: 20px; }
    table { width: 100%; border-collapse: collapse; margin-bottom: 20px; }
    th { background: #1e3a5f; color: #fff; padding: 7px 8px; text-align: left; font-size: 10px; text-transform: uppercase; }
    td { padding: 6px 8px; border-bottom: 1px solid #e5e7eb; vertical-align: top; }
    tr.even td { background: #f9fafb; }
    .num { text-align: right; font-variant-numeric: tabular-nums; }
    .total-cell { font-weight: 700; color: #1e3a5f; }
    .summary { display: flex; gap: 16px; flex-wrap: wrap; margin-top: 8px; }
    .summary-box { border: 1px solid #e5e7eb; border-radius: 6px; padding: 10px 16px; min-width: 140px; }
    .summary-box .label { font-size: 10px; color: #6b7280; text-transform: uppercase; }
    .summary-box .value { font-size: 15px; font-weight: 700; color: #1e3a5f; margin-top: 2px; }
    @media print { body { padding: 12px; } }
"""

_PRINT_SCRIPT = "<script>window.addEventListener('load', function () { setTimeout(function () { window.print(); }, 500); });</script>"


def _esc(value: Any) -> str:
    return html.escape(str(value), quote=True)


def _table_row(index: int, trip: TripRecord) -> str:
    extra = format_inr(trip.extra_charge) if trip.extra_charge > 0 else "—"
    cells = [
        f"<td>{_esc(format_date(trip.date))}</td>",
        f"<td>{_esc(trip.order_id)}</td>",
        f"<td>{_esc(trip.vehicle_number)}</td>",
        f"<td>{_esc(trip.origin)}</td>",
        f"<td>{_esc(trip.destination)}</td>",
        f'<td class="num">{_esc(format_inr(trip.amount))}</td>',
        f'<td class="num">{_esc(extra)}</td>',
        f'<td class="num total-cell">{_esc(format_inr(trip.total))}</td>',
        f"<td>{_esc(trip.remarks or '—')}</td>",
    ]
    css = "even" if index % 2 == 0 else "odd"
    return f'<tr class="{css}">{"".join(cells)}</tr>'


def trips_to_print_html(
    trips: Sequence[TripRecord],
    period: str,
    summary: Optional[TripSummary] = None,
    generated_at: Optional[datetime] = None,
    auto_print: bool = False,
) -> str:
    """
    Self-contained printable report: the trip table followed by the four totals.
    With auto_print the document opens the browser print dialog once loaded.
    """
    summary = summary or aggregate(trips)
    generated = (generated_at or datetime.now()).strftime("%d/%m/%Y, %H:%M:%S")

    script = _PRINT_SCRIPT if auto_print else ""
    rows = "\n".join(_table_row(i, t) for i, t in enumerate(trips))
    boxes = [
        ("Total Trips", str(summary.total_trips)),
        ("Total Amount", format_inr(summary.total_amount)),
        ("Total Extra Charges", format_inr(summary.total_extra_charges)),
        ("Grand Total", format_inr(summary.grand_total)),
    ]
    summary_html = "\n".join(
        f'<div class="summary-box"><div class="label">{_esc(label)}</div>'
        f'<div class="value">{_esc(value)}</div></div>'
        for label, value in boxes
    )
    headers = "".join(
        f"<th>{h}</th>"
        for h in ("Date", "Order ID", "Vehicle No.", "From", "To", "Amount", "Extra Charge", "Total", "Remarks")
    )

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8" />
  <title>Trip Report – {_esc(period)}</title>
  <style>{_PRINT_CSS}</style>
</head>
<body>
  <h1>Trip Report</h1>
  <p class="subtitle">Period: {_esc(period)} &nbsp;|&nbsp; Generated: {generated} &nbsp;|&nbsp; Total Records: {len(trips)}</p>
  <table>
    <thead><tr>{headers}</tr></thead>
    <tbody>
{rows}
    </tbody>
  </table>
  <div class="summary">
{summary_html}
  </div>
  {script}
</body>
</html>"""
