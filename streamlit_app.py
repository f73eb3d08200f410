import logging
from datetime import date
from typing import Dict, List

import streamlit as st
import streamlit.components.v1 as components

from auth import is_authenticated, login, logout
from calculator import TripSummary, summarize
from config import configure_logging, load_settings
from db import LocalStorage
from export import export_filename, trips_to_csv, trips_to_print_html
from filters import TripFilter, current_month, month_bounds, previous_month
from formatting import format_date, format_inr, format_month
from models import TripRecord, TripStatus
from store import StorageError, TripNotFoundError, TripStore
from validation import trip_to_form, validate_date_range, validate_trip
from vehicles import VehicleList

settings = load_settings()
configure_logging(settings.log_level)
logger = logging.getLogger("trip_logger")

SHOW_DEV_DETAILS = settings.show_dev_details
STATUS_ICONS = {TripStatus.PENDING: "⏳", TripStatus.COMPLETE: "✅", TripStatus.CANCEL: "❌"}
STATUS_LABELS = {TripStatus.PENDING: "Pending", TripStatus.COMPLETE: "Completed", TripStatus.CANCEL: "Cancelled"}


# -------------------------
# PAGE CONFIG
# -------------------------
st.set_page_config(page_title="Trip Logger", page_icon="🚚", layout="wide")

st.markdown(
    """
    <style>
    div[data-testid="InputInstructions"] {
        display: none !important;
    }

    div[data-testid="stButton"] > button {
        border-radius: 999px !important;
    }

    div[data-testid="stMetricValue"] {
        font-size: 1.4rem;
    }
    </style>
    """,
    unsafe_allow_html=True,
)


def show_exception(e: Exception) -> None:
    if SHOW_DEV_DETAILS:
        with st.expander("Details (developer)"):
            st.exception(e)


# -------------------------
# AUTH GATE
# -------------------------
st.title("🚚 Trip Logger")

if not is_authenticated():
    st.caption("Log trips, track charges and export reports.")
    left, mid, right = st.columns([1, 1.3, 1])

    with mid:
        with st.form("sign_in_form"):
            username = st.text_input("Username")
            password = st.text_input("Password", type="password")
            submitted = st.form_submit_button("Sign in", use_container_width=True)

            if submitted:
                if login(username, password, settings):
                    st.rerun()
                else:
                    st.error("Invalid username or password.")

    st.stop()


# -------------------------
# STORE / VEHICLES (one per browser session)
# -------------------------
if "trip_store" not in st.session_state:
    storage = LocalStorage(settings.data_path)
    st.session_state.trip_store = TripStore.load(storage)
    st.session_state.vehicle_list = VehicleList(storage)

store: TripStore = st.session_state.trip_store
vehicles: VehicleList = st.session_state.vehicle_list


# -------------------------
# SIDEBAR
# -------------------------
PAGES = ["Dashboard", "Create Trip", "Reports", "Vehicles"]

if "next_page" in st.session_state:
    st.session_state["page"] = st.session_state.pop("next_page")

with st.sidebar:
    st.markdown("### Trip Logger")
    page = st.radio("Go to", PAGES, key="page")
    st.caption(f"{len(store)} trips logged")
    if st.button("Sign out"):
        logout()
        st.session_state.pop("trip_store", None)
        st.session_state.pop("vehicle_list", None)
        st.rerun()


def go_to(page_name: str) -> None:
    st.session_state["next_page"] = page_name
    st.rerun()


# -------------------------
# Shared widgets
# -------------------------
def render_summary(summary: TripSummary, with_status: bool = True) -> None:
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Total Trips", summary.total_trips)
    c2.metric("Total Amount", format_inr(summary.total_amount))
    c3.metric("Extra Charges", format_inr(summary.total_extra_charges))
    c4.metric("Grand Total", format_inr(summary.grand_total))

    if with_status:
        for col, status in zip(st.columns(len(STATUS_LABELS)), TripStatus):
            col.metric(f"{STATUS_ICONS[status]} {STATUS_LABELS[status]}", summary.status_breakdown.count(status))


def render_chart(summary: TripSummary) -> None:
    if not summary.daily_series:
        st.info("No trip data to chart for this period.")
        return
    data = {
        "date": [b.date.isoformat() for b in summary.daily_series],
        "Amount": [float(b.amount) for b in summary.daily_series],
        "Extra Charge": [float(b.extra_charge) for b in summary.daily_series],
    }
    st.bar_chart(data, x="date", y=["Amount", "Extra Charge"])


def trips_table(trips: List[TripRecord]) -> List[Dict[str, str]]:
    return [
        {
            "Date": format_date(t.date),
            "Order ID": t.order_id,
            "Vehicle": t.vehicle_number,
            "From": t.origin,
            "To": t.destination,
            "Amount": format_inr(t.amount),
            "Extra": format_inr(t.extra_charge) if t.extra_charge > 0 else "—",
            "Total": format_inr(t.total),
            "Status": t.status.value,
            "Remarks": t.remarks or "—",
        }
        for t in trips
    ]


def render_exports(trips: List[TripRecord], summary: TripSummary, period: str, suffix: str, key: str) -> None:
    c1, c2, c3 = st.columns(3)
    c1.download_button(
        "Download CSV",
        data=trips_to_csv(trips).encode("utf-8"),
        file_name=export_filename("trip-report", suffix, "csv"),
        mime="text/csv",
        disabled=not trips,
        key=f"{key}_csv",
        use_container_width=True,
    )
    c2.download_button(
        "Download printable report",
        data=trips_to_print_html(trips, period, summary).encode("utf-8"),
        file_name=export_filename("trip-report", suffix, "html"),
        mime="text/html",
        disabled=not trips,
        key=f"{key}_html",
        use_container_width=True,
    )
    if c3.button("Print / Save as PDF", disabled=not trips, key=f"{key}_print", use_container_width=True):
        # If the browser blocks the dialog, the download above still works.
        components.html(trips_to_print_html(trips, period, summary, auto_print=True), height=600, scrolling=True)


# -------------------------
# DASHBOARD
# -------------------------
def render_trip_row(trip: TripRecord) -> None:
    col_trip, col_status, col_edit, col_del = st.columns([6, 2, 1, 1])

    with col_trip:
        vehicle = f" · {trip.vehicle_number}" if trip.vehicle_number else ""
        st.markdown(
            f"**{format_date(trip.date)}** · `{trip.order_id}`{vehicle} · "
            f"{trip.origin} → {trip.destination}"
        )
        extra = f" + {format_inr(trip.extra_charge)}" if trip.extra_charge > 0 else ""
        st.caption(f"{format_inr(trip.amount)}{extra} = **{format_inr(trip.total)}**"
                   + (f" · _{trip.remarks}_" if trip.remarks else ""))

    with col_status:
        options = list(TripStatus)
        chosen = st.selectbox(
            "Status",
            options,
            index=options.index(trip.status),
            format_func=lambda s: f"{STATUS_ICONS[s]} {s.value}",
            key=f"status_{trip.id}",
            label_visibility="collapsed",
        )
        if chosen != trip.status:
            try:
                store.set_status(trip.id, chosen)
            except (TripNotFoundError, StorageError) as e:
                st.error(str(e))
                show_exception(e)
            else:
                st.rerun()

    with col_edit:
        if st.button("Edit", key=f"edit_{trip.id}"):
            st.session_state["editing_id"] = trip.id
            go_to("Create Trip")

    with col_del:
        if st.session_state.get("confirm_delete") == trip.id:
            if st.button("Confirm", key=f"confirm_{trip.id}", type="primary"):
                try:
                    store.delete(trip.id)
                except StorageError as e:
                    st.error(str(e))
                    show_exception(e)
                st.session_state.pop("confirm_delete", None)
                st.rerun()
        elif st.button("Delete", key=f"del_{trip.id}"):
            st.session_state["confirm_delete"] = trip.id
            st.rerun()


def render_dashboard() -> None:
    today = date.today()
    st.header("Dashboard")

    mode = st.radio("Show", ["All", "Daily", "Monthly"], horizontal=True, key="dash_mode")
    trip_filter = TripFilter()
    if mode == "Daily":
        day = st.date_input("Day", value=today, format="DD/MM/YYYY", key="dash_day")
        trip_filter = TripFilter.daily(day)
    elif mode == "Monthly":
        months = sorted({t.date.strftime("%Y-%m") for t in store.all()}
                        | {current_month(today), previous_month(today)}, reverse=True)
        month = st.selectbox("Month", months, format_func=format_month, key="dash_month")
        trip_filter = TripFilter.monthly(month)

    caption = trip_filter.label()
    if trip_filter.month:
        first, last = month_bounds(trip_filter.month)
        caption += f" ({format_date(first)} – {format_date(last)})"
    st.caption(caption)
    summary = summarize(store.all(), trip_filter)
    render_summary(summary)

    st.subheader("Cost per day")
    render_chart(summary)

    st.subheader(f"All records ({len(store)} total)")
    query = st.text_input("Search", placeholder="Search by Order ID, date, from, to, remarks...")
    rows = store.query(search=query)

    if not store.all():
        st.info("No trips logged yet.")
    elif not rows:
        st.info("No trips match your search.")
    for trip in rows:
        render_trip_row(trip)


# -------------------------
# CREATE / EDIT TRIP
# -------------------------
def render_trip_form() -> None:
    editing = store.get(st.session_state.get("editing_id", ""))
    st.header("Edit trip" if editing else "Create trip")

    defaults = trip_to_form(editing) if editing else {
        "date": date.today().isoformat(),
        "extra_charge": "0",
        "status": TripStatus.PENDING.value,
    }
    vehicle_options = vehicles.list()
    errors = st.session_state.pop("form_errors", {})

    with st.form("trip_form", clear_on_submit=False):
        col1, col2 = st.columns(2)
        trip_date = col1.date_input(
            "Date",
            value=date.fromisoformat(defaults["date"]),
            format="DD/MM/YYYY",
        )
        order_id = col2.text_input("Order ID", value=defaults.get("order_id", ""))

        if vehicle_options:
            current = defaults.get("vehicle_number", "")
            choices = [""] + vehicle_options + ([current] if current and current not in vehicle_options else [])
            vehicle_number = st.selectbox(
                "Vehicle number",
                choices,
                index=choices.index(current) if current in choices else 0,
                format_func=lambda v: v or "Select a vehicle",
            )
        else:
            vehicle_number = defaults.get("vehicle_number", "")
            st.caption("Add vehicles on the Vehicles page to pick one here.")

        col3, col4 = st.columns(2)
        origin = col3.text_input("From", value=defaults.get("origin", ""))
        destination = col4.text_input("To", value=defaults.get("destination", ""))

        col5, col6, col7 = st.columns(3)
        amount = col5.text_input("Amount (₹)", value=defaults.get("amount", ""))
        extra_charge = col6.text_input("Extra charge (₹)", value=defaults.get("extra_charge", "0"))
        statuses = [s.value for s in TripStatus]
        status = col7.selectbox("Status", statuses, index=statuses.index(defaults.get("status", "Pending")))

        remarks = st.text_area("Remarks", value=defaults.get("remarks", ""))
        submitted = st.form_submit_button("Update trip" if editing else "Save trip")

    for field_name, message in errors.items():
        st.error(f"{field_name.replace('_', ' ').title()}: {message}")

    if editing and st.button("Cancel edit"):
        st.session_state.pop("editing_id", None)
        go_to("Dashboard")

    if not submitted:
        return

    form = {
        "date": trip_date.isoformat() if trip_date else "",
        "order_id": order_id,
        "vehicle_number": vehicle_number,
        "origin": origin,
        "destination": destination,
        "amount": amount,
        "extra_charge": extra_charge,
        "remarks": remarks,
        "status": status,
    }
    result = validate_trip(form, store.all(), editing=editing, vehicles_required=bool(vehicle_options))
    if not result.ok:
        st.session_state["form_errors"] = result.errors
        st.rerun()

    try:
        if editing:
            store.update(result.record)
        else:
            store.add(result.record)
    except (TripNotFoundError, StorageError) as e:
        st.error(str(e))
        show_exception(e)
        return

    st.session_state.pop("editing_id", None)
    st.toast("Trip updated." if editing else "Trip saved.")
    go_to("Dashboard")


# -------------------------
# REPORTS
# -------------------------
def render_reports() -> None:
    st.header("Reports")
    daily_tab, range_tab = st.tabs(["Daily report", "Date range report"])

    with daily_tab:
        day = st.date_input("Report date", value=date.today(), format="DD/MM/YYYY", key="report_day")
        trip_filter = TripFilter.daily(day)
        trips = store.query(trip_filter)
        summary = summarize(store.all(), trip_filter)
        render_summary(summary, with_status=False)
        if trips:
            st.dataframe(trips_table(trips), use_container_width=True, hide_index=True)
        else:
            st.info(f"No trips on {format_date(day)}.")
        render_exports(trips, summary, format_date(day), day.isoformat(), key="daily")

    with range_tab:
        c1, c2 = st.columns(2)
        start = c1.date_input("From date", value=date.today(), format="DD/MM/YYYY", key="range_from")
        end = c2.date_input("To date", value=date.today(), format="DD/MM/YYYY", key="range_to")

        date_range, errors = validate_date_range(
            start.isoformat() if start else "", end.isoformat() if end else ""
        )
        for message in errors.values():
            st.error(message)
        if date_range is None:
            return

        trip_filter = TripFilter.date_range(date_range.start, date_range.end)
        trips = store.query(trip_filter)
        summary = summarize(store.all(), trip_filter)
        st.subheader(f"Report: {trip_filter.label()}")
        render_summary(summary)
        if trips:
            st.dataframe(trips_table(trips), use_container_width=True, hide_index=True)
        else:
            st.info("No trips in this date range.")
        suffix = f"{date_range.start.isoformat()}-to-{date_range.end.isoformat()}"
        render_exports(trips, summary, trip_filter.label(), suffix, key="range")


# -------------------------
# VEHICLES
# -------------------------
def render_vehicles() -> None:
    st.header("Vehicles")
    st.caption("Add and manage vehicle numbers for easy selection in trip forms.")

    with st.form("vehicle_form", clear_on_submit=True):
        name = st.text_input("Vehicle number", placeholder="e.g. MH12AB1234")
        if st.form_submit_button("Add vehicle"):
            try:
                added = vehicles.add(name)
            except OSError as e:
                st.error("Could not save the vehicle list.")
                show_exception(e)
            else:
                if added:
                    st.success(f"Added {name.strip().upper()}.")
                else:
                    st.warning("Vehicle number is empty or already listed.")

    names = vehicles.list()
    if not names:
        st.info("No vehicles yet.")
    for vehicle in names:
        col_name, col_btn = st.columns([6, 1])
        col_name.write(f"**{vehicle}**")
        if col_btn.button("Remove", key=f"rm_{vehicle}"):
            try:
                vehicles.remove(vehicle)
            except OSError as e:
                st.error("Could not save the vehicle list.")
                show_exception(e)
            else:
                st.rerun()


if page == "Dashboard":
    render_dashboard()
elif page == "Create Trip":
    render_trip_form()
elif page == "Reports":
    render_reports()
else:
    render_vehicles()

st.markdown("---")
st.caption("Data is stored locally on this device.")
