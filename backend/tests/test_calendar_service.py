from datetime import date, datetime

import pytest
from fastapi import HTTPException
from ics import Calendar

from beatbookings.services.calendar_service import booking_ics, group_by_date, parse_month


def test_parse_month_bounds():
    assert parse_month("2024-02") == (date(2024, 2, 1), date(2024, 2, 29), "2024-02")
    assert parse_month("2025-6") == (date(2025, 6, 1), date(2025, 6, 30), "2025-06")


def test_parse_month_defaults_to_current_month():
    first, last, label = parse_month(None)
    today = date.today()
    assert first == today.replace(day=1)
    assert label == f"{today.year:04d}-{today.month:02d}"
    assert last >= today


@pytest.mark.parametrize("value", ["June", "2025-13", "2025"])
def test_parse_month_rejects_garbage(value):
    with pytest.raises(HTTPException) as exc:
        parse_month(value)
    assert exc.value.status_code == 422


def test_group_by_date_buckets_rows_per_day():
    bookings = [{"id": "b1", "event_date": "2025-06-14"}, {"id": "b2", "event_date": "2025-06-02"}]
    availability = [{"id": "x1", "event_date": "2025-06-14"}, {"id": "x2", "event_date": None}]
    grouped = group_by_date("2025-06", bookings=bookings, availability=availability)
    assert grouped["month"] == "2025-06"
    assert [d["date"] for d in grouped["days"]] == [date(2025, 6, 2), date(2025, 6, 14)]
    june_14 = grouped["days"][1]
    assert [b["id"] for b in june_14["bookings"]] == ["b1"]
    assert [a["id"] for a in june_14["availability"]] == ["x1"]
    assert grouped["days"][0]["availability"] == []


def test_booking_ics_contains_one_event():
    booking = {
        "id": "bk-1",
        "event_name": "Summer Launch",
        "event_location": "Rooftop, Sydney",
        "event_date": "2025-06-14",
        "start_time": "18:00:00",
        "end_time": "23:00:00",
    }
    cal = Calendar(booking_ics(booking))
    event = next(iter(cal.events))
    assert event.name == "Summer Launch"
    assert event.location == "Rooftop, Sydney"
    assert event.uid == "booking-bk-1@beatbookings.live"
    assert event.begin.datetime == datetime.fromisoformat("2025-06-14T18:00:00+00:00")
    assert event.end.datetime == datetime.fromisoformat("2025-06-14T23:00:00+00:00")


def test_booking_ics_overnight_set_ends_next_day():
    booking = {"id": "bk-2", "event_date": "2025-06-14", "start_time": "22:00", "end_time": "02:00", "artist": {"name": "DJ Nova"}}
    event = next(iter(Calendar(booking_ics(booking)).events))
    assert event.name == "Booking: DJ Nova"
    assert event.end.datetime == datetime.fromisoformat("2025-06-15T02:00:00+00:00")
