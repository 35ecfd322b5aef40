import calendar as _calendar
import logging
from collections import defaultdict
from datetime import date, datetime, time, timedelta, timezone
from typing import Any, Dict, Iterable, List, Mapping, Tuple

from ics import Calendar, Event

from ..utils.errors import error_response

logger = logging.getLogger(__name__)


def parse_month(month: str | None) -> Tuple[date, date, str]:
    """Return the first and last day of ``YYYY-MM`` (defaults to this month)."""
    if not month:
        today = date.today()
        month = f"{today.year:04d}-{today.month:02d}"
    try:
        year_s, month_s = month.split("-", 1)
        year, mon = int(year_s), int(month_s)
        first = date(year, mon, 1)
    except ValueError:
        raise error_response("Invalid month", {"month": "Expected YYYY-MM"}, 422)
    last = date(year, mon, _calendar.monthrange(year, mon)[1])
    return first, last, f"{year:04d}-{mon:02d}"


def _as_date(value: Any) -> date | None:
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value:
        try:
            return date.fromisoformat(value[:10])
        except ValueError:
            logger.warning("Ignoring unparseable calendar date %r", value)
    return None


def group_by_date(month: str, **buckets: Iterable[Mapping[str, Any]]) -> Dict[str, Any]:
    """Group rows of each named bucket by their ``event_date``.

    ``group_by_date("2025-06", bookings=[...], availability=[...])`` returns
    ``{"month": ..., "days": [{"date": ..., "bookings": [...], ...}]}`` with
    days in ascending order.
    """
    days: Dict[date, Dict[str, List[Any]]] = defaultdict(lambda: {name: [] for name in buckets})
    for name, rows in buckets.items():
        for row in rows:
            day = _as_date(row.get("event_date"))
            if day is None:
                continue
            days[day][name].append(row)
    return {
        "month": month,
        "days": [{"date": day, **entries} for day, entries in sorted(days.items())],
    }


def _combine(day: date, value: Any, fallback: time) -> datetime:
    if isinstance(value, str) and value:
        value = time.fromisoformat(value)
    if not isinstance(value, time):
        value = fallback
    return datetime.combine(day, value).replace(tzinfo=timezone.utc)


def booking_ics(booking: Mapping[str, Any]) -> str:
    """Serialize one confirmed booking as an iCalendar document."""
    day = _as_date(booking.get("event_date"))
    if day is None:
        raise error_response("Booking has no date", {"event_date": "missing"}, 400)
    begin = _combine(day, booking.get("start_time"), time(0, 0))
    end = _combine(day, booking.get("end_time"), time(23, 59))
    # Overnight sets end after midnight
    if end <= begin:
        end += timedelta(days=1)
    artist = (booking.get("artist") or {}).get("name")
    title = booking.get("event_name") or (f"Booking: {artist}" if artist else "Booking")

    cal = Calendar()
    event = Event()
    event.name = title
    event.begin = begin
    event.end = end
    if booking.get("event_location"):
        event.location = booking["event_location"]
    event.uid = f"booking-{booking.get('id')}@beatbookings.live"
    cal.events.add(event)
    return cal.serialize()