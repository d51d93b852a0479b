# ensport_backend/core/clock.py
# Wall-clock helpers for the Asia/Bangkok zone (UTC+7, no DST)

from datetime import datetime, date, time, timezone
import pytz

from ensport_backend.core.config import TIMEZONE_NAME, UTC_OFFSET_LABEL

bangkok_tz = pytz.timezone(TIMEZONE_NAME)


def now_bangkok() -> datetime:
    """Current time as an aware Asia/Bangkok datetime."""
    return datetime.now(bangkok_tz)


def utc_now() -> datetime:
    """Aware UTC timestamp for created_at/updated_at/reminder_sent_at columns."""
    return datetime.now(timezone.utc)


def get_clock():
    """FastAPI dependency returning the clock callable (overridden in tests)."""
    return now_bangkok


def parse_hhmm(value: str) -> time:
    """
    Parse a "HH:MM" 24-hour string.
    Raises ValueError on anything else ("9:00" is accepted, "24:00" is not).
    """
    hours, minutes = value.strip().split(":")
    return time(hour=int(hours), minute=int(minutes))


def local_instant(day: date, hhmm: str) -> datetime:
    """Combine a calendar date and "HH:MM" into an aware Bangkok datetime."""
    return bangkok_tz.localize(datetime.combine(day, parse_hhmm(hhmm)))


def as_bangkok(moment: datetime) -> datetime:
    """Naive datetimes are taken as Bangkok wall-clock; aware ones are converted."""
    if moment.tzinfo is None:
        return bangkok_tz.localize(moment)
    return moment.astimezone(bangkok_tz)


def server_time_payload(now: datetime) -> dict:
    """Current date/time as shown to clients (the /server-time endpoint)."""
    local = as_bangkok(now)
    return {
        "current_date": local.strftime("%Y-%m-%d"),
        "current_time": local.strftime("%H:%M"),
        "timestamp": int(local.timestamp() * 1000),
        "timezone": TIMEZONE_NAME,
        "utc_offset": UTC_OFFSET_LABEL,
    }
