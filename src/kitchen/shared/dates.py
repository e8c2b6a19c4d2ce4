"""Calendar helpers shared by delivery planning and the pause/skip policy."""

import re
from datetime import date, datetime, time, timedelta

from protean.exceptions import ValidationError

_ISO_DATE = re.compile(r"^([0-9]{4})-([0-9]{2})-([0-9]{2})$")
_HHMM = re.compile(r"^([0-9]{1,2}):([0-9]{2})$")


def parse_iso_date(value, field_name: str) -> date:
    """Parse a strict ``YYYY-MM-DD`` value (or pass a date through)."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    match = _ISO_DATE.match(str(value or "").strip())
    if not match:
        raise ValidationError({field_name: [f"{field_name} must be YYYY-MM-DD"]})
    try:
        return date(int(match.group(1)), int(match.group(2)), int(match.group(3)))
    except ValueError as exc:
        raise ValidationError({field_name: [f"{field_name} must be a valid date"]}) from exc


def normalize_hhmm(value) -> str | None:
    """Return ``HH:MM`` for strict hour:minute input, None for anything else (e.g. "12:30 PM")."""
    match = _HHMM.match(str(value or "").strip())
    if not match:
        return None
    hh, mm = int(match.group(1)), int(match.group(2))
    if hh > 23 or mm > 59:
        return None
    return f"{hh:02d}:{mm:02d}"


def hhmm_to_time(value: str) -> time:
    hh, mm = value.split(":")
    return time(int(hh), int(mm))


def is_weekday(day: date) -> bool:
    return day.weekday() < 5


def days_from(start: date, count: int):
    for offset in range(count):
        yield start + timedelta(days=offset)


def group_key(user_id, day: date, display_time: str) -> str:
    """Kitchen grouping key: user, date and normalized time slot."""
    time_key = normalize_hhmm(display_time) or str(display_time or "").strip()
    parts = [str(user_id or ""), day.isoformat(), time_key]
    return "|".join(part for part in parts if part)
