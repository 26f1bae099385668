from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta

from .constants import DATE_KEY_FORMAT, DATE_KEY_PATTERN, MONTH_FILTER_PATTERN, TIME_PATTERN, YEAR_PATTERN
from .errors import InvalidInput, InvalidTimeFormat


def parse_timestamp(value: str) -> datetime:
    """Parse a stored ISO-8601 timestamp into an aware datetime.

    Older data may end in ``Z`` or carry no offset at all; naive values are
    read as local time.
    """
    if not isinstance(value, str):
        raise TypeError(f"expected an ISO-8601 string, got {type(value).__name__}")
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.astimezone()
    return parsed


def is_valid_time(value: str) -> bool:
    match = TIME_PATTERN.fullmatch(value)
    if not match:
        return False
    hour, minute = int(match.group(1)), int(match.group(2))
    return 0 <= hour <= 23 and 0 <= minute <= 59


def parse_time(value: str, field: str = "start") -> tuple[int, int]:
    if not is_valid_time(value):
        raise InvalidTimeFormat(field, value)
    hour_text, minute_text = value.split(":")
    return int(hour_text), int(minute_text)


def combine_date_and_time(day: date, hhmm: str, field: str = "start") -> datetime:
    if isinstance(day, datetime):
        day = day.date()
    hour, minute = parse_time(hhmm, field)
    return datetime(day.year, day.month, day.day, hour, minute).astimezone()


def parse_date(value: str) -> date:
    try:
        return datetime.strptime(value, DATE_KEY_FORMAT).date()
    except ValueError as exc:
        raise InvalidInput(f"Invalid date '{value}'. Use 'YYYY-MM-DD'.") from exc


def date_key(day: date) -> str:
    return day.strftime(DATE_KEY_FORMAT)


def parse_date_key(key: str) -> tuple[int, int, int] | None:
    match = DATE_KEY_PATTERN.fullmatch(key)
    if not match:
        return None
    year, month, day = (int(part) for part in match.groups())
    return year, month, day


def parse_month(value: str | int) -> int:
    try:
        month = int(value)
    except (TypeError, ValueError) as exc:
        raise InvalidInput(f"Invalid month '{value}'. Use a number from 1 to 12.") from exc
    if not 1 <= month <= 12:
        raise InvalidInput(f"Invalid month '{value}'. Use a number from 1 to 12.")
    return month


def parse_year(value: str | int) -> int:
    text = str(value).strip()
    if not YEAR_PATTERN.fullmatch(text):
        raise InvalidInput(f"Invalid year '{value}'. Use four digits (for example: 2025).")
    return int(text)


def parse_month_filter(value: str) -> tuple[int, int]:
    match = MONTH_FILTER_PATTERN.fullmatch(value.strip())
    if not match:
        raise InvalidInput(f"Invalid month filter '{value}'. Use 'YYYY-MM'.")
    return parse_year(match.group(1)), parse_month(match.group(2))


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def fmt_clock(moment: datetime) -> str:
    local = moment.astimezone()
    return f"{local.hour}:{local.minute:02d}"


def fmt_clock_padded(moment: datetime) -> str:
    return moment.astimezone().strftime("%H:%M")


def fmt_duration(delta: timedelta) -> str:
    total_minutes = max(0, int(delta.total_seconds())) // 60
    hours, minutes = divmod(total_minutes, 60)
    return f"{hours:02d} h {minutes:02d} min"
