from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from .errors import NoDataForPeriod
from .models import WorkSession
from .parsing import days_in_month, parse_date_key
from .storage import SessionStore

logger = logging.getLogger(__name__)


@dataclass
class DaySummary:
    day: int
    since: datetime | None = None
    till: datetime | None = None
    hours: float = 0.0

    @property
    def worked(self) -> bool:
        return self.hours > 0


@dataclass
class MonthSummary:
    month: int
    year: int
    days: list[DaySummary]
    total: float


def sessions_for_month(store: SessionStore, month: int, year: int) -> dict[int, list[WorkSession]]:
    """Sessions of every stored partition in the month, keyed by day of month."""
    by_day: dict[int, list[WorkSession]] = {}
    for key in store.list_keys():
        parsed = parse_date_key(key)
        if parsed is None:
            continue
        key_year, key_month, key_day = parsed
        if key_year == year and key_month == month:
            by_day.setdefault(key_day, []).extend(store.get(key))

    if not by_day:
        raise NoDataForPeriod(f"No sessions found for {month}/{year}.")
    return by_day


def summarize_day(day: int, sessions: list[WorkSession]) -> DaySummary:
    # Sessions crossing midnight count in full toward the day they were recorded under.
    since: datetime | None = None
    till: datetime | None = None
    hours = 0.0
    for item in sessions:
        if item.end_time is None:
            continue
        hours += item.hours
        if since is None or item.start_time < since:
            since = item.start_time
        if till is None or item.end_time > till:
            till = item.end_time

    if hours <= 0:
        return DaySummary(day=day)
    return DaySummary(day=day, since=since, till=till, hours=hours)


def aggregate(store: SessionStore, month: int, year: int) -> MonthSummary:
    by_day = sessions_for_month(store, month, year)
    days = [summarize_day(day, by_day.get(day, [])) for day in range(1, days_in_month(year, month) + 1)]
    total = sum(item.hours for item in days if item.worked)
    logger.debug("Aggregated %d day(s) with work in %d/%d: %.2f hours", sum(d.worked for d in days), month, year, total)
    return MonthSummary(month=month, year=year, days=days, total=total)
