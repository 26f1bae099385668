from __future__ import annotations

import logging
from datetime import date, datetime, timedelta

from .errors import InvalidInput, InvalidRange, NoActiveSession, NoSessionsToday, SessionNotFound
from .models import WorkSession
from .parsing import combine_date_and_time, date_key, parse_date, parse_date_key
from .storage import SessionStore

logger = logging.getLogger(__name__)


def local_now() -> datetime:
    return datetime.now().astimezone()


def today_key(now: datetime | None = None) -> str:
    return date_key((now or local_now()).astimezone().date())


def next_id(sessions: list[WorkSession]) -> int:
    if not sessions:
        return 1
    return max(item.id for item in sessions) + 1


def find_session(sessions: list[WorkSession], session_id: int) -> WorkSession | None:
    return next((item for item in sessions if item.id == session_id), None)


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


def _shift_local(moment: datetime, shift: timedelta) -> datetime:
    if not shift:
        return moment
    # Move in wall-clock time; the stored offset may not apply on the new date.
    wall = moment.astimezone().replace(tzinfo=None)
    return (wall + shift).astimezone()


def start_session(store: SessionStore, now: datetime | None = None) -> tuple[str, WorkSession]:
    now = now or local_now()
    key = today_key(now)
    sessions = store.get(key)
    still_open = [item.id for item in sessions if item.is_open]
    if still_open:
        logger.warning("Starting a new session on %s while session(s) %s are still open", key, still_open)

    session = WorkSession(id=next_id(sessions), start_time=now)
    sessions.append(session)
    store.set(key, sessions)
    logger.debug("Started session #%d on %s", session.id, key)
    return key, session


def end_session(
    store: SessionStore,
    description: str | None = None,
    tag: str | None = None,
    now: datetime | None = None,
) -> WorkSession:
    now = now or local_now()
    key = today_key(now)
    sessions = store.get(key)
    if not sessions:
        raise NoSessionsToday(f"No sessions found for today ({key}).")

    # Newest first: an earlier session left open by a missed end is only reached last.
    target = next((item for item in reversed(sessions) if item.is_open), None)
    if target is None:
        raise NoActiveSession("No active session to end.")
    if now < target.start_time:
        raise InvalidRange("End time must be after start time.")

    target.end_time = now
    if _clean(description):
        target.description = _clean(description)
    if _clean(tag):
        target.tag = _clean(tag)
    store.set(key, sessions)
    logger.debug("Ended session #%d on %s", target.id, key)
    return target


def validate_entry(
    day: date | None,
    start_text: str | None,
    end_text: str | None = None,
) -> tuple[datetime, datetime | None]:
    if day is None:
        raise InvalidInput("Date is required.")
    start = combine_date_and_time(day, start_text or "", "start")
    end = combine_date_and_time(day, end_text, "end") if end_text else None
    if end is not None and end < start:
        raise InvalidRange("End time must be after start time.")
    return start, end


def add_session(
    store: SessionStore,
    day: date | None,
    start_text: str | None,
    end_text: str | None = None,
    description: str | None = None,
    tag: str | None = None,
) -> tuple[str, WorkSession]:
    start, end = validate_entry(day, start_text, end_text)
    key = date_key(day)
    sessions = store.get(key)
    session = WorkSession(
        id=next_id(sessions),
        start_time=start,
        end_time=end,
        description=description,
        tag=tag,
    )
    sessions.append(session)
    store.set(key, sessions)
    logger.debug("Added session #%d on %s", session.id, key)
    return key, session


def edit_session(
    store: SessionStore,
    key: str,
    session_id: int,
    day: date | None = None,
    start_text: str | None = None,
    end_text: str | None = None,
    description: str | None = None,
    tag: str | None = None,
) -> tuple[str, WorkSession]:
    """Rewrite one session, moving it to another partition when the date changes.

    ``None`` keeps the current value of a field; an empty ``end_text``
    reopens the session. A moved session takes the next free id of its new
    partition.
    """
    sessions = store.get(key)
    existing = find_session(sessions, session_id)
    if existing is None:
        raise SessionNotFound(f"Session #{session_id} not found on {key}.")

    original_day = parse_date(key)
    target_day = day or original_day
    # Untouched times follow the session to its new date at full precision.
    shift = target_day - original_day

    if start_text is None:
        start = _shift_local(existing.start_time, shift)
    else:
        start = combine_date_and_time(target_day, start_text, "start")
    if end_text is None:
        end = _shift_local(existing.end_time, shift) if existing.end_time is not None else None
    elif end_text:
        end = combine_date_and_time(target_day, end_text, "end")
    else:
        end = None
    if end is not None and end < start:
        raise InvalidRange("End time must be after start time.")

    updated = WorkSession(
        id=existing.id,
        start_time=start,
        end_time=end,
        description=existing.description if description is None else description,
        tag=existing.tag if tag is None else tag,
    )

    target_key = date_key(target_day)
    if target_key == key:
        store.set(key, [updated if item.id == session_id else item for item in sessions])
        logger.debug("Edited session #%d on %s", session_id, key)
        return key, updated

    target_sessions = store.get(target_key)
    updated.id = next_id(target_sessions)
    target_sessions.append(updated)
    store.set(target_key, target_sessions)
    store.set(key, [item for item in sessions if item.id != session_id])
    logger.debug("Moved session #%d on %s to #%d on %s", session_id, key, updated.id, target_key)
    return target_key, updated


def remove_session(store: SessionStore, key: str, session_id: int) -> WorkSession:
    sessions = store.get(key)
    removed = find_session(sessions, session_id)
    if removed is None:
        raise SessionNotFound(f"Session #{session_id} not found on {key}.")
    store.set(key, [item for item in sessions if item.id != session_id])
    logger.debug("Removed session #%d from %s", session_id, key)
    return removed


def remove_all(store: SessionStore) -> None:
    store.clear()


def load_partitions(
    store: SessionStore,
    month_filter: tuple[int, int] | None = None,
) -> list[tuple[str, list[WorkSession]]]:
    """Non-empty partitions, newest date first, sessions ordered by start time."""
    partitions: list[tuple[str, list[WorkSession]]] = []
    for key in sorted(store.list_keys(), reverse=True):
        parsed = parse_date_key(key)
        if parsed is None:
            continue
        if month_filter is not None and parsed[:2] != month_filter:
            continue
        sessions = store.get(key)
        if sessions:
            partitions.append((key, sorted(sessions, key=lambda s: (s.start_time, s.id))))
    return partitions


def available_months(store: SessionStore) -> list[str]:
    months: set[str] = set()
    for key, _ in load_partitions(store):
        year, month, _day = parse_date_key(key)
        months.add(f"{year:04d}-{month:02d}")
    return sorted(months)
