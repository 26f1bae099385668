from __future__ import annotations


class WorklogError(Exception):
    pass


class InvalidInput(WorklogError):
    pass


class InvalidTimeFormat(WorklogError):
    def __init__(self, field: str, value: str):
        self.field = field
        self.value = value
        super().__init__(f"Invalid {field} time '{value}'. Use HH:mm (for example: 9:05 or 17:30).")


class InvalidRange(WorklogError):
    pass


class NoSessionsToday(WorklogError):
    pass


class NoActiveSession(WorklogError):
    pass


class NoDataForPeriod(WorklogError):
    pass


class SessionNotFound(WorklogError):
    pass


class StorageFailure(WorklogError):
    pass
