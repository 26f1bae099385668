from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any

from .parsing import parse_timestamp


@dataclass
class WorkSession:
    id: int
    start_time: datetime
    end_time: datetime | None = None
    description: str | None = None
    tag: str | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "id": self.id,
            "start_time": self.start_time.isoformat(),
        }
        if self.end_time is not None:
            payload["end_time"] = self.end_time.isoformat()
        if self.description is not None:
            payload["description"] = self.description
        if self.tag is not None:
            payload["tag"] = self.tag
        return payload

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "WorkSession":
        end_raw = payload.get("end_time")
        return cls(
            id=int(payload["id"]),
            start_time=parse_timestamp(payload["start_time"]),
            end_time=parse_timestamp(end_raw) if end_raw else None,
            description=payload.get("description"),
            tag=payload.get("tag"),
        )

    @property
    def is_open(self) -> bool:
        return self.end_time is None

    @property
    def duration(self) -> timedelta | None:
        if self.end_time is None:
            return None
        return self.end_time - self.start_time

    @property
    def hours(self) -> float:
        """Fractional hours for a closed session, 0.0 while it is still open."""
        duration = self.duration
        if duration is None:
            return 0.0
        return duration.total_seconds() / 3600
