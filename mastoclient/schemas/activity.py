"""Weekly activity buckets from ``GET /api/v1/instance/activity``.

Every value in a bucket is transmitted as a JSON string: ``week`` holds Unix
epoch seconds and the counters hold base-10 integers. Anything that does not
parse is rejected rather than read as zero.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone

from pydantic import field_serializer, field_validator

from mastoclient.schemas import ApiModel

__all__ = ["WeeklyActivity", "parse_unixtime"]

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")


def _parse_integer(value: str, *, field: str) -> int:
    if not _INTEGER_RE.fullmatch(value):
        raise ValueError(f"{field} must be a base-10 integer, got {value!r}")
    return int(value)


def parse_unixtime(value: object) -> datetime:
    """Return the UTC datetime for epoch seconds given as a number or string."""
    if isinstance(value, datetime):
        return value
    if isinstance(value, bool):
        raise ValueError("week must be epoch seconds, got a boolean")
    if isinstance(value, int):
        seconds = value
    elif isinstance(value, str):
        seconds = _parse_integer(value, field="week")
    else:
        raise ValueError(f"week must be epoch seconds, got {type(value).__name__}")
    try:
        return datetime.fromtimestamp(seconds, tz=timezone.utc)
    except (OverflowError, OSError, ValueError) as exc:
        raise ValueError(f"week out of range: {value!r}") from exc


class WeeklyActivity(ApiModel):
    week: datetime
    statuses: int = 0
    logins: int = 0
    registrations: int = 0

    @field_validator("week", mode="before")
    @classmethod
    def _week_from_epoch(cls, value: object) -> datetime:
        return parse_unixtime(value)

    @field_validator("statuses", "logins", "registrations", mode="before")
    @classmethod
    def _counter_from_string(cls, value: object, info) -> int:  # type: ignore[no-untyped-def]
        if not isinstance(value, str):
            raise ValueError(f"{info.field_name} must be sent as a string")
        return _parse_integer(value, field=info.field_name)

    @field_serializer("week")
    def _week_to_epoch(self, value: datetime) -> str:
        return str(int(value.timestamp()))

    @field_serializer("statuses", "logins", "registrations")
    def _counter_to_string(self, value: int) -> str:
        return str(value)
