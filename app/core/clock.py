import datetime
from typing import Protocol


def utcnow() -> datetime.datetime:
    """Current UTC time as a naive datetime (the form stored in the database)."""
    return datetime.datetime.now(datetime.timezone.utc).replace(tzinfo=None)


class Clock(Protocol):
    def now(self) -> datetime.datetime: ...


class SystemClock:
    def now(self) -> datetime.datetime:
        return utcnow()
