"""
Injectable time and identifier sources.

Ledger operations never read the wall clock or call uuid directly; routers
hand them a Clock and an IdGenerator so tests can pin both.
"""
import itertools
import threading
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional, Protocol


class Clock(Protocol):
    def now(self) -> datetime: ...


class IdGenerator(Protocol):
    def new_id(self) -> str: ...


def utc_naive(value: Optional[datetime]) -> Optional[datetime]:
    """Timestamps are stored as naive UTC."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


class SystemClock:
    """UTC wall clock."""

    def now(self) -> datetime:
        return utc_naive(datetime.now(timezone.utc))


class FixedClock:
    """Returns a pinned instant, advanced by `step` after every read."""

    def __init__(self, start: datetime, step: Optional[timedelta] = None):
        self._current = start
        self._step = step
        self._lock = threading.Lock()

    def now(self) -> datetime:
        with self._lock:
            value = self._current
            if self._step:
                self._current = self._current + self._step
            return utc_naive(value)

    def advance(self, delta: timedelta) -> None:
        with self._lock:
            self._current = self._current + delta


class UuidGenerator:
    def new_id(self) -> str:
        return str(uuid.uuid4())


class SequentialIdGenerator:
    """Deterministic ids: <prefix>-0001, <prefix>-0002, ..."""

    def __init__(self, prefix: str = "id"):
        self.prefix = prefix
        self._counter = itertools.count(1)
        self._lock = threading.Lock()

    def new_id(self) -> str:
        with self._lock:
            return f"{self.prefix}-{next(self._counter):04d}"


system_clock = SystemClock()
uuid_generator = UuidGenerator()


# Dependencies
def get_clock() -> Clock:
    return system_clock


def get_id_generator() -> IdGenerator:
    return uuid_generator
