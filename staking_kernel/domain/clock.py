"""
Clock -- Deterministic time abstraction.

Responsibility:
    Provides an injectable clock interface so that domain and service code
    never call ``datetime.now()`` or ``time.time()`` directly.  Deposit
    timestamps and reward accrual are defined in whole epoch seconds, which
    ``Clock.timestamp()`` supplies.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O (except SystemClock,
    which is the one sanctioned I/O boundary for time).

Failure modes:
    - SequentialClock raises RuntimeError if constructed empty.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from typing import Iterator

SECONDS_PER_DAY = 24 * 60 * 60


def epoch_seconds(moment: datetime) -> int:
    """Whole seconds since the Unix epoch, truncated toward the past."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return int(moment.timestamp() // 1)


class Clock(ABC):
    """
    Abstract clock interface.

    Contract:
        All services that need current time must receive a Clock instance
        via constructor injection.

    Guarantees:
        - ``now()`` returns a timezone-aware ``datetime``.
        - ``timestamp()`` returns whole epoch seconds for ``now()``.
    """

    @abstractmethod
    def now(self) -> datetime:
        """Get the current time."""
        ...

    def timestamp(self) -> int:
        """Get the current time as whole epoch seconds."""
        return epoch_seconds(self.now())


class SystemClock(Clock):
    """
    Production clock that returns actual system time.

    Non-goals:
        Not suitable for deterministic replay or testing.
    """

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class DeterministicClock(Clock):
    """
    Test clock with controlled time.

    Guarantees:
        - ``now()`` returns the same value on repeated calls until
          ``advance()``, ``advance_days()`` or ``set_time()`` is called.
        - ``tick()`` advances by exactly 1 second and returns the new time.
    """

    def __init__(self, fixed_time: datetime | None = None):
        """
        Initialize with optional fixed time.

        Args:
            fixed_time: Starting time.  Defaults to 2024-01-01 12:00 UTC.
        """
        self._fixed_time = fixed_time or datetime(
            2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc
        )
        self._advance_seconds = 0

    def now(self) -> datetime:
        return self._fixed_time + timedelta(seconds=self._advance_seconds)

    def set_time(self, time: datetime) -> None:
        """Set the clock to a specific time."""
        self._fixed_time = time
        self._advance_seconds = 0

    def advance(self, seconds: int = 1) -> None:
        """Advance the clock by the specified seconds."""
        self._advance_seconds += seconds

    def advance_days(self, days: int) -> None:
        """Advance the clock by whole days."""
        self.advance(days * SECONDS_PER_DAY)

    def tick(self) -> datetime:
        """Advance by 1 second and return new time."""
        self.advance(1)
        return self.now()


class SequentialClock(Clock):
    """
    Clock that returns sequential times from a predefined list.

    Contract:
        Initialized with a non-empty list of ``datetime`` values.  After
        exhaustion, repeats the last value.

    Raises:
        ValueError: If initialized with an empty list.
    """

    def __init__(self, times: list[datetime]):
        if not times:
            raise ValueError("SequentialClock requires at least one time")
        self._times: Iterator[datetime] = iter(times)
        self._last_time: datetime = times[0]

    def now(self) -> datetime:
        """Get the next time in sequence."""
        self._last_time = next(self._times, self._last_time)
        return self._last_time
