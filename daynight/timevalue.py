"""Monotonic in-universe time measured in whole minutes."""

from __future__ import annotations

from dataclasses import dataclass

MINUTES_PER_HOUR = 60
HOURS_PER_DAY = 24
MINUTES_PER_DAY = MINUTES_PER_HOUR * HOURS_PER_DAY

MERIDIEMS = ("AM", "PM")


def clock_to_minutes(hour: int, minute: int, meridiem: str) -> int:
    """Convert a 12-hour clock reading into minutes since midnight.

    Hour 12 counts as zero, so ``12:30 AM`` is 30 and ``12:00 PM`` is 720.
    """
    meridiem = str(meridiem).upper()
    if meridiem not in MERIDIEMS:
        raise ValueError(f"meridiem must be AM or PM, got {meridiem!r}")
    if not 1 <= hour <= 12:
        raise ValueError(f"hour must be between 1 and 12, got {hour}")
    if not 0 <= minute < MINUTES_PER_HOUR:
        raise ValueError(f"minute must be between 0 and 59, got {minute}")

    hours = hour % 12
    if meridiem == "PM":
        hours += 12
    return hours * MINUTES_PER_HOUR + minute


@dataclass(frozen=True, order=True)
class TimeValue:
    """Elapsed in-universe time since midnight of day 0.

    Values are immutable; ``add`` and ``advance_to`` return new instances and
    never move time backwards.
    """

    total_minutes: int = 0

    def __post_init__(self) -> None:
        if self.total_minutes < 0:
            raise ValueError(f"time cannot be negative, got {self.total_minutes} minutes")

    @classmethod
    def from_clock(cls, hour: int, minute: int, meridiem: str) -> TimeValue:
        """Build a day-0 time of day from a 12-hour clock reading."""
        return cls(clock_to_minutes(hour, minute, meridiem))

    @classmethod
    def from_span(cls, hours: int, minutes: int) -> TimeValue:
        """Build a span of hours and minutes, e.g. for an "add time" command."""
        if hours < 0:
            raise ValueError(f"hours cannot be negative, got {hours}")
        if not 0 <= minutes < MINUTES_PER_HOUR:
            raise ValueError(f"minutes must be between 0 and 59, got {minutes}")
        return cls(hours * MINUTES_PER_HOUR + minutes)

    @property
    def minute_of_hour(self) -> int:
        return self.total_minutes % MINUTES_PER_HOUR

    @property
    def hour_of_day(self) -> int:
        return (self.total_minutes // MINUTES_PER_HOUR) % HOURS_PER_DAY

    @property
    def day_count(self) -> int:
        return self.total_minutes // MINUTES_PER_DAY

    @property
    def minute_of_day(self) -> int:
        return self.total_minutes % MINUTES_PER_DAY

    @property
    def total_hours(self) -> int:
        return self.total_minutes // MINUTES_PER_HOUR

    def add(self, minutes: int) -> TimeValue:
        """Return this time moved forward by ``minutes``."""
        if minutes < 0:
            raise ValueError(f"time only moves forward, cannot add {minutes} minutes")
        return TimeValue(self.total_minutes + int(minutes))

    def advance_to(self, minute_of_day: int) -> TimeValue:
        """Return the next occurrence of ``minute_of_day`` after this time.

        A target at or before the current time of day lands on the following
        day, so the result is always strictly later than ``self``.
        """
        target = int(minute_of_day) % MINUTES_PER_DAY
        difference = target - self.minute_of_day
        if difference <= 0:
            difference += MINUTES_PER_DAY
        return TimeValue(self.total_minutes + difference)

    def to_clock_string(self) -> str:
        """Return the zero-padded 24-hour ``HH:MM`` reading."""
        return f"{self.hour_of_day:02d}:{self.minute_of_hour:02d}"

    def __str__(self) -> str:
        return self.to_clock_string()
