"""Bloodmoon cycle arithmetic."""

from __future__ import annotations

from daynight.config import LightingConfig
from daynight.timevalue import TimeValue

NOT_STARTED = -1


class MoonPhaseCalculator:
    """Map a point in time to its position in the Bloodmoon cycle.

    Phase ``0`` is the Bloodmoon itself. A night belongs to the calendar day
    it started on until a cutoff minute is crossed the next morning: switches
    roll over at day start, while tones roll over at midday so the dusk
    tables can already lead into the Bloodmoon night.
    """

    def __init__(self, config: LightingConfig) -> None:
        self.config = config
        self.cycle_length_days = config.bloodmoon.cycle_length_days
        self.nights_before_first = config.bloodmoon.nights_before_first
        self.phase_offset = config.bloodmoon.phase_offset

    def nights_passed(self, time: TimeValue, for_tone: bool = False) -> int:
        cutoff = self.config.midday if for_tone else self.config.day_start
        nights = time.day_count
        if time.minute_of_day < cutoff:
            nights -= 1
        return nights

    def get_moon_phase(self, time: TimeValue, for_tone: bool = False) -> int:
        """Return the cycle index, or :data:`NOT_STARTED` before the first Bloodmoon."""
        nights = self.nights_passed(time, for_tone)
        if nights < self.nights_before_first:
            return NOT_STARTED
        return (self.cycle_length_days + nights - self.phase_offset) % self.cycle_length_days

    def is_bloodmoon_phase(self, time: TimeValue, for_tone: bool = False) -> bool:
        return self.get_moon_phase(time, for_tone) == 0

    def is_bloodmoon_night(self, time: TimeValue) -> bool:
        return self.is_bloodmoon_phase(time) and not self.config.is_daytime_minute(time.minute_of_day)
