"""Screen tone selection from the time of day and lighting keywords."""

from __future__ import annotations

from daynight.config import LightingConfig
from daynight.lighting import ZERO_TONE, Tone, ToneSchedule
from daynight.moon import MoonPhaseCalculator
from daynight.timevalue import TimeValue


def tone_for_minute(schedule: ToneSchedule, minute_of_day: int) -> Tone:
    """Pick the night, dawn phase, day or dusk phase tone for ``minute_of_day``."""
    if minute_of_day < schedule.dawn_start:
        return schedule.night_tone
    if minute_of_day < schedule.dawn_end:
        phase = (minute_of_day - schedule.dawn_start) // schedule.minutes_per_phase
        return schedule.dawn_phases[phase]
    if minute_of_day < schedule.dusk_start:
        return schedule.day_tone
    if minute_of_day < schedule.dusk_end:
        phase = (minute_of_day - schedule.dusk_start) // schedule.minutes_per_phase
        return schedule.dusk_phases[phase]
    return schedule.night_tone


class ToneResolver:
    """Resolve the tone a location should show. Never raises for bad keywords."""

    def __init__(self, config: LightingConfig, moon: MoonPhaseCalculator | None = None) -> None:
        self.config = config
        self.moon = moon or MoonPhaseCalculator(config)
        self._schedule = config.schedule
        self._bloodmoon_schedule = config.bloodmoon_schedule

    def schedule_for(self, time: TimeValue) -> ToneSchedule:
        if self.config.bloodmoon.enabled and self.moon.is_bloodmoon_phase(time, for_tone=True):
            return self._bloodmoon_schedule
        return self._schedule

    def resolve_outdoor_tone(self, time: TimeValue) -> Tone:
        return tone_for_minute(self.schedule_for(time), time.minute_of_day)

    def resolve_keyword_tone(self, keyword: str | None, time: TimeValue) -> Tone:
        """Return the tone for ``keyword``; unknown or empty keywords give the zero tone."""
        if not keyword:
            return ZERO_TONE
        if keyword.lower() == self.config.outdoor_keyword:
            return self.resolve_outdoor_tone(time)
        preset = self.config.preset(keyword)
        return preset.tone if preset is not None else ZERO_TONE
