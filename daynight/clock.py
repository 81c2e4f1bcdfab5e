"""
In-universe clock.

The clock owns the current :class:`~daynight.timevalue.TimeValue` and the
reserved switches and variables derived from it. Time never runs backwards:
every mutator except :meth:`Clock.set_total_minutes` moves it forward, and
each mutation republishes the derived state before notifying listeners.

Published state:
    - daytime and night switches (mutually exclusive)
    - Bloodmoon phase and Bloodmoon night switches (when enabled)
    - days passed, current hour, current minute and moon phase variables
"""

from __future__ import annotations

import logging
from typing import Callable

from daynight.config import LightingConfig
from daynight.moon import MoonPhaseCalculator
from daynight.state import SessionState
from daynight.timevalue import TimeValue

LOGGER = logging.getLogger(__name__)

TimeListener = Callable[["Clock"], None]


class Clock:
    """Track in-universe time and publish the state derived from it."""

    def __init__(self, config: LightingConfig, state: SessionState, total_minutes: int = 0) -> None:
        self.config = config
        self.state = state
        self.moon = MoonPhaseCalculator(config)
        self._now = TimeValue(total_minutes)
        self._listeners: list[TimeListener] = []
        reserved = config.reserved
        self._writer = state.reserve(reserved.switches, reserved.variables)
        self.update_derived_state()

    def add_listener(self, listener: TimeListener) -> None:
        """Call ``listener(clock)`` after every time change."""
        self._listeners.append(listener)

    def remove_listener(self, listener: TimeListener) -> None:
        self._listeners.remove(listener)

    @property
    def now(self) -> TimeValue:
        return self._now

    # --- Mutators ---------------------------------------------------------

    def set_total_minutes(self, minutes: int) -> None:
        """Overwrite the clock, e.g. when restoring a saved session."""
        self._change_to(TimeValue(int(minutes)))

    def reset(self) -> None:
        """Return to the configured new-game start time on day 0."""
        self._change_to(TimeValue(self.config.new_game_start))

    def advance(self, minutes: int) -> None:
        self._change_to(self._now.add(minutes))

    def set_forward_to(self, minute_of_day: int) -> None:
        """Move forward to the next occurrence of ``minute_of_day``."""
        self._change_to(self._now.advance_to(minute_of_day))

    def _change_to(self, new_time: TimeValue) -> None:
        LOGGER.debug("Clock %s (day %d) -> %s (day %d)", self._now, self._now.day_count, new_time, new_time.day_count)
        self._now = new_time
        self.update_derived_state()
        for listener in tuple(self._listeners):
            listener(self)

    def update_derived_state(self) -> None:
        """Write every reserved switch and variable from the current time."""
        now = self._now
        reserved = self.config.reserved
        is_day = self.is_daytime()

        self._writer.set_switch(reserved.daytime_switch, is_day)
        self._writer.set_switch(reserved.night_switch, not is_day)
        self._writer.set_variable(reserved.days_passed_variable, now.day_count)
        self._writer.set_variable(reserved.current_hour_variable, now.hour_of_day)
        self._writer.set_variable(reserved.current_minute_variable, now.minute_of_hour)

        if self.config.bloodmoon.enabled:
            self._writer.set_variable(reserved.moon_phase_variable, self.moon_phase())
            self._writer.set_switch(reserved.bloodmoon_phase_switch, self.is_bloodmoon_phase())
            self._writer.set_switch(reserved.bloodmoon_night_switch, self.is_bloodmoon_night())

    # --- Getters ----------------------------------------------------------

    @property
    def minutes(self) -> int:
        return self._now.minute_of_hour

    @property
    def hours(self) -> int:
        return self._now.hour_of_day

    @property
    def days(self) -> int:
        return self._now.day_count

    @property
    def total_hours(self) -> int:
        return self._now.total_hours

    @property
    def total_minutes(self) -> int:
        return self._now.total_minutes

    @property
    def minutes_of_day(self) -> int:
        return self._now.minute_of_day

    def is_daytime(self) -> bool:
        return self.config.is_daytime_minute(self._now.minute_of_day)

    def is_night(self) -> bool:
        return not self.is_daytime()

    def moon_phase(self) -> int:
        return self.moon.get_moon_phase(self._now)

    def is_bloodmoon_phase(self) -> bool:
        return self.config.bloodmoon.enabled and self.moon.is_bloodmoon_phase(self._now)

    def is_bloodmoon_night(self) -> bool:
        return self.config.bloodmoon.enabled and self.moon.is_bloodmoon_night(self._now)

    def get_time_string(self) -> str:
        return f"Day {self.days} - {self._now.to_clock_string()}"
