"""Game session wiring: clock, lighting, host hooks and commands."""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Callable

from daynight.clock import Clock
from daynight.config import LightingConfig
from daynight.controller import LightingController
from daynight.screen import Screen
from daynight.state import SessionState
from daynight.timevalue import TimeValue, clock_to_minutes

LOGGER = logging.getLogger(__name__)

SESSION_START = "session_start"
STEP = "step"
LOCATION_LOADED = "location_loaded"
HOOK_NAMES = (SESSION_START, STEP, LOCATION_LOADED)


class Hooks:
    """Named extension points the host emits and the core subscribes to."""

    def __init__(self) -> None:
        self._subscribers: defaultdict[str, list[Callable[..., Any]]] = defaultdict(list)

    def subscribe(self, name: str, callback: Callable[..., Any]) -> None:
        self._check_name(name)
        self._subscribers[name].append(callback)

    def emit(self, name: str, *args: Any) -> None:
        self._check_name(name)
        for callback in tuple(self._subscribers.get(name, ())):
            callback(*args)

    @staticmethod
    def _check_name(name: str) -> None:
        if name not in HOOK_NAMES:
            raise ValueError(f"unknown hook {name!r}; expected one of {HOOK_NAMES}")


@dataclass(frozen=True)
class LocationSettings:
    """Lighting and time settings declared by a single map or location."""

    lighting_keyword: str | None = None
    steps_advance_time: bool = False
    minutes_per_step: int | None = None


class Session:
    """The game-state object that owns the clock for one play session."""

    def __init__(
        self,
        config: LightingConfig,
        screen: Screen,
        total_minutes: int = 0,
        hooks: Hooks | None = None,
    ) -> None:
        self.config = config
        self.state = SessionState()
        self.clock = Clock(config, self.state, total_minutes)
        self.lighting = LightingController(self.clock, screen)
        self.hooks = hooks or Hooks()
        self.location = LocationSettings()

    def install(self) -> None:
        """Subscribe the core to the host's session, step and location hooks."""
        self.hooks.subscribe(SESSION_START, self.start_new_game)
        self.hooks.subscribe(STEP, self.step_taken)
        self.hooks.subscribe(LOCATION_LOADED, self.load_location)

    # --- Host events ------------------------------------------------------

    def start_new_game(self) -> None:
        self.clock.reset()

    def load_location(self, settings: LocationSettings) -> None:
        self.location = settings
        self.lighting.overlays.reset()
        self.lighting.apply_preset(self.location_keyword, 0)

    @property
    def location_keyword(self) -> str:
        return (self.location.lighting_keyword or self.config.default_keyword).lower()

    @property
    def minutes_per_step(self) -> int:
        if self.location.minutes_per_step is not None:
            return self.location.minutes_per_step
        if self.location.steps_advance_time:
            return self.config.minutes_per_step
        return 0

    def step_taken(self) -> None:
        minutes = self.minutes_per_step
        if minutes > 0:
            self.clock.advance(minutes)

    # --- Commands ---------------------------------------------------------

    def set_time(self, hour: int, minute: int, meridiem: str) -> None:
        """Move forward to the next ``hour:minute meridiem``, rolling to tomorrow if needed."""
        self.clock.set_forward_to(clock_to_minutes(hour, minute, meridiem))

    def add_time(self, hours: int, minutes: int) -> None:
        self.clock.advance(TimeValue.from_span(hours, minutes).total_minutes)

    def reset_time(self) -> None:
        self.clock.reset()

    def reset_lighting(self, duration: int) -> None:
        """Return to the lighting the current location declares."""
        self.lighting.apply_preset(self.location_keyword, duration)

    def use_lighting_preset(self, keyword: str, duration: int) -> None:
        self.lighting.apply_preset(keyword, duration)
