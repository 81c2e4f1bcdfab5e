"""Per-location lighting: preset application and time-driven outdoor tint."""

from __future__ import annotations

import logging

from daynight.clock import Clock
from daynight.lighting import ZERO_TONE, Tone
from daynight.overlay import OverlayTransitionEngine
from daynight.screen import Screen
from daynight.tone_resolver import ToneResolver

LOGGER = logging.getLogger(__name__)


class LightingController:
    """Apply the active location's lighting preset and follow the clock outdoors."""

    def __init__(self, clock: Clock, screen: Screen, resolver: ToneResolver | None = None) -> None:
        self.clock = clock
        self.config = clock.config
        self.screen = screen
        self.resolver = resolver or ToneResolver(clock.config, clock.moon)
        self.overlays = OverlayTransitionEngine(screen)
        self.preset_keyword = ""
        self.current_tone: Tone = ZERO_TONE
        clock.add_listener(self.on_time_changed)

    @property
    def is_outdoor(self) -> bool:
        return self.preset_keyword == self.config.outdoor_keyword

    def apply_preset(self, keyword: str | None, duration: int) -> None:
        """Tint to ``keyword``'s tone and switch to its overlay over ``duration`` ticks."""
        self.preset_keyword = (keyword or "").lower()
        self.current_tone = self.resolver.resolve_keyword_tone(self.preset_keyword, self.clock.now)
        preset = self.config.preset(self.preset_keyword)
        overlay = preset.overlay if preset is not None else None

        LOGGER.info("Lighting preset %r at %s", self.preset_keyword, self.clock.now)
        self.screen.start_tint(self.current_tone, duration)
        self.overlays.apply_overlay(overlay, duration)

    def on_time_changed(self, _clock: Clock | None = None) -> None:
        if not self.is_outdoor:
            return

        new_tone = self.resolver.resolve_outdoor_tone(self.clock.now)
        if new_tone == self.current_tone:
            return

        self.current_tone = new_tone
        self.screen.start_tint(new_tone, self.config.tone_fade_duration)
