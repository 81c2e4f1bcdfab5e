"""Lighting value types: tones, overlay pictures, presets and tone schedules."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Iterable

LOGGER = logging.getLogger(__name__)

ORIGIN_UPPER_LEFT = 0
ORIGIN_CENTER = 1

BLEND_NORMAL = 0
BLEND_ADDITIVE = 1
BLEND_MULTIPLY = 2
BLEND_SCREEN = 3
BLEND_MODES = (BLEND_NORMAL, BLEND_ADDITIVE, BLEND_MULTIPLY, BLEND_SCREEN)


@dataclass(frozen=True)
class Tone:
    """Screen color adjustment: signed RGB offsets plus a desaturation amount."""

    red: int = 0
    green: int = 0
    blue: int = 0
    gray: int = 0

    def as_tuple(self) -> tuple[int, int, int, int]:
        return (self.red, self.green, self.blue, self.gray)


ZERO_TONE = Tone()


@dataclass(frozen=True)
class OverlayDescriptor:
    """Picture shown on top of the tinted screen for a lighting preset.

    ``layer`` is ``None`` until :func:`assign_layer_numbers` fills it in.
    ``image`` is an opaque reference resolved by the presentation layer.
    """

    image: str
    layer: int | None = None
    origin: int = ORIGIN_UPPER_LEFT
    x: int = 0
    y: int = 0
    width_percent: int = 100
    height_percent: int = 100
    opacity: int = 255
    blend_mode: int = BLEND_NORMAL

    @property
    def has_image(self) -> bool:
        return bool(self.image)


@dataclass(frozen=True)
class LightingPreset:
    """Named lighting: a fixed tone and an optional overlay picture."""

    keyword: str
    tone: Tone
    overlay: OverlayDescriptor | None = None


@dataclass(frozen=True)
class ToneSchedule:
    """Dawn and dusk phase tables framed by flat day and night tones."""

    dawn_start: int
    dusk_start: int
    minutes_per_phase: int
    dawn_phases: tuple[Tone, ...]
    day_tone: Tone
    dusk_phases: tuple[Tone, ...]
    night_tone: Tone

    @property
    def dawn_end(self) -> int:
        return self.dawn_start + len(self.dawn_phases) * self.minutes_per_phase

    @property
    def dusk_end(self) -> int:
        return self.dusk_start + len(self.dusk_phases) * self.minutes_per_phase


def assign_layer_numbers(presets: Iterable[LightingPreset], floor: int) -> tuple[LightingPreset, ...]:
    """Give every overlay without an explicit layer the lowest free number.

    Explicit layer picks are recorded first. Remaining overlays are then
    visited in keyword order and take the smallest unused number at or above
    ``floor``, so the result does not depend on the order presets were
    declared in. Presets keep their input order in the returned tuple.
    """
    presets = tuple(presets)
    taken: dict[int, str] = {}
    for preset in presets:
        overlay = preset.overlay
        if overlay is None or overlay.layer is None:
            continue
        if overlay.layer in taken:
            LOGGER.warning(
                "Presets %r and %r share overlay layer %d; switching between them cannot cross-fade",
                taken[overlay.layer],
                preset.keyword,
                overlay.layer,
            )
            continue
        taken[overlay.layer] = preset.keyword

    assigned: dict[str, LightingPreset] = {}
    candidate = max(1, floor)
    for preset in sorted(presets, key=lambda item: item.keyword):
        overlay = preset.overlay
        if overlay is None or overlay.layer is not None:
            continue
        while candidate in taken:
            candidate += 1
        taken[candidate] = preset.keyword
        assigned[preset.keyword] = replace(preset, overlay=replace(overlay, layer=candidate))
        LOGGER.debug("Assigned overlay layer %d to preset %r", candidate, preset.keyword)

    return tuple(assigned.get(preset.keyword, preset) for preset in presets)
