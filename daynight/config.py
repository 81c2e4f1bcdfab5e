"""Typed day-night configuration and its JSON loader.

Raw settings are validated once here; the rest of the package only ever sees
frozen :class:`LightingConfig` values with tones, presets and overlays already
resolved.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from daynight.errors import ConfigError
from daynight.lighting import (
    BLEND_MODES,
    ORIGIN_CENTER,
    ORIGIN_UPPER_LEFT,
    LightingPreset,
    OverlayDescriptor,
    Tone,
    ToneSchedule,
    assign_layer_numbers,
)
from daynight.timevalue import MINUTES_PER_DAY, clock_to_minutes

LOGGER = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[1] / "config" / "daynight.json"

_CLOCK_PATTERN = re.compile(r"^\s*(\d{1,2}):(\d{2})\s*([AaPp][Mm])\s*$")

# Mirrors the stock plugin parameters so a sparse file still yields a usable cycle.
DEFAULT_TIMES = {
    "new_game_start": "8:00 AM",
    "dawn_start": "6:00 AM",
    "day_start": "6:00 AM",
    "dusk_start": "6:00 PM",
    "night_start": "8:00 PM",
}
DEFAULT_DAWN_PHASES = ([-68, -68, -14, 41], [-68, -68, -27, 14], [-54, -54, -27, 0], [-27, -27, -14, 0])
DEFAULT_DUSK_PHASES = ([27, -14, -14, 0], [54, -27, -27, 0], [41, -41, -27, 14], [-14, -54, -14, 41])
DEFAULT_DAY_TONE = [0, 0, 0, 0]
DEFAULT_NIGHT_TONE = [-68, -68, 0, 68]
DEFAULT_BLOODMOON_DAWN_PHASES = ([-34, -85, -85, 34], [-17, -68, -68, 17], [-17, -41, -41, 0], [-14, -27, -27, 0])
DEFAULT_BLOODMOON_DUSK_PHASES = ([34, -14, -14, 0], [68, -34, -41, 0], [68, -68, -68, 17], [51, -102, -102, 34])
DEFAULT_BLOODMOON_NIGHT_TONE = [34, -119, -119, 51]


@dataclass(frozen=True)
class ReservedIds:
    """Switch and variable ids owned by the clock; ``0`` leaves a slot unassigned."""

    daytime_switch: int = 0
    night_switch: int = 0
    bloodmoon_night_switch: int = 0
    bloodmoon_phase_switch: int = 0
    days_passed_variable: int = 0
    current_hour_variable: int = 0
    current_minute_variable: int = 0
    moon_phase_variable: int = 0

    @property
    def switch_ids(self) -> tuple[int, ...]:
        """Assigned switch ids in role order, duplicates included."""
        ids = (self.daytime_switch, self.night_switch, self.bloodmoon_night_switch, self.bloodmoon_phase_switch)
        return tuple(identifier for identifier in ids if identifier > 0)

    @property
    def variable_ids(self) -> tuple[int, ...]:
        ids = (
            self.days_passed_variable,
            self.current_hour_variable,
            self.current_minute_variable,
            self.moon_phase_variable,
        )
        return tuple(identifier for identifier in ids if identifier > 0)

    @property
    def switches(self) -> frozenset[int]:
        return frozenset(self.switch_ids)

    @property
    def variables(self) -> frozenset[int]:
        return frozenset(self.variable_ids)


@dataclass(frozen=True)
class BloodmoonConfig:
    """Periodic special night with its own dawn, dusk and night tones."""

    enabled: bool = False
    cycle_length_days: int = 6
    nights_before_first: int = 5
    dawn_phases: tuple[Tone, ...] = ()
    dusk_phases: tuple[Tone, ...] = ()
    night_tone: Tone = Tone()

    @property
    def phase_offset(self) -> int:
        return self.nights_before_first % self.cycle_length_days


@dataclass(frozen=True)
class LightingConfig:
    """Resolved day-night settings. Times are minutes since midnight."""

    reserved: ReservedIds = field(default_factory=ReservedIds)
    new_game_start: int = 8 * 60
    dawn_start: int = 6 * 60
    day_start: int = 6 * 60
    dusk_start: int = 18 * 60
    night_start: int = 20 * 60
    minutes_per_step: int = 5
    minutes_per_phase: int = 30
    tone_fade_duration: int = 60
    dawn_phases: tuple[Tone, ...] = ()
    day_tone: Tone = Tone()
    dusk_phases: tuple[Tone, ...] = ()
    night_tone: Tone = Tone()
    outdoor_keyword: str = "outside"
    default_keyword: str = "outside"
    overlay_layer_floor: int = 1
    presets: dict[str, LightingPreset] = field(default_factory=dict, hash=False)
    bloodmoon: BloodmoonConfig = field(default_factory=BloodmoonConfig)

    @property
    def dawn_end(self) -> int:
        return self.schedule.dawn_end

    @property
    def dusk_end(self) -> int:
        return self.schedule.dusk_end

    @property
    def midday(self) -> int:
        """Minute halfway between the end of dawn and the start of dusk."""
        return (self.dawn_end + self.dusk_start) // 2

    @property
    def schedule(self) -> ToneSchedule:
        return ToneSchedule(
            dawn_start=self.dawn_start,
            dusk_start=self.dusk_start,
            minutes_per_phase=self.minutes_per_phase,
            dawn_phases=self.dawn_phases,
            day_tone=self.day_tone,
            dusk_phases=self.dusk_phases,
            night_tone=self.night_tone,
        )

    @property
    def bloodmoon_schedule(self) -> ToneSchedule:
        """Bloodmoon tables on the ordinary thresholds; the day tone is shared."""
        return ToneSchedule(
            dawn_start=self.dawn_start,
            dusk_start=self.dusk_start,
            minutes_per_phase=self.minutes_per_phase,
            dawn_phases=self.bloodmoon.dawn_phases,
            day_tone=self.day_tone,
            dusk_phases=self.bloodmoon.dusk_phases,
            night_tone=self.bloodmoon.night_tone,
        )

    def is_daytime_minute(self, minute_of_day: int) -> bool:
        return self.day_start <= minute_of_day < self.night_start

    def preset(self, keyword: str | None) -> LightingPreset | None:
        if not keyword:
            return None
        return self.presets.get(keyword.lower())


def load_config(path: str | Path = DEFAULT_CONFIG_PATH) -> LightingConfig:
    """Read and validate a JSON lighting configuration file."""
    config_path = Path(path)
    try:
        raw_data = json.loads(config_path.read_text(encoding="utf-8"))
    except OSError as error:
        raise ConfigError(f"cannot read lighting configuration {config_path}: {error}") from error
    except json.JSONDecodeError as error:
        raise ConfigError(f"invalid JSON in {config_path}: {error}") from error

    LOGGER.info("Loading lighting configuration from %s", config_path)
    return parse_config(raw_data)


def parse_config(raw_data: Any) -> LightingConfig:
    """Convert raw settings into a validated :class:`LightingConfig`."""
    if not isinstance(raw_data, dict):
        raise ConfigError("lighting configuration must be a JSON object")

    times_raw = _section(raw_data, "times")
    times = {name: _parse_time(times_raw.get(name, default), f"times.{name}") for name, default in DEFAULT_TIMES.items()}

    minutes_per_phase = _parse_int(raw_data.get("minutes_per_tone_phase", 30), "minutes_per_tone_phase", minimum=1)
    tones_raw = _section(raw_data, "tones")
    outdoor_keyword = _parse_keyword(raw_data.get("outdoor_keyword", "Outside"), "outdoor_keyword")
    layer_floor = _parse_int(raw_data.get("overlay_layer_floor", 1), "overlay_layer_floor", minimum=1)

    presets = _parse_presets(raw_data.get("presets", []), outdoor_keyword)
    presets = assign_layer_numbers(presets, layer_floor)

    config = LightingConfig(
        reserved=_parse_reserved(raw_data),
        new_game_start=times["new_game_start"],
        dawn_start=times["dawn_start"],
        day_start=times["day_start"],
        dusk_start=times["dusk_start"],
        night_start=times["night_start"],
        minutes_per_step=_parse_int(raw_data.get("minutes_per_step", 5), "minutes_per_step", minimum=0),
        minutes_per_phase=minutes_per_phase,
        tone_fade_duration=_parse_int(raw_data.get("tone_fade_duration", 60), "tone_fade_duration", minimum=0),
        dawn_phases=_parse_tone_list(tones_raw.get("dawn", DEFAULT_DAWN_PHASES), "tones.dawn"),
        day_tone=_parse_tone(tones_raw.get("day", DEFAULT_DAY_TONE), "tones.day"),
        dusk_phases=_parse_tone_list(tones_raw.get("dusk", DEFAULT_DUSK_PHASES), "tones.dusk"),
        night_tone=_parse_tone(tones_raw.get("night", DEFAULT_NIGHT_TONE), "tones.night"),
        outdoor_keyword=outdoor_keyword,
        default_keyword=_parse_keyword(raw_data.get("default_keyword", outdoor_keyword), "default_keyword"),
        overlay_layer_floor=layer_floor,
        presets={preset.keyword: preset for preset in presets},
        bloodmoon=_parse_bloodmoon(raw_data.get("bloodmoon", {})),
    )
    _validate_thresholds(config)
    return config


def _section(raw_data: dict[str, Any], name: str) -> dict[str, Any]:
    section = raw_data.get(name, {})
    if not isinstance(section, dict):
        raise ConfigError(f"{name} must be an object")
    return section


def _parse_int(value: Any, name: str, minimum: int | None = None, maximum: int | None = None) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise ConfigError(f"{name} must be a number, got {value!r}")
    try:
        number = int(value)
    except ValueError as error:
        raise ConfigError(f"{name} must be a number, got {value!r}") from error
    if minimum is not None and number < minimum:
        raise ConfigError(f"{name} must be >= {minimum}, got {number}")
    if maximum is not None and number > maximum:
        raise ConfigError(f"{name} must be <= {maximum}, got {number}")
    return number


def _parse_bool(value: Any, name: str) -> bool:
    if not isinstance(value, bool):
        raise ConfigError(f"{name} must be true or false, got {value!r}")
    return value


def _parse_keyword(value: Any, name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"{name} must be a non-empty string")
    return value.strip().lower()


def _parse_time(value: Any, name: str) -> int:
    """Accept ``"7:05 PM"`` strings or ``{"hour", "minute", "meridiem"}`` objects."""
    if isinstance(value, str):
        match = _CLOCK_PATTERN.match(value)
        if match is None:
            raise ConfigError(f"{name} must look like '7:05 AM', got {value!r}")
        hour, minute, meridiem = int(match.group(1)), int(match.group(2)), match.group(3)
    elif isinstance(value, dict):
        hour = _parse_int(value.get("hour"), f"{name}.hour")
        minute = _parse_int(value.get("minute", 0), f"{name}.minute")
        meridiem = str(value.get("meridiem", "AM"))
    else:
        raise ConfigError(f"{name} must be a clock string or object, got {value!r}")

    try:
        return clock_to_minutes(hour, minute, meridiem)
    except ValueError as error:
        raise ConfigError(f"{name}: {error}") from error


def _parse_tone(value: Any, name: str) -> Tone:
    if isinstance(value, dict):
        channels = [value.get(channel, 0) for channel in ("red", "green", "blue", "gray")]
    elif isinstance(value, (list, tuple)) and len(value) == 4:
        channels = list(value)
    else:
        raise ConfigError(f"{name} must be a 4-item list or a red/green/blue/gray object")

    red, green, blue = (_parse_int(channels[index], f"{name}[{index}]", -255, 255) for index in range(3))
    gray = _parse_int(channels[3], f"{name}.gray", 0, 255)
    return Tone(red, green, blue, gray)


def _parse_tone_list(value: Any, name: str) -> tuple[Tone, ...]:
    if not isinstance(value, (list, tuple)):
        raise ConfigError(f"{name} must be a list of tones")
    return tuple(_parse_tone(entry, f"{name}[{index}]") for index, entry in enumerate(value))


def _parse_reserved(raw_data: dict[str, Any]) -> ReservedIds:
    switches = _section(raw_data, "switches")
    variables = _section(raw_data, "variables")
    reserved = ReservedIds(
        daytime_switch=_parse_int(switches.get("daytime", 0), "switches.daytime", minimum=0),
        night_switch=_parse_int(switches.get("night", 0), "switches.night", minimum=0),
        bloodmoon_night_switch=_parse_int(switches.get("bloodmoon_night", 0), "switches.bloodmoon_night", minimum=0),
        bloodmoon_phase_switch=_parse_int(switches.get("bloodmoon_phase", 0), "switches.bloodmoon_phase", minimum=0),
        days_passed_variable=_parse_int(variables.get("days_passed", 0), "variables.days_passed", minimum=0),
        current_hour_variable=_parse_int(variables.get("current_hour", 0), "variables.current_hour", minimum=0),
        current_minute_variable=_parse_int(variables.get("current_minute", 0), "variables.current_minute", minimum=0),
        moon_phase_variable=_parse_int(variables.get("moon_phase", 0), "variables.moon_phase", minimum=0),
    )

    for kind, assigned in (("switches", reserved.switch_ids), ("variables", reserved.variable_ids)):
        if len(assigned) != len(set(assigned)):
            raise ConfigError(f"{kind} must not reuse the same id for two roles")
    return reserved


def _parse_overlay(value: Any, name: str) -> OverlayDescriptor | None:
    if value is None:
        return None
    if not isinstance(value, dict):
        raise ConfigError(f"{name} must be an object")

    image = value.get("image")
    if not image:
        LOGGER.warning("Ignoring %s: no image given, preset will have no overlay", name)
        return None

    layer_raw = value.get("layer")
    origin = _parse_int(value.get("origin", ORIGIN_UPPER_LEFT), f"{name}.origin")
    if origin not in (ORIGIN_UPPER_LEFT, ORIGIN_CENTER):
        raise ConfigError(f"{name}.origin must be 0 (upper left) or 1 (center)")
    blend_mode = _parse_int(value.get("blend_mode", 0), f"{name}.blend_mode")
    if blend_mode not in BLEND_MODES:
        raise ConfigError(f"{name}.blend_mode must be one of {BLEND_MODES}")

    return OverlayDescriptor(
        image=str(image),
        layer=None if layer_raw in (None, 0, "") else _parse_int(layer_raw, f"{name}.layer", minimum=1),
        origin=origin,
        x=_parse_int(value.get("x", 0), f"{name}.x"),
        y=_parse_int(value.get("y", 0), f"{name}.y"),
        width_percent=_parse_int(value.get("width_percent", 100), f"{name}.width_percent", minimum=0),
        height_percent=_parse_int(value.get("height_percent", 100), f"{name}.height_percent", minimum=0),
        opacity=_parse_int(value.get("opacity", 255), f"{name}.opacity", 0, 255),
        blend_mode=blend_mode,
    )


def _parse_presets(value: Any, outdoor_keyword: str) -> list[LightingPreset]:
    if not isinstance(value, list):
        raise ConfigError("presets must be a list")

    presets: list[LightingPreset] = []
    seen: set[str] = set()
    for index, entry in enumerate(value):
        name = f"presets[{index}]"
        if not isinstance(entry, dict):
            raise ConfigError(f"{name} must be an object")
        keyword = _parse_keyword(entry.get("keyword"), f"{name}.keyword")
        if keyword in seen:
            raise ConfigError(f"{name}: duplicate lighting keyword {keyword!r}")
        if keyword == outdoor_keyword:
            LOGGER.warning("Preset %r shadows the outdoor keyword; its tone will never be used", keyword)
        seen.add(keyword)
        presets.append(
            LightingPreset(
                keyword=keyword,
                tone=_parse_tone(entry.get("tone", DEFAULT_DAY_TONE), f"{name}.tone"),
                overlay=_parse_overlay(entry.get("overlay"), f"{name}.overlay"),
            )
        )
    return presets


def _parse_bloodmoon(value: Any) -> BloodmoonConfig:
    if not isinstance(value, dict):
        raise ConfigError("bloodmoon must be an object")
    tones = _section(value, "tones")
    return BloodmoonConfig(
        enabled=_parse_bool(value.get("enabled", False), "bloodmoon.enabled"),
        cycle_length_days=_parse_int(value.get("cycle_length_days", 6), "bloodmoon.cycle_length_days", minimum=1),
        nights_before_first=_parse_int(value.get("nights_before_first", 5), "bloodmoon.nights_before_first", minimum=0),
        dawn_phases=_parse_tone_list(tones.get("dawn", DEFAULT_BLOODMOON_DAWN_PHASES), "bloodmoon.tones.dawn"),
        dusk_phases=_parse_tone_list(tones.get("dusk", DEFAULT_BLOODMOON_DUSK_PHASES), "bloodmoon.tones.dusk"),
        night_tone=_parse_tone(tones.get("night", DEFAULT_BLOODMOON_NIGHT_TONE), "bloodmoon.tones.night"),
    )


def _validate_thresholds(config: LightingConfig) -> None:
    """Reject overlapping dawn and dusk windows for either tone schedule."""
    if config.day_start >= config.night_start:
        raise ConfigError("times.day_start must be earlier than times.night_start")

    schedules = [("tones", config.schedule)]
    if config.bloodmoon.enabled:
        schedules.append(("bloodmoon.tones", config.bloodmoon_schedule))

    for name, schedule in schedules:
        ordered = (schedule.dawn_start, schedule.dawn_end, schedule.dusk_start, schedule.dusk_end)
        if list(ordered) != sorted(ordered) or schedule.dusk_end > MINUTES_PER_DAY:
            raise ConfigError(
                f"{name}: dawn and dusk windows overlap or run past midnight "
                f"(dawn {schedule.dawn_start}-{schedule.dawn_end}, dusk {schedule.dusk_start}-{schedule.dusk_end})"
            )
