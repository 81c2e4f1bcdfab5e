"""Configuration loading, validation and overlay layer assignment."""

from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path

from daynight.config import DEFAULT_CONFIG_PATH, load_config, parse_config
from daynight.errors import ConfigError
from daynight.lighting import LightingPreset, OverlayDescriptor, Tone, assign_layer_numbers


def preset(keyword: str, layer: int | None = None, image: str = "img") -> LightingPreset:
    return LightingPreset(keyword=keyword, tone=Tone(), overlay=OverlayDescriptor(image=image, layer=layer))


class LayerAssignmentTests(unittest.TestCase):
    def test_explicit_layers_kept_and_gaps_filled(self) -> None:
        result = assign_layer_numbers([preset("alpha"), preset("beta", layer=2), preset("gamma")], floor=1)
        self.assertEqual([item.overlay.layer for item in result], [1, 2, 3])
        self.assertEqual([item.keyword for item in result], ["alpha", "beta", "gamma"])

    def test_assignment_ignores_declaration_order(self) -> None:
        forward = assign_layer_numbers([preset("alpha"), preset("gamma"), preset("beta")], floor=5)
        backward = assign_layer_numbers([preset("beta"), preset("gamma"), preset("alpha")], floor=5)
        self.assertEqual(
            {item.keyword: item.overlay.layer for item in forward},
            {item.keyword: item.overlay.layer for item in backward},
        )
        self.assertEqual({item.keyword: item.overlay.layer for item in forward}, {"alpha": 5, "beta": 6, "gamma": 7})

    def test_auto_layers_skip_explicit_picks_above_floor(self) -> None:
        result = assign_layer_numbers([preset("a"), preset("b", layer=10), preset("c")], floor=10)
        self.assertEqual({item.keyword: item.overlay.layer for item in result}, {"a": 11, "b": 10, "c": 12})

    def test_presets_without_overlay_untouched(self) -> None:
        plain = LightingPreset(keyword="plain", tone=Tone(1, 2, 3, 4))
        self.assertEqual(assign_layer_numbers([plain], floor=1), (plain,))

    def test_shared_explicit_layer_warns(self) -> None:
        with self.assertLogs("daynight.lighting", level="WARNING"):
            assign_layer_numbers([preset("a", layer=3), preset("b", layer=3)], floor=1)


class ParseConfigTests(unittest.TestCase):
    def test_defaults_match_stock_cycle(self) -> None:
        config = parse_config({})
        self.assertEqual(config.new_game_start, 480)
        self.assertEqual((config.dawn_start, config.dawn_end), (360, 480))
        self.assertEqual((config.dusk_start, config.dusk_end), (1080, 1200))
        self.assertEqual(config.midday, 780)
        self.assertEqual(config.outdoor_keyword, "outside")
        self.assertEqual(config.default_keyword, "outside")
        self.assertFalse(config.bloodmoon.enabled)
        self.assertEqual(config.reserved.switches, frozenset())

    def test_time_formats(self) -> None:
        config = parse_config(
            {
                "times": {
                    "new_game_start": {"hour": 12, "minute": 15, "meridiem": "AM"},
                    "night_start": "9:30 pm",
                }
            }
        )
        self.assertEqual(config.new_game_start, 15)
        self.assertEqual(config.night_start, 21 * 60 + 30)

    def test_tone_formats_and_keyword_case(self) -> None:
        config = parse_config(
            {"presets": [{"keyword": "Sepia", "tone": {"red": 34, "green": -34, "blue": -68, "gray": 170}}]}
        )
        self.assertEqual(config.preset("SEPIA").tone, Tone(34, -34, -68, 170))
        self.assertIsNone(config.preset("unknown"))
        self.assertIsNone(config.preset(""))

    def test_overlay_without_image_is_dropped(self) -> None:
        with self.assertLogs("daynight.config", level="WARNING"):
            config = parse_config({"presets": [{"keyword": "Mist", "tone": [0, 0, 0, 0], "overlay": {"opacity": 90}}]})
        self.assertIsNone(config.preset("mist").overlay)

    def test_overlapping_windows_rejected(self) -> None:
        with self.assertRaises(ConfigError):
            parse_config({"times": {"dawn_start": "6:00 AM", "dusk_start": "7:00 AM"}})

    def test_bloodmoon_windows_validated_when_enabled(self) -> None:
        long_dusk = [[0, 0, 0, 0]] * 20
        with self.assertRaises(ConfigError):
            parse_config({"bloodmoon": {"enabled": True, "tones": {"dusk": long_dusk}}})
        parse_config({"bloodmoon": {"enabled": False, "tones": {"dusk": long_dusk}}})

    def test_invalid_values_rejected(self) -> None:
        invalid = [
            {"times": {"day_start": "9:00 PM", "night_start": "8:00 PM"}},
            {"tones": {"day": [0, 0, 300, 0]}},
            {"tones": {"night": [0, 0, 0, -1]}},
            {"tones": {"day": [0, 0, 0]}},
            {"times": {"dawn_start": "25:00 AM"}},
            {"minutes_per_tone_phase": 0},
            {"presets": [{"keyword": "Fire"}, {"keyword": "FIRE"}]},
            {"presets": [{"tone": [0, 0, 0, 0]}]},
            {"bloodmoon": {"cycle_length_days": 0}},
            {"switches": {"daytime": 4, "night": 4}},
            {"switches": {"daytime": "4", "night": 4}},
            {"variables": {"current_hour": "7", "current_minute": "7"}},
            {"bloodmoon": {"enabled": "false"}},
            {"bloodmoon": {"enabled": 1}},
            {"presets": [{"keyword": "x", "overlay": {"image": "x", "blend_mode": 9}}]},
            [],
        ]
        for settings in invalid:
            with self.subTest(settings=settings):
                with self.assertRaises(ConfigError):
                    parse_config(settings)


class LoadConfigTests(unittest.TestCase):
    def test_bundled_configuration_loads(self) -> None:
        config = load_config(DEFAULT_CONFIG_PATH)
        self.assertTrue(config.bloodmoon.enabled)
        self.assertEqual(config.reserved.daytime_switch, 1)
        layers = {keyword: item.overlay.layer for keyword, item in config.presets.items() if item.overlay}
        self.assertEqual(layers, {"cave": 90, "fog": 91, "lantern": 92})

    def test_missing_file_and_bad_json(self) -> None:
        with tempfile.TemporaryDirectory() as directory:
            missing = Path(directory) / "missing.json"
            with self.assertRaises(ConfigError):
                load_config(missing)

            broken = Path(directory) / "broken.json"
            broken.write_text("{not json", encoding="utf-8")
            with self.assertRaises(ConfigError):
                load_config(broken)

            valid = Path(directory) / "valid.json"
            valid.write_text(json.dumps({"minutes_per_step": 15}), encoding="utf-8")
            self.assertEqual(load_config(valid).minutes_per_step, 15)


if __name__ == "__main__":
    unittest.main()
