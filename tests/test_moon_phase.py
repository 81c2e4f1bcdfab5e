"""Bloodmoon cycle indexing with switch and tone cutoffs."""

from __future__ import annotations

import unittest

from daynight.config import parse_config
from daynight.moon import NOT_STARTED, MoonPhaseCalculator
from daynight.timevalue import TimeValue


def at(day: int, hour: int, minute: int = 0) -> TimeValue:
    return TimeValue(day * 1440 + hour * 60 + minute)


def build_calculator(cycle: int = 6, first: int = 5) -> MoonPhaseCalculator:
    config = parse_config(
        {
            "times": {"dawn_start": "6:00 AM", "day_start": "6:00 AM", "dusk_start": "6:00 PM", "night_start": "8:00 PM"},
            "bloodmoon": {"enabled": True, "cycle_length_days": cycle, "nights_before_first": first},
        }
    )
    return MoonPhaseCalculator(config)


class MoonPhaseTests(unittest.TestCase):
    def setUp(self) -> None:
        self.moon = build_calculator()

    def test_no_bloodmoon_before_first_night(self) -> None:
        for day in range(5):
            with self.subTest(day=day):
                phase = self.moon.get_moon_phase(at(day, 21))
                self.assertEqual(phase, NOT_STARTED)
                self.assertFalse(self.moon.is_bloodmoon_phase(at(day, 21)))

    def test_bloodmoon_recurs_every_cycle(self) -> None:
        for day in (5, 11, 17, 23):
            with self.subTest(day=day):
                self.assertEqual(self.moon.get_moon_phase(at(day, 21)), 0)
        self.assertEqual(self.moon.get_moon_phase(at(6, 21)), 1)
        self.assertEqual(self.moon.get_moon_phase(at(10, 21)), 5)

    def test_night_belongs_to_previous_day_until_day_start(self) -> None:
        self.assertEqual(self.moon.get_moon_phase(at(5, 5, 59)), NOT_STARTED)
        self.assertEqual(self.moon.get_moon_phase(at(5, 6, 0)), 0)
        self.assertEqual(self.moon.get_moon_phase(at(6, 5, 59)), 0)
        self.assertEqual(self.moon.get_moon_phase(at(6, 6, 0)), 1)

    def test_tone_cutoff_is_midday(self) -> None:
        self.assertEqual(self.moon.config.midday, 13 * 60)
        self.assertEqual(self.moon.get_moon_phase(at(5, 12, 59), for_tone=True), NOT_STARTED)
        self.assertEqual(self.moon.get_moon_phase(at(5, 12, 59), for_tone=False), 0)
        self.assertEqual(self.moon.get_moon_phase(at(5, 13, 0), for_tone=True), 0)
        self.assertEqual(self.moon.get_moon_phase(at(6, 12, 59), for_tone=True), 0)
        self.assertEqual(self.moon.get_moon_phase(at(6, 13, 0), for_tone=True), 1)

    def test_bloodmoon_night_excludes_daytime(self) -> None:
        self.assertFalse(self.moon.is_bloodmoon_night(at(5, 12)))
        self.assertTrue(self.moon.is_bloodmoon_night(at(5, 20)))
        self.assertTrue(self.moon.is_bloodmoon_night(at(6, 5)))
        self.assertFalse(self.moon.is_bloodmoon_night(at(6, 6)))
        self.assertFalse(self.moon.is_bloodmoon_night(at(6, 21)))

    def test_first_night_beyond_cycle_length(self) -> None:
        moon = build_calculator(cycle=3, first=8)
        self.assertEqual(moon.get_moon_phase(at(7, 21)), NOT_STARTED)
        self.assertEqual(moon.get_moon_phase(at(8, 21)), 0)
        self.assertEqual(moon.get_moon_phase(at(9, 21)), 1)
        self.assertEqual(moon.get_moon_phase(at(11, 21)), 0)

    def test_immediate_cycle_starts_on_day_zero(self) -> None:
        moon = build_calculator(cycle=3, first=0)
        self.assertEqual(moon.get_moon_phase(at(0, 5)), NOT_STARTED)
        self.assertEqual(moon.get_moon_phase(at(0, 10)), 0)
        self.assertEqual(moon.get_moon_phase(at(3, 10)), 0)


if __name__ == "__main__":
    unittest.main()
