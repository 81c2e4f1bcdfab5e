"""Decomposition and forward-only arithmetic of in-universe time."""

from __future__ import annotations

import unittest

from daynight.timevalue import MINUTES_PER_DAY, TimeValue, clock_to_minutes


class TimeValueTests(unittest.TestCase):
    def test_decomposition_rebuilds_total(self) -> None:
        samples = [0, 1, 59, 60, 61, 1439, 1440, 1441, 10_079, 525_600] + list(range(0, 20_000, 37))
        for minutes in samples:
            value = TimeValue(minutes)
            rebuilt = value.day_count * 1440 + value.hour_of_day * 60 + value.minute_of_hour
            self.assertEqual(rebuilt, minutes)
            self.assertEqual(value.minute_of_day, minutes % 1440)

    def test_advance_to_lands_on_target_and_never_goes_back(self) -> None:
        for current in (0, 59, 360, 719, 1439, 1440 * 3 + 1000):
            for target in (0, 1, 360, 720, 1000, 1439):
                start = TimeValue(current)
                result = start.advance_to(target)
                self.assertEqual(result.minute_of_day, target)
                self.assertGreaterEqual(result, start)
                self.assertLessEqual(result.total_minutes - start.total_minutes, MINUTES_PER_DAY)

    def test_advance_to_wraps_past_midnight(self) -> None:
        late = TimeValue(23 * 60 + 50)
        result = late.advance_to(6 * 60)
        self.assertEqual(result.total_minutes - late.total_minutes, 370)
        self.assertEqual(result.day_count, 1)
        self.assertEqual(result.to_clock_string(), "06:00")

    def test_advance_to_same_time_of_day_adds_a_full_day(self) -> None:
        start = TimeValue(2 * 1440 + 480)
        self.assertEqual(start.advance_to(480).total_minutes, 3 * 1440 + 480)

    def test_add_is_strictly_forward(self) -> None:
        self.assertEqual(TimeValue(100).add(25), TimeValue(125))
        self.assertEqual(TimeValue(100).add(0), TimeValue(100))
        with self.assertRaises(ValueError):
            TimeValue(100).add(-1)

    def test_negative_time_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            TimeValue(-5)

    def test_clock_string_is_zero_padded(self) -> None:
        self.assertEqual(TimeValue(7 * 60 + 5).to_clock_string(), "07:05")
        self.assertEqual(str(TimeValue(1440 + 23 * 60 + 59)), "23:59")
        self.assertEqual(TimeValue(1440).to_clock_string(), "00:00")

    def test_twelve_hour_clock_conversion(self) -> None:
        self.assertEqual(clock_to_minutes(12, 0, "AM"), 0)
        self.assertEqual(clock_to_minutes(12, 30, "PM"), 750)
        self.assertEqual(clock_to_minutes(7, 5, "pm"), 19 * 60 + 5)
        self.assertEqual(TimeValue.from_clock(8, 0, "AM").hour_of_day, 8)
        for bad in ((0, 0, "AM"), (13, 0, "PM"), (5, 60, "AM"), (5, 0, "XM")):
            with self.assertRaises(ValueError):
                clock_to_minutes(*bad)

    def test_span_construction(self) -> None:
        self.assertEqual(TimeValue.from_span(2, 30).total_minutes, 150)
        self.assertEqual(TimeValue.from_span(30, 0).day_count, 1)
        with self.assertRaises(ValueError):
            TimeValue.from_span(1, 60)
        with self.assertRaises(ValueError):
            TimeValue.from_span(-1, 0)

    def test_ordering_and_total_hours(self) -> None:
        self.assertLess(TimeValue(10), TimeValue(11))
        self.assertEqual(TimeValue(1440 + 125).total_hours, 26)


if __name__ == "__main__":
    unittest.main()
