import unittest
from datetime import time
from types import SimpleNamespace

from app.services.shift_schedule import format_hhmm, loading_time_seconds, shift_loading_time, span_seconds


class ShiftScheduleTests(unittest.TestCase):
    def test_span_within_a_day(self):
        self.assertEqual(span_seconds(time(7, 0), time(15, 0)), 8 * 3600)

    def test_span_wraps_past_midnight(self):
        self.assertEqual(span_seconds(time(23, 0), time(7, 0)), 8 * 3600)

    def test_equal_start_and_end_is_empty(self):
        self.assertEqual(span_seconds(time(7, 0), time(7, 0)), 0)

    def test_loading_time_subtracts_breaks(self):
        total = loading_time_seconds(
            time(7, 0),
            time(16, 0),
            [(time(9, 0), time(9, 15)), (time(12, 0), time(13, 0)), (None, None)],
        )
        self.assertEqual(total, 9 * 3600 - 75 * 60)

    def test_loading_time_never_negative(self):
        self.assertEqual(loading_time_seconds(time(7, 0), time(8, 0), [(time(1, 0), time(6, 0))]), 0)

    def test_shift_loading_time_reads_break_columns(self):
        shift = SimpleNamespace(
            work_start=time(22, 0),
            work_end=time(6, 0),
            break1_start=time(2, 0),
            break1_end=time(2, 30),
            break2_start=None,
            break2_end=None,
            break3_start=None,
            break3_end=None,
        )
        self.assertEqual(shift_loading_time(shift), 8 * 3600 - 30 * 60)

    def test_format_hhmm(self):
        self.assertEqual(format_hhmm(time(7, 5)), "07:05")
        self.assertIsNone(format_hhmm(None))


if __name__ == "__main__":
    unittest.main()
