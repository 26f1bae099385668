from datetime import date, datetime, timedelta, timezone
import unittest

from worklog.errors import InvalidInput, InvalidTimeFormat
from worklog.parsing import (
    combine_date_and_time,
    days_in_month,
    fmt_clock,
    fmt_duration,
    is_valid_time,
    parse_date_key,
    parse_month,
    parse_month_filter,
    parse_timestamp,
    parse_year,
)


class ParsingTests(unittest.TestCase):
    def test_is_valid_time_accepts_clock_times(self):
        for value in ("9:05", "09:05", "23:59", "0:00"):
            self.assertTrue(is_valid_time(value), value)

    def test_is_valid_time_rejects_everything_else(self):
        for value in ("24:00", "9:60", "abc", "", "9:5", "123:00", " 9:05"):
            self.assertFalse(is_valid_time(value), value)

    def test_days_in_month(self):
        self.assertEqual(days_in_month(2024, 2), 29)
        self.assertEqual(days_in_month(2025, 2), 28)
        self.assertEqual(days_in_month(2025, 3), 31)
        self.assertEqual(days_in_month(2025, 4), 30)
        self.assertEqual(days_in_month(2025, 12), 31)

    def test_combine_date_and_time_uses_only_the_calendar_date(self):
        combined = combine_date_and_time(datetime(2025, 3, 5, 18, 42, 17, 999), "9:05")
        local = combined.astimezone()
        self.assertEqual((local.year, local.month, local.day), (2025, 3, 5))
        self.assertEqual((local.hour, local.minute, local.second, local.microsecond), (9, 5, 0, 0))
        self.assertIsNotNone(combined.tzinfo)
        self.assertEqual(combined, combine_date_and_time(date(2025, 3, 5), "09:05"))

    def test_combine_date_and_time_rejects_bad_time(self):
        with self.assertRaises(InvalidTimeFormat) as ctx:
            combine_date_and_time(date(2025, 3, 5), "25:00", "end")
        self.assertEqual(ctx.exception.field, "end")

    def test_fmt_clock_does_not_pad_hour(self):
        self.assertEqual(fmt_clock(combine_date_and_time(date(2025, 3, 5), "09:00")), "9:00")
        self.assertEqual(fmt_clock(combine_date_and_time(date(2025, 3, 5), "17:30")), "17:30")

    def test_fmt_duration(self):
        self.assertEqual(fmt_duration(timedelta(hours=8, minutes=30, seconds=59)), "08 h 30 min")

    def test_parse_timestamp_accepts_z_suffix(self):
        parsed = parse_timestamp("2025-03-05T09:00:00.000Z")
        self.assertEqual(parsed, datetime(2025, 3, 5, 9, 0, tzinfo=timezone.utc))

    def test_parse_timestamp_reads_naive_as_local(self):
        parsed = parse_timestamp("2025-03-05T09:00:00")
        self.assertIsNotNone(parsed.tzinfo)
        self.assertEqual(parsed.astimezone().hour, 9)

    def test_parse_date_key(self):
        self.assertEqual(parse_date_key("2025-03-05"), (2025, 3, 5))
        self.assertIsNone(parse_date_key("settings"))

    def test_month_and_year_validation(self):
        self.assertEqual(parse_month("3"), 3)
        self.assertEqual(parse_year("2025"), 2025)
        self.assertEqual(parse_month_filter("2025-03"), (2025, 3))
        for bad in ("0", "13", "march"):
            with self.assertRaises(InvalidInput):
                parse_month(bad)
        for bad in ("25", "20255", "year"):
            with self.assertRaises(InvalidInput):
                parse_year(bad)
        with self.assertRaises(InvalidInput):
            parse_month_filter("03/2025")


if __name__ == "__main__":
    unittest.main()
