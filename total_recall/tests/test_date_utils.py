import unittest
from datetime import datetime, timedelta, timezone

from total_recall.date_utils import MIN_TIMESTAMP, ensure_utc, format_display, format_duration


class DateUtilsTests(unittest.TestCase):
    def test_ensure_utc_attaches_and_converts(self) -> None:
        self.assertEqual(ensure_utc(datetime(2026, 2, 16, 10, 0)).tzinfo, timezone.utc)
        plus_two = timezone(timedelta(hours=2))
        self.assertEqual(
            ensure_utc(datetime(2026, 2, 16, 12, 0, tzinfo=plus_two)),
            datetime(2026, 2, 16, 10, 0, tzinfo=timezone.utc),
        )

    def test_format_display_sentinel(self) -> None:
        self.assertEqual(format_display(MIN_TIMESTAMP), "-")
        self.assertEqual(format_display(None), "-")

    def test_format_duration_clamps_negative(self) -> None:
        self.assertEqual(format_duration(timedelta(minutes=-5)), "< 1m")
        self.assertEqual(format_duration(timedelta(hours=1)), "1h 0m")
