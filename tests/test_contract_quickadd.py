from __future__ import annotations

import datetime as dt
import unittest

from tempora.quickadd import parse, suggest_duration

# Monday 2024-01-15 10:00
NOW = dt.datetime(2024, 1, 15, 10, 0)


class TestQuickAddContract(unittest.TestCase):
    def test_day_keyword_with_time_range(self) -> None:
        got = parse("Meeting tomorrow 3-4pm", NOW)
        self.assertIsNotNone(got)
        assert got is not None
        self.assertEqual(got.title, "Meeting")
        self.assertEqual(got.start_date, dt.datetime(2024, 1, 16, 15, 0))
        self.assertEqual(got.end_date, dt.datetime(2024, 1, 16, 16, 0))
        self.assertIsNone(got.duration)

    def test_next_weekday_at_noon(self) -> None:
        got = parse("Lunch next Monday at noon", NOW)
        assert got is not None
        self.assertEqual(got.title, "Lunch")
        self.assertEqual(got.start_date, dt.datetime(2024, 1, 22, 12, 0))
        self.assertEqual(got.end_date, dt.datetime(2024, 1, 22, 13, 0))

    def test_plain_weekday_is_the_next_one(self) -> None:
        got = parse("Gym on friday 7am", NOW)
        assert got is not None
        self.assertEqual(got.title, "Gym")
        self.assertEqual(got.start_date, dt.datetime(2024, 1, 19, 7, 0))

    def test_relative_offset(self) -> None:
        got = parse("Conference call in 2 hours", NOW)
        assert got is not None
        self.assertEqual(got.title, "Conference call")
        self.assertEqual(got.start_date, dt.datetime(2024, 1, 15, 12, 0))
        self.assertEqual(got.end_date, dt.datetime(2024, 1, 15, 13, 0))

    def test_explicit_duration(self) -> None:
        got = parse("Dinner tomorrow 7pm for 2 hours", NOW)
        assert got is not None
        self.assertEqual(got.title, "Dinner")
        self.assertEqual(got.start_date, dt.datetime(2024, 1, 16, 19, 0))
        self.assertEqual(got.end_date, dt.datetime(2024, 1, 16, 21, 0))
        self.assertEqual(got.duration, 120)

        got = parse("Workshop today at 14:00 45 minutes long", NOW)
        assert got is not None
        self.assertEqual(got.title, "Workshop")
        self.assertEqual(got.start_date, dt.datetime(2024, 1, 15, 14, 0))
        self.assertEqual(got.duration, 45)
        self.assertEqual(got.end_date, dt.datetime(2024, 1, 15, 14, 45))

    def test_bare_hour_is_24_hour_clock(self) -> None:
        got = parse("Meeting 3", NOW)
        assert got is not None
        self.assertEqual(got.title, "Meeting")
        self.assertEqual(got.start_date, dt.datetime(2024, 1, 15, 3, 0))

    def test_twelve_am_and_pm(self) -> None:
        got = parse("Release 12am", NOW)
        assert got is not None
        self.assertEqual(got.start_date.hour, 0)
        got = parse("Release 12pm", NOW)
        assert got is not None
        self.assertEqual(got.start_date.hour, 12)

    def test_day_without_time_keeps_reference_clock(self) -> None:
        got = parse("Dentist tomorrow", NOW)
        assert got is not None
        self.assertEqual(got.title, "Dentist")
        self.assertEqual(got.start_date, dt.datetime(2024, 1, 16, 10, 0))
        self.assertEqual(got.end_date, dt.datetime(2024, 1, 16, 11, 0))

    def test_title_only(self) -> None:
        got = parse("Buy groceries", NOW)
        assert got is not None
        self.assertEqual(got.title, "Buy groceries")
        self.assertIsNone(got.start_date)
        self.assertIsNone(got.end_date)

    def test_no_title_left(self) -> None:
        self.assertIsNone(parse("tomorrow at 3pm", NOW))
        self.assertIsNone(parse("   ", NOW))
        self.assertIsNone(parse("", NOW))

    def test_default_length_is_configurable(self) -> None:
        got = parse("Sync tomorrow 9am", NOW, default_minutes=30)
        assert got is not None
        self.assertEqual(got.end_date - got.start_date, dt.timedelta(minutes=30))


class TestSuggestDurationContract(unittest.TestCase):
    def test_keyword_heuristics(self) -> None:
        cases = {
            "Daily standup meeting": 15,
            "Quick sync": 15,
            "1:1 meeting with Ana": 30,
            "Team meeting": 60,
            "Focus block": 90,
            "Coding session": 120,
            "Lunch with Sam": 30,
            "Coffee": 15,
            "Phone the bank": 30,
            "Sprint retro": 60,
            "Interview candidate": 60,
            "Dentist": 30,
        }
        for title, minutes in cases.items():
            self.assertEqual(suggest_duration(title), minutes, title)

    def test_empty_title(self) -> None:
        self.assertIsNone(suggest_duration(""))


if __name__ == "__main__":
    unittest.main(verbosity=2)
