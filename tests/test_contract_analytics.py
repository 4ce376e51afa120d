from __future__ import annotations

import datetime as dt
import unittest

from tempora.analytics import (
    category_time,
    event_density,
    focus_time_slots,
    summarize,
    weekly_load,
    weekly_load_for,
)
from tempora.model import Event

UTC = dt.timezone.utc


def _ts(day: int, hour: int, minute: int = 0) -> dt.datetime:
    return dt.datetime(2024, 1, day, hour, minute, tzinfo=UTC)


def _ev(eid: str, start: dt.datetime, end: dt.datetime, category=None, color=None) -> Event:
    return Event(id=eid, title=eid, start_date=start, end_date=end, category=category, color=color)


class TestCategoryTimeContract(unittest.TestCase):
    def test_minutes_and_shares_per_category(self) -> None:
        events = [
            _ev("w1", _ts(15, 9), _ts(15, 11), "Work", "#f00"),
            _ev("m1", _ts(15, 10), _ts(15, 10, 30), "Meeting", "#00f"),
            _ev("w2", _ts(15, 13), _ts(15, 14), "Work"),
            _ev("p", _ts(15, 15), _ts(15, 15, 30)),
        ]
        got = category_time(events)

        self.assertEqual([c.category for c in got], ["Work", "Meeting", "Uncategorized"])
        work = got[0]
        self.assertEqual(work.minutes, 180)
        self.assertEqual(work.hours, 3.0)
        self.assertAlmostEqual(work.percentage, 75.0)
        self.assertEqual(work.color, "#f00")
        self.assertAlmostEqual(sum(c.percentage for c in got), 100.0)

    def test_window_filters_but_does_not_clip(self) -> None:
        long_ev = _ev("long", _ts(14, 20), _ts(15, 2), "Travel")
        later = _ev("later", _ts(17, 9), _ts(17, 10), "Work")

        got = category_time([long_ev, later], dt.date(2024, 1, 15), dt.date(2024, 1, 15))
        self.assertEqual(len(got), 1)
        self.assertEqual(got[0].category, "Travel")
        self.assertEqual(got[0].minutes, 360)

    def test_empty_input(self) -> None:
        self.assertEqual(category_time([]), [])


class TestWeeklyLoadContract(unittest.TestCase):
    def test_seven_days_with_clipping_and_overbooking(self) -> None:
        events = [
            _ev("a", _ts(15, 9), _ts(15, 11)),
            _ev("b", _ts(15, 10), _ts(15, 10, 30)),
            _ev("long", _ts(16, 8), _ts(16, 17, 30)),
            _ev("night", _ts(17, 22), _ts(18, 2)),
            _ev("full", _ts(19, 9), _ts(19, 17)),
        ]
        days = weekly_load(events, dt.date(2024, 1, 14))

        self.assertEqual(len(days), 7)
        self.assertEqual(days[0].date, dt.datetime(2024, 1, 14, tzinfo=UTC))
        by_day = {d.date.day: d for d in days}

        self.assertEqual((by_day[15].minutes, by_day[15].event_count), (150, 2))
        self.assertEqual(by_day[16].hours, 9.5)
        self.assertTrue(by_day[16].is_overbooked)
        self.assertEqual((by_day[17].minutes, by_day[18].minutes), (120, 120))
        self.assertEqual(by_day[17].event_count, 1)
        self.assertEqual(by_day[18].event_count, 1)
        self.assertEqual(by_day[19].hours, 8.0)
        self.assertFalse(by_day[19].is_overbooked)
        self.assertEqual((by_day[14].minutes, by_day[14].event_count), (0, 0))

    def test_event_ending_at_midnight_touches_the_next_day(self) -> None:
        events = [_ev("late", _ts(14, 22), _ts(15, 0))]
        by_day = {d.date.day: d for d in weekly_load(events, dt.date(2024, 1, 14))}

        self.assertEqual((by_day[14].minutes, by_day[14].event_count), (120, 1))
        self.assertEqual((by_day[15].minutes, by_day[15].event_count), (0, 1))
        self.assertEqual(by_day[16].event_count, 0)

    def test_threshold_is_configurable(self) -> None:
        events = [_ev("a", _ts(15, 9), _ts(15, 15))]
        days = weekly_load(events, dt.date(2024, 1, 14), overbooked_hours=5)
        self.assertTrue(days[1].is_overbooked)

    def test_week_containing_a_timestamp(self) -> None:
        events = [_ev("a", _ts(17, 9), _ts(17, 10))]
        days = weekly_load_for(events, _ts(17, 12))
        self.assertEqual(days[0].date.day, 14)
        days = weekly_load_for(events, _ts(17, 12), week_starts_on=1)
        self.assertEqual(days[0].date.day, 15)


class TestFocusTimeContract(unittest.TestCase):
    def test_gaps_between_events(self) -> None:
        events = [
            _ev("a", _ts(15, 9), _ts(15, 10)),
            _ev("b", _ts(15, 10, 30), _ts(15, 12)),
            _ev("c", _ts(15, 13), _ts(15, 17)),
            _ev("other-day", _ts(16, 0), _ts(16, 8)),
        ]
        slots = focus_time_slots(events, dt.date(2024, 1, 15))
        self.assertEqual([(s.start, s.duration) for s in slots], [(_ts(15, 0), 540), (_ts(15, 17), 420)])
        self.assertEqual(slots[0].hours, 9.0)

        slots = focus_time_slots(events, dt.date(2024, 1, 15), min_duration=60)
        self.assertEqual([s.start for s in slots], [_ts(15, 0), _ts(15, 12), _ts(15, 17)])

    def test_nested_events_do_not_open_gaps(self) -> None:
        events = [
            _ev("outer", _ts(15, 9), _ts(15, 12)),
            _ev("inner", _ts(15, 10), _ts(15, 11)),
        ]
        slots = focus_time_slots(events, dt.date(2024, 1, 15))
        self.assertEqual([s.start for s in slots], [_ts(15, 0), _ts(15, 12)])

    def test_free_day_is_one_slot(self) -> None:
        slots = focus_time_slots([_ev("x", _ts(16, 9), _ts(16, 10))], dt.date(2024, 1, 15))
        self.assertEqual(len(slots), 1)
        self.assertEqual(slots[0].duration, 1440)
        self.assertEqual(slots[0].hours, 24.0)


class TestEventDensityContract(unittest.TestCase):
    def test_intensity_relative_to_busiest_day(self) -> None:
        events = [
            _ev("a", _ts(15, 9), _ts(15, 11)),
            _ev("b", _ts(15, 13), _ts(15, 15)),
            _ev("c", _ts(16, 9), _ts(16, 10)),
        ]
        got = event_density(events, dt.date(2024, 1, 15), dt.date(2024, 1, 17))

        self.assertEqual([d.date for d in got], [dt.date(2024, 1, 15), dt.date(2024, 1, 16)])
        self.assertEqual((got[0].event_count, got[0].hours, got[0].intensity), (2, 4.0, 4))
        self.assertEqual((got[1].event_count, got[1].hours, got[1].intensity), (1, 1.0, 1))
        for d in got:
            self.assertTrue(0 <= d.intensity <= 4)

    def test_multi_day_events_touch_each_day(self) -> None:
        events = [
            _ev("night", _ts(16, 22), _ts(17, 2)),
            _ev("to-midnight", _ts(18, 23), _ts(19, 0)),
            _ev("before-window", _ts(14, 22), _ts(15, 1)),
        ]
        got = event_density(events, dt.date(2024, 1, 15), dt.date(2024, 1, 20))
        by_day = {d.date.day: d for d in got}

        self.assertEqual(sorted(by_day), [15, 16, 17, 18])
        self.assertEqual(by_day[16].hours, 2.0)
        self.assertEqual(by_day[17].hours, 2.0)
        self.assertEqual(by_day[15].hours, 1.0)

    def test_empty_input(self) -> None:
        self.assertEqual(event_density([], dt.date(2024, 1, 1), dt.date(2024, 1, 31)), [])


class TestSummarizeContract(unittest.TestCase):
    def test_all_aggregations_in_one_report(self) -> None:
        events = [_ev("a", _ts(15, 9), _ts(15, 11), "Work")]
        report = summarize(events, dt.date(2024, 1, 15), dt.date(2024, 1, 21), min_focus_duration=120)

        self.assertEqual(set(report), {"category_time", "weekly_load", "focus_time", "density"})
        self.assertEqual(report["category_time"][0].minutes, 120)
        self.assertEqual(report["weekly_load"][0].date.day, 15)
        self.assertEqual([s.start for s in report["focus_time"]], [_ts(15, 0), _ts(15, 11)])
        self.assertEqual(len(report["density"]), 1)


if __name__ == "__main__":
    unittest.main(verbosity=2)
