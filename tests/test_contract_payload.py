from __future__ import annotations

import datetime as dt
import json
import tempfile
import unittest
from pathlib import Path

from tempora.model import Event, LayoutSlot, RecurrenceRule
from tempora.payload import (
    PayloadError,
    event_draft_from_dict,
    event_from_dict,
    event_to_dict,
    events_from_list,
    load_events_from_json,
    rule_from_dict,
    to_jsonable,
)

UTC = dt.timezone.utc


def _record(**kw):
    rec = {
        "id": "standup",
        "title": "Standup",
        "startDate": "2024-01-15T09:00:00",
        "endDate": "2024-01-15T09:15:00",
        "category": "Meeting",
        "color": "#10b981",
    }
    rec.update(kw)
    return rec


class TestPayloadContract(unittest.TestCase):
    def test_camel_case_record_with_default_timezone(self) -> None:
        ev = event_from_dict(_record(recurrence={"frequency": "Daily", "count": 5}), UTC)

        self.assertEqual(ev.id, "standup")
        self.assertEqual(ev.start_date, dt.datetime(2024, 1, 15, 9, 0, tzinfo=UTC))
        self.assertEqual(ev.duration_minutes, 15.0)
        self.assertEqual(ev.category, "Meeting")
        self.assertEqual(ev.recurrence, RecurrenceRule(frequency="daily", count=5))
        self.assertIsNone(ev.description)

    def test_zulu_suffix_and_snake_case(self) -> None:
        ev = event_from_dict(
            {"id": "x", "title": "X", "start_date": "2024-01-15T09:00:00Z", "end_date": "2024-01-15T10:00:00Z"}
        )
        self.assertEqual(ev.start_date.utcoffset(), dt.timedelta(0))

    def test_rule_end_date_forms(self) -> None:
        rule = rule_from_dict({"frequency": "weekly", "endDate": "2024-02-01", "daysOfWeek": [1, 3]})
        self.assertEqual(rule.end_date, dt.date(2024, 2, 1))
        self.assertEqual(rule.days_of_week, (1, 3))

        rule = rule_from_dict({"frequency": "weekly", "endDate": "2024-02-01T12:00:00"}, UTC)
        self.assertEqual(rule.end_date, dt.datetime(2024, 2, 1, 12, 0, tzinfo=UTC))

    def test_bad_records_raise_payload_error(self) -> None:
        with self.assertRaises(PayloadError):
            event_from_dict(_record(id=""))
        with self.assertRaises(PayloadError):
            event_from_dict(_record(startDate="next tuesday"))
        with self.assertRaises(PayloadError):
            rule_from_dict({"interval": 2})
        with self.assertRaises(PayloadError):
            rule_from_dict({"frequency": "daily", "count": "3"})

        with self.assertRaises(PayloadError) as cm:
            events_from_list([_record(), _record(endDate=None)])
        self.assertIn("events[1]", str(cm.exception))

    def test_events_wrapper_object(self) -> None:
        got = events_from_list({"events": [_record(), _record(id="b")]}, UTC)
        self.assertEqual([e.id for e in got], ["standup", "b"])
        with self.assertRaises(PayloadError):
            events_from_list({"tasks": []})

    def test_record_round_trip(self) -> None:
        ev = event_from_dict(_record(recurrence={"frequency": "weekly", "endDate": "2024-02-01"}), UTC)
        out = event_to_dict(ev)
        self.assertEqual(out["startDate"], "2024-01-15T09:00:00+00:00")
        self.assertEqual(out["recurrence"], {"frequency": "weekly", "interval": 1, "endDate": "2024-02-01"})
        self.assertNotIn("description", out)
        self.assertEqual(event_from_dict(out), ev)

    def test_load_from_file(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            p = Path(td) / "events.json"
            p.write_text(json.dumps([_record()]), encoding="utf-8")
            got = load_events_from_json(p, UTC)
            self.assertEqual(len(got), 1)

            p.write_text("{not json", encoding="utf-8")
            with self.assertRaises(PayloadError):
                load_events_from_json(p)

    def test_to_jsonable_results(self) -> None:
        slot = to_jsonable(LayoutSlot(column_index=1, column_count=4, stack_order=3))
        self.assertEqual(slot["width"], 25.0)
        self.assertEqual(slot["left"], 25.0)

        ev = Event(
            id="a",
            title="A",
            start_date=dt.datetime(2024, 1, 15, 9, tzinfo=UTC),
            end_date=dt.datetime(2024, 1, 15, 10, tzinfo=UTC),
        )
        out = to_jsonable({"items": [ev], "day": dt.date(2024, 1, 15)})
        self.assertEqual(out["day"], "2024-01-15")
        self.assertEqual(out["items"][0]["id"], "a")
        json.dumps(out)

    def test_draft_keeps_fields_that_fail_to_convert(self) -> None:
        draft, errs = event_draft_from_dict(_record(title="", startDate="soon", endDate=None), UTC)
        self.assertIsNone(draft["start_date"])
        self.assertIsNone(draft["end_date"])
        self.assertEqual(draft["title"], "")
        self.assertEqual(len(errs), 1)
        self.assertTrue(errs[0].startswith("startDate:"))

        draft, errs = event_draft_from_dict(_record(), UTC)
        self.assertEqual(errs, [])
        self.assertEqual(draft["start_date"], dt.datetime(2024, 1, 15, 9, tzinfo=UTC))

        self.assertEqual(event_draft_from_dict(["nope"]), ({}, ["event must be an object; got list"]))


if __name__ == "__main__":
    unittest.main(verbosity=2)
