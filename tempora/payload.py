# tempora/payload.py
from __future__ import annotations

import dataclasses
import datetime as dt
import json
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from .model import Event, RecurrenceRule
from .util.timeparse import format_timestamp, parse_date_yyyy_mm_dd, parse_timestamp

JsonPath = Union[str, Path]


class PayloadError(ValueError):
    """Raised when an events file or record cannot be converted."""


def _pick(d: Mapping[str, Any], snake: str, camel: str) -> Any:
    v = d.get(snake)
    return d.get(camel) if v is None else v


def _opt_str(v: Any) -> Optional[str]:
    if v is None:
        return None
    s = str(v)
    return s if s.strip() else None


def _opt_int(v: Any, label: str) -> Optional[int]:
    if v is None:
        return None
    if isinstance(v, bool) or not isinstance(v, int):
        raise PayloadError(f"{label} must be an integer; got {v!r}")
    return v


def _ts(v: Any, label: str, tz: Optional[dt.tzinfo]) -> dt.datetime:
    if isinstance(v, dt.datetime):
        return v if v.tzinfo is not None or tz is None else v.replace(tzinfo=tz)
    if isinstance(v, str):
        try:
            return parse_timestamp(v, tz)
        except ValueError as e:
            raise PayloadError(f"{label}: {e}") from e
    raise PayloadError(f"{label} is required")


def _rule_end(v: Any, tz: Optional[dt.tzinfo]) -> Optional[dt.date]:
    # A bare "YYYY-MM-DD" end keeps the whole day (see recurrence._rule_end).
    if v is None:
        return None
    if isinstance(v, str) and len(v.strip()) == 10:
        try:
            return parse_date_yyyy_mm_dd(v.strip())
        except ValueError as e:
            raise PayloadError(f"recurrence.endDate: {e}") from e
    return _ts(v, "recurrence.endDate", tz)


def rule_from_dict(d: Mapping[str, Any], tz: Optional[dt.tzinfo] = None) -> RecurrenceRule:
    if not isinstance(d, Mapping):
        raise PayloadError(f"recurrence must be an object; got {type(d).__name__}")
    freq = str(d.get("frequency") or "").strip().lower()
    if not freq:
        raise PayloadError("recurrence.frequency is required")

    end_raw = _pick(d, "end_date", "endDate")
    days = _pick(d, "days_of_week", "daysOfWeek") or []
    if not isinstance(days, list):
        raise PayloadError("recurrence.daysOfWeek must be a list")

    interval = _opt_int(d.get("interval"), "recurrence.interval")
    return RecurrenceRule(
        frequency=freq,
        interval=interval if interval is not None else 1,
        end_date=_rule_end(end_raw, tz),
        count=_opt_int(d.get("count"), "recurrence.count"),
        days_of_week=tuple(int(x) for x in days if isinstance(x, int) and not isinstance(x, bool)),
        day_of_month=_opt_int(_pick(d, "day_of_month", "dayOfMonth"), "recurrence.dayOfMonth"),
        week_of_month=_opt_int(_pick(d, "week_of_month", "weekOfMonth"), "recurrence.weekOfMonth"),
    )


def rule_to_dict(rule: RecurrenceRule) -> Dict[str, Any]:
    out: Dict[str, Any] = {"frequency": rule.frequency, "interval": rule.interval}
    if rule.end_date is not None:
        end = rule.end_date
        out["endDate"] = format_timestamp(end) if isinstance(end, dt.datetime) else end.isoformat()
    if rule.count is not None:
        out["count"] = rule.count
    if rule.days_of_week:
        out["daysOfWeek"] = list(rule.days_of_week)
    if rule.day_of_month is not None:
        out["dayOfMonth"] = rule.day_of_month
    if rule.week_of_month is not None:
        out["weekOfMonth"] = rule.week_of_month
    return out


def event_from_dict(d: Mapping[str, Any], tz: Optional[dt.tzinfo] = None) -> Event:
    """Build an Event from a JSON-style record (camelCase or snake_case keys)."""
    if not isinstance(d, Mapping):
        raise PayloadError(f"event must be an object; got {type(d).__name__}")

    eid = str(d.get("id") or "").strip()
    if not eid:
        raise PayloadError("id must be a non-empty string")

    rec = d.get("recurrence")
    return Event(
        id=eid,
        title=str(d.get("title") or ""),
        start_date=_ts(_pick(d, "start_date", "startDate"), "startDate", tz),
        end_date=_ts(_pick(d, "end_date", "endDate"), "endDate", tz),
        description=_opt_str(d.get("description")),
        color=_opt_str(d.get("color")),
        category=_opt_str(d.get("category")),
        recurrence=rule_from_dict(rec, tz) if rec else None,
        template_id=_opt_str(_pick(d, "template_id", "templateId")),
        base_event_id=_opt_str(_pick(d, "base_event_id", "baseEventId")),
        occurrence_index=_opt_int(_pick(d, "occurrence_index", "occurrenceIndex"), "occurrenceIndex"),
    )


def event_draft_from_dict(d: Any, tz: Optional[dt.tzinfo] = None) -> Tuple[Dict[str, Any], List[str]]:
    """Lenient counterpart of event_from_dict for validation.

    Returns a snake_case draft for validate_event plus the conversion
    problems found on the way. Fields that cannot be converted are left
    as None (timestamps) or passed through raw (recurrence) so that
    validate_event still reports them alongside every other violation.
    """
    if not isinstance(d, Mapping):
        return {}, [f"event must be an object; got {type(d).__name__}"]

    errs: List[str] = []
    if not str(d.get("id") or "").strip():
        errs.append("id must be a non-empty string")

    draft: Dict[str, Any] = {
        "title": d.get("title"),
        "description": d.get("description"),
        "recurrence": d.get("recurrence") or None,
    }
    for snake, camel in (("start_date", "startDate"), ("end_date", "endDate")):
        raw = _pick(d, snake, camel)
        draft[snake] = None
        if raw is None:
            continue
        try:
            draft[snake] = _ts(raw, camel, tz)
        except PayloadError as e:
            errs.append(str(e))
    return draft, errs


def event_to_dict(ev: Event) -> Dict[str, Any]:
    out: Dict[str, Any] = {
        "id": ev.id,
        "title": ev.title,
        "startDate": format_timestamp(ev.start_date),
        "endDate": format_timestamp(ev.end_date),
    }
    for key, val in (
        ("description", ev.description),
        ("color", ev.color),
        ("category", ev.category),
        ("templateId", ev.template_id),
        ("baseEventId", ev.base_event_id),
        ("occurrenceIndex", ev.occurrence_index),
    ):
        if val is not None:
            out[key] = val
    if ev.recurrence is not None:
        out["recurrence"] = rule_to_dict(ev.recurrence)
    return out


def events_from_list(items: Any, tz: Optional[dt.tzinfo] = None) -> List[Event]:
    if isinstance(items, Mapping) and isinstance(items.get("events"), list):
        items = items["events"]
    if not isinstance(items, list):
        raise PayloadError(f"events payload must be a list or {{'events': [...]}}; got {type(items).__name__}")
    out: List[Event] = []
    for i, raw in enumerate(items):
        try:
            out.append(event_from_dict(raw, tz))
        except PayloadError as e:
            raise PayloadError(f"events[{i}]: {e}") from e
    return out


def load_events_from_json(path: JsonPath, tz: Optional[dt.tzinfo] = None) -> List[Event]:
    p = Path(path)
    try:
        raw = json.loads(p.read_text(encoding="utf-8", errors="replace"))
    except json.JSONDecodeError as e:
        raise PayloadError(f"{p}: invalid JSON ({e})") from e
    return events_from_list(raw, tz)


def to_jsonable(obj: Any) -> Any:
    """Result records (dataclasses, datetimes, lists, dicts) as JSON-ready values."""
    if isinstance(obj, Event):
        return event_to_dict(obj)
    if isinstance(obj, RecurrenceRule):
        return rule_to_dict(obj)
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        out = {f.name: to_jsonable(getattr(obj, f.name)) for f in dataclasses.fields(obj)}
        for prop in ("width", "left"):
            if hasattr(type(obj), prop):
                out[prop] = getattr(obj, prop)
        return out
    if isinstance(obj, dt.datetime):
        return format_timestamp(obj)
    if isinstance(obj, dt.date):
        return obj.isoformat()
    if isinstance(obj, Mapping):
        return {str(k): to_jsonable(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [to_jsonable(x) for x in obj]
    return obj
