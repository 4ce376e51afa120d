"""Event validation helpers (library-facing).

Validation never raises on bad data: it returns every violation as a
human-readable string so a UI can show all problems at once.
`assert_valid_event` is for callers that prefer an exception.
"""

from __future__ import annotations

import datetime as dt
from typing import Any, List, Mapping, Optional, Union

from .model import FREQUENCIES, Event, RecurrenceRule

MAX_TITLE_LEN = 100
MAX_DESCRIPTION_LEN = 500


class EventValidationError(ValueError):
    """Raised by assert_valid_event when an event fails validation."""

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__("Event validation failed:\n- " + "\n- ".join(self.errors))


def _require(cond: bool, msg: str, errs: List[str]) -> None:
    if not cond:
        errs.append(msg)


def _get(obj: Union[Event, Mapping[str, Any]], snake: str, camel: str) -> Any:
    if isinstance(obj, Mapping):
        v = obj.get(snake)
        return obj.get(camel) if v is None else v
    return getattr(obj, snake, None)


def _is_pos_int(v: Any) -> bool:
    return isinstance(v, int) and not isinstance(v, bool) and v > 0


def validate_recurrence(rule: Union[RecurrenceRule, Mapping[str, Any], None]) -> List[str]:
    errs: List[str] = []
    if rule is None:
        return errs

    freq = _get(rule, "frequency", "frequency")
    _require(
        isinstance(freq, str) and freq.lower() in FREQUENCIES,
        f"Unknown recurrence frequency: {freq!r}",
        errs,
    )

    interval = _get(rule, "interval", "interval")
    if interval is not None:
        _require(_is_pos_int(interval), "Recurrence interval must be a positive integer", errs)

    count = _get(rule, "count", "count")
    if count is not None:
        _require(_is_pos_int(count), "Recurrence count must be a positive integer", errs)

    days = _get(rule, "days_of_week", "daysOfWeek")
    if days:
        ok = all(isinstance(d, int) and not isinstance(d, bool) and 0 <= d <= 6 for d in days)
        _require(ok, "Recurrence daysOfWeek must be within 0..6", errs)

    dom = _get(rule, "day_of_month", "dayOfMonth")
    if dom is not None:
        _require(_is_pos_int(dom) and dom <= 31, "Recurrence dayOfMonth must be within 1..31", errs)

    return errs


def validate_event(event: Union[Event, Mapping[str, Any]]) -> List[str]:
    """Return a list of violations; empty means the event may be committed.

    Accepts an Event or a draft mapping (snake_case or camelCase keys).
    """
    errs: List[str] = []

    title = _get(event, "title", "title")
    title_s = title if isinstance(title, str) else ""
    _require(bool(title_s.strip()), "Title is required", errs)
    if len(title_s) > MAX_TITLE_LEN:
        errs.append(f"Title must be {MAX_TITLE_LEN} characters or less")

    desc = _get(event, "description", "description")
    if isinstance(desc, str) and len(desc) > MAX_DESCRIPTION_LEN:
        errs.append(f"Description must be {MAX_DESCRIPTION_LEN} characters or less")

    start: Optional[Any] = _get(event, "start_date", "startDate")
    end: Optional[Any] = _get(event, "end_date", "endDate")
    _require(isinstance(start, dt.datetime), "Start date is required", errs)
    _require(isinstance(end, dt.datetime), "End date is required", errs)

    if isinstance(start, dt.datetime) and isinstance(end, dt.datetime):
        try:
            _require(end > start, "End date must be after start date", errs)
        except TypeError:
            errs.append("Start and end dates must both be naive or both timezone-aware")

    errs.extend(validate_recurrence(_get(event, "recurrence", "recurrence")))
    return errs


def assert_valid_event(event: Union[Event, Mapping[str, Any]]) -> None:
    errs = validate_event(event)
    if errs:
        raise EventValidationError(errs)
