"""Day/week/month enumeration and inclusive window math over datetimes.

Day boundaries are taken in the tzinfo of the value being bucketed, so aware
and naive datetimes both work as long as a single call does not mix them.
"""

from __future__ import annotations

import calendar
import datetime as dt
from typing import Iterable, Iterator, List, Optional, Sequence, TypeVar, Union

from .interval import duration_minutes
from .model import Event

DateLike = Union[dt.date, dt.datetime]
E = TypeVar("E", bound=Event)


def start_of_day(ts: DateLike, tzinfo: Optional[dt.tzinfo] = None) -> dt.datetime:
    if isinstance(ts, dt.datetime):
        return ts.replace(hour=0, minute=0, second=0, microsecond=0)
    return dt.datetime(ts.year, ts.month, ts.day, tzinfo=tzinfo)


def end_of_day(ts: DateLike, tzinfo: Optional[dt.tzinfo] = None) -> dt.datetime:
    """Last representable instant of the day (inclusive bound)."""
    return start_of_day(ts, tzinfo).replace(hour=23, minute=59, second=59, microsecond=999999)


def as_window_start(x: DateLike, tzinfo: Optional[dt.tzinfo] = None) -> dt.datetime:
    """A bare date starts at its midnight (in `tzinfo` when given)."""
    if isinstance(x, dt.datetime):
        return x
    return start_of_day(x, tzinfo)


def as_window_end(x: DateLike, tzinfo: Optional[dt.tzinfo] = None) -> dt.datetime:
    """A bare date ends at the last instant of that day."""
    if isinstance(x, dt.datetime):
        return x
    return end_of_day(x, tzinfo)


def is_same_day(a: DateLike, b: DateLike) -> bool:
    return (a.year, a.month, a.day) == (b.year, b.month, b.day)


def is_date_in_range(ts: DateLike, start: DateLike, end: DateLike) -> bool:
    """Day-granular inclusive test; the order of `start`/`end` does not matter."""
    d = dt.date(ts.year, ts.month, ts.day)
    lo = dt.date(start.year, start.month, start.day)
    hi = dt.date(end.year, end.month, end.day)
    if hi < lo:
        lo, hi = hi, lo
    return lo <= d <= hi


def days_between(start: dt.datetime, end: dt.datetime) -> int:
    return int((end - start).total_seconds() // 86400)


def _add_days(day: dt.datetime, n: int) -> dt.datetime:
    # Calendar-day arithmetic: keep midnight wall clock across DST changes.
    d = day.date() + dt.timedelta(days=n)
    return day.replace(year=d.year, month=d.month, day=d.day)


def iter_days(start: DateLike, end: DateLike) -> Iterator[dt.datetime]:
    """Yield the midnight of every calendar day touched by [start, end]."""
    cur = start_of_day(start)
    last = start_of_day(end)
    while cur <= last:
        yield cur
        cur = _add_days(cur, 1)


def get_week_start(ts: DateLike, week_starts_on: int = 0) -> dt.datetime:
    """Midnight of the week's first day; `week_starts_on` uses 0=Sunday."""
    day = start_of_day(ts)
    sunday_index = (day.weekday() + 1) % 7
    back = (sunday_index - week_starts_on) % 7
    return _add_days(day, -back)


def get_week_days(ts: DateLike, week_starts_on: int = 0) -> List[dt.datetime]:
    first = get_week_start(ts, week_starts_on)
    return [_add_days(first, i) for i in range(7)]


def get_days_in_month(ts: DateLike) -> List[dt.datetime]:
    first = start_of_day(ts).replace(day=1)
    n = calendar.monthrange(first.year, first.month)[1]
    return [first.replace(day=i) for i in range(1, n + 1)]


def get_calendar_grid(ts: DateLike) -> List[dt.datetime]:
    """42 cells (6 weeks) starting on the Sunday on or before the 1st."""
    first = start_of_day(ts).replace(day=1)
    grid_start = get_week_start(first, 0)
    return [_add_days(grid_start, i) for i in range(42)]


def intersects_window(event: Event, start: dt.datetime, end: dt.datetime) -> bool:
    """Inclusive window test used by the analytics filters."""
    return event.end_date >= start and event.start_date <= end


def tzinfo_of(events: Sequence[Event]) -> Optional[dt.tzinfo]:
    """tzinfo of the first event, used to anchor bare dates."""
    for ev in events:
        return ev.start_date.tzinfo
    return None


def get_events_for_day(events: Iterable[E], day: DateLike) -> List[E]:
    evs = list(events)
    tz = tzinfo_of(evs)
    lo = start_of_day(day, tz)
    hi = end_of_day(day, tz)
    out: List[E] = []
    for ev in evs:
        s, e = ev.start_date, ev.end_date
        if (lo <= s <= hi) or (lo <= e <= hi) or (s <= lo and e >= hi):
            out.append(ev)
    return out


def clipped_minutes(
    start: dt.datetime,
    end: dt.datetime,
    lo: dt.datetime,
    hi: dt.datetime,
) -> float:
    s = max(start, lo)
    e = min(end, hi)
    if e <= s:
        return 0.0
    return duration_minutes(s, e)


def sort_by_start(events: Sequence[E]) -> List[E]:
    return sorted(events, key=lambda ev: ev.start_date)
