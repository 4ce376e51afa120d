# tempora/recurrence.py
from __future__ import annotations

import dataclasses
import datetime as dt
import logging
from typing import Iterator, List, Optional, Sequence, Tuple

from dateutil.relativedelta import relativedelta

from .model import Event, RecurrenceRule
from .timerange import DateLike, as_window_end, as_window_start, intersects_window

logger = logging.getLogger(__name__)

DEFAULT_MAX_OCCURRENCES = 1000


def _sunday_index(ts: dt.datetime) -> int:
    # Python weekday(): Monday=0; rules use Sunday=0.
    return (ts.weekday() + 1) % 7


def _rule_interval(rule: RecurrenceRule) -> int:
    iv = rule.interval
    if isinstance(iv, int) and not isinstance(iv, bool) and iv > 0:
        return iv
    return 1


def _rule_cap(rule: RecurrenceRule, max_occurrences: int) -> int:
    c = rule.count
    if isinstance(c, int) and not isinstance(c, bool) and c > 0:
        return c
    return int(max_occurrences)


def _rule_days(rule: RecurrenceRule) -> Tuple[int, ...]:
    return tuple(sorted({d for d in (rule.days_of_week or ()) if isinstance(d, int) and 0 <= d <= 6}))


def _rule_end(rule: RecurrenceRule, tzinfo: Optional[dt.tzinfo]) -> Optional[dt.datetime]:
    if rule.end_date is None:
        return None
    return as_window_end(rule.end_date, tzinfo)


def _next_weekly(cursor: dt.datetime, days: Tuple[int, ...], interval: int) -> dt.datetime:
    """Next listed weekday later this week, else the first listed day `interval` weeks on."""
    cur = _sunday_index(cursor)
    for d in days:
        if d > cur:
            return cursor + dt.timedelta(days=d - cur)
    add = 7 * (interval - 1) + (7 - cur) + days[0]
    return cursor + dt.timedelta(days=add)


def _series_starts(base: dt.datetime, rule: RecurrenceRule) -> Iterator[Tuple[int, dt.datetime]]:
    """Yield (ordinal, start) for the series, unbounded; callers apply the stop conditions.

    Month/year steps are computed from the anchor so a clamped day
    (Jan 31 -> Feb 29) does not drift the rest of the series.
    """
    freq = (rule.frequency or "").strip().lower()
    interval = _rule_interval(rule)

    yield 0, base

    if freq == "daily":
        cursor = base
        n = 0
        while True:
            n += 1
            cursor = cursor + dt.timedelta(days=interval)
            yield n, cursor

    elif freq == "weekly":
        days = _rule_days(rule)
        cursor = base
        n = 0
        while True:
            n += 1
            if days:
                cursor = _next_weekly(cursor, days, interval)
            else:
                cursor = cursor + dt.timedelta(weeks=interval)
            yield n, cursor

    elif freq == "monthly":
        dom = rule.day_of_month if isinstance(rule.day_of_month, int) and 1 <= rule.day_of_month <= 31 else None
        n = 0
        while True:
            n += 1
            if dom is not None:
                yield n, base + relativedelta(months=n * interval, day=dom)
            else:
                yield n, base + relativedelta(months=n * interval)

    elif freq == "yearly":
        # One year per step; interval is deliberately not applied to yearly rules.
        n = 0
        while True:
            n += 1
            yield n, base + relativedelta(years=n)

    elif freq == "custom":
        return

    else:
        logger.debug("unknown recurrence frequency %r; yielding base occurrence only", rule.frequency)


def _materialize(event: Event, n: int, start: dt.datetime, duration: dt.timedelta) -> Event:
    return dataclasses.replace(
        event,
        id=f"{event.id}-{n}",
        start_date=start,
        end_date=start + duration,
        base_event_id=event.id,
        occurrence_index=n,
    )


def generate_instances(
    event: Event,
    until: DateLike,
    *,
    max_occurrences: int = DEFAULT_MAX_OCCURRENCES,
) -> List[Event]:
    """Materialize the series from its first start up to `until` (inclusive).

    Stops at `until`, at `rule.end_date`, or when `rule.count` (default cap
    `max_occurrences`) occurrences exist. Not window-filtered.
    """
    rule = event.recurrence
    if rule is None:
        return [event]

    tz = event.start_date.tzinfo
    until_dt = as_window_end(until, tz)
    rule_end = _rule_end(rule, tz)
    cap = _rule_cap(rule, max_occurrences)
    duration = event.end_date - event.start_date

    out: List[Event] = []
    for n, start in _series_starts(event.start_date, rule):
        if n >= cap:
            logger.debug("expansion of %s stopped at occurrence cap %d", event.id, cap)
            break
        if start > until_dt:
            break
        if rule_end is not None and start > rule_end:
            break
        out.append(_materialize(event, n, start, duration))
    return out


def expand(
    event: Event,
    window_start: DateLike,
    window_end: DateLike,
    *,
    max_occurrences: int = DEFAULT_MAX_OCCURRENCES,
) -> List[Event]:
    """Occurrences of `event` whose start lies in [window_start, window_end].

    A non-recurring event comes back as itself when its interval touches the window.
    """
    tz = event.start_date.tzinfo
    ws = as_window_start(window_start, tz)
    we = as_window_end(window_end, tz)

    if event.recurrence is None:
        return [event] if intersects_window(event, ws, we) else []

    instances = generate_instances(event, we, max_occurrences=max_occurrences)
    return [o for o in instances if ws <= o.start_date <= we]


def expand_events(
    events: Sequence[Event],
    window_start: DateLike,
    window_end: DateLike,
    *,
    max_occurrences: int = DEFAULT_MAX_OCCURRENCES,
) -> List[Event]:
    """Materialize a whole collection for a display window, keeping input order."""
    out: List[Event] = []
    for ev in events:
        out.extend(expand(ev, window_start, window_end, max_occurrences=max_occurrences))
    return out


def next_occurrence(
    event: Event,
    after: dt.datetime,
    *,
    max_occurrences: int = DEFAULT_MAX_OCCURRENCES,
) -> Optional[Event]:
    """First occurrence starting strictly after `after`, or None."""
    rule = event.recurrence
    if rule is None:
        return event if event.start_date > after else None

    rule_end = _rule_end(rule, event.start_date.tzinfo)
    cap = _rule_cap(rule, max_occurrences)
    duration = event.end_date - event.start_date
    for n, start in _series_starts(event.start_date, rule):
        if n >= cap:
            return None
        if rule_end is not None and start > rule_end:
            return None
        if start > after:
            return _materialize(event, n, start, duration)
    return None


def resolve_base_event(event: Event, events: Sequence[Event]) -> Optional[Event]:
    """Stored event behind a displayed one, by its explicit base_event_id."""
    target = event.series_id
    for ev in events:
        if ev.id == target:
            return ev
    return None
