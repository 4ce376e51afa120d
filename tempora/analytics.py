"""Dashboard aggregations over a materialized event list.

The four passes are independent. Note the two clipping policies:
category_time sums each included event's full duration, while weekly_load
and event_density only count the minutes falling inside each day.
"""

from __future__ import annotations

import datetime as dt
import math
from typing import Any, Dict, List, Optional, Sequence

from .interval import duration_minutes, round_minutes
from .model import CategoryTime, DayDensity, DayLoad, Event, FocusTimeSlot
from .timerange import (
    DateLike,
    as_window_end,
    as_window_start,
    clipped_minutes,
    end_of_day,
    get_events_for_day,
    get_week_start,
    is_date_in_range,
    iter_days,
    start_of_day,
    tzinfo_of,
)

DEFAULT_FOCUS_MIN_DURATION = 90
OVERBOOKED_HOURS = 8.0
MAX_INTENSITY = 4


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def _round1(x: float) -> float:
    return math.floor(x * 10 + 0.5) / 10


def category_time(
    events: Sequence[Event],
    start: Optional[DateLike] = None,
    end: Optional[DateLike] = None,
) -> List[CategoryTime]:
    """Minutes per category with percentage share, busiest first.

    Events are included when they touch [start, end]; their duration is not
    clipped to the window.
    """
    tz = tzinfo_of(events)
    ws = as_window_start(start, tz) if start is not None else None
    we = as_window_end(end, tz) if end is not None else None

    minutes: Dict[str, float] = {}
    colors: Dict[str, Optional[str]] = {}
    for ev in events:
        if ws is not None and ev.end_date < ws:
            continue
        if we is not None and ev.start_date > we:
            continue
        cat = ev.category_or_default
        minutes[cat] = minutes.get(cat, 0.0) + ev.duration_minutes
        if not colors.get(cat):
            colors[cat] = ev.color

    total = sum(minutes.values())
    out = [
        CategoryTime(
            category=cat,
            minutes=_round_half_up(m),
            hours=_round1(m / 60.0),
            percentage=(m / total) * 100.0 if total > 0 else 0.0,
            color=colors.get(cat),
        )
        for cat, m in minutes.items()
    ]
    out.sort(key=lambda c: -c.minutes)
    return out


def weekly_load(
    events: Sequence[Event],
    week_start: DateLike,
    *,
    overbooked_hours: float = OVERBOOKED_HOURS,
) -> List[DayLoad]:
    """Seven days from `week_start`, minutes clipped to each day."""
    tz = tzinfo_of(events)
    first = start_of_day(week_start, tz)
    last = first + dt.timedelta(days=6)

    out: List[DayLoad] = []
    for day in iter_days(first, last):
        lo = day
        hi = end_of_day(day)
        total = 0.0
        count = 0
        for ev in events:
            if ev.start_date > hi or ev.end_date < lo:
                continue
            count += 1
            total += clipped_minutes(ev.start_date, ev.end_date, lo, hi)
        hours = total / 60.0
        out.append(
            DayLoad(
                date=day,
                minutes=_round_half_up(total),
                hours=_round1(hours),
                event_count=count,
                is_overbooked=hours > overbooked_hours,
            )
        )
    return out


def weekly_load_for(events: Sequence[Event], ts: DateLike, week_starts_on: int = 0) -> List[DayLoad]:
    """weekly_load for the calendar week containing `ts`."""
    tz = tzinfo_of(events)
    return weekly_load(events, get_week_start(start_of_day(ts, tz), week_starts_on))


def focus_time_slots(
    events: Sequence[Event],
    day: DateLike,
    min_duration: int = DEFAULT_FOCUS_MIN_DURATION,
) -> List[FocusTimeSlot]:
    """Free gaps of at least `min_duration` minutes between midnight and end of day."""
    tz = tzinfo_of(events)
    day_start = start_of_day(day, tz)
    day_end = end_of_day(day, tz)

    day_events = sorted(get_events_for_day(events, day_start), key=lambda ev: ev.start_date)

    slots: List[FocusTimeSlot] = []

    def _push(s: dt.datetime, e: dt.datetime) -> None:
        mins = duration_minutes(s, e)
        if mins >= min_duration:
            slots.append(FocusTimeSlot(start=s, end=e, duration=round_minutes(e - s), hours=_round1(mins / 60.0)))

    cursor = day_start
    for ev in day_events:
        if ev.start_date > cursor:
            _push(cursor, ev.start_date)
        if ev.end_date > cursor:
            cursor = ev.end_date

    if cursor < day_end:
        _push(cursor, day_end)

    return slots


def _last_touched_day(ev: Event) -> dt.datetime:
    # An event ending exactly at midnight does not touch the following day.
    last = start_of_day(ev.end_date)
    if ev.end_date == last and ev.end_date > ev.start_date:
        last = start_of_day(last - dt.timedelta(days=1))
    return last


def event_density(events: Sequence[Event], start: DateLike, end: DateLike) -> List[DayDensity]:
    """Per-day event count, clipped hours and a 0..4 intensity relative to the busiest day."""
    if not events:
        return []

    tz = tzinfo_of(events)
    ws = as_window_start(start, tz)
    we = as_window_end(end, tz)

    counts: Dict[dt.date, int] = {}
    hours: Dict[dt.date, float] = {}
    for ev in events:
        for day in iter_days(ev.start_date, _last_touched_day(ev)):
            if not is_date_in_range(day, ws, we):
                continue
            key = day.date()
            counts[key] = counts.get(key, 0) + 1
            hours[key] = hours.get(key, 0.0) + clipped_minutes(ev.start_date, ev.end_date, day, end_of_day(day)) / 60.0

    if not counts:
        return []

    max_hours = max(hours.values())
    out: List[DayDensity] = []
    for key in sorted(counts):
        h = hours[key]
        if max_hours > 0:
            intensity = min(MAX_INTENSITY, int(math.floor((h / max_hours) * MAX_INTENSITY)))
        else:
            intensity = 0
        out.append(DayDensity(date=key, event_count=counts[key], hours=_round1(h), intensity=intensity))
    return out


def summarize(
    events: Sequence[Event],
    start: DateLike,
    end: DateLike,
    *,
    week_start: Optional[DateLike] = None,
    focus_day: Optional[DateLike] = None,
    min_focus_duration: int = DEFAULT_FOCUS_MIN_DURATION,
    overbooked_hours: float = OVERBOOKED_HOURS,
) -> Dict[str, Any]:
    """All four aggregations for one dashboard window."""
    return {
        "category_time": category_time(events, start, end),
        "weekly_load": weekly_load(
            events,
            week_start if week_start is not None else start,
            overbooked_hours=overbooked_hours,
        ),
        "focus_time": focus_time_slots(
            events,
            focus_day if focus_day is not None else start,
            min_duration=min_focus_duration,
        ),
        "density": event_density(events, start, end),
    }
