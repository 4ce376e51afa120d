# tempora/interval.py
from __future__ import annotations

import datetime as dt

from .model import Event


def round_minutes(td: dt.timedelta) -> int:
    # Nearest minute, half away from zero
    secs = td.total_seconds()
    if secs >= 0:
        return int((secs + 30) // 60)
    return -int((-secs + 30) // 60)


def duration_minutes(start: dt.datetime, end: dt.datetime) -> float:
    return (end - start).total_seconds() / 60.0


def intervals_overlap(
    a_start: dt.datetime,
    a_end: dt.datetime,
    b_start: dt.datetime,
    b_end: dt.datetime,
) -> bool:
    """Half-open overlap: touching endpoints do not overlap."""
    return a_start < b_end and b_start < a_end


def events_overlap(a: Event, b: Event) -> bool:
    return intervals_overlap(a.start_date, a.end_date, b.start_date, b.end_date)
