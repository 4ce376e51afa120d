# tempora/util/timeparse.py
from __future__ import annotations

import datetime as dt
from typing import Optional

from .tz import localize


def parse_date_yyyy_mm_dd(s: str) -> dt.date:
    return dt.datetime.strptime(s, "%Y-%m-%d").date()


def parse_timestamp(s: str, tz: Optional[dt.tzinfo] = None) -> dt.datetime:
    """Parse an ISO-8601 timestamp (a trailing "Z" means UTC).

    A bare date ("2024-01-15") is midnight of that day. Naive results get `tz`
    attached when given.
    """
    ss = str(s or "").strip()
    if not ss:
        raise ValueError("Empty timestamp")
    if ss.endswith("Z") or ss.endswith("z"):
        ss = ss[:-1] + "+00:00"
    try:
        ts = dt.datetime.fromisoformat(ss)
    except ValueError as e:
        raise ValueError(f"Invalid ISO timestamp: {s!r}") from e
    if ts.tzinfo is None:
        return localize(ts, tz)
    return ts


def format_timestamp(ts: dt.datetime) -> str:
    return ts.isoformat(timespec="seconds") if ts.microsecond == 0 else ts.isoformat()
