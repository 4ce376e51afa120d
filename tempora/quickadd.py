"""Quick-add parsing: turn one line of English into a draft event.

Examples (reference 2024-01-15):
  - "Meeting tomorrow 3-4pm"          -> Meeting, 01-16 15:00-16:00
  - "Lunch next Monday at noon"       -> Lunch, 01-22 12:00-13:00
  - "Conference call in 2 hours"      -> now + 2h, one hour long
  - "Dinner tomorrow 7pm for 2 hours" -> 01-16 19:00-21:00, duration 120

Pattern categories are applied in a fixed order and every matched fragment is
cut from the text; whatever is left is the title. A clock time without am/pm
is read as 24-hour, so "Meeting 3" means 03:00.
"""

from __future__ import annotations

import datetime as dt
import re
from typing import Optional, Tuple

from .model import ParsedEvent

DEFAULT_EVENT_MINUTES = 60

_WEEKDAYS = {
    "sunday": 0,
    "monday": 1,
    "tuesday": 2,
    "wednesday": 3,
    "thursday": 4,
    "friday": 5,
    "saturday": 6,
}
_WD = r"(monday|tuesday|wednesday|thursday|friday|saturday|sunday)"

_RELATIVE_RE = re.compile(r"\bin\s+(\d+)\s*(hours?|hrs?|days?|weeks?)\b", re.IGNORECASE)
_FROM_NOW_RE = re.compile(r"\b(\d+)\s*(hours?|hrs?|days?|weeks?)\s+from\s+now\b", re.IGNORECASE)

_DURATION_RE = re.compile(r"\bfor\s+(\d+)\s*(minutes?|mins?|hours?|hrs?)\b", re.IGNORECASE)
_DURATION_LONG_RE = re.compile(r"\b(\d+)\s*(minutes?|mins?|hours?|hrs?)\s+long\b", re.IGNORECASE)

_DAY_OFFSETS = (
    (re.compile(r"\b(?:on\s+)?tomorrow\b", re.IGNORECASE), 1),
    (re.compile(r"\b(?:on\s+)?today\b", re.IGNORECASE), 0),
    (re.compile(r"\b(?:on\s+)?yesterday\b", re.IGNORECASE), -1),
)
_NEXT_WEEKDAY_RE = re.compile(r"\b(?:on\s+)?next\s+" + _WD + r"\b", re.IGNORECASE)
_WEEKDAY_RE = re.compile(r"\b(?:on\s+)?" + _WD + r"\b", re.IGNORECASE)

_AT = r"(?:\bat\s+)?"
_RANGE_RE = re.compile(
    _AT
    + r"(?<![\w:-])(\d{1,2})(?::(\d{2}))?\s*(am|pm)?\s*[-–—]\s*(\d{1,2})(?::(\d{2}))?\s*(am|pm)?(?![\w:])",
    re.IGNORECASE,
)
_TIME_RE = re.compile(_AT + r"(?<![\w:-])(\d{1,2})(?::(\d{2}))?\s*(am|pm)?(?![\w:])", re.IGNORECASE)
_NOON_RE = re.compile(_AT + r"\b(?:noon|midday)\b", re.IGNORECASE)
_MIDNIGHT_RE = re.compile(_AT + r"\bmidnight\b", re.IGNORECASE)

_LEAD_CONNECTIVE_RE = re.compile(r"^(?:at|on|for|in)\b\s*", re.IGNORECASE)
_TRAIL_CONNECTIVE_RE = re.compile(r"\s*\b(?:at|on|for|in)$", re.IGNORECASE)
_EDGE_PUNCT = " \t,;:-–—"


def _cut(text: str, m: re.Match[str]) -> str:
    return text[: m.start()] + " " + text[m.end():]


def _to_24h(hour: int, period: Optional[str]) -> int:
    if not period:
        return hour
    if period.lower() == "pm":
        return hour if hour == 12 else hour + 12
    return 0 if hour == 12 else hour


def _valid_clock(hour: int, minute: int, period: Optional[str]) -> bool:
    if not (0 <= minute <= 59):
        return False
    if period:
        return 1 <= hour <= 12
    return 0 <= hour <= 23


def _next_weekday(now: dt.datetime, name: str) -> dt.datetime:
    target = _WEEKDAYS[name.lower()]
    current = (now.weekday() + 1) % 7
    days = target - current
    if days <= 0:
        days += 7
    return now + dt.timedelta(days=days)


def _at_clock(day: dt.datetime, hour: int, minute: int) -> dt.datetime:
    return day.replace(hour=hour, minute=minute, second=0, microsecond=0)


def _unit_delta(amount: int, unit: str) -> dt.timedelta:
    u = unit.lower()
    if u.startswith("h"):
        return dt.timedelta(hours=amount)
    if u.startswith("d"):
        return dt.timedelta(days=amount)
    return dt.timedelta(weeks=amount)


def _range_clock(m: re.Match[str]) -> Optional[Tuple[int, int, int, int]]:
    sh, sm, sp = int(m.group(1)), int(m.group(2) or 0), m.group(3)
    eh, em, ep = int(m.group(4)), int(m.group(5) or 0), m.group(6)

    # "3-4pm": a lone trailing period applies to the start as well, unless that
    # would put the start after the end ("11-1pm" is 11am-1pm).
    if ep and not sp and 1 <= sh <= 12:
        sp = ep
        if _to_24h(sh, sp) * 60 + sm > _to_24h(eh, ep) * 60 + em:
            sp = "am" if ep.lower() == "pm" else "pm"
    elif sp and not ep and 1 <= eh <= 12:
        if _to_24h(eh, sp) * 60 + em >= _to_24h(sh, sp) * 60 + sm:
            ep = sp

    if not (_valid_clock(sh, sm, sp) and _valid_clock(eh, em, ep)):
        return None
    return _to_24h(sh, sp), sm, _to_24h(eh, ep), em


def _clean_title(text: str) -> str:
    title = re.sub(r"\s+", " ", text).strip(_EDGE_PUNCT)
    while True:
        cleaned = _LEAD_CONNECTIVE_RE.sub("", title)
        cleaned = _TRAIL_CONNECTIVE_RE.sub("", cleaned).strip(_EDGE_PUNCT)
        if cleaned == title:
            return title
        title = cleaned


def parse(
    text: str,
    reference_now: dt.datetime,
    *,
    default_minutes: int = DEFAULT_EVENT_MINUTES,
) -> Optional[ParsedEvent]:
    """Extract title, start, end and explicit duration from `text`.

    Returns None when no title is left after the date/time fragments are cut.
    """
    if not text or not text.strip():
        return None

    rest = text.strip()
    now = reference_now

    # Relative offsets ("in 2 hours", "3 days from now").
    anchor: Optional[dt.datetime] = None
    m = _RELATIVE_RE.search(rest) or _FROM_NOW_RE.search(rest)
    if m:
        anchor = now + _unit_delta(int(m.group(1)), m.group(2))
        rest = _cut(rest, m)

    # Explicit duration suffix.
    duration: Optional[int] = None
    m = _DURATION_RE.search(rest) or _DURATION_LONG_RE.search(rest)
    if m:
        amount = int(m.group(1))
        duration = amount * 60 if m.group(2).lower().startswith("h") else amount
        rest = _cut(rest, m)

    # Relative day keywords; first category found wins.
    day: Optional[dt.datetime] = None
    for rx, offset in _DAY_OFFSETS:
        m = rx.search(rest)
        if m:
            day = now + dt.timedelta(days=offset)
            rest = _cut(rest, m)
            break
    if day is None:
        m = _NEXT_WEEKDAY_RE.search(rest) or _WEEKDAY_RE.search(rest)
        if m:
            day = _next_weekday(now, m.group(1))
            rest = _cut(rest, m)

    if anchor is not None:
        day = anchor
    base = day if day is not None else now

    start: Optional[dt.datetime] = None
    end: Optional[dt.datetime] = None

    for m in _RANGE_RE.finditer(rest):
        clock = _range_clock(m)
        if clock is None:
            continue
        sh, sm, eh, em = clock
        start = _at_clock(base, sh, sm)
        end = _at_clock(base, eh, em)
        if end < start:
            end = end + dt.timedelta(days=1)
        rest = _cut(rest, m)
        break

    if start is None:
        for m in _TIME_RE.finditer(rest):
            hour, minute, period = int(m.group(1)), int(m.group(2) or 0), m.group(3)
            if not _valid_clock(hour, minute, period):
                continue
            start = _at_clock(base, _to_24h(hour, period), minute)
            rest = _cut(rest, m)
            break

    if start is None:
        m = _NOON_RE.search(rest)
        if m:
            start = _at_clock(base, 12, 0)
            rest = _cut(rest, m)
        else:
            m = _MIDNIGHT_RE.search(rest)
            if m:
                start = _at_clock(base, 0, 0)
                rest = _cut(rest, m)

    if start is None and anchor is not None:
        start = anchor.replace(second=0, microsecond=0)
    elif start is None and day is not None:
        # A date with no clock time keeps the reference clock.
        start = day.replace(second=0, microsecond=0)

    if start is not None and end is None:
        end = start + dt.timedelta(minutes=duration if duration else default_minutes)

    title = _clean_title(rest)
    if not title:
        return None

    return ParsedEvent(title=title, start_date=start, end_date=end, duration=duration)


def suggest_duration(title: str) -> Optional[int]:
    """Typical length in minutes for an event title (keyword heuristics)."""
    if not title:
        return None

    t = title.lower()

    if "meeting" in t or "sync" in t:
        if "standup" in t or "daily" in t:
            return 15
        if "quick" in t or "brief" in t:
            return 15
        if "1:1" in t or "one-on-one" in t:
            return 30
        return 60

    if "focus" in t or "deep work" in t:
        return 90
    if "work session" in t or "coding" in t:
        return 120

    if "break" in t or "lunch" in t:
        return 30
    if "coffee" in t:
        return 15

    if "call" in t or "phone" in t:
        return 30

    if "review" in t or "retro" in t:
        return 60

    if "interview" in t:
        return 60

    return 30
