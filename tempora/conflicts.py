# tempora/conflicts.py
from __future__ import annotations

import datetime as dt
from typing import Any, List, Mapping, Optional, Sequence, Set, Tuple, Union

from .interval import intervals_overlap
from .model import Event, OverlapSegment

Candidate = Union[Event, Tuple[dt.datetime, dt.datetime], Mapping[str, Any]]


def _candidate_interval(candidate: Candidate) -> Optional[Tuple[dt.datetime, dt.datetime]]:
    if isinstance(candidate, Event):
        return candidate.start_date, candidate.end_date
    if isinstance(candidate, tuple):
        if len(candidate) != 2:
            return None
        start, end = candidate
    elif isinstance(candidate, Mapping):
        start = candidate.get("start_date", candidate.get("startDate"))
        end = candidate.get("end_date", candidate.get("endDate"))
    else:
        return None
    if not isinstance(start, dt.datetime) or not isinstance(end, dt.datetime):
        return None
    return start, end


def find_conflicts(
    candidate: Candidate,
    existing_events: Sequence[Event],
    exclude_id: Optional[str] = None,
) -> List[Event]:
    """Existing events overlapping the candidate interval, in input order.

    `exclude_id` skips the event being edited. A draft without both
    timestamps has no conflicts.
    """
    iv = _candidate_interval(candidate)
    if iv is None:
        return []
    start, end = iv

    out: List[Event] = []
    for ev in existing_events:
        if exclude_id is not None and ev.id == exclude_id:
            continue
        if intervals_overlap(start, end, ev.start_date, ev.end_date):
            out.append(ev)
    return out


def has_conflicts(
    candidate: Candidate,
    existing_events: Sequence[Event],
    exclude_id: Optional[str] = None,
) -> bool:
    return bool(find_conflicts(candidate, existing_events, exclude_id))


def overlap_segments(events: Sequence[Event]) -> List[OverlapSegment]:
    """Maximal spans where two or more events run at the same time (sweep line)."""
    segments: List[OverlapSegment] = []

    pts: List[Tuple[dt.datetime, int, str]] = []
    for ev in events:
        if ev.end_date <= ev.start_date:
            continue
        pts.append((ev.start_date, +1, ev.id))
        pts.append((ev.end_date, -1, ev.id))
    # Ends before starts at the same instant: touching intervals do not overlap.
    pts.sort(key=lambda x: (x[0], x[1]))

    active: Set[str] = set()
    prev_t: Optional[dt.datetime] = None

    for t, kind, eid in pts:
        if prev_t is not None and t > prev_t and len(active) >= 2:
            ids = tuple(sorted(active))
            key = ",".join(ids)
            last = segments[-1] if segments else None
            if last and last.key == key and last.end == prev_t:
                segments[-1] = OverlapSegment(start=last.start, end=t, ids=last.ids, key=last.key)
            else:
                segments.append(OverlapSegment(start=prev_t, end=t, ids=ids, key=key))

        if kind == +1:
            active.add(eid)
        else:
            active.discard(eid)
        prev_t = t

    return segments
