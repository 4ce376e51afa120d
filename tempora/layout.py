# tempora/layout.py
from __future__ import annotations

from typing import Dict, List, Sequence

from .interval import events_overlap
from .model import Event, LayoutSlot


def overlap_cluster(event: Event, day_events: Sequence[Event]) -> List[Event]:
    """Target plus every event in `day_events` overlapping it directly.

    Transitive overlap (through a third event) is not followed. The result is
    in start order, ties kept in `day_events` order; a target missing from
    `day_events` sorts ahead of equal-start peers.
    """
    cluster: List[Event] = []
    seen_target = False
    for ev in day_events:
        if ev.id == event.id:
            if not seen_target:
                cluster.append(event)
                seen_target = True
            continue
        if events_overlap(event, ev):
            cluster.append(ev)
    if not seen_target:
        cluster.insert(0, event)

    # list.sort is stable: equal starts keep their input order.
    cluster.sort(key=lambda ev: ev.start_date)
    return cluster


def position(event: Event, day_events: Sequence[Event]) -> LayoutSlot:
    """Column placement of `event` among the events drawn on the same day.

    width = 100 / column_count, left = column_index * width; earlier starts
    get the higher stack order so they paint on top.
    """
    cluster = overlap_cluster(event, day_events)
    index = next(i for i, ev in enumerate(cluster) if ev.id == event.id)
    count = len(cluster)
    return LayoutSlot(column_index=index, column_count=count, stack_order=count - index)


def layout_day(day_events: Sequence[Event]) -> Dict[str, LayoutSlot]:
    """Positions for every event of a day, keyed by event id."""
    out: Dict[str, LayoutSlot] = {}
    for ev in day_events:
        if ev.id in out:
            continue
        out[ev.id] = position(ev, day_events)
    return out
