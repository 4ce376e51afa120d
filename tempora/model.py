# tempora/model.py
from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from typing import Optional, Tuple

UNCATEGORIZED = "Uncategorized"

FREQUENCIES = ("daily", "weekly", "monthly", "yearly", "custom")


@dataclass(frozen=True)
class RecurrenceRule:
    frequency: str                      # "daily" | "weekly" | "monthly" | "yearly" | "custom"
    interval: int = 1
    end_date: Optional[dt.date] = None  # datetime, or a date meaning "through that day"
    count: Optional[int] = None
    days_of_week: Tuple[int, ...] = ()  # 0=Sunday .. 6=Saturday
    day_of_month: Optional[int] = None  # 1..31
    week_of_month: Optional[int] = None  # 1..5, -1 for last (carried, not used for stepping)


@dataclass(frozen=True)
class Event:
    id: str
    title: str
    start_date: dt.datetime
    end_date: dt.datetime
    description: Optional[str] = None
    color: Optional[str] = None
    category: Optional[str] = None
    recurrence: Optional[RecurrenceRule] = None
    template_id: Optional[str] = None

    # Set only on materialized occurrences of a recurring event.
    base_event_id: Optional[str] = None
    occurrence_index: Optional[int] = None

    @property
    def duration(self) -> dt.timedelta:
        return self.end_date - self.start_date

    @property
    def duration_minutes(self) -> float:
        return self.duration.total_seconds() / 60.0

    @property
    def category_or_default(self) -> str:
        return self.category or UNCATEGORIZED

    @property
    def is_occurrence(self) -> bool:
        return self.base_event_id is not None

    @property
    def series_id(self) -> str:
        return self.base_event_id if self.base_event_id is not None else self.id


# An occurrence is an Event carrying base_event_id/occurrence_index.
Occurrence = Event


@dataclass(frozen=True)
class LayoutSlot:
    column_index: int
    column_count: int
    stack_order: int

    @property
    def width(self) -> float:
        return 100.0 / self.column_count

    @property
    def left(self) -> float:
        return self.column_index * self.width


@dataclass(frozen=True)
class OverlapSegment:
    start: dt.datetime
    end: dt.datetime
    ids: Tuple[str, ...]
    key: str


@dataclass(frozen=True)
class CategoryTime:
    category: str
    minutes: int
    hours: float
    percentage: float
    color: Optional[str] = None


@dataclass(frozen=True)
class DayLoad:
    date: dt.datetime
    minutes: int
    hours: float
    event_count: int
    is_overbooked: bool


@dataclass(frozen=True)
class FocusTimeSlot:
    start: dt.datetime
    end: dt.datetime
    duration: int  # minutes
    hours: float


@dataclass(frozen=True)
class DayDensity:
    date: dt.date
    event_count: int
    hours: float
    intensity: int  # 0..4


@dataclass(frozen=True)
class ParsedEvent:
    title: str
    start_date: Optional[dt.datetime] = None
    end_date: Optional[dt.datetime] = None
    duration: Optional[int] = None  # minutes, only when stated explicitly


@dataclass(frozen=True)
class EventTemplate:
    id: str
    name: str
    title: str
    duration: int  # minutes
    description: Optional[str] = None
    color: Optional[str] = None
    category: Optional[str] = None
    recurrence: Optional[RecurrenceRule] = None


__all__ = [
    "UNCATEGORIZED",
    "FREQUENCIES",
    "RecurrenceRule",
    "Event",
    "Occurrence",
    "LayoutSlot",
    "OverlapSegment",
    "CategoryTime",
    "DayLoad",
    "FocusTimeSlot",
    "DayDensity",
    "ParsedEvent",
    "EventTemplate",
]
