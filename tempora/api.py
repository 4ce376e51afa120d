"""tempora.api

Stable *library* entrypoint for tempora.

Policy:
  - Only names listed in __all__ are considered public API.
  - Everything else is internal and may change without notice.
"""

from __future__ import annotations

from tempora.analytics import (
    category_time,
    event_density,
    focus_time_slots,
    summarize,
    weekly_load,
    weekly_load_for,
)
from tempora.config import load_config
from tempora.conflicts import find_conflicts, has_conflicts, overlap_segments
from tempora.layout import layout_day, overlap_cluster, position
from tempora.model import (
    CategoryTime,
    DayDensity,
    DayLoad,
    Event,
    EventTemplate,
    FocusTimeSlot,
    LayoutSlot,
    Occurrence,
    OverlapSegment,
    ParsedEvent,
    RecurrenceRule,
)
from tempora.payload import (
    PayloadError,
    event_from_dict,
    event_to_dict,
    events_from_list,
    load_events_from_json,
    to_jsonable,
)
from tempora.quickadd import parse as parse_quick_add
from tempora.quickadd import suggest_duration
from tempora.recurrence import (
    expand,
    expand_events,
    generate_instances,
    next_occurrence,
    resolve_base_event,
)
from tempora.templates import (
    JsonTemplateProvider,
    StaticTemplateProvider,
    TemplateProvider,
    apply_template,
    default_templates,
)
from tempora.timerange import (
    end_of_day,
    get_calendar_grid,
    get_days_in_month,
    get_events_for_day,
    get_week_days,
    get_week_start,
    is_date_in_range,
    is_same_day,
    start_of_day,
)
from tempora.validate import EventValidationError, assert_valid_event, validate_event


# --- Public API exports (locked by contract tests) ------------------------
# Keep changes intentional and reviewable.
# Prefer append-only unless you are intentionally reshaping the public surface.
_PUBLIC_EXPORTS = (
    "CategoryTime",
    "DayDensity",
    "DayLoad",
    "Event",
    "EventTemplate",
    "EventValidationError",
    "FocusTimeSlot",
    "JsonTemplateProvider",
    "LayoutSlot",
    "Occurrence",
    "OverlapSegment",
    "ParsedEvent",
    "PayloadError",
    "RecurrenceRule",
    "StaticTemplateProvider",
    "TemplateProvider",
    "apply_template",
    "assert_valid_event",
    "category_time",
    "default_templates",
    "end_of_day",
    "event_density",
    "event_from_dict",
    "event_to_dict",
    "events_from_list",
    "expand",
    "expand_events",
    "find_conflicts",
    "focus_time_slots",
    "generate_instances",
    "get_calendar_grid",
    "get_days_in_month",
    "get_events_for_day",
    "get_week_days",
    "get_week_start",
    "has_conflicts",
    "is_date_in_range",
    "is_same_day",
    "layout_day",
    "load_config",
    "load_events_from_json",
    "next_occurrence",
    "overlap_cluster",
    "overlap_segments",
    "parse_quick_add",
    "position",
    "resolve_base_event",
    "start_of_day",
    "suggest_duration",
    "summarize",
    "to_jsonable",
    "validate_event",
    "weekly_load",
    "weekly_load_for",
)

__all__ = [n for n in _PUBLIC_EXPORTS if n in globals()]
# --- /Public API exports --------------------------------------------------
