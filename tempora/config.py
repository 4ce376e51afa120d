# tempora/config.py
from __future__ import annotations

import logging
import os
from typing import Any, Dict, Mapping, Optional

from .analytics import DEFAULT_FOCUS_MIN_DURATION, OVERBOOKED_HOURS
from .quickadd import DEFAULT_EVENT_MINUTES
from .recurrence import DEFAULT_MAX_OCCURRENCES
from .util.tz import normalize_tz_name

logger = logging.getLogger(__name__)

ENV_TZ = "TEMPORA_TZ"
ENV_MAX_OCCURRENCES = "TEMPORA_MAX_OCCURRENCES"
ENV_FOCUS_MIN_DURATION = "TEMPORA_FOCUS_MIN_DURATION"
ENV_OVERBOOKED_HOURS = "TEMPORA_OVERBOOKED_HOURS"
ENV_DEFAULT_EVENT_MINUTES = "TEMPORA_DEFAULT_EVENT_MINUTES"
ENV_TEMPLATES = "TEMPORA_TEMPLATES"


def _pos_int(raw: Optional[str], default: int, name: str) -> int:
    s = (raw or "").strip()
    if not s:
        return default
    try:
        v = int(s)
    except ValueError:
        v = 0
    if v > 0:
        return v
    logger.warning("%s=%r is not a positive integer; using %s", name, raw, default)
    return default


def _pos_float(raw: Optional[str], default: float, name: str) -> float:
    s = (raw or "").strip()
    if not s:
        return default
    try:
        v = float(s)
    except ValueError:
        v = 0.0
    if v > 0:
        return v
    logger.warning("%s=%r is not a positive number; using %s", name, raw, default)
    return default


def load_config(env: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    """Engine settings from environment variables.

    Keys: tz, max_occurrences, focus_min_duration, overbooked_hours,
    default_event_minutes, templates_path. Unset or invalid values fall back
    to the library defaults. `tz` is a normalized name; resolve it with
    tempora.util.tz.resolve_tz.
    """
    src = os.environ if env is None else env

    templates = (src.get(ENV_TEMPLATES) or "").strip()
    return {
        "tz": normalize_tz_name(src.get(ENV_TZ)),
        "max_occurrences": _pos_int(src.get(ENV_MAX_OCCURRENCES), DEFAULT_MAX_OCCURRENCES, ENV_MAX_OCCURRENCES),
        "focus_min_duration": _pos_int(
            src.get(ENV_FOCUS_MIN_DURATION), DEFAULT_FOCUS_MIN_DURATION, ENV_FOCUS_MIN_DURATION
        ),
        "overbooked_hours": _pos_float(src.get(ENV_OVERBOOKED_HOURS), OVERBOOKED_HOURS, ENV_OVERBOOKED_HOURS),
        "default_event_minutes": _pos_int(
            src.get(ENV_DEFAULT_EVENT_MINUTES), DEFAULT_EVENT_MINUTES, ENV_DEFAULT_EVENT_MINUTES
        ),
        "templates_path": templates or None,
    }
