# tempora/templates.py
from __future__ import annotations

import datetime as dt
import json
import logging
import os
import re
from typing import Any, Dict, List, Mapping, Optional, Protocol, Sequence

from .model import EventTemplate, RecurrenceRule
from .payload import PayloadError, rule_from_dict
from .util.duration import coerce_minutes

logger = logging.getLogger(__name__)


def default_templates() -> List[EventTemplate]:
    """Built-in templates offered when no template file is configured."""
    return [
        EventTemplate(
            id="template-meeting",
            name="Meeting",
            title="Team Meeting",
            duration=60,
            color="#3b82f6",
            category="Meeting",
        ),
        EventTemplate(
            id="template-standup",
            name="Daily Standup",
            title="Daily Standup",
            duration=15,
            color="#10b981",
            category="Meeting",
            recurrence=RecurrenceRule(frequency="daily", interval=1),
        ),
        EventTemplate(
            id="template-1on1",
            name="1:1 Meeting",
            title="1:1 Meeting",
            duration=30,
            color="#8b5cf6",
            category="Meeting",
        ),
        EventTemplate(
            id="template-focus",
            name="Focus Time",
            title="Focus Time",
            duration=90,
            description="Deep work - no interruptions",
            color="#f59e0b",
            category="Work",
        ),
        EventTemplate(
            id="template-lunch",
            name="Lunch Break",
            title="Lunch",
            duration=30,
            color="#ec4899",
            category="Personal",
        ),
    ]


def apply_template(template: EventTemplate, start: dt.datetime) -> Dict[str, Any]:
    """Draft event fields for `template` starting at `start`.

    The draft has no id; the caller assigns one when committing.
    """
    return {
        "title": template.title,
        "start_date": start,
        "end_date": start + dt.timedelta(minutes=template.duration),
        "description": template.description,
        "color": template.color,
        "category": template.category,
        "recurrence": template.recurrence,
        "template_id": template.id,
    }


def template_from_dict(d: Mapping[str, Any], index: int = 0) -> Optional[EventTemplate]:
    """One template record, or None when it is unusable.

    `duration` may be integer minutes or an ISO-8601 duration ("PT1H30M").
    """
    if not isinstance(d, Mapping):
        return None
    name = str(d.get("name") or "").strip()
    title = str(d.get("title") or name).strip()
    if not title:
        return None
    minutes = coerce_minutes(d.get("duration"))
    if minutes is None:
        return None

    tid = str(d.get("id") or "").strip()
    if not tid:
        slug = re.sub(r"[^a-z0-9]+", "-", (name or title).lower()).strip("-")
        tid = f"template-{slug}" if slug else f"template-{index + 1}"

    rec = d.get("recurrence")
    rule: Optional[RecurrenceRule] = None
    if rec:
        try:
            rule = rule_from_dict(rec)
        except PayloadError as e:
            logger.warning("template %s: ignoring recurrence (%s)", tid, e)

    def _s(key: str) -> Optional[str]:
        v = d.get(key)
        return str(v).strip() or None if v is not None else None

    return EventTemplate(
        id=tid,
        name=name or title,
        title=title,
        duration=minutes,
        description=_s("description"),
        color=_s("color"),
        category=_s("category"),
        recurrence=rule,
    )


def load_templates_config(path: str) -> Optional[List[EventTemplate]]:
    """Load a template JSON file.

    Accepted formats:
      - { "templates": [ {..}, ... ] }
      - [ {..}, ... ]

    Returns None when the file is missing or unreadable; bad records are skipped.
    """
    if not path:
        return None
    if not os.path.exists(path):
        return None
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = json.load(f)
    except (OSError, ValueError) as e:
        logger.warning("templates: cannot read %s (%s)", path, e)
        return None

    if isinstance(raw, dict) and isinstance(raw.get("templates"), list):
        items = raw["templates"]
    elif isinstance(raw, list):
        items = raw
    else:
        logger.warning("templates: %s has no template list", path)
        return None

    out: List[EventTemplate] = []
    seen = set()
    for i, item in enumerate(items):
        tpl = template_from_dict(item, i)
        if tpl is None:
            logger.warning("templates: skipping invalid record #%d in %s", i, path)
            continue
        if tpl.id in seen:
            logger.warning("templates: duplicate id %s in %s", tpl.id, path)
            continue
        seen.add(tpl.id)
        out.append(tpl)
    return out


class TemplateProvider(Protocol):
    def load(self) -> List[EventTemplate]:
        ...

    def get_template(self, template_id: str) -> Optional[EventTemplate]:
        ...


class StaticTemplateProvider:
    def __init__(self, templates: Optional[Sequence[EventTemplate]] = None):
        self._templates = list(templates) if templates is not None else default_templates()

    def load(self) -> List[EventTemplate]:
        return list(self._templates)

    def get_template(self, template_id: str) -> Optional[EventTemplate]:
        for t in self._templates:
            if t.id == template_id:
                return t
        return None


class JsonTemplateProvider(StaticTemplateProvider):
    """Templates from a JSON file; the built-in set when the file yields nothing."""

    def __init__(self, path: str):
        self.path = path
        loaded = load_templates_config(path)
        if not loaded:
            logger.warning("templates: using built-in defaults (nothing loaded from %s)", path)
            loaded = default_templates()
        super().__init__(loaded)
