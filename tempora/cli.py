# tempora/cli.py
from __future__ import annotations

import argparse
import datetime as dt
import json
import logging
import sys
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from .analytics import summarize
from .config import load_config
from .conflicts import find_conflicts, overlap_segments
from .layout import layout_day
from .model import Event
from .payload import PayloadError, event_draft_from_dict, load_events_from_json, to_jsonable
from .quickadd import parse as parse_quick_add, suggest_duration
from .recurrence import expand_events
from .templates import JsonTemplateProvider, StaticTemplateProvider, TemplateProvider, apply_template
from .timerange import DateLike, get_events_for_day, sort_by_start
from .util.console import eprint
from .util.timeparse import parse_date_yyyy_mm_dd, parse_timestamp
from .util.tz import normalize_tz_name, now_in, resolve_tz
from .validate import validate_event

logger = logging.getLogger(__name__)


class _CommandError(Exception):
    def __init__(self, msg: str, rc: int = 2):
        super().__init__(msg)
        self.rc = rc


def _die(cmd: str, msg: str, rc: int = 2) -> int:
    eprint(f"[tempora-{cmd}] ERROR: {msg}")
    return rc


def _when(s: str, tz: dt.tzinfo, label: str) -> DateLike:
    """YYYY-MM-DD as a bare date (whole-day bound), anything else as a timestamp."""
    ss = (s or "").strip()
    try:
        if len(ss) == 10:
            return parse_date_yyyy_mm_dd(ss)
        return parse_timestamp(ss, tz)
    except ValueError as e:
        raise _CommandError(f"{label}: {e}") from e


def _stamp(s: str, tz: dt.tzinfo, label: str) -> dt.datetime:
    try:
        return parse_timestamp(s, tz)
    except ValueError as e:
        raise _CommandError(f"{label}: {e}") from e


def _load_events(ns: argparse.Namespace, tz: dt.tzinfo) -> List[Event]:
    if not ns.events:
        raise _CommandError("--events is required")
    p = Path(ns.events)
    if not p.exists():
        raise _CommandError(f"Missing events file: {p}")
    try:
        return load_events_from_json(p, tz)
    except PayloadError as e:
        raise _CommandError(str(e)) from e


def _emit(obj: Any, pretty: bool) -> None:
    print(json.dumps(to_jsonable(obj), ensure_ascii=False, indent=2 if pretty else None))


def _cmd_expand(ns: argparse.Namespace, tz: dt.tzinfo, cfg: Dict[str, Any]) -> Any:
    events = _load_events(ns, tz)
    start = _when(ns.start, tz, "--start")
    end = _when(ns.end, tz, "--end")
    occ = expand_events(events, start, end, max_occurrences=cfg["max_occurrences"])
    return sort_by_start(occ)


def _cmd_conflicts(ns: argparse.Namespace, tz: dt.tzinfo, cfg: Dict[str, Any]) -> Any:
    events = _load_events(ns, tz)
    cs = _stamp(ns.candidate_start, tz, "--candidate-start")
    ce = _stamp(ns.candidate_end, tz, "--candidate-end")
    if ce <= cs:
        raise _CommandError("--candidate-end must be after --candidate-start")

    # Occurrences starting before the candidate can still run into it.
    longest = max((ev.end_date - ev.start_date for ev in events), default=dt.timedelta(0))
    occ = expand_events(events, cs - longest, ce, max_occurrences=cfg["max_occurrences"])
    if ns.exclude:
        # The edited event may be a whole series: drop every occurrence of it.
        occ = [ev for ev in occ if ns.exclude not in (ev.id, ev.series_id)]
    hits = find_conflicts((cs, ce), occ)
    return {"hasConflicts": bool(hits), "conflicts": hits}


def _cmd_layout(ns: argparse.Namespace, tz: dt.tzinfo, cfg: Dict[str, Any]) -> Any:
    events = _load_events(ns, tz)
    day = _when(ns.day, tz, "--day")
    if isinstance(day, dt.datetime):
        day = day.date()
    occ = expand_events(events, day - dt.timedelta(days=1), day, max_occurrences=cfg["max_occurrences"])
    day_events = sort_by_start(get_events_for_day(occ, day))
    slots = layout_day(day_events)
    return {
        "events": [{"event": ev, "slot": slots[ev.id]} for ev in day_events],
        "overlaps": overlap_segments(day_events),
    }


def _cmd_analytics(ns: argparse.Namespace, tz: dt.tzinfo, cfg: Dict[str, Any]) -> Any:
    events = _load_events(ns, tz)
    start = _when(ns.start, tz, "--start")
    end = _when(ns.end, tz, "--end")
    week_start = _when(ns.week_start, tz, "--week-start") if ns.week_start else None
    focus_day = _when(ns.focus_day, tz, "--focus-day") if ns.focus_day else None

    # Materialize recurring events over everything the report looks at.
    week_first = _as_date(week_start if week_start is not None else start)
    days = [_as_date(b) for b in (start, end, focus_day) if b is not None]
    days += [week_first, week_first + dt.timedelta(days=6)]
    occ = expand_events(events, min(days) - dt.timedelta(days=1), max(days), max_occurrences=cfg["max_occurrences"])

    min_focus = ns.min_focus if ns.min_focus is not None else cfg["focus_min_duration"]
    if min_focus <= 0:
        raise _CommandError("--min-focus must be positive")
    return summarize(
        occ,
        start,
        end,
        week_start=week_start,
        focus_day=focus_day,
        min_focus_duration=min_focus,
        overbooked_hours=cfg["overbooked_hours"],
    )


def _as_date(x: DateLike) -> dt.date:
    return x.date() if isinstance(x, dt.datetime) else x


def _cmd_quickadd(ns: argparse.Namespace, tz: dt.tzinfo, cfg: Dict[str, Any]) -> Any:
    now = _stamp(ns.now, tz, "--now") if ns.now else now_in(tz)
    parsed = parse_quick_add(ns.text, now, default_minutes=cfg["default_event_minutes"])
    if parsed is None:
        raise _CommandError(f"No title found in {ns.text!r}")
    out = to_jsonable(parsed)
    out["suggestedDuration"] = suggest_duration(parsed.title)
    return out


def _cmd_validate(ns: argparse.Namespace, tz: dt.tzinfo, cfg: Dict[str, Any]) -> Any:
    if not ns.events:
        raise _CommandError("--events is required")
    p = Path(ns.events)
    if not p.exists():
        raise _CommandError(f"Missing events file: {p}")
    try:
        raw = json.loads(p.read_text(encoding="utf-8", errors="replace"))
    except json.JSONDecodeError as e:
        raise _CommandError(f"{p}: invalid JSON ({e})") from e
    if isinstance(raw, dict) and isinstance(raw.get("events"), list):
        raw = raw["events"]
    if not isinstance(raw, list):
        raise _CommandError("events payload must be a list or {'events': [...]}")

    report: List[Dict[str, Any]] = []
    for i, item in enumerate(raw):
        ident = item.get("id") if isinstance(item, dict) else None
        draft, errs = event_draft_from_dict(item, tz)
        if draft:
            errs += validate_event(draft)
        if errs:
            report.append({"index": i, "id": ident, "errors": errs})

    if report:
        for r in report:
            for e in r["errors"]:
                eprint(f"  - events[{r['index']}] {r['id'] or ''}: {e}")
        raise _CommandError(f"{len(report)} invalid event(s)", rc=3)
    return {"ok": True, "count": len(raw)}


def _template_provider(ns: argparse.Namespace, cfg: Dict[str, Any]) -> TemplateProvider:
    path = ns.templates or cfg["templates_path"]
    if path:
        return JsonTemplateProvider(path)
    return StaticTemplateProvider()


def _cmd_templates(ns: argparse.Namespace, tz: dt.tzinfo, cfg: Dict[str, Any]) -> Any:
    provider = _template_provider(ns, cfg)
    if not ns.apply:
        return provider.load()
    tpl = provider.get_template(ns.apply)
    if tpl is None:
        raise _CommandError(f"Unknown template: {ns.apply}")
    start = _stamp(ns.start, tz, "--start") if ns.start else now_in(tz).replace(second=0, microsecond=0)
    return apply_template(tpl, start)


_COMMANDS: Dict[str, Callable[[argparse.Namespace, dt.tzinfo, Dict[str, Any]], Any]] = {
    "expand": _cmd_expand,
    "conflicts": _cmd_conflicts,
    "layout": _cmd_layout,
    "analytics": _cmd_analytics,
    "quickadd": _cmd_quickadd,
    "validate": _cmd_validate,
    "templates": _cmd_templates,
}


def _build_parser(cfg: Dict[str, Any]) -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--events", default=None, help="Events JSON file (list or {\"events\": [...]})")
    common.add_argument(
        "--tz",
        default=cfg["tz"],
        help="Timezone for naive timestamps and day boundaries (default: env TEMPORA_TZ or 'local')",
    )
    common.add_argument("--pretty", action="store_true", help="Indent JSON output")
    common.add_argument("--verbose", action="store_true", help="Debug logging to stderr")

    ap = argparse.ArgumentParser(
        prog="tempora",
        description="Calendar event computations: recurrence, overlap layout, conflicts, analytics, quick-add.",
    )
    sub = ap.add_subparsers(dest="cmd", metavar="COMMAND")
    sub.required = True

    p = sub.add_parser("expand", parents=[common], help="Materialize recurring events in a window")
    p.add_argument("--start", required=True, help="Window start (YYYY-MM-DD or ISO timestamp)")
    p.add_argument("--end", required=True, help="Window end, inclusive (YYYY-MM-DD or ISO timestamp)")

    p = sub.add_parser("conflicts", parents=[common], help="Events overlapping a candidate interval")
    p.add_argument("--candidate-start", required=True)
    p.add_argument("--candidate-end", required=True)
    p.add_argument("--exclude", default=None, help="Event or series id to ignore (the event being edited)")

    p = sub.add_parser("layout", parents=[common], help="Column layout for one day")
    p.add_argument("--day", required=True, help="Day YYYY-MM-DD")

    p = sub.add_parser("analytics", parents=[common], help="Dashboard aggregations")
    p.add_argument("--start", required=True)
    p.add_argument("--end", required=True)
    p.add_argument("--week-start", default=None, help="First day of the weekly load (default: --start)")
    p.add_argument("--focus-day", default=None, help="Day for focus slots (default: --start)")
    p.add_argument(
        "--min-focus",
        type=int,
        default=None,
        help="Minimum focus slot minutes (default: env TEMPORA_FOCUS_MIN_DURATION or 90)",
    )

    p = sub.add_parser("quickadd", parents=[common], help="Parse a one-line event description")
    p.add_argument("text")
    p.add_argument("--now", default=None, help="Reference time (default: now in --tz)")

    sub.add_parser("validate", parents=[common], help="Validate every event in --events")

    p = sub.add_parser("templates", parents=[common], help="List templates or draft an event from one")
    p.add_argument("--templates", default=None, help="Template JSON file (default: env TEMPORA_TEMPLATES)")
    p.add_argument("--apply", default=None, metavar="TEMPLATE_ID")
    p.add_argument("--start", default=None, help="Start of the drafted event (default: now)")

    return ap


def main(argv: Optional[List[str]] = None) -> int:
    cfg = load_config()
    ns = _build_parser(cfg).parse_args(argv)
    cmd = ns.cmd

    logging.basicConfig(
        level=logging.DEBUG if ns.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        tz = resolve_tz(normalize_tz_name(ns.tz))
    except ValueError as e:
        return _die(cmd, f"Invalid --tz value: {e}")

    try:
        result = _COMMANDS[cmd](ns, tz, cfg)
    except _CommandError as e:
        return _die(cmd, str(e), e.rc)
    except (TypeError, ValueError, OverflowError) as e:
        logger.debug("%s failed", cmd, exc_info=True)
        return _die(cmd, f"{type(e).__name__}: {e}", 3)

    _emit(result, ns.pretty)
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
