# streamplan/frames.py
from dataclasses import fields, is_dataclass
from datetime import date
from enum import Enum
from typing import Any, Dict, List

import pandas as pd

from .models import (
    DeferDecision,
    OptimizationResult,
    PlatformOverride,
    Unresolved,
)

SCHEDULE_COLUMNS = [
    "month", "year", "title", "kind", "priority",
    "start_day", "end_day", "start_date", "end_date",
    "watch_hours", "remaining_hours",
]
MONTHLY_COLUMNS = [
    "month", "year", "action", "platforms", "monthly_cost",
    "watch_hours", "budget_constrained",
]
DEFERRED_COLUMNS = ["title", "kind", "priority", "reason"]

PRIORITY_COLORS = {
    "high": "#d62728",    # red
    "medium": "#1f77b4",  # blue
    "low": "#2ca02c",     # green
}


def schedule_frame(result: OptimizationResult) -> pd.DataFrame:
    """One row per scheduled title per month."""
    rows = []
    for plan in result.rotation_schedule:
        for item in plan.items:
            rows.append({
                "month": plan.month,
                "year": plan.year,
                "title": item.entry.title,
                "kind": item.entry.kind,
                "priority": item.entry.priority,
                "start_day": item.start_day,
                "end_day": item.end_day,
                "start_date": pd.Timestamp(item.start_date),
                "end_date": pd.Timestamp(item.end_date),
                "watch_hours": item.watch_hours,
                "remaining_hours": item.remaining_minutes / 60,
            })
    return pd.DataFrame(rows, columns=SCHEDULE_COLUMNS)


def monthly_frame(result: OptimizationResult) -> pd.DataFrame:
    rows = [{
        "month": f"{plan.month} {plan.year}",
        "year": plan.year,
        "action": plan.action,
        "platforms": ", ".join(s.name for s in plan.services),
        "monthly_cost": plan.monthly_cost,
        "watch_hours": plan.total_watch_hours,
        "budget_constrained": plan.is_budget_constrained,
    } for plan in result.rotation_schedule]
    return pd.DataFrame(rows, columns=MONTHLY_COLUMNS)


def deferred_frame(result: OptimizationResult) -> pd.DataFrame:
    rows = [{
        "title": d.entry.title,
        "kind": d.entry.kind,
        "priority": d.entry.priority,
        "reason": d.reason,
    } for d in result.deferred_items]
    return pd.DataFrame(rows, columns=DEFERRED_COLUMNS)


def calendar_events(result: OptimizationResult) -> List[Dict[str, Any]]:
    """Event dicts for a FullCalendar month view (all-day, exclusive end)."""
    events = []
    for plan in result.rotation_schedule:
        for item in plan.items:
            end = pd.Timestamp(item.end_date) + pd.Timedelta(days=1)
            events.append({
                "id": f"{item.entry.id}-{plan.year}-{plan.month_index + 1:02d}",
                "title": f"{item.entry.title} ({item.watch_hours:.1f}h)",
                "start": pd.Timestamp(item.start_date).date().isoformat(),
                "end": end.date().isoformat(),
                "allDay": True,
                "color": PRIORITY_COLORS.get(item.entry.priority, "#7f7f7f"),
            })
    return events


def _jsonable(obj: Any) -> Any:
    if isinstance(obj, Unresolved):
        return {"type": "unresolved"}
    if isinstance(obj, DeferDecision):
        return {"type": "deferred"}
    if isinstance(obj, PlatformOverride):
        return {"type": "override", "platform": obj.platform}
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, date):
        return obj.isoformat()
    if is_dataclass(obj) and not isinstance(obj, type):
        return {f.name: _jsonable(getattr(obj, f.name)) for f in fields(obj)}
    if isinstance(obj, (list, tuple)):
        return [_jsonable(v) for v in obj]
    if isinstance(obj, dict):
        return {str(k): _jsonable(v) for k, v in obj.items()}
    return obj


def result_to_dict(result: OptimizationResult) -> Dict[str, Any]:
    """Plain dict/list/str/number tree, ready for json.dumps."""
    return _jsonable(result)
