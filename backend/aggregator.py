"""
Dashboard aggregation: pure functions with no side effects.

Everything here is recomputed from the full entry list on every read, so the
result never depends on previous calls.
"""

import logging
from typing import List

from config import OTHER_PROCESS, PROCESSES
from dates import date_key, format_display_date, month_of
from schemas import OffDay, ProductionEntry

logger = logging.getLogger(__name__)


def efficiency(plan: float, actual: float) -> float:
    """actual / plan * 100, or 0 when nothing was planned."""
    if not plan or plan <= 0:
        return 0.0
    return max(actual or 0, 0) / plan * 100


def filter_entries(entries: List[ProductionEntry], category: str) -> List[ProductionEntry]:
    """Entries of one category with a usable date, newest date first."""
    relevant = [e for e in entries if e is not None and e.category == category and date_key(e.date)]
    return sorted(relevant, key=lambda e: date_key(e.date), reverse=True)


def month_stats(entries: List[ProductionEntry], month: str) -> dict:
    plan = 0
    actual = 0
    for e in entries:
        if month_of(e.date) == month:
            plan += e.plan_quantity or 0
            actual += e.actual_quantity or 0
    return {"plan": plan, "actual": actual, "efficiency": efficiency(plan, actual)}


def process_breakdown(entries: List[ProductionEntry], month: str) -> List[dict]:
    """Plan/Actual per process for the month.

    Every configured process appears, in configured order, even with no
    activity. Process names outside the list are folded into a trailing
    "Other" row, which is also always present, so charts get a fixed shape.
    """
    rows = {proc: {"process": proc, "Plan": 0, "Actual": 0} for proc in PROCESSES}
    rows[OTHER_PROCESS] = {"process": OTHER_PROCESS, "Plan": 0, "Actual": 0}

    for e in entries:
        if month_of(e.date) != month:
            continue
        key = e.process if e.process in rows else OTHER_PROCESS
        rows[key]["Plan"] += e.plan_quantity or 0
        rows[key]["Actual"] += e.actual_quantity or 0

    result = []
    for row in rows.values():
        row["efficiency"] = efficiency(row["Plan"], row["Actual"])
        result.append(row)
    return result


def daily_groups(entries: List[ProductionEntry], off_days: List[OffDay], month: str) -> List[dict]:
    """One group per day of the month that has entries or is an off day, newest first."""
    month_entries = [e for e in entries if month_of(e.date) == month]
    month_off_days = [od for od in off_days if od is not None and month_of(od.date) == month]

    dates = {date_key(e.date) for e in month_entries}
    dates.update(date_key(od.date) for od in month_off_days)

    groups = []
    for key in sorted(dates, reverse=True):
        day_entries = [e for e in month_entries if date_key(e.date) == key]
        off_day = next((od for od in month_off_days if date_key(od.date) == key), None)
        groups.append({
            "date": key,
            "display_date": format_display_date(key),
            "entries": day_entries,
            "total_actual": sum(e.actual_quantity or 0 for e in day_entries),
            "is_off_day": off_day is not None,
            "off_day_name": off_day.description if off_day else "",
        })
    return groups


def aggregate(entries: List[ProductionEntry], off_days: List[OffDay], category: str, month: str) -> dict:
    """Single entry point the dashboard calls to populate cards, the process chart and the daily log.

    Returns
    -------
    Dict with structure:
    {
        "category": "Liquid",
        "month": "2024-01",
        "entries": [...],        # category entries, all months, date descending
        "stats": {"plan": ..., "actual": ..., "efficiency": ...},
        "processes": [{"process": "Mixing", "Plan": ..., "Actual": ..., "efficiency": ...}, ...],
        "daily_groups": [{"date": ..., "entries": [...], "is_off_day": ...}, ...],
    }
    """
    relevant = filter_entries(entries, category)
    view = {
        "category": category,
        "month": month,
        "entries": relevant,
        "stats": month_stats(relevant, month),
        "processes": process_breakdown(relevant, month),
        "daily_groups": daily_groups(relevant, off_days, month),
    }
    logger.debug(
        "Aggregated %d %s entries for %s into %d daily groups",
        len(relevant), category, month, len(view["daily_groups"]),
    )
    return view
