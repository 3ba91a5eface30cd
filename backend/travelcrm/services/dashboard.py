"""Dashboard statistics over already scoped and filtered collections.

All functions are pure and total: a non-list collection is treated as empty
and missing record fields are skipped, so the dashboard always renders.
"""

import logging
import re
from datetime import datetime
from typing import Any, Dict, List, Optional

from travelcrm.services.records import (
    as_list,
    count_where,
    day_string,
    get_field,
    is_before,
    local_now,
    percentage,
    sort_key_timestamp,
    text_field,
)

logger = logging.getLogger(__name__)

HIGH_CONVERSION_THRESHOLD = 70


def distribution(records: Any, field: str) -> Dict[str, int]:
    """Count records per value of ``field``, keyed in first-seen order."""
    counts: Dict[str, int] = {}
    for record in as_list(records):
        value = get_field(record, field)
        if not isinstance(value, str):
            continue
        counts[value] = counts.get(value, 0) + 1
    return counts


def conversion_rate(logs: Any) -> int:
    logs = as_list(logs)
    positive = count_where(logs, lambda log: get_field(log, "outcome") == "positive")
    return percentage(positive, len(logs))


def has_pending_follow_up(log: Any) -> bool:
    return bool(get_field(log, "follow_up_required") and get_field(log, "follow_up_date"))


def is_overdue_follow_up(log: Any, now: datetime) -> bool:
    return has_pending_follow_up(log) and is_before(get_field(log, "follow_up_date"), now)


def employee_rollup(
    logs: Any,
    now: Optional[datetime] = None,
    week_days: int = 7,
) -> Dict[str, Dict[str, Any]]:
    """Per-employee activity totals keyed by employee id."""
    now = local_now(now)
    today = day_string(now)
    week_start = day_string(now, week_days)

    rollup: Dict[str, Dict[str, Any]] = {}
    for log in as_list(logs):
        employee_id = get_field(log, "employee_id")
        key = str(employee_id) if employee_id is not None else ""
        if key not in rollup:
            rollup[key] = {
                "employee_id": key,
                "employee_name": get_field(log, "employee_name"),
                "total_logs": 0,
                "positive_outcomes": 0,
                "today_logs": 0,
                "week_logs": 0,
                "follow_ups_created": 0,
            }
        stats = rollup[key]
        log_date = text_field(log, "date")

        stats["total_logs"] += 1
        if get_field(log, "outcome") == "positive":
            stats["positive_outcomes"] += 1
        if log_date == today:
            stats["today_logs"] += 1
        if log_date >= week_start:
            stats["week_logs"] += 1
        if get_field(log, "follow_up_required"):
            stats["follow_ups_created"] += 1

    for stats in rollup.values():
        stats["success_rate"] = percentage(stats["positive_outcomes"], stats["total_logs"])
    return rollup


def dashboard_alerts(stats: Dict[str, Any]) -> List[Dict[str, str]]:
    alerts = []
    if stats["overdue_follow_ups"] > 0:
        alerts.append({
            "type": "overdue",
            "level": "warning",
            "message": f"{stats['overdue_follow_ups']} follow-ups are past due and need attention",
        })
    if stats["today_logs"] == 0:
        alerts.append({
            "type": "no_activity_today",
            "level": "info",
            "message": "No activity logs recorded today. Consider checking with your team.",
        })
    if stats["conversion_rate"] >= HIGH_CONVERSION_THRESHOLD:
        alerts.append({
            "type": "high_conversion",
            "level": "success",
            "message": f"Your team is achieving a {stats['conversion_rate']}% positive outcome rate!",
        })
    if not alerts:
        alerts.append({
            "type": "on_track",
            "level": "success",
            "message": "No critical alerts at this time. All systems operational.",
        })
    return alerts


def compute_dashboard_stats(
    customers: Any,
    logs: Any,
    users: Any = None,
    now: Optional[datetime] = None,
    week_days: int = 7,
    month_days: int = 30,
) -> Dict[str, Any]:
    """Summary statistics for the admin and employee dashboards."""
    if customers is not None and not isinstance(customers, (list, tuple)):
        logger.warning(f"Expected a list of customers, got {type(customers).__name__}; treating as empty")
    customers = as_list(customers)
    logs = as_list(logs)
    users = as_list(users)
    now = local_now(now)

    today = day_string(now)
    week_start = day_string(now, week_days)
    month_start = day_string(now, month_days)

    rollup = employee_rollup(logs, now=now, week_days=week_days)
    outcome_stats = distribution(logs, "outcome")

    stats = {
        "total_employees": len(users) if users else len(rollup),
        "total_customers": len(customers),
        "active_customers": count_where(customers, lambda c: get_field(c, "status") == "active"),
        "total_logs": len(logs),
        "today_logs": count_where(logs, lambda log: text_field(log, "date") == today),
        "week_logs": count_where(logs, lambda log: text_field(log, "date") >= week_start),
        "month_logs": count_where(logs, lambda log: text_field(log, "date") >= month_start),
        "pending_follow_ups": count_where(logs, has_pending_follow_up),
        "overdue_follow_ups": count_where(logs, lambda log: is_overdue_follow_up(log, now)),
        "employee_stats": list(rollup.values()),
        "customer_status_stats": distribution(customers, "status"),
        "activity_type_stats": distribution(logs, "type"),
        "outcome_stats": outcome_stats,
        "conversion_rate": percentage(outcome_stats.get("positive", 0), len(logs)),
    }
    stats["alerts"] = dashboard_alerts(stats)
    return stats


def _activity_key(log: Any) -> str:
    employee_id = get_field(log, "employee_id")
    if employee_id is not None and employee_id != "":
        return str(employee_id)
    name = text_field(log, "employee_name")
    return re.sub(r"\s+", "", name.lower())


def employee_activity(logs: Any, now: Optional[datetime] = None) -> List[Dict[str, Any]]:
    """Activity overview per employee, busiest first.

    A follow-up counts as pending while its date is unset or not yet past.
    """
    now = local_now(now)
    overview: Dict[str, Dict[str, Any]] = {}
    for log in as_list(logs):
        key = _activity_key(log)
        created_at = get_field(log, "created_at")
        if key not in overview:
            overview[key] = {
                "employee_id": key,
                "employee_name": get_field(log, "employee_name"),
                "total_logs": 0,
                "last_activity": created_at,
                "pending_follow_ups": 0,
            }
        entry = overview[key]
        entry["total_logs"] += 1
        if sort_key_timestamp(created_at) > sort_key_timestamp(entry["last_activity"]):
            entry["last_activity"] = created_at
        if get_field(log, "follow_up_required"):
            follow_up_date = get_field(log, "follow_up_date")
            if not follow_up_date or not is_before(follow_up_date, now):
                entry["pending_follow_ups"] += 1

    return sorted(overview.values(), key=lambda entry: entry["total_logs"], reverse=True)


def recent_activity(logs: Any, limit: int = 10) -> List[Any]:
    """Newest logs by creation time."""
    ordered = sorted(as_list(logs), key=lambda log: sort_key_timestamp(get_field(log, "created_at")), reverse=True)
    return ordered[:limit]
