import math
import re
from datetime import datetime
from typing import Any, Dict, List, Optional

from travelcrm.services.records import (
    as_list,
    count_where,
    day_string,
    get_field,
    local_now,
    parse_timestamp,
    sort_key_timestamp,
    text_field,
)

VISA_SERVICES = ("visa", "fullPackage")
TRAVEL_KEYWORDS = ("travel", "visa", "booking")
TRAVEL_LOG_TYPES = ("booking", "visa")

_LEADING_NUMBER = re.compile(r"^\s*[-+]?(\d+\.?\d*|\.\d+)")


def parse_budget(value: Any) -> float:
    """Leading numeric part of a free-text budget ("1500 USD" -> 1500.0), else 0."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    if not isinstance(value, str):
        return 0.0
    match = _LEADING_NUMBER.match(value)
    if not match:
        return 0.0
    return float(match.group(0))


def is_travel_customer(customer: Any) -> bool:
    return any(get_field(customer, field) for field in ("destination", "travel_from", "travel_to", "service"))


def top_destinations(customers: Any, limit: int = 5) -> List[Dict[str, Any]]:
    counts: Dict[str, int] = {}
    for customer in as_list(customers):
        destination = text_field(customer, "destination")
        if destination:
            counts[destination] = counts.get(destination, 0) + 1
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return [{"destination": name, "count": count} for name, count in ranked[:limit]]


def upcoming_trips(customers: Any, now: Optional[datetime] = None, limit: int = 5) -> List[Any]:
    today = day_string(local_now(now))
    upcoming = [c for c in as_list(customers) if text_field(c, "travel_from") > today]
    upcoming.sort(key=lambda c: text_field(c, "travel_from"))
    return upcoming[:limit]


def is_travel_activity(log: Any) -> bool:
    if get_field(log, "type") in TRAVEL_LOG_TYPES:
        return True
    subject = text_field(log, "subject").lower()
    return any(keyword in subject for keyword in TRAVEL_KEYWORDS)


def recent_travel_activity(logs: Any, limit: int = 5) -> List[Any]:
    matching = [log for log in as_list(logs) if is_travel_activity(log)]
    matching.sort(key=lambda log: sort_key_timestamp(get_field(log, "created_at")), reverse=True)
    return matching[:limit]


def travel_dashboard(customers: Any, logs: Any, now: Optional[datetime] = None) -> Dict[str, Any]:
    """Booking overview for an employee's (already scoped) customers and logs."""
    customers = as_list(customers)
    logs = as_list(logs)
    now = local_now(now)
    today = day_string(now)

    def is_active(customer: Any) -> bool:
        return get_field(customer, "status") == "active"

    return {
        "total_travel_customers": count_where(customers, is_travel_customer),
        "active_bookings": count_where(customers, is_active),
        "completed_trips": count_where(
            customers,
            lambda c: bool(text_field(c, "travel_to")) and text_field(c, "travel_to") < today and is_active(c),
        ),
        "pending_visas": count_where(customers, lambda c: get_field(c, "service") in VISA_SERVICES),
        "upcoming_departures": count_where(customers, lambda c: text_field(c, "travel_from") > today),
        "total_revenue": sum(parse_budget(get_field(c, "budget")) for c in customers),
        "top_destinations": top_destinations(customers),
        "upcoming_trips": upcoming_trips(customers, now=now),
        "recent_travel_activity": recent_travel_activity(logs),
    }


def days_in_travel(start_date: Any, now: Optional[datetime] = None) -> int:
    start = parse_timestamp(start_date)
    if start is None:
        return 0
    now = local_now(now)
    if start.tzinfo is not None and now.tzinfo is None:
        now = now.astimezone()
    elif start.tzinfo is None and now.tzinfo is not None:
        start = start.replace(tzinfo=now.tzinfo)
    seconds = abs((now - start).total_seconds())
    return math.ceil(seconds / 86400)


def travelling_customers(customers: Any, now: Optional[datetime] = None) -> List[Dict[str, Any]]:
    """Customers currently on a trip, with how many days they have been away."""
    now = local_now(now)
    return [
        {"customer": customer, "days_in_travel": days_in_travel(get_field(customer, "travelling_start_date"), now)}
        for customer in as_list(customers)
        if get_field(customer, "is_travelling")
    ]
