"""Helpers shared by the in-memory list and dashboard functions.

Records may be ORM rows, pydantic models or plain dicts decoded from JSON;
everything here reads them the same way and never raises on bad input.
"""

import math
from datetime import date, datetime, timedelta, timezone
from typing import Any, Iterable, List, Optional


def get_field(record: Any, name: str, default: Any = None) -> Any:
    if isinstance(record, dict):
        return record.get(name, default)
    return getattr(record, name, default)


def text_field(record: Any, name: str) -> str:
    value = get_field(record, name)
    return value if isinstance(value, str) else ""


def as_list(items: Any) -> List[Any]:
    """Return a list for list-like input, an empty list for anything else."""
    if isinstance(items, (list, tuple)):
        return list(items)
    return []


def same_id(left: Any, right: Any) -> bool:
    if left is None or right is None:
        return False
    return str(left) == str(right)


def percentage(part: int, whole: int) -> int:
    """Whole-number percentage rounded half up, 0 for an empty denominator."""
    if not whole:
        return 0
    return int(math.floor(100 * part / whole + 0.5))


def local_now(now: Optional[datetime] = None) -> datetime:
    return now if now is not None else datetime.now()


def day_string(now: datetime, days_ago: int = 0) -> str:
    return (now - timedelta(days=days_ago)).date().isoformat()


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO date or datetime; ``None`` when absent or malformed."""
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if not isinstance(value, str) or not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def is_before(value: Any, now: datetime) -> bool:
    """True when ``value`` parses to a moment strictly before ``now``."""
    moment = parse_timestamp(value)
    if moment is None:
        return False
    if moment.tzinfo is not None and now.tzinfo is None:
        now = now.astimezone()
    elif moment.tzinfo is None and now.tzinfo is not None:
        moment = moment.replace(tzinfo=now.tzinfo)
    return moment < now


def sort_key_timestamp(value: Any) -> float:
    moment = parse_timestamp(value)
    if moment is None:
        return float("-inf")
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.timestamp()


def count_where(items: Iterable[Any], predicate) -> int:
    return sum(1 for item in items if predicate(item))
