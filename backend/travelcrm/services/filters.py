"""Filter engine for customer and activity log lists.

Every criterion in :class:`FilterOptions` is optional and independent. Set
criteria are ANDed, unset ones pass everything through, and the output keeps
the input order.
"""

from datetime import datetime
from typing import Any, List, Literal, Optional

from travelcrm.schemas.filters import FilterOptions
from travelcrm.services.records import as_list, get_field, is_before, local_now, same_id, text_field

RecordKind = Literal["customers", "logs"]

CUSTOMER_SEARCH_FIELDS = ("name", "email", "company", "phone")
LOG_SEARCH_FIELDS = ("customer_name", "subject", "description")


def matches_search(record: Any, term: str, fields) -> bool:
    term = term.lower()
    return any(term in text_field(record, field).lower() for field in fields)


def _customer_matches(customer: Any, options: FilterOptions) -> bool:
    if options.search_term and not matches_search(customer, options.search_term, CUSTOMER_SEARCH_FIELDS):
        return False
    if options.customer_status is not None and get_field(customer, "status") != options.customer_status:
        return False
    return True


def _follow_up_status_matches(log: Any, status: str, now: datetime) -> bool:
    if get_field(log, "follow_up_required") is not True:
        return False
    if status == "required":
        return True
    follow_up_date = get_field(log, "follow_up_date")
    if not follow_up_date:
        return False
    overdue = is_before(follow_up_date, now)
    return overdue if status == "overdue" else not overdue


def _log_matches(log: Any, options: FilterOptions, now: datetime) -> bool:
    if options.search_term and not matches_search(log, options.search_term, LOG_SEARCH_FIELDS):
        return False

    # YYYY-MM-DD strings compare correctly as text
    log_date = text_field(log, "date")
    if options.date_from is not None and log_date < options.date_from:
        return False
    if options.date_to is not None and log_date > options.date_to:
        return False

    if options.activity_type is not None and get_field(log, "type") != options.activity_type:
        return False
    if options.outcome is not None and get_field(log, "outcome") != options.outcome:
        return False
    if options.follow_up_required is not None and get_field(log, "follow_up_required") is not options.follow_up_required:
        return False
    if options.employee_id is not None and not same_id(get_field(log, "employee_id"), options.employee_id):
        return False
    if options.follow_up_status is not None and not _follow_up_status_matches(log, options.follow_up_status, now):
        return False
    return True


def apply_filters(
    items: Any,
    options: Optional[FilterOptions],
    kind: RecordKind,
    now: Optional[datetime] = None,
) -> List[Any]:
    items = as_list(items)
    if options is None or options.is_empty():
        return items

    if kind == "customers":
        return [item for item in items if _customer_matches(item, options)]

    now = local_now(now)
    return [item for item in items if _log_matches(item, options, now)]


def filter_customers(customers: Any, options: Optional[FilterOptions]) -> List[Any]:
    return apply_filters(customers, options, "customers")


def filter_logs(logs: Any, options: Optional[FilterOptions], now: Optional[datetime] = None) -> List[Any]:
    return apply_filters(logs, options, "logs", now=now)
