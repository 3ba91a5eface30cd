from typing import Any, Dict, List

from travelcrm.services.records import as_list, text_field

CUSTOMER_FIELDS = (
    ("name", "name"),
    ("email", "email"),
    ("company", "company"),
    ("phone", "phone"),
)

LOG_FIELDS = (
    ("customer_name", "customer"),
    ("subject", "subject"),
    ("description", "description"),
    ("type", "type"),
)


def _matched_fields(record: Any, term: str, fields) -> List[str]:
    return [label for field, label in fields if term in text_field(record, field).lower()]


def global_search(customers: Any, logs: Any, term: Any, limit: int = 20) -> List[Dict[str, Any]]:
    """Search customers and logs at once, best matches (most fields hit) first."""
    if not isinstance(term, str) or not term.strip():
        return []
    term = term.strip().lower()

    results = []
    for customer in as_list(customers):
        matched = _matched_fields(customer, term, CUSTOMER_FIELDS)
        if matched:
            results.append({"type": "customer", "item": customer, "matched_fields": matched})

    for log in as_list(logs):
        matched = _matched_fields(log, term, LOG_FIELDS)
        if matched:
            results.append({"type": "log", "item": log, "matched_fields": matched})

    results.sort(key=lambda result: len(result["matched_fields"]), reverse=True)
    return results[:limit]
