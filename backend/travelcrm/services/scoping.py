import logging
from typing import Any, List, NamedTuple, Optional

from travelcrm.schemas.user import Actor
from travelcrm.services.records import as_list, get_field, same_id

logger = logging.getLogger(__name__)


class ScopedCollections(NamedTuple):
    customers: List[Any]
    logs: List[Any]


def scope_customers(actor: Optional[Actor], customers: Any) -> List[Any]:
    """Customers the actor may act upon: all for admins, owned ones for employees."""
    if actor is None:
        return []
    customers = as_list(customers)
    if actor.is_admin:
        return customers
    return [c for c in customers if same_id(get_field(c, "assigned_employee_id"), actor.id)]


def scope_logs(actor: Optional[Actor], logs: Any) -> List[Any]:
    """Logs the actor may act upon: all for admins, authored ones for employees."""
    if actor is None:
        return []
    logs = as_list(logs)
    if actor.is_admin:
        return logs
    return [log for log in logs if same_id(get_field(log, "employee_id"), actor.id)]


def scope_collections(actor: Optional[Actor], customers: Any, logs: Any) -> ScopedCollections:
    if actor is None:
        logger.debug("No actor supplied, scoping to empty collections")
    return ScopedCollections(
        customers=scope_customers(actor, customers),
        logs=scope_logs(actor, logs),
    )


def can_modify(actor: Optional[Actor], owner_id: Any) -> bool:
    """Whether the actor may change a record owned by ``owner_id``."""
    if actor is None:
        return False
    return actor.is_admin or same_id(owner_id, actor.id)
