from typing import Any, Dict
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from travelcrm.config import get_settings
from travelcrm.database import get_db
from travelcrm.models.user import User, UserRole
from travelcrm.routers.dependencies import get_filter_options, load_scoped_collections
from travelcrm.schemas.customer import CustomerResponse
from travelcrm.schemas.daily_log import DailyLogResponse
from travelcrm.schemas.filters import FilterOptions
from travelcrm.schemas.user import Actor
from travelcrm.services.auth import get_current_actor
from travelcrm.services.dashboard import compute_dashboard_stats, employee_activity, recent_activity
from travelcrm.services.filters import filter_customers, filter_logs
from travelcrm.services.search import global_search
from travelcrm.services.travel import travel_dashboard, travelling_customers

settings = get_settings()

router = APIRouter(tags=["dashboard"])


@router.get("/dashboard/stats")
def get_dashboard_stats(
    filters: FilterOptions = Depends(get_filter_options),
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    """Dashboard statistics over the caller's customers and logs, after filters."""
    scoped = load_scoped_collections(db, actor)

    users = None
    if actor.is_admin:
        users = db.query(User).filter(User.role == UserRole.EMPLOYEE.value).all()

    return compute_dashboard_stats(
        filter_customers(scoped.customers, filters),
        filter_logs(scoped.logs, filters),
        users=users,
        week_days=settings.week_window_days,
        month_days=settings.month_window_days,
    )


@router.get("/dashboard/employee-activity")
def get_employee_activity(
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    """Per-employee activity overview and the latest logs."""
    scoped = load_scoped_collections(db, actor)
    return {
        "employees": employee_activity(scoped.logs),
        "recent_activity": [
            DailyLogResponse.model_validate(log)
            for log in recent_activity(scoped.logs, limit=settings.recent_activity_limit)
        ],
    }


@router.get("/dashboard/travel")
def get_travel_dashboard(
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    """Travel bookings overview for the caller's customers."""
    scoped = load_scoped_collections(db, actor)
    stats = travel_dashboard(scoped.customers, scoped.logs)
    stats["upcoming_trips"] = [CustomerResponse.model_validate(c) for c in stats["upcoming_trips"]]
    stats["recent_travel_activity"] = [
        DailyLogResponse.model_validate(log) for log in stats["recent_travel_activity"]
    ]
    return stats


@router.get("/dashboard/travelling")
def get_travelling_customers(
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    """Customers currently travelling, with days away."""
    scoped = load_scoped_collections(db, actor)
    travelling = travelling_customers(scoped.customers)
    return {
        "total": len(travelling),
        "customers": [
            {
                "customer": CustomerResponse.model_validate(entry["customer"]),
                "days_in_travel": entry["days_in_travel"],
            }
            for entry in travelling
        ],
    }


@router.get("/search")
def search(
    q: str = Query("", description="Search term"),
    limit: int = Query(settings.search_result_limit, ge=1, le=100),
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    """Search the caller's customers and logs together."""
    scoped = load_scoped_collections(db, actor)
    results = global_search(scoped.customers, scoped.logs, q, limit=limit)

    def _serialize(result: Dict[str, Any]) -> Dict[str, Any]:
        schema = CustomerResponse if result["type"] == "customer" else DailyLogResponse
        return {
            "type": result["type"],
            "item": schema.model_validate(result["item"]),
            "matched_fields": result["matched_fields"],
        }

    return {"query": q, "results": [_serialize(r) for r in results]}
