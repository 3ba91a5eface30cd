from typing import Optional
from fastapi import HTTPException, Query
from pydantic import ValidationError
from sqlalchemy.orm import Session

from travelcrm.models.customer import Customer
from travelcrm.models.daily_log import DailyLog
from travelcrm.schemas.filters import FilterOptions
from travelcrm.schemas.user import Actor
from travelcrm.services.scoping import ScopedCollections, scope_collections


def get_filter_options(
    search_term: Optional[str] = Query(None, description="Case-insensitive text search"),
    customer_status: Optional[str] = Query(None, description="active, dead, prospect, completed or all"),
    date_from: Optional[str] = Query(None, description="Earliest log date, YYYY-MM-DD"),
    date_to: Optional[str] = Query(None, description="Latest log date, YYYY-MM-DD"),
    activity_type: Optional[str] = Query(None, description="call, email, meeting, note or all"),
    outcome: Optional[str] = Query(None, description="positive, neutral, negative or all"),
    follow_up_required: Optional[bool] = Query(None),
    employee_id: Optional[str] = Query(None, description="Only logs written by this employee"),
    follow_up_status: Optional[str] = Query(None, description="required, upcoming, overdue or all"),
) -> FilterOptions:
    """Validate list filter query parameters once, at the edge."""
    try:
        return FilterOptions(
            search_term=search_term,
            customer_status=customer_status,
            date_from=date_from,
            date_to=date_to,
            activity_type=activity_type,
            outcome=outcome,
            follow_up_required=follow_up_required,
            employee_id=employee_id,
            follow_up_status=follow_up_status,
        )
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.errors(include_url=False, include_context=False))


def load_scoped_collections(db: Session, actor: Actor) -> ScopedCollections:
    """All customers and logs (newest logs first) narrowed to what the actor may see."""
    customers = db.query(Customer).order_by(Customer.id).all()
    logs = db.query(DailyLog).order_by(DailyLog.created_at.desc(), DailyLog.id.desc()).all()
    return scope_collections(actor, customers, logs)
