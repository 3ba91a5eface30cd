import logging
from datetime import date, datetime, timezone
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import func, or_, and_
from sqlalchemy.orm import Session

from travelcrm.database import get_db
from travelcrm.models.customer import Customer, UNASSIGNED
from travelcrm.models.daily_log import DailyLog
from travelcrm.models.user import User
from travelcrm.routers.dependencies import get_filter_options, load_scoped_collections
from travelcrm.schemas.customer import CustomerCreate, CustomerResponse, CustomerDetail
from travelcrm.schemas.daily_log import DailyLogCreate, DailyLogResponse
from travelcrm.schemas.filters import FilterOptions
from travelcrm.schemas.user import Actor
from travelcrm.services.auth import get_current_user_required
from travelcrm.services.filters import filter_customers, filter_logs
from travelcrm.services.scoping import can_modify

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/customers", tags=["customers"])

# Fields the client may not overwrite on a full replacement
_PROTECTED_FIELDS = {"id", "created_by", "created_at", "updated_at"}


def _get_customer(db: Session, customer_id: int) -> Customer:
    customer = db.query(Customer).filter(Customer.id == customer_id).first()
    if not customer:
        raise HTTPException(status_code=404, detail="Customer not found")
    return customer


def _require_owner(actor: Actor, customer: Customer):
    if not can_modify(actor, customer.assigned_employee_id):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Customer is assigned to another employee",
        )


def _duplicate_message(db: Session, data: CustomerCreate, exclude_id: Optional[int] = None) -> Optional[str]:
    """User-visible message when the email or phone already belongs to another customer."""
    conditions = []
    if data.email:
        conditions.append(func.lower(Customer.email) == data.email.lower())
    if data.phone:
        conditions.append(and_(Customer.phone == data.phone, Customer.country_code == data.country_code))
    if not conditions:
        return None

    query = db.query(Customer).filter(or_(*conditions))
    if exclude_id is not None:
        query = query.filter(Customer.id != exclude_id)
    duplicate = query.first()
    if not duplicate:
        return None
    if data.email and (duplicate.email or "").lower() == data.email.lower():
        return "This email is already registered"
    return "This phone number is already registered"


def _owner_name(db: Session, owner_id: str) -> Optional[str]:
    if owner_id == UNASSIGNED:
        return None
    try:
        user_id = int(owner_id)
    except ValueError:
        return None
    owner = db.query(User).filter(User.id == user_id).first()
    return owner.name if owner else None


@router.get("/logs/all", response_model=List[DailyLogResponse])
def list_all_logs(
    filters: FilterOptions = Depends(get_filter_options),
    user: User = Depends(get_current_user_required),
    db: Session = Depends(get_db),
):
    """Activity logs visible to the caller, newest first."""
    scoped = load_scoped_collections(db, Actor.from_user(user))
    logs = filter_logs(scoped.logs, filters)
    return [DailyLogResponse.model_validate(log) for log in logs]


@router.get("", response_model=List[CustomerResponse])
def list_customers(
    filters: FilterOptions = Depends(get_filter_options),
    user: User = Depends(get_current_user_required),
    db: Session = Depends(get_db),
):
    """Customers visible to the caller: all for admins, assigned ones for employees."""
    scoped = load_scoped_collections(db, Actor.from_user(user))
    customers = filter_customers(scoped.customers, filters)
    logger.info(f"GET /customers - {user.email}: {len(customers)} of {len(scoped.customers)} customers")
    return [CustomerResponse.model_validate(c) for c in customers]


@router.get("/{customer_id}", response_model=CustomerDetail)
def get_customer(
    customer_id: int,
    user: User = Depends(get_current_user_required),
    db: Session = Depends(get_db),
):
    """Get a customer with its activity logs."""
    customer = _get_customer(db, customer_id)
    if not can_modify(Actor.from_user(user), customer.assigned_employee_id):
        raise HTTPException(status_code=404, detail="Customer not found")

    logs = db.query(DailyLog).filter(
        DailyLog.customer_id == customer.id
    ).order_by(DailyLog.created_at.desc(), DailyLog.id.desc()).all()

    detail = CustomerDetail.model_validate(customer)
    detail.logs = [DailyLogResponse.model_validate(log) for log in logs]
    return detail


@router.post("", response_model=CustomerResponse, status_code=201)
def create_customer(
    customer_data: CustomerCreate,
    user: User = Depends(get_current_user_required),
    db: Session = Depends(get_db),
):
    """Create a new customer.

    Employees own the customers they create unless they assign them
    elsewhere; admins create customers unassigned by default.
    """
    message = _duplicate_message(db, customer_data)
    if message:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=message)

    data = customer_data.model_dump()
    if data["assigned_employee_id"] is None:
        data["assigned_employee_id"] = UNASSIGNED if user.is_admin else str(user.id)
    if not data.get("assigned_employee_name"):
        data["assigned_employee_name"] = _owner_name(db, data["assigned_employee_id"])
    if not data.get("last_contact"):
        data["last_contact"] = datetime.now(timezone.utc).isoformat()

    customer = Customer(**data, created_by=user.id)
    db.add(customer)
    db.commit()
    db.refresh(customer)
    logger.info(f"Customer {customer.id} created by {user.email}, owner {customer.assigned_employee_id}")
    return CustomerResponse.model_validate(customer)


@router.put("/{customer_id}", response_model=CustomerResponse)
def update_customer(
    customer_id: int,
    customer_data: CustomerCreate,
    user: User = Depends(get_current_user_required),
    db: Session = Depends(get_db),
):
    """Replace a customer record in full."""
    customer = _get_customer(db, customer_id)
    _require_owner(Actor.from_user(user), customer)

    message = _duplicate_message(db, customer_data, exclude_id=customer.id)
    if message:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=message)

    data = customer_data.model_dump()
    if data["assigned_employee_id"] is None:
        data["assigned_employee_id"] = customer.assigned_employee_id
    if data["assigned_employee_id"] != customer.assigned_employee_id and not data.get("assigned_employee_name"):
        data["assigned_employee_name"] = _owner_name(db, data["assigned_employee_id"])

    for field, value in data.items():
        if field not in _PROTECTED_FIELDS:
            setattr(customer, field, value)

    db.commit()
    db.refresh(customer)
    return CustomerResponse.model_validate(customer)


@router.delete("/{customer_id}", status_code=204)
def delete_customer(
    customer_id: int,
    user: User = Depends(get_current_user_required),
    db: Session = Depends(get_db),
):
    """Delete a customer. Its activity logs are kept."""
    customer = _get_customer(db, customer_id)
    _require_owner(Actor.from_user(user), customer)

    db.delete(customer)
    db.commit()
    logger.info(f"Customer {customer_id} deleted by {user.email}")


@router.post("/{customer_id}/logs", response_model=DailyLogResponse, status_code=201)
def add_log_to_customer(
    customer_id: int,
    log_data: DailyLogCreate,
    user: User = Depends(get_current_user_required),
    db: Session = Depends(get_db),
):
    """Record an activity against a customer, authored by the caller."""
    customer = _get_customer(db, customer_id)
    _require_owner(Actor.from_user(user), customer)

    log = DailyLog(
        **log_data.model_dump(),
        customer_id=customer.id,
        customer_name=customer.name,
        employee_id=str(user.id),
        employee_name=user.name,
    )
    db.add(log)
    db.commit()
    db.refresh(log)
    return DailyLogResponse.model_validate(log)


@router.put("/{customer_id}/travelling")
def move_customer_to_travelling(
    customer_id: int,
    user: User = Depends(get_current_user_required),
    db: Session = Depends(get_db),
):
    """Mark a customer as currently travelling."""
    customer = _get_customer(db, customer_id)
    _require_owner(Actor.from_user(user), customer)

    customer.is_travelling = True
    if not customer.travelling_start_date:
        customer.travelling_start_date = date.today().isoformat()
    db.commit()
    db.refresh(customer)
    return {
        "message": "Customer moved to travelling section",
        "customer": CustomerResponse.model_validate(customer),
    }
