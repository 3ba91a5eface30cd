from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from travelcrm.database import get_db
from travelcrm.models.daily_log import DailyLog
from travelcrm.models.user import User
from travelcrm.schemas.daily_log import DailyLogCreate, DailyLogResponse
from travelcrm.schemas.user import Actor
from travelcrm.services.auth import get_current_user_required
from travelcrm.services.scoping import can_modify

router = APIRouter(prefix="/logs", tags=["logs"])


def _get_own_log(db: Session, log_id: int, user: User) -> DailyLog:
    log = db.query(DailyLog).filter(DailyLog.id == log_id).first()
    if not log:
        raise HTTPException(status_code=404, detail="Log not found")
    if not can_modify(Actor.from_user(user), log.employee_id):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Log belongs to another employee",
        )
    return log


@router.get("/{log_id}", response_model=DailyLogResponse)
def get_log(
    log_id: int,
    user: User = Depends(get_current_user_required),
    db: Session = Depends(get_db),
):
    """Get a specific activity log."""
    return DailyLogResponse.model_validate(_get_own_log(db, log_id, user))


@router.put("/{log_id}", response_model=DailyLogResponse)
def update_log(
    log_id: int,
    log_data: DailyLogCreate,
    user: User = Depends(get_current_user_required),
    db: Session = Depends(get_db),
):
    """Replace an activity log in full. Authorship and customer stay as recorded."""
    log = _get_own_log(db, log_id, user)

    for field, value in log_data.model_dump().items():
        setattr(log, field, value)

    db.commit()
    db.refresh(log)
    return DailyLogResponse.model_validate(log)


@router.delete("/{log_id}", status_code=204)
def delete_log(
    log_id: int,
    user: User = Depends(get_current_user_required),
    db: Session = Depends(get_db),
):
    """Delete an activity log."""
    log = _get_own_log(db, log_id, user)
    db.delete(log)
    db.commit()
