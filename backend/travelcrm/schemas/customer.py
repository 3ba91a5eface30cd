from pydantic import BaseModel, Field, field_validator
from typing import Optional, List, Literal
from datetime import datetime

from travelcrm.models.customer import UNASSIGNED
from travelcrm.schemas.daily_log import DailyLogResponse

CustomerStatusValue = Literal["active", "dead", "prospect", "completed"]


class CustomerBase(BaseModel):
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    country_code: Optional[str] = None
    company: Optional[str] = None
    status: CustomerStatusValue = "prospect"
    assigned_employee_id: str = UNASSIGNED
    assigned_employee_name: Optional[str] = None

    dob: Optional[str] = None
    gender: Optional[str] = None
    nationality: Optional[str] = None

    destination: Optional[str] = None
    purpose: Optional[str] = None
    travel_from: Optional[str] = None
    travel_to: Optional[str] = None
    budget: Optional[str] = None
    travel_type: Optional[str] = None
    hotel: Optional[str] = None
    service: Optional[str] = None

    insurance: bool = False
    pickup: bool = False
    tours: bool = False

    is_travelling: bool = False
    travelling_start_date: Optional[str] = None

    previous_visits: Optional[str] = None
    passport_number: Optional[str] = None
    passport_expiry: Optional[str] = None
    visa_status: Optional[str] = None
    emergency_contact: Optional[str] = None
    emergency_phone: Optional[str] = None
    special_requirements: Optional[str] = None

    group_travelers: List[str] = Field(default_factory=list)
    last_contact: Optional[str] = None

    @field_validator("status", mode="before")
    @classmethod
    def _lower_status(cls, value):
        # Older records were written with "Dead"
        return value.lower() if isinstance(value, str) else value

    @field_validator("assigned_employee_id", mode="before")
    @classmethod
    def _owner_or_unassigned(cls, value):
        if value is None or value == "":
            return UNASSIGNED
        return str(value)

    @field_validator("group_travelers", mode="before")
    @classmethod
    def _travelers_list(cls, value):
        return [] if value is None else value


class CustomerCreate(CustomerBase):
    """Create payload; also the full-replacement body for PUT."""
    assigned_employee_id: Optional[str] = None


class CustomerResponse(CustomerBase):
    id: int
    created_by: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class CustomerDetail(CustomerResponse):
    logs: List[DailyLogResponse] = Field(default_factory=list)
