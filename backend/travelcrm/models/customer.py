from sqlalchemy import Column, Integer, String, Text, DateTime, Boolean, JSON
from sqlalchemy.sql import func
import enum
from travelcrm.database import Base

UNASSIGNED = "unassigned"


class CustomerStatus(str, enum.Enum):
    ACTIVE = "active"
    DEAD = "dead"
    PROSPECT = "prospect"
    COMPLETED = "completed"


class Customer(Base):
    __tablename__ = "customers"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    email = Column(String(255), nullable=True, index=True)
    phone = Column(String(50), nullable=True, index=True)
    country_code = Column(String(10), nullable=True)
    company = Column(String(200), nullable=True)
    status = Column(String(20), default=CustomerStatus.PROSPECT.value, index=True)

    # Ownership: a user id as string, or the "unassigned" sentinel
    assigned_employee_id = Column(String(50), nullable=False, default=UNASSIGNED, index=True)
    assigned_employee_name = Column(String(200), nullable=True)

    # Personal information
    dob = Column(String(10), nullable=True)
    gender = Column(String(20), nullable=True)
    nationality = Column(String(100), nullable=True)

    # Travel details (dates stored as YYYY-MM-DD strings)
    destination = Column(String(200), nullable=True)
    purpose = Column(String(200), nullable=True)
    travel_from = Column(String(10), nullable=True)
    travel_to = Column(String(10), nullable=True)
    budget = Column(String(50), nullable=True)
    travel_type = Column(String(50), nullable=True)
    hotel = Column(String(200), nullable=True)
    service = Column(String(50), nullable=True)

    # Additional services
    insurance = Column(Boolean, default=False)
    pickup = Column(Boolean, default=False)
    tours = Column(Boolean, default=False)

    is_travelling = Column(Boolean, default=False)
    travelling_start_date = Column(String(10), nullable=True)

    # Documents and other information
    previous_visits = Column(Text, nullable=True)
    passport_number = Column(String(50), nullable=True)
    passport_expiry = Column(String(10), nullable=True)
    visa_status = Column(String(50), nullable=True)
    emergency_contact = Column(String(200), nullable=True)
    emergency_phone = Column(String(50), nullable=True)
    special_requirements = Column(Text, nullable=True)

    group_travelers = Column(JSON, default=list)

    created_by = Column(Integer, nullable=True)
    last_contact = Column(String(32), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
