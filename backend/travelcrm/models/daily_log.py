from sqlalchemy import Column, Integer, String, Text, DateTime, Boolean
from sqlalchemy.sql import func
import enum
from travelcrm.database import Base


class ActivityType(str, enum.Enum):
    CALL = "call"
    EMAIL = "email"
    MEETING = "meeting"
    NOTE = "note"


class Outcome(str, enum.Enum):
    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"


class DailyLog(Base):
    __tablename__ = "daily_logs"

    id = Column(Integer, primary_key=True, index=True)
    # Weak references: deleting a customer or user leaves the log in place
    customer_id = Column(Integer, nullable=False, index=True)
    customer_name = Column(String(200), nullable=True)
    employee_id = Column(String(50), nullable=True, index=True)
    employee_name = Column(String(200), nullable=True)

    type = Column(String(20), default=ActivityType.NOTE.value)
    outcome = Column(String(20), default=Outcome.NEUTRAL.value)
    subject = Column(String(300), nullable=True)
    description = Column(Text, nullable=True)
    duration = Column(Integer, nullable=True)  # minutes

    follow_up_required = Column(Boolean, default=False)
    follow_up_date = Column(String(32), nullable=True)

    date = Column(String(10), nullable=False, index=True)  # YYYY-MM-DD business date
    created_at = Column(DateTime(timezone=True), server_default=func.now())
