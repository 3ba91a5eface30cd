import re
from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Optional, Literal
from datetime import date, datetime

ActivityTypeValue = Literal["call", "email", "meeting", "note"]
OutcomeValue = Literal["positive", "neutral", "negative"]

_DATE_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


def check_date_string(value: str) -> str:
    """Accept only calendar dates written as YYYY-MM-DD."""
    if not _DATE_PATTERN.fullmatch(value):
        raise ValueError("date must be in YYYY-MM-DD format")
    date.fromisoformat(value)
    return value


class DailyLogBase(BaseModel):
    type: ActivityTypeValue = "note"
    outcome: OutcomeValue = "neutral"
    subject: Optional[str] = None
    description: Optional[str] = None
    duration: Optional[int] = Field(None, ge=0)
    follow_up_required: bool = False
    follow_up_date: Optional[str] = None
    date: str = Field(default_factory=lambda: date.today().isoformat())

    @field_validator("date")
    @classmethod
    def _iso_date(cls, value: str) -> str:
        return check_date_string(value)


class DailyLogCreate(DailyLogBase):
    """Create payload; also the full-replacement body for PUT."""

    @model_validator(mode="after")
    def _drop_follow_up_date(self):
        if not self.follow_up_required:
            self.follow_up_date = None
        return self


class DailyLogResponse(DailyLogBase):
    id: int
    customer_id: int
    customer_name: Optional[str] = None
    employee_id: Optional[str] = None
    employee_name: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
