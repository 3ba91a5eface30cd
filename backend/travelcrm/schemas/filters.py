from pydantic import BaseModel, field_validator
from typing import Optional, Literal
from datetime import date, timedelta

from travelcrm.schemas.customer import CustomerStatusValue
from travelcrm.schemas.daily_log import ActivityTypeValue, OutcomeValue, check_date_string

FollowUpStatus = Literal["required", "upcoming", "overdue"]


class FilterOptions(BaseModel):
    """Optional list/dashboard criteria.

    ``None`` means "no filter" for every field. The UI sentinel ``"all"`` and
    blank values are folded into ``None`` here so the filter functions never
    see them. The search term is kept as typed; only an empty one is dropped.
    """
    search_term: Optional[str] = None
    customer_status: Optional[CustomerStatusValue] = None
    date_from: Optional[str] = None
    date_to: Optional[str] = None
    activity_type: Optional[ActivityTypeValue] = None
    outcome: Optional[OutcomeValue] = None
    follow_up_required: Optional[bool] = None
    employee_id: Optional[str] = None
    follow_up_status: Optional[FollowUpStatus] = None

    @field_validator("search_term", mode="before")
    @classmethod
    def _empty_search_means_none(cls, value):
        # the term is matched exactly as typed
        return None if value == "" else value

    @field_validator(
        "customer_status",
        "date_from",
        "date_to",
        "activity_type",
        "outcome",
        "employee_id",
        "follow_up_status",
        mode="before",
    )
    @classmethod
    def _all_means_none(cls, value):
        if isinstance(value, str):
            value = value.strip()
            if value == "" or value.lower() == "all":
                return None
        return value

    @field_validator("date_from", "date_to")
    @classmethod
    def _iso_date(cls, value: Optional[str]) -> Optional[str]:
        if value is not None:
            check_date_string(value)
        return value

    def is_empty(self) -> bool:
        return not any(value is not None for value in self.model_dump().values())

    # Presets offered by the filter bar

    @classmethod
    def today(cls, today: Optional[date] = None) -> "FilterOptions":
        day = (today or date.today()).isoformat()
        return cls(date_from=day, date_to=day)

    @classmethod
    def this_week(cls, today: Optional[date] = None, days: int = 7) -> "FilterOptions":
        today = today or date.today()
        return cls(date_from=(today - timedelta(days=days)).isoformat(), date_to=today.isoformat())

    @classmethod
    def positive_outcomes(cls) -> "FilterOptions":
        return cls(outcome="positive")

    @classmethod
    def pending_follow_ups(cls) -> "FilterOptions":
        return cls(follow_up_required=True)

    @classmethod
    def active_customers(cls) -> "FilterOptions":
        return cls(customer_status="active")
