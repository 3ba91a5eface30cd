from travelcrm.schemas.user import UserCreate, UserUpdate, UserResponse, LoginRequest, LoginResponse, Actor, AuthSession
from travelcrm.schemas.daily_log import DailyLogCreate, DailyLogResponse
from travelcrm.schemas.customer import CustomerCreate, CustomerResponse, CustomerDetail
from travelcrm.schemas.filters import FilterOptions

__all__ = [
    "UserCreate", "UserUpdate", "UserResponse", "LoginRequest", "LoginResponse", "Actor", "AuthSession",
    "DailyLogCreate", "DailyLogResponse",
    "CustomerCreate", "CustomerResponse", "CustomerDetail",
    "FilterOptions",
]
