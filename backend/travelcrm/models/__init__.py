from travelcrm.models.user import User
from travelcrm.models.customer import Customer
from travelcrm.models.daily_log import DailyLog

__all__ = ["User", "Customer", "DailyLog"]
