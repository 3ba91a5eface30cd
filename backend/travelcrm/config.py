from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import List


class Settings(BaseSettings):
    # Database Configuration
    # Use SQLite by default for easy local development
    # Set db_type to "mysql" and configure mysql settings for production
    db_type: str = "sqlite"  # "sqlite" or "mysql"

    # SQLite settings
    sqlite_path: str = "travel_crm.db"

    # MySQL settings (used when db_type="mysql")
    db_host: str = "localhost"
    db_port: int = 3306
    db_name: str = "travel_crm"
    db_user: str = "root"
    db_password: str = ""

    # Application Settings
    secret_key: str = "change-me-in-production"
    access_token_expire_minutes: int = 60 * 24  # 24 hours
    api_port: int = 5000
    cors_origins: List[str] = ["http://localhost:3000", "http://localhost:3001"]

    # API client (used by scripts and integrations talking to a running server)
    api_base_url: str = "http://localhost:5000/api"
    request_timeout_seconds: float = 30.0

    # Dashboard windows
    week_window_days: int = 7
    month_window_days: int = 30
    search_result_limit: int = 20
    recent_activity_limit: int = 10

    @property
    def database_url(self) -> str:
        if self.db_type == "sqlite":
            return f"sqlite:///./{self.sqlite_path}"
        return f"mysql+pymysql://{self.db_user}:{self.db_password}@{self.db_host}:{self.db_port}/{self.db_name}"

    class Config:
        env_file = ".env"


@lru_cache()
def get_settings() -> Settings:
    return Settings()
