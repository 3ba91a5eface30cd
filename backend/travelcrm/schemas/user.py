from pydantic import BaseModel, field_validator
from typing import Optional, Literal
from datetime import datetime, timezone


class UserBase(BaseModel):
    email: str
    name: str
    department: Optional[str] = None


class UserCreate(UserBase):
    password: str
    role: Optional[Literal["employee", "admin"]] = "employee"
    is_active: bool = True


class UserUpdate(BaseModel):
    email: Optional[str] = None
    name: Optional[str] = None
    password: Optional[str] = None
    role: Optional[Literal["employee", "admin"]] = None
    department: Optional[str] = None
    is_active: Optional[bool] = None


class UserResponse(UserBase):
    id: int
    role: str
    is_active: bool
    created_at: Optional[datetime] = None
    last_login: Optional[datetime] = None

    class Config:
        from_attributes = True


class LoginRequest(BaseModel):
    email: str
    password: str


class LoginResponse(BaseModel):
    id: int
    name: str
    email: str
    role: str
    department: Optional[str] = None
    token: str
    token_type: str = "bearer"
    expires_at: datetime


class Actor(BaseModel):
    """The authenticated principal that list and dashboard views are scoped to."""
    id: str
    role: Literal["admin", "employee"]
    name: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value):
        return str(value) if value is not None else value

    @classmethod
    def from_user(cls, user) -> "Actor":
        role = user.role if user.role in ("admin", "employee") else "employee"
        return cls(id=user.id, role=role, name=user.name)

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


class AuthSession(BaseModel):
    """Locally held login session: the user, the bearer token and its expiry."""
    user: UserResponse
    token: str
    expires_at: datetime

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        now = now or datetime.now(timezone.utc)
        expires_at = self.expires_at
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        return expires_at <= now

    def actor(self) -> Actor:
        return Actor.from_user(self.user)
