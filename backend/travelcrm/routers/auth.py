import logging
from datetime import datetime, timezone
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from travelcrm.database import get_db
from travelcrm.models.user import User
from travelcrm.schemas.user import UserCreate, UserResponse, LoginRequest, LoginResponse
from travelcrm.services.auth import (
    authenticate_user,
    create_access_token,
    get_password_hash,
    get_current_user_required,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["authentication"])


def _login_response(user: User) -> LoginResponse:
    token, expires_at = create_access_token(user.id)
    return LoginResponse(
        id=user.id,
        name=user.name,
        email=user.email,
        role=user.role,
        department=user.department,
        token=token,
        expires_at=expires_at,
    )


@router.post("/login", response_model=LoginResponse)
def login(login_data: LoginRequest, db: Session = Depends(get_db)):
    """Login and get access token."""
    user = authenticate_user(db, login_data.email, login_data.password)
    if not user:
        logger.info(f"Failed login attempt for {login_data.email}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is disabled",
        )

    user.last_login = datetime.now(timezone.utc)
    db.commit()
    return _login_response(user)


@router.post("/register", response_model=LoginResponse, status_code=201)
def register(user_data: UserCreate, db: Session = Depends(get_db)):
    """Register a new user (used for seeding and demos)."""
    existing = db.query(User).filter(User.email == user_data.email).first()
    if existing:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User already exists",
        )

    user = User(
        email=user_data.email,
        name=user_data.name,
        department=user_data.department,
        hashed_password=get_password_hash(user_data.password),
        role=user_data.role or "employee",
        is_active=user_data.is_active,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info(f"Registered {user.role} {user.email}")
    return _login_response(user)


@router.get("/me", response_model=UserResponse)
def get_current_user_info(user: User = Depends(get_current_user_required)):
    """Get current user info."""
    return UserResponse.model_validate(user)
