import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from travelcrm.database import Base, get_db
from travelcrm.main import app
from travelcrm.models.user import User
from travelcrm.services.auth import create_access_token, get_password_hash


@pytest.fixture()
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def client(db_session):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def make_user(session, email, name, role="employee", password="secret123", is_active=True):
    user = User(
        email=email,
        name=name,
        role=role,
        hashed_password=get_password_hash(password),
        is_active=is_active,
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


def auth_headers(user):
    token, _ = create_access_token(user.id)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def admin(db_session):
    return make_user(db_session, "admin@company.com", "System Administrator", role="admin")


@pytest.fixture()
def john(db_session):
    return make_user(db_session, "john@company.com", "John Smith")


@pytest.fixture()
def sarah(db_session):
    return make_user(db_session, "sarah@company.com", "Sarah Johnson")
