# tests/conftest.py

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from app import models  # noqa: F401  (registers tables)
from app.auth import hash_password, token_for
from app.db import get_session
from app.main import app
from app.models import Service, TechAvailability, User


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def client(engine):
    def override_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = override_session
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def make_user(session, role, email, name=None, password="secret123", active=True):
    user = User(
        name=name or email.split("@")[0],
        email=email,
        password_hash=hash_password(password),
        role=role,
        active=active,
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


def auth_headers(user):
    return {"Authorization": f"Bearer {token_for(user)}"}


@pytest.fixture
def admin(session):
    return make_user(session, "admin", "admin@example.com", name="Admin")


@pytest.fixture
def tech(session):
    return make_user(session, "tech", "tech@example.com", name="Tess Tech")


@pytest.fixture
def other_tech(session):
    return make_user(session, "tech", "tech2@example.com", name="Other Tech")


@pytest.fixture
def customer(session):
    return make_user(session, "client", "client@example.com", name="Carla Client")


@pytest.fixture
def other_customer(session):
    return make_user(session, "client", "client2@example.com", name="Second Client")


@pytest.fixture
def service(session):
    service = Service(name="Network setup", price=120.0)
    session.add(service)
    session.commit()
    session.refresh(service)
    return service


@pytest.fixture
def availability(session, tech):
    availability = TechAvailability(tech_id=tech.id, available_hours=["09:00", "09:30", "14:00", "14:30"])
    session.add(availability)
    session.commit()
    session.refresh(availability)
    return availability
