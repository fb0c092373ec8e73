from __future__ import annotations

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("RUN_MIGRATIONS_ON_STARTUP", "false")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from shiftboard.db import get_db  # noqa: E402
from shiftboard.main import app  # noqa: E402
from shiftboard.models import Base, Employee, Restaurant, Role  # noqa: E402


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
def db_session(session_factory):
    with session_factory() as session:
        yield session


@pytest.fixture
def client(session_factory):
    def _override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = _override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def restaurant(db_session):
    """A restaurant with Server/Cook roles and two employees (one without email)."""
    restaurant = Restaurant(name="Test Kitchen")
    db_session.add(restaurant)
    db_session.flush()
    db_session.add_all(
        [
            Role(restaurant_id=restaurant.id, name="Server", color="#2563eb"),
            Role(restaurant_id=restaurant.id, name="Cook", color="#dc2626"),
            Employee(restaurant_id=restaurant.id, full_name="Alex Rivera", email="alex@example.com"),
            Employee(restaurant_id=restaurant.id, full_name="Jordan Patel", email=None),
        ]
    )
    db_session.commit()
    return restaurant


@pytest.fixture
def roles(db_session, restaurant):
    rows = db_session.query(Role).filter(Role.restaurant_id == restaurant.id).order_by(Role.id).all()
    return {role.name: role for role in rows}


@pytest.fixture
def employees(db_session, restaurant):
    rows = db_session.query(Employee).filter(Employee.restaurant_id == restaurant.id).order_by(Employee.id).all()
    return {employee.full_name: employee for employee in rows}
