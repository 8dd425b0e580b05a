"""
Shared test fixtures for the employee records service.
"""
import os

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

# Set test environment before importing app modules
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("LOG_LEVEL", "WARNING")

from employee_api import models  # noqa: E402,F401  (registers the employee table)
from employee_api.api import EmployeeAPI  # noqa: E402
from employee_api.db import Base, make_session_factory  # noqa: E402
from employee_api.main import APP, get_employee_api  # noqa: E402
from employee_api.schemas import EmployeeIn  # noqa: E402
from employee_api.store import EmployeeStore  # noqa: E402


@pytest.fixture
def engine():
    """In-memory SQLite shared across threads, standing in for PostgreSQL."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def store(engine):
    return EmployeeStore(make_session_factory(engine))


@pytest.fixture
def api(store):
    api = EmployeeAPI(store, timeout=5.0)
    yield api
    api.close()


@pytest.fixture
def client(api):
    APP.dependency_overrides[get_employee_api] = lambda: api
    yield TestClient(APP)
    APP.dependency_overrides.clear()


@pytest.fixture
def dan(store):
    return store.create(EmployeeIn(name="Dan", designation="Software Developer", salary=23456.00))
