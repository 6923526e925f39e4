import os

# Settings are read at import time, so test values must be in place first
os.environ.setdefault("DATABASE_URL", "sqlite:///./workforce_test.db")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import pytest
from datetime import datetime, timedelta, UTC
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from jose import jwt

from workforce.database import get_db
from workforce.models.base import Base
from workforce.config import settings
# Import all model classes to ensure they're registered with SQLAlchemy
from workforce.models.account import Account, CompanyEmployee, CompanyOwner, Employee
from workforce.repositories.account_repository import AccountRepository
from workforce.services.relationship_manager import RelationshipManager
# Import FastAPI app AFTER model imports
from workforce.main import app

# Test database (SQLite in-memory for speed)
# Use StaticPool to ensure all connections share the same in-memory database
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_session():
    """Create fresh database for each test"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session):
    """FastAPI test client with test database"""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def repo(db_session):
    return AccountRepository(db_session)


@pytest.fixture
def manager(repo):
    return RelationshipManager(repo)


def create_test_token(
    user_id: str = "test-user-123",
    roles: list[str] | None = None,
    username: str | None = None,
    expired: bool = False,
) -> str:
    """
    Generate a JWT shaped like the identity provider's tokens.

    Args:
        user_id: Subject embedded in 'sub' claim
        roles: Realm roles embedded in 'realm_access.roles'
        username: Optional 'preferred_username' claim
        expired: If True, create expired token

    Returns:
        Encoded JWT token
    """
    if expired:
        exp = datetime.now(UTC) - timedelta(minutes=5)
    else:
        exp = datetime.now(UTC) + timedelta(minutes=15)

    payload = {
        "sub": user_id,
        "exp": exp,
        "iat": datetime.now(UTC),
        "realm_access": {"roles": roles or []},
    }
    if username is not None:
        payload["preferred_username"] = username

    token = jwt.encode(payload, settings.SECRET_KEY, algorithm="HS256")
    return token


def auth_headers_for(user_id: str, roles: list[str], username: str | None = None) -> dict:
    token = create_test_token(user_id=user_id, roles=roles, username=username)
    return {"Authorization": f"Bearer {token}"}


def provision(client, headers) -> dict:
    """Make the first authenticated call for a principal and return its account"""
    response = client.get("/users/me", headers=headers)
    assert response.status_code == 200
    return response.json()["account"]


@pytest.fixture
def admin_headers():
    return auth_headers_for("admin-1", ["admin"], username="root")


@pytest.fixture
def owner_headers():
    return auth_headers_for("owner-1", ["companyOwner"], username="olivia")


@pytest.fixture
def other_owner_headers():
    return auth_headers_for("owner-2", ["companyOwner"], username="oscar")


@pytest.fixture
def employee_headers():
    return auth_headers_for("employee-1", ["employee"], username="emma")


@pytest.fixture
def other_employee_headers():
    return auth_headers_for("employee-2", ["employee"], username="eli")


@pytest.fixture
def owner(client, owner_headers):
    """Provisioned owner running 'Acme'"""
    provision(client, owner_headers)
    response = client.put("/users/company", headers=owner_headers, json={"company_name": "Acme"})
    assert response.status_code == 200
    return response.json()


@pytest.fixture
def other_owner(client, other_owner_headers):
    """Provisioned owner running 'Globex'"""
    provision(client, other_owner_headers)
    response = client.put(
        "/users/company", headers=other_owner_headers, json={"company_name": "Globex"}
    )
    assert response.status_code == 200
    return response.json()


@pytest.fixture
def employee(client, employee_headers):
    """Provisioned, unassigned employee"""
    return provision(client, employee_headers)


@pytest.fixture
def other_employee(client, other_employee_headers):
    return provision(client, other_employee_headers)


def make_owner(db_session, username: str, company_name: str | None = None) -> CompanyOwner:
    owner = CompanyOwner(username=username, external_id=f"ext-{username}", company_name=company_name)
    db_session.add(owner)
    db_session.commit()
    db_session.refresh(owner)
    return owner


def make_employee(db_session, username: str, salary: float = 0) -> Employee:
    employee = Employee(username=username, external_id=f"ext-{username}", salary=salary)
    db_session.add(employee)
    db_session.commit()
    db_session.refresh(employee)
    return employee
