import itertools
import os

# Must be set before the app modules read their configuration
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["API_PREFIX"] = "/api"

import pytest
from fastapi.testclient import TestClient

from db import SessionLocal, engine
from main import app
from models import Base, Employee

API = "/api"
PASSWORD = "secret123"


@pytest.fixture(autouse=True)
def fresh_schema():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def client():
    return TestClient(app)


def set_role(employee_id, role):
    db = SessionLocal()
    try:
        db.query(Employee).filter(Employee.id == employee_id).update({"role": role})
        db.commit()
    finally:
        db.close()


def load_employee(employee_id):
    db = SessionLocal()
    try:
        return db.query(Employee).filter(Employee.id == employee_id).first()
    finally:
        db.close()


def registration(email, name="Test User", password=PASSWORD, **extra):
    body = {
        "name": name,
        "email": email,
        "password": password,
        "department": "Engineering",
        "position": "Developer",
        "contact_number": "555-0100",
    }
    body.update(extra)
    return body


@pytest.fixture
def make_employee(client):
    """Register an employee through the API, optionally promote it, return id and auth headers."""
    counter = itertools.count(1)

    def _make(role="employee", name=None):
        n = next(counter)
        email = f"{role}{n}@example.com"
        r = client.post(f"{API}/auth/register", json=registration(email, name=name or f"{role.title()} {n}"))
        assert r.status_code == 201, r.text
        body = r.json()
        employee_id = body["data"]["id"]
        if role != "employee":
            set_role(employee_id, role)
        return {
            "id": employee_id,
            "email": email,
            "headers": {"Authorization": f"Bearer {body['token']}"},
        }

    return _make


@pytest.fixture
def admin(make_employee):
    return make_employee("admin")


@pytest.fixture
def manager(make_employee):
    return make_employee("manager")


@pytest.fixture
def employee(make_employee):
    return make_employee("employee")
