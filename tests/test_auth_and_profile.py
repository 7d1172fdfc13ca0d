from conftest import API, PASSWORD, registration
from repositories import EmployeeRepository


def test_register_and_login_and_me(client):
    r = client.post(f"{API}/auth/register", json=registration("Jane.Doe@Example.com ", name="Jane Doe"))
    assert r.status_code == 201, r.text
    body = r.json()
    assert body["success"] is True
    assert body["token"]
    assert body["data"]["email"] == "jane.doe@example.com"
    assert body["data"]["role"] == "employee"
    assert "hashed_password" not in body["data"]

    r = client.post(f"{API}/auth/login", json={"email": "jane.doe@example.com", "password": PASSWORD})
    assert r.status_code == 200, r.text
    token = r.json()["token"]

    r = client.get(f"{API}/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 200
    me = r.json()["data"]
    assert me["name"] == "Jane Doe"
    assert me["leaves_taken"] == 0
    assert me["fun_task_points"] == 0
    assert me["profile_picture"] == "default.jpg"


def test_register_ignores_requested_role(client):
    r = client.post(f"{API}/auth/register", json=registration("boss@example.com", role="admin"))
    assert r.status_code == 201
    assert r.json()["data"]["role"] == "employee"


def test_register_duplicate_email(client):
    client.post(f"{API}/auth/register", json=registration("dup@example.com"))
    r = client.post(f"{API}/auth/register", json=registration("DUP@example.com"))
    assert r.status_code == 400
    assert r.json() == {"success": False, "message": "Email already exists"}


def test_register_reports_every_missing_field(client):
    r = client.post(f"{API}/auth/register", json={"email": "not-an-email", "password": "123"})
    assert r.status_code == 400
    message = r.json()["message"]
    assert "name: Field required" in message
    assert "department: Field required" in message
    assert "email: value is not a valid email address" in message
    assert "password: String should have at least 6 characters" in message


def test_register_rejects_overlong_password(client):
    r = client.post(f"{API}/auth/register", json=registration("long@example.com", password="x" * 73))
    assert r.status_code == 400
    assert r.json()["message"] == "password: Password must be at most 72 bytes"


def test_login_failures_are_indistinguishable(client):
    client.post(f"{API}/auth/register", json=registration("known@example.com"))

    wrong_password = client.post(f"{API}/auth/login", json={"email": "known@example.com", "password": "nope123"})
    unknown_email = client.post(f"{API}/auth/login", json={"email": "ghost@example.com", "password": PASSWORD})

    assert wrong_password.status_code == unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json() == {"success": False, "message": "Invalid credentials"}


def test_login_requires_email_and_password(client):
    r = client.post(f"{API}/auth/login", json={"email": "someone@example.com"})
    assert r.status_code == 400
    assert r.json()["message"] == "Please provide an email and password"


def test_me_requires_token(client):
    r = client.get(f"{API}/auth/me")
    assert r.status_code == 401
    assert r.json() == {"success": False, "message": "Not authorized to access this route"}

    r = client.get(f"{API}/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert r.status_code == 401


def test_update_own_profile(client, employee):
    r = client.put(
        f"{API}/auth/me",
        headers=employee["headers"],
        json={"position": "Senior Developer", "password": "newsecret1", "role": "admin"},
    )
    assert r.status_code == 200, r.text
    data = r.json()["data"]
    assert data["position"] == "Senior Developer"
    # role is not part of the self-service profile
    assert data["role"] == "employee"

    r = client.post(f"{API}/auth/login", json={"email": employee["email"], "password": "newsecret1"})
    assert r.status_code == 200


def test_update_own_profile_rejects_blank_required_field(client, employee):
    r = client.put(f"{API}/auth/me", headers=employee["headers"], json={"name": "   "})
    assert r.status_code == 400
    assert r.json()["message"] == "name: String should have at least 1 character"


def test_update_own_profile_rejects_null_field(client, employee):
    r = client.put(f"{API}/auth/me", headers=employee["headers"], json={"department": None})
    assert r.status_code == 400
    assert r.json()["message"] == "department cannot be null"


def test_register_race_on_email_maps_to_duplicate(client, monkeypatch):
    client.post(f"{API}/auth/register", json=registration("race@example.com"))
    # the lookup misses, as when another request commits in between
    monkeypatch.setattr(EmployeeRepository, "get_by_email", lambda self, email: None)

    r = client.post(f"{API}/auth/register", json=registration("race@example.com"))
    assert r.status_code == 400
    assert r.json() == {"success": False, "message": "Email already exists"}

    monkeypatch.undo()
    r = client.post(f"{API}/auth/login", json={"email": "race@example.com", "password": PASSWORD})
    assert r.status_code == 200


def test_profile_email_race_maps_to_duplicate(client, make_employee, monkeypatch):
    first = make_employee()
    second = make_employee()
    monkeypatch.setattr(EmployeeRepository, "get_by_email", lambda self, email: None)

    r = client.put(f"{API}/auth/me", headers=second["headers"], json={"email": first["email"]})
    assert r.status_code == 400
    assert r.json()["message"] == "Email already exists"

    monkeypatch.undo()
    r = client.get(f"{API}/auth/me", headers=second["headers"])
    assert r.json()["data"]["email"] == second["email"]
