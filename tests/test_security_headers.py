from conftest import API


def test_docs_accessible(client):
    r = client.get("/docs")
    assert r.status_code == 200


def test_health_checks_database(client):
    r = client.get(f"{API}/health")
    assert r.status_code == 200
    assert r.json() == {"success": True, "data": {"status": "ok", "database": "ok"}}


def test_security_headers_present(client):
    r = client.get(f"{API}/health")
    assert r.headers["X-Content-Type-Options"] == "nosniff"
    assert r.headers["X-Frame-Options"] == "DENY"
    assert r.headers["content-type"] == "application/json; charset=utf-8"


def test_cors_preflight_for_allowed_origin(client):
    r = client.options(
        f"{API}/auth/login",
        headers={"Origin": "http://localhost:3000", "Access-Control-Request-Method": "POST"},
    )
    assert r.status_code == 200
    assert r.headers["access-control-allow-origin"] == "http://localhost:3000"


def test_type_errors_use_error_envelope(client, employee):
    r = client.get(f"{API}/employees/not-a-number", headers=employee["headers"])
    assert r.status_code == 400
    body = r.json()
    assert body["success"] is False
    assert "employee_id" in body["message"]


def test_unknown_employee_token_rejected(client, admin, employee):
    client.delete(f"{API}/employees/{employee['id']}", headers=admin["headers"])
    r = client.get(f"{API}/auth/me", headers=employee["headers"])
    assert r.status_code == 401
    assert r.json()["message"] == "No employee found with this token"
