from conftest import API, load_employee, set_role


def create_task(client, creator, assignee, points=50, title="Bake-off"):
    r = client.post(
        f"{API}/fun-tasks",
        headers=creator["headers"],
        json={"title": title, "description": "Bring a cake", "points": points, "assigned_to_id": assignee["id"]},
    )
    assert r.status_code == 201, r.text
    return r.json()["data"]


def test_employee_cannot_create_fun_task(client, employee, manager):
    r = client.post(
        f"{API}/fun-tasks",
        headers=employee["headers"],
        json={"title": "Quiz", "description": "Friday quiz", "points": 10, "assigned_to_id": manager["id"]},
    )
    assert r.status_code == 403

    r = client.get(f"{API}/fun-tasks", headers=manager["headers"])
    assert r.json()["count"] == 0


def test_create_fun_task(client, manager, employee):
    task = create_task(client, manager, employee)
    assert task["status"] == "pending"
    assert task["created_by_id"] == manager["id"]
    assert task["assigned_to"]["id"] == employee["id"]
    assert task["completed_at"] is None


def test_create_fun_task_validation(client, manager):
    r = client.post(
        f"{API}/fun-tasks",
        headers=manager["headers"],
        json={"title": "Quiz", "description": "", "points": 0, "assigned_to_id": 999},
    )
    assert r.status_code == 400
    message = r.json()["message"]
    assert "description: String should have at least 1 character" in message
    assert "points: Input should be greater than 0" in message

    r = client.post(
        f"{API}/fun-tasks",
        headers=manager["headers"],
        json={"title": "Quiz", "description": "Friday quiz", "points": 10, "assigned_to_id": 999},
    )
    assert r.status_code == 400
    assert r.json()["message"] == "Employee not found with id of 999"


def test_completion_credits_points_once(client, make_employee, manager):
    assignee = make_employee()
    task = create_task(client, manager, assignee, points=50)

    r = client.put(f"{API}/fun-tasks/{task['id']}", headers=manager["headers"], json={"status": "completed"})
    assert r.status_code == 200, r.text
    data = r.json()["data"]
    assert data["status"] == "completed"
    assert data["completed_at"] is not None
    assert load_employee(assignee["id"]).fun_task_points == 50

    r = client.put(f"{API}/fun-tasks/{task['id']}", headers=manager["headers"], json={"status": "completed"})
    assert r.status_code == 200
    assert load_employee(assignee["id"]).fun_task_points == 50

    # leaving completed keeps the points already awarded
    r = client.put(f"{API}/fun-tasks/{task['id']}", headers=manager["headers"], json={"status": "approved"})
    assert r.status_code == 200
    assert load_employee(assignee["id"]).fun_task_points == 50


def test_reentering_completed_does_not_credit_again(client, make_employee, manager):
    assignee = make_employee()
    task = create_task(client, manager, assignee, points=50)
    url = f"{API}/fun-tasks/{task['id']}"

    r = client.put(url, headers=manager["headers"], json={"status": "completed"})
    first_completed_at = r.json()["data"]["completed_at"]

    for status in ("approved", "completed", "pending", "completed"):
        r = client.put(url, headers=manager["headers"], json={"status": status})
        assert r.status_code == 200, r.text
        assert r.json()["data"]["status"] == status

    assert load_employee(assignee["id"]).fun_task_points == 50
    assert r.json()["data"]["completed_at"] == first_completed_at


def test_only_creator_or_admin_updates(client, make_employee, admin):
    creator = make_employee("manager")
    other_manager = make_employee("manager")
    assignee = make_employee()
    task = create_task(client, creator, assignee)

    r = client.put(f"{API}/fun-tasks/{task['id']}", headers=other_manager["headers"], json={"title": "Renamed"})
    assert r.status_code == 403

    r = client.put(f"{API}/fun-tasks/{task['id']}", headers=assignee["headers"], json={"status": "completed"})
    assert r.status_code == 403
    assert load_employee(assignee["id"]).fun_task_points == 0

    r = client.put(f"{API}/fun-tasks/{task['id']}", headers=admin["headers"], json={"title": "Renamed"})
    assert r.status_code == 200
    assert r.json()["data"]["title"] == "Renamed"


def test_update_rejects_bad_status(client, manager, employee):
    task = create_task(client, manager, employee)
    r = client.put(f"{API}/fun-tasks/{task['id']}", headers=manager["headers"], json={"status": "done"})
    assert r.status_code == 400


def test_everyone_can_read_and_list(client, manager, make_employee):
    a = make_employee()
    b = make_employee()
    create_task(client, manager, a, title="First")
    create_task(client, manager, b, title="Second")

    r = client.get(f"{API}/fun-tasks", headers=a["headers"])
    assert r.status_code == 200
    assert r.json()["count"] == 2

    r = client.get(f"{API}/fun-tasks/employee/{b['id']}", headers=a["headers"])
    body = r.json()
    assert body["count"] == 1
    assert body["data"][0]["title"] == "Second"

    task_id = body["data"][0]["id"]
    r = client.get(f"{API}/fun-tasks/{task_id}", headers=a["headers"])
    assert r.status_code == 200

    assert client.get(f"{API}/fun-tasks/999", headers=a["headers"]).status_code == 404


def test_delete_rules(client, make_employee, admin):
    creator = make_employee("manager")
    assignee = make_employee()
    bystander = make_employee()
    task = create_task(client, creator, assignee)

    r = client.delete(f"{API}/fun-tasks/{task['id']}", headers=bystander["headers"])
    assert r.status_code == 403

    r = client.delete(f"{API}/fun-tasks/{task['id']}", headers=assignee["headers"])
    assert r.status_code == 403

    r = client.delete(f"{API}/fun-tasks/{task['id']}", headers=creator["headers"])
    assert r.status_code == 200
    assert client.get(f"{API}/fun-tasks/{task['id']}", headers=admin["headers"]).status_code == 404


def test_demoted_creator_cannot_delete(client, make_employee):
    creator = make_employee("manager")
    assignee = make_employee()
    task = create_task(client, creator, assignee)

    set_role(creator["id"], "employee")
    r = client.delete(f"{API}/fun-tasks/{task['id']}", headers=creator["headers"])
    assert r.status_code == 403
