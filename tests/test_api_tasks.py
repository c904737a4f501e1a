def error(response):
    return response.json()["error"]


def ids(response):
    return {row["id"] for row in response.json()["data"]}


def test_nurse_task_list_scenario(client, world, auth):
    response = client.get("/api/v1/tasks", headers=auth(world.nurse1))
    assert response.status_code == 200
    assert ids(response) == {str(world.task_by_nurse1["id"]), str(world.task_for_nurse1["id"])}
    assert all(row["hospital_id"] == str(world.h1["id"]) for row in response.json()["data"])


def test_filters_only_narrow(client, world, auth):
    response = client.get(
        "/api/v1/tasks",
        params={"assigned_to": str(world.nurse1b["id"])},
        headers=auth(world.nurse1),
    )
    assert response.status_code == 200
    assert response.json()["data"] == []

    response = client.get(
        "/api/v1/tasks",
        params={"assigned_to": str(world.nurse1b["id"])},
        headers=auth(world.admin1),
    )
    assert ids(response) == {str(world.task_for_nurse1b["id"])}


def test_cross_tenant_filter_is_forbidden(client, world, auth):
    response = client.get("/api/v1/tasks", params={"hospital_id": str(world.h2["id"])}, headers=auth(world.admin1))
    assert response.status_code == 403
    assert response.json()["error"] == {"code": "FORBIDDEN", "message": "Hospital access denied"}


def test_list_failure_is_dependency_error(client, world, auth):
    world.store.fail_on.add("tasks")
    response = client.get("/api/v1/tasks", headers=auth(world.admin1))
    assert response.status_code == 500
    assert response.json()["error"]["code"] == "DEPENDENCY_ERROR"


def test_create_task_defaults(client, world, auth):
    response = client.post(
        "/api/v1/tasks",
        json={"title": "Draw bloods", "patient_id": str(world.patient1["id"])},
        headers=auth(world.nurse1),
    )
    assert response.status_code == 201
    task = response.json()["data"]
    assert task["hospital_id"] == str(world.h1["id"])
    assert task["department_id"] == str(world.d1["id"])
    assert task["created_by"] == str(world.nurse1["id"])
    assert task["status"] == "todo"
    assert task["priority"] == "medium"


def test_create_task_with_foreign_patient_is_rejected(client, world, auth):
    # super_admin scoped to H2, patient from H1
    response = client.post(
        "/api/v1/tasks",
        json={
            "title": "Transfer",
            "hospital_id": str(world.h2["id"]),
            "patient_id": str(world.patient1["id"]),
        },
        headers=auth(world.super_admin),
    )
    assert response.status_code == 400
    assert response.json()["error"] == {
        "code": "VALIDATION_ERROR",
        "message": "patient_id does not belong to hospital",
    }
    assert len(world.store.tables["tasks"]) == 4


def test_super_admin_must_name_hospital(client, world, auth):
    response = client.post("/api/v1/tasks", json={"title": "Orphan"}, headers=auth(world.super_admin))
    assert response.status_code == 400
    assert response.json()["error"]["message"] == "hospital_id is required"


def test_nurse_cannot_create_in_other_hospital(client, world, auth):
    response = client.post(
        "/api/v1/tasks",
        json={"title": "Sneaky", "hospital_id": str(world.h2["id"])},
        headers=auth(world.nurse1),
    )
    assert response.status_code == 403


def test_read_unrelated_task(client, world, auth):
    response = client.get(f"/api/v1/tasks/{world.task_for_nurse1b['id']}", headers=auth(world.nurse1))
    assert response.status_code == 403
    assert response.json()["error"]["message"] == "Task access denied"


def test_read_other_tenant_task_is_forbidden_not_missing(client, world, auth):
    response = client.get(f"/api/v1/tasks/{world.task_h2['id']}", headers=auth(world.admin1))
    assert response.status_code == 403


def test_read_missing_task(client, world, auth):
    response = client.get(f"/api/v1/tasks/{world.h1['id']}", headers=auth(world.admin1))
    assert response.status_code == 404
    assert response.json()["error"] == {"code": "NOT_FOUND", "message": "Task not found"}


def test_update_task(client, world, auth):
    response = client.put(
        f"/api/v1/tasks/{world.task_for_nurse1['id']}",
        json={"status": "done"},
        headers=auth(world.nurse1),
    )
    assert response.status_code == 200
    assert response.json()["data"]["status"] == "done"


def test_update_body_cannot_move_task_to_other_hospital(client, world, auth):
    response = client.put(
        f"/api/v1/tasks/{world.task_for_nurse1['id']}",
        json={"hospital_id": str(world.h2["id"])},
        headers=auth(world.admin1),
    )
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"
    assert world.store.tables["tasks"][world.task_for_nurse1["id"]]["hospital_id"] == world.h1["id"]


def test_comments_follow_task_access(client, world, auth):
    url = f"/api/v1/tasks/{world.task_for_nurse1['id']}/comments"
    response = client.post(url, json={"body": "Done at 9"}, headers=auth(world.nurse1))
    assert response.status_code == 201
    assert response.json()["data"]["user_id"] == str(world.nurse1["id"])

    response = client.get(url, headers=auth(world.doctor1))
    assert response.status_code == 200
    assert [c["body"] for c in response.json()["data"]] == ["Done at 9"]

    response = client.get(url, headers=auth(world.nurse1b))
    assert response.status_code == 403

    response = client.post(url, json={"body": "   "}, headers=auth(world.nurse1))
    assert response.status_code == 400


def test_update_rejects_null_for_required_columns(client, world, auth):
    url = f"/api/v1/tasks/{world.task_for_nurse1['id']}"
    for field in ("status", "priority", "title", "is_active"):
        response = client.put(url, json={field: None}, headers=auth(world.admin1))
        assert response.status_code == 400
        assert error(response)["code"] == "VALIDATION_ERROR"
        assert f"{field} cannot be null" in error(response)["message"]
    assert world.store.writes == []

    # nullable columns may still be cleared
    response = client.put(url, json={"assigned_to": None, "due_at": None}, headers=auth(world.admin1))
    assert response.status_code == 200
    assert response.json()["data"]["assigned_to"] is None


def test_assignee_must_belong_to_task_hospital(client, world, auth):
    response = client.post(
        "/api/v1/tasks",
        json={"title": "Night round", "assigned_to": str(world.nurse2["id"])},
        headers=auth(world.admin1),
    )
    assert response.status_code == 400
    assert error(response) == {"code": "VALIDATION_ERROR", "message": "assigned_to does not belong to hospital"}
    assert len(world.store.tables["tasks"]) == 4

    response = client.put(
        f"/api/v1/tasks/{world.task_for_nurse1['id']}",
        json={"assigned_to": str(world.nurse2["id"])},
        headers=auth(world.admin1),
    )
    assert response.status_code == 400
    assert error(response)["message"] == "assigned_to does not belong to hospital"
    assert world.store.tables["tasks"][world.task_for_nurse1["id"]]["assigned_to"] == world.nurse1["id"]

    response = client.post(
        "/api/v1/tasks",
        json={"title": "Night round", "assigned_to": str(world.nurse1b["id"])},
        headers=auth(world.admin1),
    )
    assert response.status_code == 201
