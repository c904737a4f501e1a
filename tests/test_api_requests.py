"""Leave and swap requests through the HTTP surface."""


def error(response):
    return response.json()["error"]


# -----------------------
# Leave requests
# -----------------------


def test_create_leave_uses_caller_profile(client, world, auth):
    response = client.post(
        "/api/v1/leaves",
        json={"start_date": "2026-04-01", "end_date": "2026-04-02", "reason": "Conference"},
        headers=auth(world.nurse1),
    )
    assert response.status_code == 201
    leave = response.json()["data"]
    assert leave["user_id"] == str(world.nurse1["id"])
    assert leave["hospital_id"] == str(world.h1["id"])
    assert leave["department_id"] == str(world.d1["id"])
    assert leave["status"] == "pending"


def test_create_leave_rejects_reversed_dates(client, world, auth):
    response = client.post(
        "/api/v1/leaves",
        json={"start_date": "2026-04-03", "end_date": "2026-04-01"},
        headers=auth(world.nurse1),
    )
    assert response.status_code == 400
    assert "end_date must not be before start_date" in error(response)["message"]


def test_create_leave_without_hospital(client, world, auth):
    response = client.post(
        "/api/v1/leaves",
        json={"start_date": "2026-04-01", "end_date": "2026-04-01"},
        headers=auth(world.unbound_doctor),
    )
    assert response.status_code == 403
    assert error(response)["message"] == "Hospital scope required"


def test_staff_see_only_their_own_leaves(client, world, auth):
    response = client.get("/api/v1/leaves", headers=auth(world.nurse1))
    assert {row["id"] for row in response.json()["data"]} == {
        str(world.leave_nurse1["id"]),
        str(world.leave_nurse1_approved["id"]),
    }

    response = client.get(f"/api/v1/leaves/{world.leave_doctor1['id']}", headers=auth(world.nurse1))
    assert response.status_code == 403


def test_owner_cancels_pending_leave(client, world, auth):
    response = client.put(
        f"/api/v1/leaves/{world.leave_nurse1['id']}",
        json={"status": "cancelled"},
        headers=auth(world.nurse1),
    )
    assert response.status_code == 200
    leave = response.json()["data"]
    assert leave["status"] == "cancelled"
    assert leave["reviewed_by"] is None
    assert leave["reviewed_at"] is None


def test_owner_cannot_approve_own_leave(client, world, auth):
    response = client.put(
        f"/api/v1/leaves/{world.leave_nurse1['id']}",
        json={"status": "approved"},
        headers=auth(world.nurse1),
    )
    assert response.status_code == 403
    assert error(response)["message"] == "Only cancellation is allowed"
    assert world.store.tables["leave_requests"][world.leave_nurse1["id"]]["status"] == "pending"


def test_owner_cannot_cancel_reviewed_leave(client, world, auth):
    response = client.put(
        f"/api/v1/leaves/{world.leave_nurse1_approved['id']}",
        json={"status": "cancelled"},
        headers=auth(world.nurse1),
    )
    assert response.status_code == 400
    assert error(response)["message"] == "Only pending requests can be cancelled"


def test_colleague_cannot_touch_leave(client, world, auth):
    response = client.put(
        f"/api/v1/leaves/{world.leave_nurse1['id']}",
        json={"status": "cancelled"},
        headers=auth(world.nurse1b),
    )
    assert response.status_code == 403
    assert error(response)["message"] == "Leave access denied"


def test_hod_approves_and_stamps(client, world, auth):
    response = client.put(
        f"/api/v1/leaves/{world.leave_doctor1['id']}",
        json={"status": "approved"},
        headers=auth(world.hod1),
    )
    assert response.status_code == 200
    leave = response.json()["data"]
    assert leave["status"] == "approved"
    assert leave["reviewed_by"] == str(world.hod1["id"])
    assert leave["reviewed_at"] is not None

    # second review of the same request
    response = client.put(
        f"/api/v1/leaves/{world.leave_doctor1['id']}",
        json={"status": "rejected"},
        headers=auth(world.admin1),
    )
    assert response.status_code == 400
    assert error(response)["message"] == "Only pending requests can be reviewed"


def test_admin_cannot_approve_other_hospital_leave(client, world, auth):
    response = client.put(
        f"/api/v1/leaves/{world.leave_nurse2['id']}",
        json={"status": "approved"},
        headers=auth(world.admin1),
    )
    assert response.status_code == 403
    assert error(response)["code"] == "FORBIDDEN"
    assert world.store.writes == []


def test_lost_race_is_conflict(client, world, auth):
    world.store.conflict_on_write = True
    response = client.put(
        f"/api/v1/leaves/{world.leave_doctor1['id']}",
        json={"status": "approved"},
        headers=auth(world.hod1),
    )
    assert response.status_code == 409
    assert error(response) == {
        "code": "VALIDATION_ERROR",
        "message": "Leave request is no longer pending",
    }


def test_transition_body_validation(client, world, auth):
    url = f"/api/v1/leaves/{world.leave_doctor1['id']}"
    response = client.put(url, json={}, headers=auth(world.hod1))
    assert response.status_code == 400
    assert error(response)["message"] == "Missing status"

    response = client.put(url, json={"status": "archived"}, headers=auth(world.hod1))
    assert response.status_code == 400
    assert error(response)["code"] == "VALIDATION_ERROR"

    response = client.put(url, json={"status": "approved", "user_id": str(world.hod1["id"])}, headers=auth(world.hod1))
    assert response.status_code == 400


def test_transition_missing_leave(client, world, auth):
    response = client.put(
        f"/api/v1/leaves/{world.h1['id']}",
        json={"status": "approved"},
        headers=auth(world.admin1),
    )
    assert response.status_code == 404
    assert error(response)["message"] == "Leave request not found"


# -----------------------
# Swap requests
# -----------------------


def test_swap_rows_carry_shift_summary(client, world, auth):
    response = client.get(f"/api/v1/swaps/{world.swap_nurse1['id']}", headers=auth(world.nurse1))
    assert response.status_code == 200
    shift = response.json()["data"]["shift"]
    assert shift["hospital_id"] == str(world.h1["id"])
    assert shift["assigned_user_id"] == str(world.nurse1["id"])


def test_swap_counterpart_can_read_but_not_transition(client, world, auth):
    url = f"/api/v1/swaps/{world.swap_nurse1['id']}"
    assert client.get(url, headers=auth(world.nurse1b)).status_code == 200

    response = client.put(url, json={"status": "cancelled"}, headers=auth(world.nurse1b))
    assert response.status_code == 403
    assert error(response)["message"] == "Only the requester can update this swap"


def test_swap_list_pagination_and_status(client, world, auth):
    headers = auth(world.admin1)
    response = client.get("/api/v1/swaps", params={"limit": 1}, headers=headers)
    assert response.status_code == 200
    body = response.json()
    assert len(body["data"]) == 1
    assert body["pagination"] == {"total": 2, "limit": 1, "offset": 0, "hasMore": True}
    # newest first
    assert body["data"][0]["id"] == str(world.swap_doctor1["id"])

    response = client.get("/api/v1/swaps", params={"limit": 1, "offset": 1}, headers=headers)
    assert response.json()["pagination"]["hasMore"] is False

    response = client.get("/api/v1/swaps", params={"limit": 1000, "offset": -3}, headers=headers)
    pagination = response.json()["pagination"]
    assert pagination["limit"] == 100
    assert pagination["offset"] == 0

    response = client.get("/api/v1/swaps", params={"status": "approved"}, headers=headers)
    assert response.json()["data"] == []
    assert response.json()["pagination"]["total"] == 0

    response = client.get("/api/v1/swaps", params={"status": "all"}, headers=headers)
    assert response.json()["pagination"]["total"] == 2

    response = client.get("/api/v1/swaps", params={"status": "bogus"}, headers=headers)
    assert response.status_code == 400
    assert error(response)["message"] == "Invalid status"


def test_swap_list_staff_sees_own_and_counterpart(client, world, auth):
    response = client.get("/api/v1/swaps", headers=auth(world.nurse1b))
    assert [row["id"] for row in response.json()["data"]] == [str(world.swap_nurse1["id"])]

    response = client.get("/api/v1/swaps", headers=auth(world.super_admin))
    assert response.json()["pagination"]["total"] == 3


def test_swap_create_for_own_shift(client, world, auth):
    response = client.post(
        "/api/v1/swaps",
        json={"shift_id": str(world.shift_nurse1["id"]), "requested_with_user_id": str(world.nurse1b["id"])},
        headers=auth(world.nurse1),
    )
    assert response.status_code == 201
    swap = response.json()["data"]
    assert swap["requester_id"] == str(world.nurse1["id"])
    assert swap["status"] == "pending"
    assert swap["shift"]["hospital_id"] == str(world.h1["id"])


def test_swap_create_for_someone_elses_shift(client, world, auth):
    response = client.post(
        "/api/v1/swaps",
        json={"shift_id": str(world.shift_doctor1["id"])},
        headers=auth(world.nurse1),
    )
    assert response.status_code == 403
    assert error(response)["message"] == "Only the assigned staff can request a swap"


def test_swap_create_with_foreign_counterpart(client, world, auth):
    response = client.post(
        "/api/v1/swaps",
        json={"shift_id": str(world.shift_nurse1["id"]), "requested_with_user_id": str(world.nurse2["id"])},
        headers=auth(world.nurse1),
    )
    assert response.status_code == 400
    assert error(response)["message"] == "requested_with_user_id does not belong to hospital"


def test_swap_create_on_other_tenant_or_missing_shift(client, world, auth):
    response = client.post("/api/v1/swaps", json={"shift_id": str(world.shift_h2["id"])}, headers=auth(world.admin1))
    assert response.status_code == 403

    response = client.post("/api/v1/swaps", json={"shift_id": str(world.h1["id"])}, headers=auth(world.admin1))
    assert response.status_code == 404
    assert error(response)["message"] == "Shift not found"


def test_swap_create_on_inactive_shift(client, world, auth):
    world.store.tables["shifts"][world.shift_nurse1["id"]]["is_active"] = False
    response = client.post(
        "/api/v1/swaps",
        json={"shift_id": str(world.shift_nurse1["id"])},
        headers=auth(world.nurse1),
    )
    assert response.status_code == 400
    assert error(response)["message"] == "Shift is inactive"


def test_swap_review_does_not_reassign_shift(client, world, auth):
    response = client.put(
        f"/api/v1/swaps/{world.swap_nurse1['id']}",
        json={"status": "approved"},
        headers=auth(world.admin1),
    )
    assert response.status_code == 200
    assert response.json()["data"]["reviewed_by"] == str(world.admin1["id"])
    assert world.store.tables["shifts"][world.shift_nurse1["id"]]["assigned_user_id"] == world.nurse1["id"]


def test_swap_review_other_tenant(client, world, auth):
    response = client.put(
        f"/api/v1/swaps/{world.swap_h2['id']}",
        json={"status": "rejected"},
        headers=auth(world.admin1),
    )
    assert response.status_code == 403
