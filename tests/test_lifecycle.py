from datetime import datetime, timezone

import pytest

from conftest import actor_of
from hwms.core.errors import ErrorCode, Forbidden, NotFound, ValidationFailed
from hwms.models.leave_request import RequestStatus
from hwms.services.lifecycle_service import (
    LEAVE_WORKFLOW,
    SWAP_WORKFLOW,
    apply_transition,
    plan_transition,
)

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize("target", ["approved", "rejected", "cancelled"])
def test_reviewer_decides_pending_request(world, target):
    admin = actor_of(world.admin1)
    transition = plan_transition(admin, LEAVE_WORKFLOW, world.leave_nurse1, target, NOW)
    assert transition.status is RequestStatus(target)
    assert transition.reviewed_by == admin.id
    assert transition.reviewed_at == NOW


@pytest.mark.parametrize("target", ["approved", "rejected", "cancelled", "pending"])
def test_terminal_request_cannot_be_reviewed_again(world, target):
    with pytest.raises(ValidationFailed):
        plan_transition(actor_of(world.hod1), LEAVE_WORKFLOW, world.leave_nurse1_approved, target, NOW)


def test_reviewer_cannot_reset_to_pending(world):
    with pytest.raises(ValidationFailed) as exc:
        plan_transition(actor_of(world.hod1), SWAP_WORKFLOW, world.swap_nurse1, "pending", NOW)
    assert exc.value.message == "Invalid status"


def test_owner_cancels_and_review_stamp_is_cleared(world):
    nurse = actor_of(world.nurse1)
    transition = plan_transition(nurse, LEAVE_WORKFLOW, world.leave_nurse1, "cancelled", NOW)
    assert transition.as_patch() == {"status": "cancelled", "reviewed_by": None, "reviewed_at": None}


def test_owner_cannot_approve_own_request(world):
    with pytest.raises(Forbidden) as exc:
        plan_transition(actor_of(world.nurse1), LEAVE_WORKFLOW, world.leave_nurse1, "approved", NOW)
    assert exc.value.message == "Only cancellation is allowed"


def test_owner_cannot_cancel_terminal_request(world):
    with pytest.raises(ValidationFailed) as exc:
        plan_transition(actor_of(world.nurse1), LEAVE_WORKFLOW, world.leave_nurse1_approved, "cancelled", NOW)
    assert exc.value.message == "Only pending requests can be cancelled"


def test_swap_counterpart_has_no_transition_right(world):
    counterpart = actor_of(world.nurse1b)
    with pytest.raises(Forbidden) as exc:
        plan_transition(counterpart, SWAP_WORKFLOW, world.swap_nurse1, "cancelled", NOW)
    assert exc.value.message == "Only the requester can update this swap"


def test_missing_status(world):
    with pytest.raises(ValidationFailed) as exc:
        plan_transition(actor_of(world.admin1), LEAVE_WORKFLOW, world.leave_nurse1, None, NOW)
    assert exc.value.message == "Missing status"


def test_leave_and_swap_follow_the_same_rules(world):
    nurse = actor_of(world.nurse1)
    leave = plan_transition(nurse, LEAVE_WORKFLOW, world.leave_nurse1, "cancelled", NOW)
    swap = plan_transition(nurse, SWAP_WORKFLOW, world.swap_nurse1, "cancelled", NOW)
    assert leave == swap


def test_apply_transition_writes_conditionally(world):
    admin = actor_of(world.admin1)
    row = apply_transition(world.store, admin, LEAVE_WORKFLOW, world.leave_nurse1["id"], "approved", NOW)
    assert row["status"] == "approved"
    assert row["reviewed_by"] == admin.id
    assert row["reviewed_at"] == NOW
    table, _, _, precondition = world.store.writes[-1]
    assert table == "leave_requests"
    assert precondition == {"status": "pending"}

    # second decision on the same request
    with pytest.raises(ValidationFailed):
        apply_transition(world.store, actor_of(world.hod1), LEAVE_WORKFLOW, world.leave_nurse1["id"], "rejected", NOW)


def test_lost_race_is_reported_as_conflict(world):
    world.store.conflict_on_write = True
    with pytest.raises(ValidationFailed) as exc:
        apply_transition(world.store, actor_of(world.admin1), SWAP_WORKFLOW, world.swap_nurse1["id"], "approved", NOW)
    assert exc.value.code is ErrorCode.VALIDATION_ERROR
    assert exc.value.status_code == 409


def test_reviewer_of_other_hospital_is_forbidden(world):
    with pytest.raises(Forbidden) as exc:
        apply_transition(world.store, actor_of(world.admin1), LEAVE_WORKFLOW, world.leave_nurse2["id"], "approved", NOW)
    assert exc.value.message == "Hospital access denied"
    assert world.store.writes == []


def test_unknown_request_is_not_found(world):
    with pytest.raises(NotFound):
        apply_transition(world.store, actor_of(world.admin1), LEAVE_WORKFLOW, world.h1["id"], "approved", NOW)
