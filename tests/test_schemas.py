import pytest
from pydantic import ValidationError

from hwms.models.leave_request import RequestStatus
from hwms.schemas.common import StatusUpdate
from hwms.schemas.shift import ShiftUpdate
from hwms.schemas.task import TaskUpdate


def test_omitted_fields_are_not_changes():
    assert TaskUpdate.model_validate({"title": " Recheck "}).changes() == {"title": "Recheck"}


def test_null_for_required_column_is_rejected():
    with pytest.raises(ValidationError) as exc:
        TaskUpdate.model_validate({"status": None, "priority": None})
    assert "priority, status cannot be null" in str(exc.value)


def test_null_for_optional_column_is_a_change():
    assert TaskUpdate.model_validate({"assigned_to": None}).changes() == {"assigned_to": None}


def test_shift_window_cannot_be_half_cleared():
    with pytest.raises(ValidationError):
        ShiftUpdate.model_validate({"start_at": None, "end_at": "2026-02-01T08:00:00Z"})


def test_status_update_allows_missing_status():
    assert StatusUpdate.model_validate({}).status is None
    assert StatusUpdate.model_validate({"status": "approved"}).status is RequestStatus.APPROVED
    with pytest.raises(ValidationError):
        StatusUpdate.model_validate({"status": "approved", "user_id": "x"})
