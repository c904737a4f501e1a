# hwms/schemas/shift.py
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, model_validator

from hwms.schemas.common import StrictUpdate
from hwms.utils.datetime_utils import as_utc


def ensure_shift_window(start_at: datetime | None, end_at: datetime | None) -> None:
    if start_at is not None and end_at is not None and as_utc(end_at) <= as_utc(start_at):
        raise ValueError("end_at must be after start_at")


class ShiftCreate(BaseModel):
    hospital_id: UUID
    department_id: UUID | None = None
    assigned_user_id: UUID | None = None
    shift_type: str | None = None
    start_at: datetime
    end_at: datetime
    notes: str | None = None

    @model_validator(mode="after")
    def validate_window(self) -> "ShiftCreate":
        ensure_shift_window(self.start_at, self.end_at)
        return self


class ShiftUpdate(StrictUpdate):
    not_nullable = frozenset({"start_at", "end_at", "is_active"})

    department_id: UUID | None = None
    assigned_user_id: UUID | None = None
    shift_type: str | None = None
    start_at: datetime | None = None
    end_at: datetime | None = None
    notes: str | None = None
    is_active: bool | None = None

    @model_validator(mode="after")
    def validate_window(self) -> "ShiftUpdate":
        ensure_shift_window(self.start_at, self.end_at)
        return self


class ShiftResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    hospital_id: UUID
    department_id: UUID | None = None
    assigned_user_id: UUID | None = None
    shift_type: str | None = None
    start_at: datetime
    end_at: datetime
    notes: str | None = None
    is_active: bool
    created_at: datetime
    updated_at: datetime


class ShiftSummary(BaseModel):
    """Shift fields joined onto every swap request."""

    hospital_id: UUID
    start_at: datetime
    end_at: datetime
    assigned_user_id: UUID | None = None
