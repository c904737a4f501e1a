# hwms/schemas/leave_request.py
from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, model_validator

from hwms.models.leave_request import RequestStatus


class LeaveRequestCreate(BaseModel):
    """Owner, hospital and department are taken from the caller's profile."""

    start_date: date
    end_date: date
    reason: str | None = None

    @model_validator(mode="after")
    def validate_dates(self) -> "LeaveRequestCreate":
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class LeaveRequestResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    hospital_id: UUID
    department_id: UUID | None = None
    start_date: date
    end_date: date
    reason: str | None = None
    status: RequestStatus
    reviewed_by: UUID | None = None
    reviewed_at: datetime | None = None
    is_active: bool
    created_at: datetime
    updated_at: datetime
