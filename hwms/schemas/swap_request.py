# hwms/schemas/swap_request.py
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from hwms.models.leave_request import RequestStatus
from hwms.schemas.shift import ShiftSummary


class SwapRequestCreate(BaseModel):
    shift_id: UUID
    requested_with_user_id: UUID | None = None
    reason: str | None = None


class SwapRequestResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    shift_id: UUID
    requester_id: UUID
    requested_with_user_id: UUID | None = None
    status: RequestStatus
    reason: str | None = None
    reviewed_by: UUID | None = None
    reviewed_at: datetime | None = None
    is_active: bool
    created_at: datetime
    updated_at: datetime
    shift: ShiftSummary | None = None
