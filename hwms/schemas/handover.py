# hwms/schemas/handover.py
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from hwms.schemas.common import StrictUpdate


class HandoverCreate(BaseModel):
    hospital_id: UUID | None = None
    department_id: UUID | None = None
    patient_id: UUID | None = None
    shift_id: UUID | None = None
    to_user_id: UUID | None = None
    notes: str | None = None


class HandoverUpdate(StrictUpdate):
    not_nullable = frozenset({"is_active"})

    department_id: UUID | None = None
    patient_id: UUID | None = None
    shift_id: UUID | None = None
    to_user_id: UUID | None = None
    notes: str | None = None
    is_active: bool | None = None


class HandoverResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    hospital_id: UUID
    department_id: UUID | None = None
    patient_id: UUID | None = None
    shift_id: UUID | None = None
    from_user_id: UUID
    to_user_id: UUID | None = None
    notes: str | None = None
    is_active: bool
    created_at: datetime
    updated_at: datetime
