# hwms/schemas/department.py
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from hwms.schemas.common import NonEmptyStr, StrictUpdate


class DepartmentCreate(BaseModel):
    hospital_id: UUID
    name: NonEmptyStr
    type: str | None = None
    hod_user_id: UUID | None = None


class DepartmentUpdate(StrictUpdate):
    not_nullable = frozenset({"name", "is_active"})

    name: NonEmptyStr | None = None
    type: str | None = None
    hod_user_id: UUID | None = None
    is_active: bool | None = None


class DepartmentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    hospital_id: UUID
    name: str
    type: str | None = None
    hod_user_id: UUID | None = None
    is_active: bool
    created_at: datetime
    updated_at: datetime
