# hwms/schemas/profile.py
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from hwms.models.profile import UserRole


class ProfileResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str | None = None
    full_name: str | None = None
    role: UserRole
    hospital_id: UUID | None = None
    department_id: UUID | None = None
    is_active: bool
    created_at: datetime
    updated_at: datetime


class IdentityResponse(BaseModel):
    id: UUID
    email: str | None = None


class MeResponse(BaseModel):
    user: IdentityResponse
    profile: ProfileResponse
