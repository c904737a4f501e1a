# hwms/schemas/hospital.py
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr

from hwms.schemas.common import NonEmptyStr, StrictUpdate


class HospitalCreate(BaseModel):
    name: NonEmptyStr
    code: NonEmptyStr
    address: str | None = None
    city: str | None = None
    phone: str | None = None
    email: EmailStr | None = None


class HospitalUpdate(StrictUpdate):
    not_nullable = frozenset({"name", "code", "is_active"})

    name: NonEmptyStr | None = None
    code: NonEmptyStr | None = None
    address: str | None = None
    city: str | None = None
    phone: str | None = None
    email: EmailStr | None = None
    is_active: bool | None = None


class HospitalResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    code: str
    address: str | None = None
    city: str | None = None
    phone: str | None = None
    email: str | None = None
    is_active: bool
    created_at: datetime
    updated_at: datetime
