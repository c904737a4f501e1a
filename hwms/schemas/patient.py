# hwms/schemas/patient.py
from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator

from hwms.schemas.common import NonEmptyStr, StrictUpdate


class PatientCreate(BaseModel):
    hospital_id: UUID
    department_id: UUID | None = None
    mrn: NonEmptyStr | None = None
    full_name: NonEmptyStr
    date_of_birth: date | None = None
    gender: str | None = None
    notes: str | None = None

    @field_validator("date_of_birth")
    @classmethod
    def validate_dob(cls, v: date | None) -> date | None:
        if v is not None and v > date.today():
            raise ValueError("Date of birth cannot be in the future")
        return v


class PatientUpdate(StrictUpdate):
    not_nullable = frozenset({"full_name", "is_active"})

    department_id: UUID | None = None
    mrn: NonEmptyStr | None = None
    full_name: NonEmptyStr | None = None
    date_of_birth: date | None = None
    gender: str | None = None
    notes: str | None = None
    is_active: bool | None = None


class PatientResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    hospital_id: UUID
    department_id: UUID | None = None
    mrn: str | None = None
    full_name: str
    date_of_birth: date | None = None
    gender: str | None = None
    notes: str | None = None
    is_active: bool
    created_at: datetime
    updated_at: datetime
