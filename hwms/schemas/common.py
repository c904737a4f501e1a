# hwms/schemas/common.py
from typing import Annotated, ClassVar, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, model_validator

from hwms.models.leave_request import RequestStatus

T = TypeVar("T")

NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class DataResponse(BaseModel, Generic[T]):
    """Every successful response is wrapped as {"data": ...}."""

    data: T


class Pagination(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total: int
    limit: int
    offset: int
    has_more: bool = Field(alias="hasMore")


class PaginatedResponse(BaseModel, Generic[T]):
    data: list[T]
    pagination: Pagination


class ErrorDetail(BaseModel):
    code: str
    message: str


class ErrorResponse(BaseModel):
    error: ErrorDetail


class StrictUpdate(BaseModel):
    """
    Base for update payloads.

    Unknown keys are rejected, so a body can never smuggle hospital_id or
    ownership columns into a write. Fields listed in ``not_nullable`` back
    NOT NULL columns: they may be omitted but never sent as null.
    """

    model_config = ConfigDict(extra="forbid")

    not_nullable: ClassVar[frozenset[str]] = frozenset()

    @model_validator(mode="after")
    def reject_explicit_nulls(self) -> "StrictUpdate":
        nulls = sorted(
            name for name in self.model_fields_set & self.not_nullable if getattr(self, name) is None
        )
        if nulls:
            raise ValueError(f"{', '.join(nulls)} cannot be null")
        return self

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


class StatusUpdate(StrictUpdate):
    """Body of PUT /leaves/{id} and PUT /swaps/{id}: a status transition only."""

    # a missing status is reported by the lifecycle service ("Missing status")
    status: RequestStatus | None = None
