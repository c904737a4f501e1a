# hwms/schemas/task.py
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from hwms.models.task import TaskPriority, TaskStatus
from hwms.schemas.common import NonEmptyStr, StrictUpdate


class TaskCreate(BaseModel):
    # required for super_admin only; everyone else writes into their own hospital
    hospital_id: UUID | None = None
    department_id: UUID | None = None
    patient_id: UUID | None = None
    assigned_to: UUID | None = None
    title: NonEmptyStr
    description: str | None = None
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    due_at: datetime | None = None


class TaskUpdate(StrictUpdate):
    not_nullable = frozenset({"title", "status", "priority", "is_active"})

    assigned_to: UUID | None = None
    title: NonEmptyStr | None = None
    description: str | None = None
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    due_at: datetime | None = None
    is_active: bool | None = None


class TaskResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    hospital_id: UUID
    department_id: UUID | None = None
    patient_id: UUID | None = None
    created_by: UUID
    assigned_to: UUID | None = None
    title: str
    description: str | None = None
    status: TaskStatus
    priority: TaskPriority
    due_at: datetime | None = None
    is_active: bool
    created_at: datetime
    updated_at: datetime


class TaskCommentCreate(BaseModel):
    body: NonEmptyStr


class TaskCommentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    task_id: UUID
    user_id: UUID
    body: str
    is_active: bool
    created_at: datetime
    updated_at: datetime
