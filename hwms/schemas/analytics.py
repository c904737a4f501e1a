# hwms/schemas/analytics.py
from uuid import UUID

from pydantic import BaseModel

from hwms.models.profile import UserRole


class SummaryScope(BaseModel):
    hospital_id: UUID | None = None
    role: UserRole


class SummaryCounts(BaseModel):
    patients: int
    shifts: int
    leave_requests: int
    tasks: int
    swap_requests: int
    handovers: int


class TaskBreakdown(BaseModel):
    by_status: dict[str, int]
    by_priority: dict[str, int]


class AnalyticsSummary(BaseModel):
    scope: SummaryScope
    counts: SummaryCounts
    tasks: TaskBreakdown
