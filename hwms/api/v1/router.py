# hwms/api/v1/router.py
from fastapi import APIRouter

from hwms.api.v1.endpoints import (
    analytics,
    auth,
    departments,
    handovers,
    hospitals,
    leaves,
    patients,
    shifts,
    swaps,
    tasks,
)

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(hospitals.router, prefix="/hospitals", tags=["hospitals"])
api_router.include_router(departments.router, prefix="/departments", tags=["departments"])
api_router.include_router(patients.router, prefix="/patients", tags=["patients"])
api_router.include_router(tasks.router, prefix="/tasks", tags=["tasks"])
api_router.include_router(shifts.router, prefix="/shifts", tags=["shifts"])
api_router.include_router(leaves.router, prefix="/leaves", tags=["leaves"])
api_router.include_router(swaps.router, prefix="/swaps", tags=["swaps"])
api_router.include_router(handovers.router, prefix="/handovers", tags=["handovers"])
api_router.include_router(analytics.router, prefix="/analytics", tags=["analytics"])
