"""
Backend API package initialization.

Router modules:
- kpi: Dashboard report endpoints under /api/kpi
"""

from fastapi import APIRouter

from kpi_backend.api.kpi import router as kpi_router, KPI_PREFIX

api_router = APIRouter()
api_router.include_router(kpi_router, prefix=KPI_PREFIX, tags=["kpi"])

__all__ = [
    "api_router",
    "kpi_router",
    "KPI_PREFIX",
]
