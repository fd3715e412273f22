"""
Package initialization file for backend models.

Re-exports enums and Pydantic schemas so other modules can import them from
kpi_backend.models directly.

Usage:
    from kpi_backend.models import DateRangeSelector, ReportInfo
"""

from kpi_backend.models.enums import (
    DateRangeSelector,
    ReportKind,
)

from kpi_backend.models.schemas import (
    ErrorDetail,
    ErrorResponse,
    HealthResponse,
    ReportInfo,
    ReportListResponse,
)

__all__ = [
    # Enums
    'DateRangeSelector',
    'ReportKind',
    # Schemas
    'ErrorDetail',
    'ErrorResponse',
    'HealthResponse',
    'ReportInfo',
    'ReportListResponse',
]
