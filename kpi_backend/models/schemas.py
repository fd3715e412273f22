"""
Pydantic response models for the KPI proxy backend.

Report payloads themselves are passed through from BigQuery without schema
validation; these models only describe the service's own metadata endpoints
and error bodies.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from kpi_backend.models.enums import ReportKind


class ReportInfo(BaseModel):
    """Description of one registered report endpoint."""
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "geo",
                "label": "geo",
                "path": "/api/kpi/geo",
                "kind": "snapshot",
                "tablePrefix": "pseudonymous_users_",
                "description": "City and country of recently active users",
            }
        }
    )

    name: str = Field(..., description="Report name used in the endpoint path")
    label: str = Field(..., description="Key wrapping the rows in the response body")
    path: str = Field(..., description="Endpoint serving the report")
    kind: ReportKind = Field(..., description="Snapshot or aggregate source table")
    tablePrefix: str = Field(..., description="Prefix of the dated tables the report reads")
    description: Optional[str] = None


class ReportListResponse(BaseModel):
    """Registered reports."""

    reports: List[ReportInfo]


class ErrorDetail(BaseModel):
    """Body carried in the `detail` field of an error response."""

    error: str = Field(..., description="Error class name")
    message: str = Field(..., description="Human readable failure description")


class HealthResponse(BaseModel):
    status: str = "healthy"


class ErrorResponse(BaseModel):
    """Error response body as produced by HTTPException."""

    detail: ErrorDetail
