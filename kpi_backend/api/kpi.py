"""
FastAPI router module for KPI report endpoints.

One read-only GET endpoint is registered per report in the query catalog:

- GET /api/kpi/user, /geo, /mobile, /technology, /behaviorFlow
- GET /api/kpi/userEngagement, /acquisition, /userRetention,
  /eventPopularity, /trafficSourceAnalysis, /userActivityOverTime
- GET /api/kpi: Registered reports

Every report endpoint accepts an optional ``dateRange`` query parameter
(``latest``, ``7days`` or ``3months``). Values outside the enum are rejected
by FastAPI validation, so client input never reaches the query text.

Success body:
    { "<label>": [ { "<label>": { ...row } }, ... ] }

Failure body:
    { "detail": { "error": "<ErrorClass>", "message": "..." } }

Status codes: 404 for a missing dated table, 400 for an unknown report,
502 for warehouse failures and 500 otherwise. With STRICT_ERROR_STATUS set,
every failure is reported as 500.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, HTTPException, Query

from kpi_backend.core.dependencies import KpiServiceDep, SettingsDep
from kpi_backend.core.errors import KpiError
from kpi_backend.models.enums import DateRangeSelector
from kpi_backend.models.schemas import ErrorResponse, ReportInfo, ReportListResponse
from kpi_backend.services.query_catalog import REPORTS, Report


logger = logging.getLogger(__name__)

router = APIRouter()

# Mount point used to build report paths in the listing
KPI_PREFIX = "/api/kpi"

# Documented failure bodies for report endpoints
ERROR_RESPONSES = {
    status: {"model": ErrorResponse} for status in (400, 404, 500, 502)
}


def error_status(error: KpiError, strict: bool) -> int:
    """HTTP status for a report error."""
    return 500 if strict else error.status_code


async def run_report(
    service: KpiServiceDep,
    settings: SettingsDep,
    report_name: str,
    selector: Optional[DateRangeSelector],
) -> Dict[str, Any]:
    """
    Run a report and convert failures to HTTP errors.

    Raises:
        HTTPException: With the error's status and serialized detail.
    """
    try:
        return await service.run_report(report_name, selector)
    except KpiError as e:
        status = error_status(e, settings.strict_error_status)
        if status >= 500:
            logger.error(f"Error running {report_name} report: {e.message}", exc_info=True)
        else:
            logger.warning(f"{report_name} report rejected: {e.message}")
        raise HTTPException(status_code=status, detail=e.to_dict())
    except Exception as e:
        logger.error(f"Unexpected error running {report_name} report: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail={"error": e.__class__.__name__, "message": str(e)},
        )


def _make_endpoint(report: Report):
    async def endpoint(
        service: KpiServiceDep,
        settings: SettingsDep,
        dateRange: Optional[DateRangeSelector] = Query(
            default=None,
            description="Dated table to read; latest when omitted",
        ),
    ) -> Dict[str, Any]:
        return await run_report(service, settings, report.name, dateRange)

    endpoint.__name__ = f"get_{report.name}"
    endpoint.__doc__ = report.description
    return endpoint


for _report in REPORTS:
    router.add_api_route(
        f"/{_report.name}",
        _make_endpoint(_report),
        methods=["GET"],
        summary=_report.description,
        responses=ERROR_RESPONSES,
    )


@router.get("", response_model=ReportListResponse)
async def list_reports(service: KpiServiceDep) -> ReportListResponse:
    """List the registered report endpoints."""
    return ReportListResponse(
        reports=[
            ReportInfo(
                name=report.name,
                label=report.label,
                path=f"{KPI_PREFIX}/{report.name}",
                kind=report.kind,
                tablePrefix=service.resolver_for(report).prefix,
                description=report.description,
            )
            for report in service.reports
        ]
    )
