"""
FastAPI dependency injection module for the KPI proxy backend.

Key Dependencies Provided:
- get_settings_dependency: Returns the cached Settings singleton
- get_kpi_service: Returns the KpiService built at application startup
- SettingsDep / KpiServiceDep: Annotated aliases for endpoint signatures

Tests replace either dependency through ``app.dependency_overrides``:

    app.dependency_overrides[get_kpi_service] = lambda: service
"""

from typing import Annotated

from fastapi import Depends, HTTPException, Request

from kpi_backend.core.config import Settings, get_settings
from kpi_backend.services.kpi_service import KpiService


def get_settings_dependency() -> Settings:
    """Return the Settings singleton."""
    return get_settings()


def get_kpi_service(request: Request) -> KpiService:
    """
    Return the application's KpiService.

    The service, and with it the result cache, is created once in the
    application lifespan and stored on ``app.state``.

    Raises:
        HTTPException 503: If the service could not be built at startup.
    """
    service = getattr(request.app.state, 'kpi_service', None)
    if service is None:
        raise HTTPException(status_code=503, detail="Report service is not available")
    return service


SettingsDep = Annotated[Settings, Depends(get_settings_dependency)]

KpiServiceDep = Annotated[KpiService, Depends(get_kpi_service)]
