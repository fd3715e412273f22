"""
Core infrastructure package for the KPI proxy backend.

Provides:
- Configuration management via pydantic-settings
- The BigQuery warehouse client and its process lifecycle
- The report error taxonomy

FastAPI dependencies live in kpi_backend.core.dependencies. They are not
re-exported here because that module imports the service layer, which in
turn imports this package.

Usage Examples:
    from kpi_backend.core import get_settings, init_warehouse
    from kpi_backend.core.dependencies import KpiServiceDep
"""

from kpi_backend.core.config import Settings, get_settings

from kpi_backend.core.errors import (
    KpiError,
    TableNotFoundError,
    UnknownReportError,
    InvalidTableError,
    QueryExecutionError,
)

from kpi_backend.core.warehouse import (
    WarehouseClient,
    create_bigquery_client,
    init_warehouse,
    close_warehouse,
)

__all__ = [
    # Configuration
    'Settings',
    'get_settings',
    # Errors
    'KpiError',
    'TableNotFoundError',
    'UnknownReportError',
    'InvalidTableError',
    'QueryExecutionError',
    # Warehouse
    'WarehouseClient',
    'create_bigquery_client',
    'init_warehouse',
    'close_warehouse',
]
