"""
Backend Services Module

Business logic for serving dashboard reports.

Services:
- table_resolver: Dated table resolution with named date ranges
- query_catalog: Report registry and query rendering
- result_cache: Query-string keyed in-memory row cache
- query_executor: Cache-aware warehouse query execution
- kpi_service: End-to-end report orchestration

All services are consumed by the API layer (kpi_backend/api/).
"""

from kpi_backend.services.table_resolver import (
    TableResolver,
    dated_table_name,
    filter_dated_tables,
    utc_today,
)

from kpi_backend.services.query_catalog import (
    QueryCatalog,
    Report,
    REPORTS,
    TABLE_ID_PATTERN,
    validate_table_id,
)

from kpi_backend.services.result_cache import (
    CacheEntry,
    ResultCache,
)

from kpi_backend.services.query_executor import (
    QueryExecutor,
    project_rows,
    wrap_rows,
)

from kpi_backend.services.kpi_service import (
    KpiService,
    build_kpi_service,
)

__all__ = [
    # Table resolution
    'TableResolver',
    'dated_table_name',
    'filter_dated_tables',
    'utc_today',
    # Query catalog
    'QueryCatalog',
    'Report',
    'REPORTS',
    'TABLE_ID_PATTERN',
    'validate_table_id',
    # Result cache
    'CacheEntry',
    'ResultCache',
    # Execution
    'QueryExecutor',
    'project_rows',
    'wrap_rows',
    # Orchestration
    'KpiService',
    'build_kpi_service',
]
