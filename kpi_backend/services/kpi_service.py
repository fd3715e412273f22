"""
KPI report service.

Orchestrates one report request: catalog lookup, table resolution, query
rendering and execution. The report name is checked before any warehouse
call so an unknown report never reaches BigQuery.
"""

import logging
from typing import Any, Dict, List, Optional

from kpi_backend.core.config import Settings
from kpi_backend.core.warehouse import WarehouseClient
from kpi_backend.models.enums import DateRangeSelector
from kpi_backend.services.query_catalog import (
    EVENTS_PREFIX,
    USERS_PREFIX,
    QueryCatalog,
    Report,
)
from kpi_backend.services.query_executor import QueryExecutor
from kpi_backend.services.result_cache import ResultCache
from kpi_backend.services.table_resolver import TableResolver


logger = logging.getLogger(__name__)


class KpiService:
    """Runs dashboard reports end to end."""

    def __init__(
        self,
        catalog: QueryCatalog,
        executor: QueryExecutor,
        resolvers: Dict[str, TableResolver],
    ):
        self._catalog = catalog
        self._executor = executor
        self._resolvers = resolvers

    @property
    def reports(self) -> List[Report]:
        return self._catalog.reports

    def resolver_for(self, report: Report) -> TableResolver:
        return self._resolvers[self._catalog.prefix_for(report)]

    async def run_report(
        self,
        report_name: str,
        selector: Optional[DateRangeSelector] = None,
    ) -> Dict[str, Any]:
        """
        Run a report and build its response body.

        Args:
            report_name: Registered report name.
            selector: Date range selecting the dated table; None for latest.

        Returns:
            ``{label: rows}``. Snapshot reports return an empty row list when
            the dataset has no dated table yet.

        Raises:
            UnknownReportError: If the report is not registered.
            TableNotFoundError: If the selector's dated table is absent.
            QueryExecutionError: If a warehouse call fails.
        """
        report = self._catalog.get(report_name)

        table = await self.resolver_for(report).resolve(selector)
        if table is None and not report.is_aggregate:
            logger.warning(f"No data available for {report.name} report")
            return {report.label: []}

        query = self._catalog.render(report.name, table)
        rows = await self._executor.execute(query, report.label)
        logger.info(f"{report.name} report served {len(rows)} rows from {table}")
        return {report.label: rows}


def build_kpi_service(
    settings: Settings,
    warehouse: WarehouseClient,
    cache: Optional[ResultCache] = None,
) -> KpiService:
    """
    Wire a KpiService from settings.

    Args:
        settings: Application settings.
        warehouse: Client used for listings and queries.
        cache: Result cache; a new one sized from settings when omitted.

    Raises:
        ValueError: If BIGQUERY_DATASET is not configured.
    """
    if not settings.bigquery_dataset:
        raise ValueError("BIGQUERY_DATASET is not set")

    project = settings.bigquery_project or warehouse.project
    prefixes = {
        USERS_PREFIX: settings.users_table_prefix,
        EVENTS_PREFIX: settings.events_table_prefix,
    }

    if cache is None:
        cache = ResultCache(
            max_entries=settings.cache_max_entries,
            ttl_seconds=settings.cache_ttl_seconds,
        )

    dataset = f"{project}.{settings.bigquery_dataset}"
    resolvers = {
        prefix: TableResolver(warehouse, dataset, prefix)
        for prefix in set(prefixes.values())
    }

    return KpiService(
        catalog=QueryCatalog(project, settings.bigquery_dataset, prefixes),
        executor=QueryExecutor(warehouse, cache, single_flight=settings.single_flight),
        resolvers=resolvers,
    )
