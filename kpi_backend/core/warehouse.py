"""
BigQuery warehouse client module.

Wraps ``google.cloud.bigquery.Client`` behind the two calls the report
pipeline needs: listing the tables of a dataset and running a query. The
BigQuery client is blocking, so both calls run in the Starlette threadpool
and are awaitable from request handlers.

Key Components:
- WarehouseClient: async facade over a bigquery.Client
- create_bigquery_client(): build a client from Settings credentials
- init_warehouse(): create the process-wide client at application startup
- close_warehouse(): release the client at application shutdown

Usage:
    # At application startup (in FastAPI lifespan)
    warehouse = init_warehouse()

    # In services
    table_ids = await warehouse.list_tables('analytics_403555927')
    rows = await warehouse.query('SELECT 1 AS one')

    # At application shutdown
    close_warehouse()
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi.concurrency import run_in_threadpool
from google.cloud import bigquery

from kpi_backend.core.config import Settings, get_settings


logger = logging.getLogger(__name__)


class WarehouseClient:
    """
    Async facade over a BigQuery client.

    Rows are returned as plain dicts keyed by column name. RECORD columns
    arrive as nested dicts and REPEATED columns as lists, which keeps every
    row JSON-serializable by FastAPI's encoder.
    """

    def __init__(self, client: bigquery.Client):
        self._client = client

    @property
    def project(self) -> str:
        """Project the client bills queries to."""
        return self._client.project

    async def list_tables(self, dataset: str) -> List[str]:
        """
        List the table ids of a dataset.

        Args:
            dataset: Dataset id, optionally qualified as ``project.dataset``.

        Returns:
            Table ids in the order the API returns them.

        Raises:
            google.api_core.exceptions.GoogleAPIError: If the listing fails.
        """
        return await run_in_threadpool(self._list_table_ids, dataset)

    async def query(self, sql: str) -> List[Dict[str, Any]]:
        """
        Run a query and wait for all result rows.

        Raises:
            google.api_core.exceptions.GoogleAPIError: If the job is rejected
                or fails.
        """
        return await run_in_threadpool(self._run_query, sql)

    def close(self) -> None:
        self._client.close()

    def _list_table_ids(self, dataset: str) -> List[str]:
        return [table.table_id for table in self._client.list_tables(dataset)]

    def _run_query(self, sql: str) -> List[Dict[str, Any]]:
        job = self._client.query(sql)
        rows = [dict(row.items()) for row in job.result()]
        logger.debug(f"BigQuery job {job.job_id} returned {len(rows)} rows")
        return rows


def create_bigquery_client(settings: Settings) -> bigquery.Client:
    """
    Build a BigQuery client from settings.

    Uses the service account file when GOOGLE_APPLICATION_CREDENTIALS is set,
    otherwise falls back to application default credentials.
    """
    if settings.google_application_credentials:
        return bigquery.Client.from_service_account_json(
            settings.google_application_credentials,
            project=settings.bigquery_project,
        )
    return bigquery.Client(project=settings.bigquery_project)


# =============================================================================
# Process-wide client
# =============================================================================

# None until init_warehouse() is called
_warehouse: Optional[WarehouseClient] = None


def init_warehouse(settings: Optional[Settings] = None) -> WarehouseClient:
    """
    Create the process-wide warehouse client.

    Idempotent: returns the existing client when already initialized.

    Raises:
        google.auth.exceptions.DefaultCredentialsError: If no credentials can
            be found.
    """
    global _warehouse

    if _warehouse is None:
        settings = settings or get_settings()
        _warehouse = WarehouseClient(create_bigquery_client(settings))
        logger.info(f"BigQuery client ready for project {_warehouse.project}")

    return _warehouse


def close_warehouse() -> None:
    """Close the warehouse client. Safe to call when not initialized."""
    global _warehouse

    if _warehouse is not None:
        _warehouse.close()
        _warehouse = None
