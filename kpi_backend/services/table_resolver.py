"""
Table Resolver Service

Chooses which dated table a report reads. GA4 exports one table per day,
named ``<prefix><YYYYMMDD>`` (e.g. ``events_20240115``). Because the date
suffix is fixed-width and zero-padded, sorting names in descending
lexicographic order puts the most recent day first.

Resolution policy:
- No selector (or ``latest``): the most recent dated table, or None when the
  dataset has none. Callers treat None as "no data available".
- ``7days`` / ``3months``: the table dated exactly 7 / 90 days before today.
  A missing table raises TableNotFoundError; there is no fallback to the
  latest table or to a nearby date.
"""

import logging
import re
from datetime import date, datetime, timezone
from typing import Callable, List, Optional

from kpi_backend.core.errors import QueryExecutionError, TableNotFoundError
from kpi_backend.core.warehouse import WarehouseClient
from kpi_backend.models.enums import DateRangeSelector


logger = logging.getLogger(__name__)

# Dated shard suffix: exactly eight digits
_DATE_SUFFIX = re.compile(r"^\d{8}$")


def utc_today() -> date:
    """Current calendar date in UTC."""
    return datetime.now(timezone.utc).date()


def dated_table_name(prefix: str, day: date) -> str:
    """Format the dated table name for a day, e.g. ``events_20240113``."""
    return f"{prefix}{day:%Y%m%d}"


def filter_dated_tables(table_ids: List[str], prefix: str) -> List[str]:
    """
    Keep the dated tables for a prefix, most recent first.

    Tables that share the prefix but are not dated shards (such as
    ``events_intraday_20240115``) are dropped.
    """
    matches = [
        table_id for table_id in table_ids
        if table_id.startswith(prefix) and _DATE_SUFFIX.match(table_id[len(prefix):])
    ]
    return sorted(matches, reverse=True)


class TableResolver:
    """
    Resolves the dated table for one table prefix in one dataset.

    Args:
        warehouse: Client used for the table listing.
        dataset: Dataset to list, optionally ``project.dataset``.
        prefix: Table prefix including its trailing underscore.
        today: Clock returning the current date; defaults to UTC today.
    """

    def __init__(
        self,
        warehouse: WarehouseClient,
        dataset: str,
        prefix: str,
        today: Callable[[], date] = utc_today,
    ):
        self._warehouse = warehouse
        self._dataset = dataset
        self._prefix = prefix
        self._today = today

    @property
    def prefix(self) -> str:
        return self._prefix

    async def list_dated_tables(self) -> List[str]:
        """
        List the dataset's dated tables for this prefix, most recent first.

        Raises:
            QueryExecutionError: If the warehouse listing fails.
        """
        try:
            table_ids = await self._warehouse.list_tables(self._dataset)
        except Exception as e:
            raise QueryExecutionError(
                f"Failed to list tables in dataset {self._dataset}", cause=e
            ) from e
        return filter_dated_tables(table_ids, self._prefix)

    def target_table(self, selector: DateRangeSelector) -> str:
        """Dated table name a non-latest selector points at, relative to today."""
        return dated_table_name(self._prefix, self._today() - selector.offset)

    async def resolve(self, selector: Optional[DateRangeSelector] = None) -> Optional[str]:
        """
        Resolve the table identifier for a date range selector.

        Args:
            selector: Named date range; None means the latest table.

        Returns:
            The table id, or None when no selector is given and no dated
            table exists.

        Raises:
            TableNotFoundError: If the table for the selector's date is absent.
            QueryExecutionError: If the warehouse listing fails.
        """
        tables = await self.list_dated_tables()

        if selector is None or selector.offset is None:
            if not tables:
                logger.warning(f"No tables with prefix {self._prefix!r} in {self._dataset}")
                return None
            return tables[0]

        target = self.target_table(selector)
        if target not in tables:
            raise TableNotFoundError(selector.value, target)
        return target
