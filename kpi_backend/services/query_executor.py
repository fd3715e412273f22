"""
Query Executor Service

Runs rendered report queries against the warehouse through the result cache
and shapes the rows into the wire format: every row is wrapped as
``{label: row}``.

Execution flow:
1. Cache hit: project each cached record onto ``label``; no warehouse call.
2. Cache miss: run the query, wrap each row, store the wrapped rows under the
   exact query string and return them.
3. Warehouse failure: raise QueryExecutionError with the cause chained.
   Nothing is cached and nothing is retried.

With single-flight enabled, concurrent misses on the same query string wait
for the one in-flight warehouse call and share its rows or its error.
Without it, each miss queries the warehouse and the last write wins.
"""

import asyncio
import logging
from typing import Any, Dict, List

from kpi_backend.core.errors import QueryExecutionError
from kpi_backend.core.warehouse import WarehouseClient
from kpi_backend.services.result_cache import ResultCache


logger = logging.getLogger(__name__)


def wrap_rows(rows: List[Dict[str, Any]], label: str) -> List[Dict[str, Any]]:
    """Wrap each warehouse row under the report label."""
    return [{label: row} for row in rows]


def project_rows(records: List[Dict[str, Any]], label: str) -> List[Dict[str, Any]]:
    """Project cached records onto their label-keyed value."""
    return [{label: record[label]} for record in records]


class QueryExecutor:
    """
    Cache-aware warehouse query runner.

    Args:
        warehouse: Client the queries are issued to.
        cache: Result cache shared by every request of the application.
        single_flight: Share one warehouse call between concurrent identical
            misses.
    """

    def __init__(
        self,
        warehouse: WarehouseClient,
        cache: ResultCache,
        single_flight: bool = False,
    ):
        self._warehouse = warehouse
        self._cache = cache
        self._single_flight = single_flight
        self._in_flight: Dict[str, "asyncio.Future[List[Dict[str, Any]]]"] = {}

    async def execute(self, query: str, label: str) -> List[Dict[str, Any]]:
        """
        Execute a query and return its label-wrapped rows.

        Args:
            query: Rendered query text; also the cache key.
            label: Key each row is wrapped under.

        Returns:
            One ``{label: row}`` dict per result row.

        Raises:
            QueryExecutionError: If the warehouse call fails.
        """
        cached = self._cache.get(query)
        if cached is not None:
            logger.debug(f"Cache hit for {label} ({len(cached)} rows)")
            return project_rows(cached, label)

        if not self._single_flight:
            return await self._fetch(query, label)

        pending = self._in_flight.get(query)
        if pending is not None:
            logger.debug(f"Joining in-flight {label} query")
            # A cancelled follower must not cancel the shared future
            return project_rows(await asyncio.shield(pending), label)

        future: "asyncio.Future[List[Dict[str, Any]]]" = asyncio.get_running_loop().create_future()
        self._in_flight[query] = future
        try:
            wrapped = await self._fetch(query, label)
        except Exception as e:
            if not future.done():
                future.set_exception(e)
                # Mark retrieved so a leader without followers does not log a warning
                future.exception()
            raise
        except BaseException:
            if not future.done():
                future.cancel()
            raise
        else:
            if not future.done():
                future.set_result(wrapped)
            return wrapped
        finally:
            self._in_flight.pop(query, None)

    async def _fetch(self, query: str, label: str) -> List[Dict[str, Any]]:
        logger.debug(f"Cache miss for {label}, querying warehouse")
        try:
            rows = await self._warehouse.query(query)
        except Exception as e:
            raise QueryExecutionError(f"Error running {label} query", cause=e) from e

        wrapped = wrap_rows(rows, label)
        self._cache.put(query, wrapped)
        logger.info(f"Cached {len(wrapped)} {label} rows")
        return wrapped
