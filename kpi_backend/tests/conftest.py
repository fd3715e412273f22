"""
Pytest Configuration and Shared Fixtures for KPI Proxy Backend Tests.

Provides:
- A mock warehouse client standing in for the BigQuery wrapper
- Settings built without reading the environment
- A fixed "today" so date-range resolution is deterministic
- A fully wired KpiService over the mock warehouse
- Sample table listings and rows following the GA4 export naming
"""

from datetime import date
from typing import Any, Dict, List
from unittest.mock import AsyncMock, Mock

import pytest

from kpi_backend.core.config import Settings
from kpi_backend.services.kpi_service import KpiService
from kpi_backend.services.query_catalog import EVENTS_PREFIX, USERS_PREFIX, QueryCatalog
from kpi_backend.services.query_executor import QueryExecutor
from kpi_backend.services.result_cache import ResultCache
from kpi_backend.services.table_resolver import TableResolver


TEST_PROJECT = 'test-project'
TEST_DATASET = 'analytics_123'


# ============================================================
# PYTEST HOOKS
# ============================================================

def pytest_configure(config) -> None:
    """Register custom markers."""
    config.addinivalue_line(
        'markers',
        'integration: marks tests requiring BigQuery connectivity'
    )


# ============================================================
# SAMPLE DATA FIXTURES
# ============================================================

@pytest.fixture
def today() -> date:
    """Fixed current date used by resolvers under test."""
    return date(2024, 1, 20)


@pytest.fixture
def event_tables() -> List[str]:
    """Weekly event shards, out of order, plus tables that must be ignored."""
    return [
        'events_20240108',
        'events_20240115',
        'events_20240101',
        'events_intraday_20240119',
        'pseudonymous_users_20240119',
    ]


@pytest.fixture
def table_listing(event_tables: List[str]) -> List[str]:
    """Full dataset listing with user and event shards."""
    return event_tables + [
        'pseudonymous_users_20240118',
        'pseudonymous_users_20240113',
        'pseudonymous_users_20231021',
    ]


@pytest.fixture
def geo_rows() -> List[Dict[str, Any]]:
    """Rows as returned by the warehouse wrapper for the geo report."""
    return [
        {'geo': {'city': 'Cape Town', 'country': 'South Africa'}, 'city': 'Cape Town', 'country': 'South Africa'},
        {'geo': {'city': 'Berlin', 'country': 'Germany'}, 'city': 'Berlin', 'country': 'Germany'},
        {'geo': {'city': 'Austin', 'country': 'United States'}, 'city': 'Austin', 'country': 'United States'},
    ]


# ============================================================
# WAREHOUSE MOCK FIXTURE
# ============================================================

@pytest.fixture
def mock_warehouse(table_listing: List[str], geo_rows: List[Dict[str, Any]]) -> Mock:
    """
    Mock of kpi_backend.core.warehouse.WarehouseClient.

    Mocked Methods:
        - list_tables(dataset): Returns ``table_listing``
        - query(sql): Returns ``geo_rows``

    Usage:
        async def test_query(mock_warehouse):
            mock_warehouse.query.return_value = [{'event_name': 'page_view'}]
            mock_warehouse.query.side_effect = RuntimeError('quota exceeded')
    """
    warehouse = Mock()
    warehouse.project = TEST_PROJECT
    warehouse.list_tables = AsyncMock(return_value=list(table_listing))
    warehouse.query = AsyncMock(return_value=list(geo_rows))
    return warehouse


# ============================================================
# SETTINGS AND SERVICE FIXTURES
# ============================================================

@pytest.fixture
def test_settings() -> Settings:
    """Settings for tests, isolated from the environment and .env files."""
    return Settings(
        _env_file=None,
        bigquery_dataset=TEST_DATASET,
        bigquery_project=TEST_PROJECT,
    )


@pytest.fixture
def result_cache() -> ResultCache:
    """Fresh unbounded cache."""
    return ResultCache()


@pytest.fixture
def catalog(test_settings: Settings) -> QueryCatalog:
    return QueryCatalog(
        TEST_PROJECT,
        TEST_DATASET,
        {
            USERS_PREFIX: test_settings.users_table_prefix,
            EVENTS_PREFIX: test_settings.events_table_prefix,
        },
    )


@pytest.fixture
def kpi_service(
    mock_warehouse: Mock,
    result_cache: ResultCache,
    catalog: QueryCatalog,
    test_settings: Settings,
    today: date,
) -> KpiService:
    """KpiService over the mock warehouse with resolvers pinned to ``today``."""
    dataset = f"{TEST_PROJECT}.{TEST_DATASET}"
    resolvers = {
        prefix: TableResolver(mock_warehouse, dataset, prefix, today=lambda: today)
        for prefix in (test_settings.users_table_prefix, test_settings.events_table_prefix)
    }
    return KpiService(
        catalog=catalog,
        executor=QueryExecutor(mock_warehouse, result_cache),
        resolvers=resolvers,
    )
