"""
Tests for end-to-end report orchestration in KpiService.

Scenarios use a listing of weekly shards and a fixed date of 2024-01-20.
"""

from typing import Any, Dict, List
from unittest.mock import Mock

import pytest

from kpi_backend.core.config import Settings
from kpi_backend.core.errors import QueryExecutionError, TableNotFoundError, UnknownReportError
from kpi_backend.models.enums import DateRangeSelector
from kpi_backend.services.kpi_service import KpiService, build_kpi_service
from kpi_backend.services.result_cache import ResultCache
from kpi_backend.tests.conftest import TEST_DATASET, TEST_PROJECT


# =============================================================================
# TEST CLASS: run_report
# =============================================================================

class TestRunReport:

    @pytest.mark.asyncio
    async def test_snapshot_report_uses_latest_table(
        self,
        kpi_service: KpiService,
        mock_warehouse: Mock,
        geo_rows: List[Dict[str, Any]],
    ):
        body = await kpi_service.run_report('geo')

        assert list(body.keys()) == ['geo']
        assert body['geo'] == [{'geo': row} for row in geo_rows]
        sql = mock_warehouse.query.await_args.args[0]
        assert f'{TEST_PROJECT}.{TEST_DATASET}.pseudonymous_users_20240119' in sql

    @pytest.mark.asyncio
    async def test_user_report_label(self, kpi_service: KpiService):
        body = await kpi_service.run_report('user')
        assert list(body.keys()) == ['users']

    @pytest.mark.asyncio
    async def test_event_snapshot_latest(self, kpi_service: KpiService, mock_warehouse: Mock):
        await kpi_service.run_report('technology')
        sql = mock_warehouse.query.await_args.args[0]
        assert 'events_20240115' in sql

    @pytest.mark.asyncio
    async def test_date_range_miss_raises_before_query(self, kpi_service: KpiService, mock_warehouse: Mock):
        """events_20240113 is absent, so the request fails and BigQuery is never queried."""
        with pytest.raises(TableNotFoundError) as exc_info:
            await kpi_service.run_report('technology', DateRangeSelector.SEVEN_DAYS)

        assert exc_info.value.table == 'events_20240113'
        mock_warehouse.query.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_date_range_hit(self, kpi_service: KpiService, mock_warehouse: Mock):
        """pseudonymous_users_20240113 exists for 7days before 2024-01-20."""
        await kpi_service.run_report('mobile', DateRangeSelector.SEVEN_DAYS)
        sql = mock_warehouse.query.await_args.args[0]
        assert 'pseudonymous_users_20240113' in sql

    @pytest.mark.asyncio
    async def test_unknown_report_fails_before_warehouse(self, kpi_service: KpiService, mock_warehouse: Mock):
        with pytest.raises(UnknownReportError):
            await kpi_service.run_report('revenue')

        mock_warehouse.list_tables.assert_not_awaited()
        mock_warehouse.query.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_snapshot_without_tables_returns_empty(self, kpi_service: KpiService, mock_warehouse: Mock):
        mock_warehouse.list_tables.return_value = []

        assert await kpi_service.run_report('geo') == {'geo': []}
        mock_warehouse.query.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_aggregate_report_reads_wildcard(self, kpi_service: KpiService, mock_warehouse: Mock):
        await kpi_service.run_report('userRetention')
        sql = mock_warehouse.query.await_args.args[0]
        assert f'`{TEST_PROJECT}.{TEST_DATASET}.events_*`' in sql

    @pytest.mark.asyncio
    async def test_aggregate_report_runs_without_dated_tables(self, kpi_service: KpiService, mock_warehouse: Mock):
        mock_warehouse.list_tables.return_value = []
        body = await kpi_service.run_report('eventPopularity')
        assert 'eventPopularity' in body
        mock_warehouse.query.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_repeat_request_served_from_cache(
        self,
        kpi_service: KpiService,
        mock_warehouse: Mock,
        result_cache: ResultCache,
    ):
        first = await kpi_service.run_report('geo')
        second = await kpi_service.run_report('geo')

        assert second == first
        assert mock_warehouse.query.await_count == 1
        assert len(result_cache) == 1

    @pytest.mark.asyncio
    async def test_warehouse_failure_propagates(self, kpi_service: KpiService, mock_warehouse: Mock):
        mock_warehouse.query.side_effect = RuntimeError('Syntax error: Unexpected keyword')
        with pytest.raises(QueryExecutionError):
            await kpi_service.run_report('acquisition')


# =============================================================================
# TEST CLASS: build_kpi_service
# =============================================================================

class TestBuildKpiService:

    def test_builds_one_resolver_per_prefix(self, test_settings: Settings, mock_warehouse: Mock):
        service = build_kpi_service(test_settings, mock_warehouse)

        prefixes = {service.resolver_for(report).prefix for report in service.reports}
        assert prefixes == {'pseudonymous_users_', 'events_'}
        assert len(service.reports) == 11

    def test_uses_client_project_when_unset(self, mock_warehouse: Mock):
        settings = Settings(_env_file=None, bigquery_dataset=TEST_DATASET)
        mock_warehouse.project = 'client-project'

        service = build_kpi_service(settings, mock_warehouse)

        sql = service._catalog.render('eventPopularity', None)
        assert '`client-project.analytics_123.events_*`' in sql

    def test_requires_dataset(self, mock_warehouse: Mock):
        with pytest.raises(ValueError):
            build_kpi_service(Settings(_env_file=None), mock_warehouse)

    @pytest.mark.asyncio
    async def test_injected_cache_is_used(self, test_settings: Settings, mock_warehouse: Mock):
        cache = ResultCache()
        service = build_kpi_service(test_settings, mock_warehouse, cache=cache)

        await service.run_report('eventPopularity')

        assert len(cache) == 1
