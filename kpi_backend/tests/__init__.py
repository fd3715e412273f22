'''
KPI Proxy Backend Test Suite

Test Modules:
-------------
- test_table_resolver.py: Dated table resolution
  - Descending lexicographic order equals chronological order
  - Latest table, empty dataset
  - 7days / 3months selectors, strict miss without fallback

- test_query_catalog.py: Report registry and rendering
  - Snapshot vs wildcard sources
  - Table identifier validation
  - Unknown report names

- test_result_cache.py: In-memory result cache
  - Exact key matching, last write wins
  - Optional capacity and TTL limits

- test_query_executor.py: Cache-aware execution
  - Single warehouse call for repeated queries
  - Row labeling, error wrapping, single-flight

- test_kpi_service.py: End-to-end report orchestration
- test_kpi_api.py: HTTP routes, status codes and error bodies
- test_warehouse.py: BigQuery client wrapper
- test_config.py: Settings validation

Running Tests:
--------------
    pip install -e ".[test]"
    pytest kpi_backend/tests/ -v

Configuration:
--------------
See conftest.py for shared fixtures.
'''

__all__ = []
