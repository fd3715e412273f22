"""
KPI Proxy Backend Package.

FastAPI service that proxies analytics dashboard requests to BigQuery.
Resolves the dated GA4 export table to query, renders one of a fixed set
of report queries, caches results in memory and returns JSON.

Subpackages:
    - api: FastAPI route handlers
    - core: Configuration, errors, warehouse client and dependencies
    - models: Enums and response schemas
    - services: Table resolution, query catalog, result cache and executor
    - sql: Report query templates
"""

__version__ = "1.0.0"
