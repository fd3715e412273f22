"""
SQL Query Module for the KPI proxy backend.

Provides the BigQuery report templates used by the query catalog. All query
functions are re-exported here so callers can import from kpi_backend.sql.

Example usage:
    from kpi_backend.sql import get_geo_query

    sql = get_geo_query('my-project.analytics_123.pseudonymous_users_20240115')
"""

from kpi_backend.sql.kpi_queries import (
    get_users_query,
    get_geo_query,
    get_mobile_query,
    get_technology_query,
    get_behavior_flow_query,
    get_user_engagement_query,
    get_acquisition_query,
    get_user_retention_query,
    get_event_popularity_query,
    get_traffic_source_analysis_query,
    get_user_activity_over_time_query,
    DEFAULT_ROW_LIMIT,
    DAILY_SHARD_FILTER,
)

__all__ = [
    # User snapshot queries
    'get_users_query',
    'get_geo_query',
    'get_mobile_query',
    # Event snapshot queries
    'get_technology_query',
    'get_behavior_flow_query',
    # Aggregate queries
    'get_user_engagement_query',
    'get_acquisition_query',
    'get_user_retention_query',
    'get_event_popularity_query',
    'get_traffic_source_analysis_query',
    'get_user_activity_over_time_query',
    'DEFAULT_ROW_LIMIT',
    'DAILY_SHARD_FILTER',
]
