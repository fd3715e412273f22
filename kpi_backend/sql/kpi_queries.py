"""
KPI Report Queries for the KPI proxy backend.

BigQuery Standard SQL templates over the GA4 export dataset. Each function
receives a fully qualified table reference (``project.dataset.table``) and
returns the query text; nothing else is interpolated.

Two kinds of source tables are read:
- Snapshot reports are pinned to one dated table, e.g.
  ``pseudonymous_users_20240115`` or ``events_20240115``.
- Aggregate reports read the wildcard table ``events_*`` so a single query
  spans every daily shard. Intraday shards are filtered out through
  ``_TABLE_SUFFIX``.
"""


# =============================================================================
# CONSTANTS
# =============================================================================

# Rows returned by snapshot and ranking reports
DEFAULT_ROW_LIMIT: int = 100

# Restricts wildcard reads to daily shards (events_* also matches
# events_intraday_YYYYMMDD)
DAILY_SHARD_FILTER: str = "REGEXP_CONTAINS(_TABLE_SUFFIX, r'^[0-9]{8}$')"


# =============================================================================
# USER SNAPSHOT QUERIES (pseudonymous_users_YYYYMMDD)
# =============================================================================

def get_users_query(source: str) -> str:
    """User identifiers from the user snapshot table."""
    return f"""
    SELECT
      user_id,
      user_pseudo_id
    FROM `{source}`
    LIMIT {DEFAULT_ROW_LIMIT}
    """


def get_geo_query(source: str) -> str:
    """Location of the most recently updated users."""
    return f"""
    SELECT
      geo,
      geo.city,
      geo.country
    FROM `{source}`
    ORDER BY last_updated_date DESC
    LIMIT {DEFAULT_ROW_LIMIT}
    """


def get_mobile_query(source: str) -> str:
    """Device details of the most recently updated users."""
    return f"""
    SELECT
      device,
      device.category,
      device.mobile_brand_name,
      device.operating_system
    FROM `{source}`
    ORDER BY last_updated_date DESC
    LIMIT {DEFAULT_ROW_LIMIT}
    """


# =============================================================================
# EVENT SNAPSHOT QUERIES (events_YYYYMMDD)
# =============================================================================

def get_technology_query(source: str) -> str:
    """
    Users per device category, operating system and browser for one day.

    Ordered by user count so the dashboard can show the top combinations.
    """
    return f"""
    SELECT
      device.category AS device_category,
      device.operating_system AS operating_system,
      device.web_info.browser AS browser,
      COUNT(DISTINCT user_pseudo_id) AS users
    FROM `{source}`
    GROUP BY device_category, operating_system, browser
    ORDER BY users DESC
    LIMIT {DEFAULT_ROW_LIMIT}
    """


def get_behavior_flow_query(source: str) -> str:
    """
    Page-to-page transitions for one day.

    Each user's page_view events are ordered by timestamp and paired with the
    next page viewed; the most frequent pairs are returned.
    """
    return f"""
    WITH page_views AS (
      SELECT
        user_pseudo_id,
        event_timestamp,
        (SELECT value.string_value FROM UNNEST(event_params) WHERE key = 'page_location') AS page
      FROM `{source}`
      WHERE event_name = 'page_view'
    ),
    transitions AS (
      SELECT
        page AS from_page,
        LEAD(page) OVER (PARTITION BY user_pseudo_id ORDER BY event_timestamp) AS to_page
      FROM page_views
    )
    SELECT
      from_page,
      to_page,
      COUNT(*) AS transitions
    FROM transitions
    WHERE to_page IS NOT NULL
    GROUP BY from_page, to_page
    ORDER BY transitions DESC
    LIMIT {DEFAULT_ROW_LIMIT}
    """


# =============================================================================
# AGGREGATE QUERIES (events_*)
# =============================================================================

def get_user_engagement_query(source: str) -> str:
    """Daily active users and total engagement time across all shards."""
    return f"""
    SELECT
      event_date,
      COUNT(DISTINCT user_pseudo_id) AS active_users,
      SUM(
        (SELECT value.int_value FROM UNNEST(event_params) WHERE key = 'engagement_time_msec')
      ) / 1000 AS engagement_seconds
    FROM `{source}`
    WHERE {DAILY_SHARD_FILTER}
    GROUP BY event_date
    ORDER BY event_date
    """


def get_acquisition_query(source: str) -> str:
    """New users per traffic source and medium, from first_visit events."""
    return f"""
    SELECT
      traffic_source.source AS source,
      traffic_source.medium AS medium,
      COUNT(DISTINCT user_pseudo_id) AS new_users
    FROM `{source}`
    WHERE event_name = 'first_visit'
      AND {DAILY_SHARD_FILTER}
    GROUP BY source, medium
    ORDER BY new_users DESC
    LIMIT {DEFAULT_ROW_LIMIT}
    """


def get_user_retention_query(source: str) -> str:
    """
    Weekly retention cohorts.

    Users are assigned to the week of their first event; each row counts the
    cohort's users active N weeks later (week 0 is the cohort itself).
    """
    return f"""
    WITH first_seen AS (
      SELECT
        user_pseudo_id,
        DATE_TRUNC(PARSE_DATE('%Y%m%d', MIN(event_date)), WEEK) AS cohort_week
      FROM `{source}`
      WHERE {DAILY_SHARD_FILTER}
      GROUP BY user_pseudo_id
    ),
    activity AS (
      SELECT DISTINCT
        user_pseudo_id,
        DATE_TRUNC(PARSE_DATE('%Y%m%d', event_date), WEEK) AS activity_week
      FROM `{source}`
      WHERE {DAILY_SHARD_FILTER}
    )
    SELECT
      f.cohort_week,
      DATE_DIFF(a.activity_week, f.cohort_week, WEEK) AS weeks_since_first_visit,
      COUNT(DISTINCT a.user_pseudo_id) AS users
    FROM first_seen f
    JOIN activity a USING (user_pseudo_id)
    GROUP BY f.cohort_week, weeks_since_first_visit
    ORDER BY f.cohort_week, weeks_since_first_visit
    """


def get_event_popularity_query(source: str) -> str:
    """Most frequent event names with their distinct user counts."""
    return f"""
    SELECT
      event_name,
      COUNT(*) AS event_count,
      COUNT(DISTINCT user_pseudo_id) AS users
    FROM `{source}`
    WHERE {DAILY_SHARD_FILTER}
    GROUP BY event_name
    ORDER BY event_count DESC
    LIMIT {DEFAULT_ROW_LIMIT}
    """


def get_traffic_source_analysis_query(source: str) -> str:
    """Sessions and users per source, medium and campaign."""
    return f"""
    SELECT
      traffic_source.source AS source,
      traffic_source.medium AS medium,
      traffic_source.name AS campaign,
      COUNTIF(event_name = 'session_start') AS sessions,
      COUNT(DISTINCT user_pseudo_id) AS users
    FROM `{source}`
    WHERE {DAILY_SHARD_FILTER}
    GROUP BY source, medium, campaign
    ORDER BY sessions DESC
    LIMIT {DEFAULT_ROW_LIMIT}
    """


def get_user_activity_over_time_query(source: str) -> str:
    """Daily active users and event volume."""
    return f"""
    SELECT
      PARSE_DATE('%Y%m%d', event_date) AS day,
      COUNT(DISTINCT user_pseudo_id) AS active_users,
      COUNT(*) AS events
    FROM `{source}`
    WHERE {DAILY_SHARD_FILTER}
    GROUP BY day
    ORDER BY day
    """
