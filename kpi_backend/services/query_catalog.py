"""
Query Catalog Service

Static registry of the dashboard's reports. Each report binds a name (the
endpoint path segment) to a response label, the prefix of the dated tables it
reads and a query template from kpi_backend.sql.

Snapshot reports render against the single table chosen by the resolver.
Aggregate reports ignore it and read the ``<prefix>*`` wildcard table so one
query covers every daily shard.

The table identifier is the only value interpolated into query text, so it
is checked against the dated/wildcard naming pattern before rendering.
Project and dataset come from validated settings.
"""

import re
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional

from kpi_backend.core.errors import InvalidTableError, UnknownReportError
from kpi_backend.models.enums import ReportKind
from kpi_backend.sql import (
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
)


QueryTemplate = Callable[[str], str]

# <prefix><YYYYMMDD> or <prefix>*
TABLE_ID_PATTERN = re.compile(r"^[A-Za-z0-9_]+(\d{8}|\*)$")

USERS_PREFIX = "users"
EVENTS_PREFIX = "events"


@dataclass(frozen=True)
class Report:
    """
    A dashboard report.

    Attributes:
        name: Endpoint path segment, e.g. ``userRetention``.
        label: Key the rows are wrapped under in the response.
        source: Which configured table prefix the report reads
            (USERS_PREFIX or EVENTS_PREFIX).
        template: Renders query text from a qualified table reference.
        kind: Snapshot (pinned table) or aggregate (wildcard table).
        description: Shown by the report listing endpoint.
    """
    name: str
    label: str
    source: str
    template: QueryTemplate
    kind: ReportKind = ReportKind.SNAPSHOT
    description: str = ""

    @property
    def is_aggregate(self) -> bool:
        return self.kind == ReportKind.AGGREGATE


REPORTS: List[Report] = [
    Report("user", "users", USERS_PREFIX, get_users_query,
           description="User identifiers from the latest user snapshot"),
    Report("geo", "geo", USERS_PREFIX, get_geo_query,
           description="City and country of recently active users"),
    Report("mobile", "mobile", USERS_PREFIX, get_mobile_query,
           description="Device category, brand and operating system of recent users"),
    Report("userEngagement", "userEngagement", EVENTS_PREFIX, get_user_engagement_query,
           kind=ReportKind.AGGREGATE,
           description="Daily active users and engagement time"),
    Report("technology", "technology", EVENTS_PREFIX, get_technology_query,
           description="Users per device, operating system and browser"),
    Report("acquisition", "acquisition", EVENTS_PREFIX, get_acquisition_query,
           kind=ReportKind.AGGREGATE,
           description="New users per traffic source and medium"),
    Report("behaviorFlow", "behaviorFlow", EVENTS_PREFIX, get_behavior_flow_query,
           description="Most frequent page-to-page transitions"),
    Report("userRetention", "userRetention", EVENTS_PREFIX, get_user_retention_query,
           kind=ReportKind.AGGREGATE,
           description="Weekly retention cohorts"),
    Report("eventPopularity", "eventPopularity", EVENTS_PREFIX, get_event_popularity_query,
           kind=ReportKind.AGGREGATE,
           description="Most frequent events"),
    Report("trafficSourceAnalysis", "trafficSourceAnalysis", EVENTS_PREFIX,
           get_traffic_source_analysis_query,
           kind=ReportKind.AGGREGATE,
           description="Sessions and users per source, medium and campaign"),
    Report("userActivityOverTime", "userActivityOverTime", EVENTS_PREFIX,
           get_user_activity_over_time_query,
           kind=ReportKind.AGGREGATE,
           description="Daily active users and event volume"),
]


def validate_table_id(table: Optional[str]) -> str:
    """Return the table id unchanged if it follows the naming convention."""
    if not table or not TABLE_ID_PATTERN.match(table):
        raise InvalidTableError(table)
    return table


class QueryCatalog:
    """
    Report registry bound to one project, dataset and set of table prefixes.

    Args:
        project: Project owning the dataset.
        dataset: Dataset holding the dated tables.
        prefixes: Table prefix per report source, e.g.
            ``{"users": "pseudonymous_users_", "events": "events_"}``.
        reports: Reports to register; defaults to REPORTS.
    """

    def __init__(
        self,
        project: str,
        dataset: str,
        prefixes: Dict[str, str],
        reports: Iterable[Report] = REPORTS,
    ):
        self._project = project
        self._dataset = dataset
        self._prefixes = dict(prefixes)
        self._reports: Dict[str, Report] = {report.name: report for report in reports}

    @property
    def reports(self) -> List[Report]:
        return list(self._reports.values())

    def prefix_for(self, report: Report) -> str:
        """Configured table prefix the report reads."""
        return self._prefixes[report.source]

    def get(self, report_name: str) -> Report:
        """
        Look up a registered report.

        Raises:
            UnknownReportError: If no report has this name.
        """
        report = self._reports.get(report_name)
        if report is None:
            raise UnknownReportError(report_name)
        return report

    def render(self, report_name: str, table: Optional[str]) -> str:
        """
        Render a report's query text.

        Args:
            report_name: Registered report name.
            table: Resolved dated table id. Ignored by aggregate reports.

        Raises:
            UnknownReportError: If no report has this name.
            InvalidTableError: If a snapshot report gets a missing or
                malformed table id.
        """
        report = self.get(report_name)
        if report.is_aggregate:
            table = f"{self.prefix_for(report)}*"
        table = validate_table_id(table)
        return report.template(f"{self._project}.{self._dataset}.{table}")
