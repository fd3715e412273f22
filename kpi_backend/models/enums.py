"""
Enumeration definitions for the KPI proxy backend.

All enums inherit from both `str` and `Enum` so FastAPI can validate them as
query parameters and serialize them in responses.
"""

from datetime import timedelta
from enum import Enum
from typing import Optional


class DateRangeSelector(str, Enum):
    """
    Named date range selecting which dated table a report reads.

    Values: ['latest', '7days', '3months']

    - latest: Most recent dated table in the dataset
    - 7days: Table dated exactly 7 days before today
    - 3months: Table dated exactly 90 days before today
    """
    LATEST = "latest"
    SEVEN_DAYS = "7days"
    THREE_MONTHS = "3months"

    @property
    def offset(self) -> Optional[timedelta]:
        """Distance back from today, or None for the latest table."""
        return _SELECTOR_OFFSETS.get(self)


_SELECTOR_OFFSETS = {
    DateRangeSelector.SEVEN_DAYS: timedelta(days=7),
    DateRangeSelector.THREE_MONTHS: timedelta(days=90),
}


class ReportKind(str, Enum):
    """
    How a report chooses its source table.

    - snapshot: Pinned to the single resolved dated table
    - aggregate: Spans every dated shard through a wildcard table
    """
    SNAPSHOT = "snapshot"
    AGGREGATE = "aggregate"
