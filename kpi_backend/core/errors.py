"""
Error taxonomy for KPI report requests.

Every failure raised below the route layer derives from KpiError. Each class
carries the HTTP status it maps to; the router converts them to
HTTPException at the boundary (or to 500 when strict error status is enabled).
"""

from typing import Any, Dict, Optional


class KpiError(Exception):
    """Base class for report failures."""

    status_code: int = 500

    def __init__(self, message: str = "Report request failed"):
        self.message = message
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize for an HTTP error body."""
        return {"error": self.__class__.__name__, "message": self.message}


class TableNotFoundError(KpiError):
    """The dated table computed for a date range is not in the dataset."""

    status_code = 404

    def __init__(self, selector: str, table: str):
        self.selector = selector
        self.table = table
        super().__init__(f"No table '{table}' for date range '{selector}'")


class UnknownReportError(KpiError):
    """Report name is not registered in the query catalog."""

    status_code = 400

    def __init__(self, report_name: str):
        self.report_name = report_name
        super().__init__(f"Unknown report: {report_name!r}")


class InvalidTableError(KpiError):
    """Table identifier does not follow the dated or wildcard naming convention."""

    status_code = 500

    def __init__(self, table: Optional[str]):
        self.table = table
        super().__init__(f"Invalid table identifier: {table!r}")


class QueryExecutionError(KpiError):
    """The warehouse rejected or failed to execute a call.

    The underlying exception is available as ``cause`` and is also chained
    as ``__cause__`` by the raiser.
    """

    status_code = 502

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        self.cause = cause
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
