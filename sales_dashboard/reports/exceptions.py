"""
Report Errors

Two failure kinds reach the HTTP boundary: the caller sent filter values that
can never match a valid query, or the database failed while a report ran.
"""

from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError

# asyncpg raises refused or dropped connections as bare OSError subclasses
DATABASE_ERRORS = (SQLAlchemyError, OSError)


class ReportError(Exception):
    """Base class for reporting errors"""


class InvalidFilterError(ReportError):
    """A filter value failed validation before any query was issued."""

    def __init__(self, message: str, errors: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message)
        self.message = message
        self.errors = errors or []


class ReportQueryError(ReportError):
    """Executing a report query failed."""

    def __init__(self, report: str, message: str):
        super().__init__(f"Report '{report}' failed: {message}")
        self.report = report
        self.detail = message
