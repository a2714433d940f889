"""
Reports Module
"""
from .exceptions import ReportError, InvalidFilterError, ReportQueryError
from .filters import FilterSet, Condition, build_conditions, build_predicate
from .options import load_filter_options
from .queries import ReportQueries

__all__ = [
    "ReportError",
    "InvalidFilterError",
    "ReportQueryError",
    "FilterSet",
    "Condition",
    "build_conditions",
    "build_predicate",
    "load_filter_options",
    "ReportQueries",
]
