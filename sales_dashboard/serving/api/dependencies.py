"""
Request Dependencies

Every report endpoint accepts the same optional query parameters. They arrive
as raw strings so a blank value (``?year=``) can mean "no restriction" instead
of failing integer parsing; FilterSet.parse() does the validation.
"""

from typing import Optional

from fastapi import Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from sales_dashboard.database.connection import get_db_dependency
from sales_dashboard.reports.filters import FilterSet
from sales_dashboard.reports.queries import ReportQueries


def get_filters(
    region: Optional[str] = Query(None, description="Country region, e.g. Europe"),
    country: Optional[str] = Query(None, description="Country name"),
    channel: Optional[str] = Query(None, description="Channel description"),
    year: Optional[str] = Query(None, description="Calendar year"),
    month_from: Optional[str] = Query(None, alias="monthFrom", description="First month number (1-12), inclusive"),
    month_to: Optional[str] = Query(None, alias="monthTo", description="Last month number (1-12), inclusive"),
    category: Optional[str] = Query(None, description="Product category"),
) -> FilterSet:
    """Parse the shared report query parameters into a FilterSet."""
    return FilterSet.parse(
        region=region,
        country=country,
        channel=channel,
        year=year,
        month_from=month_from,
        month_to=month_to,
        category=category,
    )


def get_report_queries(db: AsyncSession = Depends(get_db_dependency)) -> ReportQueries:
    """Report catalog bound to the request's session."""
    return ReportQueries(db)
