"""
Filter Options API Endpoint

Option lists for the dashboard's filter controls.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from sales_dashboard.database.connection import get_db_dependency
from sales_dashboard.reports.options import load_filter_options
from sales_dashboard.reports.schemas import FilterOptions

router = APIRouter()


@router.get("", response_model=FilterOptions)
async def get_filter_options(
    region: Optional[str] = Query(None, description="Only list countries in this region"),
    db: AsyncSession = Depends(get_db_dependency),
) -> FilterOptions:
    """
    Regions, countries, channels, years and product categories.

    The "Catalog" channel is never offered.
    """
    return await load_filter_options(db, region)
