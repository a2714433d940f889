"""
Filter Options

Distinct dimension values used to populate the dashboard's select lists.
"""

from typing import Any, List, Optional

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from sales_dashboard.database.models import Channel, Country, Product, Time
from sales_dashboard.reports.exceptions import DATABASE_ERRORS, ReportQueryError
from sales_dashboard.reports.schemas import FilterOptions

logger = structlog.get_logger(__name__)

# Channel kept out of the channel selector
EXCLUDED_CHANNEL = "Catalog"


async def _distinct(session: AsyncSession, column: Any, *criteria: Any) -> List[Any]:
    stmt = (
        select(column)
        .where(column.is_not(None), *criteria)
        .distinct()
        .order_by(column)
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def load_filter_options(session: AsyncSession, region: Optional[str] = None) -> FilterOptions:
    """
    Load every filter option list.

    Args:
        session: Database session
        region: Narrow the country list to this region

    Raises:
        ReportQueryError: If any lookup fails
    """
    region = region.strip() if region else None
    logger.debug("Loading filter options", region=region)

    try:
        regions = await _distinct(session, Country.country_region)
        countries = await _distinct(
            session,
            Country.country_name,
            *([Country.country_region == region] if region else []),
        )
        channels = await _distinct(session, Channel.channel_desc, Channel.channel_desc != EXCLUDED_CHANNEL)
        years = await _distinct(session, Time.calendar_year)
        categories = await _distinct(session, Product.prod_category)
    except DATABASE_ERRORS as e:
        logger.error("Filter options query failed", region=region, error=str(e))
        raise ReportQueryError("filter-options", str(e)) from e

    options = FilterOptions(
        regions=regions,
        countries=countries,
        channels=channels,
        years=[int(year) for year in years],
        categories=categories,
    )
    logger.info(
        "Filter options loaded",
        regions=len(options.regions),
        countries=len(options.countries),
        channels=len(options.channels),
    )
    return options
