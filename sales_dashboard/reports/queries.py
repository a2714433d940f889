"""
Report Queries

The fixed catalog of dashboard reports. Every report:

1. joins the sales fact to every dimension the shared predicate can reference,
2. applies build_predicate() for the caller's FilterSet,
3. groups and aggregates in the database,
4. reshapes the aggregated rows (flat list, pivot, or scalar summary).

Reports that express a share of the grand total first run total_sales() under
the same filters, then the breakdown query, sequentially on one session.
"""

from typing import Any, Dict, List, Sequence, Union

import structlog
from sqlalchemy import Select, case, func, select
from sqlalchemy.engine import Row
from sqlalchemy.ext.asyncio import AsyncSession

from sales_dashboard.database.models import (
    Channel,
    Country,
    Customer,
    Product,
    Promotion,
    Sale,
    Time,
)
from sales_dashboard.reports.exceptions import DATABASE_ERRORS, ReportQueryError
from sales_dashboard.reports.filters import FilterSet, build_predicate, describe
from sales_dashboard.reports.metrics import REPORT_QUERIES, REPORT_QUERY_SECONDS
from sales_dashboard.reports.schemas import (
    ChannelSales,
    CustomerSales,
    MonthlyComparison,
    MonthlySalesCosts,
    MonthlyTotal,
    ProductQuantity,
    ProductRevenue,
    SummaryTotals,
    YearlyQuantity,
    YearlySalesCosts,
)
from sales_dashboard.reports.shaping import (
    as_float,
    as_int,
    label,
    percent,
    pivot,
    to_decimal,
)

logger = structlog.get_logger(__name__)

TOP_PRODUCTS_LIMIT = 4
TOP_CUSTOMERS_LIMIT = 5
NO_PROMOTION_LABEL = "No Promotion"

# Cost proxy: units sold at the product's minimum price
_COST = func.sum(Sale.quantity_sold * Product.prod_min_price)
_SALES = func.sum(Sale.amount_sold)
_QUANTITY = func.sum(Sale.quantity_sold)


def sales_select(*columns: Any) -> Select:
    """SELECT over the sales fact joined to every filterable dimension."""
    return (
        select(*columns)
        .select_from(Sale)
        .join(Customer, Sale.cust_id == Customer.cust_id)
        .join(Country, Customer.country_id == Country.country_id)
        .join(Channel, Sale.channel_id == Channel.channel_id)
        .join(Product, Sale.prod_id == Product.prod_id)
        .join(Time, Sale.time_id == Time.time_id)
    )


class ReportQueries:
    """
    Report catalog bound to one database session.

    Args:
        session: Session borrowed for the current request
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _fetch(self, report: str, stmt: Select, filters: FilterSet) -> Sequence[Row]:
        logger.debug("Running report query", report=report, filters=describe(filters))
        try:
            with REPORT_QUERY_SECONDS.labels(report=report).time():
                result = await self.session.execute(stmt)
                rows = result.all()
        except DATABASE_ERRORS as e:
            REPORT_QUERIES.labels(report=report, status="error").inc()
            logger.error(
                "Report query failed",
                report=report,
                filters=describe(filters),
                error=str(e),
                error_type=type(e).__name__,
            )
            raise ReportQueryError(report, str(e)) from e
        REPORT_QUERIES.labels(report=report, status="success").inc()
        logger.info("Report query completed", report=report, rows=len(rows))
        return rows

    # -------------------------------------------------------------------------
    # Shared sub-steps
    # -------------------------------------------------------------------------

    async def total_sales(self, filters: FilterSet) -> float:
        """Grand total sales under the current filters (the percentage denominator)."""
        stmt = sales_select(_SALES.label("total_sales")).where(build_predicate(filters))
        rows = await self._fetch("total-sales", stmt, filters)
        return as_float(rows[0].total_sales if rows else None)

    # -------------------------------------------------------------------------
    # Reports
    # -------------------------------------------------------------------------

    async def summary(self, filters: FilterSet) -> SummaryTotals:
        """Total sales, distinct customers, cost, profit and profit margin."""
        stmt = sales_select(
            _SALES.label("total_sales"),
            func.count(func.distinct(Customer.cust_id)).label("customers"),
            _COST.label("total_cost"),
        ).where(build_predicate(filters))

        rows = await self._fetch("summary", stmt, filters)
        if not rows:
            return SummaryTotals()

        row = rows[0]
        total_sales = to_decimal(row.total_sales)
        total_cost = to_decimal(row.total_cost)
        profit = total_sales - total_cost

        return SummaryTotals(
            total_sales=float(total_sales),
            customer_count=as_int(row.customers),
            total_cost=float(total_cost),
            profit=float(profit),
            profit_percent=percent(profit, total_sales),
        )

    async def yearly_sales(self, filters: FilterSet) -> List[YearlyQuantity]:
        """Units sold per calendar year, ascending."""
        stmt = (
            sales_select(Time.calendar_year.label("year"), _QUANTITY.label("total_quantity"))
            .where(build_predicate(filters))
            .group_by(Time.calendar_year)
            .order_by(Time.calendar_year)
        )
        rows = await self._fetch("yearly-sales", stmt, filters)
        return [
            YearlyQuantity(year=as_int(row.year), total_quantity=as_int(row.total_quantity))
            for row in rows
        ]

    async def monthly_sales(
        self, filters: FilterSet
    ) -> Union[List[MonthlyComparison], List[MonthlyTotal]]:
        """
        Units sold per month.

        With a year filter, each calendar month of that year is compared with
        the same month of the previous year; every other filter still applies.
        Without one, every year-month is listed chronologically and labelled
        "<year>-<month name>" so several years fit on one axis.
        """
        if filters.year is None:
            return await self._monthly_totals(filters)

        current, previous = filters.year, filters.year - 1
        stmt = (
            sales_select(
                Time.calendar_month_name.label("month"),
                func.sum(
                    case((Time.calendar_year == current, Sale.quantity_sold), else_=0)
                ).label("current_year"),
                func.sum(
                    case((Time.calendar_year == previous, Sale.quantity_sold), else_=0)
                ).label("previous_year"),
            )
            .where(build_predicate(filters.without("year")))
            .where(Time.calendar_year.in_([current, previous]))
            .group_by(Time.calendar_month_number, Time.calendar_month_name)
            .order_by(Time.calendar_month_number)
        )
        rows = await self._fetch("monthly-sales", stmt, filters)
        return [
            MonthlyComparison(
                month=label(row.month),
                current_year=as_int(row.current_year),
                previous_year=as_int(row.previous_year),
            )
            for row in rows
        ]

    async def _monthly_totals(self, filters: FilterSet) -> List[MonthlyTotal]:
        # TODO: return a real year/month pair once the chart supports a date axis
        stmt = (
            sales_select(
                Time.calendar_year.label("year"),
                Time.calendar_month_name.label("month"),
                _QUANTITY.label("total_sales"),
            )
            .where(build_predicate(filters))
            .group_by(Time.calendar_year, Time.calendar_month_number, Time.calendar_month_name)
            .order_by(Time.calendar_year, Time.calendar_month_number)
        )
        rows = await self._fetch("monthly-sales", stmt, filters)
        return [
            MonthlyTotal(
                month=f"{label(row.year)}-{label(row.month)}",
                total_sales=as_int(row.total_sales),
            )
            for row in rows
        ]

    async def top_products(self, filters: FilterSet) -> List[ProductQuantity]:
        """
        Best sellers by units.

        profit_percent is the product's profit as a share of total sales
        across all products under the same filters.
        """
        total = await self.total_sales(filters)

        stmt = (
            sales_select(
                Product.prod_name.label("product"),
                _QUANTITY.label("total_quantity"),
                (_SALES - _COST).label("profit"),
            )
            .where(build_predicate(filters))
            .group_by(Product.prod_name)
            .order_by(_QUANTITY.desc())
            .limit(TOP_PRODUCTS_LIMIT)
        )
        rows = await self._fetch("top-products", stmt, filters)
        return [
            ProductQuantity(
                product=label(row.product),
                total_quantity=as_int(row.total_quantity),
                profit=as_float(row.profit),
                profit_percent=percent(row.profit, total),
            )
            for row in rows
        ]

    async def top_products_by_revenue(self, filters: FilterSet) -> List[ProductRevenue]:
        """
        Best sellers by revenue.

        percent_of_total_sales is measured against total sales under the same
        filters; profit_percent against the product's own sales.
        """
        total = await self.total_sales(filters)

        stmt = (
            sales_select(
                Product.prod_name.label("product"),
                _SALES.label("total_sales"),
                _QUANTITY.label("total_quantity"),
                (_SALES - _COST).label("profit"),
            )
            .where(build_predicate(filters))
            .group_by(Product.prod_name)
            .order_by(_SALES.desc())
            .limit(TOP_PRODUCTS_LIMIT)
        )
        rows = await self._fetch("top-products-profit", stmt, filters)
        return [
            ProductRevenue(
                product=label(row.product),
                total_sales=as_float(row.total_sales),
                total_quantity=as_int(row.total_quantity),
                profit=as_float(row.profit),
                percent_of_total_sales=percent(row.total_sales, total),
                profit_percent=percent(row.profit, row.total_sales),
            )
            for row in rows
        ]

    async def sales_vs_promotions(self, filters: FilterSet) -> List[Dict[str, Any]]:
        """
        Share of units sold under each promotion category, per time bucket.

        Buckets are months of the filtered year when a year is given, years
        otherwise. Each row carries the bucket, its total units, and one
        column per promotion category holding that category's percentage of
        the bucket. Sales without a promotion are kept under "No Promotion".
        """
        if filters.year is not None:
            key_name = "month"
            bucket = (Time.calendar_year, Time.calendar_month_number, Time.calendar_month_name)
            bucket_label = Time.calendar_month_name
        else:
            key_name = "year"
            bucket = (Time.calendar_year,)
            bucket_label = Time.calendar_year

        # Outer join keeps unpromoted sales; the flag separates them from
        # promotions whose category is NULL
        no_promotion = Sale.promo_id.is_(None)

        stmt = (
            sales_select(
                bucket_label.label("bucket"),
                no_promotion.label("no_promotion"),
                Promotion.promo_category.label("promo_category"),
                _QUANTITY.label("category_sales"),
                func.sum(_QUANTITY).over(partition_by=list(bucket)).label("bucket_total"),
            )
            .outerjoin(Promotion, Sale.promo_id == Promotion.promo_id)
            .where(build_predicate(filters))
            .group_by(*bucket, no_promotion, Promotion.promo_category)
            .order_by(*bucket, no_promotion, Promotion.promo_category)
        )
        rows = await self._fetch("sales-vs-promotions", stmt, filters)

        records = [
            {
                key_name: label(row.bucket) if key_name == "month" else as_int(row.bucket),
                "totalSales": as_int(row.bucket_total),
                "category": NO_PROMOTION_LABEL if row.no_promotion else label(row.promo_category),
                "percent": percent(row.category_sales, row.bucket_total),
            }
            for row in rows
        ]
        shaped = pivot(records, key_name=key_name, column="category", value="percent", leading=["totalSales"])
        return [row.to_dict() for row in shaped]

    async def sales_by_region_country(self, filters: FilterSet) -> List[Dict[str, Any]]:
        """
        Units sold per country, one row per region.

        Countries become columns of their region's row; countries without
        sales are absent rather than zero.
        """
        stmt = (
            sales_select(
                Country.country_region.label("region"),
                Country.country_name.label("country"),
                _QUANTITY.label("total_quantity"),
            )
            .where(build_predicate(filters))
            .group_by(Country.country_region, Country.country_name)
            .order_by(Country.country_region, Country.country_name)
        )
        rows = await self._fetch("sales-by-region-country", stmt, filters)

        records = [
            {
                "region": label(row.region),
                "country": label(row.country),
                "quantity": as_int(row.total_quantity),
            }
            for row in rows
        ]
        return [row.to_dict() for row in pivot(records, key_name="region", column="country", value="quantity")]

    async def sales_costs(
        self, filters: FilterSet
    ) -> Union[List[MonthlySalesCosts], List[YearlySalesCosts]]:
        """Revenue against cost, per month of the filtered year or per year."""
        if filters.year is not None:
            stmt = (
                sales_select(
                    Time.calendar_month_name.label("month"),
                    _SALES.label("sales"),
                    _COST.label("cost"),
                )
                .where(build_predicate(filters))
                .group_by(Time.calendar_month_number, Time.calendar_month_name)
                .order_by(Time.calendar_month_number)
            )
            rows = await self._fetch("sales-costs", stmt, filters)
            return [
                MonthlySalesCosts(month=label(row.month), sales=as_float(row.sales), cost=as_float(row.cost))
                for row in rows
            ]

        stmt = (
            sales_select(
                Time.calendar_year.label("year"),
                _SALES.label("sales"),
                _COST.label("cost"),
            )
            .where(build_predicate(filters))
            .group_by(Time.calendar_year)
            .order_by(Time.calendar_year)
        )
        rows = await self._fetch("sales-costs", stmt, filters)
        return [
            YearlySalesCosts(year=as_int(row.year), sales=as_float(row.sales), cost=as_float(row.cost))
            for row in rows
        ]

    async def top_customers(self, filters: FilterSet) -> List[CustomerSales]:
        """Biggest customers by revenue, with their share of total sales."""
        total = await self.total_sales(filters)

        stmt = (
            sales_select(Customer.cust_email.label("email"), _SALES.label("sales"))
            .where(build_predicate(filters))
            .group_by(Customer.cust_email)
            .order_by(_SALES.desc())
            .limit(TOP_CUSTOMERS_LIMIT)
        )
        rows = await self._fetch("top-customers", stmt, filters)
        return [
            CustomerSales(
                email=label(row.email),
                sales=as_float(row.sales),
                percent_of_total=percent(row.sales, total),
            )
            for row in rows
        ]

    async def sales_by_channel(self, filters: FilterSet) -> List[ChannelSales]:
        """Revenue per channel; shares are of the sum over the returned channels."""
        stmt = (
            sales_select(Channel.channel_desc.label("channel"), _SALES.label("total_sales"))
            .where(build_predicate(filters))
            .group_by(Channel.channel_desc)
            .order_by(_SALES.desc())
        )
        rows = await self._fetch("sales-by-channel", stmt, filters)

        total = sum((to_decimal(row.total_sales) for row in rows), to_decimal(0))
        return [
            ChannelSales(
                channel=label(row.channel),
                total_sales=as_float(row.total_sales),
                percent_of_total=percent(row.total_sales, total),
            )
            for row in rows
        ]
