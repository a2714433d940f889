"""
Report API Endpoints

One GET endpoint per dashboard report. All of them take the same optional
filters: region, country, channel, year, monthFrom, monthTo, category.
"""

from typing import Any, Dict, List, Union

from fastapi import APIRouter, Depends

from sales_dashboard.reports.filters import FilterSet
from sales_dashboard.reports.queries import ReportQueries
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
from sales_dashboard.serving.api.dependencies import get_filters, get_report_queries

router = APIRouter()


@router.get("/summary", response_model=SummaryTotals)
async def get_summary(
    filters: FilterSet = Depends(get_filters),
    reports: ReportQueries = Depends(get_report_queries),
) -> SummaryTotals:
    """Total sales, customers, cost, profit and profit percent."""
    return await reports.summary(filters)


@router.get("/yearly-sales", response_model=List[YearlyQuantity])
async def get_yearly_sales(
    filters: FilterSet = Depends(get_filters),
    reports: ReportQueries = Depends(get_report_queries),
) -> List[YearlyQuantity]:
    """Units sold per year."""
    return await reports.yearly_sales(filters)


@router.get(
    "/monthly-sales",
    response_model=Union[List[MonthlyComparison], List[MonthlyTotal]],
)
async def get_monthly_sales(
    filters: FilterSet = Depends(get_filters),
    reports: ReportQueries = Depends(get_report_queries),
):
    """
    Units sold per month.

    With year: each month against the same month of the previous year.
    Without: every year-month in order.
    """
    return await reports.monthly_sales(filters)


@router.get("/top-products", response_model=List[ProductQuantity])
async def get_top_products(
    filters: FilterSet = Depends(get_filters),
    reports: ReportQueries = Depends(get_report_queries),
) -> List[ProductQuantity]:
    """Top products by units sold."""
    return await reports.top_products(filters)


@router.get("/top-products-profit", response_model=List[ProductRevenue])
async def get_top_products_profit(
    filters: FilterSet = Depends(get_filters),
    reports: ReportQueries = Depends(get_report_queries),
) -> List[ProductRevenue]:
    """Top products by revenue with profit margins."""
    return await reports.top_products_by_revenue(filters)


@router.get("/sales-vs-promotions", response_model=List[Dict[str, Any]])
async def get_sales_vs_promotions(
    filters: FilterSet = Depends(get_filters),
    reports: ReportQueries = Depends(get_report_queries),
) -> List[Dict[str, Any]]:
    """Promotion category share of units sold, per month or year."""
    return await reports.sales_vs_promotions(filters)


@router.get("/sales-by-region-country", response_model=List[Dict[str, Any]])
async def get_sales_by_region_country(
    filters: FilterSet = Depends(get_filters),
    reports: ReportQueries = Depends(get_report_queries),
) -> List[Dict[str, Any]]:
    """Units sold per country, one row per region."""
    return await reports.sales_by_region_country(filters)


@router.get(
    "/sales-costs",
    response_model=Union[List[MonthlySalesCosts], List[YearlySalesCosts]],
)
async def get_sales_costs(
    filters: FilterSet = Depends(get_filters),
    reports: ReportQueries = Depends(get_report_queries),
):
    """Revenue and cost per month (year given) or per year."""
    return await reports.sales_costs(filters)


@router.get("/top-customers", response_model=List[CustomerSales])
async def get_top_customers(
    filters: FilterSet = Depends(get_filters),
    reports: ReportQueries = Depends(get_report_queries),
) -> List[CustomerSales]:
    """Top customers by revenue."""
    return await reports.top_customers(filters)


@router.get("/sales-by-channel", response_model=List[ChannelSales])
async def get_sales_by_channel(
    filters: FilterSet = Depends(get_filters),
    reports: ReportQueries = Depends(get_report_queries),
) -> List[ChannelSales]:
    """Revenue per channel with share of the total."""
    return await reports.sales_by_channel(filters)
