"""
Report Response Models

Field names are snake_case in Python and camelCase on the wire. Pivoted
reports (promotions, region/country) have data-dependent columns and are
returned as plain dicts instead.
"""

from typing import List

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ReportModel(BaseModel):
    """Base for report rows"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SummaryTotals(ReportModel):
    """Headline figures for the dashboard top bar"""
    total_sales: float = 0
    customer_count: int = 0
    total_cost: float = 0
    profit: float = 0
    profit_percent: float = 0


class YearlyQuantity(ReportModel):
    year: int
    total_quantity: int = 0


class MonthlyComparison(ReportModel):
    """Quantity sold in one calendar month of the selected and the previous year"""
    month: str
    current_year: int
    previous_year: int


class MonthlyTotal(ReportModel):
    """Quantity sold in one year-month, labelled "<year>-<month name>"."""
    month: str
    total_sales: int


class ProductQuantity(ReportModel):
    product: str
    total_quantity: int = 0
    profit: float = 0
    profit_percent: float = 0


class ProductRevenue(ReportModel):
    product: str
    total_sales: float = 0
    total_quantity: int = 0
    profit: float = 0
    percent_of_total_sales: float = 0
    profit_percent: float = 0


class MonthlySalesCosts(ReportModel):
    month: str
    sales: float = 0
    cost: float = 0


class YearlySalesCosts(ReportModel):
    year: int
    sales: float = 0
    cost: float = 0


class CustomerSales(ReportModel):
    email: str
    sales: float = 0
    percent_of_total: float = 0


class ChannelSales(ReportModel):
    channel: str
    total_sales: float = 0
    percent_of_total: float = 0


class FilterOptions(ReportModel):
    """Distinct values for populating the dashboard filter controls"""
    regions: List[str] = []
    countries: List[str] = []
    channels: List[str] = []
    years: List[int] = []
    categories: List[str] = []
