"""
Database Models - Sales History Star Schema

Read-only mappings of the pre-existing sales history schema. The service never
creates or modifies these tables; the declarations exist so report queries can
be composed with the SQLAlchemy expression language. The schema consists of:

Fact Table:
- Sale: one row per transaction line

Dimension Tables:
- Customer, Country, Channel, Product, Time, Promotion
"""

from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy import (
    Column,
    Date,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Table,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all database models"""
    pass


# =============================================================================
# DIMENSION TABLES
# =============================================================================

class Country(Base):
    """Country dimension, carrying the region each country rolls up to."""
    __tablename__ = "countries"

    country_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    country_name: Mapped[str] = mapped_column(String(40), nullable=False)
    country_region: Mapped[Optional[str]] = mapped_column(String(20))


class Customer(Base):
    """Customer dimension"""
    __tablename__ = "customers"

    cust_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    cust_email: Mapped[Optional[str]] = mapped_column(String(50))
    country_id: Mapped[int] = mapped_column(ForeignKey("countries.country_id"), nullable=False)


class Channel(Base):
    """Sales channel dimension (Direct Sales, Internet, Partners, ...)"""
    __tablename__ = "channels"

    channel_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    channel_desc: Mapped[str] = mapped_column(String(20), nullable=False)


class Product(Base):
    """
    Product dimension

    prod_min_price is the only cost figure in the schema and is used as the
    unit cost proxy in every profit calculation.
    """
    __tablename__ = "products"

    prod_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    prod_name: Mapped[str] = mapped_column(String(50), nullable=False)
    prod_category: Mapped[str] = mapped_column(String(50), nullable=False)
    prod_min_price: Mapped[Decimal] = mapped_column(Numeric(8, 2), nullable=False)


class Time(Base):
    """Calendar dimension keyed by day"""
    __tablename__ = "times"

    time_id: Mapped[date] = mapped_column(Date, primary_key=True)
    calendar_year: Mapped[int] = mapped_column(Integer, nullable=False)
    calendar_month_number: Mapped[int] = mapped_column(Integer, nullable=False)
    calendar_month_name: Mapped[str] = mapped_column(String(9), nullable=False)
    calendar_month_desc: Mapped[str] = mapped_column(String(8), nullable=False)  # YYYY-MM


class Promotion(Base):
    """Promotion dimension"""
    __tablename__ = "promotions"

    promo_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    promo_category: Mapped[Optional[str]] = mapped_column(String(30))


# =============================================================================
# FACT TABLE
# =============================================================================

sales_table = Table(
    "sales",
    Base.metadata,
    Column("prod_id", Integer, ForeignKey("products.prod_id"), nullable=False),
    Column("cust_id", Integer, ForeignKey("customers.cust_id"), nullable=False),
    Column("time_id", Date, ForeignKey("times.time_id"), nullable=False),
    Column("channel_id", Integer, ForeignKey("channels.channel_id"), nullable=False),
    Column("promo_id", Integer, ForeignKey("promotions.promo_id"), nullable=True),
    Column("quantity_sold", Numeric(10, 2), nullable=False),
    Column("amount_sold", Numeric(10, 2), nullable=False),
)


class Sale(Base):
    """
    Sales fact table

    The source table has no primary key; the mapper identifies rows by the
    composite of their dimension keys. Only aggregate queries are issued
    against it, so duplicate keys never reach the identity map.
    """
    __table__ = sales_table
    __mapper_args__ = {
        "primary_key": [
            sales_table.c.prod_id,
            sales_table.c.cust_id,
            sales_table.c.time_id,
            sales_table.c.channel_id,
            sales_table.c.promo_id,
        ]
    }
