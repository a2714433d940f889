"""
Test Suite Configuration

Reports run against an in-memory SQLite copy of the star schema seeded with a
small, hand-checkable data set:

    amount  qty  cost  product       customer        date        channel  promo
    100     10   50    Mouse         a (USA)         2022-01-15  Direct   -
    100     5    50    Keyboard      b (Canada)      2022-02-15  Internet TV
    200     2    100   Tent          c (Germany)     2023-01-10  Direct   -
    180     20   100   Mouse         d (France)      2023-01-10  Internet Internet
    90      6    48    Lamp          e (Germany)     2023-02-10  Direct   TV
    150     3    60    Sleeping Bag  f (USA)         2023-03-10  Internet -
    80      4    40    Keyboard      a (USA)         2023-02-10  Direct   Internet

Grand totals: sales 900, quantity 50, cost 448.
"""
from datetime import date
from decimal import Decimal
from typing import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import insert
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from sales_dashboard.database.connection import get_db_dependency
from sales_dashboard.database.models import (
    Base,
    Channel,
    Country,
    Customer,
    Product,
    Promotion,
    Time,
    sales_table,
)
from sales_dashboard.reports.queries import ReportQueries
from sales_dashboard.serving.api import create_api_app


COUNTRIES = [
    {"country_id": 1, "country_name": "USA", "country_region": "Americas"},
    {"country_id": 2, "country_name": "Canada", "country_region": "Americas"},
    {"country_id": 3, "country_name": "Germany", "country_region": "Europe"},
    {"country_id": 4, "country_name": "France", "country_region": "Europe"},
]

CUSTOMERS = [
    {"cust_id": 1, "cust_email": "a@example.com", "country_id": 1},
    {"cust_id": 2, "cust_email": "b@example.com", "country_id": 2},
    {"cust_id": 3, "cust_email": "c@example.com", "country_id": 3},
    {"cust_id": 4, "cust_email": "d@example.com", "country_id": 4},
    {"cust_id": 5, "cust_email": "e@example.com", "country_id": 3},
    {"cust_id": 6, "cust_email": "f@example.com", "country_id": 1},
]

CHANNELS = [
    {"channel_id": 1, "channel_desc": "Direct Sales"},
    {"channel_id": 2, "channel_desc": "Internet"},
    {"channel_id": 3, "channel_desc": "Catalog"},
]

PRODUCTS = [
    {"prod_id": 1, "prod_name": "Mouse", "prod_category": "Electronics", "prod_min_price": Decimal("5.00")},
    {"prod_id": 2, "prod_name": "Keyboard", "prod_category": "Electronics", "prod_min_price": Decimal("10.00")},
    {"prod_id": 3, "prod_name": "Tent", "prod_category": "Camping", "prod_min_price": Decimal("50.00")},
    {"prod_id": 4, "prod_name": "Lamp", "prod_category": "Camping", "prod_min_price": Decimal("8.00")},
    {"prod_id": 5, "prod_name": "Sleeping Bag", "prod_category": "Camping", "prod_min_price": Decimal("20.00")},
]

MONTH_NAMES = {1: "January", 2: "February", 3: "March"}

TIMES = [
    {
        "time_id": day,
        "calendar_year": day.year,
        "calendar_month_number": day.month,
        "calendar_month_name": MONTH_NAMES[day.month],
        "calendar_month_desc": day.strftime("%Y-%m"),
    }
    for day in [
        date(2022, 1, 15),
        date(2022, 2, 15),
        date(2023, 1, 10),
        date(2023, 2, 10),
        date(2023, 3, 10),
    ]
]

PROMOTIONS = [
    {"promo_id": 1, "promo_category": "TV"},
    {"promo_id": 2, "promo_category": "Internet"},
]


def _sale(prod_id, cust_id, day, channel_id, promo_id, quantity, amount):
    return {
        "prod_id": prod_id,
        "cust_id": cust_id,
        "time_id": day,
        "channel_id": channel_id,
        "promo_id": promo_id,
        "quantity_sold": Decimal(quantity),
        "amount_sold": Decimal(amount),
    }


SALES = [
    _sale(1, 1, date(2022, 1, 15), 1, None, 10, 100),
    _sale(2, 2, date(2022, 2, 15), 2, 1, 5, 100),
    _sale(3, 3, date(2023, 1, 10), 1, None, 2, 200),
    _sale(1, 4, date(2023, 1, 10), 2, 2, 20, 180),
    _sale(4, 5, date(2023, 2, 10), 1, 1, 6, 90),
    _sale(5, 6, date(2023, 3, 10), 2, None, 3, 150),
    _sale(2, 1, date(2023, 2, 10), 1, 2, 4, 80),
]


def _memory_engine():
    # StaticPool: every session shares the single in-memory database
    return create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )


@pytest.fixture
async def test_engine():
    """Seeded in-memory star schema"""
    engine = _memory_engine()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
        await conn.execute(insert(Country), COUNTRIES)
        await conn.execute(insert(Customer), CUSTOMERS)
        await conn.execute(insert(Channel), CHANNELS)
        await conn.execute(insert(Product), PRODUCTS)
        await conn.execute(insert(Time), TIMES)
        await conn.execute(insert(Promotion), PROMOTIONS)
        await conn.execute(insert(sales_table), SALES)

    yield engine

    await engine.dispose()


@pytest.fixture
async def empty_engine():
    """Engine whose database has no tables, so every report query fails"""
    engine = _memory_engine()
    yield engine
    await engine.dispose()


async def _session(engine) -> AsyncGenerator[AsyncSession, None]:
    session_factory = async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    async with session_factory() as session:
        yield session


@pytest.fixture
async def test_db(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Session on the seeded database"""
    async for session in _session(test_engine):
        yield session


@pytest.fixture
async def broken_db(empty_engine) -> AsyncGenerator[AsyncSession, None]:
    """Session on a database without the schema"""
    async for session in _session(empty_engine):
        yield session


@pytest.fixture
async def unreachable_engine():
    """Engine pointed at a closed port, so every connection attempt is refused"""
    engine = create_async_engine("postgresql+asyncpg://sh:sh@127.0.0.1:1/sales_history")
    yield engine
    await engine.dispose()


@pytest.fixture
async def unreachable_db(unreachable_engine) -> AsyncGenerator[AsyncSession, None]:
    """Session whose database cannot be reached"""
    async for session in _session(unreachable_engine):
        yield session


@pytest.fixture
def reports(test_db) -> ReportQueries:
    return ReportQueries(test_db)


def _client_for(session: AsyncSession) -> AsyncClient:
    app = create_api_app()

    async def override_db():
        yield session

    app.dependency_overrides[get_db_dependency] = override_db
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


@pytest.fixture
async def client(test_db) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client for the API bound to the seeded database"""
    async with _client_for(test_db) as client:
        yield client


@pytest.fixture
async def broken_client(broken_db) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client whose report queries all fail"""
    async with _client_for(broken_db) as client:
        yield client


@pytest.fixture
async def unreachable_client(unreachable_db) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client whose database refuses connections"""
    async with _client_for(unreachable_db) as client:
        yield client
