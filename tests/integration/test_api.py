"""
Integration Tests - HTTP API
"""
import pytest

from sales_dashboard.config import Settings
from sales_dashboard.serving.api import main as api_main

REPORTS = "/api/v1/reports"


class TestReportEndpoints:
    """Report routes over the seeded database"""

    async def test_summary_camel_case(self, client):
        response = await client.get(f"{REPORTS}/summary", params={"year": 2023, "region": "Americas"})

        assert response.status_code == 200
        assert response.json() == {
            "totalSales": 230.0,
            "customerCount": 2,
            "totalCost": 100.0,
            "profit": 130.0,
            "profitPercent": 56.52,
        }

    async def test_blank_filters_mean_no_restriction(self, client):
        unfiltered = await client.get(f"{REPORTS}/summary")
        blank = await client.get(f"{REPORTS}/summary?year=&region=&monthFrom=&category=")

        assert blank.status_code == 200
        assert blank.json() == unfiltered.json()
        assert unfiltered.json()["totalSales"] == 900.0

    async def test_yearly_sales(self, client):
        response = await client.get(f"{REPORTS}/yearly-sales")

        assert response.json() == [
            {"year": 2022, "totalQuantity": 15},
            {"year": 2023, "totalQuantity": 35},
        ]

    async def test_monthly_sales_with_year(self, client):
        response = await client.get(f"{REPORTS}/monthly-sales", params={"year": 2023})

        assert response.status_code == 200
        assert response.json()[0] == {"month": "January", "currentYear": 22, "previousYear": 10}

    async def test_monthly_sales_without_year(self, client):
        response = await client.get(f"{REPORTS}/monthly-sales")

        body = response.json()
        assert body[0] == {"month": "2022-January", "totalSales": 10}
        assert len(body) == 5

    async def test_top_products(self, client):
        response = await client.get(f"{REPORTS}/top-products")

        body = response.json()
        assert len(body) == 4
        assert body[0] == {"product": "Mouse", "totalQuantity": 30, "profit": 130.0, "profitPercent": 14.44}

    async def test_top_products_profit(self, client):
        response = await client.get(f"{REPORTS}/top-products-profit")

        assert response.json()[0] == {
            "product": "Mouse",
            "totalSales": 280.0,
            "totalQuantity": 30,
            "profit": 130.0,
            "percentOfTotalSales": 31.11,
            "profitPercent": 46.43,
        }

    async def test_sales_vs_promotions(self, client):
        response = await client.get(f"{REPORTS}/sales-vs-promotions", params={"year": 2023})

        body = response.json()
        assert body[2] == {"month": "March", "totalSales": 3, "No Promotion": 100.0}

    async def test_sales_by_region_country(self, client):
        response = await client.get(f"{REPORTS}/sales-by-region-country", params={"country": "France"})

        assert response.json() == [{"region": "Europe", "France": 20}]

    async def test_sales_costs(self, client):
        yearly = await client.get(f"{REPORTS}/sales-costs")
        monthly = await client.get(f"{REPORTS}/sales-costs", params={"year": 2022})

        assert yearly.json()[0] == {"year": 2022, "sales": 200.0, "cost": 100.0}
        assert monthly.json() == [
            {"month": "January", "sales": 100.0, "cost": 50.0},
            {"month": "February", "sales": 100.0, "cost": 50.0},
        ]

    async def test_top_customers(self, client):
        response = await client.get(f"{REPORTS}/top-customers")

        body = response.json()
        assert len(body) == 5
        assert body[0] == {"email": "c@example.com", "sales": 200.0, "percentOfTotal": 22.22}

    async def test_sales_by_channel(self, client):
        response = await client.get(f"{REPORTS}/sales-by-channel", params={"monthFrom": 1, "monthTo": 1})

        # January: Direct 100 + 200, Internet 180
        assert response.json() == [
            {"channel": "Direct Sales", "totalSales": 300.0, "percentOfTotal": 62.5},
            {"channel": "Internet", "totalSales": 180.0, "percentOfTotal": 37.5},
        ]


class TestFilterOptions:
    """Filter option lists"""

    async def test_all_options(self, client):
        response = await client.get("/api/v1/filter-options")

        assert response.status_code == 200
        assert response.json() == {
            "regions": ["Americas", "Europe"],
            "countries": ["Canada", "France", "Germany", "USA"],
            "channels": ["Direct Sales", "Internet"],
            "years": [2022, 2023],
            "categories": ["Camping", "Electronics"],
        }

    async def test_countries_narrowed_by_region(self, client):
        response = await client.get("/api/v1/filter-options", params={"region": "Europe"})

        body = response.json()
        assert body["countries"] == ["France", "Germany"]
        assert body["regions"] == ["Americas", "Europe"]


class TestErrorResponses:
    """Client and database errors"""

    @pytest.mark.parametrize("params", [
        {"year": "twenty"},
        {"year": "99999999999999999999"},
        {"monthFrom": "13"},
        {"monthFrom": "9", "monthTo": "2"},
    ])
    async def test_invalid_filters_are_400(self, client, params):
        response = await client.get(f"{REPORTS}/summary", params=params)

        assert response.status_code == 400
        assert "error" in response.json()

    async def test_query_failure_is_500_with_message(self, broken_client):
        response = await broken_client.get(f"{REPORTS}/yearly-sales")

        assert response.status_code == 500
        assert "yearly-sales" in response.json()["error"]

    async def test_query_failure_hides_detail_in_production(self, broken_client, monkeypatch):
        monkeypatch.setattr(api_main, "get_settings", lambda: Settings(APP_ENV="production"))

        response = await broken_client.get(f"{REPORTS}/sales-by-channel")

        assert response.status_code == 500
        assert response.json() == {"error": "Report could not be generated"}

    async def test_unreachable_database_is_500_json(self, unreachable_client):
        response = await unreachable_client.get(f"{REPORTS}/summary")

        assert response.status_code == 500
        assert response.headers["content-type"] == "application/json"
        assert "summary" in response.json()["error"]

    async def test_filter_options_failure(self, broken_client):
        response = await broken_client.get("/api/v1/filter-options")

        assert response.status_code == 500
        assert "error" in response.json()


class TestServiceEndpoints:
    """Health and info routes"""

    async def test_info(self, client):
        response = await client.get("/api/v1/info")

        assert response.json()["name"] == "sales-dashboard"

    async def test_liveness(self, client):
        response = await client.get("/api/v1/health/live")

        assert response.json() == {"status": "alive"}

    async def test_request_id_header(self, client):
        response = await client.get("/api/v1/health/live", headers={"X-Request-ID": "abc-123"})

        assert response.headers["X-Request-ID"] == "abc-123"
        assert response.headers["X-Content-Type-Options"] == "nosniff"

    async def test_readiness_without_database(self, client):
        response = await client.get("/api/v1/health/ready")

        assert response.status_code == 503
        assert response.json()["reason"] == "database_unavailable"

    async def test_metrics_count_report_queries(self, client):
        await client.get(f"{REPORTS}/yearly-sales")

        response = await client.get("/metrics")

        assert response.status_code == 200
        assert 'sales_dashboard_report_queries_total{report="yearly-sales",status="success"}' in response.text

    def test_debug_setting_reaches_app(self, monkeypatch):
        monkeypatch.setattr(api_main, "get_settings", lambda: Settings(DEBUG=True))

        assert api_main.create_api_app().debug is True
