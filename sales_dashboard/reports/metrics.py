"""
Report Metrics

Prometheus counters and timings for report queries, scraped from /metrics.
"""

from prometheus_client import Counter, Histogram

REPORT_QUERIES = Counter(
    "sales_dashboard_report_queries_total",
    "Report queries executed",
    ["report", "status"],
)

REPORT_QUERY_SECONDS = Histogram(
    "sales_dashboard_report_query_seconds",
    "Time spent executing report queries",
    ["report"],
)
