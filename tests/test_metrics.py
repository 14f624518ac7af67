"""Tests for the metric catalogue."""

import pytest

from storelens.reports.config import REPORTS
from storelens.services.metrics import METRIC_DEFINITIONS, Metrics


@pytest.mark.parametrize("report", sorted(REPORTS))
def test_every_chart_is_a_reported_metric(report):
    config = REPORTS[report]
    metrics = Metrics()
    for chart in config.charts:
        assert metrics.validate(config.endpoint, chart.key) == chart.key


def test_unknown_metric_is_rejected():
    metrics = Metrics()
    assert metrics.validate("products", "avg_order_value") is None
    assert metrics.validate("orders", None) is None


def test_select_sql_aliases_each_aggregate():
    sql = Metrics().select_sql("products")
    assert f"{METRIC_DEFINITIONS['items_sold']} AS items_sold" in sql
    assert sql.count(" AS ") == 3
