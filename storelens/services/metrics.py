"""Metrics service utilities."""

from __future__ import annotations

from typing import Dict, List, Optional

# key -> SQL aggregate over prod.order_lines
METRIC_DEFINITIONS: Dict[str, str] = {
    "orders_count": "COUNT(DISTINCT order_id)",
    "items_sold": "COALESCE(SUM(qty), 0)",
    "net_revenue": "COALESCE(SUM(net_total), 0)",
    "avg_order_value": "COALESCE(SUM(net_total) / NULLIF(COUNT(DISTINCT order_id), 0), 0)",
    "avg_items_per_order": "COALESCE(SUM(qty) / NULLIF(COUNT(DISTINCT order_id), 0), 0)",
}

ENDPOINT_METRICS: Dict[str, List[str]] = {
    "orders": [
        "orders_count",
        "net_revenue",
        "avg_order_value",
        "avg_items_per_order",
        "items_sold",
    ],
    "products": ["items_sold", "net_revenue", "orders_count"],
}


class Metrics:
    """Encapsulate metric definitions and helper routines."""

    def __init__(
        self,
        definitions: Optional[Dict[str, str]] = None,
        endpoints: Optional[Dict[str, List[str]]] = None,
    ):
        self.definitions = dict(definitions or METRIC_DEFINITIONS)
        self.endpoints = dict(endpoints or ENDPOINT_METRICS)

    def has_endpoint(self, endpoint: str) -> bool:
        return endpoint in self.endpoints

    def available(self, endpoint: str) -> List[str]:
        return list(self.endpoints.get(endpoint, []))

    def validate(self, endpoint: str, metric: Optional[str]) -> Optional[str]:
        """Check if a metric is reported by this endpoint."""
        if not metric:
            return None
        if metric in self.endpoints.get(endpoint, []) and metric in self.definitions:
            return metric
        return None

    def select_sql(self, endpoint: str) -> str:
        return ",\n          ".join(
            f"{self.definitions[key]} AS {key}" for key in self.available(endpoint)
        )


__all__ = ["Metrics", "METRIC_DEFINITIONS", "ENDPOINT_METRICS"]
