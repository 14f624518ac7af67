"""Static chart and filter configuration for each report."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Sequence

from .filters import ITEM_COMPARISON, FilterConfig, FilterOption


@dataclass(frozen=True)
class ChartDefinition:
    key: str
    label: str
    type: str = "number"
    order: str = "desc"
    orderby: Optional[str] = None


@dataclass(frozen=True)
class ReportConfig:
    name: str
    endpoint: str
    charts: Sequence[ChartDefinition]
    filters: Sequence[FilterConfig]


def get_selected_chart(key: Optional[str], charts: Sequence[ChartDefinition]) -> ChartDefinition:
    """Chart matching ``key``; the first chart when nothing matches."""
    for chart in charts:
        if chart.key == key:
            return chart
    return charts[0]


# ------------------------------ Orders ----------------------------------------

ORDERS_CHARTS = (
    ChartDefinition("orders_count", "Orders", "number", orderby="orders_count"),
    ChartDefinition("net_revenue", "Net Revenue", "currency", orderby="net_total"),
    ChartDefinition("avg_order_value", "Average Order Value", "currency", orderby="avg_order_value"),
    ChartDefinition(
        "avg_items_per_order", "Average Items Per Order", "average", orderby="avg_items_per_order"
    ),
)

ORDERS_FILTERS = (
    FilterConfig(
        param="filter",
        static_params=("chart",),
        filters=(
            FilterOption(label="All Orders", value="all"),
            FilterOption(label="Advanced Filters", value="advanced"),
        ),
    ),
)

# ------------------------------ Products --------------------------------------

PRODUCTS_CHARTS = (
    ChartDefinition("items_sold", "Items Sold", "number", orderby="items_sold"),
    ChartDefinition("net_revenue", "Net Revenue", "currency", orderby="net_revenue"),
    ChartDefinition("orders_count", "Orders", "number", orderby="orders_count"),
)


def _single_variable_product(query) -> bool:
    return (
        query.get("filter") == "single_product"
        and bool(query.get("products"))
        and bool(query.get("is-variable"))
    )


PRODUCTS_FILTERS = (
    FilterConfig(
        param="filter",
        static_params=("chart",),
        filters=(
            FilterOption(label="All Products", value="all"),
            FilterOption(
                label="Single Product",
                value="select_product",
                chart_mode=ITEM_COMPARISON,
                sub_filters=(
                    FilterOption(
                        label="Single Product",
                        value="single_product",
                        chart_mode=ITEM_COMPARISON,
                        settings={"type": "products", "param": "products"},
                    ),
                ),
            ),
            FilterOption(
                label="Comparison",
                value="compare-products",
                chart_mode=ITEM_COMPARISON,
                settings={"type": "products", "param": "products"},
            ),
            FilterOption(
                label="Top Products by Items Sold",
                value="top_items",
                chart_mode=ITEM_COMPARISON,
                query={"orderby": "items_sold", "order": "desc"},
            ),
            FilterOption(
                label="Top Products by Net Revenue",
                value="top_sales",
                chart_mode=ITEM_COMPARISON,
                query={"orderby": "net_revenue", "order": "desc"},
            ),
        ),
    ),
    FilterConfig(
        param="filter-variations",
        static_params=("filter", "products"),
        show_filters=_single_variable_product,
        filters=(
            FilterOption(label="All Variations", value="all", chart_mode=ITEM_COMPARISON),
            FilterOption(
                label="Comparison",
                value="compare-variations",
                chart_mode=ITEM_COMPARISON,
                settings={"type": "variations", "param": "variations"},
            ),
        ),
    ),
)

REPORTS: Dict[str, ReportConfig] = {
    "orders": ReportConfig("orders", "orders", ORDERS_CHARTS, ORDERS_FILTERS),
    "products": ReportConfig("products", "products", PRODUCTS_CHARTS, PRODUCTS_FILTERS),
}


__all__ = [
    "ChartDefinition",
    "ORDERS_CHARTS",
    "ORDERS_FILTERS",
    "PRODUCTS_CHARTS",
    "PRODUCTS_FILTERS",
    "REPORTS",
    "ReportConfig",
    "get_selected_chart",
]
