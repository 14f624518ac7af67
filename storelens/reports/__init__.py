"""Report configuration, chart mode resolution and chart data shaping."""

from .chart_data import (  # noqa: F401
    ReportSeries,
    build_item_comparison_data,
    build_report_chart,
    build_time_comparison_data,
    has_series_error,
)
from .config import REPORTS, ChartDefinition, ReportConfig, get_selected_chart  # noqa: F401
from .filters import (  # noqa: F401
    ITEM_COMPARISON,
    TIME_COMPARISON,
    FilterConfig,
    FilterOption,
    get_chart_mode,
    get_selected_filter,
)

__all__ = [
    "ChartDefinition",
    "FilterConfig",
    "FilterOption",
    "ITEM_COMPARISON",
    "REPORTS",
    "ReportConfig",
    "ReportSeries",
    "TIME_COMPARISON",
    "build_item_comparison_data",
    "build_report_chart",
    "build_time_comparison_data",
    "get_chart_mode",
    "get_selected_chart",
    "get_selected_filter",
    "has_series_error",
]
