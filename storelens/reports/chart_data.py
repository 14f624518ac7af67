"""Chart data shaping for report charts."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence

from .config import ChartDefinition
from .dates import (
    CHART_DATE_FORMAT,
    LABEL_DATE_FORMAT,
    CurrentDates,
    DateLike,
    format_date,
    get_allowed_intervals_for_query,
    get_chart_type_for_query,
    get_current_dates,
    get_date_formats_for_interval,
    get_interval_for_query,
    get_previous_date,
    get_tooltip_value_format,
)
from .filters import ITEM_COMPARISON, TIME_COMPARISON

Interval = Mapping[str, Any]
ChartRecord = Dict[str, Any]


@dataclass
class ReportSeries:
    """Resolved result of a report stats request."""

    data: Dict[str, Any] = field(default_factory=dict)
    is_requesting: bool = False
    is_error: bool = False

    @property
    def intervals(self) -> List[Interval]:
        return list((self.data or {}).get("intervals") or [])


def _date_start(interval: Interval) -> Any:
    date_start = interval.get("date_start")
    if not date_start:
        raise ValueError("report interval is missing 'date_start'")
    return date_start


def _subtotal(subtotals: Optional[Mapping[str, Any]], key: str):
    return (subtotals or {}).get(key) or 0


def build_item_comparison_data(intervals: Sequence[Interval], metric_key: str) -> List[ChartRecord]:
    """One record per interval with a ``{"value": n}`` slot per labelled segment."""
    records: List[ChartRecord] = []
    for interval in intervals:
        record: ChartRecord = {"date": format_date(_date_start(interval), CHART_DATE_FORMAT)}
        segments = (interval.get("subtotals") or {}).get("segments") or []
        for segment in segments:
            label = segment.get("segment_label")
            if label:
                record[label] = {"value": _subtotal(segment.get("subtotals"), metric_key)}
        records.append(record)
    return records


def build_time_comparison_data(
    primary_intervals: Sequence[Interval],
    secondary_intervals: Sequence[Interval],
    query: Mapping[str, Any],
    metric_key: str,
    interval: Optional[str] = None,
    dates: Optional[CurrentDates] = None,
    today: Optional[DateLike] = None,
) -> List[ChartRecord]:
    """
    Pair each primary interval with the secondary interval at the same index.

    Slots are keyed ``"{label} ({range})"`` for both windows. The secondary
    ``labelDate`` is the primary bucket date projected onto the comparison
    window, so tooltips show the date actually being compared. A missing
    secondary interval charts as ``0``.
    """
    interval = interval or get_interval_for_query(query, today)
    dates = dates or get_current_dates(query, today)
    primary_key = f"{dates.primary.label} ({dates.primary.range})"
    secondary_key = f"{dates.secondary.label} ({dates.secondary.range})"

    records: List[ChartRecord] = []
    for index, item in enumerate(primary_intervals):
        date_start = _date_start(item)
        secondary_date = get_previous_date(
            date_start,
            dates.primary.after,
            dates.secondary.after,
            query.get("compare"),
            interval,
        )
        secondary_item = secondary_intervals[index] if index < len(secondary_intervals) else None

        records.append(
            {
                "date": format_date(date_start, CHART_DATE_FORMAT),
                primary_key: {
                    "labelDate": date_start,
                    "value": _subtotal(item.get("subtotals"), metric_key),
                },
                secondary_key: {
                    "labelDate": format_date(secondary_date, LABEL_DATE_FORMAT),
                    "value": (
                        _subtotal(secondary_item.get("subtotals"), metric_key)
                        if secondary_item
                        else 0
                    ),
                },
            }
        )
    return records


def has_series_error(
    mode: str,
    primary: Optional[ReportSeries] = None,
    secondary: Optional[ReportSeries] = None,
    segment: Optional[ReportSeries] = None,
) -> bool:
    """True when a series the chart mode needs failed to load."""
    if mode == ITEM_COMPARISON:
        return segment is None or segment.is_error
    return primary is None or secondary is None or primary.is_error or secondary.is_error


def build_report_chart(
    mode: str,
    selected_chart: ChartDefinition,
    query: Mapping[str, Any],
    primary: Optional[ReportSeries] = None,
    secondary: Optional[ReportSeries] = None,
    segment: Optional[ReportSeries] = None,
    items_label: Optional[str] = None,
    today: Optional[DateLike] = None,
) -> Optional[Dict[str, Any]]:
    """
    Chart records plus display metadata, or ``None`` when nothing should render.

    ``None`` covers both a failed series and an empty record list; use
    ``has_series_error`` to tell them apart.
    """
    if mode not in (ITEM_COMPARISON, TIME_COMPARISON):
        raise ValueError(f"Unknown chart mode {mode!r}")
    if has_series_error(mode, primary, secondary, segment):
        return None

    interval = get_interval_for_query(query, today)

    if mode == ITEM_COMPARISON:
        is_requesting = segment.is_requesting
        source = segment.intervals
        data = build_item_comparison_data(source, selected_chart.key)
    else:
        is_requesting = primary.is_requesting or secondary.is_requesting
        source = primary.intervals
        data = build_time_comparison_data(
            source, secondary.intervals, query, selected_chart.key, interval=interval, today=today
        )

    if not data:
        return None

    formats = get_date_formats_for_interval(interval, len(source))

    return {
        "mode": mode,
        "data": data,
        "date_parser": CHART_DATE_FORMAT,
        "interval": interval,
        "allowed_intervals": get_allowed_intervals_for_query(query, today),
        "is_requesting": is_requesting,
        "items_label": items_label,
        "title": selected_chart.label,
        "tooltip_title": selected_chart.label if mode == TIME_COMPARISON else None,
        "tooltip_label_format": formats["tooltipLabelFormat"],
        "tooltip_value_format": get_tooltip_value_format(selected_chart.type),
        "type": get_chart_type_for_query(query),
        "value_type": selected_chart.type,
        "x_format": formats["xFormat"],
        "x2_format": formats["x2Format"],
    }


__all__ = [
    "ReportSeries",
    "build_item_comparison_data",
    "build_report_chart",
    "build_time_comparison_data",
    "has_series_error",
]
