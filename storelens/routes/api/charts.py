"""Report chart endpoint."""

from __future__ import annotations

from flask import current_app, jsonify, request

from storelens.errors import InvalidReportArgs
from storelens.reports import (
    ITEM_COMPARISON,
    REPORTS,
    build_report_chart,
    get_chart_mode,
    get_selected_chart,
    get_selected_filter,
    has_series_error,
)
from storelens.reports.filters import CHART_MODES
from storelens.reports.products import get_chart_meta, is_single_product_view, segment_by_for

from . import bp, get_fetcher, get_metrics, get_reports
from .helpers import query_from_args


@bp.route("/analytics/<report>/chart", methods=["GET"])
def report_chart(report: str):
    """Chart records for a report, in the chart mode its filters select."""
    config = REPORTS.get(report)
    if config is None:
        return jsonify({"error": f"Unknown report {report!r}"}), 404

    query = query_from_args(request.args)
    mode = query.pop("mode", None)
    items_label = None

    if report == "products":
        single = is_single_product_view(query)
        variable = single and get_reports().is_variable_product(query["products"])
        if single:
            query["is-variable"] = variable
        meta = get_chart_meta(query, single, variable)
        mode = mode or meta["mode"]
        items_label = meta["items_label"]
        if mode == ITEM_COMPARISON:
            query["segmentby"] = segment_by_for(meta["compare_object"])

    chart_mode = mode or get_chart_mode(config.filters, query) or current_app.config["DEFAULT_CHART_MODE"]
    if chart_mode not in CHART_MODES:
        raise InvalidReportArgs(f"Unsupported chart mode {chart_mode!r}")

    chart_key = get_metrics().validate(config.endpoint, query.get("chart"))
    selected_chart = get_selected_chart(chart_key, config.charts)
    fetcher = get_fetcher()
    primary = secondary = segment = None

    if chart_mode == ITEM_COMPARISON:
        selected = get_selected_filter(config.filters, query)
        segment_query = {**(selected.query if selected is not None else {}), **query}
        segment_query["segmentby"] = query.get("segmentby") or "product"
        segment = fetcher.fetch(config.endpoint, "primary", segment_query)
    else:
        primary = fetcher.fetch(config.endpoint, "primary", query)
        secondary = fetcher.fetch(config.endpoint, "secondary", query)

    chart = build_report_chart(
        chart_mode,
        selected_chart,
        query,
        primary=primary,
        secondary=secondary,
        segment=segment,
        items_label=items_label,
        today=current_app.config.get("TODAY"),
    )

    if chart is None:
        error = has_series_error(chart_mode, primary, secondary, segment)
        return jsonify({"chart": None, "error": error, "mode": chart_mode})

    return jsonify({"chart": chart, "error": False, "mode": chart_mode})
