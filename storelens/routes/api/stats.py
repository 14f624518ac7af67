"""Report interval statistics endpoint."""

from __future__ import annotations

from flask import jsonify, request

from . import bp, get_metrics, get_reports
from .helpers import build_report_args


@bp.route("/reports/<endpoint>/stats", methods=["GET"])
def report_stats(endpoint: str):
    """Totals and per-interval subtotals, optionally segmented."""
    if not get_metrics().has_endpoint(endpoint):
        return jsonify({"error": f"Unknown report {endpoint!r}"}), 404

    args = build_report_args(request.args)
    return jsonify(get_reports().stats(endpoint, args))
