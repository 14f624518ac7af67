"""Error handlers for the API blueprint."""

from __future__ import annotations

import duckdb
from flask import current_app, jsonify

from storelens.errors import InvalidReportArgs

from . import bp


@bp.errorhandler(InvalidReportArgs)
def invalid_report_args(exc: InvalidReportArgs):
    return jsonify({"error": str(exc)}), 400


@bp.errorhandler(duckdb.Error)
def query_failed(exc: duckdb.Error):
    current_app.logger.exception("Report query failed")
    return jsonify({"error": "Report query failed"}), 500
