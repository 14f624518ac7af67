"""Healthcheck endpoint."""

from __future__ import annotations

import duckdb
from flask import current_app, jsonify

from . import bp, get_datastore


@bp.route("/health", methods=["GET"])
def health():
    datastore = get_datastore()
    try:
        df = datastore.get(copy=False)
        return (
            jsonify(
                {
                    "ok": True,
                    "rows": int(len(df)),
                    "orders": int(df["order_id"].nunique()) if len(df) else 0,
                }
            ),
            200,
        )
    except duckdb.Error as exc:  # pragma: no cover
        current_app.logger.exception("Healthcheck failed")
        return jsonify({"ok": False, "error": str(exc)}), 500
