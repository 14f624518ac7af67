"""Entity search endpoint backing the filter autocompleters."""

from __future__ import annotations

from flask import current_app, jsonify, request

from storelens.search import search as search_entities

from . import bp, get_datastore
from .helpers import parse_limit


@bp.route("/search/<search_type>", methods=["GET"])
def search(search_type: str):
    term = (request.args.get("search") or request.args.get("q") or "").strip()
    limit = parse_limit(request.args.get("limit"), current_app.config.get("SEARCH_LIMIT", 20))

    try:
        results = search_entities(get_datastore(), search_type, term, limit)
    except KeyError:
        return jsonify({"error": f"Unsupported search type {search_type!r}"}), 404

    return jsonify(results)
