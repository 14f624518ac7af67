"""Shared helper functions for API routes."""

from __future__ import annotations

from typing import Any, Dict
from urllib.parse import urlencode

from flask import current_app, request

from storelens.utils.report_args import ReportArgs


def query_from_args(args) -> Dict[str, Any]:
    """Flatten request args: repeated keys become lists, single keys strings."""
    query: Dict[str, Any] = {}
    for key in args.keys():
        values = args.getlist(key)
        query[key] = values if len(values) > 1 else values[0]
    return query


def build_report_args(args) -> ReportArgs:
    return ReportArgs.from_args(
        args,
        default_per_page=current_app.config.get("DEFAULT_PER_PAGE", 10),
        max_per_page=current_app.config.get("MAX_PER_PAGE", 100),
    )


def parse_limit(value, default: int) -> int:
    try:
        limit = int(value or default)
    except (TypeError, ValueError):
        limit = default
    return max(limit, 1)


def page_url(page: int) -> str:
    """Current request URL with ``page`` replaced."""
    args = request.args.copy()
    args["page"] = str(page)
    return f"{request.base_url}?{urlencode(list(args.items(multi=True)))}"


__all__ = ["build_report_args", "page_url", "parse_limit", "query_from_args"]
