"""Orders report endpoint."""

from __future__ import annotations

from flask import jsonify, request

from . import bp, get_reports
from .helpers import build_report_args, page_url


@bp.route("/reports/orders", methods=["GET"])
def orders_report():
    """One row per order, with WordPress-style pagination headers."""
    args = build_report_args(request.args)
    page = get_reports().orders(args)

    host = request.host_url.rstrip("/")
    data = [
        {**row, "_links": {"order": {"href": f"{host}/orders/{row['order_id']}"}}}
        for row in page.rows
    ]

    response = jsonify(data)
    response.headers["X-WP-Total"] = str(page.total)
    response.headers["X-WP-TotalPages"] = str(page.pages)

    links = []
    if page.page > 1:
        links.append(f'<{page_url(min(page.page - 1, max(page.pages, 1)))}>; rel="prev"')
    if page.pages > page.page:
        links.append(f'<{page_url(page.page + 1)}>; rel="next"')
    if links:
        response.headers["Link"] = ", ".join(links)

    return response
