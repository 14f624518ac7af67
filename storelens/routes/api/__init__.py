"""Analytics REST blueprint package."""

from __future__ import annotations

from flask import Blueprint

bp = Blueprint("api", __name__)


def get_metrics():
    from flask import current_app

    return current_app.extensions["metrics"]


def get_datastore():
    from flask import current_app

    return current_app.extensions["datastore"]


def get_reports():
    from flask import current_app

    return current_app.extensions["reports"]


def get_fetcher():
    """A fresh fetcher per request, so cached series never outlive the data."""
    from flask import current_app

    from storelens.services.fetcher import ReportDataFetcher

    return ReportDataFetcher(get_reports(), today=current_app.config.get("TODAY"))


from . import charts, errors, health, orders, search, stats  # noqa: E402,F401

__all__ = ["bp", "get_metrics", "get_datastore", "get_reports", "get_fetcher"]
