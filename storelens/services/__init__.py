"""Data access and report services."""

from .datastore import DataStore  # noqa: F401
from .fetcher import ReportDataFetcher  # noqa: F401
from .metrics import Metrics  # noqa: F401
from .reports import ReportsService  # noqa: F401

__all__ = ["DataStore", "Metrics", "ReportDataFetcher", "ReportsService"]
