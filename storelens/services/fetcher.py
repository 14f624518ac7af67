"""Report series fetching for charts."""

from __future__ import annotations

import logging
from typing import Any, Dict, Hashable, Mapping, Optional, Tuple

import duckdb

from storelens.errors import InvalidReportArgs
from storelens.reports.chart_data import ReportSeries
from storelens.reports.dates import DateLike, get_current_dates, get_interval_for_query
from storelens.utils.report_args import ReportArgs, parse_id_list

from .reports import ReportsService

logger = logging.getLogger("storelens.fetcher")

SLOTS = ("primary", "secondary")

CacheKey = Tuple[str, str, Tuple[Tuple[str, Hashable], ...]]


def _id_values(value: Any) -> list:
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value or ""]


def _freeze(query: Mapping[str, Any]) -> Tuple[Tuple[str, Hashable], ...]:
    return tuple(
        sorted(
            (str(k), tuple(v) if isinstance(v, (list, tuple)) else v)
            for k, v in query.items()
        )
    )


class ReportDataFetcher:
    """Resolve ``(endpoint, slot, query)`` into a ``ReportSeries``.

    The slot picks the date window: ``primary`` is the period being reported,
    ``secondary`` the period it is compared against. Results are cached for
    the lifetime of the fetcher.
    """

    def __init__(self, reports: ReportsService, today: Optional[DateLike] = None):
        self.reports = reports
        self.today = today
        self._cache: Dict[CacheKey, ReportSeries] = {}

    def build_args(self, slot: str, query: Mapping[str, Any]) -> ReportArgs:
        if slot not in SLOTS:
            raise InvalidReportArgs(f"Unknown report slot {slot!r}")

        dates = get_current_dates(query, self.today)
        window = dates.primary if slot == "primary" else dates.secondary

        return ReportArgs(
            after=window.after,
            before=window.before,
            interval=get_interval_for_query(query, self.today),
            orderby=query.get("orderby") or "date",
            product_includes=parse_id_list(_id_values(query.get("products"))),
            variation_includes=parse_id_list(_id_values(query.get("variations"))),
            segmentby=query.get("segmentby") or None,
        )

    def fetch(self, endpoint: str, slot: str, query: Mapping[str, Any]) -> ReportSeries:
        key = (endpoint, slot, _freeze(query))
        if key in self._cache:
            return self._cache[key]

        try:
            data = self.reports.stats(endpoint, self.build_args(slot, query))
        except (InvalidReportArgs, duckdb.Error) as exc:
            logger.warning("Report stats request %s/%s failed: %s", endpoint, slot, exc)
            return ReportSeries(data={}, is_error=True)

        series = ReportSeries(data=data)
        self._cache[key] = series
        return series


__all__ = ["ReportDataFetcher", "SLOTS"]
