"""Report queries over prod.order_lines."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

import pandas as pd

from storelens.errors import InvalidReportArgs
from storelens.utils.report_args import ReportArgs

from .datastore import TABLE, DataStore
from .metrics import Metrics

logger = logging.getLogger("storelens.reports")

ORDERS_ORDERBY: Dict[str, str] = {
    "date": "date_created",
    "num_items_sold": "num_items_sold",
    "net_total": "net_total",
}

COUNT_METRICS = {"orders_count", "items_sold"}

# segmentby -> (id column, label column)
SEGMENT_COLUMNS: Dict[str, Tuple[str, str]] = {
    "product": ("product_id", "product_name"),
    "variation": ("variation_id", "variation_name"),
}

DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"


@dataclass
class OrdersPage:
    rows: List[Dict[str, Any]] = field(default_factory=list)
    total: int = 0
    pages: int = 0
    page: int = 1


def _number(key: str, value: Any):
    if value is None or pd.isna(value):
        return 0
    if key in COUNT_METRICS:
        return int(value)
    return float(value)


def _int_or_none(value: Any) -> Optional[int]:
    if value is None or pd.isna(value):
        return None
    return int(value)


def _text(value: Any) -> str:
    if value is None or pd.isna(value):
        return ""
    return str(value)


def _bucket_key(value: Any) -> str:
    return pd.Timestamp(value).strftime(DATETIME_FORMAT)


def _interval_id(start: pd.Timestamp, interval: str) -> str:
    if interval == "hour":
        return start.strftime("%Y-%m-%d %H")
    if interval == "day":
        return start.strftime("%Y-%m-%d")
    if interval == "week":
        iso = start.isocalendar()
        return f"{iso[0]}-W{iso[1]:02d}"
    if interval == "month":
        return start.strftime("%Y-%m")
    if interval == "quarter":
        return f"{start.year}-Q{start.quarter}"
    return start.strftime("%Y")


class ReportsService:
    """Aggregate order lines into report rows and interval statistics."""

    def __init__(self, datastore: DataStore, metrics: Metrics, config: Mapping[str, Any]):
        self.datastore = datastore
        self.metrics = metrics
        self.config = config

    # ---------- helpers ----------

    def _subtotals(self, keys: Sequence[str], row: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
        row = row or {}
        return {key: _number(key, row.get(key)) for key in keys}

    def _date_bounds(self, clause: str, params: List[Any]) -> Tuple[Optional[pd.Timestamp], Optional[pd.Timestamp]]:
        df = self.datastore.run_query(
            f"SELECT MIN(date_created) AS dmin, MAX(date_created) AS dmax FROM {TABLE} WHERE {clause};",
            params,
        )
        if df is None or df.empty or pd.isna(df.iloc[0]["dmin"]):
            return None, None
        return pd.Timestamp(df.iloc[0]["dmin"]), pd.Timestamp(df.iloc[0]["dmax"])

    # ---------- orders list ----------

    def orders(self, args: ReportArgs) -> OrdersPage:
        """One row per order, paged and sorted."""
        if args.orderby not in ORDERS_ORDERBY:
            raise InvalidReportArgs(f"Unsupported orderby {args.orderby!r}")

        self.datastore.ensure_table()
        clause, params = args.to_sql_where()

        cdf = self.datastore.run_query(
            f"SELECT COUNT(DISTINCT order_id) AS n FROM {TABLE} WHERE {clause};", params
        )
        total = int(cdf.iloc[0]["n"]) if cdf is not None and not cdf.empty else 0
        pages = math.ceil(total / args.per_page) if total else 0

        direction = "ASC" if args.order == "asc" else "DESC"
        df = self.datastore.run_query(
            f"""
            SELECT
              order_id,
              MIN(date_created) AS date_created,
              ANY_VALUE(status) AS status,
              ANY_VALUE(customer_id) AS customer_id,
              COALESCE(SUM(qty), 0) AS num_items_sold,
              COALESCE(SUM(net_total), 0) AS net_total,
              ANY_VALUE(customer_type) AS customer_type
            FROM {TABLE}
            WHERE {clause}
            GROUP BY order_id
            ORDER BY {ORDERS_ORDERBY[args.orderby]} {direction}, order_id {direction}
            LIMIT ? OFFSET ?;
            """,
            params + [args.per_page, (args.page - 1) * args.per_page],
        )

        rows: List[Dict[str, Any]] = []
        for record in df.to_dict(orient="records"):
            rows.append(
                {
                    "order_id": int(record["order_id"]),
                    "date_created": pd.Timestamp(record["date_created"]).strftime(DATETIME_FORMAT),
                    "status": _text(record["status"]),
                    "customer_id": _int_or_none(record["customer_id"]) or 0,
                    "num_items_sold": int(record["num_items_sold"]),
                    "net_total": float(record["net_total"]),
                    "customer_type": _text(record["customer_type"]),
                }
            )

        if args.extended_info and rows:
            extended = self._extended_info([row["order_id"] for row in rows])
            for row in rows:
                row["extended_info"] = extended.get(row["order_id"], {"products": [], "categories": []})

        return OrdersPage(rows=rows, total=total, pages=pages, page=args.page)

    def _extended_info(self, order_ids: List[int]) -> Dict[int, Dict[str, list]]:
        placeholders = ",".join(["?"] * len(order_ids))
        df = self.datastore.run_query(
            f"""
            SELECT DISTINCT order_id, product_id, product_name, category_id
            FROM {TABLE}
            WHERE order_id IN ({placeholders})
            ORDER BY order_id, product_id;
            """,
            order_ids,
        )
        info: Dict[int, Dict[str, list]] = {}
        for record in df.to_dict(orient="records"):
            entry = info.setdefault(int(record["order_id"]), {"products": [], "categories": []})
            product_id = _int_or_none(record["product_id"])
            if product_id is not None and all(p["id"] != product_id for p in entry["products"]):
                entry["products"].append({"id": product_id, "name": _text(record["product_name"])})
            category_id = _int_or_none(record["category_id"])
            if category_id is not None and category_id not in entry["categories"]:
                entry["categories"].append(category_id)
        return info

    def is_variable_product(self, product_id: Any) -> bool:
        """True when any order line of the product names a variation."""
        try:
            pid = int(product_id)
        except (TypeError, ValueError):
            return False
        self.datastore.ensure_table()
        df = self.datastore.run_query(
            f"SELECT COUNT(*) AS n FROM {TABLE} WHERE product_id = ? AND variation_id IS NOT NULL;",
            [pid],
        )
        return bool(int(df.iloc[0]["n"])) if not df.empty else False

    # ---------- interval stats ----------

    def stats(self, endpoint: str, args: ReportArgs) -> Dict[str, Any]:
        """
        Totals and per-interval subtotals for ``endpoint``.

        Every bucket between ``after`` and ``before`` is present; buckets with
        no orders carry zero subtotals. With ``segmentby`` each interval also
        lists the same segments (selected ids, or the top entities by
        ``orderby``), so series stay aligned across intervals.
        """
        keys = self.metrics.available(endpoint)
        if not keys:
            raise InvalidReportArgs(f"Unknown report endpoint {endpoint!r}")

        self.datastore.ensure_table()
        clause, params = args.to_sql_where(line_level=endpoint == "products")
        metric_sql = self.metrics.select_sql(endpoint)

        totals_df = self.datastore.run_query(
            f"SELECT {metric_sql} FROM {TABLE} WHERE {clause};", params
        )
        totals_row = totals_df.to_dict(orient="records")[0] if not totals_df.empty else {}
        totals = self._subtotals(keys, totals_row)

        after, before = args.after, args.before
        if after is None or before is None:
            dmin, dmax = self._date_bounds(clause, params)
            after = after if after is not None else dmin
            before = before if before is not None else dmax
        if after is None or before is None:
            return {"totals": totals, "intervals": []}

        unit = args.trunc_unit()
        alias = self.config.get("PERIOD_ALIAS", {}).get(unit, "D")
        periods = pd.period_range(start=after, end=before, freq=alias)

        df = self.datastore.run_query(
            f"""
            SELECT
              CAST(date_trunc('{unit}', date_created) AS TIMESTAMP) AS bucket,
              {metric_sql}
            FROM {TABLE}
            WHERE {clause}
            GROUP BY 1
            ORDER BY 1;
            """,
            params,
        )
        by_bucket = {
            _bucket_key(record["bucket"]): record for record in df.to_dict(orient="records")
        }

        segments = None
        if args.segmentby:
            segments = self._segments(endpoint, args, clause, params, keys, unit)
            totals["segments"] = segments["totals"]

        intervals: List[Dict[str, Any]] = []
        for period in periods:
            start = period.start_time
            date_start = max(start, after)
            date_end = min(period.end_time.floor("s"), before)
            subtotals = self._subtotals(keys, by_bucket.get(_bucket_key(start)))
            if segments is not None:
                subtotals["segments"] = segments["by_bucket"](start)
            intervals.append(
                {
                    "interval": _interval_id(start, unit),
                    "date_start": date_start.strftime(DATETIME_FORMAT),
                    "date_end": date_end.strftime(DATETIME_FORMAT),
                    "subtotals": subtotals,
                }
            )

        logger.debug("stats %s: %d interval(s) by %s", endpoint, len(intervals), unit)
        return {"totals": totals, "intervals": intervals}

    def _segments(
        self,
        endpoint: str,
        args: ReportArgs,
        clause: str,
        params: List[Any],
        keys: Sequence[str],
        unit: str,
    ) -> Dict[str, Any]:
        id_col, label_col = SEGMENT_COLUMNS[args.segmentby]
        metric_sql = self.metrics.select_sql(endpoint)
        selected = args.product_includes if args.segmentby == "product" else args.variation_includes

        if selected:
            placeholders = ",".join(["?"] * len(selected))
            id_clause = f"{id_col} IN ({placeholders})"
            id_params = list(selected)
            seg_df = self.datastore.run_query(
                f"""
                SELECT {id_col} AS segment_id, {metric_sql}
                FROM {TABLE}
                WHERE {clause} AND {id_clause}
                GROUP BY 1;
                """,
                params + id_params,
            )
            labels_df = self.datastore.run_query(
                f"""
                SELECT {id_col} AS segment_id, ANY_VALUE({label_col}) AS segment_label
                FROM {TABLE}
                WHERE {id_clause}
                GROUP BY 1;
                """,
                id_params,
            )
            labels = {
                int(r["segment_id"]): _text(r["segment_label"])
                for r in labels_df.to_dict(orient="records")
            }
            segment_ids = list(selected)
        else:
            orderby = args.orderby if args.orderby in keys else keys[0]
            seg_df = self.datastore.run_query(
                f"""
                SELECT {id_col} AS segment_id, ANY_VALUE({label_col}) AS segment_label, {metric_sql}
                FROM {TABLE}
                WHERE {clause} AND {id_col} IS NOT NULL
                GROUP BY 1
                ORDER BY {orderby} DESC, 1 ASC
                LIMIT ?;
                """,
                params + [int(self.config.get("TOP_SEGMENTS", 5))],
            )
            labels = {
                int(r["segment_id"]): _text(r["segment_label"])
                for r in seg_df.to_dict(orient="records")
            }
            segment_ids = list(labels)

        seg_totals = {int(r["segment_id"]): r for r in seg_df.to_dict(orient="records")}

        per_bucket: Dict[Tuple[str, int], Mapping[str, Any]] = {}
        if segment_ids:
            placeholders = ",".join(["?"] * len(segment_ids))
            bucket_df = self.datastore.run_query(
                f"""
                SELECT
                  CAST(date_trunc('{unit}', date_created) AS TIMESTAMP) AS bucket,
                  {id_col} AS segment_id,
                  {metric_sql}
                FROM {TABLE}
                WHERE {clause} AND {id_col} IN ({placeholders})
                GROUP BY 1, 2;
                """,
                params + segment_ids,
            )
            per_bucket = {
                (_bucket_key(r["bucket"]), int(r["segment_id"])): r
                for r in bucket_df.to_dict(orient="records")
            }

        def describe(segment_id: int, row: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
            return {
                "segment_id": segment_id,
                "segment_label": labels.get(segment_id, ""),
                "subtotals": self._subtotals(keys, row),
            }

        def by_bucket(start: pd.Timestamp) -> List[Dict[str, Any]]:
            key = _bucket_key(start)
            return [describe(sid, per_bucket.get((key, sid))) for sid in segment_ids]

        return {
            "totals": [describe(sid, seg_totals.get(sid)) for sid in segment_ids],
            "by_bucket": by_bucket,
        }


__all__ = ["OrdersPage", "ReportsService", "ORDERS_ORDERBY"]
