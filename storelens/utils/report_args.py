# report_args.py
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterable, List, Literal, Mapping, Optional, Tuple

import pandas as pd

from storelens.errors import InvalidReportArgs

Interval = Literal["hour", "day", "week", "month", "quarter", "year"]

INTERVALS = ("hour", "day", "week", "month", "quarter", "year")
SEGMENT_BY = ("product", "variation")
CUSTOMER_TYPES = ("", "new", "returning")


def _getlist(args: Mapping[str, Any], key: str) -> List[str]:
    if hasattr(args, "getlist"):
        values = args.getlist(key)
        if not values:
            values = args.getlist(f"{key}[]")
    else:
        value = args.get(key)
        if value is None:
            values = []
        elif isinstance(value, (list, tuple)):
            values = list(value)
        else:
            values = [value]
    return [str(v) for v in values if v not in (None, "")]


def parse_id_list(values: Iterable[Any]) -> Tuple[int, ...]:
    """Comma/space separated or repeated ids -> unique positive ints, in order."""
    ids: List[int] = []
    for value in values:
        for part in str(value).replace(" ", ",").split(","):
            if not part:
                continue
            try:
                num = abs(int(part))
            except ValueError:
                raise InvalidReportArgs(f"Invalid id {part!r}") from None
            if num and num not in ids:
                ids.append(num)
    return tuple(ids)


def parse_slug_list(values: Iterable[Any]) -> Tuple[str, ...]:
    slugs: List[str] = []
    for value in values:
        for part in str(value).split(","):
            part = part.strip().lower()
            if part and part not in slugs:
                slugs.append(part)
    return tuple(slugs)


def parse_datetime(value: Optional[str]) -> Optional[pd.Timestamp]:
    if not value:
        return None
    parsed = pd.to_datetime(value, errors="coerce")
    if pd.isna(parsed):
        raise InvalidReportArgs(f"Invalid ISO8601 date {value!r}")
    if parsed.tzinfo is not None:
        parsed = parsed.tz_convert("UTC").tz_localize(None)
    return parsed


def _parse_int(value: Optional[str], default: int, minimum: int = 1) -> int:
    if value in (None, ""):
        return default
    try:
        return max(abs(int(value)), minimum)
    except (TypeError, ValueError):
        raise InvalidReportArgs(f"Invalid integer {value!r}") from None


def _parse_bool(value: Optional[str]) -> bool:
    return str(value or "").strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class ReportArgs:
    after: Optional[pd.Timestamp] = None
    before: Optional[pd.Timestamp] = None
    interval: Interval = "week"
    page: int = 1
    per_page: int = 10
    orderby: str = "date"
    order: str = "desc"
    product_includes: Tuple[int, ...] = ()
    product_excludes: Tuple[int, ...] = ()
    variation_includes: Tuple[int, ...] = ()
    coupon_includes: Tuple[int, ...] = ()
    coupon_excludes: Tuple[int, ...] = ()
    status_is: Tuple[str, ...] = ()
    status_is_not: Tuple[str, ...] = ()
    customer_type: str = ""
    extended_info: bool = False
    segmentby: Optional[str] = None

    @classmethod
    def from_args(
        cls,
        args: Mapping[str, Any],
        default_per_page: int = 10,
        max_per_page: int = 100,
    ) -> "ReportArgs":
        """Build ``ReportArgs`` from request args (a MultiDict or a plain mapping)."""
        interval = (args.get("interval") or "week").lower()
        if interval not in INTERVALS:
            raise InvalidReportArgs(f"Unsupported interval {interval!r}")

        order = (args.get("order") or "desc").lower()
        if order not in ("asc", "desc"):
            raise InvalidReportArgs(f"Unsupported order {order!r}")

        segmentby = args.get("segmentby") or None
        if segmentby is not None and segmentby not in SEGMENT_BY:
            raise InvalidReportArgs(f"Unsupported segmentby {segmentby!r}")

        customer_type = args.get("customer_type") or ""
        if customer_type not in CUSTOMER_TYPES:
            raise InvalidReportArgs(f"Unsupported customer_type {customer_type!r}")

        after = parse_datetime(args.get("after"))
        before = parse_datetime(args.get("before"))
        if after is not None and before is not None and after > before:
            raise InvalidReportArgs("'after' must not be later than 'before'")

        per_page = min(_parse_int(args.get("per_page"), default_per_page), max_per_page)

        return cls(
            after=after,
            before=before,
            interval=interval,
            page=_parse_int(args.get("page"), 1),
            per_page=per_page,
            orderby=args.get("orderby") or "date",
            order=order,
            product_includes=parse_id_list(
                _getlist(args, "product_includes") or _getlist(args, "products")
            ),
            product_excludes=parse_id_list(_getlist(args, "product_excludes")),
            variation_includes=parse_id_list(_getlist(args, "variations")),
            coupon_includes=parse_id_list(_getlist(args, "coupon_includes")),
            coupon_excludes=parse_id_list(_getlist(args, "coupon_excludes")),
            status_is=parse_slug_list(_getlist(args, "status_is")),
            status_is_not=parse_slug_list(_getlist(args, "status_is_not")),
            customer_type=customer_type,
            extended_info=_parse_bool(args.get("extended_info")),
            segmentby=segmentby,
        )

    # -------- SQL helpers --------
    def trunc_unit(self) -> str:
        """Interval as a DuckDB date_trunc unit."""
        return self.interval

    def to_sql_where(self, date_col: str = "date_created", line_level: bool = False) -> Tuple[str, List[Any]]:
        """
        Build a safe SQL WHERE clause and its parameters (DuckDB compatible).

        INTERSECTION (AND) of:
          - date range (inclusive) on date_col
          - order status, customer type, coupon and product selections

        With ``line_level`` the product/variation includes restrict the order
        lines themselves; otherwise they select whole orders containing them.
        """
        where: List[str] = []
        params: List[Any] = []

        if self.after is not None:
            where.append(f"{date_col} >= ?")
            params.append(self.after.to_pydatetime())
        if self.before is not None:
            where.append(f"{date_col} <= ?")
            params.append(self.before.to_pydatetime())

        def in_list(column: str, values: Tuple[Any, ...], negate: bool = False) -> None:
            placeholders = ",".join(["?"] * len(values))
            op = "NOT IN" if negate else "IN"
            where.append(f"{column} {op} ({placeholders})")
            params.extend(values)

        def orders_with(column: str, values: Tuple[Any, ...], negate: bool = False) -> None:
            placeholders = ",".join(["?"] * len(values))
            op = "NOT IN" if negate else "IN"
            where.append(
                f"order_id {op} (SELECT order_id FROM prod.order_lines "
                f"WHERE {column} IN ({placeholders}))"
            )
            params.extend(values)

        if self.status_is:
            in_list("status", self.status_is)
        if self.status_is_not:
            in_list("status", self.status_is_not, negate=True)
        if self.customer_type:
            where.append("customer_type = ?")
            params.append(self.customer_type)

        if self.product_includes:
            if line_level:
                in_list("product_id", self.product_includes)
            else:
                orders_with("product_id", self.product_includes)
        if self.variation_includes:
            if line_level:
                in_list("variation_id", self.variation_includes)
            else:
                orders_with("variation_id", self.variation_includes)
        if self.product_excludes:
            orders_with("product_id", self.product_excludes, negate=True)
        if self.coupon_includes:
            orders_with("coupon_id", self.coupon_includes)
        if self.coupon_excludes:
            orders_with("coupon_id", self.coupon_excludes, negate=True)

        clause = " AND ".join(where) if where else "1=1"
        return clause, params


__all__ = ["ReportArgs", "INTERVALS", "parse_id_list", "parse_slug_list", "parse_datetime"]
