"""Report date windows, intervals and display formats.

A report query names a ``period`` (``month``, ``last_week``, ``custom`` ...)
and a ``compare`` mode. From those we derive the primary window (the period
being reported) and the secondary window it is compared against, the
intervals the chart may be bucketed by, and the formats used to label it.
"""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

import pandas as pd

DateLike = Union[str, pd.Timestamp, dt.datetime, dt.date]

DEFAULT_PERIOD = "month"
DEFAULT_COMPARE = "previous_year"

PERIOD_LABELS: Dict[str, str] = {
    "today": "Today",
    "yesterday": "Yesterday",
    "week": "Week to Date",
    "last_week": "Last Week",
    "month": "Month to Date",
    "last_month": "Last Month",
    "quarter": "Quarter to Date",
    "last_quarter": "Last Quarter",
    "year": "Year to Date",
    "last_year": "Last Year",
    "custom": "Custom",
}

COMPARE_LABELS: Dict[str, str] = {
    "previous_period": "Previous Period",
    "previous_year": "Previous Year",
}

# period -> (pandas period alias, DateOffset keyword, units)
_PERIOD_UNITS: Dict[str, Tuple[str, str, int]] = {
    "week": ("W", "weeks", 1),
    "month": ("M", "months", 1),
    "quarter": ("Q", "months", 3),
    "year": ("Y", "years", 1),
}

CHART_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"
LABEL_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

DAY_TICKS_THRESHOLD = 63
WEEK_TICKS_THRESHOLD = 9


@dataclass(frozen=True)
class DateWindow:
    label: str
    range: str
    after: pd.Timestamp
    before: pd.Timestamp


@dataclass(frozen=True)
class CurrentDates:
    primary: DateWindow
    secondary: DateWindow


def to_timestamp(value: DateLike) -> pd.Timestamp:
    ts = pd.Timestamp(value)
    if ts.tzinfo is not None:
        ts = ts.tz_localize(None)
    return ts


def format_date(value: DateLike, fmt: str = CHART_DATE_FORMAT) -> str:
    return to_timestamp(value).strftime(fmt)


def _end_of_day(ts: pd.Timestamp) -> pd.Timestamp:
    return ts.normalize() + pd.Timedelta(days=1) - pd.Timedelta(seconds=1)


def _today(today: Optional[DateLike]) -> pd.Timestamp:
    return to_timestamp(today).normalize() if today is not None else pd.Timestamp.today().normalize()


def _short(ts: pd.Timestamp) -> str:
    return f"{ts:%b} {ts.day}"


def get_range_label(after: DateLike, before: DateLike) -> str:
    """Human label for an inclusive date range, e.g. ``Jan 1 - 31, 2019``."""
    start, end = to_timestamp(after), to_timestamp(before)
    if start.normalize() == end.normalize():
        return f"{_short(start)}, {start.year}"
    if start.year == end.year:
        if start.month == end.month:
            return f"{_short(start)} - {end.day}, {end.year}"
        return f"{_short(start)} - {_short(end)}, {end.year}"
    return f"{_short(start)}, {start.year} - {_short(end)}, {end.year}"


def get_current_period(
    period: str, today: Optional[DateLike] = None
) -> Tuple[pd.Timestamp, pd.Timestamp]:
    """Primary (after, before) for a named period, relative to ``today``."""
    day = _today(today)
    if period == "today":
        return day, _end_of_day(day)
    if period == "yesterday":
        day = day - pd.Timedelta(days=1)
        return day, _end_of_day(day)

    unit = period[len("last_"):] if period.startswith("last_") else period
    alias, _kw, _n = _PERIOD_UNITS[unit]
    current = day.to_period(alias)
    if period.startswith("last_"):
        previous = current - 1
        return previous.start_time, _end_of_day(previous.end_time)
    return current.start_time, _end_of_day(day)


def _custom_window(query: Mapping[str, Any]) -> Optional[Tuple[pd.Timestamp, pd.Timestamp]]:
    after, before = query.get("after"), query.get("before")
    if not after or not before:
        return None
    start = pd.to_datetime(after, errors="coerce")
    end = pd.to_datetime(before, errors="coerce")
    if pd.isna(start) or pd.isna(end) or start > end:
        return None
    return to_timestamp(start).normalize(), _end_of_day(to_timestamp(end))


def get_last_period(
    after: pd.Timestamp, before: pd.Timestamp, period: str, compare: str
) -> Tuple[pd.Timestamp, pd.Timestamp]:
    """Secondary (after, before) for the primary window and compare mode."""
    if compare == "previous_year":
        offset = pd.DateOffset(years=1)
        return after - offset, _end_of_day(before - offset)

    if period == "custom":
        length = (before.normalize() - after.normalize()).days
        end = after.normalize() - pd.Timedelta(days=1)
        return end - pd.Timedelta(days=length), _end_of_day(end)

    if period in ("today", "yesterday"):
        return after - pd.Timedelta(days=1), before - pd.Timedelta(days=1)

    if period.startswith("last_"):
        alias = _PERIOD_UNITS[period[len("last_"):]][0]
        previous = after.to_period(alias) - 1
        return previous.start_time, _end_of_day(previous.end_time)

    _alias, keyword, units = _PERIOD_UNITS[period]
    offset = pd.DateOffset(**{keyword: units})
    return after - offset, _end_of_day(before - offset)


def get_current_dates(query: Mapping[str, Any], today: Optional[DateLike] = None) -> CurrentDates:
    """Primary and secondary date windows for a report query."""
    period = query.get("period") or DEFAULT_PERIOD
    if period not in PERIOD_LABELS:
        period = DEFAULT_PERIOD
    compare = query.get("compare") or DEFAULT_COMPARE
    if compare not in COMPARE_LABELS:
        compare = DEFAULT_COMPARE

    window = _custom_window(query) if period == "custom" else None
    if window is None:
        if period == "custom":
            period = DEFAULT_PERIOD
        window = get_current_period(period, today)
    after, before = window

    secondary_after, secondary_before = get_last_period(after, before, period, compare)

    return CurrentDates(
        primary=DateWindow(
            label=PERIOD_LABELS[period],
            range=get_range_label(after, before),
            after=after,
            before=before,
        ),
        secondary=DateWindow(
            label=COMPARE_LABELS[compare],
            range=get_range_label(secondary_after, secondary_before),
            after=secondary_after,
            before=secondary_before,
        ),
    )


def get_allowed_intervals_for_query(
    query: Mapping[str, Any], today: Optional[DateLike] = None
) -> List[str]:
    period = query.get("period") or DEFAULT_PERIOD
    if period == "custom":
        primary = get_current_dates(query, today).primary
        days = (primary.before.normalize() - primary.after.normalize()).days
        if days >= 365:
            return ["day", "week", "month", "quarter", "year"]
        if days >= 90:
            return ["day", "week", "month", "quarter"]
        if days >= 28:
            return ["day", "week", "month"]
        if days >= 7:
            return ["day", "week"]
        if days > 1:
            return ["day"]
        return ["hour", "day"]

    if period in ("today", "yesterday"):
        return ["hour", "day"]
    if period in ("week", "last_week"):
        return ["day"]
    if period in ("month", "last_month"):
        return ["day", "week"]
    if period in ("quarter", "last_quarter"):
        return ["day", "week", "month"]
    if period in ("year", "last_year"):
        return ["day", "week", "month", "quarter"]
    return ["day"]


def get_interval_for_query(query: Mapping[str, Any], today: Optional[DateLike] = None) -> str:
    """The requested interval when allowed, otherwise the first allowed one."""
    allowed = get_allowed_intervals_for_query(query, today)
    requested = query.get("interval")
    if requested and requested in allowed:
        return requested
    return allowed[0]


def _month_diff(later: pd.Timestamp, earlier: pd.Timestamp) -> int:
    months = (later.year - earlier.year) * 12 + later.month - earlier.month
    anchor = earlier + pd.DateOffset(months=months)
    if months > 0 and anchor > later:
        months -= 1
    elif months < 0 and anchor < later:
        months += 1
    return months


def interval_diff(later: DateLike, earlier: DateLike, interval: str) -> int:
    """Whole ``interval`` units between two dates, truncated toward zero."""
    a, b = to_timestamp(later), to_timestamp(earlier)
    seconds = (a - b).total_seconds()
    if interval == "hour":
        return int(seconds / 3600)
    if interval == "day":
        return int(seconds / 86400)
    if interval == "week":
        return int(seconds / (86400 * 7))
    months = _month_diff(a, b)
    if interval == "quarter":
        return int(months / 3)
    if interval == "year":
        return int(months / 12)
    return months


def interval_offset(interval: str, amount: int):
    if interval == "hour":
        return pd.Timedelta(hours=amount)
    if interval == "quarter":
        return pd.DateOffset(months=3 * amount)
    keyword = {"day": "days", "week": "weeks", "month": "months", "year": "years"}[interval]
    return pd.DateOffset(**{keyword: amount})


def get_previous_date(
    date: DateLike,
    primary_after: DateLike,
    secondary_after: DateLike,
    compare: Optional[str],
    interval: str,
) -> pd.Timestamp:
    """Project a primary bucket date onto the secondary (comparison) window."""
    ts = to_timestamp(date)
    if (compare or DEFAULT_COMPARE) == "previous_year":
        return ts - pd.DateOffset(years=1)

    start_primary = to_timestamp(primary_after).normalize()
    start_secondary = to_timestamp(secondary_after).normalize()
    difference = interval_diff(start_primary, start_secondary, interval)
    return ts - interval_offset(interval, difference)


def get_date_formats_for_interval(interval: str, ticks: int = 0) -> Dict[str, str]:
    tooltip_label_format = "%B %d, %Y"
    x_format = "%Y-%m-%d"
    x2_format = "%b %Y"
    table_format = "m/d/Y"

    if interval == "hour":
        tooltip_label_format = "%_I%p %B %d, %Y"
        x_format = "%_I%p %b %d, %Y"
        table_format = "h A"
    elif interval == "day":
        if ticks < DAY_TICKS_THRESHOLD:
            x_format = "%d"
        else:
            x_format = "%b"
            x2_format = "%Y"
    elif interval == "week":
        if ticks < WEEK_TICKS_THRESHOLD:
            x_format = "%d"
            x2_format = "%b %Y"
        else:
            x_format = "%b"
            x2_format = "%Y"
        tooltip_label_format = "Week of %B %d, %Y"
    elif interval in ("month", "quarter"):
        x_format = "%b"
        x2_format = "%Y"
    elif interval == "year":
        x_format = "%Y"

    return {
        "tooltipLabelFormat": tooltip_label_format,
        "xFormat": x_format,
        "x2Format": x2_format,
        "tableFormat": table_format,
    }


def get_chart_type_for_query(query: Mapping[str, Any]) -> str:
    chart_type = query.get("type")
    return chart_type if chart_type in ("line", "bar") else "line"


def get_tooltip_value_format(value_type: Optional[str]) -> str:
    if value_type == "currency":
        return "$,.2f"
    if value_type == "average":
        return ",.2r"
    return ","


__all__ = [
    "CHART_DATE_FORMAT",
    "LABEL_DATE_FORMAT",
    "CurrentDates",
    "DateWindow",
    "format_date",
    "get_allowed_intervals_for_query",
    "get_chart_type_for_query",
    "get_current_dates",
    "get_current_period",
    "get_date_formats_for_interval",
    "get_interval_for_query",
    "get_last_period",
    "get_previous_date",
    "get_range_label",
    "get_tooltip_value_format",
    "interval_diff",
    "interval_offset",
    "to_timestamp",
]
