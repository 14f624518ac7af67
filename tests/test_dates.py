"""Tests for report date windows, intervals and formats."""

import pandas as pd
import pytest

from storelens.reports.dates import (
    get_allowed_intervals_for_query,
    get_chart_type_for_query,
    get_current_dates,
    get_date_formats_for_interval,
    get_interval_for_query,
    get_previous_date,
    get_range_label,
    get_tooltip_value_format,
    interval_diff,
)

TODAY = "2019-02-15"


class TestRangeLabel:
    @pytest.mark.parametrize(
        "after, before, expected",
        [
            ("2019-01-01", "2019-01-01 23:59:59", "Jan 1, 2019"),
            ("2019-01-01", "2019-01-31", "Jan 1 - 31, 2019"),
            ("2019-01-01", "2019-02-03", "Jan 1 - Feb 3, 2019"),
            ("2018-12-01", "2019-01-05", "Dec 1, 2018 - Jan 5, 2019"),
        ],
    )
    def test_labels(self, after, before, expected):
        assert get_range_label(after, before) == expected


class TestCurrentDates:
    def test_month_to_date_against_previous_year(self):
        dates = get_current_dates({"period": "month", "compare": "previous_year"}, TODAY)
        assert dates.primary.label == "Month to Date"
        assert dates.primary.range == "Feb 1 - 15, 2019"
        assert dates.primary.after == pd.Timestamp("2019-02-01")
        assert dates.primary.before == pd.Timestamp("2019-02-15 23:59:59")
        assert dates.secondary.label == "Previous Year"
        assert dates.secondary.range == "Feb 1 - 15, 2018"

    def test_defaults_when_query_is_empty(self):
        dates = get_current_dates({}, TODAY)
        assert dates.primary.label == "Month to Date"
        assert dates.secondary.label == "Previous Year"

    def test_month_to_date_against_previous_period(self):
        dates = get_current_dates({"period": "month", "compare": "previous_period"}, TODAY)
        assert dates.secondary.label == "Previous Period"
        assert dates.secondary.range == "Jan 1 - 15, 2019"

    def test_last_month_compares_full_months(self):
        dates = get_current_dates({"period": "last_month", "compare": "previous_period"}, TODAY)
        assert dates.primary.range == "Jan 1 - 31, 2019"
        assert dates.secondary.range == "Dec 1 - 31, 2018"
        assert dates.secondary.before == pd.Timestamp("2018-12-31 23:59:59")

    def test_week_to_date_starts_on_monday(self):
        dates = get_current_dates({"period": "week"}, TODAY)
        assert dates.primary.range == "Feb 11 - 15, 2019"

    def test_today_against_previous_period(self):
        dates = get_current_dates({"period": "today", "compare": "previous_period"}, TODAY)
        assert dates.primary.range == "Feb 15, 2019"
        assert dates.secondary.range == "Feb 14, 2019"

    def test_custom_range_shifts_by_its_length(self):
        query = {
            "period": "custom",
            "compare": "previous_period",
            "after": "2019-01-10",
            "before": "2019-01-16",
        }
        dates = get_current_dates(query, TODAY)
        assert dates.primary.label == "Custom"
        assert dates.primary.range == "Jan 10 - 16, 2019"
        assert dates.secondary.range == "Jan 3 - 9, 2019"

    def test_custom_without_bounds_falls_back_to_month(self):
        dates = get_current_dates({"period": "custom"}, TODAY)
        assert dates.primary.label == "Month to Date"


class TestIntervals:
    def test_month_allows_day_and_week(self):
        assert get_allowed_intervals_for_query({"period": "month"}, TODAY) == ["day", "week"]

    def test_year_allows_up_to_quarter(self):
        assert get_allowed_intervals_for_query({"period": "year"}, TODAY) == [
            "day",
            "week",
            "month",
            "quarter",
        ]

    def test_today_allows_hour(self):
        assert get_allowed_intervals_for_query({"period": "today"}, TODAY) == ["hour", "day"]

    @pytest.mark.parametrize(
        "after, before, expected",
        [
            ("2019-01-01", "2019-01-01", ["hour", "day"]),
            ("2019-01-01", "2019-01-03", ["day"]),
            ("2019-01-01", "2019-01-31", ["day", "week", "month"]),
            ("2018-01-01", "2019-01-31", ["day", "week", "month", "quarter", "year"]),
        ],
    )
    def test_custom_range_by_length(self, after, before, expected):
        query = {"period": "custom", "after": after, "before": before}
        assert get_allowed_intervals_for_query(query, TODAY) == expected

    def test_requested_interval_when_allowed(self):
        assert get_interval_for_query({"period": "month", "interval": "week"}, TODAY) == "week"

    def test_disallowed_interval_falls_back_to_first(self):
        assert get_interval_for_query({"period": "month", "interval": "year"}, TODAY) == "day"


class TestPreviousDate:
    def test_previous_period_by_hour_keeps_time_of_day(self):
        previous = get_previous_date(
            "2019-02-15 13:00:00", "2019-02-15", "2019-02-14", "previous_period", "hour"
        )
        assert previous == pd.Timestamp("2019-02-14 13:00:00")

    def test_previous_year_keeps_time_of_day(self):
        previous = get_previous_date(
            "2019-02-15 13:00:00", "2019-02-15", "2019-02-14", "previous_year", "hour"
        )
        assert previous == pd.Timestamp("2018-02-15 13:00:00")

    def test_previous_period_by_day(self):
        previous = get_previous_date(
            "2019-01-01", "2019-01-01", "2018-12-01", "previous_period", "day"
        )
        assert previous == pd.Timestamp("2018-12-01")

    def test_previous_period_by_week_uses_whole_weeks(self):
        previous = get_previous_date(
            "2019-01-01", "2019-01-01", "2018-12-01", "previous_period", "week"
        )
        assert previous == pd.Timestamp("2018-12-04")

    def test_previous_period_by_month(self):
        previous = get_previous_date(
            "2019-01-15", "2019-01-01", "2018-12-01", "previous_period", "month"
        )
        assert previous == pd.Timestamp("2018-12-15")

    def test_previous_year_ignores_windows(self):
        previous = get_previous_date(
            "2019-01-05 00:00:00", "2019-01-01", "2018-12-01", "previous_year", "day"
        )
        assert previous == pd.Timestamp("2018-01-05")

    def test_month_diff_truncates(self):
        assert interval_diff("2019-03-01", "2019-01-31", "month") == 1
        assert interval_diff("2019-01-01 05:00:00", "2019-01-01", "hour") == 5


class TestFormats:
    def test_short_day_range_shows_day_numbers(self):
        formats = get_date_formats_for_interval("day", 10)
        assert formats["xFormat"] == "%d"
        assert formats["x2Format"] == "%b %Y"

    def test_long_day_range_shows_months(self):
        formats = get_date_formats_for_interval("day", 90)
        assert formats["xFormat"] == "%b"
        assert formats["x2Format"] == "%Y"

    def test_week_tooltip(self):
        formats = get_date_formats_for_interval("week", 20)
        assert formats["tooltipLabelFormat"] == "Week of %B %d, %Y"
        assert formats["xFormat"] == "%b"

    def test_hour_table_format(self):
        assert get_date_formats_for_interval("hour")["tableFormat"] == "h A"

    def test_chart_type(self):
        assert get_chart_type_for_query({"type": "bar"}) == "bar"
        assert get_chart_type_for_query({"type": "pie"}) == "line"

    @pytest.mark.parametrize(
        "value_type, expected",
        [("currency", "$,.2f"), ("average", ",.2r"), ("number", ","), (None, ",")],
    )
    def test_tooltip_value_format(self, value_type, expected):
        assert get_tooltip_value_format(value_type) == expected
