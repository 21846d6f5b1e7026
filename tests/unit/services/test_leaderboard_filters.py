"""
Unit tests for leaderboard filter parsing
"""

import pytest
from datetime import date, datetime

from forecast_leaderboard.models.forecast import ForecastType
from forecast_leaderboard.models.leaderboard_query import (
    CategorySortField,
    ForecastSortField,
    SortOrder,
    UserSortField,
)
from forecast_leaderboard.models.leaderboard_view import SavedFilters
from forecast_leaderboard.services.exceptions import InvalidFilterError
from forecast_leaderboard.services.leaderboard_filters import parse_filters, parse_saved_filters


class TestParseFilters:
    """Test suite for parse_filters."""

    def test_no_parameters_means_no_filter(self):
        filters = parse_filters()

        assert filters.forecast_ids == []
        assert filters.category_ids == []
        assert filters.forecast_types == []
        assert filters.min_forecasts is None
        assert filters.recent_count is None
        assert filters.date_from is None
        assert filters.date_to is None

    def test_comma_separated_ids(self):
        filters = parse_filters(forecast_ids="f1, f2,,f1", category_ids=["c1", " c2 "])

        assert filters.forecast_ids == ["f1", "f2"]
        assert filters.category_ids == ["c1", "c2"]

    def test_forecast_types_are_case_insensitive(self):
        filters = parse_filters(forecast_types="binary,CONTINUOUS")

        assert filters.forecast_types == [ForecastType.BINARY, ForecastType.CONTINUOUS]

    def test_unknown_forecast_type_rejected(self):
        with pytest.raises(InvalidFilterError):
            parse_filters(forecast_types="BINARY,NUMERIC")

    def test_numeric_strings_are_coerced(self):
        filters = parse_filters(min_forecasts="3", recent_count="10")

        assert filters.min_forecasts == 3
        assert filters.recent_count == 10

    @pytest.mark.parametrize("value", ["0", -1, "abc", True])
    def test_invalid_min_forecasts_rejected(self, value):
        with pytest.raises(InvalidFilterError):
            parse_filters(min_forecasts=value)

    def test_non_positive_recent_count_rejected(self):
        with pytest.raises(InvalidFilterError):
            parse_filters(recent_count=0)

    def test_recent_count_upper_bound(self):
        assert parse_filters(recent_count=500, max_recent_count=500).recent_count == 500

        with pytest.raises(InvalidFilterError):
            parse_filters(recent_count=501, max_recent_count=500)

    def test_iso_dates(self):
        filters = parse_filters(date_from="2026-01-01", date_to="2026-01-31T12:00:00Z")

        assert filters.date_from == datetime(2026, 1, 1)
        assert filters.date_to == datetime(2026, 1, 31, 12, 0)

    def test_aware_datetime_converted_to_utc(self):
        filters = parse_filters(date_from="2026-01-01T05:00:00+05:00")

        assert filters.date_from == datetime(2026, 1, 1, 0, 0)

    def test_date_objects_accepted(self):
        filters = parse_filters(date_from=date(2026, 2, 1))

        assert filters.date_from == datetime(2026, 2, 1)

    def test_unparseable_date_rejected(self):
        with pytest.raises(InvalidFilterError):
            parse_filters(date_from="last tuesday")

    def test_end_before_start_rejected(self):
        with pytest.raises(InvalidFilterError):
            parse_filters(date_from="2026-02-01", date_to="2026-01-01")

    def test_same_day_range_allowed(self):
        filters = parse_filters(date_from="2026-02-01", date_to="2026-02-01")

        assert filters.date_from == filters.date_to

    def test_empty_strings_mean_no_filter(self):
        filters = parse_filters(min_forecasts="", recent_count="", date_from="")

        assert filters.min_forecasts is None
        assert filters.recent_count is None
        assert filters.date_from is None


class TestParseSavedFilters:

    def test_saved_filters_from_frontend_payload(self):
        saved = SavedFilters(**{
            "forecastIds": ["f1"],
            "forecastTypes": ["binary"],
            "recentCount": "5",
            "minForecasts": "2",
        })

        filters = parse_saved_filters(saved, max_recent_count=500)

        assert filters.forecast_ids == ["f1"]
        assert filters.forecast_types == [ForecastType.BINARY]
        assert filters.recent_count == 5
        assert filters.min_forecasts == 2

    def test_invalid_saved_filters_rejected(self):
        with pytest.raises(InvalidFilterError):
            parse_saved_filters(SavedFilters(min_forecasts="-2"))


class TestSortParameters:

    def test_known_fields_resolve(self):
        assert UserSortField.resolve("roiReal") == UserSortField.ROI_REAL
        assert ForecastSortField.resolve("forecastTitle").attribute == "forecast_title"
        assert CategorySortField.resolve("categoryName").attribute == "category_name"

    def test_unknown_or_missing_field_defaults_to_accuracy(self):
        assert UserSortField.resolve("password") == UserSortField.ACCURACY_RATE
        assert UserSortField.resolve(None) == UserSortField.ACCURACY_RATE
        assert CategorySortField.resolve("roiMedian") == CategorySortField.ACCURACY_RATE

    def test_legacy_names_are_sortable(self):
        assert UserSortField.resolve("avgRoiEquityPlusDebtPct").attribute == "avg_roi_equity_plus_debt_pct"

    def test_sort_order(self):
        assert SortOrder("ASC") == SortOrder.ASC
        assert SortOrder("desc") == SortOrder.DESC
        assert SortOrder(None) == SortOrder.DESC
        assert SortOrder("sideways") == SortOrder.DESC
