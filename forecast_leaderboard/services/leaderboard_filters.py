"""
Leaderboard filter parsing - turns presentation-layer scalars into a FilterSpec.

Validation happens here, eagerly, so the aggregation engine only ever sees
well-formed filters.
"""

from datetime import date, datetime, timezone
from typing import Iterable, Optional, Union

from forecast_leaderboard.models.forecast import ForecastType
from forecast_leaderboard.models.leaderboard_query import FilterSpec
from forecast_leaderboard.models.leaderboard_view import SavedFilters
from forecast_leaderboard.services.exceptions import InvalidFilterError

IdsParam = Union[str, Iterable[str], None]
IntParam = Union[int, str, None]
DateParam = Union[datetime, date, str, None]


def _split_ids(value: IdsParam) -> list[str]:
    """Accepts "a,b,c" or ["a", "b"]; drops blanks and duplicates."""
    if value is None:
        return []
    parts = value.split(",") if isinstance(value, str) else list(value)
    cleaned = [part.strip() for part in parts if part and part.strip()]
    return list(dict.fromkeys(cleaned))


def _parse_positive_int(name: str, value: IntParam) -> Optional[int]:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise InvalidFilterError(f"{name} must be an integer, got {value!r}")

    try:
        number = int(value)
    except (TypeError, ValueError):
        raise InvalidFilterError(f"{name} must be an integer, got {value!r}")

    if number <= 0:
        raise InvalidFilterError(f"{name} must be a positive integer, got {number}")
    return number


def _parse_datetime(name: str, value: DateParam) -> Optional[datetime]:
    """ISO date/datetime -> naive UTC datetime (how MongoDB returns dates)."""
    if value is None or value == "":
        return None

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    else:
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except (AttributeError, ValueError):
            raise InvalidFilterError(f"{name} must be an ISO date, got {value!r}")

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def _parse_forecast_types(value: IdsParam) -> list[ForecastType]:
    types = []
    for raw in _split_ids(value):
        try:
            types.append(ForecastType(raw.upper()))
        except ValueError:
            allowed = ", ".join(t.value for t in ForecastType)
            raise InvalidFilterError(f"Unknown forecast type {raw!r} (expected one of {allowed})")
    return types


def parse_filters(
    forecast_ids: IdsParam = None,
    category_ids: IdsParam = None,
    forecast_types: IdsParam = None,
    min_forecasts: IntParam = None,
    recent_count: IntParam = None,
    date_from: DateParam = None,
    date_to: DateParam = None,
    max_recent_count: Optional[int] = None,
) -> FilterSpec:
    """
    Validate and coerce raw filter parameters.

    Raises InvalidFilterError for non-positive counts, an unknown forecast
    type, an unparseable date, or a date range whose end precedes its start.
    """
    recent = _parse_positive_int("recentCount", recent_count)
    if recent is not None and max_recent_count is not None and recent > max_recent_count:
        raise InvalidFilterError(
            f"recentCount must be at most {max_recent_count}, got {recent}"
        )

    start = _parse_datetime("dateFrom", date_from)
    end = _parse_datetime("dateTo", date_to)
    if start is not None and end is not None and end < start:
        raise InvalidFilterError("dateTo must not be before dateFrom")

    return FilterSpec(
        forecast_ids=_split_ids(forecast_ids),
        category_ids=_split_ids(category_ids),
        forecast_types=_parse_forecast_types(forecast_types),
        min_forecasts=_parse_positive_int("minForecasts", min_forecasts),
        recent_count=recent,
        date_from=start,
        date_to=end,
    )


def parse_saved_filters(saved: SavedFilters, max_recent_count: Optional[int] = None) -> FilterSpec:
    """parse_filters over the filters stored in a saved leaderboard view."""
    return parse_filters(
        forecast_ids=saved.forecast_ids,
        category_ids=saved.category_ids,
        forecast_types=saved.forecast_types,
        min_forecasts=saved.min_forecasts,
        recent_count=saved.recent_count,
        date_from=saved.date_from,
        date_to=saved.date_to,
        max_recent_count=max_recent_count,
    )
