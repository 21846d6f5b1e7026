"""
Entry assembly - maps computed GroupStats onto the public entry models.

Legacy field names are kept for older consumers. Each alias table maps
legacy name -> canonical GroupStats field and is applied once here; no
statistic is computed twice.
"""

from typing import Callable

from forecast_leaderboard.models.leaderboard import (
    CategoryLeaderboardEntry,
    ForecastLeaderboardEntry,
    GroupStats,
    LeaderboardEntry,
)
from forecast_leaderboard.models.leaderboard_query import LeaderboardViewType
from forecast_leaderboard.models.prediction import PredictionRow
from forecast_leaderboard.services.statistics import safe_ratio


USER_ENTRY_ALIASES = {
    "total_predictions": "total_completed_predictions",
    "avg_roi_equity_plus_debt_pct": "roi_average",
    "total_roe": "profit_from_equity",
    "avg_roe_pct": "roe_average",
    "total_rof": "profit_from_financing",
    "avg_rof_pct": "rof_average",
    "avg_absolute_actual_error_pct": "avg_actual_error",
    "avg_absolute_forecast_error_pct": "avg_forecast_error",
    "avg_profit_per_hour": "simple_avg_hourly_profit",
}

FORECAST_ENTRY_ALIASES = {
    "participants_completed": "total_completed_predictions",
    "avg_probability": "avg_probability_binary",
    "high_count": "high_count_continuous",
    "low_count": "low_count_continuous",
    "perfect_count": "perfect_count_continuous",
    "avg_roi": "roi_average",
    "avg_time_per_prediction": "avg_time_per_forecast_minutes",
    "total_time_spent": "total_forecast_time_minutes",
}

CATEGORY_ENTRY_ALIASES = {
    "total_predictions": "total_completed_predictions",
    "avg_roi": "roi_average",
    "avg_time_per_prediction": "avg_time_per_forecast_minutes",
    "total_time_spent": "total_forecast_time_minutes",
}


def apply_aliases(fields: dict, aliases: dict[str, str]) -> dict:
    """Copy each canonical value under its legacy name."""
    for legacy, canonical in aliases.items():
        fields[legacy] = fields[canonical]
    return fields


def build_user_entry(rows: list[PredictionRow], stats: GroupStats) -> LeaderboardEntry:
    # Todas las filas del grupo comparten el usuario
    user = rows[0].user

    fields = stats.model_dump()
    fields.update(
        user_id=user.id,
        user_name=user.name,
        user_email=user.email,
    )
    return LeaderboardEntry(**apply_aliases(fields, USER_ENTRY_ALIASES))


def build_forecast_entry(rows: list[PredictionRow], stats: GroupStats) -> ForecastLeaderboardEntry:
    forecast = rows[0].forecast
    category = rows[0].category

    fields = stats.model_dump()
    fields.update(
        forecast_id=forecast.id,
        forecast_title=forecast.title,
        forecast_type=forecast.type,
        category_id=forecast.category_id,
        category_name=category.name if category else None,
        category_color=category.color if category else None,
        due_date=forecast.due_date,
        data_release_date=forecast.data_release_date,
        total_participants=len({row.user.id for row in rows}),
    )
    return ForecastLeaderboardEntry(**apply_aliases(fields, FORECAST_ENTRY_ALIASES))


def build_category_entry(rows: list[PredictionRow], stats: GroupStats) -> CategoryLeaderboardEntry:
    category = rows[0].category
    total_forecasts = len({row.forecast.id for row in rows})

    fields = stats.model_dump()
    fields.update(
        category_id=category.id,
        category_name=category.name,
        category_description=category.description,
        category_color=category.color,
        total_forecasts=total_forecasts,
        total_participants=len({row.user.id for row in rows}),
        avg_predictions_per_forecast=safe_ratio(len(rows), total_forecasts),
    )
    return CategoryLeaderboardEntry(**apply_aliases(fields, CATEGORY_ENTRY_ALIASES))


ENTRY_BUILDERS: dict[LeaderboardViewType, Callable[[list[PredictionRow], GroupStats], GroupStats]] = {
    LeaderboardViewType.USERS: build_user_entry,
    LeaderboardViewType.FORECASTS: build_forecast_entry,
    LeaderboardViewType.CATEGORIES: build_category_entry,
}
