"""
Aggregation engine - groups qualifying prediction rows and reduces each group
to one leaderboard entry.

The per-prediction metrics (is_correct, roe, ...) are already stored on each
row by the scoring process; this module only aggregates them. It does no I/O.
"""

from typing import Callable, Optional

from forecast_leaderboard.models.forecast import ForecastType
from forecast_leaderboard.models.leaderboard import GroupStats
from forecast_leaderboard.models.leaderboard_query import (
    SORT_FIELDS,
    LeaderboardViewType,
    SortField,
    SortOrder,
)
from forecast_leaderboard.models.prediction import HighLow, PredictionRow
from forecast_leaderboard.services.entry_assembly import ENTRY_BUILDERS
from forecast_leaderboard.services.statistics import (
    count,
    mean,
    median,
    safe_ratio,
    total,
)

GroupKey = Callable[[PredictionRow], Optional[str]]

DEFAULT_STARTING_FUND_BALANCE = 1_000_000_000

GROUP_KEYS: dict[LeaderboardViewType, GroupKey] = {
    LeaderboardViewType.USERS: lambda row: row.user.id,
    LeaderboardViewType.FORECASTS: lambda row: row.forecast.id,
    # Forecasts sin categoría no aparecen en la vista por categorías
    LeaderboardViewType.CATEGORIES: lambda row: row.category.id if row.category else None,
}


def group_rows(rows: list[PredictionRow], key_fn: GroupKey) -> dict[str, list[PredictionRow]]:
    """Partition rows by key, keeping first-seen group order. Rows keyed None are dropped."""
    groups: dict[str, list[PredictionRow]] = {}
    for row in rows:
        key = key_fn(row)
        if key is None:
            continue
        groups.setdefault(key, []).append(row)
    return groups


def compute_group_stats(
    rows: list[PredictionRow],
    starting_fund_balance: float = DEFAULT_STARTING_FUND_BALANCE,
) -> GroupStats:
    """Reduce one group of rows to its full statistic set."""
    predictions = [row.prediction for row in rows]
    binary = [row.prediction for row in rows if row.forecast_type == ForecastType.BINARY]
    continuous = [row.prediction for row in rows if row.forecast_type == ForecastType.CONTINUOUS]
    continuous_count = len(continuous)

    # Counts: correcto/incorrecto solo binarios, HIGH/LOW/PERFECT solo continuos
    correct = count(lambda p: p.is_correct is True, binary)
    incorrect = count(lambda p: p.is_correct is False, binary)
    high = count(lambda p: p.high_low == HighLow.HIGH, continuous)
    low = count(lambda p: p.high_low == HighLow.LOW, continuous)
    perfect = count(lambda p: p.high_low == HighLow.PERFECT, continuous)

    # Capital
    total_equity = total(p.equity_investment for p in predictions)
    total_debt = total(p.debt_financing for p in predictions)
    total_investment = total(p.total_investment for p in predictions)
    total_net_profit = total(p.net_profit_equity_plus_debt for p in predictions)
    profit_from_equity = total(p.roe for p in predictions)
    profit_from_financing = total(p.rof for p in predictions)

    # Time
    total_time = total(p.estimated_time for p in predictions)
    total_hours = total_time / 60 if total_time is not None else None

    roi_pcts = [p.roi_equity_plus_debt_pct for p in predictions]
    roe_pcts = [p.roe_pct for p in predictions]
    rof_pcts = [p.rof_pct for p in predictions]
    actual_errors = [p.absolute_actual_error_pct for p in predictions]
    forecast_errors = [p.absolute_forecast_error_pct for p in predictions]

    return GroupStats(
        total_completed_predictions=len(rows),
        completed_binary_predictions=count(lambda p: p.confidence is not None, binary),
        completed_continuous_predictions=continuous_count,
        correct_predictions=correct,
        incorrect_predictions=incorrect,
        accuracy_rate=safe_ratio(correct, len(binary)),
        incorrect_rate=safe_ratio(incorrect, len(binary)),
        avg_probability_binary=mean(
            p.confidence / 100 for p in binary if p.confidence is not None
        ),
        high_count_continuous=high,
        low_count_continuous=low,
        perfect_count_continuous=perfect,
        high_percent_continuous=safe_ratio(high, continuous_count),
        low_percent_continuous=safe_ratio(low, continuous_count),
        perfect_percent_continuous=safe_ratio(perfect, continuous_count),
        total_equity_investment=total_equity,
        total_debt_financing=total_debt,
        total_investment=total_investment,
        total_net_profit=total_net_profit,
        fund_balance=(
            starting_fund_balance + total_net_profit if total_net_profit is not None else None
        ),
        profit_from_equity=profit_from_equity,
        profit_from_financing=profit_from_financing,
        roi_real=safe_ratio(total_net_profit, total_investment),
        roi_average=mean(roi_pcts),
        roi_median=median(roi_pcts),
        roe_real=safe_ratio(profit_from_equity, total_equity),
        roe_average=mean(roe_pcts),
        roe_median=median(roe_pcts),
        interest_payment_on_debt=total(p.debt_repayment for p in predictions),
        rof_real=safe_ratio(profit_from_financing, total_debt),
        rof_average=mean(rof_pcts),
        rof_median=median(rof_pcts),
        avg_actual_error=mean(actual_errors),
        median_actual_error=median(actual_errors),
        avg_forecast_error=mean(forecast_errors),
        median_forecast_error=median(forecast_errors),
        avg_absolute_error=mean(p.absolute_error for p in predictions),
        total_forecast_time_minutes=total_time,
        avg_time_per_forecast_minutes=mean(p.estimated_time for p in predictions),
        weighted_avg_hourly_profit=safe_ratio(total_net_profit, total_hours),
        simple_avg_hourly_profit=mean(p.profit_per_hour for p in predictions),
        avg_brier_score=mean(p.brier_score for p in predictions),
        avg_roi_score=mean(p.roi_score for p in predictions),
    )


def _sort_value(value):
    if isinstance(value, str):
        return value.casefold()
    return value


def sort_entries(
    entries: list[GroupStats],
    sort_field: SortField,
    sort_order: SortOrder = SortOrder.DESC,
) -> list[GroupStats]:
    """
    Order entries by sort_field.

    Missing values always go last, whatever the direction. Ties keep the
    total-predictions-descending order.
    """
    attribute = sort_field.attribute

    # Sort estable: primero el desempate, luego la clave principal
    by_total = sorted(entries, key=lambda e: e.total_completed_predictions, reverse=True)

    present = [e for e in by_total if getattr(e, attribute) is not None]
    missing = [e for e in by_total if getattr(e, attribute) is None]

    present.sort(
        key=lambda e: _sort_value(getattr(e, attribute)),
        reverse=sort_order == SortOrder.DESC,
    )
    return present + missing


def aggregate(
    rows: list[PredictionRow],
    view: LeaderboardViewType = LeaderboardViewType.USERS,
    sort_by: Optional[str] = None,
    sort_order: Optional[str] = None,
    min_forecasts: Optional[int] = None,
    starting_fund_balance: float = DEFAULT_STARTING_FUND_BALANCE,
) -> list[GroupStats]:
    """
    Group rows for the given view, reduce each group and return ordered entries.

    Unknown sort_by names fall back to accuracyRate; min_forecasts drops
    whole groups with fewer qualifying predictions after their stats are
    computed.
    """
    build_entry = ENTRY_BUILDERS[view]

    entries = []
    for group in group_rows(rows, GROUP_KEYS[view]).values():
        stats = compute_group_stats(group, starting_fund_balance)
        entries.append(build_entry(group, stats))

    if min_forecasts:
        entries = [e for e in entries if e.total_completed_predictions >= min_forecasts]

    return sort_entries(entries, SORT_FIELDS[view].resolve(sort_by), SortOrder(sort_order))
