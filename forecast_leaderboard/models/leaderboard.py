from datetime import datetime
from typing import Generic, Optional, TypeVar
from pydantic import BaseModel
from pydantic.alias_generators import to_camel

from .forecast import ForecastType


class GroupStats(BaseModel):
    """
    Estadísticas agregadas de un grupo de predicciones (usuario, forecast o categoría).

    Cualquier ratio sin datos suficientes es None, nunca 0 ni NaN.
    Se serializa en camelCase (accuracyRate, roiReal, ...).
    """

    # Counts & accuracy
    total_completed_predictions: int = 0
    completed_binary_predictions: int = 0
    completed_continuous_predictions: int = 0
    correct_predictions: int = 0
    incorrect_predictions: int = 0
    accuracy_rate: Optional[float] = None
    incorrect_rate: Optional[float] = None
    avg_probability_binary: Optional[float] = None
    high_count_continuous: int = 0
    low_count_continuous: int = 0
    perfect_count_continuous: int = 0
    high_percent_continuous: Optional[float] = None
    low_percent_continuous: Optional[float] = None
    perfect_percent_continuous: Optional[float] = None

    # Capital & profit roll-ups
    total_equity_investment: Optional[float] = None
    total_debt_financing: Optional[float] = None
    total_investment: Optional[float] = None
    total_net_profit: Optional[float] = None
    fund_balance: Optional[float] = None
    profit_from_equity: Optional[float] = None
    profit_from_financing: Optional[float] = None

    # ROI (equity + debt)
    roi_real: Optional[float] = None  # suma beneficio / suma inversión
    roi_average: Optional[float] = None  # media de ROI por predicción
    roi_median: Optional[float] = None

    # ROE (equity)
    roe_real: Optional[float] = None
    roe_average: Optional[float] = None
    roe_median: Optional[float] = None

    # ROF (financiación)
    interest_payment_on_debt: Optional[float] = None
    rof_real: Optional[float] = None
    rof_average: Optional[float] = None
    rof_median: Optional[float] = None

    # Errores (solo continuos)
    avg_actual_error: Optional[float] = None
    median_actual_error: Optional[float] = None
    avg_forecast_error: Optional[float] = None
    median_forecast_error: Optional[float] = None
    avg_absolute_error: Optional[float] = None

    # Tiempo & productividad
    total_forecast_time_minutes: Optional[float] = None
    avg_time_per_forecast_minutes: Optional[float] = None
    weighted_avg_hourly_profit: Optional[float] = None  # beneficio / horas totales
    simple_avg_hourly_profit: Optional[float] = None  # media de beneficio/hora

    # Scores heredados
    avg_brier_score: Optional[float] = None
    avg_roi_score: Optional[float] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class LeaderboardEntry(GroupStats):
    """Entrada del leaderboard por usuario"""

    user_id: str
    user_name: Optional[str] = None
    user_email: str

    # Campos legacy (ver services.entry_assembly.USER_ENTRY_ALIASES)
    total_predictions: int = 0
    avg_roi_equity_plus_debt_pct: Optional[float] = None
    total_roe: Optional[float] = None
    avg_roe_pct: Optional[float] = None
    total_rof: Optional[float] = None
    avg_rof_pct: Optional[float] = None
    avg_absolute_actual_error_pct: Optional[float] = None
    avg_absolute_forecast_error_pct: Optional[float] = None
    avg_profit_per_hour: Optional[float] = None


class ForecastLeaderboardEntry(GroupStats):
    """Entrada del leaderboard por forecast"""

    forecast_id: str
    forecast_title: str
    forecast_type: ForecastType
    category_id: Optional[str] = None
    category_name: Optional[str] = None
    category_color: Optional[str] = None
    due_date: Optional[datetime] = None
    data_release_date: Optional[datetime] = None

    total_participants: int = 0

    # Campos legacy (ver services.entry_assembly.FORECAST_ENTRY_ALIASES)
    participants_completed: int = 0
    avg_probability: Optional[float] = None
    high_count: int = 0
    low_count: int = 0
    perfect_count: int = 0
    avg_roi: Optional[float] = None
    avg_time_per_prediction: Optional[float] = None
    total_time_spent: Optional[float] = None


class CategoryLeaderboardEntry(GroupStats):
    """Entrada del leaderboard por categoría"""

    category_id: str
    category_name: str
    category_description: Optional[str] = None
    category_color: Optional[str] = None

    total_forecasts: int = 0
    total_participants: int = 0
    avg_predictions_per_forecast: Optional[float] = None

    # Campos legacy (ver services.entry_assembly.CATEGORY_ENTRY_ALIASES)
    total_predictions: int = 0
    avg_roi: Optional[float] = None
    avg_time_per_prediction: Optional[float] = None
    total_time_spent: Optional[float] = None


EntryT = TypeVar("EntryT", bound=GroupStats)


class LeaderboardResult(BaseModel, Generic[EntryT]):
    """Entradas ya ordenadas + cantidad de grupos"""

    entries: list[EntryT]
    total: int
