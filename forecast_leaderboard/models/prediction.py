from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field

from .user import User
from .forecast import Forecast, ForecastCategory, ForecastType


MAX_EQUITY_INVESTMENT = 20_000_000


class HighLow(str, Enum):
    """Clasificación de una predicción continua respecto al valor real"""

    HIGH = "HIGH"
    LOW = "LOW"
    PERFECT = "PERFECT"


class Prediction(BaseModel):
    """
    Predicción de un usuario para un forecast.

    Las métricas (is_correct, high_low, roe, ...) las escribe el proceso de
    scoring cuando se carga el actual_value del forecast. Aquí solo se leen.
    """

    id: str = Field(..., alias="_id")

    forecast_id: str
    user_id: str

    value: str
    confidence: Optional[int] = Field(None, ge=0, le=100)  # solo binarios
    reasoning: Optional[str] = None

    # Capital simulado
    equity_investment: Optional[int] = Field(None, ge=0, le=MAX_EQUITY_INVESTMENT)
    debt_financing: Optional[float] = Field(None, ge=0)
    total_investment: Optional[float] = None  # equity + debt

    # Resultado
    is_correct: Optional[bool] = None  # binarios
    high_low: Optional[HighLow] = None  # continuos

    # Beneficios
    roe: Optional[float] = None  # beneficio sobre equity
    roe_pct: Optional[float] = None
    rof: Optional[float] = None  # beneficio sobre financiación
    rof_pct: Optional[float] = None
    debt_repayment: Optional[float] = None  # -10% de la deuda
    net_profit_equity_plus_debt: Optional[float] = None
    roi_equity_plus_debt_pct: Optional[float] = None

    # Errores (continuos)
    absolute_error: Optional[float] = None
    absolute_actual_error_pct: Optional[float] = None
    absolute_forecast_error_pct: Optional[float] = None

    # Tiempo
    estimated_time: Optional[float] = None  # minutos
    profit_per_hour: Optional[float] = None

    # Scores heredados
    brier_score: Optional[float] = None
    roi_score: Optional[float] = None

    class Config:
        populate_by_name = True


class PredictionRow(BaseModel):
    """Fila que consume el leaderboard: predicción + usuario + forecast (+ categoría)"""

    user: User
    forecast: Forecast
    category: Optional[ForecastCategory] = None
    prediction: Prediction

    @property
    def forecast_type(self) -> ForecastType:
        return self.forecast.type
