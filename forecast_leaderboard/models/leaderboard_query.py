"""
Parámetros de consulta del leaderboard: alcance, filtros y ordenamiento
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel
from pydantic.alias_generators import to_snake

from .forecast import ForecastType


class LeaderboardViewType(str, Enum):
    """Por qué entidad se agrupan las filas"""

    USERS = "USERS"
    FORECASTS = "FORECASTS"
    CATEGORIES = "CATEGORIES"


class ScopeKind(str, Enum):
    ORGANIZATION = "organization"
    USER = "user"
    FORECAST = "forecast"
    CATEGORY = "category"


class LeaderboardScope(BaseModel):
    """Universo de filas sobre el que se calcula el leaderboard"""

    kind: ScopeKind
    organization_id: Optional[str] = None
    user_id: Optional[str] = None
    forecast_id: Optional[str] = None
    category_id: Optional[str] = None

    @classmethod
    def organization(cls, organization_id: str) -> "LeaderboardScope":
        return cls(kind=ScopeKind.ORGANIZATION, organization_id=organization_id)

    @classmethod
    def user(cls, organization_id: str, user_id: str) -> "LeaderboardScope":
        return cls(kind=ScopeKind.USER, organization_id=organization_id, user_id=user_id)

    @classmethod
    def forecast(cls, forecast_id: str, organization_id: Optional[str] = None) -> "LeaderboardScope":
        return cls(kind=ScopeKind.FORECAST, forecast_id=forecast_id, organization_id=organization_id)

    @classmethod
    def category(cls, category_id: str, organization_id: Optional[str] = None) -> "LeaderboardScope":
        return cls(kind=ScopeKind.CATEGORY, category_id=category_id, organization_id=organization_id)


class FilterSpec(BaseModel):
    """
    Filtros ya validados (ver services.leaderboard_filters.parse_filters).

    Todos se combinan con AND. Una lista vacía significa "sin filtro".
    """

    forecast_ids: list[str] = []
    category_ids: list[str] = []
    forecast_types: list[ForecastType] = []
    min_forecasts: Optional[int] = None
    recent_count: Optional[int] = None
    date_from: Optional[datetime] = None
    date_to: Optional[datetime] = None


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"

    @classmethod
    def _missing_(cls, value):
        # "ASC" / "Asc" -> asc, cualquier otra cosa -> desc
        if isinstance(value, str) and value.lower() == "asc":
            return cls.ASC
        return cls.DESC


class SortField(str, Enum):
    """
    Base para los campos ordenables de cada vista.

    Los valores son los nombres públicos (camelCase) de la entrada; un nombre
    desconocido (o None) resuelve al orden por defecto, accuracyRate.
    """

    @classmethod
    def _missing_(cls, value):
        return cls("accuracyRate")

    @classmethod
    def resolve(cls, name: Optional[str]) -> "SortField":
        return cls(name)

    @property
    def attribute(self) -> str:
        """Nombre del atributo del modelo de entrada que se ordena"""
        return to_snake(self.value)


class UserSortField(SortField):
    USER_NAME = "userName"
    USER_EMAIL = "userEmail"
    TOTAL_COMPLETED_PREDICTIONS = "totalCompletedPredictions"
    COMPLETED_BINARY_PREDICTIONS = "completedBinaryPredictions"
    COMPLETED_CONTINUOUS_PREDICTIONS = "completedContinuousPredictions"
    TOTAL_PREDICTIONS = "totalPredictions"
    CORRECT_PREDICTIONS = "correctPredictions"
    INCORRECT_PREDICTIONS = "incorrectPredictions"
    ACCURACY_RATE = "accuracyRate"
    INCORRECT_RATE = "incorrectRate"
    AVG_PROBABILITY_BINARY = "avgProbabilityBinary"
    HIGH_PERCENT_CONTINUOUS = "highPercentContinuous"
    LOW_PERCENT_CONTINUOUS = "lowPercentContinuous"
    PERFECT_PERCENT_CONTINUOUS = "perfectPercentContinuous"
    TOTAL_EQUITY_INVESTMENT = "totalEquityInvestment"
    TOTAL_DEBT_FINANCING = "totalDebtFinancing"
    TOTAL_INVESTMENT = "totalInvestment"
    TOTAL_NET_PROFIT = "totalNetProfit"
    FUND_BALANCE = "fundBalance"
    PROFIT_FROM_EQUITY = "profitFromEquity"
    PROFIT_FROM_FINANCING = "profitFromFinancing"
    ROI_REAL = "roiReal"
    ROI_AVERAGE = "roiAverage"
    ROI_MEDIAN = "roiMedian"
    AVG_ROI_EQUITY_PLUS_DEBT_PCT = "avgRoiEquityPlusDebtPct"
    ROE_REAL = "roeReal"
    ROE_AVERAGE = "roeAverage"
    ROE_MEDIAN = "roeMedian"
    TOTAL_ROE = "totalRoe"
    AVG_ROE_PCT = "avgRoePct"
    INTEREST_PAYMENT_ON_DEBT = "interestPaymentOnDebt"
    ROF_REAL = "rofReal"
    ROF_AVERAGE = "rofAverage"
    ROF_MEDIAN = "rofMedian"
    TOTAL_ROF = "totalRof"
    AVG_ROF_PCT = "avgRofPct"
    AVG_ACTUAL_ERROR = "avgActualError"
    MEDIAN_ACTUAL_ERROR = "medianActualError"
    AVG_FORECAST_ERROR = "avgForecastError"
    MEDIAN_FORECAST_ERROR = "medianForecastError"
    AVG_ABSOLUTE_ERROR = "avgAbsoluteError"
    AVG_ABSOLUTE_ACTUAL_ERROR_PCT = "avgAbsoluteActualErrorPct"
    AVG_ABSOLUTE_FORECAST_ERROR_PCT = "avgAbsoluteForecastErrorPct"
    TOTAL_FORECAST_TIME_MINUTES = "totalForecastTimeMinutes"
    AVG_TIME_PER_FORECAST_MINUTES = "avgTimePerForecastMinutes"
    WEIGHTED_AVG_HOURLY_PROFIT = "weightedAvgHourlyProfit"
    SIMPLE_AVG_HOURLY_PROFIT = "simpleAvgHourlyProfit"
    AVG_PROFIT_PER_HOUR = "avgProfitPerHour"
    AVG_BRIER_SCORE = "avgBrierScore"
    AVG_ROI_SCORE = "avgRoiScore"


class ForecastSortField(SortField):
    FORECAST_TITLE = "forecastTitle"
    DATA_RELEASE_DATE = "dataReleaseDate"
    TOTAL_PARTICIPANTS = "totalParticipants"
    PARTICIPANTS_COMPLETED = "participantsCompleted"
    ACCURACY_RATE = "accuracyRate"
    AVG_PROBABILITY = "avgProbability"
    AVG_ACTUAL_ERROR = "avgActualError"
    AVG_FORECAST_ERROR = "avgForecastError"
    TOTAL_INVESTMENT = "totalInvestment"
    TOTAL_NET_PROFIT = "totalNetProfit"
    ROI_REAL = "roiReal"
    AVG_ROI = "avgRoi"
    ROI_MEDIAN = "roiMedian"
    AVG_TIME_PER_PREDICTION = "avgTimePerPrediction"
    TOTAL_TIME_SPENT = "totalTimeSpent"


class CategorySortField(SortField):
    CATEGORY_NAME = "categoryName"
    TOTAL_FORECASTS = "totalForecasts"
    TOTAL_PARTICIPANTS = "totalParticipants"
    TOTAL_PREDICTIONS = "totalPredictions"
    AVG_PREDICTIONS_PER_FORECAST = "avgPredictionsPerForecast"
    ACCURACY_RATE = "accuracyRate"
    TOTAL_INVESTMENT = "totalInvestment"
    TOTAL_NET_PROFIT = "totalNetProfit"
    ROI_REAL = "roiReal"
    AVG_ROI = "avgRoi"
    TOTAL_TIME_SPENT = "totalTimeSpent"
    AVG_TIME_PER_PREDICTION = "avgTimePerPrediction"


SORT_FIELDS: dict[LeaderboardViewType, type[SortField]] = {
    LeaderboardViewType.USERS: UserSortField,
    LeaderboardViewType.FORECASTS: ForecastSortField,
    LeaderboardViewType.CATEGORIES: CategorySortField,
}
