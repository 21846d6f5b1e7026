from .user import User, UserRole
from .forecast import Forecast, ForecastCategory, ForecastType
from .prediction import Prediction, PredictionRow, HighLow
from .leaderboard import (
    GroupStats,
    LeaderboardEntry,
    ForecastLeaderboardEntry,
    CategoryLeaderboardEntry,
    LeaderboardResult,
)
from .leaderboard_query import (
    FilterSpec,
    LeaderboardScope,
    LeaderboardViewType,
    SortOrder,
)
from .leaderboard_view import LeaderboardView, LeaderboardViewCreate, LeaderboardViewRename

__all__ = [
    "User",
    "UserRole",
    "Forecast",
    "ForecastCategory",
    "ForecastType",
    "Prediction",
    "PredictionRow",
    "HighLow",
    "GroupStats",
    "LeaderboardEntry",
    "ForecastLeaderboardEntry",
    "CategoryLeaderboardEntry",
    "LeaderboardResult",
    "FilterSpec",
    "LeaderboardScope",
    "LeaderboardViewType",
    "SortOrder",
    "LeaderboardView",
    "LeaderboardViewCreate",
    "LeaderboardViewRename",
]
