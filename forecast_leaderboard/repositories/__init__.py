from .leaderboard_repository import LeaderboardRepository
from .leaderboard_view_repository import LeaderboardViewRepository

__all__ = [
    "LeaderboardRepository",
    "LeaderboardViewRepository",
]
