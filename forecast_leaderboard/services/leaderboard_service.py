"""
LeaderboardService - Calculates and serves leaderboard data in real-time.

Every call recomputes from the current qualifying rows; nothing is cached
or persisted, so results can't go stale.
"""

import logging
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from forecast_leaderboard.core.config import Settings, get_settings
from forecast_leaderboard.models.leaderboard import (
    CategoryLeaderboardEntry,
    ForecastLeaderboardEntry,
    LeaderboardEntry,
    LeaderboardResult,
)
from forecast_leaderboard.models.leaderboard_query import (
    FilterSpec,
    LeaderboardScope,
    LeaderboardViewType,
)
from forecast_leaderboard.repositories.leaderboard_repository import LeaderboardRepository
from forecast_leaderboard.services.aggregation import aggregate
from forecast_leaderboard.services.exceptions import LeaderboardNotFoundError

logger = logging.getLogger(__name__)

RESULT_MODELS = {
    LeaderboardViewType.USERS: LeaderboardResult[LeaderboardEntry],
    LeaderboardViewType.FORECASTS: LeaderboardResult[ForecastLeaderboardEntry],
    LeaderboardViewType.CATEGORIES: LeaderboardResult[CategoryLeaderboardEntry],
}


class LeaderboardService:
    def __init__(self, db: AsyncIOMotorDatabase, settings: Optional[Settings] = None):
        self.repo = LeaderboardRepository(db)
        self.settings = settings or get_settings()

    async def get_leaderboard(
        self,
        scope: LeaderboardScope,
        view: LeaderboardViewType = LeaderboardViewType.USERS,
        filters: Optional[FilterSpec] = None,
        sort_by: Optional[str] = None,
        sort_order: Optional[str] = None
    ) -> LeaderboardResult:
        """
        Fetch qualifying rows for the scope and aggregate them per view.

        Filters must already be validated (see parse_filters).
        """
        filters = filters or FilterSpec()
        rows = await self.repo.fetch_qualifying_rows(scope, filters)

        entries = aggregate(
            rows,
            view=view,
            sort_by=sort_by,
            sort_order=sort_order,
            min_forecasts=filters.min_forecasts,
            starting_fund_balance=self.settings.starting_fund_balance,
        )

        logger.debug(
            "Leaderboard %s scope=%s: %d rows -> %d entries",
            view.value, scope.kind.value, len(rows), len(entries)
        )

        return RESULT_MODELS[view](entries=entries, total=len(entries))

    async def get_organization_leaderboard(
        self,
        organization_id: str,
        filters: Optional[FilterSpec] = None,
        sort_by: Optional[str] = None,
        sort_order: Optional[str] = None
    ) -> LeaderboardResult[LeaderboardEntry]:
        """Per-user leaderboard for an organization."""
        return await self.get_leaderboard(
            LeaderboardScope.organization(organization_id),
            LeaderboardViewType.USERS,
            filters, sort_by, sort_order
        )

    async def get_forecast_leaderboard(
        self,
        organization_id: str,
        filters: Optional[FilterSpec] = None,
        sort_by: Optional[str] = None,
        sort_order: Optional[str] = None
    ) -> LeaderboardResult[ForecastLeaderboardEntry]:
        """Per-forecast leaderboard for an organization."""
        return await self.get_leaderboard(
            LeaderboardScope.organization(organization_id),
            LeaderboardViewType.FORECASTS,
            filters, sort_by, sort_order
        )

    async def get_category_leaderboard(
        self,
        organization_id: str,
        filters: Optional[FilterSpec] = None,
        sort_by: Optional[str] = None,
        sort_order: Optional[str] = None
    ) -> LeaderboardResult[CategoryLeaderboardEntry]:
        """Per-category leaderboard for an organization."""
        return await self.get_leaderboard(
            LeaderboardScope.organization(organization_id),
            LeaderboardViewType.CATEGORIES,
            filters, sort_by, sort_order
        )

    async def get_forecast_user_leaderboard(
        self,
        forecast_id: str,
        filters: Optional[FilterSpec] = None,
        sort_by: Optional[str] = None,
        sort_order: Optional[str] = None
    ) -> LeaderboardResult[LeaderboardEntry]:
        """Users ranked on a single forecast."""
        return await self.get_leaderboard(
            LeaderboardScope.forecast(forecast_id),
            LeaderboardViewType.USERS,
            filters, sort_by, sort_order
        )

    async def get_category_user_leaderboard(
        self,
        category_id: str,
        filters: Optional[FilterSpec] = None,
        sort_by: Optional[str] = None,
        sort_order: Optional[str] = None
    ) -> LeaderboardResult[LeaderboardEntry]:
        """Users ranked across every forecast of one category."""
        return await self.get_leaderboard(
            LeaderboardScope.category(category_id),
            LeaderboardViewType.USERS,
            filters, sort_by, sort_order
        )

    async def get_user_entry(self, organization_id: str, user_id: str) -> LeaderboardEntry:
        """Leaderboard entry for one user; raises LeaderboardNotFoundError without data."""
        result = await self.get_leaderboard(
            LeaderboardScope.user(organization_id, user_id),
            LeaderboardViewType.USERS,
        )
        if not result.entries:
            raise LeaderboardNotFoundError(
                f"No completed predictions for user {user_id} in organization {organization_id}"
            )
        return result.entries[0]

    async def get_user_rank(self, organization_id: str, user_id: str) -> Optional[dict]:
        """
        User's rank in the default-sorted organization leaderboard.

        Returns dict with rank and entry data, or None if the user has no
        qualifying predictions.
        """
        leaderboard = await self.get_organization_leaderboard(organization_id)

        for idx, entry in enumerate(leaderboard.entries):
            if entry.user_id == user_id:
                return {
                    "rank": idx + 1,
                    "entry": entry
                }

        return None

    async def get_participant_count(
        self,
        organization_id: str,
        filters: Optional[FilterSpec] = None
    ) -> int:
        """Distinct USER-role participants with completed predictions."""
        return await self.repo.count_participants(
            LeaderboardScope.organization(organization_id),
            filters
        )
