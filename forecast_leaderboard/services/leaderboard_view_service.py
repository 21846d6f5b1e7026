"""
LeaderboardViewService - Saved leaderboard configurations per user.

A view stores filters, sort and column visibility. Once created only its
name can change; everything else is fixed.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from forecast_leaderboard.core.config import Settings, get_settings
from forecast_leaderboard.models.leaderboard import LeaderboardResult
from forecast_leaderboard.models.leaderboard_query import LeaderboardScope
from forecast_leaderboard.models.leaderboard_view import (
    LeaderboardView,
    LeaderboardViewCreate,
)
from forecast_leaderboard.repositories.leaderboard_view_repository import LeaderboardViewRepository
from forecast_leaderboard.services.exceptions import (
    DuplicateViewNameError,
    ViewLimitExceededError,
    ViewNotFoundError,
)
from forecast_leaderboard.services.leaderboard_filters import parse_saved_filters
from forecast_leaderboard.services.leaderboard_service import LeaderboardService

logger = logging.getLogger(__name__)


class LeaderboardViewService:
    def __init__(self, db: AsyncIOMotorDatabase, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.view_repo = LeaderboardViewRepository(db)
        self.leaderboard_service = LeaderboardService(db, self.settings)

    async def list_views(self, user_id: str) -> list[LeaderboardView]:
        return await self.view_repo.list_for_user(user_id)

    async def get_view(self, user_id: str, view_id: str) -> LeaderboardView:
        view = await self.view_repo.get_by_id(view_id, user_id)
        if view is None:
            raise ViewNotFoundError(f"Leaderboard view {view_id} not found")
        return view

    async def create_view(self, user_id: str, view_data: LeaderboardViewCreate) -> LeaderboardView:
        """
        Save a new view for the user.

        Validates:
        - The user is below the per-user view limit
        - No other view of the user has the same name (case-insensitive)
        - The stored filters parse (InvalidFilterError otherwise)
        """
        limit = self.settings.max_views_per_user
        if await self.view_repo.count_for_user(user_id) >= limit:
            raise ViewLimitExceededError(f"A user can save at most {limit} leaderboard views")

        if await self.view_repo.name_exists(view_data.name, user_id):
            raise DuplicateViewNameError(f"A view named '{view_data.name}' already exists")

        parse_saved_filters(view_data.filters, self.settings.max_recent_count)

        now = datetime.now(timezone.utc)
        view = LeaderboardView(
            _id=uuid.uuid4().hex,
            user_id=user_id,
            name=view_data.name,
            view_type=view_data.view_type,
            filters=view_data.filters,
            sort_by=view_data.sort_by,
            sort_order=view_data.sort_order,
            column_visibility=view_data.column_visibility,
            created_at=now,
            updated_at=now,
        )

        created = await self.view_repo.create(view)
        logger.info("Leaderboard view %s created for user %s", created.id, user_id)
        return created

    async def rename_view(self, user_id: str, view_id: str, name: str) -> LeaderboardView:
        await self.get_view(user_id, view_id)

        if await self.view_repo.name_exists(name, user_id, exclude_id=view_id):
            raise DuplicateViewNameError(f"A view named '{name}' already exists")

        view = await self.view_repo.rename(view_id, user_id, name, datetime.now(timezone.utc))
        if view is None:
            raise ViewNotFoundError(f"Leaderboard view {view_id} not found")
        return view

    async def delete_view(self, user_id: str, view_id: str) -> None:
        deleted = await self.view_repo.delete(view_id, user_id)
        if not deleted:
            raise ViewNotFoundError(f"Leaderboard view {view_id} not found")
        logger.info("Leaderboard view %s deleted for user %s", view_id, user_id)

    async def run_view(
        self,
        user_id: str,
        view_id: str,
        organization_id: str
    ) -> LeaderboardResult:
        """Compute the organization leaderboard with the view's stored configuration."""
        view = await self.get_view(user_id, view_id)
        filters = parse_saved_filters(view.filters, self.settings.max_recent_count)

        return await self.leaderboard_service.get_leaderboard(
            LeaderboardScope.organization(organization_id),
            view.view_type,
            filters,
            view.sort_by,
            view.sort_order,
        )
