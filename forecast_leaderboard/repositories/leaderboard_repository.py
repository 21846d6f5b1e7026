"""
🎯 LeaderboardRepository - qualifying prediction rows for the leaderboard

A row qualifies when its forecast has an actual value set and its user has
the plain USER role (admins never appear on leaderboards). The repository
only reads; every statistic is computed by services.aggregation.
"""

from typing import Iterable, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from forecast_leaderboard.models.forecast import Forecast, ForecastCategory
from forecast_leaderboard.models.leaderboard_query import FilterSpec, LeaderboardScope, ScopeKind
from forecast_leaderboard.models.prediction import Prediction, PredictionRow
from forecast_leaderboard.models.user import User, UserRole


def select_most_recent(forecasts: list[Forecast], limit: int) -> list[Forecast]:
    """The `limit` forecasts with the latest data release date (undated ones last)."""
    dated = sorted(
        (f for f in forecasts if f.data_release_date is not None),
        key=lambda f: f.data_release_date,
        reverse=True,
    )
    undated = [f for f in forecasts if f.data_release_date is None]
    return (dated + undated)[:limit]


class LeaderboardRepository:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.users_collection = db["users"]
        self.forecasts_collection = db["forecasts"]
        self.categories_collection = db["forecast_categories"]
        self.predictions_collection = db["predictions"]

    # ============================================
    # 📌 QUALIFYING ROWS
    # ============================================

    async def fetch_qualifying_rows(
        self,
        scope: LeaderboardScope,
        filters: Optional[FilterSpec] = None
    ) -> list[PredictionRow]:
        """
        Rows (prediction + user + forecast + category) for a scope.

        1. Forecasts with actual value, narrowed by scope and filters
        2. "N most recent" over that forecast set
        3. Predictions on those forecasts
        4. Users with role USER (in the scope's organization)
        """
        filters = filters or FilterSpec()

        forecasts = await self.find_qualifying_forecasts(scope, filters)
        if filters.recent_count:
            forecasts = select_most_recent(forecasts, filters.recent_count)
        if not forecasts:
            return []

        forecasts_by_id = {f.id: f for f in forecasts}
        predictions = await self._find_predictions(forecasts_by_id.keys(), scope)
        if not predictions:
            return []

        users_by_id = await self._find_participants({p.user_id for p in predictions}, scope)
        categories_by_id = await self._find_categories(
            {f.category_id for f in forecasts if f.category_id}
        )

        rows = []
        for prediction in predictions:
            user = users_by_id.get(prediction.user_id)
            if user is None:
                # Admin, otra organización o usuario eliminado
                continue

            forecast = forecasts_by_id[prediction.forecast_id]
            rows.append(PredictionRow(
                user=user,
                forecast=forecast,
                category=categories_by_id.get(forecast.category_id),
                prediction=prediction,
            ))

        return rows

    async def find_qualifying_forecasts(
        self,
        scope: LeaderboardScope,
        filters: FilterSpec
    ) -> list[Forecast]:
        """Forecasts with actual value that match scope + filters (no recent-N cap)."""
        cursor = self.forecasts_collection.find(
            self._forecast_query(scope, filters)
        ).sort("_id", 1)

        docs = await cursor.to_list(length=None)
        return [Forecast(**doc) for doc in docs]

    # ============================================
    # 📌 PARTICIPANTS
    # ============================================

    async def count_participants(
        self,
        scope: LeaderboardScope,
        filters: Optional[FilterSpec] = None
    ) -> int:
        """Distinct users with at least one qualifying row."""
        rows = await self.fetch_qualifying_rows(scope, filters)
        return len({row.user.id for row in rows})

    # ============================================
    # 📌 HELPERS
    # ============================================

    @staticmethod
    def _forecast_query(scope: LeaderboardScope, filters: FilterSpec) -> dict:
        conditions: list[dict] = [{"actual_value": {"$ne": None}}]

        if scope.organization_id:
            conditions.append({"organization_id": scope.organization_id})
        if scope.kind == ScopeKind.FORECAST:
            conditions.append({"_id": scope.forecast_id})
        if scope.kind == ScopeKind.CATEGORY:
            conditions.append({"category_id": scope.category_id})

        if filters.forecast_ids:
            conditions.append({"_id": {"$in": filters.forecast_ids}})
        if filters.category_ids:
            conditions.append({"category_id": {"$in": filters.category_ids}})
        if filters.forecast_types:
            conditions.append({"type": {"$in": [t.value for t in filters.forecast_types]}})

        # Rango inclusivo sobre data_release_date
        if filters.date_from is not None:
            conditions.append({"data_release_date": {"$gte": filters.date_from}})
        if filters.date_to is not None:
            conditions.append({"data_release_date": {"$lte": filters.date_to}})

        return {"$and": conditions}

    async def _find_predictions(
        self,
        forecast_ids: Iterable[str],
        scope: LeaderboardScope
    ) -> list[Prediction]:
        query: dict = {"forecast_id": {"$in": list(forecast_ids)}}
        if scope.kind == ScopeKind.USER:
            query["user_id"] = scope.user_id

        cursor = self.predictions_collection.find(query).sort("_id", 1)
        docs = await cursor.to_list(length=None)
        return [Prediction(**doc) for doc in docs]

    async def _find_participants(
        self,
        user_ids: set[str],
        scope: LeaderboardScope
    ) -> dict[str, User]:
        query: dict = {
            "_id": {"$in": list(user_ids)},
            "role": UserRole.USER.value,
        }
        if scope.organization_id:
            query["organization_id"] = scope.organization_id

        docs = await self.users_collection.find(query).to_list(length=None)
        return {doc["_id"]: User(**doc) for doc in docs}

    async def _find_categories(self, category_ids: set[str]) -> dict[str, ForecastCategory]:
        if not category_ids:
            return {}

        cursor = self.categories_collection.find({"_id": {"$in": list(category_ids)}})
        docs = await cursor.to_list(length=None)
        return {doc["_id"]: ForecastCategory(**doc) for doc in docs}
