"""
Unit tests for LeaderboardRepository
"""

import pytest
from datetime import datetime
from pymongo.errors import DuplicateKeyError

from forecast_leaderboard.database import create_indexes

from forecast_leaderboard.models.forecast import Forecast
from forecast_leaderboard.models.leaderboard_query import FilterSpec, LeaderboardScope
from forecast_leaderboard.repositories.leaderboard_repository import (
    LeaderboardRepository,
    select_most_recent,
)
from forecast_leaderboard.services.leaderboard_filters import parse_filters

ORG_ID = "org-1"


def _forecast(forecast_id, release=None):
    return Forecast(id=forecast_id, title=forecast_id, type="BINARY", data_release_date=release)


class TestSelectMostRecent:

    def test_newest_first_and_undated_last(self):
        forecasts = [
            _forecast("old", datetime(2025, 1, 1)),
            _forecast("undated"),
            _forecast("new", datetime(2026, 1, 1)),
        ]

        assert [f.id for f in select_most_recent(forecasts, 2)] == ["new", "old"]
        assert [f.id for f in select_most_recent(forecasts, 5)] == ["new", "old", "undated"]


class TestLeaderboardRepository:
    """Test suite for qualifying row selection."""

    @pytest.mark.asyncio
    async def test_rows_for_organization(self, seeded_db):
        repo = LeaderboardRepository(seeded_db)

        rows = await repo.fetch_qualifying_rows(LeaderboardScope.organization(ORG_ID))

        assert sorted(row.prediction.id for row in rows) == ["p1", "p2", "p3"]
        row = next(r for r in rows if r.prediction.id == "p1")
        assert row.user.name == "Alice"
        assert row.forecast.title == "Rate hike?"
        assert row.category.name == "Macro"

    @pytest.mark.asyncio
    async def test_uncategorized_row_has_no_category(self, seeded_db):
        repo = LeaderboardRepository(seeded_db)

        rows = await repo.fetch_qualifying_rows(LeaderboardScope.forecast("fc-cont"))

        assert len(rows) == 1
        assert rows[0].category is None

    @pytest.mark.asyncio
    async def test_user_scope(self, seeded_db):
        repo = LeaderboardRepository(seeded_db)

        rows = await repo.fetch_qualifying_rows(LeaderboardScope.user(ORG_ID, "user-a"))

        assert sorted(row.prediction.id for row in rows) == ["p1", "p3"]

    @pytest.mark.asyncio
    async def test_category_scope(self, seeded_db):
        repo = LeaderboardRepository(seeded_db)

        rows = await repo.fetch_qualifying_rows(LeaderboardScope.category("cat-macro"))

        assert sorted(row.prediction.id for row in rows) == ["p1", "p2"]

    @pytest.mark.asyncio
    async def test_forecast_and_category_id_filters(self, seeded_db):
        repo = LeaderboardRepository(seeded_db)
        scope = LeaderboardScope.organization(ORG_ID)

        by_forecast = await repo.fetch_qualifying_rows(scope, FilterSpec(forecast_ids=["fc-cont"]))
        by_category = await repo.fetch_qualifying_rows(scope, FilterSpec(category_ids=["cat-macro"]))

        assert [row.prediction.id for row in by_forecast] == ["p3"]
        assert sorted(row.prediction.id for row in by_category) == ["p1", "p2"]

    @pytest.mark.asyncio
    async def test_date_range_is_inclusive(self, seeded_db):
        repo = LeaderboardRepository(seeded_db)
        scope = LeaderboardScope.organization(ORG_ID)

        rows = await repo.fetch_qualifying_rows(
            scope, parse_filters(date_from="2026-02-10", date_to="2026-12-31")
        )

        assert [row.prediction.id for row in rows] == ["p3"]

    @pytest.mark.asyncio
    async def test_recent_count(self, seeded_db):
        repo = LeaderboardRepository(seeded_db)
        scope = LeaderboardScope.organization(ORG_ID)

        rows = await repo.fetch_qualifying_rows(scope, FilterSpec(recent_count=1))

        assert [row.forecast.id for row in rows] == ["fc-cont"]

    @pytest.mark.asyncio
    async def test_recent_count_applies_after_other_filters(self, seeded_db):
        repo = LeaderboardRepository(seeded_db)
        scope = LeaderboardScope.organization(ORG_ID)

        rows = await repo.fetch_qualifying_rows(
            scope, parse_filters(forecast_types="BINARY", recent_count=1)
        )

        assert {row.forecast.id for row in rows} == {"fc-bin"}
        assert len(rows) == 2

    @pytest.mark.asyncio
    async def test_no_matching_forecasts(self, seeded_db):
        repo = LeaderboardRepository(seeded_db)

        rows = await repo.fetch_qualifying_rows(
            LeaderboardScope.organization(ORG_ID), FilterSpec(forecast_ids=["missing"])
        )

        assert rows == []

    @pytest.mark.asyncio
    async def test_count_participants(self, seeded_db):
        repo = LeaderboardRepository(seeded_db)
        scope = LeaderboardScope.organization(ORG_ID)

        assert await repo.count_participants(scope) == 2
        assert await repo.count_participants(scope, FilterSpec(forecast_ids=["fc-cont"])) == 1

    @pytest.mark.asyncio
    async def test_single_scored_prediction(
        self,
        test_db,
        sample_user_data,
        sample_category_data,
        sample_forecast_data,
        sample_prediction_data
    ):
        await test_db["users"].insert_one(sample_user_data)
        await test_db["forecast_categories"].insert_one(sample_category_data)
        await test_db["forecasts"].insert_one(sample_forecast_data)
        await test_db["predictions"].insert_one(sample_prediction_data)
        repo = LeaderboardRepository(test_db)

        rows = await repo.fetch_qualifying_rows(LeaderboardScope.organization(ORG_ID))

        assert len(rows) == 1
        row = rows[0]
        assert row.user.email == sample_user_data["email"]
        assert row.category.color == "#3b82f6"
        assert row.prediction.confidence == 80
        assert row.prediction.net_profit_equity_plus_debt == 100

    @pytest.mark.asyncio
    async def test_empty_database(self, test_db):
        repo = LeaderboardRepository(test_db)

        rows = await repo.fetch_qualifying_rows(LeaderboardScope.organization(ORG_ID))

        assert rows == []


class TestCreateIndexes:

    @pytest.mark.asyncio
    async def test_one_prediction_per_user_and_forecast(self, test_db, sample_prediction_data):
        await create_indexes(test_db)

        indexes = await test_db["predictions"].index_information()
        unique_keys = [
            list(info["key"]) for info in indexes.values() if info.get("unique")
        ]
        assert [("forecast_id", 1), ("user_id", 1)] in unique_keys

        await test_db["predictions"].insert_one(sample_prediction_data)
        duplicate = {**sample_prediction_data, "_id": "p-duplicate"}
        with pytest.raises(DuplicateKeyError):
            await test_db["predictions"].insert_one(duplicate)

    @pytest.mark.asyncio
    async def test_user_email_is_unique(self, test_db, sample_user_data):
        await create_indexes(test_db)

        await test_db["users"].insert_one(sample_user_data)
        with pytest.raises(DuplicateKeyError):
            await test_db["users"].insert_one({**sample_user_data, "_id": "user-z"})
