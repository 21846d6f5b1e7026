"""
Pytest fixtures and configuration for all tests.
"""

import itertools
import pytest
from datetime import datetime
from typing import AsyncGenerator
from motor.motor_asyncio import AsyncIOMotorDatabase
from mongomock_motor import AsyncMongoMockClient

from forecast_leaderboard.models.forecast import Forecast, ForecastCategory, ForecastType
from forecast_leaderboard.models.prediction import Prediction, PredictionRow
from forecast_leaderboard.models.user import User, UserRole

# In-memory MongoDB test database
TEST_DB_NAME = "forecast_leaderboard_test"
TEST_ORG_ID = "org-1"


@pytest.fixture(scope="function")
async def test_db() -> AsyncGenerator[AsyncIOMotorDatabase, None]:
    """
    Provide a clean in-memory test database for each test.

    mongomock clients share storage per host, so collections are dropped
    after each test.
    """
    client = AsyncMongoMockClient()
    db = client[TEST_DB_NAME]

    yield db

    # Cleanup: drop all collections after test
    collection_names = await db.list_collection_names()
    for collection_name in collection_names:
        await db[collection_name].drop()


# ============================================
# 📌 DOCUMENT DATA (como se guardan en MongoDB)
# ============================================

@pytest.fixture
def sample_user_data():
    """Sample participant document."""
    return {
        "_id": "user-a",
        "email": "alice@example.com",
        "name": "Alice",
        "role": "USER",
        "organization_id": TEST_ORG_ID,
    }


@pytest.fixture
def sample_category_data():
    """Sample forecast category document."""
    return {
        "_id": "cat-macro",
        "organization_id": TEST_ORG_ID,
        "name": "Macro",
        "description": "Macroeconomic releases",
        "color": "#3b82f6",
    }


@pytest.fixture
def sample_forecast_data():
    """Sample resolved binary forecast document."""
    return {
        "_id": "fc-1",
        "organization_id": TEST_ORG_ID,
        "title": "Will CPI exceed 3%?",
        "type": "BINARY",
        "category_id": "cat-macro",
        "due_date": datetime(2026, 3, 1),
        "data_release_date": datetime(2026, 3, 15),
        "actual_value": "true",
    }


@pytest.fixture
def sample_prediction_data():
    """Sample scored binary prediction document."""
    return {
        "_id": "pred-1",
        "forecast_id": "fc-1",
        "user_id": "user-a",
        "value": "true",
        "confidence": 80,
        "equity_investment": 1000,
        "debt_financing": 0,
        "total_investment": 1000,
        "is_correct": True,
        "roe": 100,
        "roe_pct": 10,
        "rof": 0,
        "rof_pct": 0,
        "debt_repayment": 0,
        "net_profit_equity_plus_debt": 100,
        "roi_equity_plus_debt_pct": 10,
        "estimated_time": 30,
        "profit_per_hour": 200,
        "brier_score": 0.04,
    }


@pytest.fixture
async def seeded_db(test_db):
    """
    Organization with three participants, one admin and two resolved forecasts.

    - fc-bin (BINARY, cat-macro): Alice correct, Bob incorrect
    - fc-cont (CONTINUOUS, no category): Alice HIGH
    - fc-open (BINARY, no actual value): Carol predicted, never counts
    - Admin predicted fc-bin but never appears
    """
    await test_db["users"].insert_many([
        {"_id": "user-a", "email": "alice@example.com", "name": "Alice",
         "role": "USER", "organization_id": TEST_ORG_ID},
        {"_id": "user-b", "email": "bob@example.com", "name": "Bob",
         "role": "USER", "organization_id": TEST_ORG_ID},
        {"_id": "user-c", "email": "carol@example.com", "name": "Carol",
         "role": "USER", "organization_id": TEST_ORG_ID},
        {"_id": "admin-1", "email": "admin@example.com", "name": "Admin",
         "role": "ORG_ADMIN", "organization_id": TEST_ORG_ID},
    ])
    await test_db["forecast_categories"].insert_one({
        "_id": "cat-macro", "organization_id": TEST_ORG_ID,
        "name": "Macro", "description": None, "color": "#3b82f6",
    })
    await test_db["forecasts"].insert_many([
        {"_id": "fc-bin", "organization_id": TEST_ORG_ID, "title": "Rate hike?",
         "type": "BINARY", "category_id": "cat-macro",
         "data_release_date": datetime(2026, 1, 10), "actual_value": "true"},
        {"_id": "fc-cont", "organization_id": TEST_ORG_ID, "title": "GDP growth",
         "type": "CONTINUOUS", "category_id": None,
         "data_release_date": datetime(2026, 2, 10), "actual_value": "2.5"},
        {"_id": "fc-open", "organization_id": TEST_ORG_ID, "title": "Unemployment?",
         "type": "BINARY", "category_id": "cat-macro",
         "data_release_date": datetime(2026, 3, 10), "actual_value": None},
    ])
    await test_db["predictions"].insert_many([
        {"_id": "p1", "forecast_id": "fc-bin", "user_id": "user-a", "value": "true",
         "confidence": 80, "is_correct": True, "equity_investment": 1000,
         "debt_financing": 0, "total_investment": 1000,
         "net_profit_equity_plus_debt": 100, "roe": 100, "estimated_time": 30},
        {"_id": "p2", "forecast_id": "fc-bin", "user_id": "user-b", "value": "false",
         "confidence": 60, "is_correct": False, "equity_investment": 2000,
         "debt_financing": 0, "total_investment": 2000,
         "net_profit_equity_plus_debt": -200, "roe": -200, "estimated_time": 60},
        {"_id": "p3", "forecast_id": "fc-cont", "user_id": "user-a", "value": "3.0",
         "high_low": "HIGH", "equity_investment": 3000, "debt_financing": 1000,
         "total_investment": 4000, "net_profit_equity_plus_debt": 50,
         "absolute_actual_error_pct": 20, "absolute_forecast_error_pct": 16.7,
         "estimated_time": 30},
        {"_id": "p4", "forecast_id": "fc-open", "user_id": "user-c", "value": "true",
         "confidence": 90},
        {"_id": "p5", "forecast_id": "fc-bin", "user_id": "admin-1", "value": "true",
         "confidence": 99, "is_correct": True, "equity_investment": 5000,
         "total_investment": 5000, "net_profit_equity_plus_debt": 500},
    ])
    return test_db


# ============================================
# 📌 ROW FACTORY (tests de agregación sin BD)
# ============================================

@pytest.fixture
def make_row():
    """
    Build PredictionRow objects with sensible defaults.

    make_row(user_id="u1", forecast_id="f1", forecast_type="BINARY",
             category_id=None, release=None, **prediction_fields)
    """
    counter = itertools.count(1)

    def _make_row(
        user_id: str = "user-1",
        forecast_id: str = "fc-1",
        forecast_type: str = "BINARY",
        category_id: str = None,
        release: datetime = None,
        user_name: str = None,
        **prediction_fields
    ) -> PredictionRow:
        category = None
        if category_id is not None:
            category = ForecastCategory(
                id=category_id, organization_id=TEST_ORG_ID, name=f"Category {category_id}"
            )

        prediction_fields.setdefault("value", "true")
        return PredictionRow(
            user=User(
                id=user_id,
                email=f"{user_id}@example.com",
                name=user_name or user_id,
                role=UserRole.USER,
                organization_id=TEST_ORG_ID,
            ),
            forecast=Forecast(
                id=forecast_id,
                organization_id=TEST_ORG_ID,
                title=f"Forecast {forecast_id}",
                type=ForecastType(forecast_type),
                category_id=category_id,
                data_release_date=release,
                actual_value="true",
            ),
            category=category,
            prediction=Prediction(
                id=f"pred-{next(counter)}",
                forecast_id=forecast_id,
                user_id=user_id,
                **prediction_fields
            ),
        )

    return _make_row
