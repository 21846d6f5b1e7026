"""
Fixtures for integration tests
"""

import pytest
from httpx import ASGITransport, AsyncClient

from forecast_leaderboard.main import app
from forecast_leaderboard.database import get_database


@pytest.fixture
async def client(test_db):
    """
    HTTP client for testing API endpoints.

    Overrides the database dependency with the in-memory test database;
    the app lifespan (real MongoDB connection) never runs.
    """
    async def override_get_db():
        return test_db

    app.dependency_overrides[get_database] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.pop(get_database, None)


@pytest.fixture
async def seeded_client(client, seeded_db):
    """Client over the seeded organization (see seeded_db)."""
    return client
