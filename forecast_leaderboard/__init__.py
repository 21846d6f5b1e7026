"""Forecast leaderboard backend (FastAPI + MongoDB)."""

__version__ = "1.0.0"
