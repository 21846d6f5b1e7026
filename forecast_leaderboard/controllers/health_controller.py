"""
Controlador de salud - Endpoint de comprobación del servicio
"""

from fastapi import APIRouter
from pydantic import BaseModel

from forecast_leaderboard.core.dependencies import AppSettings
from forecast_leaderboard.database import Database


router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Respuesta del chequeo de estado."""
    status: str
    database: str
    environment: str


@router.get("/health", response_model=HealthResponse)
async def health_check(settings: AppSettings):
    """
    Endpoint de verificación de estado.

    La API responde "ok" aunque MongoDB no esté conectado; el campo
    database indica el estado de la conexión.
    """
    db_status = "connected" if Database.db is not None else "disconnected"

    return HealthResponse(
        status="ok",
        database=db_status,
        environment=settings.app_env
    )
