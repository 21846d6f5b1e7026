"""
Dependencies de FastAPI para inyeccion de BD y configuracion
"""

from typing import Annotated

from fastapi import Depends
from motor.motor_asyncio import AsyncIOMotorDatabase

from forecast_leaderboard.core.config import Settings, get_settings
from forecast_leaderboard.database import get_database


# Alias de tipos para que se vea mas limpio en los endpoints
Database = Annotated[AsyncIOMotorDatabase, Depends(get_database)]
AppSettings = Annotated[Settings, Depends(get_settings)]
