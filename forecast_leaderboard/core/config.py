"""
Configuración de la app cargada desde variables de entorno (.env)

Todo lo que varía entre desarrollo/producción va aquí
"""

from functools import lru_cache
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # MongoDB
    mongodb_uri: str = "mongodb://localhost:27017"
    mongodb_db_name: str = "forecast_leaderboard"  # Nombre de la base de datos

    # App
    app_env: str = "development"  # o "production"
    debug: bool = False

    # CORS - de dónde pueden venir los requests
    cors_origins: str = "http://localhost:3000"  # URLs separadas por coma

    # Logging
    log_level: str = "INFO"
    log_json: bool = False  # Logs en una línea JSON (para agregadores)

    # ==================== Leaderboard ====================
    # Saldo inicial del fondo de cada participante ($1 billón).
    # fund_balance = starting_fund_balance + beneficio neto acumulado
    starting_fund_balance: float = 1_000_000_000

    # Máximo aceptado para el filtro "N forecasts más recientes"
    max_recent_count: int = 500

    # Vistas guardadas del leaderboard por usuario
    max_views_per_user: int = 3

    class Config:
        env_file = ".env"  # Lee desde el archivo .env
        env_file_encoding = "utf-8"
        extra = "ignore"  # Ignora campos extras del .env que no estén en el modelo


@lru_cache()
def get_settings() -> Settings:
    """Retorna la instancia de configuración (cacheada para no releerla)"""
    return Settings()
