"""
🔌 Database Connection Setup - MongoDB

Configuración centralizada para conectar a MongoDB
"""

import logging
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from forecast_leaderboard.core.config import get_settings

logger = logging.getLogger(__name__)


class Database:
    """Singleton para la conexión a MongoDB"""

    client: Optional[AsyncIOMotorClient] = None
    db: Optional[AsyncIOMotorDatabase] = None

    @classmethod
    async def connect(cls):
        """Conecta a MongoDB"""
        if cls.client is None:
            settings = get_settings()

            cls.client = AsyncIOMotorClient(
                settings.mongodb_uri,
                maxPoolSize=10,
                minPoolSize=2,
            )
            cls.db = cls.client[settings.mongodb_db_name]

            # Test de conexión
            await cls.client.admin.command("ping")
            logger.info("Connected to MongoDB: %s", settings.mongodb_db_name)

    @classmethod
    async def disconnect(cls):
        """Cierra la conexión"""
        if cls.client is not None:
            cls.client.close()
            cls.client = None
            cls.db = None
            logger.info("Disconnected from MongoDB")

    @classmethod
    def get_db(cls) -> AsyncIOMotorDatabase:
        """Retorna la instancia de la base de datos"""
        if cls.db is None:
            raise RuntimeError("Database not connected. Call Database.connect() first.")
        return cls.db


# ============================================
# 🎯 DEPENDENCY para FastAPI
# ============================================

async def get_database() -> AsyncIOMotorDatabase:
    """
    FastAPI dependency para inyectar la DB

    Uso:
        @router.get("/organizations/{org_id}/leaderboard/users")
        async def get_users_leaderboard(
            org_id: str,
            db: AsyncIOMotorDatabase = Depends(get_database)
        ):
            service = LeaderboardService(db)
            return await service.get_organization_leaderboard(org_id)
    """
    return Database.get_db()


# ============================================
# 🏗️ CREAR ÍNDICES (al arrancar la app)
# ============================================

async def create_indexes(db: Optional[AsyncIOMotorDatabase] = None):
    """
    Crea los índices que usan las consultas del leaderboard

    Se llama desde el lifespan de la app; create_index es idempotente
    """
    db = db if db is not None else Database.get_db()

    # Índices para users
    await db.users.create_index("email", unique=True)
    await db.users.create_index([("organization_id", 1), ("role", 1)])

    # Índices para forecasts
    await db.forecasts.create_index([("organization_id", 1), ("actual_value", 1)])
    await db.forecasts.create_index("category_id")
    await db.forecasts.create_index([("organization_id", 1), ("data_release_date", -1)])

    # Índices para forecast_categories
    await db.forecast_categories.create_index("organization_id")

    # Índices para predictions
    await db.predictions.create_index([("forecast_id", 1), ("user_id", 1)], unique=True)
    await db.predictions.create_index("user_id")

    # Índices para leaderboard_views
    await db.leaderboard_views.create_index([("user_id", 1), ("created_at", 1)])

    logger.info("Indexes created successfully")
