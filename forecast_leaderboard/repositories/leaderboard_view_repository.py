"""
LeaderboardViewRepository - CRUD para las vistas guardadas del leaderboard

Cada vista pertenece a un usuario; todas las consultas filtran por user_id.
"""

import re
from datetime import datetime
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument

from forecast_leaderboard.models.leaderboard_view import LeaderboardView


class LeaderboardViewRepository:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["leaderboard_views"]

    # ============================================
    # 📌 CREATE
    # ============================================

    async def create(self, view: LeaderboardView) -> LeaderboardView:
        await self.collection.insert_one(view.model_dump(by_alias=True))
        return view

    # ============================================
    # 📌 READ
    # ============================================

    async def get_by_id(self, view_id: str, user_id: str) -> Optional[LeaderboardView]:
        doc = await self.collection.find_one({"_id": view_id, "user_id": user_id})
        return LeaderboardView(**doc) if doc else None

    async def list_for_user(self, user_id: str) -> list[LeaderboardView]:
        """Vistas del usuario, las más antiguas primero"""
        cursor = self.collection.find({"user_id": user_id}).sort("created_at", 1)
        docs = await cursor.to_list(length=None)
        return [LeaderboardView(**doc) for doc in docs]

    async def count_for_user(self, user_id: str) -> int:
        return await self.collection.count_documents({"user_id": user_id})

    async def name_exists(
        self,
        name: str,
        user_id: str,
        exclude_id: Optional[str] = None
    ) -> bool:
        """Nombre ya usado por el usuario (sin distinguir mayúsculas)"""
        query: dict = {
            "user_id": user_id,
            "name": {"$regex": f"^{re.escape(name)}$", "$options": "i"},
        }
        if exclude_id:
            query["_id"] = {"$ne": exclude_id}

        count = await self.collection.count_documents(query, limit=1)
        return count > 0

    # ============================================
    # 📌 UPDATE
    # ============================================

    async def rename(
        self,
        view_id: str,
        user_id: str,
        name: str,
        updated_at: datetime
    ) -> Optional[LeaderboardView]:
        result = await self.collection.find_one_and_update(
            {"_id": view_id, "user_id": user_id},
            {"$set": {"name": name, "updated_at": updated_at}},
            return_document=ReturnDocument.AFTER
        )
        return LeaderboardView(**result) if result else None

    # ============================================
    # 📌 DELETE
    # ============================================

    async def delete(self, view_id: str, user_id: str) -> bool:
        result = await self.collection.delete_one({"_id": view_id, "user_id": user_id})
        return result.deleted_count > 0
