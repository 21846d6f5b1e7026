from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


class UserRole(str, Enum):
    USER = "USER"
    ORG_ADMIN = "ORG_ADMIN"
    SUPER_ADMIN = "SUPER_ADMIN"


class User(BaseModel):
    """Participante de una organización (solo role USER entra al leaderboard)"""

    id: str = Field(..., alias="_id")
    email: str
    name: Optional[str] = None

    role: UserRole = UserRole.USER
    organization_id: Optional[str] = None

    class Config:
        populate_by_name = True
