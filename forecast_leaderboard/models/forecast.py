from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


class ForecastType(str, Enum):
    BINARY = "BINARY"
    CONTINUOUS = "CONTINUOUS"
    CATEGORICAL = "CATEGORICAL"


class ForecastCategory(BaseModel):
    """Categoría de forecasts dentro de una organización"""

    id: str = Field(..., alias="_id")
    organization_id: Optional[str] = None

    name: str
    description: Optional[str] = None
    color: Optional[str] = None  # "#3b82f6"

    class Config:
        populate_by_name = True


class Forecast(BaseModel):
    """Pregunta a predecir. Solo cuenta para el leaderboard con actual_value"""

    id: str = Field(..., alias="_id")
    organization_id: Optional[str] = None

    title: str
    type: ForecastType

    category_id: Optional[str] = None

    due_date: Optional[datetime] = None
    data_release_date: Optional[datetime] = None

    actual_value: Optional[str] = None  # "true" | "false" | "1234.5" | option

    @property
    def has_actual_value(self) -> bool:
        return self.actual_value is not None

    class Config:
        populate_by_name = True
