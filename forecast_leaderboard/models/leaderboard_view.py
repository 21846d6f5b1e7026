from datetime import datetime
from typing import Annotated, Optional, Union
from pydantic import BaseModel, Field, StringConstraints
from pydantic.alias_generators import to_camel

from .leaderboard_query import LeaderboardViewType


MAX_VIEW_NAME_LENGTH = 50

ViewName = Annotated[
    str,
    StringConstraints(strip_whitespace=True, min_length=1, max_length=MAX_VIEW_NAME_LENGTH),
]


class SavedFilters(BaseModel):
    """Filtros tal como los envía el frontend (se validan con parse_filters)"""

    forecast_ids: Optional[list[str]] = None
    category_ids: Optional[list[str]] = None
    forecast_types: Optional[list[str]] = None
    recent_count: Optional[Union[int, str]] = None
    min_forecasts: Optional[Union[int, str]] = None
    date_from: Optional[str] = None
    date_to: Optional[str] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class LeaderboardView(BaseModel):
    """Configuración guardada del leaderboard (filtros + orden + columnas)"""

    id: str = Field(..., alias="_id")
    user_id: str

    name: str
    view_type: LeaderboardViewType = LeaderboardViewType.USERS

    filters: SavedFilters = Field(default_factory=SavedFilters)
    sort_by: Optional[str] = None
    sort_order: Optional[str] = None
    column_visibility: dict[str, bool] = {}

    created_at: datetime
    updated_at: datetime

    class Config:
        populate_by_name = True


class LeaderboardViewCreate(BaseModel):
    """Body para crear una vista"""

    name: ViewName
    view_type: LeaderboardViewType = LeaderboardViewType.USERS
    filters: SavedFilters = Field(default_factory=SavedFilters)
    sort_by: Optional[str] = None
    sort_order: Optional[str] = None
    column_visibility: dict[str, bool] = {}

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class LeaderboardViewRename(BaseModel):
    """Body para renombrar una vista (lo único editable)"""

    name: ViewName
