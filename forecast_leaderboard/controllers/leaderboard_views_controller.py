"""
Controlador de vistas guardadas del leaderboard

Cada usuario puede guardar hasta 3 configuraciones (filtros, orden y
columnas visibles) y volver a ejecutarlas.
"""

from datetime import datetime
from typing import Optional, Union

from fastapi import APIRouter, HTTPException, Query, Response, status
from pydantic import BaseModel
from pydantic.alias_generators import to_camel

from forecast_leaderboard.controllers.leaderboard_controller import (
    CategoryLeaderboardResponse,
    ForecastLeaderboardResponse,
    LeaderboardResponse,
    RankedCategoryEntry,
    RankedForecastEntry,
    RankedLeaderboardEntry,
)
from forecast_leaderboard.core.dependencies import AppSettings, Database
from forecast_leaderboard.models.leaderboard_query import LeaderboardViewType
from forecast_leaderboard.models.leaderboard_view import (
    LeaderboardView,
    LeaderboardViewCreate,
    LeaderboardViewRename,
    SavedFilters,
)
from forecast_leaderboard.services.exceptions import (
    DuplicateViewNameError,
    InvalidFilterError,
    ViewLimitExceededError,
    ViewNotFoundError,
)
from forecast_leaderboard.services.leaderboard_view_service import LeaderboardViewService


router = APIRouter(prefix="/users/{user_id}/leaderboard-views", tags=["leaderboard-views"])


class LeaderboardViewResponse(BaseModel):
    """Vista guardada tal como la consume el frontend."""
    id: str
    name: str
    view_type: LeaderboardViewType
    filters: SavedFilters
    sort_by: Optional[str] = None
    sort_order: Optional[str] = None
    column_visibility: dict[str, bool] = {}
    created_at: datetime
    updated_at: datetime

    class Config:
        alias_generator = to_camel
        populate_by_name = True


def _to_response(view: LeaderboardView) -> LeaderboardViewResponse:
    return LeaderboardViewResponse(
        id=view.id,
        name=view.name,
        view_type=view.view_type,
        filters=view.filters,
        sort_by=view.sort_by,
        sort_order=view.sort_order,
        column_visibility=view.column_visibility,
        created_at=view.created_at,
        updated_at=view.updated_at
    )


RESPONSE_TYPES = {
    LeaderboardViewType.USERS: (LeaderboardResponse, RankedLeaderboardEntry),
    LeaderboardViewType.FORECASTS: (ForecastLeaderboardResponse, RankedForecastEntry),
    LeaderboardViewType.CATEGORIES: (CategoryLeaderboardResponse, RankedCategoryEntry),
}


@router.get("", response_model=list[LeaderboardViewResponse])
async def list_views(user_id: str, db: Database, settings: AppSettings):
    """
    Listar las vistas del usuario (las más antiguas primero).
    """
    view_service = LeaderboardViewService(db, settings)
    views = await view_service.list_views(user_id)

    return [_to_response(v) for v in views]


@router.post("", response_model=LeaderboardViewResponse, status_code=status.HTTP_201_CREATED)
async def create_view(
    user_id: str,
    view_data: LeaderboardViewCreate,
    db: Database,
    settings: AppSettings
):
    """
    Guardar una nueva vista.

    El nombre debe ser único para el usuario (sin distinguir mayúsculas).
    """
    view_service = LeaderboardViewService(db, settings)

    try:
        view = await view_service.create_view(user_id, view_data)
    except ViewLimitExceededError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e)
        )
    except DuplicateViewNameError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e)
        )
    except InvalidFilterError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    return _to_response(view)


@router.patch("/{view_id}", response_model=LeaderboardViewResponse)
async def rename_view(
    user_id: str,
    view_id: str,
    rename_data: LeaderboardViewRename,
    db: Database,
    settings: AppSettings
):
    """
    Renombrar una vista (el resto de la configuración no se edita).
    """
    view_service = LeaderboardViewService(db, settings)

    try:
        view = await view_service.rename_view(user_id, view_id, rename_data.name)
    except ViewNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )
    except DuplicateViewNameError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e)
        )

    return _to_response(view)


@router.delete("/{view_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_view(user_id: str, view_id: str, db: Database, settings: AppSettings):
    """
    Eliminar una vista.
    """
    view_service = LeaderboardViewService(db, settings)

    try:
        await view_service.delete_view(user_id, view_id)
    except ViewNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )

    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/{view_id}/results",
    response_model=Union[LeaderboardResponse, ForecastLeaderboardResponse, CategoryLeaderboardResponse]
)
async def run_view(
    user_id: str,
    view_id: str,
    db: Database,
    settings: AppSettings,
    organization_id: str = Query(..., alias="organizationId")
):
    """
    Ejecutar una vista guardada sobre el leaderboard de la organización.
    """
    view_service = LeaderboardViewService(db, settings)

    try:
        view = await view_service.get_view(user_id, view_id)
        result = await view_service.run_view(user_id, view_id, organization_id)
    except ViewNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )
    except InvalidFilterError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    response_model, entry_model = RESPONSE_TYPES[view.view_type]
    return response_model(
        entries=[
            entry_model(rank=idx + 1, **e.model_dump())
            for idx, e in enumerate(result.entries)
        ],
        total=result.total
    )
