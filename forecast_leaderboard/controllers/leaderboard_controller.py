"""
Controlador de leaderboards - Endpoints de clasificación

Los leaderboards se calculan en tiempo real a partir de las predicciones
ya puntuadas; no hay caché ni tablas precalculadas.
"""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel
from pydantic.alias_generators import to_camel

from forecast_leaderboard.core.dependencies import AppSettings, Database
from forecast_leaderboard.models.leaderboard import (
    CategoryLeaderboardEntry,
    ForecastLeaderboardEntry,
    LeaderboardEntry,
)
from forecast_leaderboard.models.leaderboard_query import FilterSpec
from forecast_leaderboard.services.exceptions import (
    InvalidFilterError,
    LeaderboardNotFoundError,
)
from forecast_leaderboard.services.leaderboard_filters import parse_filters
from forecast_leaderboard.services.leaderboard_service import LeaderboardService


router = APIRouter(tags=["leaderboard"])


class RankedLeaderboardEntry(LeaderboardEntry):
    """Entrada por usuario con su posición."""
    rank: int


class RankedForecastEntry(ForecastLeaderboardEntry):
    """Entrada por forecast con su posición."""
    rank: int


class RankedCategoryEntry(CategoryLeaderboardEntry):
    """Entrada por categoría con su posición."""
    rank: int


class LeaderboardResponse(BaseModel):
    entries: list[RankedLeaderboardEntry]
    total: int


class ForecastLeaderboardResponse(BaseModel):
    entries: list[RankedForecastEntry]
    total: int


class CategoryLeaderboardResponse(BaseModel):
    entries: list[RankedCategoryEntry]
    total: int


class UserRankResponse(BaseModel):
    """Posición del usuario (null si no tiene predicciones completadas)."""
    rank: Optional[int] = None
    entry: Optional[RankedLeaderboardEntry] = None


class ParticipantCountResponse(BaseModel):
    organization_id: str
    participants: int

    class Config:
        alias_generator = to_camel
        populate_by_name = True


# ============================================
# 🎯 PARÁMETROS COMUNES
# ============================================

def get_filters(
    settings: AppSettings,
    forecast_ids: Optional[str] = Query(None, alias="forecastIds", description="IDs separados por coma"),
    category_ids: Optional[str] = Query(None, alias="categoryIds", description="IDs separados por coma"),
    forecast_types: Optional[str] = Query(None, alias="forecastTypes", description="BINARY,CONTINUOUS,CATEGORICAL"),
    recent_count: Optional[str] = Query(None, alias="recentCount", description="Solo los N forecasts más recientes"),
    min_forecasts: Optional[str] = Query(None, alias="minForecasts", description="Mínimo de predicciones por grupo"),
    date_from: Optional[str] = Query(None, alias="dateFrom", description="Fecha ISO (inclusive)"),
    date_to: Optional[str] = Query(None, alias="dateTo", description="Fecha ISO (inclusive)"),
) -> FilterSpec:
    """
    Convierte los query params en un FilterSpec validado.

    Parámetros inválidos -> 400 antes de calcular nada.
    """
    try:
        return parse_filters(
            forecast_ids=forecast_ids,
            category_ids=category_ids,
            forecast_types=forecast_types,
            min_forecasts=min_forecasts,
            recent_count=recent_count,
            date_from=date_from,
            date_to=date_to,
            max_recent_count=settings.max_recent_count,
        )
    except InvalidFilterError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )


Filters = Annotated[FilterSpec, Depends(get_filters)]
SortBy = Annotated[Optional[str], Query(alias="sortBy", description="Campo (camelCase); por defecto accuracyRate")]
SortOrderParam = Annotated[Optional[str], Query(alias="sortOrder", description="asc o desc (por defecto desc)")]


# ============================================
# 📌 ORGANIZACIÓN
# ============================================

@router.get("/organizations/{org_id}/leaderboard/users", response_model=LeaderboardResponse)
async def get_users_leaderboard(
    org_id: str,
    db: Database,
    settings: AppSettings,
    filters: Filters,
    sort_by: SortBy = None,
    sort_order: SortOrderParam = None
):
    """
    Obtener el leaderboard de usuarios de una organización.
    """
    leaderboard_service = LeaderboardService(db, settings)
    result = await leaderboard_service.get_organization_leaderboard(
        org_id, filters, sort_by, sort_order
    )

    return LeaderboardResponse(
        entries=[
            RankedLeaderboardEntry(rank=idx + 1, **e.model_dump())
            for idx, e in enumerate(result.entries)
        ],
        total=result.total
    )


@router.get("/organizations/{org_id}/leaderboard/users/{user_id}", response_model=LeaderboardEntry)
async def get_user_leaderboard_entry(
    org_id: str,
    user_id: str,
    db: Database,
    settings: AppSettings
):
    """
    Obtener las estadísticas de un usuario dentro de su organización.
    """
    leaderboard_service = LeaderboardService(db, settings)

    try:
        return await leaderboard_service.get_user_entry(org_id, user_id)
    except LeaderboardNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )


@router.get("/organizations/{org_id}/leaderboard/users/{user_id}/rank", response_model=UserRankResponse)
async def get_user_rank(
    org_id: str,
    user_id: str,
    db: Database,
    settings: AppSettings
):
    """
    Obtener la posición del usuario en el leaderboard de su organización.

    Sin predicciones completadas -> rank y entry en null.
    """
    leaderboard_service = LeaderboardService(db, settings)
    result = await leaderboard_service.get_user_rank(org_id, user_id)

    if not result:
        return UserRankResponse(rank=None, entry=None)

    return UserRankResponse(
        rank=result["rank"],
        entry=RankedLeaderboardEntry(rank=result["rank"], **result["entry"].model_dump())
    )


@router.get("/organizations/{org_id}/leaderboard/participants", response_model=ParticipantCountResponse)
async def get_participant_count(
    org_id: str,
    db: Database,
    settings: AppSettings
):
    """
    Cantidad de participantes (usuarios con al menos una predicción completada).
    """
    leaderboard_service = LeaderboardService(db, settings)
    participants = await leaderboard_service.get_participant_count(org_id)

    return ParticipantCountResponse(organization_id=org_id, participants=participants)


@router.get("/organizations/{org_id}/leaderboard/forecasts", response_model=ForecastLeaderboardResponse)
async def get_forecasts_leaderboard(
    org_id: str,
    db: Database,
    settings: AppSettings,
    filters: Filters,
    sort_by: SortBy = None,
    sort_order: SortOrderParam = None
):
    """
    Obtener el leaderboard por forecast de una organización.
    """
    leaderboard_service = LeaderboardService(db, settings)
    result = await leaderboard_service.get_forecast_leaderboard(
        org_id, filters, sort_by, sort_order
    )

    return ForecastLeaderboardResponse(
        entries=[
            RankedForecastEntry(rank=idx + 1, **e.model_dump())
            for idx, e in enumerate(result.entries)
        ],
        total=result.total
    )


@router.get("/organizations/{org_id}/leaderboard/categories", response_model=CategoryLeaderboardResponse)
async def get_categories_leaderboard(
    org_id: str,
    db: Database,
    settings: AppSettings,
    filters: Filters,
    sort_by: SortBy = None,
    sort_order: SortOrderParam = None
):
    """
    Obtener el leaderboard por categoría de una organización.

    Los forecasts sin categoría no aparecen.
    """
    leaderboard_service = LeaderboardService(db, settings)
    result = await leaderboard_service.get_category_leaderboard(
        org_id, filters, sort_by, sort_order
    )

    return CategoryLeaderboardResponse(
        entries=[
            RankedCategoryEntry(rank=idx + 1, **e.model_dump())
            for idx, e in enumerate(result.entries)
        ],
        total=result.total
    )


# ============================================
# 📌 FORECAST / CATEGORÍA
# ============================================

@router.get("/forecasts/{forecast_id}/leaderboard", response_model=LeaderboardResponse)
async def get_forecast_user_leaderboard(
    forecast_id: str,
    db: Database,
    settings: AppSettings,
    filters: Filters,
    sort_by: SortBy = None,
    sort_order: SortOrderParam = None
):
    """
    Obtener el ranking de usuarios en un forecast.
    """
    leaderboard_service = LeaderboardService(db, settings)
    result = await leaderboard_service.get_forecast_user_leaderboard(
        forecast_id, filters, sort_by, sort_order
    )

    return LeaderboardResponse(
        entries=[
            RankedLeaderboardEntry(rank=idx + 1, **e.model_dump())
            for idx, e in enumerate(result.entries)
        ],
        total=result.total
    )


@router.get("/categories/{category_id}/leaderboard", response_model=LeaderboardResponse)
async def get_category_user_leaderboard(
    category_id: str,
    db: Database,
    settings: AppSettings,
    filters: Filters,
    sort_by: SortBy = None,
    sort_order: SortOrderParam = None
):
    """
    Obtener el ranking de usuarios en todos los forecasts de una categoría.
    """
    leaderboard_service = LeaderboardService(db, settings)
    result = await leaderboard_service.get_category_user_leaderboard(
        category_id, filters, sort_by, sort_order
    )

    return LeaderboardResponse(
        entries=[
            RankedLeaderboardEntry(rank=idx + 1, **e.model_dump())
            for idx, e in enumerate(result.entries)
        ],
        total=result.total
    )
