"""
Dashboard endpoints.
Business statistics for the home screen.
"""

from fastapi import APIRouter

from app.api.deps import DbSession, CurrentUser
from app.schemas.dashboard import DashboardStats, DashboardRecent
from app.services.dashboard import DashboardService


router = APIRouter()


@router.get(
    "/stats",
    response_model=DashboardStats,
    summary="Estadísticas generales",
    description="Ventas del mes y del día, clientes, deuda total, presupuestos y cheques pendientes",
)
async def get_stats(
    current_user: CurrentUser,
    db: DbSession,
) -> DashboardStats:
    service = DashboardService(db)
    return DashboardStats.model_validate(await service.get_stats())


@router.get(
    "/recent",
    response_model=DashboardRecent,
    summary="Actividad reciente",
    description="Últimas ventas y presupuestos próximos a vencer",
)
async def get_recent(
    current_user: CurrentUser,
    db: DbSession,
) -> DashboardRecent:
    service = DashboardService(db)
    return DashboardRecent.model_validate(await service.get_recent())
