"""
Cheque portfolio endpoints.
"""

from datetime import date
from fastapi import APIRouter, Query

from app.api.deps import DbSession, CurrentUser, WriterUser
from app.schemas.cheque import (
    ChequeStatusUpdate,
    ChequeResponse,
    ChequeListResponse,
)
from app.schemas.base import page_count
from app.models.cheque import ChequeStatus
from app.services.cheque import ChequeService


router = APIRouter()


@router.get(
    "",
    response_model=ChequeListResponse,
    summary="Listar cheques",
    description="Cartera de cheques ordenada por fecha de cobro",
)
async def list_cheques(
    current_user: CurrentUser,
    db: DbSession,
    page: int = Query(1, ge=1, description="Número de página"),
    per_page: int = Query(20, ge=1, le=100, description="Elementos por página"),
    cheque_status: ChequeStatus | None = Query(None, alias="status", description="Filtrar por estado"),
    bank: str | None = Query(None, description="Filtrar por banco"),
    due_from: date | None = Query(None, description="Vencimiento desde"),
    due_to: date | None = Query(None, description="Vencimiento hasta"),
) -> ChequeListResponse:
    service = ChequeService(db)
    skip = (page - 1) * per_page

    cheques, total = await service.list(
        skip=skip,
        limit=per_page,
        cheque_status=cheque_status,
        bank=bank,
        due_from=due_from,
        due_to=due_to,
    )

    return ChequeListResponse(
        items=[ChequeResponse.model_validate(c) for c in cheques],
        total=total,
        page=page,
        per_page=per_page,
        pages=page_count(total, per_page),
    )


@router.get(
    "/upcoming",
    response_model=list[ChequeResponse],
    summary="Próximos vencimientos",
    description="Cheques en cartera que vencen en los próximos días",
)
async def upcoming_cheques(
    current_user: CurrentUser,
    db: DbSession,
    days: int = Query(7, ge=0, le=365, description="Días hacia adelante"),
) -> list[ChequeResponse]:
    service = ChequeService(db)
    return [ChequeResponse.model_validate(c) for c in await service.upcoming(days)]


@router.get(
    "/{cheque_id}",
    response_model=ChequeResponse,
    summary="Detalle de cheque",
)
async def get_cheque(
    cheque_id: int,
    current_user: CurrentUser,
    db: DbSession,
) -> ChequeResponse:
    service = ChequeService(db)
    return ChequeResponse.model_validate(await service.get_or_404(cheque_id))


@router.patch(
    "/{cheque_id}/status",
    response_model=ChequeResponse,
    summary="Cambiar estado",
    description="Depositar, endosar o rechazar un cheque; el rechazo vuelve a debitar al cliente",
)
async def update_cheque_status(
    cheque_id: int,
    data: ChequeStatusUpdate,
    current_user: WriterUser,
    db: DbSession,
) -> ChequeResponse:
    service = ChequeService(db)
    cheque = await service.get_or_404(cheque_id)
    cheque = await service.update_status(cheque, data)
    return ChequeResponse.model_validate(cheque)
