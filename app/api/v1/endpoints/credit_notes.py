"""
Credit note endpoints.
"""

from datetime import date
from fastapi import APIRouter, Query, status

from app.api.deps import DbSession, CurrentUser, WriterUser
from app.schemas.credit_note import (
    CreditNoteCreate,
    CreditNoteResponse,
    CreditNoteListResponse,
)
from app.schemas.base import page_count
from app.models.credit_note import CreditNoteReason, CreditNoteStatus
from app.services.credit_note import CreditNoteService


router = APIRouter()


@router.post(
    "",
    response_model=CreditNoteResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Emitir nota de crédito",
    description="Emite una nota de crédito y acredita la cuenta corriente; "
                "las devoluciones reingresan stock",
)
async def create_credit_note(
    data: CreditNoteCreate,
    current_user: WriterUser,
    db: DbSession,
) -> CreditNoteResponse:
    service = CreditNoteService(db)
    credit_note = await service.create(data)
    return CreditNoteResponse.model_validate(credit_note)


@router.get(
    "",
    response_model=CreditNoteListResponse,
    summary="Listar notas de crédito",
)
async def list_credit_notes(
    current_user: CurrentUser,
    db: DbSession,
    page: int = Query(1, ge=1, description="Número de página"),
    per_page: int = Query(20, ge=1, le=100, description="Elementos por página"),
    customer_id: int | None = Query(None, description="Filtrar por cliente"),
    note_status: CreditNoteStatus | None = Query(None, alias="status", description="Filtrar por estado"),
    reason: CreditNoteReason | None = Query(None, description="Filtrar por motivo"),
    from_date: date | None = Query(None, description="Desde fecha"),
    to_date: date | None = Query(None, description="Hasta fecha"),
) -> CreditNoteListResponse:
    service = CreditNoteService(db)
    skip = (page - 1) * per_page

    credit_notes, total = await service.list(
        skip=skip,
        limit=per_page,
        customer_id=customer_id,
        note_status=note_status,
        reason=reason,
        from_date=from_date,
        to_date=to_date,
    )

    return CreditNoteListResponse(
        items=[CreditNoteResponse.model_validate(n) for n in credit_notes],
        total=total,
        page=page,
        per_page=per_page,
        pages=page_count(total, per_page),
    )


@router.get(
    "/{credit_note_id}",
    response_model=CreditNoteResponse,
    summary="Detalle de nota de crédito",
)
async def get_credit_note(
    credit_note_id: int,
    current_user: CurrentUser,
    db: DbSession,
) -> CreditNoteResponse:
    service = CreditNoteService(db)
    return CreditNoteResponse.model_validate(await service.get_or_404(credit_note_id))


@router.post(
    "/{credit_note_id}/void",
    response_model=CreditNoteResponse,
    summary="Anular nota de crédito",
)
async def void_credit_note(
    credit_note_id: int,
    current_user: WriterUser,
    db: DbSession,
) -> CreditNoteResponse:
    service = CreditNoteService(db)
    credit_note = await service.get_or_404(credit_note_id)
    credit_note = await service.void(credit_note)
    return CreditNoteResponse.model_validate(credit_note)
