"""
Quote (presupuesto) management endpoints.
CRUD operations for quotes and conversion to sale.
"""

from fastapi import APIRouter, Query, status

from app.api.deps import DbSession, CurrentUser, WriterUser, OptionalAfip
from app.schemas.quote import (
    QuoteCreate,
    QuoteUpdate,
    QuoteStatusUpdate,
    QuoteResponse,
    QuoteListResponse,
)
from app.schemas.sale import SaleResponse
from app.schemas.base import MessageResponse, page_count
from app.models.quote import QuoteStatus
from app.services.quote import QuoteService


router = APIRouter()


@router.post(
    "",
    response_model=QuoteResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Crear presupuesto",
    description="Crear un presupuesto con sus items; vence a los 30 días por defecto",
)
async def create_quote(
    data: QuoteCreate,
    current_user: WriterUser,
    db: DbSession,
) -> QuoteResponse:
    service = QuoteService(db)
    quote = await service.create(data)
    return QuoteResponse.model_validate(quote)


@router.get(
    "",
    response_model=QuoteListResponse,
    summary="Listar presupuestos",
    description="Listado paginado de presupuestos",
)
async def list_quotes(
    current_user: CurrentUser,
    db: DbSession,
    page: int = Query(1, ge=1, description="Número de página"),
    per_page: int = Query(20, ge=1, le=100, description="Elementos por página"),
    quote_status: QuoteStatus | None = Query(None, alias="status", description="Filtrar por estado"),
    customer_id: int | None = Query(None, description="Filtrar por cliente"),
) -> QuoteListResponse:
    service = QuoteService(db)
    skip = (page - 1) * per_page

    quotes, total = await service.list(
        skip=skip,
        limit=per_page,
        quote_status=quote_status,
        customer_id=customer_id,
    )

    return QuoteListResponse(
        items=[QuoteResponse.model_validate(q) for q in quotes],
        total=total,
        page=page,
        per_page=per_page,
        pages=page_count(total, per_page),
    )


@router.get(
    "/{quote_id}",
    response_model=QuoteResponse,
    summary="Detalle de presupuesto",
)
async def get_quote(
    quote_id: int,
    current_user: CurrentUser,
    db: DbSession,
) -> QuoteResponse:
    service = QuoteService(db)
    quote = await service.get_or_404(quote_id)
    return QuoteResponse.model_validate(quote)


@router.patch(
    "/{quote_id}",
    response_model=QuoteResponse,
    summary="Actualizar presupuesto",
    description="Solo presupuestos en borrador o enviados; los items se reemplazan",
)
async def update_quote(
    quote_id: int,
    data: QuoteUpdate,
    current_user: WriterUser,
    db: DbSession,
) -> QuoteResponse:
    service = QuoteService(db)
    quote = await service.get_or_404(quote_id)
    quote = await service.update(quote, data)
    return QuoteResponse.model_validate(quote)


@router.patch(
    "/{quote_id}/status",
    response_model=QuoteResponse,
    summary="Cambiar estado",
    description="Enviar, aceptar, rechazar o marcar vencido un presupuesto",
)
async def change_quote_status(
    quote_id: int,
    data: QuoteStatusUpdate,
    current_user: WriterUser,
    db: DbSession,
) -> QuoteResponse:
    service = QuoteService(db)
    quote = await service.get_or_404(quote_id)
    quote = await service.change_status(quote, data.status)
    return QuoteResponse.model_validate(quote)


@router.post(
    "/{quote_id}/convert",
    response_model=SaleResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Convertir en venta",
    description="Crear una venta confirmada con los items del presupuesto",
)
async def convert_quote(
    quote_id: int,
    current_user: WriterUser,
    db: DbSession,
    afip_client: OptionalAfip,
) -> SaleResponse:
    service = QuoteService(db)
    quote = await service.get_or_404(quote_id)
    sale = await service.convert_to_sale(quote, afip_client)
    return SaleResponse.model_validate(sale)


@router.delete(
    "/{quote_id}",
    response_model=MessageResponse,
    summary="Eliminar presupuesto",
    description="Eliminar un presupuesto que no fue convertido en venta",
)
async def delete_quote(
    quote_id: int,
    current_user: WriterUser,
    db: DbSession,
) -> MessageResponse:
    service = QuoteService(db)
    quote = await service.get_or_404(quote_id)
    await service.delete(quote)
    return MessageResponse(message="Presupuesto eliminado correctamente")
