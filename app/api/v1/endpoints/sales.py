"""
Sale management endpoints.
Creation, lifecycle transitions and the printable voucher.
"""

from datetime import date
from fastapi import APIRouter, Query, status
from fastapi.responses import FileResponse

from app.api.deps import DbSession, CurrentUser, WriterUser, OptionalAfip
from app.schemas.sale import (
    SaleCreate,
    SaleUpdate,
    SaleResponse,
    SaleListResponse,
)
from app.schemas.base import MessageResponse, page_count
from app.models.sale import SaleStatus
from app.services.pdf import PDFService
from app.services.sale import SaleService


router = APIRouter()


@router.post(
    "",
    response_model=SaleResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Crear venta",
    description="Crear una venta en borrador o confirmada; las confirmadas descuentan stock "
                "y debitan la cuenta corriente",
)
async def create_sale(
    data: SaleCreate,
    current_user: WriterUser,
    db: DbSession,
    afip_client: OptionalAfip,
) -> SaleResponse:
    service = SaleService(db, afip_client)
    sale = await service.create(data)
    return SaleResponse.model_validate(sale)


@router.get(
    "",
    response_model=SaleListResponse,
    summary="Listar ventas",
    description="Listado paginado de ventas",
)
async def list_sales(
    current_user: CurrentUser,
    db: DbSession,
    page: int = Query(1, ge=1, description="Número de página"),
    per_page: int = Query(20, ge=1, le=100, description="Elementos por página"),
    sale_status: SaleStatus | None = Query(None, alias="status", description="Filtrar por estado"),
    customer_id: int | None = Query(None, description="Filtrar por cliente"),
    is_white_invoice: bool | None = Query(None, description="Ventas en blanco (true) o en negro (false)"),
    from_date: date | None = Query(None, description="Desde fecha"),
    to_date: date | None = Query(None, description="Hasta fecha"),
) -> SaleListResponse:
    service = SaleService(db)
    skip = (page - 1) * per_page

    sales, total = await service.list(
        skip=skip,
        limit=per_page,
        sale_status=sale_status,
        customer_id=customer_id,
        is_white_invoice=is_white_invoice,
        from_date=from_date,
        to_date=to_date,
    )

    return SaleListResponse(
        items=[SaleResponse.model_validate(s) for s in sales],
        total=total,
        page=page,
        per_page=per_page,
        pages=page_count(total, per_page),
    )


@router.get(
    "/{sale_id}",
    response_model=SaleResponse,
    summary="Detalle de venta",
)
async def get_sale(
    sale_id: int,
    current_user: CurrentUser,
    db: DbSession,
) -> SaleResponse:
    service = SaleService(db)
    sale = await service.get_or_404(sale_id)
    return SaleResponse.model_validate(sale)


@router.patch(
    "/{sale_id}",
    response_model=SaleResponse,
    summary="Actualizar venta",
    description="Solo ventas en borrador; los items se reemplazan y se recalculan los importes",
)
async def update_sale(
    sale_id: int,
    data: SaleUpdate,
    current_user: WriterUser,
    db: DbSession,
) -> SaleResponse:
    service = SaleService(db)
    sale = await service.get_or_404(sale_id)
    sale = await service.update(sale, data)
    return SaleResponse.model_validate(sale)


@router.post(
    "/{sale_id}/confirm",
    response_model=SaleResponse,
    summary="Confirmar venta",
)
async def confirm_sale(
    sale_id: int,
    current_user: WriterUser,
    db: DbSession,
    afip_client: OptionalAfip,
) -> SaleResponse:
    service = SaleService(db, afip_client)
    sale = await service.get_or_404(sale_id)
    sale = await service.confirm(sale)
    return SaleResponse.model_validate(sale)


@router.post(
    "/{sale_id}/deliver",
    response_model=SaleResponse,
    summary="Marcar entregada",
)
async def deliver_sale(
    sale_id: int,
    current_user: WriterUser,
    db: DbSession,
) -> SaleResponse:
    service = SaleService(db)
    sale = await service.get_or_404(sale_id)
    sale = await service.deliver(sale)
    return SaleResponse.model_validate(sale)


@router.post(
    "/{sale_id}/cancel",
    response_model=SaleResponse,
    summary="Anular venta",
    description="Anula una venta sin CAE, devuelve el stock y acredita la cuenta corriente",
)
async def cancel_sale(
    sale_id: int,
    current_user: WriterUser,
    db: DbSession,
) -> SaleResponse:
    service = SaleService(db)
    sale = await service.get_or_404(sale_id)
    sale = await service.cancel(sale)
    return SaleResponse.model_validate(sale)


@router.delete(
    "/{sale_id}",
    response_model=MessageResponse,
    summary="Eliminar venta",
    description="Solo ventas en borrador",
)
async def delete_sale(
    sale_id: int,
    current_user: WriterUser,
    db: DbSession,
) -> MessageResponse:
    service = SaleService(db)
    sale = await service.get_or_404(sale_id)
    await service.delete(sale)
    return MessageResponse(message="Venta eliminada correctamente")


@router.get(
    "/{sale_id}/pdf",
    response_class=FileResponse,
    summary="Comprobante PDF",
    description="Descargar el comprobante de la venta",
)
async def download_sale_pdf(
    sale_id: int,
    current_user: CurrentUser,
    db: DbSession,
) -> FileResponse:
    service = SaleService(db)
    sale = await service.get_or_404(sale_id)

    pdf_path = await PDFService().generate_sale_pdf(sale)
    sale.pdf_path = pdf_path

    return FileResponse(
        path=pdf_path,
        filename=f"venta_{sale.sale_number}.pdf",
        media_type="application/pdf",
    )
