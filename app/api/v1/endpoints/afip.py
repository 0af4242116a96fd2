"""
AFIP electronic invoicing endpoints.
"""

from typing import Any
from fastapi import APIRouter

from app.api.deps import DbSession, CurrentUser, WriterUser, Afip
from app.schemas.afip import InvoiceResult, VoucherStatus
from app.services.afip import AfipService


router = APIRouter()


@router.post(
    "/sales/{sale_id}/invoice",
    response_model=InvoiceResult,
    summary="Facturar venta",
    description="Solicitar el CAE de una venta en blanco confirmada",
)
async def invoice_sale(
    sale_id: int,
    current_user: WriterUser,
    db: DbSession,
    afip_client: Afip,
) -> InvoiceResult:
    service = AfipService(db, afip_client)
    sale = await service.invoice_sale(sale_id)
    return InvoiceResult(
        sale_id=sale.id,
        invoice_number=sale.invoice_number,
        full_number=sale.full_number,
        auth_code=sale.auth_code,
        auth_code_expiry=sale.auth_code_expiry,
    )


@router.get(
    "/sales/{sale_id}/status",
    response_model=VoucherStatus,
    summary="Estado del comprobante",
    description="Datos de facturación de la venta y el comprobante registrado en AFIP",
)
async def voucher_status(
    sale_id: int,
    current_user: CurrentUser,
    db: DbSession,
    afip_client: Afip,
) -> VoucherStatus:
    service = AfipService(db, afip_client)
    return VoucherStatus(**await service.voucher_status(sale_id))


@router.get(
    "/server-status",
    summary="Estado de los servidores de AFIP",
)
async def server_status(
    current_user: CurrentUser,
    db: DbSession,
    afip_client: Afip,
) -> dict[str, Any]:
    return await AfipService(db, afip_client).server_status()


@router.get(
    "/voucher-types",
    summary="Tipos de comprobante",
)
async def voucher_types(
    current_user: CurrentUser,
    db: DbSession,
    afip_client: Afip,
) -> list[dict[str, Any]]:
    return await AfipService(db, afip_client).voucher_types()
