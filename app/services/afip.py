"""
AFIP electronic invoicing.

The AFIP web services are reached through an external client object
configured on ``app.state.afip_client``; this module only maps sales to the
voucher payload the client expects and stores the CAE it returns.
"""

import logging
from collections import defaultdict
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Protocol

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.fiscal import (
    TAXED_IVA_TYPES,
    clean_tax_id,
    full_invoice_number,
    round_amount,
    to_decimal,
    validate_cuit,
)
from app.models.enums import CustomerType, InvoiceType, IvaType
from app.models.sale import Sale, SaleStatus


logger = logging.getLogger(__name__)


# Comprobantes
AFIP_VOUCHER_TYPES: dict[InvoiceType, int] = {
    InvoiceType.FACTURA_A: 1,
    InvoiceType.NOTA_DEBITO_A: 2,
    InvoiceType.NOTA_CREDITO_A: 3,
    InvoiceType.FACTURA_B: 6,
    InvoiceType.NOTA_DEBITO_B: 7,
    InvoiceType.NOTA_CREDITO_B: 8,
    InvoiceType.FACTURA_C: 11,
    InvoiceType.NOTA_DEBITO_C: 12,
    InvoiceType.NOTA_CREDITO_C: 13,
}

# Tipos de documento
DOC_CUIT = 80
DOC_CUIL = 86
DOC_DNI = 96
DOC_SIN_IDENTIFICAR = 99

AFIP_DOCUMENT_TYPES: dict[CustomerType, int] = {
    CustomerType.RESPONSABLE_INSCRIPTO: DOC_CUIT,
    CustomerType.MONOTRIBUTO: DOC_CUIL,
    CustomerType.CONSUMIDOR_FINAL: DOC_SIN_IDENTIFICAR,
    CustomerType.EXENTO: DOC_CUIT,
}

# Alícuotas de IVA
AFIP_IVA_IDS: dict[IvaType, int] = {
    IvaType.IVA_10_5: 4,
    IvaType.IVA_21: 5,
    IvaType.IVA_27: 6,
    IvaType.IVA_2_5: 8,
    IvaType.IVA_5: 9,
}

CONCEPT_PRODUCTS = 1
TRIBUTE_IIBB_PERCEPTION = 7
AMOUNT_TOLERANCE = Decimal("0.01")


class AfipClient(Protocol):
    """Operations the injected AFIP client must provide."""

    async def get_last_voucher_number(self, point_of_sale: int, voucher_type: int) -> int: ...

    async def create_voucher(self, data: dict[str, Any]) -> dict[str, Any]: ...

    async def get_voucher_info(
        self, number: int, point_of_sale: int, voucher_type: int
    ) -> dict[str, Any] | None: ...

    async def get_voucher_types(self) -> list[dict[str, Any]]: ...

    async def get_server_status(self) -> dict[str, Any]: ...


def format_afip_date(value: date) -> int:
    """``date(2024, 3, 5)`` -> ``20240305``."""
    return int(value.strftime("%Y%m%d"))


def parse_afip_date(value) -> date | None:
    """Parse ``yyyymmdd`` or ISO dates returned by the client."""
    if value is None or isinstance(value, date):
        return value
    text = str(value)
    if len(text) == 8 and text.isdigit():
        return datetime.strptime(text, "%Y%m%d").date()
    return date.fromisoformat(text[:10])


def document_type_for_customer(customer_type: CustomerType | str) -> int:
    return AFIP_DOCUMENT_TYPES.get(CustomerType(customer_type), DOC_SIN_IDENTIFICAR)


def build_iva_array(items) -> list[dict[str, Any]]:
    """Group taxed lines by aliquot, adding bases and IVA amounts."""
    grouped: dict[int, list[Decimal]] = defaultdict(lambda: [Decimal("0"), Decimal("0")])

    for item in items:
        iva_type = IvaType(item.iva_type)
        if iva_type not in TAXED_IVA_TYPES:
            continue
        totals = grouped[AFIP_IVA_IDS[iva_type]]
        totals[0] += to_decimal(item.subtotal)
        totals[1] += to_decimal(item.iva_amount)

    return [
        {
            "Id": iva_id,
            "BaseImp": float(round_amount(base)),
            "Importe": float(round_amount(amount)),
        }
        for iva_id, (base, amount) in sorted(grouped.items())
    ]


def map_sale_to_afip(sale: Sale, next_number: int) -> dict[str, Any]:
    """Voucher payload for ``sale`` numbered ``next_number``."""
    customer = sale.customer
    doc_type = document_type_for_customer(customer.customer_type)
    doc_number = 0 if doc_type == DOC_SIN_IDENTIFICAR else clean_tax_id(customer.tax_id)

    data = {
        "CantReg": 1,
        "PtoVta": int(sale.point_of_sale),
        "CbteTipo": AFIP_VOUCHER_TYPES[sale.invoice_type],
        "Concepto": CONCEPT_PRODUCTS,
        "DocTipo": doc_type,
        "DocNro": doc_number,
        "CbteDesde": next_number,
        "CbteHasta": next_number,
        "CbteFch": format_afip_date(sale.sale_date),
        "ImpTotal": float(round_amount(sale.total)),
        "ImpTotConc": float(round_amount(sale.non_taxed_amount)),
        "ImpNeto": float(round_amount(sale.taxed_amount)),
        "ImpOpEx": float(round_amount(sale.exempt_amount)),
        "ImpIVA": float(round_amount(sale.tax_amount)),
        "ImpTrib": float(round_amount(sale.gross_income_perception)),
        "MonId": "PES",
        "MonCotiz": 1,
    }

    iva = build_iva_array(sale.items)
    if iva:
        data["Iva"] = iva

    perception = to_decimal(sale.gross_income_perception)
    if perception > 0:
        base = to_decimal(sale.taxed_amount)
        data["Tributos"] = [{
            "Id": TRIBUTE_IIBB_PERCEPTION,
            "Desc": "Percepción IIBB",
            "BaseImp": float(round_amount(base)),
            "Alic": float(round_amount(perception * 100 / base)) if base else 0.0,
            "Importe": float(round_amount(perception)),
        }]

    return data


def validate_sale_for_afip(sale: Sale) -> list[str]:
    """Problems that would make AFIP reject the voucher; empty when valid."""
    errors = []
    customer = sale.customer

    if customer is None or customer.customer_type is None:
        errors.append("Tipo de cliente requerido")
    elif customer.customer_type != CustomerType.CONSUMIDOR_FINAL:
        if not customer.tax_id:
            errors.append("CUIT/CUIL requerido para este tipo de cliente")
        elif not validate_cuit(customer.tax_id):
            errors.append("CUIT/CUIL del cliente inválido")

    total = to_decimal(sale.total)
    if total <= 0:
        errors.append("El total debe ser mayor a 0")

    breakdown = (
        to_decimal(sale.taxed_amount)
        + to_decimal(sale.non_taxed_amount)
        + to_decimal(sale.exempt_amount)
        + to_decimal(sale.tax_amount)
        + to_decimal(sale.gross_income_perception)
    )
    if abs(breakdown - total) > AMOUNT_TOLERANCE:
        errors.append("La suma de los importes no coincide con el total")

    point_of_sale = sale.point_of_sale or ""
    if not point_of_sale.isdigit() or not 0 < int(point_of_sale) < 100000:
        errors.append("Punto de venta inválido")

    if not sale.items:
        errors.append("La venta debe tener al menos un item")

    return errors


class AfipService:
    """Service issuing electronic vouchers for sales."""

    def __init__(self, db: AsyncSession, client: AfipClient):
        self.db = db
        self.client = client

    async def _get_sale(self, sale_id: int) -> Sale:
        result = await self.db.execute(
            select(Sale)
            .options(selectinload(Sale.items), selectinload(Sale.customer))
            .where(Sale.id == sale_id)
        )
        sale = result.scalar_one_or_none()
        if not sale:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Venta no encontrada",
            )
        return sale

    async def invoice_sale(self, sale_id: int) -> Sale:
        """
        Request a CAE for a white, confirmed sale and store it.

        Raises:
            HTTPException: 400 if the sale cannot be invoiced or AFIP fails
        """
        sale = await self._get_sale(sale_id)

        if not sale.is_white_invoice:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Solo se pueden facturar ventas en blanco",
            )
        if sale.auth_code:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="La venta ya tiene una factura electrónica",
            )
        if sale.status not in (SaleStatus.CONFIRMED, SaleStatus.DELIVERED):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Solo se pueden facturar ventas confirmadas",
            )

        errors = validate_sale_for_afip(sale)
        if errors:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail={"message": "Datos inválidos para AFIP", "errors": errors},
            )

        point_of_sale = int(sale.point_of_sale)
        voucher_type = AFIP_VOUCHER_TYPES[sale.invoice_type]

        try:
            last_number = await self.client.get_last_voucher_number(point_of_sale, voucher_type)
            next_number = int(last_number) + 1
            result = await self.client.create_voucher(map_sale_to_afip(sale, next_number))
            auth_code = str(result["CAE"])
            auth_code_expiry = parse_afip_date(result.get("CAEFchVto"))
        except Exception as exc:
            logger.error("Error de AFIP al facturar la venta %s", sale.sale_number, exc_info=True)
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Error al generar factura en AFIP: {exc}",
            ) from exc

        sale.invoice_number = next_number
        sale.full_number = full_invoice_number(sale.invoice_type, sale.point_of_sale, next_number)
        sale.auth_code = auth_code
        sale.auth_code_expiry = auth_code_expiry
        await self.db.flush()

        logger.info("Venta %s facturada: %s CAE %s", sale.sale_number, sale.full_number, auth_code)
        return sale

    async def voucher_status(self, sale_id: int) -> dict[str, Any]:
        """Invoice data of a sale and, when invoiced, AFIP's copy of it."""
        sale = await self._get_sale(sale_id)

        if not sale.auth_code:
            return {"sale_id": sale.id, "invoiced": False}

        voucher = await self.client.get_voucher_info(
            sale.invoice_number,
            int(sale.point_of_sale),
            AFIP_VOUCHER_TYPES[sale.invoice_type],
        )
        return {
            "sale_id": sale.id,
            "invoiced": True,
            "full_number": sale.full_number,
            "auth_code": sale.auth_code,
            "voucher": voucher,
        }

    async def server_status(self) -> dict[str, Any]:
        return await self.client.get_server_status()

    async def voucher_types(self) -> list[dict[str, Any]]:
        return await self.client.get_voucher_types()
