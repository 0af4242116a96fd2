"""
AFIP invoicing tests, run against an in-memory client.
"""

from datetime import date
from decimal import Decimal
import pytest
from httpx import AsyncClient

from app.core.config import settings
from app.main import app
from app.models.customer import Customer
from app.models.enums import CustomerType, InvoiceType, IvaType
from app.models.sale import Sale, SaleItem
from app.services.afip import (
    build_iva_array,
    format_afip_date,
    map_sale_to_afip,
    parse_afip_date,
    validate_sale_for_afip,
)


class FakeAfipClient:
    def __init__(self, last_number: int = 41, fail: bool = False):
        self.last_number = last_number
        self.fail = fail
        self.vouchers: list[dict] = []

    async def get_last_voucher_number(self, point_of_sale, voucher_type):
        return self.last_number

    async def create_voucher(self, data):
        if self.fail:
            raise RuntimeError("10016: El numero o fecha del comprobante no se corresponde")
        self.vouchers.append(data)
        self.last_number = data["CbteDesde"]
        return {"CAE": "74123456789012", "CAEFchVto": "20261027"}

    async def get_voucher_info(self, number, point_of_sale, voucher_type):
        for voucher in self.vouchers:
            if voucher["CbteDesde"] == number:
                return {"CbteDesde": number, "ImpTotal": voucher["ImpTotal"]}
        return None

    async def get_voucher_types(self):
        return [{"Id": 1, "Desc": "Factura A"}, {"Id": 6, "Desc": "Factura B"}]

    async def get_server_status(self):
        return {"AppServer": "OK", "DbServer": "OK", "AuthServer": "OK"}


@pytest.fixture
def afip() -> FakeAfipClient:
    client = FakeAfipClient()
    app.state.afip_client = client
    return client


async def create_sale(client: AsyncClient, customer_id: int, product_id: int, **kwargs) -> int:
    response = await client.post(
        "/api/v1/sales",
        json={"customer_id": customer_id, "items": [{"product_id": product_id, "quantity": 1}], **kwargs},
    )
    assert response.status_code == 201
    return response.json()["id"]


class Line:
    def __init__(self, iva_type, subtotal, iva_amount):
        self.iva_type = iva_type
        self.subtotal = Decimal(subtotal)
        self.iva_amount = Decimal(iva_amount)


def test_iva_array_groups_by_aliquot():
    lines = [
        Line(IvaType.IVA_21, "1000", "210"),
        Line(IvaType.IVA_21, "500", "105"),
        Line(IvaType.IVA_10_5, "200", "21"),
        Line(IvaType.EXENTO, "30", "0"),
    ]

    assert build_iva_array(lines) == [
        {"Id": 4, "BaseImp": 200.0, "Importe": 21.0},
        {"Id": 5, "BaseImp": 1500.0, "Importe": 315.0},
    ]


def test_afip_dates():
    assert format_afip_date(date(2026, 3, 5)) == 20260305
    assert parse_afip_date("20261027") == date(2026, 10, 27)
    assert parse_afip_date("2026-10-27") == date(2026, 10, 27)
    assert parse_afip_date(None) is None


@pytest.mark.asyncio
async def test_afip_not_configured(auth_client: AsyncClient, customer_id, product_id):
    sale_id = await create_sale(auth_client, customer_id, product_id)

    response = await auth_client.post(f"/api/v1/afip/sales/{sale_id}/invoice")

    assert response.status_code == 503


@pytest.mark.asyncio
async def test_invoice_sale(auth_client: AsyncClient, afip, ri_customer_id, product_id):
    sale_id = await create_sale(auth_client, ri_customer_id, product_id, point_of_sale="2")

    response = await auth_client.post(f"/api/v1/afip/sales/{sale_id}/invoice")

    assert response.status_code == 200
    data = response.json()
    assert data["invoice_number"] == 42
    assert data["full_number"] == "A-0002-00000042"
    assert data["auth_code"] == "74123456789012"
    assert data["auth_code_expiry"] == "2026-10-27"

    voucher = afip.vouchers[0]
    assert voucher["CbteTipo"] == 1
    assert voucher["PtoVta"] == 2
    assert voucher["DocTipo"] == 80
    assert voucher["DocNro"] == 30712345671
    assert voucher["ImpTotal"] == 1210.0
    assert voucher["Iva"] == [{"Id": 5, "BaseImp": 1000.0, "Importe": 210.0}]

    sale = (await auth_client.get(f"/api/v1/sales/{sale_id}")).json()
    assert sale["is_invoiced"] is True

    response = await auth_client.get(f"/api/v1/afip/sales/{sale_id}/status")
    assert response.json()["voucher"] == {"CbteDesde": 42, "ImpTotal": 1210.0}

    # Invoiced sales are not invoiced twice nor cancelled
    response = await auth_client.post(f"/api/v1/afip/sales/{sale_id}/invoice")
    assert response.status_code == 400
    response = await auth_client.post(f"/api/v1/sales/{sale_id}/cancel")
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_consumidor_final_is_unidentified(auth_client: AsyncClient, afip, customer_id, product_id):
    sale_id = await create_sale(auth_client, customer_id, product_id)

    response = await auth_client.post(f"/api/v1/afip/sales/{sale_id}/invoice")

    assert response.status_code == 200
    assert response.json()["full_number"] == "B-0001-00000042"
    assert afip.vouchers[0]["CbteTipo"] == 6
    assert afip.vouchers[0]["DocTipo"] == 99
    assert afip.vouchers[0]["DocNro"] == 0


@pytest.mark.asyncio
async def test_only_white_confirmed_sales(auth_client: AsyncClient, afip, customer_id, product_id):
    draft_id = await create_sale(auth_client, customer_id, product_id, status="draft")
    black_id = await create_sale(auth_client, customer_id, product_id, is_white_invoice=False)

    response = await auth_client.post(f"/api/v1/afip/sales/{draft_id}/invoice")
    assert response.status_code == 400

    response = await auth_client.post(f"/api/v1/afip/sales/{black_id}/invoice")
    assert response.status_code == 400
    assert afip.vouchers == []


@pytest.mark.asyncio
async def test_afip_error_leaves_sale_uninvoiced(auth_client: AsyncClient, customer_id, product_id):
    app.state.afip_client = FakeAfipClient(fail=True)
    sale_id = await create_sale(auth_client, customer_id, product_id)

    response = await auth_client.post(f"/api/v1/afip/sales/{sale_id}/invoice")

    assert response.status_code == 400
    assert "10016" in response.json()["detail"]
    sale = (await auth_client.get(f"/api/v1/sales/{sale_id}")).json()
    assert sale["is_invoiced"] is False


@pytest.mark.asyncio
async def test_auto_invoice_on_confirmation(auth_client: AsyncClient, afip, monkeypatch, customer_id, product_id):
    monkeypatch.setattr(settings, "AFIP_AUTO_INVOICE", True)

    sale_id = await create_sale(auth_client, customer_id, product_id)

    sale = (await auth_client.get(f"/api/v1/sales/{sale_id}")).json()
    assert sale["is_invoiced"] is True
    assert len(afip.vouchers) == 1


@pytest.mark.asyncio
async def test_server_status_and_voucher_types(auth_client: AsyncClient, afip):
    response = await auth_client.get("/api/v1/afip/server-status")
    assert response.json()["AppServer"] == "OK"

    response = await auth_client.get("/api/v1/afip/voucher-types")
    assert {"Id": 6, "Desc": "Factura B"} in response.json()


def make_sale(customer: Customer | None = None, **kwargs) -> Sale:
    """Unsaved Factura A sale of one 1000 + IVA 21% line."""
    if customer is None:
        customer = Customer(
            business_name="Ferretería del Sur SRL",
            tax_id="30-71234567-1",
            customer_type=CustomerType.RESPONSABLE_INSCRIPTO,
        )
    values = {
        "sale_number": "V-00000001",
        "customer": customer,
        "invoice_type": InvoiceType.FACTURA_A,
        "point_of_sale": "0001",
        "sale_date": date(2026, 10, 17),
        "taxed_amount": Decimal("1000.00"),
        "non_taxed_amount": Decimal("0.00"),
        "exempt_amount": Decimal("0.00"),
        "tax_amount": Decimal("210.00"),
        "gross_income_perception": Decimal("0.00"),
        "total": Decimal("1210.00"),
        "items": [
            SaleItem(
                description="Taladro percutor",
                quantity=1,
                unit_price=Decimal("1000.00"),
                discount=Decimal("0.00"),
                iva_type=IvaType.IVA_21,
                subtotal=Decimal("1000.00"),
                iva_amount=Decimal("210.00"),
                total_amount=Decimal("1210.00"),
            ),
        ],
    }
    values.update(kwargs)
    return Sale(**values)


def test_valid_sale_has_no_errors():
    assert validate_sale_for_afip(make_sale()) == []


def test_consumidor_final_needs_no_cuit():
    customer = Customer(business_name="Juan Pérez", customer_type=CustomerType.CONSUMIDOR_FINAL)
    assert validate_sale_for_afip(make_sale(customer, invoice_type=InvoiceType.FACTURA_B)) == []


@pytest.mark.parametrize(
    "tax_id, error",
    [
        (None, "CUIT/CUIL requerido para este tipo de cliente"),
        ("30-71234567-2", "CUIT/CUIL del cliente inválido"),
    ],
)
def test_cuit_required_for_registered_customers(tax_id, error):
    customer = Customer(
        business_name="Monotributista",
        tax_id=tax_id,
        customer_type=CustomerType.MONOTRIBUTO,
    )
    assert validate_sale_for_afip(make_sale(customer)) == [error]


def test_amounts_must_add_up_to_total():
    errors = validate_sale_for_afip(make_sale(total=Decimal("1250.00")))
    assert errors == ["La suma de los importes no coincide con el total"]

    # The perception is part of the total
    sale = make_sale(gross_income_perception=Decimal("40.00"), total=Decimal("1250.00"))
    assert validate_sale_for_afip(sale) == []


def test_empty_sale_errors():
    sale = make_sale(
        taxed_amount=Decimal("0.00"),
        tax_amount=Decimal("0.00"),
        total=Decimal("0.00"),
        items=[],
    )
    assert validate_sale_for_afip(sale) == [
        "El total debe ser mayor a 0",
        "La venta debe tener al menos un item",
    ]


@pytest.mark.parametrize("point_of_sale", ["", "abc", "0", "100000"])
def test_invalid_point_of_sale(point_of_sale):
    errors = validate_sale_for_afip(make_sale(point_of_sale=point_of_sale))
    assert errors == ["Punto de venta inválido"]


def test_map_sale_without_perception():
    data = map_sale_to_afip(make_sale(), 15)

    assert data["CbteDesde"] == data["CbteHasta"] == 15
    assert data["CbteFch"] == 20261017
    assert data["ImpTrib"] == 0.0
    assert data["MonId"] == "PES"
    assert "Tributos" not in data


def test_map_sale_with_perception():
    sale = make_sale(gross_income_perception=Decimal("30.00"), total=Decimal("1240.00"))

    data = map_sale_to_afip(sale, 1)

    assert data["ImpTotal"] == 1240.0
    assert data["ImpNeto"] == 1000.0
    assert data["ImpIVA"] == 210.0
    assert data["ImpTrib"] == 30.0
    assert data["Tributos"] == [{
        "Id": 7,
        "Desc": "Percepción IIBB",
        "BaseImp": 1000.0,
        "Alic": 3.0,
        "Importe": 30.0,
    }]


@pytest.mark.asyncio
async def test_invalid_sale_returns_error_list(auth_client: AsyncClient, afip, db_session, product_id):
    customer = Customer(
        business_name="Sin CUIT SA",
        customer_type=CustomerType.RESPONSABLE_INSCRIPTO,
    )
    db_session.add(customer)
    await db_session.commit()
    sale_id = await create_sale(auth_client, customer.id, product_id)

    response = await auth_client.post(f"/api/v1/afip/sales/{sale_id}/invoice")

    assert response.status_code == 400
    assert response.json()["detail"] == {
        "message": "Datos inválidos para AFIP",
        "errors": ["CUIT/CUIL requerido para este tipo de cliente"],
    }
    assert afip.vouchers == []
