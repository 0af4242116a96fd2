"""
Fiscal calculator tests.
"""

from decimal import Decimal
import pytest

from app.core.fiscal import (
    calculate_fiscal_amounts,
    calculate_iva,
    calculate_line,
    calculate_price_with_iva,
    credit_note_type_for_customer,
    format_cuit,
    full_invoice_number,
    invoice_type_for_customer,
    price_from_cost,
    validate_cuit,
)
from app.models.enums import CustomerType, InvoiceType, IvaType


@pytest.mark.parametrize(
    "iva_type, expected",
    [
        ("iva_21", Decimal("210.00")),
        ("iva_10_5", Decimal("105.00")),
        ("iva_27", Decimal("270.00")),
        ("no_gravado", Decimal("0.00")),
        ("exento", Decimal("0.00")),
    ],
)
def test_calculate_iva(iva_type, expected):
    assert calculate_iva(1000, iva_type) == expected


def test_price_with_iva():
    assert calculate_price_with_iva(Decimal("100"), IvaType.IVA_21) == Decimal("121.00")


def test_iva_rounds_half_up():
    # 0.105 * 0.5 = 0.0525
    assert calculate_iva(Decimal("0.50"), IvaType.IVA_10_5) == Decimal("0.05")


def test_line_applies_discount_before_iva():
    line = calculate_line(2, Decimal("500"), IvaType.IVA_21, Decimal("10"))
    assert line.subtotal == Decimal("900.00")
    assert line.iva_amount == Decimal("189.00")
    assert line.total_amount == Decimal("1089.00")


def test_fiscal_amounts_split_buckets():
    lines = [
        calculate_line(1, 1000, IvaType.IVA_21),
        calculate_line(1, 200, IvaType.IVA_10_5),
        calculate_line(1, 50, IvaType.NO_GRAVADO),
        calculate_line(1, 30, IvaType.EXENTO),
    ]
    amounts = calculate_fiscal_amounts(lines)

    assert amounts.taxed_amount == Decimal("1200.00")
    assert amounts.tax_amount == Decimal("231.00")
    assert amounts.non_taxed_amount == Decimal("50.00")
    assert amounts.exempt_amount == Decimal("30.00")
    assert amounts.total == Decimal("1511.00")


def test_fiscal_amounts_empty():
    amounts = calculate_fiscal_amounts([])
    assert amounts.total == Decimal("0.00")


@pytest.mark.parametrize(
    "customer_type, invoice_type",
    [
        (CustomerType.RESPONSABLE_INSCRIPTO, InvoiceType.FACTURA_A),
        (CustomerType.MONOTRIBUTO, InvoiceType.FACTURA_B),
        (CustomerType.CONSUMIDOR_FINAL, InvoiceType.FACTURA_B),
        (CustomerType.EXENTO, InvoiceType.FACTURA_B),
    ],
)
def test_invoice_type_for_customer(customer_type, invoice_type):
    assert invoice_type_for_customer(customer_type) == invoice_type


def test_credit_note_type_for_customer():
    assert credit_note_type_for_customer("responsable_inscripto") == InvoiceType.NOTA_CREDITO_A
    assert credit_note_type_for_customer("consumidor_final") == InvoiceType.NOTA_CREDITO_B


@pytest.mark.parametrize(
    "value, valid",
    [
        ("20-12345678-6", True),
        ("20123456786", True),
        ("30-71234567-1", True),
        ("20-12345678-5", False),
        ("20-1234567-6", False),
        ("", False),
        (None, False),
        ("2O-12345678-6", False),
    ],
)
def test_validate_cuit(value, valid):
    assert validate_cuit(value) is valid


def test_format_cuit():
    assert format_cuit("20123456786") == "20-12345678-6"
    assert format_cuit("123") == "123"


def test_full_invoice_number():
    assert full_invoice_number(InvoiceType.FACTURA_B, "1", 123) == "B-0001-00000123"
    assert full_invoice_number(InvoiceType.NOTA_CREDITO_A, 2, 7) == "A-0002-00000007"


def test_price_from_cost():
    # 10 USD * 1000 ARS * 1.30
    assert price_from_cost(Decimal("10"), Decimal("30"), Decimal("1000")) == Decimal("13000.00")
