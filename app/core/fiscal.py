"""
Fiscal calculators for Argentine invoicing.

IVA rates, invoice type selection by customer category, line and bucket
amounts, CUIT/CUIL checksum and voucher numbering. Everything here is pure
and works on ``Decimal``; floats and ints are accepted and converted
through their string form.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, NamedTuple

from app.models.enums import CustomerType, InvoiceType, IvaType


CENT = Decimal("0.01")

IVA_RATES: dict[IvaType, Decimal] = {
    IvaType.IVA_21: Decimal("0.21"),
    IvaType.IVA_10_5: Decimal("0.105"),
    IvaType.IVA_27: Decimal("0.27"),
    IvaType.IVA_5: Decimal("0.05"),
    IvaType.IVA_2_5: Decimal("0.025"),
    IvaType.NO_GRAVADO: Decimal("0"),
    IvaType.EXENTO: Decimal("0"),
}

IVA_NAMES: dict[IvaType, str] = {
    IvaType.IVA_21: "IVA 21%",
    IvaType.IVA_10_5: "IVA 10.5%",
    IvaType.IVA_27: "IVA 27%",
    IvaType.IVA_5: "IVA 5%",
    IvaType.IVA_2_5: "IVA 2.5%",
    IvaType.NO_GRAVADO: "No Gravado",
    IvaType.EXENTO: "Exento",
}

TAXED_IVA_TYPES = frozenset({
    IvaType.IVA_21,
    IvaType.IVA_10_5,
    IvaType.IVA_27,
    IvaType.IVA_5,
    IvaType.IVA_2_5,
})

INVOICE_TYPE_BY_CUSTOMER: dict[CustomerType, InvoiceType] = {
    CustomerType.RESPONSABLE_INSCRIPTO: InvoiceType.FACTURA_A,
    CustomerType.MONOTRIBUTO: InvoiceType.FACTURA_B,
    CustomerType.CONSUMIDOR_FINAL: InvoiceType.FACTURA_B,
    CustomerType.EXENTO: InvoiceType.FACTURA_B,
}

CUIT_MULTIPLIERS = (5, 4, 3, 2, 7, 6, 5, 4, 3, 2)


class FiscalLine(NamedTuple):
    """Amounts of a single priced line."""
    subtotal: Decimal
    iva_type: IvaType
    iva_amount: Decimal
    total_amount: Decimal


class FiscalAmounts(NamedTuple):
    """Amounts split into the buckets AFIP expects."""
    taxed_amount: Decimal
    non_taxed_amount: Decimal
    exempt_amount: Decimal
    tax_amount: Decimal
    total: Decimal


def to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_amount(value) -> Decimal:
    """Round to cents, half up."""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def iva_rate(iva_type: IvaType | str) -> Decimal:
    return IVA_RATES[IvaType(iva_type)]


def calculate_iva(amount, iva_type: IvaType | str) -> Decimal:
    """IVA owed on ``amount``: ``calculate_iva(1000, "iva_21") == 210``."""
    return round_amount(to_decimal(amount) * iva_rate(iva_type))


def calculate_price_with_iva(base_price, iva_type: IvaType | str) -> Decimal:
    return to_decimal(base_price) + calculate_iva(base_price, iva_type)


def calculate_line(
    quantity,
    unit_price,
    iva_type: IvaType | str,
    discount_percent=0,
) -> FiscalLine:
    """
    Price one line.

    The discount percentage applies to ``quantity * unit_price`` before IVA.
    """
    gross = to_decimal(quantity) * to_decimal(unit_price)
    discount = gross * to_decimal(discount_percent or 0) / Decimal("100")
    subtotal = round_amount(gross - discount)
    iva_amount = calculate_iva(subtotal, iva_type)
    return FiscalLine(
        subtotal=subtotal,
        iva_type=IvaType(iva_type),
        iva_amount=iva_amount,
        total_amount=subtotal + iva_amount,
    )


def calculate_fiscal_amounts(items: Iterable) -> FiscalAmounts:
    """
    Split priced lines into taxed, non-taxed and exempt buckets.

    ``items`` are objects exposing ``subtotal``, ``iva_type`` and
    ``iva_amount`` (``FiscalLine`` or persisted line items). Each bucket is
    summed first and rounded afterwards; the total is the rounded sum of the
    rounded buckets.
    """
    taxed = Decimal("0")
    non_taxed = Decimal("0")
    exempt = Decimal("0")
    tax = Decimal("0")

    for item in items:
        iva_type = IvaType(item.iva_type)
        if iva_type in TAXED_IVA_TYPES:
            taxed += to_decimal(item.subtotal)
            tax += to_decimal(item.iva_amount)
        elif iva_type == IvaType.NO_GRAVADO:
            non_taxed += to_decimal(item.subtotal)
        elif iva_type == IvaType.EXENTO:
            exempt += to_decimal(item.subtotal)

    taxed = round_amount(taxed)
    non_taxed = round_amount(non_taxed)
    exempt = round_amount(exempt)
    tax = round_amount(tax)

    return FiscalAmounts(
        taxed_amount=taxed,
        non_taxed_amount=non_taxed,
        exempt_amount=exempt,
        tax_amount=tax,
        total=round_amount(taxed + non_taxed + exempt + tax),
    )


def invoice_type_for_customer(customer_type: CustomerType | str) -> InvoiceType:
    return INVOICE_TYPE_BY_CUSTOMER[CustomerType(customer_type)]


def credit_note_type_for_customer(customer_type: CustomerType | str) -> InvoiceType:
    if CustomerType(customer_type) == CustomerType.RESPONSABLE_INSCRIPTO:
        return InvoiceType.NOTA_CREDITO_A
    return InvoiceType.NOTA_CREDITO_B


def invoice_letter(invoice_type: InvoiceType | str) -> str:
    """``FACTURA_B`` -> ``B``, ``NOTA_CREDITO_A`` -> ``A``."""
    return InvoiceType(invoice_type).value.rsplit("_", 1)[1]


def full_invoice_number(
    invoice_type: InvoiceType | str,
    point_of_sale: str | int,
    invoice_number: int,
) -> str:
    """Printable voucher number, e.g. ``B-0001-00000123``."""
    pos = str(int(point_of_sale)).zfill(4)
    return f"{invoice_letter(invoice_type)}-{pos}-{str(invoice_number).zfill(8)}"


def _cuit_digits(value: str) -> str:
    return value.replace("-", "").replace(" ", "")


def validate_cuit(value: str | None) -> bool:
    """Check the CUIT/CUIL verification digit (modulo 11)."""
    if not value:
        return False

    clean = _cuit_digits(value)
    if len(clean) != 11 or not clean.isascii() or not clean.isdigit():
        return False

    digits = [int(c) for c in clean]
    total = sum(d * m for d, m in zip(digits, CUIT_MULTIPLIERS))

    check = 11 - (total % 11)
    if check == 11:
        check = 0
    elif check == 10:
        check = 9

    return check == digits[10]


def format_cuit(value: str) -> str:
    """Format as ``XX-XXXXXXXX-X`` when the value has 11 digits."""
    clean = _cuit_digits(value)
    if len(clean) == 11:
        return f"{clean[:2]}-{clean[2:10]}-{clean[10:]}"
    return value


def clean_tax_id(value: str | None) -> int:
    """Numeric document number for AFIP, 0 when empty."""
    if not value:
        return 0
    digits = "".join(c for c in value if c.isdigit())
    return int(digits) if digits else 0


def price_from_cost(cost_usd, markup_percentage, usd_to_ars_rate) -> Decimal:
    """ARS price (before IVA) from a USD cost, an exchange rate and a markup."""
    markup = Decimal("1") + to_decimal(markup_percentage) / Decimal("100")
    return round_amount(to_decimal(cost_usd) * to_decimal(usd_to_ars_rate) * markup)
